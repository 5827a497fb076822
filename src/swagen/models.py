"""Canonical Pydantic models shared across all swagen modules.

The models fall into three groups:

**Configuration models** -- one entry per profile in ``swagen.config.json``
or ``swagen.config.py``:
    :class:`DebugOptions` and :class:`Profile`.

**Definition models** -- the generator-agnostic output of the normalizer,
consumed by generator plugins:
    :class:`TypeRef`, :class:`Parameter`, :class:`Response`,
    :class:`Operation`, :class:`Service`, :class:`Property`, :class:`Model`,
    :class:`DefinitionInfo`, and :class:`Definition`.

**Run results** -- produced by the orchestrator:
    :class:`ProfileStatus`, :class:`ProfileOutcome`, and :class:`RunSummary`.

Definition models are frozen: a definition is passed by reference from the
normalizer to the debug dump and the generator, and nothing may change it on
the way.
"""

from __future__ import annotations

import enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


# --- Profile ---


class DebugOptions(BaseModel):
    """Diagnostic switches for a single profile.

    Unknown keys are preserved in ``model_extra`` so generators may define
    their own debug flags.
    """

    model_config = ConfigDict(extra="allow")

    definition: Optional[str] = Field(
        default=None,
        description="Path where the normalized definition is dumped as indented JSON",
    )


class Profile(BaseModel):
    """One named unit of configuration: one document, one generator, one output.

    Built by :func:`~swagen.validator.validate_profile`, which checks the
    required fields and reserved generator names before constructing the
    model. Extra keys are kept so generator plugins can read their own
    settings off the profile.

    Example::

        Profile(
            file="petstore.json",
            output="src/api/petstore.ts",
            generator="typescript",
            options={"baseUrl": "https://petstore.example.com/v2"},
        )
    """

    model_config = ConfigDict(extra="allow")

    file: Optional[str] = Field(default=None, description="Local document path")
    url: Optional[str] = Field(default=None, description="Remote document URL")
    output: str = Field(description="Artifact path, relative to the working directory")
    generator: str = Field(description="Generator short name or module path")
    skip: bool = False
    debug: DebugOptions = Field(default_factory=DebugOptions)
    transforms: dict[str, Any] = Field(default_factory=dict)
    options: dict[str, Any] = Field(default_factory=dict)

    @property
    def source(self) -> str:
        """The effective input location; ``file`` takes precedence over ``url``."""
        return self.file or self.url or ""


# --- Definition ---


class TypeRef(BaseModel):
    """A reference to a data type used by a parameter, property or response.

    Exactly one of ``primitive`` and ``ref`` is meaningful: ``ref`` names a
    :class:`Model` in the same definition, otherwise ``primitive`` holds a
    JSON Schema type (``string``, ``integer``, ``number``, ``boolean``,
    ``object``, ``file`` or ``any``).
    """

    model_config = ConfigDict(frozen=True)

    primitive: str = "any"
    ref: Optional[str] = None
    is_array: bool = False
    format: Optional[str] = None
    enum: Optional[list[Any]] = None


class Parameter(BaseModel):
    """An operation parameter; ``location`` follows the document's ``in`` value."""

    model_config = ConfigDict(frozen=True)

    name: str
    location: str
    required: bool = False
    type: TypeRef = Field(default_factory=TypeRef)
    description: Optional[str] = None


class Response(BaseModel):
    """One declared response of an operation."""

    model_config = ConfigDict(frozen=True)

    status: str
    description: Optional[str] = None
    type: Optional[TypeRef] = None


class Operation(BaseModel):
    """A single path + HTTP method pair.

    ``name`` is the identifier generators should use for the method; it is
    derived from ``operationId`` when present, otherwise from the method and
    path.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    method: str
    path: str
    operation_id: Optional[str] = None
    summary: Optional[str] = None
    description: Optional[str] = None
    parameters: list[Parameter] = Field(default_factory=list)
    body: Optional[TypeRef] = None
    responses: list[Response] = Field(default_factory=list)
    deprecated: bool = False


class Service(BaseModel):
    """A resource grouping operations, named after its first tag or path segment."""

    model_config = ConfigDict(frozen=True)

    name: str
    operations: list[Operation] = Field(default_factory=list)


class Property(BaseModel):
    """A named field of a :class:`Model`."""

    model_config = ConfigDict(frozen=True)

    name: str
    type: TypeRef = Field(default_factory=TypeRef)
    required: bool = False
    description: Optional[str] = None


class Model(BaseModel):
    """A named schema from ``definitions`` or ``components.schemas``.

    Enum-only schemas have an empty ``properties`` list and a non-empty
    ``enum``.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    description: Optional[str] = None
    properties: list[Property] = Field(default_factory=list)
    enum: Optional[list[Any]] = None


class DefinitionInfo(BaseModel):
    """API metadata taken from the document's *Info Object*."""

    model_config = ConfigDict(frozen=True)

    title: str = "API"
    version: str = ""
    description: Optional[str] = None


class Definition(BaseModel):
    """Normalized, generator-agnostic representation of an API description.

    Produced by :func:`~swagen.parser.normalizer.normalize` from either a
    Swagger 2.0 or an OpenAPI 3.x document. Services and models keep the
    order in which they first appear in the document, which makes generated
    output stable across runs.
    """

    model_config = ConfigDict(frozen=True)

    info: DefinitionInfo = Field(default_factory=DefinitionInfo)
    spec_version: str
    base_url: Optional[str] = None
    services: list[Service] = Field(default_factory=list)
    models: list[Model] = Field(default_factory=list)

    def model(self, name: str) -> Optional[Model]:
        """Return the model called *name*, or ``None``."""
        for model in self.models:
            if model.name == name:
                return model
        return None


# --- Run results ---


class ProfileStatus(str, enum.Enum):
    """Terminal state of one profile after an orchestration pass."""

    DONE = "done"
    SKIPPED = "skipped"
    FAILED = "failed"


class ProfileOutcome(BaseModel):
    """What happened to a single profile."""

    key: str
    status: ProfileStatus
    output_path: Optional[str] = None
    error_kind: Optional[str] = None
    error: Optional[str] = None


class RunSummary(BaseModel):
    """Aggregate result of processing every profile in a configuration."""

    outcomes: list[ProfileOutcome] = Field(default_factory=list)

    def _with(self, status: ProfileStatus) -> list[ProfileOutcome]:
        return [o for o in self.outcomes if o.status == status]

    @property
    def succeeded(self) -> list[ProfileOutcome]:
        return self._with(ProfileStatus.DONE)

    @property
    def failed(self) -> list[ProfileOutcome]:
        return self._with(ProfileStatus.FAILED)

    @property
    def skipped(self) -> list[ProfileOutcome]:
        return self._with(ProfileStatus.SKIPPED)

    @property
    def ok(self) -> bool:
        """True when no profile failed."""
        return not self.failed

    def outcome(self, key: str) -> Optional[ProfileOutcome]:
        for o in self.outcomes:
            if o.key == key:
                return o
        return None
