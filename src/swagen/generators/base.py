"""Generator plugin interface and the invocation contract.

A generator turns a :class:`~swagen.models.Definition` into the text of one
artifact. Plugins are usually plain modules exposing two functions::

    def validate_profile(profile):   # optional
        if "namespace" not in profile.options:
            raise ValueError("options.namespace is required")

    def generate(definition, profile):
        return "..."

:class:`ModuleGenerator` adapts such a module to the :class:`Generator`
interface; packages may also subclass :class:`Generator` directly and expose
an instance. :func:`invoke_generator` runs the two steps in order and turns
plugin exceptions into profile-scoped swagen errors.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from types import ModuleType
from typing import Any, Callable, Optional

from swagen.exceptions import GenerationError, GeneratorValidationError
from swagen.models import Definition, Profile


class Generator(ABC):
    """Base class for generator plugins.

    Subclasses must implement :meth:`generate`. :meth:`validate_profile`
    defaults to accepting every profile.
    """

    name: str = ""

    def validate_profile(self, profile: Profile) -> None:
        """Reject *profile* by raising; the default accepts everything.

        Called before :meth:`generate`, after the definition is built.
        """

    @abstractmethod
    def generate(self, definition: Definition, profile: Profile) -> str:
        """Return the artifact text for *definition*.

        The returned string is written to ``profile.output`` verbatim.
        """
        ...


class ModuleGenerator(Generator):
    """Adapts a module exposing ``generate`` and optionally ``validate_profile``.

    ``validateProfile`` is accepted as an alias of the validation hook.
    """

    def __init__(self, module: ModuleType | Any, name: str = "") -> None:
        self.module = module
        self.name = name or getattr(module, "__name__", "")
        self._generate: Callable[[Definition, Profile], Any] = module.generate
        self._validate: Optional[Callable[[Profile], Any]] = None
        hook = getattr(module, "validate_profile", None)
        if hook is None:
            hook = getattr(module, "validateProfile", None)
        if callable(hook):
            self._validate = hook

    def validate_profile(self, profile: Profile) -> None:
        if self._validate is not None:
            self._validate(profile)

    def generate(self, definition: Definition, profile: Profile) -> str:
        return self._generate(definition, profile)


def invoke_generator(
    key: str, generator: Generator, definition: Definition, profile: Profile
) -> str:
    """Run *generator* for one profile.

    Args:
        key: Profile name attached to any error.
        generator: The resolved generator.
        definition: The normalized definition.
        profile: The validated profile.

    Returns:
        The artifact text.

    Raises:
        GeneratorValidationError: If ``validate_profile`` raised; ``generate``
            is then not called.
        GenerationError: If ``generate`` raised or returned something other
            than a string.
    """
    try:
        generator.validate_profile(profile)
    except Exception as exc:
        raise GeneratorValidationError(
            f"Generator '{generator.name}' rejected the profile: {exc}", profile_key=key
        ) from exc

    try:
        output = generator.generate(definition, profile)
    except Exception as exc:
        raise GenerationError(
            f"Generator '{generator.name}' failed: {type(exc).__name__}: {exc}",
            profile_key=key,
        ) from exc

    if not isinstance(output, str):
        raise GenerationError(
            f"Generator '{generator.name}' returned {type(output).__name__}, expected text.",
            profile_key=key,
        )
    return output
