"""Exception hierarchy for swagen.

All exceptions inherit from :class:`SwagenError`, which carries a ``kind``
discriminator (an :class:`ErrorKind`), an optional ``profile_key`` naming the
profile that failed, and an ``exit_code`` mapped to a constant from
:mod:`swagen.exit_codes`.

Profile-scoped errors are caught by the orchestrator at the profile boundary
and logged with the profile key, so sibling profiles keep running. Only
:class:`DiscoveryError` is fatal to the whole invocation.

Subclass hierarchy::

    SwagenError                  (exit 1)
    +-- ConfigurationError       bad or missing profile fields
    +-- SourceError              file/network read failure
    +-- DocumentSyntaxError      malformed document text
    +-- NormalizationError       document could not be normalized
    +-- GeneratorResolutionError plugin not found or not loadable
    +-- GeneratorValidationError plugin rejected the profile
    +-- GenerationError          plugin failed while generating
    +-- ArtifactWriteError       output or debug file could not be written
    +-- DiscoveryError           no configuration file (exit 3)
"""

from __future__ import annotations

import enum
from typing import Optional

from swagen.exit_codes import EXIT_CONFIG_NOT_FOUND, EXIT_GENERIC_FAILURE


class ErrorKind(str, enum.Enum):
    """Discriminator carried by every :class:`SwagenError`."""

    CONFIGURATION = "configuration"
    SOURCE = "source"
    DOCUMENT_SYNTAX = "document-syntax"
    NORMALIZATION = "normalization"
    GENERATOR_RESOLUTION = "generator-resolution"
    GENERATOR_VALIDATION = "generator-validation"
    GENERATION = "generation"
    ARTIFACT_WRITE = "artifact-write"
    DISCOVERY = "discovery"


class SourceFailure(str, enum.Enum):
    """Why a document source could not be read."""

    MISSING = "missing"
    UNREADABLE = "unreadable"
    NETWORK = "network"


class SwagenError(Exception):
    """Base exception for all swagen errors.

    Args:
        message: Human-readable error description.
        profile_key: Name of the profile the error belongs to, if any.
        exit_code: Optional override for the class-level exit code.
    """

    kind: ErrorKind = ErrorKind.CONFIGURATION
    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(
        self,
        message: str,
        profile_key: Optional[str] = None,
        exit_code: int | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.profile_key = profile_key
        if exit_code is not None:
            self.exit_code = exit_code

    def __str__(self) -> str:
        if self.profile_key is not None:
            return f"[{self.profile_key}] {self.message}"
        return self.message


class ConfigurationError(SwagenError):
    """Raised when a profile is missing required fields or uses a reserved generator name."""

    kind = ErrorKind.CONFIGURATION


class SourceError(SwagenError):
    """Raised when a document file or URL cannot be read.

    Args:
        message: Human-readable error description.
        reason: Whether the document is missing or the read itself failed.
        location: The file path or URL that was being read.
        profile_key: Name of the profile being processed.
    """

    kind = ErrorKind.SOURCE

    def __init__(
        self,
        message: str,
        reason: SourceFailure,
        location: str,
        profile_key: Optional[str] = None,
    ):
        super().__init__(message, profile_key=profile_key)
        self.reason = reason
        self.location = location


class DocumentSyntaxError(SwagenError):
    """Raised when document text is not valid JSON (or YAML).

    ``line`` and ``column`` are 1-based and ``None`` when the parser did not
    report a position.
    """

    kind = ErrorKind.DOCUMENT_SYNTAX

    def __init__(
        self,
        message: str,
        line: Optional[int] = None,
        column: Optional[int] = None,
        detail: Optional[str] = None,
        profile_key: Optional[str] = None,
    ):
        super().__init__(message, profile_key=profile_key)
        self.line = line
        self.column = column
        self.detail = detail


class NormalizationError(SwagenError):
    """Raised when a parsed document cannot be turned into a definition."""

    kind = ErrorKind.NORMALIZATION


class GeneratorResolutionError(SwagenError):
    """Raised when a generator plugin cannot be located or imported."""

    kind = ErrorKind.GENERATOR_RESOLUTION


class GeneratorValidationError(SwagenError):
    """Raised when a generator's ``validate_profile`` hook rejects a profile."""

    kind = ErrorKind.GENERATOR_VALIDATION


class GenerationError(SwagenError):
    """Raised when a generator fails or returns something other than text."""

    kind = ErrorKind.GENERATION


class ArtifactWriteError(SwagenError):
    """Raised when the generated artifact or a debug dump cannot be written."""

    kind = ErrorKind.ARTIFACT_WRITE


class DiscoveryError(SwagenError):
    """Raised when no configuration file can be found or loaded.

    This is the only invocation-fatal error. ``remediation`` holds the
    follow-up guidance shown to the user.
    """

    kind = ErrorKind.DISCOVERY
    exit_code = EXIT_CONFIG_NOT_FOUND

    def __init__(self, message: str, remediation: Optional[str] = None):
        super().__init__(message)
        self.remediation = remediation
