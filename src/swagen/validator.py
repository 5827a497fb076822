"""Structural validation of a single profile.

:func:`validate_profile` is the first step of every profile's pipeline and
runs before any file or network access, so malformed profiles fail fast.
It checks only what the orchestrator needs (an input source, an output
path, a usable generator name); generator-specific checks belong to the
generator's own ``validate_profile`` hook.
"""

from __future__ import annotations

import re
from typing import Any

from pydantic import ValidationError

from swagen.exceptions import ConfigurationError
from swagen.models import Profile

RESERVED_GENERATOR_NAME = "core"
"""Generator name reserved for the shared core package."""

_LANGUAGE_HELPER_RE = re.compile(r"^[\w\-]+-language$", re.IGNORECASE)
"""Names ending in ``-language`` are reserved for language helper packages."""

_DEFAULTED_MAPPINGS = ("debug", "transforms", "options")


def validate_profile(key: str, data: Any) -> Profile:
    """Validate the raw profile *data* stored under *key* and build a :class:`Profile`.

    The checks run in a fixed order and stop at the first failure:

    1. ``file`` or ``url`` must be set.
    2. ``output`` must be set.
    3. ``generator`` must be set.
    4. ``generator`` must not be ``core`` (any case).
    5. ``generator`` must not end in ``-language`` (any case).

    On success, ``debug``, ``transforms`` and ``options`` are added to *data*
    as empty mappings when absent, so the caller's configuration reflects the
    defaults that were applied.

    Args:
        key: Profile name, used in error messages.
        data: The raw profile mapping from the configuration file.

    Returns:
        The validated profile.

    Raises:
        ConfigurationError: If any check fails or a field has the wrong type.
    """
    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Profile must be a mapping, got {type(data).__name__}.", profile_key=key
        )
    if not data.get("file") and not data.get("url"):
        raise ConfigurationError(
            "Must specify a file or url in the configuration.", profile_key=key
        )
    if not data.get("output"):
        raise ConfigurationError(
            "Must specify an output file path in the configuration.", profile_key=key
        )
    generator = data.get("generator")
    if not generator:
        raise ConfigurationError(
            "Must specify a generator in the configuration.", profile_key=key
        )
    if not isinstance(generator, str):
        raise ConfigurationError(
            f"Generator must be a string, got {type(generator).__name__}.",
            profile_key=key,
        )
    if generator.lower() == RESERVED_GENERATOR_NAME:
        raise ConfigurationError(
            f"Invalid generator {generator}. This name is reserved.", profile_key=key
        )
    if _LANGUAGE_HELPER_RE.match(generator):
        raise ConfigurationError(
            f"Invalid generator {generator}. The -language suffix is reserved "
            "for language helper packages.",
            profile_key=key,
        )

    for field in _DEFAULTED_MAPPINGS:
        if data.get(field) is None:
            data[field] = {}

    try:
        return Profile.model_validate(data)
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}"
            for err in exc.errors()
        )
        raise ConfigurationError(f"Invalid profile: {problems}", profile_key=key) from exc
