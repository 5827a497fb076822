"""Helpers for internal ``$ref`` JSON Reference pointers.

The normalizer keeps references to named schemas as model names rather than
inlining them, so only two operations are needed: reading the model name off
a ``#/definitions/Pet`` or ``#/components/schemas/Pet`` pointer, and
following a pointer to its target (for shared parameters, responses and
request bodies).

Only internal references (``#/...``) are supported.
"""

from __future__ import annotations

from typing import Any

from swagen.exceptions import NormalizationError

_MODEL_PREFIXES = ("#/definitions/", "#/components/schemas/")


def ref_name(ref: str) -> str:
    """Return the model name a schema ``$ref`` points at.

    Example::

        >>> ref_name("#/components/schemas/Pet")
        'Pet'
    """
    for prefix in _MODEL_PREFIXES:
        if ref.startswith(prefix):
            return _unescape(ref[len(prefix):])
    return _unescape(ref.rsplit("/", 1)[-1])


def resolve_pointer(ref: str, root: dict[str, Any]) -> Any:
    """Follow the JSON Pointer *ref* inside *root*.

    Handles RFC 6901 escaping (``~0`` for ``~``, ``~1`` for ``/``).

    Raises:
        NormalizationError: If the reference is external or any segment does
            not exist in the document.
    """
    if not ref.startswith("#/"):
        raise NormalizationError(
            f"External $ref not supported: {ref}. "
            "Only internal references (#/...) are handled."
        )

    current: Any = root
    for segment in ref[2:].split("/"):
        segment = _unescape(segment)
        if isinstance(current, dict):
            if segment not in current:
                raise NormalizationError(
                    f"Cannot resolve $ref '{ref}': key '{segment}' not found at path"
                )
            current = current[segment]
        elif isinstance(current, list):
            try:
                current = current[int(segment)]
            except (ValueError, IndexError) as exc:
                raise NormalizationError(
                    f"Cannot resolve $ref '{ref}': invalid array index '{segment}'"
                ) from exc
        else:
            raise NormalizationError(
                f"Cannot resolve $ref '{ref}': cannot navigate into {type(current).__name__}"
            )
    return current


def deref(obj: Any, root: dict[str, Any]) -> Any:
    """Follow ``$ref`` chains on *obj* until a non-reference value is reached."""
    seen: set[str] = set()
    while isinstance(obj, dict) and "$ref" in obj:
        ref = obj["$ref"]
        if ref in seen:
            raise NormalizationError(f"Circular $ref chain at '{ref}'")
        seen.add(ref)
        obj = resolve_pointer(ref, root)
    return obj


def _unescape(segment: str) -> str:
    return segment.replace("~1", "/").replace("~0", "~")
