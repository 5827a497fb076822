"""Mapping from definition types to TypeScript type expressions."""

from __future__ import annotations

import json
import keyword
import re

from swagen.models import TypeRef

_PRIMITIVES = {
    "string": "string",
    "integer": "number",
    "number": "number",
    "boolean": "boolean",
    "object": "Record<string, unknown>",
    "file": "Blob",
    "any": "unknown",
}

_NON_IDENTIFIER = re.compile(r"[^0-9A-Za-z_$]+")

_RESERVED = frozenset(
    {
        "break", "case", "catch", "class", "const", "continue", "debugger",
        "default", "delete", "do", "else", "enum", "export", "extends", "false",
        "finally", "for", "function", "if", "import", "in", "instanceof", "new",
        "null", "return", "super", "switch", "this", "throw", "true", "try",
        "typeof", "var", "void", "while", "with", "let", "static", "yield",
        "await", "package", "private", "protected", "public", "interface",
    }
)


def type_name(name: str) -> str:
    """Return *name* as a valid TypeScript type identifier."""
    cleaned = _NON_IDENTIFIER.sub("_", name).strip("_") or "Model"
    if cleaned[0].isdigit():
        cleaned = f"_{cleaned}"
    return cleaned


def identifier(name: str) -> str:
    """Return *name* as a camelCase TypeScript value identifier."""
    words = [w for w in _NON_IDENTIFIER.split(name) if w]
    if not words:
        return "value"
    ident = words[0][:1].lower() + words[0][1:] + "".join(
        w[:1].upper() + w[1:] for w in words[1:]
    )
    if ident[0].isdigit():
        ident = f"_{ident}"
    if ident in _RESERVED or keyword.iskeyword(ident):
        ident = f"{ident}_"
    return ident


def property_key(name: str) -> str:
    """Return *name* as an object key, quoted when it is not an identifier."""
    if re.fullmatch(r"[A-Za-z_$][0-9A-Za-z_$]*", name):
        return name
    return json.dumps(name)


def ts_type(ref: TypeRef | None) -> str:
    """Return the TypeScript expression for *ref* (``unknown`` when ``None``)."""
    if ref is None:
        return "unknown"
    if ref.ref is not None:
        base = type_name(ref.ref)
    elif ref.enum and all(isinstance(v, (str, int, float)) for v in ref.enum):
        base = " | ".join(json.dumps(v) for v in ref.enum)
    elif ref.primitive == "string" and ref.format == "binary":
        base = "Blob"
    else:
        base = _PRIMITIVES.get(ref.primitive, "unknown")

    if ref.is_array:
        if " " in base:
            base = f"({base})"
        return f"{base}[]"
    return base
