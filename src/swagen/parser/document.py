"""Turn raw document text into a structured mapping.

JSON is parsed strictly with :func:`json.loads` (the non-standard
``NaN`` and ``Infinity`` constants are rejected); a failure becomes a
:class:`~swagen.exceptions.DocumentSyntaxError` carrying the line, column
and message the decoder reported. Documents that are known to be YAML
(``.yaml``/``.yml`` files or a YAML ``Content-Type``) are parsed with
:func:`yaml.safe_load` instead. There is no fallback from one format to the
other: a malformed JSON document is reported as malformed JSON.
"""

from __future__ import annotations

import json
import re
from typing import Any, Optional

import yaml

from swagen.exceptions import DocumentSyntaxError


def parse_document(raw: Any, key: Optional[str] = None, hint: str = "") -> dict[str, Any]:
    """Parse *raw* into a document mapping.

    Args:
        raw: Document text, or an already-structured mapping which is
            returned unchanged.
        key: Profile name attached to any error.
        hint: ``"yaml"`` to parse as YAML; anything else parses as JSON.

    Returns:
        The top-level document mapping.

    Raises:
        DocumentSyntaxError: If the text is malformed or its top level is
            not an object.
    """
    if isinstance(raw, dict):
        return raw
    if isinstance(raw, bytes):
        raw = raw.decode("utf-8")
    if not isinstance(raw, str):
        raise DocumentSyntaxError(
            f"Invalid swagger source: expected text or an object, got {type(raw).__name__}.",
            profile_key=key,
        )

    if hint == "yaml":
        result = _parse_yaml(raw, key)
    else:
        result = _parse_json(raw, key)

    if not isinstance(result, dict):
        kind = type(result).__name__ if result is not None else "empty document"
        raise DocumentSyntaxError(
            f"Invalid swagger source: the document must be an object (got {kind}).",
            profile_key=key,
        )
    return result


# Strings are matched first so a constant inside a string value is skipped.
_NON_STANDARD_CONSTANT = re.compile(r'"(?:\\.|[^"\\])*"|(-?Infinity|NaN)')


class _NonStandardConstant(ValueError):
    pass


def _reject_constant(name: str) -> Any:
    raise _NonStandardConstant(name)


def _parse_json(text: str, key: Optional[str]) -> Any:
    try:
        return json.loads(text, parse_constant=_reject_constant)
    except json.JSONDecodeError as exc:
        raise DocumentSyntaxError(
            f"Invalid swagger source at line {exc.lineno}, column {exc.colno}: {exc.msg}",
            line=exc.lineno,
            column=exc.colno,
            detail=exc.msg,
            profile_key=key,
        ) from exc
    except _NonStandardConstant as exc:
        detail = f"{exc} is not valid JSON"
        for match in _NON_STANDARD_CONSTANT.finditer(text):
            if match.group(1):
                line = text.count("\n", 0, match.start(1)) + 1
                column = match.start(1) - text.rfind("\n", 0, match.start(1))
                raise DocumentSyntaxError(
                    f"Invalid swagger source at line {line}, column {column}: {detail}",
                    line=line,
                    column=column,
                    detail=detail,
                    profile_key=key,
                ) from exc
        raise DocumentSyntaxError(
            f"Invalid swagger source: {detail}", detail=detail, profile_key=key
        ) from exc


def _parse_yaml(text: str, key: Optional[str]) -> Any:
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as exc:
        mark = getattr(exc, "problem_mark", None)
        detail = getattr(exc, "problem", None) or str(exc)
        if mark is not None:
            line, column = mark.line + 1, mark.column + 1
            message = f"Invalid swagger source at line {line}, column {column}: {detail}"
        else:
            line = column = None
            message = f"Invalid swagger source: {detail}"
        raise DocumentSyntaxError(
            message, line=line, column=column, detail=detail, profile_key=key
        ) from exc
