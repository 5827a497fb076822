"""Normalize a Swagger 2.0 or OpenAPI 3.x document into a :class:`~swagen.models.Definition`.

The single public entry point is :func:`normalize`. It walks the document
and builds a generator-agnostic definition:

* ``_normalize_info`` -- the ``info`` object.
* ``_base_url`` -- ``host``/``basePath``/``schemes`` (2.0) or the first
  ``servers`` entry (3.x).
* ``_normalize_services`` -- the ``paths`` object, grouping operations into
  services by their first tag, or by the first literal path segment when an
  operation has no tags.
* ``_normalize_models`` -- ``definitions`` (2.0) or ``components.schemas``
  (3.x).

Named schemas are never inlined: a ``$ref`` to a model becomes a
:class:`~swagen.models.TypeRef` carrying the model name. Shared parameters,
responses and request bodies are followed with
:func:`~swagen.parser.refs.deref`.

Everything is emitted in document order (methods in path-item order), so
normalizing the same document twice yields equal definitions.
"""

from __future__ import annotations

import re
from typing import Any, Optional

from swagen.exceptions import NormalizationError
from swagen.models import (
    Definition,
    DefinitionInfo,
    Model,
    Operation,
    Parameter,
    Property,
    Response,
    Service,
    TypeRef,
)
from swagen.parser.refs import deref, ref_name

_HTTP_METHODS = ("get", "put", "post", "delete", "options", "head", "patch", "trace")
_JSON_CONTENT_TYPES = ("application/json", "application/*+json", "*/*")
_DEFAULT_SERVICE = "Default"
_IDENTIFIER_SPLIT = re.compile(r"[^0-9A-Za-z]+")


def normalize(document: dict[str, Any]) -> Definition:
    """Build a :class:`~swagen.models.Definition` from a parsed document.

    Args:
        document: The document mapping returned by
            :func:`~swagen.parser.document.parse_document`.

    Returns:
        The normalized definition.

    Raises:
        NormalizationError: If the document declares no supported
            ``swagger``/``openapi`` version, or contains an unresolvable
            ``$ref`` or a malformed ``paths`` section.

    Example::

        definition = normalize(parse_document(text))
        for service in definition.services:
            print(service.name, [op.name for op in service.operations])
    """
    version = _spec_version(document)
    return Definition(
        info=_normalize_info(document),
        spec_version=version,
        base_url=_base_url(document, version),
        services=_normalize_services(document, version),
        models=_normalize_models(document, version),
    )


def _spec_version(document: dict[str, Any]) -> str:
    if "swagger" in document:
        version = str(document["swagger"])
        if version.startswith("2."):
            return version
        raise NormalizationError(f"Unsupported swagger version: {version}")

    openapi = document.get("openapi")
    if openapi is None:
        raise NormalizationError(
            "Missing 'swagger' or 'openapi' field. Is this an API description document?"
        )
    version = str(openapi)
    if version.startswith("3."):
        return version
    raise NormalizationError(
        f"Unsupported OpenAPI version: {version}. Only Swagger 2.0 and OpenAPI 3.x are supported."
    )


def _is_swagger2(version: str) -> bool:
    return version.startswith("2.")


def _normalize_info(document: dict[str, Any]) -> DefinitionInfo:
    info = document.get("info") or {}
    return DefinitionInfo(
        title=str(info.get("title") or "API"),
        version=str(info.get("version") or ""),
        description=info.get("description"),
    )


def _base_url(document: dict[str, Any], version: str) -> Optional[str]:
    if _is_swagger2(version):
        host = document.get("host")
        base_path = document.get("basePath") or ""
        if not host:
            return base_path or None
        schemes = document.get("schemes") or ["https"]
        return f"{schemes[0]}://{host}{base_path}"

    servers = document.get("servers") or []
    if servers and isinstance(servers[0], dict):
        return servers[0].get("url")
    return None


# --- Services and operations ---


def _normalize_services(document: dict[str, Any], version: str) -> list[Service]:
    paths = document.get("paths") or {}
    if not isinstance(paths, dict):
        raise NormalizationError("'paths' must be an object")

    grouped: dict[str, list[Operation]] = {}
    for path, path_item in paths.items():
        path_item = deref(path_item, document)
        if not isinstance(path_item, dict):
            continue
        path_params = path_item.get("parameters") or []

        for method in _HTTP_METHODS:
            raw_op = path_item.get(method)
            if not isinstance(raw_op, dict):
                continue
            operation = _normalize_operation(
                document, version, path, method, raw_op, path_params
            )
            grouped.setdefault(_service_name(path, raw_op), []).append(operation)

    return [Service(name=name, operations=ops) for name, ops in grouped.items()]


def _service_name(path: str, raw_op: dict[str, Any]) -> str:
    tags = raw_op.get("tags") or []
    if tags:
        return _pascal_case(str(tags[0])) or _DEFAULT_SERVICE
    for segment in path.strip("/").split("/"):
        if segment and not segment.startswith("{"):
            return _pascal_case(segment) or _DEFAULT_SERVICE
    return _DEFAULT_SERVICE


def _normalize_operation(
    document: dict[str, Any],
    version: str,
    path: str,
    method: str,
    raw_op: dict[str, Any],
    path_params: list[Any],
) -> Operation:
    parameters: list[Parameter] = []
    body: Optional[TypeRef] = None
    for raw_param in _merge_parameters(document, path_params, raw_op.get("parameters") or []):
        if raw_param.get("in") == "body":
            body = _type_ref(raw_param.get("schema"), document)
            continue
        parameters.append(_normalize_parameter(document, version, raw_param))

    if not _is_swagger2(version) and raw_op.get("requestBody") is not None:
        request_body = deref(raw_op["requestBody"], document)
        body = _type_ref(_content_schema(request_body.get("content")), document)

    operation_id = raw_op.get("operationId")
    return Operation(
        name=_operation_name(method, path, operation_id),
        method=method,
        path=path,
        operation_id=operation_id,
        summary=raw_op.get("summary"),
        description=raw_op.get("description"),
        parameters=parameters,
        body=body,
        responses=_normalize_responses(document, version, raw_op.get("responses") or {}),
        deprecated=bool(raw_op.get("deprecated", False)),
    )


def _merge_parameters(
    document: dict[str, Any], path_params: list[Any], op_params: list[Any]
) -> list[dict[str, Any]]:
    """Merge path-level and operation-level parameters.

    Operation-level parameters override path-level ones with the same
    ``name`` and ``in``. Path-level parameters come first.
    """
    merged: dict[tuple[str, str], dict[str, Any]] = {}
    for raw in [*path_params, *op_params]:
        param = deref(raw, document)
        if not isinstance(param, dict) or "name" not in param:
            continue
        merged[(str(param["name"]), str(param.get("in", "query")))] = param
    return list(merged.values())


def _normalize_parameter(
    document: dict[str, Any], version: str, param: dict[str, Any]
) -> Parameter:
    location = str(param.get("in", "query"))
    if _is_swagger2(version):
        param_type = _type_ref(param, document)
    else:
        schema = param.get("schema")
        if schema is None and param.get("content"):
            schema = _content_schema(param["content"])
        param_type = _type_ref(schema, document)
    return Parameter(
        name=str(param["name"]),
        location=location,
        required=bool(param.get("required", location == "path")),
        type=param_type,
        description=param.get("description"),
    )


def _normalize_responses(
    document: dict[str, Any], version: str, responses: dict[str, Any]
) -> list[Response]:
    result: list[Response] = []
    for status, raw in responses.items():
        raw = deref(raw, document)
        if not isinstance(raw, dict):
            continue
        if _is_swagger2(version):
            schema = raw.get("schema")
        else:
            schema = _content_schema(raw.get("content"))
        result.append(
            Response(
                status=str(status),
                description=raw.get("description"),
                type=_type_ref(schema, document) if schema is not None else None,
            )
        )
    return result


def _content_schema(content: Any) -> Any:
    """Pick the schema of the JSON media type, else the first media type."""
    if not isinstance(content, dict) or not content:
        return None
    for media_type in _JSON_CONTENT_TYPES:
        if media_type in content:
            return (content[media_type] or {}).get("schema")
    first = next(iter(content.values())) or {}
    return first.get("schema")


def _operation_name(method: str, path: str, operation_id: Optional[str]) -> str:
    if operation_id:
        return _camel_case(operation_id) or method
    parts = [method]
    for segment in path.strip("/").split("/"):
        if not segment:
            continue
        if segment.startswith("{") and segment.endswith("}"):
            parts.append("by")
            parts.append(segment[1:-1])
        else:
            parts.append(segment)
    return _camel_case(" ".join(parts))


# --- Models ---


def _normalize_models(document: dict[str, Any], version: str) -> list[Model]:
    if _is_swagger2(version):
        schemas = document.get("definitions") or {}
    else:
        schemas = (document.get("components") or {}).get("schemas") or {}
    if not isinstance(schemas, dict):
        raise NormalizationError("Model definitions must be an object")

    return [_normalize_model(document, str(name), schema) for name, schema in schemas.items()]


def _normalize_model(document: dict[str, Any], name: str, schema: Any) -> Model:
    schema = deref(schema, document) or {}
    properties: dict[str, Property] = {}
    required: set[str] = set()

    for part in [*(schema.get("allOf") or []), schema]:
        part = deref(part, document) or {}
        required.update(part.get("required") or [])
        for prop_name, prop_schema in (part.get("properties") or {}).items():
            properties[prop_name] = Property(
                name=prop_name,
                type=_type_ref(prop_schema, document),
                description=(prop_schema or {}).get("description"),
            )

    return Model(
        name=name,
        description=schema.get("description"),
        properties=[
            prop.model_copy(update={"required": prop.name in required})
            for prop in properties.values()
        ],
        enum=schema.get("enum") if not properties else None,
    )


# --- Types ---


def _type_ref(schema: Any, document: dict[str, Any]) -> TypeRef:
    """Describe *schema* as a :class:`TypeRef`."""
    if not isinstance(schema, dict) or not schema:
        return TypeRef()

    if "$ref" in schema:
        ref = str(schema["$ref"])
        if ref.startswith(("#/definitions/", "#/components/schemas/")):
            deref(schema, document)  # raises on a dangling reference
            return TypeRef(ref=ref_name(ref))
        return _type_ref(deref(schema, document), document)

    for combinator in ("allOf", "oneOf", "anyOf"):
        parts = schema.get(combinator)
        if isinstance(parts, list) and len(parts) == 1:
            return _type_ref(parts[0], document)

    schema_type = schema.get("type")
    if isinstance(schema_type, list):
        schema_type = next((t for t in schema_type if t != "null"), None)

    if schema_type == "array":
        item = _type_ref(schema.get("items"), document)
        return item.model_copy(update={"is_array": True})

    if schema_type is None:
        schema_type = "object" if "properties" in schema else "any"

    return TypeRef(
        primitive=str(schema_type),
        format=schema.get("format"),
        enum=schema.get("enum"),
    )


# --- Naming ---


def _words(text: str) -> list[str]:
    # Split on separators and on lower-to-upper transitions ("petId" -> pet, Id).
    spaced = re.sub(r"([a-z0-9])([A-Z])", r"\1 \2", text)
    return [w for w in _IDENTIFIER_SPLIT.split(spaced) if w]


def _pascal_case(text: str) -> str:
    return "".join(w[:1].upper() + w[1:] for w in _words(text))


def _camel_case(text: str) -> str:
    pascal = _pascal_case(text)
    name = pascal[:1].lower() + pascal[1:]
    if name[:1].isdigit():
        name = f"_{name}"
    return name
