"""One client class per service, one async method per operation."""

from __future__ import annotations

import json

from swagen.generators.typescript.types import identifier, property_key, ts_type, type_name
from swagen.models import Definition, Operation, Parameter

_INDENT = "    "


def generate_services(definition: Definition, code: list[str], client_suffix: str = "Client") -> None:
    """Append a client class for every service in *definition* to *code*."""
    for service in definition.services:
        code.append(f"export class {type_name(service.name)}{client_suffix} {{")
        code.append(
            f"{_INDENT}constructor(private readonly baseUrl: string = BASE_URL, "
            "private readonly options: RequestOptions = {}) {}"
        )
        for operation in service.operations:
            _generate_operation(operation, code)
        code.append("}")


def _generate_operation(operation: Operation, code: list[str]) -> None:
    names = _argument_names(operation)
    arguments = _arguments(operation, names)
    return_type = _return_type(operation)

    doc = operation.summary or operation.description
    if doc or operation.deprecated:
        code.append(f"{_INDENT}/**")
        if doc:
            for line in doc.strip().splitlines():
                code.append(f"{_INDENT} * {line.strip()}".rstrip())
        if operation.deprecated:
            code.append(f"{_INDENT} * @deprecated")
        code.append(f"{_INDENT} */")

    code.append(
        f"{_INDENT}async {identifier(operation.name)}({', '.join(arguments)}): "
        f"Promise<{return_type}> {{"
    )
    code.append(
        f"{_INDENT * 2}return request<{return_type}>(this.baseUrl, "
        f"{json.dumps(operation.method.upper())}, {_path_expression(operation, names)}, "
        f"{_object_literal(operation, 'query', names)}, "
        f"{_object_literal(operation, 'header', names)}, "
        f"{_body_expression(operation, names)}, this.options);"
    )
    code.append(f"{_INDENT}}}")


def _argument_names(operation: Operation) -> dict[str, str]:
    """Map each parameter (by ``location:name``) to a unique argument name."""
    names: dict[str, str] = {}
    used = {"body"} if operation.body is not None else set()
    for param in operation.parameters:
        name = identifier(param.name)
        while name in used:
            name = f"{name}_"
        used.add(name)
        names[f"{param.location}:{param.name}"] = name
    return names


def _arguments(operation: Operation, names: dict[str, str]) -> list[str]:
    required: list[str] = []
    optional: list[str] = []
    for param in operation.parameters:
        name = names[f"{param.location}:{param.name}"]
        if param.required:
            required.append(f"{name}: {ts_type(param.type)}")
        else:
            optional.append(f"{name}?: {ts_type(param.type)}")
    if operation.body is not None:
        required.append(f"body: {ts_type(operation.body)}")
    return required + optional


def _return_type(operation: Operation) -> str:
    for response in operation.responses:
        if response.status.startswith("2") and response.type is not None:
            return ts_type(response.type)
    return "void"


def _path_expression(operation: Operation, names: dict[str, str]) -> str:
    path = operation.path.replace("`", "\\`")
    for param in operation.parameters:
        if param.location == "path":
            arg = names[f"path:{param.name}"]
            path = path.replace(
                "{" + param.name + "}", "${encodeURIComponent(String(" + arg + "))}"
            )
    return f"`{path}`"


def _object_literal(operation: Operation, location: str, names: dict[str, str]) -> str:
    params: list[Parameter] = [p for p in operation.parameters if p.location == location]
    if not params:
        return "{}"
    entries = [f"{property_key(p.name)}: {names[f'{location}:{p.name}']}" for p in params]
    return "{ " + ", ".join(entries) + " }"


def _body_expression(operation: Operation, names: dict[str, str]) -> str:
    if operation.body is not None:
        return "body"
    form = [p for p in operation.parameters if p.location == "formData"]
    if form:
        return _object_literal(operation, "formData", names)
    return "undefined"
