"""TypeScript interfaces and union types for the definition's models."""

from __future__ import annotations

import json

from swagen.generators.typescript.types import property_key, ts_type, type_name
from swagen.models import Definition

_INDENT = "    "


def generate_models(definition: Definition, code: list[str]) -> None:
    """Append one declaration per model to *code*, in definition order."""
    for model in definition.models:
        if model.description:
            code.append(f"/** {' '.join(model.description.split())} */")

        if model.enum and not model.properties:
            values = " | ".join(json.dumps(v) for v in model.enum)
            code.append(f"export type {type_name(model.name)} = {values};")
            continue

        code.append(f"export interface {type_name(model.name)} {{")
        for prop in model.properties:
            marker = "" if prop.required else "?"
            if prop.description:
                code.append(f"{_INDENT}/** {' '.join(prop.description.split())} */")
            code.append(f"{_INDENT}{property_key(prop.name)}{marker}: {ts_type(prop.type)};")
        code.append("}")
