"""Boilerplate at the top of every generated TypeScript client."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from jinja2 import Environment, FileSystemLoader, select_autoescape

from swagen import __version__
from swagen.models import Definition

TEMPLATE_DIR = Path(__file__).parent / "templates"
"""Path to the Jinja2 template directory (``generators/typescript/templates/``)."""


def _create_jinja_env() -> Environment:
    return Environment(
        loader=FileSystemLoader(str(TEMPLATE_DIR)),
        autoescape=select_autoescape(disabled_extensions=("ts.j2",)),
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )


def generate_initial_code(definition: Definition, base_url: Optional[str] = None) -> list[str]:
    """Render the header, ``BASE_URL`` constant and ``request`` helper as lines.

    A trailing blank line separates the boilerplate from the first client
    class. Without services the assembler's separator follows directly, so
    the trailing blank is left out.
    """
    template = _create_jinja_env().get_template("header.ts.j2")
    rendered = template.render(
        title=definition.info.title,
        api_version=definition.info.version,
        description=definition.info.description,
        base_url=base_url if base_url is not None else (definition.base_url or ""),
        swagen_version=__version__,
    )
    lines = rendered.splitlines()
    if definition.services:
        lines.append("")
    return lines
