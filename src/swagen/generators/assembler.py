"""Deterministic assembly of a generator's sub-outputs into one artifact.

Generators that compose several sub-generators share one growable list of
lines. The order is fixed:

1. initial/boilerplate code,
2. service code, one service after another in definition order,
3. exactly one blank separator line,
4. model/type code in definition order.

Sub-generators only append to the list; the final text is the list joined
with :data:`os.linesep`. The same definition therefore always assembles to
byte-identical output.
"""

from __future__ import annotations

import os
from typing import Callable

from swagen.models import Definition

InitialGenerator = Callable[[Definition], list[str]]
"""Returns the boilerplate lines that start the artifact."""

SectionGenerator = Callable[[Definition, list[str]], None]
"""Appends lines for one section to the shared list."""

NEWLINE = os.linesep


class CodeAssembler:
    """Collects lines for one artifact.

    Example::

        assembler = CodeAssembler(definition)
        assembler.add_initial(generate_initial_code)
        assembler.add_section(generate_services)
        assembler.add_separator()
        assembler.add_section(generate_models)
        text = assembler.text()
    """

    def __init__(self, definition: Definition) -> None:
        self.definition = definition
        self._lines: list[str] = []

    @property
    def lines(self) -> list[str]:
        """A copy of the lines collected so far."""
        return list(self._lines)

    def add_initial(self, generator: InitialGenerator) -> None:
        self._lines.extend(generator(self.definition))

    def add_section(self, generator: SectionGenerator) -> None:
        # Hand the sub-generator its own list so it cannot rewrite earlier lines.
        section: list[str] = []
        generator(self.definition, section)
        self._lines.extend(section)

    def add_separator(self) -> None:
        self._lines.append("")

    def text(self, newline: str = NEWLINE) -> str:
        return newline.join(self._lines)


def assemble(
    definition: Definition,
    initial: InitialGenerator,
    services: SectionGenerator,
    models: SectionGenerator,
    newline: str = NEWLINE,
) -> str:
    """Assemble boilerplate, services, one blank line, then models."""
    assembler = CodeAssembler(definition)
    assembler.add_initial(initial)
    assembler.add_section(services)
    assembler.add_separator()
    assembler.add_section(models)
    return assembler.text(newline)
