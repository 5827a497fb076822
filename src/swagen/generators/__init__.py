"""Generator plugins -- resolution, invocation, and output assembly.

Key pieces:

* :class:`Generator` -- interface every plugin satisfies (``generate`` plus an
  optional ``validate_profile`` hook).
* :class:`GeneratorLoader` -- resolves a profile's ``generator`` value by
  local path or by name.
* :func:`invoke_generator` -- runs the validation hook and then ``generate``.
* :class:`CodeAssembler` -- ordered line assembly for composed generators.
"""

from swagen.generators.assembler import CodeAssembler, assemble
from swagen.generators.base import Generator, ModuleGenerator, invoke_generator
from swagen.generators.loader import GeneratorLoader

__all__ = [
    "CodeAssembler",
    "Generator",
    "GeneratorLoader",
    "ModuleGenerator",
    "assemble",
    "invoke_generator",
]
