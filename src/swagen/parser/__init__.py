"""Document parsing and normalization.

This sub-package turns raw document text into a
:class:`~swagen.models.Definition` that generator plugins consume.

Typical usage::

    from swagen.parser import normalize, parse_document

    document = parse_document(text, key="petstore", hint="json")
    definition = normalize(document)

Sub-modules:

* :mod:`~swagen.parser.document` -- strict JSON (or YAML) parsing with
  line-numbered syntax errors.
* :mod:`~swagen.parser.refs` -- internal ``$ref`` pointer helpers.
* :mod:`~swagen.parser.normalizer` -- builds the definition from a Swagger
  2.0 or OpenAPI 3.x mapping.
"""

from swagen.parser.document import parse_document
from swagen.parser.normalizer import normalize

__all__ = ["parse_document", "normalize"]
