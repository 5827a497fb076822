"""Built-in ``typescript`` generator -- a dependency-free TypeScript API client.

The artifact has four parts, assembled by
:func:`~swagen.generators.assembler.assemble`:

* :mod:`~swagen.generators.typescript.initial` -- header comment,
  ``BASE_URL`` and a ``fetch``-based ``request`` helper.
* :mod:`~swagen.generators.typescript.services` -- one
  ``export class <Service>Client`` per service.
* a single blank line.
* :mod:`~swagen.generators.typescript.models` -- one ``export interface``
  (or string-union ``type``) per model.

Profile options:

* ``baseUrl`` -- overrides the base URL taken from the document.
* ``clientSuffix`` -- suffix of client class names (default ``Client``).
"""

from __future__ import annotations

import re
from functools import partial

from swagen.generators.assembler import assemble
from swagen.generators.typescript.initial import generate_initial_code
from swagen.generators.typescript.models import generate_models
from swagen.generators.typescript.services import generate_services
from swagen.models import Definition, Profile

_SUFFIX_RE = re.compile(r"^[A-Za-z_$][0-9A-Za-z_$]*$")


def validate_profile(profile: Profile) -> None:
    """Reject options the generator cannot honour."""
    base_url = profile.options.get("baseUrl")
    if base_url is not None and not isinstance(base_url, str):
        raise ValueError("options.baseUrl must be a string")
    suffix = profile.options.get("clientSuffix")
    if suffix is not None and (not isinstance(suffix, str) or not _SUFFIX_RE.match(suffix)):
        raise ValueError(f"options.clientSuffix must be a TypeScript identifier, got {suffix!r}")


def generate(definition: Definition, profile: Profile) -> str:
    """Return the TypeScript client source for *definition*."""
    options = profile.options
    return assemble(
        definition,
        initial=partial(generate_initial_code, base_url=options.get("baseUrl")),
        services=partial(generate_services, client_suffix=options.get("clientSuffix", "Client")),
        models=generate_models,
    )
