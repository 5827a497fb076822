"""swagen -- Generate API client code from Swagger/OpenAPI documents.

This package reads a project configuration made of named *profiles*. Each
profile points to one API-description document (a local file or a URL),
one generator plugin, and one output file. A single invocation processes
every profile independently::

    swagen init --file petstore.json --generator typescript --output petstore.ts
    swagen generate

Modules:
    app: Typer application and console-script entry point.
    models: Pydantic models for profiles, the normalized definition, and run results.
    config: Configuration discovery, settings, and atomic writes.
    validator: Structural profile validation and defaulting.
    sources: File and URL document resolution.
    orchestrator: Per-profile pipeline and concurrent scheduling.
    exceptions: Tagged error hierarchy with exit-code mapping.
    output: stderr diagnostics with Rich support.
"""

__version__ = "0.3.0"
