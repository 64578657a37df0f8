"""svcschema -- Resolve raw service API descriptions into validated schema documents.

This package turns an externally-sourced API description (a map of
operations plus a graph of named *shapes*) into a canonical, cycle-safe
:class:`~svcschema.models.SchemaDocument`. The document carries kebab-case
operation descriptors, pagination hints, an error taxonomy, and heuristically
inferred resources, and is persisted as JSON for downstream generators.

Typical workflow::

    svcschema build s3 dynamodb --output-dir schemas/
    svcschema validate schemas/s3.json

Modules:
    app: Typer application factory and CLI entry point.
    models: Pydantic models shared across the entire package.
    config: XDG-aware configuration with precedence resolution.
    engine: The pure resolution engine (resolver, extractors, assembler).
    fetch: Raw spec loading and the on-disk spec cache.
    builder: Persistence and the parallel batch runner.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting system with Rich support.
"""

__version__ = "0.1.0"
