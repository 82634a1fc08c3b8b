"""swaggen -- Generate TypeScript API clients from Swagger 2.0 / OpenAPI 3.x specs.

This package turns an API description into typed TypeScript: one ``types.ts``
and one client class per resource folder, each client delegating HTTP calls
to an injected ``BaseAPIClient`` transport.

Typical workflow::

    swaggen init                                   # write swaggen.json
    swaggen generate                               # every configured source
    swaggen generate --file openapi.yaml --dry-run # preview one document

Modules:
    app: Typer application and CLI entry point.
    models: Pydantic models shared across the entire package.
    config: Project configuration discovery and precedence.
    parser: Document loading, schema index, and operation extraction.
    generator: Naming, grouping, and type/client synthesis.
    writer: Writing generated files and previewing the layout.
    runner: Multi-source orchestration.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting system with Rich support.
"""

__version__ = "0.1.0"
