"""Generate command -- turn Swagger/OpenAPI documents into TypeScript clients.

Implements ``swaggen generate`` in two modes:

* **Single source** -- ``--file`` or ``--url`` names one document; the
  rest of the settings still come from the resolved config.
* **Config mode** -- every source listed in ``swaggen.json`` (or the file
  named by ``--config`` / ``$SWAGGEN_CONFIG``).

Per-source failures are reported but never stop the other sources; the
command exits with status 1 when at least one source failed.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from swaggen.config import resolve_config
from swaggen.exceptions import InvalidUsageError, SwaggenError
from swaggen.exit_codes import EXIT_GENERIC_FAILURE
from swaggen.models import GENERATED_CLIENTS_DIRNAME, RunResults, SourceConfig, SourceType
from swaggen.output import (
    OutputFormat,
    debug,
    error,
    get_output,
    info,
    print_data,
    print_json,
    print_table,
    success,
    suggest,
)
from swaggen.runner import run_generator


def generate_command(
    config_path: Optional[str] = typer.Option(
        None, "--config", "-c", help="Path to a swaggen.json config file."
    ),
    file: Optional[str] = typer.Option(
        None, "--file", "-f", help="Generate from a single local spec file or directory."
    ),
    url: Optional[str] = typer.Option(
        None, "--url", "-u", help="Generate from a single spec URL."
    ),
    output_dir: Optional[str] = typer.Option(
        None, "--output", "-o", help="Output directory (generatedClients/ is created inside)."
    ),
    name: Optional[str] = typer.Option(
        None, "--name", "-n", help="Service name override (single-source mode)."
    ),
    transport: Optional[str] = typer.Option(
        None, "--transport", help="Import path of the BaseAPIClient transport module."
    ),
    parallel: Optional[bool] = typer.Option(
        None, "--parallel/--sequential", help="Process sources concurrently."
    ),
    dry_run: bool = typer.Option(
        False, "--dry-run", help="Show the folder layout without writing files."
    ),
) -> None:
    """Generate TypeScript types and API clients.

    Example::

        swaggen generate
        swaggen generate --file specs/billing.json --name BillingService
        swaggen generate --url https://petstore.swagger.io/v2/swagger.json --dry-run
    """
    try:
        config = resolve_config(config_path, output_dir, transport)

        if file and url:
            raise InvalidUsageError("Use either --file or --url, not both")
        if file or url:
            # A single source only overwrites its own service folder.
            source = SourceConfig(
                type=SourceType.FILE if file else SourceType.URL,
                source=file or url,
                service_name=name,
            )
            config = config.model_copy(update={"sources": [source], "clean_output": False})
        elif name:
            raise InvalidUsageError("--name requires --file or --url")

        if parallel is not None:
            config = config.model_copy(update={"parallel": parallel})

        if not config.sources:
            raise InvalidUsageError(
                "No sources to generate. Pass --file/--url or list sources in swaggen.json"
            )

        target = Path(config.output_dir) / GENERATED_CLIENTS_DIRNAME
        info(f"Generating {len(config.sources)} source(s) into {target}")
        results = run_generator(config, dry_run=dry_run)
    except SwaggenError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    _report(results, dry_run)
    if results.failed:
        raise typer.Exit(code=EXIT_GENERIC_FAILURE)


def _report(results: RunResults, dry_run: bool) -> None:
    """Print per-source outcomes and the run summary."""
    if get_output().format == OutputFormat.JSON:
        print_json(results.model_dump(mode="json"))
        return

    for result in results.results:
        if result.success:
            verb = "Planned" if dry_run else "Generated"
            success(f"{verb} {result.service_name} from {result.source}")
            for path in result.files_written:
                debug(f"Wrote {path}")
            print_data(result.folder_structure)
        else:
            error(f"{result.source}: {'; '.join(result.errors)}")

    print_table(
        ["Total", "Successful", "Failed", "Skipped"],
        [
            [
                str(results.total_sources),
                str(results.successful),
                str(results.failed),
                str(results.skipped),
            ]
        ],
        title="Generation summary",
    )
    if dry_run and results.successful:
        suggest("Run again without --dry-run to write the files")
