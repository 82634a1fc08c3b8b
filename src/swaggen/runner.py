"""Multi-source orchestration: load, generate and write every configured source.

:func:`run_generator` processes each :class:`~swaggen.models.SourceConfig`
of a :class:`~swaggen.models.GeneratorConfig` and returns a
:class:`~swaggen.models.RunResults` summary.  A failing source is recorded
as a failed :class:`~swaggen.models.SourceResult` with its error messages;
it never stops the remaining sources.

Sources run one after another by default.  With ``parallel`` enabled each
source runs in a worker thread via :func:`asyncio.to_thread`; every source
owns its own document, schema index and type table, so nothing is shared
between them.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Optional

from swaggen.exceptions import SwaggenError
from swaggen.generator.pipeline import generate
from swaggen.models import (
    GENERATED_CLIENTS_DIRNAME,
    GenerationOptions,
    GeneratorConfig,
    RunResults,
    SourceConfig,
    SourceResult,
    SourceType,
)
from swaggen.parser.loader import list_spec_files, load_spec
from swaggen.parser.resolver import load_document
from swaggen.writer import OutputWriter, clean_directory

logger = logging.getLogger(__name__)


def process_source(
    source: str,
    output_dir: str | Path,
    options: Optional[GenerationOptions] = None,
    dry_run: bool = False,
) -> SourceResult:
    """Generate clients for one document.

    Args:
        source: File path or URL of the document.
        output_dir: Directory the service folder is written under
            (normally ``<output_dir>/generatedClients``).
        options: Generation settings.
        dry_run: Compute everything but write nothing.

    Returns:
        The source result.  Errors are captured in ``errors`` with
        ``success=False`` rather than raised.
    """
    try:
        document = load_document(load_spec(source))
        output = generate(document, options)
        writer = OutputWriter(output_dir)
        writer.add_output(output)
        written = [] if dry_run else [str(p) for p in writer.write_all()]
    except (SwaggenError, OSError) as exc:
        logger.debug("Source %s failed: %s", source, exc)
        return SourceResult(source=source, success=False, errors=[str(exc)])
    except Exception as exc:
        logger.debug("Unexpected failure for source %s", source, exc_info=True)
        return SourceResult(
            source=source, success=False, errors=[f"{type(exc).__name__}: {exc}"]
        )

    logger.debug("Source %s -> %s (%d files)", source, output.service_name, len(writer.files))
    return SourceResult(
        source=source,
        success=True,
        service_name=output.service_name,
        files_written=written,
        folder_structure=output.preview,
    )


def expand_source(source_config: SourceConfig) -> list[tuple[str, Optional[str]]]:
    """Turn one configured source into ``(location, service name)`` pairs.

    A file source pointing at a directory yields every JSON/YAML file in
    it, named after the file stem unless a service name is configured.

    Raises:
        SpecParseError: If a directory source cannot be listed.
    """
    if source_config.type is SourceType.FILE and Path(source_config.source).is_dir():
        return [
            (str(path), source_config.service_name or path.stem)
            for path in list_spec_files(source_config.source)
        ]
    return [(source_config.source, source_config.service_name)]


def run_generator(config: GeneratorConfig, dry_run: bool = False) -> RunResults:
    """Generate every non-skipped source of *config*.

    Cleans ``<output_dir>/generatedClients`` first when ``clean_output`` is
    set (and not in dry-run mode).

    Returns:
        Totals plus one result per processed document.
    """
    results = RunResults(total_sources=len(config.sources))
    active = [s for s in config.sources if not s.skip]
    results.skipped = len(config.sources) - len(active)

    if config.clean_output and not dry_run:
        for directory in sorted({_clients_dir(config, s) for s in active}):
            clean_directory(directory)

    jobs: list[tuple[str, Optional[str], Path]] = []
    for source_config in active:
        try:
            expanded = expand_source(source_config)
        except SwaggenError as exc:
            results.results.append(
                SourceResult(source=source_config.source, success=False, errors=[str(exc)])
            )
            continue
        if not expanded:
            logger.warning("No spec files found in %s", source_config.source)
        for location, service_name in expanded:
            jobs.append((location, service_name, _clients_dir(config, source_config)))

    if config.parallel and len(jobs) > 1:
        results.results.extend(asyncio.run(_run_parallel(config, jobs, dry_run)))
    else:
        for location, service_name, out_dir in jobs:
            results.results.append(
                process_source(location, out_dir, config.generation_options(service_name), dry_run)
            )

    results.successful = sum(1 for r in results.results if r.success)
    results.failed = sum(1 for r in results.results if not r.success)
    return results


async def _run_parallel(
    config: GeneratorConfig,
    jobs: list[tuple[str, Optional[str], Path]],
    dry_run: bool,
) -> list[SourceResult]:
    outcomes = await asyncio.gather(
        *(
            asyncio.to_thread(
                process_source,
                location,
                out_dir,
                config.generation_options(service_name),
                dry_run,
            )
            for location, service_name, out_dir in jobs
        ),
        return_exceptions=True,
    )

    results: list[SourceResult] = []
    for (location, _, _), outcome in zip(jobs, outcomes):
        if isinstance(outcome, BaseException):
            if not isinstance(outcome, Exception):
                raise outcome
            results.append(
                SourceResult(source=location, success=False, errors=[f"{type(outcome).__name__}: {outcome}"])
            )
        else:
            results.append(outcome)
    return results


def _clients_dir(config: GeneratorConfig, source: SourceConfig) -> Path:
    return Path(source.output_dir or config.output_dir) / GENERATED_CLIENTS_DIRNAME
