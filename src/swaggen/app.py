"""Typer application and CLI entry point for swaggen.

This module wires together the top-level Typer application and registers the
built-in sub-commands (``generate`` and ``init``).

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. It installs a signal handler and invokes the Typer app.
:class:`~swaggen.exceptions.SwaggenError` exits with the error's code; any
other unhandled exception is written to a crash log under the data
directory.

See Also:
    :mod:`swaggen.config`: Config discovery and precedence resolution.
    :mod:`swaggen.output`: Output formatting initialised in :func:`main_callback`.
"""

from __future__ import annotations

import logging
import signal
import sys
import traceback
from datetime import datetime
from typing import Any

import typer
from rich.console import Console
from rich.logging import RichHandler

from swaggen import __version__
from swaggen.commands.generate import generate_command
from swaggen.commands.init import init_command
from swaggen.exit_codes import EXIT_GENERIC_FAILURE, EXIT_INTERRUPTED

app = typer.Typer(
    name="swaggen",
    help="Generate TypeScript types and API clients from Swagger 2.0 / OpenAPI 3.x specs.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

app.command("generate")(generate_command)
app.command("init")(init_command)


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"swaggen {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    json_output: bool = typer.Option(
        False, "--json", help="JSON output format."
    ),
    plain_output: bool = typer.Option(
        False, "--plain", help="Plain text output."
    ),
    no_color: bool = typer.Option(
        False, "--no-color", help="Disable color output."
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output."
    ),
) -> None:
    """Root callback executed before every sub-command.

    Initialises the global :class:`~swaggen.output.OutputManager` from
    CLI flags and configures the ``swaggen`` logger.

    Args:
        version: If ``True``, print the version string and exit.
        json_output: Force JSON output format.
        plain_output: Force plain-text output format.
        no_color: Disable all colour and Rich markup.
        quiet: Suppress non-essential diagnostic output.
        verbose: Enable debug-level diagnostic output and library logging.
    """
    from swaggen.output import OutputFormat, OutputManager, set_output

    fmt = OutputFormat.AUTO
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN

    set_output(
        OutputManager(
            format=fmt,
            no_color=no_color,
            quiet=quiet,
            verbose=verbose,
        )
    )
    configure_logging(verbose=verbose, no_color=no_color)


def configure_logging(verbose: bool = False, no_color: bool = False) -> None:
    """Route ``swaggen.*`` log records to stderr through Rich.

    Warnings (unresolved references, skipped parameters) are always shown;
    ``--verbose`` lowers the level to DEBUG.
    """
    logger = logging.getLogger("swaggen")
    for handler in [h for h in logger.handlers if isinstance(h, RichHandler)]:
        logger.removeHandler(handler)

    handler = RichHandler(
        console=Console(stderr=True, no_color=no_color),
        show_time=False,
        show_path=False,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(EXIT_INTERRUPTED)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log() -> str:
    """Write the current traceback to disk and return the log file path."""
    from swaggen.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(traceback.format_exc(), encoding="utf-8")
    return str(log_path)


def main() -> None:
    """CLI entry point invoked by the ``swaggen`` console script.

    Unhandled :class:`~swaggen.exceptions.SwaggenError` instances cause a
    clean exit with the error's ``exit_code``. All other exceptions produce
    a crash log and a generic failure exit.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(EXIT_INTERRUPTED)
    except Exception as exc:
        from swaggen.exceptions import SwaggenError
        from swaggen.output import error

        if isinstance(exc, SwaggenError):
            error(str(exc))
            sys.exit(exc.exit_code)
        else:
            log_path = _write_crash_log()
            error(f"Unexpected error. Debug log: {log_path}")
            sys.exit(EXIT_GENERIC_FAILURE)
