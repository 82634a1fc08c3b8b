"""Init command -- write a starter ``swaggen.json``.

Implements the ``swaggen init`` top-level command. The sample config lists
one URL source and one (skipped) directory source so both shapes are
visible to the user, plus every generator setting at its default value.
"""

from __future__ import annotations

import typer

from swaggen.config import PROJECT_CONFIG_FILENAME, write_sample_config
from swaggen.exceptions import ConfigError
from swaggen.output import error, success, suggest


def init_command(
    path: str = typer.Option(
        PROJECT_CONFIG_FILENAME,
        "--path",
        "-p",
        help="Where to write the config file.",
    ),
) -> None:
    """Create a sample swaggen.json config file.

    Refuses to overwrite an existing file.

    Example::

        swaggen init
        swaggen init --path configs/clients.json
    """
    try:
        target = write_sample_config(path)
    except ConfigError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    success(f"Created {target}")
    suggest("Edit the sources list, then run: swaggen generate")
