"""Project configuration with precedence resolution and atomic writes.

This module handles all persistent configuration for swaggen:

* **Project config** -- a ``swaggen.json`` file, normally in the current
  directory, deserialised into a :class:`~swaggen.models.GeneratorConfig`.
  See :func:`find_project_config` and :func:`load_project_config`.
* **Precedence resolution** -- :func:`resolve_config` merges CLI flags,
  environment variables, the project file, and defaults into the final
  effective configuration.
* **Sample config** -- :func:`write_sample_config` backs ``swaggen init``.
* **Data directory** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.swaggen/`` on macOS and Windows; holds crash logs.
  See :func:`get_data_dir`.

All file writes use an atomic temp-file-then-rename strategy
(:func:`_atomic_write`) so an interrupted ``init`` never leaves a truncated
config behind.
"""

from __future__ import annotations

import json
import logging
import os
import platform
import tempfile
from pathlib import Path
from typing import Optional

from swaggen.exceptions import ConfigError
from swaggen.models import GeneratorConfig, SourceConfig, SourceType

logger = logging.getLogger(__name__)

_APP_NAME = "swaggen"
PROJECT_CONFIG_FILENAME = "swaggen.json"

ENV_CONFIG_PATH = "SWAGGEN_CONFIG"
"""Environment variable naming the config file to load."""

ENV_OUTPUT_DIR = "SWAGGEN_OUTPUT_DIR"
"""Environment variable overriding ``output_dir``."""


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def get_data_dir() -> Path:
    """Return the data directory (crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/swaggen/`` (default ``~/.local/share/swaggen/``).
    On macOS/Windows: ``~/.swaggen/logs/``.

    Returns:
        Absolute path to the data directory (guaranteed to exist).
    """
    if _is_xdg_platform():
        xdg_data = os.environ.get("XDG_DATA_HOME", "")
        base = Path(xdg_data) if xdg_data else Path.home() / ".local" / "share"
        path = base / _APP_NAME
    else:
        path = Path.home() / f".{_APP_NAME}" / "logs"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Atomic file writes ---


def _atomic_write(path: Path, data: str) -> None:
    """Write *data* to *path* atomically using temp file + rename.

    The temporary file lives next to *path* so ``os.replace`` is a rename
    on the same filesystem; it is removed again if anything fails.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    tmp = tempfile.NamedTemporaryFile(
        mode="w",
        dir=path.parent,
        prefix=f".{path.name}.",
        suffix=".tmp",
        delete=False,
        encoding="utf-8",
    )
    try:
        with tmp:
            tmp.write(data)
            tmp.flush()
            os.fsync(tmp.fileno())
        os.replace(tmp.name, path)
    except BaseException:
        Path(tmp.name).unlink(missing_ok=True)
        raise


# --- Project config ---


def find_project_config(explicit: Optional[str | Path] = None) -> Optional[Path]:
    """Locate the config file to load.

    Args:
        explicit: A path given on the command line. It must exist.

    Returns:
        *explicit*, else ``$SWAGGEN_CONFIG``, else ``./swaggen.json`` when it
        exists, else ``None``.

    Raises:
        ConfigError: If an explicitly named file (flag or environment
            variable) does not exist.
    """
    if explicit is not None:
        path = Path(explicit)
        if not path.is_file():
            raise ConfigError(f"Config file not found: {path}")
        return path

    env_path = os.environ.get(ENV_CONFIG_PATH)
    if env_path:
        path = Path(env_path)
        if not path.is_file():
            raise ConfigError(f"Config file from ${ENV_CONFIG_PATH} not found: {path}")
        return path

    path = Path.cwd() / PROJECT_CONFIG_FILENAME
    return path if path.is_file() else None


def load_project_config(path: Path) -> GeneratorConfig:
    """Load and validate a ``swaggen.json`` file.

    Relative source paths and output directories are kept as written; they
    are resolved against the working directory at generation time.

    Raises:
        ConfigError: If the file is unreadable, contains invalid JSON, or
            fails Pydantic validation.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Cannot read config at {path}: {exc}") from exc
    try:
        data = json.loads(text)
        return GeneratorConfig.model_validate(data)
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid config at {path}: {exc}") from exc


# --- Precedence resolution ---


def resolve_config(
    cli_config: Optional[str | Path] = None,
    cli_output_dir: Optional[str] = None,
    cli_transport: Optional[str] = None,
) -> GeneratorConfig:
    """Resolve config with full precedence chain.

    Precedence (high to low):
        1. CLI flags (``--config``, ``--output``, ``--transport``)
        2. Environment variables (``SWAGGEN_CONFIG``, ``SWAGGEN_OUTPUT_DIR``)
        3. Project config (``./swaggen.json``)
        4. Defaults

    Returns:
        The effective :class:`~swaggen.models.GeneratorConfig`.
    """
    path = find_project_config(cli_config)
    if path is not None:
        logger.debug("Using config %s", path)
        config = load_project_config(path)
    else:
        config = GeneratorConfig()

    updates: dict[str, str] = {}
    env_output = os.environ.get(ENV_OUTPUT_DIR)
    if env_output:
        updates["output_dir"] = env_output
    if cli_output_dir is not None:
        updates["output_dir"] = cli_output_dir
    if cli_transport is not None:
        updates["transport_import_path"] = cli_transport

    return config.model_copy(update=updates) if updates else config


# --- Sample config ---


def sample_config() -> GeneratorConfig:
    """The configuration written by ``swaggen init``."""
    return GeneratorConfig(
        output_dir="src/clients",
        sources=[
            SourceConfig(
                type=SourceType.URL,
                source="https://petstore.swagger.io/v2/swagger.json",
                service_name="PetStoreService",
            ),
            SourceConfig(type=SourceType.FILE, source="./specs", skip=True),
        ],
    )


def write_sample_config(path: str | Path = PROJECT_CONFIG_FILENAME) -> Path:
    """Write :func:`sample_config` to *path*.

    Raises:
        ConfigError: If *path* already exists.
    """
    target = Path(path)
    if target.exists():
        raise ConfigError(f"Config already exists at {target}; not overwriting")
    data = sample_config().model_dump(mode="json", exclude_none=True)
    _atomic_write(target, json.dumps(data, indent=2) + "\n")
    return target
