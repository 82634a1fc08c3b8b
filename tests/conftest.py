"""Shared test fixtures for swaggen.

Provides reusable fixtures for loading spec fixtures, building documents,
creating isolated config environments, managing output state, and running
CLI commands. These fixtures are automatically discovered by pytest and
available to all test modules without explicit imports.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from swaggen.models import Document
from swaggen.output import OutputFormat, OutputManager, reset_output, set_output
from swaggen.parser.resolver import SchemaIndex, load_document

FIXTURES_DIR = Path(__file__).parent / "fixtures"


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time.  When Typer's CliRunner redirects those streams during
    a test and the test finishes, the cached references become stale
    ("I/O operation on closed file").  Resetting forces a fresh manager
    to be created on next use.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Raw spec fixtures (plain dicts loaded from JSON files)
# ---------------------------------------------------------------------------


@pytest.fixture
def petstore_raw() -> dict[str, Any]:
    """Load the raw Swagger 2.0 petstore dict."""
    with open(FIXTURES_DIR / "petstore_swagger2.json") as f:
        return json.load(f)


@pytest.fixture
def activity_raw() -> dict[str, Any]:
    """Load the raw OpenAPI 3.0 activity service dict."""
    with open(FIXTURES_DIR / "activity_openapi3.json") as f:
        return json.load(f)


# ---------------------------------------------------------------------------
# Loaded document fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def petstore_doc(petstore_raw: dict[str, Any]) -> Document:
    return load_document(petstore_raw)


@pytest.fixture
def activity_doc(activity_raw: dict[str, Any]) -> Document:
    return load_document(activity_raw)


@pytest.fixture
def activity_index(activity_doc: Document) -> SchemaIndex:
    return SchemaIndex(activity_doc)


def make_document(
    paths: dict[str, Any] | None = None,
    schemas: dict[str, Any] | None = None,
    title: str | None = "Test API",
) -> Document:
    """Build a minimal OpenAPI 3.0 document for focused tests."""
    raw: dict[str, Any] = {"openapi": "3.0.3", "paths": paths or {}}
    if title is not None:
        raw["info"] = {"title": title, "version": "1.0.0"}
    if schemas is not None:
        raw["components"] = {"schemas": schemas}
    return load_document(raw)


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Points XDG_DATA_HOME at a subdirectory of tmp_path so crash logs never
    touch real user data, clears all SWAGGEN_* environment variables, and
    changes the working directory to tmp_path.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    for var in ["SWAGGEN_CONFIG", "SWAGGEN_OUTPUT_DIR"]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a PLAIN-format, quiet OutputManager as the global output."""
    output = OutputManager(format=OutputFormat.PLAIN, quiet=True)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()


@pytest.fixture
def make_doc():
    """Factory fixture returning :func:`make_document`."""
    return make_document
