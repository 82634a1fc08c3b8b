"""Integration tests for the swaggen CLI.

Drives the real Typer app through ``CliRunner`` against the fixture
documents and checks exit codes, console output, and the files written
under ``generatedClients/``.
"""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from swaggen import __version__
from swaggen.app import app, main
from swaggen.exceptions import SpecParseError
from swaggen.exit_codes import (
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_SPEC_PARSE_ERROR,
)

FIXTURES_DIR = Path(__file__).parent.parent / "fixtures"
PETSTORE = str(FIXTURES_DIR / "petstore_swagger2.json")
ACTIVITY = str(FIXTURES_DIR / "activity_openapi3.json")


# ---------------------------------------------------------------------------
# Root callback
# ---------------------------------------------------------------------------


class TestRoot:
    def test_version(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert f"swaggen {__version__}" in result.output

    def test_help_lists_commands(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "generate" in result.output
        assert "init" in result.output


# ---------------------------------------------------------------------------
# generate
# ---------------------------------------------------------------------------


class TestGenerateSingleSource:
    """``swaggen generate --file/--url``."""

    def test_generates_files(self, cli_runner: CliRunner, isolated_config: Path) -> None:
        result = cli_runner.invoke(app, ["generate", "--file", PETSTORE, "--output", "out"])
        assert result.exit_code == 0, result.output
        service_dir = isolated_config / "out" / "generatedClients" / "PetStoreService"
        assert (service_dir / "Root" / "PetStoreServiceRootClient.ts").is_file()
        assert (service_dir / "Store" / "types.ts").is_file()
        assert "PetStoreService/" in result.output
        assert "Generated PetStoreService" in result.output

    def test_name_override(self, cli_runner: CliRunner, isolated_config: Path) -> None:
        result = cli_runner.invoke(
            app, ["generate", "-f", ACTIVITY, "-o", "out", "--name", "Acts"]
        )
        assert result.exit_code == 0, result.output
        assert (isolated_config / "out" / "generatedClients" / "Acts" / "Root").is_dir()

    def test_transport_flag(self, cli_runner: CliRunner, isolated_config: Path) -> None:
        result = cli_runner.invoke(
            app, ["generate", "-f", ACTIVITY, "-o", "out", "--transport", "@/lib/http"]
        )
        assert result.exit_code == 0, result.output
        client = (
            isolated_config
            / "out"
            / "generatedClients"
            / "ActivityService"
            / "Root"
            / "ActivityServiceRootClient.ts"
        )
        assert "from '@/lib/http';" in client.read_text(encoding="utf-8")

    def test_does_not_clean_other_services(
        self, cli_runner: CliRunner, isolated_config: Path
    ) -> None:
        other = isolated_config / "out" / "generatedClients" / "Other" / "types.ts"
        other.parent.mkdir(parents=True)
        other.write_text("keep", encoding="utf-8")
        result = cli_runner.invoke(app, ["generate", "-f", ACTIVITY, "-o", "out"])
        assert result.exit_code == 0, result.output
        assert other.exists()

    def test_dry_run(self, cli_runner: CliRunner, isolated_config: Path) -> None:
        result = cli_runner.invoke(app, ["generate", "-f", PETSTORE, "-o", "out", "--dry-run"])
        assert result.exit_code == 0, result.output
        assert "PetStoreServiceRootClient.ts" in result.output
        assert "Planned PetStoreService" in result.output
        assert not (isolated_config / "out").exists()

    def test_json_output(self, cli_runner: CliRunner, isolated_config: Path) -> None:
        result = cli_runner.invoke(
            app, ["--json", "-q", "generate", "-f", ACTIVITY, "-o", "out", "--dry-run"]
        )
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["total_sources"] == 1
        assert data["successful"] == 1
        assert data["results"][0]["service_name"] == "ActivityService"

    def test_verbose_lists_written_files(
        self, cli_runner: CliRunner, isolated_config: Path
    ) -> None:
        result = cli_runner.invoke(
            app, ["--no-color", "-v", "generate", "-f", ACTIVITY, "-o", "out"]
        )
        assert result.exit_code == 0, result.output
        wrote = [line for line in result.output.splitlines() if line.startswith("[debug] Wrote ")]
        assert len(wrote) == 6
        assert any(line.endswith("types.ts") for line in wrote)

    def test_written_files_hidden_without_verbose(
        self, cli_runner: CliRunner, isolated_config: Path
    ) -> None:
        result = cli_runner.invoke(app, ["--plain", "generate", "-f", ACTIVITY, "-o", "out"])
        assert result.exit_code == 0, result.output
        assert "[debug]" not in result.output

    def test_broken_source_exits_nonzero(
        self, cli_runner: CliRunner, isolated_config: Path
    ) -> None:
        result = cli_runner.invoke(app, ["generate", "-f", "missing.json", "-o", "out"])
        assert result.exit_code == EXIT_GENERIC_FAILURE
        assert "not found" in result.output

    def test_file_and_url_conflict(self, cli_runner: CliRunner, isolated_config: Path) -> None:
        result = cli_runner.invoke(
            app, ["generate", "-f", PETSTORE, "-u", "https://x.test/spec.json"]
        )
        assert result.exit_code == EXIT_INVALID_USAGE
        assert "not both" in result.output

    def test_name_requires_source(self, cli_runner: CliRunner, isolated_config: Path) -> None:
        result = cli_runner.invoke(app, ["generate", "--name", "X"])
        assert result.exit_code == EXIT_INVALID_USAGE

    def test_no_sources(self, cli_runner: CliRunner, isolated_config: Path) -> None:
        result = cli_runner.invoke(app, ["generate"])
        assert result.exit_code == EXIT_INVALID_USAGE
        assert "No sources" in result.output


class TestGenerateFromConfig:
    """``swaggen generate`` driven by ``swaggen.json``."""

    def _write_config(self, root: Path, **overrides) -> Path:
        data = {
            "output_dir": "web/api",
            "sources": [
                {"type": "file", "source": PETSTORE},
                {"type": "file", "source": ACTIVITY},
                {"type": "url", "source": "https://x.test/skipped.json", "skip": True},
            ],
        }
        data.update(overrides)
        path = root / "swaggen.json"
        path.write_text(json.dumps(data), encoding="utf-8")
        return path

    def test_all_sources(self, cli_runner: CliRunner, isolated_config: Path) -> None:
        self._write_config(isolated_config)
        result = cli_runner.invoke(app, ["--plain", "generate"])
        assert result.exit_code == 0, result.output
        clients = isolated_config / "web" / "api" / "generatedClients"
        assert (clients / "PetStoreService").is_dir()
        assert (clients / "ActivityService").is_dir()
        assert "Total\tSuccessful\tFailed\tSkipped" in result.output
        assert "3\t2\t0\t1" in result.output

    def test_parallel(self, cli_runner: CliRunner, isolated_config: Path) -> None:
        self._write_config(isolated_config)
        result = cli_runner.invoke(app, ["generate", "--parallel"])
        assert result.exit_code == 0, result.output
        clients = isolated_config / "web" / "api" / "generatedClients"
        assert (clients / "ActivityService" / "Therapist" / "types.ts").is_file()

    def test_output_flag_overrides_config(
        self, cli_runner: CliRunner, isolated_config: Path
    ) -> None:
        self._write_config(isolated_config)
        result = cli_runner.invoke(app, ["generate", "-o", "elsewhere"])
        assert result.exit_code == 0, result.output
        assert (isolated_config / "elsewhere" / "generatedClients" / "PetStoreService").is_dir()

    def test_explicit_config_path(self, cli_runner: CliRunner, isolated_config: Path) -> None:
        nested = isolated_config / "conf"
        nested.mkdir()
        path = self._write_config(nested, sources=[{"source": ACTIVITY}])
        result = cli_runner.invoke(app, ["generate", "--config", str(path)])
        assert result.exit_code == 0, result.output
        assert (isolated_config / "web" / "api" / "generatedClients" / "ActivityService").is_dir()

    def test_missing_config_path(self, cli_runner: CliRunner, isolated_config: Path) -> None:
        result = cli_runner.invoke(app, ["generate", "--config", "nope.json"])
        assert result.exit_code == EXIT_GENERIC_FAILURE
        assert "Config file not found" in result.output

    def test_partial_failure(self, cli_runner: CliRunner, isolated_config: Path) -> None:
        self._write_config(
            isolated_config,
            sources=[{"source": "missing.json"}, {"source": ACTIVITY}],
        )
        result = cli_runner.invoke(app, ["generate"])
        assert result.exit_code == EXIT_GENERIC_FAILURE
        assert (isolated_config / "web" / "api" / "generatedClients" / "ActivityService").is_dir()


# ---------------------------------------------------------------------------
# init
# ---------------------------------------------------------------------------


class TestInit:
    def test_creates_config(self, cli_runner: CliRunner, isolated_config: Path) -> None:
        result = cli_runner.invoke(app, ["init"])
        assert result.exit_code == 0, result.output
        data = json.loads((isolated_config / "swaggen.json").read_text(encoding="utf-8"))
        assert data["output_dir"] == "src/clients"
        assert len(data["sources"]) == 2

    def test_custom_path(self, cli_runner: CliRunner, isolated_config: Path) -> None:
        result = cli_runner.invoke(app, ["init", "--path", "conf/clients.json"])
        assert result.exit_code == 0, result.output
        assert (isolated_config / "conf" / "clients.json").is_file()

    def test_refuses_to_overwrite(self, cli_runner: CliRunner, isolated_config: Path) -> None:
        (isolated_config / "swaggen.json").write_text("{}", encoding="utf-8")
        result = cli_runner.invoke(app, ["init"])
        assert result.exit_code == EXIT_GENERIC_FAILURE
        assert "already exists" in result.output
        assert (isolated_config / "swaggen.json").read_text(encoding="utf-8") == "{}"


# ---------------------------------------------------------------------------
# main() entry point
# ---------------------------------------------------------------------------


@pytest.fixture
def no_signal_handlers():
    with patch("swaggen.app._setup_signal_handlers"):
        yield


@pytest.mark.usefixtures("no_signal_handlers")
class TestMain:
    def test_swaggen_error_maps_to_exit_code(self, isolated_config: Path) -> None:
        with patch("swaggen.app.app", side_effect=SpecParseError("bad spec")):
            with pytest.raises(SystemExit) as exc_info:
                main()
        assert exc_info.value.code == EXIT_SPEC_PARSE_ERROR

    def test_unexpected_error_writes_crash_log(self, isolated_config: Path) -> None:
        with patch("swaggen.app.app", side_effect=RuntimeError("boom")):
            with pytest.raises(SystemExit) as exc_info:
                main()
        assert exc_info.value.code == EXIT_GENERIC_FAILURE
        logs = list((isolated_config / "data" / "swaggen" / "logs").glob("crash-*.log"))
        assert len(logs) == 1
        assert "RuntimeError: boom" in logs[0].read_text(encoding="utf-8")
