"""Tests for the output formatting system.

Covers:
- OutputFormat resolution (auto -> rich/plain based on TTY)
- NO_COLOR / TERM=dumb color disabling
- stdout vs stderr discipline
- Quiet and verbose mode rules
- print_json and print_table in each format
- Global instance management and convenience functions
"""

from __future__ import annotations

import json

import pytest

from swaggen import output as output_module
from swaggen.output import (
    OutputFormat,
    OutputManager,
    _should_disable_color,
    get_output,
    reset_output,
    set_output,
)


# ------------------------------------------------------------------ #
# Fixtures
# ------------------------------------------------------------------ #


@pytest.fixture()
def non_tty(monkeypatch):
    """Patch stdout.isatty() to return False."""
    monkeypatch.setattr("swaggen.output._is_tty", lambda: False)


@pytest.fixture()
def tty(monkeypatch):
    """Patch stdout.isatty() to return True."""
    monkeypatch.setattr("swaggen.output._is_tty", lambda: True)


# ------------------------------------------------------------------ #
# OutputFormat resolution
# ------------------------------------------------------------------ #


class TestOutputFormatResolution:
    """Test that AUTO format resolves correctly based on environment."""

    def test_auto_resolves_to_plain_when_not_tty(self, non_tty):
        assert OutputManager(format=OutputFormat.AUTO).format == OutputFormat.PLAIN

    def test_auto_resolves_to_rich_when_tty(self, tty, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.delenv("TERM", raising=False)
        assert OutputManager(format=OutputFormat.AUTO).format == OutputFormat.RICH

    def test_no_color_flag_forces_plain(self, tty, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.delenv("TERM", raising=False)
        mgr = OutputManager(format=OutputFormat.AUTO, no_color=True)
        assert mgr.format == OutputFormat.PLAIN

    def test_explicit_json_stays_json(self, tty):
        assert OutputManager(format=OutputFormat.JSON).format == OutputFormat.JSON


class TestColorDisabling:
    """Test that NO_COLOR and TERM=dumb are respected."""

    def test_no_color_env_any_value(self, monkeypatch):
        monkeypatch.setenv("NO_COLOR", "")
        assert _should_disable_color() is True

    def test_term_dumb_disables_color(self, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.setenv("TERM", "dumb")
        assert _should_disable_color() is True

    def test_normal_term_keeps_color(self, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.setenv("TERM", "xterm-256color")
        assert _should_disable_color() is False


# ------------------------------------------------------------------ #
# stdout vs stderr discipline
# ------------------------------------------------------------------ #


class TestStdoutStderrDiscipline:
    """Data goes to stdout and diagnostics go to stderr."""

    def test_print_data_goes_to_stdout(self, capfd, non_tty):
        OutputManager(format=OutputFormat.PLAIN, no_color=True).print_data("tree")
        captured = capfd.readouterr()
        assert captured.out == "tree\n"
        assert captured.err == ""

    @pytest.mark.parametrize("method", ["info", "success", "warning", "error", "suggest"])
    def test_diagnostics_go_to_stderr(self, capfd, non_tty, method):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True)
        getattr(mgr, method)("message text")
        captured = capfd.readouterr()
        assert captured.out == ""
        assert "message text" in captured.err

    def test_plain_prefixes(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True, verbose=True)
        mgr.warning("w")
        mgr.error("e")
        mgr.debug("d")
        err = capfd.readouterr().err
        assert "Warning: w" in err
        assert "Error: e" in err
        assert "[debug] d" in err

    def test_markup_in_messages_is_escaped(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.PLAIN)
        mgr.info("Record<string, [bold]x[/bold]>")
        assert "[bold]x[/bold]" in capfd.readouterr().err


class TestQuietAndVerbose:
    def test_quiet_suppresses_info_success_suggest(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True, quiet=True)
        mgr.info("a")
        mgr.success("b")
        mgr.suggest("c")
        assert capfd.readouterr().err == ""

    def test_quiet_keeps_warnings_and_errors(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True, quiet=True)
        mgr.warning("careful")
        mgr.error("broken")
        err = capfd.readouterr().err
        assert "careful" in err
        assert "broken" in err

    def test_debug_hidden_without_verbose(self, capfd, non_tty):
        OutputManager(format=OutputFormat.PLAIN, no_color=True).debug("hidden")
        assert capfd.readouterr().err == ""


# ------------------------------------------------------------------ #
# Structured data
# ------------------------------------------------------------------ #


class TestStructuredOutput:
    def test_print_json_plain(self, capfd, non_tty):
        OutputManager(format=OutputFormat.JSON, no_color=True).print_json({"failed": 0})
        assert json.loads(capfd.readouterr().out) == {"failed": 0}

    def test_print_table_plain(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True)
        mgr.print_table(["Total", "Failed"], [["2", "0"]])
        assert capfd.readouterr().out == "Total\tFailed\n2\t0\n"

    def test_print_table_json(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.JSON, no_color=True)
        mgr.print_table(["Total", "Failed"], [["2", "0"]])
        assert json.loads(capfd.readouterr().out) == [{"Total": "2", "Failed": "0"}]

    def test_print_table_rich(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.RICH, no_color=True)
        mgr.print_table(["Total", "Successful"], [["7", "6"]], title="Summary")
        out = capfd.readouterr().out
        assert "Summary" in out
        assert "Successful" in out


# ------------------------------------------------------------------ #
# Global instance
# ------------------------------------------------------------------ #


class TestGlobalInstance:
    def test_get_output_creates_default(self):
        reset_output()
        assert isinstance(get_output(), OutputManager)
        assert get_output() is get_output()

    def test_set_and_reset(self):
        mgr = OutputManager(format=OutputFormat.PLAIN)
        set_output(mgr)
        assert get_output() is mgr
        reset_output()
        assert get_output() is not mgr

    def test_convenience_functions_delegate(self, capfd, non_tty):
        set_output(OutputManager(format=OutputFormat.PLAIN, no_color=True))
        output_module.print_data("out")
        output_module.error("err")
        captured = capfd.readouterr()
        assert captured.out == "out\n"
        assert "Error: err" in captured.err
