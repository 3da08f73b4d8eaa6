"""Tests for the output system.

Covers:
- NO_COLOR / TERM=dumb color disabling
- stdout vs stderr discipline
- print_data writes scripts byte for byte
- Quiet mode suppression rules
- Verbose mode debug output
- Status spinner only on an interactive terminal
- Global instance management
"""

from __future__ import annotations

import pytest

from spectest import output as output_module
from spectest.output import (
    OutputManager,
    _should_disable_color,
    get_output,
    reset_output,
    set_output,
)


# ------------------------------------------------------------------ #
# Fixtures
# ------------------------------------------------------------------ #


@pytest.fixture(autouse=True)
def _reset_global_output():
    """Ensure the global output instance is reset between tests."""
    reset_output()
    yield
    reset_output()


@pytest.fixture()
def non_tty(monkeypatch):
    """Patch stderr.isatty() to return False."""
    monkeypatch.setattr("spectest.output._is_tty", lambda: False)


@pytest.fixture()
def tty(monkeypatch):
    """Patch stderr.isatty() to return True."""
    monkeypatch.setattr("spectest.output._is_tty", lambda: True)


# ------------------------------------------------------------------ #
# NO_COLOR / TERM=dumb detection
# ------------------------------------------------------------------ #


class TestColorDisabling:
    """Test that NO_COLOR and TERM=dumb are respected."""

    def test_no_color_env_disables_color(self, monkeypatch):
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

    def test_no_color_prefixes_error(self, capsys, monkeypatch):
        mgr = OutputManager(no_color=True)
        mgr.error("bad thing")
        assert capsys.readouterr().err == "Error: bad thing\n"


# ------------------------------------------------------------------ #
# stdout vs stderr discipline
# ------------------------------------------------------------------ #


class TestStdoutStderrDiscipline:
    """Data goes to stdout, diagnostics go to stderr."""

    def test_print_data_goes_to_stdout(self, capsys):
        mgr = OutputManager(no_color=True)
        mgr.print_data("hello world")
        captured = capsys.readouterr()
        assert captured.out == "hello world\n"
        assert captured.err == ""

    def test_print_data_keeps_existing_newline(self, capsys):
        mgr = OutputManager(no_color=True)
        mgr.print_data("#compdef x\n")
        assert capsys.readouterr().out == "#compdef x\n"

    def test_print_data_is_not_rich_rendered(self, capsys):
        mgr = OutputManager()
        mgr.print_data("'[desc]' [bold]x[/bold]")
        assert capsys.readouterr().out == "'[desc]' [bold]x[/bold]\n"

    @pytest.mark.parametrize("method", ["info", "success", "warning", "error", "suggest"])
    def test_diagnostics_go_to_stderr(self, capsys, method):
        mgr = OutputManager(no_color=True)
        getattr(mgr, method)("message")
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "message" in captured.err

    def test_markup_in_messages_printed_literally(self, capsys, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.setenv("TERM", "xterm")
        mgr = OutputManager()
        mgr.info("file [x].txt")
        assert "file [x].txt" in capsys.readouterr().err


# ------------------------------------------------------------------ #
# Quiet / verbose
# ------------------------------------------------------------------ #


class TestQuietAndVerbose:
    def test_quiet_suppresses_info_success_suggest(self, capsys):
        mgr = OutputManager(no_color=True, quiet=True)
        mgr.info("i")
        mgr.success("s")
        mgr.suggest("g")
        assert capsys.readouterr().err == ""

    def test_quiet_keeps_errors_and_warnings(self, capsys):
        mgr = OutputManager(no_color=True, quiet=True)
        mgr.error("e")
        mgr.warning("w")
        err = capsys.readouterr().err
        assert "Error: e" in err
        assert "Warning: w" in err

    def test_debug_hidden_by_default(self, capsys):
        OutputManager(no_color=True).debug("details")
        assert capsys.readouterr().err == ""

    def test_debug_shown_when_verbose(self, capsys):
        mgr = OutputManager(no_color=True, verbose=True)
        mgr.debug("details")
        assert capsys.readouterr().err == "[debug] details\n"
        assert mgr.is_verbose is True


# ------------------------------------------------------------------ #
# Status spinner
# ------------------------------------------------------------------ #


class TestStatus:
    def test_body_runs_without_tty(self, capsys, non_tty):
        ran = []
        with OutputManager().status("working"):
            ran.append(True)
        assert ran == [True]
        assert capsys.readouterr().err == ""

    def test_no_spinner_when_quiet(self, tty, monkeypatch):
        mgr = OutputManager(quiet=True)

        def _fail(*args, **kwargs):
            raise AssertionError("spinner must not start")

        monkeypatch.setattr(mgr._stderr, "status", _fail)
        with mgr.status("working"):
            pass

    def test_spinner_on_tty(self, tty, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.setenv("TERM", "xterm")
        mgr = OutputManager()
        started = []

        class _FakeStatus:
            def __enter__(self):
                started.append(True)

            def __exit__(self, *exc):
                return False

        monkeypatch.setattr(mgr._stderr, "status", lambda message: _FakeStatus())
        with mgr.status("working"):
            pass
        assert started == [True]


# ------------------------------------------------------------------ #
# Global instance
# ------------------------------------------------------------------ #


class TestGlobalInstance:
    def test_get_output_creates_default(self):
        assert isinstance(get_output(), OutputManager)
        assert get_output() is get_output()

    def test_set_output(self):
        mgr = OutputManager(quiet=True)
        set_output(mgr)
        assert get_output() is mgr

    def test_reset_output(self):
        set_output(OutputManager(quiet=True))
        reset_output()
        assert get_output().is_quiet is False

    def test_module_functions_delegate(self, capsys):
        set_output(OutputManager(no_color=True))
        output_module.success("done")
        output_module.print_data("data")
        captured = capsys.readouterr()
        assert captured.out == "data\n"
        assert captured.err == "✓ done\n"
