"""Shared test fixtures for spectest.

Provides reusable fixtures for isolated home and config directories, a
sample project tree for the completion data provider, output state
management, and a CLI runner. These fixtures are automatically discovered
by pytest and available to all test modules without explicit imports.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from spectest.output import OutputManager, reset_output, set_output


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches a reference to sys.stderr at creation time.
    When Typer's CliRunner redirects that stream during a test and the test
    finishes, the cached reference becomes stale ("I/O operation on closed
    file"). Resetting forces a fresh manager to be created on next use.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Environment isolation
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration and home to a temporary directory.

    Points HOME and the XDG base directories at subdirectories of tmp_path,
    clears the SPECTEST_* and shell-related environment variables, and
    changes the working directory to tmp_path.

    Returns:
        The fake home directory (``tmp_path / "home"``).
    """
    home = tmp_path / "home"
    home.mkdir()

    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setattr(Path, "home", classmethod(lambda cls: home))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))

    for var in [
        "SPECTEST_COMPLETION_DIR",
        "SPECTEST_COMPLETION_AUTO_CONFIGURE",
        "ZDOTDIR",
        "ZSH",
        "ZSH_CUSTOM",
        "PSModulePath",
    ]:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("SHELL", "/bin/zsh")

    monkeypatch.chdir(tmp_path)
    return home


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """A project tree with two active changes, one archived change and two specs.

    Also contains entries the provider must ignore: a change directory
    without ``proposal.md`` and a spec directory without ``spec.md``.
    """
    root = tmp_path / "project"
    changes = root / "spectest" / "changes"
    specs = root / "spectest" / "specs"

    for change_id in ("add-login", "fix-typo"):
        (changes / change_id).mkdir(parents=True)
        (changes / change_id / "proposal.md").write_text("# Proposal\n")
    (changes / "draft-only").mkdir()
    (changes / "archive" / "2025-01-01-old-change").mkdir(parents=True)

    for spec_id in ("auth", "billing"):
        (specs / spec_id).mkdir(parents=True)
        (specs / spec_id / "spec.md").write_text("# Spec\n")
    (specs / "empty").mkdir()

    return root


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a quiet output manager for tests that don't care about output."""
    output = OutputManager(quiet=True)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner.

    Returns a CliRunner instance that captures stdout/stderr and
    provides a consistent interface for invoking Typer apps in tests.
    """
    from typer.testing import CliRunner

    return CliRunner()
