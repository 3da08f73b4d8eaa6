"""End-to-end tests for the completion commands and the hidden __complete command."""

from __future__ import annotations

from pathlib import Path

import pytest

from spectest.app import app
from spectest.completions.installers.zsh import MARKER_START
from spectest.exit_codes import (
    EXIT_GENERIC_FAILURE,
    EXIT_INSTALL_FAILURE,
    EXIT_INVALID_USAGE,
)


def _script_path(home: Path) -> Path:
    return home / ".zsh" / "completions" / "_spectest"


# ---------------------------------------------------------------------------
# completion generate
# ---------------------------------------------------------------------------


class TestCompletionGenerate:
    @pytest.mark.parametrize(
        "args",
        [["--shell", "zsh"], ["zsh"], ["--shell", "ZSH"], []],
        ids=["option", "argument", "upper-case", "detected"],
    )
    def test_prints_script(self, cli_runner, isolated_config: Path, args: list[str]) -> None:
        result = cli_runner.invoke(app, ["completion", "generate", *args])

        assert result.exit_code == 0, result.output
        assert result.stdout.startswith("#compdef spectest\n")
        assert result.stdout.endswith("compdef _spectest spectest\n")

    def test_unsupported_shell(self, cli_runner, isolated_config: Path) -> None:
        result = cli_runner.invoke(app, ["completion", "generate", "--shell", "bash"])

        assert result.exit_code == EXIT_INVALID_USAGE
        assert "Shell 'bash' is not supported yet" in result.output
        assert "Currently supported: zsh" in result.output
        assert "#compdef" not in result.output

    def test_detected_unsupported_shell(
        self, cli_runner, isolated_config: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("SHELL", "/usr/bin/fish")
        result = cli_runner.invoke(app, ["completion", "generate"])

        assert result.exit_code == EXIT_INVALID_USAGE
        assert "Shell 'fish' is not supported yet" in result.output

    def test_detection_failure(
        self, cli_runner, isolated_config: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.delenv("SHELL", raising=False)
        result = cli_runner.invoke(app, ["completion", "generate"])

        assert result.exit_code == EXIT_INVALID_USAGE
        assert "Could not auto-detect shell" in result.output
        assert "spectest completion generate [SHELL]" in result.output


# ---------------------------------------------------------------------------
# completion install / uninstall
# ---------------------------------------------------------------------------


class TestCompletionInstall:
    def test_install_configures_zshrc(self, cli_runner, isolated_config: Path) -> None:
        zshrc = isolated_config / ".zshrc"
        zshrc.write_text("# mine\n")

        result = cli_runner.invoke(app, ["completion", "install"])

        assert result.exit_code == 0, result.output
        assert "Completion script installed successfully for zsh" in result.output
        assert "Restart your shell or run: exec zsh" in result.output
        assert _script_path(isolated_config).is_file()
        assert MARKER_START in zshrc.read_text()

    def test_install_verbose(self, cli_runner, isolated_config: Path) -> None:
        (isolated_config / ".zshrc").write_text("")

        result = cli_runner.invoke(app, ["completion", "install", "--verbose"])

        assert result.exit_code == 0, result.output
        assert "Installed to:" in result.output
        assert "configured automatically" in result.output

    def test_install_without_zshrc_prints_instructions(
        self, cli_runner, isolated_config: Path
    ) -> None:
        result = cli_runner.invoke(app, ["completion", "install", "zsh"])

        assert result.exit_code == 0, result.output
        assert "To enable completions" in result.output
        assert "autoload -Uz compinit" in result.output
        assert not (isolated_config / ".zshrc").exists()

    def test_install_respects_config_env(
        self, cli_runner, isolated_config: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        target = isolated_config / "custom"
        monkeypatch.setenv("SPECTEST_COMPLETION_DIR", str(target))

        result = cli_runner.invoke(app, ["completion", "install"])

        assert result.exit_code == 0, result.output
        assert (target / "_spectest").is_file()

    def test_install_half_block_fails(self, cli_runner, isolated_config: Path) -> None:
        zshrc = isolated_config / ".zshrc"
        zshrc.write_text(f"{MARKER_START}\n")

        result = cli_runner.invoke(app, ["completion", "install"])

        assert result.exit_code == EXIT_INSTALL_FAILURE
        assert zshrc.read_text() == f"{MARKER_START}\n"

    def test_install_unsupported_shell(self, cli_runner, isolated_config: Path) -> None:
        result = cli_runner.invoke(app, ["completion", "install", "--shell", "tcsh"])

        assert result.exit_code == EXIT_INVALID_USAGE
        assert not _script_path(isolated_config).exists()


class TestCompletionUninstall:
    @pytest.fixture()
    def installed(self, cli_runner, isolated_config: Path) -> Path:
        (isolated_config / ".zshrc").write_text("# mine\n")
        result = cli_runner.invoke(app, ["completion", "install"])
        assert result.exit_code == 0, result.output
        return isolated_config

    def test_uninstall_yes(self, cli_runner, installed: Path) -> None:
        result = cli_runner.invoke(app, ["completion", "uninstall", "--yes"])

        assert result.exit_code == 0, result.output
        assert not _script_path(installed).exists()
        assert (installed / ".zshrc").read_text() == "# mine\n"

    def test_uninstall_declined(self, cli_runner, installed: Path) -> None:
        result = cli_runner.invoke(app, ["completion", "uninstall"], input="n\n")

        assert result.exit_code == 0
        assert "Uninstall cancelled." in result.output
        assert _script_path(installed).exists()

    def test_uninstall_confirmed(self, cli_runner, installed: Path) -> None:
        result = cli_runner.invoke(app, ["completion", "uninstall", "zsh"], input="y\n")

        assert result.exit_code == 0, result.output
        assert not _script_path(installed).exists()

    def test_uninstall_nothing_installed(self, cli_runner, isolated_config: Path) -> None:
        result = cli_runner.invoke(app, ["completion", "uninstall", "-y"])

        assert result.exit_code == EXIT_INSTALL_FAILURE
        assert "not installed" in result.output


# ---------------------------------------------------------------------------
# __complete
# ---------------------------------------------------------------------------


class TestCompleteCommand:
    @pytest.mark.parametrize(
        "category,expected",
        [
            ("changes", "add-login\tactive change\nfix-typo\tactive change\n"),
            ("specs", "auth\tspecification\nbilling\tspecification\n"),
            ("archived-changes", "2025-01-01-old-change\tarchived change\n"),
            ("CHANGES", "add-login\tactive change\nfix-typo\tactive change\n"),
        ],
    )
    def test_lists_candidates(
        self,
        cli_runner,
        project: Path,
        monkeypatch: pytest.MonkeyPatch,
        category: str,
        expected: str,
    ) -> None:
        monkeypatch.chdir(project)
        result = cli_runner.invoke(app, ["__complete", "--type", category])

        assert result.exit_code == 0
        assert result.stdout == expected

    def test_works_from_subdirectory(
        self, cli_runner, project: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        nested = project / "docs"
        nested.mkdir()
        monkeypatch.chdir(nested)
        result = cli_runner.invoke(app, ["__complete", "--type", "specs"])

        assert result.stdout == "auth\tspecification\nbilling\tspecification\n"

    def test_no_candidates(self, cli_runner, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)
        result = cli_runner.invoke(app, ["__complete", "--type", "changes"])

        assert result.exit_code == 0
        assert result.stdout == ""

    def test_unknown_type_is_silent(
        self, cli_runner, project: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.chdir(project)
        result = cli_runner.invoke(app, ["__complete", "--type", "widgets"])

        assert result.exit_code == EXIT_GENERIC_FAILURE
        assert result.stdout == ""

    def test_failure_part_way_prints_nothing(
        self, cli_runner, project: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        class _BrokenProvider:
            def iter_candidates(self, category):
                yield "first", "active change"
                raise PermissionError("denied")

        monkeypatch.setattr(
            "spectest.commands.completion.CompletionProvider", lambda: _BrokenProvider()
        )
        result = cli_runner.invoke(app, ["__complete", "--type", "changes"])

        assert result.exit_code == EXIT_GENERIC_FAILURE
        assert result.stdout == ""

    def test_hidden_from_help(self, cli_runner) -> None:
        result = cli_runner.invoke(app, ["--help"])

        assert result.exit_code == 0
        assert "__complete" not in result.output
        assert "completion" in result.output
