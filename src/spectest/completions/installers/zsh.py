"""Install the generated zsh completion script.

Layout on disk after a fresh install::

    ~/.zsh/completions/_spectest     generated script (or under Oh My Zsh)
    ~/.zshrc                         gains a managed block:

        # >>> spectest completion >>>
        fpath=('/home/me/.zsh/completions' $fpath)
        autoload -Uz compinit && compinit
        # <<< spectest completion <<<

A pre-existing script that spectest did not write is copied to
``_spectest.spectest-backup`` before it is overwritten. There is only ever
one backup; a later conflicting install replaces it.
"""

from __future__ import annotations

import os
import shutil
from collections.abc import Mapping
from pathlib import Path
from typing import Optional

from spectest.completions.generators.base import CLI_NAME, OWNERSHIP_HEADER
from spectest.completions.generators.zsh import shell_quote
from spectest.completions.installers.base import CompletionInstaller
from spectest.config import _atomic_write, resolve_config
from spectest.exceptions import MissingMarkerError
from spectest.markers import (
    append_marker_block,
    find_marker_block,
    remove_marker_block,
    replace_marker_block,
)
from spectest.models import CompletionConfig, InstallationResult, UninstallResult
from spectest.output import debug

MARKER_START = f"# >>> {CLI_NAME} completion >>>"
MARKER_END = f"# <<< {CLI_NAME} completion <<<"

SCRIPT_NAME = f"_{CLI_NAME}"
BACKUP_SUFFIX = f".{CLI_NAME}-backup"

_RESTART_HINT = "Restart your shell or run: exec zsh"


class ZshInstaller(CompletionInstaller):
    """Installs completions for zsh.

    All locations derive from *home* and *environ*, so tests can point the
    installer at a temporary directory without touching the real home.

    Args:
        home: Home directory. Defaults to ``Path.home()``.
        environ: Environment used for ``ZDOTDIR``, ``ZSH`` and ``ZSH_CUSTOM``.
            Defaults to ``os.environ``.
        config: Completion settings. Defaults to the resolved user config.
    """

    shell = "zsh"

    def __init__(
        self,
        home: Optional[Path] = None,
        environ: Optional[Mapping[str, str]] = None,
        config: Optional[CompletionConfig] = None,
    ) -> None:
        self.home = Path(home) if home is not None else Path.home()
        self.environ = os.environ if environ is None else environ
        self.config = config if config is not None else resolve_config().completion

    # ------------------------------------------------------------------ #
    # Locations
    # ------------------------------------------------------------------ #

    @property
    def install_dir(self) -> Path:
        """Directory the script is written to.

        Precedence: configured ``install_dir``, then Oh My Zsh's
        ``custom/completions``, then ``~/.zsh/completions``.
        """
        if self.config.install_dir:
            return self._expand(self.config.install_dir)

        custom = self.environ.get("ZSH_CUSTOM")
        if custom:
            return self._expand(custom) / "completions"
        omz = self.environ.get("ZSH")
        if omz:
            return self._expand(omz) / "custom" / "completions"
        if (self.home / ".oh-my-zsh").is_dir():
            return self.home / ".oh-my-zsh" / "custom" / "completions"
        return self.home / ".zsh" / "completions"

    @property
    def script_path(self) -> Path:
        return self.install_dir / SCRIPT_NAME

    @property
    def backup_path(self) -> Path:
        return self.install_dir / f"{SCRIPT_NAME}{BACKUP_SUFFIX}"

    @property
    def startup_file(self) -> Path:
        """``$ZDOTDIR/.zshrc`` when ``ZDOTDIR`` is set, else ``~/.zshrc``."""
        zdotdir = self.environ.get("ZDOTDIR")
        if zdotdir:
            return self._expand(zdotdir) / ".zshrc"
        return self.home / ".zshrc"

    def _expand(self, value: str) -> Path:
        """Expand ``~`` against :attr:`home`; relative paths are taken from home too."""
        if value == "~":
            return self.home
        if value.startswith("~/"):
            return self.home / value[2:]
        path = Path(value)
        if not path.is_absolute():
            path = self.home / path
        return path

    # ------------------------------------------------------------------ #
    # Install
    # ------------------------------------------------------------------ #

    def install(self, script: str) -> InstallationResult:
        """Install *script* and try to register it in the startup file.

        Returns:
            An :class:`~spectest.models.InstallationResult`. ``success`` is
            false when the script could not be written, or when the startup
            file holds only one of the two managed-block markers. In the
            latter case the script stays installed and the startup file is
            left untouched.
        """
        target = self.script_path
        backup: Optional[str] = None
        try:
            if target.exists() and not _is_owned(target):
                shutil.copyfile(target, self.backup_path)
                backup = str(self.backup_path)
                debug(f"Backed up existing {target} to {backup}")
            target.parent.mkdir(parents=True, exist_ok=True)
            _atomic_write(target, script)
        except OSError as exc:
            return InstallationResult(
                success=False,
                message=f"Failed to install completion script: {exc}",
                backup_path=backup,
            )

        try:
            configured, instructions = self._configure_startup_file()
        except MissingMarkerError as exc:
            return InstallationResult(
                success=False,
                message=(
                    f"{exc}. Completion script was written to {target}, but the "
                    "startup file was left unchanged; remove the leftover "
                    "marker line and run install again."
                ),
                installed_path=str(target),
                backup_path=backup,
                configured=False,
            )

        return InstallationResult(
            success=True,
            message="Completion script installed successfully for zsh",
            installed_path=str(target),
            backup_path=backup,
            configured=configured,
            instructions=instructions,
        )

    def _configure_startup_file(self) -> tuple[bool, Optional[list[str]]]:
        """Add or refresh the managed block in the startup file.

        Returns:
            ``(configured, instructions)``. Instructions are only returned
            when the file was not configured.

        Raises:
            MissingMarkerError: If the file contains only one marker.
        """
        if not self.config.auto_configure:
            return False, self._manual_instructions()

        rc = self.startup_file
        if not rc.is_file():
            debug(f"{rc} does not exist, skipping auto-configuration")
            return False, self._manual_instructions()

        try:
            content = rc.read_text(encoding="utf-8")
            body = self._block_body()
            if find_marker_block(content, MARKER_START, MARKER_END, rc) is not None:
                updated = replace_marker_block(content, MARKER_START, MARKER_END, body, rc)
            elif _references_dir(content, self.install_dir, self.home):
                return False, [
                    f"{rc} already adds {self.install_dir} to fpath; it was left unchanged.",
                    _RESTART_HINT,
                ]
            else:
                updated = append_marker_block(content, MARKER_START, MARKER_END, body)
            if updated != content:
                _atomic_write(rc, updated)
        except (OSError, UnicodeDecodeError) as exc:
            debug(f"Could not configure {rc}: {exc}")
            return False, self._manual_instructions()
        return True, None

    def _block_body(self) -> str:
        return (
            f"fpath=({shell_quote(str(self.install_dir))} $fpath)\n"
            "autoload -Uz compinit && compinit"
        )

    def _manual_instructions(self) -> list[str]:
        return [
            f"To enable completions, add the following to {self.startup_file}:",
            "",
            *(f"  {line}" for line in self._block_body().splitlines()),
            "",
            f"Then: {_RESTART_HINT.lower()}",
        ]

    # ------------------------------------------------------------------ #
    # Uninstall
    # ------------------------------------------------------------------ #

    def uninstall(self) -> UninstallResult:
        """Remove the managed block and the script.

        The script is only deleted when it still carries the ownership
        header. Backups are never restored.
        """
        rc = self.startup_file
        target = self.script_path
        notes: list[str] = []

        try:
            block_removed = False
            if rc.is_file():
                content = rc.read_text(encoding="utf-8")
                updated = remove_marker_block(content, MARKER_START, MARKER_END, rc)
                if updated != content:
                    _atomic_write(rc, updated)
                    block_removed = True
                    notes.append(f"removed configuration from {rc}")

            script_removed = False
            if target.exists():
                if _is_owned(target):
                    target.unlink()
                    script_removed = True
                    notes.insert(0, f"removed {target}")
                else:
                    notes.append(f"left {target} in place because it was not created by {CLI_NAME}")
        except MissingMarkerError as exc:
            return UninstallResult(
                success=False,
                message=f"{exc}. Nothing was changed; fix the managed block by hand.",
            )
        except (OSError, UnicodeDecodeError) as exc:
            return UninstallResult(
                success=False,
                message=f"Failed to uninstall completion script: {exc}",
            )

        if not notes:
            return UninstallResult(success=False, message="Completion script is not installed")
        summary = "; ".join(notes)
        if block_removed or script_removed:
            return UninstallResult(
                success=True,
                message=f"Completion script uninstalled: {summary}",
            )
        return UninstallResult(success=False, message=f"Nothing was removed: {summary}")


# ---------------------------------------------------------------------- #
# Helpers
# ---------------------------------------------------------------------- #


def _is_owned(path: Path) -> bool:
    """Whether *path* carries the ownership header of a generated script."""
    text = path.read_text(encoding="utf-8", errors="replace")
    return OWNERSHIP_HEADER in text.splitlines()


def _references_dir(content: str, directory: Path, home: Path) -> bool:
    """Whether an uncommented ``fpath`` line in *content* mentions *directory*."""
    spellings = {str(directory)}
    try:
        relative = directory.relative_to(home).as_posix()
    except ValueError:
        pass
    else:
        spellings.update({f"~/{relative}", f"$HOME/{relative}", f"${{HOME}}/{relative}"})

    for line in content.splitlines():
        stripped = line.strip()
        if stripped.startswith("#") or "fpath" not in stripped:
            continue
        if any(spelling in stripped for spelling in spellings):
            return True
    return False
