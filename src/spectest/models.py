"""Canonical Pydantic models shared across all spectest modules.

This is the single source of truth for data shapes in the project. The
models fall into three groups:

**Command model** -- the static, immutable description of the CLI surface
compiled into completion scripts:
    :class:`PositionalType`, :class:`FlagDefinition`, and
    :class:`CommandDefinition`. All of them are frozen, so a tree built at
    import time cannot be mutated for the lifetime of the process.

**Results** -- one-shot return values of installer operations:
    :class:`InstallationResult`, :class:`UninstallResult`, and
    :class:`ShellDetectionResult`.

**Configuration models** -- serialised as JSON in the user's config
directory: :class:`CompletionConfig` and :class:`GlobalConfig`.
"""

from __future__ import annotations

import enum
import re
from typing import Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field


# --- Command model ---


class PositionalType(str, enum.Enum):
    """Completion strategy for a leaf command's trailing positional arguments.

    The three identifier kinds are resolved at completion time by querying
    ``spectest __complete``; ``PATH`` and ``SHELL`` are resolved by the shell
    itself. A command with no positional type falls back to the shell's
    default completion.
    """

    CHANGE_ID = "change-id"
    SPEC_ID = "spec-id"
    CHANGE_OR_SPEC_ID = "change-or-spec-id"
    PATH = "path"
    SHELL = "shell"


class FlagDefinition(BaseModel):
    """A single ``--flag`` accepted by a command.

    ``values`` only matters when ``takes_value`` is true; without it the
    flag accepts an arbitrary value and no candidates are offered.

    Example::

        FlagDefinition(
            name="type",
            description="Item type",
            takes_value=True,
            values=("change", "spec"),
        )
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(description="Long flag name without leading dashes")
    short: Optional[str] = Field(
        default=None,
        min_length=1,
        max_length=1,
        description="Single-character short alias",
    )
    description: str = ""
    takes_value: bool = False
    values: Optional[tuple[str, ...]] = None


class CommandDefinition(BaseModel):
    """A node in the command tree.

    A node with subcommands is a dispatch node; a node with
    ``accepts_positional`` is a leaf that completes trailing values. When a
    node declares both, subcommand dispatch wins and the positional settings
    are ignored by the generators (see :func:`validate_command_tree`).
    """

    model_config = ConfigDict(frozen=True)

    name: str
    description: str = ""
    flags: tuple[FlagDefinition, ...] = ()
    subcommands: tuple[CommandDefinition, ...] = ()
    accepts_positional: bool = False
    positional_type: Optional[PositionalType] = None

    @property
    def is_dispatch(self) -> bool:
        """Whether this node delegates to subcommands."""
        return len(self.subcommands) > 0


_ILLEGAL_IDENTIFIER_CHARS = re.compile(r"[^A-Za-z0-9_]")


def sanitize_name(name: str) -> str:
    """Make *name* safe to embed in a shell function name.

    Every character outside ``[A-Za-z0-9_]`` becomes ``_``, so ``add-spec``
    and ``add_spec`` sanitize to the same string.
    """
    return _ILLEGAL_IDENTIFIER_CHARS.sub("_", name)


def validate_command_tree(commands: Sequence[CommandDefinition]) -> list[str]:
    """Return authoring problems in a command tree.

    The generators never call this; it exists so the registry (and tests)
    can catch mistakes that would otherwise produce a broken script.

    Detects:

    * siblings whose names collide after :func:`sanitize_name`, which
      would produce two shell functions with the same name;
    * nodes that declare both subcommands and positional completion.

    Args:
        commands: Top-level command definitions.

    Returns:
        Human-readable problem descriptions, empty when the tree is clean.
    """
    problems: list[str] = []
    stack: list[tuple[tuple[str, ...], Sequence[CommandDefinition]]] = [((), commands)]
    while stack:
        path, siblings = stack.pop()
        seen: dict[str, str] = {}
        for cmd in siblings:
            full = " ".join(path + (cmd.name,))
            key = sanitize_name(cmd.name)
            if key in seen:
                problems.append(
                    f"'{full}' collides with '{seen[key]}' after sanitizing to '{key}'"
                )
            else:
                seen[key] = full
            if cmd.is_dispatch and cmd.accepts_positional:
                problems.append(
                    f"'{full}' declares both subcommands and positional completion"
                )
            if cmd.subcommands:
                stack.append((path + (cmd.name,), cmd.subcommands))
    return problems


# --- Results ---


class InstallationResult(BaseModel):
    """Outcome of :meth:`~spectest.completions.installers.CompletionInstaller.install`.

    ``backup_path`` is only set when a foreign file was moved aside.
    ``instructions`` is only set when the shell startup file was not
    configured automatically.
    """

    success: bool
    message: str
    installed_path: Optional[str] = None
    backup_path: Optional[str] = None
    configured: Optional[bool] = None
    instructions: Optional[list[str]] = None


class UninstallResult(BaseModel):
    """Outcome of :meth:`~spectest.completions.installers.CompletionInstaller.uninstall`."""

    success: bool
    message: str


class ShellDetectionResult(BaseModel):
    """Outcome of :func:`~spectest.shell.detect_shell`.

    ``detected`` is the raw shell name found in the environment (if any);
    ``shell`` is only set when that name is a supported shell.
    """

    shell: Optional[str] = None
    detected: Optional[str] = None


# --- Configuration ---


class CompletionConfig(BaseModel):
    """Completion installer settings stored in :class:`GlobalConfig`."""

    auto_configure: bool = Field(
        default=True,
        description="Add a managed block to the shell startup file on install",
    )
    install_dir: Optional[str] = Field(
        default=None,
        description="Override the directory the completion script is written to",
    )


class GlobalConfig(BaseModel):
    """User-wide configuration persisted at ``~/.config/spectest/config.json``.

    Loaded by :func:`~spectest.config.load_global_config`; environment
    variables override it in :func:`~spectest.config.resolve_config`.
    Unknown keys are preserved so newer config files still load.
    """

    model_config = ConfigDict(extra="allow")

    completion: CompletionConfig = Field(default_factory=CompletionConfig)
