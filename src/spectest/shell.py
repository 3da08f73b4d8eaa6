"""Detection of the user's interactive shell.

The ``completion`` commands accept an explicit ``--shell``; when it is
omitted they fall back to :func:`detect_shell`, which inspects the
environment the way a login session exposes it (``$SHELL`` on POSIX).
"""

from __future__ import annotations

import os
from collections.abc import Mapping, Sequence
from pathlib import PurePath
from typing import Optional

from spectest.models import ShellDetectionResult

KNOWN_SHELLS = ("zsh", "bash", "fish", "powershell", "pwsh", "tcsh", "csh", "ksh", "sh", "nu")


def normalize_shell(shell: Optional[str]) -> Optional[str]:
    """Lower-case and strip a shell name; empty strings become ``None``."""
    if shell is None:
        return None
    normalized = shell.strip().lower()
    return normalized or None


def detect_shell(
    supported: Sequence[str],
    environ: Optional[Mapping[str, str]] = None,
) -> ShellDetectionResult:
    """Detect the user's shell from the environment.

    ``$SHELL`` holds a path such as ``/usr/bin/zsh``; its final component
    names the shell. Versioned binaries like ``zsh-5.9`` and Windows
    executables like ``pwsh.exe`` are reduced to their base name.

    Args:
        supported: Shell names the caller can handle.
        environ: Environment to inspect, ``os.environ`` by default.

    Returns:
        A :class:`~spectest.models.ShellDetectionResult`. ``detected`` is
        set whenever a shell could be identified; ``shell`` only when that
        shell is also in *supported*.
    """
    env = os.environ if environ is None else environ

    detected: Optional[str] = None
    raw = env.get("SHELL", "")
    if raw:
        detected = _shell_from_path(raw)
    elif env.get("PSModulePath"):
        detected = "powershell"

    if detected is None:
        return ShellDetectionResult()
    return ShellDetectionResult(
        shell=detected if detected in supported else None,
        detected=detected,
    )


def _shell_from_path(raw: str) -> Optional[str]:
    """Reduce a shell executable path to a bare shell name."""
    name = PurePath(raw.strip()).name.lower()
    if name.endswith(".exe"):
        name = name[: -len(".exe")]
    if not name:
        return None
    for known in KNOWN_SHELLS:
        if name == known or name.startswith(f"{known}-"):
            return known
    return name
