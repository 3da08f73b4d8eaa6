"""Completion installers, one per supported shell.

An installer places a generated script where the shell will find it and
makes the shell load it, keeping every change reversible by
:meth:`~CompletionInstaller.uninstall`.
"""

from spectest.completions.installers.base import CompletionInstaller
from spectest.completions.installers.zsh import ZshInstaller

__all__ = ["CompletionInstaller", "ZshInstaller"]
