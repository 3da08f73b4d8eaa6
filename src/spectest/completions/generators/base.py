"""Shared contract for completion script generators."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import ClassVar, Sequence

from spectest.models import CommandDefinition

CLI_NAME = "spectest"
"""External command name every generated script registers itself for."""

OWNERSHIP_HEADER = f"# Auto-generated by {CLI_NAME} - do not edit manually"
"""Line present in every generated script.

Installers look for it to tell a previous spectest install (safe to
overwrite) apart from a foreign file (backed up first).
"""


class CompletionGenerator(ABC):
    """Compile a command tree into a completion script for one shell.

    *shells* lists every shell spectest supports, offered wherever a
    command takes a shell name.

    Implementations must be pure: the same tree always yields byte-identical
    output, and nothing outside the returned string is touched.
    """

    shell: ClassVar[str]

    def __init__(self, shells: Sequence[str] = ()) -> None:
        self.shells = tuple(shells)

    @abstractmethod
    def generate(self, commands: Sequence[CommandDefinition]) -> str:
        """Return the completion script for *commands*."""
