"""Shared contract for completion installers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import ClassVar

from spectest.models import InstallationResult, UninstallResult


class CompletionInstaller(ABC):
    """Place a generated completion script into the user's shell environment.

    Installers report every outcome through their result models instead of
    raising, so callers always get a message to show. Steps run strictly in
    sequence and a failed step leaves the effects of earlier steps in place.
    """

    shell: ClassVar[str]

    @abstractmethod
    def install(self, script: str) -> InstallationResult:
        """Write *script* and activate it for the shell."""

    @abstractmethod
    def uninstall(self) -> UninstallResult:
        """Remove everything :meth:`install` added, except backups."""
