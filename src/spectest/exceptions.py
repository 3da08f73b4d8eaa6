"""Exception hierarchy for spectest.

All exceptions inherit from :class:`SpectestError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`spectest.exit_codes`.
Command handlers catch ``SpectestError`` and exit with the appropriate code;
:func:`spectest.app.main` is the last line of defence and writes a crash log
for anything else.

Subclass hierarchy::

    SpectestError (exit 1)
    +-- InvalidUsageError       (exit 2)
    |   +-- UnsupportedShellError
    |   +-- ShellDetectionError
    +-- InstallationError       (exit 5)
    +-- MissingMarkerError      (exit 6)
    +-- ConfigError             (exit 1)
"""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

from spectest.exit_codes import (
    EXIT_GENERIC_FAILURE,
    EXIT_INSTALL_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_MISSING_MARKER,
)


class SpectestError(Exception):
    """Base exception for all spectest errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`spectest.exit_codes`.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(SpectestError):
    """Raised for invalid CLI arguments or an unknown completion data type."""

    exit_code = EXIT_INVALID_USAGE


class UnsupportedShellError(InvalidUsageError):
    """Raised when a shell outside the supported set is requested or detected.

    Args:
        shell: The offending shell name.
        supported: The shells that are supported, for the error message.
    """

    def __init__(self, shell: str, supported: Sequence[str]):
        self.shell = shell
        self.supported = list(supported)
        super().__init__(
            f"Shell '{shell}' is not supported yet. "
            f"Currently supported: {', '.join(self.supported)}"
        )


class ShellDetectionError(InvalidUsageError):
    """Raised when no shell was given and none could be detected."""


class InstallationError(SpectestError):
    """Raised when a completion script cannot be written or removed."""

    exit_code = EXIT_INSTALL_FAILURE


class MissingMarkerError(SpectestError):
    """Raised when a managed block is missing its start or end sentinel line.

    The file named by ``path`` is never modified when this is raised.
    """

    exit_code = EXIT_MISSING_MARKER

    def __init__(self, path: Path | str | None, missing: str):
        self.path = Path(path) if path is not None else None
        self.missing = missing
        where = f" in {self.path}" if self.path is not None else ""
        super().__init__(f"Missing spectest marker{where}: {missing!r}")


class ConfigError(SpectestError):
    """Raised for configuration problems (invalid JSON, failed validation)."""

    exit_code = EXIT_GENERIC_FAILURE
