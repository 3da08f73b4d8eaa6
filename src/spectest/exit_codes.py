"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~spectest.exceptions.SpectestError` subclass.
Shell wrappers can inspect the exit code to tell an unsupported shell apart
from a failed install without parsing stderr.

Example::

    $ spectest completion install --shell tcsh
    $ echo $?
    2   # EXIT_INVALID_USAGE -- tcsh is not a supported shell
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred, or no completion candidates could be produced."""

EXIT_INVALID_USAGE = 2
"""Invalid arguments: unsupported shell, undetectable shell, unknown completion type."""

EXIT_INSTALL_FAILURE = 5
"""Writing or removing a completion script failed (permissions, unwritable path)."""

EXIT_MISSING_MARKER = 6
"""A managed block in a user file had only one of its two sentinel lines."""

EXIT_INTERRUPTED = 130
"""The user pressed Ctrl-C."""
