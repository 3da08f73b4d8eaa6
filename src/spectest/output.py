"""Output system with strict stdout/stderr discipline.

Follows `clig.dev <https://clig.dev/>`_ conventions:

* **stdout** -- primary data only: the generated completion script, or the
  tab-separated candidate lines read back by that script. Nothing else may
  ever reach stdout, because the shell parses it.
* **stderr** -- all diagnostics (status, success lines, warnings, errors,
  suggestions).
* **Colour control** -- respects ``NO_COLOR``, ``TERM=dumb``, and the
  ``--no-color`` CLI flag.

The module exposes two layers:

1. :class:`OutputManager` -- a stateful object holding Rich consoles and
   quiet/verbose flags. Created once in :func:`~spectest.app.main_callback`
   and installed via :func:`set_output`.
2. Module-level convenience functions (:func:`info`, :func:`error`,
   :func:`debug`, etc.) that delegate to the global ``OutputManager``.
"""

from __future__ import annotations

import contextlib
import os
import sys
from typing import Iterator, Optional

from rich.console import Console


class OutputManager:
    """Central manager for all CLI output with stdout/stderr discipline.

    Maintains a Rich :class:`~rich.console.Console` bound to stderr for
    diagnostics. Data written to stdout bypasses Rich entirely so that a
    generated script is emitted byte for byte.

    Args:
        no_color: Disable all colour and Rich markup.
        quiet: Suppress non-essential informational messages on stderr.
        verbose: Enable debug-level messages on stderr.
    """

    def __init__(
        self,
        no_color: bool = False,
        quiet: bool = False,
        verbose: bool = False,
    ) -> None:
        self._no_color = no_color or _should_disable_color()
        self._quiet = quiet
        self._verbose = verbose

        self._stderr = Console(
            file=sys.stderr,
            no_color=self._no_color,
            stderr=True,
            highlight=False,
        )

    @property
    def is_quiet(self) -> bool:
        """Whether quiet mode is enabled."""
        return self._quiet

    @property
    def is_verbose(self) -> bool:
        """Whether verbose mode is enabled."""
        return self._verbose

    # ------------------------------------------------------------------ #
    # Data output (stdout)
    # ------------------------------------------------------------------ #

    def print_data(self, text: str) -> None:
        """Write raw text to stdout, appending a newline only if missing.

        Args:
            text: The string to write, unmodified apart from the trailing
                newline.
        """
        sys.stdout.write(text)
        if not text.endswith("\n"):
            sys.stdout.write("\n")
        sys.stdout.flush()

    # ------------------------------------------------------------------ #
    # Diagnostics (stderr)
    # ------------------------------------------------------------------ #

    def info(self, message: str) -> None:
        """Print an informational message to stderr. Suppressed by ``--quiet``."""
        if not self._quiet:
            self._emit(message)

    def success(self, message: str) -> None:
        """Print a green success message to stderr. Suppressed by ``--quiet``."""
        if not self._quiet:
            self._emit(f"✓ {message}", style="green")

    def warning(self, message: str) -> None:
        """Print a yellow warning to stderr. NOT suppressed by ``--quiet``."""
        if self._no_color:
            self._emit(f"Warning: {message}")
        else:
            self._stderr.print(f"[yellow]Warning:[/yellow] {_escape(message)}")

    def error(self, message: str) -> None:
        """Print a bold-red error to stderr. Never suppressed."""
        if self._no_color:
            self._emit(f"Error: {message}")
        else:
            self._stderr.print(f"[bold red]Error:[/bold red] {_escape(message)}")

    def suggest(self, message: str) -> None:
        """Print a dimmed next-step suggestion to stderr. Suppressed by ``--quiet``."""
        if not self._quiet:
            self._emit(f"→ {message}", style="dim")

    def debug(self, message: str) -> None:
        """Print a debug message to stderr. Only shown when ``--verbose`` is active."""
        if self._verbose:
            self._emit(f"[debug] {message}", style="dim")

    @contextlib.contextmanager
    def status(self, message: str) -> Iterator[None]:
        """Show a spinner on stderr while the ``with`` body runs.

        The spinner is only drawn on an interactive terminal and never in
        quiet or no-colour mode; otherwise the body simply runs.

        Args:
            message: Text shown next to the spinner.
        """
        if self._quiet or self._no_color or not _is_tty():
            yield
            return
        with self._stderr.status(_escape(message)):
            yield

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    def _emit(self, message: str, style: Optional[str] = None) -> None:
        if self._no_color:
            print(message, file=sys.stderr, flush=True)
        elif style:
            self._stderr.print(f"[{style}]{_escape(message)}[/{style}]")
        else:
            self._stderr.print(_escape(message))


# ------------------------------------------------------------------ #
# Module-level helpers
# ------------------------------------------------------------------ #


def _escape(message: str) -> str:
    """Escape Rich markup so paths like ``[foo]`` print literally."""
    from rich.markup import escape

    return escape(message)


def _is_tty() -> bool:
    """Check if stderr is a TTY."""
    return hasattr(sys.stderr, "isatty") and sys.stderr.isatty()


def _should_disable_color() -> bool:
    """Check if color should be disabled per clig.dev.

    Returns True when NO_COLOR env var is set (any value) or TERM=dumb.
    """
    if os.environ.get("NO_COLOR") is not None:
        return True
    if os.environ.get("TERM") == "dumb":
        return True
    return False


# ------------------------------------------------------------------ #
# Global output instance (set during app startup)
# ------------------------------------------------------------------ #

_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """Return the global :class:`OutputManager`, creating a default one lazily."""
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    """Install *output* as the global :class:`OutputManager` instance."""
    global _output
    _output = output


def reset_output() -> None:
    """Reset the global :class:`OutputManager` to ``None``.

    Primarily useful in test suites to ensure a clean state between tests.
    """
    global _output
    _output = None


# ------------------------------------------------------------------ #
# Convenience functions that use the global instance
# ------------------------------------------------------------------ #


def print_data(text: str) -> None:
    """Print raw data to stdout via the global OutputManager."""
    get_output().print_data(text)


def info(message: str) -> None:
    """Print info message to stderr via the global OutputManager."""
    get_output().info(message)


def error(message: str) -> None:
    """Print error to stderr via the global OutputManager."""
    get_output().error(message)


def success(message: str) -> None:
    """Print success message to stderr via the global OutputManager."""
    get_output().success(message)


def warning(message: str) -> None:
    """Print warning to stderr via the global OutputManager."""
    get_output().warning(message)


def suggest(message: str) -> None:
    """Print next-step suggestion to stderr via the global OutputManager."""
    get_output().suggest(message)


def debug(message: str) -> None:
    """Print debug message to stderr via the global OutputManager."""
    get_output().debug(message)


def status(message: str) -> contextlib.AbstractContextManager[None]:
    """Spinner context manager via the global OutputManager."""
    return get_output().status(message)
