"""Completion commands -- generate, install, and remove shell completion.

Provides the ``spectest completion`` sub-command group:

* ``completion generate`` -- print the completion script to stdout.
* ``completion install`` -- write the script and register it with the shell.
* ``completion uninstall`` -- undo what ``install`` did.

It also provides :func:`complete_command`, registered on the root app as the
hidden ``__complete`` command. Generated scripts call it while the user
presses TAB and parse its stdout, so it never writes anything but candidate
lines.

The shell is taken from ``--shell`` (or the positional argument) and
otherwise detected from ``$SHELL``.
"""

from __future__ import annotations

from typing import NoReturn, Optional

import typer

from spectest.completions import COMMAND_REGISTRY, CompletionFactory, CompletionProvider
from spectest.exceptions import (
    InstallationError,
    ShellDetectionError,
    SpectestError,
    UnsupportedShellError,
)
from spectest.exit_codes import EXIT_GENERIC_FAILURE
from spectest.output import (
    debug,
    error,
    get_output,
    info,
    print_data,
    status,
    success,
    suggest,
)
from spectest.shell import detect_shell, normalize_shell


completion_app = typer.Typer(no_args_is_help=True)
"""Typer application for the ``completion`` command group."""

_SHELL_ARGUMENT_HELP = "Shell to use (auto-detected if omitted)."


def _resolve_shell(shell: Optional[str], operation: str) -> str:
    """Return the shell to operate on.

    Args:
        shell: Explicit shell name from the command line, if any.
        operation: Sub-command name, used in the usage hint.

    Raises:
        UnsupportedShellError: If the requested or detected shell is not
            supported.
        ShellDetectionError: If no shell was given and none was detected.
    """
    supported = CompletionFactory.get_supported_shells()
    requested = normalize_shell(shell)

    if requested is not None:
        if not CompletionFactory.is_supported(requested):
            raise UnsupportedShellError(requested, supported)
        return requested

    detection = detect_shell(supported)
    if detection.shell is not None:
        debug(f"Detected shell: {detection.shell}")
        return detection.shell
    if detection.detected is not None:
        raise UnsupportedShellError(detection.detected, supported)
    raise ShellDetectionError(
        "Could not auto-detect shell. Please specify shell explicitly.\n"
        f"Usage: spectest completion {operation} [SHELL]\n"
        f"Currently supported: {', '.join(supported)}"
    )


def _fail(exc: SpectestError) -> NoReturn:
    """Report *exc* on stderr and exit with its code."""
    error(str(exc))
    if isinstance(exc, UnsupportedShellError):
        suggest("Pass --shell zsh to select a supported shell explicitly.")
    raise typer.Exit(code=exc.exit_code)


@completion_app.command("generate")
def completion_generate(
    shell_arg: Optional[str] = typer.Argument(None, metavar="[SHELL]", help=_SHELL_ARGUMENT_HELP),
    shell: Optional[str] = typer.Option(None, "--shell", help=_SHELL_ARGUMENT_HELP),
) -> None:
    """Print the completion script to stdout.

    Useful for inspecting the script or installing it by hand.

    Example::

        spectest completion generate zsh > ~/.zsh/completions/_spectest
    """
    try:
        shell_name = _resolve_shell(shell or shell_arg, "generate")
        generator = CompletionFactory.create_generator(shell_name)
    except SpectestError as exc:
        _fail(exc)

    print_data(generator.generate(COMMAND_REGISTRY))


@completion_app.command("install")
def completion_install(
    shell_arg: Optional[str] = typer.Argument(None, metavar="[SHELL]", help=_SHELL_ARGUMENT_HELP),
    shell: Optional[str] = typer.Option(None, "--shell", help=_SHELL_ARGUMENT_HELP),
    verbose: bool = typer.Option(
        False, "--verbose", help="Show detailed installation output."
    ),
) -> None:
    """Install the completion script and register it with the shell.

    Writes the script to the shell's completion directory and adds a
    managed block to the shell startup file. Running it again refreshes
    the script in place.

    Raises:
        typer.Exit: With code 2 for an unsupported or undetected shell, or
            code 5 if the installation failed.
    """
    try:
        shell_name = _resolve_shell(shell or shell_arg, "install")
        generator = CompletionFactory.create_generator(shell_name)
        installer = CompletionFactory.create_installer(shell_name)
    except SpectestError as exc:
        _fail(exc)

    with status(f"Installing {shell_name} completion script..."):
        script = generator.generate(COMMAND_REGISTRY)
        result = installer.install(script)

    if not result.success:
        _fail(InstallationError(result.message))

    success(result.message)
    if (verbose or get_output().is_verbose) and result.installed_path:
        info(f"  Installed to: {result.installed_path}")
        if result.backup_path:
            info(f"  Backup created: {result.backup_path}")
        if result.configured:
            info("  Shell startup file configured automatically")

    if result.instructions:
        info("")
        for line in result.instructions:
            info(line)
    elif result.configured:
        info("")
        info("Restart your shell or run: exec zsh")


@completion_app.command("uninstall")
def completion_uninstall(
    shell_arg: Optional[str] = typer.Argument(None, metavar="[SHELL]", help=_SHELL_ARGUMENT_HELP),
    shell: Optional[str] = typer.Option(None, "--shell", help=_SHELL_ARGUMENT_HELP),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation prompts."),
) -> None:
    """Remove the completion script and the startup file block.

    Backups made during install are left in place.
    """
    try:
        shell_name = _resolve_shell(shell or shell_arg, "uninstall")
        installer = CompletionFactory.create_installer(shell_name)
    except SpectestError as exc:
        _fail(exc)

    if not yes:
        confirmed = typer.confirm(
            f"Remove spectest {shell_name} completion and its shell configuration?",
            default=False,
        )
        if not confirmed:
            info("Uninstall cancelled.")
            raise typer.Exit()

    with status(f"Uninstalling {shell_name} completion script..."):
        result = installer.uninstall()

    if not result.success:
        _fail(InstallationError(result.message))
    success(result.message)


def complete_command(
    type_: str = typer.Option(
        ...,
        "--type",
        help="Candidate category: changes, specs, or archived-changes.",
    ),
) -> None:
    """Print completion candidates as ``<id><TAB><label>`` lines.

    Called by generated completion scripts. All candidates are collected
    before anything is printed, so a failure part-way produces no output
    rather than a truncated list. Any failure exits with code 1 and prints
    nothing to stdout.
    """
    try:
        provider = CompletionProvider()
        lines = [
            f"{identifier}\t{label}"
            for identifier, label in provider.iter_candidates(type_.strip().lower())
        ]
    except Exception as exc:
        # Shell completion must degrade to "no candidates", never an error.
        debug(f"__complete --type {type_} failed: {exc}")
        raise typer.Exit(code=EXIT_GENERIC_FAILURE)

    if lines:
        print_data("\n".join(lines))
