"""spectest -- shell completion for the spectest CLI.

This package compiles the static spectest command tree into a shell
completion script and installs that script into the user's shell
environment. Installation is idempotent and reversible: a second install
leaves the filesystem unchanged, and an uninstall removes everything the
install added.

Typical workflow::

    spectest completion generate --shell zsh   # print the script
    spectest completion install                # write it and configure ~/.zshrc
    spectest completion uninstall --yes        # undo the install

Modules:
    app: Typer application and CLI entry point.
    models: Pydantic models for the command tree and installer results.
    config: XDG-aware configuration and atomic file writes.
    markers: Managed blocks delimited by sentinel lines in user files.
    shell: Detection of the user's login shell.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting system with Rich support.
    completions: Registry, generators, installers, factory and data provider.
"""

__version__ = "0.4.0"
