"""The static command tree of the spectest CLI.

:data:`COMMAND_REGISTRY` is built once at import time and never mutated.
Declaration order is significant: generated scripts list commands, flags
and subcommands in exactly this order.
"""

from __future__ import annotations

from spectest.completions.factory import CompletionFactory
from spectest.models import CommandDefinition, FlagDefinition, PositionalType

_JSON_FLAG = FlagDefinition(name="json", description="Output as JSON")
_NO_INTERACTIVE_FLAG = FlagDefinition(
    name="no-interactive", description="Disable interactive prompts"
)
_STRICT_FLAG = FlagDefinition(name="strict", description="Enable strict validation mode")
_SHELL_FLAG = FlagDefinition(
    name="shell",
    description="Shell to use (auto-detected if omitted)",
    takes_value=True,
    values=tuple(CompletionFactory.get_supported_shells()),
)

_CHANGE_SUBCOMMANDS = (
    CommandDefinition(
        name="show",
        description="Show a change proposal",
        flags=(
            _JSON_FLAG,
            FlagDefinition(name="deltas-only", description="Show only deltas (JSON only)"),
            _NO_INTERACTIVE_FLAG,
        ),
        accepts_positional=True,
        positional_type=PositionalType.CHANGE_ID,
    ),
    CommandDefinition(
        name="list",
        description="List all active changes",
        flags=(
            _JSON_FLAG,
            FlagDefinition(name="long", description="Show id and title with counts"),
        ),
    ),
    CommandDefinition(
        name="validate",
        description="Validate a change proposal",
        flags=(_STRICT_FLAG, _JSON_FLAG, _NO_INTERACTIVE_FLAG),
        accepts_positional=True,
        positional_type=PositionalType.CHANGE_ID,
    ),
)

_SPEC_SUBCOMMANDS = (
    CommandDefinition(
        name="show",
        description="Show a specification",
        flags=(
            _JSON_FLAG,
            FlagDefinition(name="requirements", description="Show only requirements (JSON only)"),
            FlagDefinition(name="no-scenarios", description="Exclude scenario content (JSON only)"),
            FlagDefinition(
                name="requirement",
                short="r",
                description="Show a specific requirement by 1-based index (JSON only)",
                takes_value=True,
            ),
            _NO_INTERACTIVE_FLAG,
        ),
        accepts_positional=True,
        positional_type=PositionalType.SPEC_ID,
    ),
    CommandDefinition(
        name="list",
        description="List all specifications",
        flags=(
            _JSON_FLAG,
            FlagDefinition(name="long", description="Show id and title with counts"),
        ),
    ),
    CommandDefinition(
        name="validate",
        description="Validate a specification",
        flags=(_STRICT_FLAG, _JSON_FLAG, _NO_INTERACTIVE_FLAG),
        accepts_positional=True,
        positional_type=PositionalType.SPEC_ID,
    ),
)

_COMPLETION_SUBCOMMANDS = (
    CommandDefinition(
        name="generate",
        description="Generate completion script for a shell (outputs to stdout)",
        flags=(_SHELL_FLAG,),
        accepts_positional=True,
        positional_type=PositionalType.SHELL,
    ),
    CommandDefinition(
        name="install",
        description="Install completion script for a shell",
        flags=(
            _SHELL_FLAG,
            FlagDefinition(name="verbose", description="Show detailed installation output"),
        ),
        accepts_positional=True,
        positional_type=PositionalType.SHELL,
    ),
    CommandDefinition(
        name="uninstall",
        description="Uninstall completion script for a shell",
        flags=(
            _SHELL_FLAG,
            FlagDefinition(name="yes", short="y", description="Skip confirmation prompts"),
        ),
        accepts_positional=True,
        positional_type=PositionalType.SHELL,
    ),
)

COMMAND_REGISTRY: tuple[CommandDefinition, ...] = (
    CommandDefinition(
        name="init",
        description="Initialize spectest in your project",
        flags=(
            FlagDefinition(
                name="tools",
                description='Configure AI tools non-interactively (e.g., "all", "none", or comma-separated tool IDs)',
                takes_value=True,
            ),
        ),
        accepts_positional=True,
        positional_type=PositionalType.PATH,
    ),
    CommandDefinition(
        name="update",
        description="Update spectest instruction files",
        accepts_positional=True,
        positional_type=PositionalType.PATH,
    ),
    CommandDefinition(
        name="list",
        description="List items (changes by default). Use --specs to list specs.",
        flags=(
            FlagDefinition(name="specs", description="List specs instead of changes"),
            FlagDefinition(name="changes", description="List changes explicitly (default)"),
        ),
    ),
    CommandDefinition(
        name="view",
        description="Display an interactive dashboard of specs and changes",
    ),
    CommandDefinition(
        name="change",
        description="Manage spectest change proposals",
        subcommands=_CHANGE_SUBCOMMANDS,
    ),
    CommandDefinition(
        name="spec",
        description="Manage and view spectest specifications",
        subcommands=_SPEC_SUBCOMMANDS,
    ),
    CommandDefinition(
        name="show",
        description="Show a change or spec",
        flags=(
            _JSON_FLAG,
            FlagDefinition(
                name="type",
                description="Specify item type when ambiguous",
                takes_value=True,
                values=("change", "spec"),
            ),
            _NO_INTERACTIVE_FLAG,
            FlagDefinition(name="deltas-only", description="Show only deltas (JSON only, change)"),
            FlagDefinition(name="requirements", description="Show only requirements (JSON only, spec)"),
            FlagDefinition(name="no-scenarios", description="Exclude scenario content (JSON only, spec)"),
            FlagDefinition(
                name="requirement",
                short="r",
                description="Show a specific requirement by 1-based index (JSON only, spec)",
                takes_value=True,
            ),
        ),
        accepts_positional=True,
        positional_type=PositionalType.CHANGE_OR_SPEC_ID,
    ),
    CommandDefinition(
        name="validate",
        description="Validate changes and specs",
        flags=(
            FlagDefinition(name="all", description="Validate all changes and specs"),
            FlagDefinition(name="changes", description="Validate all changes"),
            FlagDefinition(name="specs", description="Validate all specs"),
            FlagDefinition(
                name="type",
                description="Specify item type when ambiguous",
                takes_value=True,
                values=("change", "spec"),
            ),
            _STRICT_FLAG,
            _JSON_FLAG,
            FlagDefinition(
                name="concurrency",
                description="Max concurrent validations (defaults to env SPECTEST_CONCURRENCY or 6)",
                takes_value=True,
            ),
            _NO_INTERACTIVE_FLAG,
        ),
        accepts_positional=True,
        positional_type=PositionalType.CHANGE_OR_SPEC_ID,
    ),
    CommandDefinition(
        name="archive",
        description="Archive a completed change and update main specs",
        flags=(
            FlagDefinition(name="yes", short="y", description="Skip confirmation prompts"),
            FlagDefinition(name="skip-specs", description="Skip spec update operations"),
            FlagDefinition(name="no-validate", description="Skip validation (not recommended)"),
        ),
        accepts_positional=True,
        positional_type=PositionalType.CHANGE_ID,
    ),
    CommandDefinition(
        name="completion",
        description="Manage shell completions for spectest CLI",
        subcommands=_COMPLETION_SUBCOMMANDS,
    ),
    CommandDefinition(
        name="config",
        description="Show the effective spectest configuration",
    ),
)
