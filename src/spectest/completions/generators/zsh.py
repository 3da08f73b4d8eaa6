"""Generate zsh completion scripts from the command tree.

The generated script follows the zsh completion system conventions: a
``#compdef`` line, one ``_arguments``-based function per command, and a
final ``compdef`` registration.

**Algorithm summary**

1. Walk the tree in pre-order, accumulating the name path of each node. The
   path, sanitized and joined with ``_``, becomes the function name
   (``_spectest_change_show``), so every function is unique as long as
   siblings are (see :func:`~spectest.models.validate_command_tree`).
2. Dispatch nodes get a ``_describe``-driven dispatcher one level deeper;
   leaf nodes get one ``_arguments`` spec per flag plus an optional
   positional spec chosen by :class:`~spectest.models.PositionalType`.
3. Dynamic helpers query ``spectest __complete --type <category>`` and feed
   ``id<TAB>label`` lines to ``_describe``.
4. Everything is escaped here and rendered by the ``zsh.sh.j2`` template.

**Escaping** happens in two layers. The completion-spec layer escapes the
characters ``_arguments`` and ``_describe`` treat specially (backslash
first, so later escapes are not doubled). The shell layer then wraps every
fragment in single quotes, writing an embedded quote as ``'\\''``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional, Sequence

from jinja2 import Environment, FileSystemLoader

from spectest.completions.generators.base import (
    CLI_NAME,
    OWNERSHIP_HEADER,
    CompletionGenerator,
)
from spectest.models import (
    CommandDefinition,
    FlagDefinition,
    PositionalType,
    sanitize_name,
)

TEMPLATE_DIR = Path(__file__).parent / "templates"
"""Path to the Jinja2 template directory (``generators/templates/``)."""

_CONTINUATION = " \\\n    "

# (helper suffix, array variable, _describe label, __complete categories)
_DYNAMIC_HELPERS: tuple[tuple[str, str, str, tuple[str, ...]], ...] = (
    ("changes", "changes", "change", ("changes",)),
    ("specs", "specs", "spec", ("specs",)),
    ("items", "items", "item", ("changes", "specs")),
)

_HELPER_FOR_TYPE: dict[PositionalType, str] = {
    PositionalType.CHANGE_ID: "changes",
    PositionalType.SPEC_ID: "specs",
    PositionalType.CHANGE_OR_SPEC_ID: "items",
}


class ZshGenerator(CompletionGenerator):
    """Generates zsh completion scripts for the spectest CLI.

    Args:
        shells: Literal candidates for ``PositionalType.SHELL`` positionals.
        cli_name: External command the script completes.
    """

    shell = "zsh"

    def __init__(
        self,
        shells: Sequence[str] = ("zsh",),
        cli_name: str = CLI_NAME,
    ) -> None:
        super().__init__(shells)
        self.cli_name = cli_name
        self._env = _create_jinja_env()

    def generate(self, commands: Sequence[CommandDefinition]) -> str:
        """Generate the zsh completion script.

        Args:
            commands: Top-level command definitions, in display order.

        Returns:
            The complete script text, ending with a newline.
        """
        template = self._env.get_template("zsh.sh.j2")
        return template.render(**self._build_context(commands))

    # ------------------------------------------------------------------ #
    # Context assembly
    # ------------------------------------------------------------------ #

    def _build_context(self, commands: Sequence[CommandDefinition]) -> dict[str, Any]:
        root_function = f"_{sanitize_name(self.cli_name)}"
        root = {
            "function": root_function,
            "entries": [self._describe_entry(cmd) for cmd in commands],
            "cases": [
                {"pattern": cmd.name, "function": self.function_name((cmd.name,))}
                for cmd in commands
            ],
            "arguments": _CONTINUATION.join(['"1: :->command"', '"*::arg:->args"']),
        }

        functions: list[dict[str, Any]] = []
        # Explicit stack, children pushed in reverse so output stays pre-order.
        stack: list[tuple[tuple[str, ...], CommandDefinition]] = [
            ((cmd.name,), cmd) for cmd in reversed(commands)
        ]
        while stack:
            path, cmd = stack.pop()
            functions.append(self._command_function(path, cmd))
            for sub in reversed(cmd.subcommands):
                stack.append((path + (sub.name,), sub))

        helpers = [
            {
                "function": self.helper_name(suffix),
                "var": var,
                "label": label,
                "categories": categories,
            }
            for suffix, var, label, categories in _DYNAMIC_HELPERS
        ]

        return {
            "cli": self.cli_name,
            "header": OWNERSHIP_HEADER,
            "root": root,
            "functions": functions,
            "helpers": helpers,
        }

    def _command_function(
        self, path: tuple[str, ...], cmd: CommandDefinition
    ) -> dict[str, Any]:
        """Build the template context for one command's completion function."""
        flag_specs = [self.flag_spec(flag) for flag in cmd.flags]

        if cmd.is_dispatch:
            specs = flag_specs + ['"1: :->subcommand"', '"*::arg:->args"']
            return {
                "function": self.function_name(path),
                "dispatch": True,
                "entries": [self._describe_entry(sub) for sub in cmd.subcommands],
                "cases": [
                    {"pattern": sub.name, "function": self.function_name(path + (sub.name,))}
                    for sub in cmd.subcommands
                ],
                "arguments": _CONTINUATION.join(specs),
            }

        specs = list(flag_specs)
        if cmd.accepts_positional:
            specs.append(self.positional_spec(cmd.positional_type))
        return {
            "function": self.function_name(path),
            "dispatch": False,
            "arguments": _CONTINUATION.join(specs) if specs else None,
        }

    def _describe_entry(self, cmd: CommandDefinition) -> str:
        name = escape_description(cmd.name)
        return shell_quote(f"{name}:{escape_description(cmd.description)}")

    # ------------------------------------------------------------------ #
    # Names and specs
    # ------------------------------------------------------------------ #

    def function_name(self, path: Sequence[str]) -> str:
        """Return the completion function name for a command path.

        Example::

            >>> ZshGenerator().function_name(("change", "show"))
            '_spectest_change_show'
        """
        parts = [sanitize_name(self.cli_name), *(sanitize_name(p) for p in path)]
        return "_" + "_".join(parts)

    def helper_name(self, suffix: str) -> str:
        """Return the name of a dynamic completion helper (``_spectest_complete_<suffix>``)."""
        return f"_{sanitize_name(self.cli_name)}_complete_{suffix}"

    def flag_spec(self, flag: FlagDefinition) -> str:
        """Return the ``_arguments`` spec for a flag.

        A flag with a short alias is declared mutually exclusive with its
        long form, so ``--json`` is not offered after ``-j`` was typed::

            '(-r --requirement)'{-r,--requirement}'[Requirement index]:value:'
        """
        body = f"[{escape_description(flag.description)}]"
        if flag.takes_value:
            if flag.values:
                values = " ".join(escape_value(v) for v in flag.values)
                body += f":value:({values})"
            else:
                body += ":value:"

        if flag.short:
            exclusive = shell_quote(f"(-{flag.short} --{flag.name})")
            return f"{exclusive}{{-{flag.short},--{flag.name}}}{shell_quote(body)}"
        return shell_quote(f"--{flag.name}{body}")

    def positional_spec(self, positional_type: Optional[PositionalType]) -> str:
        """Return the ``_arguments`` spec completing trailing positionals."""
        if positional_type in _HELPER_FOR_TYPE:
            helper = self.helper_name(_HELPER_FOR_TYPE[positional_type])
            return shell_quote(f"*: :{helper}")
        if positional_type == PositionalType.PATH:
            return shell_quote("*:path:_files")
        if positional_type == PositionalType.SHELL:
            values = " ".join(escape_value(s) for s in self.shells)
            return shell_quote(f"*:shell:({values})")
        return shell_quote("*: :_default")


# ---------------------------------------------------------------------- #
# Escaping
# ---------------------------------------------------------------------- #


def escape_description(text: str) -> str:
    """Escape characters special to ``_arguments`` and ``_describe`` descriptions.

    Backslash is escaped first so the backslashes inserted for ``[``, ``]``
    and ``:`` are not doubled.
    """
    return (
        text.replace("\\", "\\\\")
        .replace("[", "\\[")
        .replace("]", "\\]")
        .replace(":", "\\:")
    )


def escape_value(value: str) -> str:
    """Escape a literal candidate inside an ``_arguments`` ``(a b c)`` action.

    Spaces separate candidates and parentheses delimit the list, so all
    three are backslash-escaped after backslash itself.
    """
    return (
        value.replace("\\", "\\\\")
        .replace(" ", "\\ ")
        .replace("(", "\\(")
        .replace(")", "\\)")
    )


def shell_quote(fragment: str) -> str:
    """Wrap *fragment* in single quotes, writing embedded quotes as ``'\\''``."""
    return "'" + fragment.replace("'", "'\\''") + "'"


def _create_jinja_env() -> Environment:
    """Create the Jinja2 environment for shell script templates.

    Autoescape is off because the output is shell code, not HTML; all
    escaping is done in Python before rendering. Block trimming keeps the
    template readable without leaking blank lines into the script.
    """
    return Environment(
        loader=FileSystemLoader(str(TEMPLATE_DIR)),
        autoescape=False,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )
