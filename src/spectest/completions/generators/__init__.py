"""Completion script generators, one per supported shell.

* :mod:`~spectest.completions.generators.base` -- the
  :class:`CompletionGenerator` contract and the ownership header shared
  with the installers.
* :mod:`~spectest.completions.generators.zsh` -- :class:`ZshGenerator`,
  rendered through the ``templates/zsh.sh.j2`` Jinja2 template.
"""

from spectest.completions.generators.base import (
    CLI_NAME,
    OWNERSHIP_HEADER,
    CompletionGenerator,
)
from spectest.completions.generators.zsh import ZshGenerator

__all__ = ["CLI_NAME", "OWNERSHIP_HEADER", "CompletionGenerator", "ZshGenerator"]
