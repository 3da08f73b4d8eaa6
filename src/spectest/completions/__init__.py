"""Shell completion for the spectest CLI.

Typical usage::

    from spectest.completions import COMMAND_REGISTRY, CompletionFactory

    generator = CompletionFactory.create_generator("zsh")
    script = generator.generate(COMMAND_REGISTRY)
    result = CompletionFactory.create_installer("zsh").install(script)

Sub-modules:

* :mod:`~spectest.completions.registry` -- the static command tree.
* :mod:`~spectest.completions.generators` -- command tree to script.
* :mod:`~spectest.completions.installers` -- script to shell environment.
* :mod:`~spectest.completions.factory` -- shell name to generator/installer.
* :mod:`~spectest.completions.provider` -- live change and spec ids served
  to the generated script through ``spectest __complete``.
"""

from spectest.completions.factory import CompletionFactory
from spectest.completions.provider import CompletionProvider
from spectest.completions.registry import COMMAND_REGISTRY

__all__ = ["COMMAND_REGISTRY", "CompletionFactory", "CompletionProvider"]
