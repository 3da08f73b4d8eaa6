"""Map shell names to their generator and installer classes.

Adding a shell is additive: implement a
:class:`~spectest.completions.generators.CompletionGenerator` and a
:class:`~spectest.completions.installers.CompletionInstaller`, then add one
entry to :data:`_SHELLS`.
"""

from __future__ import annotations

from typing import Any

from spectest.completions.generators import CompletionGenerator, ZshGenerator
from spectest.completions.installers import CompletionInstaller, ZshInstaller
from spectest.exceptions import UnsupportedShellError

_SHELLS: dict[str, tuple[type[CompletionGenerator], type[CompletionInstaller]]] = {
    "zsh": (ZshGenerator, ZshInstaller),
}


class CompletionFactory:
    """Create generators and installers by shell name.

    Unknown shells are rejected here, at construction time, so the CLI can
    report the supported list before generating or touching any file.
    """

    @classmethod
    def create_generator(cls, shell: str) -> CompletionGenerator:
        """Return a generator for *shell*.

        Raises:
            UnsupportedShellError: If *shell* is not supported.
        """
        generator_cls, _ = cls._lookup(shell)
        return generator_cls(shells=cls.get_supported_shells())

    @classmethod
    def create_installer(cls, shell: str, **kwargs: Any) -> CompletionInstaller:
        """Return an installer for *shell*.

        Args:
            shell: Shell name.
            **kwargs: Forwarded to the installer constructor (``home``,
                ``environ``, ``config``).

        Raises:
            UnsupportedShellError: If *shell* is not supported.
        """
        _, installer_cls = cls._lookup(shell)
        return installer_cls(**kwargs)

    @classmethod
    def is_supported(cls, shell: str) -> bool:
        return shell in _SHELLS

    @classmethod
    def get_supported_shells(cls) -> list[str]:
        return list(_SHELLS)

    @classmethod
    def _lookup(
        cls, shell: str
    ) -> tuple[type[CompletionGenerator], type[CompletionInstaller]]:
        try:
            return _SHELLS[shell]
        except KeyError:
            raise UnsupportedShellError(shell, cls.get_supported_shells()) from None
