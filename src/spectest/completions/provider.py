"""Live identifiers for dynamic shell completion.

The generated script runs ``spectest __complete --type <category>`` while
the user presses TAB. This module answers those queries by listing the
project tree::

    <root>/spectest/changes/<id>/proposal.md        active change
    <root>/spectest/changes/archive/<id>/           archived change
    <root>/spectest/specs/<id>/spec.md              specification

Everything is read from disk on each call; completion runs in a fresh
process every time, so there is nothing worth caching.
"""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path
from typing import Optional

from spectest.config import find_project_root
from spectest.exceptions import InvalidUsageError

CATEGORY_LABELS: dict[str, str] = {
    "changes": "active change",
    "specs": "specification",
    "archived-changes": "archived change",
}
"""Completion category -> label shown next to each candidate."""

_ARCHIVE_DIRNAME = "archive"


class CompletionProvider:
    """List change and spec identifiers under a project root.

    Args:
        root: Project root (the directory containing ``spectest/``). When
            omitted, it is located from the current directory with
            :func:`~spectest.config.find_project_root`.
    """

    def __init__(self, root: Optional[Path] = None) -> None:
        self.root = Path(root) if root is not None else find_project_root()
        self._base = self.root / "spectest"

    def iter_change_ids(self) -> Iterator[str]:
        """Yield active change ids, sorted."""
        yield from _subdirs_with(self._base / "changes", "proposal.md", exclude=_ARCHIVE_DIRNAME)

    def iter_spec_ids(self) -> Iterator[str]:
        """Yield spec ids, sorted."""
        yield from _subdirs_with(self._base / "specs", "spec.md")

    def iter_archived_change_ids(self) -> Iterator[str]:
        """Yield archived change ids, sorted."""
        yield from _subdirs_with(self._base / "changes" / _ARCHIVE_DIRNAME, None)

    def iter_candidates(self, category: str) -> Iterator[tuple[str, str]]:
        """Yield ``(identifier, label)`` pairs for a completion category.

        Args:
            category: One of the keys of :data:`CATEGORY_LABELS`.

        Raises:
            InvalidUsageError: If *category* is unknown. Raised on the first
                ``next()``, before anything is yielded.
        """
        sources = {
            "changes": self.iter_change_ids,
            "specs": self.iter_spec_ids,
            "archived-changes": self.iter_archived_change_ids,
        }
        if category not in sources:
            raise InvalidUsageError(
                f"Unknown completion type '{category}'. "
                f"Expected one of: {', '.join(CATEGORY_LABELS)}"
            )
        label = CATEGORY_LABELS[category]
        for identifier in sources[category]():
            yield identifier, label


def _subdirs_with(
    parent: Path,
    required: Optional[str],
    exclude: Optional[str] = None,
) -> list[str]:
    """Sorted names of directories in *parent* containing the file *required*.

    A missing *parent* yields an empty list. Hidden directories are skipped.
    """
    if not parent.is_dir():
        return []
    names = []
    for entry in parent.iterdir():
        if not entry.is_dir() or entry.name.startswith(".") or entry.name == exclude:
            continue
        if required is not None and not (entry / required).is_file():
            continue
        names.append(entry.name)
    return sorted(names)
