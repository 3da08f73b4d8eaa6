"""Managed blocks delimited by sentinel lines inside user-owned files.

A *marker block* is a run of lines owned by spectest inside a file that
otherwise belongs to the user, such as ``~/.zshrc``::

    # user content
    # >>> spectest completion >>>
    fpath=(~/.zsh/completions $fpath)
    autoload -Uz compinit && compinit
    # <<< spectest completion <<<
    # more user content

Markers are matched as whole lines by exact string comparison, so a marker
quoted inside another line never counts. A file with only one of the two
markers is ambiguous and every operation here refuses to touch it, raising
:class:`~spectest.exceptions.MissingMarkerError` instead.

:func:`append_marker_block` and :func:`remove_marker_block` are exact
inverses: appending and then removing a block returns the original text byte
for byte.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from spectest.config import _atomic_write
from spectest.exceptions import MissingMarkerError


def find_marker_block(
    text: str,
    start: str,
    end: str,
    path: Optional[Path] = None,
) -> Optional[tuple[int, int]]:
    """Locate a marker block in *text*.

    Args:
        text: File content to search.
        start: The start sentinel line, without its newline.
        end: The end sentinel line, without its newline.
        path: File the text came from, used in error messages only.

    Returns:
        ``(begin, finish)`` character offsets where ``text[begin:finish]``
        spans from the first character of the start line to the end of the
        end line (excluding its newline), or ``None`` when neither marker
        is present.

    Raises:
        MissingMarkerError: If only one marker is present, or the end marker
            only appears before the start marker.
    """
    begin = _find_line(text, start)
    finish_at = _find_line(text, end, begin if begin is not None else 0)

    if begin is None and _find_line(text, end) is None:
        return None
    if begin is None:
        raise MissingMarkerError(path, start)
    if finish_at is None:
        raise MissingMarkerError(path, end)
    return begin, finish_at + len(end)


def render_marker_block(start: str, end: str, body: str) -> str:
    """Return the block text: start line, body lines, end line (no trailing newline)."""
    inner = body.rstrip("\n")
    if inner:
        return f"{start}\n{inner}\n{end}"
    return f"{start}\n{end}"


def replace_marker_block(
    text: str,
    start: str,
    end: str,
    body: str,
    path: Optional[Path] = None,
) -> str:
    """Replace the lines between the markers with *body*.

    Raises:
        MissingMarkerError: If either marker is missing (including both).
    """
    span = find_marker_block(text, start, end, path)
    if span is None:
        raise MissingMarkerError(path, start)
    begin, finish = span
    return text[:begin] + render_marker_block(start, end, body) + text[finish:]


def append_marker_block(text: str, start: str, end: str, body: str) -> str:
    """Append a new block to *text*, separated from existing content by a newline."""
    return f"{text}\n{render_marker_block(start, end, body)}\n"


def remove_marker_block(
    text: str,
    start: str,
    end: str,
    path: Optional[Path] = None,
) -> str:
    """Remove the block together with the separator newlines around it.

    The newline after the end marker is removed. The newline before the
    start marker is removed too when it separates the block from the rest
    of the file: at the end of the file, or when the block follows a blank
    line. This makes the function the inverse of
    :func:`append_marker_block` while keeping the lines around a block in
    the middle of a file intact. Text without a block is returned unchanged.

    Raises:
        MissingMarkerError: If only one marker is present.
    """
    span = find_marker_block(text, start, end, path)
    if span is None:
        return text
    begin, finish = span
    if finish < len(text) and text[finish] == "\n":
        finish += 1
    at_eof = finish == len(text)
    if begin > 0 and text[begin - 1] == "\n":
        if at_eof or begin == 1 or text[begin - 2] == "\n":
            begin -= 1
    return text[:begin] + text[finish:]


def update_file_with_markers(path: Path, body: str, start: str, end: str) -> None:
    """Replace the block in an existing file, in place.

    The file is rewritten atomically. When a marker is missing the file is
    left exactly as it was.

    Args:
        path: File to patch.
        body: New content for the lines between the markers.
        start: Start sentinel line.
        end: End sentinel line.

    Raises:
        MissingMarkerError: If the file lacks either marker.
        OSError: If the file cannot be read or written.
    """
    content = path.read_text(encoding="utf-8")
    updated = replace_marker_block(content, start, end, body, path)
    if updated != content:
        _atomic_write(path, updated)


def _find_line(text: str, line: str, offset: int = 0) -> Optional[int]:
    """Return the offset of the first whole line equal to *line*, at or after *offset*."""
    pos = offset
    while True:
        idx = text.find(line, pos)
        if idx == -1:
            return None
        at_line_start = idx == 0 or text[idx - 1] == "\n"
        after = idx + len(line)
        at_line_end = after == len(text) or text[after] in "\r\n"
        if at_line_start and at_line_end:
            return idx
        pos = idx + 1
