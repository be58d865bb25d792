"""Regenerate the format block embedded in a C header.

A header carries the generated listing verbatim, from the ``// -----``
line that opens the banner down to the ``// -----`` line after the unused
count.  Everything outside that block is left byte-for-byte alone.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Tuple

from .render import SEPARATOR

BANNER_MARK = "// protospan"


def find_block(lines: List[str]) -> Tuple[int, int]:
    """Return ``(first, last)`` line indices of the embedded block, inclusive."""

    for idx in range(len(lines) - 1):
        if lines[idx].rstrip() == SEPARATOR and lines[idx + 1].startswith(BANNER_MARK):
            for end in range(idx + 2, len(lines)):
                if lines[end].rstrip() == SEPARATOR:
                    return idx, end
            raise ValueError(f"format block opened at line {idx + 1} is never closed")
    raise ValueError("no protospan format block found")


def splice_block(text: str, block: str) -> str:
    """Replace the embedded block in ``text`` with ``block``."""

    lines = text.splitlines(keepends=True)
    first, last = find_block(lines)
    if not block.endswith("\n"):
        block += "\n"
    return "".join(lines[:first]) + block + "".join(lines[last + 1 :])


def is_current(path: Path, contents: str) -> bool:
    try:
        existing = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return False
    return existing == contents


def write_if_changed(path: Path, contents: str) -> bool:
    """Write ``contents`` to ``path`` unless it already holds them.

    Returns True when the file was written.
    """

    if is_current(path, contents):
        return False
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(contents, encoding="utf-8")
    return True


def updated_header(path: Path, block: str) -> str:
    """Return the text of ``path`` with its embedded block regenerated."""

    return splice_block(path.read_text(encoding="utf-8"), block)
