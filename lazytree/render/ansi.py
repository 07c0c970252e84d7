"""Measuring and clipping of tree rows that may carry SGR color codes."""

from __future__ import annotations

import re
import unicodedata
from collections.abc import Iterator

ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-9;?]*[ -/]*[@-~]")
RESET = "\033[0m"
TAB_STOP = 8


def char_display_width(ch: str, col: int) -> int:
    """Cells taken by ``ch`` when drawn at column ``col``."""
    if ch == "\t":
        return TAB_STOP - col % TAB_STOP
    if unicodedata.combining(ch):
        return 0
    return 2 if unicodedata.east_asian_width(ch) in ("W", "F") else 1


def _tokens(text: str) -> Iterator[tuple[bool, str]]:
    # Yields (is_escape, chunk) pairs in order.
    pos = 0
    for match in ANSI_ESCAPE_RE.finditer(text):
        if match.start() > pos:
            yield False, text[pos : match.start()]
        yield True, match.group(0)
        pos = match.end()
    if pos < len(text):
        yield False, text[pos:]


def display_width(text: str) -> int:
    col = 0
    for is_escape, chunk in _tokens(text):
        if is_escape:
            continue
        for ch in chunk:
            col += char_display_width(ch, col)
    return col


def clip_ansi_line(text: str, max_cols: int) -> str:
    """Cut ``text`` to ``max_cols`` visible cells.

    Escapes before the cut survive untouched; a tab becomes the spaces it
    would occupy, and a wide glyph that would straddle the edge is dropped.
    """
    if max_cols <= 0:
        return ""
    pieces: list[str] = []
    col = 0
    for is_escape, chunk in _tokens(text):
        if is_escape:
            pieces.append(chunk)
            continue
        for ch in chunk:
            cells = char_display_width(ch, col)
            if col + cells > max_cols:
                return "".join(pieces)
            pieces.append(" " * cells if ch == "\t" else ch)
            col += cells
    return "".join(pieces)


def pad_ansi_line(text: str, width: int) -> str:
    """Fit ``text`` to exactly ``width`` cells, resetting style before padding."""
    clipped = clip_ansi_line(text, width)
    fill = " " * max(0, width - display_width(clipped))
    return clipped + RESET + fill if "\x1b" in clipped else clipped + fill


__all__ = [
    "ANSI_ESCAPE_RE",
    "RESET",
    "char_display_width",
    "clip_ansi_line",
    "display_width",
    "pad_ansi_line",
]
