"""Right-pane preview of the selected entry.

Files are read up to a byte budget, sanitized against terminal control bytes
and highlighted with Pygments. Directories list their immediate entries.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path

from pygments import highlight
from pygments.formatters import Terminal256Formatter
from pygments.lexers import TextLexer, get_lexer_for_filename
from pygments.util import ClassNotFound

from .file_tree_model import Node, list_directory_entries

logger = logging.getLogger(__name__)

MAX_PREVIEW_BYTES = 64 * 1024
_CONTROL_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]")


def sanitize_terminal_text(source: str) -> str:
    """Escape terminal control bytes to avoid side effects (bell, cursor moves, etc.)."""
    if _CONTROL_RE.search(source) is None:
        return source
    return _CONTROL_RE.sub(lambda match: f"\\x{ord(match.group(0)):02x}", source)


def read_preview_text(path: Path, max_bytes: int = MAX_PREVIEW_BYTES) -> str | None:
    """Return decoded text from the head of ``path``, or ``None`` for binary data."""
    with path.open("rb") as handle:
        data = handle.read(max_bytes)
    if b"\0" in data:
        return None
    return data.decode("utf-8", errors="replace")


def highlight_source(source: str, path: Path, style: str) -> str:
    """Highlight ``source`` for a 256-color terminal, guessing the lexer by name."""
    try:
        lexer = get_lexer_for_filename(path.name, stripnl=False)
    except ClassNotFound:
        lexer = TextLexer(stripnl=False)
    try:
        formatter = Terminal256Formatter(style=style)
    except ClassNotFound:
        logger.debug("unknown pygments style %r, using default", style)
        formatter = Terminal256Formatter()
    return highlight(source, lexer, formatter)


def _directory_preview(path: Path, show_hidden: bool) -> list[str]:
    entries = list_directory_entries(path, show_hidden=show_hidden)
    if not entries:
        return ["(empty)"]
    return [entry.name + ("/" if entry.is_dir else "") for entry in entries]


def build_preview_lines(path: Path, is_dir: bool, style: str, *, show_hidden: bool = True) -> list[str]:
    """Build preview rows for ``path``; an empty ``style`` disables coloring."""
    try:
        if is_dir:
            return _directory_preview(path, show_hidden)
        text = read_preview_text(path)
    except OSError as exc:
        return [f"<{exc.strerror or exc}>"]
    if text is None:
        return ["<binary file>"]
    text = sanitize_terminal_text(text)
    if style:
        text = highlight_source(text, path, style)
    return text.splitlines()


@dataclass
class PreviewCache:
    """Single-slot cache keyed by the previewed node's path and metadata."""

    style: str
    show_hidden: bool = True
    _key: tuple[Path, int | None, int | None] | None = None
    _lines: list[str] = field(default_factory=list)

    def lines_for(self, node: Node | None) -> list[str]:
        if node is None:
            return []
        key = (node.path, node.info.mtime_ns, node.info.size)
        if key != self._key:
            self._lines = build_preview_lines(
                node.path,
                node.is_dir,
                self.style,
                show_hidden=self.show_hidden,
            )
            self._key = key
        return self._lines

    def invalidate(self) -> None:
        self._key = None


__all__ = [
    "MAX_PREVIEW_BYTES",
    "PreviewCache",
    "build_preview_lines",
    "highlight_source",
    "read_preview_text",
    "sanitize_terminal_text",
]
