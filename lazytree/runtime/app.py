"""Application context wiring the tree, state machine and change notifier.

``AppContext`` is built once at startup and handed to the dispatch loop. It
is the only owner of tree state; the notifier thread talks to it solely
through its change queue.
"""

from __future__ import annotations

import logging
import sys
import time
from dataclasses import dataclass, field
from pathlib import Path

from ..file_tree_model import DEFAULT_FILE_OPERATIONS, FileOperations, Tree
from ..input import KeyReader, OperationStateMachine
from ..preview import PreviewCache
from ..render import RenderContext, scroll_tree_start, selected_row_index, tree_view_rows
from ..ui_theme import UITheme, resolve_theme
from .config import Settings
from .terminal import TerminalController
from .watch import ChangeNotifier

logger = logging.getLogger(__name__)

STATUS_MESSAGE_SECONDS = 4.0


@dataclass
class AppContext:
    tree: Tree
    machine: OperationStateMachine
    notifier: ChangeNotifier
    theme: UITheme
    preview: PreviewCache | None = None
    tree_start: int = 0
    status_message: str = ""
    status_message_until: float = 0.0
    dirty: bool = True
    _last_size: tuple[int, int] = field(default=(0, 0), repr=False)

    def process_key(self, key: str) -> bool:
        """Feed one key to the state machine; ``OSError`` propagates."""
        self.dirty = True
        return self.machine.handle_key(key)

    def process_node_change(self, path: Path) -> None:
        """Re-read the loaded directory covering ``path``; ``OSError`` propagates."""
        self.tree.refresh_node_by_path(path)
        if self.preview is not None:
            self.preview.invalidate()
        self.dirty = True

    def apply_pending_changes(self) -> int:
        """Drain queued change notifications; failures become status messages."""
        applied = 0
        for path in self.notifier.drain_changes():
            try:
                self.process_node_change(path)
            except OSError as exc:
                self.report_error(exc)
                continue
            applied += 1
        return applied

    def report_error(self, exc: OSError, now: float | None = None) -> None:
        logger.warning("%s", exc)
        self.status_message = str(exc)
        self.status_message_until = (time.monotonic() if now is None else now) + STATUS_MESSAGE_SECONDS
        self.dirty = True

    def expire_status_message(self, now: float) -> None:
        if self.status_message and now >= self.status_message_until:
            self.status_message = ""
            self.status_message_until = 0.0
            self.dirty = True

    def note_terminal_size(self, columns: int, lines: int) -> None:
        if (columns, lines) != self._last_size:
            self._last_size = (columns, lines)
            self.dirty = True

    def render_context(self, columns: int, lines: int) -> RenderContext:
        """Snapshot state for rendering, scrolling the tree to keep the cursor visible."""
        rows = self.tree.visible_rows()
        selected = selected_row_index(rows, self.tree.current_dir)
        self.tree_start = scroll_tree_start(selected, self.tree_start, tree_view_rows(lines), len(rows))
        preview_lines = None
        if self.preview is not None:
            preview_lines = self.preview.lines_for(self.tree.get_selected_child())
        return RenderContext(
            tree=self.tree,
            operation=self.machine.operation,
            input_text=self.machine.input_text,
            width=columns,
            height=lines,
            tree_start=self.tree_start,
            preview_lines=preview_lines,
            status_message=self.status_message,
            theme=self.theme,
        )


def build_app_context(
    root: Path,
    settings: Settings,
    *,
    no_color: bool = False,
    file_ops: FileOperations = DEFAULT_FILE_OPERATIONS,
) -> AppContext:
    """Read the root directory and wire tree, state machine and notifier.

    Raises ``OSError`` when ``root`` cannot be listed.
    """
    tree = Tree.from_path(
        root,
        show_hidden=settings.show_hidden,
        dirs_first=settings.dirs_first,
        file_ops=file_ops,
    )
    notifier = ChangeNotifier(poll_seconds=settings.watch_poll_seconds)
    notifier.watch(tree.root.path)
    machine = OperationStateMachine(tree, watch_directory=notifier.watch)
    theme = resolve_theme(settings.theme, no_color=no_color)
    preview = None
    if settings.preview:
        preview = PreviewCache(style=theme.pygments_style, show_hidden=settings.show_hidden)
    logger.info("opened %s (%d entries)", tree.root.path, len(tree.root.children or ()))
    return AppContext(
        tree=tree,
        machine=machine,
        notifier=notifier,
        theme=theme,
        preview=preview,
    )


def run_app(root: Path, settings: Settings, *, no_color: bool = False) -> None:
    """Run the interactive navigator on ``root`` until the quit key."""
    from .loop import run_main_loop

    context = build_app_context(root, settings, no_color=no_color)
    stdin_fd = sys.stdin.fileno()
    terminal = TerminalController(stdin_fd, sys.stdout.fileno())
    with context.notifier:
        run_main_loop(context, terminal, KeyReader(stdin_fd))
    logger.info("exiting from %s", context.tree.current_dir.path)


__all__ = [
    "AppContext",
    "STATUS_MESSAGE_SECONDS",
    "build_app_context",
    "run_app",
]
