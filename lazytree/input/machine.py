"""Operation state machine driving tree actions from key tokens.

Every key is interpreted against the pending ``Operation``. States that fall
back to ``NOOP`` on an unrecognized key re-dispatch that same key to the
``NOOP`` table within the same step, so for example ``j`` while a delete is
awaiting confirmation both cancels it and moves the selection.

``OSError`` from a tree action drops the mark, resets the machine to ``NOOP``
and is then re-raised; displaying or logging it is up to the caller.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path

from ..file_tree_model import Tree
from .key_registry import KeyComboBinding, KeyComboRegistry
from .keys import (
    CANCEL_KEYS,
    KEY_BACKSPACE,
    KEY_DOWN,
    KEY_ENTER,
    KEY_ESC,
    KEY_LEFT,
    KEY_RIGHT,
    KEY_UP,
    QUIT_KEYS,
    is_printable_key,
)
from .operation import Operation

logger = logging.getLogger(__name__)


class OperationStateMachine:
    """Pending operation plus input buffer, bound to one ``Tree``."""

    def __init__(
        self,
        tree: Tree,
        watch_directory: Callable[[Path], None] | None = None,
    ) -> None:
        self.tree = tree
        self.operation = Operation.NOOP
        self.input_buffer: list[str] = []
        self._watch_directory = watch_directory
        self._watched: set[Path] = set()
        self._state_handlers: dict[Operation, Callable[[str], bool]] = {
            Operation.NOOP: self._handle_noop,
            Operation.COPY: self._handle_copy,
            Operation.MOVE: self._handle_move,
            Operation.DELETE: self._handle_delete,
            Operation.GOTO: self._handle_goto,
            Operation.INSERT: self._handle_insert,
            Operation.INSERT_FILE: self._handle_input,
            Operation.INSERT_DIR: self._handle_input,
            Operation.RENAME: self._handle_input,
        }
        self._noop_bindings = KeyComboRegistry().register_bindings(
            KeyComboBinding(("j", KEY_DOWN), tree.select_next),
            KeyComboBinding(("k", KEY_UP), tree.select_previous),
            KeyComboBinding(("l", KEY_RIGHT), self._descend),
            KeyComboBinding(("h", KEY_LEFT), tree.ascend_to_parent),
            KeyComboBinding(("y",), lambda: self._mark_and_enter(Operation.COPY)),
            KeyComboBinding(("d",), lambda: self._mark_and_enter(Operation.MOVE)),
            KeyComboBinding(("D",), lambda: self._mark_and_enter(Operation.DELETE)),
            KeyComboBinding(("g",), lambda: self._enter(Operation.GOTO)),
            KeyComboBinding(("G",), tree.select_last),
            KeyComboBinding(("i",), self._begin_insert),
            KeyComboBinding(("r",), self._begin_rename),
            KeyComboBinding((KEY_ENTER,), tree.toggle_expand_selected),
            KeyComboBinding((KEY_ESC,), self._cancel_mark),
            KeyComboBinding(QUIT_KEYS, lambda: True),
        )

    @property
    def input_text(self) -> str:
        return "".join(self.input_buffer)

    def handle_key(self, key: str) -> bool:
        """Apply one key token; returns ``True`` when the app should quit."""
        try:
            return self._state_handlers[self.operation](key)
        except OSError:
            logger.debug("%s failed on key %r, resetting", self.operation.name, key)
            self.tree.drop_mark()
            self._reset()
            raise

    def _reset(self) -> None:
        self.operation = Operation.NOOP
        self.input_buffer.clear()

    def _enter(self, operation: Operation) -> None:
        self.operation = operation

    # NOOP

    def _handle_noop(self, key: str) -> bool:
        return bool(self._noop_bindings.dispatch(key))

    def _descend(self) -> None:
        selected = self.tree.get_selected_child()
        self.tree.descend_into_selected()
        if selected is not None and self.tree.current_dir is selected:
            self._request_watch(selected.path)

    def _request_watch(self, path: Path) -> None:
        if path in self._watched:
            return
        self._watched.add(path)
        if self._watch_directory is not None:
            self._watch_directory(path)

    def _mark_and_enter(self, operation: Operation) -> None:
        if self.tree.mark_selected():
            self.operation = operation

    def _begin_insert(self) -> None:
        self.tree.drop_mark()
        self.operation = Operation.INSERT

    def _begin_rename(self) -> None:
        if not self.tree.mark_selected():
            return
        assert self.tree.marked is not None
        self.input_buffer[:] = list(self.tree.marked.name)
        self.operation = Operation.RENAME

    def _cancel_mark(self) -> None:
        self.tree.drop_mark()
        self.operation = Operation.NOOP

    # COPY / MOVE: other keys act as in NOOP while the paste stays pending.

    def _handle_copy(self, key: str) -> bool:
        if key == "p":
            self.tree.copy_marked_to_current()
            self.operation = Operation.NOOP
            return False
        return self._handle_noop(key)

    def _handle_move(self, key: str) -> bool:
        if key == "p":
            self.tree.move_marked_to_current()
            self.operation = Operation.NOOP
            return False
        return self._handle_noop(key)

    # Single-shot prefixes that fall back and re-dispatch.

    def _handle_delete(self, key: str) -> bool:
        if key == "y":
            self.tree.delete_marked()
            self.operation = Operation.NOOP
            return False
        self.tree.drop_mark()
        self.operation = Operation.NOOP
        return self._handle_noop(key)

    def _handle_goto(self, key: str) -> bool:
        self.operation = Operation.NOOP
        if key == "g":
            self.tree.select_first()
            return False
        return self._handle_noop(key)

    def _handle_insert(self, key: str) -> bool:
        if key == "f":
            self.operation = Operation.INSERT_FILE
            return False
        if key == "d":
            self.operation = Operation.INSERT_DIR
            return False
        self.operation = Operation.NOOP
        return self._handle_noop(key)

    # Text input

    def _handle_input(self, key: str) -> bool:
        if key == KEY_ENTER:
            self._commit_input()
        elif key in CANCEL_KEYS:
            self.tree.drop_mark()
            self._reset()
        elif key == KEY_BACKSPACE:
            if self.input_buffer:
                self.input_buffer.pop()
        elif is_printable_key(key):
            self.input_buffer.extend(key)
        return False

    def _commit_input(self) -> None:
        text = self.input_text
        operation = self.operation
        if operation is Operation.INSERT_FILE:
            self.tree.create_file_in_current(text)
        elif operation is Operation.INSERT_DIR:
            self.tree.create_dir_in_current(text)
        elif operation is Operation.RENAME:
            self.tree.rename_marked(text)
        self._reset()


__all__ = ["OperationStateMachine"]
