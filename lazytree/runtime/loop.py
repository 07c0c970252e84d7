"""Main interactive event loop for the terminal UI.

Merges two event sources into one sequential stream: key tokens from the
terminal and change notifications drained from the notifier queue. Exactly
one event is applied to the tree at a time.
"""

from __future__ import annotations

import logging
import shutil
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol

from ..input.keys import KEY_ENTER, KEY_ENTER_CR, KEY_ENTER_LF
from ..render import render_frame
from .app import AppContext

logger = logging.getLogger(__name__)


class KeySource(Protocol):
    def read_key(self, timeout_ms: int | None = None) -> str: ...


class FrameSink(Protocol):
    def raw_mode(self): ...

    def write(self, text: str) -> None: ...


@dataclass(frozen=True)
class RuntimeLoopTiming:
    """Timing constants controlling interactive loop behavior."""

    key_timeout_ms: int = 120


def run_main_loop(
    context: AppContext,
    terminal: FrameSink,
    reader: KeySource,
    timing: RuntimeLoopTiming = RuntimeLoopTiming(),
    terminal_size: Callable[[], tuple[int, int]] | None = None,
) -> None:
    """Run until the state machine reports a quit key.

    Each iteration applies queued change notifications, redraws when state
    changed, then waits briefly for one key. ``OSError`` from either event
    source is shown in the status row and never ends the loop.
    """
    if terminal_size is None:

        def terminal_size() -> tuple[int, int]:
            size = shutil.get_terminal_size((80, 24))
            return size.columns, size.lines

    skip_next_lf = False
    with terminal.raw_mode():
        while True:
            columns, lines = terminal_size()
            context.note_terminal_size(columns, lines)
            context.expire_status_message(time.monotonic())
            context.apply_pending_changes()

            if context.dirty:
                terminal.write(render_frame(context.render_context(columns, lines)))
                context.dirty = False

            try:
                key = reader.read_key(timeout_ms=timing.key_timeout_ms)
            except KeyboardInterrupt:
                continue
            if key == "":
                continue

            # Terminals send CR, LF or CRLF for Enter; fold them into one key.
            if skip_next_lf and key == KEY_ENTER_LF:
                skip_next_lf = False
                continue
            skip_next_lf = key == KEY_ENTER_CR
            if key in {KEY_ENTER_CR, KEY_ENTER_LF}:
                key = KEY_ENTER

            try:
                should_quit = context.process_key(key)
            except OSError as exc:
                context.report_error(exc)
                continue
            if should_quit:
                logger.debug("quit key %r", key)
                break


__all__ = ["RuntimeLoopTiming", "run_main_loop"]
