"""Normalized key tokens shared by the key reader and the state machine."""

from __future__ import annotations

KEY_UP = "UP"
KEY_DOWN = "DOWN"
KEY_LEFT = "LEFT"
KEY_RIGHT = "RIGHT"
KEY_ENTER = "ENTER"
KEY_ESC = "ESC"
KEY_BACKSPACE = "BACKSPACE"
KEY_TAB = "TAB"
KEY_CTRL_C = "CTRL_C"

# Raw reader tokens folded into ENTER by the runtime loop.
KEY_ENTER_CR = "ENTER_CR"
KEY_ENTER_LF = "ENTER_LF"

NAMED_KEYS = frozenset(
    {
        KEY_UP,
        KEY_DOWN,
        KEY_LEFT,
        KEY_RIGHT,
        KEY_ENTER,
        KEY_ESC,
        KEY_BACKSPACE,
        KEY_TAB,
        KEY_CTRL_C,
        KEY_ENTER_CR,
        KEY_ENTER_LF,
    }
)

QUIT_KEYS = ("q", KEY_CTRL_C)
CANCEL_KEYS = (KEY_ESC, KEY_CTRL_C)


def is_printable_key(key: str) -> bool:
    """Return whether ``key`` is literal text rather than a named key."""
    return bool(key) and key not in NAMED_KEYS and key.isprintable()


__all__ = [
    "KEY_UP",
    "KEY_DOWN",
    "KEY_LEFT",
    "KEY_RIGHT",
    "KEY_ENTER",
    "KEY_ESC",
    "KEY_BACKSPACE",
    "KEY_TAB",
    "KEY_CTRL_C",
    "KEY_ENTER_CR",
    "KEY_ENTER_LF",
    "NAMED_KEYS",
    "QUIT_KEYS",
    "CANCEL_KEYS",
    "is_printable_key",
]
