"""Low-level terminal input decoding.

Reads raw bytes from stdin and translates them into normalized key tokens.
Handles ESC-sequence timing and multi-byte UTF-8 text.
"""

from __future__ import annotations

import os
import select

from .keys import (
    KEY_BACKSPACE,
    KEY_CTRL_C,
    KEY_DOWN,
    KEY_ENTER_CR,
    KEY_ENTER_LF,
    KEY_ESC,
    KEY_LEFT,
    KEY_RIGHT,
    KEY_TAB,
    KEY_UP,
)

ESC_SEQUENCE_TIMEOUT_MS = 25

_CONTROL_BYTES = {
    b"\x03": KEY_CTRL_C,
    b"\t": KEY_TAB,
    b"\x08": KEY_BACKSPACE,
    b"\x7f": KEY_BACKSPACE,
    b"\r": KEY_ENTER_CR,
    b"\n": KEY_ENTER_LF,
}

_CSI_FINAL_BYTES = {
    b"A": KEY_UP,
    b"B": KEY_DOWN,
    b"C": KEY_RIGHT,
    b"D": KEY_LEFT,
}


class KeyReader:
    """Decode key tokens from one file descriptor.

    Bytes read ahead while probing an ESC sequence are kept per reader and
    returned by the next call.
    """

    def __init__(self, fd: int) -> None:
        self.fd = fd
        self._pending: list[bytes] = []

    def _read_ready_byte(self, timeout_ms: int) -> bytes | None:
        ready, _, _ = select.select([self.fd], [], [], max(0.0, timeout_ms / 1000.0))
        if not ready:
            return None
        ch = os.read(self.fd, 1)
        if not ch:
            return None
        return ch

    def _decode_utf8_tail(self, lead: bytes) -> str:
        """Read continuation bytes for a multi-byte UTF-8 lead byte."""
        first = lead[0]
        if first >= 0xF0:
            expected = 3
        elif first >= 0xE0:
            expected = 2
        elif first >= 0xC0:
            expected = 1
        else:
            expected = 0
        data = lead
        for _ in range(expected):
            nxt = self._read_ready_byte(ESC_SEQUENCE_TIMEOUT_MS)
            if nxt is None:
                break
            data += nxt
        return data.decode("utf-8", errors="replace")

    def read_key(self, timeout_ms: int | None = None) -> str:
        """Return the next key token, or ``""`` when ``timeout_ms`` elapses."""
        if self._pending:
            ch = self._pending.pop(0)
        else:
            if timeout_ms is not None:
                ready, _, _ = select.select([self.fd], [], [], max(0.0, timeout_ms / 1000.0))
                if not ready:
                    return ""
            ch = os.read(self.fd, 1)
            if not ch:
                return ""

        named = _CONTROL_BYTES.get(ch)
        if named is not None:
            return named
        if ch != b"\x1b":
            return self._decode_utf8_tail(ch)

        seq = self._read_ready_byte(ESC_SEQUENCE_TIMEOUT_MS)
        if seq is None:
            return KEY_ESC
        if seq not in {b"[", b"O"}:
            # Plain ESC followed by an unrelated key press.
            self._pending.append(seq)
            return KEY_ESC
        final = self._read_ready_byte(ESC_SEQUENCE_TIMEOUT_MS)
        if final is None:
            return KEY_ESC
        return _CSI_FINAL_BYTES.get(final, KEY_ESC)


__all__ = ["ESC_SEQUENCE_TIMEOUT_MS", "KeyReader"]
