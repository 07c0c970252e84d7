"""Regression tests for raw-key decoding.

Covers ESC timing, arrow sequences, and control-key token mapping.
These tests protect interactive input handling in raw terminal mode.
"""

from __future__ import annotations

import os
import time
import unittest

from lazytree.input import KeyComboBinding, KeyComboRegistry, KeyReader
from lazytree.input.keys import is_printable_key


class KeyReaderTests(unittest.TestCase):
    def setUp(self) -> None:
        self.read_fd, self.write_fd = os.pipe()
        self.reader = KeyReader(self.read_fd)

    def tearDown(self) -> None:
        os.close(self.read_fd)
        os.close(self.write_fd)

    def read_all(self, data: bytes, count: int) -> list[str]:
        os.write(self.write_fd, data)
        return [self.reader.read_key(timeout_ms=20) for _ in range(count)]

    def test_single_escape_returns_esc_without_second_keypress(self) -> None:
        os.write(self.write_fd, b"\x1b")
        started = time.monotonic()
        key = self.reader.read_key(timeout_ms=20)
        elapsed = time.monotonic() - started

        self.assertEqual(key, "ESC")
        self.assertLess(elapsed, 0.2)

    def test_arrow_sequences_are_recognized(self) -> None:
        keys = self.read_all(b"\x1b[A\x1b[B\x1b[C\x1b[D\x1bOA", 5)

        self.assertEqual(keys, ["UP", "DOWN", "RIGHT", "LEFT", "UP"])

    def test_escape_does_not_swallow_following_printable_key(self) -> None:
        keys = self.read_all(b"\x1bj", 2)

        self.assertEqual(keys, ["ESC", "j"])

    def test_control_bytes_map_to_named_tokens(self) -> None:
        keys = self.read_all(b"\x03\t\x7f\x08\r\n", 6)

        self.assertEqual(keys, ["CTRL_C", "TAB", "BACKSPACE", "BACKSPACE", "ENTER_CR", "ENTER_LF"])

    def test_utf8_text_is_decoded_as_one_key(self) -> None:
        keys = self.read_all("é€".encode("utf-8"), 2)

        self.assertEqual(keys, ["é", "€"])

    def test_timeout_returns_empty_string(self) -> None:
        self.assertEqual(self.reader.read_key(timeout_ms=0), "")

    def test_pending_bytes_are_per_reader(self) -> None:
        other_read, other_write = os.pipe()
        try:
            other = KeyReader(other_read)
            os.write(self.write_fd, b"\x1bx")
            self.assertEqual(self.reader.read_key(timeout_ms=20), "ESC")
            self.assertEqual(other.read_key(timeout_ms=0), "")
            self.assertEqual(self.reader.read_key(timeout_ms=0), "x")
        finally:
            os.close(other_read)
            os.close(other_write)


class KeyRegistryTests(unittest.TestCase):
    def test_dispatch_returns_none_for_unbound_and_bool_for_bound(self) -> None:
        calls: list[str] = []
        registry = KeyComboRegistry().register_bindings(
            KeyComboBinding(("a", "A"), lambda: calls.append("a")),
            KeyComboBinding(("q",), lambda: True),
        )

        self.assertIsNone(registry.dispatch("z"))
        self.assertFalse(registry.dispatch("A"))
        self.assertTrue(registry.dispatch("q"))
        self.assertEqual(calls, ["a"])

    def test_printable_key_excludes_named_tokens(self) -> None:
        self.assertTrue(is_printable_key("x"))
        self.assertTrue(is_printable_key("é"))
        self.assertFalse(is_printable_key("ENTER"))
        self.assertFalse(is_printable_key(""))
        self.assertFalse(is_printable_key("\x01"))


if __name__ == "__main__":
    unittest.main()
