"""End-to-end session tests driving the full runtime with scripted keys.

Each test builds a real app context over a temporary directory, runs the
dispatch loop with a fake terminal, and checks the tree and disk afterwards.
"""

from __future__ import annotations

import shutil
import tempfile
import unittest
from contextlib import contextmanager
from pathlib import Path

from lazytree.input import Operation
from lazytree.runtime import RuntimeLoopTiming, Settings, build_app_context, run_main_loop


class _FakeTerminal:
    def __init__(self) -> None:
        self.frames: list[str] = []

    @contextmanager
    def raw_mode(self):
        yield

    def write(self, text: str) -> None:
        self.frames.append(text)


class _ScriptedReader:
    def __init__(self, script: list) -> None:
        self.script = list(script)

    def read_key(self, timeout_ms: int | None = None) -> str:
        if not self.script:
            return "q"
        item = self.script.pop(0)
        if callable(item):
            item()
            return ""
        return item


class SessionTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name).resolve()
        (self.root / "a").write_text("alpha\n", encoding="utf-8")
        (self.root / "b").mkdir()
        self.context = build_app_context(self.root, Settings(), no_color=True)
        self.terminal = _FakeTerminal()

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def run_session(self, *script) -> None:
        run_main_loop(
            self.context,
            self.terminal,
            _ScriptedReader(list(script)),
            timing=RuntimeLoopTiming(key_timeout_ms=0),
            terminal_size=lambda: (100, 12),
        )

    @property
    def tree(self):
        return self.context.tree

    def names(self) -> list[str]:
        return [child.name for child in self.tree.current_dir.children or ()]


class NavigationSessionTests(SessionTestCase):
    def test_descend_then_ascend_restores_selection(self) -> None:
        self.run_session("j", "l", "h", "q")

        self.assertIs(self.tree.current_dir, self.tree.root)
        self.assertEqual(self.tree.get_selected_child().name, "b")
        self.assertEqual(self.context.notifier.watched_paths(), [self.root, self.root / "b"])

    def test_descend_shows_new_current_directory(self) -> None:
        self.run_session("j", "l", "q")

        self.assertEqual(self.tree.current_dir.path, self.root / "b")
        self.assertIn("(empty)", self.terminal.frames[-1])


class FileOperationSessionTests(SessionTestCase):
    def test_insert_file_creates_empty_file_and_lists_it(self) -> None:
        self.run_session("i", "f", *"x.txt", "ENTER_CR", "q")

        self.assertEqual((self.root / "x.txt").read_bytes(), b"")
        self.assertEqual(self.names(), ["a", "b", "x.txt"])
        self.assertIs(self.context.machine.operation, Operation.NOOP)
        self.assertIn("x.txt", self.terminal.frames[-1])

    def test_copy_into_subdirectory(self) -> None:
        self.run_session("y", "j", "l", "p", "q")

        self.assertEqual((self.root / "b" / "a").read_text(encoding="utf-8"), "alpha\n")
        self.assertEqual(self.names(), ["a"])
        self.assertIsNone(self.tree.marked)

    def test_move_then_return_shows_source_without_entry(self) -> None:
        self.run_session("d", "j", "l", "p", "h", "q")

        self.assertEqual(self.names(), ["b"])
        self.assertTrue((self.root / "b" / "a").exists())
        self.assertEqual(self.tree.get_selected_child().name, "b")

    def test_delete_confirm_and_cancel(self) -> None:
        self.run_session("D", "n", "q")
        self.assertTrue((self.root / "a").exists())
        self.assertIsNone(self.tree.marked)

        self.run_session("D", "y", "q")
        self.assertFalse((self.root / "a").exists())
        self.assertEqual(self.names(), ["b"])

    def test_rename_with_seeded_buffer(self) -> None:
        self.run_session("r", *"lpha", "ENTER", "q")

        self.assertTrue((self.root / "alpha").exists())
        self.assertEqual(self.names(), ["alpha", "b"])

    def test_failed_action_is_reported_and_session_continues(self) -> None:
        self.run_session("i", "d", "b", "ENTER", "j", "q")

        self.assertIn("File exists", self.context.status_message)
        self.assertIs(self.context.machine.operation, Operation.NOOP)
        self.assertEqual(self.tree.get_selected_child().name, "b")


    def test_rename_with_slash_is_reported_and_session_continues(self) -> None:
        self.run_session("r", "BACKSPACE", *"x/y", "ENTER", "j", "q")

        self.assertIn("Invalid name", self.context.status_message)
        self.assertIs(self.context.machine.operation, Operation.NOOP)
        self.assertIsNone(self.tree.marked)
        self.assertEqual(self.names(), ["a", "b"])
        self.assertEqual(self.tree.get_selected_child().name, "b")


class ExternalChangeSessionTests(SessionTestCase):
    def test_external_add_is_picked_up(self) -> None:
        def add_file() -> None:
            (self.root / "c").write_text("", encoding="utf-8")
            self.context.notifier.poll_once()

        self.run_session(add_file, "q")

        self.assertEqual(self.names(), ["a", "b", "c"])

    def test_external_removal_of_current_directory_moves_up(self) -> None:
        (self.root / "b" / "inner").write_text("", encoding="utf-8")

        def remove_b() -> None:
            shutil.rmtree(self.root / "b")
            self.context.notifier.poll_once()

        self.run_session("j", "l", remove_b, "q")

        self.assertIs(self.tree.current_dir, self.tree.root)
        self.assertEqual(self.names(), ["a"])
        self.assertEqual(self.context.status_message, "")

    def test_own_action_followed_by_notification_is_idempotent(self) -> None:
        def settle() -> None:
            self.context.notifier.poll_once()

        self.run_session("i", "f", *"n", "ENTER", settle, "q")

        node_ids = [id(child) for child in self.tree.root.children]
        self.assertEqual(self.names(), ["a", "b", "n"])
        self.tree.refresh_node_by_path(self.root)
        self.assertEqual([id(child) for child in self.tree.root.children], node_ids)


if __name__ == "__main__":
    unittest.main()
