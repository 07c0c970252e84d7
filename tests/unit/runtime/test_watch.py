from __future__ import annotations

import tempfile
import time
import unittest
from pathlib import Path

from lazytree.runtime.watch import ChangeNotifier, directory_signature


class DirectorySignatureTests(unittest.TestCase):
    def test_signature_changes_for_file_add_and_edit(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()

            sig_before = directory_signature(root)
            target = root / "demo.txt"
            target.write_text("a\n", encoding="utf-8")
            sig_after_add = directory_signature(root)
            target.write_text("bbbb\n", encoding="utf-8")
            sig_after_edit = directory_signature(root)

            self.assertNotEqual(sig_before, sig_after_add)
            self.assertNotEqual(sig_after_add, sig_after_edit)

    def test_signature_is_stable_without_changes(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            (root / "a").mkdir()

            self.assertEqual(directory_signature(root), directory_signature(root))

    def test_missing_directory_has_distinct_signature(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve() / "gone"
            root.mkdir()
            present = directory_signature(root)
            root.rmdir()

            self.assertNotEqual(present, directory_signature(root))


class _ScriptedSignature:
    def __init__(self) -> None:
        self.values: dict[Path, str] = {}

    def __call__(self, path: Path) -> str:
        return self.values.get(path, "initial")


class ChangeNotifierTests(unittest.TestCase):
    def test_watch_records_baseline_and_is_idempotent(self) -> None:
        signature = _ScriptedSignature()
        notifier = ChangeNotifier(signature=signature)
        path = Path("/virtual/a")

        notifier.watch(path)
        notifier.watch(path)

        self.assertEqual(notifier.watched_paths(), [path])
        self.assertEqual(notifier.poll_once(), [])

    def test_poll_once_enqueues_changed_paths(self) -> None:
        signature = _ScriptedSignature()
        notifier = ChangeNotifier(signature=signature)
        a = Path("/virtual/a")
        b = Path("/virtual/b")
        notifier.watch(a)
        notifier.watch(b)

        signature.values[b] = "changed"
        self.assertEqual(notifier.poll_once(), [b])
        self.assertEqual(notifier.poll_once(), [])
        self.assertEqual(notifier.drain_changes(), [b])
        self.assertEqual(notifier.drain_changes(), [])

    def test_drain_changes_collapses_duplicates_in_order(self) -> None:
        signature = _ScriptedSignature()
        notifier = ChangeNotifier(signature=signature)
        a = Path("/virtual/a")
        b = Path("/virtual/b")
        notifier.watch(a)
        notifier.watch(b)

        for round_idx in range(3):
            signature.values[a] = f"a{round_idx}"
            signature.values[b] = f"b{round_idx}"
            notifier.poll_once()

        self.assertEqual(notifier.drain_changes(), [a, b])

    def test_background_thread_detects_new_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            notifier = ChangeNotifier(poll_seconds=0.01)
            notifier.watch(root)

            with notifier:
                (root / "new.txt").write_text("x", encoding="utf-8")
                deadline = time.monotonic() + 2.0
                changes: list[Path] = []
                while not changes and time.monotonic() < deadline:
                    changes = notifier.drain_changes()
                    time.sleep(0.01)

            self.assertEqual(changes, [root])
            self.assertIsNone(notifier._thread)

    def test_poll_errors_are_logged_and_thread_keeps_running(self) -> None:
        calls: list[int] = []

        def flaky_signature(path: Path) -> str:
            calls.append(1)
            if len(calls) == 2:
                raise RuntimeError("boom")
            return str(len(calls))

        notifier = ChangeNotifier(poll_seconds=0.01, signature=flaky_signature)
        notifier.watch(Path("/virtual"))
        with self.assertLogs("lazytree.runtime.watch", level="ERROR"):
            with notifier:
                deadline = time.monotonic() + 2.0
                while len(calls) < 4 and time.monotonic() < deadline:
                    time.sleep(0.01)

        self.assertGreaterEqual(len(calls), 4)


if __name__ == "__main__":
    unittest.main()
