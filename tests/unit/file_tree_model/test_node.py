"""Tests for lazy node expansion and identity-preserving refresh.

Listings are injected through a fake lister so on-disk changes can be
simulated by editing a dict between reads.
"""

from __future__ import annotations

import gc
import unittest
from pathlib import Path

from lazytree.file_tree_model import EntryInfo, Node


class FakeLister:
    def __init__(self, listings: dict[Path, list[EntryInfo]]) -> None:
        self.listings = listings
        self.calls: list[Path] = []

    def __call__(self, path: Path) -> list[EntryInfo]:
        self.calls.append(path)
        if path not in self.listings:
            raise FileNotFoundError(2, "No such file or directory", str(path))
        return list(self.listings[path])


def _dir(name: str) -> EntryInfo:
    return EntryInfo(name, True)


def _file(name: str, size: int = 0) -> EntryInfo:
    return EntryInfo(name, False, size=size)


ROOT = Path("/virtual")


class NodeReadChildrenTests(unittest.TestCase):
    def setUp(self) -> None:
        self.lister = FakeLister(
            {
                ROOT: [_file("a"), _dir("b"), _file("c")],
                ROOT / "b": [_file("inner")],
            }
        )
        self.root = Node(ROOT, _dir("virtual"), lister=self.lister)

    def test_new_node_is_unread_until_read_children(self) -> None:
        self.assertIsNone(self.root.children)
        self.assertFalse(self.root.is_expanded)

        self.root.read_children()

        self.assertEqual([child.name for child in self.root.children], ["a", "b", "c"])
        self.assertTrue(all(child.parent is self.root for child in self.root.children))
        self.assertEqual(self.root.children[1].path, ROOT / "b")

    def test_read_children_on_file_is_noop(self) -> None:
        node = Node(ROOT / "a", _file("a"), lister=self.lister)

        node.read_children()

        self.assertIsNone(node.children)
        self.assertEqual(self.lister.calls, [])

    def test_refresh_without_change_keeps_identity_and_selection(self) -> None:
        self.root.read_children()
        before = list(self.root.children)
        self.root.selected_idx = 2

        self.root.read_children()

        self.assertEqual(len(before), len(self.root.children))
        for old, new in zip(before, self.root.children):
            self.assertIs(old, new)
        self.assertEqual(self.root.selected_idx, 2)

    def test_refresh_after_rename_drops_old_adds_new_and_keeps_matches(self) -> None:
        self.root.read_children()
        b_node = self.root.children[1]
        b_node.read_children()
        b_node.selected_idx = 0
        a_node = self.root.children[0]

        self.lister.listings[ROOT] = [_dir("b"), _file("c"), _file("renamed")]
        self.root.read_children()

        names = [child.name for child in self.root.children]
        self.assertEqual(names, ["b", "c", "renamed"])
        self.assertIs(self.root.children[0], b_node)
        self.assertEqual([child.name for child in b_node.children], ["inner"])
        self.assertNotIn(a_node, self.root.children)

    def test_refresh_updates_metadata_of_reused_child(self) -> None:
        self.root.read_children()
        a_node = self.root.children[0]

        self.lister.listings[ROOT] = [_file("a", size=99), _dir("b"), _file("c")]
        self.root.read_children()

        self.assertIs(self.root.children[0], a_node)
        self.assertEqual(a_node.info.size, 99)

    def test_directory_replaced_by_file_loses_children(self) -> None:
        self.root.read_children()
        b_node = self.root.children[1]
        b_node.read_children()

        self.lister.listings[ROOT] = [_file("a"), _file("b"), _file("c")]
        self.root.read_children()

        self.assertIs(self.root.children[1], b_node)
        self.assertFalse(b_node.is_dir)
        self.assertIsNone(b_node.children)

    def test_refresh_clamps_selection_when_entries_vanish(self) -> None:
        self.root.read_children()
        self.root.selected_idx = 2

        self.lister.listings[ROOT] = [_file("a")]
        self.root.read_children()
        self.assertEqual(self.root.selected_idx, 0)

        self.lister.listings[ROOT] = []
        self.root.read_children()
        self.assertEqual(self.root.children, [])
        self.assertEqual(self.root.selected_idx, 0)
        self.assertIsNone(self.root.selected_child())

    def test_failed_listing_leaves_children_untouched(self) -> None:
        self.root.read_children()
        before = list(self.root.children)

        del self.lister.listings[ROOT]
        with self.assertRaises(FileNotFoundError):
            self.root.read_children()

        self.assertEqual(self.root.children, before)

    def test_collapse_releases_subtree(self) -> None:
        self.root.read_children()

        self.root.collapse()

        self.assertIsNone(self.root.children)

    def test_parent_is_weak_back_reference(self) -> None:
        parent = Node(ROOT, _dir("virtual"), lister=self.lister)
        parent.read_children()
        child = parent.children[0]

        del parent
        gc.collect()

        self.assertIsNone(child.parent)

    def test_child_index_and_select_helpers(self) -> None:
        self.root.read_children()

        self.assertEqual(self.root.child_index("c"), 2)
        self.assertIsNone(self.root.child_index("zzz"))

        self.root.select_last()
        self.assertEqual(self.root.selected_child().name, "c")
        self.root.select_first()
        self.assertEqual(self.root.selected_child().name, "a")

    def test_children_inherit_lister(self) -> None:
        self.root.read_children()
        b_node = self.root.children[1]

        b_node.read_children()

        self.assertEqual(self.lister.calls, [ROOT, ROOT / "b"])


if __name__ == "__main__":
    unittest.main()
