"""Navigable tree of lazily read nodes plus mark-then-act file actions.

The tree owns the root node and tracks two cursors into it: the current
directory (whose children are listed) and an optional marked node (the source
of a pending copy, move, delete or rename). Filesystem failures surface as
``OSError`` and are never handled here.
"""

from __future__ import annotations

import functools
import logging
from dataclasses import dataclass
from pathlib import Path

from .fs import list_directory_entries, read_entry_info
from .node import DirectoryLister, Node
from .ops import DEFAULT_FILE_OPERATIONS, FileOperations

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TreeRow:
    """One rendered row: a node and its nesting depth below the current directory."""

    node: Node
    depth: int


class Tree:
    def __init__(self, root: Node, file_ops: FileOperations = DEFAULT_FILE_OPERATIONS) -> None:
        if root.children is None:
            raise ValueError("tree root must be expanded before use")
        self.root = root
        self.current_dir = root
        self.marked: Node | None = None
        self.file_ops = file_ops

    @classmethod
    def from_path(
        cls,
        path: Path | str,
        *,
        show_hidden: bool = True,
        dirs_first: bool = False,
        file_ops: FileOperations = DEFAULT_FILE_OPERATIONS,
        lister: DirectoryLister | None = None,
    ) -> Tree:
        """Create and expand the root node for directory ``path``.

        Raises ``NotADirectoryError`` for non-directories and ``OSError`` when
        the directory cannot be read.
        """
        root_path = Path(path)
        info = read_entry_info(root_path)
        if not info.is_dir:
            raise NotADirectoryError(f"{root_path} is not a directory")
        if lister is None:
            lister = functools.partial(
                list_directory_entries,
                show_hidden=show_hidden,
                dirs_first=dirs_first,
            )
        root = Node(root_path, info, lister=lister)
        root.read_children()
        return cls(root, file_ops=file_ops)

    # Selection and navigation

    def get_selected_child(self) -> Node | None:
        return self.current_dir.selected_child()

    def select_next(self) -> None:
        children = self.current_dir.children or ()
        if self.current_dir.selected_idx < len(children) - 1:
            self.current_dir.selected_idx += 1

    def select_previous(self) -> None:
        if self.current_dir.selected_idx > 0:
            self.current_dir.selected_idx -= 1

    def select_first(self) -> None:
        self.current_dir.select_first()

    def select_last(self) -> None:
        self.current_dir.select_last()

    def descend_into_selected(self) -> None:
        """Make the selected directory current, reading it first if needed."""
        selected = self.get_selected_child()
        if selected is None or not selected.is_dir:
            return
        if selected.children is None:
            selected.read_children()
        self.current_dir = selected

    def ascend_to_parent(self) -> None:
        """Make the parent current and point its cursor back at the directory left."""
        leaving = self.current_dir
        parent = leaving.parent
        if parent is None:
            return
        idx = parent.child_index(leaving.name)
        if idx is not None:
            parent.selected_idx = idx
        self.current_dir = parent

    def toggle_expand_selected(self) -> None:
        selected = self.get_selected_child()
        if selected is None:
            return
        if selected.children is not None:
            selected.collapse()
        else:
            selected.read_children()

    # Marking and actions

    def mark_selected(self) -> bool:
        """Mark the selected child; returns ``False`` when nothing is selected."""
        selected = self.get_selected_child()
        if selected is None:
            return False
        self.marked = selected
        return True

    def drop_mark(self) -> None:
        self.marked = None

    def copy_marked_to_current(self) -> None:
        marked = self.marked
        if marked is None:
            return
        self.file_ops.copy(marked.path, self.current_dir.path)
        self.marked = None
        self._refresh(self.current_dir)

    def move_marked_to_current(self) -> None:
        marked = self.marked
        if marked is None:
            return
        source_parent = marked.parent
        self.file_ops.move(marked.path, self.current_dir.path)
        self.marked = None
        self._refresh(self.current_dir)
        if source_parent is not None and source_parent is not self.current_dir:
            self._refresh(source_parent)

    def delete_marked(self) -> None:
        marked = self.marked
        if marked is None:
            return
        source_parent = marked.parent
        self.file_ops.remove(marked.path)
        self.marked = None
        if source_parent is not None:
            self._refresh(source_parent)

    def rename_marked(self, new_name: str) -> None:
        marked = self.marked
        if marked is None:
            return
        source_parent = marked.parent
        self.file_ops.rename(marked.path, new_name)
        self.marked = None
        if source_parent is not None:
            self._refresh(source_parent)

    def create_file_in_current(self, name: str) -> None:
        self.file_ops.make_file(self.current_dir.path, name)
        self._refresh(self.current_dir)

    def create_dir_in_current(self, name: str) -> None:
        self.file_ops.make_directory(self.current_dir.path, name)
        self._refresh(self.current_dir)

    # External changes

    def find_node(self, path: Path | str) -> Node | None:
        """Return the already-loaded node for ``path``, if any."""
        node, remaining = self._walk_loaded(Path(path))
        if node is None or remaining:
            return None
        return node

    def refresh_node_by_path(self, path: Path | str) -> Node | None:
        """Re-read the loaded directory covering ``path``.

        The deepest loaded node at or above ``path`` is located; the nearest
        expanded node from there upwards is refreshed. If that directory no
        longer exists, its parent is refreshed instead. Returns the refreshed
        node, or ``None`` when ``path`` lies outside the tree.
        """
        node, _remaining = self._walk_loaded(Path(path))
        if node is None:
            logger.debug("change outside tree ignored: %s", path)
            return None
        while node.children is None and node.parent is not None:
            node = node.parent

        while True:
            try:
                node.read_children()
            except (FileNotFoundError, NotADirectoryError):
                parent = node.parent
                if parent is None:
                    raise
                logger.debug("%s vanished, refreshing %s", node.path, parent.path)
                node = parent
                continue
            break
        self._reattach_current_dir()
        return node

    def visible_rows(self) -> list[TreeRow]:
        """Flatten ``current_dir``'s children, nesting expanded subdirectories."""
        rows: list[TreeRow] = []

        def walk(directory: Node, depth: int) -> None:
            for child in directory.children or ():
                rows.append(TreeRow(child, depth))
                if child.children is not None:
                    walk(child, depth + 1)

        walk(self.current_dir, 0)
        return rows

    def _refresh(self, node: Node) -> None:
        node.read_children()
        self._reattach_current_dir()

    def _walk_loaded(self, path: Path) -> tuple[Node | None, tuple[str, ...]]:
        """Descend loaded nodes along ``path``; returns the deepest hit and leftover parts."""
        root_path = self.root.path
        try:
            parts = path.relative_to(root_path).parts
        except ValueError:
            try:
                parts = path.resolve().relative_to(root_path.resolve()).parts
            except (OSError, ValueError):
                return None, ()

        node = self.root
        for depth, part in enumerate(parts):
            idx = node.child_index(part) if node.children is not None else None
            if idx is None:
                return node, parts[depth:]
            node = node.children[idx]
        return node, ()

    def _reattach_current_dir(self) -> None:
        """Move ``current_dir`` to its deepest ancestor still attached to the tree.

        Dropped nodes lose their parents (only weakly referenced), so the
        walk goes down from the root by name instead of up.
        """
        current = self.current_dir
        parts = current.path.relative_to(self.root.path).parts
        node = self.root
        for part in parts:
            idx = node.child_index(part) if node.children is not None else None
            if idx is None:
                break
            child = node.children[idx]
            if not child.is_dir:
                break
            node = child
        if node is not current:
            logger.info("current directory %s vanished, moving to %s", current.path, node.path)
            self.current_dir = node
            if node.children is None:
                node.read_children()


__all__ = ["Tree", "TreeRow"]
