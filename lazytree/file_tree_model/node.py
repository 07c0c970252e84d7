"""Lazily expanded filesystem node with identity-preserving refresh."""

from __future__ import annotations

import logging
import weakref
from collections.abc import Callable
from pathlib import Path

from .fs import list_directory_entries
from .types import EntryInfo

logger = logging.getLogger(__name__)

DirectoryLister = Callable[[Path], list[EntryInfo]]


class Node:
    """One file or directory tracked in memory.

    ``children`` is ``None`` until the node is expanded; an expanded empty
    directory has ``[]``. Children are owned by this list only, while
    ``parent`` is a weak back-reference so subtrees are released as soon as
    an ancestor drops them.
    """

    __slots__ = ("path", "info", "children", "selected_idx", "_parent", "_lister", "__weakref__")

    def __init__(
        self,
        path: Path,
        info: EntryInfo,
        parent: Node | None = None,
        lister: DirectoryLister | None = None,
    ) -> None:
        self.path = path
        self.info = info
        self.children: list[Node] | None = None
        self.selected_idx = 0
        self._parent = weakref.ref(parent) if parent is not None else None
        if lister is None and parent is not None:
            lister = parent._lister
        self._lister: DirectoryLister = lister if lister is not None else list_directory_entries

    def __repr__(self) -> str:
        state = "unread" if self.children is None else f"{len(self.children)} children"
        return f"Node({str(self.path)!r}, {state})"

    @property
    def name(self) -> str:
        return self.info.name

    @property
    def is_dir(self) -> bool:
        return self.info.is_dir

    @property
    def parent(self) -> Node | None:
        if self._parent is None:
            return None
        return self._parent()

    @property
    def is_expanded(self) -> bool:
        return self.children is not None

    def read_children(self) -> None:
        """Re-list this directory and reconcile children by name.

        Existing child nodes whose name is still listed are reused (their
        metadata is updated, their own children and cursor are kept). Raises
        ``OSError`` when the listing fails, leaving ``children`` untouched.
        """
        if not self.is_dir:
            return
        fresh = self._lister(self.path)

        existing: dict[str, Node] = {}
        if self.children is not None:
            existing = {child.name: child for child in self.children}

        reconciled: list[Node] = []
        for info in fresh:
            child = existing.get(info.name)
            if child is None:
                child = Node(self.path / info.name, info, parent=self)
            else:
                child.info = info
                if not info.is_dir:
                    child.children = None
            reconciled.append(child)

        dropped = len(existing.keys() - {info.name for info in fresh})
        self.children = reconciled
        self.clamp_selection()
        logger.debug("read %s: %d entries, %d dropped", self.path, len(reconciled), dropped)

    def collapse(self) -> None:
        """Release the subtree; the directory becomes unread again."""
        self.children = None

    def clamp_selection(self) -> None:
        count = len(self.children) if self.children else 0
        self.selected_idx = max(0, min(self.selected_idx, count - 1))

    def selected_child(self) -> Node | None:
        if not self.children:
            return None
        return self.children[self.selected_idx]

    def select_first(self) -> None:
        self.selected_idx = 0

    def select_last(self) -> None:
        self.selected_idx = max(0, len(self.children or ()) - 1)

    def child_index(self, name: str) -> int | None:
        """Return the index of the child called ``name``, if listed."""
        for idx, child in enumerate(self.children or ()):
            if child.name == name:
                return idx
        return None


__all__ = ["DirectoryLister", "Node"]
