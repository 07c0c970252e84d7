"""Domain model for the navigable file tree.

This package contains non-UI tree primitives:
- entry metadata and directory listing
- lazily expanded nodes with identity-preserving refresh
- the tree with its current-directory and mark cursors
- filesystem primitives used by mark-then-act actions
"""

from __future__ import annotations

from .types import EntryInfo
from .fs import list_directory_entries, read_entry_info, sort_entries
from .node import DirectoryLister, Node
from .ops import (
    DEFAULT_FILE_OPERATIONS,
    FileOperations,
    copy_entry,
    create_directory,
    create_file,
    move_entry,
    remove_entry,
    rename_entry,
)
from .tree import Tree, TreeRow

__all__ = [
    "EntryInfo",
    "list_directory_entries",
    "read_entry_info",
    "sort_entries",
    "DirectoryLister",
    "Node",
    "FileOperations",
    "DEFAULT_FILE_OPERATIONS",
    "copy_entry",
    "move_entry",
    "remove_entry",
    "rename_entry",
    "create_file",
    "create_directory",
    "Tree",
    "TreeRow",
]
