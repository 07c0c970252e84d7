"""Filesystem scanning for tree nodes.

Unlike a preview listing, these helpers raise ``OSError`` when a directory
cannot be read so callers can keep their previous (stale but valid) state.
"""

from __future__ import annotations

import os
import stat
from pathlib import Path

from .types import EntryInfo


def read_entry_info(path: Path) -> EntryInfo:
    """Return ``lstat`` metadata for ``path``; raises ``OSError`` on failure."""
    st = path.lstat()
    is_dir = stat.S_ISDIR(st.st_mode)
    return EntryInfo(
        name=path.name or str(path),
        is_dir=is_dir,
        size=None if is_dir else int(st.st_size),
        mode=int(st.st_mode),
        mtime_ns=int(st.st_mtime_ns),
    )


def sort_entries(entries: list[EntryInfo], dirs_first: bool = False) -> list[EntryInfo]:
    """Order entries by name, optionally grouping directories before files."""
    if dirs_first:
        return sorted(entries, key=lambda item: (not item.is_dir, item.name.casefold(), item.name))
    return sorted(entries, key=lambda item: item.name)


def list_directory_entries(
    directory: Path,
    show_hidden: bool = True,
    dirs_first: bool = False,
) -> list[EntryInfo]:
    """List immediate children of ``directory`` with metadata.

    Entries whose stat fails mid-scan (removed between listing and stat) are
    kept with empty metadata. Failure to open the directory itself propagates.
    """
    entries: list[EntryInfo] = []
    with os.scandir(directory) as scanned:
        for child in scanned:
            name = child.name
            if not show_hidden and name.startswith("."):
                continue
            try:
                st = child.stat(follow_symlinks=False)
            except OSError:
                entries.append(EntryInfo(name=name, is_dir=False))
                continue
            is_dir = stat.S_ISDIR(st.st_mode)
            entries.append(
                EntryInfo(
                    name=name,
                    is_dir=is_dir,
                    size=None if is_dir else int(st.st_size),
                    mode=int(st.st_mode),
                    mtime_ns=int(st.st_mtime_ns),
                )
            )
    return sort_entries(entries, dirs_first=dirs_first)


__all__ = [
    "read_entry_info",
    "sort_entries",
    "list_directory_entries",
]
