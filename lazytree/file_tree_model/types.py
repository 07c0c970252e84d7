"""Domain datatypes for filesystem-backed tree nodes."""

from __future__ import annotations

import stat
from dataclasses import dataclass


@dataclass(frozen=True)
class EntryInfo:
    """Metadata observed for one filesystem entry at listing time."""

    name: str
    is_dir: bool
    size: int | None = None
    mode: int = 0
    mtime_ns: int | None = None

    @property
    def is_symlink(self) -> bool:
        return stat.S_ISLNK(self.mode)


__all__ = ["EntryInfo"]
