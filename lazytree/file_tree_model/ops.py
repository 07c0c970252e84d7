"""Recursive filesystem primitives used by mark-then-act tree actions.

Each primitive performs exactly one OS-level action and lets the native
error surface. Nothing here checks for name collisions up front; whatever
``shutil``/``os`` do on an existing destination is the behavior.
"""

from __future__ import annotations

import errno
import logging
import os
import shutil
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)


def copy_entry(source: Path, dest_dir: Path) -> Path:
    """Copy ``source`` (file or whole directory) into ``dest_dir``."""
    target = dest_dir / source.name
    logger.info("copy %s -> %s", source, target)
    if source.is_dir() and not source.is_symlink():
        shutil.copytree(source, target, symlinks=True)
    else:
        shutil.copy2(source, target, follow_symlinks=False)
    return target


def move_entry(source: Path, dest_dir: Path) -> Path:
    """Move ``source`` into ``dest_dir``; ``shutil.Error`` is an ``OSError``."""
    logger.info("move %s -> %s", source, dest_dir)
    return Path(shutil.move(str(source), str(dest_dir)))


def remove_entry(path: Path) -> None:
    """Delete ``path``, recursing into real directories."""
    logger.info("remove %s", path)
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    else:
        path.unlink()


def rename_entry(path: Path, new_name: str) -> Path:
    """Rename ``path`` in place to the leaf ``new_name``.

    Names that are not a single path component raise ``EINVAL``.
    """
    if new_name in ("", ".", "..") or os.sep in new_name or (os.altsep and os.altsep in new_name):
        raise OSError(errno.EINVAL, "Invalid name", new_name)
    target = path.parent / new_name
    logger.info("rename %s -> %s", path, target)
    os.rename(path, target)
    return target


def create_file(directory: Path, name: str) -> Path:
    """Create an empty file; raises ``FileExistsError`` on collision."""
    target = directory / name
    logger.info("create file %s", target)
    target.touch(exist_ok=False)
    return target


def create_directory(directory: Path, name: str) -> Path:
    """Create a directory; raises ``FileExistsError`` on collision."""
    target = directory / name
    logger.info("create directory %s", target)
    target.mkdir()
    return target


@dataclass(frozen=True)
class FileOperations:
    """Bundle of filesystem primitives a ``Tree`` delegates to."""

    copy: Callable[[Path, Path], object] = copy_entry
    move: Callable[[Path, Path], object] = move_entry
    remove: Callable[[Path], object] = remove_entry
    rename: Callable[[Path, str], object] = rename_entry
    make_file: Callable[[Path, str], object] = create_file
    make_directory: Callable[[Path, str], object] = create_directory


DEFAULT_FILE_OPERATIONS = FileOperations()


__all__ = [
    "FileOperations",
    "DEFAULT_FILE_OPERATIONS",
    "copy_entry",
    "move_entry",
    "remove_entry",
    "rename_entry",
    "create_file",
    "create_directory",
]
