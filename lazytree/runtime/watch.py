"""Poll-based change notifier for watched directories.

A background thread computes a cheap signature per watched directory and
enqueues the directory path whenever its signature changes. The thread never
touches tree state: the dispatch loop drains the queue and applies changes
itself, one at a time.
"""

from __future__ import annotations

import hashlib
import logging
import os
import threading
from collections.abc import Callable
from pathlib import Path
from queue import Empty, Queue

logger = logging.getLogger(__name__)


def _update_digest(digest, token: str) -> None:
    """Append a token plus separator byte to a hash digest."""
    digest.update(token.encode("utf-8", errors="surrogateescape"))
    digest.update(b"\0")


def directory_signature(directory: Path) -> str:
    """Digest a directory's own stat and the metadata of its immediate children."""
    digest = hashlib.blake2b(digest_size=20)
    _update_digest(digest, f"dir:{directory}")
    try:
        st = directory.stat()
    except FileNotFoundError:
        _update_digest(digest, "missing")
        return digest.hexdigest()
    except OSError:
        _update_digest(digest, "error")
        return digest.hexdigest()
    _update_digest(digest, f"mode:{st.st_mode}:{st.st_mtime_ns}")

    children: list[tuple[str, bool, int, int, int]] = []
    try:
        with os.scandir(directory) as entries:
            for child in entries:
                try:
                    child_st = child.stat(follow_symlinks=False)
                except OSError:
                    children.append((child.name, False, 0, 0, 0))
                    continue
                is_dir = child.is_dir(follow_symlinks=False)
                children.append(
                    (child.name, is_dir, child_st.st_mtime_ns, child_st.st_size, child_st.st_mode)
                )
    except OSError:
        _update_digest(digest, "children:error")
        return digest.hexdigest()

    children.sort()
    for name, is_dir, mtime_ns, size, mode in children:
        _update_digest(digest, f"child:{name}:{1 if is_dir else 0}:{mtime_ns}:{size}:{mode}")
    return digest.hexdigest()


class ChangeNotifier:
    """Watch directories on a daemon thread and queue the ones that changed.

    Watching is append-only: directories are never unwatched for the lifetime
    of the notifier.
    """

    def __init__(
        self,
        poll_seconds: float = 0.5,
        signature: Callable[[Path], str] = directory_signature,
    ) -> None:
        self.poll_seconds = poll_seconds
        self._signature = signature
        self._lock = threading.Lock()
        self._watched: dict[Path, str | None] = {}
        self._changes: Queue[Path] = Queue()
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

    def watch(self, path: Path) -> None:
        """Start observing ``path`` from its current state; repeated calls are no-ops."""
        with self._lock:
            if path in self._watched:
                return
        baseline = self._signature(path)
        with self._lock:
            self._watched.setdefault(path, baseline)
        logger.debug("watching %s", path)

    def watched_paths(self) -> list[Path]:
        with self._lock:
            return list(self._watched)

    def poll_once(self) -> list[Path]:
        """Recompute signatures; enqueue and return paths that changed.

        Paths without a recorded baseline only get one.
        """
        changed: list[Path] = []
        for path in self.watched_paths():
            signature = self._signature(path)
            with self._lock:
                previous = self._watched.get(path)
                self._watched[path] = signature
            if previous is not None and previous != signature:
                changed.append(path)
        for path in changed:
            logger.debug("change detected in %s", path)
            self._changes.put(path)
        return changed

    def drain_changes(self) -> list[Path]:
        """Return queued change notifications, collapsing duplicates in order."""
        out: list[Path] = []
        seen: set[Path] = set()
        while True:
            try:
                path = self._changes.get_nowait()
            except Empty:
                break
            if path in seen:
                continue
            seen.add(path)
            out.append(path)
        return out

    def _run(self) -> None:
        while not self._stop_event.wait(self.poll_seconds):
            try:
                self.poll_once()
            except Exception:
                logger.exception("change notifier poll failed")

    def start(self) -> None:
        if self._thread is not None:
            return
        self._thread = threading.Thread(
            target=self._run,
            name="lazytree-change-notifier",
            daemon=True,
        )
        self._thread.start()

    def stop(self) -> None:
        self._stop_event.set()
        thread = self._thread
        if thread is not None:
            thread.join(timeout=max(1.0, self.poll_seconds * 2))
            self._thread = None

    def __enter__(self) -> ChangeNotifier:
        self.start()
        return self

    def __exit__(self, *_exc_info) -> None:
        self.stop()


__all__ = ["ChangeNotifier", "directory_signature"]
