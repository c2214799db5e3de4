from __future__ import annotations

import logging
import queue
from pathlib import Path
from typing import Iterable

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

logger = logging.getLogger(__name__)


class LibraryWatchHandler(FileSystemEventHandler):
    """Reports directories whose audio files changed; consumers poll ``changes``."""

    def __init__(self, changes: "queue.Queue[Path]", exts: Iterable[str]) -> None:
        super().__init__()
        self.changes = changes
        self.exts = {ext.lower() for ext in exts}

    def on_created(self, event: FileSystemEvent) -> None:
        self._maybe_enqueue(event)

    def on_deleted(self, event: FileSystemEvent) -> None:
        self._maybe_enqueue(event)

    def on_modified(self, event: FileSystemEvent) -> None:
        self._maybe_enqueue(event)

    def on_moved(self, event: FileSystemEvent) -> None:
        self._maybe_enqueue(event)
        dest = getattr(event, "dest_path", None)
        if dest:
            self._enqueue_path(dest)

    def _maybe_enqueue(self, event: FileSystemEvent) -> None:
        if event.is_directory:
            return
        self._enqueue_path(event.src_path)

    def _enqueue_path(self, src: str | bytes) -> None:
        if isinstance(src, bytes):
            src = src.decode("utf-8", errors="replace")
        path = Path(src)
        if path.suffix.lower() in self.exts:
            logger.debug("Queued library change: %s", path.parent)
            self.changes.put_nowait(path.parent)


def start_watcher(
    root: Path,
    changes: "queue.Queue[Path]",
    exts: Iterable[str],
    *,
    recursive: bool = False,
) -> Observer:
    observer = Observer()
    observer.schedule(LibraryWatchHandler(changes, exts), str(root), recursive=recursive)
    observer.daemon = True
    observer.start()
    logger.info("Watching %s for library changes", root)
    return observer


def drain(changes: "queue.Queue[Path]") -> set[Path]:
    seen: set[Path] = set()
    while True:
        try:
            seen.add(changes.get_nowait())
        except queue.Empty:
            return seen
