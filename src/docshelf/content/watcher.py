"""Filesystem watcher that keeps the document cache in sync with disk.

Watching is best effort. When the platform cannot provide file events the
watcher logs once and does nothing, and the caches simply live until the
process restarts.
"""

from __future__ import annotations

import logging
import queue
import threading
from pathlib import Path
from typing import Optional

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from docshelf.content.store import DocumentStore
from docshelf.utils.files import is_markdown_path

LOGGER = logging.getLogger(__name__)

_STOP = object()


class _MarkdownEventHandler(FileSystemEventHandler):
    """Forwards Markdown file events to the invalidation queue."""

    def __init__(self, events: "queue.Queue[object]") -> None:
        super().__init__()
        self._events = events

    def on_any_event(self, event: FileSystemEvent) -> None:
        if event.event_type not in {"created", "modified", "deleted", "moved"}:
            return
        paths = [event.src_path]
        dest = getattr(event, "dest_path", "")
        if dest:
            paths.append(dest)
        for path in paths:
            if isinstance(path, bytes):
                path = path.decode()
            if is_markdown_path(path):
                self._events.put(path)


class ChangeWatcher:
    """Owns a watchdog observer and a worker thread that applies invalidations."""

    def __init__(self, store: DocumentStore, content_root: Path | None = None) -> None:
        self.store = store
        self.content_root = Path(content_root or store.context.content_root)
        self._observer: Optional[Observer] = None
        self._worker: Optional[threading.Thread] = None
        self._events: "queue.Queue[object]" = queue.Queue()
        self._lock = threading.Lock()
        self._unavailable = False

    @property
    def running(self) -> bool:
        return self._observer is not None

    def start(self) -> bool:
        """Start watching; returns True if live invalidation is active.

        Calling it again while running is a no-op.
        """
        with self._lock:
            if self._observer is not None:
                return True
            if self._unavailable:
                return False

            root = self.content_root.resolve()
            if not root.is_dir():
                # Retried on the next access once the directory exists.
                LOGGER.debug("Content root %s does not exist yet, not watching", root)
                return False
            events: "queue.Queue[object]" = queue.Queue()
            observer = Observer()
            try:
                observer.schedule(_MarkdownEventHandler(events), str(root), recursive=True)
                observer.start()
            except (OSError, RuntimeError) as exc:
                self._unavailable = True
                LOGGER.warning(
                    "File watching unavailable for %s (%s); content will be cached until restart",
                    root,
                    exc,
                )
                return False

            worker = threading.Thread(
                target=self._drain,
                args=(events,),
                name="docshelf-watcher",
                daemon=True,
            )
            worker.start()
            self._observer = observer
            self._worker = worker
            self._events = events
            LOGGER.info("Watching %s for content changes", root)
            return True

    def stop(self) -> None:
        """Stop watching and release the OS handle. Safe to call repeatedly."""
        with self._lock:
            observer, worker = self._observer, self._worker
            self._observer = None
            self._worker = None
            events = self._events

        if observer is not None:
            try:
                observer.stop()
                observer.join(timeout=5)
            except RuntimeError as exc:
                LOGGER.debug("Observer already stopped: %s", exc)
        if worker is not None:
            events.put(_STOP)
            worker.join(timeout=5)

    def _drain(self, events: "queue.Queue[object]") -> None:
        while True:
            item = events.get()
            if item is _STOP:
                return
            try:
                self.store.invalidate(str(item))
            except Exception:  # pragma: no cover
                LOGGER.exception("Failed to invalidate cache for %s", item)
