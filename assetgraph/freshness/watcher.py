"""File watcher that accumulates filesystem events into change batches."""

from __future__ import annotations

import logging
import threading
import time
from pathlib import Path, PurePosixPath

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from assetgraph.graph.models import ChangeBatch

logger = logging.getLogger(__name__)

_DEFAULT_IGNORE = {".git", "__pycache__", ".DS_Store"}


class _PendingChanges:
    """Mutable, lock-guarded sets behind a ChangeBatch."""

    def __init__(self) -> None:
        self.lock = threading.Lock()
        self.created: set[str] = set()
        self.deleted: set[str] = set()
        self.moved_to: set[str] = set()
        self.moved_from: set[str] = set()

    def drain(self) -> ChangeBatch:
        with self.lock:
            batch = ChangeBatch(
                created=self.created,
                deleted=self.deleted,
                moved_to=self.moved_to,
                moved_from=self.moved_from,
            )
            self.created = set()
            self.deleted = set()
            self.moved_to = set()
            self.moved_from = set()
        return batch


class _BatchingHandler(FileSystemEventHandler):
    """Translates watchdog events into asset paths and records them.

    Repeated created/modified events for the same path inside the debounce
    window are collapsed; deletes and moves are always recorded.
    """

    def __init__(
        self,
        project_root: Path,
        pending: _PendingChanges,
        debounce_seconds: float,
        ignore: set[str],
    ) -> None:
        super().__init__()
        self._root = project_root
        self._pending = pending
        self._debounce = debounce_seconds
        self._ignore = ignore
        self._last_event: dict[str, float] = {}

    def _asset_path(self, raw: str | bytes) -> str | None:
        if isinstance(raw, bytes):
            raw = raw.decode()
        try:
            rel = Path(raw).resolve().relative_to(self._root)
        except ValueError:
            return None
        path = PurePosixPath(rel.as_posix())
        if any(part in self._ignore for part in path.parts):
            return None
        return str(path)

    def _debounced(self, path: str) -> bool:
        now = time.monotonic()
        last = self._last_event.get(path)
        if last is not None and now - last < self._debounce:
            return True
        self._last_event = {
            p: t for p, t in self._last_event.items() if now - t < self._debounce
        }
        self._last_event[path] = now
        return False

    def on_created(self, event: FileSystemEvent) -> None:
        self._record_import(event)

    def on_modified(self, event: FileSystemEvent) -> None:
        # Directory mtime changes are noise; the child event carries the change.
        if event.is_directory:
            return
        self._record_import(event)

    def on_deleted(self, event: FileSystemEvent) -> None:
        path = self._asset_path(event.src_path)
        if path is None:
            return
        self._last_event.pop(path, None)
        with self._pending.lock:
            self._pending.deleted.add(path)
            self._pending.created.discard(path)

    def on_moved(self, event: FileSystemEvent) -> None:
        src = self._asset_path(event.src_path)
        dest = self._asset_path(event.dest_path)
        if src is not None:
            self._last_event.pop(src, None)
        with self._pending.lock:
            if src is not None:
                self._pending.moved_from.add(src)
            if dest is not None:
                self._pending.moved_to.add(dest)

    def _record_import(self, event: FileSystemEvent) -> None:
        path = self._asset_path(event.src_path)
        if path is None or self._debounced(path):
            return
        with self._pending.lock:
            self._pending.created.add(path)


class ChangeWatcher:
    """Watches the asset root and collects changes until drained.

    Paths are reported project-relative (``Assets/...``), the same form the
    content index uses, so drained batches can be fed straight to
    ``LoaderNode.should_revisit``.
    """

    def __init__(
        self,
        project_root: Path,
        assets_dir: str = "Assets",
        debounce_seconds: float = 0.5,
        ignore_patterns: list[str] | None = None,
    ) -> None:
        self._project_root = Path(project_root).resolve()
        self._watch_path = self._project_root / assets_dir
        self._pending = _PendingChanges()
        self._observer: Observer | None = None
        ignore = set(_DEFAULT_IGNORE)
        if ignore_patterns:
            ignore.update(ignore_patterns)
        self._handler = _BatchingHandler(
            project_root=self._project_root,
            pending=self._pending,
            debounce_seconds=debounce_seconds,
            ignore=ignore,
        )

    @property
    def is_running(self) -> bool:
        return self._observer is not None

    def start(self) -> None:
        """Begin watching the asset root recursively."""
        if self._observer is not None:
            return
        self._observer = Observer()
        self._observer.schedule(self._handler, str(self._watch_path), recursive=True)
        self._observer.start()
        logger.info("Watching %s for changes", self._watch_path)

    def stop(self) -> None:
        """Stop watching and clean up."""
        if self._observer is None:
            return
        self._observer.stop()
        self._observer.join(timeout=5)
        self._observer = None
        logger.info("Stopped watching %s", self._watch_path)

    def drain(self) -> ChangeBatch:
        """Return everything seen since the last drain and start a new batch."""
        return self._pending.drain()
