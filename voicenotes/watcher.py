"""Discovery of recordings: a startup scan plus live file-system events.

Uses the watchdog library for cross-platform file system event monitoring.
Everything discovered is handed to the :class:`IngestionQueue`.
"""

from __future__ import annotations

import logging
import os
import posixpath
from typing import Iterator, List, Optional

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from .errors import StorageFailed
from .filters import is_candidate
from .ingest import IngestionQueue
from .models import Candidate, Config, QueueItem
from .storage import VaultStorage

logger = logging.getLogger(__name__)


def _is_own_output(config: Config, path: str) -> bool:
    for directory in (config.processed_directory, config.output_directory):
        if path == directory or path.startswith(directory.rstrip("/") + "/"):
            return True
    return False


def discover(config: Config, storage: VaultStorage, path: str) -> Optional[Candidate]:
    """Return a :class:`Candidate` for the vault-relative ``path`` if it should be processed.

    Files already inside the archive or notes folders are never candidates,
    even when the watch folder name is a substring of theirs.
    """

    if _is_own_output(config, path):
        return None
    extension = posixpath.splitext(path)[1].lstrip(".")
    if not is_candidate(path, storage.kind(path), extension, config.watch_directory):
        return None
    try:
        return storage.candidate(path)
    except StorageFailed as exc:
        logger.debug("Skipping %s: %s", path, exc)
        return None


def iter_candidates(config: Config, storage: VaultStorage) -> Iterator[Candidate]:
    for path in storage.iter_files():
        candidate = discover(config, storage, path)
        if candidate is not None:
            yield candidate


class VaultWatcher:
    """Feeds candidates found in the vault into the ingestion queue."""

    def __init__(self, config: Config, storage: VaultStorage, ingestion: IngestionQueue) -> None:
        self.config = config
        self.storage = storage
        self.ingestion = ingestion
        self._observer: Optional[Observer] = None

    def prepare(self) -> None:
        """Create the output and archive folders if they are missing."""

        self.storage.create_folder(self.config.processed_directory)
        self.storage.create_folder(self.config.output_directory)

    def scan(self) -> List[QueueItem]:
        """Queue every candidate currently in the vault and return the admitted items."""

        queued = []
        for candidate in iter_candidates(self.config, self.storage):
            item = self.ingestion.enqueue(candidate)
            if item is not None:
                queued.append(item)
        logger.info("Startup scan queued %d recording(s)", len(queued))
        return queued

    def on_path(self, absolute: str) -> None:
        try:
            path = self.storage.relative(absolute)
        except ValueError:
            logger.debug("Ignoring event outside the vault: %s", absolute)
            return
        candidate = discover(self.config, self.storage, path)
        if candidate is not None:
            self.ingestion.enqueue(candidate)

    def start(self) -> None:
        if self._observer is not None:
            return
        observer = Observer()
        observer.schedule(_VaultEventHandler(self), str(self.storage.root), recursive=True)
        observer.start()
        self._observer = observer
        logger.info("Watching %s for new recordings in %s", self.storage.root, self.config.watch_directory)

    def stop(self) -> None:
        if self._observer is None:
            return
        self._observer.stop()
        self._observer.join()
        self._observer = None


class _VaultEventHandler(FileSystemEventHandler):
    """Forwards create and rename events to the watcher."""

    def __init__(self, watcher: VaultWatcher) -> None:
        super().__init__()
        self.watcher = watcher

    def on_created(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self.watcher.on_path(os.fsdecode(event.src_path))

    def on_moved(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self.watcher.on_path(os.fsdecode(event.dest_path))
