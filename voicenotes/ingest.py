"""Sequential admission of candidates into the processing pipeline."""

from __future__ import annotations

import logging
import queue
import threading
from typing import Dict, Optional, Protocol

from .errors import VoiceNotesError
from .models import Candidate, ItemState, ProcessedNote, QueueItem
from .notify import LogNotifier, Notifier

logger = logging.getLogger(__name__)


class Runner(Protocol):
    def run(self, candidate: Candidate) -> ProcessedNote:
        ...


class IngestionQueue:
    """Runs the pipeline for one candidate at a time, in arrival order.

    ``enqueue`` may be called from any thread. A failing item is reported and
    dropped; it never stops the worker.
    """

    def __init__(self, pipeline: Runner, notifier: Optional[Notifier] = None) -> None:
        self.pipeline = pipeline
        self.notifier = notifier or LogNotifier()
        self._queue: "queue.Queue[Optional[QueueItem]]" = queue.Queue()
        self._active: Dict[str, QueueItem] = {}
        self._lock = threading.Lock()
        self._stopping = threading.Event()
        self._worker: Optional[threading.Thread] = None

    def start(self) -> None:
        if self._worker is not None and self._worker.is_alive():
            if self._stopping.is_set():
                raise RuntimeError("The previous worker is still finishing its current recording.")
            return
        self._stopping.clear()
        self._worker = threading.Thread(target=self._work, name="voicenotes-worker", daemon=True)
        self._worker.start()

    def stop(self, timeout: Optional[float] = None) -> bool:
        """Let the current run finish, then discard whatever is still pending.

        Returns ``False`` if the worker was still busy when ``timeout`` ran out;
        ``start`` refuses to launch a second worker until it has exited.
        """

        if self._worker is None:
            return True
        if not self._stopping.is_set():
            self._stopping.set()
            self._queue.put(None)
        self._worker.join(timeout)
        if self._worker.is_alive():
            return False
        self._worker = None
        return True

    def join(self) -> None:
        """Block until every admitted item has reached a terminal state."""

        self._queue.join()

    def enqueue(self, candidate: Candidate) -> Optional[QueueItem]:
        with self._lock:
            if candidate.path in self._active:
                logger.debug("Already queued: %s", candidate.path)
                return None
            item = QueueItem(candidate=candidate)
            self._active[candidate.path] = item
        self._queue.put(item)
        logger.debug("Queued %s (%d waiting)", candidate.path, self._queue.qsize())
        return item

    def _work(self) -> None:
        while True:
            item = self._queue.get()
            try:
                if item is None:
                    return
                if self._stopping.is_set():
                    logger.debug("Dropping %s on shutdown", item.candidate.path)
                    continue
                self._process(item)
            except Exception:
                logger.exception("Worker error while handling %s", item.candidate.path)
            finally:
                if item is not None:
                    with self._lock:
                        self._active.pop(item.candidate.path, None)
                self._queue.task_done()

    def _notify(self, event: str, *args: str) -> None:
        try:
            getattr(self.notifier, event)(*args)
        except Exception:
            logger.exception("Notifier failed to report %s for %s", event, args[0])

    def _process(self, item: QueueItem) -> None:
        path = item.candidate.path
        item.state = ItemState.RUNNING
        self._notify("started", path)
        try:
            item.result = self.pipeline.run(item.candidate)
        except VoiceNotesError as exc:
            item.state = ItemState.FAILED
            item.reason = str(exc)
        except Exception as exc:
            item.state = ItemState.FAILED
            item.reason = str(exc) or type(exc).__name__
            logger.exception("Unexpected error while processing %s", path)
        else:
            item.state = ItemState.SUCCEEDED
            self._notify("succeeded", path)
            return
        self._notify("failed", path, item.reason)
