"""Per-item progress notifications."""

from __future__ import annotations

import logging
from typing import Protocol

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    def started(self, path: str) -> None:
        ...

    def succeeded(self, path: str) -> None:
        ...

    def failed(self, path: str, reason: str) -> None:
        ...


class LogNotifier:
    """Reports progress through logging only."""

    def started(self, path: str) -> None:
        logger.info("Processing audio file: %s", path)

    def succeeded(self, path: str) -> None:
        logger.info("Transcribed: %s", path)

    def failed(self, path: str, reason: str) -> None:
        logger.error("Failed to process %s: %s", path, reason)


class DesktopNotifier(LogNotifier):
    """Logs, and additionally shows macOS notifications through ``rumps``."""

    def __init__(self) -> None:
        try:
            import rumps  # type: ignore
        except Exception as exc:  # pragma: no cover - optional dependency
            raise RuntimeError(
                "Desktop notifications need `rumps`. Install with `pip install \"voicenotes[mac]\"`."
            ) from exc
        self._rumps = rumps

    def started(self, path: str) -> None:
        super().started(path)
        self._notify("Processing audio file", path)

    def succeeded(self, path: str) -> None:
        super().succeeded(path)
        self._notify("Transcribed", path)

    def failed(self, path: str, reason: str) -> None:
        super().failed(path, reason)
        self._notify(f"Failed to process {path}", reason)

    def _notify(self, title: str, message: str) -> None:
        try:
            self._rumps.notification("voicenotes", title, message)
        except Exception as exc:
            logger.debug("Notification unavailable: %s", exc)


def build_notifier(desktop: bool) -> Notifier:
    if not desktop:
        return LogNotifier()
    try:
        return DesktopNotifier()
    except RuntimeError as exc:
        logger.warning("%s Falling back to log notifications.", exc)
        return LogNotifier()
