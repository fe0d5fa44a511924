"""Exceptions raised while turning a recording into a note."""

from __future__ import annotations

from enum import Enum
from typing import Optional


class Stage(str, Enum):
    TRANSCRIPTION = "transcription"
    SUMMARIZATION = "summarization"


class VoiceNotesError(RuntimeError):
    """Base class for failures of a single pipeline run."""


class ProcessingFailed(VoiceNotesError):
    """Raised when a remote step returned nothing usable or errored."""

    def __init__(self, stage: Stage, reason: str) -> None:
        super().__init__(f"{stage.value} failed: {reason}")
        self.stage = stage
        self.reason = reason


class StorageFailed(VoiceNotesError):
    """Raised when a vault read, write or move fails.

    ``note_path`` is set when the note had already been written, which leaves
    the recording in the watch folder next to a finished note.
    """

    def __init__(self, reason: str, note_path: Optional[str] = None) -> None:
        super().__init__(reason)
        self.reason = reason
        self.note_path = note_path
