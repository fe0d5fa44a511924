"""Dataclasses describing the objects that flow through voicenotes."""

from __future__ import annotations

import posixpath
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


@dataclass(frozen=True, slots=True)
class Candidate:
    """A discovered audio recording, addressed by its vault-relative path."""

    path: str
    extension: str
    modified_at: datetime

    @property
    def name(self) -> str:
        return posixpath.basename(self.path)


@dataclass(frozen=True, slots=True)
class Summary:
    """Headline plus bullet elaboration produced from a transcript."""

    headline: str
    body: str


@dataclass(frozen=True, slots=True)
class ProcessedNote:
    """Where a successful run left its artifacts."""

    note_path: str
    archive_path: str


class ItemState(str, Enum):
    PENDING = "pending"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(slots=True)
class QueueItem:
    """Tracks a candidate while it waits for, and goes through, the pipeline."""

    candidate: Candidate
    state: ItemState = ItemState.PENDING
    reason: Optional[str] = None
    result: Optional[ProcessedNote] = None


@dataclass(slots=True)
class Config:
    """User configuration stored on disk."""

    openai_api_key: Optional[str] = None
    vault_path: str = "."
    watch_directory: str = "voice-notes"
    processed_directory: str = "voice-notes-processed"
    output_directory: str = "voice-notes-output"
    transcription_model: str = "whisper-1"
    summary_model: str = "gpt-4o"
    include_transcript: bool = True
    desktop_notifications: bool = False
