"""Turn one recording into a note and archive the recording."""

from __future__ import annotations

import logging
import posixpath
import random
from typing import Optional

from .config import resolve_api_key, vault_root
from .errors import StorageFailed
from .models import Candidate, Config, ProcessedNote
from .naming import base_name, resolve_unique_path
from .render import render_note
from .storage import VaultStorage
from .summarizer import OpenAIChatBackend, SummarizationStep
from .transcriber import OpenAIBackend, TranscriptionStep

logger = logging.getLogger(__name__)


class ProcessingPipeline:
    """Transcribe, summarize, write the note, then move the recording.

    Writing the note is the commit point. Every step before it may fail
    without side effects; a failure after it leaves the note in place and
    the recording in the watch folder.
    """

    def __init__(
        self,
        config: Config,
        storage: VaultStorage,
        transcription: TranscriptionStep,
        summarization: SummarizationStep,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.config = config
        self.storage = storage
        self.transcription = transcription
        self.summarization = summarization
        self._rng = rng

    def run(self, candidate: Candidate) -> ProcessedNote:
        base = base_name(candidate.modified_at)
        audio_file_name = f"{base}.{candidate.extension}"

        audio = self.storage.read_bytes(candidate.path)
        transcript = self.transcription.transcribe(audio, candidate.extension)
        summary = self.summarization.summarize(transcript)

        archive_path = resolve_unique_path(
            posixpath.join(self.config.processed_directory, audio_file_name),
            self.storage.exists,
            self._rng,
        )
        note_text = render_note(
            summary,
            transcript,
            posixpath.basename(archive_path),
            candidate.modified_at,
            include_transcript=self.config.include_transcript,
        )

        note_path = resolve_unique_path(
            posixpath.join(self.config.output_directory, f"{base}.md"),
            self.storage.exists,
            self._rng,
        )
        self.storage.write_file(note_path, note_text)
        logger.info("Wrote note %s for %s", note_path, candidate.path)

        try:
            self.storage.create_folder(self.config.processed_directory)
            logger.info("Renaming %s to %s", candidate.name, archive_path)
            self.storage.move(candidate.path, archive_path)
        except StorageFailed as exc:
            logger.error(
                "Note %s was written but %s could not be archived: %s",
                note_path,
                candidate.path,
                exc.reason,
            )
            raise StorageFailed(
                f"Note written to {note_path} but archiving failed: {exc.reason}",
                note_path=note_path,
            ) from exc
        return ProcessedNote(note_path=note_path, archive_path=archive_path)


def build_pipeline(config: Config, storage: Optional[VaultStorage] = None) -> ProcessingPipeline:
    """Wire the OpenAI backed steps for ``config``."""

    api_key = resolve_api_key(config)
    return ProcessingPipeline(
        config,
        storage or VaultStorage(vault_root(config)),
        TranscriptionStep(OpenAIBackend(config.transcription_model, api_key)),
        SummarizationStep(OpenAIChatBackend(config.summary_model, api_key)),
    )
