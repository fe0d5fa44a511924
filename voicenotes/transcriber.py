"""Speech-to-text for recordings picked up from the vault."""

from __future__ import annotations

import logging
from typing import Optional, Protocol

from .errors import ProcessingFailed, Stage

logger = logging.getLogger(__name__)

MEDIA_TYPES = {
    "mp3": "audio/mpeg",
    "m4a": "audio/mp4",
}


class TranscriptionBackend(Protocol):
    """Common interface for remote speech-to-text services."""

    def transcribe(self, audio: bytes, filename: str, media_type: str) -> Optional[str]:
        """Return the transcript text for ``audio``."""


class OpenAIBackend:
    """Cloud transcription using the OpenAI API."""

    def __init__(self, model: str, api_key: Optional[str]) -> None:
        if not api_key:
            raise RuntimeError("An OpenAI API key is required for transcription.")
        try:
            from openai import OpenAI
        except Exception as exc:  # pragma: no cover - optional dependency
            raise RuntimeError("The `openai` package is required for transcription.") from exc
        self._client = OpenAI(api_key=api_key)
        self._model = model

    def transcribe(self, audio: bytes, filename: str, media_type: str) -> Optional[str]:  # pragma: no cover - network call
        response = self._client.audio.transcriptions.create(
            model=self._model,
            file=(filename, audio, media_type),
        )
        return response.text


def media_type_for(extension: str) -> str:
    return MEDIA_TYPES.get(extension.lower(), f"audio/{extension.lower()}")


class TranscriptionStep:
    """Turns raw recording bytes into a transcript, or raises :class:`ProcessingFailed`."""

    def __init__(self, backend: TranscriptionBackend) -> None:
        self.backend = backend

    def transcribe(self, audio: bytes, extension: str) -> str:
        filename = f"audio.{extension}"
        media_type = media_type_for(extension)
        logger.debug("Transcribing %d bytes as %s", len(audio), media_type)
        try:
            text = self.backend.transcribe(audio, filename, media_type)
        except Exception as exc:
            raise ProcessingFailed(Stage.TRANSCRIPTION, str(exc) or type(exc).__name__) from exc
        if not text or not text.strip():
            raise ProcessingFailed(Stage.TRANSCRIPTION, "No transcription text received")
        return text
