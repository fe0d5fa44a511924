"""Summaries of transcripts written by a remote language model."""

from __future__ import annotations

import logging
from typing import Optional, Protocol

from .errors import ProcessingFailed, Stage
from .models import Summary

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """You are a helpful assistant that summarizes voice notes.
You are writing in the original language of the voice note.
You are writing as if you were the author of the voice note.
You are writing in the first person."""

USER_PROMPT = """Please summarize this transcript.
Start with a specific summary of key points (up to 300 characters) on the first line, followed by a bullet list of the content.

{transcript}"""


class TextGenerator(Protocol):
    """Anything that can answer a system + user prompt pair with text."""

    def generate(self, system: str, prompt: str) -> Optional[str]:
        ...


class OpenAIChatBackend:
    """Text generation using the OpenAI chat completions API."""

    def __init__(self, model: str, api_key: Optional[str]) -> None:
        if not api_key:
            raise RuntimeError("An OpenAI API key is required for summaries.")
        try:
            from openai import OpenAI
        except Exception as exc:  # pragma: no cover - optional dependency
            raise RuntimeError("The `openai` package is required for summaries.") from exc
        self._client = OpenAI(api_key=api_key)
        self._model = model

    def generate(self, system: str, prompt: str) -> Optional[str]:  # pragma: no cover - network call
        response = self._client.chat.completions.create(
            model=self._model,
            messages=[
                {"role": "system", "content": system},
                {"role": "user", "content": prompt},
            ],
        )
        if not response.choices:
            return None
        return response.choices[0].message.content


def split_summary(text: str) -> Summary:
    """Use the first line as the headline and the trimmed rest as the body."""

    headline, _, rest = text.partition("\n")
    return Summary(headline=headline.strip(), body=rest.strip())


class SummarizationStep:
    def __init__(self, generator: TextGenerator) -> None:
        self.generator = generator

    def summarize(self, transcript: str) -> Summary:
        prompt = USER_PROMPT.format(transcript=transcript)
        try:
            content = self.generator.generate(SYSTEM_PROMPT, prompt)
        except Exception as exc:
            raise ProcessingFailed(Stage.SUMMARIZATION, str(exc) or type(exc).__name__) from exc
        if not content or not content.strip():
            raise ProcessingFailed(Stage.SUMMARIZATION, "No summary text received")
        summary = split_summary(content)
        logger.debug("Summary headline: %s", summary.headline)
        return summary
