"""Markdown rendering of processed voice notes."""

from __future__ import annotations

from datetime import datetime

from .models import Summary

TAG = "fromvoicenote"
TRANSCRIPT_HEADING = "## Original transcript"


def _quote(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def render_note(
    summary: Summary,
    transcript: str,
    audio_file_name: str,
    timestamp: datetime,
    include_transcript: bool = True,
) -> str:
    """Return the note text: front matter, summary body and optionally the transcript."""

    lines = [
        "---",
        f"source: {_quote(f'[[{audio_file_name}]]')}",
        f"summary: {_quote(summary.headline)}",
        f"timestamp: {_quote(timestamp.isoformat(timespec='milliseconds'))}",
        "tags:",
        f"  - {TAG}",
        "---",
        summary.body,
    ]
    if include_transcript:
        lines += ["", TRANSCRIPT_HEADING, "", transcript]
    return "\n".join(lines)
