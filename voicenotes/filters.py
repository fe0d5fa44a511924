"""Decide whether a discovered file should be processed."""

from __future__ import annotations

from enum import Enum

AUDIO_EXTENSIONS = frozenset({"mp3", "m4a"})


class FileKind(str, Enum):
    FILE = "file"
    FOLDER = "folder"


def is_audio_extension(extension: str) -> bool:
    return extension in AUDIO_EXTENSIONS


def is_candidate(path: str, kind: FileKind, extension: str, watch_root: str) -> bool:
    """Return ``True`` for an allow-listed audio file inside ``watch_root``.

    Containment is a plain substring test on the vault-relative path, so a
    watch root of ``voice-notes`` also matches ``archive/voice-notes/a.m4a``.
    """

    return watch_root in path and kind is FileKind.FILE and is_audio_extension(extension)
