"""Top-level package for voicenotes."""

__version__ = "0.1.0"

from . import config, ingest, naming, pipeline, render, storage, summarizer, transcriber

__all__ = ["config", "ingest", "naming", "pipeline", "render", "storage", "summarizer", "transcriber"]
