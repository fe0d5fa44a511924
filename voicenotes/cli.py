"""Command line interface for voicenotes."""

from __future__ import annotations

import json
import logging
import threading
from dataclasses import asdict
from pathlib import Path
from typing import Dict, Optional

import typer
from rich.console import Console
from rich.table import Table

from . import __version__
from . import config as config_mod
from .config import ConfigError, vault_root
from .errors import VoiceNotesError
from .filters import is_audio_extension
from .ingest import IngestionQueue
from .models import Config, ItemState
from .naming import base_name
from .notify import build_notifier
from .pipeline import ProcessingPipeline, build_pipeline
from .storage import VaultStorage
from .watcher import VaultWatcher, iter_candidates

app = typer.Typer(add_completion=False, help="Turn voice recordings in a notes vault into summarised notes.")


def _load(vault: Optional[Path]) -> Config:
    try:
        cfg = config_mod.load_config()
    except ConfigError as exc:
        typer.secho(str(exc), fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc
    if vault is not None:
        cfg.vault_path = str(vault)
    return cfg


def _pipeline(cfg: Config, storage: VaultStorage) -> ProcessingPipeline:
    try:
        return build_pipeline(cfg, storage)
    except RuntimeError as exc:
        typer.secho(str(exc), fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc


def _start(cfg: Config) -> tuple[VaultWatcher, IngestionQueue]:
    storage = VaultStorage(vault_root(cfg))
    ingestion = IngestionQueue(_pipeline(cfg, storage), build_notifier(cfg.desktop_notifications))
    watcher = VaultWatcher(cfg, storage, ingestion)
    try:
        watcher.prepare()
    except VoiceNotesError as exc:
        typer.secho(str(exc), fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc
    ingestion.start()
    return watcher, ingestion


VaultOption = typer.Option(None, "--vault", help="Vault root; overrides the configured vault path.")


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging"),
    version: bool = typer.Option(False, "--version", "-v", help="Show version and exit"),
) -> None:
    if version:
        typer.echo(f"voicenotes v{__version__}")
        raise typer.Exit()

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


@app.command()
def watch(vault: Optional[Path] = VaultOption) -> None:  # pragma: no cover - runs until interrupted
    """Process existing recordings, then keep watching for new ones."""

    cfg = _load(vault)
    watcher, ingestion = _start(cfg)
    watcher.scan()
    watcher.start()
    typer.secho(f"Watching {cfg.watch_directory} in {watcher.storage.root}. Press Ctrl-C to stop.", fg=typer.colors.BLUE)
    try:
        threading.Event().wait()
    except KeyboardInterrupt:
        typer.echo("Stopping…")
    finally:
        watcher.stop()
        ingestion.stop()


@app.command()
def scan(vault: Optional[Path] = VaultOption) -> None:
    """Process every recording currently in the watch folder, then exit."""

    cfg = _load(vault)
    watcher, ingestion = _start(cfg)
    queued = watcher.scan()
    ingestion.join()
    ingestion.stop()

    failed = [item for item in queued if item.state is ItemState.FAILED]
    succeeded = sum(1 for item in queued if item.state is ItemState.SUCCEEDED)
    typer.secho(f"Processed {succeeded} recording(s).", fg=typer.colors.BLUE)
    if failed:
        for item in failed:
            typer.secho(f"Failed: {item.candidate.path}: {item.reason}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)


@app.command()
def process(
    audio: Path = typer.Argument(..., exists=True, readable=True, dir_okay=False, help="Recording inside the vault."),
    vault: Optional[Path] = VaultOption,
) -> None:
    """Run the pipeline once for a single recording."""

    cfg = _load(vault)
    storage = VaultStorage(vault_root(cfg))
    try:
        path = storage.relative(audio)
    except ValueError as exc:
        typer.secho(f"{audio} is not inside the vault {storage.root}.", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc
    if not is_audio_extension(audio.suffix.lstrip(".")):
        typer.secho(f"Unsupported audio format: {audio.name}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    pipeline = _pipeline(cfg, storage)
    try:
        result = pipeline.run(storage.candidate(path))
    except VoiceNotesError as exc:
        typer.secho(str(exc), fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc
    typer.secho(f"Note: {result.note_path}", fg=typer.colors.GREEN)
    typer.secho(f"Archived recording: {result.archive_path}", fg=typer.colors.BLUE)


@app.command()
def pending(vault: Optional[Path] = VaultOption) -> None:
    """List recordings that would be processed, without processing them."""

    cfg = _load(vault)
    storage = VaultStorage(vault_root(cfg))
    candidates = list(iter_candidates(cfg, storage))
    if not candidates:
        typer.echo(f"No recordings waiting in {cfg.watch_directory}.")
        return

    table = Table("Recording", "Modified", "Note name")
    for candidate in candidates:
        table.add_row(
            candidate.path,
            candidate.modified_at.strftime("%Y-%m-%d %H:%M"),
            f"{base_name(candidate.modified_at)}.md",
        )
    Console().print(table)


@app.command()
def config(
    openai_api_key: Optional[str] = typer.Option(None, help="API key for OpenAI transcription and summaries."),
    vault_path: Optional[str] = typer.Option(None, help="Root folder of the notes vault."),
    watch_directory: Optional[str] = typer.Option(None, help="Folder to watch for new audio files."),
    processed_directory: Optional[str] = typer.Option(None, help="Folder where processed recordings are archived."),
    output_directory: Optional[str] = typer.Option(None, help="Folder where notes are written."),
    transcription_model: Optional[str] = typer.Option(None, help="OpenAI speech-to-text model id."),
    summary_model: Optional[str] = typer.Option(None, help="OpenAI chat model id used for summaries."),
    include_transcript: Optional[bool] = typer.Option(
        None,
        "--include-transcript/--no-include-transcript",
        help="Append the full transcript to each note.",
    ),
    desktop_notifications: Optional[bool] = typer.Option(
        None,
        "--desktop-notifications/--no-desktop-notifications",
        help="Show macOS notifications for each processed recording.",
    ),
    show: bool = typer.Option(False, "--show", help="Display the active configuration."),
) -> None:
    """Update or inspect configuration settings."""

    updates: Dict[str, object] = {
        key: value
        for key, value in {
            "openai_api_key": openai_api_key,
            "vault_path": vault_path,
            "watch_directory": watch_directory,
            "processed_directory": processed_directory,
            "output_directory": output_directory,
            "transcription_model": transcription_model,
            "summary_model": summary_model,
            "include_transcript": include_transcript,
            "desktop_notifications": desktop_notifications,
        }.items()
        if value is not None
    }

    if show or not updates:
        cfg = _load(None)
        payload = asdict(cfg)
        if payload.get("openai_api_key"):
            payload["openai_api_key"] = "***"
        typer.echo(json.dumps(payload, indent=2, default=str))
        return

    try:
        config_mod.update_config(**updates)
    except ConfigError as exc:
        typer.secho(str(exc), fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc
    typer.secho("Configuration updated.", fg=typer.colors.BLUE)


if __name__ == "__main__":  # pragma: no cover
    app()
