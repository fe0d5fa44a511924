import json

import pytest
from typer.testing import CliRunner

from voicenotes import cli, config
from voicenotes.pipeline import ProcessingPipeline
from voicenotes.summarizer import SummarizationStep
from voicenotes.transcriber import TranscriptionStep

from conftest import FakeChat, FakeSpeech, add_recording

runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    monkeypatch.setattr(config, "CONFIG_PATH", tmp_path / "config.json")


@pytest.fixture
def fake_backends(monkeypatch):
    def build(cfg, storage=None):
        return ProcessingPipeline(cfg, storage, TranscriptionStep(FakeSpeech()), SummarizationStep(FakeChat()))

    monkeypatch.setattr(cli, "build_pipeline", build)


def test_config_update_and_show():
    result = runner.invoke(cli.app, ["config", "--watch-directory", "inbox", "--openai-api-key", "sk-secret"])
    assert result.exit_code == 0
    assert config.load_config().watch_directory == "inbox"

    result = runner.invoke(cli.app, ["config", "--show"])
    assert result.exit_code == 0
    shown = json.loads(result.output)
    assert shown["watch_directory"] == "inbox"
    assert shown["openai_api_key"] == "***"


def test_pending_lists_recordings(vault):
    add_recording(vault, "voice-notes/2024-05-01 at 09.00.m4a")
    result = runner.invoke(cli.app, ["pending", "--vault", str(vault)])
    assert result.exit_code == 0
    assert "2024-05-01 at 09.00.md" in result.output


def test_process_single_recording(vault, fake_backends):
    audio = add_recording(vault, "voice-notes/2024-05-01 at 09.00.m4a")
    result = runner.invoke(cli.app, ["process", str(audio), "--vault", str(vault)])
    assert result.exit_code == 0, result.output
    assert (vault / "voice-notes-output" / "2024-05-01 at 09.00.md").exists()
    assert (vault / "voice-notes-processed" / "2024-05-01 at 09.00.m4a").exists()


def test_process_rejects_unsupported_formats(vault, fake_backends):
    audio = add_recording(vault, "voice-notes/memo.wav")
    result = runner.invoke(cli.app, ["process", str(audio), "--vault", str(vault)])
    assert result.exit_code == 1
    assert audio.exists()


def test_scan_processes_everything_and_exits(vault, fake_backends):
    add_recording(vault, "voice-notes/2024-05-01 at 09.00.m4a")
    result = runner.invoke(cli.app, ["scan", "--vault", str(vault)])
    assert result.exit_code == 0, result.output
    assert "Processed 1 recording(s)." in result.output
    assert not (vault / "voice-notes" / "2024-05-01 at 09.00.m4a").exists()
    assert (vault / "voice-notes-output" / "2024-05-01 at 09.00.md").exists()


def test_missing_api_key_is_reported(vault, monkeypatch):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    audio = add_recording(vault, "voice-notes/memo.m4a")
    result = runner.invoke(cli.app, ["process", str(audio), "--vault", str(vault)])
    assert result.exit_code == 1


def test_scan_reports_failures_and_exits_non_zero(vault, monkeypatch):
    def build(cfg, storage=None):
        speech = FakeSpeech(error=ConnectionError("service unavailable"))
        return ProcessingPipeline(cfg, storage, TranscriptionStep(speech), SummarizationStep(FakeChat()))

    monkeypatch.setattr(cli, "build_pipeline", build)
    add_recording(vault, "voice-notes/2024-05-01 at 09.00.m4a")
    result = runner.invoke(cli.app, ["scan", "--vault", str(vault)])
    assert result.exit_code == 1
    assert "Processed 0 recording(s)." in result.output
    assert "Failed: voice-notes/2024-05-01 at 09.00.m4a" in result.output
    assert "service unavailable" in result.output
    assert (vault / "voice-notes" / "2024-05-01 at 09.00.m4a").exists()
