import os
from datetime import datetime

import pytest

from voicenotes.models import Config
from voicenotes.pipeline import ProcessingPipeline
from voicenotes.storage import VaultStorage
from voicenotes.summarizer import SummarizationStep
from voicenotes.transcriber import TranscriptionStep

RECORDED_AT = datetime(2024, 5, 1, 9, 0)


class FakeSpeech:
    def __init__(self, text="Hello world", error=None):
        self.text = text
        self.error = error
        self.calls = []

    def transcribe(self, audio, filename, media_type):
        self.calls.append((audio, filename, media_type))
        if self.error is not None:
            raise self.error
        return self.text


class FakeChat:
    def __init__(self, text="Quick note\n- said hello", error=None):
        self.text = text
        self.error = error
        self.prompts = []

    def generate(self, system, prompt):
        self.prompts.append((system, prompt))
        if self.error is not None:
            raise self.error
        return self.text


def add_recording(vault, relative, when=RECORDED_AT, content=b"fake audio"):
    target = vault / relative
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_bytes(content)
    stamp = when.timestamp()
    os.utime(target, (stamp, stamp))
    return target


@pytest.fixture
def vault(tmp_path):
    root = tmp_path / "vault"
    root.mkdir()
    return root


@pytest.fixture
def config(vault):
    return Config(openai_api_key="sk-test", vault_path=str(vault))


@pytest.fixture
def storage(vault):
    return VaultStorage(vault)


@pytest.fixture
def speech():
    return FakeSpeech()


@pytest.fixture
def chat():
    return FakeChat()


@pytest.fixture
def pipeline(config, storage, speech, chat):
    return ProcessingPipeline(config, storage, TranscriptionStep(speech), SummarizationStep(chat))
