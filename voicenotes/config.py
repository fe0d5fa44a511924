"""Persisted configuration management."""

from __future__ import annotations

import json
import os
from dataclasses import asdict, fields
from pathlib import Path
from typing import Any, Optional

from .models import Config

CONFIG_PATH = (Path.home() / ".voicenotes" / "config.json").expanduser()
API_KEY_ENV = "OPENAI_API_KEY"


class ConfigError(RuntimeError):
    """Raised when configuration cannot be loaded or saved."""


def load_config() -> Config:
    if not CONFIG_PATH.exists():
        return Config()
    try:
        payload = json.loads(CONFIG_PATH.read_text())
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Failed to parse configuration file: {exc}") from exc
    known = {f.name for f in fields(Config)}
    unknown = sorted(set(payload) - known)
    if unknown:
        raise ConfigError(f"Unknown configuration keys in {CONFIG_PATH}: {', '.join(unknown)}")
    return Config(**payload)


def save_config(config: Config) -> None:
    CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
    data = {k: v for k, v in asdict(config).items() if v is not None}
    CONFIG_PATH.write_text(json.dumps(data, indent=2))


def update_config(**kwargs: Any) -> Config:
    config = load_config()
    for key, value in kwargs.items():
        if hasattr(config, key):
            setattr(config, key, value)
        else:
            raise ConfigError(f"Unknown configuration key: {key}")
    save_config(config)
    return config


def resolve_api_key(config: Config) -> Optional[str]:
    """Return the configured OpenAI key, falling back to ``OPENAI_API_KEY``.

    The environment value is never written back to the config file.
    """

    return config.openai_api_key or os.environ.get(API_KEY_ENV) or None


def vault_root(config: Config) -> Path:
    """Return the absolute vault folder the configured directories are relative to."""

    return Path(config.vault_path or ".").expanduser().resolve()
