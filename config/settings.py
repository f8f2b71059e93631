"""
Configuration loader for the concierge bot.
Reads settings from YAML file with environment variable substitution.
"""
from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml


@dataclass
class StorageConfig:
    backend: str = "memory"                        # "memory" | "file" | "sql"
    file_dir: str = "./data"                       # directory for file backend
    url: str = "sqlite:///./concierge.db"          # postgresql:// | mysql:// | sqlite://


@dataclass
class ChannelConfig:
    reply_mode: str = "inline"                     # "inline" | "connector"
    app_id: str = ""
    app_password: str = ""                         # bearer token for connector posts
    timeout_seconds: float = 10.0
    max_retries: int = 3


@dataclass
class DialogConfig:
    default_locale: str = "en-US"


@dataclass
class Settings:
    app_name: str = "HotelConcierge"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 3978
    log_level: str = "INFO"
    log_json: bool = False
    cors_origins: list[str] = field(default_factory=lambda: ["*"])
    storage: StorageConfig = field(default_factory=StorageConfig)
    channel: ChannelConfig = field(default_factory=ChannelConfig)
    dialogs: DialogConfig = field(default_factory=DialogConfig)


_settings: Optional[Settings] = None


def _substitute_env_vars(value: str) -> str:
    """Replace ${VAR_NAME} and ${VAR_NAME:-default} patterns with environment values."""
    pattern = re.compile(r"\$\{(\w+)(?::-([^}]*))?\}")
    def replacer(match):
        default = match.group(2)
        return os.environ.get(match.group(1), match.group(0) if default is None else default)
    return pattern.sub(replacer, value)


def _process_values(obj: Any) -> Any:
    """Recursively substitute env vars in all string values."""
    if isinstance(obj, str):
        return _substitute_env_vars(obj)
    elif isinstance(obj, dict):
        return {k: _process_values(v) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [_process_values(v) for v in obj]
    return obj


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


def load_settings(config_path: str = None) -> Settings:
    """Load settings from YAML file."""
    global _settings

    if config_path is None:
        config_path = os.environ.get(
            "CONCIERGE_CONFIG",
            str(Path(__file__).parent / "settings.yaml"),
        )

    settings = Settings()

    if Path(config_path).exists():
        with open(config_path) as f:
            raw = yaml.safe_load(f) or {}
        raw = _process_values(raw)

        settings.app_name = raw.get("app_name", settings.app_name)
        settings.debug = _as_bool(raw.get("debug", settings.debug))
        settings.host = raw.get("host", settings.host)
        settings.port = int(raw.get("port", settings.port))
        settings.log_level = str(raw.get("log_level", settings.log_level)).upper()
        settings.log_json = _as_bool(raw.get("log_json", settings.log_json))
        settings.cors_origins = list(raw.get("cors_origins", settings.cors_origins))

        if "storage" in raw:
            st = raw["storage"] or {}
            settings.storage = StorageConfig(
                backend=st.get("backend", settings.storage.backend),
                file_dir=st.get("file_dir", settings.storage.file_dir),
                url=st.get("url", settings.storage.url),
            )

        if "channel" in raw:
            ch = raw["channel"] or {}
            settings.channel = ChannelConfig(
                reply_mode=ch.get("reply_mode", "inline"),
                app_id=ch.get("app_id", ""),
                app_password=ch.get("app_password", ""),
                timeout_seconds=float(ch.get("timeout_seconds", 10.0)),
                max_retries=int(ch.get("max_retries", 3)),
            )

        if "dialogs" in raw:
            dl = raw["dialogs"] or {}
            settings.dialogs = DialogConfig(
                default_locale=dl.get("default_locale", "en-US"),
            )

    _settings = settings
    return settings


def get_settings() -> Settings:
    """Return cached settings or load from default path."""
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings


def reset_settings() -> None:
    """Drop the cached settings (for testing)."""
    global _settings
    _settings = None
