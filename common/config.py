"""
Settings shared by the command line tool and the HTTP service.

Lookup order for the settings file: explicit path, ``SUITETREE_CONFIG``,
``~/.suitetree/config.yaml``. A missing default file just means defaults.
``SUITETREE_LOG_LEVEL``, ``SUITETREE_LOGFILE`` and ``SUITETREE_STRICT`` override
whatever the file says.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Mapping

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

DEFAULT_CONFIG_PATH = Path("~/.suitetree/config.yaml")

ENV_OVERRIDES = {
    "SUITETREE_LOG_LEVEL": "log_level",
    "SUITETREE_LOGFILE": "logfile",
    "SUITETREE_STRICT": "strict_ingest",
}


class Settings(BaseModel):
    """Runtime settings."""

    log_level: str = Field(default="INFO", description="Root logger level")
    logfile: str | None = Field(default=None, description="Log file; defaults to ~/.suitetree/log.txt")
    strict_ingest: bool = Field(default=False, description="Collect malformed backend records instead of dropping them silently")
    host: str = Field(default="127.0.0.1")
    port: int = Field(default=8000, ge=0, le=65535)
    snapshot: str | None = Field(default=None, description="Snapshot file preloaded by the service")

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        level = value.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level {value!r}")
        return level


def load_settings(path: str | Path | None = None, environ: Mapping[str, str] | None = None) -> Settings:
    """Read settings from YAML and apply environment overrides."""
    environ = os.environ if environ is None else environ
    payload: dict[str, Any] = {}
    explicit = path or environ.get("SUITETREE_CONFIG")
    config_path = Path(explicit).expanduser() if explicit else DEFAULT_CONFIG_PATH.expanduser()
    if config_path.exists():
        payload = _read_yaml(config_path)
    elif explicit:
        raise FileNotFoundError(f"Config file not found: {config_path}")

    for env_name, field_name in ENV_OVERRIDES.items():
        if environ.get(env_name):
            payload[field_name] = environ[env_name]
    try:
        return Settings.model_validate(payload)
    except ValidationError as exc:
        raise ValueError(f"Invalid settings in {config_path}") from exc


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Config file {path} is not valid YAML") from exc
    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a mapping")
    return data


__all__ = ["DEFAULT_CONFIG_PATH", "Settings", "load_settings"]
