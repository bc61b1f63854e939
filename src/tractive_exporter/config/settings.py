# src/tractive_exporter/config/settings.py
"""
Application settings (Pydantic).

Settings are loaded from `src/tractive_exporter/config/defaults.yaml`, then optionally overridden by:
- an external YAML file via `TRACTIVE_CONFIG_PATH` (replaces the packaged defaults)
- environment variables (`TRACTIVE_PUBLIC_SHARES`, `TRACTIVE_LOG_LEVEL`)

Command-line flags are applied on top by `tractive_exporter.cli`.
"""

from __future__ import annotations

import os
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any
from tractive_exporter.core.env import load_dotenv_if_present

import yaml
from pydantic import BaseModel, Field, field_validator


def _read_package_yaml(filename: str) -> dict[str, Any]:
    """Read a YAML file packaged inside `tractive_exporter.config`."""
    text = resources.files("tractive_exporter.config").joinpath(filename).read_text(encoding="utf-8")
    data = yaml.safe_load(text) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid YAML root object for {filename}; expected a mapping.")
    return data


def _read_yaml_file(path: str | Path) -> dict[str, Any]:
    """Read a YAML file from disk and return its mapping root."""
    data = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid YAML root object for {path}; expected a mapping.")
    return data


def split_tracker_ids(*sources: str | None) -> list[str]:
    """Merge comma-separated tracker ID lists, dropping blanks and repeats (first wins)."""
    out: list[str] = []
    for source in sources:
        if not source:
            continue
        for item in source.split(","):
            item = item.strip()
            if item and item not in out:
                out.append(item)
    return out


class AppSettings(BaseModel):
    name: str = "Tractive Exporter"
    http_timeout_seconds: float = 10
    log_level: str = "INFO"


class TractiveSettings(BaseModel):
    host: str = "graph.tractive.com"
    port: int = 443
    position_path: str = "/3/public_share/{tracker_id}/position"
    user_agent: str = "tractive_prometheus_exporter"
    verify_tls: bool = False
    probe_timeout_seconds: float = 1.0
    public_shares: list[str] = Field(default_factory=list)

    @field_validator("public_shares", mode="before")
    @classmethod
    def _split_shares(cls, value: Any) -> Any:
        if isinstance(value, str):
            return split_tracker_ids(value)
        return value


class WebSettings(BaseModel):
    listen_address: str = ":9101"
    metrics_path: str = "/metrics"

    @field_validator("metrics_path")
    @classmethod
    def _leading_slash(cls, value: str) -> str:
        value = value.strip()
        if not value.startswith("/"):
            value = "/" + value
        return value


class GeoSettings(BaseModel):
    geohash_precision: int = Field(8, ge=1, le=12)


class Settings(BaseModel):
    app: AppSettings = Field(default_factory=AppSettings)
    tractive: TractiveSettings = Field(default_factory=TractiveSettings)
    web: WebSettings = Field(default_factory=WebSettings)
    geo: GeoSettings = Field(default_factory=GeoSettings)


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    """Overlay selected environment variables onto raw settings payload.

    Tracker IDs from the environment are appended to the ones in the YAML file.
    """
    load_dotenv_if_present()
    data = dict(data)

    log_level = os.getenv("TRACTIVE_LOG_LEVEL")
    if log_level:
        data.setdefault("app", {})["log_level"] = log_level

    shares = os.getenv("TRACTIVE_PUBLIC_SHARES")
    if shares:
        tractive = data.setdefault("tractive", {})
        existing = tractive.get("public_shares") or []
        if isinstance(existing, str):
            existing = [existing]
        tractive["public_shares"] = split_tracker_ids(",".join(existing), shares)

    return data


@lru_cache
def get_settings() -> Settings:
    """Load and validate settings (cached)."""
    load_dotenv_if_present()
    config_path = os.getenv("TRACTIVE_CONFIG_PATH")
    raw = _read_yaml_file(config_path) if config_path else _read_package_yaml("defaults.yaml")
    raw = _apply_env_overrides(raw)
    return Settings.model_validate(raw)


@lru_cache
def get_logging_config() -> dict[str, Any]:
    """Load logging configuration (cached)."""
    return _read_package_yaml("logging.yaml")
