# src/wanderer/config/settings.py
"""
Application settings (Pydantic).

Settings are loaded from `src/wanderer/config/defaults.yaml`, then optionally overridden by:
- an external YAML file via `WANDERER_CONFIG_PATH`
- environment variables (e.g., `SUPABASE_URL`, `RESEND_API_KEY`)

Design rule:
- Entrypoints (API, CLI) call `get_settings()` once and pass the result down.
  Business logic never reads the environment directly.
"""

from __future__ import annotations

import os
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any
from wanderer.core.env import load_dotenv_if_present

import yaml
from pydantic import BaseModel, Field


def _read_package_yaml(filename: str) -> dict[str, Any]:
    """Read a YAML file packaged inside `wanderer.config`."""
    text = resources.files("wanderer.config").joinpath(filename).read_text(encoding="utf-8")
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


class AppSettings(BaseModel):
    name: str = "Wanderer"
    http_timeout_seconds: float = 15
    log_level: str = "INFO"


class StoreTablesSettings(BaseModel):
    tourist_spots: str = "tourist_spots"
    profiles: str = "profiles"
    itineraries: str = "itineraries"


class StoreSettings(BaseModel):
    url: str = "http://localhost:54321"
    key: str | None = None
    rest_path: str = "/rest/v1"
    tables: StoreTablesSettings = Field(default_factory=StoreTablesSettings)


class SelectionSettings(BaseModel):
    auto_select_count: int = Field(8, ge=1)


class ResendSettings(BaseModel):
    base_url: str = "https://api.resend.com"
    api_key: str | None = None


class EmailSettings(BaseModel):
    sender: str = "Wanderer <onboarding@resend.dev>"
    subject: str = "Verify your Wanderer account"
    # Base URL for `/auth/v1/verify` links; falls back to `store.url` when unset.
    verify_base_url: str | None = None
    hook_secret: str | None = None
    enforce_webhook_signature: bool = False
    resend: ResendSettings = Field(default_factory=ResendSettings)


class MapCenter(BaseModel):
    lat: float = Field(13.1391, ge=-90, le=90)
    lon: float = Field(123.7437, ge=-180, le=180)


class MapSettings(BaseModel):
    default_center: MapCenter = Field(default_factory=MapCenter)


class CorsSettings(BaseModel):
    allow_origins: list[str] = Field(default_factory=lambda: ["*"])
    allow_headers: list[str] = Field(
        default_factory=lambda: ["authorization", "x-client-info", "apikey", "content-type"]
    )


class Settings(BaseModel):
    app: AppSettings = Field(default_factory=AppSettings)
    store: StoreSettings = Field(default_factory=StoreSettings)
    selection: SelectionSettings = Field(default_factory=SelectionSettings)  # type: ignore
    email: EmailSettings = Field(default_factory=EmailSettings)
    map: MapSettings = Field(default_factory=MapSettings)
    cors: CorsSettings = Field(default_factory=CorsSettings)


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    """Overlay selected environment variables onto raw settings payload.

    Note: We intentionally keep this whitelist small; everything else lives in YAML.
    """
    load_dotenv_if_present()
    data = dict(data)

    log_level = os.getenv("WANDERER_LOG_LEVEL")
    if log_level:
        data.setdefault("app", {})["log_level"] = log_level

    store_url = os.getenv("SUPABASE_URL")
    if store_url:
        data.setdefault("store", {})["url"] = store_url
    store_key = os.getenv("SUPABASE_KEY") or os.getenv("SUPABASE_ANON_KEY")
    if store_key:
        data.setdefault("store", {})["key"] = store_key

    resend_key = os.getenv("RESEND_API_KEY")
    if resend_key:
        data.setdefault("email", {}).setdefault("resend", {})["api_key"] = resend_key

    hook_secret = os.getenv("SEND_VERIFICATION_EMAIL_HOOK_SECRET")
    if hook_secret:
        data.setdefault("email", {})["hook_secret"] = hook_secret

    return data


@lru_cache
def get_settings() -> Settings:
    """Load and validate settings (cached)."""
    load_dotenv_if_present()
    config_path = os.getenv("WANDERER_CONFIG_PATH")
    raw = _read_yaml_file(config_path) if config_path else _read_package_yaml("defaults.yaml")
    raw = _apply_env_overrides(raw)
    return Settings.model_validate(raw)


@lru_cache
def get_logging_config() -> dict[str, Any]:
    """Load logging configuration (cached)."""
    return _read_package_yaml("logging.yaml")
