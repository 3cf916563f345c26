# src/private_secretary/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- No secrets required at import time (the TickTick token is normally pasted
  by the user and persisted in the settings file).
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

ENV_PREFIX = "SECRETARY"

DEFAULT_TICKTICK_API_URL = "https://api.ticktick.com/open/v1/task"
SUPPORTED_LOCALES = ("en", "zh")


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _load_dotenv_if_available() -> None:
    """Load .env locally if python-dotenv is installed. Safe no-op otherwise."""
    try:
        from dotenv import load_dotenv  # type: ignore
    except Exception:
        return
    load_dotenv(override=False)


_load_dotenv_if_available()


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _first_env(*names: str, default: str | None = None) -> str | None:
    for n in names:
        v = os.getenv(n)
        if v is not None and v.strip() != "":
            return v
    return default


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str
    locale: str

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    settings_path: Path

    # ---- TickTick ----
    ticktick_api_url: str
    ticktick_token: Optional[str]
    http_connect_timeout: float
    http_read_timeout: float

    # ---- Housekeeping ----
    expiry_days: int

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "private-secretary")
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        locale = _env(_k("LOCALE"), "en").strip().lower()
        if locale not in SUPPORTED_LOCALES:
            locale = "en"

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/secretary"))
        settings_path = _env_path(_k("SETTINGS_PATH"), data_dir / "settings.json")

        ticktick_api_url = _env(_k("TICKTICK_API_URL"), DEFAULT_TICKTICK_API_URL).strip()
        ticktick_token = _first_env(_k("TICKTICK_TOKEN"), "TICKTICK_TOKEN", default=None)

        connect_timeout = _env_float(_k("HTTP_CONNECT_TIMEOUT_SECONDS"), 5.0)
        read_timeout = _env_float(_k("HTTP_READ_TIMEOUT_SECONDS"), 20.0)

        expiry_days = max(0, _env_int(_k("EXPIRY_DAYS"), 7))

        return Settings(
            app_name=app_name,
            log_level=log_level,
            locale=locale,
            data_dir=data_dir,
            settings_path=settings_path,
            ticktick_api_url=ticktick_api_url or DEFAULT_TICKTICK_API_URL,
            ticktick_token=ticktick_token.strip() if ticktick_token else None,
            http_connect_timeout=connect_timeout,
            http_read_timeout=max(read_timeout, connect_timeout),
            expiry_days=expiry_days,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
