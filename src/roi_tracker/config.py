# src/roi_tracker/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- Nothing is required: with an empty environment the app runs on the bundled sample.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "ROI_TRACKER"

load_dotenv(override=False)


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_optional(name: str) -> str | None:
    v = os.getenv(name)
    if v is None or v.strip() == "":
        return None
    return v.strip()


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


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
    data_dir: Path

    # ---- Initial record source ----
    records_url: str | None
    records_path: Path | None
    fetch_timeout_seconds: float

    # ---- Fallback generator ----
    fallback_count: int
    fallback_on_error: bool

    # ---- Console ----
    undo_window_seconds: float

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "roi-tracker").strip() or "roi-tracker"
        log_level = _env(_k("LOG_LEVEL"), "INFO")
        data_dir = _env_path(_k("DATA_DIR"), Path(".local/roi_tracker"))

        records_url = _env_optional(_k("RECORDS_URL"))
        raw_path = _env_optional(_k("RECORDS_PATH"))
        records_path = Path(raw_path).expanduser() if raw_path else None

        # A zero/negative timeout would make every fetch fail instantly.
        fetch_timeout_seconds = _env_float(_k("FETCH_TIMEOUT_SECONDS"), 10.0)
        if fetch_timeout_seconds <= 0:
            fetch_timeout_seconds = 10.0

        fallback_count = max(0, _env_int(_k("FALLBACK_COUNT"), 50))
        fallback_on_error = _env_bool(_k("FALLBACK_ON_ERROR"), False)

        undo_window_seconds = max(0.0, _env_float(_k("UNDO_WINDOW_SECONDS"), 4.0))

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            records_url=records_url,
            records_path=records_path,
            fetch_timeout_seconds=fetch_timeout_seconds,
            fallback_count=fallback_count,
            fallback_on_error=fallback_on_error,
            undo_window_seconds=undo_window_seconds,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings.from_env()
