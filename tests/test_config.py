# tests/test_config.py

from __future__ import annotations

from pathlib import Path

import pytest

from roi_tracker.config import Settings

_VARS = (
    "APP_NAME",
    "LOG_LEVEL",
    "DATA_DIR",
    "RECORDS_URL",
    "RECORDS_PATH",
    "FETCH_TIMEOUT_SECONDS",
    "FALLBACK_COUNT",
    "FALLBACK_ON_ERROR",
    "UNDO_WINDOW_SECONDS",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for v in _VARS:
        monkeypatch.delenv(f"ROI_TRACKER_{v}", raising=False)


def test_defaults() -> None:
    s = Settings.from_env()
    assert s.app_name == "roi-tracker"
    assert s.records_url is None
    assert s.records_path is None
    assert s.fallback_count == 50
    assert s.fallback_on_error is False
    assert s.undo_window_seconds == 4.0
    assert s.data_dir == Path(".local/roi_tracker")


def test_env_overrides(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("ROI_TRACKER_RECORDS_URL", " http://x/tasks.json ")
    monkeypatch.setenv("ROI_TRACKER_RECORDS_PATH", str(tmp_path / "t.json"))
    monkeypatch.setenv("ROI_TRACKER_FALLBACK_COUNT", "7")
    monkeypatch.setenv("ROI_TRACKER_FALLBACK_ON_ERROR", "yes")
    monkeypatch.setenv("ROI_TRACKER_UNDO_WINDOW_SECONDS", "10")

    s = Settings.from_env()
    assert s.records_url == "http://x/tasks.json"
    assert s.records_path == tmp_path / "t.json"
    assert s.fallback_count == 7
    assert s.fallback_on_error is True
    assert s.undo_window_seconds == 10.0


def test_bad_numbers_fall_back_to_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ROI_TRACKER_FALLBACK_COUNT", "many")
    monkeypatch.setenv("ROI_TRACKER_FETCH_TIMEOUT_SECONDS", "-1")
    s = Settings.from_env()
    assert s.fallback_count == 50
    assert s.fetch_timeout_seconds == 10.0
