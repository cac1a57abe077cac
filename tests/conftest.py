# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from roi_tracker.core.state import AppState
from roi_tracker.tasks.task_store import TaskStore

from .fakes import FakeGenerator, FixedClock


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the CLI helpers.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the environment and any .env file.
    """
    return SimpleNamespace(
        app_name="roi-tracker-test",
        log_level="DEBUG",
        data_dir=tmp_path,
        records_url=None,
        records_path=tmp_path / "tasks.json",
        fetch_timeout_seconds=1.0,
        fallback_count=3,
        fallback_on_error=False,
        undo_window_seconds=4.0,
    )


@pytest.fixture()
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture()
def generator() -> FakeGenerator:
    return FakeGenerator()


@pytest.fixture()
def store(clock: FixedClock, generator: FakeGenerator) -> TaskStore:
    """A READY store with no tasks and a pinned clock."""
    s = TaskStore(clock=clock, generator=generator, fallback_count=3)
    s.ready_with([])
    return s


@pytest.fixture()
def state(settings: SimpleNamespace, store: TaskStore) -> AppState:
    return AppState(settings=settings, store=store)
