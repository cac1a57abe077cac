# src/roi_tracker/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- picks the record source (HTTP if a URL is configured, else a JSON file),
- wires the TaskStore into AppState and runs the initial load.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.ports import RecordSource
from ..core.state import AppState
from ..sources import FileRecordSource, HttpRecordSource
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def build_record_source(settings) -> RecordSource:
    url = getattr(settings, "records_url", None)
    if url:
        return HttpRecordSource(url, timeout=float(getattr(settings, "fetch_timeout_seconds", 10.0)))
    return FileRecordSource(getattr(settings, "records_path", None))


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState with a TaskStore still in the LOADING phase.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    store = TaskStore(
        fallback_count=settings.fallback_count,
        fallback_on_error=settings.fallback_on_error,
    )
    return AppState(settings=settings, store=store)


async def load_initial_tasks(state: AppState, source: RecordSource | None = None) -> None:
    """Run the store's one-time load. Never raises for source failures; see store.error."""
    if source is None:
        source = build_record_source(state.settings)
    await state.store.load(source)
    if state.store.error:
        logger.warning("Started with load error: %s", state.store.error)
