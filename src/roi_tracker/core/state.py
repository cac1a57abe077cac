# src/roi_tracker/core/state.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..tasks.task_store import TaskStore


@dataclass
class AppState:
    # Settings object (roi_tracker.config.Settings or a test stand-in).
    settings: Any

    store: TaskStore

    # monotonic time of the last /delete, for expiring the undo window
    deleted_at: float | None = None
