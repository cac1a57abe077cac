# tests/fakes.py

from __future__ import annotations

import asyncio
from datetime import datetime, timedelta, timezone
from typing import Any

from roi_tracker.core.errors import LoadFailure
from roi_tracker.tasks.task_models import Priority, Task, TaskStatus
from roi_tracker.tasks.timestamps import to_iso

T0 = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


class FixedClock:
    """Deterministic clock for the store: returns `now` until advanced."""

    def __init__(self, now: datetime = T0) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **delta: float) -> datetime:
        self.now = self.now + timedelta(**delta)
        return self.now


class FakeRecordSource:
    """
    In-memory RecordSource.

    - returns `records` (any JSON-ish value) or raises `error`
    - if `gate` is given, waits for it before answering (to test the LOADING phase)
    """

    def __init__(
        self,
        records: Any = None,
        *,
        error: Exception | None = None,
        gate: asyncio.Event | None = None,
    ) -> None:
        self.records = [] if records is None else records
        self.error = error
        self.gate = gate
        self.calls = 0

    @property
    def name(self) -> str:
        return "fake"

    async def fetch_records(self) -> Any:
        self.calls += 1
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return self.records


class FakeGenerator:
    """Counts calls and returns simple, valid tasks."""

    def __init__(self) -> None:
        self.calls: list[int] = []

    def __call__(self, count: int) -> list[Task]:
        self.calls.append(count)
        return [make_task(f"gen-{i}", revenue=100.0 * (i + 1), time_taken=1.0) for i in range(count)]


def make_task(
    task_id: str,
    *,
    title: str | None = None,
    revenue: float = 0.0,
    time_taken: float = 0.0,
    priority: Priority = Priority.MEDIUM,
    status: TaskStatus = TaskStatus.TODO,
    created_at: datetime | None = None,
    completed_at: str | None = None,
    notes: str | None = None,
) -> Task:
    return Task(
        id=task_id,
        title=title or f"Task {task_id}",
        revenue=revenue,
        time_taken=time_taken,
        priority=priority,
        status=status,
        created_at=to_iso(created_at or T0),
        notes=notes,
        completed_at=completed_at,
    )


def load_failure(message: str = "Failed to load tasks.json (500)") -> LoadFailure:
    return LoadFailure(message, source="fake", status_code=500)
