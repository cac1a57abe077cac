# src/roi_tracker/tasks/mutations.py

from __future__ import annotations

"""
Pure collection transforms behind the TaskStore mutations.

Each function takes the current canonical list (and, for undo, the pending
deleted task) and returns new values; inputs are never modified. The store
only adds locking, queueing and recomputation on top.
"""

import logging
from collections.abc import Mapping, Sequence
from dataclasses import replace
from datetime import datetime
from typing import Any

from .ids import generate_task_id
from .normalize import parse_amount
from .task_models import Priority, Task, TaskStatus
from .timestamps import parse_iso, to_iso

logger = logging.getLogger(__name__)

# External camelCase names accepted alongside the field names.
FIELD_ALIASES = {
    "timeTaken": "time_taken",
    "createdAt": "created_at",
    "completedAt": "completed_at",
}

# Fields a patch may touch. id and created_at are fixed at creation.
PATCHABLE_FIELDS = frozenset(
    {"title", "revenue", "time_taken", "priority", "status", "notes", "completed_at"}
)


def _clean_title(raw: Any) -> str:
    if not isinstance(raw, str) or not raw.strip():
        raise ValueError("title is required")
    return raw.strip()


def clean_patch(patch: Mapping[str, Any]) -> dict[str, Any]:
    """
    Validate and coerce a partial update.

    - unknown keys, id and created_at are dropped
    - revenue / time_taken that are not finite non-negative numbers are dropped
    - unrecognized priority / status values are dropped
    - completed_at can be set but never cleared: None or garbage is dropped
    - an empty title raises ValueError
    """
    out: dict[str, Any] = {}
    for key, value in patch.items():
        field = FIELD_ALIASES.get(key, key)
        if field not in PATCHABLE_FIELDS:
            logger.debug("Ignoring patch key %r", key)
            continue

        if field == "title":
            out["title"] = _clean_title(value)
        elif field in ("revenue", "time_taken"):
            amount = parse_amount(value)
            if amount is None:
                logger.debug("Ignoring invalid %s %r", field, value)
                continue
            out[field] = amount
        elif field == "priority":
            priority = Priority.parse(value)
            if priority is None:
                logger.debug("Ignoring unknown priority %r", value)
                continue
            out["priority"] = priority
        elif field == "status":
            status = TaskStatus.parse(value)
            if status is None:
                logger.debug("Ignoring unknown status %r", value)
                continue
            out["status"] = status
        elif field == "notes":
            out["notes"] = None if value is None else str(value)
        elif field == "completed_at":
            completed = parse_iso(value)
            if completed is None:
                continue
            out["completed_at"] = to_iso(completed)
    return out


def build_task(payload: Mapping[str, Any], *, now: datetime, task_id: str | None = None) -> Task:
    """
    New task from a create payload.

    created_at is always `now`; completed_at is `now` only when the task is
    created already Done. Any timestamps in the payload are ignored.
    """
    fields = clean_patch(payload)
    if "title" not in fields:
        raise ValueError("title is required")

    raw_id = task_id if task_id is not None else payload.get("id")
    if isinstance(raw_id, str) and raw_id.strip():
        new_id = raw_id.strip()
    else:
        new_id = generate_task_id()

    status = fields.get("status", TaskStatus.TODO)
    created_at = to_iso(now)
    return Task(
        id=new_id,
        title=fields["title"],
        revenue=fields.get("revenue", 0.0),
        time_taken=fields.get("time_taken", 0.0),
        priority=fields.get("priority", Priority.MEDIUM),
        status=status,
        created_at=created_at,
        notes=fields.get("notes"),
        completed_at=created_at if status.is_terminal else None,
    )


def add_task(tasks: Sequence[Task], task: Task) -> list[Task]:
    """Newest first."""
    return [task, *tasks]


def apply_patch(task: Task, fields: Mapping[str, Any], *, now: datetime) -> Task:
    """
    Merge already-cleaned fields onto `task`.

    Entering Done stamps completed_at unless one is already present after the
    merge; an earlier stamp survives any later status change.
    """
    merged = replace(task, **fields)
    if not task.is_done and merged.is_done and merged.completed_at is None:
        created = parse_iso(task.created_at)
        stamp = max(now, created) if created is not None else now
        merged = replace(merged, completed_at=to_iso(stamp))
    return merged


def update_task(
    tasks: Sequence[Task],
    task_id: str,
    fields: Mapping[str, Any],
    *,
    now: datetime,
) -> list[Task]:
    """Unknown id -> a content-equal copy of `tasks`."""
    return [apply_patch(t, fields, now=now) if t.id == task_id else t for t in tasks]


def delete_task(tasks: Sequence[Task], task_id: str) -> tuple[list[Task], Task | None]:
    """Returns (remaining, removed). removed is None when the id is unknown."""
    removed: Task | None = None
    remaining: list[Task] = []
    for t in tasks:
        if removed is None and t.id == task_id:
            removed = t
            continue
        remaining.append(t)
    return remaining, removed


def undo_delete(tasks: Sequence[Task], last_deleted: Task | None) -> tuple[list[Task], Task | None]:
    """Returns (tasks, pending). Restored tasks go back to the front."""
    if last_deleted is None:
        return list(tasks), None
    return [last_deleted, *tasks], None
