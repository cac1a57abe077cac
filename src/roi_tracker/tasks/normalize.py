# src/roi_tracker/tasks/normalize.py

from __future__ import annotations

"""
Load-time normalization: untrusted record list -> canonical Tasks.

Records come from a JSON file or an HTTP endpoint and may be partial or
mistyped. Every field has an explicit defaulting rule below; a bad field
never aborts the load, it only falls back to its default.
"""

import logging
import math
from collections.abc import Mapping
from datetime import datetime, timedelta
from typing import Any

from .ids import generate_task_id
from .task_models import Priority, Task, TaskStatus
from .timestamps import parse_iso, to_iso, utc_now

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "Untitled task"
SYNTHETIC_SPACING = timedelta(days=1)


def _pick(record: Mapping[str, Any], *keys: str) -> Any:
    """First present, non-None value among `keys` (camelCase first, snake_case alias second)."""
    for k in keys:
        v = record.get(k)
        if v is not None:
            return v
    return None


def parse_amount(raw: Any) -> float | None:
    """
    Number-ish -> non-negative finite float; anything else -> None.

    Accepts ints, floats and numeric strings ("12.5"). Booleans are not numbers here.
    """
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        value = float(raw)
    elif isinstance(raw, str):
        try:
            value = float(raw.strip())
        except ValueError:
            return None
    else:
        return None
    if not math.isfinite(value) or value < 0:
        return None
    return value


def coerce_amount(raw: Any) -> float:
    """Load-time rule: an unusable amount counts as 0."""
    value = parse_amount(raw)
    return 0.0 if value is None else value


def _coerce_id(raw: Any) -> str:
    if isinstance(raw, bool):
        return generate_task_id()
    if isinstance(raw, (int, float)) and math.isfinite(raw):
        return str(int(raw)) if float(raw).is_integer() else str(raw)
    if isinstance(raw, str) and raw.strip():
        return raw.strip()
    return generate_task_id()


def _coerce_title(raw: Any) -> str:
    if isinstance(raw, str) and raw.strip():
        return raw.strip()
    if isinstance(raw, (int, float)) and not isinstance(raw, bool):
        return str(raw)
    return DEFAULT_TITLE


def _coerce_notes(raw: Any) -> str | None:
    if raw is None:
        return None
    return raw if isinstance(raw, str) else str(raw)


def normalize_record(record: Mapping[str, Any], index: int, now: datetime) -> Task:
    """
    Map one loose record to a Task.

    `index` is the record's position in the raw list; a missing createdAt is
    synthesized as `now - (index + 1) days`, so synthesized timestamps strictly
    decrease down the list.
    """
    status = TaskStatus.from_raw(record.get("status"))

    created = parse_iso(_pick(record, "createdAt", "created_at"))
    if created is None:
        created = now - SYNTHETIC_SPACING * (index + 1)

    completed_at: str | None = None
    completed = parse_iso(_pick(record, "completedAt", "completed_at"))
    if completed is not None:
        completed_at = to_iso(completed)
    elif status.is_terminal:
        completed_at = to_iso(created + SYNTHETIC_SPACING)

    return Task(
        id=_coerce_id(record.get("id")),
        title=_coerce_title(record.get("title")),
        revenue=coerce_amount(record.get("revenue")),
        time_taken=coerce_amount(_pick(record, "timeTaken", "time_taken")),
        priority=Priority.from_raw(record.get("priority")),
        status=status,
        created_at=to_iso(created),
        notes=_coerce_notes(record.get("notes")),
        completed_at=completed_at,
    )


def normalize_tasks(raw: Any, *, now: datetime | None = None) -> list[Task]:
    """Normalize a raw payload. Non-list payloads yield []; non-object items are skipped."""
    if not isinstance(raw, list):
        if raw is not None:
            logger.warning("Record payload is %s, not a list; ignoring it.", type(raw).__name__)
        return []

    now = now or utc_now()
    out: list[Task] = []
    skipped = 0
    for idx, record in enumerate(raw):
        if not isinstance(record, Mapping):
            skipped += 1
            continue
        out.append(normalize_record(record, idx, now))

    if skipped:
        logger.warning("Skipped %d non-object record(s) out of %d.", skipped, len(raw))
    logger.debug("Normalized %d record(s).", len(out))
    return out
