# src/roi_tracker/tasks/seed.py

from __future__ import annotations

import random
from datetime import datetime, timedelta

from .ids import generate_task_id
from .task_models import Priority, Task, TaskStatus
from .timestamps import to_iso, utc_now

_ACTIONS = (
    "Follow up with",
    "Prepare proposal for",
    "Demo call with",
    "Negotiate renewal with",
    "Cold outreach to",
    "Quarterly review with",
    "Send pricing to",
    "Onboarding session for",
)

_ACCOUNTS = (
    "Acme Corp",
    "Globex",
    "Initech",
    "Umbrella Ltd",
    "Stark Industries",
    "Wayne Enterprises",
    "Hooli",
    "Soylent",
    "Vandelay Imports",
    "Wonka Industries",
)

_NOTES = (
    None,
    None,
    "Waiting on procurement.",
    "Decision maker changed last month.",
    "Asked for a case study.",
    "Budget approved for next quarter.",
)

# Weights for Todo / In Progress / Done.
_STATUS_WEIGHTS = (3, 2, 4)


def generate_sales_tasks(
    count: int,
    *,
    rng: random.Random | None = None,
    now: datetime | None = None,
) -> list[Task]:
    """
    Synthetic, internally consistent tasks used when no records were loaded.

    - created_at within the last 90 days
    - completed_at after created_at (and not after `now`) iff status is Done
    - some tasks have zero hours logged, so the "no ROI" path shows up too
    """
    rng = rng or random.Random()
    now = now or utc_now()
    statuses = list(TaskStatus)
    priorities = list(Priority)

    out: list[Task] = []
    for _ in range(max(0, count)):
        status = rng.choices(statuses, weights=_STATUS_WEIGHTS, k=1)[0]
        created = now - timedelta(days=rng.randint(1, 90), minutes=rng.randint(0, 24 * 60 - 1))

        completed_at: str | None = None
        if status.is_terminal:
            span = now - created
            completed = created + span * rng.uniform(0.05, 1.0)
            completed_at = to_iso(completed)

        time_taken = 0.0 if rng.random() < 0.1 else round(rng.uniform(0.5, 40.0), 1)
        revenue = float(rng.randrange(0, 20_000, 50))

        out.append(
            Task(
                id=generate_task_id(),
                title=f"{rng.choice(_ACTIONS)} {rng.choice(_ACCOUNTS)}",
                revenue=revenue,
                time_taken=time_taken,
                priority=rng.choice(priorities),
                status=status,
                created_at=to_iso(created),
                notes=rng.choice(_NOTES),
                completed_at=completed_at,
            )
        )
    return out
