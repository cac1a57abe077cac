# tests/test_seed.py

from __future__ import annotations

import random

from roi_tracker.tasks.seed import generate_sales_tasks
from roi_tracker.tasks.task_models import Priority, TaskStatus
from roi_tracker.tasks.timestamps import parse_iso

from .fakes import T0


def test_generated_tasks_are_consistent() -> None:
    tasks = generate_sales_tasks(200, rng=random.Random(1), now=T0)

    assert len(tasks) == 200
    assert len({t.id for t in tasks}) == 200
    for t in tasks:
        assert t.title
        assert t.revenue >= 0 and t.time_taken >= 0
        assert t.priority in Priority
        assert t.status in TaskStatus
        created = parse_iso(t.created_at)
        assert created is not None and created < T0
        if t.status is TaskStatus.DONE:
            completed = parse_iso(t.completed_at)
            assert completed is not None and created <= completed <= T0
        else:
            assert t.completed_at is None


def test_generated_tasks_are_reproducible_with_seeded_rng() -> None:
    a = generate_sales_tasks(10, rng=random.Random(5), now=T0)
    b = generate_sales_tasks(10, rng=random.Random(5), now=T0)
    strip = lambda ts: [(t.title, t.revenue, t.time_taken, t.status, t.created_at) for t in ts]  # noqa: E731
    assert strip(a) == strip(b)


def test_zero_or_negative_count() -> None:
    assert generate_sales_tasks(0) == []
    assert generate_sales_tasks(-2) == []
