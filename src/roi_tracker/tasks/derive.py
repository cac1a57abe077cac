# src/roi_tracker/tasks/derive.py

from __future__ import annotations

"""
Derived fields and aggregate metrics.

Everything here is a pure function of its arguments: no input is mutated,
nothing reads the clock or global state. The task store calls these after
every change to the canonical list, so they must stay cheap and total
(no ZeroDivisionError, no NaN or infinity in the output).
"""

import math
from collections.abc import Iterable, Sequence
from datetime import datetime, timezone

from .task_models import (
    EMPTY_METRICS,
    DerivedTask,
    Metrics,
    PerformanceGrade,
    Task,
)
from .timestamps import parse_iso

# Upper bounds (inclusive) of each grade band, in ascending order.
# Anything above the last bound is EXCELLENT.
GRADE_THRESHOLDS: tuple[tuple[float, PerformanceGrade], ...] = (
    (50.0, PerformanceGrade.NEEDS_IMPROVEMENT),
    (100.0, PerformanceGrade.FAIR),
    (200.0, PerformanceGrade.GOOD),
)

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def task_roi(task: Task) -> float | None:
    """revenue / hours, or None when no time was logged."""
    if task.time_taken > 0:
        roi = task.revenue / task.time_taken
        return roi if math.isfinite(roi) else None
    return None


def compute_total_revenue(tasks: Iterable[Task]) -> float:
    return float(sum(t.revenue for t in tasks))


def compute_total_time_taken(tasks: Iterable[Task]) -> float:
    return float(sum(t.time_taken for t in tasks))


def compute_time_efficiency(tasks: Sequence[Task]) -> float:
    """Percentage of logged hours that went into Done tasks (0 when nothing is logged)."""
    total = compute_total_time_taken(tasks)
    if total <= 0:
        return 0.0
    done = sum(t.time_taken for t in tasks if t.is_done)
    return done / total * 100.0


def compute_revenue_per_hour(tasks: Sequence[Task]) -> float:
    total_time = compute_total_time_taken(tasks)
    if total_time <= 0:
        return 0.0
    return compute_total_revenue(tasks) / total_time


def compute_average_roi(tasks: Iterable[Task]) -> float:
    """
    Mean per-task ROI over tasks with logged time.

    Zero-time tasks are left out of both the sum and the count: they have no
    ROI, which is not the same as an ROI of zero.
    """
    rois = [r for r in (task_roi(t) for t in tasks) if r is not None]
    if not rois:
        return 0.0
    return sum(rois) / len(rois)


def compute_performance_grade(average_roi: float) -> PerformanceGrade:
    if average_roi is None or math.isnan(average_roi):
        return PerformanceGrade.NEEDS_IMPROVEMENT
    for upper, grade in GRADE_THRESHOLDS:
        if average_roi <= upper:
            return grade
    return PerformanceGrade.EXCELLENT


def compute_metrics(tasks: Sequence[Task]) -> Metrics:
    if not tasks:
        return EMPTY_METRICS
    average_roi = compute_average_roi(tasks)
    return Metrics(
        total_revenue=compute_total_revenue(tasks),
        total_time_taken=compute_total_time_taken(tasks),
        time_efficiency_pct=compute_time_efficiency(tasks),
        revenue_per_hour=compute_revenue_per_hour(tasks),
        average_roi=average_roi,
        performance_grade=compute_performance_grade(average_roi),
    )


def with_derived(task: Task) -> DerivedTask:
    return DerivedTask(
        id=task.id,
        title=task.title,
        revenue=task.revenue,
        time_taken=task.time_taken,
        priority=task.priority,
        status=task.status,
        created_at=task.created_at,
        notes=task.notes,
        completed_at=task.completed_at,
        roi=task_roi(task),
    )


def _sort_key(task: DerivedTask) -> tuple:
    # Tuples compare left to right:
    #   0/1 flag puts every numeric roi ahead of every None,
    #   negated numbers give descending order,
    #   created_at ascending, id as the last resort so the order is total.
    has_roi = task.roi is not None
    created = parse_iso(task.created_at) or _EPOCH
    return (
        0 if has_roi else 1,
        -task.roi if has_roi else 0.0,
        -task.revenue,
        created,
        task.id,
    )


def sort_tasks(tasks: Iterable[DerivedTask]) -> list[DerivedTask]:
    """roi desc (None last), then revenue desc, then created_at asc. Returns a new list."""
    return sorted(tasks, key=_sort_key)


def derive_sorted(tasks: Iterable[Task]) -> list[DerivedTask]:
    return sort_tasks(with_derived(t) for t in tasks)
