# src/roi_tracker/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any


def _enum_key(raw: str) -> str:
    # "In Progress", "in_progress", "IN-PROGRESS" and "To Do" / "todo" compare equal.
    return "".join(ch for ch in raw.lower() if ch not in " _-")


class Priority(StrEnum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"

    @classmethod
    def parse(cls, raw: Any) -> Priority | None:
        if isinstance(raw, cls):
            return raw
        if not isinstance(raw, str) or not raw.strip():
            return None
        key = _enum_key(raw)
        for member in cls:
            if _enum_key(member.value) == key:
                return member
        return None

    @classmethod
    def from_raw(cls, raw: Any) -> Priority:
        return cls.parse(raw) or cls.MEDIUM


class TaskStatus(StrEnum):
    """
    Task lifecycle status.

    DONE is the only terminal status: entering it stamps `completed_at`.
    """

    TODO = "Todo"
    IN_PROGRESS = "In Progress"
    DONE = "Done"

    @property
    def is_terminal(self) -> bool:
        return self is TaskStatus.DONE

    @classmethod
    def parse(cls, raw: Any) -> TaskStatus | None:
        if isinstance(raw, cls):
            return raw
        if not isinstance(raw, str) or not raw.strip():
            return None
        key = _enum_key(raw)
        for member in cls:
            if _enum_key(member.value) == key:
                return member
        return None

    @classmethod
    def from_raw(cls, raw: Any) -> TaskStatus:
        return cls.parse(raw) or cls.TODO


class PerformanceGrade(StrEnum):
    """Ordered from worst to best; `rank` follows declaration order."""

    NEEDS_IMPROVEMENT = "Needs Improvement"
    FAIR = "Fair"
    GOOD = "Good"
    EXCELLENT = "Excellent"

    @property
    def rank(self) -> int:
        return list(PerformanceGrade).index(self)


@dataclass(frozen=True, slots=True)
class Task:
    id: str
    title: str
    revenue: float
    time_taken: float  # hours
    priority: Priority
    status: TaskStatus
    created_at: str  # ISO-8601, set once

    notes: str | None = None
    completed_at: str | None = None  # set at most once, never cleared

    @property
    def is_done(self) -> bool:
        return self.status.is_terminal

    def to_record(self) -> dict[str, Any]:
        """JSON-ready record in the external camelCase shape."""
        out: dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "revenue": self.revenue,
            "timeTaken": self.time_taken,
            "priority": self.priority.value,
            "status": self.status.value,
            "createdAt": self.created_at,
        }
        if self.notes is not None:
            out["notes"] = self.notes
        if self.completed_at is not None:
            out["completedAt"] = self.completed_at
        return out


@dataclass(frozen=True, slots=True)
class DerivedTask(Task):
    """Task + ranking fields. Regenerated from the canonical list, never stored."""

    roi: float | None = None

    def to_record(self) -> dict[str, Any]:
        out = Task.to_record(self)
        out["roi"] = self.roi
        return out


@dataclass(frozen=True, slots=True)
class Metrics:
    total_revenue: float
    total_time_taken: float
    time_efficiency_pct: float
    revenue_per_hour: float
    average_roi: float
    performance_grade: PerformanceGrade


EMPTY_METRICS = Metrics(
    total_revenue=0.0,
    total_time_taken=0.0,
    time_efficiency_pct=0.0,
    revenue_per_hour=0.0,
    average_roi=0.0,
    performance_grade=PerformanceGrade.NEEDS_IMPROVEMENT,
)
