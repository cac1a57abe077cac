# src/roi_tracker/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The task store depends on Protocols instead of concrete implementations,
so the record source and the fallback generator stay swappable in tests.
"""

from datetime import datetime
from typing import TYPE_CHECKING, Any, Callable, Protocol

if TYPE_CHECKING:
    from ..tasks.task_models import Task

RawRecord = dict[str, Any]
# Loosely-typed task record as it arrives from JSON: any key may be missing or mistyped.

Clock = Callable[[], datetime]
# Returns an aware "now". Injected so tests can pin time.


class RecordSource(Protocol):
    """
    Where the initial task list comes from.

    Must raise LoadFailure (roi_tracker.core.errors) when the list cannot be
    produced. The returned value is untrusted: normalization handles anything.
    """

    @property
    def name(self) -> str: ...

    async def fetch_records(self) -> Any: ...


class TaskGenerator(Protocol):
    """Produces `count` ready-to-use synthetic tasks."""

    def __call__(self, count: int) -> list[Task]: ...
