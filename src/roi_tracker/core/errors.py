# src/roi_tracker/core/errors.py

"""
Error hierarchy.

    TrackerError
    └── LoadFailure        - initial record source unreachable / bad response

Only LoadFailure ever reaches the presentation layer, and only as
`TaskStore.error` (a string), never as a raised exception.
"""

from __future__ import annotations

from typing import Any


class TrackerError(Exception):
    """Base error for roi_tracker failures."""

    def __init__(self, message: str, **context: Any) -> None:
        self.message = message
        self.context: dict[str, Any] = context
        super().__init__(message)

    def __repr__(self) -> str:
        if not self.context:
            return f"{self.__class__.__name__}: {self.message}"
        extra = " ".join(f"{k}={v}" for k, v in self.context.items())
        return f"{self.__class__.__name__}: {self.message} | {extra}"


class LoadFailure(TrackerError):
    """The record source could not produce a record list."""

    def __init__(self, message: str, *, source: str | None = None, status_code: int | None = None) -> None:
        super().__init__(message, source=source, status_code=status_code)
        self.source = source
        self.status_code = status_code
