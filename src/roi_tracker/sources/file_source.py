# src/roi_tracker/sources/file_source.py

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Any

from ..core.errors import LoadFailure

logger = logging.getLogger(__name__)


def bundled_records_path() -> Path:
    """Sample record list shipped inside the package."""
    return Path(__file__).resolve().parent.parent / "data" / "tasks.json"


class FileRecordSource:
    """Read the task record list from a JSON file (default: the bundled sample)."""

    def __init__(self, path: str | Path | None = None) -> None:
        self._path = Path(path) if path is not None else bundled_records_path()

    @property
    def name(self) -> str:
        return str(self._path)

    def _read(self) -> Any:
        try:
            raw = self._path.read_text("utf-8")
        except FileNotFoundError as e:
            raise LoadFailure(f"Failed to load {self._path.name} (not found)", source=str(self._path)) from e
        except OSError as e:
            raise LoadFailure(f"Failed to load {self._path.name} ({e.strerror or e})", source=str(self._path)) from e

        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            raise LoadFailure(
                f"Invalid JSON in {self._path.name} (line {e.lineno})",
                source=str(self._path),
            ) from e

    async def fetch_records(self) -> Any:
        data = await asyncio.to_thread(self._read)
        logger.debug("Read %s", self._path)
        return data
