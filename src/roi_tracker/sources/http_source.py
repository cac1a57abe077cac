# src/roi_tracker/sources/http_source.py

from __future__ import annotations

import logging
from typing import Any

import httpx

from ..core.errors import LoadFailure

logger = logging.getLogger(__name__)


class HttpRecordSource:
    """
    Fetch the task record list with a single GET.

    Any transport problem, non-2xx status or undecodable body becomes a
    LoadFailure carrying a message fit for display.
    """

    def __init__(
        self,
        url: str,
        *,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not url or not url.strip():
            raise ValueError("url is required")
        self._url = url.strip()
        self._timeout = httpx.Timeout(timeout, connect=min(timeout, 5.0))
        self._transport = transport

    @property
    def name(self) -> str:
        return self._url

    async def fetch_records(self) -> Any:
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout,
                transport=self._transport,
                follow_redirects=True,
            ) as client:
                response = await client.get(self._url, headers={"Accept": "application/json"})
        except httpx.TimeoutException as e:
            raise LoadFailure(f"Timed out loading {self._url}", source=self._url) from e
        except httpx.HTTPError as e:
            raise LoadFailure(f"Failed to load {self._url} ({e.__class__.__name__})", source=self._url) from e

        if not response.is_success:
            raise LoadFailure(
                f"Failed to load {self._url} ({response.status_code})",
                source=self._url,
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise LoadFailure(f"Invalid JSON from {self._url}", source=self._url) from e

        logger.debug("Fetched %s: status=%s bytes=%d", self._url, response.status_code, len(response.content))
        return data
