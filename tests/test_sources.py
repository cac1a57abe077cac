# tests/test_sources.py

from __future__ import annotations

import json
from pathlib import Path

import httpx
import pytest

from roi_tracker.core.errors import LoadFailure
from roi_tracker.sources import FileRecordSource, HttpRecordSource, bundled_records_path
from roi_tracker.tasks.normalize import normalize_tasks

URL = "http://tasks.test/tasks.json"


def _source(handler) -> HttpRecordSource:
    return HttpRecordSource(URL, timeout=1.0, transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_http_source_returns_decoded_json() -> None:
    records = [{"title": "A"}, {"title": "B"}]

    def handler(request: httpx.Request) -> httpx.Response:
        assert request.method == "GET"
        assert str(request.url) == URL
        return httpx.Response(200, json=records)

    assert await _source(handler).fetch_records() == records


@pytest.mark.asyncio
async def test_http_source_non_success_status_is_load_failure() -> None:
    source = _source(lambda request: httpx.Response(404, text="nope"))
    with pytest.raises(LoadFailure) as ei:
        await source.fetch_records()
    assert ei.value.status_code == 404
    assert "(404)" in ei.value.message


@pytest.mark.asyncio
async def test_http_source_transport_error_is_load_failure() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(LoadFailure):
        await _source(handler).fetch_records()


@pytest.mark.asyncio
async def test_http_source_bad_json_is_load_failure() -> None:
    source = _source(lambda request: httpx.Response(200, text="<html>oops</html>"))
    with pytest.raises(LoadFailure) as ei:
        await source.fetch_records()
    assert "Invalid JSON" in ei.value.message


def test_http_source_requires_url() -> None:
    with pytest.raises(ValueError):
        HttpRecordSource("  ")


@pytest.mark.asyncio
async def test_file_source_reads_json(tmp_path: Path) -> None:
    path = tmp_path / "tasks.json"
    path.write_text(json.dumps([{"title": "A"}]), "utf-8")
    assert await FileRecordSource(path).fetch_records() == [{"title": "A"}]


@pytest.mark.asyncio
async def test_file_source_missing_and_invalid(tmp_path: Path) -> None:
    with pytest.raises(LoadFailure):
        await FileRecordSource(tmp_path / "missing.json").fetch_records()

    bad = tmp_path / "bad.json"
    bad.write_text("[{", "utf-8")
    with pytest.raises(LoadFailure) as ei:
        await FileRecordSource(bad).fetch_records()
    assert "Invalid JSON" in ei.value.message


@pytest.mark.asyncio
async def test_bundled_sample_loads_and_normalizes() -> None:
    assert bundled_records_path().exists()
    raw = await FileRecordSource().fetch_records()
    tasks = normalize_tasks(raw)
    assert len(tasks) == len(raw) > 0
    assert all(t.revenue >= 0 and t.time_taken >= 0 for t in tasks)
    assert all(t.completed_at is not None for t in tasks if t.is_done)
