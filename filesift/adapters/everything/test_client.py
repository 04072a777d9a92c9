"""
Tests for Everything client and query syntax.
"""

from __future__ import annotations

from pathlib import Path

import httpx
import pytest

from filesift.config.errors import EngineUnavailableError

from .client import EverythingClient
from .query import build_search_string, expand_wildcards

# --- Query syntax ---


def test_expand_wildcards() -> None:
    """Test each token becomes a prefix match unless it has wildcards."""
    assert expand_wildcards("report") == "report*"
    assert expand_wildcards("annual  report") == "annual* report*"
    assert expand_wildcards("rep*rt q?.txt") == "rep*rt q?.txt"
    assert expand_wildcards("   ") == ""


def test_build_search_string_with_scope() -> None:
    assert build_search_string("report", "C:\\Work\\") == r'path:"C:\Work\*" report*'
    assert build_search_string("report", "C:\\") == r'path:"C:\*" report*'
    assert build_search_string("report", "/home/me") == 'path:"/home/me/*" report*'
    assert build_search_string("report", None) == "report*"


# --- Client ---


def _client(handler) -> EverythingClient:
    return EverythingClient(transport=httpx.MockTransport(handler))


async def test_query_builds_request_and_joins_paths() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200,
            json={
                "totalResults": 2,
                "results": [
                    {"type": "file", "name": "report.pdf", "path": r"C:\Docs"},
                    {"type": "folder", "name": "reports", "path": "C:\\"},
                ],
            },
        )

    client = _client(handler)
    paths = await client.query("report", scope_root=r"C:\Docs", offset=1000, limit=500)
    await client.close()

    assert paths == [r"C:\Docs\report.pdf", r"C:\reports"]
    params = seen[0].url.params
    assert params["search"] == r'path:"C:\Docs\*" report*'
    assert params["json"] == "1"
    assert params["path_column"] == "1"
    assert params["offset"] == "1000"
    assert params["count"] == "500"
    assert params["case"] == "0"
    assert params["wholeword"] == "0"


async def test_query_empty_results() -> None:
    client = _client(lambda request: httpx.Response(200, json={"totalResults": 0, "results": []}))
    assert await client.query("nothing") == []


async def test_query_server_error_raises_unavailable() -> None:
    client = _client(lambda request: httpx.Response(500))

    with pytest.raises(EngineUnavailableError):
        await client.query("report")


async def test_query_connection_error_raises_unavailable() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    client = _client(handler)

    with pytest.raises(EngineUnavailableError):
        await client.query("report")


async def test_is_running() -> None:
    up = _client(lambda request: httpx.Response(200, json={"totalResults": 0, "results": []}))
    assert await up.is_running() is True

    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    assert await _client(refuse).is_running() is False


async def test_initialize_attaches_to_running_server() -> None:
    client = _client(lambda request: httpx.Response(200, json={"results": []}))
    assert await client.initialize() is True


async def test_initialize_without_executable_fails(tmp_path: Path) -> None:
    """Test a down server with no launchable binary reports not ready."""

    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    client = EverythingClient(
        transport=httpx.MockTransport(refuse),
        executable=tmp_path / "Everything.exe",
    )

    assert await client.initialize() is False
