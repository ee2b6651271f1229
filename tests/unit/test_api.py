from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import AsyncMock

import httpx
import pytest

from src.contracts.resource_v1 import (
    ItemType,
    Platform,
    PlatformFilter,
    ResourceItem,
    SearchResponse,
)
from src.server.app import create_app
from src.services.tag_store import InMemoryTagStore


def _runtime(search: AsyncMock) -> SimpleNamespace:
    return SimpleNamespace(
        orchestrator=SimpleNamespace(search=search),
        tag_store=InMemoryTagStore(),
    )


def _client(runtime) -> httpx.AsyncClient:
    app = create_app(runtime)
    return httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test")


@pytest.mark.asyncio
async def test_post_search_returns_results_payload():
    item = ResourceItem(
        platform=Platform.GITHUB,
        type=ItemType.REPOSITORY,
        title="acme/react-course",
        url="https://github.com/acme/react-course",
        relevance=9,
        stars=1200,
    )
    search = AsyncMock(return_value=SearchResponse(results=[item], meta={"query": "react"}))

    async with _client(_runtime(search)) as client:
        response = await client.post("/api/search", json={"query": " react ", "platform": "github"})

    assert response.status_code == 200
    body = response.json()
    assert body["results"][0]["url"] == "https://github.com/acme/react-course"
    assert body["results"][0]["stars"] == 1200
    assert body["errors"] == []
    search.assert_awaited_once_with("react", PlatformFilter.GITHUB)


@pytest.mark.asyncio
async def test_get_search_defaults_platform_to_all():
    search = AsyncMock(return_value=SearchResponse())

    async with _client(_runtime(search)) as client:
        response = await client.get("/api/search", params={"query": "sql"})

    assert response.status_code == 200
    search.assert_awaited_once_with("sql", PlatformFilter.ALL)


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("method", "kwargs"),
    [
        ("post", {"json": {"query": "   "}}),
        ("post", {"json": {}}),
        ("post", {"json": {"query": "x", "platform": "myspace"}}),
        ("get", {"params": {}}),
        ("get", {"params": {"query": "x", "platform": "myspace"}}),
    ],
)
async def test_invalid_requests_are_400_without_searching(method, kwargs):
    search = AsyncMock(return_value=SearchResponse())

    async with _client(_runtime(search)) as client:
        response = await getattr(client, method)("/api/search", **kwargs)

    assert response.status_code == 400
    assert isinstance(response.json()["error"], str)
    search.assert_not_awaited()


@pytest.mark.asyncio
async def test_all_sources_failing_is_still_200():
    search = AsyncMock(
        return_value=SearchResponse(errors=["github: timed out after 10s", "reddit: 503"])
    )

    async with _client(_runtime(search)) as client:
        response = await client.post("/api/search", json={"query": "go"})

    assert response.status_code == 200
    assert response.json()["results"] == []
    assert len(response.json()["errors"]) == 2


@pytest.mark.asyncio
async def test_unexpected_failure_is_generic_500():
    search = AsyncMock(side_effect=KeyError("secret internals"))

    async with _client(_runtime(search)) as client:
        response = await client.post("/api/search", json={"query": "go"})

    assert response.status_code == 500
    assert response.json() == {"error": "Internal server error"}


@pytest.mark.asyncio
async def test_tag_routes_round_trip():
    runtime = _runtime(AsyncMock())

    async with _client(runtime) as client:
        added = await client.post("/api/tags/res-1", json={"tag": "Beginner"})
        await client.post("/api/tags/res-2", json={"tag": "beginner"})
        fetched = await client.get("/api/tags/res-1")
        removed = await client.delete("/api/tags/res-1/beginner")
        empty = await client.post("/api/tags/res-1", json={"tag": "   "})

    assert added.json()["tags"] == ["beginner"]
    assert fetched.json() == {"tags": ["beginner"], "popularTags": ["beginner"]}
    assert removed.json()["tags"] == []
    assert empty.status_code == 400


@pytest.mark.asyncio
async def test_health():
    async with _client(_runtime(AsyncMock())) as client:
        response = await client.get("/health")

    assert response.json() == {"status": "ok"}
