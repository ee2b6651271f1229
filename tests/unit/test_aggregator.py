from __future__ import annotations

import asyncio
from collections.abc import Sequence

import pytest

from src.contracts.resource_v1 import FreeCodeCampItem, Platform, RawItem
from src.orchestrators.search.aggregator import SourceAggregator
from src.orchestrators.search.interface import SourceAdapter
from src.orchestrators.search.models import SearchPlan


class StaticAdapter(SourceAdapter):
    def __init__(self, platform: Platform, items: list[RawItem]):
        self._platform = platform
        self._items = items
        self.calls: list[tuple[list[str], str, int]] = []

    async def search(self, keywords: Sequence[str], query: str, limit: int = 10) -> list[RawItem]:
        self.calls.append((list(keywords), query, limit))
        return self._items[:limit]

    def get_source_name(self) -> Platform:
        return self._platform


class FailingAdapter(SourceAdapter):
    def __init__(self, platform: Platform, error: Exception):
        self._platform = platform
        self._error = error

    async def search(self, keywords: Sequence[str], query: str, limit: int = 10) -> list[RawItem]:
        raise self._error

    def get_source_name(self) -> Platform:
        return self._platform


class SlowAdapter(SourceAdapter):
    def __init__(self, platform: Platform, delay: float):
        self._platform = platform
        self._delay = delay

    async def search(self, keywords: Sequence[str], query: str, limit: int = 10) -> list[RawItem]:
        await asyncio.sleep(self._delay)
        return []

    def get_source_name(self) -> Platform:
        return self._platform


def _items(n: int) -> list[RawItem]:
    return [FreeCodeCampItem(title=f"Course {i}", url=f"https://fcc.org/{i}") for i in range(n)]


def _plan(*sources: Platform) -> SearchPlan:
    return SearchPlan(query="learn css", keywords=["learn", "css"], sources=list(sources))


@pytest.mark.asyncio
async def test_failed_source_contributes_nothing_and_others_survive():
    aggregator = SourceAggregator(
        {
            Platform.GITHUB: FailingAdapter(Platform.GITHUB, RuntimeError("403 rate limited")),
            Platform.FREECODECAMP: StaticAdapter(Platform.FREECODECAMP, _items(3)),
        }
    )

    outcomes = await aggregator.aggregate(_plan(Platform.GITHUB, Platform.FREECODECAMP))

    assert [o.source for o in outcomes] == [Platform.GITHUB, Platform.FREECODECAMP]
    failed, ok = outcomes
    assert not failed.ok and failed.items == []
    assert "403 rate limited" in failed.error
    assert ok.ok
    assert [i.url for o in outcomes for i in o.items] == [i.url for i in _items(3)]


@pytest.mark.asyncio
async def test_slow_source_times_out_as_failure():
    aggregator = SourceAggregator(
        {
            Platform.REDDIT: SlowAdapter(Platform.REDDIT, delay=1),
            Platform.FREECODECAMP: StaticAdapter(Platform.FREECODECAMP, _items(1)),
        },
        timeout=0.05,
    )

    slow, fast = await aggregator.aggregate(_plan(Platform.REDDIT, Platform.FREECODECAMP))

    assert "timed out" in slow.error
    assert len(fast.items) == 1


@pytest.mark.asyncio
async def test_sources_run_concurrently():
    started = asyncio.Event()

    class Waiter(SourceAdapter):
        async def search(self, keywords, query, limit=10):
            await started.wait()
            return _items(1)

        def get_source_name(self):
            return Platform.GITHUB

    class Starter(SourceAdapter):
        async def search(self, keywords, query, limit=10):
            started.set()
            return _items(2)

        def get_source_name(self):
            return Platform.ARCHIVE

    aggregator = SourceAggregator(
        {Platform.GITHUB: Waiter(), Platform.ARCHIVE: Starter()},
        timeout=1.0,
    )

    outcomes = await aggregator.aggregate(_plan(Platform.GITHUB, Platform.ARCHIVE))

    assert all(o.ok for o in outcomes)
    assert [len(o.items) for o in outcomes] == [1, 2]


@pytest.mark.asyncio
async def test_unregistered_source_and_empty_plan():
    aggregator = SourceAggregator({})

    assert await aggregator.aggregate(_plan()) == []
    (outcome,) = await aggregator.aggregate(_plan(Platform.YOUTUBE))
    assert outcome.error and outcome.items == []
    assert aggregator.has_source(Platform.YOUTUBE) is False


@pytest.mark.asyncio
async def test_adapter_receives_plan_keywords_and_fetch_limit():
    adapter = StaticAdapter(Platform.FREECODECAMP, _items(20))
    aggregator = SourceAggregator({Platform.FREECODECAMP: adapter}, limit=4)

    (outcome,) = await aggregator.aggregate(_plan(Platform.FREECODECAMP))

    assert adapter.calls == [(["learn", "css"], "learn css", 4)]
    assert len(outcome.items) == 4
