"""Source query planner: keywords via the rewriter (local split fallback) and source selection."""

import asyncio
from collections.abc import Awaitable, Callable, Sequence

from src.contracts.resource_v1 import Platform, PlatformFilter
from src.core.logger import logger
from src.llm.rewriter import normalize_keywords
from src.orchestrators.search.models import SearchPlan

ExpandFn = Callable[[str], Awaitable[list[str]]]


def fallback_keywords(query: str) -> list[str]:
    """Whitespace split of the raw query, empty tokens dropped, order kept."""
    return [t for t in query.split() if t]


def select_sources(
    platform_filter: PlatformFilter | str,
    configured: Sequence[Platform],
) -> list[Platform]:
    value = str(platform_filter).strip().lower()
    if value == PlatformFilter.ALL:
        return list(configured)
    return [p for p in configured if p.value == value]


class QueryPlanner:
    """Builds the SearchPlan for one request. One rewriter attempt, no retries."""

    def __init__(
        self,
        sources: Sequence[Platform],
        expand: ExpandFn | None = None,
        timeout: float = 8.0,
    ):
        self._sources = list(sources)
        self._expand = expand
        self._timeout = timeout

    async def plan(self, query: str, platform_filter: PlatformFilter | str = PlatformFilter.ALL) -> SearchPlan:
        sources = select_sources(platform_filter, self._sources)
        keywords, from_rewriter = await self._keywords(query)
        return SearchPlan(
            query=query,
            keywords=keywords,
            sources=sources,
            keywords_from_rewriter=from_rewriter,
        )

    async def _keywords(self, query: str) -> tuple[list[str], bool]:
        if self._expand is None:
            return fallback_keywords(query), False
        try:
            expanded = await asyncio.wait_for(self._expand(query), timeout=self._timeout)
            keywords = normalize_keywords(expanded or [])
            if keywords:
                return keywords, True
            logger.rewriter_fallback("expand", "empty keyword list")
        except Exception as e:
            logger.rewriter_fallback("expand", f"{type(e).__name__}: {e}")
        return fallback_keywords(query), False
