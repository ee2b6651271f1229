"""Resource search orchestrator: plan, fan out, score and filter, merge, rank.

Pipeline:
  1. Plan: keywords (rewriter, local split fallback) and sources (platform selector)
  2. Aggregate: concurrent adapter calls, failures isolated per source
  3. Score + filter each source's items (per-source cap, fail-open semantic gate)
  4. Merge in source order and drop repeated URLs
  5. Cross-source ranking and truncation
"""

import asyncio
import time
from datetime import UTC, datetime

from src.contracts.resource_v1 import PlatformFilter, ResourceItem, SearchResponse
from src.core.logger import logger
from src.observability import traceable
from src.orchestrators.search.aggregator import SourceAggregator
from src.orchestrators.search.models import SearchPlan, SourceOutcome
from src.orchestrators.search.planner import QueryPlanner
from src.orchestrators.search.ranker import CrossSourceRanker, deduplicate_results
from src.orchestrators.search.relevance import FilterContext, RelevanceFilter


class ResourceSearchOrchestrator:
    """Runs one search request end to end. Holds no per-request state."""

    def __init__(
        self,
        planner: QueryPlanner,
        aggregator: SourceAggregator,
        relevance_filter: RelevanceFilter,
        ranker: CrossSourceRanker,
    ):
        self._planner = planner
        self._aggregator = aggregator
        self._filter = relevance_filter
        self._ranker = ranker

    async def _filter_outcome(
        self, outcome: SourceOutcome, plan: SearchPlan, now: datetime
    ) -> list[ResourceItem]:
        if not outcome.ok or not outcome.items:
            logger.source_result(
                outcome.source,
                fetched=len(outcome.items),
                accepted=0,
                duration_seconds=outcome.elapsed_ms / 1000,
                error_reason=outcome.error,
            )
            return []
        context = FilterContext(query=plan.query, keywords=plan.keywords, now=now)
        accepted = await self._filter.select(outcome.items, context)
        logger.source_result(
            outcome.source,
            fetched=len(outcome.items),
            accepted=len(accepted),
            duration_seconds=outcome.elapsed_ms / 1000,
        )
        return accepted

    @traceable(name="resource_search", run_type="chain")
    async def search(
        self,
        query: str,
        platform: PlatformFilter | str = PlatformFilter.ALL,
    ) -> SearchResponse:
        pipeline_start = time.monotonic()
        timing_ms: dict[str, float] = {}
        query = (query or "").strip()
        logger.search_request(query, str(platform))

        # 1. Plan
        t0 = time.monotonic()
        plan = await self._planner.plan(query, platform)
        timing_ms["plan"] = round((time.monotonic() - t0) * 1000, 1)

        # 2. Aggregate
        t0 = time.monotonic()
        outcomes = await self._aggregator.aggregate(plan)
        timing_ms["aggregate"] = round((time.monotonic() - t0) * 1000, 1)
        errors = [o.error for o in outcomes if o.error]

        # 3. Score + filter, one task per source
        t0 = time.monotonic()
        now = datetime.now(UTC)
        per_source = await asyncio.gather(
            *(self._filter_outcome(o, plan, now) for o in outcomes)
        )
        timing_ms["filter"] = round((time.monotonic() - t0) * 1000, 1)

        # 4. Merge
        merged = deduplicate_results([item for items in per_source for item in items])

        # 5. Rank
        t0 = time.monotonic()
        ranked = await self._ranker.rank(query, merged)
        timing_ms["rank"] = round((time.monotonic() - t0) * 1000, 1)
        timing_ms["total"] = round((time.monotonic() - pipeline_start) * 1000, 1)

        sources_queried = [str(s) for s in plan.sources]
        logger.search_complete(
            total_results=len(ranked),
            sources=sources_queried,
            errors=len(errors),
            duration_seconds=timing_ms["total"] / 1000,
        )

        return SearchResponse(
            results=ranked,
            errors=errors,
            meta={
                "query": query,
                "keywords": plan.keywords,
                "keywords_from_rewriter": plan.keywords_from_rewriter,
                "sources_queried": sources_queried,
                "source_counts": {
                    str(o.source): len(items) for o, items in zip(outcomes, per_source)
                },
                "candidates": len(merged),
                "total_results": len(ranked),
                "timing_ms": timing_ms,
            },
        )
