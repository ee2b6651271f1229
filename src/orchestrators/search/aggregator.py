"""Source aggregator: fans the plan out to every selected adapter concurrently.

Each adapter call is time-bounded and wrapped so that a raised error or timeout
becomes an empty SourceOutcome carrying the error. One failed source never
fails the request; there are no retries at this layer.
"""

import asyncio
import logging
import time
from collections.abc import Mapping

from src.contracts.resource_v1 import Platform
from src.orchestrators.search.interface import SourceAdapter
from src.orchestrators.search.models import SearchPlan, SourceOutcome

logger = logging.getLogger(__name__)


class SourceAggregator:
    """Routes one plan to the registered adapters and collects per-source outcomes."""

    def __init__(
        self,
        adapters: Mapping[Platform, SourceAdapter],
        timeout: float = 10.0,
        limit: int = 10,
    ) -> None:
        self._adapters = dict(adapters)
        self._timeout = timeout
        self._limit = limit

    def has_source(self, source: Platform) -> bool:
        return source in self._adapters

    async def aggregate(self, plan: SearchPlan) -> list[SourceOutcome]:
        """One outcome per planned source, in plan order."""
        if not plan.sources:
            return []
        tasks = [self._search_one(source, plan) for source in plan.sources]
        return list(await asyncio.gather(*tasks))

    async def _search_one(self, source: Platform, plan: SearchPlan) -> SourceOutcome:
        adapter = self._adapters.get(source)
        if adapter is None:
            logger.warning("Aggregator: no adapter registered for source '%s'", source)
            return SourceOutcome(source=source, error=f"No adapter for source '{source}'")

        t0 = time.monotonic()
        try:
            items = await asyncio.wait_for(
                adapter.search(plan.keywords, plan.query, limit=self._limit),
                timeout=self._timeout,
            )
        except TimeoutError:
            elapsed_ms = round((time.monotonic() - t0) * 1000, 1)
            logger.warning("Aggregator: %s timed out after %.1fms", source, elapsed_ms)
            return SourceOutcome(
                source=source,
                error=f"{source}: timed out after {self._timeout:g}s",
                elapsed_ms=elapsed_ms,
            )
        except Exception as e:
            elapsed_ms = round((time.monotonic() - t0) * 1000, 1)
            logger.warning("Aggregator: %s failed: %s", source, e)
            return SourceOutcome(source=source, error=f"{source}: {e!s}", elapsed_ms=elapsed_ms)

        elapsed_ms = round((time.monotonic() - t0) * 1000, 1)
        logger.debug("Aggregator: %s returned %s items in %.1fms", source, len(items), elapsed_ms)
        return SourceOutcome(source=source, items=list(items or []), elapsed_ms=elapsed_ms)
