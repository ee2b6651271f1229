"""Cross-source ranker: merges per-source results into the final ordered list.

Small lists pass through untouched. Larger lists go to the rewriter's ranking call;
its indices are validated (out-of-range dropped, repeats dropped). When the ranking
call fails the merged list is truncated as-is. Without a rewriter, a local sort on
type priority then platform popularity is used.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence

from src.contracts.resource_v1 import ResourceItem
from src.core.config import SearchSettings
from src.core.logger import logger as finder_logger
from src.orchestrators.search.constants import POPULARITY_FIELD, TYPE_PRIORITY

logger = logging.getLogger(__name__)

RankFn = Callable[[str, Sequence[ResourceItem], int], Awaitable[list[int]]]


def deduplicate_results(items: Sequence[ResourceItem]) -> list[ResourceItem]:
    """Drop repeated URLs, keeping the first occurrence."""
    seen: set[str] = set()
    out: list[ResourceItem] = []
    for item in items:
        key = item.url.strip().rstrip("/").lower()
        if key in seen:
            continue
        seen.add(key)
        out.append(item)
    return out


def validate_indices(indices: Sequence[int], size: int, limit: int) -> list[int]:
    """Keep in-range indices in order, first occurrence only, at most `limit`."""
    seen: set[int] = set()
    valid: list[int] = []
    for idx in indices:
        if isinstance(idx, bool) or not isinstance(idx, int):
            continue
        if idx < 0 or idx >= size or idx in seen:
            continue
        seen.add(idx)
        valid.append(idx)
        if len(valid) >= limit:
            break
    return valid


def popularity_of(item: ResourceItem) -> int:
    field_name = POPULARITY_FIELD.get(item.platform)
    value = getattr(item, field_name, None) if field_name else None
    return int(value or 0)


def local_sort(items: Sequence[ResourceItem]) -> list[ResourceItem]:
    """Type priority first, then the platform's popularity metric, then relevance. Stable."""
    return sorted(
        items,
        key=lambda r: (
            TYPE_PRIORITY.get(r.type, len(TYPE_PRIORITY)),
            -popularity_of(r),
            -r.relevance,
        ),
    )


class CrossSourceRanker:
    """Produces the only guaranteed total order of a search response."""

    def __init__(self, settings: SearchSettings, rank_fn: RankFn | None = None):
        self._settings = settings
        self._rank_fn = rank_fn

    async def rank(self, query: str, items: Sequence[ResourceItem]) -> list[ResourceItem]:
        merged = list(items)
        if len(merged) <= self._settings.rank_floor:
            return merged

        if self._rank_fn is None:
            ranked = local_sort(merged)[: self._settings.max_results]
            logger.info("Ranker: %s merged -> %s by local sort", len(merged), len(ranked))
            return ranked

        limit = min(self._settings.rank_top_n, self._settings.max_results)
        try:
            indices = await asyncio.wait_for(
                self._rank_fn(query, merged, limit),
                timeout=self._settings.rewriter_timeout,
            )
        except Exception as e:
            finder_logger.rewriter_fallback("rank", f"{type(e).__name__}: {e}")
            return merged[: self._settings.max_results]

        valid = validate_indices(indices or [], len(merged), limit)
        if not valid:
            finder_logger.rewriter_fallback("rank", "no usable indices")
            return merged[: self._settings.max_results]

        ranked = [merged[i] for i in valid]
        logger.info(
            "Ranker: %s merged -> %s by rewriter (indices=%s)",
            len(merged),
            len(ranked),
            valid,
        )
        return ranked
