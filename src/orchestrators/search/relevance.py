"""Relevance filter: per-source score threshold, popularity floor with new-item grace, semantic gate.

The semantic gate calls out to the rewriter (and, for GitHub, fetches the README).
If that dependency fails for any reason the filter accepts the item: a degraded
dependency yields extra marginal results, never an empty page.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta

from src.contracts.resource_v1 import (
    FreeCodeCampItem,
    GitHubRepo,
    Platform,
    RawItem,
    RedditPost,
    ResourceItem,
    YouTubeVideo,
)
from src.core.config import SearchSettings
from src.orchestrators.search.constants import (
    FILTER_POLICIES,
    GOOD_README_LENGTH,
    HIGH_QUALITY_COMMENTS,
    MINIMUM_README_LENGTH,
    README_CONTEXT_CHARS,
    SEMANTIC_DOCUMENTED_FACTOR,
    SEMANTIC_RELEVANCE_THRESHOLD,
    FilterPolicy,
)
from src.orchestrators.search.scoring import is_educational_subreddit, score, to_resource

logger = logging.getLogger(__name__)

RelevanceFn = Callable[[str, str], Awaitable[float]]
ReadmeLoader = Callable[[GitHubRepo], Awaitable[str]]


@dataclass
class FilterContext:
    """Request-scoped state for filtering one source's items."""

    query: str
    keywords: list[str]
    now: datetime = field(default_factory=lambda: datetime.now(UTC))
    accepted: int = 0


@dataclass(frozen=True)
class SemanticVerdict:
    relevant: bool
    veto: bool = False


def item_timestamp(item: RawItem) -> datetime | None:
    if isinstance(item, (GitHubRepo, RedditPost)):
        ts = item.created_at
    elif isinstance(item, (YouTubeVideo, FreeCodeCampItem)):
        ts = item.published_at
    else:
        ts = None
    if ts is not None and ts.tzinfo is None:
        ts = ts.replace(tzinfo=UTC)
    return ts


def popularity(item: RawItem) -> int:
    if isinstance(item, GitHubRepo):
        return item.stars
    if isinstance(item, RedditPost):
        return item.upvotes
    return 0


def is_within_grace(item: RawItem, policy: FilterPolicy, now: datetime) -> bool:
    if policy.grace_days <= 0:
        return False
    ts = item_timestamp(item)
    if ts is None:
        return False
    return now - ts < timedelta(days=policy.grace_days)


class SemanticRelevanceChecker:
    """Semantic gate backed by an LLM relevance call. Raises when a dependency fails."""

    def __init__(
        self,
        relevance_fn: RelevanceFn,
        readme_loader: ReadmeLoader | None = None,
        threshold: float = SEMANTIC_RELEVANCE_THRESHOLD,
    ):
        self._relevance = relevance_fn
        self._readme_loader = readme_loader
        self._threshold = threshold

    async def evaluate(self, item: RawItem, context: FilterContext) -> SemanticVerdict:
        if isinstance(item, GitHubRepo):
            return await self._evaluate_github(item, context)
        if isinstance(item, RedditPost):
            return await self._evaluate_reddit(item, context)
        content = f"{getattr(item, 'title', '')}\n{getattr(item, 'description', '')}"
        relevance = await self._relevance(context.query, content)
        return SemanticVerdict(relevant=relevance >= self._threshold)

    async def _evaluate_github(self, repo: GitHubRepo, context: FilterContext) -> SemanticVerdict:
        readme = ""
        if self._readme_loader is not None:
            readme = await self._readme_loader(repo)
            if len(readme) < MINIMUM_README_LENGTH:
                return SemanticVerdict(relevant=False, veto=True)
        relevance = await self._relevance(
            context.query,
            f"{repo.description}\n{readme[:README_CONTEXT_CHARS]}",
        )
        query_lower = context.query.lower()
        has_relevant_topic = any(
            t.lower() in query_lower or query_lower in t.lower()
            for t in repo.topics
            if t
        )
        threshold = self._threshold
        if len(readme) > GOOD_README_LENGTH:
            threshold *= SEMANTIC_DOCUMENTED_FACTOR
        return SemanticVerdict(relevant=relevance >= threshold or has_relevant_topic)

    async def _evaluate_reddit(self, post: RedditPost, context: FilterContext) -> SemanticVerdict:
        relevance = await self._relevance(context.query, f"{post.title}\n{post.selftext}")
        policy = FILTER_POLICIES[Platform.REDDIT]
        high_quality = (
            post.upvotes >= policy.popularity_floor * 3
            or post.num_comments >= HIGH_QUALITY_COMMENTS
        )
        is_new = is_within_grace(post, policy, context.now)
        rescued = is_educational_subreddit(post.subreddit) and (high_quality or is_new)
        return SemanticVerdict(relevant=relevance >= self._threshold or rescued)


class RelevanceFilter:
    """Decides which scored items of one source reach the ranker."""

    def __init__(
        self,
        settings: SearchSettings,
        semantic: SemanticRelevanceChecker | None = None,
        policies: dict[Platform, FilterPolicy] | None = None,
    ):
        self._settings = settings
        self._semantic = semantic
        self._policies = policies or FILTER_POLICIES

    async def accept(self, item: RawItem, item_score: float, context: FilterContext) -> bool:
        if context.accepted >= self._settings.per_source_cap:
            return False

        policy = self._policies.get(item.platform, FilterPolicy())
        verdict: SemanticVerdict | None = None
        if self._semantic is not None and policy.semantic_check:
            try:
                verdict = await asyncio.wait_for(
                    self._semantic.evaluate(item, context),
                    timeout=self._settings.rewriter_timeout,
                )
            except Exception as e:
                logger.warning(
                    "Semantic check failed for %s item, accepting: %s",
                    item.platform,
                    e,
                )
                return True
            if verdict.veto:
                return False

        if not is_within_grace(item, policy, context.now) and popularity(item) < policy.popularity_floor:
            return False

        if item_score >= self._settings.min_score_for(item.platform):
            return True
        return bool(verdict and verdict.relevant)

    async def select(
        self,
        items: Sequence[RawItem],
        context: FilterContext,
    ) -> list[ResourceItem]:
        """Score and filter items in source order; stops once the per-source cap is reached."""
        accepted: list[ResourceItem] = []
        for item in items:
            if context.accepted >= self._settings.per_source_cap:
                break
            item_score = score(item, context.keywords, context.query)
            if await self.accept(item, item_score, context):
                accepted.append(to_resource(item, item_score))
                context.accepted += 1
        return accepted
