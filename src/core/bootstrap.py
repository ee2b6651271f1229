"""Adapter registration and search pipeline wiring at startup."""

from dataclasses import dataclass, field

from src.contracts.resource_v1 import Platform
from src.core.config import Config, SearchSettings
from src.core.logger import logger
from src.llm.openrouter_client import OpenRouterClient
from src.llm.rewriter import QueryRewriter
from src.orchestrators.search.aggregator import SourceAggregator
from src.orchestrators.search.backends import (
    ArchiveSearchBackend,
    FreeCodeCampSearchBackend,
    GitHubSearchBackend,
    RedditSearchBackend,
    YouTubeSearchBackend,
)
from src.orchestrators.search.interface import SourceAdapter
from src.orchestrators.search.orchestrator import ResourceSearchOrchestrator
from src.orchestrators.search.planner import QueryPlanner
from src.orchestrators.search.ranker import CrossSourceRanker
from src.orchestrators.search.relevance import RelevanceFilter, SemanticRelevanceChecker
from src.services.tag_store import InMemoryTagStore, TagStore


@dataclass
class SearchRuntime:
    """Everything one server process needs; built once, closed on shutdown."""

    orchestrator: ResourceSearchOrchestrator
    settings: SearchSettings
    tag_store: TagStore
    adapters: dict[Platform, SourceAdapter] = field(default_factory=dict)
    llm_client: OpenRouterClient | None = None

    async def close(self) -> None:
        for adapter in self.adapters.values():
            try:
                await adapter.close()
            except Exception as e:
                logger.warning(f"Failed to close {adapter.get_source_name()} adapter: {e}")
        if self.llm_client is not None:
            await self.llm_client.close()


def build_adapters(config: Config) -> dict[Platform, SourceAdapter]:
    timeout = config.source_timeout
    adapters: list[SourceAdapter] = [
        GitHubSearchBackend(token=config.github_token, timeout=timeout),
        RedditSearchBackend(user_agent=config.reddit_user_agent, timeout=timeout),
        ArchiveSearchBackend(timeout=timeout),
        FreeCodeCampSearchBackend(),
    ]
    if config.youtube_api_key:
        adapters.append(YouTubeSearchBackend(api_key=config.youtube_api_key, timeout=timeout))
    else:
        logger.warning("YOUTUBE_API_KEY not set: YouTube source disabled")
    return {a.get_source_name(): a for a in adapters}


def build_orchestrator(
    settings: SearchSettings,
    adapters: dict[Platform, SourceAdapter],
    rewriter: QueryRewriter | None = None,
) -> ResourceSearchOrchestrator:
    semantic: SemanticRelevanceChecker | None = None
    if rewriter is not None and settings.semantic_check:
        github = adapters.get(Platform.GITHUB)
        readme_loader = github.fetch_readme if isinstance(github, GitHubSearchBackend) else None
        semantic = SemanticRelevanceChecker(rewriter.check_relevance, readme_loader=readme_loader)

    planner = QueryPlanner(
        sources=list(adapters.keys()),
        expand=rewriter.expand if rewriter is not None else None,
        timeout=settings.rewriter_timeout,
    )
    aggregator = SourceAggregator(
        adapters,
        timeout=settings.source_timeout,
        limit=settings.per_source_fetch,
    )
    ranker = CrossSourceRanker(
        settings,
        rank_fn=rewriter.rank if rewriter is not None and settings.llm_ranking else None,
    )
    return ResourceSearchOrchestrator(
        planner=planner,
        aggregator=aggregator,
        relevance_filter=RelevanceFilter(settings, semantic=semantic),
        ranker=ranker,
    )


def build_runtime(config: Config | None = None, tag_store: TagStore | None = None) -> SearchRuntime:
    cfg = config or Config.load()
    for problem in cfg.validate():
        logger.warning(problem)
    settings = cfg.search_settings()
    adapters = build_adapters(cfg)

    llm_client: OpenRouterClient | None = None
    rewriter: QueryRewriter | None = None
    if cfg.has_rewriter:
        llm_client = OpenRouterClient(api_key=cfg.openrouter_api_key, models=cfg.openrouter_models)
        rewriter = QueryRewriter(llm_client, prompts_dir=cfg.prompts_dir)
    else:
        logger.warning("OPENROUTER_API_KEY not set: keyword expansion and LLM ranking disabled")

    logger.info(
        "Search sources: %s | rewriter=%s | semantic_check=%s",
        [str(p) for p in adapters],
        rewriter is not None,
        settings.semantic_check,
    )
    return SearchRuntime(
        orchestrator=build_orchestrator(settings, adapters, rewriter),
        settings=settings,
        tag_store=tag_store or InMemoryTagStore(),
        adapters=adapters,
        llm_client=llm_client,
    )
