import pytest

from src.contracts.resource_v1 import Platform, PlatformFilter
from src.core.bootstrap import SearchRuntime


@pytest.mark.asyncio
async def test_github_search_returns_scored_repositories(runtime: SearchRuntime):
    response = await runtime.orchestrator.search("react hooks tutorial", PlatformFilter.GITHUB)

    assert response.meta["sources_queried"] == ["github"]
    assert len(response.results) <= runtime.settings.max_results
    for item in response.results:
        assert item.platform == Platform.GITHUB
        assert item.url.startswith("https://github.com/")


@pytest.mark.asyncio
async def test_all_platforms_complete_even_with_failures(runtime: SearchRuntime):
    response = await runtime.orchestrator.search("learn python", PlatformFilter.ALL)

    assert len(response.results) <= runtime.settings.max_results
    urls = [r.url for r in response.results]
    assert len(urls) == len(set(urls))
