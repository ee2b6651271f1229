from collections.abc import AsyncIterator

import pytest_asyncio

from src.core.bootstrap import SearchRuntime, build_runtime


@pytest_asyncio.fixture
async def runtime() -> AsyncIterator[SearchRuntime]:
    """Real runtime (network, env keys) for e2e suites only."""
    instance = build_runtime()
    try:
        yield instance
    finally:
        await instance.close()
