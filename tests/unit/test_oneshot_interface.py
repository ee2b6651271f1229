from __future__ import annotations

import json
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.contracts.resource_v1 import PlatformFilter, SearchResponse
from src.interfaces.oneshot import run_oneshot


@pytest.mark.asyncio
async def test_run_oneshot_prints_json_response(monkeypatch, capsys):
    runtime = SimpleNamespace(
        orchestrator=SimpleNamespace(
            search=AsyncMock(return_value=SearchResponse(meta={"query": "rust"}))
        ),
        close=AsyncMock(),
    )
    monkeypatch.setattr("src.interfaces.oneshot.build_runtime", MagicMock(return_value=runtime))

    code = await run_oneshot("rust", platform="Reddit")

    out = json.loads(capsys.readouterr().out)
    assert code == 0
    assert out["results"] == []
    assert out["meta"]["query"] == "rust"
    runtime.orchestrator.search.assert_awaited_once_with("rust", PlatformFilter.REDDIT)
    runtime.close.assert_awaited_once()


@pytest.mark.asyncio
async def test_run_oneshot_rejects_empty_query(capsys):
    code = await run_oneshot("   ")
    out = capsys.readouterr().out
    assert code == 2
    assert "must not be empty" in out


@pytest.mark.asyncio
async def test_run_oneshot_rejects_unknown_platform(capsys):
    code = await run_oneshot("rust", platform="myspace")
    assert code == 2
    assert "unknown platform" in capsys.readouterr().out
