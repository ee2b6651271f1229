from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from src.contracts.resource_v1 import ItemType, Platform, ResourceItem
from src.llm.openrouter_client import LLMResponse
from src.llm.rewriter import QueryRewriter, RewriterError, normalize_keywords


def _rewriter(*texts: str) -> tuple[QueryRewriter, AsyncMock]:
    generate = AsyncMock(side_effect=[LLMResponse(text=t, model="test/model") for t in texts])
    client = type("FakeClient", (), {"generate": generate})()
    return QueryRewriter(client), generate


def test_normalize_keywords_dedupes_case_insensitively():
    assert normalize_keywords([" React ", "react", "react  hooks", ""]) == ["react", "react hooks"]


@pytest.mark.asyncio
async def test_expand_parses_fenced_json_array():
    rewriter, generate = _rewriter('```json\n["React", "hooks", "useState"]\n```')

    assert await rewriter.expand("react hooks") == ["react", "hooks", "usestate"]
    prompt = generate.await_args.kwargs["prompt"]
    assert "react hooks" in prompt


@pytest.mark.asyncio
async def test_expand_accepts_keywords_object_and_caps_length():
    rewriter, _ = _rewriter('{"keywords": ["a", "b", "c", "d", "e", "f", "g", "h"]}')

    assert await rewriter.expand("letters") == ["a", "b", "c", "d", "e", "f"]


@pytest.mark.asyncio
@pytest.mark.parametrize("text", ["no json here", '{"other": 1}', "[]", "[1, 2]"])
async def test_expand_rejects_unusable_output(text: str):
    rewriter, _ = _rewriter(text)

    with pytest.raises(RewriterError):
        await rewriter.expand("anything")


@pytest.mark.asyncio
async def test_rank_parses_indices_and_lists_candidates():
    items = [
        ResourceItem(
            platform=Platform.YOUTUBE,
            type=ItemType.VIDEO,
            title=f"Video {i}",
            description="word " * 100,
            url=f"https://youtube.com/watch?v={i}",
        )
        for i in range(3)
    ]
    rewriter, generate = _rewriter('Here you go: [2, "0", true, 1.5, 1]')

    assert await rewriter.rank("learn go", items, top_n=2) == [2, 0, 1]
    prompt = generate.await_args.kwargs["prompt"]
    assert "0: [youtube] Video 0" in prompt
    assert "2: [youtube] Video 2" in prompt


@pytest.mark.asyncio
async def test_rank_accepts_indices_object_and_rejects_other_shapes():
    rewriter, _ = _rewriter('{"indices": [1, 0]}', '"first"')

    assert await rewriter.rank("q", [], top_n=2) == [1, 0]
    with pytest.raises(RewriterError):
        await rewriter.rank("q", [], top_n=2)


@pytest.mark.asyncio
async def test_check_relevance_clamps_and_raises_on_missing_number():
    rewriter, _ = _rewriter("0.8", "Relevance: 1.5", "not sure")

    assert await rewriter.check_relevance("q", "content") == pytest.approx(0.8)
    assert await rewriter.check_relevance("q", "content") == 1.0
    with pytest.raises(RewriterError):
        await rewriter.check_relevance("q", "content")


@pytest.mark.asyncio
async def test_transport_errors_propagate():
    generate = AsyncMock(side_effect=RuntimeError("connection reset"))
    client = type("FakeClient", (), {"generate": generate})()

    with pytest.raises(RuntimeError):
        await QueryRewriter(client).expand("q")
