"""Query rewriter: LLM-backed keyword expansion, short-list ranking, and semantic relevance.

Every method raises on failure (transport error or malformed model output).
Callers own the fallback policy.
"""

import json
import re
from collections.abc import Sequence
from pathlib import Path
from typing import Any, Protocol

from src.contracts.resource_v1 import ResourceItem
from src.core.logger import logger
from src.core.prompts import load_search_prompt, render_search_prompt
from src.llm.openrouter_client import LLMResponse


class RewriterError(Exception):
    """The model answered, but not in a shape we can use."""


class LLMClient(Protocol):
    async def generate(
        self,
        prompt: str,
        max_tokens: int = ...,
        temperature: float = ...,
        stop: list[str] | None = ...,
    ) -> LLMResponse: ...


def _extract_json(text: str) -> str:
    """Take first ```json ... ``` block or bare JSON from text."""
    text = (text or "").strip()
    if not text:
        return ""
    match = re.search(r"```(?:json)?\s*([\s\S]*?)```", text)
    if match:
        return match.group(1).strip()
    match = re.search(r"[\[{][\s\S]*[\]}]", text)
    if match:
        return match.group(0).strip()
    return text


def _parse_json(text: str) -> Any:
    cleaned = _extract_json(text)
    cleaned = re.sub(r",\s*}", "}", cleaned)
    cleaned = re.sub(r",\s*]", "]", cleaned)
    try:
        return json.loads(cleaned)
    except (json.JSONDecodeError, TypeError) as e:
        raise RewriterError(f"Unparsable model output: {text[:120]!r}") from e


def normalize_keywords(terms: Sequence[str]) -> list[str]:
    """Trim, lowercase, drop empties and repeats; first occurrence wins."""
    seen: set[str] = set()
    out: list[str] = []
    for term in terms:
        t = " ".join(str(term).split()).lower()
        if t and t not in seen:
            seen.add(t)
            out.append(t)
    return out


def _format_candidates(items: Sequence[ResourceItem], max_desc: int = 200) -> str:
    lines = []
    for i, item in enumerate(items):
        desc = " ".join((item.description or "").split())
        if len(desc) > max_desc:
            desc = desc[:max_desc].rstrip() + "..."
        lines.append(f"{i}: [{item.platform}] {item.title} - {desc}")
    return "\n".join(lines)


class QueryRewriter:
    """Narrow interface over a hosted LLM: expand(query), rank(query, items), check_relevance(query, content)."""

    def __init__(
        self,
        client: LLMClient,
        prompts_dir: Path | None = None,
        max_keywords: int = 6,
    ):
        self._client = client
        self._max_keywords = max_keywords
        self._prompt_expand = load_search_prompt("expand", prompts_dir)
        self._prompt_rank = load_search_prompt("rank", prompts_dir)
        self._prompt_relevance = load_search_prompt("relevance", prompts_dir)

    async def _generate(self, step: str, prompt: str, max_tokens: int) -> str:
        logger.set_step(step)
        try:
            response = await self._client.generate(
                prompt=prompt, max_tokens=max_tokens, temperature=0.2
            )
        finally:
            logger.set_step(None)
        return (getattr(response, "text", None) or "").strip()

    async def expand(self, query: str) -> list[str]:
        prompt = render_search_prompt(self._prompt_expand, query=query)
        raw = await self._generate("expand", prompt, max_tokens=100)
        data = _parse_json(raw)
        if isinstance(data, dict):
            data = data.get("keywords")
        if not isinstance(data, list) or not all(isinstance(t, str) for t in data):
            raise RewriterError(f"Expected a JSON array of strings, got {raw[:120]!r}")
        keywords = normalize_keywords(data)[: self._max_keywords]
        if not keywords:
            raise RewriterError("Model returned no keywords")
        return keywords

    async def rank(
        self, query: str, items: Sequence[ResourceItem], top_n: int = 5
    ) -> list[int]:
        """Return candidate indices, best first. Indices are not range-checked here."""
        prompt = render_search_prompt(
            self._prompt_rank,
            query=query,
            items=_format_candidates(items),
            top_n=top_n,
        )
        raw = await self._generate("rank", prompt, max_tokens=60)
        data = _parse_json(raw)
        if isinstance(data, dict):
            data = data.get("indices") or data.get("ranking")
        if not isinstance(data, list):
            raise RewriterError(f"Expected a JSON array of indices, got {raw[:120]!r}")
        indices: list[int] = []
        for value in data:
            if isinstance(value, bool):
                continue
            if isinstance(value, int):
                indices.append(value)
            elif isinstance(value, str) and value.strip().lstrip("-").isdigit():
                indices.append(int(value.strip()))
        return indices

    async def check_relevance(self, query: str, content: str) -> float:
        """Semantic relevance of content to query in [0, 1]."""
        prompt = render_search_prompt(
            self._prompt_relevance, query=query, content=content[:2000]
        )
        raw = await self._generate("relevance", prompt, max_tokens=10)
        match = re.search(r"\d*\.?\d+", raw)
        if not match:
            raise RewriterError(f"Expected a relevance number, got {raw[:60]!r}")
        return min(1.0, max(0.0, float(match.group(0))))
