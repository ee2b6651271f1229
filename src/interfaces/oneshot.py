"""One-shot interface: run a single search, print the JSON response, exit."""

from __future__ import annotations

import asyncio
import json

from src.contracts.resource_v1 import PlatformFilter
from src.core.bootstrap import build_runtime


async def run_oneshot(query: str, platform: str = PlatformFilter.ALL) -> int:
    text = (query or "").strip()
    if not text:
        print("Error: query must not be empty")
        return 2
    try:
        platform_filter = PlatformFilter((platform or PlatformFilter.ALL).strip().lower())
    except ValueError:
        print(f"Error: unknown platform '{platform}'")
        return 2

    runtime = build_runtime()
    try:
        response = await runtime.orchestrator.search(text, platform_filter)
        print(json.dumps(response.to_payload(), indent=2, ensure_ascii=False))
        return 0
    finally:
        await runtime.close()


def main(query: str, platform: str = PlatformFilter.ALL) -> int:
    return asyncio.run(run_oneshot(query=query, platform=platform))
