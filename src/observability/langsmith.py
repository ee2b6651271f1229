"""LangSmith tracing for search runs. Inactive unless LANGSMITH_TRACING=true."""

from __future__ import annotations

import os
from collections.abc import Callable
from contextlib import asynccontextmanager
from typing import Any

from langsmith import traceable as _ls_traceable
from langsmith.run_helpers import trace as _ls_trace

PROJECT = os.getenv("LANGSMITH_PROJECT", "learning-resource-finder")


def tracing_enabled() -> bool:
    return os.getenv("LANGSMITH_TRACING", "").strip().lower() == "true"


class _UntracedRun:
    def end(self, outputs: dict[str, Any] | None = None) -> None:
        pass


@asynccontextmanager
async def _untraced():
    yield _UntracedRun()


def trace(
    name: str,
    run_type: str = "chain",
    *,
    inputs: dict[str, Any] | None = None,
    metadata: dict[str, Any] | None = None,
):
    """Async context manager for one traced call; the yielded run accepts `end(outputs=...)`."""
    if not tracing_enabled():
        return _untraced()
    return _ls_trace(
        name,
        run_type=run_type,  # type: ignore[arg-type]
        inputs=inputs or {},
        metadata=metadata or {},
        project_name=PROJECT,
    )


def traceable(
    name: str | None = None, run_type: str = "chain"
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    if not tracing_enabled():
        return lambda fn: fn
    return _ls_traceable(name=name, run_type=run_type, project_name=PROJECT)  # type: ignore[call-overload]
