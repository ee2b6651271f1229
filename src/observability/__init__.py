"""Observability: LangSmith tracing for search runs (optional, env-controlled)."""

from src.observability.langsmith import trace, traceable, tracing_enabled

__all__ = ["trace", "traceable", "tracing_enabled"]
