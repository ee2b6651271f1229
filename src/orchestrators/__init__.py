"""Orchestrators: multi-step search pipelines."""

from src.orchestrators.search import ResourceSearchOrchestrator, SourceAdapter

__all__ = ["ResourceSearchOrchestrator", "SourceAdapter"]
