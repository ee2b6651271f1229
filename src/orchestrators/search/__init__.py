"""Resource search: plan, fan out to sources, filter, merge and rank."""

from src.orchestrators.search.interface import SourceAdapter
from src.orchestrators.search.models import SearchPlan, SourceOutcome
from src.orchestrators.search.orchestrator import ResourceSearchOrchestrator

__all__ = [
    "ResourceSearchOrchestrator",
    "SearchPlan",
    "SourceAdapter",
    "SourceOutcome",
]
