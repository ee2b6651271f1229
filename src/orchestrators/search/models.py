"""Request-scoped pipeline values: the search plan and per-source outcomes."""

from dataclasses import dataclass, field

from src.contracts.resource_v1 import Platform, RawItem


@dataclass(frozen=True)
class SearchPlan:
    """Keywords used identically by every selected source, plus the sources to query."""

    query: str
    keywords: list[str]
    sources: list[Platform]
    keywords_from_rewriter: bool = False


@dataclass
class SourceOutcome:
    """What one source contributed. A failed source carries an error and no items."""

    source: Platform
    items: list[RawItem] = field(default_factory=list)
    error: str | None = None
    elapsed_ms: float = 0.0

    @property
    def ok(self) -> bool:
        return self.error is None
