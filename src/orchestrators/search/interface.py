"""Standard interface for source adapters used by the aggregator.

Every adapter (GitHub, YouTube, Reddit, Internet Archive, freeCodeCamp) implements
SourceAdapter and returns its own raw item variant. Adapters may raise; the
aggregator isolates their failures.
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence

from src.contracts.resource_v1 import Platform, RawItem


class SourceAdapter(ABC):
    """Base class for all source adapters."""

    @abstractmethod
    async def search(
        self,
        keywords: Sequence[str],
        query: str,
        limit: int = 10,
    ) -> list[RawItem]:
        """Query the platform once and return raw items in platform order."""

    @abstractmethod
    def get_source_name(self) -> Platform:
        """Canonical platform identifier."""

    async def close(self) -> None:
        """Release network resources held by the adapter."""
