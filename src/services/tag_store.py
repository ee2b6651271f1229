"""Resource tags: a small key-value store keyed by resource id.

The store is injected into the HTTP layer; the in-memory implementation keeps
state for the life of the process only.
"""

from collections import Counter
from dataclasses import dataclass, field
from typing import Protocol


def normalize_tag(tag: str) -> str:
    return (tag or "").strip().lower()


@dataclass(frozen=True)
class ResourceTags:
    tags: list[str] = field(default_factory=list)
    popular_tags: list[str] = field(default_factory=list)

    def to_payload(self) -> dict[str, list[str]]:
        return {"tags": list(self.tags), "popularTags": list(self.popular_tags)}


class TagStore(Protocol):
    def add_tag(self, resource_id: str, tag: str) -> ResourceTags: ...

    def remove_tag(self, resource_id: str, tag: str) -> ResourceTags: ...

    def get_tags(self, resource_id: str) -> ResourceTags: ...

    def popular_tags(self) -> list[str]: ...


class InMemoryTagStore:
    """Tags per resource plus global usage counts. Each call mutates the maps once."""

    def __init__(self) -> None:
        self._resource_tags: dict[str, list[str]] = {}
        self._tag_counts: Counter[str] = Counter()

    def add_tag(self, resource_id: str, tag: str) -> ResourceTags:
        tag = normalize_tag(tag)
        if not tag:
            raise ValueError("tag must not be empty")
        tags = self._resource_tags.setdefault(resource_id, [])
        if tag not in tags:
            tags.append(tag)
            self._tag_counts[tag] += 1
        return self.get_tags(resource_id)

    def remove_tag(self, resource_id: str, tag: str) -> ResourceTags:
        tag = normalize_tag(tag)
        tags = self._resource_tags.get(resource_id)
        if tags and tag in tags:
            tags.remove(tag)
            if not tags:
                del self._resource_tags[resource_id]
            self._tag_counts[tag] -= 1
            if self._tag_counts[tag] <= 0:
                del self._tag_counts[tag]
        return self.get_tags(resource_id)

    def get_tags(self, resource_id: str) -> ResourceTags:
        return ResourceTags(
            tags=list(self._resource_tags.get(resource_id, [])),
            popular_tags=self.popular_tags(),
        )

    def popular_tags(self) -> list[str]:
        """Tags used on more than one resource, most used first."""
        return [tag for tag, count in self._tag_counts.most_common() if count > 1]
