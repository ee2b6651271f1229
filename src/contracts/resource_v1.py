"""Resource Search Contract v1.

Defines the canonical types for:
  - Platforms and the platform selector (Platform, PlatformFilter)
  - Raw items as returned by each source adapter (one tagged variant per platform)
  - The normalized, scored result item (ResourceItem)
  - HTTP request / response payloads (SearchRequest, SearchResponse)

Raw items are owned by the adapter call that produced them and are never mutated.
"""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

# ---------------------------------------------------------------------------
# Platforms
# ---------------------------------------------------------------------------


class Platform(StrEnum):
    GITHUB = "github"
    YOUTUBE = "youtube"
    REDDIT = "reddit"
    ARCHIVE = "archive"
    FREECODECAMP = "freecodecamp"


class PlatformFilter(StrEnum):
    """Platform selector sent by the UI: every source, or exactly one."""

    ALL = "all"
    GITHUB = "github"
    YOUTUBE = "youtube"
    REDDIT = "reddit"
    ARCHIVE = "archive"
    FREECODECAMP = "freecodecamp"


class ItemType(StrEnum):
    REPOSITORY = "repository"
    VIDEO = "video"
    PLAYLIST = "playlist"
    POST = "post"
    DOCUMENT = "document"
    COURSE = "course"
    ARTICLE = "article"


# ---------------------------------------------------------------------------
# Raw items (adapter output)
# ---------------------------------------------------------------------------


class _RawItem(BaseModel):
    model_config = ConfigDict(frozen=True)


class GitHubRepo(_RawItem):
    platform: Literal[Platform.GITHUB] = Platform.GITHUB
    full_name: str
    description: str = ""
    html_url: str
    stars: int = 0
    forks: int = 0
    language: str | None = None
    topics: tuple[str, ...] = ()
    homepage: str | None = None
    fork: bool = False
    archived: bool = False
    owner: str | None = None
    avatar_url: str | None = None
    created_at: datetime | None = None


class YouTubeVideo(_RawItem):
    platform: Literal[Platform.YOUTUBE] = Platform.YOUTUBE
    video_id: str
    kind: Literal["video", "playlist"] = "video"
    title: str
    description: str = ""
    channel: str | None = None
    views: int = 0
    likes: int = 0
    duration: str | None = Field(default=None, description="ISO-8601 duration, e.g. PT12M3S")
    thumbnail: str | None = None
    tags: tuple[str, ...] = ()
    published_at: datetime | None = None


class RedditPost(_RawItem):
    platform: Literal[Platform.REDDIT] = Platform.REDDIT
    title: str
    selftext: str = ""
    permalink: str
    subreddit: str = ""
    upvotes: int = 0
    num_comments: int = 0
    author: str | None = None
    over_18: bool = False
    thumbnail: str | None = None
    created_at: datetime | None = None


class ArchiveDocument(_RawItem):
    platform: Literal[Platform.ARCHIVE] = Platform.ARCHIVE
    identifier: str
    title: str
    description: str = ""
    creator: str | None = None
    subjects: tuple[str, ...] = ()
    downloads: int = 0
    year: str | None = None
    media_type: str | None = None


class FreeCodeCampItem(_RawItem):
    platform: Literal[Platform.FREECODECAMP] = Platform.FREECODECAMP
    title: str
    description: str = ""
    url: str
    kind: Literal["curriculum", "article"] = "curriculum"
    keywords: tuple[str, ...] = ()
    author: str | None = None
    published_at: datetime | None = None


RawItem = Annotated[
    GitHubRepo | YouTubeVideo | RedditPost | ArchiveDocument | FreeCodeCampItem,
    Field(discriminator="platform"),
]


# ---------------------------------------------------------------------------
# Normalized, scored item
# ---------------------------------------------------------------------------


class ResourceItem(BaseModel):
    """A normalized result with its relevance score and badge fields."""

    model_config = ConfigDict(frozen=True)

    platform: Platform
    type: ItemType
    title: str
    description: str = ""
    url: str
    relevance: float = Field(default=0.0, description="Additive heuristic score; higher is better")
    thumbnail: str | None = None
    author: str | None = None
    published_at: datetime | None = None
    # Badge fields (only the ones the platform supplies are set)
    stars: int | None = None
    forks: int | None = None
    language: str | None = None
    upvotes: int | None = None
    num_comments: int | None = None
    subreddit: str | None = None
    views: int | None = None
    likes: int | None = None
    duration: str | None = None
    channel: str | None = None
    downloads: int | None = None
    year: str | None = None
    media_type: str | None = None

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)


# ---------------------------------------------------------------------------
# HTTP payloads
# ---------------------------------------------------------------------------


class SearchRequest(BaseModel):
    query: str = Field(description="Free-text learning query")
    platform: PlatformFilter = Field(default=PlatformFilter.ALL)

    @field_validator("query")
    @classmethod
    def _query_not_blank(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("query must not be empty")
        return value.strip()


class SearchResponse(BaseModel):
    """Final response from the search orchestrator."""

    results: list[ResourceItem] = Field(default_factory=list, description="Ordered search results")
    errors: list[str] = Field(default_factory=list, description="Partial failures (one source failed)")
    meta: dict[str, Any] = Field(
        default_factory=lambda: {
            "query": "",
            "keywords": [],
            "sources_queried": [],
            "source_counts": {},
            "total_results": 0,
            "timing_ms": {},
        },
        description="Pipeline metadata: query, keywords, sources, counts, timing",
    )

    def to_payload(self) -> dict[str, Any]:
        return {
            "results": [r.to_payload() for r in self.results],
            "errors": list(self.errors),
            "meta": self.meta,
        }


class ErrorResponse(BaseModel):
    error: str
