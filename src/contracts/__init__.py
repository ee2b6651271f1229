"""Resource search contract v1: shared types for raw source items, scored results, and HTTP payloads."""

from src.contracts.resource_v1 import (
    ArchiveDocument,
    ErrorResponse,
    FreeCodeCampItem,
    GitHubRepo,
    ItemType,
    Platform,
    PlatformFilter,
    RawItem,
    RedditPost,
    ResourceItem,
    SearchRequest,
    SearchResponse,
    YouTubeVideo,
)

__all__ = [
    "ArchiveDocument",
    "ErrorResponse",
    "FreeCodeCampItem",
    "GitHubRepo",
    "ItemType",
    "Platform",
    "PlatformFilter",
    "RawItem",
    "RedditPost",
    "ResourceItem",
    "SearchRequest",
    "SearchResponse",
    "YouTubeVideo",
]
