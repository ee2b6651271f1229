"""YouTube search backend (Data API v3): search, then one statistics lookup for the videos."""

from collections.abc import Sequence
from datetime import datetime
from typing import Any

import httpx

from src.contracts.resource_v1 import Platform, YouTubeVideo
from src.orchestrators.search.interface import SourceAdapter

YOUTUBE_API = "https://www.googleapis.com/youtube/v3"


def _parse_datetime(value: Any) -> datetime | None:
    if not value or not isinstance(value, str):
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


def _best_thumbnail(snippet: dict[str, Any]) -> str | None:
    thumbs = snippet.get("thumbnails") or {}
    for size in ("high", "medium", "default"):
        url = (thumbs.get(size) or {}).get("url")
        if url:
            return url
    return None


class YouTubeSearchBackend(SourceAdapter):
    def __init__(
        self,
        api_key: str = "",
        client: httpx.AsyncClient | None = None,
        timeout: float = 10.0,
    ):
        self._api_key = (api_key or "").strip()
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def search(
        self,
        keywords: Sequence[str],
        query: str,
        limit: int = 10,
    ) -> list[YouTubeVideo]:
        q = " ".join(keywords) or query.strip()
        if not self._api_key or not q:
            return []

        response = await self._client.get(
            f"{YOUTUBE_API}/search",
            params={
                "part": "snippet",
                "q": q,
                "type": "video,playlist",
                "maxResults": limit,
                "relevanceLanguage": "en",
                "safeSearch": "strict",
                "key": self._api_key,
            },
        )
        response.raise_for_status()
        hits = [h for h in (response.json().get("items") or []) if isinstance(h, dict)]

        video_ids = [
            (h.get("id") or {}).get("videoId")
            for h in hits
            if (h.get("id") or {}).get("kind") == "youtube#video"
        ]
        details = await self._video_details([v for v in video_ids if v])

        results: list[YouTubeVideo] = []
        for hit in hits[:limit]:
            ident = hit.get("id") or {}
            snippet = hit.get("snippet") or {}
            if ident.get("kind") == "youtube#playlist":
                item_id, kind = ident.get("playlistId"), "playlist"
            else:
                item_id, kind = ident.get("videoId"), "video"
            if not item_id:
                continue
            extra = details.get(item_id, {})
            stats = extra.get("statistics") or {}
            results.append(
                YouTubeVideo(
                    video_id=item_id,
                    kind=kind,
                    title=snippet.get("title") or "",
                    description=snippet.get("description") or "",
                    channel=snippet.get("channelTitle"),
                    views=int(stats.get("viewCount") or 0),
                    likes=int(stats.get("likeCount") or 0),
                    duration=(extra.get("contentDetails") or {}).get("duration"),
                    thumbnail=_best_thumbnail(snippet),
                    tags=(extra.get("snippet") or {}).get("tags") or [],
                    published_at=_parse_datetime(snippet.get("publishedAt")),
                )
            )
        return results

    async def _video_details(self, video_ids: list[str]) -> dict[str, dict[str, Any]]:
        if not video_ids:
            return {}
        response = await self._client.get(
            f"{YOUTUBE_API}/videos",
            params={
                "part": "snippet,statistics,contentDetails",
                "id": ",".join(video_ids),
                "key": self._api_key,
            },
        )
        response.raise_for_status()
        return {
            v["id"]: v
            for v in (response.json().get("items") or [])
            if isinstance(v, dict) and v.get("id")
        }

    def get_source_name(self) -> Platform:
        return Platform.YOUTUBE

    async def close(self) -> None:
        await self._client.aclose()
