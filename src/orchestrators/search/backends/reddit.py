"""Reddit search backend (public search.json). Returns RedditPost."""

from collections.abc import Sequence
from datetime import UTC, datetime

import httpx

from src.contracts.resource_v1 import Platform, RedditPost
from src.orchestrators.search.interface import SourceAdapter

REDDIT_SEARCH_URL = "https://www.reddit.com/search.json"


class RedditSearchBackend(SourceAdapter):
    def __init__(
        self,
        user_agent: str = "learning-resource-finder/0.1",
        client: httpx.AsyncClient | None = None,
        timeout: float = 10.0,
    ):
        self._user_agent = user_agent
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def search(
        self,
        keywords: Sequence[str],
        query: str,
        limit: int = 10,
    ) -> list[RedditPost]:
        q = " ".join(keywords) or query.strip()
        if not q:
            return []
        response = await self._client.get(
            REDDIT_SEARCH_URL,
            params={"q": q, "limit": limit, "sort": "relevance", "t": "all"},
            headers={"User-Agent": self._user_agent},
            follow_redirects=True,
        )
        response.raise_for_status()
        children = (response.json().get("data") or {}).get("children") or []

        results: list[RedditPost] = []
        for child in children[:limit]:
            post = (child or {}).get("data") or {}
            if not post.get("permalink") or not post.get("title"):
                continue
            created = post.get("created_utc")
            thumbnail = post.get("thumbnail") or ""
            results.append(
                RedditPost(
                    title=post["title"],
                    selftext=post.get("selftext") or "",
                    permalink=post["permalink"],
                    subreddit=post.get("subreddit") or "",
                    upvotes=int(post.get("ups") or post.get("score") or 0),
                    num_comments=int(post.get("num_comments") or 0),
                    author=post.get("author"),
                    over_18=bool(post.get("over_18")),
                    thumbnail=thumbnail if thumbnail.startswith("http") else None,
                    created_at=(
                        datetime.fromtimestamp(float(created), tz=UTC)
                        if created is not None
                        else None
                    ),
                )
            )
        return results

    def get_source_name(self) -> Platform:
        return Platform.REDDIT

    async def close(self) -> None:
        await self._client.aclose()
