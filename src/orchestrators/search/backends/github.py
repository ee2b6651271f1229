"""GitHub repository search backend (REST search API). Returns GitHubRepo."""

from collections.abc import Sequence
from datetime import datetime
from typing import Any

import httpx

from src.contracts.resource_v1 import GitHubRepo, Platform
from src.orchestrators.search.interface import SourceAdapter

GITHUB_API = "https://api.github.com"


def _parse_datetime(value: Any) -> datetime | None:
    if not value or not isinstance(value, str):
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


def repo_from_api(item: dict[str, Any]) -> GitHubRepo:
    owner = item.get("owner") or {}
    return GitHubRepo(
        full_name=item.get("full_name") or item.get("name") or "",
        description=item.get("description") or "",
        html_url=item.get("html_url") or "",
        stars=int(item.get("stargazers_count") or 0),
        forks=int(item.get("forks_count") or 0),
        language=item.get("language"),
        topics=item.get("topics") or [],
        homepage=item.get("homepage") or None,
        fork=bool(item.get("fork")),
        archived=bool(item.get("archived")),
        owner=owner.get("login"),
        avatar_url=owner.get("avatar_url"),
        created_at=_parse_datetime(item.get("created_at")),
    )


class GitHubSearchBackend(SourceAdapter):
    def __init__(
        self,
        token: str = "",
        client: httpx.AsyncClient | None = None,
        timeout: float = 10.0,
    ):
        self._token = (token or "").strip()
        self._client = client or httpx.AsyncClient(timeout=timeout)

    def _headers(self, accept: str = "application/vnd.github+json") -> dict[str, str]:
        headers = {"Accept": accept}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    async def search(
        self,
        keywords: Sequence[str],
        query: str,
        limit: int = 10,
    ) -> list[GitHubRepo]:
        q = " ".join(keywords) or query.strip()
        if not q:
            return []
        params = {"q": q, "sort": "stars", "order": "desc", "per_page": limit}
        response = await self._client.get(
            f"{GITHUB_API}/search/repositories",
            params=params,
            headers=self._headers(),
        )
        response.raise_for_status()
        data = response.json()

        results: list[GitHubRepo] = []
        for item in (data.get("items") or [])[:limit]:
            if not isinstance(item, dict) or not item.get("html_url"):
                continue
            results.append(repo_from_api(item))
        return results

    async def fetch_readme(self, repo: GitHubRepo) -> str:
        """Raw README text; raises on HTTP errors (a missing README is a 404)."""
        response = await self._client.get(
            f"{GITHUB_API}/repos/{repo.full_name}/readme",
            headers=self._headers("application/vnd.github.raw+json"),
        )
        response.raise_for_status()
        return response.text

    def get_source_name(self) -> Platform:
        return Platform.GITHUB

    async def close(self) -> None:
        await self._client.aclose()
