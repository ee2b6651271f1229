"""Internet Archive search backend (advancedsearch). Returns ArchiveDocument."""

from collections.abc import Sequence
from typing import Any

import httpx

from src.contracts.resource_v1 import ArchiveDocument, Platform
from src.orchestrators.search.interface import SourceAdapter

ARCHIVE_SEARCH_URL = "https://archive.org/advancedsearch.php"
ARCHIVE_FIELDS = (
    "identifier",
    "title",
    "description",
    "creator",
    "subject",
    "downloads",
    "year",
    "mediatype",
)


def _as_text(value: Any) -> str:
    """Archive fields come back as either a string or a list of strings."""
    if value is None:
        return ""
    if isinstance(value, list):
        return " ".join(str(v) for v in value if v)
    return str(value)


def _as_list(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, list):
        return [str(v) for v in value if v]
    return [s.strip() for s in str(value).split(";") if s.strip()]


class ArchiveSearchBackend(SourceAdapter):
    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        timeout: float = 10.0,
    ):
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def search(
        self,
        keywords: Sequence[str],
        query: str,
        limit: int = 10,
    ) -> list[ArchiveDocument]:
        q = " ".join(keywords) or query.strip()
        if not q:
            return []
        params: list[tuple[str, str | int]] = [
            ("q", f"({q}) AND mediatype:(texts OR movies)"),
            ("rows", limit),
            ("page", 1),
            ("output", "json"),
            ("sort[]", "downloads desc"),
        ]
        params.extend(("fl[]", f) for f in ARCHIVE_FIELDS)
        response = await self._client.get(ARCHIVE_SEARCH_URL, params=params)
        response.raise_for_status()
        docs = (response.json().get("response") or {}).get("docs") or []

        results: list[ArchiveDocument] = []
        for doc in docs[:limit]:
            if not isinstance(doc, dict) or not doc.get("identifier"):
                continue
            year = doc.get("year")
            results.append(
                ArchiveDocument(
                    identifier=doc["identifier"],
                    title=_as_text(doc.get("title")) or doc["identifier"],
                    description=_as_text(doc.get("description")),
                    creator=_as_text(doc.get("creator")) or None,
                    subjects=_as_list(doc.get("subject")),
                    downloads=int(doc.get("downloads") or 0),
                    year=str(year) if year else None,
                    media_type=doc.get("mediatype"),
                )
            )
        return results

    def get_source_name(self) -> Platform:
        return Platform.ARCHIVE

    async def close(self) -> None:
        await self._client.aclose()
