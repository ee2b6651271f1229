from __future__ import annotations

import httpx
import pytest

from src.contracts.resource_v1 import GitHubRepo, Platform
from src.orchestrators.search.backends import (
    ArchiveSearchBackend,
    FreeCodeCampSearchBackend,
    GitHubSearchBackend,
    RedditSearchBackend,
    YouTubeSearchBackend,
)


def _client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_github_search_parses_repositories_and_sends_token():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200,
            json={
                "items": [
                    {
                        "full_name": "facebook/react",
                        "description": "The library for web and native user interfaces.",
                        "html_url": "https://github.com/facebook/react",
                        "stargazers_count": 230000,
                        "forks_count": 47000,
                        "language": "JavaScript",
                        "topics": ["react", "ui", "frontend"],
                        "homepage": "https://react.dev",
                        "owner": {"login": "facebook", "avatar_url": "https://avatars/fb"},
                        "created_at": "2013-05-24T16:15:54Z",
                    },
                    {"full_name": "broken/entry"},
                ]
            },
        )

    backend = GitHubSearchBackend(token="ghp_test", client=_client(handler))
    repos = await backend.search(["react", "hooks"], "react hooks", limit=5)

    assert len(repos) == 1
    repo = repos[0]
    assert repo.stars == 230000
    assert repo.topics == ("react", "ui", "frontend")
    assert repo.owner == "facebook"
    assert repo.created_at is not None and repo.created_at.year == 2013
    request = seen[0]
    assert request.headers["Authorization"] == "Bearer ghp_test"
    assert request.url.params["q"] == "react hooks"
    assert request.url.params["per_page"] == "5"
    assert backend.get_source_name() == Platform.GITHUB


@pytest.mark.asyncio
async def test_github_errors_propagate_to_caller():
    backend = GitHubSearchBackend(client=_client(lambda r: httpx.Response(403, json={})))

    with pytest.raises(httpx.HTTPStatusError):
        await backend.search(["rust"], "rust")


@pytest.mark.asyncio
async def test_github_fetch_readme_returns_raw_text():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/repos/acme/lib/readme"
        return httpx.Response(200, text="# acme lib")

    backend = GitHubSearchBackend(client=_client(handler))
    repo = GitHubRepo(full_name="acme/lib", html_url="https://github.com/acme/lib")

    assert await backend.fetch_readme(repo) == "# acme lib"


@pytest.mark.asyncio
async def test_reddit_search_parses_posts():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.headers["User-Agent"] == "finder-tests/1.0"
        return httpx.Response(
            200,
            json={
                "data": {
                    "children": [
                        {
                            "data": {
                                "title": "How I learned Rust",
                                "selftext": "Start with the book.",
                                "permalink": "/r/rust/comments/1/how/",
                                "subreddit": "rust",
                                "ups": 420,
                                "num_comments": 37,
                                "author": "ferris",
                                "thumbnail": "self",
                                "created_utc": 1700000000,
                            }
                        },
                        {"data": {"title": "missing permalink"}},
                    ]
                }
            },
        )

    backend = RedditSearchBackend(user_agent="finder-tests/1.0", client=_client(handler))
    posts = await backend.search(["rust"], "rust")

    assert len(posts) == 1
    post = posts[0]
    assert post.upvotes == 420
    assert post.num_comments == 37
    assert post.thumbnail is None
    assert post.created_at is not None and post.created_at.tzinfo is not None


@pytest.mark.asyncio
async def test_youtube_without_key_makes_no_requests():
    calls: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200, json={})

    backend = YouTubeSearchBackend(api_key="", client=_client(handler))

    assert await backend.search(["python"], "python") == []
    assert calls == []


@pytest.mark.asyncio
async def test_youtube_merges_search_hits_with_video_details():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("/search"):
            return httpx.Response(
                200,
                json={
                    "items": [
                        {
                            "id": {"kind": "youtube#video", "videoId": "abc"},
                            "snippet": {
                                "title": "Python tutorial",
                                "channelTitle": "Teach",
                                "publishedAt": "2024-01-02T03:04:05Z",
                                "thumbnails": {"medium": {"url": "https://i.ytimg.com/abc"}},
                            },
                        },
                        {
                            "id": {"kind": "youtube#playlist", "playlistId": "PLxyz"},
                            "snippet": {"title": "Python course"},
                        },
                    ]
                },
            )
        assert request.url.params["id"] == "abc"
        return httpx.Response(
            200,
            json={
                "items": [
                    {
                        "id": "abc",
                        "statistics": {"viewCount": "15000", "likeCount": "300"},
                        "contentDetails": {"duration": "PT12M3S"},
                        "snippet": {"tags": ["python", "beginner"]},
                    }
                ]
            },
        )

    backend = YouTubeSearchBackend(api_key="yt-key", client=_client(handler))
    video, playlist = await backend.search(["python"], "python")

    assert video.views == 15000
    assert video.likes == 300
    assert video.duration == "PT12M3S"
    assert video.tags == ("python", "beginner")
    assert video.thumbnail == "https://i.ytimg.com/abc"
    assert playlist.kind == "playlist"
    assert playlist.video_id == "PLxyz"
    assert playlist.views == 0


@pytest.mark.asyncio
async def test_archive_search_handles_list_and_string_fields():
    def handler(request: httpx.Request) -> httpx.Response:
        assert "fl[]" in request.url.params
        return httpx.Response(
            200,
            json={
                "response": {
                    "docs": [
                        {
                            "identifier": "sicp",
                            "title": ["Structure and Interpretation", "of Computer Programs"],
                            "creator": "Abelson",
                            "subject": "lisp; scheme",
                            "downloads": 12000,
                            "year": 1996,
                            "mediatype": "texts",
                        },
                        {"title": "no identifier"},
                    ]
                }
            },
        )

    backend = ArchiveSearchBackend(client=_client(handler))
    (doc,) = await backend.search(["lisp"], "lisp")

    assert doc.title == "Structure and Interpretation of Computer Programs"
    assert doc.subjects == ("lisp", "scheme")
    assert doc.year == "1996"
    assert doc.media_type == "texts"


@pytest.mark.asyncio
async def test_freecodecamp_matches_catalog_keywords():
    backend = FreeCodeCampSearchBackend()

    titles = [item.title for item in await backend.search(["react"], "react")]

    assert "Front End Development Libraries" in titles
    assert await backend.search(["cobol mainframes"], "cobol mainframes") == []
    assert backend.get_source_name() == Platform.FREECODECAMP
