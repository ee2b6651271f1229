"""Per-source relevance scorers.

Each scorer is a pure function of (raw item, keywords, query) returning an additive
integer score: keyword matches + popularity step bonus + structural bonuses - format
penalties. Scores are not normalized across sources here.

`to_resource` converts a raw item into the normalized ResourceItem carrying its score.
"""

import re
from collections.abc import Callable, Sequence

from src.contracts.resource_v1 import (
    ArchiveDocument,
    FreeCodeCampItem,
    GitHubRepo,
    ItemType,
    Platform,
    RawItem,
    RedditPost,
    ResourceItem,
    YouTubeVideo,
)
from src.orchestrators.search.constants import (
    ARCHIVE_DOWNLOADS_BONUS,
    ARCHIVE_LEARNING_MEDIA_TYPES,
    EDUCATIONAL_SUBREDDITS,
    EDUCATIONAL_TERMS,
    GITHUB_STARS_BONUS,
    HIGH_QUALITY_COMMENTS,
    KEYWORD_WEIGHTS,
    REDDIT_UPVOTES_BONUS,
    SHORT_VIDEO_SECONDS,
    YOUTUBE_VIEWS_BONUS,
)

_ISO_DURATION = re.compile(
    r"^P(?:(?P<days>\d+)D)?(?:T(?:(?P<hours>\d+)H)?(?:(?P<minutes>\d+)M)?(?:(?P<seconds>\d+)S)?)?$"
)


def searchable_text(*parts: str | Sequence[str] | None) -> str:
    chunks: list[str] = []
    for part in parts:
        if not part:
            continue
        if isinstance(part, str):
            chunks.append(part)
        else:
            chunks.extend(p for p in part if p)
    return " ".join(chunks).lower()


def keyword_bonus(platform: Platform, keywords: Sequence[str], text: str, title: str) -> int:
    weights = KEYWORD_WEIGHTS[platform]
    title_lower = title.lower()
    score = 0
    for kw in keywords:
        kw = kw.lower().strip()
        if not kw:
            continue
        if kw in text:
            score += weights.in_text
        if kw in title_lower:
            score += weights.in_title
    return score


def has_educational_term(title: str) -> bool:
    lowered = title.lower()
    return any(term in lowered for term in EDUCATIONAL_TERMS)


def is_educational_subreddit(subreddit: str) -> bool:
    name = (subreddit or "").lower()
    return bool(name) and any(sub in name for sub in EDUCATIONAL_SUBREDDITS)


def duration_seconds(iso_duration: str | None) -> int | None:
    if not iso_duration:
        return None
    match = _ISO_DURATION.match(iso_duration.strip())
    if not match:
        return None
    parts = {k: int(v) for k, v in match.groupdict().items() if v}
    return (
        parts.get("days", 0) * 86400
        + parts.get("hours", 0) * 3600
        + parts.get("minutes", 0) * 60
        + parts.get("seconds", 0)
    )


def format_duration(iso_duration: str | None) -> str | None:
    seconds = duration_seconds(iso_duration)
    if seconds is None:
        return None
    h, rem = divmod(seconds, 3600)
    m, s = divmod(rem, 60)
    return f"{h}:{m:02d}:{s:02d}" if h else f"{m}:{s:02d}"


def score_github(repo: GitHubRepo, keywords: Sequence[str], query: str) -> int:
    text = searchable_text(repo.full_name, repo.description, repo.topics, repo.language)
    score = keyword_bonus(Platform.GITHUB, keywords, text, repo.full_name)
    score += GITHUB_STARS_BONUS.bonus(repo.stars)
    if not repo.fork:
        score += 1
    if repo.homepage:
        score += 1
    if len(repo.topics) >= 3:
        score += 1
    if repo.archived:
        score -= 2
    return score


def score_youtube(video: YouTubeVideo, keywords: Sequence[str], query: str) -> int:
    text = searchable_text(video.title, video.description, video.channel, video.tags)
    score = keyword_bonus(Platform.YOUTUBE, keywords, text, video.title)
    score += YOUTUBE_VIEWS_BONUS.bonus(video.views)
    if video.likes > 100:
        score += 1
    if video.kind == "playlist":
        score += 1
    if has_educational_term(video.title):
        score += 1
    seconds = duration_seconds(video.duration)
    if seconds is not None and seconds < SHORT_VIDEO_SECONDS:
        score -= 2
    return score


def score_reddit(post: RedditPost, keywords: Sequence[str], query: str) -> int:
    text = searchable_text(post.title, post.selftext, post.subreddit)
    score = keyword_bonus(Platform.REDDIT, keywords, text, post.title)
    score += REDDIT_UPVOTES_BONUS.bonus(post.upvotes)
    if post.num_comments >= HIGH_QUALITY_COMMENTS:
        score += 1
    if is_educational_subreddit(post.subreddit):
        score += 2
    if has_educational_term(post.title):
        score += 1
    if post.over_18:
        score -= 3
    return score


def score_archive(doc: ArchiveDocument, keywords: Sequence[str], query: str) -> int:
    text = searchable_text(doc.title, doc.description, doc.subjects, doc.creator)
    score = keyword_bonus(Platform.ARCHIVE, keywords, text, doc.title)
    score += ARCHIVE_DOWNLOADS_BONUS.bonus(doc.downloads)
    if (doc.media_type or "").lower() in ARCHIVE_LEARNING_MEDIA_TYPES:
        score += 1
    if has_educational_term(doc.title):
        score += 1
    return score


def score_freecodecamp(item: FreeCodeCampItem, keywords: Sequence[str], query: str) -> int:
    text = searchable_text(item.title, item.description, item.keywords)
    score = keyword_bonus(Platform.FREECODECAMP, keywords, text, item.title)
    if item.kind == "curriculum":
        score += 2
    if has_educational_term(item.title):
        score += 1
    return score


_SCORERS: dict[Platform, Callable[..., int]] = {
    Platform.GITHUB: score_github,
    Platform.YOUTUBE: score_youtube,
    Platform.REDDIT: score_reddit,
    Platform.ARCHIVE: score_archive,
    Platform.FREECODECAMP: score_freecodecamp,
}


def score(item: RawItem, keywords: Sequence[str], query: str) -> int:
    """Relevance score for any raw item, dispatched on its platform tag."""
    return _SCORERS[item.platform](item, keywords, query)


def to_resource(item: RawItem, relevance: float) -> ResourceItem:
    """Normalize a raw item; keeps every field that feeds scoring display or a badge."""
    if isinstance(item, GitHubRepo):
        return ResourceItem(
            platform=Platform.GITHUB,
            type=ItemType.REPOSITORY,
            title=item.full_name,
            description=item.description,
            url=item.html_url,
            relevance=relevance,
            thumbnail=item.avatar_url,
            author=item.owner,
            published_at=item.created_at,
            stars=item.stars,
            forks=item.forks,
            language=item.language,
        )
    if isinstance(item, YouTubeVideo):
        if item.kind == "playlist":
            url = f"https://www.youtube.com/playlist?list={item.video_id}"
        else:
            url = f"https://www.youtube.com/watch?v={item.video_id}"
        return ResourceItem(
            platform=Platform.YOUTUBE,
            type=ItemType.PLAYLIST if item.kind == "playlist" else ItemType.VIDEO,
            title=item.title,
            description=item.description,
            url=url,
            relevance=relevance,
            thumbnail=item.thumbnail,
            author=item.channel,
            published_at=item.published_at,
            views=item.views,
            likes=item.likes,
            duration=format_duration(item.duration),
            channel=item.channel,
        )
    if isinstance(item, RedditPost):
        return ResourceItem(
            platform=Platform.REDDIT,
            type=ItemType.POST,
            title=item.title,
            description=item.selftext,
            url=f"https://www.reddit.com{item.permalink}",
            relevance=relevance,
            thumbnail=item.thumbnail,
            author=item.author,
            published_at=item.created_at,
            upvotes=item.upvotes,
            num_comments=item.num_comments,
            subreddit=item.subreddit,
        )
    if isinstance(item, ArchiveDocument):
        return ResourceItem(
            platform=Platform.ARCHIVE,
            type=ItemType.DOCUMENT,
            title=item.title,
            description=item.description,
            url=f"https://archive.org/details/{item.identifier}",
            relevance=relevance,
            thumbnail=f"https://archive.org/services/img/{item.identifier}",
            author=item.creator,
            downloads=item.downloads,
            year=item.year,
            media_type=item.media_type,
        )
    if isinstance(item, FreeCodeCampItem):
        return ResourceItem(
            platform=Platform.FREECODECAMP,
            type=ItemType.COURSE if item.kind == "curriculum" else ItemType.ARTICLE,
            title=item.title,
            description=item.description,
            url=item.url,
            relevance=relevance,
            author=item.author,
            published_at=item.published_at,
        )
    raise TypeError(f"Unsupported raw item: {type(item).__name__}")
