"""Shared typed constants for scoring, filtering and ranking."""

from dataclasses import dataclass

from src.contracts.resource_v1 import ItemType, Platform


@dataclass(frozen=True)
class StepBonus:
    """Step bonus keyed to magnitude thresholds.

    Non-cumulative: the highest tier reached wins. Cumulative: every tier passed adds.
    """

    tiers: tuple[tuple[int, int], ...]  # (exclusive lower bound, bonus), ascending
    cumulative: bool = False

    def bonus(self, value: int) -> int:
        if self.cumulative:
            return sum(b for bound, b in self.tiers if value > bound)
        best = 0
        for bound, b in self.tiers:
            if value > bound:
                best = b
        return best


GITHUB_STARS_BONUS = StepBonus(((100, 1), (1_000, 2), (10_000, 3)))
YOUTUBE_VIEWS_BONUS = StepBonus(((1_000, 1), (10_000, 1), (100_000, 1)), cumulative=True)
REDDIT_UPVOTES_BONUS = StepBonus(((10, 1), (100, 2), (1_000, 3)))
ARCHIVE_DOWNLOADS_BONUS = StepBonus(((100, 1), (1_000, 2), (10_000, 3)))


@dataclass(frozen=True)
class KeywordWeights:
    in_text: int = 2
    in_title: int = 3


KEYWORD_WEIGHTS: dict[Platform, KeywordWeights] = {
    Platform.GITHUB: KeywordWeights(in_text=2, in_title=3),
    Platform.YOUTUBE: KeywordWeights(in_text=2, in_title=2),
    Platform.REDDIT: KeywordWeights(in_text=2, in_title=3),
    Platform.ARCHIVE: KeywordWeights(in_text=2, in_title=2),
    Platform.FREECODECAMP: KeywordWeights(in_text=2, in_title=3),
}

EDUCATIONAL_TERMS: tuple[str, ...] = (
    "tutorial",
    "course",
    "guide",
    "introduction",
    "beginner",
    "beginners",
    "learn",
    "learning",
    "crash course",
    "lesson",
    "walkthrough",
    "handbook",
    "explained",
)

EDUCATIONAL_SUBREDDITS: tuple[str, ...] = (
    "programming",
    "learnprogramming",
    "coding",
    "webdev",
    "javascript",
    "python",
    "java",
    "cpp",
    "csharp",
    "machinelearning",
    "datascience",
    "computerscience",
    "learnjavascript",
    "learnpython",
    "learnjava",
    "webdevelopment",
    "frontend",
    "backend",
    "fullstack",
    "devops",
    "technology",
    "tech",
    "softwareengineering",
    "compsci",
)

ARCHIVE_LEARNING_MEDIA_TYPES: frozenset[str] = frozenset({"texts", "movies"})

SHORT_VIDEO_SECONDS = 60


@dataclass(frozen=True)
class FilterPolicy:
    """Popularity floor and new-item grace window for one source."""

    popularity_floor: int = 0
    grace_days: int = 0
    semantic_check: bool = False


FILTER_POLICIES: dict[Platform, FilterPolicy] = {
    Platform.GITHUB: FilterPolicy(popularity_floor=3, grace_days=90, semantic_check=True),
    Platform.REDDIT: FilterPolicy(popularity_floor=5, grace_days=7, semantic_check=True),
    Platform.YOUTUBE: FilterPolicy(),
    Platform.ARCHIVE: FilterPolicy(),
    Platform.FREECODECAMP: FilterPolicy(),
}

SEMANTIC_RELEVANCE_THRESHOLD = 0.5
# Well-documented repos get a slightly lower bar.
SEMANTIC_DOCUMENTED_FACTOR = 0.9
MINIMUM_README_LENGTH = 50
GOOD_README_LENGTH = 500
README_CONTEXT_CHARS = 1500
HIGH_QUALITY_COMMENTS = 10

# Lower sorts first when no external ranking is available.
TYPE_PRIORITY: dict[ItemType, int] = {
    ItemType.COURSE: 0,
    ItemType.PLAYLIST: 0,
    ItemType.ARTICLE: 1,
    ItemType.DOCUMENT: 1,
    ItemType.REPOSITORY: 2,
    ItemType.VIDEO: 2,
    ItemType.POST: 3,
}

# Badge field used as the popularity metric for each platform.
POPULARITY_FIELD: dict[Platform, str] = {
    Platform.GITHUB: "stars",
    Platform.YOUTUBE: "views",
    Platform.REDDIT: "upvotes",
    Platform.ARCHIVE: "downloads",
    Platform.FREECODECAMP: "views",
}
