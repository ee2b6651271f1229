from src.orchestrators.search.backends.archive import ArchiveSearchBackend
from src.orchestrators.search.backends.freecodecamp import FreeCodeCampSearchBackend
from src.orchestrators.search.backends.github import GitHubSearchBackend
from src.orchestrators.search.backends.reddit import RedditSearchBackend
from src.orchestrators.search.backends.youtube import YouTubeSearchBackend

__all__ = [
    "ArchiveSearchBackend",
    "FreeCodeCampSearchBackend",
    "GitHubSearchBackend",
    "RedditSearchBackend",
    "YouTubeSearchBackend",
]
