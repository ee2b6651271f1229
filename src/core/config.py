"""Configuration from environment variables (.env)."""

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_list(name: str, default: str = "") -> list[str]:
    return [v.strip() for v in os.getenv(name, default).split(",") if v.strip()]


@dataclass(frozen=True)
class SearchSettings:
    """Tunables for one search pipeline. Built once, passed to components at construction."""

    max_results: int = 5
    rank_floor: int = 5
    rank_top_n: int = 5
    per_source_cap: int = 15
    per_source_fetch: int = 10
    min_score: int = 4
    source_timeout: float = 10.0
    rewriter_timeout: float = 8.0
    semantic_check: bool = False
    llm_ranking: bool = True
    min_score_by_source: dict[str, int] = field(default_factory=dict)

    def min_score_for(self, source: str) -> int:
        return self.min_score_by_source.get(source, self.min_score)


@dataclass
class Config:
    project_root: Path
    logs_dir: Path
    prompts_dir: Path
    host: str
    port: int
    github_token: str
    youtube_api_key: str
    reddit_user_agent: str
    openrouter_api_key: str
    openrouter_models: list[str]  # Model IDs to try in order (fallback on 5xx/429)
    max_results: int
    rank_floor: int
    rank_top_n: int
    per_source_cap: int
    per_source_fetch: int
    min_score: int
    source_timeout: float
    rewriter_timeout: float
    semantic_check: bool
    llm_ranking: bool

    @classmethod
    def load(cls) -> "Config":
        project_root = Path(__file__).parent.parent.parent
        return cls(
            project_root=project_root,
            logs_dir=Path(os.getenv("LOGS_DIR", str(project_root / "logs"))),
            prompts_dir=project_root / "prompts",
            host=os.getenv("HOST", "127.0.0.1"),
            port=int(os.getenv("PORT", "5000")),
            github_token=os.getenv("GITHUB_TOKEN", ""),
            youtube_api_key=os.getenv("YOUTUBE_API_KEY", ""),
            reddit_user_agent=os.getenv("REDDIT_USER_AGENT", "learning-resource-finder/0.1"),
            openrouter_api_key=os.getenv("OPENROUTER_API_KEY", ""),
            openrouter_models=_env_list("OPENROUTER_MODELS", "openrouter/free"),
            max_results=int(os.getenv("MAX_RESULTS", "5")),
            rank_floor=int(os.getenv("RANK_FLOOR", "5")),
            rank_top_n=int(os.getenv("RANK_TOP_N", "5")),
            per_source_cap=int(os.getenv("PER_SOURCE_CAP", "15")),
            per_source_fetch=int(os.getenv("PER_SOURCE_FETCH", "10")),
            min_score=int(os.getenv("MIN_SCORE", "4")),
            source_timeout=float(os.getenv("SOURCE_TIMEOUT", "10")),
            rewriter_timeout=float(os.getenv("REWRITER_TIMEOUT", "8")),
            semantic_check=_env_bool("SEMANTIC_CHECK", False),
            llm_ranking=_env_bool("LLM_RANKING", True),
        )

    @property
    def has_rewriter(self) -> bool:
        return bool(self.openrouter_api_key.strip())

    def search_settings(self) -> SearchSettings:
        return SearchSettings(
            max_results=self.max_results,
            rank_floor=self.rank_floor,
            rank_top_n=self.rank_top_n,
            per_source_cap=self.per_source_cap,
            per_source_fetch=self.per_source_fetch,
            min_score=self.min_score,
            source_timeout=self.source_timeout,
            rewriter_timeout=self.rewriter_timeout,
            semantic_check=self.semantic_check and self.has_rewriter,
            llm_ranking=self.llm_ranking and self.has_rewriter,
        )

    def validate(self) -> list[str]:
        errors = []
        if self.max_results < 1:
            errors.append(f"MAX_RESULTS must be positive, got {self.max_results}")
        if self.per_source_cap < 1:
            errors.append(f"PER_SOURCE_CAP must be positive, got {self.per_source_cap}")
        if self.rank_top_n < 1:
            errors.append(f"RANK_TOP_N must be positive, got {self.rank_top_n}")
        if self.source_timeout <= 0 or self.rewriter_timeout <= 0:
            errors.append("SOURCE_TIMEOUT and REWRITER_TIMEOUT must be positive")
        if not self.prompts_dir.exists():
            errors.append(f"Prompts directory not found: {self.prompts_dir}")
        if not self.youtube_api_key:
            errors.append("YOUTUBE_API_KEY is not set; YouTube search is disabled")
        return errors
