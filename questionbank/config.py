# questionbank/config.py
"""
Central configuration for the question aggregation engine.
Uses dataclasses for type-safe configuration management.
"""
from dataclasses import dataclass, field
from typing import Optional

from .settings import Settings, get_settings


@dataclass
class ClusteringConfig:
    """Configuration for question grouping and merging."""
    # tau: clustering strictness, higher means stricter matching, fewer merges
    similarity_threshold: float = 0.6

    # Weighted average of word-set overlap and edit similarity
    token_weight: float = 0.5
    edit_weight: float = 0.5


@dataclass
class ExtractionConfig:
    """Configuration for the extraction step."""
    # Abort and mark the document failed past this bound
    timeout_ms: int = 60_000
    max_candidates: int = 200
    # Document text beyond this is cut before extraction, with a warning
    max_content_chars: int = 40_000

    llm_model: str = "gpt-4o-mini"
    llm_temperature: float = 0.2
    llm_api_key: Optional[str] = None

    @property
    def timeout_seconds(self) -> float:
        return self.timeout_ms / 1000.0


@dataclass
class PersistenceConfig:
    """Configuration for committing merged clusters."""
    max_commit_attempts: int = 3


@dataclass
class AppConfig:
    """Main application configuration combining all sub-configs."""
    clustering: ClusteringConfig = field(default_factory=ClusteringConfig)
    extraction: ExtractionConfig = field(default_factory=ExtractionConfig)
    persistence: PersistenceConfig = field(default_factory=PersistenceConfig)

    app_title: str = "QuestionBank"
    app_version: str = "1.0.0"


def load_config(settings: Optional[Settings] = None) -> AppConfig:
    """
    Build the application configuration from environment settings.

    Args:
        settings: Optional settings instance (defaults to the cached one)

    Returns:
        AppConfig instance
    """
    settings = settings or get_settings()

    return AppConfig(
        clustering=ClusteringConfig(
            similarity_threshold=settings.similarity_threshold,
        ),
        extraction=ExtractionConfig(
            timeout_ms=settings.extraction_timeout_ms,
            max_candidates=settings.max_candidates,
            max_content_chars=settings.max_content_chars,
            llm_model=settings.llm_model,
            llm_temperature=settings.llm_temperature,
            llm_api_key=settings.llm_api_key,
        ),
        persistence=PersistenceConfig(
            max_commit_attempts=settings.max_commit_attempts,
        ),
        app_title=settings.app_name,
        app_version=settings.app_version,
    )
