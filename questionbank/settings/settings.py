"""
Environment-driven configuration for the question aggregation engine.

Uses pydantic-settings for type-safe environment variable management.
Every field can be overridden with a QUESTIONBANK_-prefixed environment
variable or a .env file.
"""

from enum import Enum
from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(str, Enum):
    """Deployment environment."""
    DEVELOPMENT = "development"
    TEST = "test"
    PRODUCTION = "production"


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Environment variable names are the uppercase field names with the
    QUESTIONBANK_ prefix, e.g. QUESTIONBANK_SIMILARITY_THRESHOLD=0.7.
    """

    model_config = SettingsConfigDict(
        env_prefix="QUESTIONBANK_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # === Application ===
    app_name: str = "QuestionBank"
    app_version: str = "1.0.0"
    environment: Environment = Environment.DEVELOPMENT

    # === Logging ===
    log_level: str = "INFO"
    log_file: Optional[str] = None

    # === Clustering ===
    # Higher means stricter matching, fewer merges
    similarity_threshold: float = Field(default=0.6, ge=0.0, le=1.0)

    # === Extraction ===
    # Runs exceeding this bound are aborted and the document is marked failed
    extraction_timeout_ms: int = Field(default=60_000, gt=0)
    max_candidates: int = Field(default=200, gt=0)
    max_content_chars: int = Field(default=40_000, gt=0)

    # === Persistence ===
    max_commit_attempts: int = Field(default=3, ge=1)

    # === LLM ===
    llm_api_key: Optional[str] = None
    llm_model: str = "gpt-4o-mini"
    llm_temperature: float = 0.2

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == Environment.PRODUCTION


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Settings are loaded once and cached for the lifetime of the process.

    Returns:
        Settings instance with values from environment
    """
    return Settings()
