"""Application configuration using Pydantic Settings."""

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.matching import MAX_MATCH_RESULTS

DEFAULT_CATALOG_DB = Path("catalog.db")


class Settings(BaseSettings):
    """Settings read from the environment and an optional ``.env`` file."""

    # Catalog
    catalog_db_path: Path = Field(
        default=DEFAULT_CATALOG_DB, description="Path to the SQLite song catalog"
    )

    # Server
    host: str = Field(default="0.0.0.0", description="Host to bind the server to")
    port: int = Field(default=8000, description="Port to run the server on")
    log_level: str = Field(default="INFO", description="Logging level")

    # Sentry
    sentry_dsn: str | None = Field(None, description="Sentry DSN; unset disables reporting")
    sentry_traces_sample_rate: float = Field(default=0.0, ge=0.0, le=1.0)

    # Song matching
    match_candidate_pool_limit: int = Field(
        default=1000,
        ge=1,
        description="Max catalog songs scored by the keyword and fuzzy strategies",
    )
    max_match_results: int = Field(
        default=MAX_MATCH_RESULTS,
        ge=1,
        le=MAX_MATCH_RESULTS,
        description="Maximum number of song matches returned per title",
    )
    auto_select_confidence: float = Field(
        default=0.7,
        ge=0.0,
        description="Minimum confidence for a non-exact match to be pre-selected",
    )

    app_name: str = Field(default="Setlist-Quickset")
    app_version: str = Field(default="0.1.0")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def resolved_catalog_db_path(self) -> Path:
        """Catalog path, treating an empty ``CATALOG_DB_PATH`` as unset."""
        if str(self.catalog_db_path) in ("", "."):
            return DEFAULT_CATALOG_DB
        return self.catalog_db_path

    @property
    def environment(self) -> str:
        return "development" if self.log_level.upper() == "DEBUG" else "production"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
