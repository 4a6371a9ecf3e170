"""Application configuration via pydantic-settings."""

from functools import lru_cache
from pathlib import Path

from pydantic import computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict

from no_repeats.repositories.match_repository import IN_MEMORY


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # API Settings
    debug: bool = False
    log_level: str = "INFO"

    # CORS - comma-separated origins (env var: CORS_ORIGINS)
    cors_origins: str = "http://localhost:5173,http://127.0.0.1:5173"

    @computed_field
    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins as a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    # Database path (SQLite file, ":memory:" for a throwaway store). The HTTP
    # open_database command always opens this path; clients cannot choose one.
    database_path: str = "data/no_repeats.db"
    open_database_on_startup: bool = True

    # Commit each decided match to the database
    record_matches: bool = True


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()


# Database path - relative paths resolve from the repo root
def get_database_path() -> str:
    """Get the database path from settings."""
    if settings.database_path == IN_MEMORY:
        return IN_MEMORY
    db_path = Path(settings.database_path)
    if not db_path.is_absolute():
        repo_root = Path(__file__).parent.parent.parent
        db_path = repo_root / db_path
    db_path.parent.mkdir(parents=True, exist_ok=True)
    return str(db_path)
