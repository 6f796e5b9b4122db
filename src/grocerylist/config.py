"""Application configuration using pydantic-settings."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

from grocerylist.merge.matching import MatchStrictness


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="GROCERYLIST_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Snapshot storage (key/value table)
    database_url: str = "sqlite:///grocerylist.db"

    # Lists
    default_list_name: str = "Shopping List"
    matching_strictness: MatchStrictness = MatchStrictness.STRICT

    # Application
    environment: str = "development"
    log_level: str = "INFO"
    allowed_origins: str = "http://localhost:3000,http://localhost:8000"

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment.lower() == "development"

    @property
    def origins(self) -> list[str]:
        """Allowed CORS origins as a list."""
        return [o.strip() for o in self.allowed_origins.split(",") if o.strip()]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
