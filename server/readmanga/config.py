"""Configuration settings for the Read-Manga API server."""

from pathlib import Path
from functools import lru_cache
from pydantic_settings import BaseSettings


def _find_env_file() -> str:
    """Find .env file - check current dir, then parent (repository root)."""
    current = Path.cwd()

    # Check current directory
    if (current / ".env").exists():
        return str(current / ".env")

    # Check parent directory (when running from server/)
    if (current.parent / ".env").exists():
        return str(current.parent / ".env")

    # Default to current directory
    return ".env"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Server settings
    port: int = 5000
    host: str = "0.0.0.0"
    debug: bool = False
    environment: str = "production"
    frontend_url: str = "http://localhost:5173"

    # Upstream catalog (MangaDex)
    mangadex_base_url: str = "https://api.mangadex.org"
    mangadex_uploads_url: str = "https://uploads.mangadex.org"
    upstream_timeout: float = 15.0
    user_agent: str = "Read-Manga-App/1.0.0"

    # Cache TTL (in seconds), applied to every entry
    cache_ttl: int = 300

    # Logging
    log_level: str = "INFO"
    log_format: str = "console"

    class Config:
        env_file = _find_env_file()
        env_file_encoding = "utf-8"
        extra = "ignore"

    @property
    def is_development(self) -> bool:
        return self.environment.lower() == "development"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
