"""API settings."""
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from record_sync_core.sync import DEFAULT_CHUNK_SIZE


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    sqlite_path: str = "/data/jobs.db"
    redis_url: str = "redis://redis:6379/0"
    queue_enabled: bool = True
    queue_name: str = "default"
    sync_chunk_size: int = Field(default=DEFAULT_CHUNK_SIZE, ge=1, le=DEFAULT_CHUNK_SIZE)
    default_page_size: int = 20
    max_upload_mb: int = 50


@lru_cache
def get_settings() -> Settings:
    """Get cached settings."""
    return Settings()
