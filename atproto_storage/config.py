"""
Configuration Management Module

Configures storage parameters via environment variables or .env file.
Supports a durable SQLite table (default) and a transient in-memory map.
"""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Storage Configuration Class

    All configuration items can be overridden by environment variables, with names matching fields (uppercase).
    """

    # Application Config
    DEBUG: bool = False

    # Storage Config
    # Storage backend: "sqlite" persists to a database table, "memory" keeps entries in-process
    STORAGE_TYPE: Literal["sqlite", "memory"] = "sqlite"
    # SQLAlchemy async connection URL (only used when STORAGE_TYPE is "sqlite")
    DATABASE_URL: str = "sqlite+aiosqlite:///./oauth_storage.db"
    # Table holding the OAuth entries
    STORAGE_TABLE_NAME: str = "oauth_storage"

    # Cleanup Config
    # Periodically purge expired entries
    CLEANUP_ENABLED: bool = True
    # Cleanup interval in minutes (default 60 minutes)
    CLEANUP_INTERVAL_MINUTES: int = 60

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Get storage configuration (Singleton)

    Uses lru_cache to ensure configuration is loaded only once.

    Returns:
        Settings: Storage configuration instance
    """
    return Settings()
