"""
Database Engine Management Module

Builds the asynchronous SQLAlchemy engine the durable storage runs on.
"""

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from atproto_storage.config import Settings, get_settings


def create_engine(settings: Optional[Settings] = None) -> AsyncEngine:
    """
    Create asynchronous database engine

    echo=True prints SQL statements in DEBUG mode. The caller owns the
    engine and must dispose of it on shutdown.

    Args:
        settings: Configuration (defaults to get_settings())

    Returns:
        AsyncEngine: Engine bound to DATABASE_URL
    """
    settings = settings or get_settings()
    is_sqlite = settings.DATABASE_URL.startswith("sqlite")

    return create_async_engine(
        settings.DATABASE_URL,
        echo=settings.DEBUG,
        # SQLite specific configuration
        connect_args={"check_same_thread": False} if is_sqlite else {},
    )
