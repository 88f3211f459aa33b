"""
Storage Factory

Selects and builds the storage backend from configuration.
"""

import logging
from typing import Optional, Union

from sqlalchemy.ext.asyncio import AsyncEngine

from atproto_storage.adapters import sqlalchemy_adapter
from atproto_storage.common.errors import ConfigurationError
from atproto_storage.config import Settings, get_settings
from atproto_storage.db.session import create_engine
from atproto_storage.storage.memory import MemoryStorage
from atproto_storage.storage.sqlite import SQLiteStorage

logger = logging.getLogger(__name__)


def create_storage(
    settings: Optional[Settings] = None,
    engine: Optional[AsyncEngine] = None,
) -> Union[SQLiteStorage, MemoryStorage]:
    """
    Create the configured storage backend

    Args:
        settings: Configuration (defaults to get_settings())
        engine: Existing engine to reuse for the "sqlite" backend; a new one
            is created from DATABASE_URL when omitted

    Returns:
        SQLiteStorage or MemoryStorage depending on STORAGE_TYPE

    Raises:
        ConfigurationError: If STORAGE_TYPE is unknown or the table name is invalid
    """
    settings = settings or get_settings()

    if settings.STORAGE_TYPE == "memory":
        logger.info("Using in-memory OAuth storage")
        return MemoryStorage()

    if settings.STORAGE_TYPE == "sqlite":
        if engine is None:
            engine = create_engine(settings)
        logger.info(
            f"Using SQLite OAuth storage (table: {settings.STORAGE_TABLE_NAME})"
        )
        return SQLiteStorage(
            sqlalchemy_adapter(engine),
            table_name=settings.STORAGE_TABLE_NAME,
        )

    raise ConfigurationError(
        f"Unknown storage type: {settings.STORAGE_TYPE}",
        code="unknown_storage_type",
        details={"storage_type": settings.STORAGE_TYPE},
    )
