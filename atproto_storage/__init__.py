"""
AT Protocol OAuth Storage

Key-value storage with TTL expiration for OAuth sessions and tokens:
- MemoryStorage for tests and development
- SQLiteStorage for durable storage on any SQLite driver via adapters
"""

import logging

from atproto_storage.adapters import (
    FunctionAdapter,
    aiosqlite_adapter,
    sqlalchemy_adapter,
    sqlite3_adapter,
)
from atproto_storage.common.errors import ConfigurationError, StorageError, ValidationError
from atproto_storage.storage.base import ExecutionAdapter, OAuthStorage, StorageLogger
from atproto_storage.storage.factory import create_storage
from atproto_storage.storage.memory import MemoryStorage
from atproto_storage.storage.sqlite import SQLiteStorage

# Silent unless the application configures logging
logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"

__all__ = [
    # Contracts
    "OAuthStorage",
    "ExecutionAdapter",
    "StorageLogger",
    # Implementations
    "MemoryStorage",
    "SQLiteStorage",
    "create_storage",
    # Adapters
    "FunctionAdapter",
    "aiosqlite_adapter",
    "sqlalchemy_adapter",
    "sqlite3_adapter",
    # Errors
    "StorageError",
    "ValidationError",
    "ConfigurationError",
]
