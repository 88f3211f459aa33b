"""
Storage Backend Module Initialization
"""

from atproto_storage.storage.base import ExecutionAdapter, OAuthStorage, StorageLogger
from atproto_storage.storage.memory import MemoryStorage
from atproto_storage.storage.sqlite import SQLiteStorage

__all__ = [
    "ExecutionAdapter",
    "OAuthStorage",
    "StorageLogger",
    "MemoryStorage",
    "SQLiteStorage",
]
