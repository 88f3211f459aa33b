"""
OAuth Storage In-Memory Implementation

Keeps entries in a process-local dict. Data is lost on restart, so this
backend is meant for tests, development and single-process deployments.
"""

from typing import Any, Optional

from atproto_storage.common.time import expires_at_ms, is_expired, now_ms
from atproto_storage.domain.entry import StorageEntry
from atproto_storage.storage.base import OAuthStorage, validate_key, validate_ttl


class MemoryStorage(OAuthStorage):
    """
    OAuth Storage In-Memory Implementation

    Values are kept as-is (no serialization). Expired entries are dropped
    when read or when cleanup() runs.
    """

    def __init__(self):
        self._data: dict[str, StorageEntry] = {}

    async def get(self, key: str) -> Optional[Any]:
        """Get value by key, returns None if not found or expired"""
        validate_key(key)
        entry = self._data.get(key)
        if entry is None:
            return None

        if is_expired(entry.expires_at, now_ms()):
            self._data.pop(key, None)
            return None

        return entry.value

    async def set(self, key: str, value: Any, ttl_seconds: Optional[float] = None) -> None:
        """Set a key-value pair with optional TTL"""
        validate_key(key)
        validate_ttl(ttl_seconds)
        self._data[key] = StorageEntry(
            value=value,
            expires_at=expires_at_ms(now_ms(), ttl_seconds),
        )

    async def delete(self, key: str) -> None:
        """Delete a key"""
        validate_key(key)
        self._data.pop(key, None)

    async def cleanup(self) -> int:
        """Drop all expired entries and return how many were dropped"""
        now = now_ms()
        expired = [k for k, e in self._data.items() if is_expired(e.expires_at, now)]
        for key in expired:
            del self._data[key]
        return len(expired)

    def clear(self) -> None:
        """Remove every entry"""
        self._data.clear()

    @property
    def size(self) -> int:
        """Number of stored entries, including expired ones not yet dropped"""
        return len(self._data)
