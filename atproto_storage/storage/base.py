"""
OAuth Storage Interface

Defines the storage contract consumed by OAuth session and token logic, and
the narrow execution contract the durable backend runs its statements through.
"""

import math
from abc import ABC, abstractmethod
from typing import Any, Optional, Protocol, Sequence, runtime_checkable

from atproto_storage.common.errors import ValidationError


def validate_key(key: str) -> None:
    """Reject keys that are not non-empty strings"""
    if not isinstance(key, str) or not key:
        raise ValidationError(
            "Storage key must be a non-empty string",
            code="invalid_key",
            details={"key": repr(key)},
        )


def validate_ttl(ttl_seconds: Optional[float]) -> None:
    """Reject TTLs that are not positive finite numbers (None means never expires)"""
    if ttl_seconds is None:
        return
    if (
        isinstance(ttl_seconds, bool)
        or not isinstance(ttl_seconds, (int, float))
        or not math.isfinite(ttl_seconds)
        or ttl_seconds <= 0
    ):
        raise ValidationError(
            "TTL must be a positive number of seconds",
            code="invalid_ttl",
            details={"ttl_seconds": ttl_seconds},
        )


class OAuthStorage(ABC):
    """OAuth Session/Token Storage Interface"""

    @abstractmethod
    async def get(self, key: str) -> Optional[Any]:
        """
        Get value by key

        Returns None if key doesn't exist or is expired.

        Args:
            key: The key to look up

        Returns:
            The stored value if found and not expired, None otherwise
        """
        pass

    @abstractmethod
    async def set(self, key: str, value: Any, ttl_seconds: Optional[float] = None) -> None:
        """
        Set a key-value pair

        If the key already exists, its value and expiration are replaced.

        Args:
            key: The key to set
            value: The value to store (strings verbatim, anything else as JSON)
            ttl_seconds: Time to live in seconds (None means never expires)
        """
        pass

    @abstractmethod
    async def delete(self, key: str) -> None:
        """
        Delete a key

        Deleting a key that doesn't exist is a no-op.

        Args:
            key: The key to delete
        """
        pass


@runtime_checkable
class ExecutionAdapter(Protocol):
    """
    Execute a parameterized statement against the backing store.

    Statements use ``?`` placeholders bound positionally from ``params``.
    Each returned row is a sequence of column values in the order the
    statement selected them; statements that select nothing return ``[]``.
    """

    async def execute(self, statement: str, params: Sequence[Any]) -> list[Sequence[Any]]:
        ...


@runtime_checkable
class StorageLogger(Protocol):
    """Diagnostic observer. Any ``logging.Logger`` satisfies this."""

    def debug(self, msg: str, *args: Any, **kwargs: Any) -> None:
        ...

    def warning(self, msg: str, *args: Any, **kwargs: Any) -> None:
        ...

    def error(self, msg: str, *args: Any, **kwargs: Any) -> None:
        ...
