"""
Time Utilities

Storage policy:
- Persist timestamps as decimal epoch-millisecond strings.
- Use UTC-aware datetimes only for display (log output).
"""

from __future__ import annotations

import math
import time
from datetime import datetime, timezone
from typing import Optional

UTC = timezone.utc


def now_ms() -> int:
    """Return the current time as integer epoch milliseconds."""
    return time.time_ns() // 1_000_000


def expires_at_ms(now: int, ttl_seconds: Optional[float]) -> Optional[int]:
    """
    Compute the absolute expiration timestamp for a TTL.

    Sub-millisecond remainders are rounded up so a positive TTL always
    yields an entry that is live at the moment it is written.

    Returns `None` when no TTL is given (never expires).
    """
    if ttl_seconds is None:
        return None
    # round() drops float noise such as 0.007 * 1000 == 7.000000000000001
    return now + math.ceil(round(ttl_seconds * 1000, 6))


def parse_ms(raw: object) -> Optional[int]:
    """
    Parse a stored timestamp column back to epoch milliseconds.

    Drivers may hand the TEXT column back as `str`, `bytes` or, after
    SQLite type affinity, as a number.
    """
    if raw is None:
        return None
    if isinstance(raw, bytes):
        raw = raw.decode("utf-8")
    return int(raw)


def is_expired(expires_at: Optional[int], now: int) -> bool:
    """An entry is expired once `now` reaches its expiration (inclusive)."""
    return expires_at is not None and expires_at <= now


def ms_to_datetime(ms: Optional[int]) -> Optional[datetime]:
    """Convert epoch milliseconds to a UTC-aware datetime."""
    if ms is None:
        return None
    return datetime.fromtimestamp(ms / 1000, UTC)
