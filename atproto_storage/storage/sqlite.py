"""
OAuth Storage SQLite Implementation

Persists OAuth entries in a single SQL table with TTL-based expiration.
Every statement goes through an ExecutionAdapter, so the same engine runs
against any SQLite driver (SQLAlchemy, aiosqlite, sqlite3, ...).
"""

import asyncio
import logging
import re
from typing import Any, Optional

from atproto_storage.common.errors import ConfigurationError
from atproto_storage.common.serialization import encode_value, try_decode
from atproto_storage.common.time import (
    expires_at_ms,
    is_expired,
    ms_to_datetime,
    now_ms,
    parse_ms,
)
from atproto_storage.storage.base import (
    ExecutionAdapter,
    OAuthStorage,
    StorageLogger,
    validate_key,
    validate_ttl,
)

logger = logging.getLogger(__name__)

DEFAULT_TABLE_NAME = "oauth_storage"

# Interpolated into statements, so only plain identifiers are accepted
_TABLE_NAME_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class SQLiteStorage(OAuthStorage):
    """
    OAuth Storage SQLite Implementation

    Schema (created lazily on first use)::

        key         TEXT PRIMARY KEY
        value       TEXT NOT NULL
        expires_at  TEXT            -- epoch ms, NULL = never expires
        created_at  TEXT NOT NULL   -- epoch ms
        updated_at  TEXT NOT NULL   -- epoch ms

    plus an index on ``expires_at`` for cleanup scans.

    Expired rows read as missing but stay in the table until ``cleanup()``
    or ``delete()`` removes them. The store never schedules cleanup itself.

    Example:
        engine = create_async_engine("sqlite+aiosqlite:///storage.db")
        storage = SQLiteStorage(sqlalchemy_adapter(engine))

        await storage.set("session:123", {"did": "did:plc:abc"}, ttl_seconds=3600)
        session = await storage.get("session:123")
    """

    def __init__(
        self,
        adapter: ExecutionAdapter,
        table_name: str = DEFAULT_TABLE_NAME,
        logger: Optional[StorageLogger] = None,
    ):
        """
        Initialize Storage

        Args:
            adapter: Executes statements against the caller-owned database
            table_name: Table holding the entries (default "oauth_storage")
            logger: Diagnostic observer (default: this module's logger,
                silent unless the application configures logging)

        Raises:
            ConfigurationError: If table_name is not a plain SQL identifier
        """
        if not _TABLE_NAME_RE.match(table_name or ""):
            raise ConfigurationError(
                f"Invalid table name: {table_name!r}",
                code="invalid_table_name",
                details={"table_name": table_name},
            )

        self.adapter = adapter
        self.table_name = table_name
        self.logger = logger if logger is not None else logging.getLogger(__name__)

        self._initialized = False
        self._init_task: Optional[asyncio.Future] = None

        t = table_name
        self._create_table_sql = f"""
            CREATE TABLE IF NOT EXISTS {t} (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL,
                expires_at TEXT,
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL
            )
        """
        self._create_index_sql = (
            f"CREATE INDEX IF NOT EXISTS idx_{t}_expires_at ON {t}(expires_at)"
        )
        self._select_sql = f"SELECT value, expires_at FROM {t} WHERE key = ? LIMIT 1"
        self._upsert_sql = f"""
            INSERT INTO {t} (key, value, expires_at, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?)
            ON CONFLICT(key) DO UPDATE SET
                value = excluded.value,
                expires_at = excluded.expires_at,
                updated_at = excluded.updated_at
        """
        self._delete_sql = f"DELETE FROM {t} WHERE key = ?"
        self._count_expired_sql = (
            f"SELECT COUNT(*) FROM {t} "
            "WHERE expires_at IS NOT NULL AND CAST(expires_at AS INTEGER) <= ?"
        )
        self._delete_expired_sql = (
            f"DELETE FROM {t} "
            "WHERE expires_at IS NOT NULL AND CAST(expires_at AS INTEGER) <= ?"
        )

    def _log(self, level: str, msg: str, *args: Any) -> None:
        """Call the diagnostic observer; its failures never reach the caller"""
        try:
            getattr(self.logger, level)(msg, *args)
        except Exception:
            logger.debug("Storage logger hook failed", exc_info=True)

    async def _create_schema(self) -> None:
        await self.adapter.execute(self._create_table_sql, [])
        await self.adapter.execute(self._create_index_sql, [])
        self._log("debug", "[SQLiteStorage.init] Table %s ready", self.table_name)

    async def _init(self) -> None:
        """
        Create the table and index once per instance.

        Concurrent first callers share a single in-flight initialization.
        A failed initialization is reported to every waiter and retried on
        the next call.
        """
        if self._initialized:
            return

        if self._init_task is None:
            self._init_task = asyncio.ensure_future(self._create_schema())
        task = self._init_task

        try:
            await asyncio.shield(task)
        except Exception:
            if self._init_task is task and task.done():
                self._init_task = None
            raise

        self._initialized = True

    async def get(self, key: str) -> Optional[Any]:
        """Get value by key, returns None if not found or expired"""
        validate_key(key)
        await self._init()

        now = now_ms()
        self._log("debug", "[SQLiteStorage.get] key=%s", key)

        rows = await self.adapter.execute(self._select_sql, [key])
        if not rows:
            self._log("debug", "[SQLiteStorage.get] Key not found: %s", key)
            return None

        raw_value, raw_expires_at = rows[0][0], rows[0][1]

        # Expired rows are left for cleanup()
        if is_expired(parse_ms(raw_expires_at), now):
            self._log("debug", "[SQLiteStorage.get] Key expired: %s", key)
            return None

        value, parsed = try_decode(raw_value)
        if parsed:
            self._log("debug", "[SQLiteStorage.get] Returning parsed value: %s", key)
        else:
            self._log("debug", "[SQLiteStorage.get] Returning raw value: %s", key)
        return value

    async def set(self, key: str, value: Any, ttl_seconds: Optional[float] = None) -> None:
        """Set a key-value pair with optional TTL"""
        validate_key(key)
        validate_ttl(ttl_seconds)
        await self._init()

        now = now_ms()
        expires_at = expires_at_ms(now, ttl_seconds)
        serialized = encode_value(value)

        self._log(
            "debug",
            "[SQLiteStorage.set] key=%s ttl=%s expires_at=%s",
            key,
            ttl_seconds,
            ms_to_datetime(expires_at).isoformat() if expires_at is not None else None,
        )

        await self.adapter.execute(
            self._upsert_sql,
            [
                key,
                serialized,
                str(expires_at) if expires_at is not None else None,
                str(now),
                str(now),
            ],
        )

        self._log("debug", "[SQLiteStorage.set] Stored successfully: %s", key)

    async def delete(self, key: str) -> None:
        """Delete a key"""
        validate_key(key)
        await self._init()

        self._log("debug", "[SQLiteStorage.delete] key=%s", key)
        await self.adapter.execute(self._delete_sql, [key])

    async def cleanup(self) -> int:
        """
        Delete all expired entries

        Call periodically to keep the table small. The count and the delete
        are two separate statements, so under concurrent writers the count
        is best effort.

        Returns:
            Number of expired entries found (and deleted)
        """
        await self._init()

        now = now_ms()
        self._log("debug", "[SQLiteStorage.cleanup] Removing expired entries")

        rows = await self.adapter.execute(self._count_expired_sql, [now])
        count = int(rows[0][0]) if rows and rows[0][0] is not None else 0

        if count > 0:
            await self.adapter.execute(self._delete_expired_sql, [now])
            self._log(
                "debug", "[SQLiteStorage.cleanup] Deleted %d expired entries", count
            )

        return count
