"""
Driver Adapters

Pre-built adapters that reshape common SQLite drivers into the
ExecutionAdapter contract used by SQLiteStorage. Each adapter is a plain
function wrapping the driver; the caller keeps ownership of the connection
or engine and is responsible for closing it.
"""

import sqlite3
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Sequence

import aiosqlite
from sqlalchemy.ext.asyncio import AsyncEngine

Rows = list[Sequence[Any]]


@dataclass(frozen=True)
class FunctionAdapter:
    """ExecutionAdapter backed by a single async callable"""

    execute: Callable[[str, Sequence[Any]], Awaitable[Rows]]


def _row_values(row: Any) -> tuple:
    """Positional column values for a driver row (tuple, Row or mapping)"""
    if isinstance(row, Mapping):
        return tuple(row.values())
    return tuple(row)


def sqlalchemy_adapter(engine: AsyncEngine) -> FunctionAdapter:
    """
    Adapter for a SQLAlchemy async engine (e.g. ``sqlite+aiosqlite://``)

    Each statement runs in its own transaction, committed on success.

    Example:
        engine = create_async_engine("sqlite+aiosqlite:///storage.db")
        storage = SQLiteStorage(sqlalchemy_adapter(engine))
    """

    async def execute(statement: str, params: Sequence[Any]) -> Rows:
        async with engine.begin() as conn:
            result = await conn.exec_driver_sql(statement, tuple(params))
            if not result.returns_rows:
                return []
            return [_row_values(row) for row in result.fetchall()]

    return FunctionAdapter(execute=execute)


def aiosqlite_adapter(connection: aiosqlite.Connection) -> FunctionAdapter:
    """
    Adapter for an open ``aiosqlite`` connection

    Example:
        async with aiosqlite.connect("storage.db") as db:
            storage = SQLiteStorage(aiosqlite_adapter(db))
    """

    async def execute(statement: str, params: Sequence[Any]) -> Rows:
        async with connection.execute(statement, tuple(params)) as cursor:
            rows = await cursor.fetchall()
        await connection.commit()
        return [_row_values(row) for row in rows]

    return FunctionAdapter(execute=execute)


def sqlite3_adapter(connection: sqlite3.Connection) -> FunctionAdapter:
    """
    Adapter for a standard library ``sqlite3`` connection

    The driver is synchronous; each call blocks the event loop for the
    duration of the statement. Works with ``row_factory = sqlite3.Row``.

    Example:
        db = sqlite3.connect("storage.db")
        storage = SQLiteStorage(sqlite3_adapter(db))
    """

    async def execute(statement: str, params: Sequence[Any]) -> Rows:
        cursor = connection.execute(statement, tuple(params))
        try:
            rows = cursor.fetchall()
        finally:
            cursor.close()
        connection.commit()
        return [_row_values(row) for row in rows]

    return FunctionAdapter(execute=execute)
