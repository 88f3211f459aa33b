"""
Test Configuration Module
"""

import asyncio
from typing import Any, AsyncGenerator, Callable, Optional, Sequence

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from atproto_storage.adapters import sqlalchemy_adapter
from atproto_storage.storage.sqlite import SQLiteStorage


class RecordingAdapter:
    """
    ExecutionAdapter test double

    Records every statement (whitespace-normalized) with its params and
    answers through an optional responder callable.
    """

    def __init__(self, responder: Optional[Callable[[str, list], list]] = None):
        self.calls: list[tuple[str, list]] = []
        self.responder = responder

    async def execute(self, statement: str, params: Sequence[Any]) -> list:
        normalized = " ".join(statement.split())
        self.calls.append((normalized, list(params)))
        # Yield to the loop like a real driver round-trip
        await asyncio.sleep(0)
        if self.responder is not None:
            return self.responder(normalized, list(params))
        return []

    def statements(self, prefix: str) -> list[tuple[str, list]]:
        return [call for call in self.calls if call[0].startswith(prefix)]


@pytest.fixture
def recording_adapter() -> RecordingAdapter:
    """Adapter that records statements and returns no rows"""
    return RecordingAdapter()


@pytest_asyncio.fixture
async def async_engine(tmp_path) -> AsyncGenerator[AsyncEngine, None]:
    """Create async database engine on a temporary SQLite file"""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'storage.db'}",
        echo=False,
    )

    yield engine

    await engine.dispose()


@pytest.fixture
def storage(async_engine) -> SQLiteStorage:
    """SQLite storage running on the temporary database"""
    return SQLiteStorage(sqlalchemy_adapter(async_engine))
