"""
Test SQLite Storage Statement Protocol

Drives SQLiteStorage through a recording adapter to check which statements
it issues, how it reads rows back, and how adapter failures surface.
"""

import asyncio
from unittest.mock import MagicMock

import pytest

from atproto_storage.storage import sqlite as sqlite_module
from atproto_storage.storage.sqlite import SQLiteStorage


class AdapterFailure(Exception):
    pass


@pytest.mark.asyncio
async def test_lazy_init_runs_once(recording_adapter):
    """Test the schema statements run on first use only"""
    storage = SQLiteStorage(recording_adapter)
    assert recording_adapter.calls == []

    await storage.get("a")
    await storage.set("b", "value")
    await storage.delete("c")

    assert len(recording_adapter.statements("CREATE TABLE IF NOT EXISTS oauth_storage")) == 1
    assert len(
        recording_adapter.statements(
            "CREATE INDEX IF NOT EXISTS idx_oauth_storage_expires_at"
        )
    ) == 1
    # Table before index, both before any data statement
    assert recording_adapter.calls[0][0].startswith("CREATE TABLE")
    assert recording_adapter.calls[1][0].startswith("CREATE INDEX")


@pytest.mark.asyncio
async def test_concurrent_first_use_initializes_once(recording_adapter):
    """Test concurrent first callers share one initialization"""
    storage = SQLiteStorage(recording_adapter)

    await asyncio.gather(*(storage.get(f"key{i}") for i in range(10)))

    assert len(recording_adapter.statements("CREATE TABLE")) == 1
    assert len(recording_adapter.statements("CREATE INDEX")) == 1
    assert len(recording_adapter.statements("SELECT value, expires_at")) == 10


@pytest.mark.asyncio
async def test_failed_init_is_retried(recording_adapter):
    """Test a failed initialization propagates and is retried on next use"""
    failure = AdapterFailure("connection lost")
    attempts = []

    def responder(statement, params):
        if statement.startswith("CREATE TABLE"):
            attempts.append(statement)
            if len(attempts) == 1:
                raise failure
        return []

    recording_adapter.responder = responder
    storage = SQLiteStorage(recording_adapter)

    with pytest.raises(AdapterFailure) as exc_info:
        await storage.get("key")
    assert exc_info.value is failure

    assert await storage.get("key") is None
    assert len(attempts) == 2


@pytest.mark.asyncio
async def test_adapter_errors_pass_through(recording_adapter):
    """Test adapter failures reach the caller unchanged"""
    failure = AdapterFailure("constraint violation")

    def responder(statement, params):
        if statement.startswith("INSERT"):
            raise failure
        return []

    recording_adapter.responder = responder
    storage = SQLiteStorage(recording_adapter)

    with pytest.raises(AdapterFailure) as exc_info:
        await storage.set("key", "value")
    assert exc_info.value is failure


@pytest.mark.asyncio
async def test_set_params(recording_adapter, monkeypatch):
    """Test upsert parameters are epoch-ms strings in column order"""
    monkeypatch.setattr(sqlite_module, "now_ms", lambda: 1_000_000)
    storage = SQLiteStorage(recording_adapter)

    await storage.set("no_ttl", {"a": 1})
    await storage.set("with_ttl", "token", ttl_seconds=1.5)

    [(first_sql, first_params), (_, second_params)] = recording_adapter.statements(
        "INSERT INTO oauth_storage"
    )
    assert "ON CONFLICT(key) DO UPDATE SET" in first_sql
    assert "created_at = excluded.created_at" not in first_sql
    assert first_params == ["no_ttl", '{"a": 1}', None, "1000000", "1000000"]
    assert second_params == ["with_ttl", "token", "1001500", "1000000", "1000000"]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "expires_at, expected",
    [
        (None, "live"),
        ("999", None),
        ("1000", None),  # boundary counts as expired
        ("1001", "live"),
        (1001, "live"),
    ],
)
async def test_get_expiration_boundary(recording_adapter, monkeypatch, expires_at, expected):
    """Test expires_at <= now reads as missing"""
    monkeypatch.setattr(sqlite_module, "now_ms", lambda: 1000)
    recording_adapter.responder = lambda statement, params: (
        [("live", expires_at)] if statement.startswith("SELECT value") else []
    )
    storage = SQLiteStorage(recording_adapter)

    assert await storage.get("key") == expected
    assert recording_adapter.statements("DELETE") == []


@pytest.mark.asyncio
async def test_get_missing_row(recording_adapter):
    """Test an empty result reads as missing"""
    storage = SQLiteStorage(recording_adapter)

    assert await storage.get("key") is None
    [(sql, params)] = recording_adapter.statements("SELECT value, expires_at")
    assert sql.endswith("WHERE key = ? LIMIT 1")
    assert params == ["key"]


@pytest.mark.asyncio
async def test_cleanup_issues_delete_only_when_needed(recording_adapter, monkeypatch):
    """Test cleanup counts first and deletes only when rows expired"""
    monkeypatch.setattr(sqlite_module, "now_ms", lambda: 5000)
    expired = {"count": 0}
    recording_adapter.responder = lambda statement, params: (
        [(expired["count"],)] if statement.startswith("SELECT COUNT(*)") else []
    )
    storage = SQLiteStorage(recording_adapter)

    assert await storage.cleanup() == 0
    assert recording_adapter.statements("DELETE") == []

    expired["count"] = 3
    assert await storage.cleanup() == 3

    [(sql, params)] = recording_adapter.statements("DELETE")
    assert "CAST(expires_at AS INTEGER) <= ?" in sql
    assert params == [5000]


@pytest.mark.asyncio
async def test_logger_hook_receives_events(recording_adapter):
    """Test a custom logger is called at operation boundaries"""
    hook = MagicMock()
    storage = SQLiteStorage(recording_adapter, logger=hook)

    await storage.set("key", "value")
    await storage.get("key")

    messages = [call.args[0] for call in hook.debug.call_args_list]
    assert any(msg.startswith("[SQLiteStorage.set]") for msg in messages)
    assert any(msg.startswith("[SQLiteStorage.get]") for msg in messages)


@pytest.mark.asyncio
async def test_failing_logger_hook_is_ignored(recording_adapter):
    """Test a broken logger never affects results"""
    hook = MagicMock()
    hook.debug.side_effect = RuntimeError("logger broken")
    recording_adapter.responder = lambda statement, params: (
        [('{"did": "did:plc:abc"}', None)] if statement.startswith("SELECT value") else []
    )
    storage = SQLiteStorage(recording_adapter, logger=hook)

    await storage.set("session:1", {"did": "did:plc:abc"})
    assert await storage.get("session:1") == {"did": "did:plc:abc"}
    assert hook.debug.called


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "stored, expected, message",
    [
        ('{"did": "did:plc:abc"}', {"did": "did:plc:abc"}, "Returning parsed value"),
        ("did:plc:abc", "did:plc:abc", "Returning raw value"),
    ],
)
async def test_logger_hook_reports_decode_branch(recording_adapter, stored, expected, message):
    """Test get() tells the logger whether the value was parsed or returned raw"""
    hook = MagicMock()
    recording_adapter.responder = lambda statement, params: (
        [(stored, None)] if statement.startswith("SELECT value") else []
    )
    storage = SQLiteStorage(recording_adapter, logger=hook)

    assert await storage.get("key") == expected

    messages = [call.args[0] for call in hook.debug.call_args_list]
    assert any(message in msg for msg in messages)
