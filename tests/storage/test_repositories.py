import asyncio
import sqlite3

import pytest

from ddbot.storage import db as storage_db


def test_reminder_lifecycle(db):
    async def run():
        first = await db.add_reminder(1, "stretch", 100.0, guild_id=5, channel_id=6)
        second = await db.add_reminder(1, "drink water", 50.0)
        await db.add_reminder(2, "other user", 10.0)

        assert first.id != second.id
        assert await db.count_reminders(1) == 2
        listed = await db.list_reminders(1)
        assert [r.content for r in listed] == ["drink water", "stretch"]
        assert listed[1].channel_id == 6 and listed[1].guild_id == 5
        assert listed[0].channel_id is None

        due = await db.due_reminders(60.0)
        assert [r.content for r in due] == ["other user", "drink water"]

        assert await db.cancel_reminder(2, first.id) is False
        assert await db.cancel_reminder(1, first.id) is True
        assert await db.cancel_reminder(1, first.id) is False

        await db.delete_reminder(second.id)
        assert await db.count_reminders(1) == 0

    asyncio.run(run())


def test_due_reminders_respects_limit(db):
    async def run():
        for i in range(5):
            await db.add_reminder(1, f"r{i}", float(i))
        first = await db.due_reminders(100.0, limit=2)
        rest = await db.due_reminders(100.0, limit=2, offset=3)
        return first, rest

    first, rest = asyncio.run(run())
    assert [r.content for r in first] == ["r0", "r1"]
    assert [r.content for r in rest] == ["r3", "r4"]


def test_prefix_cache_tracks_database(db):
    async def run():
        assert db.cached_prefix(10) is None
        await db.set_prefix(10, "?")
        await db.set_prefix(11, "$$")
        await db.set_prefix(10, "??")
        assert db.cached_prefix(10) == "??"

        assert await db.remove_prefix(11) is True
        assert await db.remove_prefix(11) is False
        assert db.cached_prefix(11) is None

        db._prefix_cache.clear()
        count = await db.load_prefixes()
        return count

    assert asyncio.run(run()) == 1
    assert db.cached_prefix(10) == "??"
    assert db.cached_prefix(None) is None


def test_migrate_is_idempotent(tmp_path):
    conn = storage_db.connect(tmp_path / "x.db")
    storage_db.migrate(conn)
    storage_db.migrate(conn)
    tables = {
        row[0]
        for row in conn.execute("SELECT name FROM sqlite_master WHERE type='table'").fetchall()
    }
    conn.close()
    assert {"reminders", "guild_prefixes"} <= tables


def test_calls_before_init_fail():
    from ddbot import storage

    storage.close()
    with pytest.raises(RuntimeError):
        asyncio.run(storage.count_reminders(1))


def test_init_wraps_migration_failures(monkeypatch, tmp_path):
    from ddbot import storage

    def broken_migrate(conn):
        raise sqlite3.OperationalError("syntax error")

    monkeypatch.setattr(storage._db, "migrate", broken_migrate)
    with pytest.raises(RuntimeError, match="Failed to run migrations"):
        storage.init(tmp_path / "broken.db")
    assert storage.is_ready() is False
