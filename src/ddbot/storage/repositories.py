"""
Repositories (SQL-only)
=======================
- Pure CRUD and selects; validation lives with the commands.
- Every blocking sqlite call runs in a worker thread under the shared lock.
"""

from __future__ import annotations

import asyncio
import sqlite3
import time
from dataclasses import dataclass
from typing import List, Optional


@dataclass(frozen=True)
class Reminder:
    id: int
    user_id: int
    guild_id: Optional[int]
    channel_id: Optional[int]
    content: str
    remind_at: float
    created_at: float

    @classmethod
    def from_row(cls, row: sqlite3.Row) -> "Reminder":
        return cls(
            id=int(row["id"]),
            user_id=int(row["user_id"]),
            guild_id=row["guild_id"],
            channel_id=row["channel_id"],
            content=row["content"],
            remind_at=float(row["remind_at"]),
            created_at=float(row["created_at"]),
        )


_REMINDER_COLUMNS = "id, user_id, guild_id, channel_id, content, remind_at, created_at"


class ReminderRepo:
    """Async CRUD helpers for the ``reminders`` table."""

    def __init__(self, conn: sqlite3.Connection, lock: asyncio.Lock):
        self.conn = conn
        self._lock = lock

    async def add(
        self,
        user_id: int,
        content: str,
        remind_at: float,
        *,
        guild_id: Optional[int] = None,
        channel_id: Optional[int] = None,
    ) -> Reminder:
        """
        Insert a reminder and return it with its assigned id.

        :param user_id: Discord user to remind.
        :param content: Reminder text.
        :param remind_at: Unix timestamp (seconds) when it becomes due.
        :param guild_id: Guild it was created in, ``None`` for DMs.
        :param channel_id: Channel to deliver in, ``None`` to deliver by DM.
        """
        sql = """
            INSERT INTO reminders (user_id, guild_id, channel_id, content, remind_at, created_at)
            VALUES (?, ?, ?, ?, ?, ?)
        """
        created_at = time.time()

        def _run() -> int:
            with self.conn:
                cur = self.conn.execute(
                    sql, (user_id, guild_id, channel_id, content, remind_at, created_at)
                )
            return int(cur.lastrowid)

        async with self._lock:
            rid = await asyncio.to_thread(_run)  # blocking sqlite call

        return Reminder(rid, user_id, guild_id, channel_id, content, remind_at, created_at)

    async def due(self, now: float, limit: int = 100, offset: int = 0) -> List[Reminder]:
        """Return reminders with ``remind_at <= now``, oldest first, skipping ``offset`` rows."""
        sql = f"""
            SELECT {_REMINDER_COLUMNS} FROM reminders
            WHERE remind_at <= ?
            ORDER BY remind_at ASC, id ASC
            LIMIT ? OFFSET ?
        """

        def _query() -> List[Reminder]:
            rows = self.conn.execute(sql, (now, limit, offset)).fetchall()
            return [Reminder.from_row(r) for r in rows]

        async with self._lock:
            return await asyncio.to_thread(_query)  # blocking sqlite call

    async def for_user(self, user_id: int) -> List[Reminder]:
        """Return pending reminders for ``user_id`` ordered by due time."""
        sql = f"""
            SELECT {_REMINDER_COLUMNS} FROM reminders
            WHERE user_id=?
            ORDER BY remind_at ASC, id ASC
        """

        def _query() -> List[Reminder]:
            return [Reminder.from_row(r) for r in self.conn.execute(sql, (user_id,)).fetchall()]

        async with self._lock:
            return await asyncio.to_thread(_query)

    async def count_for_user(self, user_id: int) -> int:
        sql = "SELECT COUNT(*) FROM reminders WHERE user_id=?"

        def _query() -> int:
            return int(self.conn.execute(sql, (user_id,)).fetchone()[0])

        async with self._lock:
            return await asyncio.to_thread(_query)

    async def cancel(self, user_id: int, reminder_id: int) -> bool:
        """
        Delete ``reminder_id`` if it belongs to ``user_id``.

        :returns: ``True`` if a row was removed.
        """
        sql = "DELETE FROM reminders WHERE id=? AND user_id=?"

        def _run() -> bool:
            with self.conn:
                cur = self.conn.execute(sql, (reminder_id, user_id))
            return cur.rowcount > 0

        async with self._lock:
            return await asyncio.to_thread(_run)

    async def delete(self, reminder_id: int) -> None:
        sql = "DELETE FROM reminders WHERE id=?"

        def _run() -> None:
            with self.conn:
                self.conn.execute(sql, (reminder_id,))

        async with self._lock:
            await asyncio.to_thread(_run)


class PrefixRepo:
    """Per-guild command prefix overrides."""

    def __init__(self, conn: sqlite3.Connection, lock: asyncio.Lock):
        self.conn = conn
        self._lock = lock

    async def all(self) -> dict[int, str]:
        """Return every stored ``guild_id -> prefix`` pair."""

        def _query() -> dict[int, str]:
            rows = self.conn.execute("SELECT guild_id, prefix FROM guild_prefixes").fetchall()
            return {int(r["guild_id"]): r["prefix"] for r in rows}

        async with self._lock:
            return await asyncio.to_thread(_query)

    async def set(self, guild_id: int, prefix: str) -> None:
        """
        Upsert the custom prefix for ``guild_id``.

        :param guild_id: Discord guild id.
        :param prefix: New prefix text.
        """
        sql = """
            INSERT INTO guild_prefixes(guild_id, prefix, updated_at) VALUES(?, ?, ?)
            ON CONFLICT(guild_id) DO UPDATE SET
              prefix=excluded.prefix,
              updated_at=excluded.updated_at
        """

        def _run() -> None:
            with self.conn:
                self.conn.execute(sql, (guild_id, prefix, time.time()))

        async with self._lock:
            await asyncio.to_thread(_run)

    async def remove(self, guild_id: int) -> bool:
        """
        Delete the custom prefix for ``guild_id``.

        :returns: ``True`` if one was stored.
        """

        def _run() -> bool:
            with self.conn:
                cur = self.conn.execute("DELETE FROM guild_prefixes WHERE guild_id=?", (guild_id,))
            return cur.rowcount > 0

        async with self._lock:
            return await asyncio.to_thread(_run)
