"""
Public façade for persistent state
==================================

Stable, async API over the SQLite store. Import from here::

    from ddbot import storage

    await storage.add_reminder(user_id, "stretch", remind_at)

:func:`init` must run once (the bot does it in ``setup_hook``) before any
other call.
"""

from __future__ import annotations

import asyncio
import logging
import sqlite3
from pathlib import Path
from typing import Dict, List, Optional

from . import db as _db
from .repositories import PrefixRepo as _PrefixRepo
from .repositories import Reminder, ReminderRepo as _ReminderRepo

logger = logging.getLogger(__name__)

__all__ = [
    "Reminder",
    "init",
    "close",
    "is_ready",
    "add_reminder",
    "due_reminders",
    "list_reminders",
    "count_reminders",
    "cancel_reminder",
    "delete_reminder",
    "load_prefixes",
    "cached_prefix",
    "set_prefix",
    "remove_prefix",
]

# --- Internals -------------------------------------------------------------

_conn: Optional[sqlite3.Connection] = None
_db_lock: Optional[asyncio.Lock] = None
_reminder_repo: Optional[_ReminderRepo] = None
_prefix_repo: Optional[_PrefixRepo] = None

# guild_id -> custom prefix, mirrors the guild_prefixes table
_prefix_cache: Dict[int, str] = {}


def init(path: str | Path | None = None) -> None:
    """
    Open the database and apply the schema.

    :param path: SQLite file; defaults to ``core.SQL_DB_PATH``.
    :raises RuntimeError: if connecting or migrating fails.
    """
    global _conn, _db_lock, _reminder_repo, _prefix_repo

    if path is None:
        from ddbot.config import core as core_cfg

        path = core_cfg.SQL_DB_PATH

    if _conn is not None:
        close()

    conn: Optional[sqlite3.Connection] = None
    try:
        conn = _db.connect(path)
        _db.migrate(conn)
    except (sqlite3.Error, OSError) as exc:
        if conn is not None:
            conn.close()
        raise RuntimeError("Failed to run migrations") from exc

    _conn = conn
    _db_lock = asyncio.Lock()
    _reminder_repo = _ReminderRepo(conn, _db_lock)
    _prefix_repo = _PrefixRepo(conn, _db_lock)
    _prefix_cache.clear()
    logger.info("Database ready at %s", path)


def close() -> None:
    """Checkpoint and close the connection if one is open."""
    global _conn, _db_lock, _reminder_repo, _prefix_repo

    if _conn is None:
        return
    try:
        _db.wal_checkpoint_truncate(_conn)
    except sqlite3.Error as exc:
        logger.warning("WAL checkpoint failed on close: %s", exc)
    _conn.close()
    _conn = _db_lock = _reminder_repo = _prefix_repo = None
    _prefix_cache.clear()


def is_ready() -> bool:
    return _conn is not None


def _reminders() -> _ReminderRepo:
    if _reminder_repo is None:
        raise RuntimeError("storage.init() has not been called")
    return _reminder_repo


def _prefixes() -> _PrefixRepo:
    if _prefix_repo is None:
        raise RuntimeError("storage.init() has not been called")
    return _prefix_repo


# --- Reminders ---------------------------------------------------------------

async def add_reminder(
    user_id: int,
    content: str,
    remind_at: float,
    *,
    guild_id: Optional[int] = None,
    channel_id: Optional[int] = None,
) -> Reminder:
    """
    Store a new reminder.

    :param remind_at: Unix timestamp (seconds) when it becomes due.
    :param channel_id: Delivery channel; ``None`` delivers by DM.
    """
    return await _reminders().add(
        user_id, content, remind_at, guild_id=guild_id, channel_id=channel_id
    )


async def due_reminders(now: float, limit: int = 100, offset: int = 0) -> List[Reminder]:
    """Reminders whose due time is at or before ``now``, oldest first."""
    return await _reminders().due(now, limit, offset)


async def list_reminders(user_id: int) -> List[Reminder]:
    return await _reminders().for_user(user_id)


async def count_reminders(user_id: int) -> int:
    return await _reminders().count_for_user(user_id)


async def cancel_reminder(user_id: int, reminder_id: int) -> bool:
    """Delete a reminder owned by ``user_id``; ``False`` if none matched."""
    return await _reminders().cancel(user_id, reminder_id)


async def delete_reminder(reminder_id: int) -> None:
    await _reminders().delete(reminder_id)


# --- Prefixes ----------------------------------------------------------------

async def load_prefixes() -> int:
    """
    Fill the in-memory prefix cache from the database.

    :returns: Number of cached prefixes.
    """
    stored = await _prefixes().all()
    _prefix_cache.clear()
    _prefix_cache.update(stored)
    return len(stored)


def cached_prefix(guild_id: Optional[int]) -> Optional[str]:
    """Custom prefix for ``guild_id`` from the cache, without touching the database."""
    if guild_id is None:
        return None
    return _prefix_cache.get(guild_id)


async def set_prefix(guild_id: int, prefix: str) -> None:
    await _prefixes().set(guild_id, prefix)
    _prefix_cache[guild_id] = prefix


async def remove_prefix(guild_id: int) -> bool:
    removed = await _prefixes().remove(guild_id)
    _prefix_cache.pop(guild_id, None)
    return removed
