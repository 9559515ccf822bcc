"""
Reminder watcher
================

Polls the store for due reminders and delivers them.

- Channel reminders are posted in their channel with a mention.
- Reminders without a usable channel go to the user by DM.
- Delivered and undeliverable reminders are deleted; transient HTTP failures
  stay in the table for the next cycle.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Awaitable, Callable

import discord

from ddbot import storage
from ddbot.colors import Colors
from ddbot.storage import Reminder

logger = logging.getLogger(__name__)

_task: asyncio.Task | None = None

BATCH_SIZE = 100


def reminder_embed(reminder: Reminder) -> discord.Embed:
    embed = discord.Embed(
        color=Colors.BLUE,
        title="Reminder",
        description=reminder.content,
    )
    embed.add_field(name="Set", value=f"<t:{int(reminder.created_at)}:R>")
    embed.set_footer(text=f"Reminder #{reminder.id}")
    return embed


async def _resolve_user(client: discord.Client, user_id: int):
    user = client.get_user(user_id)
    if user is None:
        user = await client.fetch_user(user_id)
    return user


async def _resolve_channel(client: discord.Client, channel_id: int):
    channel = client.get_channel(channel_id)
    if channel is None:
        try:
            channel = await client.fetch_channel(channel_id)
        except (discord.NotFound, discord.Forbidden):
            return None
    return channel


async def deliver(client: discord.Client, reminder: Reminder) -> None:
    """
    Send one reminder.

    :raises discord.HTTPException: if Discord rejects the message.
    """
    embed = reminder_embed(reminder)

    if reminder.channel_id is not None:
        channel = await _resolve_channel(client, reminder.channel_id)
        if channel is not None:
            try:
                await channel.send(
                    content=f"<@{reminder.user_id}>",
                    embed=embed,
                    allowed_mentions=discord.AllowedMentions(users=True),
                )
                return
            except (discord.Forbidden, discord.NotFound):
                logger.info(
                    "Channel %s unusable for reminder %s; falling back to DM",
                    reminder.channel_id,
                    reminder.id,
                )

    user = await _resolve_user(client, reminder.user_id)
    await user.send(embed=embed)


async def deliver_due(client: discord.Client, now: float | None = None) -> int:
    """
    Deliver every reminder due at ``now`` (defaults to the current time).

    Reminders kept for retry stay at the head of the due list, so later
    batches skip past them.

    :returns: Number of reminders delivered.
    """
    now = time.time() if now is None else now

    delivered = 0
    attempted = 0
    retained = 0
    while True:
        batch = await storage.due_reminders(now, limit=BATCH_SIZE, offset=retained)
        if not batch:
            break

        for reminder in batch:
            attempted += 1
            try:
                await deliver(client, reminder)
            except (discord.Forbidden, discord.NotFound) as exc:
                logger.warning(
                    "Dropping undeliverable reminder %s for user %s: %s",
                    reminder.id,
                    reminder.user_id,
                    exc,
                )
            except discord.HTTPException as exc:
                logger.warning("Reminder %s delivery failed, retrying next cycle: %s", reminder.id, exc)
                retained += 1
                continue
            else:
                delivered += 1

            await storage.delete_reminder(reminder.id)

    if attempted:
        logger.info("Delivered %d of %d due reminder(s)", delivered, attempted)
    return delivered


async def _periodic(task_fn: Callable[[], Awaitable[object]], interval: float) -> None:
    await asyncio.sleep(interval)
    while True:
        try:
            await task_fn()
        except Exception:
            logger.exception("Reminder cycle failed")
        await asyncio.sleep(interval)


async def start(client: discord.Client, interval: float) -> asyncio.Task:
    """
    Run one delivery cycle now and keep polling every ``interval`` seconds.

    Calling it while the watcher is already running returns the existing task.
    """
    global _task

    if _task and not _task.done():
        return _task

    logger.info("Starting reminder watcher (interval=%ss)", interval)
    # registered before the first cycle so a concurrent start sees it
    task = asyncio.create_task(_periodic(lambda: deliver_due(client), interval))
    _task = task

    try:
        await deliver_due(client)
    except Exception:
        logger.exception("Initial reminder cycle failed")

    return task


async def stop() -> None:
    """Cancel the watcher task if it is running."""
    global _task

    if not _task:
        return

    _task.cancel()
    try:
        await _task
    except asyncio.CancelledError:
        pass
    _task = None


def is_running() -> bool:
    return _task is not None and not _task.done()


__all__ = ["deliver", "deliver_due", "reminder_embed", "start", "stop", "is_running"]
