import logging

import discord

from ddbot.config import reminders as reminders_cfg
from ddbot.reminders import watcher

logger = logging.getLogger(__name__)


async def handle(client: discord.Client):
    """Start background work once the gateway session is ready."""
    logger.info("Logged in as %s (ID: %s)", client.user.name, client.user.id)
    logger.info("Connected to %d guild(s)", len(client.guilds))

    # on_ready fires again after reconnects; the watcher ignores repeat starts
    if watcher.is_running():
        logger.debug("Reminder watcher already running")
        return

    await watcher.start(client, reminders_cfg.POLL_INTERVAL)
