"""Discord bot bootstrap utilities."""

from __future__ import annotations

import logging

import aiohttp
import discord
from discord.ext import commands as discord_commands

from ddbot import commands as dd_commands
from ddbot import errors, storage
from ddbot.config import core
from ddbot.event_hooks import ready_hook
from ddbot.reminders import watcher

logger = logging.getLogger(__name__)

# --- Intents --------------------------------------------------------------- #
intents = discord.Intents.default()
intents.message_content = True
intents.members = True


def resolve_prefix(bot: discord_commands.Bot, message: discord.Message) -> list[str]:
    """Guild prefix (or the default) plus the bot mention."""
    guild_id = message.guild.id if message.guild else None
    prefix = storage.cached_prefix(guild_id) or core.DEFAULT_PREFIX
    return discord_commands.when_mentioned_or(prefix)(bot, message)


class DDBot(discord_commands.Bot):
    """Primary Discord bot implementation with slash command support."""

    def __init__(self) -> None:
        super().__init__(
            command_prefix=resolve_prefix,
            intents=intents,
            case_insensitive=True,
            allowed_mentions=discord.AllowedMentions(everyone=False, roles=False),
        )
        self.session: aiohttp.ClientSession | None = None

    async def setup_hook(self) -> None:
        """Run migrations, register commands and synchronise with Discord."""

        storage.init()
        cached = await storage.load_prefixes()
        if cached:
            logger.info("Cached %d custom prefix(es)", cached)

        self.session = aiohttp.ClientSession()

        await dd_commands.setup(self)
        self.tree.error(errors.on_app_command_error)

        if not core.SYNC_COMMANDS:
            logger.info("SYNC_COMMANDS disabled; skipping command tree sync")
            return

        try:
            synced = await self.tree.sync()
            logger.info("Synced %d application command(s)", len(synced))
        except discord.HTTPException:
            logger.exception("Failed to sync application commands")

    async def on_command_error(self, ctx: discord_commands.Context, error: discord_commands.CommandError) -> None:
        await errors.on_command_error(ctx, error)

    async def close(self) -> None:
        await watcher.stop()
        await super().close()
        if self.session is not None and not self.session.closed:
            await self.session.close()
        storage.close()


bot = DDBot()


@bot.event
async def on_ready() -> None:
    await ready_hook.handle(bot)


def run() -> None:
    """Start the Discord bot using configuration from the environment."""

    if not core.DISCORD_API_TOKEN:
        logger.error("No DISCORD_TOKEN configured. Cannot run client.")
        return

    try:
        # Root logging is configured in ddbot.config
        bot.run(core.DISCORD_API_TOKEN, log_handler=None)
    except discord.LoginFailure as exc:
        logger.error("Login failed: %s", exc)
