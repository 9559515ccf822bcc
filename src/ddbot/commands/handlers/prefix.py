"""
Per-server command prefix.

Only text commands use the prefix; slash commands are unaffected.
"""

from __future__ import annotations

import enum
import logging
from typing import Optional

import discord
from discord.ext import commands

from ddbot import storage
from ddbot.colors import Colors
from ddbot.config import core

from .. import register_cog

logger = logging.getLogger(__name__)

RESET_WORD = "reset"


class PrefixChange(enum.Enum):
    SHOW = "show"
    TOO_LONG = "too_long"
    RESET = "reset"
    INVALID = "invalid"
    SET = "set"


def decide_prefix_change(
    requested: Optional[str],
    current: Optional[str],
    default: str,
    max_length: int,
) -> PrefixChange:
    """
    Classify a prefix request.

    :param requested: Prefix the user asked for, ``None`` to just view it.
    :param current: The server's custom prefix, ``None`` if it uses the default.
    """
    if not requested:
        return PrefixChange.SHOW
    if len(requested) > max_length:
        return PrefixChange.TOO_LONG
    if requested in (default, RESET_WORD) and current:
        return PrefixChange.RESET
    if requested == current or (not current and requested == default):
        return PrefixChange.INVALID
    return PrefixChange.SET


@register_cog
class Prefix(commands.Cog):
    """View or change the text command prefix for a server."""

    def __init__(self, bot: commands.Bot):
        self.bot = bot

    @commands.hybrid_command(
        name="prefix",
        aliases=["setprefix"],
        description="View the current prefix, or set a custom prefix for this server only",
    )
    @commands.guild_only()
    async def prefix(self, ctx: commands.Context, new_prefix: Optional[str] = None) -> None:
        default = core.DEFAULT_PREFIX
        current = storage.cached_prefix(ctx.guild.id)
        change = decide_prefix_change(new_prefix, current, default, core.MAX_PREFIX_LENGTH)

        if change is not PrefixChange.SHOW and not ctx.author.guild_permissions.manage_guild:
            raise commands.MissingPermissions(["manage_guild"])

        if change is PrefixChange.SHOW:
            embed = discord.Embed(
                color=Colors.BLUE,
                title="Current prefix",
                description=f"The prefix for this server is `{current or default}`",
            )
        elif change is PrefixChange.TOO_LONG:
            embed = discord.Embed(
                color=Colors.RED,
                title="Prefix too long",
                description=(
                    f"New prefix is too long - maximum length is {core.MAX_PREFIX_LENGTH} characters."
                ),
            )
            embed.set_footer(text="Though I suggest sticking to 2 characters at max.")
        elif change is PrefixChange.RESET:
            await storage.remove_prefix(ctx.guild.id)
            logger.info("Reset prefix for guild %s", ctx.guild.id)
            embed = discord.Embed(
                color=Colors.GREEN,
                title="Prefix reset",
                description=f"Successfully reset prefix to default: `{default}`",
            )
        elif change is PrefixChange.INVALID:
            embed = discord.Embed(
                color=Colors.RED,
                title="Invalid prefix",
                description="Please use a different prefix.",
            )
        else:
            await storage.set_prefix(ctx.guild.id, new_prefix)
            logger.info("Set prefix for guild %s to %r", ctx.guild.id, new_prefix)
            embed = discord.Embed(
                color=Colors.GREEN,
                title="Prefix set",
                description=f"Prefix has been updated to `{new_prefix}`",
            )

        await ctx.send(embed=embed)
