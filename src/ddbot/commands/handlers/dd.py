"""Dungeon Defenders commands."""

from __future__ import annotations

import logging
from typing import List

import discord
from discord import app_commands
from discord.ext import commands

from ddbot.colors import Colors
from ddbot.quotes import QuoteBook, get_quote_book

from .. import register_cog

logger = logging.getLogger(__name__)


def quote_choices(book: QuoteBook, current: str | None) -> List[app_commands.Choice[str]]:
    """Autocomplete choices for the partially typed ``current`` value."""
    return [app_commands.Choice(name=key, value=key) for key in book.suggest(current)]


@register_cog
class DungeonDefenders(commands.Cog):
    """Slash command group for the DD community."""

    dd = app_commands.Group(name="dd", description="Dungeon Defenders")

    def __init__(self, bot: commands.Bot, book: QuoteBook | None = None):
        self.bot = bot
        self.book = book if book is not None else get_quote_book()

    @dd.command(name="quote", description="Post a legendary quote from the DD community")
    @app_commands.describe(quote="The quote to post")
    async def quote(self, interaction: discord.Interaction, quote: str) -> None:
        """Reply with the quote's image, or a red embed when it is unknown."""

        filename = self.book.lookup(quote)
        if filename is None:
            embed = discord.Embed(
                color=Colors.RED,
                title="Quote not found",
                description="Could not identify the quote",
            )
            await interaction.response.send_message(embed=embed)
            return

        path = self.book.image_path(filename)
        if not path.is_file():
            logger.warning("Quote %r points at missing image %s", quote, path)
            embed = discord.Embed(
                color=Colors.RED,
                title="Quote unavailable",
                description="The image for this quote is missing",
            )
            await interaction.response.send_message(embed=embed)
            return

        await interaction.response.send_message(file=discord.File(path, filename=filename))

    @quote.autocomplete("quote")
    async def quote_autocomplete(
        self, interaction: discord.Interaction, current: str
    ) -> List[app_commands.Choice[str]]:
        return quote_choices(self.book, current)
