from __future__ import annotations

import discord
from discord import app_commands
from discord.ext import commands

from ddbot.colors import Colors

from .. import register_cog


def _walk(command) -> list:
    if isinstance(command, app_commands.Group):
        found = []
        for child in command.commands:
            found.extend(_walk(child))
        return found
    return [command]


@register_cog
class Help(commands.Cog):
    """List available slash commands."""

    def __init__(self, bot: commands.Bot):
        self.bot = bot

    def listing(self) -> list[tuple[str, str]]:
        """``(qualified name, description)`` for every leaf slash command, sorted."""
        leaves = []
        for cmd in self.bot.tree.get_commands(type=discord.AppCommandType.chat_input):
            leaves.extend(_walk(cmd))
        return sorted(
            (f"/{cmd.qualified_name}", cmd.description or "No description")
            for cmd in leaves
        )

    @app_commands.command(name="help", description="List available slash commands.")
    async def help(self, interaction: discord.Interaction) -> None:
        """
        Send the registered slash commands to the caller.
        """

        entries = self.listing()
        embed = discord.Embed(color=Colors.BLUE, title="Commands")
        if entries:
            embed.description = "\n".join(f"`{name}` - {desc}" for name, desc in entries)
        else:
            embed.description = "None registered"
        await interaction.response.send_message(embed=embed, ephemeral=True)
