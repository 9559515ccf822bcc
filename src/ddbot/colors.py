"""Embed palette shared by every command."""

import discord


class Colors:
    RED = discord.Color(0xCC0000)
    GREEN = discord.Color(0x00CC00)
    BLUE = discord.Color(0x0066CC)
    ORANGE = discord.Color(0xCC6600)
