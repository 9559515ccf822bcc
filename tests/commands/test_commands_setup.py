import asyncio

import discord
from discord.ext import commands as discord_commands

from ddbot import commands as dd_commands


async def _collect():
    bot = discord_commands.Bot(command_prefix="!", intents=discord.Intents.none())
    try:
        attached = await dd_commands.setup(bot)
        again = await dd_commands.setup(bot)
        cogs = set(bot.cogs.keys())
        slash = {cmd.name for cmd in bot.tree.get_commands()}
        text = {cmd.name for cmd in bot.commands}
        listing = bot.get_cog("Help").listing()
        return attached, again, cogs, slash, text, listing
    finally:
        await bot.close()


def test_setup_registers_known_cogs():
    attached, again, cogs, slash, text, listing = asyncio.run(_collect())

    assert set(attached) == cogs
    assert again == []
    assert {"Help", "DungeonDefenders", "Prefix", "Trivia", "Remind"}.issubset(cogs)
    assert {"help", "dd", "prefix", "trivia", "remind"}.issubset(slash)
    assert {"prefix", "trivia"}.issubset(text)

    names = [name for name, _ in listing]
    assert "/dd quote" in names
    assert "/remind me" in names
    assert names == sorted(names)


def test_register_cog_rejects_non_cogs():
    import pytest

    with pytest.raises(TypeError):
        dd_commands.register_cog(object)


def test_register_cog_rejects_name_clashes():
    import pytest

    class Remind(discord_commands.Cog):
        pass

    with pytest.raises(ValueError, match="already registered"):
        dd_commands.register_cog(Remind)
