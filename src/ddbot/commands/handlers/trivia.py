"""
Trivia game.

``trivia [category words]`` posts a question and waits for the asker to react
with the emote of their answer. ``trivia --categories`` lists categories and
``trivia --reset`` resets the question token so questions can repeat.
"""

from __future__ import annotations

import asyncio
import logging
import random
from typing import List, Optional, Sequence

import discord
from discord import app_commands
from discord.ext import commands

from ddbot.colors import Colors
from ddbot.config import trivia as trivia_cfg
from ddbot.trivia import OpenTDBClient, TriviaQuestion
from ddbot.trivia import game

from .. import register_cog

logger = logging.getLogger(__name__)

FLAG_CATEGORIES = "--categories"
FLAG_RESET = "--reset"


def question_embed(
    question: TriviaQuestion,
    answers: Sequence[str],
    emotes: Sequence[str],
    asker: str,
) -> discord.Embed:
    choices = "\n".join(f"{emote} - {answer}" for emote, answer in zip(emotes, answers))
    embed = discord.Embed(
        title=f"{asker}, here's a question!",
        description=game.describe(question),
        color=game.difficulty_color(question.difficulty),
        timestamp=discord.utils.utcnow(),
    )
    embed.add_field(name="Question", value=game.clean(question.question), inline=False)
    embed.add_field(name="Choices", value=game.clean(choices), inline=False)
    embed.set_footer(text="Answer by reacting to the corresponding emote")
    return embed


def result_embed(
    question: TriviaQuestion,
    chosen: Optional[str],
    correct: str,
    user_id: int,
) -> discord.Embed:
    """Verdict for ``chosen`` (``None`` when the asker never answered)."""
    answer = game.clean(question.correct_answer)
    if chosen is None:
        return discord.Embed(
            color=Colors.ORANGE,
            title="Time's up!",
            description=f"You ran out of time! The correct answer was {answer}.",
        )
    if chosen == correct:
        return discord.Embed(
            color=Colors.GREEN,
            title="Correct answer!",
            description=f"<@{user_id}>, you were correct! Congratulations!",
        )
    embed = discord.Embed(
        color=Colors.RED,
        title="Incorrect",
        description=f"Sorry, but that's incorrect. The right answer was {answer}.",
    )
    embed.set_footer(text="Better luck next time!")
    return embed


@register_cog
class Trivia(commands.Cog):
    """Questions from the Open Trivia Database."""

    def __init__(self, bot: commands.Bot, client: OpenTDBClient | None = None):
        self.bot = bot
        self.client = client or OpenTDBClient(getattr(bot, "session", None))
        self.rng = random.Random()

    async def cog_unload(self) -> None:
        await self.client.close()

    @commands.hybrid_command(name="trivia", description="Play a game of trivia!")
    @app_commands.describe(query="Category to draw from, or --categories / --reset")
    async def trivia(self, ctx: commands.Context, *, query: Optional[str] = None) -> None:
        args = (query or "").split()
        await ctx.defer()

        if args == [FLAG_RESET]:
            await self._reset_token(ctx)
            return
        if args == [FLAG_CATEGORIES]:
            await self._list_categories(ctx)
            return

        category_id = None
        if args:
            categories = await self.client.categories()
            category_id = game.match_category(args, categories, self.rng)

        question = await self.client.question(category_id)
        answers = game.arrange_answers(question, self.rng)
        emotes = game.pick_emotes(len(answers), self.rng)
        correct = emotes[answers.index(question.correct_answer)]

        message = await ctx.send(
            embed=question_embed(question, answers, emotes, ctx.author.display_name)
        )
        for emote in emotes:
            await message.add_reaction(emote)

        def _check(reaction: discord.Reaction, user: discord.abc.User) -> bool:
            return (
                user.id == ctx.author.id
                and reaction.message.id == message.id
                and str(reaction.emoji) in emotes
            )

        try:
            reaction, _ = await self.bot.wait_for(
                "reaction_add", check=_check, timeout=trivia_cfg.ANSWER_TIMEOUT
            )
            chosen = str(reaction.emoji)
        except asyncio.TimeoutError:
            chosen = None

        await ctx.send(embed=result_embed(question, chosen, correct, ctx.author.id))

    @trivia.autocomplete("query")
    async def trivia_autocomplete(
        self, interaction: discord.Interaction, current: str
    ) -> List[app_commands.Choice[str]]:
        needle = (current or "").lower()
        try:
            names = [c.name for c in await self.client.categories()]
        except Exception:
            logger.warning("Trivia categories unavailable for autocomplete", exc_info=True)
            names = []

        options = [FLAG_CATEGORIES, FLAG_RESET, *sorted(names)]
        return [
            app_commands.Choice(name=option, value=option)
            for option in options
            if needle in option.lower()
        ][:25]

    async def _list_categories(self, ctx: commands.Context) -> None:
        names = [game.clean(c.name) for c in await self.client.categories()]
        left, right = game.split_columns(names)
        embed = discord.Embed(color=Colors.BLUE, title="All categories")
        embed.add_field(
            name="Here's a list of all categories:", value="\n".join(left) or "-", inline=True
        )
        embed.add_field(name="\u200b", value="\n".join(right) or "\u200b", inline=True)
        await ctx.send(embed=embed)

    async def _reset_token(self, ctx: commands.Context) -> None:
        if self.client.token:
            await self.client.reset_token()
            embed = discord.Embed(color=Colors.GREEN, title="Token reset")
        else:
            await self.client.request_token()
            embed = discord.Embed(color=Colors.GREEN, title="Token received")
        await ctx.send(embed=embed)
