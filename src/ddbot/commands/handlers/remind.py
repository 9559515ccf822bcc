"""Reminder commands: schedule, list and cancel."""

from __future__ import annotations

import logging
import time
from datetime import timedelta
from typing import Optional

import discord
from discord import app_commands
from discord.ext import commands

from ddbot import storage
from ddbot.colors import Colors
from ddbot.config import reminders as reminders_cfg
from ddbot.errors import DurationError, ReminderError
from ddbot.reminders.duration import format_duration, parse_duration

from .. import register_cog

logger = logging.getLogger(__name__)


def validate_request(when: str, message: str, pending: int) -> float:
    """
    Check a reminder request against the configured limits.

    :returns: Delay in seconds.
    :raises DurationError: if ``when`` is unparsable or out of range.
    :raises ReminderError: if the message or the user's quota is invalid.
    """
    delay = parse_duration(when).total_seconds()
    if delay < reminders_cfg.MIN_DELAY:
        raise DurationError(f"Reminders need to be at least {reminders_cfg.MIN_DELAY} seconds away.")
    if delay > reminders_cfg.MAX_DELAY:
        raise DurationError(
            f"Reminders can be at most {reminders_cfg.MAX_DELAY // 86400} days away."
        )

    text = message.strip()
    if not text:
        raise ReminderError("The reminder message is empty.")
    if len(text) > reminders_cfg.MAX_LENGTH:
        raise ReminderError(
            f"The reminder message is longer than {reminders_cfg.MAX_LENGTH} characters."
        )
    if pending >= reminders_cfg.MAX_PENDING:
        raise ReminderError(
            f"You already have {pending} pending reminders; cancel one first."
        )
    return delay


@register_cog
class Remind(commands.Cog):
    """Schedule reminders that the watcher delivers later."""

    remind = app_commands.Group(name="remind", description="Schedule reminders")

    def __init__(self, bot: commands.Bot):
        self.bot = bot

    @remind.command(name="me", description="Remind you about something later")
    @app_commands.describe(
        when="How long from now, e.g. 10m, 1h30m, 2d",
        message="What to remind you about",
        private="Send the reminder by DM instead of in this channel",
    )
    async def me(
        self,
        interaction: discord.Interaction,
        when: str,
        message: str,
        private: Optional[bool] = False,
    ) -> None:
        pending = await storage.count_reminders(interaction.user.id)
        delay = validate_request(when, message, pending)

        in_guild = interaction.guild is not None
        channel_id = interaction.channel_id if in_guild and not private else None
        remind_at = time.time() + delay

        reminder = await storage.add_reminder(
            interaction.user.id,
            message.strip(),
            remind_at,
            guild_id=interaction.guild_id,
            channel_id=channel_id,
        )
        logger.info(
            "Scheduled reminder %s for user %s in %ss", reminder.id, interaction.user.id, int(delay)
        )

        where = "here" if channel_id is not None else "by DM"
        embed = discord.Embed(
            color=Colors.GREEN,
            title="Reminder set",
            description=(
                f"I'll remind you {where} <t:{int(remind_at)}:R> "
                f"(in {format_duration(timedelta(seconds=delay))})."
            ),
        )
        embed.set_footer(text=f"Reminder #{reminder.id}")
        await interaction.response.send_message(embed=embed, ephemeral=True)

    @remind.command(name="list", description="List your pending reminders")
    async def list_(self, interaction: discord.Interaction) -> None:
        pending = await storage.list_reminders(interaction.user.id)
        embed = discord.Embed(color=Colors.BLUE, title="Your reminders")
        if not pending:
            embed.description = "You have no pending reminders."
        else:
            lines = []
            for reminder in pending:
                preview = reminder.content if len(reminder.content) <= 80 else reminder.content[:77] + "..."
                lines.append(f"**#{reminder.id}** <t:{int(reminder.remind_at)}:R> - {preview}")
            embed.description = "\n".join(lines)
        await interaction.response.send_message(embed=embed, ephemeral=True)

    @remind.command(name="cancel", description="Cancel one of your reminders")
    @app_commands.describe(reminder_id="Number shown in /remind list")
    async def cancel(self, interaction: discord.Interaction, reminder_id: int) -> None:
        removed = await storage.cancel_reminder(interaction.user.id, reminder_id)
        if not removed:
            raise ReminderError(f"You have no reminder #{reminder_id}.")

        embed = discord.Embed(
            color=Colors.GREEN,
            title="Reminder cancelled",
            description=f"Reminder #{reminder_id} will not be sent.",
        )
        await interaction.response.send_message(embed=embed, ephemeral=True)
