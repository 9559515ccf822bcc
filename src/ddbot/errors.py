"""
User-facing error types and the shared error reply.

Commands raise a :class:`BotError` subclass when something goes wrong that the
caller should hear about. The bot's error hooks turn those into the red
"Error" embed; anything else is logged and answered with a generic message.
"""

from __future__ import annotations

import logging

import discord
from discord import app_commands
from discord.ext import commands

from .colors import Colors

logger = logging.getLogger(__name__)

GENERIC_FAILURE = "Something went wrong while running that command."


class BotError(Exception):
    """Base class for failures that are safe to show to the user."""

    title = "Error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class QuoteMapError(BotError):
    title = "Quote map unavailable"


class TriviaAPIError(BotError):
    title = "Trivia unavailable"


class DurationError(BotError):
    title = "Invalid duration"


class ReminderError(BotError):
    title = "Reminder not saved"


def error_embed(message: str) -> discord.Embed:
    """Build the red "Error" embed carrying ``message``."""

    embed = discord.Embed(
        color=Colors.RED,
        title="Error",
        description="An error was encountered",
    )
    embed.add_field(name="Error message:", value=f"`{message}`")
    return embed


async def send_error(
    target: discord.Interaction | commands.Context,
    message: str,
    *,
    ephemeral: bool = True,
) -> None:
    """
    Reply to an interaction or a command context with :func:`error_embed`.

    Interactions that were already answered get a followup instead.
    """

    embed = error_embed(message)

    if isinstance(target, discord.Interaction):
        if target.response.is_done():
            await target.followup.send(embed=embed, ephemeral=ephemeral)
        else:
            await target.response.send_message(embed=embed, ephemeral=ephemeral)
        return

    await target.send(embed=embed, ephemeral=ephemeral)


def _unwrap(error: Exception) -> Exception:
    """Strip the invoke/hybrid wrappers discord.py adds around the real error."""

    while True:
        if isinstance(error, commands.HybridCommandError):
            error = error.original
        elif isinstance(error, (commands.CommandInvokeError, app_commands.CommandInvokeError)):
            error = error.original
        else:
            return error


def describe_error(error: Exception) -> str | None:
    """
    Return the message to show for ``error``, or ``None`` when it should stay silent.

    Unexpected errors map to :data:`GENERIC_FAILURE`.
    """

    error = _unwrap(error)

    if isinstance(error, commands.CommandNotFound):
        return None
    if isinstance(error, BotError):
        return error.message
    if isinstance(error, (commands.CommandOnCooldown, app_commands.CommandOnCooldown)):
        return f"This command is on cooldown, try again in {error.retry_after:.1f}s."
    if isinstance(error, (commands.MissingPermissions, app_commands.MissingPermissions)):
        perms = ", ".join(p.replace("_", " ") for p in error.missing_permissions)
        return f"You need the following permission(s) to do that: {perms}."
    if isinstance(error, (commands.NoPrivateMessage, app_commands.NoPrivateMessage)):
        return "This command can only be used inside a server."
    if isinstance(error, (commands.UserInputError, app_commands.TransformerError)):
        return str(error)
    return GENERIC_FAILURE


async def on_app_command_error(
    interaction: discord.Interaction, error: app_commands.AppCommandError
) -> None:
    """Error hook installed on the command tree."""

    message = describe_error(error)
    if message is None:
        return
    if message == GENERIC_FAILURE:
        command_name = getattr(interaction.command, "qualified_name", "unknown")
        logger.exception("App command %s failed", command_name, exc_info=_unwrap(error))

    try:
        await send_error(interaction, message)
    except discord.HTTPException:
        logger.warning("Could not deliver error reply for interaction %s", interaction.id)


async def on_command_error(ctx: commands.Context, error: commands.CommandError) -> None:
    """Error hook for prefix and hybrid commands."""

    message = describe_error(error)
    if message is None:
        return
    if message == GENERIC_FAILURE:
        logger.exception(
            "Command %s failed", getattr(ctx.command, "qualified_name", "unknown"),
            exc_info=_unwrap(error),
        )

    try:
        await send_error(ctx, message)
    except discord.HTTPException:
        logger.warning("Could not deliver error reply in channel %s", getattr(ctx.channel, "id", "unknown"))


__all__ = [
    "BotError",
    "QuoteMapError",
    "TriviaAPIError",
    "DurationError",
    "ReminderError",
    "error_embed",
    "send_error",
    "describe_error",
    "on_app_command_error",
    "on_command_error",
]
