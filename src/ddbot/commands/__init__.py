"""
Command cogs
============

Importing this package imports every module in ``commands/handlers``. Each
one registers its cog under the cog's name::

    from ddbot.commands import register_cog

    @register_cog
    class Remind(commands.Cog): ...

``DDBot.setup_hook`` then calls :func:`setup`, which attaches the cogs in
registration order.
"""

from __future__ import annotations

import logging
from importlib import import_module
from pathlib import Path
from pkgutil import iter_modules
from typing import Dict, List, Type

from discord.ext import commands as commands_ext

logger = logging.getLogger(__name__)

_COGS: Dict[str, Type[commands_ext.Cog]] = {}


def register_cog(cog_cls: Type[commands_ext.Cog]) -> Type[commands_ext.Cog]:
    """
    Class decorator adding a cog to the registry.

    :raises TypeError: if ``cog_cls`` is not a ``Cog`` subclass.
    :raises ValueError: if another class already uses the same cog name.
    """
    if not (isinstance(cog_cls, type) and issubclass(cog_cls, commands_ext.Cog)):
        raise TypeError(f"{cog_cls!r} is not a discord.ext.commands.Cog subclass")

    name = cog_cls.__cog_name__
    existing = _COGS.get(name)
    if existing is not None and existing is not cog_cls:
        raise ValueError(f"Cog name {name!r} is already registered by {existing.__module__}")

    _COGS[name] = cog_cls
    return cog_cls


async def setup(bot: commands_ext.Bot) -> List[str]:
    """
    Attach every registered cog that ``bot`` does not have yet.

    :returns: Names of the cogs attached by this call.
    """
    attached: List[str] = []
    for name, cog_cls in _COGS.items():
        if bot.get_cog(name) is not None:
            continue
        await bot.add_cog(cog_cls(bot))
        attached.append(name)

    if attached:
        logger.info("Attached cogs: %s", ", ".join(attached))
    elif not _COGS:
        logger.warning("No command cogs discovered; command tree is empty")
    return attached


def _import_handlers() -> None:
    handlers = Path(__file__).resolve().parent / "handlers"
    for module in iter_modules([str(handlers)]):
        if not module.name.startswith("_"):
            import_module(f"{__name__}.handlers.{module.name}")


_import_handlers()


__all__ = ["register_cog", "setup"]
