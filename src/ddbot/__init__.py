"""Discord bot for the Dungeon Defenders community."""

__version__ = "0.4.0"
