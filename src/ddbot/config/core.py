import logging
import os
from pathlib import Path

from .loader import section

logger = logging.getLogger(__name__)

_DEFAULT_SQLITE_PATH = Path("data") / "ddbot.db"


class Core:
    def __init__(self, config: dict | None = None) -> None:
        discord_cfg = section(config, "discord")
        storage_cfg = section(config, "storage")

        token_env = str(discord_cfg.get("token_env", "DISCORD_TOKEN"))
        self.DISCORD_API_TOKEN: str | None = os.getenv(token_env)

        self.DEFAULT_PREFIX: str = str(discord_cfg.get("default_prefix", os.getenv("DEFAULT_PREFIX", "!")))
        self.MAX_PREFIX_LENGTH: int = int(discord_cfg.get("max_prefix_length", os.getenv("MAX_PREFIX_LENGTH", "6")))
        self.SYNC_COMMANDS: bool = str(
            discord_cfg.get("sync_commands", os.getenv("SYNC_COMMANDS", "1"))
        ).lower() in ("1", "true", "yes")

        self.SQL_DB_PATH: str = str(storage_cfg.get("sql_db_path", os.getenv("SQL_DB_PATH", str(_DEFAULT_SQLITE_PATH))))

        required = [
            (token_env, self.DISCORD_API_TOKEN),
        ]
        missing = [name for name, val in required if not val]
        if missing:
            raise ValueError(f"Missing environment variables: {', '.join(missing)}")

        if not self.DEFAULT_PREFIX.strip():
            logger.warning("DEFAULT_PREFIX is blank; falling back to '!'")
            self.DEFAULT_PREFIX = "!"
