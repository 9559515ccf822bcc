from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any, Dict, Mapping


DEFAULT_CONFIG_PATH = Path("config.toml")
CONFIG_PATH_ENV = "DDBOT_CONFIG"


def load_config(path: str | Path | None = None) -> Dict[str, Any]:
    """
    Return the ``[ddbot]`` table of the bot's TOML config.

    The file is ``path``, else ``$DDBOT_CONFIG``, else ``config.toml``. A
    missing file gives ``{}`` so every setting falls back to the environment.

    :raises ValueError: if ``[ddbot]`` is present but not a table.
    """
    if path is None:
        path = os.getenv(CONFIG_PATH_ENV) or DEFAULT_CONFIG_PATH
    target = Path(path)
    if not target.is_file():
        return {}

    with target.open("rb") as handle:
        table = tomllib.load(handle).get("ddbot", {})
    if not isinstance(table, dict):
        raise ValueError(f"{target}: [ddbot] must be a table")
    return table


def section(config: Mapping[str, Any] | None, name: str) -> Dict[str, Any]:
    """``[ddbot.<name>]`` from a loaded config, ``{}`` when absent."""
    value = (config or {}).get(name, {})
    if not isinstance(value, dict):
        raise ValueError(f"[ddbot.{name}] must be a table")
    return value


__all__ = ["load_config", "section", "DEFAULT_CONFIG_PATH", "CONFIG_PATH_ENV"]
