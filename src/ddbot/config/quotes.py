import os
from pathlib import Path

from .loader import section

_ASSETS_DIR = Path(__file__).resolve().parent.parent / "assets" / "quotes"


class Quotes:
    def __init__(self, config: dict | None = None) -> None:
        quotes_cfg = section(config, "quotes")
        self.QUOTE_MAP_FILE: str = str(
            quotes_cfg.get("map_file", os.getenv("QUOTE_MAP_FILE", str(_ASSETS_DIR / "quotemap.json")))
        )
        self.QUOTE_IMAGE_DIR: str = str(
            quotes_cfg.get("image_dir", os.getenv("QUOTE_IMAGE_DIR", str(_ASSETS_DIR / "img")))
        )
