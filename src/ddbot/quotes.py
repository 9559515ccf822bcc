"""
Quote map
=========

Static mapping from a quote name to the image that shows it, loaded once from
the bundled ``quotemap.json``::

    [{"name": "eternia", "file": "eternia.png"}, ...]

Keys and queries go through :func:`normalize` (lowercase, no spaces), so
``"Just One More Run"`` and ``"justonemorerun"`` name the same quote.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, Iterator, List, Mapping

from .errors import QuoteMapError

logger = logging.getLogger(__name__)

# Discord rejects autocomplete responses with more than 25 choices.
MAX_CHOICES = 25


def normalize(query: str | None) -> str:
    """Lowercase ``query`` and drop every space."""
    return (query or "").lower().replace(" ", "")


class QuoteBook(Mapping[str, str]):
    """Read-only ``name -> image filename`` mapping."""

    def __init__(self, entries: Mapping[str, str], image_dir: str | Path | None = None) -> None:
        quotes: Dict[str, str] = {}
        for name, filename in entries.items():
            key = normalize(name)
            if not key:
                raise QuoteMapError(f"Quote {name!r} has an empty name")
            if key in quotes:
                raise QuoteMapError(f"Duplicate quote name {key!r}")
            quotes[key] = filename

        self._quotes = quotes
        self._sorted_keys = sorted(quotes)
        self.image_dir = Path(image_dir) if image_dir is not None else None

    # ---------- construction ------------------------------------------ #

    @classmethod
    def from_json(cls, text: str, image_dir: str | Path | None = None) -> "QuoteBook":
        """
        Build a book from the JSON quote map.

        :raises QuoteMapError: if the document is not a list of
            ``{"name": str, "file": str}`` objects.
        """
        try:
            raw = json.loads(text)
        except json.JSONDecodeError as exc:
            raise QuoteMapError(f"Quote map is not valid JSON: {exc}") from exc

        if not isinstance(raw, list):
            raise QuoteMapError("Quote map must be a JSON list")

        entries: Dict[str, str] = {}
        for idx, item in enumerate(raw):
            if not isinstance(item, dict):
                raise QuoteMapError(f"Quote entry {idx} is not an object")
            name, filename = item.get("name"), item.get("file")
            if not isinstance(name, str) or not isinstance(filename, str):
                raise QuoteMapError(f"Quote entry {idx} needs string 'name' and 'file' fields")
            if name in entries:
                raise QuoteMapError(f"Duplicate quote name {name!r}")
            entries[name] = filename

        return cls(entries, image_dir)

    @classmethod
    def load(cls, path: str | Path, image_dir: str | Path | None = None) -> "QuoteBook":
        """Read and parse the quote map at ``path``."""
        path = Path(path)
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise QuoteMapError(f"Could not read quote map {path}: {exc}") from exc

        book = cls.from_json(text, image_dir)
        logger.info("Loaded %d quote(s) from %s", len(book), path)
        return book

    # ---------- Mapping protocol -------------------------------------- #

    def __getitem__(self, key: str) -> str:
        return self._quotes[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._sorted_keys)

    def __len__(self) -> int:
        return len(self._quotes)

    # ---------- queries ----------------------------------------------- #

    def lookup(self, query: str | None) -> str | None:
        """Return the image filename for ``query`` or ``None`` if unknown."""
        return self._quotes.get(normalize(query))

    def suggest(self, query: str | None, limit: int = MAX_CHOICES) -> List[str]:
        """Sorted quote names containing the normalized ``query``."""
        needle = normalize(query)
        matches = [key for key in self._sorted_keys if needle in key]
        return matches[:limit]

    def image_path(self, filename: str) -> Path:
        """
        Resolve ``filename`` inside the image directory.

        :raises QuoteMapError: if no image directory is configured or the name
            escapes it.
        """
        if self.image_dir is None:
            raise QuoteMapError("No quote image directory configured")

        base = self.image_dir.resolve()
        candidate = (base / filename).resolve()
        if candidate.parent != base:
            raise QuoteMapError(f"Quote image {filename!r} is outside the image directory")
        return candidate


_BOOK: QuoteBook | None = None


def get_quote_book(force_reload: bool = False) -> QuoteBook:
    """Return the process-wide quote book, loading it from config on first use."""

    global _BOOK
    if _BOOK is None or force_reload:
        from .config import quotes as quotes_cfg

        _BOOK = QuoteBook.load(quotes_cfg.QUOTE_MAP_FILE, quotes_cfg.QUOTE_IMAGE_DIR)
    return _BOOK


__all__ = ["MAX_CHOICES", "QuoteBook", "normalize", "get_quote_book"]
