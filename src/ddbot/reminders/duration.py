"""
Human duration parsing for reminders.

Accepts compact and spelled-out forms, optionally separated by spaces or
commas::

    90s   10m   1h30m   2d   1w 2d   3 hours, 15 minutes

The whole string has to be consumed; partial matches are rejected.
"""

from __future__ import annotations

import re
from datetime import timedelta

from ddbot.errors import DurationError

_UNIT_SECONDS = {
    "w": 7 * 24 * 3600,
    "d": 24 * 3600,
    "h": 3600,
    "m": 60,
    "s": 1,
}

_ALIASES = {
    "w": "w", "wk": "w", "wks": "w", "week": "w", "weeks": "w",
    "d": "d", "day": "d", "days": "d",
    "h": "h", "hr": "h", "hrs": "h", "hour": "h", "hours": "h",
    "m": "m", "min": "m", "mins": "m", "minute": "m", "minutes": "m",
    "s": "s", "sec": "s", "secs": "s", "second": "s", "seconds": "s",
}

_TOKEN_RE = re.compile(r"\s*(\d+)\s*([a-z]+)\s*,?", re.IGNORECASE)


def parse_duration(text: str) -> timedelta:
    """
    Parse ``text`` into a :class:`~datetime.timedelta`.

    :raises DurationError: on empty input, unknown units, or leftover text.
    """
    raw = (text or "").strip()
    if not raw:
        raise DurationError("Duration is empty. Try something like `1h30m`.")

    total = 0
    pos = 0
    seen: set[str] = set()
    while pos < len(raw):
        match = _TOKEN_RE.match(raw, pos)
        if not match:
            raise DurationError(f"Could not understand `{raw[pos:].strip()}` in `{raw}`.")

        unit = _ALIASES.get(match.group(2).lower())
        if unit is None:
            raise DurationError(f"Unknown time unit `{match.group(2)}`.")
        if unit in seen:
            raise DurationError(f"Time unit `{match.group(2)}` appears more than once.")
        seen.add(unit)

        total += int(match.group(1)) * _UNIT_SECONDS[unit]
        pos = match.end()

    if total <= 0:
        raise DurationError("Duration must be longer than zero.")
    return timedelta(seconds=total)


def format_duration(delta: timedelta) -> str:
    """Render ``delta`` as ``1d 2h 3m``; seconds only show below one minute."""
    seconds = int(delta.total_seconds())
    if seconds < 60:
        return f"{max(seconds, 0)}s"

    days, rem = divmod(seconds, 24 * 3600)
    hours, rem = divmod(rem, 3600)
    minutes = rem // 60

    parts = []
    if days:
        parts.append(f"{days}d")
    if hours:
        parts.append(f"{hours}h")
    if minutes:
        parts.append(f"{minutes}m")
    return " ".join(parts)


__all__ = ["parse_duration", "format_duration"]
