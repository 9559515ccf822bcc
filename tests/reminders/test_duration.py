from datetime import timedelta

import pytest

from ddbot.errors import DurationError
from ddbot.reminders.duration import format_duration, parse_duration


@pytest.mark.parametrize(
    "text, expected",
    [
        ("90s", timedelta(seconds=90)),
        ("10m", timedelta(minutes=10)),
        ("1h30m", timedelta(hours=1, minutes=30)),
        ("2d", timedelta(days=2)),
        ("1w 2d", timedelta(days=9)),
        ("3 hours, 15 minutes", timedelta(hours=3, minutes=15)),
        ("1H", timedelta(hours=1)),
    ],
)
def test_parse_duration_accepts_common_forms(text, expected):
    assert parse_duration(text) == expected


@pytest.mark.parametrize(
    "text",
    ["", "   ", "soon", "10", "1.5h", "10x", "1h 2h", "0m", "1h then"],
)
def test_parse_duration_rejects_garbage(text):
    with pytest.raises(DurationError):
        parse_duration(text)


@pytest.mark.parametrize(
    "delta, expected",
    [
        (timedelta(seconds=45), "45s"),
        (timedelta(minutes=5, seconds=30), "5m"),
        (timedelta(days=1, hours=2, minutes=3), "1d 2h 3m"),
        (timedelta(hours=4), "4h"),
    ],
)
def test_format_duration(delta, expected):
    assert format_duration(delta) == expected
