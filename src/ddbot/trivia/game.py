"""Pure helpers for running a round of trivia."""

from __future__ import annotations

import html
import random
import re
from typing import List, Optional, Sequence

import discord

from ddbot.colors import Colors

from .client import TriviaCategory, TriviaQuestion

EMOTES = [
    "🍎", "🍓", "🍐", "🍒", "🍇", "🥕", "🍊", "🍉", "🍋", "🍌",
    "🥥", "🥑", "🥦", "🌶️", "🌽", "🥝", "🧄", "🍍", "🥬",
]

_DIFFICULTY_COLORS = {
    "easy": Colors.GREEN,
    "medium": Colors.ORANGE,
    "hard": Colors.RED,
}


def match_category(
    words: Sequence[str],
    categories: Sequence[TriviaCategory],
    rng: Optional[random.Random] = None,
) -> Optional[int]:
    """
    Pick a category id for the user's search ``words``.

    Each word is tried as a whole word first, then as a word prefix. A random
    category is chosen among the matches; an unambiguous match ends the search.
    Later words override earlier ones unless an earlier word was unambiguous.
    """
    rng = rng or random.Random()
    chosen: Optional[int] = None

    for word in words:
        escaped = re.escape(word)
        whole = re.compile(rf"\b{escaped}\b", re.IGNORECASE)
        matches = [c for c in categories if whole.search(c.name)]
        if not matches:
            prefix = re.compile(rf"\b{escaped}", re.IGNORECASE)
            matches = [c for c in categories if prefix.search(c.name)]

        if matches:
            chosen = rng.choice(matches).id
            if len(matches) == 1:
                break

    return chosen


def arrange_answers(question: TriviaQuestion, rng: Optional[random.Random] = None) -> List[str]:
    """True/false answers are sorted so "True" comes first; others are shuffled."""
    rng = rng or random.Random()
    answers = [question.correct_answer, *question.incorrect_answers]
    if len(answers) == 2:
        return sorted(answers, reverse=True)
    rng.shuffle(answers)
    return answers


def pick_emotes(count: int, rng: Optional[random.Random] = None) -> List[str]:
    rng = rng or random.Random()
    return rng.sample(EMOTES, count)


def clean(text: str) -> str:
    """Decode the HTML entities OpenTDB leaves in its text."""
    return html.unescape(text)


def describe(question: TriviaQuestion) -> str:
    difficulty = question.difficulty.capitalize()
    article = "An" if question.difficulty == "easy" else "A"
    return f"{article} {difficulty} one from the category {clean(question.category)}."


def difficulty_color(difficulty: str) -> Optional[discord.Color]:
    return _DIFFICULTY_COLORS.get(difficulty)


def split_columns(names: Sequence[str]) -> tuple[List[str], List[str]]:
    """Sort ``names`` and split them into two halves, the first one longer."""
    ordered = sorted(names)
    half = (len(ordered) + 1) // 2
    return ordered[:half], ordered[half:]


__all__ = [
    "EMOTES",
    "match_category",
    "arrange_answers",
    "pick_emotes",
    "clean",
    "describe",
    "difficulty_color",
    "split_columns",
]
