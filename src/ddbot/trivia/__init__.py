"""Trivia questions from the Open Trivia Database."""

from .client import OpenTDBClient, TriviaCategory, TriviaQuestion

__all__ = ["OpenTDBClient", "TriviaCategory", "TriviaQuestion"]
