"""Quiz-session engine and randomization policy."""

from __future__ import annotations

from .errors import NoQuestionsAvailable, QuizEngineError
from .quiz_engine import QuizEngine
from .randomization import (
    DefaultRandomSource,
    RandomSource,
    SeededRandomSource,
    random_source_for,
    shuffle_in_place,
    shuffled,
)

__all__ = [
    "DefaultRandomSource",
    "NoQuestionsAvailable",
    "QuizEngine",
    "QuizEngineError",
    "RandomSource",
    "SeededRandomSource",
    "random_source_for",
    "shuffle_in_place",
    "shuffled",
]
