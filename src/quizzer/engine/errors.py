"""Exceptions raised by the quiz engine."""

from __future__ import annotations

__all__ = ["NoQuestionsAvailable", "QuizEngineError"]


class QuizEngineError(RuntimeError):
    """Base class for quiz engine failures."""


class NoQuestionsAvailable(QuizEngineError):
    """Raised when an attempt is started on a quiz set without questions."""

    def __init__(self, quiz_set_id: int) -> None:
        super().__init__(f"Quiz set {quiz_set_id} has no questions.")
        self.quiz_set_id = quiz_set_id
