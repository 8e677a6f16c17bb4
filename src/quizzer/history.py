"""Attempt history queries and score averages."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from quizzer.models import QuizAttempt, percent
from quizzer.store.base import RecordStore

__all__ = [
    "MAX_RECENT_ATTEMPTS",
    "AttemptHistory",
    "recent_attempts",
    "summarize_history",
]

MAX_RECENT_ATTEMPTS = 10


@dataclass(frozen=True)
class AttemptHistory:
    """Recent attempts (newest first) and their average score."""

    attempts: tuple[QuizAttempt, ...]

    @property
    def count(self) -> int:
        return len(self.attempts)

    @property
    def average_percent(self) -> float:
        if not self.attempts:
            return 0.0
        total = sum(
            percent(attempt.correct, attempt.total_questions)
            for attempt in self.attempts
        )
        return total / len(self.attempts)


def recent_attempts(
    store: RecordStore,
    user_id: int,
    quiz_set_id: Optional[int] = None,
    *,
    limit: int = MAX_RECENT_ATTEMPTS,
) -> list[QuizAttempt]:
    """Return up to ``limit`` attempts by ``user_id``, newest first."""

    criteria: dict[str, int] = {"user_profile_id": user_id}
    if quiz_set_id is not None:
        criteria["quiz_set_id"] = quiz_set_id
    return store.query(
        QuizAttempt,
        order_by=("-started_at", "-id"),
        limit=limit,
        **criteria,
    )


def summarize_history(attempts: Sequence[QuizAttempt]) -> AttemptHistory:
    return AttemptHistory(tuple(attempts))
