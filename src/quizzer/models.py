"""Domain entities shared by the quiz engine, the store, and the CLI.

Catalog entities (quiz sets, questions, options) and recorded answers are
immutable snapshots. ``QuizAttempt`` is the only mutable entity: its
``correct`` tally and ``completed_at`` timestamp change during a session.
Children reference their parent by id only; parents own their children as
tuples populated on demand.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

__all__ = [
    "AnswerOption",
    "AttemptAnswer",
    "Question",
    "QuizAttempt",
    "QuizSet",
    "UserProfile",
    "percent",
    "utcnow",
]


def utcnow() -> datetime:
    """Return the current UTC time with timezone info."""

    return datetime.now(timezone.utc)


def percent(correct: int, total: int) -> float:
    """Return ``correct`` as a percentage of ``total`` (0.0 when empty)."""

    if total <= 0:
        return 0.0
    return 100.0 * correct / total


@dataclass(frozen=True)
class UserProfile:
    """A quiz taker identified by a unique, case-sensitive username."""

    username: str
    display_name: Optional[str] = None
    created_at: Optional[datetime] = None
    id: Optional[int] = None


@dataclass(frozen=True)
class AnswerOption:
    """A selectable answer for a question."""

    text: str
    is_correct: bool = False
    question_id: Optional[int] = None
    id: Optional[int] = None


@dataclass(frozen=True)
class Question:
    """A prompt within a quiz set and its answer options."""

    text: str
    options: tuple[AnswerOption, ...] = ()
    quiz_set_id: Optional[int] = None
    id: Optional[int] = None

    def correct_options(self) -> tuple[AnswerOption, ...]:
        return tuple(option for option in self.options if option.is_correct)


@dataclass(frozen=True)
class QuizSet:
    """A named collection of questions addressed by a stable slug."""

    slug: str
    title: str
    description: Optional[str] = None
    questions: tuple[Question, ...] = ()
    id: Optional[int] = None


@dataclass
class QuizAttempt:
    """One user's run through a quiz set."""

    user_profile_id: int
    quiz_set_id: int
    total_questions: int
    started_at: datetime
    correct: int = 0
    completed_at: Optional[datetime] = None
    id: Optional[int] = None

    @property
    def is_complete(self) -> bool:
        return self.completed_at is not None

    @property
    def percent(self) -> float:
        return percent(self.correct, self.total_questions)


@dataclass(frozen=True)
class AttemptAnswer:
    """Snapshot of a graded answer; ``was_correct`` never changes later."""

    quiz_attempt_id: int
    question_id: int
    selected_option_id: int
    was_correct: bool
    id: Optional[int] = None
