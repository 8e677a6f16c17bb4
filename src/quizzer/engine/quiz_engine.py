"""Quiz engine: user lookup, attempt lifecycle, randomization, and grading.

The engine is a stateless service over a :class:`~quizzer.store.RecordStore`.
Every mutating operation persists immediately. Store failures propagate to
the caller unchanged; the engine neither retries nor cleans up partial state.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from typing import Callable, Optional, Sequence

from quizzer.models import (
    AnswerOption,
    AttemptAnswer,
    Question,
    QuizAttempt,
    QuizSet,
    UserProfile,
    utcnow,
)
from quizzer.store.base import RecordStore

from .errors import NoQuestionsAvailable
from .randomization import (
    DefaultRandomSource,
    RandomSource,
    shuffle_in_place,
    shuffled,
)

__all__ = ["QuizEngine"]

Clock = Callable[[], datetime]


class QuizEngine:
    """Runs quiz attempts against a record store.

    ``random_source`` drives question and option shuffling. Pass a
    :class:`~quizzer.engine.randomization.SeededRandomSource` for
    reproducible order; when omitted the engine creates its own
    entropy-seeded source.
    """

    def __init__(
        self,
        store: RecordStore,
        *,
        random_source: Optional[RandomSource] = None,
        clock: Clock = utcnow,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._store = store
        self._random = (
            random_source if random_source is not None else DefaultRandomSource()
        )
        self._clock = clock
        self._logger = logger or logging.getLogger("quizzer.engine")

    @property
    def random_source(self) -> RandomSource:
        return self._random

    def get_or_create_user(
        self, username: str, display_name: Optional[str] = None
    ) -> UserProfile:
        """Return the user named ``username``, creating it when missing.

        An existing user is returned as stored; a differing
        ``display_name`` is ignored.
        """

        user = self._store.find(UserProfile, username=username)
        if user is not None:
            return user
        user = UserProfile(
            username=username,
            display_name=display_name,
            created_at=self._clock(),
        )
        user = replace(user, id=self._store.insert(user))
        self._logger.info(
            "Created user profile",
            extra={"user_id": user.id, "username": username},
        )
        return user

    def list_quiz_sets(self) -> list[QuizSet]:
        """Return every quiz set (metadata only) in stable id order."""

        return self._store.query(QuizSet, order_by="id")

    def get_quiz_set_by_slug(self, slug: str) -> Optional[QuizSet]:
        """Return the quiz set for ``slug`` with questions and options."""

        quiz_set = self._store.find(QuizSet, slug=slug)
        if quiz_set is None:
            return None
        questions = self._store.query(
            Question, quiz_set_id=quiz_set.id, order_by="id"
        )
        return replace(quiz_set, questions=tuple(questions))

    def start_attempt(
        self,
        user_id: int,
        quiz_set_id: int,
        max_questions: Optional[int] = None,
    ) -> QuizAttempt:
        """Persist a new attempt sized to ``min(max_questions, available)``.

        Raises :class:`NoQuestionsAvailable` when the quiz set is empty.
        """

        _require_positive("max_questions", max_questions)
        available = self._store.count(Question, quiz_set_id=quiz_set_id)
        if available == 0:
            raise NoQuestionsAvailable(quiz_set_id)
        total = (
            min(max_questions, available)
            if max_questions is not None
            else available
        )
        attempt = QuizAttempt(
            user_profile_id=user_id,
            quiz_set_id=quiz_set_id,
            total_questions=total,
            started_at=self._clock(),
        )
        attempt.id = self._store.insert(attempt)
        self._logger.info(
            "Started quiz attempt",
            extra={
                "attempt_id": attempt.id,
                "user_id": user_id,
                "quiz_set_id": quiz_set_id,
                "total_questions": total,
            },
        )
        return attempt

    def get_randomized_questions(
        self, quiz_set_id: int, limit: Optional[int] = None
    ) -> list[Question]:
        """Return the quiz set's questions in shuffled order.

        Question order is shuffled first and then truncated to ``limit``;
        each remaining question's options are shuffled independently. The
        stored order is left untouched.
        """

        _require_positive("limit", limit)
        questions: list[Question] = self._store.query(
            Question, quiz_set_id=quiz_set_id, order_by="id"
        )
        shuffle_in_place(questions, self._random)
        if limit is not None:
            questions = questions[:limit]
        return [
            replace(question, options=self._shuffle_options(question.options))
            for question in questions
        ]

    def grade_and_record(
        self,
        attempt: QuizAttempt,
        question: Question,
        selected_option: AnswerOption,
    ) -> AttemptAnswer:
        """Grade ``selected_option`` and record the answer on ``attempt``.

        The answer is persisted first; when correct the attempt's tally is
        incremented and saved. Grading the same question twice is not
        deduplicated here.
        """

        was_correct = bool(selected_option.is_correct)
        answer = AttemptAnswer(
            quiz_attempt_id=attempt.id,
            question_id=question.id,
            selected_option_id=selected_option.id,
            was_correct=was_correct,
        )
        answer = replace(answer, id=self._store.insert(answer))
        if was_correct:
            attempt.correct += 1
            self._store.save(attempt)
        self._logger.info(
            "Graded answer",
            extra={
                "attempt_id": attempt.id,
                "question_id": question.id,
                "selected_option_id": selected_option.id,
                "was_correct": was_correct,
                "correct": attempt.correct,
            },
        )
        return answer

    def complete_attempt(self, attempt: QuizAttempt) -> None:
        """Stamp ``attempt`` as completed now and persist it."""

        attempt.completed_at = self._clock()
        self._store.save(attempt)
        self._logger.info(
            "Completed quiz attempt",
            extra={
                "attempt_id": attempt.id,
                "correct": attempt.correct,
                "total_questions": attempt.total_questions,
            },
        )

    def _shuffle_options(
        self, options: Sequence[AnswerOption]
    ) -> tuple[AnswerOption, ...]:
        return tuple(shuffled(options, self._random))


def _require_positive(name: str, value: Optional[int]) -> None:
    if value is not None and value <= 0:
        raise ValueError(f"{name} must be a positive integer, got {value}.")
