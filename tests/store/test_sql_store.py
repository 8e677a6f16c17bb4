from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.exc import IntegrityError

from quizzer.models import (
    AnswerOption,
    Question,
    QuizAttempt,
    QuizSet,
    UserProfile,
)
from quizzer.store import (
    RecordNotFound,
    StoreError,
    StoreUnavailable,
    UnknownEntityType,
    default_database_url,
    open_store,
)

T0 = datetime(2024, 5, 1, 9, 30, tzinfo=timezone.utc)


def _quiz_set(slug: str = "sample") -> QuizSet:
    return QuizSet(
        slug=slug,
        title="Sample",
        description="A sample set",
        questions=(
            Question(
                text="2 + 2?",
                options=(
                    AnswerOption("4", is_correct=True),
                    AnswerOption("5"),
                ),
            ),
            Question(
                text="Capital of France?",
                options=(
                    AnswerOption("Lyon"),
                    AnswerOption("Paris", is_correct=True),
                    AnswerOption("Nice"),
                ),
            ),
        ),
    )


def _user(store, name: str = "alice") -> int:
    return store.insert(UserProfile(username=name, created_at=T0))


def test_insert_quiz_set_stores_nested_children(store):
    set_id = store.insert(_quiz_set())

    quiz_set = store.find(QuizSet, id=set_id)
    questions = store.query(Question, quiz_set_id=set_id)

    assert quiz_set.slug == "sample"
    assert quiz_set.description == "A sample set"
    assert quiz_set.questions == ()
    assert [q.text for q in questions] == ["2 + 2?", "Capital of France?"]
    assert [len(q.options) for q in questions] == [2, 3]
    assert all(q.quiz_set_id == set_id for q in questions)
    assert questions[1].options[1].text == "Paris"
    assert questions[1].options[1].is_correct is True
    assert store.count(AnswerOption) == 5


def test_find_returns_none_when_missing(store):
    assert store.find(UserProfile, username="ghost") is None


def test_query_orders_and_limits(store):
    user_id = _user(store)
    set_id = store.insert(_quiz_set())
    for minutes in (5, 1, 3):
        store.insert(
            QuizAttempt(
                user_profile_id=user_id,
                quiz_set_id=set_id,
                total_questions=2,
                started_at=T0 + timedelta(minutes=minutes),
            )
        )

    newest = store.query(QuizAttempt, order_by="-started_at", limit=2)
    default = store.query(QuizAttempt)

    assert [a.started_at.minute for a in newest] == [35, 33]
    assert [a.id for a in default] == sorted(a.id for a in default)


def test_query_filters_on_multiple_criteria(store):
    alice = _user(store, "alice")
    bob = _user(store, "bob")
    set_id = store.insert(_quiz_set())
    for user_id in (alice, bob, alice):
        store.insert(
            QuizAttempt(
                user_profile_id=user_id,
                quiz_set_id=set_id,
                total_questions=1,
                started_at=T0,
            )
        )

    assert store.count(QuizAttempt, user_profile_id=alice) == 2
    assert len(store.query(QuizAttempt, user_profile_id=bob)) == 1
    assert store.count(QuizAttempt, user_profile_id=alice, quiz_set_id=999) == 0


def test_unknown_field_raises_store_error(store):
    with pytest.raises(StoreError, match="nickname"):
        store.find(UserProfile, nickname="x")
    with pytest.raises(StoreError):
        store.query(UserProfile, order_by="-nickname")


def test_unmapped_entity_type_raises(store):
    class Stranger:
        id = None

    with pytest.raises(UnknownEntityType):
        store.count(Stranger)
    with pytest.raises(UnknownEntityType):
        store.insert(Stranger())


def test_save_updates_mutable_attempt(store):
    user_id = _user(store)
    set_id = store.insert(_quiz_set())
    attempt = QuizAttempt(
        user_profile_id=user_id,
        quiz_set_id=set_id,
        total_questions=2,
        started_at=T0,
    )
    attempt.id = store.insert(attempt)

    attempt.correct = 2
    attempt.completed_at = T0 + timedelta(minutes=4)
    store.save(attempt)

    stored = store.find(QuizAttempt, id=attempt.id)
    assert stored.correct == 2
    assert stored.completed_at == T0 + timedelta(minutes=4)


def test_save_requires_inserted_entity(store):
    attempt = QuizAttempt(
        user_profile_id=1, quiz_set_id=1, total_questions=1, started_at=T0
    )
    with pytest.raises(RecordNotFound):
        store.save(attempt)

    attempt.id = 404
    with pytest.raises(RecordNotFound, match="404"):
        store.save(attempt)


def test_timestamps_round_trip_as_utc(store):
    naive = datetime(2024, 5, 1, 9, 30)
    offset = datetime(
        2024, 5, 1, 11, 30, tzinfo=timezone(timedelta(hours=2))
    )
    naive_id = store.insert(UserProfile(username="naive", created_at=naive))
    offset_id = store.insert(UserProfile(username="offset", created_at=offset))

    for user_id in (naive_id, offset_id):
        stored = store.find(UserProfile, id=user_id)
        assert stored.created_at == T0
        assert stored.created_at.tzinfo == timezone.utc


def test_unique_username_violation_propagates(store):
    _user(store, "alice")

    with pytest.raises(IntegrityError):
        _user(store, "alice")
    assert store.count(UserProfile) == 1


def test_foreign_keys_are_enforced(store):
    with pytest.raises(IntegrityError):
        store.insert(Question(text="Orphan?", quiz_set_id=999))


def test_open_store_wraps_connection_failures(tmp_path):
    url = default_database_url(tmp_path / "missing" / "dir")

    with pytest.raises(StoreUnavailable) as excinfo:
        open_store(url)

    assert excinfo.value.__cause__ is not None


def test_open_store_rejects_malformed_url():
    with pytest.raises(StoreUnavailable):
        open_store("definitely not a url")


def test_file_store_persists_between_opens(tmp_path):
    url = default_database_url(tmp_path)
    assert url == f"sqlite:///{tmp_path / 'quiz.db'}"

    first = open_store(url)
    set_id = first.insert(_quiz_set())
    first.close()

    second = open_store(url)
    try:
        assert second.find(QuizSet, slug="sample").id == set_id
        assert second.count(Question, quiz_set_id=set_id) == 2
    finally:
        second.close()
