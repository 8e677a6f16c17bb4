from __future__ import annotations

import pytest

from quizzer.models import AnswerOption, Question, QuizSet
from quizzer.seed import (
    SeedDataError,
    ensure_seeded,
    import_quiz_sets,
    load_quiz_sets,
    parse_quiz_sets,
)

EXTRA_SETS = """
[[quiz_sets]]
slug = "python-basics"
title = "Python Basics"

  [[quiz_sets.questions]]
  text = "Which keyword defines a function?"
  options = [
    { text = "def", correct = true },
    { text = "func" },
  ]
"""


def _document(**question):
    base = {"text": "Q?", "options": [{"text": "a", "correct": True}, {"text": "b"}]}
    base.update(question)
    return {"quiz_sets": [{"slug": "s", "title": "S", "questions": [base]}]}


def test_demo_sets_match_bundled_content():
    sets = load_quiz_sets()

    assert [s.slug for s in sets] == ["csharp-basics", "linux-bash"]
    csharp, bash = sets
    assert csharp.title == "C# Basics"
    assert len(csharp.questions) == 3
    assert all(len(q.options) == 4 for q in csharp.questions)
    assert len(bash.questions) == 2
    for quiz_set in sets:
        for question in quiz_set.questions:
            assert len(question.correct_options()) == 1


def test_load_quiz_sets_from_file(workspace):
    path = workspace.write("extra.toml", EXTRA_SETS)

    (quiz_set,) = load_quiz_sets(path)

    assert quiz_set.slug == "python-basics"
    assert quiz_set.description is None
    assert quiz_set.questions[0].options == (
        AnswerOption("def", is_correct=True),
        AnswerOption("func"),
    )


def test_load_quiz_sets_reports_missing_file(tmp_path):
    with pytest.raises(SeedDataError, match="not found"):
        load_quiz_sets(tmp_path / "missing.toml")


def test_load_quiz_sets_reports_invalid_toml(workspace):
    path = workspace.write("broken.toml", "[[quiz_sets]\nslug = ")

    with pytest.raises(SeedDataError, match="Invalid TOML"):
        load_quiz_sets(path)


@pytest.mark.parametrize(
    "document, message",
    [
        ({}, "at least one"),
        ({"quiz_sets": ["nope"]}, "expected a table"),
        ({"quiz_sets": [{"slug": "", "title": "T"}]}, "'slug'"),
        ({"quiz_sets": [{"slug": "s"}]}, "'title'"),
        (
            {"quiz_sets": [{"slug": "s", "title": "T", "description": 3}]},
            "description",
        ),
        (
            {"quiz_sets": [{"slug": "s", "title": "T", "questions": "x"}]},
            "array of tables",
        ),
        (
            {
                "quiz_sets": [
                    {"slug": "s", "title": "A"},
                    {"slug": "s", "title": "B"},
                ]
            },
            "duplicate slug",
        ),
    ],
)
def test_parse_rejects_malformed_sets(document, message):
    with pytest.raises(SeedDataError, match=message):
        parse_quiz_sets(document)


@pytest.mark.parametrize(
    "question, message",
    [
        ({"text": " "}, "'text'"),
        ({"options": [{"text": "only", "correct": True}]}, "at least two"),
        ({"options": [{"text": "a"}, {"text": "b"}]}, "found 0"),
        (
            {"options": [{"text": "a", "correct": True}, {"text": "b", "correct": True}]},
            "found 2",
        ),
        ({"options": [{"text": "a", "correct": "yes"}, {"text": "b"}]}, "boolean"),
        ({"options": ["a", "b"]}, "inline table"),
    ],
)
def test_parse_enforces_single_correct_option(question, message):
    with pytest.raises(SeedDataError, match=message):
        parse_quiz_sets(_document(**question))


def test_parse_allows_sets_without_questions():
    (quiz_set,) = parse_quiz_sets({"quiz_sets": [{"slug": "s", "title": "T"}]})

    assert quiz_set.questions == ()


def test_import_skips_existing_slugs(store, workspace):
    first = import_quiz_sets(store, load_quiz_sets())
    path = workspace.write("extra.toml", EXTRA_SETS)
    second = import_quiz_sets(store, load_quiz_sets() + load_quiz_sets(path))

    assert first.inserted == ("csharp-basics", "linux-bash")
    assert first.skipped == ()
    assert second.inserted == ("python-basics",)
    assert second.skipped == ("csharp-basics", "linux-bash")
    assert store.count(QuizSet) == 3


def test_ensure_seeded_only_fills_empty_store(store):
    first = ensure_seeded(store)
    second = ensure_seeded(store)

    assert first.inserted == ("csharp-basics", "linux-bash")
    assert second.inserted == () and second.skipped == ()
    assert store.count(QuizSet) == 2
    assert store.count(Question) == 5


def test_ensure_seeded_leaves_custom_data_alone(store):
    store.insert(QuizSet(slug="mine", title="Mine"))

    report = ensure_seeded(store)

    assert report.inserted == ()
    assert [s.slug for s in store.query(QuizSet)] == ["mine"]
