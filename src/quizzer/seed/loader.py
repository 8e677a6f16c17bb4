"""Load quiz sets from TOML and import them into a record store."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import Any, Mapping, Optional, Sequence

from quizzer.core import config as core_config
from quizzer.models import AnswerOption, Question, QuizSet
from quizzer.store.base import RecordStore

__all__ = [
    "DEMO_RESOURCE",
    "ImportReport",
    "SeedDataError",
    "ensure_seeded",
    "import_quiz_sets",
    "load_quiz_sets",
    "parse_quiz_sets",
]

DEMO_RESOURCE = "sets.toml"

logger = logging.getLogger("quizzer.seed")


class SeedDataError(RuntimeError):
    """Raised when quiz set data is malformed or violates authoring rules."""


@dataclass(frozen=True)
class ImportReport:
    """Slugs inserted and skipped (already present) by an import."""

    inserted: tuple[str, ...]
    skipped: tuple[str, ...]


def load_quiz_sets(path: Optional[Path] = None) -> list[QuizSet]:
    """Parse quiz sets from ``path`` or from the packaged demo data."""

    if path is None:
        source = resources.files("quizzer.seed").joinpath(DEMO_RESOURCE)
        label = f"quizzer.seed/{DEMO_RESOURCE}"
    else:
        source = Path(path).expanduser()
        label = str(source)
    try:
        document = core_config.load_toml(source)
    except core_config.TomlConfigError as exc:
        raise SeedDataError(str(exc)) from exc
    return parse_quiz_sets(document, source=label)


def parse_quiz_sets(
    document: Mapping[str, Any], *, source: str = "<memory>"
) -> list[QuizSet]:
    """Build validated quiz sets from a parsed TOML document.

    Every question needs text, at least two options, and exactly one option
    marked ``correct = true``. Slugs must be unique within the document.
    """

    entries = document.get("quiz_sets")
    if not isinstance(entries, list) or not entries:
        raise SeedDataError(f"{source}: expected at least one [[quiz_sets]].")

    quiz_sets: list[QuizSet] = []
    seen: set[str] = set()
    for index, entry in enumerate(entries):
        where = f"{source}: quiz_sets[{index}]"
        quiz_set = _parse_quiz_set(entry, where)
        if quiz_set.slug in seen:
            raise SeedDataError(f"{where}: duplicate slug '{quiz_set.slug}'.")
        seen.add(quiz_set.slug)
        quiz_sets.append(quiz_set)
    return quiz_sets


def import_quiz_sets(
    store: RecordStore, quiz_sets: Sequence[QuizSet]
) -> ImportReport:
    """Insert each quiz set whose slug is not stored yet."""

    inserted: list[str] = []
    skipped: list[str] = []
    for quiz_set in quiz_sets:
        if store.find(QuizSet, slug=quiz_set.slug) is not None:
            skipped.append(quiz_set.slug)
            continue
        store.insert(quiz_set)
        inserted.append(quiz_set.slug)
    logger.info(
        "Imported quiz sets",
        extra={"inserted": inserted, "skipped": skipped},
    )
    return ImportReport(inserted=tuple(inserted), skipped=tuple(skipped))


def ensure_seeded(store: RecordStore) -> ImportReport:
    """Import the demo quiz sets when the store has none."""

    if store.count(QuizSet) > 0:
        return ImportReport(inserted=(), skipped=())
    return import_quiz_sets(store, load_quiz_sets())


def _parse_quiz_set(entry: object, where: str) -> QuizSet:
    if not isinstance(entry, Mapping):
        raise SeedDataError(f"{where}: expected a table.")
    slug = _require_text(entry, "slug", where)
    title = _require_text(entry, "title", where)
    description = entry.get("description")
    if description is not None and not isinstance(description, str):
        raise SeedDataError(f"{where}: description must be a string.")

    raw_questions = entry.get("questions") or []
    if not isinstance(raw_questions, list):
        raise SeedDataError(f"{where}: questions must be an array of tables.")
    questions = tuple(
        _parse_question(raw, f"{where}.questions[{position}]")
        for position, raw in enumerate(raw_questions)
    )
    return QuizSet(
        slug=slug,
        title=title,
        description=description,
        questions=questions,
    )


def _parse_question(entry: object, where: str) -> Question:
    if not isinstance(entry, Mapping):
        raise SeedDataError(f"{where}: expected a table.")
    text = _require_text(entry, "text", where)
    raw_options = entry.get("options")
    if not isinstance(raw_options, list) or len(raw_options) < 2:
        raise SeedDataError(f"{where}: at least two options are required.")

    options: list[AnswerOption] = []
    for position, raw in enumerate(raw_options):
        option_where = f"{where}.options[{position}]"
        if not isinstance(raw, Mapping):
            raise SeedDataError(f"{option_where}: expected an inline table.")
        correct = raw.get("correct", False)
        if not isinstance(correct, bool):
            raise SeedDataError(f"{option_where}: correct must be a boolean.")
        options.append(
            AnswerOption(
                text=_require_text(raw, "text", option_where),
                is_correct=correct,
            )
        )

    question = Question(text=text, options=tuple(options))
    correct_count = len(question.correct_options())
    if correct_count != 1:
        raise SeedDataError(
            f"{where}: exactly one correct option is required, "
            f"found {correct_count}."
        )
    return question


def _require_text(entry: Mapping[str, Any], key: str, where: str) -> str:
    value = entry.get(key)
    if not isinstance(value, str) or not value.strip():
        raise SeedDataError(f"{where}: '{key}' must be a non-empty string.")
    return value.strip()
