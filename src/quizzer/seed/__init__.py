"""Demo data and quiz-set import helpers."""

from __future__ import annotations

from .loader import (
    DEMO_RESOURCE,
    ImportReport,
    SeedDataError,
    ensure_seeded,
    import_quiz_sets,
    load_quiz_sets,
    parse_quiz_sets,
)

__all__ = [
    "DEMO_RESOURCE",
    "ImportReport",
    "SeedDataError",
    "ensure_seeded",
    "import_quiz_sets",
    "load_quiz_sets",
    "parse_quiz_sets",
]
