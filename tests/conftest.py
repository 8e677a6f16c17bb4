from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Iterator

import pytest

TESTS_DIR = Path(__file__).resolve().parent
if str(TESTS_DIR) not in sys.path:
    sys.path.insert(0, str(TESTS_DIR))

# Make src/ importable without an editable install.
ROOT = TESTS_DIR.parent
for extra in (ROOT, ROOT / "src"):
    path_str = str(extra)
    if path_str not in sys.path:
        sys.path.insert(0, path_str)

from fixtures import ScriptedInput, TickingClock, WorkspaceBuilder  # noqa: E402

from quizzer.core.logging import reset_logger  # noqa: E402
from quizzer.engine import QuizEngine, SeededRandomSource  # noqa: E402
from quizzer.seed import ensure_seeded  # noqa: E402
from quizzer.store import SqlRecordStore, open_store  # noqa: E402


@pytest.fixture(autouse=True)
def _isolate_environment(
    tmp_path_factory: pytest.TempPathFactory, monkeypatch: pytest.MonkeyPatch
) -> Iterator[Path]:
    """Keep every test away from the real ~/.quizzer-data and QUIZZER_* env."""

    for key in list(os.environ):
        if key.startswith("QUIZZER_"):
            monkeypatch.delenv(key, raising=False)
    home = tmp_path_factory.mktemp("quizzer-home")
    monkeypatch.setenv("QUIZZER_DATA_HOME", str(home))
    yield home
    reset_logger("quizzer")


@pytest.fixture
def quizzer_home(_isolate_environment: Path) -> Path:
    """The workspace root that QUIZZER_DATA_HOME points at for this test."""

    return _isolate_environment


@pytest.fixture
def store() -> Iterator[SqlRecordStore]:
    """An empty in-memory SQLite record store."""

    record_store = open_store("sqlite://")
    yield record_store
    record_store.close()


@pytest.fixture
def seeded_store(store: SqlRecordStore) -> SqlRecordStore:
    """In-memory store holding the bundled demo quiz sets."""

    ensure_seeded(store)
    return store


@pytest.fixture
def clock() -> TickingClock:
    return TickingClock()


@pytest.fixture
def engine(seeded_store: SqlRecordStore, clock: TickingClock) -> QuizEngine:
    """Engine over the demo data with a fixed seed and ticking clock."""

    return QuizEngine(
        seeded_store,
        random_source=SeededRandomSource(1234),
        clock=clock,
    )


@pytest.fixture
def scripted_input():
    """Factory for input providers that replay fixed lines, then EOF."""

    return ScriptedInput


@pytest.fixture
def workspace(tmp_path: Path) -> WorkspaceBuilder:
    """Provide a helper bound to pytest's per-test tmp directory."""

    return WorkspaceBuilder(tmp_path)
