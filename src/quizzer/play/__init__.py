"""Interactive Rich quiz session."""

from __future__ import annotations

from .render import (
    option_labels,
    render_history,
    render_question,
    render_quiz_sets,
    render_score,
)
from .session import (
    QUIT_COMMAND,
    SKIP_COMMAND,
    AttemptOutcome,
    InputProvider,
    PlaySessionResult,
    QuestionOutcome,
    run_attempt,
    run_play_session,
)

__all__ = [
    "QUIT_COMMAND",
    "SKIP_COMMAND",
    "AttemptOutcome",
    "InputProvider",
    "PlaySessionResult",
    "QuestionOutcome",
    "option_labels",
    "render_history",
    "render_question",
    "render_quiz_sets",
    "render_score",
    "run_attempt",
    "run_play_session",
]
