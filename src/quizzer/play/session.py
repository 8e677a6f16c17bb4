"""Interactive quiz session driven through a Rich console.

The driver owns all prompting and rendering; grading and persistence go
through :class:`~quizzer.engine.QuizEngine`. Input arrives via an injected
``input_provider`` so sessions can be scripted in tests.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Literal, Optional, Sequence

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from quizzer.engine import NoQuestionsAvailable, QuizEngine
from quizzer.history import (
    MAX_RECENT_ATTEMPTS,
    AttemptHistory,
    recent_attempts,
    summarize_history,
)
from quizzer.models import (
    AnswerOption,
    AttemptAnswer,
    Question,
    QuizAttempt,
    QuizSet,
    UserProfile,
)
from quizzer.store.base import RecordStore

from .render import (
    render_history,
    render_question,
    render_quiz_sets,
    render_score,
)

InputProvider = Callable[[], str]
ExitAction = Literal["quit", "interrupted", "empty"]
AttemptExit = Literal["completed", "interrupted"]

QUIT_COMMAND = "q"
SKIP_COMMAND = "s"


class SessionInterrupted(Exception):
    """Input ended (EOF, Ctrl-C, or exhausted script)."""


@dataclass(frozen=True)
class QuestionOutcome:
    """What happened to one presented question."""

    question: Question
    selected: Optional[AnswerOption] = None
    answer: Optional[AttemptAnswer] = None

    @property
    def skipped(self) -> bool:
        return self.selected is None

    @property
    def was_correct(self) -> bool:
        return self.answer is not None and self.answer.was_correct


@dataclass(frozen=True)
class AttemptOutcome:
    """Result of one attempt taken during a session."""

    quiz_set: QuizSet
    attempt: QuizAttempt
    questions: tuple[QuestionOutcome, ...]
    exit_action: AttemptExit
    history: Optional[AttemptHistory] = None


@dataclass(frozen=True)
class PlaySessionResult:
    """Return value from :func:`run_play_session`."""

    user: Optional[UserProfile]
    attempts: tuple[AttemptOutcome, ...]
    exit_action: ExitAction


def run_play_session(
    engine: QuizEngine,
    store: RecordStore,
    console: Console,
    input_provider: InputProvider,
    *,
    username: Optional[str] = None,
    max_questions: Optional[int] = None,
    recent_limit: int = MAX_RECENT_ATTEMPTS,
) -> PlaySessionResult:
    """Identify the user, then run quizzes until they quit.

    When ``max_questions`` is given the per-quiz limit prompt is skipped.
    """

    prompt = _Prompter(console, input_provider)
    outcomes: list[AttemptOutcome] = []

    try:
        if username is None or not username.strip():
            console.print("\n[bold]=== Quizzer ===[/]\n")
            username = prompt.read_non_empty("Enter your username: ")
        user = engine.get_or_create_user(username.strip())
    except SessionInterrupted:
        console.print("\n[bold yellow]Session interrupted.[/]")
        return PlaySessionResult(None, (), "interrupted")

    while True:
        quiz_sets = engine.list_quiz_sets()
        if not quiz_sets:
            console.print(
                Panel(
                    "No quiz sets available. Run `quizzer seed` first.",
                    title="Quizzer",
                    border_style="yellow",
                )
            )
            return PlaySessionResult(user, tuple(outcomes), "empty")

        console.print()
        render_quiz_sets(console, quiz_sets)
        try:
            quiz_set = _choose_quiz_set(prompt, quiz_sets)
            if quiz_set is None:
                break
            limit = (
                max_questions
                if max_questions is not None
                else _read_limit(prompt)
            )
        except SessionInterrupted:
            console.print("\n[bold yellow]Session interrupted.[/]")
            return PlaySessionResult(user, tuple(outcomes), "interrupted")

        try:
            outcome = run_attempt(
                engine,
                store,
                console,
                input_provider,
                user=user,
                quiz_set=quiz_set,
                max_questions=limit,
                recent_limit=recent_limit,
            )
        except NoQuestionsAvailable:
            console.print(
                f"[yellow]'{escape(quiz_set.title)}' has no questions yet.[/]"
            )
            continue
        outcomes.append(outcome)
        if outcome.exit_action == "interrupted":
            return PlaySessionResult(user, tuple(outcomes), "interrupted")

    console.print("Goodbye!\n")
    return PlaySessionResult(user, tuple(outcomes), "quit")


def run_attempt(
    engine: QuizEngine,
    store: RecordStore,
    console: Console,
    input_provider: InputProvider,
    *,
    user: UserProfile,
    quiz_set: QuizSet,
    max_questions: Optional[int] = None,
    recent_limit: int = MAX_RECENT_ATTEMPTS,
) -> AttemptOutcome:
    """Run one attempt: ask each question once, grade, complete, report.

    Questions come back with unique ids and the loop moves on after a
    question is graded or skipped, so no question is graded twice.
    """

    attempt = engine.start_attempt(user.id, quiz_set.id, max_questions)
    questions = engine.get_randomized_questions(
        quiz_set.id, attempt.total_questions
    )
    console.print(
        f"\nStarting: [bold]{escape(quiz_set.title)}[/]  "
        f"(Questions: {len(questions)})"
    )

    prompt = _Prompter(console, input_provider)
    results: list[QuestionOutcome] = []
    try:
        for number, question in enumerate(questions, start=1):
            labels = render_question(console, question, number, len(questions))
            selected = _read_selection(prompt, labels)
            if selected is None:
                console.print("[yellow]Skipped.[/]")
                results.append(QuestionOutcome(question))
                continue
            answer = engine.grade_and_record(attempt, question, selected)
            results.append(QuestionOutcome(question, selected, answer))
            if answer.was_correct:
                console.print("[bold green]Correct![/]")
            else:
                console.print("[bold red]Incorrect.[/]")
    except SessionInterrupted:
        console.print("\n[bold yellow]Session interrupted.[/]")
        return AttemptOutcome(quiz_set, attempt, tuple(results), "interrupted")

    engine.complete_attempt(attempt)
    console.print()
    render_score(console, attempt)

    history = summarize_history(
        recent_attempts(store, user.id, quiz_set.id, limit=recent_limit)
    )
    console.print()
    render_history(console, history)
    return AttemptOutcome(
        quiz_set, attempt, tuple(results), "completed", history
    )


class _Prompter:
    def __init__(self, console: Console, input_provider: InputProvider):
        self._console = console
        self._input = input_provider

    def read(self, message: str) -> str:
        self._console.print(message, end="", markup=False)
        try:
            raw = self._input()
        except (EOFError, KeyboardInterrupt, StopIteration) as exc:
            raise SessionInterrupted() from exc
        return (raw or "").strip()

    def read_non_empty(self, message: str) -> str:
        value = self.read(message)
        while not value:
            value = self.read("Please enter a value: ")
        return value

    def warn(self, message: str) -> None:
        self._console.print(f"[red]{escape(message)}[/red]")


def _choose_quiz_set(
    prompt: _Prompter, quiz_sets: Sequence[QuizSet]
) -> Optional[QuizSet]:
    while True:
        choice = prompt.read(
            f"Choose a quiz by number (or '{QUIT_COMMAND}' to quit): "
        )
        if choice.lower() == QUIT_COMMAND:
            return None
        if choice.isdecimal() and 1 <= int(choice) <= len(quiz_sets):
            return quiz_sets[int(choice) - 1]
        prompt.warn("Invalid selection.")


def _read_limit(prompt: _Prompter) -> Optional[int]:
    raw = prompt.read("Limit number of questions? (blank for all): ")
    if raw.isdecimal() and int(raw) > 0:
        return int(raw)
    return None


def _read_selection(
    prompt: _Prompter, labels: dict[str, AnswerOption]
) -> Optional[AnswerOption]:
    keys = ",".join(labels)
    while True:
        raw = prompt.read(
            f"Your answer ({keys}) or '{SKIP_COMMAND}' to skip: "
        )
        if not raw:
            continue
        if raw.lower() == SKIP_COMMAND:
            return None
        option = labels.get(raw[0].upper())
        if option is not None:
            return option
        prompt.warn(f"'{raw}' is not a valid choice for this question.")
