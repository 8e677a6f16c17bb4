"""Rich renderers shared by the play and history commands."""

from __future__ import annotations

from typing import Mapping, Optional, Sequence

from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text

from quizzer.history import AttemptHistory
from quizzer.models import AnswerOption, Question, QuizAttempt, QuizSet

FIRST_OPTION_LETTER = "A"


def option_labels(options: Sequence[AnswerOption]) -> dict[str, AnswerOption]:
    """Map ``A``, ``B``, ... to options in presentation order."""

    first = ord(FIRST_OPTION_LETTER)
    return {chr(first + index): option for index, option in enumerate(options)}


def render_quiz_sets(
    console: Console,
    quiz_sets: Sequence[QuizSet],
    *,
    question_counts: Optional[Mapping[int, int]] = None,
) -> None:
    table = Table(title="Available quiz sets", box=box.SIMPLE, expand=False)
    table.add_column("#", justify="right", style="cyan")
    table.add_column("Title", style="bold")
    table.add_column("Slug", style="dim")
    if question_counts is not None:
        table.add_column("Questions", justify="right")
    for index, quiz_set in enumerate(quiz_sets, start=1):
        row = [f"[{index}]", Text(quiz_set.title), Text(quiz_set.slug)]
        if question_counts is not None:
            row.append(str(question_counts.get(quiz_set.id, 0)))
        table.add_row(*row)
    console.print(table)


def render_question(
    console: Console, question: Question, number: int, total: int
) -> dict[str, AnswerOption]:
    labels = option_labels(question.options)
    console.print()
    console.rule(
        Text.assemble((f"Q{number}", "bold cyan"), (f" / {total}", "dim"))
    )
    console.print(Text(question.text, style="bold"))

    table = Table(show_header=False, box=box.SIMPLE, expand=True)
    table.add_column("Key", justify="center", style="cyan")
    table.add_column("Choice")
    for key, option in labels.items():
        table.add_row(key, Text(option.text))
    console.print(table)
    return labels


def render_score(console: Console, attempt: QuizAttempt) -> None:
    console.print(
        f"[bold magenta]Finished![/] Score: {attempt.correct}/"
        f"{attempt.total_questions}  ({attempt.percent:.1f}%)"
    )


def render_history(
    console: Console,
    history: AttemptHistory,
    *,
    title: str = "Last attempts on this quiz",
    quiz_titles: Optional[Mapping[int, str]] = None,
) -> None:
    if not history.attempts:
        console.print("[dim]No attempts recorded yet.[/]")
        return

    table = Table(title=Text(title), box=box.SIMPLE, expand=False)
    table.add_column("Started (UTC)")
    if quiz_titles is not None:
        table.add_column("Quiz")
    table.add_column("Score", justify="right")
    table.add_column("Percent", justify="right")
    table.add_column("Status", justify="center")
    for attempt in history.attempts:
        row = [attempt.started_at.strftime("%Y-%m-%d %H:%M:%SZ")]
        if quiz_titles is not None:
            row.append(Text(quiz_titles.get(attempt.quiz_set_id, "?")))
        row.extend(
            [
                f"{attempt.correct}/{attempt.total_questions}",
                f"{attempt.percent:.1f}%",
                "done" if attempt.is_complete else "open",
            ]
        )
        table.add_row(*row)
    console.print(table)
    console.print(
        f"Average over last {history.count}: {history.average_percent:.1f}%"
    )
