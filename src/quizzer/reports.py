"""CLI entry points for ``quizzer sets`` and ``quizzer history``."""

from __future__ import annotations

import argparse
from typing import Optional, Sequence

from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text

from quizzer.history import recent_attempts, summarize_history
from quizzer.models import Question, QuizSet, UserProfile
from quizzer.play.render import option_labels, render_history, render_quiz_sets
from quizzer.runtime import (
    Runtime,
    add_common_arguments,
    positive_int,
    print_error,
    run_with_runtime,
)


def _build_sets_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="quizzer sets",
        description="List the quiz sets stored in the database.",
    )
    parser.add_argument(
        "--slug",
        help="Show one quiz set with its questions and options.",
    )
    parser.add_argument(
        "--show-answers",
        action="store_true",
        help="Mark the correct option when showing a single set.",
    )
    add_common_arguments(parser)
    return parser


def _build_history_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="quizzer history",
        description="Show a user's most recent attempts and their average.",
    )
    parser.add_argument("--user", required=True, help="Username to report on.")
    parser.add_argument(
        "--slug",
        help="Only include attempts on this quiz set.",
    )
    parser.add_argument(
        "--limit",
        type=positive_int,
        help="Number of attempts to show (defaults to history.recent_limit).",
    )
    add_common_arguments(parser)
    return parser


def sets_main(
    argv: Optional[Sequence[str]] = None,
    *,
    console: Optional[Console] = None,
) -> int:
    parser = _build_sets_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    console = console or Console()

    def _show(runtime: Runtime) -> int:
        if args.slug:
            quiz_set = runtime.engine.get_quiz_set_by_slug(args.slug)
            if quiz_set is None:
                print_error(f"Unknown quiz set '{args.slug}'.")
                return 1
            _render_quiz_set(console, quiz_set, show_answers=args.show_answers)
            return 0

        quiz_sets = runtime.engine.list_quiz_sets()
        if not quiz_sets:
            console.print("No quiz sets available. Run `quizzer seed` first.")
            return 0
        counts = {
            quiz_set.id: runtime.store.count(Question, quiz_set_id=quiz_set.id)
            for quiz_set in quiz_sets
        }
        render_quiz_sets(console, quiz_sets, question_counts=counts)
        return 0

    return run_with_runtime(args, _show)


def history_main(
    argv: Optional[Sequence[str]] = None,
    *,
    console: Optional[Console] = None,
) -> int:
    parser = _build_history_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    console = console or Console()

    def _report(runtime: Runtime) -> int:
        store = runtime.store
        user = store.find(UserProfile, username=args.user.strip())
        if user is None:
            print_error(f"Unknown user '{args.user}'.")
            return 1

        quiz_set_id: Optional[int] = None
        title = f"Last attempts by {user.username}"
        if args.slug:
            quiz_set = store.find(QuizSet, slug=args.slug)
            if quiz_set is None:
                print_error(f"Unknown quiz set '{args.slug}'.")
                return 1
            quiz_set_id = quiz_set.id
            title = f"{title} on {quiz_set.title}"

        limit = args.limit or runtime.config.recent_limit
        history = summarize_history(
            recent_attempts(store, user.id, quiz_set_id, limit=limit)
        )
        titles = None
        if quiz_set_id is None:
            titles = {
                quiz_set.id: quiz_set.title
                for quiz_set in runtime.engine.list_quiz_sets()
            }
        render_history(console, history, title=title, quiz_titles=titles)
        return 0

    return run_with_runtime(args, _report)


def _render_quiz_set(
    console: Console, quiz_set: QuizSet, *, show_answers: bool
) -> None:
    console.print(
        Text(quiz_set.title, style="bold"), Text(f"(slug: {quiz_set.slug})")
    )
    if quiz_set.description:
        console.print(Text(quiz_set.description, style="dim"))
    if not quiz_set.questions:
        console.print("[yellow]This quiz set has no questions.[/]")
        return

    for number, question in enumerate(quiz_set.questions, start=1):
        console.print()
        console.print(Text(f"Q{number}. {question.text}", style="bold"))
        table = Table(show_header=False, box=box.SIMPLE)
        table.add_column("Key", justify="center", style="cyan")
        table.add_column("Choice")
        if show_answers:
            table.add_column("Correct", justify="center")
        for key, option in option_labels(question.options).items():
            row = [key, Text(option.text)]
            if show_answers:
                row.append("*" if option.is_correct else "")
            table.add_row(*row)
        console.print(table)
