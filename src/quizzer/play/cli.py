"""CLI entry point for ``quizzer play``."""

from __future__ import annotations

import argparse
from typing import Optional, Sequence

from rich.console import Console

from quizzer.runtime import (
    Runtime,
    add_common_arguments,
    positive_int,
    run_with_runtime,
)

from .session import InputProvider, run_play_session


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="quizzer play",
        description="Take multiple-choice quizzes in the terminal.",
    )
    parser.add_argument(
        "--user",
        help="Username to play as (prompted for when omitted).",
    )
    parser.add_argument(
        "--limit",
        type=positive_int,
        help=(
            "Maximum questions per attempt. Skips the per-quiz limit prompt "
            "(overrides session.max_questions)."
        ),
    )
    parser.add_argument(
        "--seed",
        type=int,
        help="Shuffle seed for a reproducible question and option order.",
    )
    add_common_arguments(parser)
    return parser


def main(
    argv: Optional[Sequence[str]] = None,
    *,
    console: Optional[Console] = None,
    input_provider: Optional[InputProvider] = None,
) -> int:
    parser = _build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    console = console or Console()
    read_line = input_provider or input

    def _play(runtime: Runtime) -> int:
        result = run_play_session(
            runtime.engine,
            runtime.store,
            console,
            read_line,
            username=args.user,
            max_questions=runtime.config.max_questions,
            recent_limit=runtime.config.recent_limit,
        )
        runtime.logger.info(
            "Play session ended",
            extra={
                "exit_action": result.exit_action,
                "attempts": len(result.attempts),
            },
        )
        return 1 if result.exit_action == "empty" else 0

    return run_with_runtime(args, _play, max_questions=args.limit, seed=args.seed)


if __name__ == "__main__":  # pragma: no cover - module CLI guard
    raise SystemExit(main())
