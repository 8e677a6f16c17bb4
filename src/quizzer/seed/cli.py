"""CLI entry point for ``quizzer seed``."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Optional, Sequence

from quizzer.runtime import Runtime, add_common_arguments, run_with_runtime

from .loader import import_quiz_sets, load_quiz_sets


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="quizzer seed",
        description=(
            "Import quiz sets from a TOML file (defaults to the bundled demo "
            "sets). Sets whose slug already exists are skipped."
        ),
    )
    parser.add_argument(
        "file",
        nargs="?",
        type=Path,
        help="TOML file with [[quiz_sets]] entries.",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress informational output on success.",
    )
    add_common_arguments(parser)
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    def _import(runtime: Runtime) -> int:
        quiz_sets = load_quiz_sets(args.file)
        report = import_quiz_sets(runtime.store, quiz_sets)
        if args.quiet:
            return 0
        lines = [
            f"Imported {len(report.inserted)} quiz set(s), "
            f"skipped {len(report.skipped)} already present."
        ]
        lines.extend(f"  + {slug}" for slug in report.inserted)
        lines.extend(f"  = {slug}" for slug in report.skipped)
        sys.stdout.write("\n".join(lines) + "\n")
        return 0

    return run_with_runtime(args, _import)


if __name__ == "__main__":  # pragma: no cover - module CLI guard
    raise SystemExit(main())
