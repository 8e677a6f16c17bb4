"""CLI entry point for ``quizzer init``."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Mapping, Optional, Sequence

from quizzer.core import workspace as workspace_mod
from quizzer.runtime import print_error
from quizzer.settings import (
    CONFIG_FILENAME,
    QuizzerConfigError,
    write_config_template,
)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="quizzer init",
        description=(
            "Bootstrap the quizzer workspace, ensure its subdirectories "
            "exist, and write the default quizzer.toml."
        ),
    )
    parser.add_argument(
        "--path",
        type=Path,
        help=(
            "Override the workspace root (defaults to QUIZZER_DATA_HOME "
            "or ~/.quizzer-data)."
        ),
    )
    parser.add_argument(
        "--force",
        action="store_true",
        help="Overwrite an existing quizzer.toml with the default template.",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress informational output on success.",
    )
    return parser


def _format_created(created: Mapping[str, bool], key: str) -> str:
    return "created" if created.get(key, False) else "exists"


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    try:
        layout = workspace_mod.ensure_workspace(path=args.path)
    except workspace_mod.WorkspaceError as exc:
        print_error(exc)
        return 2

    config_path = layout.path_for("config") / CONFIG_FILENAME
    existed = config_path.exists()
    if args.force or not existed:
        try:
            write_config_template(config_path, overwrite=args.force)
        except QuizzerConfigError as exc:
            print_error(exc)
            return 2
        config_status = "overwritten" if existed else "created"
    else:
        config_status = "exists"

    if args.quiet:
        return 0

    created = layout.created
    home_status = _format_created(created, "home")
    lines = [f"Workspace ready at {layout.home} ({home_status})"]

    if layout.directories:
        lines.append("Subdirectories:")
        width = max(len(name) for name in layout.directories)
        for name, directory in layout.items():
            status = _format_created(created, name)
            lines.append(f"  {name.ljust(width)}  {directory} ({status})")
    lines.append(f"Config: {config_path} ({config_status})")

    sys.stdout.write("\n".join(lines) + "\n")
    return 0


if __name__ == "__main__":  # pragma: no cover - module CLI guard
    raise SystemExit(main())
