"""Shared bootstrap for commands that talk to the quiz database."""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from sqlalchemy.exc import SQLAlchemyError

from quizzer.core.config import TomlConfigError
from quizzer.core.logging import configure_logger
from quizzer.core.workspace import WorkspaceError, WorkspaceLayout
from quizzer.engine import QuizEngine, QuizEngineError, random_source_for
from quizzer.seed import SeedDataError, ensure_seeded
from quizzer.settings import (
    ConfigOverrides,
    LoadResult,
    QuizzerConfig,
    QuizzerConfigError,
    load_config,
)
from quizzer.store import SqlRecordStore, StoreError, open_store

__all__ = [
    "CONFIG_ERRORS",
    "RUNTIME_ERRORS",
    "Runtime",
    "add_common_arguments",
    "load_from_args",
    "open_runtime",
    "positive_int",
    "print_error",
    "run_with_runtime",
]

# Exit code 2: the invocation or its configuration is wrong.
CONFIG_ERRORS = (QuizzerConfigError, WorkspaceError, TomlConfigError)
# Exit code 1: the command was valid but failed while running.
RUNTIME_ERRORS = (StoreError, SeedDataError, QuizEngineError, SQLAlchemyError)


@dataclass
class Runtime:
    """Everything a command needs: config, store, engine, and logger."""

    config: QuizzerConfig
    layout: WorkspaceLayout
    store: SqlRecordStore
    engine: QuizEngine
    logger: logging.Logger
    log_path: Path

    def close(self) -> None:
        self.store.close()


def add_common_arguments(parser: argparse.ArgumentParser) -> None:
    """Register the flags shared by database-backed commands."""

    parser.add_argument(
        "--config",
        type=Path,
        help="Path to a quizzer.toml (defaults to the workspace config dir).",
    )
    parser.add_argument(
        "--workspace",
        type=Path,
        help="Override the workspace root (defaults to QUIZZER_DATA_HOME).",
    )
    parser.add_argument(
        "--database-url",
        help="SQLAlchemy database URL (defaults to <workspace>/data/quiz.db).",
    )
    parser.add_argument(
        "--log-level",
        help="Log level for the JSON log file (e.g. DEBUG, INFO).",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Echo log records to stderr.",
    )


def positive_int(raw: str) -> int:
    """argparse ``type`` accepting integers greater than zero."""

    try:
        value = int(raw)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid int value: '{raw}'") from exc
    if value <= 0:
        raise argparse.ArgumentTypeError("must be a positive integer")
    return value


def load_from_args(
    args: argparse.Namespace,
    *,
    max_questions: Optional[int] = None,
    seed: Optional[int] = None,
) -> LoadResult:
    overrides = ConfigOverrides(
        database_url=getattr(args, "database_url", None),
        max_questions=max_questions,
        seed=seed,
        log_level=getattr(args, "log_level", None),
    )
    return load_config(
        config_path=getattr(args, "config", None),
        overrides=overrides,
        workspace_path=getattr(args, "workspace", None),
    )


def open_runtime(load_result: LoadResult, *, verbose: bool = False) -> Runtime:
    """Configure logging, open the store, seed demo data, build the engine."""

    config = load_result.config
    logger, log_path = configure_logger(
        "quizzer",
        log_dir=load_result.layout.path_for("logs"),
        level=config.log_level,
        verbose=verbose,
    )
    store = open_store(config.database_url)
    logger.debug("Opened quiz database", extra={"database_url": store.url})
    try:
        if config.demo_data:
            ensure_seeded(store)
    except Exception:
        store.close()
        raise
    engine = QuizEngine(
        store,
        random_source=random_source_for(config.seed),
        logger=logger.getChild("engine"),
    )
    return Runtime(
        config=config,
        layout=load_result.layout,
        store=store,
        engine=engine,
        logger=logger,
        log_path=log_path,
    )


def print_error(message: object) -> None:
    sys.stderr.write(f"Error: {message}\n")


def run_with_runtime(
    args: argparse.Namespace,
    body: Callable[[Runtime], int],
    *,
    max_questions: Optional[int] = None,
    seed: Optional[int] = None,
) -> int:
    """Load config, open a runtime, run ``body``, and map errors to exit codes."""

    try:
        load_result = load_from_args(
            args, max_questions=max_questions, seed=seed
        )
    except CONFIG_ERRORS as exc:
        print_error(exc)
        return 2

    try:
        runtime = open_runtime(
            load_result, verbose=bool(getattr(args, "verbose", False))
        )
    except RUNTIME_ERRORS as exc:
        print_error(exc)
        return 1

    try:
        return body(runtime)
    except RUNTIME_ERRORS as exc:
        runtime.logger.error("Command failed", exc_info=True)
        print_error(exc)
        return 1
    finally:
        runtime.close()
