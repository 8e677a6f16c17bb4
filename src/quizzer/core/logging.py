"""Logging setup for quizzer commands.

Records go to a rotating JSON-lines file inside the workspace ``logs``
directory. Verbose runs additionally echo records to stderr.
"""

from __future__ import annotations

import json
import logging
import sys
import tempfile
from datetime import date, datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Optional

__all__ = [
    "DEFAULT_LOGGER",
    "JsonLogFormatter",
    "configure_logger",
    "reset_logger",
]

DEFAULT_LOGGER = "quizzer"

_FILE_MARKER = "_quizzer_file"
_CONSOLE_MARKER = "_quizzer_console"
_STANDARD_ATTRS = frozenset(
    logging.LogRecord("", logging.INFO, "", 0, "", None, None).__dict__
) | {"message", "asctime", "taskName"}


class JsonLogFormatter(logging.Formatter):
    """Render each record as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        extras = {
            key: _jsonable(value)
            for key, value in record.__dict__.items()
            if key not in _STANDARD_ATTRS
        }
        if extras:
            payload["extra"] = extras
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        if record.stack_info:
            payload["stack"] = record.stack_info
        return json.dumps(payload, ensure_ascii=True)


def configure_logger(
    name: str = DEFAULT_LOGGER,
    *,
    log_dir: Path,
    level: str = "INFO",
    verbose: bool = False,
    filename: Optional[str] = None,
    max_bytes: int = 2 * 1024 * 1024,
    backup_count: int = 3,
) -> tuple[logging.Logger, Path]:
    """Attach the JSON file handler (and optional console) to ``name``.

    Calling this repeatedly reuses the existing file handler, so command
    entry points can configure logging on every invocation.
    """

    logger = logging.getLogger(name)
    logger.setLevel(logging.DEBUG)
    logger.propagate = False

    file_level = logging.DEBUG if verbose else _level_from_name(level)
    log_name = filename or f"{name.rsplit('.', 1)[-1]}.log"
    target = Path(log_dir) / log_name
    handler = _file_handler(logger)
    if handler is not None and Path(handler.baseFilename) != target.absolute():
        logger.removeHandler(handler)
        handler.close()
        handler = None
    if handler is None:
        handler = _open_file_handler(
            target,
            max_bytes=max_bytes,
            backup_count=backup_count,
        )
        logger.addHandler(handler)
    handler.setLevel(file_level)

    console = _console_handler(logger)
    if verbose and console is None:
        console = logging.StreamHandler(stream=sys.stderr)
        console.setFormatter(logging.Formatter("%(levelname)s %(message)s"))
        setattr(console, _CONSOLE_MARKER, True)
        logger.addHandler(console)
    elif not verbose and console is not None:
        logger.removeHandler(console)
        console.close()
    if console is not None and verbose:
        console.setLevel(logging.DEBUG)

    return logger, Path(handler.baseFilename)


def reset_logger(name: str = DEFAULT_LOGGER) -> None:
    """Undo :func:`configure_logger`: close its handlers, restore propagation."""

    logger = logging.getLogger(name)
    for handler in list(logger.handlers):
        if getattr(handler, _FILE_MARKER, False) or getattr(
            handler, _CONSOLE_MARKER, False
        ):
            logger.removeHandler(handler)
            handler.close()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


def _level_from_name(level: str) -> int:
    numeric = logging.getLevelName(level.strip().upper())
    return numeric if isinstance(numeric, int) else logging.INFO


def _file_handler(logger: logging.Logger) -> Optional[RotatingFileHandler]:
    for handler in logger.handlers:
        if getattr(handler, _FILE_MARKER, False):
            return handler  # type: ignore[return-value]
    return None


def _console_handler(logger: logging.Logger) -> Optional[logging.Handler]:
    for handler in logger.handlers:
        if getattr(handler, _CONSOLE_MARKER, False):
            return handler
    return None


def _open_file_handler(
    path: Path, *, max_bytes: int, backup_count: int
) -> RotatingFileHandler:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        handler = RotatingFileHandler(
            path,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
    except PermissionError:
        fallback = Path(tempfile.gettempdir()) / "quizzer-logs" / path.name
        fallback.parent.mkdir(parents=True, exist_ok=True)
        handler = RotatingFileHandler(
            fallback,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
    try:
        Path(handler.baseFilename).chmod(0o600)
    except PermissionError:  # pragma: no cover - depends on filesystem
        pass
    handler.setFormatter(JsonLogFormatter())
    setattr(handler, _FILE_MARKER, True)
    return handler


def _jsonable(value: Any) -> Any:
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Path):
        return str(value)
    if isinstance(value, dict):
        return {str(key): _jsonable(item) for key, item in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [_jsonable(item) for item in value]
    return repr(value)
