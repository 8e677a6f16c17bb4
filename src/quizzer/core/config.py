"""TOML helpers shared by ``quizzer.toml`` settings and quiz-set files."""

from __future__ import annotations

import tomllib
from importlib.resources.abc import Traversable
from pathlib import Path
from typing import Any, Mapping, MutableMapping, Union

__all__ = [
    "TomlConfigError",
    "load_toml",
    "merge_defaults",
    "write_toml_template",
]


class TomlConfigError(RuntimeError):
    """A TOML document could not be read, parsed, or merged."""


def load_toml(source: Union[Path, Traversable]) -> Mapping[str, Any]:
    """Parse ``source``, which may be a path or a packaged resource.

    Callers wrap :class:`TomlConfigError` in their own error type
    (``QuizzerConfigError`` for settings, ``SeedDataError`` for quiz sets).
    """

    try:
        with source.open("rb") as handle:
            return tomllib.load(handle)
    except FileNotFoundError as exc:
        raise TomlConfigError(f"TOML file not found: {source}") from exc
    except tomllib.TOMLDecodeError as exc:
        raise TomlConfigError(f"Invalid TOML in {source}: {exc}") from exc


def merge_defaults(
    base: MutableMapping[str, Any],
    override: Mapping[str, Any],
    *,
    path: str = "",
) -> None:
    """Overlay ``override`` onto ``base`` in place.

    Only keys already present in ``base`` are accepted, and tables must stay
    tables, so typos in ``quizzer.toml`` fail loudly.
    """

    for key, value in override.items():
        dotted = path + key
        if key not in base:
            raise TomlConfigError(f"Unknown setting '{dotted}'.")
        current = base[key]
        if not isinstance(current, MutableMapping):
            base[key] = value
        elif isinstance(value, Mapping):
            merge_defaults(current, value, path=f"{dotted}.")
        else:
            raise TomlConfigError(
                f"Setting '{dotted}' must be a table, "
                f"not {type(value).__name__}."
            )


def write_toml_template(
    path: Path,
    *,
    template: str,
    overwrite: bool = False,
    mode: int = 0o600,
) -> Path:
    """Write ``template`` to ``path``; existing files need ``overwrite``."""

    if path.exists() and not overwrite:
        raise TomlConfigError(
            f"{path} already exists; pass --force to replace it."
        )
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(template, encoding="utf-8")
    try:
        path.chmod(mode)
    except PermissionError:  # pragma: no cover - depends on filesystem
        pass
    return path
