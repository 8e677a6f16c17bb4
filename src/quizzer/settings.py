"""Configuration loader for quizzer commands.

Precedence is CLI overrides > ``QUIZZER_*`` environment variables > the TOML
config file > built-in defaults.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import Any, Mapping, MutableMapping, Optional

from quizzer.core import config as core_config
from quizzer.core import workspace as workspace_mod
from quizzer.history import MAX_RECENT_ATTEMPTS
from quizzer.store import default_database_url

__all__ = [
    "CONFIG_ENV",
    "CONFIG_FILENAME",
    "ConfigOverrides",
    "LoadResult",
    "QuizzerConfig",
    "QuizzerConfigError",
    "load_config",
    "read_config_template",
    "write_config_template",
]

CONFIG_FILENAME = "quizzer.toml"
CONFIG_ENV = "QUIZZER_CONFIG"
ENV_PREFIX = "QUIZZER_"


class QuizzerConfigError(RuntimeError):
    """Raised when configuration parsing or validation fails."""


@dataclass(frozen=True)
class QuizzerConfig:
    """Fully resolved settings for a quizzer run."""

    database_url: str
    max_questions: Optional[int]
    seed: Optional[int]
    recent_limit: int
    demo_data: bool
    log_level: str


@dataclass(frozen=True)
class ConfigOverrides:
    """CLI-sourced overrides applied on top of env and file options."""

    database_url: Optional[str] = None
    max_questions: Optional[int] = None
    seed: Optional[int] = None
    log_level: Optional[str] = None


@dataclass(frozen=True)
class LoadResult:
    """Resolved configuration plus the workspace it was loaded from."""

    config: QuizzerConfig
    layout: workspace_mod.WorkspaceLayout
    config_path: Optional[Path]


def load_config(
    *,
    config_path: Optional[Path] = None,
    overrides: Optional[ConfigOverrides] = None,
    env: Optional[Mapping[str, str]] = None,
    workspace_path: Optional[Path] = None,
) -> LoadResult:
    """Load configuration for the workspace, applying overrides."""

    overrides = overrides or ConfigOverrides()
    env_map = os.environ if env is None else env

    layout = workspace_mod.ensure_workspace(env=env_map, path=workspace_path)
    requested = _resolve_config_path(
        config_path, env_map, layout.path_for("config") / CONFIG_FILENAME
    )

    table = _default_table()
    loaded_path: Optional[Path] = None
    if requested.exists():
        try:
            core_config.merge_defaults(table, core_config.load_toml(requested))
        except core_config.TomlConfigError as exc:
            raise QuizzerConfigError(str(exc)) from exc
        loaded_path = requested
    elif config_path is not None or (env_map.get(CONFIG_ENV) or "").strip():
        raise QuizzerConfigError(f"Config file not found: {requested}")

    database_url = _pick_first(
        overrides.database_url,
        _env_string(env_map, "DATABASE_URL"),
        table["database"]["url"],
    )
    if database_url is None:
        database_url = default_database_url(layout.path_for("data"))
    elif not isinstance(database_url, str) or not database_url.strip():
        raise QuizzerConfigError("database.url must be a non-empty string.")

    max_questions = _validate_int(
        "session.max_questions",
        _pick_first(
            overrides.max_questions,
            _env_int(env_map, "MAX_QUESTIONS"),
            table["session"]["max_questions"],
        ),
        minimum=0,
    )
    seed = _validate_int(
        "session.seed",
        _pick_first(
            overrides.seed,
            _env_int(env_map, "SEED"),
            table["session"]["seed"],
        ),
    )
    recent_limit = _validate_int(
        "history.recent_limit", table["history"]["recent_limit"], minimum=1
    )
    demo_data = table["seed"]["demo_data"]
    if not isinstance(demo_data, bool):
        raise QuizzerConfigError("seed.demo_data must be a boolean.")

    log_level = _pick_first(
        overrides.log_level,
        _env_string(env_map, "LOG_LEVEL"),
        table["logging"]["level"],
    )
    if not isinstance(log_level, str) or not log_level.strip():
        raise QuizzerConfigError("logging.level must be a non-empty string.")

    config = QuizzerConfig(
        database_url=database_url.strip(),
        max_questions=max_questions or None,
        seed=seed,
        recent_limit=recent_limit or MAX_RECENT_ATTEMPTS,
        demo_data=demo_data,
        log_level=log_level.strip().upper(),
    )
    return LoadResult(config=config, layout=layout, config_path=loaded_path)


def read_config_template() -> str:
    """Return the packaged ``quizzer.toml`` template."""

    return (
        resources.files("quizzer")
        .joinpath(CONFIG_FILENAME)
        .read_text(encoding="utf-8")
    )


def write_config_template(path: Path, *, overwrite: bool = False) -> Path:
    """Write the packaged template to ``path``."""

    try:
        return core_config.write_toml_template(
            path, template=read_config_template(), overwrite=overwrite
        )
    except core_config.TomlConfigError as exc:
        raise QuizzerConfigError(str(exc)) from exc


def _default_table() -> MutableMapping[str, MutableMapping[str, Any]]:
    return {
        "database": {"url": None},
        "session": {"max_questions": None, "seed": None},
        "history": {"recent_limit": MAX_RECENT_ATTEMPTS},
        "seed": {"demo_data": True},
        "logging": {"level": "INFO"},
    }


def _resolve_config_path(
    config_path: Optional[Path],
    env_map: Mapping[str, str],
    default_path: Path,
) -> Path:
    if config_path is not None:
        return Path(config_path).expanduser()
    env_candidate = (env_map.get(CONFIG_ENV) or "").strip()
    if env_candidate:
        return Path(env_candidate).expanduser()
    return default_path


def _validate_int(
    name: str, value: object, *, minimum: Optional[int] = None
) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise QuizzerConfigError(f"{name} must be an integer.")
    if minimum is not None and value < minimum:
        raise QuizzerConfigError(f"{name} must be >= {minimum}.")
    return value


def _env_string(env_map: Mapping[str, str], key: str) -> Optional[str]:
    raw = env_map.get(f"{ENV_PREFIX}{key}")
    if raw is None:
        return None
    value = raw.strip()
    return value or None


def _env_int(env_map: Mapping[str, str], key: str) -> Optional[int]:
    raw = _env_string(env_map, key)
    if raw is None:
        return None
    try:
        return int(raw)
    except ValueError as exc:
        raise QuizzerConfigError(
            f"{ENV_PREFIX}{key} must be an integer, got '{raw}'."
        ) from exc


def _pick_first(*candidates: object) -> Any:
    for candidate in candidates:
        if candidate is not None:
            return candidate
    return None
