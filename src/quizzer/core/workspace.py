"""Workspace bootstrap: the per-user directory holding config, logs, and data."""

from __future__ import annotations

import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, MutableMapping, Optional

__all__ = [
    "DEFAULT_WORKSPACE",
    "WORKSPACE_ENV",
    "WorkspaceError",
    "WorkspaceLayout",
    "ensure_workspace",
]

WORKSPACE_ENV = "QUIZZER_DATA_HOME"
DEFAULT_WORKSPACE = Path.home() / ".quizzer-data"

_SUBDIRS = ("config", "logs", "data")


class WorkspaceError(RuntimeError):
    """Raised when the workspace layout cannot be prepared."""


@dataclass(frozen=True)
class WorkspaceLayout:
    """Resolved workspace paths and whether each was created."""

    home: Path
    directories: Mapping[str, Path]
    created: Mapping[str, bool]

    def path_for(self, key: str) -> Path:
        try:
            return self.directories[key]
        except KeyError as exc:
            raise KeyError(f"Unknown workspace directory '{key}'.") from exc

    def items(self) -> tuple[tuple[str, Path], ...]:
        return tuple(self.directories.items())


def ensure_workspace(
    *,
    env: Optional[Mapping[str, str]] = None,
    path: Optional[Path] = None,
    create: bool = True,
) -> WorkspaceLayout:
    """Resolve the workspace root and (optionally) create its directories.

    The root is ``path`` when given, else ``$QUIZZER_DATA_HOME``, else
    ``~/.quizzer-data``. When the default location is not writable the
    workspace falls back to a directory under the system temp dir.
    """

    env_map = os.environ if env is None else env
    base, explicit = _resolve_base(env_map, path)

    candidates = [base]
    fallback = Path(tempfile.gettempdir()) / "quizzer-data"
    if create and not explicit and fallback != base:
        candidates.append(fallback)

    error: Optional[Exception] = None
    for candidate in candidates:
        try:
            return _materialize(candidate, create=create)
        except PermissionError as exc:
            error = exc
    raise WorkspaceError(f"Unable to prepare workspace at {base}") from error


def _resolve_base(
    env: Mapping[str, str], override: Optional[Path]
) -> tuple[Path, bool]:
    if override is not None:
        target, explicit = Path(override), True
    else:
        custom = (env.get(WORKSPACE_ENV) or "").strip()
        if custom:
            target, explicit = Path(custom), True
        else:
            target, explicit = DEFAULT_WORKSPACE, False
    return target.expanduser().absolute().resolve(), explicit


def _materialize(base: Path, *, create: bool) -> WorkspaceLayout:
    if base.exists() and not base.is_dir():
        raise WorkspaceError(
            f"Configured workspace exists and is not a directory: {base}"
        )

    created: MutableMapping[str, bool] = {
        "home": _ensure_dir(base) if create else False
    }
    directories: MutableMapping[str, Path] = {}
    for name in _SUBDIRS:
        directory = base / name
        if directory.exists() and not directory.is_dir():
            raise WorkspaceError(
                f"Expected workspace directory for '{name}' but found a "
                f"file: {directory}"
            )
        created[name] = _ensure_dir(directory) if create else False
        directories[name] = directory

    return WorkspaceLayout(
        home=base,
        directories=MappingProxyType(dict(directories)),
        created=MappingProxyType(dict(created)),
    )


def _ensure_dir(path: Path) -> bool:
    existed = path.is_dir()
    path.mkdir(parents=True, exist_ok=True)
    try:
        path.chmod(0o700)
    except (PermissionError, NotImplementedError):
        pass
    return not existed
