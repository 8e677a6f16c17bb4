from __future__ import annotations

from pathlib import Path

import pytest

from quizzer.core import workspace


def test_ensure_workspace_creates_directories(tmp_path, monkeypatch):
    root = tmp_path / "data"
    monkeypatch.setenv(workspace.WORKSPACE_ENV, str(root))

    layout = workspace.ensure_workspace()

    assert layout.home == root.resolve()
    assert [name for name, _ in layout.items()] == ["config", "logs", "data"]
    for name, path in layout.items():
        assert path.is_dir()
        assert layout.created[name] is True
    assert layout.created["home"] is True


def test_ensure_workspace_is_idempotent(tmp_path):
    root = tmp_path / "existing"

    workspace.ensure_workspace(path=root)
    second = workspace.ensure_workspace(path=root)

    assert all(not created for created in second.created.values())


def test_ensure_workspace_without_create(tmp_path):
    root = tmp_path / "deferred"

    layout = workspace.ensure_workspace(path=root, create=False)

    assert layout.path_for("data") == root.resolve() / "data"
    assert not root.exists()


def test_ensure_workspace_uses_env_mapping(tmp_path):
    env_home = tmp_path / "env-home"

    layout = workspace.ensure_workspace(
        env={workspace.WORKSPACE_ENV: str(env_home)}
    )

    assert layout.home == env_home.resolve()


def test_default_workspace_without_env(tmp_path, monkeypatch):
    home = tmp_path / "default-home"
    monkeypatch.setattr(workspace, "DEFAULT_WORKSPACE", home)

    layout = workspace.ensure_workspace(env={})

    assert layout.home == home.resolve()


def test_default_workspace_falls_back_to_tempdir(tmp_path, monkeypatch):
    blocked = tmp_path / "blocked-home"
    monkeypatch.setattr(workspace, "DEFAULT_WORKSPACE", blocked)
    monkeypatch.setattr(
        workspace.tempfile, "gettempdir", lambda: str(tmp_path / "tmp")
    )
    real_ensure_dir = workspace._ensure_dir

    def fake_ensure_dir(path: Path) -> bool:
        if path == blocked.resolve():
            raise PermissionError("denied")
        return real_ensure_dir(path)

    monkeypatch.setattr(workspace, "_ensure_dir", fake_ensure_dir)

    layout = workspace.ensure_workspace(env={})

    assert layout.home == (tmp_path / "tmp" / "quizzer-data").resolve()


def test_explicit_workspace_does_not_fall_back(tmp_path, monkeypatch):
    target = tmp_path / "explicit"

    def deny(path: Path) -> bool:
        raise PermissionError("denied")

    monkeypatch.setattr(workspace, "_ensure_dir", deny)

    with pytest.raises(workspace.WorkspaceError):
        workspace.ensure_workspace(path=target)


def test_ensure_workspace_errors_when_path_is_file(tmp_path):
    root = tmp_path / "file"
    root.write_text("not a dir", encoding="utf-8")

    with pytest.raises(workspace.WorkspaceError):
        workspace.ensure_workspace(path=root)


def test_ensure_workspace_errors_when_subdir_is_file(tmp_path):
    root = tmp_path / "ws"
    (root).mkdir()
    (root / "logs").write_text("oops", encoding="utf-8")

    with pytest.raises(workspace.WorkspaceError, match="logs"):
        workspace.ensure_workspace(path=root)


def test_path_for_unknown_key_errors(tmp_path):
    layout = workspace.ensure_workspace(path=tmp_path / "ws", create=False)

    with pytest.raises(KeyError):
        layout.path_for("unknown")
