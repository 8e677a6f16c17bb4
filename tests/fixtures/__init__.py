"""Shared testing fixtures for the quizzer test suite."""

from .session import ScriptedInput, TickingClock  # noqa: F401
from .workspace import WorkspaceBuilder, build_tree  # noqa: F401

__all__ = [
    "ScriptedInput",
    "TickingClock",
    "WorkspaceBuilder",
    "build_tree",
]
