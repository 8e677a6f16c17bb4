"""Deterministic stand-ins for user input and wall-clock time."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Iterable, List


class ScriptedInput:
    """Callable input provider that replays ``lines`` and then raises EOF."""

    def __init__(self, lines: Iterable[str]):
        self._lines: List[str] = list(lines)
        self.consumed: List[str] = []

    def __call__(self) -> str:
        if not self._lines:
            raise EOFError
        line = self._lines.pop(0)
        self.consumed.append(line)
        return line

    @property
    def remaining(self) -> List[str]:
        return list(self._lines)


class TickingClock:
    """Clock that advances by ``step`` on every call."""

    def __init__(
        self,
        start: datetime = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc),
        step: timedelta = timedelta(minutes=1),
    ):
        self.current = start
        self.step = step
        self.calls = 0

    def __call__(self) -> datetime:
        value = self.current
        self.current = value + self.step
        self.calls += 1
        return value
