"""
Clock collaborators.

`SystemClock` reads wall-clock time in whole seconds; `ManualClock` is driven
explicitly and is what tests and offline demos use.
"""

from __future__ import annotations

import time


class SystemClock:
    """Wall-clock seconds, clamped so it never goes backwards within a process."""

    def __init__(self) -> None:
        self._last = 0

    def now(self) -> int:
        t = max(int(time.time()), self._last)
        self._last = t
        return t


class ManualClock:
    """Settable monotone clock."""

    def __init__(self, start: int = 0) -> None:
        if not isinstance(start, int) or isinstance(start, bool) or start < 0:
            raise ValueError(f"start must be a non-negative int: {start!r}")
        self._now = start

    def now(self) -> int:
        return self._now

    def advance(self, seconds: int) -> int:
        if not isinstance(seconds, int) or isinstance(seconds, bool) or seconds < 0:
            raise ValueError(f"seconds must be a non-negative int: {seconds!r}")
        self._now += seconds
        return self._now

    def set(self, timestamp: int) -> int:
        if not isinstance(timestamp, int) or isinstance(timestamp, bool):
            raise ValueError(f"timestamp must be an int: {timestamp!r}")
        if timestamp < self._now:
            raise ValueError(f"clock cannot move backwards: {timestamp} < {self._now}")
        self._now = timestamp
        return self._now

    def __repr__(self) -> str:
        return f"ManualClock(now={self._now})"
