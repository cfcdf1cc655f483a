# [TESTER] v1

from __future__ import annotations

from types import SimpleNamespace

import pytest

from yieldswap.core.interfaces import Clock
from yieldswap.integration.clock import ManualClock, SystemClock


def test_manual_clock_is_monotone() -> None:
    clock = ManualClock(10)
    assert isinstance(clock, Clock)
    assert clock.advance(5) == 15
    assert clock.set(20) == 20
    assert clock.now() == 20
    with pytest.raises(ValueError):
        clock.set(19)
    with pytest.raises(ValueError):
        clock.advance(-1)


def test_manual_clock_rejects_bad_start() -> None:
    with pytest.raises(ValueError):
        ManualClock(-1)


def test_system_clock_never_goes_backwards(monkeypatch: pytest.MonkeyPatch) -> None:
    import yieldswap.integration.clock as clock_mod

    times = iter([1000.7, 999.0, 1001.2])
    monkeypatch.setattr(clock_mod, "time", SimpleNamespace(time=lambda: next(times)))
    clock = SystemClock()
    assert [clock.now(), clock.now(), clock.now()] == [1000, 1000, 1001]
