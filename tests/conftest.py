from __future__ import annotations

import pytest

from linkpromise import EventLoop


class FakeClock:
    """Monotonic clock that only moves forward when the event loop sleeps."""

    def __init__(self) -> None:
        self.now = 100.0
        self.sleeps: list[float] = []

    def time(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def loop(clock: FakeClock) -> EventLoop:
    return EventLoop(clock=clock.time, sleep=clock.sleep)
