"""Song clock and tick drivers.

The session never loops on its own. A driver hands it one tick at a time:
``schedule()`` asks for the next tick, ``cancel()`` drops a pending one.
``FrameDriver`` fires from the pygame frame loop; ``ManualDriver`` lets
tests and headless runs step time deterministically.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, Protocol, runtime_checkable

from virtuoso.config import MAX_TICK_DELTA_MS

logger = logging.getLogger(__name__)

TickCallback = Callable[[], None]


def monotonic_ms() -> float:
    return time.perf_counter() * 1000.0


@dataclass(frozen=True)
class ClockSample:
    current_time: float  # ms of song time
    delta: float  # song time elapsed since the previous sample
    clamped: bool = False


class GameClock:
    """Converts host timestamps into non-decreasing song time."""

    def __init__(self, max_delta_ms: float | None = MAX_TICK_DELTA_MS) -> None:
        self.max_delta_ms = max_delta_ms
        self.origin: float = 0.0
        self.current_time: float = 0.0

    def start(self, host_ms: float) -> None:
        self.origin = host_ms
        self.current_time = 0.0

    def peek(self, host_ms: float) -> float:
        """Song time at ``host_ms`` without advancing the clock."""
        t = max(self.current_time, host_ms - self.origin)
        if self.max_delta_ms is not None:
            t = min(t, self.current_time + self.max_delta_ms)
        return t

    def advance(self, host_ms: float) -> ClockSample:
        raw = host_ms - self.origin
        delta = raw - self.current_time
        if delta < 0:
            return ClockSample(self.current_time, 0.0)

        clamped = False
        if self.max_delta_ms is not None and delta > self.max_delta_ms:
            excess = delta - self.max_delta_ms
            self.origin += excess
            logger.warning(
                "tick gap of %.0fms exceeds %.0fms; clamping song time", delta, self.max_delta_ms
            )
            delta = self.max_delta_ms
            clamped = True

        self.current_time += delta
        return ClockSample(self.current_time, delta, clamped)


@runtime_checkable
class TickDriver(Protocol):
    def schedule(self, callback: TickCallback) -> None: ...
    def cancel(self) -> None: ...


class FrameDriver:
    """Fires the pending tick once per host frame."""

    def __init__(self) -> None:
        self._callback: TickCallback | None = None

    @property
    def pending(self) -> bool:
        return self._callback is not None

    def schedule(self, callback: TickCallback) -> None:
        self._callback = callback

    def cancel(self) -> None:
        self._callback = None

    def pump(self) -> None:
        """Call from the frame loop."""
        callback, self._callback = self._callback, None
        if callback is not None:
            callback()


class ManualDriver:
    """Deterministic driver and time source: advance by dt, then tick."""

    def __init__(self, start_ms: float = 0.0) -> None:
        self._now = start_ms
        self._callback: TickCallback | None = None
        self.ticks = 0

    def now(self) -> float:
        return self._now

    @property
    def pending(self) -> bool:
        return self._callback is not None

    def schedule(self, callback: TickCallback) -> None:
        self._callback = callback

    def cancel(self) -> None:
        self._callback = None

    def advance(self, dt_ms: float) -> None:
        self._now += dt_ms
        callback, self._callback = self._callback, None
        if callback is not None:
            self.ticks += 1
            callback()

    def set_time(self, t_ms: float) -> None:
        """Jump the time source without ticking (input arriving between ticks)."""
        self._now = t_ms

    def run_until(self, t_ms: float, step_ms: float = 16.0) -> None:
        """Tick every ``step_ms`` until ``t_ms`` or until nothing is scheduled."""
        while self._now < t_ms and self.pending:
            self.advance(min(step_ms, t_ms - self._now))
