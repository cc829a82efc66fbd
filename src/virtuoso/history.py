"""Score-over-time sampling for the post-session graph."""

from __future__ import annotations

from virtuoso.config import HISTORY_INTERVAL_MS
from virtuoso.models import HistorySample


class HistoryRecorder:
    """Append-only score samples, at most one per tick, every ``interval_ms`` of song time."""

    def __init__(self, interval_ms: float = HISTORY_INTERVAL_MS) -> None:
        self.interval_ms = interval_ms
        self._samples: list[HistorySample] = []
        self._next_at = 0.0

    def reset(self) -> None:
        self._samples = []
        self._next_at = 0.0

    def sample(self, current_time: float, score: int) -> HistorySample | None:
        if current_time < self._next_at:
            return None
        record = HistorySample(time=current_time, score=score)
        self._samples.append(record)
        self._next_at = (current_time // self.interval_ms + 1) * self.interval_ms
        return record

    @property
    def samples(self) -> tuple[HistorySample, ...]:
        return tuple(self._samples)

    def __len__(self) -> int:
        return len(self._samples)
