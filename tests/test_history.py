"""Tests for score history sampling."""

from virtuoso.history import HistoryRecorder


def test_samples_every_interval_at_most_once_per_tick():
    rec = HistoryRecorder(interval_ms=50)
    for t in (0, 16, 32, 48, 64, 80, 96, 112):
        rec.sample(t, score=int(t))
    assert [s.time for s in rec.samples] == [0, 64, 112]
    assert [s.score for s in rec.samples] == [0, 64, 112]


def test_large_jump_yields_single_sample():
    rec = HistoryRecorder(interval_ms=50)
    rec.sample(0, 0)
    rec.sample(400, 10)
    rec.sample(420, 10)
    assert [s.time for s in rec.samples] == [0, 400]


def test_reset_clears_samples():
    rec = HistoryRecorder()
    rec.sample(0, 0)
    rec.sample(100, 5)
    rec.reset()
    assert len(rec) == 0
    assert rec.sample(0, 0) is not None
