"""Tests for score and combo bookkeeping."""

from virtuoso.models import Judgment, PerformanceStats
from virtuoso.scoring import apply_judgment, points_for


def test_points_formula():
    assert points_for(Judgment.PERFECT, 0) == 100
    assert points_for(Judgment.PERFECT, 4) == 140
    assert points_for(Judgment.GOOD, 0) == 50
    assert points_for(Judgment.GOOD, 4) == 70
    assert points_for(Judgment.MISS, 9) == 0


def test_streak_is_worth_progressively_more():
    stats = PerformanceStats()
    gained = [apply_judgment(stats, Judgment.PERFECT) for _ in range(4)]
    assert gained == [100, 110, 120, 130]
    assert stats.score == 460
    assert stats.combo == 4
    assert stats.max_combo == 4


def test_miss_resets_combo_but_keeps_max():
    stats = PerformanceStats()
    apply_judgment(stats, Judgment.GOOD)
    apply_judgment(stats, Judgment.PERFECT)
    apply_judgment(stats, Judgment.MISS)
    assert stats.combo == 0
    assert stats.max_combo == 2
    assert stats.miss == 1
    assert stats.score == 50 + 110

    apply_judgment(stats, Judgment.GOOD)
    assert stats.combo == 1
    assert stats.max_combo == 2
    assert stats.score == 50 + 110 + 50
