"""Score and combo bookkeeping."""

from __future__ import annotations

from virtuoso.config import (
    GOOD_BASE_POINTS,
    GOOD_COMBO_BONUS,
    PERFECT_BASE_POINTS,
    PERFECT_COMBO_BONUS,
)
from virtuoso.models import Judgment, PerformanceStats


def points_for(judgment: Judgment, combo: int) -> int:
    """Points a judgment is worth given the combo held *before* it."""
    if judgment is Judgment.PERFECT:
        return PERFECT_BASE_POINTS + combo * PERFECT_COMBO_BONUS
    if judgment is Judgment.GOOD:
        return GOOD_BASE_POINTS + combo * GOOD_COMBO_BONUS
    return 0


def apply_judgment(stats: PerformanceStats, judgment: Judgment) -> int:
    """Fold one judgment into ``stats``. Returns the points awarded."""
    points = points_for(judgment, stats.combo)
    if judgment is Judgment.PERFECT:
        stats.score += points
        stats.perfect += 1
        stats.combo += 1
    elif judgment is Judgment.GOOD:
        stats.score += points
        stats.good += 1
        stats.combo += 1
    else:
        stats.combo = 0
        stats.miss += 1
    stats.max_combo = max(stats.max_combo, stats.combo)
    return points
