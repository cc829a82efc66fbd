"""Hit evaluation: judge played notes against the schedule and sweep expired ones."""

from __future__ import annotations

import logging

from virtuoso.config import HIT_WINDOW_MS, PERFECT_THRESHOLD_MS
from virtuoso.models import HitResult, Judgment, PerformanceStats, ScheduledNote, Song
from virtuoso.schedule import expired_notes, find_match
from virtuoso.scoring import apply_judgment

logger = logging.getLogger(__name__)


def grade_for_diff(time_diff_ms: float) -> Judgment:
    """Grade a matched press by its absolute distance from the note start."""
    if time_diff_ms < PERFECT_THRESHOLD_MS:
        return Judgment.PERFECT
    return Judgment.GOOD


def judge(song: Song, note_name: str, current_time: float) -> HitResult:
    """Match a played note against the schedule.

    On a match the note is marked HIT. With no eligible note the result is a
    MISS and nothing in the schedule changes.
    """
    match = find_match(song, note_name, current_time, HIT_WINDOW_MS)
    if match is None:
        return HitResult(
            judgment=Judgment.MISS,
            note=None,
            played_note=note_name,
            time_diff_ms=None,
        )

    time_diff = abs(match.start_time - current_time)
    match.mark_hit()
    return HitResult(
        judgment=grade_for_diff(time_diff),
        note=match,
        played_note=note_name,
        time_diff_ms=time_diff,
    )


def judge_and_score(
    song: Song,
    stats: PerformanceStats,
    note_name: str,
    current_time: float,
) -> HitResult:
    result = judge(song, note_name, current_time)
    result.points = apply_judgment(stats, result.judgment)
    logger.debug(
        "%-7s %-4s t=%.0fms diff=%s combo=%d score=%d",
        result.judgment.name, note_name, current_time,
        "-" if result.time_diff_ms is None else f"{result.time_diff_ms:.0f}ms",
        stats.combo, stats.score,
    )
    return result


def sweep_misses(song: Song, stats: PerformanceStats, current_time: float) -> list[ScheduledNote]:
    """Mark pending notes whose hit window has passed as MISSED.

    Each note is counted once: it leaves PENDING here, so later sweeps skip it.
    """
    missed = expired_notes(song, current_time, HIT_WINDOW_MS)
    for note in missed:
        note.mark_missed()
        apply_judgment(stats, Judgment.MISS)
    if missed:
        logger.debug("swept %d expired note(s) at t=%.0fms", len(missed), current_time)
    return missed
