"""Song schedule operations: resetting hit state and finding the note a press targets."""

from __future__ import annotations

from virtuoso.models import HitState, ScheduledNote, Song


def reset_schedule(song: Song) -> None:
    """Put every note back to PENDING. Stats are not touched."""
    for note in song.notes:
        note.hit_state = HitState.PENDING


def find_match(
    song: Song,
    note_name: str,
    current_time: float,
    tolerance: float,
) -> ScheduledNote | None:
    """Return the first pending note of this pitch within ``tolerance`` ms.

    Notes are scanned in schedule order and the first eligible one wins, even
    when a later same-pitch note is closer to ``current_time``.
    """
    for note in song.notes:
        if (
            note.hit_state is HitState.PENDING
            and note.note_name == note_name
            and abs(note.start_time - current_time) <= tolerance
        ):
            return note
    return None


def expired_notes(song: Song, current_time: float, window: float) -> list[ScheduledNote]:
    """Pending notes whose hit window closed before ``current_time``."""
    return [
        n for n in song.notes
        if n.hit_state is HitState.PENDING and current_time - (n.start_time + window) > 0
    ]


def end_time(song: Song, padding: float) -> float:
    """Song time after which a session is over."""
    return song.duration + padding
