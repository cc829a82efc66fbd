"""Built-in songs."""

from __future__ import annotations

from virtuoso.models import ScheduledNote, Song


def _chart(*entries: tuple[str, float, float]) -> list[ScheduledNote]:
    return [
        ScheduledNote(id=str(i), note_name=name, start_time=start, duration=duration)
        for i, (name, start, duration) in enumerate(entries, start=1)
    ]


TWINKLE_TWINKLE = Song(
    title="Twinkle Twinkle Little Star",
    description="A classic beginner nursery rhyme.",
    bpm=100,
    difficulty="Easy",
    notes=_chart(
        ("C4", 0, 500),
        ("C4", 600, 500),
        ("G4", 1200, 500),
        ("G4", 1800, 500),
        ("A4", 2400, 500),
        ("A4", 3000, 500),
        ("G4", 3600, 1000),
        ("F4", 4800, 500),
        ("F4", 5400, 500),
        ("E4", 6000, 500),
        ("E4", 6600, 500),
        ("D4", 7200, 500),
        ("D4", 7800, 500),
        ("C4", 8400, 1000),
    ),
)


def default_song() -> Song:
    """A fresh, playable copy of the default song."""
    return TWINKLE_TWINKLE.fresh_copy()
