"""Load MIDI files into the Song model."""

from __future__ import annotations

import logging
from pathlib import Path

import mido

from virtuoso.models import ScheduledNote, Song
from virtuoso.notes import fold_into_range, note_by_midi

logger = logging.getLogger(__name__)

_DEFAULT_TEMPO = 500_000  # 120 BPM

# Notes per second at or above which a song is rated Medium / Hard
_MEDIUM_DENSITY = 2.0
_HARD_DENSITY = 4.0


class SongLoadError(Exception):
    """Raised when a song file cannot be parsed."""


def load_song(file_path: str | Path) -> Song:
    """Load a .mid or .midi file and return a Song.

    Pitches outside the playable range are moved by whole octaves into it.

    Raises:
        SongLoadError: If the file cannot be parsed or holds no notes.
    """
    path = Path(file_path)
    if path.suffix.lower() not in (".mid", ".midi"):
        raise SongLoadError(f"Unsupported file format: {path.suffix}")
    try:
        mid = mido.MidiFile(str(path))
    except Exception as exc:
        raise SongLoadError(f"Failed to load {path.name}: {exc}") from exc

    song = _song_from_midi(mid, title=path.stem)
    if not song.notes:
        raise SongLoadError(f"{path.name} contains no notes")
    logger.info("loaded %s: %d notes, %.0f bpm, %s", path.name, len(song.notes), song.bpm, song.difficulty)
    return song


def _song_from_midi(mid: mido.MidiFile, title: str) -> Song:
    first_tempo: int | None = None
    raw: list[tuple[float, float, int]] = []  # (start_ms, duration_ms, pitch)

    # mido merges tracks and converts delta ticks to seconds, honouring tempo changes
    abs_time = 0.0
    pending: dict[int, float] = {}  # pitch -> start (s)
    for msg in mid:
        abs_time += msg.time
        if msg.type == "set_tempo" and first_tempo is None:
            first_tempo = msg.tempo
        elif msg.type == "note_on" and msg.velocity > 0:
            if msg.note in pending:
                start = pending.pop(msg.note)
                raw.append((start * 1000.0, (abs_time - start) * 1000.0, msg.note))
            pending[msg.note] = abs_time
        elif msg.type in ("note_off", "note_on") and msg.note in pending:
            start = pending.pop(msg.note)
            raw.append((start * 1000.0, (abs_time - start) * 1000.0, msg.note))

    raw.sort(key=lambda r: r[0])
    notes = [
        ScheduledNote(
            id=f"midi-{i}",
            note_name=note_by_midi(fold_into_range(pitch)).note,
            start_time=round(start, 1),
            duration=round(max(duration, 10.0), 1),
        )
        for i, (start, duration, pitch) in enumerate(raw)
    ]

    song = Song(
        title=title,
        description=f"Imported from {title}",
        bpm=round(mido.tempo2bpm(first_tempo or _DEFAULT_TEMPO), 1),
        notes=notes,
    )
    song.difficulty = estimate_difficulty(song)
    return song


def estimate_difficulty(song: Song) -> str:
    """Rate a song Easy / Medium / Hard by notes per second."""
    seconds = song.duration / 1000.0
    if not song.notes or seconds <= 0:
        return "Easy"
    density = len(song.notes) / seconds
    if density >= _HARD_DENSITY:
        return "Hard"
    if density >= _MEDIUM_DENSITY:
        return "Medium"
    return "Easy"
