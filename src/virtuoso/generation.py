"""Song generation: provider interface, response parsing, and validation.

Providers only ever see ``topic`` and ``difficulty``; neither value reaches
judgment or scoring. Every song coming back from a provider goes through
``validate_song`` and is rejected whole if any note is unplayable.
"""

from __future__ import annotations

import json
import logging
import math
import random
import threading
from enum import Enum
from typing import Any, Mapping, Protocol, Union, runtime_checkable

from virtuoso.config import GENERATED_SONG_MAX_MS, GENERATED_SONG_MIN_MS
from virtuoso.models import NoteType, ScheduledNote, Song
from virtuoso.notes import NOTE_NAMES, PIANO_NOTES, is_known_note

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "AI Generated Song"
DEFAULT_DESCRIPTION = "A unique melody created just for you."
DEFAULT_BPM = 100.0


class Difficulty(Enum):
    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"


class GenerationError(Exception):
    """Raised when a provider fails or returns an unusable song."""


class InvalidNoteError(GenerationError):
    """Raised when a song references a pitch outside the playable set."""


Payload = Union[str, bytes, Mapping[str, Any]]


@runtime_checkable
class SongGenerator(Protocol):
    def generate(self, topic: str, difficulty: Difficulty) -> Song | Payload: ...


def validate_song(song: Song) -> Song:
    """Check a song is playable. Returns it unchanged or raises."""
    if not song.notes:
        raise GenerationError(f"song {song.title!r} has no notes")
    unknown = sorted({n.note_name for n in song.notes if not is_known_note(n.note_name)})
    if unknown:
        raise InvalidNoteError(
            f"song {song.title!r} uses unknown notes: {', '.join(unknown)}"
        )
    for note in song.notes:
        if not (math.isfinite(note.start_time) and math.isfinite(note.duration)):
            raise GenerationError(
                f"note {note.id} has non-finite timing "
                f"(start={note.start_time}, duration={note.duration})"
            )
        if note.start_time < 0 or note.duration < 0:
            raise GenerationError(
                f"note {note.id} has negative timing "
                f"(start={note.start_time}, duration={note.duration})"
            )
    return song


def parse_song_payload(payload: Payload, difficulty: Difficulty) -> Song:
    """Build a Song from a provider response.

    Accepts the JSON text or an already-decoded mapping with ``title``,
    ``description``, ``bpm`` and ``notes`` (each ``noteName``, ``startTime``,
    ``duration``). Missing metadata falls back to defaults.
    """
    if isinstance(payload, (str, bytes)):
        try:
            data = json.loads(payload or "{}")
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise GenerationError(f"unparsable song payload: {exc}") from exc
    else:
        data = payload

    if not isinstance(data, Mapping):
        raise GenerationError(f"song payload must be an object, got {type(data).__name__}")

    raw_notes = data.get("notes") or []
    if not isinstance(raw_notes, list):
        raise GenerationError("song payload 'notes' must be a list")

    notes: list[ScheduledNote] = []
    for index, raw in enumerate(raw_notes):
        try:
            notes.append(
                ScheduledNote(
                    id=f"gen-{index}",
                    note_name=str(raw["noteName"]),
                    start_time=float(raw["startTime"]),
                    duration=float(raw["duration"]),
                )
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise GenerationError(f"malformed note at index {index}: {raw!r}") from exc

    try:
        bpm = float(data.get("bpm") or DEFAULT_BPM)
    except (TypeError, ValueError) as exc:
        raise GenerationError(f"malformed bpm: {data.get('bpm')!r}") from exc

    song = Song(
        title=data.get("title") or DEFAULT_TITLE,
        description=data.get("description") or DEFAULT_DESCRIPTION,
        bpm=bpm,
        difficulty=difficulty.value,
        notes=notes,
    )
    return validate_song(song)


def request_song(generator: SongGenerator, topic: str, difficulty: Difficulty) -> Song:
    """Ask a provider for a song and validate it.

    Any provider exception is re-raised as GenerationError.
    """
    try:
        response = generator.generate(topic, difficulty)
    except GenerationError:
        raise
    except Exception as exc:
        raise GenerationError(f"song provider failed: {exc}") from exc

    if isinstance(response, Song):
        song = validate_song(response)
        song.difficulty = difficulty.value
        return song
    return parse_song_payload(response, difficulty)


class GenerationJob:
    """Runs ``request_song`` off the frame loop.

    Poll ``done`` each frame, then call ``result()``, which re-raises the
    GenerationError if the request failed.
    """

    def __init__(self, generator: SongGenerator, topic: str, difficulty: Difficulty) -> None:
        self.topic = topic
        self.difficulty = difficulty
        self._generator = generator
        self._finished = threading.Event()
        self._song: Song | None = None
        self._error: GenerationError | None = None
        self._thread = threading.Thread(target=self._run, name="song-generation", daemon=True)

    def start(self) -> GenerationJob:
        logger.info("generating %s song about %r", self.difficulty.value, self.topic)
        self._thread.start()
        return self

    def _run(self) -> None:
        try:
            self._song = request_song(self._generator, self.topic, self.difficulty)
        except GenerationError as exc:
            logger.warning("song generation failed: %s", exc)
            self._error = exc
        except Exception as exc:
            logger.exception("unexpected error while generating a song")
            self._error = GenerationError(f"song generation crashed: {exc}")
            self._error.__cause__ = exc
        finally:
            self._finished.set()

    @property
    def done(self) -> bool:
        return self._finished.is_set()

    def wait(self, timeout: float | None = None) -> bool:
        return self._finished.wait(timeout)

    def result(self) -> Song:
        if not self._finished.is_set():
            raise RuntimeError("generation job has not finished")
        if self._error is not None:
            raise self._error
        if self._song is None:
            raise GenerationError("generation job produced no song")
        return self._song


# Per-difficulty composition parameters:
# (bpm range, allowed note names, beat lengths to draw from, largest melodic step)
_STYLE: dict[Difficulty, tuple[tuple[int, int], tuple[str, ...], tuple[float, ...], int]] = {
    Difficulty.EASY: (
        (90, 110),
        tuple(n.note for n in PIANO_NOTES if n.type is NoteType.NATURAL and n.midi <= 72),
        (1.0, 1.0, 2.0),
        2,
    ),
    Difficulty.MEDIUM: (
        (100, 130),
        tuple(n.note for n in PIANO_NOTES if n.type is NoteType.NATURAL),
        (0.5, 1.0, 1.0, 2.0),
        4,
    ),
    Difficulty.HARD: (
        (120, 150),
        NOTE_NAMES,
        (0.5, 0.5, 1.0, 1.5),
        7,
    ),
}


class ProceduralSongGenerator:
    """Offline provider that composes a short melody from the playable notes.

    The same topic, difficulty and seed always produce the same song.
    """

    def __init__(self, seed: int | str | None = None) -> None:
        self.seed = seed

    def generate(self, topic: str, difficulty: Difficulty) -> dict[str, Any]:
        rng = random.Random(f"{self.seed}:{topic.strip().lower()}:{difficulty.value}")
        (bpm_lo, bpm_hi), palette, beat_choices, max_step = _STYLE[difficulty]

        bpm = rng.randint(bpm_lo, bpm_hi)
        beat_ms = 60_000.0 / bpm
        target_ms = rng.uniform(GENERATED_SONG_MIN_MS, GENERATED_SONG_MAX_MS)

        notes: list[dict[str, Any]] = []
        index = 0
        t = 0.0
        while t < target_ms:
            beats = rng.choice(beat_choices)
            notes.append({
                "noteName": palette[index],
                "startTime": round(t),
                "duration": round(beats * beat_ms * 0.8),
            })
            t += beats * beat_ms
            step = rng.randint(-max_step, max_step)
            index = min(len(palette) - 1, max(0, index + step))

        # Resolve to the tonic.
        notes[-1]["noteName"] = palette[0]

        subject = topic.strip() or "Nothing in particular"
        return {
            "title": f"{subject.title()} Melody",
            "description": f"A {difficulty.value.lower()} tune about {subject.lower()}.",
            "bpm": bpm,
            "notes": notes,
        }
