"""The playable note set: pitch names, frequencies, and keyboard bindings."""

from __future__ import annotations

from virtuoso.models import NoteDefinition, NoteType

PIANO_NOTES: tuple[NoteDefinition, ...] = (
    NoteDefinition("C4", 261.63, NoteType.NATURAL, "a", 60),
    NoteDefinition("C#4", 277.18, NoteType.SHARP, "w", 61),
    NoteDefinition("D4", 293.66, NoteType.NATURAL, "s", 62),
    NoteDefinition("D#4", 311.13, NoteType.SHARP, "e", 63),
    NoteDefinition("E4", 329.63, NoteType.NATURAL, "d", 64),
    NoteDefinition("F4", 349.23, NoteType.NATURAL, "f", 65),
    NoteDefinition("F#4", 369.99, NoteType.SHARP, "t", 66),
    NoteDefinition("G4", 392.00, NoteType.NATURAL, "g", 67),
    NoteDefinition("G#4", 415.30, NoteType.SHARP, "y", 68),
    NoteDefinition("A4", 440.00, NoteType.NATURAL, "h", 69),
    NoteDefinition("A#4", 466.16, NoteType.SHARP, "u", 70),
    NoteDefinition("B4", 493.88, NoteType.NATURAL, "j", 71),
    NoteDefinition("C5", 523.25, NoteType.NATURAL, "k", 72),
    NoteDefinition("C#5", 554.37, NoteType.SHARP, "o", 73),
    NoteDefinition("D5", 587.33, NoteType.NATURAL, "l", 74),
)

NOTE_NAMES: tuple[str, ...] = tuple(n.note for n in PIANO_NOTES)

_BY_NAME = {n.note: n for n in PIANO_NOTES}
_BY_KEY = {n.keyboard_key: n for n in PIANO_NOTES}
_BY_MIDI = {n.midi: n for n in PIANO_NOTES}

MIDI_NOTE_MIN = min(_BY_MIDI)
MIDI_NOTE_MAX = max(_BY_MIDI)


def is_known_note(name: str) -> bool:
    return name in _BY_NAME


def note_by_name(name: str) -> NoteDefinition:
    """Raises KeyError for names outside the playable set."""
    return _BY_NAME[name]


def note_by_key(key: str) -> NoteDefinition:
    """Look up a note by its computer-keyboard binding (case-insensitive)."""
    return _BY_KEY[key.lower()]


def note_by_midi(pitch: int) -> NoteDefinition:
    return _BY_MIDI[pitch]


def fold_into_range(pitch: int) -> int:
    """Shift a MIDI pitch by whole octaves until it is playable."""
    while pitch < MIDI_NOTE_MIN:
        pitch += 12
    while pitch > MIDI_NOTE_MAX:
        pitch -= 12
    return pitch
