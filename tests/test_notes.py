"""Tests for the playable note set."""

import pytest

from virtuoso.models import NoteType
from virtuoso.notes import (
    NOTE_NAMES,
    PIANO_NOTES,
    fold_into_range,
    is_known_note,
    note_by_key,
    note_by_midi,
    note_by_name,
)


def test_fifteen_chromatic_keys():
    assert len(PIANO_NOTES) == 15
    assert NOTE_NAMES[0] == "C4"
    assert NOTE_NAMES[-1] == "D5"
    assert sum(1 for n in PIANO_NOTES if n.type is NoteType.SHARP) == 6


def test_lookups():
    assert note_by_name("A4").frequency == 440.0
    assert note_by_key("H").note == "A4"
    assert note_by_midi(61).note == "C#4"
    assert is_known_note("D5")
    assert not is_known_note("E5")
    with pytest.raises(KeyError):
        note_by_name("E5")


def test_fold_into_range():
    assert fold_into_range(48) == 60
    assert fold_into_range(84) == 72
    assert fold_into_range(75) == 63
    assert fold_into_range(67) == 67
