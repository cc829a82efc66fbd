"""Tests for MIDI song import."""

import pytest
from mido import Message, MetaMessage, MidiFile, MidiTrack

from virtuoso.models import Song, ScheduledNote
from virtuoso.song_loader import SongLoadError, estimate_difficulty, load_song


@pytest.fixture
def simple_midi(tmp_path):
    """Four quarter notes at 120 BPM, each held for an eighth: C4, G4, C6, C3."""
    path = tmp_path / "tune.mid"
    mid = MidiFile(ticks_per_beat=480)
    track = MidiTrack()
    mid.tracks.append(track)
    track.append(MetaMessage("set_tempo", tempo=500_000, time=0))
    for i, pitch in enumerate((60, 67, 84, 48)):
        track.append(Message("note_on", note=pitch, velocity=90, time=0 if i == 0 else 240))
        track.append(Message("note_off", note=pitch, velocity=0, time=240))
    mid.save(str(path))
    return path


def test_load_midi(simple_midi):
    song = load_song(simple_midi)
    assert song.title == "tune"
    assert song.bpm == 120
    assert [n.note_name for n in song.notes] == ["C4", "G4", "C5", "C4"]
    assert [n.start_time for n in song.notes] == [0, 500, 1000, 1500]
    assert all(n.duration == 250 for n in song.notes)
    assert [n.id for n in song.notes] == ["midi-0", "midi-1", "midi-2", "midi-3"]


def test_unsupported_extension(tmp_path):
    path = tmp_path / "tune.xml"
    path.write_text("<score/>")
    with pytest.raises(SongLoadError):
        load_song(path)


def test_corrupt_file(tmp_path):
    path = tmp_path / "broken.mid"
    path.write_bytes(b"not a midi file")
    with pytest.raises(SongLoadError):
        load_song(path)


def test_file_without_notes(tmp_path):
    path = tmp_path / "silent.mid"
    mid = MidiFile()
    track = MidiTrack()
    track.append(MetaMessage("set_tempo", tempo=500_000, time=0))
    mid.tracks.append(track)
    mid.save(str(path))
    with pytest.raises(SongLoadError):
        load_song(path)


def _dense(n, span_ms):
    return Song(notes=[ScheduledNote(id=str(i), note_name="C4", start_time=i * span_ms / n, duration=10)
                       for i in range(n)])


def test_estimate_difficulty():
    assert estimate_difficulty(Song()) == "Easy"
    assert estimate_difficulty(_dense(10, 10_000)) == "Easy"
    assert estimate_difficulty(_dense(30, 10_000)) == "Medium"
    assert estimate_difficulty(_dense(50, 10_000)) == "Hard"
