"""Tests for the play session state machine."""

import random

import pytest

from virtuoso.generation import GenerationError, InvalidNoteError
from virtuoso.library import TWINKLE_TWINKLE
from virtuoso.models import GameState, HitState, Judgment, ScheduledNote, Song
from virtuoso.notes import NOTE_NAMES, note_by_name
from virtuoso.schedule import reset_schedule


def test_starts_in_menu_with_default_song(make_session):
    session = make_session()
    assert session.state == GameState.MENU
    assert session.song.title == TWINKLE_TWINKLE.title
    assert session.song is not TWINKLE_TWINKLE


def test_start_resets_and_schedules_tick(make_session, driver):
    session = make_session()
    driver.set_time(12_345)
    session.start()
    assert session.state == GameState.PLAYING
    assert session.current_time == 0
    assert driver.pending
    driver.advance(16)
    assert session.current_time == 16


def test_start_while_playing_is_rejected(make_session):
    session = make_session()
    session.start()
    with pytest.raises(RuntimeError):
        session.start()


def test_perfect_press(make_session, driver, single_note_song):
    session = make_session(single_note_song)
    session.start()
    driver.run_until(950)
    result = session.press("C4")
    assert result.judgment == Judgment.PERFECT
    assert session.stats.score == 100
    assert session.stats.combo == 1


def test_good_press(make_session, driver, single_note_song):
    session = make_session(single_note_song)
    session.start()
    driver.run_until(1250)
    result = session.press("C4")
    assert result.judgment == Judgment.GOOD
    assert session.stats.score == 50
    assert session.stats.good == 1


def test_press_uses_arrival_time_between_ticks(make_session, driver, single_note_song):
    session = make_session(single_note_song)
    session.start()
    driver.run_until(800)
    driver.set_time(990)
    result = session.press("C4")
    assert result.time_diff_ms == 10
    assert result.judgment == Judgment.PERFECT


def test_unmatched_press_while_playing_is_a_miss(make_session, driver, single_note_song):
    session = make_session(single_note_song)
    session.start()
    driver.run_until(100)
    result = session.press("G4")
    assert result.judgment == Judgment.MISS
    assert session.stats.miss == 1
    assert session.stats.combo == 0


def test_press_outside_playing_is_not_judged(make_session, audio, single_note_song):
    session = make_session(single_note_song, audio=audio)
    assert session.press("C4") is None
    assert session.stats.miss == 0
    assert audio.played == [note_by_name("C4").frequency]


def test_held_note_is_not_judged_again(make_session, driver, audio):
    song = Song(notes=[
        ScheduledNote(id="1", note_name="C4", start_time=500, duration=100),
        ScheduledNote(id="2", note_name="C4", start_time=550, duration=100),
    ])
    session = make_session(song, audio=audio)
    session.start()
    driver.run_until(500)
    assert session.press("C4").judgment == Judgment.PERFECT
    assert session.press("C4") is None
    assert len(audio.played) == 1
    assert session.stats.combo == 1

    session.release("C4")
    assert session.press("C4").judgment == Judgment.PERFECT
    assert session.stats.combo == 2


def test_failing_audio_does_not_break_judging(make_session, driver, single_note_song):
    class BrokenAudio:
        def play_note(self, frequency, duration=0.5):
            raise OSError("device gone")

    session = make_session(single_note_song, audio=BrokenAudio())
    session.start()
    driver.run_until(1000)
    assert session.press("C4").judgment == Judgment.PERFECT


def test_unplayed_note_is_swept_exactly_once(make_session, driver, single_note_song):
    session = make_session(single_note_song)
    session.start()
    driver.run_until(1300)
    assert session.stats.miss == 0
    assert session.song.notes[0].hit_state == HitState.PENDING

    driver.advance(1)
    assert session.current_time == 1301
    assert session.song.notes[0].hit_state == HitState.MISSED
    assert session.stats.miss == 1
    assert session.stats.combo == 0

    driver.run_until(2000)
    assert session.stats.miss == 1


def test_sweep_breaks_combo(make_session, driver):
    song = Song(notes=[
        ScheduledNote(id="1", note_name="C4", start_time=200, duration=100),
        ScheduledNote(id="2", note_name="D4", start_time=400, duration=100),
    ])
    session = make_session(song)
    session.start()
    driver.run_until(200)
    session.press("C4")
    assert session.stats.combo == 1
    while session.stats.miss == 0:
        driver.advance(16)
    assert session.stats.combo == 0
    assert session.stats.max_combo == 1
    assert session.song.notes[1].hit_state == HitState.MISSED


def test_finishes_after_end_padding(make_session, driver):
    session = make_session()
    session.start()
    driver.run_until(11_400)
    assert session.state == GameState.PLAYING

    driver.advance(1)
    assert session.current_time == 11_401
    assert session.state == GameState.FINISHED
    assert not driver.pending
    assert session.stats.miss == len(TWINKLE_TWINKLE.notes)


def test_stop_cancels_pending_tick(make_session, driver):
    session = make_session()
    session.start()
    driver.run_until(500)
    ticks = driver.ticks
    session.stop()
    assert session.state == GameState.FINISHED
    assert not driver.pending
    driver.advance(5000)
    assert driver.ticks == ticks
    assert session.current_time == 500


def test_late_tick_after_stop_changes_nothing(make_session, driver):
    session = make_session()
    session.start()
    driver.run_until(100)
    session.stop()
    before = session.snapshot()
    driver.set_time(20_000)
    assert session.tick() == []
    assert session.snapshot() == before


def test_replay_resets_everything(make_session, driver):
    session = make_session()
    session.start()
    driver.run_until(20)
    session.press("C4")
    driver.run_until(12_000)
    assert session.state == GameState.FINISHED
    assert session.stats.perfect == 1

    session.replay()
    assert session.state == GameState.PLAYING
    assert session.stats.score == 0
    assert session.stats.miss == 0
    assert session.history == ()
    assert all(n.hit_state == HitState.PENDING for n in session.song.notes)
    assert session.current_time == 0


def test_return_to_menu(make_session, driver):
    session = make_session()
    session.start()
    with pytest.raises(RuntimeError):
        session.return_to_menu()
    session.stop()
    session.return_to_menu()
    assert session.state == GameState.MENU


def test_clock_stall_is_clamped(make_session, driver):
    session = make_session()
    session.start()
    driver.run_until(100)
    driver.advance(60_000)
    assert session.current_time == 350
    assert session.state == GameState.PLAYING
    # Only the first note's window has closed
    assert session.stats.miss == 1


def test_history_is_sampled_during_play(make_session, driver):
    session = make_session()
    session.start()
    driver.run_until(600, step_ms=16)
    history = session.history
    assert history[0].time == 16
    times = [s.time for s in history]
    assert times == sorted(times)
    assert all(b - a >= 16 for a, b in zip(times, times[1:]))
    assert 10 <= len(history) <= 13


def test_reset_schedule_does_not_touch_stats(make_session, driver):
    session = make_session()
    session.start()
    driver.run_until(600)
    session.press("C4")
    stats_before = session.snapshot().stats
    reset_schedule(session.song)
    reset_schedule(session.song)
    assert all(n.hit_state == HitState.PENDING for n in session.song.notes)
    assert session.snapshot().stats == stats_before


def test_load_song_replaces_and_returns_to_menu(make_session, driver, single_note_song):
    session = make_session()
    session.start()
    session.load_song(single_note_song)
    assert session.state == GameState.MENU
    assert not driver.pending
    assert session.song.title == "Single"
    assert session.song is not single_note_song


def test_invalid_song_keeps_current(make_session):
    session = make_session()
    bad = Song(title="Bad", notes=[ScheduledNote(id="1", note_name="Z9", start_time=0, duration=10)])
    with pytest.raises(InvalidNoteError):
        session.load_song(bad)
    with pytest.raises(GenerationError):
        session.load_song(Song(title="Empty"))
    assert session.song.title == TWINKLE_TWINKLE.title
    assert len(session.song.notes) == 14


def test_snapshot_is_detached(make_session, driver):
    session = make_session()
    session.start()
    driver.run_until(100)
    snap = session.snapshot()
    snap.notes[0].hit_state = HitState.HIT
    snap.stats.score = 9999
    assert session.song.notes[0].hit_state == HitState.PENDING
    assert session.stats.score == 0


def test_guide_notes(make_session, driver):
    session = make_session()
    assert session.guide_notes() == frozenset()
    session.start()
    driver.run_until(1100)
    assert session.guide_notes() == frozenset({"G4"})


def test_random_play_invariants(make_session, driver):
    rng = random.Random(7)
    session = make_session()
    session.start()

    scores = [0]
    combos = [0]
    while session.state == GameState.PLAYING:
        driver.advance(rng.choice((8, 16, 33)))
        if rng.random() < 0.3:
            note = rng.choice(NOTE_NAMES[:10])
            before = session.stats.combo
            result = session.press(note)
            session.release(note)
            if result is not None and result.judgment == Judgment.MISS:
                assert session.stats.combo == 0
            elif result is not None:
                assert session.stats.combo == before + 1
        scores.append(session.stats.score)
        combos.append(session.stats.combo)

    assert scores == sorted(scores)
    assert session.stats.max_combo == max(combos)
    assert all(n.hit_state != HitState.PENDING for n in session.song.notes)
    hits = sum(1 for n in session.song.notes if n.hit_state == HitState.HIT)
    assert hits == session.stats.perfect + session.stats.good


def test_replay_forgets_keys_held_when_the_run_ended(make_session, driver, single_note_song):
    session = make_session(single_note_song)
    session.start()
    driver.run_until(200)
    session.press("C4")
    session.stop()
    assert session.held_notes == frozenset({"C4"})

    session.replay()
    assert session.held_notes == frozenset()
    driver.run_until(1000)
    result = session.press("C4")
    assert result is not None
    assert result.judgment == Judgment.PERFECT


def test_load_song_forgets_held_keys(make_session, driver, single_note_song):
    session = make_session()
    session.press("C4")
    session.load_song(single_note_song)
    assert session.held_notes == frozenset()
    session.start()
    driver.run_until(1000)
    assert session.press("C4").judgment == Judgment.PERFECT
