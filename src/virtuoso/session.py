"""Play session: owns the song, clock, stats and history, and runs the tick loop.

Only two paths mutate a session: the tick path (``tick``) and the input path
(``press``/``release``). Both run under one lock, so callers on other threads
see either the state before a judgment or tick, or the state after it.
Renderers and other collaborators read ``snapshot()``.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, replace
from typing import Callable, Protocol, runtime_checkable

from virtuoso.clock import GameClock, TickDriver, monotonic_ms
from virtuoso.config import END_PADDING_MS, GUIDE_WINDOW_MS
from virtuoso.evaluator import judge_and_score, sweep_misses
from virtuoso.generation import validate_song
from virtuoso.history import HistoryRecorder
from virtuoso.library import default_song
from virtuoso.models import (
    GameState,
    HistorySample,
    HitResult,
    PerformanceStats,
    ScheduledNote,
    Song,
)
from virtuoso.notes import note_by_name
from virtuoso.schedule import end_time, reset_schedule

logger = logging.getLogger(__name__)


@runtime_checkable
class AudioSink(Protocol):
    """Fire-and-forget note playback."""

    def play_note(self, frequency: float, duration: float = 0.5) -> None: ...


@dataclass(frozen=True)
class SessionSnapshot:
    state: GameState
    current_time: float
    title: str
    notes: tuple[ScheduledNote, ...]
    stats: PerformanceStats
    history: tuple[HistorySample, ...]
    held_notes: frozenset[str]


class Session:
    def __init__(
        self,
        song: Song | None = None,
        *,
        driver: TickDriver | None = None,
        time_source: Callable[[], float] = monotonic_ms,
        audio: AudioSink | None = None,
        clock: GameClock | None = None,
    ) -> None:
        self._lock = threading.RLock()
        self._driver = driver
        self._now = time_source
        self.audio = audio
        self._clock = clock or GameClock()
        self._song = validate_song(song).fresh_copy() if song is not None else default_song()
        self._state = GameState.MENU
        self._stats = PerformanceStats()
        self._history = HistoryRecorder()
        self._held: set[str] = set()

    # -- read access ---------------------------------------------------

    @property
    def state(self) -> GameState:
        return self._state

    @property
    def song(self) -> Song:
        return self._song

    @property
    def stats(self) -> PerformanceStats:
        return self._stats

    @property
    def history(self) -> tuple[HistorySample, ...]:
        return self._history.samples

    @property
    def current_time(self) -> float:
        return self._clock.current_time

    @property
    def held_notes(self) -> frozenset[str]:
        return frozenset(self._held)

    def snapshot(self) -> SessionSnapshot:
        with self._lock:
            return SessionSnapshot(
                state=self._state,
                current_time=self._clock.current_time,
                title=self._song.title,
                notes=tuple(replace(n) for n in self._song.notes),
                stats=replace(self._stats),
                history=self._history.samples,
                held_notes=frozenset(self._held),
            )

    def guide_notes(self) -> frozenset[str]:
        """Pitches with a pending note close enough to light up their key."""
        with self._lock:
            if self._state is not GameState.PLAYING:
                return frozenset()
            now = self._clock.current_time
            return frozenset(
                n.note_name for n in self._song.notes
                if n.pending and abs(n.start_time - now) < GUIDE_WINDOW_MS
            )

    # -- transitions ---------------------------------------------------

    def start(self) -> None:
        """MENU or FINISHED -> PLAYING with a zeroed clock, stats and history."""
        with self._lock:
            if self._state is GameState.PLAYING:
                raise RuntimeError("session is already playing")
            self._clock.start(self._now())
            self._stats = PerformanceStats()
            self._history.reset()
            reset_schedule(self._song)
            self._held.clear()
            self._state = GameState.PLAYING
            logger.info("playing %r (%d notes)", self._song.title, len(self._song.notes))
            self._schedule_tick()

    def replay(self) -> None:
        self.start()

    def stop(self) -> None:
        """End a running session early. The pending tick is cancelled."""
        with self._lock:
            self._cancel_tick()
            if self._state is GameState.PLAYING:
                self._finish("stopped")

    def return_to_menu(self) -> None:
        with self._lock:
            if self._state is GameState.PLAYING:
                raise RuntimeError("stop the session before returning to the menu")
            self._state = GameState.MENU

    def load_song(self, song: Song) -> None:
        """Replace the song. Raises GenerationError and keeps the old one if invalid."""
        validate_song(song)
        with self._lock:
            self._cancel_tick()
            self._song = song.fresh_copy()
            self._held.clear()
            self._state = GameState.MENU
            logger.info("loaded song %r (%d notes)", song.title, len(song.notes))

    # -- tick path -----------------------------------------------------

    def tick(self) -> list[ScheduledNote]:
        """Advance song time one step. Returns the notes missed this tick."""
        with self._lock:
            if self._state is not GameState.PLAYING:
                return []
            sample = self._clock.advance(self._now())
            missed = sweep_misses(self._song, self._stats, sample.current_time)
            self._history.sample(sample.current_time, self._stats.score)
            if sample.current_time > end_time(self._song, END_PADDING_MS):
                self._finish("song complete")
            else:
                self._schedule_tick()
            return missed

    # -- input path ----------------------------------------------------

    def press(self, note_name: str) -> HitResult | None:
        """Handle one press edge. Judged only while PLAYING.

        A press of a note that is still held is ignored.
        """
        with self._lock:
            if note_name in self._held:
                return None
            self._held.add(note_name)
            self._play(note_name)
            if self._state is not GameState.PLAYING:
                return None
            current_time = self._clock.peek(self._now())
            return judge_and_score(self._song, self._stats, note_name, current_time)

    def release(self, note_name: str) -> None:
        with self._lock:
            self._held.discard(note_name)

    # -- internals -----------------------------------------------------

    def _play(self, note_name: str) -> None:
        if self.audio is None:
            return
        try:
            frequency = note_by_name(note_name).frequency
        except KeyError:
            return
        try:
            self.audio.play_note(frequency)
        except Exception as exc:
            logger.warning("audio playback failed for %s: %s", note_name, exc)

    def _finish(self, reason: str) -> None:
        self._cancel_tick()
        self._state = GameState.FINISHED
        s = self._stats
        logger.info(
            "session finished (%s): score=%d perfect=%d good=%d miss=%d max_combo=%d",
            reason, s.score, s.perfect, s.good, s.miss, s.max_combo,
        )

    def _schedule_tick(self) -> None:
        if self._driver is not None:
            self._driver.schedule(self.tick)

    def _cancel_tick(self) -> None:
        if self._driver is not None:
            self._driver.cancel()
