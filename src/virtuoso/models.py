"""Core data models shared across the engine."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum, auto


class NoteType(Enum):
    NATURAL = auto()
    SHARP = auto()


class HitState(Enum):
    PENDING = auto()
    HIT = auto()
    MISSED = auto()


class Judgment(Enum):
    PERFECT = auto()
    GOOD = auto()
    MISS = auto()


class GameState(Enum):
    MENU = auto()
    PLAYING = auto()
    FINISHED = auto()


class HitStateError(RuntimeError):
    """Raised when a note that already left PENDING is transitioned again."""


@dataclass(frozen=True)
class NoteDefinition:
    """A playable key. Loaded once, never mutated."""

    note: str  # e.g. "C4"
    frequency: float  # Hz
    type: NoteType
    keyboard_key: str
    midi: int


@dataclass
class ScheduledNote:
    """One note of a song's schedule."""

    id: str
    note_name: str
    start_time: float  # ms from song start
    duration: float  # ms
    hit_state: HitState = HitState.PENDING

    @property
    def end_time(self) -> float:
        return self.start_time + self.duration

    @property
    def pending(self) -> bool:
        return self.hit_state is HitState.PENDING

    def mark_hit(self) -> None:
        self._transition(HitState.HIT)

    def mark_missed(self) -> None:
        self._transition(HitState.MISSED)

    def _transition(self, target: HitState) -> None:
        if self.hit_state is not HitState.PENDING:
            raise HitStateError(
                f"note {self.id} ({self.note_name}) is already {self.hit_state.name}"
            )
        self.hit_state = target


@dataclass
class Song:
    """A playable chart: metadata plus an ordered note schedule."""

    title: str = "Untitled"
    description: str = ""
    bpm: float = 100.0
    difficulty: str = "Easy"
    notes: list[ScheduledNote] = field(default_factory=list)

    @property
    def duration(self) -> float:
        """End of the latest note, in ms."""
        return max((n.end_time for n in self.notes), default=0.0)

    def fresh_copy(self) -> Song:
        """Independent copy with every note back to PENDING."""
        return replace(
            self,
            notes=[replace(n, hit_state=HitState.PENDING) for n in self.notes],
        )


@dataclass
class HitResult:
    judgment: Judgment
    note: ScheduledNote | None  # None when nothing was eligible
    played_note: str
    time_diff_ms: float | None  # absolute distance to the matched note
    points: int = 0


@dataclass
class PerformanceStats:
    score: int = 0
    perfect: int = 0
    good: int = 0
    miss: int = 0
    combo: int = 0
    max_combo: int = 0

    @property
    def total_judged(self) -> int:
        return self.perfect + self.good + self.miss

    @property
    def accuracy_pct(self) -> float:
        total = self.total_judged
        return round((self.perfect + self.good) / total * 100.0, 1) if total else 0.0


@dataclass(frozen=True)
class HistorySample:
    time: float  # ms of song time
    score: int
