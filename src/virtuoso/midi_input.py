"""Player input: computer keyboard and MIDI keyboards, reduced to note press/release edges."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

import pygame

from virtuoso.notes import fold_into_range, note_by_key, note_by_midi

try:
    import rtmidi
    _HAS_RTMIDI = True
except ImportError:
    _HAS_RTMIDI = False


@dataclass
class LiveNoteEvent:
    note_name: str
    timestamp: float
    is_note_on: bool


class MidiDeviceError(Exception):
    """Raised when no MIDI device is found or connection fails."""


@runtime_checkable
class InputSource(Protocol):
    """Common interface for MIDI and keyboard input sources."""
    def poll(self) -> LiveNoteEvent | None: ...
    def close(self) -> None: ...


class KeyboardInput:
    """Computer keyboard mapped to piano notes (a w s e d f t g y h u j k o l).

    Held keys are tracked so OS auto-repeat never produces a second press.
    """

    def __init__(self) -> None:
        self._events: list[LiveNoteEvent] = []
        self._held: set[str] = set()

    @staticmethod
    def _note_for(event: pygame.event.Event) -> str | None:
        try:
            return note_by_key(pygame.key.name(event.key)).note
        except KeyError:
            return None

    def feed_event(self, event: pygame.event.Event) -> None:
        """Call from the game loop for each pygame event."""
        if event.type not in (pygame.KEYDOWN, pygame.KEYUP):
            return
        note = self._note_for(event)
        if note is None:
            return
        if event.type == pygame.KEYDOWN:
            if note not in self._held:
                self._held.add(note)
                self._events.append(LiveNoteEvent(note, time.monotonic(), is_note_on=True))
        else:
            self._held.discard(note)
            self._events.append(LiveNoteEvent(note, time.monotonic(), is_note_on=False))

    def poll(self) -> LiveNoteEvent | None:
        if self._events:
            return self._events.pop(0)
        return None

    def close(self) -> None:
        self._events.clear()
        self._held.clear()


class MidiInput:
    """MIDI keyboard input. Pitches outside the playable range fold by octaves."""

    def __init__(self, port_index: int | None = None) -> None:
        if not _HAS_RTMIDI:
            raise MidiDeviceError("python-rtmidi is not installed")
        self.midi_in = rtmidi.MidiIn()
        self._port_index = port_index
        self._open = False

    def open(self) -> None:
        ports = self.midi_in.get_ports()
        if not ports:
            raise MidiDeviceError("No MIDI input devices found")
        idx = self._port_index if self._port_index is not None else 0
        self.midi_in.open_port(idx)
        self._open = True

    def poll(self) -> LiveNoteEvent | None:
        """Non-blocking poll for the next MIDI message. Returns None if no message."""
        if not self._open:
            return None
        msg = self.midi_in.get_message()
        if msg is None:
            return None
        data, _delta = msg
        status = data[0] & 0xF0
        if status not in (0x80, 0x90):
            return None
        note = note_by_midi(fold_into_range(data[1])).note
        is_on = status == 0x90 and data[2] > 0
        return LiveNoteEvent(note, time.monotonic(), is_note_on=is_on)

    def close(self) -> None:
        if self._open:
            self.midi_in.close_port()
            self._open = False
