"""Audio synthesis via FluidSynth + SoundFonts."""

from __future__ import annotations

import math
import sys
import time
from pathlib import Path

import fluidsynth


def _detect_audio_driver() -> str:
    """Auto-detect the appropriate FluidSynth audio driver for the platform."""
    if sys.platform == "linux":
        return "pulseaudio"
    elif sys.platform == "darwin":
        return "coreaudio"
    elif sys.platform == "win32":
        return "dsound"
    return "alsa"


def frequency_to_midi(frequency: float) -> int:
    """Nearest MIDI pitch for a frequency in Hz (A4 = 440 Hz = 69)."""
    return int(round(69 + 12 * math.log2(frequency / 440.0)))


class AudioEngine:
    """Wraps FluidSynth for fire-and-forget note playback."""

    def __init__(
        self,
        soundfont_path: str | Path | None = None,
        velocity: int = 90,
        channel: int = 0,
    ) -> None:
        self.fs = fluidsynth.Synth(gain=0.5)
        self.fs.start(driver=_detect_audio_driver())
        self.velocity = velocity
        self.channel = channel
        self._sfid: int | None = None
        self._pending_offs: list[tuple[float, int]] = []  # (off_time, pitch)
        if soundfont_path:
            self.load_soundfont(soundfont_path)

    def load_soundfont(self, path: str | Path) -> None:
        self._sfid = self.fs.sfload(str(path))
        self.fs.program_select(self.channel, self._sfid, 0, 0)

    def play_note(self, frequency: float, duration: float = 0.5) -> None:
        """Start a note now and release it ``duration`` seconds later."""
        pitch = frequency_to_midi(frequency)
        self.fs.noteon(self.channel, pitch, self.velocity)
        self._pending_offs.append((time.monotonic() + duration, pitch))

    def flush_pending_offs(self) -> None:
        """Call each frame to release notes whose duration has elapsed."""
        now = time.monotonic()
        remaining: list[tuple[float, int]] = []
        for off_time, pitch in self._pending_offs:
            if now >= off_time:
                self.fs.noteoff(self.channel, pitch)
            else:
                remaining.append((off_time, pitch))
        self._pending_offs = remaining

    def all_notes_off(self) -> None:
        for _, pitch in self._pending_offs:
            self.fs.noteoff(self.channel, pitch)
        self._pending_offs.clear()

    def shutdown(self) -> None:
        self.all_notes_off()
        self.fs.delete()
