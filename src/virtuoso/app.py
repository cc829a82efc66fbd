"""Top-level application: initializes pygame, owns the session, and runs the frame loop."""

from __future__ import annotations

import logging
from pathlib import Path

import pygame

from virtuoso.clock import FrameDriver
from virtuoso.config import DEFAULT_TOPIC, FPS, WINDOW_HEIGHT, WINDOW_TITLE, WINDOW_WIDTH
from virtuoso.generation import Difficulty, ProceduralSongGenerator, SongGenerator
from virtuoso.midi_input import KeyboardInput
from virtuoso.models import Song
from virtuoso.session import Session
from virtuoso.views.base import ViewContext, ViewManager
from virtuoso.views.menu_view import MenuView
from virtuoso.views.play_view import PlayView
from virtuoso.views.results_view import ResultsView

logger = logging.getLogger(__name__)


class App:
    def __init__(
        self,
        song: Song | None = None,
        songs_dir: str = "",
        soundfont: str | Path | None = None,
        generator: SongGenerator | None = None,
        topic: str = DEFAULT_TOPIC,
        difficulty: Difficulty = Difficulty.EASY,
    ) -> None:
        pygame.init()
        self.screen = pygame.display.set_mode((WINDOW_WIDTH, WINDOW_HEIGHT))
        pygame.display.set_caption(WINDOW_TITLE)
        self.clock = pygame.time.Clock()

        # Optional subsystems degrade to None
        self._midi_input = self._try_midi()
        self._audio = self._try_audio(soundfont)
        self._keyboard_input = KeyboardInput()
        self._driver = FrameDriver()

        self.session = Session(song, driver=self._driver, audio=self._audio)

        self.context = ViewContext(
            screen_size=(WINDOW_WIDTH, WINDOW_HEIGHT),
            session=self.session,
            generator=generator or ProceduralSongGenerator(),
            midi_input=self._midi_input,
            audio=self._audio,
            keyboard_input=self._keyboard_input,
            songs_dir=songs_dir,
            topic=topic,
            difficulty=difficulty,
        )

        self.views = ViewManager(self.context)
        self.views.register(MenuView)
        self.views.register(PlayView)
        self.views.register(ResultsView)
        self.views.push("menu")

    def run(self) -> None:
        running = True
        while running:
            dt = self.clock.tick(FPS) / 1000.0
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                else:
                    self._keyboard_input.feed_event(event)
                    if not self.views.handle_event(event):
                        running = False
            if running:
                self._driver.pump()
                if not self.views.update(dt):
                    running = False
                self._discard_unhandled_input()
            if self._audio:
                self._audio.flush_pending_offs()
            self.views.draw(self.screen)
            pygame.display.flip()

        self._cleanup()
        pygame.quit()

    def _discard_unhandled_input(self) -> None:
        # Views outside gameplay ignore notes; keep the queues from growing
        for source in self.context.input_sources():
            while source.poll() is not None:
                pass

    def _cleanup(self) -> None:
        self.session.stop()
        while self.views.active_view:
            self.views.pop()
        if self._midi_input:
            self._midi_input.close()
        if self._audio:
            self._audio.shutdown()

    @staticmethod
    def _try_midi():
        try:
            from virtuoso.midi_input import MidiInput
            mi = MidiInput()
            mi.open()
            return mi
        except Exception as exc:
            logger.info("MIDI input unavailable: %s", exc)
            return None

    @staticmethod
    def _try_audio(soundfont: str | Path | None):
        try:
            from virtuoso.audio import AudioEngine
            return AudioEngine(soundfont)
        except Exception as exc:
            logger.warning("audio unavailable: %s", exc)
            return None
