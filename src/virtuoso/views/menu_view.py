"""Main menu: pick or generate a song, then play it."""

from __future__ import annotations

import logging
from pathlib import Path

import pygame

from virtuoso.generation import Difficulty, GenerationError, GenerationJob
from virtuoso.library import default_song
from virtuoso.renderer import colors as colors_mod
from virtuoso.song_loader import SongLoadError, load_song
from virtuoso.views.base import ViewAction, ViewContext

logger = logging.getLogger(__name__)

_RETRY_MESSAGE = "AI was busy composing! Please try again."
_DIFFICULTIES = list(Difficulty)


class MenuView:
    name = "menu"
    display_name = "Main Menu"

    def __init__(self) -> None:
        self._context: ViewContext | None = None
        self._song_files: list[Path | None] = [None]  # None = built-in song
        self._selected = 0
        self._topic = ""
        self._difficulty = Difficulty.EASY
        self._job: GenerationJob | None = None
        self._message = ""
        self._font: pygame.font.Font | None = None
        self._title_font: pygame.font.Font | None = None

    def on_enter(self, context: ViewContext) -> None:
        self._context = context
        self._topic = context.topic
        self._difficulty = context.difficulty
        self._font = pygame.font.SysFont("monospace", 20)
        self._title_font = pygame.font.SysFont("monospace", 40, bold=True)
        self._scan_songs()
        pygame.key.start_text_input()

    def on_exit(self) -> None:
        pygame.key.stop_text_input()

    def _scan_songs(self) -> None:
        self._song_files = [None]
        if not self._context or not self._context.songs_dir:
            return
        songs_path = Path(self._context.songs_dir)
        if songs_path.is_dir():
            for ext in ("*.mid", "*.midi"):
                self._song_files.extend(sorted(songs_path.glob(ext)))

    def handle_event(self, event: pygame.event.Event) -> ViewAction | None:
        if event.type == pygame.TEXTINPUT:
            self._topic += event.text
            return None
        if event.type != pygame.KEYDOWN:
            return None

        if event.key == pygame.K_ESCAPE:
            return ViewAction(kind="quit")
        elif event.key == pygame.K_BACKSPACE:
            self._topic = self._topic[:-1]
        elif event.key == pygame.K_TAB:
            idx = _DIFFICULTIES.index(self._difficulty)
            self._difficulty = _DIFFICULTIES[(idx + 1) % len(_DIFFICULTIES)]
        elif event.key in (pygame.K_LEFT, pygame.K_RIGHT):
            step = 1 if event.key == pygame.K_RIGHT else -1
            self._selected = (self._selected + step) % len(self._song_files)
            self._load_selected()
        elif event.key == pygame.K_F2:
            self._generate()
        elif event.key == pygame.K_RETURN:
            return ViewAction(
                kind="switch",
                target="play",
                context_patch={"topic": self._topic, "difficulty": self._difficulty},
            )
        return None

    def _load_selected(self) -> None:
        if self._context is None:
            return
        path = self._song_files[self._selected]
        try:
            song = default_song() if path is None else load_song(path)
            self._context.session.load_song(song)
            self._message = ""
        except (SongLoadError, GenerationError) as exc:
            logger.warning("cannot use %s: %s", path, exc)
            self._message = f"Could not load {path.name if path else 'song'}"

    def _generate(self) -> None:
        if self._context is None or self._job is not None:
            return
        self._message = "Composing..."
        self._job = GenerationJob(
            self._context.generator, self._topic, self._difficulty
        ).start()

    def update(self, dt: float) -> ViewAction | None:
        if self._job is not None and self._job.done and self._context is not None:
            job, self._job = self._job, None
            try:
                self._context.session.load_song(job.result())
                self._message = ""
            except GenerationError:
                self._message = _RETRY_MESSAGE
        return None

    def draw(self, surface: pygame.Surface) -> None:
        if not self._font or not self._title_font or not self._context:
            return

        surface.fill(colors_mod.BG)
        w, h = surface.get_size()
        song = self._context.session.song

        title = self._title_font.render("Virtuoso", True, colors_mod.KEY_PRESSED)
        surface.blit(title, (w // 2 - title.get_width() // 2, 40))

        rows = [
            (f"Song: < {song.title} >", colors_mod.HUD_TEXT),
            (f"  {song.description}", colors_mod.HUD_DIM),
            (f"  {len(song.notes)} notes | {song.bpm:.0f} bpm | {song.difficulty}", colors_mod.HUD_DIM),
            ("", colors_mod.HUD_DIM),
            (f"Generate topic: {self._topic}_", colors_mod.HUD_TEXT),
            (f"Difficulty: < {self._difficulty.value} >  (Tab to cycle)", colors_mod.NOTE_GOOD),
        ]
        y = 130
        for text, color in rows:
            surface.blit(self._font.render(text, True, color), (60, y))
            y += 32

        if self._message:
            color = colors_mod.NOTE_MISS if self._message == _RETRY_MESSAGE else colors_mod.KEY_GUIDE
            surface.blit(self._font.render(self._message, True, color), (60, y + 16))

        legend = self._font.render(
            "Enter: play | Left/Right: song | F2: generate | Esc: quit", True, colors_mod.HUD_DIM
        )
        surface.blit(legend, (60, h - 50))
