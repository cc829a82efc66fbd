"""Gameplay view: falling notes, keyboard, and HUD over a running session."""

from __future__ import annotations

import pygame

from virtuoso.models import GameState, HitResult
from virtuoso.renderer import colors as colors_mod
from virtuoso.renderer.hud import render_hud
from virtuoso.renderer.keyboard import render_keyboard
from virtuoso.renderer.waterfall import render_waterfall
from virtuoso.views.base import ViewAction, ViewContext

# How long a judgment label stays on screen (seconds)
_FEEDBACK_SECONDS = 0.6


class PlayView:
    name = "play"
    display_name = "Play"

    def __init__(self) -> None:
        self._context: ViewContext | None = None
        self._last_result: HitResult | None = None
        self._feedback_left = 0.0
        self._font: pygame.font.Font | None = None

    def on_enter(self, context: ViewContext) -> None:
        self._context = context
        self._font = pygame.font.SysFont("monospace", 18)
        self._last_result = None
        if context.session.state is not GameState.PLAYING:
            context.session.start()

    def on_exit(self) -> None:
        if self._context and self._context.audio:
            self._context.audio.all_notes_off()

    def handle_event(self, event: pygame.event.Event) -> ViewAction | None:
        if event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE and self._context:
            self._context.session.stop()
            return ViewAction(kind="switch", target="results")
        return None

    def update(self, dt: float) -> ViewAction | None:
        if self._context is None:
            return None
        session = self._context.session

        for source in self._context.input_sources():
            while (evt := source.poll()) is not None:
                if evt.is_note_on:
                    result = session.press(evt.note_name)
                    if result is not None:
                        self._last_result = result
                        self._feedback_left = _FEEDBACK_SECONDS
                else:
                    session.release(evt.note_name)

        self._feedback_left = max(0.0, self._feedback_left - dt)
        if session.state is GameState.FINISHED:
            return ViewAction(kind="switch", target="results")
        return None

    def draw(self, surface: pygame.Surface) -> None:
        if self._context is None:
            return
        session = self._context.session
        snap = session.snapshot()

        surface.fill(colors_mod.BG)
        render_waterfall(surface, snap.notes, snap.current_time)
        render_keyboard(surface, snap.held_notes, session.guide_notes())
        render_hud(surface, snap.stats, self._last_result if self._feedback_left > 0 else None)

        if self._font:
            text = self._font.render(snap.title, True, colors_mod.HUD_DIM)
            surface.blit(text, (surface.get_width() - text.get_width() - 10, 10))
