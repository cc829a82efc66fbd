"""Performance report shown when a session finishes."""

from __future__ import annotations

import pygame

from virtuoso.renderer import colors as colors_mod
from virtuoso.renderer.graph import render_history_graph
from virtuoso.views.base import ViewAction, ViewContext


class ResultsView:
    name = "results"
    display_name = "Performance Report"

    def __init__(self) -> None:
        self._context: ViewContext | None = None
        self._font: pygame.font.Font | None = None
        self._big_font: pygame.font.Font | None = None

    def on_enter(self, context: ViewContext) -> None:
        self._context = context
        self._font = pygame.font.SysFont("monospace", 20)
        self._big_font = pygame.font.SysFont("monospace", 34, bold=True)

    def on_exit(self) -> None:
        pass

    def handle_event(self, event: pygame.event.Event) -> ViewAction | None:
        if event.type != pygame.KEYDOWN or self._context is None:
            return None
        if event.key in (pygame.K_RETURN, pygame.K_r):
            # The play view starts a fresh run on entry
            return ViewAction(kind="switch", target="play")
        if event.key in (pygame.K_ESCAPE, pygame.K_m):
            self._context.session.return_to_menu()
            return ViewAction(kind="switch", target="menu")
        return None

    def update(self, dt: float) -> ViewAction | None:
        return None

    def draw(self, surface: pygame.Surface) -> None:
        if not self._context or not self._font or not self._big_font:
            return
        snap = self._context.session.snapshot()
        stats = snap.stats
        w, h = surface.get_size()

        surface.fill(colors_mod.BG)
        title = self._big_font.render("Performance Report", True, colors_mod.KEY_GUIDE)
        surface.blit(title, (w // 2 - title.get_width() // 2, 40))

        columns = [
            ("PERFECT", stats.perfect, colors_mod.NOTE_PERFECT),
            ("GOOD", stats.good, colors_mod.NOTE_GOOD),
            ("MISS", stats.miss, colors_mod.NOTE_MISS),
        ]
        col_w = w // (len(columns) + 1)
        for i, (label, value, color) in enumerate(columns, start=1):
            num = self._big_font.render(str(value), True, color)
            cap = self._font.render(label, True, colors_mod.HUD_DIM)
            cx = i * col_w
            surface.blit(num, (cx - num.get_width() // 2, 120))
            surface.blit(cap, (cx - cap.get_width() // 2, 165))

        summary = self._font.render(
            f"Score {stats.score}   Max combo {stats.max_combo}   Accuracy {stats.accuracy_pct:.0f}%",
            True, colors_mod.HUD_TEXT,
        )
        surface.blit(summary, (w // 2 - summary.get_width() // 2, 215))

        render_history_graph(surface, pygame.Rect(w // 2 - 300, 260, 600, 300), snap.history)

        legend = self._font.render("Enter: replay | Esc: menu", True, colors_mod.HUD_DIM)
        surface.blit(legend, (w // 2 - legend.get_width() // 2, h - 50))
