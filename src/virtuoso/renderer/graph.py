"""Score-over-time line graph for the results screen."""

from __future__ import annotations

from typing import Sequence

import pygame

from virtuoso.models import HistorySample
from virtuoso.renderer.colors import GRAPH_LINE, HUD_DIM, PANEL


def render_history_graph(
    surface: pygame.Surface,
    rect: pygame.Rect,
    history: Sequence[HistorySample],
) -> None:
    pygame.draw.rect(surface, PANEL, rect, border_radius=6)
    if len(history) < 2:
        return

    font = pygame.font.SysFont("monospace", 14)
    margin_l, margin_b, margin_t, margin_r = 48, 24, 12, 12
    plot = pygame.Rect(
        rect.x + margin_l,
        rect.y + margin_t,
        rect.w - margin_l - margin_r,
        rect.h - margin_t - margin_b,
    )

    t0, t1 = history[0].time, history[-1].time
    span = max(t1 - t0, 1.0)
    top = max(max(s.score for s in history), 100)

    def to_xy(s: HistorySample) -> tuple[int, int]:
        x = plot.x + (s.time - t0) / span * plot.w
        y = plot.bottom - s.score / top * plot.h
        return int(x), int(y)

    pygame.draw.line(surface, HUD_DIM, plot.bottomleft, plot.bottomright)
    pygame.draw.line(surface, HUD_DIM, plot.bottomleft, plot.topleft)
    pygame.draw.lines(surface, GRAPH_LINE, False, [to_xy(s) for s in history], 2)

    for label, pos in (
        (str(top), (rect.x + 4, plot.top)),
        ("0", (rect.x + 4, plot.bottom - 14)),
        (f"{int(t1 // 1000)}s", (plot.right - 24, plot.bottom + 4)),
    ):
        surface.blit(font.render(label, True, HUD_DIM), pos)
