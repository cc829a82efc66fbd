"""Heads-up display: score, combo, accuracy, and the last judgment."""

from __future__ import annotations

import pygame

from virtuoso.models import HitResult, Judgment, PerformanceStats
from virtuoso.renderer.colors import HUD_TEXT, KEY_GUIDE, NOTE_GOOD, NOTE_MISS, NOTE_PERFECT

_JUDGMENT_COLORS = {
    Judgment.PERFECT: NOTE_PERFECT,
    Judgment.GOOD: NOTE_GOOD,
    Judgment.MISS: NOTE_MISS,
}


def render_hud(
    surface: pygame.Surface,
    stats: PerformanceStats,
    last_result: HitResult | None = None,
) -> None:
    font = pygame.font.SysFont("monospace", 20)

    lines = [
        (f"Score: {stats.score}", HUD_TEXT),
        (f"Combo: x{stats.combo}", KEY_GUIDE if stats.combo > 10 else HUD_TEXT),
        (f"Accuracy: {stats.accuracy_pct:.0f}%", HUD_TEXT),
    ]

    y = 10
    for line, color in lines:
        text = font.render(line, True, color)
        surface.blit(text, (10, y))
        y += 28

    if last_result is not None:
        big = pygame.font.SysFont("monospace", 32, bold=True)
        text = big.render(last_result.judgment.name, True, _JUDGMENT_COLORS[last_result.judgment])
        surface.blit(text, (surface.get_width() // 2 - text.get_width() // 2, 20))
