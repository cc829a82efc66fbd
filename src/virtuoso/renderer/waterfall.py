"""Falling-note waterfall visualization."""

from __future__ import annotations

from typing import Iterable

import pygame

from virtuoso.config import FALL_SPEED
from virtuoso.models import HitState, ScheduledNote
from virtuoso.renderer.colors import HIT_LINE, NOTE_MISS, NOTE_NATURAL, NOTE_PERFECT, NOTE_SHARP
from virtuoso.renderer.keyboard import KEYBOARD_Y, is_sharp, key_width, key_x_position


def render_waterfall(
    surface: pygame.Surface,
    notes: Iterable[ScheduledNote],
    current_time: float,
) -> None:
    """Draw note bars falling towards the keyboard; a note reaches it at its start time."""
    pygame.draw.line(surface, HIT_LINE, (0, KEYBOARD_Y - 1), (surface.get_width(), KEYBOARD_Y - 1), 2)
    for note in notes:
        y_bottom = KEYBOARD_Y - (note.start_time - current_time) * FALL_SPEED
        bar_h = max(note.duration * FALL_SPEED, 6)
        if y_bottom - bar_h > KEYBOARD_Y or y_bottom < 0:
            continue
        _draw_note_bar(surface, note, y_bottom, bar_h)


def _draw_note_bar(surface: pygame.Surface, note: ScheduledNote, y_bottom: float, bar_h: float) -> None:
    w = key_width(note.note_name) * 0.85
    x = key_x_position(note.note_name) - w / 2

    if note.hit_state is HitState.HIT:
        color = NOTE_PERFECT
    elif note.hit_state is HitState.MISSED:
        color = NOTE_MISS
    else:
        color = NOTE_SHARP if is_sharp(note.note_name) else NOTE_NATURAL

    # Clip at the keyboard edge
    bottom = min(y_bottom, KEYBOARD_Y)
    rect = pygame.Rect(int(x), int(y_bottom - bar_h), int(w), int(max(bottom - (y_bottom - bar_h), 1)))
    pygame.draw.rect(surface, color, rect, border_radius=3)
