"""Render the piano keyboard at the bottom of the screen."""

from __future__ import annotations

import pygame

from virtuoso.config import WINDOW_HEIGHT, WINDOW_WIDTH
from virtuoso.models import NoteType
from virtuoso.notes import PIANO_NOTES, note_by_name
from virtuoso.renderer.colors import BLACK_KEY, HUD_DIM, KEY_GUIDE, KEY_PRESSED, WHITE_KEY

KEYBOARD_HEIGHT = 180
KEYBOARD_Y = WINDOW_HEIGHT - KEYBOARD_HEIGHT
WHITE_KEY_WIDTH = 80

_NATURAL_COUNT = sum(1 for n in PIANO_NOTES if n.type is NoteType.NATURAL)
KEYBOARD_X = (WINDOW_WIDTH - _NATURAL_COUNT * WHITE_KEY_WIDTH) / 2


def is_sharp(note_name: str) -> bool:
    return note_by_name(note_name).type is NoteType.SHARP


def _naturals_before(note_name: str) -> int:
    count = 0
    for n in PIANO_NOTES:
        if n.note == note_name:
            break
        if n.type is NoteType.NATURAL:
            count += 1
    return count


def key_width(note_name: str) -> float:
    return WHITE_KEY_WIDTH * 0.6 if is_sharp(note_name) else WHITE_KEY_WIDTH


def key_x_position(note_name: str) -> float:
    """Return the x center of a key."""
    idx = _naturals_before(note_name)
    if is_sharp(note_name):
        # Sits on the boundary after the preceding natural
        return KEYBOARD_X + idx * WHITE_KEY_WIDTH
    return KEYBOARD_X + idx * WHITE_KEY_WIDTH + WHITE_KEY_WIDTH / 2


def render_keyboard(
    surface: pygame.Surface,
    pressed: frozenset[str] | set[str],
    guides: frozenset[str] | set[str] = frozenset(),
) -> None:
    """Draw the playable keys, naturals first so sharps sit on top."""
    font = pygame.font.SysFont("monospace", 16)

    for sharp_pass in (False, True):
        for n in PIANO_NOTES:
            if (n.type is NoteType.SHARP) != sharp_pass:
                continue
            w = key_width(n.note)
            x = key_x_position(n.note) - w / 2
            h = KEYBOARD_HEIGHT * 0.6 if sharp_pass else KEYBOARD_HEIGHT
            if n.note in pressed:
                color = KEY_PRESSED
            elif n.note in guides:
                color = KEY_GUIDE
            else:
                color = BLACK_KEY if sharp_pass else WHITE_KEY
            rect = pygame.Rect(int(x), KEYBOARD_Y, int(w) - 1, int(h))
            pygame.draw.rect(surface, color, rect, border_radius=4)

            label = font.render(n.keyboard_key.upper(), True, HUD_DIM)
            surface.blit(label, (rect.centerx - label.get_width() // 2, rect.bottom - 24))
