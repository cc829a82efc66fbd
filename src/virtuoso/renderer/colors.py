"""Color palette."""

# RGB tuples
BG = (15, 23, 42)
PANEL = (30, 41, 59)
WHITE_KEY = (240, 240, 240)
BLACK_KEY = (30, 30, 30)
KEY_PRESSED = (34, 211, 238)
KEY_GUIDE = (250, 204, 21)
NOTE_NATURAL = (66, 135, 245)
NOTE_SHARP = (168, 85, 247)
NOTE_PERFECT = (80, 220, 100)
NOTE_GOOD = (96, 165, 250)
NOTE_MISS = (220, 60, 60)
HIT_LINE = (148, 163, 184)
HUD_TEXT = (220, 220, 220)
HUD_DIM = (120, 120, 140)
GRAPH_LINE = (59, 130, 246)
