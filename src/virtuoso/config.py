"""Global constants and default settings."""

WINDOW_WIDTH = 1024
WINDOW_HEIGHT = 720
FPS = 60
WINDOW_TITLE = "Virtuoso"

# Judgment timing (milliseconds)
HIT_WINDOW_MS = 300
PERFECT_THRESHOLD_MS = 100

# Scoring: base points plus a bonus per combo step already held
PERFECT_BASE_POINTS = 100
PERFECT_COMBO_BONUS = 10
GOOD_BASE_POINTS = 50
GOOD_COMBO_BONUS = 5

# Session timing (milliseconds of song time)
END_PADDING_MS = 2000
HISTORY_INTERVAL_MS = 50

# A single tick longer than this is treated as a stall (tab hidden, debugger, ...)
MAX_TICK_DELTA_MS = 250

# Keys light up when a pending note is this close
GUIDE_WINDOW_MS = 200

# Waterfall
FALL_SPEED = 0.2  # pixels per ms

# Song generation
DEFAULT_TOPIC = "Pop hits"
GENERATED_SONG_MIN_MS = 10_000
GENERATED_SONG_MAX_MS = 15_000
