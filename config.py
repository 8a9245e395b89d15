"""Centralised configuration constants for Minibar."""
from __future__ import annotations

from pathlib import Path

from drink_catalog import DRINKS_FILE, load_drink_catalog

# ---------------------------------------------------------------------------
# Display
# ---------------------------------------------------------------------------
BOARD_W: int = 960
BOARD_H: int = 640
FPS: int = 60

# ---------------------------------------------------------------------------
# File paths
# ---------------------------------------------------------------------------
HIGH_SCORE_FILE: Path = Path("minibar_high_score.json")

# ---------------------------------------------------------------------------
# Seats: 11 around a horseshoe bar, 3 left, 5 front, 3 right.
# Coordinates are percentages of the board. The entry point is where the
# customer walks in from (off the edge of the bar area).
# ---------------------------------------------------------------------------
SEAT_LAYOUT: list[dict] = [
    {"id": 0, "side": "left", "x": 12, "y": 22, "entry_x": 2, "entry_y": 22},
    {"id": 1, "side": "left", "x": 12, "y": 37, "entry_x": 2, "entry_y": 37},
    {"id": 2, "side": "left", "x": 12, "y": 52, "entry_x": 2, "entry_y": 52},
    {"id": 3, "side": "front", "x": 24, "y": 75, "entry_x": 24, "entry_y": 92},
    {"id": 4, "side": "front", "x": 37, "y": 75, "entry_x": 37, "entry_y": 92},
    {"id": 5, "side": "front", "x": 50, "y": 75, "entry_x": 50, "entry_y": 92},
    {"id": 6, "side": "front", "x": 63, "y": 75, "entry_x": 63, "entry_y": 92},
    {"id": 7, "side": "front", "x": 76, "y": 75, "entry_x": 76, "entry_y": 92},
    {"id": 8, "side": "right", "x": 88, "y": 22, "entry_x": 98, "entry_y": 22},
    {"id": 9, "side": "right", "x": 88, "y": 37, "entry_x": 98, "entry_y": 37},
    {"id": 10, "side": "right", "x": 88, "y": 52, "entry_x": 98, "entry_y": 52},
]

# Inner-bar service positions, indexed by seat id
BAR_SERVICE_POSITIONS: list[tuple[float, float]] = [
    (24, 22),
    (24, 37),
    (24, 52),
    (28, 62),
    (39, 62),
    (50, 62),
    (61, 62),
    (72, 62),
    (76, 22),
    (76, 37),
    (76, 52),
]

# ---------------------------------------------------------------------------
# Drinks (data-driven; barrel order follows catalog order)
# ---------------------------------------------------------------------------
DRINKS = load_drink_catalog(DRINKS_FILE)
DRINK_KINDS: list[str] = list(DRINKS)
DRINK_LABELS: dict[str, str] = {key: drink.label for key, drink in DRINKS.items()}
DRINK_COLORS: dict[str, str] = {key: drink.color for key, drink in DRINKS.items()}
BARREL_POSITIONS: dict[str, tuple[float, float]] = {key: drink.barrel for key, drink in DRINKS.items()}

# ---------------------------------------------------------------------------
# Timing
# ---------------------------------------------------------------------------
CUSTOMER_MAX_WAIT: float = 12.0        # seconds of patience once seated
INITIAL_SPAWN_INTERVAL: float = 4.0    # seconds between spawns at round start
MIN_SPAWN_INTERVAL: float = 1.5        # spawn interval floor
DIFFICULTY_RAMP_RATE: float = 0.05     # spawn interval decrease per elapsed second
WALK_DURATION: float = 1.2             # seconds to walk in or out
FEEDBACK_DURATION: float = 0.8         # seconds of feedback before walking out
MAX_FRAME_DT: float = 0.1              # largest frame step accepted from the clock

# ---------------------------------------------------------------------------
# Rating
# ---------------------------------------------------------------------------
INITIAL_RATING: float = 2.5
MAX_RATING: int = 5
RATING_CORRECT: float = 0.25
RATING_WRONG: float = -1.0
RATING_TIMEOUT: float = -0.5

# ---------------------------------------------------------------------------
# Score
# ---------------------------------------------------------------------------
SCORE_PER_SERVE: int = 50
FAST_SERVE_MULTIPLIER: int = 2
FAST_SERVE_THRESHOLD: float = 0.75     # remaining-wait ratio that must be exceeded

# ---------------------------------------------------------------------------
# Bar workers
# ---------------------------------------------------------------------------
WORKER_COUNT: int = 3
WORKER_SPEED: float = 28.0             # board percent per second
WORKER_PAUSE_MIN: float = 0.4
WORKER_PAUSE_MAX: float = 1.0
WORKER_COLOR: str = "#e0e0e0"

# ---------------------------------------------------------------------------
# Customers
# ---------------------------------------------------------------------------
# No yellow/brown/orange: those overlap with the drink colours.
CUSTOMER_COLORS: list[str] = [
    "#e06090",
    "#50b0e0",
    "#70c070",
    "#b050e0",
    "#c070c0",
    "#e08080",
    "#60d0b0",
    "#a0d0f0",
]

# Elapsed-wait fractions at which the order bubble escalates
URGENCY_THRESHOLDS: dict[str, float] = {
    "warn": 0.25,
    "orange": 0.5,
    "red": 0.75,
    "critical": 0.9,
}
