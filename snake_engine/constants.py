from __future__ import annotations

from snake_engine.api.models import Difficulty

BOARD_SIZES: dict[str, tuple[int, int]] = {
    "small": (15, 15),
    "medium": (20, 20),
    "large": (25, 25),
}

# Base tick interval (ms) at level 1.
GAME_SPEEDS: dict[Difficulty, int] = {
    Difficulty.easy: 200,
    Difficulty.medium: 150,
    Difficulty.hard: 100,
}

MIN_TICK_MS = 50
MS_PER_LEVEL = 10

POINTS_FOOD = 10

LEVEL_UP_THRESHOLD = 100
MAX_LEVEL = 20

# Attempts before random_empty_position gives up and returns its last draw.
FOOD_PLACEMENT_ATTEMPTS = 100

# Roughly one display refresh at 60 Hz.
DEFAULT_FRAME_MS = 16.0

SEED_SNAKE: tuple[tuple[int, int], ...] = ((10, 10),)
SEED_FOOD: tuple[int, int] = (15, 15)
