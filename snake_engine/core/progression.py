from __future__ import annotations

from snake_engine.api.models import Difficulty
from snake_engine.constants import GAME_SPEEDS, LEVEL_UP_THRESHOLD, MAX_LEVEL, MIN_TICK_MS, MS_PER_LEVEL


def level_for_score(score: int) -> int:
    return min(MAX_LEVEL, max(0, score) // LEVEL_UP_THRESHOLD + 1)


def tick_interval_ms(level: int, difficulty: Difficulty = Difficulty.medium) -> int:
    """Logical tick length for a level.

    Non-increasing in `level` and never below MIN_TICK_MS.
    """

    base = GAME_SPEEDS[difficulty]
    return max(MIN_TICK_MS, base - (max(1, level) - 1) * MS_PER_LEVEL)
