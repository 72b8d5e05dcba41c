from __future__ import annotations

import random
from collections.abc import Iterable

from snake_engine.api.models import Board, Direction, Position
from snake_engine.constants import FOOD_PLACEMENT_ATTEMPTS

# Screen coordinates: y grows downwards.
DIRECTION_DELTAS: dict[Direction, tuple[int, int]] = {
    Direction.up: (0, -1),
    Direction.down: (0, 1),
    Direction.left: (-1, 0),
    Direction.right: (1, 0),
}

_OPPOSITES: dict[Direction, Direction] = {
    Direction.up: Direction.down,
    Direction.down: Direction.up,
    Direction.left: Direction.right,
    Direction.right: Direction.left,
}


def opposite(direction: Direction) -> Direction:
    return _OPPOSITES[direction]


def is_opposite_direction(a: Direction, b: Direction) -> bool:
    return _OPPOSITES[a] == b


def next_position(pos: Position, direction: Direction) -> Position:
    """Apply the direction's unit delta. No bounds checking."""

    dx, dy = DIRECTION_DELTAS[direction]
    return Position(x=pos.x + dx, y=pos.y + dy)


def is_valid_move(pos: Position, snake: Iterable[Position], board: Board) -> bool:
    if not board.contains(pos):
        return False
    return not any(segment == pos for segment in snake)


def detect_collision(pos: Position, snake: Iterable[Position], board: Board) -> bool:
    return not is_valid_move(pos, snake, board)


def random_empty_position(
    board: Board,
    excluded: Iterable[Position] = (),
    *,
    rng: random.Random | None = None,
    max_attempts: int = FOOD_PLACEMENT_ATTEMPTS,
) -> Position:
    """Draw a uniformly random cell that is not in `excluded`.

    Rejection sampling with a bounded number of attempts. When every attempt
    lands on an excluded cell the last draw is returned anyway, so on an
    almost full board the result may be occupied. Callers must tolerate that
    instead of expecting this to block until a free cell turns up.
    """

    randrange = (rng or random).randrange
    taken = set(excluded)

    candidate = Position(x=randrange(board.width), y=randrange(board.height))
    attempts = 1
    while candidate in taken and attempts < max_attempts:
        candidate = Position(x=randrange(board.width), y=randrange(board.height))
        attempts += 1
    return candidate
