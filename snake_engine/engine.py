from __future__ import annotations

import logging
import random
from collections.abc import Callable, Sequence
from enum import StrEnum

from statemachine.exceptions import TransitionNotAllowed

from snake_engine.api.models import (
    Board,
    Difficulty,
    Direction,
    GameMode,
    GameResult,
    GameSnapshot,
    GameState,
    GameStatus,
    Position,
)
from snake_engine.constants import POINTS_FOOD, SEED_FOOD
from snake_engine.core.clock import Clock, monotonic_ms
from snake_engine.core.grid import detect_collision, is_opposite_direction, next_position, random_empty_position
from snake_engine.core.progression import level_for_score, tick_interval_ms
from snake_engine.fsm import GameStatusFSM

logger = logging.getLogger(__name__)

# Called with (previous, current) after every status change.
StatusListener = Callable[[GameStatus, GameStatus], None]


class StepOutcome(StrEnum):
    skipped = "skipped"
    moved = "moved"
    ate = "ate"
    collided = "collided"


def default_seed_snake(board: Board) -> list[Position]:
    return [Position(x=board.width // 2, y=board.height // 2)]


def validate_seed_snake(snake: Sequence[Position], board: Board) -> list[Position]:
    if not snake:
        raise ValueError("Seed snake needs at least one segment")
    for segment in snake:
        if not board.contains(segment):
            raise ValueError(f"Seed segment ({segment.x}, {segment.y}) is outside the board")
    if len(set(snake)) != len(snake):
        raise ValueError("Seed snake overlaps itself")
    return list(snake)


class GameEngine:
    """Owns the single authoritative GameState and every mutation of it.

    All other components read `snapshot()`. The status lifecycle is guarded by
    GameStatusFSM; operations that are not legal in the current status are
    silent no-ops rather than errors.
    """

    def __init__(
        self,
        *,
        board: Board | None = None,
        difficulty: Difficulty = Difficulty.medium,
        game_mode: GameMode = GameMode.classic,
        seed_snake: Sequence[Position] | None = None,
        seed_food: Position | None = None,
        seed_direction: Direction = Direction.right,
        high_score: int = 0,
        rng: random.Random | None = None,
        clock: Clock | None = None,
    ) -> None:
        self.board = board or Board()
        self.difficulty = difficulty
        self.game_mode = game_mode
        self.rng = rng
        self.clock = clock or monotonic_ms

        self._seed_snake = validate_seed_snake(
            seed_snake if seed_snake is not None else default_seed_snake(self.board), self.board
        )
        self._seed_food = seed_food if seed_food is not None else Position.of(SEED_FOOD)
        self._seed_direction = Direction(seed_direction)

        self._listeners: list[StatusListener] = []
        self._state = self._initial_state(high_score=high_score)
        self._fsm = GameStatusFSM(self._state)
        self._reset_counters()

    # ----- construction helpers -----

    def _initial_state(self, *, high_score: int) -> GameState:
        snake = list(self._seed_snake)
        food = self._seed_food
        if not self.board.contains(food) or food in snake:
            food = random_empty_position(self.board, snake, rng=self.rng)
        return GameState(
            high_score=high_score,
            snake=snake,
            food=food,
            direction=self._seed_direction,
            next_direction=self._seed_direction,
            game_mode=self.game_mode,
            difficulty=self.difficulty,
            board=self.board,
        )

    def _reset_counters(self) -> None:
        self._moves = 0
        self._food_consumed = 0
        self._played_ms = 0.0
        self._playing_since: float | None = None
        self._result: GameResult | None = None

    # ----- read side -----

    @property
    def status(self) -> GameStatus:
        return self._state.status

    @property
    def is_playing(self) -> bool:
        return self._state.status == GameStatus.playing

    @property
    def moves(self) -> int:
        return self._moves

    @property
    def food_consumed(self) -> int:
        return self._food_consumed

    @property
    def duration_ms(self) -> float:
        if self._playing_since is None:
            return self._played_ms
        return self._played_ms + (self.clock() - self._playing_since)

    @property
    def result(self) -> GameResult | None:
        """Terminal numbers; set only once the game is over."""
        return self._result

    def snapshot(self) -> GameSnapshot:
        return self._state.snapshot()

    def tick_interval_ms(self) -> int:
        return tick_interval_ms(self._state.level, self.difficulty)

    def add_status_listener(self, listener: StatusListener) -> None:
        self._listeners.append(listener)

    def remove_status_listener(self, listener: StatusListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    # ----- lifecycle -----

    def start(self) -> bool:
        return self._send("play")

    def pause(self) -> bool:
        return self._send("pause")

    def reset(self) -> bool:
        return self._send("restart", apply=self._restore_seed)

    def _restore_seed(self) -> None:
        self._state = self._initial_state(high_score=self._state.high_score)
        self._fsm.game = self._state
        self._reset_counters()

    def _send(self, event: str, *, apply: Callable[[], None] | None = None) -> bool:
        before = self._fsm.status
        try:
            self._fsm.send(event)
        except TransitionNotAllowed:
            logger.debug("Ignoring %s while %s", event, before.value)
            return False

        after = self._fsm.status
        now = self.clock()
        if before == GameStatus.playing and self._playing_since is not None:
            self._played_ms += now - self._playing_since
            self._playing_since = None

        if apply is not None:
            apply()
        self._fsm.sync_status_to_model()

        if after == GameStatus.playing:
            self._playing_since = now
        elif after == GameStatus.game_over:
            self._result = self._build_result()
            logger.info("Game over: score=%s moves=%s", self._state.score, self._moves)

        logger.debug("Status %s -> %s", before.value, after.value)
        for listener in list(self._listeners):
            listener(before, after)
        return True

    def _build_result(self) -> GameResult:
        state = self._state
        return GameResult(
            score=state.score,
            level=state.level,
            game_mode=state.game_mode,
            difficulty=state.difficulty,
            duration_ms=self._played_ms,
            moves=self._moves,
            food_consumed=self._food_consumed,
        )

    # ----- input -----

    def request_direction(self, direction: Direction | str) -> bool:
        """Queue `direction` for the next step. Last valid request wins.

        A reversal onto the neck is dropped unless the snake is a single cell.
        """

        direction = Direction(direction)
        state = self._state
        if len(state.snake) > 1 and is_opposite_direction(state.direction, direction):
            return False
        state.next_direction = direction
        return True

    # ----- simulation -----

    def step(self) -> StepOutcome:
        """Advance the simulation by one tick. Does nothing unless playing."""

        state = self._state
        if state.status != GameStatus.playing:
            return StepOutcome.skipped

        # next_direction is read exactly once per tick.
        state.direction = state.next_direction
        new_head = next_position(state.head, state.direction)

        if detect_collision(new_head, state.snake, state.board):
            state.high_score = max(state.score, state.high_score)
            self._send("crash")
            return StepOutcome.collided

        food_eaten = new_head == state.food
        state.snake.insert(0, new_head)
        self._moves += 1

        if not food_eaten:
            state.snake.pop()
            return StepOutcome.moved

        state.score += POINTS_FOOD
        self._food_consumed += 1
        new_level = level_for_score(state.score)
        if new_level > state.level:
            state.level = new_level
            logger.debug("Level up: %s (tick %sms)", new_level, self.tick_interval_ms())
        state.food = random_empty_position(state.board, state.snake, rng=self.rng)
        return StepOutcome.ate
