from __future__ import annotations

import random

import pytest

from snake_engine.api.models import Board, Difficulty, Direction, GameStatus, Position
from snake_engine.engine import GameEngine, StepOutcome


def P(x: int, y: int) -> Position:
    return Position(x=x, y=y)


def _engine(**kwargs) -> GameEngine:  # type: ignore[no-untyped-def]
    kwargs.setdefault("rng", random.Random(1234))
    kwargs.setdefault("clock", lambda: 0.0)
    return GameEngine(**kwargs)


def _assert_invariants(engine: GameEngine) -> None:
    snap = engine.snapshot()
    assert len(snap.snake) >= 1
    assert len(set(snap.snake)) == len(snap.snake)
    assert all(snap.board.contains(p) for p in snap.snake)
    assert snap.food not in snap.snake


def test_initial_state_defaults() -> None:
    engine = _engine()
    snap = engine.snapshot()

    assert snap.status == GameStatus.idle
    assert snap.snake == (P(10, 10),)
    assert snap.food == P(15, 15)
    assert snap.direction == Direction.right
    assert snap.next_direction == Direction.right
    assert snap.score == 0
    assert snap.level == 1
    assert snap.board == Board(width=20, height=20)


def test_seed_food_on_snake_is_replaced() -> None:
    engine = _engine(seed_snake=[P(2, 2)], seed_food=P(2, 2))
    _assert_invariants(engine)


@pytest.mark.parametrize(
    "snake",
    [
        [],
        [P(20, 0)],
        [P(1, 1), P(1, 1)],
    ],
)
def test_bad_seed_snake_rejected(snake: list[Position]) -> None:
    with pytest.raises(ValueError):
        _engine(seed_snake=snake)


def test_empty_seed_snake_is_not_replaced_by_default() -> None:
    with pytest.raises(ValueError, match="at least one segment"):
        _engine(seed_snake=[])
    assert _engine(seed_snake=None).snapshot().snake == (P(10, 10),)


def test_status_transitions() -> None:
    engine = _engine()

    assert engine.pause() is False
    assert engine.status == GameStatus.idle

    assert engine.start() is True
    assert engine.status == GameStatus.playing

    assert engine.start() is False
    assert engine.pause() is True
    assert engine.status == GameStatus.paused

    assert engine.start() is True
    assert engine.status == GameStatus.playing

    assert engine.reset() is True
    assert engine.status == GameStatus.idle


def test_step_is_noop_unless_playing() -> None:
    engine = _engine()
    before = engine.snapshot()

    assert engine.step() == StepOutcome.skipped
    assert engine.snapshot() == before

    engine.start()
    engine.pause()
    assert engine.step() == StepOutcome.skipped
    assert engine.snapshot().snake == before.snake


def test_walks_to_food_and_grows() -> None:
    engine = _engine()
    engine.start()

    engine.request_direction(Direction.right)
    assert engine.step() == StepOutcome.moved
    snap = engine.snapshot()
    assert snap.snake == (P(11, 10),)
    assert snap.food == P(15, 15)
    assert snap.score == 0

    for _ in range(4):
        engine.step()
    assert engine.snapshot().head == P(15, 10)

    engine.request_direction(Direction.down)
    outcomes = [engine.step() for _ in range(5)]
    assert outcomes == [StepOutcome.moved] * 4 + [StepOutcome.ate]

    snap = engine.snapshot()
    assert snap.head == P(15, 15)
    assert len(snap.snake) == 2
    assert snap.score == 10
    assert snap.food not in snap.snake
    assert engine.food_consumed == 1
    assert engine.moves == 10
    _assert_invariants(engine)


def test_glide_drops_tail() -> None:
    engine = _engine(seed_snake=[P(0, 1), P(0, 0)], seed_food=P(5, 5), seed_direction=Direction.down)
    engine.start()

    assert engine.step() == StepOutcome.moved
    assert engine.snapshot().snake == (P(0, 2), P(0, 1))


def test_heading_into_own_neck_is_game_over() -> None:
    # Head (0,0) moving down runs straight into the segment at (0,1).
    engine = _engine(seed_snake=[P(0, 0), P(0, 1)], seed_food=P(5, 5), seed_direction=Direction.down)
    engine.start()

    assert engine.step() == StepOutcome.collided
    assert engine.status == GameStatus.game_over


def test_leaving_board_ends_game_in_one_step() -> None:
    engine = _engine(seed_snake=[P(0, 0)], seed_direction=Direction.left, high_score=30)
    engine.start()

    assert engine.step() == StepOutcome.collided
    snap = engine.snapshot()
    assert snap.status == GameStatus.game_over
    assert snap.high_score == 30


def test_game_over_is_terminal_until_reset() -> None:
    engine = _engine(seed_snake=[P(19, 0)], seed_food=P(0, 0))
    engine.start()
    engine.step()
    assert engine.status == GameStatus.game_over

    frozen = engine.snapshot()
    assert engine.step() == StepOutcome.skipped
    assert engine.start() is False
    assert engine.pause() is False
    assert engine.snapshot() == frozen

    engine.reset()
    assert engine.status == GameStatus.idle
    assert engine.result is None


def test_high_score_updated_on_game_over_and_kept_by_reset() -> None:
    engine = _engine(seed_snake=[P(10, 10)], seed_food=P(11, 10))
    engine.start()
    assert engine.step() == StepOutcome.ate
    assert engine.snapshot().high_score == 0
    engine._state.food = P(0, 19)

    engine.request_direction(Direction.up)
    for _ in range(20):
        if engine.step() == StepOutcome.collided:
            break

    snap = engine.snapshot()
    assert snap.status == GameStatus.game_over
    assert snap.high_score == 10

    engine.reset()
    snap = engine.snapshot()
    assert snap.high_score == 10
    assert snap.score == 0
    assert snap.snake == (P(10, 10),)
    assert snap.food == P(11, 10)
    assert snap.direction == Direction.right


def test_result_exposed_on_game_over() -> None:
    now = [0.0]
    engine = _engine(seed_snake=[P(17, 0)], seed_food=P(18, 0), clock=lambda: now[0])
    engine.start()
    now[0] = 150.0
    engine.step()  # eats
    engine._state.food = P(0, 19)
    now[0] = 300.0
    engine.step()
    now[0] = 450.0
    engine.step()  # off the board

    result = engine.result
    assert result is not None
    assert result.score == 10
    assert result.moves == 2
    assert result.food_consumed == 1
    assert result.duration_ms == pytest.approx(450.0)
    assert result.difficulty == Difficulty.medium


def test_duration_excludes_paused_time() -> None:
    now = [0.0]
    engine = _engine(clock=lambda: now[0])
    engine.start()
    now[0] = 100.0
    engine.pause()
    now[0] = 1_000.0
    engine.start()
    now[0] = 1_050.0

    assert engine.duration_ms == pytest.approx(150.0)


def test_opposite_direction_rejected_for_long_snake() -> None:
    engine = _engine(seed_snake=[P(5, 5), P(4, 5)])
    assert engine.request_direction(Direction.left) is False
    assert engine.snapshot().next_direction == Direction.right


def test_opposite_direction_allowed_for_single_cell() -> None:
    engine = _engine()
    assert engine.request_direction(Direction.left) is True
    assert engine.snapshot().next_direction == Direction.left


def test_last_valid_request_wins() -> None:
    engine = _engine(seed_snake=[P(5, 5), P(4, 5)])
    engine.start()

    engine.request_direction(Direction.up)
    engine.request_direction(Direction.left)  # rejected: still moving right
    engine.request_direction(Direction.down)
    engine.step()

    snap = engine.snapshot()
    assert snap.direction == Direction.down
    assert snap.head == P(5, 6)


def test_reversal_checked_against_applied_direction_only() -> None:
    # up then left before a tick: left is checked against the applied `right`.
    engine = _engine(seed_snake=[P(5, 5), P(4, 5)])
    engine.request_direction(Direction.up)
    assert engine.request_direction(Direction.left) is False
    assert engine.snapshot().next_direction == Direction.up


def test_request_direction_accepts_strings() -> None:
    engine = _engine()
    engine.request_direction("down")
    assert engine.snapshot().next_direction == Direction.down
    with pytest.raises(ValueError):
        engine.request_direction("sideways")


def test_step_is_deterministic_for_fixed_seed() -> None:
    def _run() -> list:  # type: ignore[type-arg]
        engine = _engine(seed_snake=[P(10, 10)], seed_food=P(12, 10), rng=random.Random(99))
        engine.start()
        snaps = []
        for _ in range(3):
            engine.step()
            snaps.append(engine.snapshot())
        return snaps

    assert _run() == _run()


def test_level_rises_and_speeds_up_tick() -> None:
    engine = _engine(seed_snake=[P(0, 0)], seed_food=P(1, 0))
    engine.start()
    assert engine.tick_interval_ms() == 150

    # Force food right in front of the head for ten bites.
    for x in range(1, 11):
        engine._state.food = P(x, 0)
        assert engine.step() == StepOutcome.ate

    snap = engine.snapshot()
    assert snap.score == 100
    assert snap.level == 2
    assert engine.tick_interval_ms() == 140


def test_invariants_hold_through_random_play() -> None:
    rng = random.Random(5)
    engine = _engine(rng=random.Random(6))
    engine.start()
    for _ in range(500):
        engine.request_direction(rng.choice(list(Direction)))
        engine.step()
        if engine.status == GameStatus.game_over:
            engine.reset()
            engine.start()
            continue
        _assert_invariants(engine)


def test_snapshot_is_read_only() -> None:
    engine = _engine()
    snap = engine.snapshot()
    with pytest.raises(Exception):
        snap.score = 999  # type: ignore[misc]
    assert isinstance(snap.snake, tuple)


def test_status_listeners_see_transitions() -> None:
    engine = _engine(seed_snake=[P(0, 0)], seed_direction=Direction.up)
    seen: list[tuple[GameStatus, GameStatus]] = []
    engine.add_status_listener(lambda a, b: seen.append((a, b)))

    engine.start()
    engine.step()
    engine.reset()

    assert seen == [
        (GameStatus.idle, GameStatus.playing),
        (GameStatus.playing, GameStatus.game_over),
        (GameStatus.game_over, GameStatus.idle),
    ]
