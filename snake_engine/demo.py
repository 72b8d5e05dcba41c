from __future__ import annotations

import argparse
import asyncio
import logging

from snake_engine.api.models import Direction, GameResult, GameSnapshot
from snake_engine.config import load_settings
from snake_engine.core.grid import DIRECTION_DELTAS, is_opposite_direction, is_valid_move, next_position
from snake_engine.engine import GameEngine
from snake_engine.loop import AsyncioFrameScheduler
from snake_engine.rendering import TextRenderer
from snake_engine.session import GameSession

logger = logging.getLogger(__name__)


def autopilot_direction(snapshot: GameSnapshot) -> Direction:
    """Greedy pick: a safe direction that closes the distance to the food."""

    def _distance(d: Direction) -> int:
        p = next_position(snapshot.head, d)
        return abs(p.x - snapshot.food.x) + abs(p.y - snapshot.food.y)

    candidates = [
        d
        for d in DIRECTION_DELTAS
        if not (len(snapshot.snake) > 1 and is_opposite_direction(snapshot.direction, d))
    ]
    safe = [d for d in candidates if is_valid_move(next_position(snapshot.head, d), snapshot.snake, snapshot.board)]
    if not safe:
        return snapshot.direction
    return min(safe, key=_distance)


async def play(*, max_seconds: float, echo: bool) -> GameResult | None:
    settings = load_settings()
    frames = AsyncioFrameScheduler(frame_ms=settings.frame_ms)
    engine = GameEngine(
        board=settings.board,
        difficulty=settings.difficulty,
        game_mode=settings.game_mode,
        clock=frames.clock,
    )
    renderer = TextRenderer(echo=echo)
    done = asyncio.Event()
    session = GameSession(engine=engine, renderer=renderer, frames=frames, on_game_over=lambda _r: done.set())

    async def _steer() -> None:
        while not done.is_set():
            session.request_direction(autopilot_direction(session.snapshot()))
            await asyncio.sleep(settings.frame_ms / 1000.0)

    session.start()
    steer = asyncio.create_task(_steer())
    try:
        await asyncio.wait_for(done.wait(), timeout=max_seconds)
    except TimeoutError:
        logger.info("Demo time limit reached")
        session.pause()
    finally:
        steer.cancel()
        session.close()

    print(renderer.last_frame)
    return engine.result


def main() -> None:
    parser = argparse.ArgumentParser(description="Play a headless snake game in the terminal.")
    parser.add_argument("--seconds", type=float, default=30.0, help="Stop after this many seconds")
    parser.add_argument("--echo", action="store_true", help="Print every frame")
    args = parser.parse_args()

    logging.basicConfig(level=getattr(logging, load_settings().log_level, logging.INFO))

    result = asyncio.run(play(max_seconds=args.seconds, echo=args.echo))
    if result is not None:
        print(f"score={result.score} moves={result.moves} food={result.food_consumed}")


if __name__ == "__main__":
    main()
