from __future__ import annotations

import logging
from collections.abc import Callable

from snake_engine.api.models import Direction, GameResult, GameSnapshot, GameStatus
from snake_engine.controls import direction_for_key
from snake_engine.engine import GameEngine
from snake_engine.loop import FrameScheduler, LoopScheduler
from snake_engine.rendering import Renderer

logger = logging.getLogger(__name__)


class GameSession:
    """Wires one engine to its loop scheduler and renderer.

    The engine stays the only writer of game state. The session reacts to
    status changes: entering `playing` starts the frame loop, leaving it
    stops the loop, and the renderer's lifecycle hooks follow along.
    """

    def __init__(
        self,
        *,
        engine: GameEngine,
        renderer: Renderer,
        frames: FrameScheduler,
        on_game_over: Callable[[GameResult], None] | None = None,
    ) -> None:
        self.engine = engine
        self.renderer = renderer
        self.on_game_over = on_game_over
        self.scheduler = LoopScheduler(
            step=engine.step,
            is_running=lambda: engine.is_playing,
            frames=frames,
            clock=engine.clock,
            tick_interval_ms=engine.tick_interval_ms,
            on_frame=self.render,
        )
        engine.add_status_listener(self._on_status_change)

    def close(self) -> None:
        self.scheduler.stop_loop()
        self.engine.remove_status_listener(self._on_status_change)

    # ----- operator actions -----

    def start(self) -> bool:
        return self.engine.start()

    def pause(self) -> bool:
        return self.engine.pause()

    def toggle_pause(self) -> bool:
        if self.engine.status == GameStatus.playing:
            return self.engine.pause()
        return self.engine.start()

    def reset(self) -> bool:
        return self.engine.reset()

    def request_direction(self, direction: Direction | str) -> bool:
        return self.engine.request_direction(direction)

    def handle_key(self, key: str) -> bool:
        direction = direction_for_key(key)
        if direction is None:
            return False
        return self.engine.request_direction(direction)

    # ----- read side -----

    def snapshot(self) -> GameSnapshot:
        return self.engine.snapshot()

    def render(self) -> None:
        self.renderer.draw(self.engine.snapshot())

    # ----- status wiring -----

    def _on_status_change(self, previous: GameStatus, current: GameStatus) -> None:
        if current == GameStatus.playing:
            self.scheduler.start_loop()
            self.renderer.start_game()
        else:
            self.scheduler.stop_loop()

        if current == GameStatus.paused:
            self.renderer.pause_game()
        elif current == GameStatus.game_over:
            result = self.engine.result
            self.renderer.end_game(result)
            if self.on_game_over is not None and result is not None:
                self.on_game_over(result)
        elif current == GameStatus.idle:
            self.render()

        logger.debug("Session saw %s -> %s", previous.value, current.value)
