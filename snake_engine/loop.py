from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import Any, Protocol

from snake_engine.constants import DEFAULT_FRAME_MS
from snake_engine.core.clock import Clock, monotonic_ms

logger = logging.getLogger(__name__)

FrameCallback = Callable[[float], None]


class FrameScheduler(Protocol):
    """Host primitive that calls back once per display refresh.

    `request_frame` arms a single callback that receives the frame
    timestamp in ms; `cancel_frame` disarms it. Mirrors a browser's
    requestAnimationFrame / cancelAnimationFrame pair.
    """

    def request_frame(self, callback: FrameCallback) -> Any: ...

    def cancel_frame(self, handle: Any) -> None: ...


class AsyncioFrameScheduler:
    """FrameScheduler backed by an asyncio event loop's call_later."""

    def __init__(
        self,
        loop: asyncio.AbstractEventLoop | None = None,
        *,
        frame_ms: float = DEFAULT_FRAME_MS,
        clock: Clock | None = None,
    ) -> None:
        self._loop = loop
        self.frame_ms = frame_ms
        self.clock = clock or monotonic_ms

    def request_frame(self, callback: FrameCallback) -> asyncio.TimerHandle:
        loop = self._loop or asyncio.get_running_loop()
        return loop.call_later(self.frame_ms / 1000.0, lambda: callback(self.clock()))

    def cancel_frame(self, handle: asyncio.TimerHandle) -> None:
        handle.cancel()


class LoopScheduler:
    """Drives `step` at a fixed logical cadence from variable-rate frames.

    Every frame:
      - if at least one tick interval has elapsed since the last step, run
        exactly one step (no catch-up for dropped frames) and restart the
        interval from this frame;
      - call `on_frame` (rendering), whether or not a step ran;
      - re-arm the next frame while `is_running()` still holds.

    A step that raises is logged and counted as a skipped tick; the chain of
    frames keeps going.
    """

    def __init__(
        self,
        *,
        step: Callable[[], object],
        is_running: Callable[[], bool],
        frames: FrameScheduler,
        clock: Clock | None = None,
        tick_interval_ms: Callable[[], float] | float = 150,
        on_frame: Callable[[], None] | None = None,
    ) -> None:
        self._step = step
        self._is_running = is_running
        self._frames = frames
        self._clock = clock or monotonic_ms
        self._tick_interval = tick_interval_ms if callable(tick_interval_ms) else (lambda: tick_interval_ms)
        self._on_frame = on_frame

        self._handle: Any = None
        self._generation = 0
        self._active = False
        self.last_step_time = 0.0
        self.steps = 0
        self.failed_steps = 0

    @property
    def active(self) -> bool:
        return self._active

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def start_loop(self) -> None:
        """(Re)start the frame chain. Safe to call while already running."""

        self._cancel_pending()
        self._generation += 1
        self._active = True
        self.last_step_time = self._clock()
        self._arm(self._generation)

    def stop_loop(self) -> None:
        """Stop the frame chain. A no-op when nothing is scheduled."""

        self._active = False
        self._cancel_pending()

    def _cancel_pending(self) -> None:
        if self._handle is not None:
            self._frames.cancel_frame(self._handle)
            self._handle = None

    def _arm(self, generation: int) -> None:
        self._handle = self._frames.request_frame(lambda now: self._frame(generation, now))

    def _frame(self, generation: int, now: float) -> None:
        if generation != self._generation or not self._active:
            # Fired after a stop/restart managed to slip past cancel_frame.
            return
        self._handle = None

        if now - self.last_step_time >= self._tick_interval():
            if self._is_running():
                self._run_step()
            self.last_step_time = now

        if self._on_frame is not None:
            try:
                self._on_frame()
            except Exception:
                logger.exception("Frame callback failed")

        # stop_loop() may have run during this frame; never re-arm after it.
        if self._active and generation == self._generation and self._is_running():
            self._arm(generation)
        elif generation == self._generation:
            self._active = False

    def _run_step(self) -> None:
        try:
            self._step()
        except Exception:
            self.failed_steps += 1
            logger.exception("Tick failed; skipping it")
        else:
            self.steps += 1
