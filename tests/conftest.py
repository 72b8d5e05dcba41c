from __future__ import annotations

from collections.abc import Callable, Generator
from dataclasses import dataclass, field

import pytest
from fastapi.testclient import TestClient


@dataclass(slots=True)
class ManualClock:
    """Clock the test moves by hand (ms)."""

    now: float = 0.0

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> float:
        self.now += ms
        return self.now


@dataclass(slots=True)
class ManualFrames:
    """FrameScheduler fake: frames fire only when the test says so."""

    clock: ManualClock
    pending: dict[int, Callable[[float], None]] = field(default_factory=dict)
    cancelled: list[int] = field(default_factory=list)
    requested: int = 0

    def request_frame(self, callback: Callable[[float], None]) -> int:
        self.requested += 1
        handle = self.requested
        self.pending[handle] = callback
        return handle

    def cancel_frame(self, handle: int) -> None:
        self.cancelled.append(handle)
        self.pending.pop(handle, None)

    def fire(self) -> bool:
        """Run every callback armed so far, at the clock's current time."""

        if not self.pending:
            return False
        callbacks = list(self.pending.values())
        self.pending.clear()
        for cb in callbacks:
            cb(self.clock.now)
        return True

    def run_for(self, ms: float, *, frame_ms: float = 16.0) -> int:
        """Advance the clock in frame-sized slices, firing a frame each time."""

        fired = 0
        elapsed = 0.0
        while elapsed + frame_ms <= ms:
            self.clock.advance(frame_ms)
            elapsed += frame_ms
            if self.fire():
                fired += 1
        return fired


@pytest.fixture()
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture()
def frames(clock: ManualClock) -> ManualFrames:
    return ManualFrames(clock=clock)


@pytest.fixture()
def client_and_store() -> Generator[tuple[TestClient, object], None, None]:
    from snake_engine.api.deps import get_score_store
    from snake_engine.main import app
    from snake_engine.score_store import ScoreStore

    store = ScoreStore()

    def _override() -> ScoreStore:
        return store

    app.dependency_overrides[get_score_store] = _override
    with TestClient(app) as c:
        yield c, store
    app.dependency_overrides.clear()
