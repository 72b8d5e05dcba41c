from __future__ import annotations

import time
from collections.abc import Callable

# Milliseconds from an arbitrary origin, like a display refresh timestamp.
Clock = Callable[[], float]


def monotonic_ms() -> float:
    return time.perf_counter() * 1000.0
