from __future__ import annotations

from snake_engine.api.models import Direction

# Arrow keys plus WASD, using browser-style key names.
KEY_BINDINGS: dict[str, Direction] = {
    "ArrowUp": Direction.up,
    "w": Direction.up,
    "W": Direction.up,
    "ArrowDown": Direction.down,
    "s": Direction.down,
    "S": Direction.down,
    "ArrowLeft": Direction.left,
    "a": Direction.left,
    "A": Direction.left,
    "ArrowRight": Direction.right,
    "d": Direction.right,
    "D": Direction.right,
}


def direction_for_key(key: str) -> Direction | None:
    """Translate a key name to a direction; anything unbound maps to None."""

    return KEY_BINDINGS.get(key)
