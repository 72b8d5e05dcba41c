from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from snake_engine.api.models import Board, Difficulty, GameMode
from snake_engine.constants import BOARD_SIZES, DEFAULT_FRAME_MS


@dataclass(frozen=True, slots=True)
class EngineSettings:
    board_width: int = 20
    board_height: int = 20
    difficulty: Difficulty = Difficulty.medium
    game_mode: GameMode = GameMode.classic
    frame_ms: float = DEFAULT_FRAME_MS
    log_level: str = "INFO"

    @property
    def board(self) -> Board:
        return Board(width=self.board_width, height=self.board_height)


def _int_env(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from e


def _float_env(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be a number, got {raw!r}") from e


def load_env_file(path: Path | None = None) -> bool:
    """Load a `.env` file into os.environ without overriding what is already set."""

    from dotenv import load_dotenv

    if path is None:
        path = Path.cwd() / ".env"
    if not path.exists():
        return False
    return load_dotenv(dotenv_path=path, override=False)


def _board_preset() -> tuple[int, int]:
    name = os.environ.get("SNAKE_BOARD_SIZE", "medium")
    if name not in BOARD_SIZES:
        allowed = ",".join(sorted(BOARD_SIZES))
        raise ValueError(f"SNAKE_BOARD_SIZE must be one of {allowed}, got {name!r}")
    return BOARD_SIZES[name]


def settings_from_env() -> EngineSettings:
    # An explicit width/height wins over the named preset.
    width, height = _board_preset()
    return EngineSettings(
        board_width=_int_env("SNAKE_BOARD_WIDTH", width),
        board_height=_int_env("SNAKE_BOARD_HEIGHT", height),
        difficulty=Difficulty(os.environ.get("SNAKE_DIFFICULTY", Difficulty.medium.value)),
        game_mode=GameMode(os.environ.get("SNAKE_GAME_MODE", GameMode.classic.value)),
        frame_ms=_float_env("SNAKE_FRAME_MS", DEFAULT_FRAME_MS),
        log_level=os.environ.get("SNAKE_LOG_LEVEL", "INFO").upper(),
    )


def load_settings(env_file: Path | None = None) -> EngineSettings:
    """Settings for an entry point: `.env` first, then the process environment wins."""

    load_env_file(env_file)
    return settings_from_env()
