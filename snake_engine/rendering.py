from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol

from snake_engine.api.models import GameResult, GameSnapshot, GameStatus


class Renderer(Protocol):
    """Paints snapshots. Never mutates the game.

    `draw` is called once per animation frame, whether or not a tick ran.
    The lifecycle hooks follow status transitions.
    """

    def draw(self, snapshot: GameSnapshot) -> None: ...

    def start_game(self) -> None: ...

    def pause_game(self) -> None: ...

    def end_game(self, result: GameResult | None) -> None: ...


@dataclass(frozen=True, slots=True)
class TextGlyphs:
    head: str = "H"
    body: str = "o"
    food: str = "*"
    empty: str = "."


_STATUS_LABELS = {
    GameStatus.idle: "READY",
    GameStatus.playing: "PLAYING",
    GameStatus.paused: "PAUSED",
    GameStatus.game_over: "GAME OVER",
}


def render_text(snapshot: GameSnapshot, *, glyphs: TextGlyphs = TextGlyphs()) -> str:
    """Plain-text frame: a status line followed by one row per board line."""

    board = snapshot.board
    rows = [[glyphs.empty] * board.width for _ in range(board.height)]

    def _put(x: int, y: int, ch: str) -> None:
        # A dead head can sit just outside the board; skip it.
        if 0 <= x < board.width and 0 <= y < board.height:
            rows[y][x] = ch

    _put(snapshot.food.x, snapshot.food.y, glyphs.food)
    for segment in snapshot.snake[1:]:
        _put(segment.x, segment.y, glyphs.body)
    _put(snapshot.head.x, snapshot.head.y, glyphs.head)

    header = (
        f"{_STATUS_LABELS[snapshot.status]}  score={snapshot.score}  "
        f"high={snapshot.high_score}  level={snapshot.level}"
    )
    return "\n".join([header, *("".join(r) for r in rows)])


@dataclass(slots=True)
class TextRenderer:
    """Renderer that keeps the last text frame and the lifecycle calls it saw.

    Useful headless (terminal demo, tests). Set `echo` to print each frame.
    """

    glyphs: TextGlyphs = field(default_factory=TextGlyphs)
    echo: bool = False
    last_frame: str = ""
    frames_drawn: int = 0
    events: list[str] = field(default_factory=list)
    last_result: GameResult | None = None

    def draw(self, snapshot: GameSnapshot) -> None:
        self.last_frame = render_text(snapshot, glyphs=self.glyphs)
        self.frames_drawn += 1
        if self.echo:
            print(self.last_frame, end="\n\n")

    def start_game(self) -> None:
        self.events.append("start")

    def pause_game(self) -> None:
        self.events.append("pause")

    def end_game(self, result: GameResult | None) -> None:
        self.events.append("end")
        self.last_result = result
