from __future__ import annotations

from statemachine import State, StateMachine

from snake_engine.api.models import GameState, GameStatus


class GameStatusFSM(StateMachine):
    """FSM wrapper around GameState.status.

    idle -> playing <-> paused, playing -> gameOver, anything -> idle via reset.
    The engine applies the board changes; the FSM only guards which status
    transitions are legal.
    """

    idle = State(GameStatus.idle.value, value=GameStatus.idle.value, initial=True)
    playing = State(GameStatus.playing.value, value=GameStatus.playing.value)
    paused = State(GameStatus.paused.value, value=GameStatus.paused.value)
    # Not final: reset() leads back to idle.
    game_over = State(GameStatus.game_over.value, value=GameStatus.game_over.value)

    play = idle.to(playing) | paused.to(playing)
    pause = playing.to(paused)
    crash = playing.to(game_over)
    restart = idle.to.itself() | playing.to(idle) | paused.to(idle) | game_over.to(idle)

    def __init__(self, game: GameState):
        self.game = game
        super().__init__(start_value=game.status.value)

    @property
    def status(self) -> GameStatus:
        return GameStatus(str(self.current_state.value))

    def sync_status_to_model(self) -> None:
        self.game.status = self.status
