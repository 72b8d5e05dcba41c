from __future__ import annotations

import datetime as dt
from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Direction(StrEnum):
    up = "up"
    down = "down"
    left = "left"
    right = "right"


class GameStatus(StrEnum):
    idle = "idle"
    playing = "playing"
    paused = "paused"
    game_over = "gameOver"


class GameMode(StrEnum):
    classic = "classic"
    timed = "timed"
    survival = "survival"
    zen = "zen"


class Difficulty(StrEnum):
    easy = "easy"
    medium = "medium"
    hard = "hard"


class Position(BaseModel):
    model_config = ConfigDict(frozen=True)

    x: int
    y: int

    @classmethod
    def of(cls, xy: tuple[int, int]) -> "Position":
        return cls(x=xy[0], y=xy[1])


class Board(BaseModel):
    model_config = ConfigDict(frozen=True)

    width: int = Field(20, ge=1)
    height: int = Field(20, ge=1)

    def contains(self, pos: Position) -> bool:
        return 0 <= pos.x < self.width and 0 <= pos.y < self.height


class GameResult(BaseModel):
    """Terminal numbers handed to the score collaborator on game over."""

    model_config = ConfigDict(frozen=True)

    score: int
    level: int
    game_mode: GameMode
    difficulty: Difficulty
    duration_ms: float
    moves: int
    food_consumed: int


class GameSnapshot(BaseModel):
    """Read-only view of a game for renderers and other observers."""

    model_config = ConfigDict(frozen=True)

    status: GameStatus
    score: int
    high_score: int
    level: int
    snake: tuple[Position, ...]
    food: Position
    direction: Direction
    next_direction: Direction
    game_mode: GameMode
    difficulty: Difficulty
    board: Board

    @property
    def head(self) -> Position:
        return self.snake[0]


class GameState(BaseModel):
    # Owned and mutated by GameEngine only. Everyone else gets a GameSnapshot.
    status: GameStatus = GameStatus.idle
    score: int = 0
    high_score: int = 0
    level: int = 1

    # Head first.
    snake: list[Position]
    food: Position

    # `direction` is the one already applied; `next_direction` is the pending request.
    direction: Direction = Direction.right
    next_direction: Direction = Direction.right

    game_mode: GameMode = GameMode.classic
    difficulty: Difficulty = Difficulty.medium
    board: Board = Field(default_factory=Board)

    @property
    def head(self) -> Position:
        return self.snake[0]

    def snapshot(self) -> GameSnapshot:
        return GameSnapshot(
            status=self.status,
            score=self.score,
            high_score=self.high_score,
            level=self.level,
            snake=tuple(self.snake),
            food=self.food,
            direction=self.direction,
            next_direction=self.next_direction,
            game_mode=self.game_mode,
            difficulty=self.difficulty,
            board=self.board,
        )


class ScoreSubmission(BaseModel):
    score: int = Field(..., ge=0)
    game_mode: GameMode = GameMode.classic
    difficulty: Difficulty = Difficulty.medium
    duration_ms: float = Field(0, ge=0)
    moves: int = Field(0, ge=0)
    food_consumed: int = Field(0, ge=0)

    @classmethod
    def from_result(cls, result: GameResult) -> "ScoreSubmission":
        return cls(
            score=result.score,
            game_mode=result.game_mode,
            difficulty=result.difficulty,
            duration_ms=result.duration_ms,
            moves=result.moves,
            food_consumed=result.food_consumed,
        )


class ScoreRecord(ScoreSubmission):
    id: str
    achieved_at: datetime


class ScoreListResponse(BaseModel):
    scores: list[ScoreRecord]


class LeaderboardSubmission(BaseModel):
    user_id: str = Field(..., min_length=1)
    username: str = Field(..., max_length=50)
    score: int = Field(..., ge=0)
    game_mode: GameMode
    difficulty: Difficulty

    @field_validator("username")
    @classmethod
    def _username_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Username cannot be empty")
        return v


class LeaderboardEntry(LeaderboardSubmission):
    id: str
    achieved_at: datetime
    rank: int


class LeaderboardResponse(BaseModel):
    entries: list[LeaderboardEntry]
    total: int


class AchievementCategory(StrEnum):
    score = "score"
    gameplay = "gameplay"
    social = "social"
    streak = "streak"


class AchievementConditionType(StrEnum):
    score = "score"
    games_played = "games_played"
    streak = "streak"
    time_played = "time_played"


class AchievementRewardType(StrEnum):
    points = "points"
    theme = "theme"
    title = "title"


class AchievementCondition(BaseModel):
    type: AchievementConditionType
    target: int = Field(..., gt=0)
    game_mode: GameMode | None = None
    difficulty: Difficulty | None = None


class AchievementReward(BaseModel):
    type: AchievementRewardType
    value: int | str


class Achievement(BaseModel):
    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    description: str = ""
    icon: str = ""
    category: AchievementCategory
    condition: AchievementCondition
    reward: AchievementReward | None = None


class AchievementListResponse(BaseModel):
    achievements: list[Achievement]


class AchievementUnlockRequest(BaseModel):
    user_id: str = Field(..., min_length=1)
    achievement_id: str = Field(..., min_length=1)


class UserAchievement(AchievementUnlockRequest):
    unlocked_at: datetime


class UserAchievementListResponse(BaseModel):
    achievements: list[UserAchievement]


class ChallengeObjectiveType(StrEnum):
    score = "score"
    time = "time"
    food = "food"
    survival = "survival"


class ChallengeRewardType(StrEnum):
    points = "points"
    achievement = "achievement"
    theme = "theme"


class ChallengeObjective(BaseModel):
    type: ChallengeObjectiveType
    target: int = Field(..., gt=0)
    game_mode: GameMode
    difficulty: Difficulty


class ChallengeReward(BaseModel):
    type: ChallengeRewardType
    value: int | str

    @field_validator("value")
    @classmethod
    def _value_not_blank(cls, v: int | str) -> int | str:
        if isinstance(v, str) and not v.strip():
            raise ValueError("Reward value cannot be empty")
        return v


class DailyChallengeCreate(BaseModel):
    # `id` and `date` are filled in by the store when omitted.
    id: str | None = None
    date: dt.date | None = None
    title: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    objective: ChallengeObjective
    reward: ChallengeReward
    participants: int = Field(0, ge=0)
    completions: int = Field(0, ge=0)


class DailyChallenge(DailyChallengeCreate):
    id: str
    date: dt.date


class DailyChallengeListResponse(BaseModel):
    challenges: list[DailyChallenge]
    total: int
