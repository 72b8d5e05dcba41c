from __future__ import annotations

import datetime as dt
from datetime import UTC, datetime
from uuid import uuid4

from snake_engine.api.models import (
    Achievement,
    DailyChallenge,
    DailyChallengeCreate,
    Difficulty,
    GameMode,
    LeaderboardEntry,
    LeaderboardSubmission,
    ScoreRecord,
    ScoreSubmission,
    UserAchievement,
)

DEFAULT_LEADERBOARD_LIMIT = 50


class NotFoundError(LookupError):
    pass


class ConflictError(RuntimeError):
    pass


def _now() -> datetime:
    return datetime.now(tz=UTC)


class ScoreStore:
    """In-memory scores, leaderboard, achievements and daily challenges.

    Lives for the lifetime of the process; nothing is written anywhere.
    Achievement definitions are supplied by the caller; users can only
    unlock ones that exist.
    """

    def __init__(self, achievements: list[Achievement] | None = None) -> None:
        self._scores: list[ScoreRecord] = []
        self._leaderboard: list[LeaderboardEntry] = []
        self._achievements: dict[str, Achievement] = {}
        self._unlocked: list[UserAchievement] = []
        self._challenges: list[DailyChallenge] = []
        for achievement in achievements or []:
            self.define_achievement(achievement)

    # ----- scores -----

    def add_score(self, submission: ScoreSubmission) -> ScoreRecord:
        record = ScoreRecord(
            **submission.model_dump(),
            id=f"score-{uuid4().hex}",
            achieved_at=_now(),
        )
        self._scores.append(record)
        return record

    def list_scores(self) -> list[ScoreRecord]:
        return list(reversed(self._scores))

    # ----- leaderboard -----

    def add_leaderboard_entry(self, submission: LeaderboardSubmission) -> LeaderboardEntry:
        entry = LeaderboardEntry(
            **submission.model_dump(),
            id=f"entry-{uuid4().hex}",
            achieved_at=_now(),
            rank=1,
        )
        self._leaderboard.append(entry)
        self._rerank()
        return next(e for e in self._leaderboard if e.id == entry.id)

    def _rerank(self) -> None:
        # Stable sort: earlier entries win ties.
        ordered = sorted(self._leaderboard, key=lambda e: e.score, reverse=True)
        self._leaderboard = [e.model_copy(update={"rank": i + 1}) for i, e in enumerate(ordered)]

    def leaderboard(
        self,
        *,
        game_mode: GameMode | None = None,
        difficulty: Difficulty | None = None,
        limit: int = DEFAULT_LEADERBOARD_LIMIT,
        offset: int = 0,
    ) -> tuple[list[LeaderboardEntry], int]:
        if limit < 0:
            raise ValueError("Limit must be a non-negative number")
        if offset < 0:
            raise ValueError("Offset must be a non-negative number")

        entries = self._leaderboard
        if game_mode is not None:
            entries = [e for e in entries if e.game_mode == game_mode]
        if difficulty is not None:
            entries = [e for e in entries if e.difficulty == difficulty]
        entries = sorted(entries, key=lambda e: e.rank)
        return entries[offset : offset + limit], len(entries)

    def clear_leaderboard(self) -> None:
        self._leaderboard = []

    # ----- achievements -----

    def define_achievement(self, achievement: Achievement) -> Achievement:
        if achievement.id in self._achievements:
            raise ConflictError(f"Achievement {achievement.id} is already defined")
        self._achievements[achievement.id] = achievement
        return achievement

    def list_achievements(self) -> list[Achievement]:
        return list(self._achievements.values())

    def unlock_achievement(self, user_id: str, achievement_id: str) -> UserAchievement:
        if achievement_id not in self._achievements:
            raise NotFoundError(f"Achievement with id {achievement_id} does not exist")
        if any(u.user_id == user_id and u.achievement_id == achievement_id for u in self._unlocked):
            raise ConflictError("User already has this achievement")

        unlocked = UserAchievement(user_id=user_id, achievement_id=achievement_id, unlocked_at=_now())
        self._unlocked.append(unlocked)
        return unlocked

    def user_achievements(self, user_id: str) -> list[UserAchievement]:
        return [u for u in self._unlocked if u.user_id == user_id]

    # ----- daily challenges -----

    def add_daily_challenge(self, submission: DailyChallengeCreate) -> DailyChallenge:
        day = submission.date or _now().date()
        if any(c.date == day for c in self._challenges):
            raise ConflictError(f"A challenge for {day.isoformat()} already exists")

        challenge = DailyChallenge(
            **submission.model_dump(exclude={"id", "date"}),
            id=submission.id or f"daily-{day.isoformat()}-{uuid4().hex[:9]}",
            date=day,
        )
        self._challenges.append(challenge)
        self._challenges.sort(key=lambda c: c.date)
        return challenge

    def daily_challenges(self, *, since: dt.date | None = None) -> list[DailyChallenge]:
        """Challenges in date order; with `since`, only those on or after that day."""
        if since is None:
            return list(self._challenges)
        return [c for c in self._challenges if c.date >= since]

    def clear(self) -> None:
        self._scores = []
        self._leaderboard = []
        self._unlocked = []
        self._challenges = []
