from __future__ import annotations

import datetime as dt
import logging
from datetime import UTC, datetime

from fastapi import APIRouter, Depends, HTTPException, Query, status

from snake_engine.api.deps import get_score_store
from snake_engine.api.models import (
    AchievementListResponse,
    AchievementUnlockRequest,
    DailyChallenge,
    DailyChallengeCreate,
    DailyChallengeListResponse,
    Difficulty,
    GameMode,
    LeaderboardEntry,
    LeaderboardResponse,
    LeaderboardSubmission,
    ScoreListResponse,
    ScoreRecord,
    ScoreSubmission,
    UserAchievement,
    UserAchievementListResponse,
)
from snake_engine.score_store import DEFAULT_LEADERBOARD_LIMIT, ConflictError, NotFoundError, ScoreStore

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/healthcheck")
async def healthcheck() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/scores", response_model=ScoreListResponse)
async def list_scores_route(store: ScoreStore = Depends(get_score_store)) -> ScoreListResponse:
    return ScoreListResponse(scores=store.list_scores())


@router.post("/scores", response_model=ScoreRecord, status_code=status.HTTP_201_CREATED)
async def submit_score_route(payload: ScoreSubmission, store: ScoreStore = Depends(get_score_store)) -> ScoreRecord:
    record = store.add_score(payload)
    logger.info("Score recorded: %s (%s/%s)", record.score, record.game_mode.value, record.difficulty.value)
    return record


@router.get("/leaderboard", response_model=LeaderboardResponse)
async def leaderboard_route(
    game_mode: GameMode | None = None,
    difficulty: Difficulty | None = None,
    limit: int = Query(DEFAULT_LEADERBOARD_LIMIT, ge=0),
    offset: int = Query(0, ge=0),
    store: ScoreStore = Depends(get_score_store),
) -> LeaderboardResponse:
    try:
        entries, total = store.leaderboard(game_mode=game_mode, difficulty=difficulty, limit=limit, offset=offset)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e)) from e
    return LeaderboardResponse(entries=entries, total=total)


@router.post("/leaderboard", response_model=LeaderboardEntry, status_code=status.HTTP_201_CREATED)
async def submit_leaderboard_route(
    payload: LeaderboardSubmission,
    store: ScoreStore = Depends(get_score_store),
) -> LeaderboardEntry:
    return store.add_leaderboard_entry(payload)


@router.delete("/leaderboard")
async def clear_leaderboard_route(store: ScoreStore = Depends(get_score_store)) -> dict[str, str]:
    store.clear_leaderboard()
    return {"status": "cleared"}


@router.get("/achievements", response_model=AchievementListResponse)
async def list_achievements_route(store: ScoreStore = Depends(get_score_store)) -> AchievementListResponse:
    return AchievementListResponse(achievements=store.list_achievements())


@router.post("/achievements", response_model=UserAchievement, status_code=status.HTTP_201_CREATED)
async def unlock_achievement_route(
    payload: AchievementUnlockRequest,
    store: ScoreStore = Depends(get_score_store),
) -> UserAchievement:
    try:
        unlocked = store.unlock_achievement(payload.user_id, payload.achievement_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    except ConflictError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e)) from e
    logger.info("Achievement %s unlocked for %s", unlocked.achievement_id, unlocked.user_id)
    return unlocked


@router.get("/users/{user_id}/achievements", response_model=UserAchievementListResponse)
async def user_achievements_route(user_id: str, store: ScoreStore = Depends(get_score_store)) -> UserAchievementListResponse:
    return UserAchievementListResponse(achievements=store.user_achievements(user_id))


@router.get("/daily-challenges", response_model=DailyChallengeListResponse)
async def list_daily_challenges_route(
    since: dt.date | None = None,
    store: ScoreStore = Depends(get_score_store),
) -> DailyChallengeListResponse:
    # Past challenges are hidden unless the caller asks for an earlier day.
    challenges = store.daily_challenges(since=since or datetime.now(tz=UTC).date())
    return DailyChallengeListResponse(challenges=challenges, total=len(challenges))


@router.post("/daily-challenges", response_model=DailyChallenge, status_code=status.HTTP_201_CREATED)
async def create_daily_challenge_route(
    payload: DailyChallengeCreate,
    store: ScoreStore = Depends(get_score_store),
) -> DailyChallenge:
    try:
        challenge = store.add_daily_challenge(payload)
    except ConflictError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e)) from e
    logger.info("Daily challenge %s created for %s", challenge.id, challenge.date.isoformat())
    return challenge
