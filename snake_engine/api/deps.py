from __future__ import annotations

from snake_engine.api.models import Achievement, AchievementCategory, AchievementCondition, AchievementConditionType
from snake_engine.score_store import ScoreStore

STARTER_ACHIEVEMENTS: tuple[Achievement, ...] = (
    Achievement(
        id="first-bite",
        name="First Bite",
        description="Score your first points",
        category=AchievementCategory.score,
        condition=AchievementCondition(type=AchievementConditionType.score, target=10),
    ),
    Achievement(
        id="century",
        name="Century",
        description="Reach 100 points in one game",
        category=AchievementCategory.score,
        condition=AchievementCondition(type=AchievementConditionType.score, target=100),
    ),
    Achievement(
        id="regular",
        name="Regular",
        description="Play ten games",
        category=AchievementCategory.gameplay,
        condition=AchievementCondition(type=AchievementConditionType.games_played, target=10),
    ),
)

_STORE = ScoreStore(achievements=list(STARTER_ACHIEVEMENTS))


def get_score_store() -> ScoreStore:
    # One process-wide store; tests swap it out via app.dependency_overrides.
    return _STORE
