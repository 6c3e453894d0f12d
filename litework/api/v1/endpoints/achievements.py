"""Achievement badges: earned/locked overview and award check."""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from litework.api.deps import get_current_user, scoped_athlete_id
from litework.core.enums import UserRole
from litework.db.session import get_db
from litework.models.user import User
from litework.schemas.achievement import AchievementCheck, AchievementCheckResult, AchievementList
from litework.services.achievements import (
    ACHIEVEMENTS,
    award_achievements,
    describe,
    earned_achievements,
    locked_definitions,
)

router = APIRouter()


@router.get("", response_model=AchievementList)
async def list_achievements(
    athlete_id: UUID | None = None,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Earned badges (newest first) and the ones still locked. Coaches may pass ``athlete_id``."""
    earned = await earned_achievements(db, scoped_athlete_id(user, athlete_id))
    return AchievementList(
        earned=[describe(a) for a in earned],
        locked=locked_definitions(earned),
        total_earned=len(earned),
        total_possible=len(ACHIEVEMENTS),
    )


@router.post("/check", response_model=AchievementCheckResult)
async def check_achievements(
    payload: AchievementCheck,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Award any achievements the athlete now qualifies for."""
    athlete_id = payload.athlete_id or user.id
    if athlete_id != user.id and user.role != UserRole.ADMIN:
        raise HTTPException(status_code=403, detail="You can only check your own achievements")
    new = await award_achievements(db, athlete_id)
    return AchievementCheckResult(new_achievements=[describe(a) for a in new], count=len(new))
