"""Achievement badge schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel

from litework.core.enums import AchievementType


class AchievementInfo(BaseModel):
    type: AchievementType
    name: str
    description: str
    icon: str


class AchievementRead(AchievementInfo):
    id: UUID
    earned_at: datetime


class AchievementList(BaseModel):
    earned: list[AchievementRead]
    locked: list[AchievementInfo]
    total_earned: int
    total_possible: int


class AchievementCheck(BaseModel):
    athlete_id: UUID | None = None  # admins only; defaults to the caller


class AchievementCheckResult(BaseModel):
    new_achievements: list[AchievementRead]
    count: int
