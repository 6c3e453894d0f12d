"""Analytics request schemas (responses are plain dicts, like the streak endpoint)."""

from uuid import UUID

from pydantic import BaseModel, Field


class CheckPRRequest(BaseModel):
    exercise_id: UUID
    weight: float = Field(..., ge=0, le=5000)
    reps: int = Field(..., ge=1, le=1000)
    athlete_id: UUID | None = None
