"""Workout block schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from litework.core.enums import BlockCategory
from litework.schemas.workout_plan import ExerciseGroupIn, WorkoutExerciseIn


class BlockCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    category: BlockCategory = BlockCategory.CUSTOM
    groups: list[ExerciseGroupIn] = []
    exercises: list[WorkoutExerciseIn] = Field(..., min_length=1)
    tags: list[str] = []
    estimated_duration: int = Field(default=10, ge=1, le=600)
    is_template: bool = False


class BlockRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: UUID
    name: str
    description: str | None = None
    category: BlockCategory
    groups: list[dict] = []
    exercises: list[dict] = []
    tags: list[str] = []
    estimated_duration: int
    is_template: bool
    is_favorite: bool
    usage_count: int
    last_used: datetime | None = None
    created_by: UUID | None = None
    created_at: datetime | None = None
