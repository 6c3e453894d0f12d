"""Exercise schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class ExerciseBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    category: str = Field(default="strength", max_length=50)
    description: str | None = None
    target_muscle_groups: list[str] | None = None
    instructions: list[str] | None = None
    video_url: str | None = Field(None, max_length=500)


class ExerciseCreate(ExerciseBase):
    pass


class ExerciseFindOrCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    category: str = Field(default="strength", max_length=50)


class ExerciseUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=255)
    category: str | None = Field(None, max_length=50)
    description: str | None = None
    target_muscle_groups: list[str] | None = None
    instructions: list[str] | None = None
    video_url: str | None = None


class ExerciseRead(ExerciseBase):
    model_config = ConfigDict(from_attributes=True)
    id: UUID
    created_by: UUID | None = None
    created_at: datetime | None = None
