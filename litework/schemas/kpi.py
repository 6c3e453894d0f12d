"""Athlete KPI schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class KPICreate(BaseModel):
    athlete_id: UUID | None = None  # defaults to the caller
    exercise_id: UUID
    current_pr: float = Field(default=0, ge=0)
    date_achieved: datetime | None = None
    notes: str | None = None


class KPIUpdate(BaseModel):
    current_pr: float | None = Field(None, ge=0)
    date_achieved: datetime | None = None
    notes: str | None = None
    is_active: bool | None = None


class KPIRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: UUID
    athlete_id: UUID
    exercise_id: UUID
    exercise_name: str | None = None
    current_pr: float
    date_achieved: datetime | None = None
    notes: str | None = None
    is_active: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None
