"""Athlete group schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

HEX_COLOR = r"^#[0-9a-fA-F]{6}$"


class GroupCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    sport: str = Field(..., min_length=1, max_length=100)
    category: str | None = Field(None, max_length=100)
    description: str | None = None
    color: str | None = Field(None, pattern=HEX_COLOR)
    athlete_ids: list[UUID] = []


class GroupUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=255)
    sport: str | None = Field(None, min_length=1, max_length=100)
    category: str | None = None
    description: str | None = None
    color: str | None = Field(None, pattern=HEX_COLOR)
    archived: bool | None = None


class GroupMembersAdd(BaseModel):
    athlete_ids: list[UUID] = Field(..., min_length=1)


class GroupRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: UUID
    name: str
    sport: str
    category: str | None = None
    description: str | None = None
    color: str
    coach_id: UUID | None = None
    archived: bool
    athlete_ids: list[UUID] = []
    created_at: datetime | None = None
    updated_at: datetime | None = None
