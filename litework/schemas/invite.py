"""Invite schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from litework.core.enums import InviteStatus, UserRole
from litework.schemas.user import normalize_email


class InviteCreate(BaseModel):
    email: str = Field(..., min_length=3, max_length=255)
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field("", max_length=100)
    role: UserRole = UserRole.ATHLETE
    group_id: UUID | None = None

    @field_validator("email")
    @classmethod
    def check_email(cls, v: str) -> str:
        return normalize_email(v)


class InviteRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: UUID
    email: str
    first_name: str
    last_name: str
    role: UserRole
    group_id: UUID | None = None
    invited_by: UUID | None = None
    status: InviteStatus
    expires_at: datetime
    accepted_at: datetime | None = None
    created_at: datetime | None = None


class InviteAccept(BaseModel):
    invite_id: UUID
    password: str = Field(..., min_length=8, max_length=128)
    first_name: str | None = Field(None, min_length=1, max_length=100)
    last_name: str | None = Field(None, max_length=100)
