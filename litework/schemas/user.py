"""User, auth and profile schemas."""

from datetime import date, datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from litework.core.enums import ReminderTiming, UserRole


def normalize_email(value: str) -> str:
    value = value.strip().lower()
    if "@" not in value or value.startswith("@") or value.endswith("@"):
        raise ValueError("Invalid email address")
    return value


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=1)

    @field_validator("email")
    @classmethod
    def check_email(cls, v: str) -> str:
        return normalize_email(v)


class UserRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: UUID
    email: str
    first_name: str
    last_name: str
    full_name: str
    role: UserRole
    coach_id: UUID | None = None
    date_of_birth: date | None = None
    injury_status: str | None = None
    created_at: datetime | None = None


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_at: datetime
    user: UserRead


class ProfileUpdate(BaseModel):
    first_name: str | None = Field(None, min_length=1, max_length=100)
    last_name: str | None = Field(None, max_length=100)
    date_of_birth: date | None = None
    injury_status: str | None = Field(None, max_length=500)


class AthleteUpdate(ProfileUpdate):
    """Coach-side edit; may also move the athlete to another coach."""

    coach_id: UUID | None = None


ReminderChannel = Literal["email", "push"]


class ReminderPreferences(BaseModel):
    enabled: bool = True
    timing: ReminderTiming = ReminderTiming.SMART
    channels: list[ReminderChannel] = ["email"]


class ChannelPreferences(BaseModel):
    enabled: bool = True
    channels: list[ReminderChannel] = ["push"]


class NotificationPreferences(BaseModel):
    """Stored on the user as camelCase JSON, as the web client reads it."""

    model_config = ConfigDict(populate_by_name=True)

    workout_reminders: ReminderPreferences = Field(default_factory=ReminderPreferences, alias="workoutReminders")
    achievement_notifications: ChannelPreferences = Field(
        default_factory=ChannelPreferences, alias="achievementNotifications"
    )
    assignment_notifications: ChannelPreferences = Field(
        default_factory=ChannelPreferences, alias="assignmentNotifications"
    )
