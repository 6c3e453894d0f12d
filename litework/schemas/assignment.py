"""Workout assignment (scheduling) schemas."""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, model_validator

from litework.core.enums import AssignmentStatus

TIME_OF_DAY = r"^([01]\d|2[0-3]):[0-5]\d$"


class AssignmentCreate(BaseModel):
    """Exactly one of ``athlete_id`` / ``group_id``. A group fans out to one row per member."""

    workout_plan_id: UUID
    athlete_id: UUID | None = None
    group_id: UUID | None = None
    scheduled_date: date
    start_time: str | None = Field(None, pattern=TIME_OF_DAY)
    end_time: str | None = Field(None, pattern=TIME_OF_DAY)
    location: str | None = Field(None, max_length=255)
    notes: str | None = None

    @model_validator(mode="after")
    def check_target(self):
        if (self.athlete_id is None) == (self.group_id is None):
            raise ValueError("Provide exactly one of athlete_id or group_id")
        if self.start_time and self.end_time and self.end_time <= self.start_time:
            raise ValueError("end_time must be after start_time")
        return self


class AssignmentBulkCreate(BaseModel):
    assignments: list[AssignmentCreate] = Field(..., min_length=1, max_length=500)


class AssignmentBulkDelete(BaseModel):
    assignment_ids: list[UUID] = Field(..., min_length=1, max_length=500)


class AssignmentUpdate(BaseModel):
    scheduled_date: date | None = None
    start_time: str | None = Field(None, pattern=TIME_OF_DAY)
    end_time: str | None = Field(None, pattern=TIME_OF_DAY)
    location: str | None = Field(None, max_length=255)
    notes: str | None = None
    status: AssignmentStatus | None = None


class AssignmentReschedule(BaseModel):
    assignment_id: UUID
    new_date: date
    move_group: bool = False


class AssignmentRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: UUID
    workout_plan_id: UUID
    workout_name: str | None = None
    athlete_id: UUID
    group_id: UUID | None = None
    assigned_by: UUID | None = None
    scheduled_date: datetime
    start_time: str | None = None
    end_time: str | None = None
    location: str | None = None
    notes: str | None = None
    status: AssignmentStatus
    completed_at: datetime | None = None
    reminder_sent: bool = False
    created_at: datetime | None = None
