"""Live workout session, set record and feedback schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from litework.core.constants import MAX_BATCH_SETS
from litework.core.enums import PRType, SessionStatus
from litework.schemas.achievement import AchievementRead


class SessionStart(BaseModel):
    assignment_id: UUID


class SessionNavigate(BaseModel):
    current_exercise_index: int | None = Field(None, ge=0)
    notes: str | None = None


class SetRecordCreate(BaseModel):
    session_exercise_id: UUID
    weight: float | None = Field(None, ge=0, le=5000)
    reps: int = Field(..., ge=0, le=1000)
    rpe: int | None = Field(None, ge=1, le=10)
    notes: str | None = Field(None, max_length=500)
    completed_at: datetime | None = None
    client_id: str | None = Field(None, min_length=1, max_length=64)


class SetRecordBatch(BaseModel):
    """Sets queued by the client while offline, replayed in order."""

    sets: list[SetRecordCreate] = Field(..., min_length=1, max_length=MAX_BATCH_SETS)


class SetRecordUpdate(BaseModel):
    weight: float | None = Field(None, ge=0, le=5000)
    reps: int | None = Field(None, ge=0, le=1000)
    rpe: int | None = Field(None, ge=1, le=10)
    notes: str | None = Field(None, max_length=500)


class SetRecordRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: UUID
    session_exercise_id: UUID
    set_number: int
    weight: float | None = None
    reps: int
    rpe: int | None = None
    completed_at: datetime
    notes: str | None = None
    is_pr: bool = False
    pr_type: PRType | None = None
    client_id: str | None = None


class SessionExerciseRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: UUID
    exercise_id: UUID
    exercise_name: str
    group_id: UUID | None = None
    order_index: int
    sets_target: int
    sets_completed: int
    reps_target: str
    weight_target: float | None = None
    rest_seconds: int
    tempo: str | None = None
    notes: str | None = None
    completed: bool
    set_records: list[SetRecordRead] = []


class SessionSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: UUID
    athlete_id: UUID
    assignment_id: UUID | None = None
    workout_plan_id: UUID | None = None
    workout_name: str
    status: SessionStatus
    started_at: datetime
    paused_at: datetime | None = None
    completed_at: datetime | None = None
    total_duration_seconds: int = 0


class SessionRead(SessionSummary):
    current_exercise_index: int
    group_rounds: dict[str, int] = {}
    notes: str | None = None
    exercises: list[SessionExerciseRead] = []


class SetResult(BaseModel):
    """Response to a logged set: the record, PR outcome and where the session moved."""

    record: SetRecordRead
    pr: dict | None = None
    pr_message: str | None = None
    current_exercise_index: int
    group_rounds: dict[str, int]
    exercise_completed: bool
    round_reset_group_id: UUID | None = None
    workout_finished: bool


class BatchResult(BaseModel):
    created: int
    skipped: int
    results: list[SetResult]


class CompletionSummary(BaseModel):
    session: SessionSummary
    total_exercises: int
    total_target_sets: int
    total_completed_sets: int
    completion_percentage: int
    new_achievements: list[AchievementRead] = []


class FeedbackCreate(BaseModel):
    difficulty_rating: int = Field(..., ge=1, le=10)
    soreness_level: int = Field(..., ge=1, le=10)
    energy_level: int = Field(..., ge=1, le=10)
    soreness_areas: list[str] | None = None
    enjoyed: bool | None = None
    what_went_well: str | None = None
    what_was_difficult: str | None = None
    suggestions: str | None = None


class FeedbackRead(FeedbackCreate):
    model_config = ConfigDict(from_attributes=True)
    id: UUID
    session_id: UUID
    athlete_id: UUID
    coach_viewed: bool = False
    coach_response: str | None = None
    coach_responded_at: datetime | None = None
    created_at: datetime | None = None


class FeedbackListItem(FeedbackRead):
    """Feedback row on the coach dashboard, with who and what it is about."""

    athlete_name: str
    athlete_email: str
    workout_name: str
    session_completed_at: datetime | None = None


class FeedbackList(BaseModel):
    feedback: list[FeedbackListItem]
    count: int


class FeedbackResponse(BaseModel):
    response: str = Field(..., min_length=1, max_length=2000)
