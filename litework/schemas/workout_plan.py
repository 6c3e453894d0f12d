"""Workout plan, exercise group and plan exercise schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, model_validator

from litework.core.enums import GroupType, WeightType


class ExerciseRef(BaseModel):
    """Minimal exercise info embedded in plan exercises."""

    id: UUID
    name: str

    model_config = ConfigDict(from_attributes=True)


class ExerciseGroupIn(BaseModel):
    """``key`` is a client-side handle that plan exercises use to join the group."""

    key: str = Field(..., min_length=1, max_length=64)
    name: str = Field(..., min_length=1, max_length=255)
    type: GroupType = GroupType.SECTION
    description: str | None = None
    order_index: int = 0
    rounds: int = Field(default=1, ge=1, le=50)
    rest_between_rounds: int | None = Field(None, ge=0)
    rest_between_exercises: int | None = Field(None, ge=0)
    notes: str | None = None


class ExerciseGroupRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: UUID
    name: str
    type: GroupType
    description: str | None = None
    order_index: int
    rounds: int
    rest_between_rounds: int | None = None
    rest_between_exercises: int | None = None
    notes: str | None = None


class WorkoutExerciseIn(BaseModel):
    exercise_id: UUID
    group_key: str | None = None
    order_index: int | None = None
    sets: int = Field(default=3, ge=1, le=100)
    reps: str = Field(default="10", min_length=1, max_length=20)
    weight_type: WeightType = WeightType.FIXED
    weight: float | None = Field(None, ge=0)
    weight_max: float | None = Field(None, ge=0)
    percentage: float | None = Field(None, ge=0, le=200)
    percentage_max: float | None = Field(None, ge=0, le=200)
    tempo: str | None = Field(None, max_length=20)
    each_side: bool = False
    rest_seconds: int | None = Field(None, ge=0)
    notes: str | None = None

    @model_validator(mode="after")
    def check_ranges(self):
        if self.weight is not None and self.weight_max is not None and self.weight_max < self.weight:
            raise ValueError("weight_max must be >= weight")
        if (
            self.percentage is not None
            and self.percentage_max is not None
            and self.percentage_max < self.percentage
        ):
            raise ValueError("percentage_max must be >= percentage")
        return self


class WorkoutExerciseRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: UUID
    exercise_id: UUID
    group_id: UUID | None = None
    order_index: int
    sets: int
    reps: str
    weight_type: WeightType
    weight: float | None = None
    weight_max: float | None = None
    percentage: float | None = None
    percentage_max: float | None = None
    tempo: str | None = None
    each_side: bool = False
    rest_seconds: int | None = None
    notes: str | None = None
    exercise: ExerciseRef | None = None


class WorkoutPlanBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    estimated_duration: int = Field(default=60, ge=1, le=600)
    target_group_id: UUID | None = None


class WorkoutPlanWrite(WorkoutPlanBase):
    """Create and full replace (PUT) share one body: groups and exercises are rewritten."""

    groups: list[ExerciseGroupIn] = []
    exercises: list[WorkoutExerciseIn] = []

    @model_validator(mode="after")
    def check_group_keys(self):
        keys = [g.key for g in self.groups]
        if len(keys) != len(set(keys)):
            raise ValueError("Duplicate group key")
        unknown = {e.group_key for e in self.exercises if e.group_key} - set(keys)
        if unknown:
            raise ValueError(f"Unknown group key(s): {', '.join(sorted(unknown))}")
        return self


class WorkoutPlanSummary(WorkoutPlanBase):
    model_config = ConfigDict(from_attributes=True)
    id: UUID
    created_by: UUID | None = None
    archived: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None


class WorkoutPlanRead(WorkoutPlanSummary):
    groups: list[ExerciseGroupRead] = []
    exercises: list[WorkoutExerciseRead] = []
