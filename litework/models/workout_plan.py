"""Workout plans: ordered exercises, optionally bundled into groups (superset/circuit/section)."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, Enum, ForeignKey, Index, Integer, Numeric, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from litework.core.enums import GroupType, WeightType
from litework.db.base import Base


class WorkoutPlan(Base):
    """A coach-authored workout. Archived plans are hidden from default listings."""

    __tablename__ = "workout_plans"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    estimated_duration: Mapped[int] = mapped_column(Integer, nullable=False, default=60)  # minutes
    target_group_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("athlete_groups.id", ondelete="SET NULL"), nullable=True
    )
    created_by: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    archived: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    groups: Mapped[list["ExerciseGroup"]] = relationship(
        "ExerciseGroup",
        back_populates="plan",
        cascade="all, delete-orphan",
        order_by="ExerciseGroup.order_index",
    )
    exercises: Mapped[list["WorkoutExercise"]] = relationship(
        "WorkoutExercise",
        back_populates="plan",
        cascade="all, delete-orphan",
        order_by="WorkoutExercise.order_index",
    )


class ExerciseGroup(Base):
    """Superset, circuit or section inside one plan, with shared rounds and rest."""

    __tablename__ = "exercise_groups"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    plan_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("workout_plans.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    type: Mapped[GroupType] = mapped_column(Enum(GroupType), nullable=False, default=GroupType.SECTION)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    order_index: Mapped[int] = mapped_column(Integer, default=0)
    rounds: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    rest_between_rounds: Mapped[int | None] = mapped_column(Integer, nullable=True)  # seconds
    rest_between_exercises: Mapped[int | None] = mapped_column(Integer, nullable=True)  # seconds
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    plan: Mapped["WorkoutPlan"] = relationship("WorkoutPlan", back_populates="groups")


class WorkoutExercise(Base):
    """One prescribed exercise in a plan: sets x reps at a fixed, percentage or bodyweight load."""

    __tablename__ = "workout_exercises"
    __table_args__ = (Index("ix_workout_exercises_plan_order", "plan_id", "order_index"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    plan_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("workout_plans.id", ondelete="CASCADE"), nullable=False
    )
    exercise_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("exercises.id", ondelete="CASCADE"), nullable=False, index=True
    )
    group_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("exercise_groups.id", ondelete="SET NULL"), nullable=True
    )
    order_index: Mapped[int] = mapped_column(Integer, default=0)
    sets: Mapped[int] = mapped_column(Integer, nullable=False, default=3)
    reps: Mapped[str] = mapped_column(String(20), nullable=False, default="10")  # "10" or "8-12"
    weight_type: Mapped[WeightType] = mapped_column(Enum(WeightType), nullable=False, default=WeightType.FIXED)
    weight: Mapped[float | None] = mapped_column(Numeric(8, 2), nullable=True)
    weight_max: Mapped[float | None] = mapped_column(Numeric(8, 2), nullable=True)
    percentage: Mapped[float | None] = mapped_column(Numeric(5, 2), nullable=True)
    percentage_max: Mapped[float | None] = mapped_column(Numeric(5, 2), nullable=True)
    tempo: Mapped[str | None] = mapped_column(String(20), nullable=True)  # e.g. "3-1-1-0"
    each_side: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    rest_seconds: Mapped[int | None] = mapped_column(Integer, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    plan: Mapped["WorkoutPlan"] = relationship("WorkoutPlan", back_populates="exercises")
    exercise: Mapped["Exercise"] = relationship("Exercise")
