"""Live workout session, its per-exercise progress and the recorded sets."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    Boolean,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from litework.core.enums import PRType, SessionStatus
from litework.db.base import Base, JSONType


class WorkoutSession(Base):
    """One athlete performing one assignment.

    ``group_rounds`` maps exercise-group id (str) to the current round (1-based).
    ``total_duration_seconds`` excludes paused time.
    """

    __tablename__ = "workout_sessions"
    __table_args__ = (Index("ix_workout_sessions_athlete_started", "athlete_id", "started_at"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    athlete_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    assignment_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("workout_assignments.id", ondelete="SET NULL"), nullable=True, index=True
    )
    workout_plan_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("workout_plans.id", ondelete="SET NULL"), nullable=True
    )
    workout_name: Mapped[str] = mapped_column(String(255), nullable=False, default="Untitled Workout")
    status: Mapped[SessionStatus] = mapped_column(
        Enum(SessionStatus), nullable=False, default=SessionStatus.ACTIVE
    )
    started_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )
    paused_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    # Start of the current active stretch; duration accrues from here on pause/complete
    resumed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    total_duration_seconds: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    current_exercise_index: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    group_rounds: Mapped[dict] = mapped_column(JSONType, nullable=False, default=dict)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    exercises: Mapped[list["SessionExercise"]] = relationship(
        "SessionExercise",
        back_populates="session",
        cascade="all, delete-orphan",
        order_by="SessionExercise.order_index",
    )
    feedback: Mapped["WorkoutFeedback | None"] = relationship(
        "WorkoutFeedback", back_populates="session", cascade="all, delete-orphan", uselist=False
    )


class SessionExercise(Base):
    """Snapshot of a plan exercise at session start plus live progress."""

    __tablename__ = "session_exercises"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    session_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("workout_sessions.id", ondelete="CASCADE"), nullable=False, index=True
    )
    exercise_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("exercises.id", ondelete="CASCADE"), nullable=False, index=True
    )
    exercise_name: Mapped[str] = mapped_column(String(255), nullable=False)
    group_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("exercise_groups.id", ondelete="SET NULL"), nullable=True
    )
    order_index: Mapped[int] = mapped_column(Integer, default=0)
    sets_target: Mapped[int] = mapped_column(Integer, nullable=False, default=3)
    sets_completed: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    reps_target: Mapped[str] = mapped_column(String(20), nullable=False, default="10")
    weight_target: Mapped[float | None] = mapped_column(Numeric(8, 2), nullable=True)
    rest_seconds: Mapped[int] = mapped_column(Integer, nullable=False, default=60)
    tempo: Mapped[str | None] = mapped_column(String(20), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    session: Mapped["WorkoutSession"] = relationship("WorkoutSession", back_populates="exercises")
    set_records: Mapped[list["SetRecord"]] = relationship(
        "SetRecord",
        back_populates="session_exercise",
        cascade="all, delete-orphan",
        order_by="SetRecord.completed_at",
    )


class SetRecord(Base):
    """One completed set: weight/reps/RPE with PR flags.

    ``client_id`` is generated by the client so replayed offline writes are idempotent.
    """

    __tablename__ = "set_records"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    session_exercise_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("session_exercises.id", ondelete="CASCADE"), nullable=False, index=True
    )
    set_number: Mapped[int] = mapped_column(Integer, nullable=False)
    weight: Mapped[float | None] = mapped_column(Numeric(8, 2), nullable=True)
    reps: Mapped[int] = mapped_column(Integer, nullable=False)
    rpe: Mapped[int | None] = mapped_column(Integer, nullable=True)  # 1-10
    completed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )
    notes: Mapped[str | None] = mapped_column(String(500), nullable=True)
    is_pr: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    pr_type: Mapped[PRType | None] = mapped_column(Enum(PRType), nullable=True)
    client_id: Mapped[str | None] = mapped_column(String(64), nullable=True, unique=True)

    session_exercise: Mapped["SessionExercise"] = relationship("SessionExercise", back_populates="set_records")


class WorkoutFeedback(Base):
    """Athlete's post-workout feedback (1-10 scales) and the coach's reply."""

    __tablename__ = "workout_feedback"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    session_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("workout_sessions.id", ondelete="CASCADE"), nullable=False, unique=True
    )
    athlete_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    difficulty_rating: Mapped[int] = mapped_column(Integer, nullable=False)
    soreness_level: Mapped[int] = mapped_column(Integer, nullable=False)
    energy_level: Mapped[int] = mapped_column(Integer, nullable=False)
    soreness_areas: Mapped[list | None] = mapped_column(JSONType, nullable=True)
    enjoyed: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    what_went_well: Mapped[str | None] = mapped_column(Text, nullable=True)
    what_was_difficult: Mapped[str | None] = mapped_column(Text, nullable=True)
    suggestions: Mapped[str | None] = mapped_column(Text, nullable=True)
    coach_viewed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    coach_response: Mapped[str | None] = mapped_column(Text, nullable=True)
    coach_responded_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )

    session: Mapped["WorkoutSession"] = relationship("WorkoutSession", back_populates="feedback")
