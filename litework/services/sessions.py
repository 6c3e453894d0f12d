"""DB-side live session operations: starting from an assignment and recording sets."""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Mapping

from fastapi import HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from litework.core.constants import DEFAULT_REPS_TARGET, DEFAULT_REST_SECONDS, DEFAULT_SETS_TARGET
from litework.core.dates import ensure_utc, utcnow
from litework.core.enums import AssignmentStatus, NotificationType, SessionStatus, WeightType
from litework.models.assignment import WorkoutAssignment
from litework.models.kpi import AthleteKPI
from litework.models.user import User
from litework.models.workout_plan import ExerciseGroup, WorkoutExercise, WorkoutPlan
from litework.models.workout_session import SessionExercise, SetRecord, WorkoutSession
from litework.schemas.session import SetRecordCreate
from litework.services.notifications import create_notification, merged_preferences
from litework.services.pr_detection import PRComparison, check_pr, format_pr_message
from litework.services.session_progression import (
    Advance,
    ExerciseState,
    GroupInfo,
    advance_after_set,
    apply_advance,
    planned_rounds,
)

log = logging.getLogger("litework.sessions")

OPEN_STATUSES = (SessionStatus.ACTIVE, SessionStatus.PAUSED)


@dataclass
class RecordedSet:
    record: SetRecord
    comparison: PRComparison | None
    advance: Advance | None
    created: bool


def session_query():
    return select(WorkoutSession).options(
        selectinload(WorkoutSession.exercises).selectinload(SessionExercise.set_records)
    )


async def load_session(db: AsyncSession, session_id: uuid.UUID, refresh: bool = False) -> WorkoutSession:
    stmt = session_query().where(WorkoutSession.id == session_id)
    if refresh:
        stmt = stmt.execution_options(populate_existing=True)
    session = (await db.execute(stmt)).scalar_one_or_none()
    if not session:
        raise HTTPException(status_code=404, detail="Session not found")
    return session


def accrue_active_time(session: WorkoutSession, now: datetime) -> None:
    """Add the running active stretch to the total and close it."""
    if session.status == SessionStatus.ACTIVE and session.resumed_at is not None:
        elapsed = (ensure_utc(now) - ensure_utc(session.resumed_at)).total_seconds()
        session.total_duration_seconds = (session.total_duration_seconds or 0) + max(int(elapsed), 0)
    session.resumed_at = None


async def _kpi_targets(db: AsyncSession, athlete_id: uuid.UUID) -> dict[uuid.UUID, float]:
    result = await db.execute(
        select(AthleteKPI.exercise_id, AthleteKPI.current_pr).where(
            AthleteKPI.athlete_id == athlete_id, AthleteKPI.is_active.is_(True)
        )
    )
    return {exercise_id: float(pr) for exercise_id, pr in result.all()}


def _weight_target(we: WorkoutExercise, one_rms: dict[uuid.UUID, float]) -> float | None:
    """Fixed weight, or percentage of the athlete's tracked 1RM rounded to 0.5."""
    if we.weight_type == WeightType.FIXED and we.weight is not None:
        return float(we.weight)
    if we.weight_type == WeightType.PERCENTAGE and we.percentage is not None:
        one_rm = one_rms.get(we.exercise_id)
        if one_rm:
            return round(one_rm * float(we.percentage) / 100 * 2) / 2
    return None


async def start_session(db: AsyncSession, athlete: User, assignment_id: uuid.UUID) -> WorkoutSession:
    """Start (or return the open) session for one of the athlete's assignments."""
    assignment = await db.get(WorkoutAssignment, assignment_id)
    if not assignment or assignment.athlete_id != athlete.id:
        raise HTTPException(status_code=404, detail="Assignment not found")
    if assignment.status == AssignmentStatus.COMPLETED:
        raise HTTPException(status_code=400, detail="Workout already completed")

    open_id = await db.scalar(
        select(WorkoutSession.id).where(
            WorkoutSession.assignment_id == assignment_id, WorkoutSession.status.in_(OPEN_STATUSES)
        )
    )
    if open_id:
        return await load_session(db, open_id)

    plan = (
        await db.execute(
            select(WorkoutPlan)
            .options(
                selectinload(WorkoutPlan.groups),
                selectinload(WorkoutPlan.exercises).selectinload(WorkoutExercise.exercise),
            )
            .where(WorkoutPlan.id == assignment.workout_plan_id)
        )
    ).scalar_one_or_none()
    if not plan:
        raise HTTPException(status_code=404, detail="Workout not found")
    if not plan.exercises:
        raise HTTPException(status_code=400, detail="Workout has no exercises")

    one_rms = await _kpi_targets(db, athlete.id)
    now = utcnow()
    session = WorkoutSession(
        athlete_id=athlete.id,
        assignment_id=assignment.id,
        workout_plan_id=plan.id,
        workout_name=plan.name,
        status=SessionStatus.ACTIVE,
        started_at=now,
        resumed_at=now,
        group_rounds={str(g.id): 1 for g in plan.groups},
        exercises=[
            SessionExercise(
                exercise_id=we.exercise_id,
                exercise_name=we.exercise.name if we.exercise else "Unknown",
                group_id=we.group_id,
                order_index=i,
                sets_target=we.sets or DEFAULT_SETS_TARGET,
                reps_target=we.reps or DEFAULT_REPS_TARGET,
                weight_target=_weight_target(we, one_rms),
                rest_seconds=we.rest_seconds if we.rest_seconds is not None else DEFAULT_REST_SECONDS,
                tempo=we.tempo,
                notes=we.notes,
            )
            for i, we in enumerate(plan.exercises)
        ],
    )
    db.add(session)
    assignment.status = AssignmentStatus.STARTED
    await db.flush()
    log.info("Session %s started for assignment %s", session.id, assignment.id)
    return await load_session(db, session.id, refresh=True)


async def group_info(db: AsyncSession, session: WorkoutSession) -> dict[str, GroupInfo]:
    group_ids = {e.group_id for e in session.exercises if e.group_id}
    if not group_ids:
        return {}
    result = await db.execute(select(ExerciseGroup).where(ExerciseGroup.id.in_(group_ids)))
    return {str(g.id): GroupInfo(str(g.id), g.type, g.rounds) for g in result.scalars().all()}


async def _on_pr(
    db: AsyncSession, athlete_id: uuid.UUID, ex: SessionExercise, comparison: PRComparison, at: datetime
) -> None:
    athlete = await db.get(User, athlete_id)
    prefs = merged_preferences(athlete.notification_preferences if athlete else None)
    if prefs["achievementNotifications"].get("enabled", True):
        await create_notification(
            db,
            athlete_id,
            title=f"New PR: {ex.exercise_name}",
            body=format_pr_message(comparison),
            type_=NotificationType.PR,
            url="/progress",
            data={"exercise_id": str(ex.exercise_id), "pr": comparison.to_dict()},
        )
    kpi = await db.scalar(
        select(AthleteKPI).where(
            AthleteKPI.athlete_id == athlete_id,
            AthleteKPI.exercise_id == ex.exercise_id,
            AthleteKPI.is_active.is_(True),
        )
    )
    one_rm = comparison.current_performance.estimated_one_rm
    if kpi and one_rm > float(kpi.current_pr or 0):
        kpi.current_pr = one_rm
        kpi.date_achieved = at


async def record_set(db: AsyncSession, session: WorkoutSession, payload: SetRecordCreate) -> RecordedSet:
    """Store one set, run PR detection and move the session along.

    A ``client_id`` already stored in this session returns that record untouched;
    one stored in any other session is a conflict.
    """
    if payload.client_id:
        existing = (
            await db.execute(
                select(SetRecord, SessionExercise.session_id)
                .join(SessionExercise, SessionExercise.id == SetRecord.session_exercise_id)
                .where(SetRecord.client_id == payload.client_id)
            )
        ).first()
        if existing:
            record, owner_session_id = existing
            if owner_session_id != session.id:
                raise HTTPException(status_code=409, detail="client_id is already used by another session")
            return RecordedSet(record, None, None, created=False)
    if session.status not in OPEN_STATUSES:
        raise HTTPException(status_code=400, detail=f"Session is {session.status.value}")

    index = next((i for i, e in enumerate(session.exercises) if e.id == payload.session_exercise_id), None)
    if index is None:
        raise HTTPException(status_code=404, detail="Exercise not found in this session")
    ex = session.exercises[index]

    comparison = None
    if payload.weight is not None and payload.weight > 0 and payload.reps > 0:
        comparison = await check_pr(db, session.athlete_id, ex.exercise_id, payload.weight, payload.reps)

    completed_at = ensure_utc(payload.completed_at) if payload.completed_at else utcnow()
    record = SetRecord(
        set_number=len(ex.set_records) + 1,
        weight=payload.weight,
        reps=payload.reps,
        rpe=payload.rpe,
        notes=payload.notes,
        completed_at=completed_at,
        client_id=payload.client_id,
        is_pr=bool(comparison and comparison.is_pr),
        pr_type=comparison.type if comparison and comparison.is_pr else None,
    )
    ex.set_records.append(record)
    ex.sets_completed += 1

    states = [
        ExerciseState(str(e.group_id) if e.group_id else None, e.sets_target, e.sets_completed, e.completed)
        for e in session.exercises
    ]
    advance = advance_after_set(states, await group_info(db, session), index, session.group_rounds or {})
    apply_advance(session.exercises, advance, index)
    session.current_exercise_index = advance.next_index
    session.group_rounds = advance.group_rounds

    if record.is_pr:
        await _on_pr(db, session.athlete_id, ex, comparison, completed_at)
    await db.flush()
    return RecordedSet(record, comparison, advance, created=True)


def rescore_needed(record: SetRecord, changes: dict) -> bool:
    return ("weight" in changes and changes["weight"] != record.weight) or (
        "reps" in changes and changes["reps"] != record.reps
    )


async def rescore_set(db: AsyncSession, record: SetRecord, athlete_id: uuid.UUID, exercise_id: uuid.UUID) -> None:
    """Re-run PR detection for an edited set against every other set."""
    weight = float(record.weight) if record.weight is not None else None
    if not weight or not record.reps:
        record.is_pr, record.pr_type = False, None
        return
    comparison = await check_pr(db, athlete_id, exercise_id, weight, record.reps, exclude_set_id=record.id)
    record.is_pr = comparison.is_pr
    record.pr_type = comparison.type


def completion_summary(session: WorkoutSession, groups: Mapping[str, GroupInfo]) -> dict:
    """Set totals for a finished session. Looping groups count their sets once per round."""
    target = done = 0
    for e in session.exercises:
        planned = e.sets_target * planned_rounds(groups.get(str(e.group_id)) if e.group_id else None)
        target += planned
        done += min(len(e.set_records), planned)
    return {
        "total_exercises": len(session.exercises),
        "total_target_sets": target,
        "total_completed_sets": done,
        "completion_percentage": min(round(done / target * 100), 100) if target else 0,
    }

