"""Scheduling: assign plans to athletes or groups on a date."""

import logging
from datetime import date, datetime, time, timezone
from uuid import UUID

from fastapi import APIRouter, Body, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from litework.api.deps import get_current_user, require_coach
from litework.core.constants import DEFAULT_ASSIGNMENT_HOUR
from litework.core.dates import day_bounds, ensure_utc, utcnow
from litework.core.enums import AssignmentStatus, NotificationType
from litework.db.session import get_db
from litework.models.assignment import WorkoutAssignment
from litework.models.athlete_group import AthleteGroup
from litework.models.user import User
from litework.models.workout_plan import WorkoutPlan
from litework.schemas.assignment import (
    AssignmentBulkCreate,
    AssignmentBulkDelete,
    AssignmentCreate,
    AssignmentRead,
    AssignmentReschedule,
    AssignmentUpdate,
)
from litework.services.notifications import create_notification, merged_preferences

router = APIRouter()
log = logging.getLogger("litework.assignments")


def scheduled_at(day: date, start_time: str | None) -> datetime:
    """Day + start time (or noon) in UTC."""
    if start_time:
        hour, minute = (int(p) for p in start_time.split(":"))
        return datetime.combine(day, time(hour, minute), tzinfo=timezone.utc)
    return datetime.combine(day, time(DEFAULT_ASSIGNMENT_HOUR), tzinfo=timezone.utc)


def _to_read(a: WorkoutAssignment) -> AssignmentRead:
    """Pending assignments from past days are reported as overdue."""
    out = AssignmentRead.model_validate(a)
    out.workout_name = a.workout_plan.name if a.workout_plan else None
    if a.status == AssignmentStatus.ASSIGNED and ensure_utc(a.scheduled_date).date() < utcnow().date():
        out.status = AssignmentStatus.OVERDUE
    return out


def _assignment_query():
    return select(WorkoutAssignment).options(selectinload(WorkoutAssignment.workout_plan))


async def _load_assignment(db: AsyncSession, assignment_id: UUID) -> WorkoutAssignment:
    a = (await db.execute(_assignment_query().where(WorkoutAssignment.id == assignment_id))).scalar_one_or_none()
    if not a:
        raise HTTPException(status_code=404, detail="Assignment not found")
    return a


async def _create_assignments(
    db: AsyncSession, payload: AssignmentCreate, coach: User
) -> list[WorkoutAssignment]:
    plan = await db.get(WorkoutPlan, payload.workout_plan_id)
    if not plan:
        raise HTTPException(status_code=404, detail="Workout not found")
    if payload.group_id:
        group = (
            await db.execute(
                select(AthleteGroup)
                .options(selectinload(AthleteGroup.members))
                .where(AthleteGroup.id == payload.group_id)
            )
        ).scalar_one_or_none()
        if not group:
            raise HTTPException(status_code=404, detail="Group not found")
        athlete_ids = group.athlete_ids
        if not athlete_ids:
            raise HTTPException(status_code=400, detail="Group has no athletes")
    else:
        if not await db.get(User, payload.athlete_id):
            raise HTTPException(status_code=404, detail="Athlete not found")
        athlete_ids = [payload.athlete_id]

    when = scheduled_at(payload.scheduled_date, payload.start_time)
    fields = payload.model_dump(exclude={"athlete_id", "group_id", "scheduled_date", "workout_plan_id"})
    created = []
    for athlete_id in athlete_ids:
        a = WorkoutAssignment(
            workout_plan_id=plan.id,
            athlete_id=athlete_id,
            group_id=payload.group_id,
            assigned_by=coach.id,
            scheduled_date=when,
            **fields,
        )
        a.workout_plan = plan
        db.add(a)
        created.append(a)
    await db.flush()

    athletes = (await db.execute(select(User).where(User.id.in_(athlete_ids)))).scalars().all()
    for athlete in athletes:
        if merged_preferences(athlete.notification_preferences)["assignmentNotifications"].get("enabled", True):
            await create_notification(
                db,
                athlete.id,
                title=f"New workout: {plan.name}",
                body=f"Scheduled for {payload.scheduled_date.isoformat()}",
                type_=NotificationType.ASSIGNMENT,
                url="/schedule",
            )
    return created


@router.get("", response_model=list[AssignmentRead])
async def list_assignments(
    athlete_id: UUID | None = None,
    group_id: UUID | None = None,
    date: date | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Assignments by athlete, group, single day or inclusive date range. Athletes see their own."""
    stmt = _assignment_query()
    if not user.is_coach:
        athlete_id = user.id
    if athlete_id:
        stmt = stmt.where(WorkoutAssignment.athlete_id == athlete_id)
    if group_id:
        stmt = stmt.where(WorkoutAssignment.group_id == group_id)
    if date:
        start, end = day_bounds(date)
        stmt = stmt.where(WorkoutAssignment.scheduled_date >= start, WorkoutAssignment.scheduled_date < end)
    if start_date:
        stmt = stmt.where(WorkoutAssignment.scheduled_date >= day_bounds(start_date)[0])
    if end_date:
        stmt = stmt.where(WorkoutAssignment.scheduled_date < day_bounds(end_date)[1])
    result = await db.execute(stmt.order_by(WorkoutAssignment.scheduled_date))
    return [_to_read(a) for a in result.scalars().all()]


@router.post("", response_model=list[AssignmentRead], status_code=201)
async def create_assignment(
    payload: AssignmentCreate,
    coach: User = Depends(require_coach),
    db: AsyncSession = Depends(get_db),
):
    """Assign to one athlete, or to a group (one row per current member)."""
    return [_to_read(a) for a in await _create_assignments(db, payload, coach)]


@router.post("/bulk", response_model=list[AssignmentRead], status_code=201)
async def bulk_create_assignments(
    payload: AssignmentBulkCreate,
    coach: User = Depends(require_coach),
    db: AsyncSession = Depends(get_db),
):
    created: list[WorkoutAssignment] = []
    for item in payload.assignments:
        created.extend(await _create_assignments(db, item, coach))
    log.info("Bulk-created %d assignments", len(created))
    return [_to_read(a) for a in created]


@router.delete("/bulk")
async def bulk_delete_assignments(
    payload: AssignmentBulkDelete = Body(...),
    coach: User = Depends(require_coach),
    db: AsyncSession = Depends(get_db),
):
    result = await db.execute(
        select(WorkoutAssignment).where(WorkoutAssignment.id.in_(set(payload.assignment_ids)))
    )
    rows = result.scalars().all()
    for a in rows:
        await db.delete(a)
    await db.flush()
    return {"deleted": len(rows)}


@router.patch("/reschedule", response_model=list[AssignmentRead])
async def reschedule_assignment(
    payload: AssignmentReschedule,
    coach: User = Depends(require_coach),
    db: AsyncSession = Depends(get_db),
):
    """Move an assignment to another day, keeping its start time.

    With ``move_group`` the sibling rows of a group assignment (same group,
    plan and day) move too.
    """
    a = await _load_assignment(db, payload.assignment_id)
    targets = [a]
    if payload.move_group and a.group_id:
        start, end = day_bounds(ensure_utc(a.scheduled_date).date())
        result = await db.execute(
            _assignment_query().where(
                WorkoutAssignment.group_id == a.group_id,
                WorkoutAssignment.workout_plan_id == a.workout_plan_id,
                WorkoutAssignment.scheduled_date >= start,
                WorkoutAssignment.scheduled_date < end,
            )
        )
        targets = list(result.scalars().all())

    for t in targets:
        t.scheduled_date = scheduled_at(payload.new_date, t.start_time)
        t.reminder_sent = False
    await db.flush()
    return [_to_read(t) for t in targets]


@router.get("/{assignment_id}", response_model=AssignmentRead)
async def get_assignment(
    assignment_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    a = await _load_assignment(db, assignment_id)
    if not user.is_coach and a.athlete_id != user.id:
        raise HTTPException(status_code=404, detail="Assignment not found")
    return _to_read(a)


@router.patch("/{assignment_id}", response_model=AssignmentRead)
async def update_assignment(
    assignment_id: UUID,
    payload: AssignmentUpdate,
    coach: User = Depends(require_coach),
    db: AsyncSession = Depends(get_db),
):
    a = await _load_assignment(db, assignment_id)
    data = payload.model_dump(exclude_unset=True)
    new_day = data.pop("scheduled_date", None)
    for k, v in data.items():
        setattr(a, k, v)
    if new_day is not None or "start_time" in data:
        day = new_day or ensure_utc(a.scheduled_date).date()
        a.scheduled_date = scheduled_at(day, a.start_time)
        a.reminder_sent = False
    if a.status == AssignmentStatus.COMPLETED and a.completed_at is None:
        a.completed_at = utcnow()
    await db.flush()
    return _to_read(a)


@router.delete("/{assignment_id}", status_code=204)
async def delete_assignment(
    assignment_id: UUID,
    coach: User = Depends(require_coach),
    db: AsyncSession = Depends(get_db),
):
    a = await _load_assignment(db, assignment_id)
    await db.delete(a)
    return None
