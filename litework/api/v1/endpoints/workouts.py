"""Workout plan CRUD, archiving and block insertion."""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from litework.api.deps import get_current_user, require_coach
from litework.core.dates import utcnow
from litework.db.session import get_db
from litework.models.assignment import WorkoutAssignment
from litework.models.block import WorkoutBlock
from litework.models.user import User
from litework.models.workout_plan import WorkoutExercise, WorkoutPlan
from litework.schemas.workout_plan import (
    ExerciseGroupIn,
    WorkoutExerciseIn,
    WorkoutPlanRead,
    WorkoutPlanSummary,
    WorkoutPlanWrite,
)
from litework.services.plans import append_contents, ensure_exercises_exist

router = APIRouter()


def _plan_query():
    return select(WorkoutPlan).options(
        selectinload(WorkoutPlan.groups),
        selectinload(WorkoutPlan.exercises).selectinload(WorkoutExercise.exercise),
    )


async def _load_plan(db: AsyncSession, plan_id: UUID, refresh: bool = False) -> WorkoutPlan:
    stmt = _plan_query().where(WorkoutPlan.id == plan_id)
    if refresh:
        stmt = stmt.execution_options(populate_existing=True)
    plan = (await db.execute(stmt)).scalar_one_or_none()
    if not plan:
        raise HTTPException(status_code=404, detail="Workout not found")
    return plan


@router.get("", response_model=list[WorkoutPlanSummary])
async def list_workouts(
    include_archived: bool = False,
    only_archived: bool = False,
    q: str | None = None,
    coach: User = Depends(require_coach),
    db: AsyncSession = Depends(get_db),
):
    """Plans, newest first. Archived plans are hidden unless asked for."""
    stmt = select(WorkoutPlan)
    if only_archived:
        stmt = stmt.where(WorkoutPlan.archived.is_(True))
    elif not include_archived:
        stmt = stmt.where(WorkoutPlan.archived.is_(False))
    if q:
        stmt = stmt.where(WorkoutPlan.name.ilike(f"%{q.strip()}%"))
    result = await db.execute(stmt.order_by(WorkoutPlan.created_at.desc()))
    return list(result.scalars().all())


@router.post("", response_model=WorkoutPlanRead, status_code=201)
async def create_workout(
    payload: WorkoutPlanWrite,
    coach: User = Depends(require_coach),
    db: AsyncSession = Depends(get_db),
):
    """Create a plan with its groups and exercises in one request."""
    await ensure_exercises_exist(db, {e.exercise_id for e in payload.exercises})
    plan = WorkoutPlan(
        **payload.model_dump(exclude={"groups", "exercises"}),
        created_by=coach.id,
        groups=[],
        exercises=[],
    )
    append_contents(plan, payload.groups, payload.exercises)
    db.add(plan)
    await db.flush()
    return await _load_plan(db, plan.id, refresh=True)


@router.get("/{workout_id}", response_model=WorkoutPlanRead)
async def get_workout(
    workout_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Coaches see every plan; athletes only plans assigned to them."""
    plan = await _load_plan(db, workout_id)
    if not user.is_coach:
        assigned = await db.scalar(
            select(WorkoutAssignment.id)
            .where(WorkoutAssignment.workout_plan_id == workout_id, WorkoutAssignment.athlete_id == user.id)
            .limit(1)
        )
        if not assigned:
            raise HTTPException(status_code=404, detail="Workout not found")
    return plan


@router.put("/{workout_id}", response_model=WorkoutPlanRead)
async def replace_workout(
    workout_id: UUID,
    payload: WorkoutPlanWrite,
    coach: User = Depends(require_coach),
    db: AsyncSession = Depends(get_db),
):
    """Full replace: fields, groups and exercises are rewritten from the body."""
    plan = await _load_plan(db, workout_id)
    await ensure_exercises_exist(db, {e.exercise_id for e in payload.exercises})
    for k, v in payload.model_dump(exclude={"groups", "exercises"}).items():
        setattr(plan, k, v)
    plan.exercises.clear()
    await db.flush()
    plan.groups.clear()
    await db.flush()
    append_contents(plan, payload.groups, payload.exercises)
    await db.flush()
    return await _load_plan(db, plan.id, refresh=True)


@router.post("/{workout_id}/archive", response_model=WorkoutPlanSummary)
async def archive_workout(
    workout_id: UUID,
    archived: bool = True,
    coach: User = Depends(require_coach),
    db: AsyncSession = Depends(get_db),
):
    """Archive (or with ``archived=false`` restore) a plan."""
    plan = await db.get(WorkoutPlan, workout_id)
    if not plan:
        raise HTTPException(status_code=404, detail="Workout not found")
    plan.archived = archived
    await db.flush()
    await db.refresh(plan)
    return plan


@router.post("/{workout_id}/blocks/{block_id}", response_model=WorkoutPlanRead)
async def insert_block(
    workout_id: UUID,
    block_id: UUID,
    coach: User = Depends(require_coach),
    db: AsyncSession = Depends(get_db),
):
    """Append a library block's groups and exercises to the end of the plan."""
    plan = await _load_plan(db, workout_id)
    block = await db.get(WorkoutBlock, block_id)
    if not block:
        raise HTTPException(status_code=404, detail="Block not found")
    groups = [ExerciseGroupIn.model_validate(g) for g in block.groups or []]
    exercises = [WorkoutExerciseIn.model_validate(e) for e in block.exercises or []]
    await ensure_exercises_exist(db, {e.exercise_id for e in exercises})
    append_contents(plan, groups, exercises)
    block.usage_count += 1
    block.last_used = utcnow()
    await db.flush()
    return await _load_plan(db, plan.id, refresh=True)


@router.delete("/{workout_id}", status_code=204)
async def delete_workout(
    workout_id: UUID,
    coach: User = Depends(require_coach),
    db: AsyncSession = Depends(get_db),
):
    """Delete a plan with its groups, exercises and assignments."""
    plan = await _load_plan(db, workout_id)
    assignments = await db.execute(select(WorkoutAssignment).where(WorkoutAssignment.workout_plan_id == workout_id))
    for a in assignments.scalars().all():
        await db.delete(a)
    await db.delete(plan)
    return None
