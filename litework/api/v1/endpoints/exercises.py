"""Exercise library CRUD endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from litework.api.deps import get_current_user, require_coach
from litework.db.session import get_db
from litework.models.exercise import Exercise
from litework.models.user import User
from litework.models.workout_plan import WorkoutExercise
from litework.models.workout_session import SessionExercise
from litework.schemas.exercise import ExerciseCreate, ExerciseFindOrCreate, ExerciseRead, ExerciseUpdate

router = APIRouter()


async def _find_by_name(db: AsyncSession, name: str) -> Exercise | None:
    return await db.scalar(select(Exercise).where(func.lower(Exercise.name) == name.strip().lower()))


async def _get_exercise(db: AsyncSession, exercise_id: UUID) -> Exercise:
    exercise = await db.get(Exercise, exercise_id)
    if not exercise:
        raise HTTPException(status_code=404, detail="Exercise not found")
    return exercise


@router.get("", response_model=list[ExerciseRead])
async def list_exercises(
    q: str | None = None,
    category: str | None = None,
    skip: int = 0,
    limit: int = 100,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """List exercises; ``q`` searches name and description."""
    stmt = select(Exercise)
    if q:
        pattern = f"%{q.strip()}%"
        stmt = stmt.where(or_(Exercise.name.ilike(pattern), Exercise.description.ilike(pattern)))
    if category:
        stmt = stmt.where(Exercise.category == category)
    result = await db.execute(stmt.order_by(Exercise.name).offset(skip).limit(min(limit, 500)))
    return list(result.scalars().all())


@router.post("", response_model=ExerciseRead, status_code=201)
async def create_exercise(
    payload: ExerciseCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    if await _find_by_name(db, payload.name):
        raise HTTPException(status_code=409, detail="An exercise with this name already exists")
    exercise = Exercise(**payload.model_dump(), created_by=user.id)
    exercise.name = exercise.name.strip()
    db.add(exercise)
    await db.flush()
    await db.refresh(exercise)
    return exercise


@router.post("/find-or-create", response_model=ExerciseRead)
async def find_or_create_exercise(
    payload: ExerciseFindOrCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Case-insensitive lookup by name; creates a bare exercise when missing."""
    exercise = await _find_by_name(db, payload.name)
    if exercise:
        return exercise
    exercise = Exercise(name=payload.name.strip(), category=payload.category, created_by=user.id)
    db.add(exercise)
    await db.flush()
    await db.refresh(exercise)
    return exercise


@router.get("/{exercise_id}", response_model=ExerciseRead)
async def get_exercise(
    exercise_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await _get_exercise(db, exercise_id)


@router.patch("/{exercise_id}", response_model=ExerciseRead)
async def update_exercise(
    exercise_id: UUID,
    payload: ExerciseUpdate,
    coach: User = Depends(require_coach),
    db: AsyncSession = Depends(get_db),
):
    """Update an exercise (partial)."""
    exercise = await _get_exercise(db, exercise_id)
    data = payload.model_dump(exclude_unset=True)
    if "name" in data:
        existing = await _find_by_name(db, data["name"])
        if existing and existing.id != exercise.id:
            raise HTTPException(status_code=409, detail="An exercise with this name already exists")
        data["name"] = data["name"].strip()
    for k, v in data.items():
        setattr(exercise, k, v)
    await db.flush()
    await db.refresh(exercise)
    return exercise


@router.delete("/{exercise_id}", status_code=204)
async def delete_exercise(
    exercise_id: UUID,
    coach: User = Depends(require_coach),
    db: AsyncSession = Depends(get_db),
):
    """Delete an exercise that no plan or session uses."""
    exercise = await _get_exercise(db, exercise_id)
    in_plan = await db.scalar(select(WorkoutExercise.id).where(WorkoutExercise.exercise_id == exercise_id).limit(1))
    in_session = await db.scalar(
        select(SessionExercise.id).where(SessionExercise.exercise_id == exercise_id).limit(1)
    )
    if in_plan or in_session:
        raise HTTPException(status_code=409, detail="Exercise is used by workouts and cannot be deleted")
    await db.delete(exercise)
    return None
