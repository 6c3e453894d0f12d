"""Building plan contents (groups + exercises) from request bodies and library blocks."""

from __future__ import annotations

import uuid
from typing import Sequence

from fastapi import HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from litework.models.exercise import Exercise
from litework.models.workout_plan import ExerciseGroup, WorkoutExercise, WorkoutPlan
from litework.schemas.workout_plan import ExerciseGroupIn, WorkoutExerciseIn


async def ensure_exercises_exist(db: AsyncSession, exercise_ids: set[uuid.UUID]) -> None:
    if not exercise_ids:
        return
    found = set((await db.execute(select(Exercise.id).where(Exercise.id.in_(exercise_ids)))).scalars().all())
    missing = exercise_ids - found
    if missing:
        raise HTTPException(status_code=400, detail=f"Unknown exercise id(s): {', '.join(map(str, missing))}")


def append_contents(
    plan: WorkoutPlan,
    groups: Sequence[ExerciseGroupIn],
    exercises: Sequence[WorkoutExerciseIn],
) -> None:
    """Append groups and exercises after whatever the plan already holds.

    Group keys are resolved to freshly generated group ids; explicit
    ``order_index`` values are offset by the current plan length.
    """
    group_offset = max((g.order_index for g in plan.groups), default=-1) + 1
    exercise_offset = max((e.order_index for e in plan.exercises), default=-1) + 1

    ids_by_key: dict[str, uuid.UUID] = {}
    for g in groups:
        group_id = uuid.uuid4()
        ids_by_key[g.key] = group_id
        data = g.model_dump(exclude={"key", "order_index"})
        plan.groups.append(ExerciseGroup(id=group_id, order_index=group_offset + g.order_index, **data))

    for position, e in enumerate(exercises):
        data = e.model_dump(exclude={"group_key", "order_index"})
        order = e.order_index if e.order_index is not None else position
        plan.exercises.append(
            WorkoutExercise(
                group_id=ids_by_key.get(e.group_key) if e.group_key else None,
                order_index=exercise_offset + order,
                **data,
            )
        )
