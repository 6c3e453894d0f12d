"""Edit or delete a recorded set."""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from litework.api.deps import get_current_user
from litework.db.session import get_db
from litework.models.user import User
from litework.models.workout_session import SessionExercise, SetRecord
from litework.schemas.session import SetRecordRead, SetRecordUpdate
from litework.services.sessions import OPEN_STATUSES, rescore_needed, rescore_set

router = APIRouter()


async def _own_set(db: AsyncSession, set_id: UUID, user: User) -> SetRecord:
    record = (
        await db.execute(
            select(SetRecord)
            .options(selectinload(SetRecord.session_exercise).selectinload(SessionExercise.session))
            .where(SetRecord.id == set_id)
        )
    ).scalar_one_or_none()
    if not record or record.session_exercise.session.athlete_id != user.id:
        raise HTTPException(status_code=404, detail="Set not found")
    return record


@router.patch("/{set_id}", response_model=SetRecordRead)
async def update_set(
    set_id: UUID,
    payload: SetRecordUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Correct a set; PR flags are recomputed when weight or reps change."""
    record = await _own_set(db, set_id, user)
    changes = payload.model_dump(exclude_unset=True)
    needs_rescore = rescore_needed(record, changes)
    for k, v in changes.items():
        setattr(record, k, v)
    if needs_rescore:
        await rescore_set(db, record, user.id, record.session_exercise.exercise_id)
    await db.flush()
    return record


@router.delete("/{set_id}", status_code=204)
async def delete_set(
    set_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Delete a set, give the exercise its set back and close the gap in set numbers.

    If that leaves an earlier exercise of an open session short of its target,
    the session moves back to it. Circuit round counters are not rewound.
    """
    record = await _own_set(db, set_id, user)
    ex = record.session_exercise
    ex.sets_completed = max((ex.sets_completed or 0) - 1, 0)
    if ex.sets_completed < ex.sets_target:
        ex.completed = False
        session = ex.session
        if session.status in OPEN_STATUSES and ex.order_index < session.current_exercise_index:
            session.current_exercise_index = ex.order_index
    deleted_number = record.set_number
    await db.delete(record)
    await db.flush()
    await db.execute(
        update(SetRecord)
        .where(SetRecord.session_exercise_id == ex.id, SetRecord.set_number > deleted_number)
        .values(set_number=SetRecord.set_number - 1)
        .execution_options(synchronize_session=False)
    )
    return None
