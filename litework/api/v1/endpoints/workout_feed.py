"""Recent completed workouts: the coach's activity feed, or an athlete's own."""

from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from litework.api.deps import get_current_user, scoped_athlete_id
from litework.core.constants import FEED_DEFAULT_LIMIT
from litework.core.enums import SessionStatus
from litework.db.session import get_db
from litework.models.user import User
from litework.models.workout_session import SessionExercise, WorkoutSession

router = APIRouter()


@router.get("")
async def workout_feed(
    athlete_id: UUID | None = None,
    limit: int = FEED_DEFAULT_LIMIT,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    stmt = (
        select(WorkoutSession, User)
        .join(User, User.id == WorkoutSession.athlete_id)
        .options(
            selectinload(WorkoutSession.exercises).selectinload(SessionExercise.set_records),
            selectinload(WorkoutSession.feedback),
        )
        .where(WorkoutSession.status == SessionStatus.COMPLETED)
    )
    if not user.is_coach or athlete_id is not None:
        stmt = stmt.where(WorkoutSession.athlete_id == scoped_athlete_id(user, athlete_id))
    result = await db.execute(stmt.order_by(WorkoutSession.completed_at.desc()).limit(min(limit, 100)))

    items = []
    for session, athlete in result.all():
        sets = [s for e in session.exercises for s in e.set_records]
        items.append(
            {
                "session_id": session.id,
                "athlete_id": athlete.id,
                "athlete_name": athlete.full_name or athlete.email,
                "workout_name": session.workout_name,
                "completed_at": session.completed_at.isoformat() if session.completed_at else None,
                "duration_seconds": session.total_duration_seconds,
                "exercises": len(session.exercises),
                "sets": len(sets),
                "volume": round(sum(float(s.weight or 0) * s.reps for s in sets), 2),
                "prs": sum(1 for s in sets if s.is_pr),
                "feedback": (
                    {
                        "difficulty_rating": session.feedback.difficulty_rating,
                        "energy_level": session.feedback.energy_level,
                        "soreness_level": session.feedback.soreness_level,
                    }
                    if session.feedback
                    else None
                ),
            }
        )
    return {"count": len(items), "items": items}
