"""Coach feedback dashboard: read, mark viewed and respond to athlete workout feedback."""

import logging
from datetime import date
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from litework.api.deps import require_coach
from litework.core.dates import day_bounds, utcnow
from litework.core.enums import NotificationType
from litework.db.session import get_db
from litework.models.user import User
from litework.models.workout_session import WorkoutFeedback, WorkoutSession
from litework.schemas.session import FeedbackList, FeedbackListItem, FeedbackRead, FeedbackResponse
from litework.services.notifications import create_notification

router = APIRouter()
log = logging.getLogger("litework.feedback")


async def _get_feedback(db: AsyncSession, feedback_id: UUID) -> WorkoutFeedback:
    feedback = await db.get(WorkoutFeedback, feedback_id)
    if not feedback:
        raise HTTPException(status_code=404, detail="Feedback not found")
    return feedback


@router.get("", response_model=FeedbackList)
async def list_feedback(
    athlete_id: UUID | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
    unviewed_only: bool = False,
    limit: int = 50,
    coach: User = Depends(require_coach),
    db: AsyncSession = Depends(get_db),
):
    """All athlete feedback, newest first."""
    stmt = (
        select(WorkoutFeedback, User, WorkoutSession)
        .join(User, User.id == WorkoutFeedback.athlete_id)
        .join(WorkoutSession, WorkoutSession.id == WorkoutFeedback.session_id)
    )
    if athlete_id:
        stmt = stmt.where(WorkoutFeedback.athlete_id == athlete_id)
    if start_date:
        stmt = stmt.where(WorkoutFeedback.created_at >= day_bounds(start_date)[0])
    if end_date:
        stmt = stmt.where(WorkoutFeedback.created_at < day_bounds(end_date)[1])
    if unviewed_only:
        stmt = stmt.where(WorkoutFeedback.coach_viewed.is_(False))
    result = await db.execute(stmt.order_by(WorkoutFeedback.created_at.desc()).limit(min(limit, 200)))

    items = [
        FeedbackListItem(
            **FeedbackRead.model_validate(feedback).model_dump(),
            athlete_name=athlete.full_name or athlete.email,
            athlete_email=athlete.email,
            workout_name=session.workout_name,
            session_completed_at=session.completed_at,
        )
        for feedback, athlete, session in result.all()
    ]
    return FeedbackList(feedback=items, count=len(items))


@router.post("/{feedback_id}/viewed", response_model=FeedbackRead)
async def mark_viewed(
    feedback_id: UUID,
    coach: User = Depends(require_coach),
    db: AsyncSession = Depends(get_db),
):
    feedback = await _get_feedback(db, feedback_id)
    feedback.coach_viewed = True
    await db.flush()
    return feedback


@router.post("/{feedback_id}/respond", response_model=FeedbackRead)
async def respond(
    feedback_id: UUID,
    payload: FeedbackResponse,
    coach: User = Depends(require_coach),
    db: AsyncSession = Depends(get_db),
):
    """Reply to the athlete. Replying again replaces the earlier response."""
    feedback = await _get_feedback(db, feedback_id)
    feedback.coach_response = payload.response
    feedback.coach_responded_at = utcnow()
    feedback.coach_viewed = True
    await create_notification(
        db,
        feedback.athlete_id,
        title=f"{coach.full_name or 'Your coach'} replied to your feedback",
        body=payload.response[:200],
        type_=NotificationType.FEEDBACK,
        data={"session_id": str(feedback.session_id), "feedback_id": str(feedback.id)},
    )
    await db.flush()
    log.info("Coach %s responded to feedback %s", coach.id, feedback.id)
    return feedback
