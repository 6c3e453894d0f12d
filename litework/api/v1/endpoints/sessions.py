"""Live workout sessions: start, log sets, pause/resume, complete, feedback, history."""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from litework.api.deps import get_current_user, scoped_athlete_id
from litework.core.dates import utcnow
from litework.core.enums import AssignmentStatus, NotificationType, SessionStatus
from litework.db.session import get_db
from litework.models.assignment import WorkoutAssignment
from litework.models.user import User
from litework.models.workout_session import WorkoutFeedback, WorkoutSession
from litework.schemas.session import (
    BatchResult,
    CompletionSummary,
    FeedbackCreate,
    FeedbackRead,
    SessionNavigate,
    SessionRead,
    SessionStart,
    SessionSummary,
    SetRecordBatch,
    SetRecordCreate,
    SetRecordRead,
    SetResult,
)
from litework.services.achievements import award_achievements, describe
from litework.services.notifications import create_notification
from litework.services.pr_detection import format_pr_message
from litework.services.sessions import (
    OPEN_STATUSES,
    RecordedSet,
    accrue_active_time,
    completion_summary,
    group_info,
    load_session,
    record_set,
    start_session,
)

router = APIRouter()
log = logging.getLogger("litework.sessions")


async def _own_session(db: AsyncSession, session_id: UUID, user: User) -> WorkoutSession:
    session = await load_session(db, session_id)
    if session.athlete_id != user.id:
        raise HTTPException(status_code=404, detail="Session not found")
    return session


def _set_result(session: WorkoutSession, recorded: RecordedSet) -> SetResult:
    advance = recorded.advance
    comparison = recorded.comparison
    return SetResult(
        record=SetRecordRead.model_validate(recorded.record),
        pr=comparison.to_dict() if comparison and comparison.is_pr else None,
        pr_message=format_pr_message(comparison) if comparison and comparison.is_pr else None,
        current_exercise_index=session.current_exercise_index,
        group_rounds=session.group_rounds or {},
        exercise_completed=advance.exercise_completed if advance else False,
        round_reset_group_id=advance.reset_group_id if advance else None,
        workout_finished=advance.finished if advance else False,
    )


@router.get("", response_model=list[SessionSummary])
async def session_history(
    athlete_id: UUID | None = None,
    status: SessionStatus | None = None,
    skip: int = 0,
    limit: int = 50,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Past and open sessions, newest first. Coaches may pass ``athlete_id``."""
    stmt = select(WorkoutSession).where(WorkoutSession.athlete_id == scoped_athlete_id(user, athlete_id))
    if status:
        stmt = stmt.where(WorkoutSession.status == status)
    result = await db.execute(stmt.order_by(WorkoutSession.started_at.desc()).offset(skip).limit(min(limit, 200)))
    return list(result.scalars().all())


@router.post("/start", response_model=SessionRead, status_code=201)
async def start(
    payload: SessionStart,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Copy the assigned plan into a new session. An open session for the assignment is returned as is."""
    return await start_session(db, user, payload.assignment_id)


@router.get("/{session_id}", response_model=SessionRead)
async def get_session(
    session_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    session = await load_session(db, session_id)
    if not user.is_coach and session.athlete_id != user.id:
        raise HTTPException(status_code=404, detail="Session not found")
    return session


@router.patch("/{session_id}", response_model=SessionRead)
async def navigate(
    session_id: UUID,
    payload: SessionNavigate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Jump to another exercise, or update session notes."""
    session = await _own_session(db, session_id, user)
    if payload.current_exercise_index is not None:
        if payload.current_exercise_index >= len(session.exercises):
            raise HTTPException(status_code=400, detail="Exercise index out of range")
        session.current_exercise_index = payload.current_exercise_index
    if payload.notes is not None:
        session.notes = payload.notes
    await db.flush()
    return await load_session(db, session_id, refresh=True)


@router.post("/{session_id}/sets", response_model=SetResult, status_code=201)
async def log_set(
    session_id: UUID,
    payload: SetRecordCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Record a set. The response says whether it was a PR and where the session moved."""
    session = await _own_session(db, session_id, user)
    return _set_result(session, await record_set(db, session, payload))


@router.post("/{session_id}/sets/batch", response_model=BatchResult)
async def log_sets_batch(
    session_id: UUID,
    payload: SetRecordBatch,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Replay sets queued offline. Sets whose ``client_id`` is already stored are skipped."""
    session = await _own_session(db, session_id, user)
    results, created, skipped = [], 0, 0
    for item in payload.sets:
        recorded = await record_set(db, session, item)
        if recorded.created:
            created += 1
        else:
            skipped += 1
        results.append(_set_result(session, recorded))
    log.info("Replayed %d sets for session %s (%d skipped)", created, session_id, skipped)
    return BatchResult(created=created, skipped=skipped, results=results)


@router.post("/{session_id}/pause", response_model=SessionSummary)
async def pause(
    session_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    session = await _own_session(db, session_id, user)
    if session.status != SessionStatus.ACTIVE:
        raise HTTPException(status_code=400, detail="Only an active session can be paused")
    now = utcnow()
    accrue_active_time(session, now)
    session.status = SessionStatus.PAUSED
    session.paused_at = now
    await db.flush()
    return session


@router.post("/{session_id}/resume", response_model=SessionSummary)
async def resume(
    session_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    session = await _own_session(db, session_id, user)
    if session.status != SessionStatus.PAUSED:
        raise HTTPException(status_code=400, detail="Only a paused session can be resumed")
    session.status = SessionStatus.ACTIVE
    session.paused_at = None
    session.resumed_at = utcnow()
    await db.flush()
    return session


@router.post("/{session_id}/abandon", response_model=SessionSummary)
async def abandon(
    session_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Give up on the session; the assignment goes back to assigned so it can be restarted."""
    session = await _own_session(db, session_id, user)
    if session.status not in OPEN_STATUSES:
        raise HTTPException(status_code=400, detail=f"Session is already {session.status.value}")
    now = utcnow()
    accrue_active_time(session, now)
    session.status = SessionStatus.ABANDONED
    session.completed_at = now
    session.paused_at = None
    if session.assignment_id:
        assignment = await db.get(WorkoutAssignment, session.assignment_id)
        if assignment and assignment.status == AssignmentStatus.STARTED:
            assignment.status = AssignmentStatus.ASSIGNED
    await db.flush()
    return session


@router.post("/{session_id}/complete", response_model=CompletionSummary)
async def complete(
    session_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Finish the session and the assignment; returns set completion totals."""
    session = await _own_session(db, session_id, user)
    if session.status not in OPEN_STATUSES:
        raise HTTPException(status_code=400, detail=f"Session is already {session.status.value}")
    now = utcnow()
    accrue_active_time(session, now)
    session.status = SessionStatus.COMPLETED
    session.completed_at = now
    session.paused_at = None
    if session.assignment_id:
        assignment = await db.get(WorkoutAssignment, session.assignment_id)
        if assignment:
            assignment.status = AssignmentStatus.COMPLETED
            assignment.completed_at = now
    await db.flush()
    new = await award_achievements(db, user.id)
    log.info("Session %s completed in %ss", session.id, session.total_duration_seconds)
    return CompletionSummary(
        session=SessionSummary.model_validate(session),
        new_achievements=[describe(a) for a in new],
        **completion_summary(session, await group_info(db, session)),
    )


@router.post("/{session_id}/feedback", response_model=FeedbackRead, status_code=201)
async def submit_feedback(
    session_id: UUID,
    payload: FeedbackCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """One feedback per completed session; the assigning coach is notified."""
    session = await _own_session(db, session_id, user)
    if session.status != SessionStatus.COMPLETED:
        raise HTTPException(status_code=400, detail="Feedback can only be given for a completed session")
    if await db.scalar(select(WorkoutFeedback.id).where(WorkoutFeedback.session_id == session_id)):
        raise HTTPException(status_code=409, detail="Feedback already submitted for this session")

    feedback = WorkoutFeedback(session_id=session.id, athlete_id=user.id, **payload.model_dump())
    db.add(feedback)
    await db.flush()

    coach_id = user.coach_id
    if session.assignment_id:
        assignment = await db.get(WorkoutAssignment, session.assignment_id)
        if assignment and assignment.assigned_by:
            coach_id = assignment.assigned_by
    if coach_id:
        await create_notification(
            db,
            coach_id,
            title=f"{user.full_name or user.email} left feedback",
            body=f"{session.workout_name}: difficulty {payload.difficulty_rating}/10",
            type_=NotificationType.FEEDBACK,
            data={"session_id": str(session.id)},
        )
    await db.refresh(feedback)
    return feedback


@router.get("/{session_id}/feedback", response_model=FeedbackRead)
async def get_feedback(
    session_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """The session's feedback, including any coach response."""
    feedback = await db.scalar(select(WorkoutFeedback).where(WorkoutFeedback.session_id == session_id))
    if not feedback or (not user.is_coach and feedback.athlete_id != user.id):
        raise HTTPException(status_code=404, detail="Feedback not found")
    return feedback
