"""Progress analytics: PR checks, streaks, 1RM and volume trends, dashboard stats."""

from __future__ import annotations

import uuid
from collections import defaultdict
from datetime import timedelta
from typing import Literal

from fastapi import APIRouter, Depends
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from litework.api.deps import get_current_user, scoped_athlete_id
from litework.core.constants import STREAK_LOOKBACK_DAYS
from litework.core.dates import as_date, day_bounds, utcnow
from litework.core.enums import AssignmentStatus, SessionStatus, UserRole
from litework.db.session import get_db
from litework.models.assignment import WorkoutAssignment
from litework.models.athlete_group import AthleteGroup
from litework.models.user import User
from litework.models.workout_session import SessionExercise, SetRecord, WorkoutSession
from litework.schemas.analytics import CheckPRRequest
from litework.services.pr_detection import calculate_one_rm, check_pr, format_pr_message, pr_badge_tier
from litework.services.streaks import (
    average_workouts_per_week,
    calculate_detailed_streaks,
    completed_dates,
)

router = APIRouter()


def _set_rows(athlete_id: uuid.UUID):
    """Sets of the athlete's non-abandoned sessions, joined down to the exercise."""
    return (
        select(SetRecord, SessionExercise.exercise_id, SessionExercise.exercise_name)
        .join(SessionExercise, SessionExercise.id == SetRecord.session_exercise_id)
        .join(WorkoutSession, WorkoutSession.id == SessionExercise.session_id)
        .where(WorkoutSession.athlete_id == athlete_id, WorkoutSession.status != SessionStatus.ABANDONED)
    )


@router.post("/check-pr")
async def check_personal_record(
    payload: CheckPRRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Would this set be a PR? Nothing is stored."""
    athlete_id = scoped_athlete_id(user, payload.athlete_id)
    comparison = await check_pr(db, athlete_id, payload.exercise_id, payload.weight, payload.reps)
    out = comparison.to_dict()
    out["message"] = format_pr_message(comparison) or None
    out["badge"] = pr_badge_tier(comparison.improvement) if comparison.is_pr else None
    return out


@router.get("/streak")
async def get_streak(
    athlete_id: uuid.UUID | None = None,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    Current streak (consecutive days with a completed workout), longest streak
    over the last ~14 months, last workout date and weekly average.
    """
    athlete_id = scoped_athlete_id(user, athlete_id)
    dates = await completed_dates(db, athlete_id, STREAK_LOOKBACK_DAYS)
    today = utcnow().date()
    streaks = calculate_detailed_streaks(dates, today)
    return {
        **streaks,
        "last_workout_date": dates[0].isoformat() if dates else None,
        "average_per_week": average_workouts_per_week(dates, today),
    }


@router.get("/1rm-history")
async def one_rm_history(
    exercise_id: uuid.UUID,
    days: int = 180,
    athlete_id: uuid.UUID | None = None,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Best estimated 1RM (Epley) per day for one exercise."""
    athlete_id = scoped_athlete_id(user, athlete_id)
    cutoff = utcnow() - timedelta(days=days)
    result = await db.execute(
        _set_rows(athlete_id)
        .where(
            SessionExercise.exercise_id == exercise_id,
            SetRecord.weight.isnot(None),
            SetRecord.completed_at >= cutoff,
        )
        .order_by(SetRecord.completed_at)
    )
    best: dict = {}
    for record, _, _ in result.all():
        if not record.reps:
            continue
        day = as_date(record.completed_at)
        est = calculate_one_rm(float(record.weight), record.reps)
        if day not in best or est > best[day]["estimated_1rm"]:
            best[day] = {
                "date": day.isoformat(),
                "estimated_1rm": est,
                "weight": float(record.weight),
                "reps": record.reps,
            }
    return {"exercise_id": exercise_id, "points": [best[d] for d in sorted(best)]}


@router.get("/volume-history")
async def volume_history(
    days: int = 30,
    exercise_id: uuid.UUID | None = None,
    athlete_id: uuid.UUID | None = None,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Total volume (sum of weight x reps) and set count per day."""
    athlete_id = scoped_athlete_id(user, athlete_id)
    cutoff = utcnow() - timedelta(days=days)
    day = func.date(SetRecord.completed_at)
    stmt = (
        select(
            day.label("d"),
            func.coalesce(func.sum(SetRecord.weight * SetRecord.reps), 0).label("volume"),
            func.count(SetRecord.id).label("sets"),
        )
        .join(SessionExercise, SessionExercise.id == SetRecord.session_exercise_id)
        .join(WorkoutSession, WorkoutSession.id == SessionExercise.session_id)
        .where(
            WorkoutSession.athlete_id == athlete_id,
            WorkoutSession.status != SessionStatus.ABANDONED,
            SetRecord.completed_at >= cutoff,
        )
    )
    if exercise_id:
        stmt = stmt.where(SessionExercise.exercise_id == exercise_id)
    result = await db.execute(stmt.group_by(day).order_by(day))
    points = [
        {"date": as_date(r.d).isoformat(), "volume": round(float(r.volume), 2), "sets": r.sets}
        for r in result.all()
    ]
    return {
        "days": days,
        "total_volume": round(sum(p["volume"] for p in points), 2),
        "points": points,
    }


@router.get("/workout-frequency")
async def workout_frequency(
    days: int = 90,
    athlete_id: uuid.UUID | None = None,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Completed workouts per ISO week (Monday start) and per weekday."""
    athlete_id = scoped_athlete_id(user, athlete_id)
    dates = await completed_dates(db, athlete_id, days)
    weeks: dict[str, int] = defaultdict(int)
    weekdays = [0] * 7
    for d in dates:
        monday = d - timedelta(days=d.weekday())
        weeks[monday.isoformat()] += 1
        weekdays[d.weekday()] += 1
    return {
        "days": days,
        "total_workouts": len(dates),
        "weeks": [{"week_start": w, "workouts": weeks[w]} for w in sorted(weeks)],
        "by_weekday": dict(zip(["mon", "tue", "wed", "thu", "fri", "sat", "sun"], weekdays)),
        "average_per_week": average_workouts_per_week(dates, utcnow().date(), period_days=days),
    }


async def _coach_dashboard(db: AsyncSession) -> dict:
    today_start, today_end = day_bounds(utcnow().date())
    week_start = today_start - timedelta(days=today_start.weekday())
    athletes = await db.scalar(select(func.count(User.id)).where(User.role == UserRole.ATHLETE))
    groups = await db.scalar(select(func.count(AthleteGroup.id)).where(AthleteGroup.archived.is_(False)))
    today = await db.scalar(
        select(func.count(WorkoutAssignment.id)).where(
            WorkoutAssignment.scheduled_date >= today_start, WorkoutAssignment.scheduled_date < today_end
        )
    )
    completed_week = await db.scalar(
        select(func.count(WorkoutSession.id)).where(
            WorkoutSession.status == SessionStatus.COMPLETED, WorkoutSession.completed_at >= week_start
        )
    )
    prs_week = await db.scalar(
        select(func.count(SetRecord.id)).where(SetRecord.is_pr.is_(True), SetRecord.completed_at >= week_start)
    )
    return {
        "role": "coach",
        "total_athletes": athletes or 0,
        "active_groups": groups or 0,
        "assignments_today": today or 0,
        "workouts_completed_this_week": completed_week or 0,
        "prs_this_week": prs_week or 0,
    }


@router.get("/dashboard-stats")
async def dashboard_stats(
    athlete_id: uuid.UUID | None = None,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Numbers for the dashboard cards. Coaches without ``athlete_id`` get the team view."""
    if user.is_coach and athlete_id is None:
        return await _coach_dashboard(db)
    athlete_id = scoped_athlete_id(user, athlete_id)
    now = utcnow()
    month_ago = now - timedelta(days=30)
    week_start = day_bounds(now.date())[0] - timedelta(days=now.weekday())

    total = await db.scalar(
        select(func.count(WorkoutSession.id)).where(
            WorkoutSession.athlete_id == athlete_id, WorkoutSession.status == SessionStatus.COMPLETED
        )
    )
    this_week = await db.scalar(
        select(func.count(WorkoutSession.id)).where(
            WorkoutSession.athlete_id == athlete_id,
            WorkoutSession.status == SessionStatus.COMPLETED,
            WorkoutSession.completed_at >= week_start,
        )
    )
    volume_rows = await db.execute(_set_rows(athlete_id).where(SetRecord.completed_at >= month_ago))
    volume = 0.0
    prs = 0
    for record, _, _ in volume_rows.all():
        volume += float(record.weight or 0) * (record.reps or 0)
        prs += 1 if record.is_pr else 0
    upcoming = await db.scalar(
        select(func.count(WorkoutAssignment.id)).where(
            WorkoutAssignment.athlete_id == athlete_id,
            WorkoutAssignment.status == AssignmentStatus.ASSIGNED,
            WorkoutAssignment.scheduled_date >= now,
        )
    )
    dates = await completed_dates(db, athlete_id, STREAK_LOOKBACK_DAYS)
    streaks = calculate_detailed_streaks(dates, now.date())
    return {
        "role": "athlete",
        "total_workouts": total or 0,
        "workouts_this_week": this_week or 0,
        "volume_last_30_days": round(volume, 2),
        "prs_last_30_days": prs,
        "upcoming_assignments": upcoming or 0,
        **streaks,
    }


@router.get("/personal-records")
async def personal_records(
    period: Literal["month", "year", "all"] = "all",
    athlete_id: uuid.UUID | None = None,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    Best set per exercise by estimated 1RM, plus the sets flagged as PR in
    the period (month: this calendar month; year: this calendar year).
    """
    athlete_id = scoped_athlete_id(user, athlete_id)
    now = utcnow()
    if period == "month":
        start = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    elif period == "year":
        start = now.replace(month=1, day=1, hour=0, minute=0, second=0, microsecond=0)
    else:
        start = None

    result = await db.execute(_set_rows(athlete_id).where(SetRecord.weight.isnot(None)))
    bests: dict[uuid.UUID, dict] = {}
    recent = []
    for record, exercise_id, exercise_name in result.all():
        weight = float(record.weight)
        est = calculate_one_rm(weight, record.reps) if record.reps else 0
        entry = {
            "set_id": record.id,
            "exercise_id": exercise_id,
            "exercise_name": exercise_name,
            "weight": weight,
            "reps": record.reps,
            "estimated_1rm": est,
            "pr_type": record.pr_type.value if record.pr_type else None,
            "date": record.completed_at.isoformat() if record.completed_at else None,
        }
        if exercise_id not in bests or est > bests[exercise_id]["estimated_1rm"]:
            bests[exercise_id] = entry
        if record.is_pr and (start is None or as_date(record.completed_at) >= start.date()):
            recent.append(entry)
    recent.sort(key=lambda e: e["date"] or "", reverse=True)
    return {
        "period": period,
        "from": start.isoformat() if start else None,
        "records": sorted(bests.values(), key=lambda e: e["exercise_name"]),
        "recent_prs": recent,
    }
