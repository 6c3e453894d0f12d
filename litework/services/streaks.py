"""Workout streaks: consecutive calendar days with at least one completed workout."""

from __future__ import annotations

import uuid
from datetime import date, datetime, timedelta
from typing import Iterable

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from litework.core.dates import as_date, utcnow
from litework.core.enums import SessionStatus
from litework.models.workout_session import WorkoutSession

DateLike = date | datetime | str


def _unique_days_desc(dates: Iterable[DateLike]) -> list[date]:
    return sorted({as_date(d) for d in dates}, reverse=True)


def calculate_workout_streak(dates: Iterable[DateLike], today: date) -> int:
    """Current streak. Must include today or yesterday to count, otherwise 0."""
    days = _unique_days_desc(dates)
    if not days or days[0] < today - timedelta(days=1):
        return 0
    streak = 1
    for prev, day in zip(days, days[1:]):
        if day != prev - timedelta(days=1):
            break
        streak += 1
    return streak


def calculate_longest_streak(dates: Iterable[DateLike]) -> int:
    days = _unique_days_desc(dates)
    if not days:
        return 0
    longest = run = 1
    for prev, day in zip(days, days[1:]):
        if day == prev - timedelta(days=1):
            run += 1
            longest = max(longest, run)
        else:
            run = 1
    return longest


def calculate_detailed_streaks(
    dates: Iterable[DateLike],
    today: date,
    lookback_days: int | None = None,
) -> dict[str, int]:
    """Current and longest streak, optionally only over the last ``lookback_days`` days."""
    days = _unique_days_desc(dates)
    if lookback_days is not None:
        cutoff = today - timedelta(days=lookback_days - 1)
        days = [d for d in days if d >= cutoff]
    return {
        "current_streak": calculate_workout_streak(days, today),
        "longest_streak": calculate_longest_streak(days),
    }


def average_workouts_per_week(dates: Iterable[DateLike], today: date, period_days: int = 30) -> float:
    cutoff = today - timedelta(days=period_days)
    recent = [d for d in (as_date(x) for x in dates) if d >= cutoff]
    if not recent:
        return 0.0
    return round(len(recent) / (period_days / 7), 1)


async def completed_dates(db: AsyncSession, athlete_id: uuid.UUID, days: int) -> list[date]:
    """Days (newest first) with a completed session in the last ``days`` days."""
    cutoff = utcnow() - timedelta(days=days)
    day = func.date(WorkoutSession.completed_at)
    result = await db.execute(
        select(day.label("d"))
        .where(
            WorkoutSession.athlete_id == athlete_id,
            WorkoutSession.status == SessionStatus.COMPLETED,
            WorkoutSession.completed_at >= cutoff,
        )
        .order_by(day.desc())
    )
    return [as_date(row.d) for row in result.all()]
