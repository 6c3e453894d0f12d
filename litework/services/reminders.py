"""Workout reminders, run by the platform cron a few times a day.

Each athlete picks a timing preference. ``smart`` sends roughly two hours
before the workout, or at 17:00 the day before.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from html import escape

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from litework.core.dates import ensure_utc
from litework.core.enums import AssignmentStatus, NotificationType, ReminderTiming
from litework.models.assignment import WorkoutAssignment
from litework.models.user import User
from litework.services.notifications import create_notification, merged_preferences, send_email

log = logging.getLogger("litework.reminders")

EVENING_HOUR = 17
MORNING_HOUR = 7

# timing -> (min hours until workout, max hours until workout)
_WINDOWS = {
    ReminderTiming.TWO_HOURS: (1.5, 2.5),
    ReminderTiming.ONE_HOUR: (0.5, 1.5),
    ReminderTiming.THIRTY_MIN: (0.25, 0.75),
}


def should_send_reminder(timing: str, hours_until: float, current_hour: int) -> bool:
    try:
        timing = ReminderTiming(timing)
    except ValueError:
        timing = ReminderTiming.SMART
    if timing is ReminderTiming.SMART:
        if 1.5 <= hours_until <= 2.5:
            return True
        return 22 <= hours_until <= 26 and current_hour == EVENING_HOUR
    if timing is ReminderTiming.MORNING:
        return current_hour == MORNING_HOUR and hours_until <= 24
    if timing is ReminderTiming.EVENING:
        return current_hour == EVENING_HOUR and hours_until <= 24
    low, high = _WINDOWS[timing]
    return low <= hours_until <= high


def _reminder_html(athlete: User, plan_name: str, when: datetime, location: str | None) -> str:
    where = f" at {escape(location)}" if location else ""
    return (
        f"<p>Hi {escape(athlete.first_name or 'there')},</p>"
        f"<p>Your workout <strong>{escape(plan_name)}</strong> is scheduled for "
        f"{when.strftime('%a %b %d, %H:%M')} UTC{where}.</p>"
    )


async def send_workout_reminders(db: AsyncSession, now: datetime) -> dict:
    """Notify athletes about assignments in the next 24 hours. Returns a summary."""
    now = ensure_utc(now)
    result = await db.execute(
        select(WorkoutAssignment)
        .options(selectinload(WorkoutAssignment.workout_plan))
        .where(
            WorkoutAssignment.scheduled_date >= now,
            WorkoutAssignment.scheduled_date <= now + timedelta(hours=24),
            WorkoutAssignment.status == AssignmentStatus.ASSIGNED,
            WorkoutAssignment.reminder_sent.is_(False),
        )
    )
    assignments = list(result.scalars().all())
    if not assignments:
        return {"candidates": 0, "sent": 0, "emailed": 0}

    athlete_ids = {a.athlete_id for a in assignments}
    athletes = {
        u.id: u for u in (await db.execute(select(User).where(User.id.in_(athlete_ids)))).scalars().all()
    }

    sent = emailed = 0
    for assignment in assignments:
        athlete = athletes.get(assignment.athlete_id)
        if athlete is None:
            continue
        prefs = merged_preferences(athlete.notification_preferences)["workoutReminders"]
        if prefs.get("enabled") is False:
            continue
        scheduled = ensure_utc(assignment.scheduled_date)
        hours_until = (scheduled - now).total_seconds() / 3600
        if not should_send_reminder(prefs.get("timing", "smart"), hours_until, now.hour):
            continue

        plan_name = assignment.workout_plan.name if assignment.workout_plan else "Workout"
        await create_notification(
            db,
            athlete.id,
            title=f"Upcoming workout: {plan_name}",
            body=f"Scheduled for {scheduled.strftime('%a %H:%M')} UTC",
            type_=NotificationType.WORKOUT_REMINDER,
            url="/schedule",
            data={"assignment_id": str(assignment.id)},
        )
        if "email" in (prefs.get("channels") or []):
            if await send_email(
                athlete.email,
                f"Workout reminder: {plan_name}",
                _reminder_html(athlete, plan_name, scheduled, assignment.location),
            ):
                emailed += 1
        assignment.reminder_sent = True
        sent += 1

    await db.flush()
    log.info("Workout reminders: %d candidates, %d sent, %d emailed", len(assignments), sent, emailed)
    return {"candidates": len(assignments), "sent": sent, "emailed": emailed}
