from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import select

from litework.core.enums import NotificationType
from litework.models.assignment import WorkoutAssignment
from litework.models.notification import Notification
from litework.models.user import User
from litework.models.workout_plan import WorkoutPlan
from litework.services.reminders import send_workout_reminders, should_send_reminder

NOW = datetime(2026, 10, 19, 10, 0, tzinfo=timezone.utc)


@pytest.mark.parametrize(
    "timing,hours_until,hour,expected",
    [
        ("smart", 2.0, 10, True),
        ("smart", 24.0, 17, True),
        ("smart", 24.0, 10, False),
        ("smart", 5.0, 17, False),
        ("morning", 10.0, 7, True),
        ("morning", 10.0, 8, False),
        ("evening", 20.0, 17, True),
        ("2hours", 2.0, 10, True),
        ("2hours", 3.0, 10, False),
        ("1hour", 1.0, 10, True),
        ("30min", 0.5, 10, True),
        ("30min", 1.0, 10, False),
        ("whenever", 2.0, 10, True),
    ],
)
def test_should_send_reminder(timing, hours_until, hour, expected):
    assert should_send_reminder(timing, hours_until, hour) is expected


async def _athlete_with_assignment(db, email, hours_ahead, prefs=None):
    athlete = User(
        email=email,
        password_hash="x",
        first_name="Rem",
        last_name="Inder",
        notification_preferences=prefs,
    )
    plan = WorkoutPlan(name="Leg Day")
    db.add_all([athlete, plan])
    await db.flush()
    assignment = WorkoutAssignment(
        workout_plan_id=plan.id,
        athlete_id=athlete.id,
        scheduled_date=NOW + timedelta(hours=hours_ahead),
    )
    db.add(assignment)
    await db.flush()
    return athlete, assignment


async def test_reminder_creates_notification_once(db):
    athlete, assignment = await _athlete_with_assignment(db, "rem@example.com", 2)

    summary = await send_workout_reminders(db, NOW)
    assert summary == {"candidates": 1, "sent": 1, "emailed": 0}
    assert assignment.reminder_sent is True

    notes = (await db.execute(select(Notification).where(Notification.user_id == athlete.id))).scalars().all()
    assert len(notes) == 1
    assert notes[0].type is NotificationType.WORKOUT_REMINDER
    assert notes[0].title == "Upcoming workout: Leg Day"

    again = await send_workout_reminders(db, NOW)
    assert again["candidates"] == 0


async def test_reminder_respects_preferences(db):
    await _athlete_with_assignment(
        db, "off@example.com", 2, {"workoutReminders": {"enabled": False}}
    )
    await _athlete_with_assignment(
        db, "late@example.com", 2, {"workoutReminders": {"enabled": True, "timing": "30min"}}
    )

    summary = await send_workout_reminders(db, NOW)
    assert summary["candidates"] == 2
    assert summary["sent"] == 0


async def test_assignments_beyond_a_day_are_ignored(db):
    await _athlete_with_assignment(db, "far@example.com", 30)
    summary = await send_workout_reminders(db, NOW)
    assert summary == {"candidates": 0, "sent": 0, "emailed": 0}
