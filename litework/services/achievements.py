"""Achievement badges: milestone definitions, evaluation and awarding."""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass

from sqlalchemy import case, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from litework.core.constants import STREAK_LOOKBACK_DAYS
from litework.core.dates import utcnow
from litework.core.enums import AchievementType, NotificationType, SessionStatus
from litework.models.achievement import Achievement
from litework.models.user import User
from litework.models.workout_session import SessionExercise, SetRecord, WorkoutSession
from litework.schemas.achievement import AchievementInfo, AchievementRead
from litework.services.notifications import create_notification, merged_preferences
from litework.services.streaks import calculate_workout_streak, completed_dates

log = logging.getLogger("litework.achievements")


@dataclass(frozen=True)
class AchievementDefinition:
    type: AchievementType
    name: str
    description: str
    icon: str


_DEFINITIONS = (
    (AchievementType.FIRST_WORKOUT, "First Workout", "Completed your first workout session", "target"),
    (AchievementType.FIRST_PR, "First PR", "Achieved your first personal record", "trophy"),
    (AchievementType.STREAK_3, "3-Day Streak", "Worked out for 3 consecutive days", "flame"),
    (AchievementType.STREAK_7, "Week Warrior", "Worked out for 7 consecutive days", "zap"),
    (AchievementType.STREAK_30, "Monthly Champion", "Worked out for 30 consecutive days", "crown"),
    (AchievementType.VOLUME_10K, "10K Club", "Lifted 10,000 total pounds", "dumbbell"),
    (AchievementType.VOLUME_50K, "50K Club", "Lifted 50,000 total pounds", "dumbbell"),
    (AchievementType.VOLUME_100K, "100K Club", "Lifted 100,000 total pounds", "dumbbell"),
    (AchievementType.SETS_100, "Century Mark", "Completed 100 total sets", "bar-chart"),
    (AchievementType.SETS_500, "500 Club", "Completed 500 total sets", "bar-chart"),
    (AchievementType.SETS_1000, "Thousand Strong", "Completed 1,000 total sets", "bar-chart"),
)
ACHIEVEMENTS: dict[AchievementType, AchievementDefinition] = {
    row[0]: AchievementDefinition(*row) for row in _DEFINITIONS
}

STREAK_MILESTONES = ((3, AchievementType.STREAK_3), (7, AchievementType.STREAK_7), (30, AchievementType.STREAK_30))
VOLUME_MILESTONES = (
    (10_000, AchievementType.VOLUME_10K),
    (50_000, AchievementType.VOLUME_50K),
    (100_000, AchievementType.VOLUME_100K),
)
SET_MILESTONES = (
    (100, AchievementType.SETS_100),
    (500, AchievementType.SETS_500),
    (1000, AchievementType.SETS_1000),
)


@dataclass
class AthleteTotals:
    completed_workouts: int = 0
    prs: int = 0
    current_streak: int = 0
    total_volume: float = 0.0
    total_sets: int = 0


def milestones_reached(totals: AthleteTotals) -> list[AchievementType]:
    """Every achievement the totals qualify for, in definition order."""
    reached = []
    if totals.completed_workouts >= 1:
        reached.append(AchievementType.FIRST_WORKOUT)
    if totals.prs >= 1:
        reached.append(AchievementType.FIRST_PR)
    reached += [t for n, t in STREAK_MILESTONES if totals.current_streak >= n]
    reached += [t for n, t in VOLUME_MILESTONES if totals.total_volume >= n]
    reached += [t for n, t in SET_MILESTONES if totals.total_sets >= n]
    return reached


async def athlete_totals(db: AsyncSession, athlete_id: uuid.UUID) -> AthleteTotals:
    """Lifetime totals over completed sessions."""
    completed = await db.scalar(
        select(func.count(WorkoutSession.id)).where(
            WorkoutSession.athlete_id == athlete_id, WorkoutSession.status == SessionStatus.COMPLETED
        )
    )
    sets = (
        await db.execute(
            select(
                func.count(SetRecord.id).label("sets"),
                func.coalesce(func.sum(SetRecord.weight * SetRecord.reps), 0).label("volume"),
                func.sum(case((SetRecord.is_pr.is_(True), 1), else_=0)).label("prs"),
            )
            .join(SessionExercise, SessionExercise.id == SetRecord.session_exercise_id)
            .join(WorkoutSession, WorkoutSession.id == SessionExercise.session_id)
            .where(WorkoutSession.athlete_id == athlete_id, WorkoutSession.status == SessionStatus.COMPLETED)
        )
    ).one()
    dates = await completed_dates(db, athlete_id, STREAK_LOOKBACK_DAYS)
    return AthleteTotals(
        completed_workouts=completed or 0,
        prs=sets.prs or 0,
        current_streak=calculate_workout_streak(dates, utcnow().date()),
        total_volume=float(sets.volume or 0),
        total_sets=sets.sets or 0,
    )


async def earned_achievements(db: AsyncSession, athlete_id: uuid.UUID) -> list[Achievement]:
    result = await db.execute(
        select(Achievement).where(Achievement.athlete_id == athlete_id).order_by(Achievement.earned_at.desc())
    )
    return list(result.scalars().all())


async def award_achievements(db: AsyncSession, athlete_id: uuid.UUID) -> list[Achievement]:
    """Store achievements newly reached by the athlete and notify them. Returns only the new ones."""
    owned = {a.achievement_type for a in await earned_achievements(db, athlete_id)}
    new = [
        Achievement(athlete_id=athlete_id, achievement_type=t, earned_at=utcnow())
        for t in milestones_reached(await athlete_totals(db, athlete_id))
        if t not in owned
    ]
    if not new:
        return []
    db.add_all(new)
    await db.flush()

    athlete = await db.get(User, athlete_id)
    prefs = merged_preferences(athlete.notification_preferences if athlete else None)
    if prefs["achievementNotifications"].get("enabled", True):
        for a in new:
            definition = ACHIEVEMENTS[a.achievement_type]
            await create_notification(
                db,
                athlete_id,
                title=f"Achievement unlocked: {definition.name}",
                body=definition.description,
                type_=NotificationType.ACHIEVEMENT,
                url="/progress",
                data={"achievement": a.achievement_type.value},
            )
    log.info("Athlete %s earned %s", athlete_id, ", ".join(a.achievement_type.value for a in new))
    return new


def describe(achievement: Achievement) -> AchievementRead:
    definition = ACHIEVEMENTS[achievement.achievement_type]
    return AchievementRead(
        id=achievement.id,
        earned_at=achievement.earned_at,
        type=definition.type,
        name=definition.name,
        description=definition.description,
        icon=definition.icon,
    )


def locked_definitions(earned: list[Achievement]) -> list[AchievementInfo]:
    owned = {a.achievement_type for a in earned}
    return [
        AchievementInfo(type=d.type, name=d.name, description=d.description, icon=d.icon)
        for t, d in ACHIEVEMENTS.items()
        if t not in owned
    ]
