"""PR detection: compare a new set against the athlete's history for that exercise.

Priority when several records fall at once: estimated 1RM, then weight, then
reps (only at >= 90% of the best weight), then volume. The first match wins.
"""

from __future__ import annotations

import math
import uuid
from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from litework.core.constants import PR_HISTORY_LIMIT, REP_PR_WEIGHT_RATIO
from litework.core.enums import PRType
from litework.models.exercise import Exercise
from litework.models.workout_session import SessionExercise, SetRecord, WorkoutSession


@dataclass(frozen=True)
class HistorySet:
    weight: float
    reps: int
    completed_at: datetime | None = None


@dataclass(frozen=True)
class PRData:
    exercise_id: str
    exercise_name: str
    weight: float
    reps: int
    estimated_one_rm: float
    date: str | None


@dataclass(frozen=True)
class Performance:
    weight: float
    reps: int
    estimated_one_rm: float
    volume: float


@dataclass(frozen=True)
class PRComparison:
    is_pr: bool
    type: PRType | None
    improvement: float  # percent
    previous_best: PRData | None
    current_performance: Performance

    def to_dict(self) -> dict:
        out = asdict(self)
        out["type"] = self.type.value if self.type else None
        return out


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def calculate_one_rm(weight: float, reps: int) -> float:
    """Epley estimate: weight x (1 + reps/30), rounded. A single rep is the 1RM itself."""
    if reps == 1:
        return weight
    return _round_half_up(weight * (1 + reps / 30))


def calculate_volume(weight: float, reps: int) -> float:
    return weight * reps


def _improvement(current: float, best: float) -> float:
    if best <= 0:
        return 100.0
    return (current - best) / best * 100


def compare_to_history(
    weight: float,
    reps: int,
    history: Sequence[HistorySet],
    exercise_id: str = "",
    exercise_name: str = "Unknown",
) -> PRComparison:
    current = Performance(
        weight=weight,
        reps=reps,
        estimated_one_rm=calculate_one_rm(weight, reps),
        volume=calculate_volume(weight, reps),
    )
    if not history:
        # First time doing this exercise - a PR by default
        return PRComparison(True, PRType.ONE_RM, 100.0, None, current)

    best_one_rm = 0.0
    best_weight = 0.0
    best_reps = 0
    best_volume = 0.0
    best_set: PRData | None = None
    for s in history:
        set_weight = s.weight or 0.0
        set_reps = s.reps or 0
        set_one_rm = calculate_one_rm(set_weight, set_reps)
        if set_one_rm > best_one_rm:
            best_one_rm = set_one_rm
            best_set = PRData(
                exercise_id=exercise_id,
                exercise_name=exercise_name,
                weight=set_weight,
                reps=set_reps,
                estimated_one_rm=set_one_rm,
                date=s.completed_at.isoformat() if s.completed_at else None,
            )
        best_weight = max(best_weight, set_weight)
        best_reps = max(best_reps, set_reps)
        best_volume = max(best_volume, calculate_volume(set_weight, set_reps))

    if current.estimated_one_rm > best_one_rm:
        return PRComparison(
            True, PRType.ONE_RM, _improvement(current.estimated_one_rm, best_one_rm), best_set, current
        )
    if weight > best_weight:
        return PRComparison(True, PRType.WEIGHT, _improvement(weight, best_weight), best_set, current)
    if reps > best_reps and weight >= best_weight * REP_PR_WEIGHT_RATIO:
        return PRComparison(True, PRType.REPS, _improvement(reps, best_reps), best_set, current)
    if current.volume > best_volume:
        return PRComparison(True, PRType.VOLUME, _improvement(current.volume, best_volume), best_set, current)
    return PRComparison(False, None, 0.0, best_set, current)


def pr_badge_tier(improvement: float) -> str:
    if improvement >= 20:
        return "legendary"
    if improvement >= 10:
        return "gold"
    if improvement >= 5:
        return "silver"
    return "bronze"


def format_pr_message(comparison: PRComparison, unit: str = "lbs") -> str:
    if not comparison.is_pr:
        return ""
    perf = comparison.current_performance
    pct = f"{comparison.improvement:.1f}%"
    if comparison.type is PRType.ONE_RM:
        return f"New 1RM PR! Est. {perf.estimated_one_rm:g}{unit} ({pct} increase)"
    if comparison.type is PRType.WEIGHT:
        return f"Weight PR! {perf.weight:g}{unit} x {perf.reps} ({pct} heavier)"
    if comparison.type is PRType.REPS:
        return f"Rep PR! {perf.reps} reps at {perf.weight:g}{unit} ({pct} more reps)"
    if comparison.type is PRType.VOLUME:
        return f"Volume PR! {perf.volume:g}{unit} total ({pct} more volume)"
    return "Personal Record!"


async def load_history(
    db: AsyncSession,
    athlete_id: uuid.UUID,
    exercise_id: uuid.UUID,
    exclude_set_id: uuid.UUID | None = None,
) -> list[HistorySet]:
    """Most recent weighted sets of this exercise for the athlete."""
    stmt = (
        select(SetRecord.weight, SetRecord.reps, SetRecord.completed_at)
        .join(SessionExercise, SessionExercise.id == SetRecord.session_exercise_id)
        .join(WorkoutSession, WorkoutSession.id == SessionExercise.session_id)
        .where(
            WorkoutSession.athlete_id == athlete_id,
            SessionExercise.exercise_id == exercise_id,
            SetRecord.weight.isnot(None),
        )
        .order_by(SetRecord.completed_at.desc())
        .limit(PR_HISTORY_LIMIT)
    )
    if exclude_set_id is not None:
        stmt = stmt.where(SetRecord.id != exclude_set_id)
    result = await db.execute(stmt)
    return [HistorySet(float(w), int(r), c) for w, r, c in result.all()]


async def check_pr(
    db: AsyncSession,
    athlete_id: uuid.UUID,
    exercise_id: uuid.UUID,
    weight: float,
    reps: int,
    exclude_set_id: uuid.UUID | None = None,
) -> PRComparison:
    """Compare against stored history. (The new set must not be flushed yet, or be excluded.)"""
    history = await load_history(db, athlete_id, exercise_id, exclude_set_id)
    name = await db.scalar(select(Exercise.name).where(Exercise.id == exercise_id))
    return compare_to_history(weight, reps, history, str(exercise_id), name or "Unknown")
