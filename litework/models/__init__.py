"""ORM models - import all so Base.metadata is complete for migrations."""

from litework.models.achievement import Achievement
from litework.models.assignment import WorkoutAssignment
from litework.models.athlete_group import AthleteGroup, AthleteGroupMember
from litework.models.block import WorkoutBlock
from litework.models.exercise import Exercise
from litework.models.invite import Invite
from litework.models.kpi import AthleteKPI
from litework.models.notification import Notification
from litework.models.user import AuthToken, User
from litework.models.workout_plan import ExerciseGroup, WorkoutExercise, WorkoutPlan
from litework.models.workout_session import SessionExercise, SetRecord, WorkoutFeedback, WorkoutSession

__all__ = [
    "Achievement",
    "AthleteGroup",
    "AthleteGroupMember",
    "AthleteKPI",
    "AuthToken",
    "Exercise",
    "ExerciseGroup",
    "Invite",
    "Notification",
    "SessionExercise",
    "SetRecord",
    "User",
    "WorkoutAssignment",
    "WorkoutBlock",
    "WorkoutExercise",
    "WorkoutFeedback",
    "WorkoutPlan",
    "WorkoutSession",
]
