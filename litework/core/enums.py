"""Shared enums for models and API."""

from enum import Enum


class UserRole(str, Enum):
    """Account role. Higher rank includes the permissions of lower ones."""

    ADMIN = "admin"
    COACH = "coach"
    ATHLETE = "athlete"

    @property
    def rank(self) -> int:
        return ROLE_HIERARCHY[self]


ROLE_HIERARCHY = {
    UserRole.ADMIN: 3,
    UserRole.COACH: 2,
    UserRole.ATHLETE: 1,
}


class GroupType(str, Enum):
    """How exercises in a plan group are performed."""

    SUPERSET = "superset"
    CIRCUIT = "circuit"
    SECTION = "section"  # Visual grouping only, no rounds


class WeightType(str, Enum):
    FIXED = "fixed"
    PERCENTAGE = "percentage"  # % of the athlete's KPI 1RM
    BODYWEIGHT = "bodyweight"


class BlockCategory(str, Enum):
    WARMUP = "warmup"
    MAIN = "main"
    ACCESSORY = "accessory"
    COOLDOWN = "cooldown"
    CUSTOM = "custom"


class AssignmentStatus(str, Enum):
    ASSIGNED = "assigned"
    STARTED = "started"
    COMPLETED = "completed"
    OVERDUE = "overdue"


class SessionStatus(str, Enum):
    ACTIVE = "active"
    PAUSED = "paused"
    COMPLETED = "completed"
    ABANDONED = "abandoned"


class PRType(str, Enum):
    """Type of personal record, in detection priority order."""

    ONE_RM = "1rm"  # Estimated one-rep max
    WEIGHT = "weight"  # Heaviest weight
    REPS = "reps"  # Most reps at >= 90% of best weight
    VOLUME = "volume"  # Highest weight x reps


class InviteStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    CANCELLED = "cancelled"


class NotificationType(str, Enum):
    WORKOUT_REMINDER = "workout_reminder"
    ASSIGNMENT = "assignment"
    PR = "pr"
    FEEDBACK = "feedback"
    ACHIEVEMENT = "achievement"
    GENERAL = "general"


class ReminderTiming(str, Enum):
    SMART = "smart"
    MORNING = "morning"
    EVENING = "evening"
    TWO_HOURS = "2hours"
    ONE_HOUR = "1hour"
    THIRTY_MIN = "30min"


class AchievementType(str, Enum):
    """Milestone badges an athlete can earn once."""

    FIRST_WORKOUT = "first_workout"
    FIRST_PR = "first_pr"
    STREAK_3 = "streak_3"
    STREAK_7 = "streak_7"
    STREAK_30 = "streak_30"
    VOLUME_10K = "volume_10k"
    VOLUME_50K = "volume_50k"
    VOLUME_100K = "volume_100k"
    SETS_100 = "sets_100"
    SETS_500 = "sets_500"
    SETS_1000 = "sets_1000"
