"""Application constants."""

# PR detection
PR_HISTORY_LIMIT = 100  # Most recent sets compared against
REP_PR_WEIGHT_RATIO = 0.9  # Rep PR only counts at >= 90% of best weight

# Session defaults when a plan exercise leaves them empty
DEFAULT_SETS_TARGET = 3
DEFAULT_REPS_TARGET = "10"
DEFAULT_REST_SECONDS = 60

# Offline replay
MAX_BATCH_SETS = 200

# Groups
DEFAULT_GROUP_COLOR = "#3b82f6"

# Assignments without a start time are rescheduled to noon
DEFAULT_ASSIGNMENT_HOUR = 12

# Streak scan window (~14 months) so the query stays fast with large history
STREAK_LOOKBACK_DAYS = 430

# Workout feed
FEED_DEFAULT_LIMIT = 20
