"""API v1 router aggregation."""

from fastapi import APIRouter

from litework.api.v1.endpoints import (
    achievements,
    analytics,
    assignments,
    athletes,
    auth,
    blocks,
    cron,
    exercises,
    feedback,
    groups,
    health,
    invites,
    kpis,
    notifications,
    profile,
    sessions,
    sets,
    workout_feed,
    workouts,
)

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(profile.router, prefix="/profile", tags=["profile"])
api_router.include_router(athletes.router, prefix="/athletes", tags=["athletes"])
api_router.include_router(invites.router, prefix="/invites", tags=["invites"])

api_router.include_router(exercises.router, prefix="/exercises", tags=["exercises"])
api_router.include_router(workouts.router, prefix="/workouts", tags=["workouts"])
api_router.include_router(blocks.router, prefix="/blocks", tags=["blocks"])
api_router.include_router(groups.router, prefix="/groups", tags=["groups"])
api_router.include_router(assignments.router, prefix="/assignments", tags=["assignments"])

api_router.include_router(sessions.router, prefix="/sessions", tags=["sessions"])
api_router.include_router(feedback.router, prefix="/feedback", tags=["feedback"])
api_router.include_router(sets.router, prefix="/sets", tags=["sets"])
api_router.include_router(analytics.router, prefix="/analytics", tags=["analytics"])
api_router.include_router(kpis.router, prefix="/kpis", tags=["kpis"])
api_router.include_router(achievements.router, prefix="/achievements", tags=["achievements"])
api_router.include_router(notifications.router, prefix="/notifications", tags=["notifications"])
api_router.include_router(workout_feed.router, prefix="/workout-feed", tags=["workout-feed"])
api_router.include_router(cron.router, prefix="/cron", tags=["cron"])
