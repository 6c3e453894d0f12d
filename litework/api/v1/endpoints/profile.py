"""The caller's own profile and notification preferences."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from litework.api.deps import get_current_user
from litework.db.session import get_db
from litework.models.user import User
from litework.schemas.user import NotificationPreferences, ProfileUpdate, UserRead
from litework.services.notifications import merged_preferences

router = APIRouter()


@router.get("", response_model=UserRead)
async def get_profile(user: User = Depends(get_current_user)):
    return user


@router.patch("", response_model=UserRead)
async def update_profile(
    payload: ProfileUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    for k, v in payload.model_dump(exclude_unset=True).items():
        setattr(user, k, v)
    await db.flush()
    await db.refresh(user)
    return user


@router.get("/notification-preferences", response_model=NotificationPreferences, response_model_by_alias=True)
async def get_notification_preferences(user: User = Depends(get_current_user)):
    """Stored preferences with defaults filled in."""
    return NotificationPreferences.model_validate(merged_preferences(user.notification_preferences))


@router.put("/notification-preferences", response_model=NotificationPreferences, response_model_by_alias=True)
async def put_notification_preferences(
    payload: NotificationPreferences,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    user.notification_preferences = payload.model_dump(mode="json", by_alias=True)
    await db.flush()
    return payload
