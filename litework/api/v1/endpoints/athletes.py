"""Athlete roster (coach view) and single-athlete profile."""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from litework.api.deps import ensure_can_view_athlete, get_current_user, require_coach
from litework.core.enums import UserRole
from litework.db.session import get_db
from litework.models.athlete_group import AthleteGroupMember
from litework.models.user import User
from litework.schemas.user import AthleteUpdate, UserRead

router = APIRouter()


async def _get_athlete(db: AsyncSession, athlete_id: UUID) -> User:
    athlete = await db.scalar(select(User).where(User.id == athlete_id, User.role == UserRole.ATHLETE))
    if not athlete:
        raise HTTPException(status_code=404, detail="Athlete not found")
    return athlete


@router.get("", response_model=list[UserRead])
async def list_athletes(
    q: str | None = None,
    group_id: UUID | None = None,
    coach: User = Depends(require_coach),
    db: AsyncSession = Depends(get_db),
):
    """All athletes, optionally filtered by name/email search or group membership."""
    stmt = select(User).where(User.role == UserRole.ATHLETE)
    if q:
        pattern = f"%{q.strip()}%"
        stmt = stmt.where(
            or_(User.first_name.ilike(pattern), User.last_name.ilike(pattern), User.email.ilike(pattern))
        )
    if group_id:
        stmt = stmt.join(AthleteGroupMember, AthleteGroupMember.athlete_id == User.id).where(
            AthleteGroupMember.group_id == group_id
        )
    result = await db.execute(stmt.order_by(User.last_name, User.first_name))
    return list(result.scalars().all())


@router.get("/{athlete_id}", response_model=UserRead)
async def get_athlete(
    athlete_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    ensure_can_view_athlete(user, athlete_id)
    return await _get_athlete(db, athlete_id)


@router.patch("/{athlete_id}", response_model=UserRead)
async def update_athlete(
    athlete_id: UUID,
    payload: AthleteUpdate,
    coach: User = Depends(require_coach),
    db: AsyncSession = Depends(get_db),
):
    athlete = await _get_athlete(db, athlete_id)
    for k, v in payload.model_dump(exclude_unset=True).items():
        setattr(athlete, k, v)
    await db.flush()
    await db.refresh(athlete)
    return athlete
