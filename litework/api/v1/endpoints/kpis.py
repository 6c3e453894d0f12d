"""Athlete KPIs: the lifts whose 1RM is tracked and fed by session PRs."""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from litework.api.deps import get_current_user, scoped_athlete_id
from litework.db.session import get_db
from litework.models.exercise import Exercise
from litework.models.kpi import AthleteKPI
from litework.models.user import User
from litework.schemas.kpi import KPICreate, KPIRead, KPIUpdate

router = APIRouter()


def _to_read(kpi: AthleteKPI) -> KPIRead:
    out = KPIRead.model_validate(kpi)
    out.exercise_name = kpi.exercise.name if kpi.exercise else None
    return out


async def _load_kpi(db: AsyncSession, kpi_id: UUID, user: User) -> AthleteKPI:
    kpi = (
        await db.execute(
            select(AthleteKPI)
            .options(selectinload(AthleteKPI.exercise))
            .where(AthleteKPI.id == kpi_id)
            .execution_options(populate_existing=True)
        )
    ).scalar_one_or_none()
    if not kpi or (not user.is_coach and kpi.athlete_id != user.id):
        raise HTTPException(status_code=404, detail="KPI not found")
    return kpi


@router.get("", response_model=list[KPIRead])
async def list_kpis(
    athlete_id: UUID | None = None,
    include_inactive: bool = False,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    stmt = (
        select(AthleteKPI)
        .options(selectinload(AthleteKPI.exercise))
        .where(AthleteKPI.athlete_id == scoped_athlete_id(user, athlete_id))
    )
    if not include_inactive:
        stmt = stmt.where(AthleteKPI.is_active.is_(True))
    result = await db.execute(stmt.order_by(AthleteKPI.created_at))
    return [_to_read(k) for k in result.scalars().all()]


@router.post("", response_model=KPIRead, status_code=201)
async def create_kpi(
    payload: KPICreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Track a lift for an athlete (coach) or for yourself. One KPI per athlete and exercise."""
    athlete_id = scoped_athlete_id(user, payload.athlete_id)
    if not await db.get(Exercise, payload.exercise_id):
        raise HTTPException(status_code=404, detail="Exercise not found")
    existing = await db.scalar(
        select(AthleteKPI.id).where(
            AthleteKPI.athlete_id == athlete_id, AthleteKPI.exercise_id == payload.exercise_id
        )
    )
    if existing:
        raise HTTPException(status_code=409, detail="This exercise is already tracked for the athlete")
    kpi = AthleteKPI(**payload.model_dump(exclude={"athlete_id"}), athlete_id=athlete_id)
    db.add(kpi)
    await db.flush()
    return _to_read(await _load_kpi(db, kpi.id, user))


@router.patch("/{kpi_id}", response_model=KPIRead)
async def update_kpi(
    kpi_id: UUID,
    payload: KPIUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    kpi = await _load_kpi(db, kpi_id, user)
    for k, v in payload.model_dump(exclude_unset=True).items():
        setattr(kpi, k, v)
    await db.flush()
    return _to_read(await _load_kpi(db, kpi_id, user))


@router.delete("/{kpi_id}", status_code=204)
async def delete_kpi(
    kpi_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    kpi = await _load_kpi(db, kpi_id, user)
    await db.delete(kpi)
    return None
