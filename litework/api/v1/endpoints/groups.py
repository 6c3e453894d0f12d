"""Athlete groups and their membership."""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from litework.api.deps import get_current_user, require_coach
from litework.core.constants import DEFAULT_GROUP_COLOR
from litework.core.enums import UserRole
from litework.db.session import get_db
from litework.models.athlete_group import AthleteGroup, AthleteGroupMember
from litework.models.user import User
from litework.schemas.group import GroupCreate, GroupMembersAdd, GroupRead, GroupUpdate

router = APIRouter()


def _group_query():
    return select(AthleteGroup).options(selectinload(AthleteGroup.members))


async def _load_group(db: AsyncSession, group_id: UUID, refresh: bool = False) -> AthleteGroup:
    stmt = _group_query().where(AthleteGroup.id == group_id)
    if refresh:
        stmt = stmt.execution_options(populate_existing=True)
    group = (await db.execute(stmt)).scalar_one_or_none()
    if not group:
        raise HTTPException(status_code=404, detail="Group not found")
    return group


async def _ensure_athletes(db: AsyncSession, athlete_ids: set[UUID]) -> None:
    if not athlete_ids:
        return
    found = set(
        (
            await db.execute(select(User.id).where(User.id.in_(athlete_ids), User.role == UserRole.ATHLETE))
        ).scalars().all()
    )
    if found != athlete_ids:
        raise HTTPException(status_code=400, detail="One or more athletes do not exist")


@router.get("", response_model=list[GroupRead])
async def list_groups(
    include_archived: bool = False,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Coaches see every group; athletes the groups they belong to."""
    stmt = _group_query()
    if not user.is_coach:
        stmt = stmt.join(AthleteGroupMember, AthleteGroupMember.group_id == AthleteGroup.id).where(
            AthleteGroupMember.athlete_id == user.id
        )
    if not include_archived:
        stmt = stmt.where(AthleteGroup.archived.is_(False))
    result = await db.execute(stmt.order_by(AthleteGroup.name))
    return list(result.scalars().unique().all())


@router.post("", response_model=GroupRead, status_code=201)
async def create_group(
    payload: GroupCreate,
    coach: User = Depends(require_coach),
    db: AsyncSession = Depends(get_db),
):
    athlete_ids = set(payload.athlete_ids)
    await _ensure_athletes(db, athlete_ids)
    group = AthleteGroup(
        **payload.model_dump(exclude={"athlete_ids", "color"}),
        color=payload.color or DEFAULT_GROUP_COLOR,
        coach_id=coach.id,
        members=[AthleteGroupMember(athlete_id=a) for a in athlete_ids],
    )
    db.add(group)
    await db.flush()
    return await _load_group(db, group.id, refresh=True)


@router.get("/{group_id}", response_model=GroupRead)
async def get_group(
    group_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    group = await _load_group(db, group_id)
    if not user.is_coach and user.id not in group.athlete_ids:
        raise HTTPException(status_code=404, detail="Group not found")
    return group


@router.patch("/{group_id}", response_model=GroupRead)
async def update_group(
    group_id: UUID,
    payload: GroupUpdate,
    coach: User = Depends(require_coach),
    db: AsyncSession = Depends(get_db),
):
    group = await _load_group(db, group_id)
    for k, v in payload.model_dump(exclude_unset=True).items():
        setattr(group, k, v)
    await db.flush()
    return await _load_group(db, group_id, refresh=True)


@router.delete("/{group_id}", status_code=204)
async def delete_group(
    group_id: UUID,
    coach: User = Depends(require_coach),
    db: AsyncSession = Depends(get_db),
):
    group = await _load_group(db, group_id)
    await db.delete(group)
    return None


@router.post("/{group_id}/members", response_model=GroupRead)
async def add_members(
    group_id: UUID,
    payload: GroupMembersAdd,
    coach: User = Depends(require_coach),
    db: AsyncSession = Depends(get_db),
):
    """Add athletes; ones already in the group are ignored."""
    group = await _load_group(db, group_id)
    new_ids = set(payload.athlete_ids) - set(group.athlete_ids)
    await _ensure_athletes(db, new_ids)
    for athlete_id in new_ids:
        group.members.append(AthleteGroupMember(athlete_id=athlete_id))
    await db.flush()
    return await _load_group(db, group_id, refresh=True)


@router.delete("/{group_id}/members/{athlete_id}", response_model=GroupRead)
async def remove_member(
    group_id: UUID,
    athlete_id: UUID,
    coach: User = Depends(require_coach),
    db: AsyncSession = Depends(get_db),
):
    group = await _load_group(db, group_id)
    member = next((m for m in group.members if m.athlete_id == athlete_id), None)
    if member is None:
        raise HTTPException(status_code=404, detail="Athlete is not in this group")
    group.members.remove(member)
    await db.flush()
    return await _load_group(db, group_id, refresh=True)
