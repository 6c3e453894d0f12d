"""Workout block library."""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from litework.api.deps import require_coach
from litework.core.enums import BlockCategory
from litework.db.session import get_db
from litework.models.block import WorkoutBlock
from litework.models.user import User
from litework.schemas.block import BlockCreate, BlockRead
from litework.services.plans import ensure_exercises_exist

router = APIRouter()


async def _get_block(db: AsyncSession, block_id: UUID) -> WorkoutBlock:
    block = await db.get(WorkoutBlock, block_id)
    if not block:
        raise HTTPException(status_code=404, detail="Block not found")
    return block


@router.get("", response_model=list[BlockRead])
async def list_blocks(
    category: BlockCategory | None = None,
    favorites: bool = False,
    templates: bool | None = None,
    coach: User = Depends(require_coach),
    db: AsyncSession = Depends(get_db),
):
    """Favorites first, then most used."""
    stmt = select(WorkoutBlock)
    if category:
        stmt = stmt.where(WorkoutBlock.category == category)
    if favorites:
        stmt = stmt.where(WorkoutBlock.is_favorite.is_(True))
    if templates is not None:
        stmt = stmt.where(WorkoutBlock.is_template.is_(templates))
    stmt = stmt.order_by(
        WorkoutBlock.is_favorite.desc(), WorkoutBlock.usage_count.desc(), WorkoutBlock.name
    )
    result = await db.execute(stmt)
    return list(result.scalars().all())


@router.post("", response_model=BlockRead, status_code=201)
async def create_block(
    payload: BlockCreate,
    coach: User = Depends(require_coach),
    db: AsyncSession = Depends(get_db),
):
    await ensure_exercises_exist(db, {e.exercise_id for e in payload.exercises})
    keys = {g.key for g in payload.groups}
    if any(e.group_key and e.group_key not in keys for e in payload.exercises):
        raise HTTPException(status_code=400, detail="Exercise references an unknown group key")
    data = payload.model_dump(mode="json")
    data["category"] = payload.category
    block = WorkoutBlock(**data, created_by=coach.id)
    db.add(block)
    await db.flush()
    await db.refresh(block)
    return block


@router.get("/{block_id}", response_model=BlockRead)
async def get_block(
    block_id: UUID,
    coach: User = Depends(require_coach),
    db: AsyncSession = Depends(get_db),
):
    return await _get_block(db, block_id)


@router.post("/{block_id}/favorite", response_model=BlockRead)
async def toggle_favorite(
    block_id: UUID,
    coach: User = Depends(require_coach),
    db: AsyncSession = Depends(get_db),
):
    block = await _get_block(db, block_id)
    block.is_favorite = not block.is_favorite
    await db.flush()
    await db.refresh(block)
    return block


@router.delete("/{block_id}", status_code=204)
async def delete_block(
    block_id: UUID,
    coach: User = Depends(require_coach),
    db: AsyncSession = Depends(get_db),
):
    block = await _get_block(db, block_id)
    await db.delete(block)
    return None
