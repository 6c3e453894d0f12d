"""Athlete invites: coach creates, athlete accepts with the invite id as code."""

import logging
from datetime import timedelta
from html import escape
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from litework.api.deps import require_coach
from litework.core.config import get_settings
from litework.core.dates import ensure_utc, utcnow
from litework.core.enums import InviteStatus
from litework.core.security import generate_token, hash_password, hash_token, token_expiry
from litework.db.session import get_db
from litework.models.athlete_group import AthleteGroup, AthleteGroupMember
from litework.models.invite import Invite
from litework.models.user import AuthToken, User
from litework.schemas.invite import InviteAccept, InviteCreate, InviteRead
from litework.schemas.user import TokenResponse, UserRead
from litework.services.notifications import send_email

router = APIRouter()
log = logging.getLogger("litework.invites")


@router.get("", response_model=list[InviteRead])
async def list_invites(
    status: InviteStatus | None = InviteStatus.PENDING,
    coach: User = Depends(require_coach),
    db: AsyncSession = Depends(get_db),
):
    stmt = select(Invite).order_by(Invite.created_at.desc())
    if status is not None:
        stmt = stmt.where(Invite.status == status)
    result = await db.execute(stmt)
    return list(result.scalars().all())


@router.post("", response_model=InviteRead, status_code=201)
async def create_invite(
    payload: InviteCreate,
    coach: User = Depends(require_coach),
    db: AsyncSession = Depends(get_db),
):
    """Invite a new athlete by email. Existing accounts and open invites are rejected."""
    if await db.scalar(select(User.id).where(User.email == payload.email)):
        raise HTTPException(status_code=409, detail="A user with this email already exists")
    pending = await db.scalar(
        select(Invite.id).where(Invite.email == payload.email, Invite.status == InviteStatus.PENDING)
    )
    if pending:
        raise HTTPException(status_code=409, detail="An invite for this email is already pending")
    if payload.group_id and not await db.get(AthleteGroup, payload.group_id):
        raise HTTPException(status_code=404, detail="Group not found")

    invite = Invite(
        **payload.model_dump(),
        invited_by=coach.id,
        expires_at=utcnow() + timedelta(days=get_settings().invite_ttl_days),
    )
    db.add(invite)
    await db.flush()
    await send_email(
        invite.email,
        "You're invited to LiteWork",
        f"<p>{escape(coach.full_name or 'Your coach')} invited you to LiteWork.</p>"
        f"<p>Your invite code: <strong>{invite.id}</strong></p>",
    )
    return invite


@router.delete("/{invite_id}", status_code=204)
async def cancel_invite(
    invite_id: UUID,
    coach: User = Depends(require_coach),
    db: AsyncSession = Depends(get_db),
):
    invite = await db.get(Invite, invite_id)
    if not invite:
        raise HTTPException(status_code=404, detail="Invite not found")
    if invite.status != InviteStatus.PENDING:
        raise HTTPException(status_code=400, detail="Only pending invites can be cancelled")
    invite.status = InviteStatus.CANCELLED
    await db.flush()
    return None


@router.post("/accept", response_model=TokenResponse, status_code=201)
async def accept_invite(payload: InviteAccept, db: AsyncSession = Depends(get_db)):
    """Create the account from a pending invite and sign the new user in."""
    invite = await db.get(Invite, payload.invite_id)
    if not invite or invite.status != InviteStatus.PENDING:
        raise HTTPException(status_code=404, detail="Invite not found or no longer valid")
    now = utcnow()
    if ensure_utc(invite.expires_at) <= now:
        raise HTTPException(status_code=400, detail="Invite has expired")
    if await db.scalar(select(User.id).where(User.email == invite.email)):
        raise HTTPException(status_code=409, detail="A user with this email already exists")

    user = User(
        email=invite.email,
        password_hash=await run_in_threadpool(hash_password, payload.password),
        first_name=payload.first_name or invite.first_name,
        last_name=payload.last_name if payload.last_name is not None else invite.last_name,
        role=invite.role,
        coach_id=invite.invited_by,
    )
    db.add(user)
    await db.flush()
    if invite.group_id:
        db.add(AthleteGroupMember(group_id=invite.group_id, athlete_id=user.id))
    invite.status = InviteStatus.ACCEPTED
    invite.accepted_at = now

    raw_token = generate_token()
    token = AuthToken(token_hash=hash_token(raw_token), user_id=user.id, expires_at=token_expiry(now))
    db.add(token)
    await db.flush()
    await db.refresh(user)
    log.info("Invite %s accepted by %s", invite.id, user.email)
    return TokenResponse(access_token=raw_token, expires_at=token.expires_at, user=UserRead.model_validate(user))
