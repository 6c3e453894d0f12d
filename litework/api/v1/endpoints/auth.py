"""Login / logout with opaque bearer tokens."""

import logging

from fastapi import APIRouter, Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from litework.api.deps import bearer_scheme, get_current_user
from litework.core.dates import utcnow
from litework.core.security import generate_token, hash_token, token_expiry, verify_password
from litework.db.session import get_db
from litework.models.user import AuthToken, User
from litework.schemas.user import LoginRequest, TokenResponse, UserRead

router = APIRouter()
log = logging.getLogger("litework.auth")


@router.post("/login", response_model=TokenResponse)
async def login(payload: LoginRequest, db: AsyncSession = Depends(get_db)):
    """Exchange email + password for a bearer token. Expired tokens of the user are pruned."""
    user = await db.scalar(select(User).where(User.email == payload.email))
    if user is None or not await run_in_threadpool(verify_password, payload.password, user.password_hash):
        log.info("Failed login for %s", payload.email)
        raise HTTPException(status_code=401, detail="Invalid email or password")

    now = utcnow()
    await db.execute(delete(AuthToken).where(AuthToken.user_id == user.id, AuthToken.expires_at <= now))
    raw_token = generate_token()
    token = AuthToken(token_hash=hash_token(raw_token), user_id=user.id, expires_at=token_expiry(now))
    db.add(token)
    await db.flush()
    return TokenResponse(
        access_token=raw_token,
        expires_at=token.expires_at,
        user=UserRead.model_validate(user),
    )


@router.post("/logout", status_code=204)
async def logout(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Revoke the token used for this request."""
    await db.execute(
        delete(AuthToken).where(
            AuthToken.user_id == user.id, AuthToken.token_hash == hash_token(credentials.credentials)
        )
    )
    return None
