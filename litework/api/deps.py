"""Shared endpoint dependencies: current user and role checks."""

import uuid

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from litework.core.dates import ensure_utc, utcnow
from litework.core.enums import UserRole
from litework.core.security import hash_token
from litework.db.session import get_db
from litework.models.user import AuthToken, User

bearer_scheme = HTTPBearer(auto_error=False)

_UNAUTHORIZED_HEADERS = {"WWW-Authenticate": "Bearer"}


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> User:
    """Resolve the bearer token to its user; 401 when missing, unknown or expired."""
    if credentials is None or not credentials.credentials:
        raise HTTPException(status_code=401, detail="Authentication required", headers=_UNAUTHORIZED_HEADERS)
    result = await db.execute(
        select(AuthToken)
        .options(selectinload(AuthToken.user))
        .where(AuthToken.token_hash == hash_token(credentials.credentials))
    )
    token = result.scalar_one_or_none()
    if token is None or ensure_utc(token.expires_at) <= utcnow():
        raise HTTPException(status_code=401, detail="Invalid or expired token", headers=_UNAUTHORIZED_HEADERS)
    return token.user


def require_role(minimum: UserRole):
    """Dependency factory: the caller's role must rank at least ``minimum``."""

    async def _check(user: User = Depends(get_current_user)) -> User:
        if user.role.rank < minimum.rank:
            raise HTTPException(status_code=403, detail=f"{minimum.value.capitalize()} access required")
        return user

    return _check


require_coach = require_role(UserRole.COACH)
require_admin = require_role(UserRole.ADMIN)


def ensure_can_view_athlete(user: User, athlete_id: uuid.UUID) -> None:
    """Coaches see every athlete; athletes only themselves."""
    if not user.is_coach and user.id != athlete_id:
        raise HTTPException(status_code=403, detail="You can only access your own data")


def scoped_athlete_id(user: User, athlete_id: uuid.UUID | None) -> uuid.UUID:
    """Athlete id for analytics queries: a coach may pass one, otherwise the caller."""
    if athlete_id is None:
        return user.id
    ensure_can_view_athlete(user, athlete_id)
    return athlete_id
