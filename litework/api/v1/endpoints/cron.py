"""Jobs triggered by the hosting platform's cron, authenticated with CRON_SECRET."""

import secrets

from fastapi import APIRouter, Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession

from litework.api.deps import bearer_scheme
from litework.core.config import get_settings
from litework.core.dates import utcnow
from litework.db.session import get_db
from litework.services.reminders import send_workout_reminders

router = APIRouter()


def verify_cron_secret(credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme)) -> None:
    expected = get_settings().cron_secret
    if not expected:
        raise HTTPException(status_code=503, detail="Cron is not configured")
    if credentials is None or not secrets.compare_digest(credentials.credentials, expected):
        raise HTTPException(status_code=401, detail="Invalid cron secret", headers={"WWW-Authenticate": "Bearer"})


@router.get("/workout-reminders", dependencies=[Depends(verify_cron_secret)])
async def workout_reminders(db: AsyncSession = Depends(get_db)):
    now = utcnow()
    summary = await send_workout_reminders(db, now)
    return {"ran_at": now.isoformat(), **summary}
