"""Health check endpoint for load balancers and monitoring."""

import logging
import os

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from litework.core.errors import error_body
from litework.db.session import get_db

router = APIRouter()
log = logging.getLogger("litework.health")


@router.get("")
async def health():
    """Simple liveness check. Includes built_at if LITEWORK_BUILT_AT env is set."""
    payload: dict = {"status": "ok"}
    built_at = os.environ.get("LITEWORK_BUILT_AT")
    if built_at:
        payload["built_at"] = built_at
    return payload


@router.get("/ready")
async def readiness(db: AsyncSession = Depends(get_db)):
    """Readiness: app + DB connectivity."""
    try:
        await db.execute(text("SELECT 1"))
        return {"status": "ok", "database": "connected"}
    except SQLAlchemyError as e:
        log.error("Readiness check failed: %s", e)
        body = error_body("SERVICE_UNAVAILABLE", "Database unavailable", details=str(e))
        return JSONResponse(status_code=503, content=body)
