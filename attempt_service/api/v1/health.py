"""
Liveness and readiness endpoints.

/ping never touches storage. /health also runs a trivial query so a load
balancer can tell a running process from one that has lost its database.
"""
import logging

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from attempt_service.core import settings
from attempt_service.core.datetime_utils import utc_now
from attempt_service.models import get_db

logger = logging.getLogger(__name__)

router = APIRouter()


async def database_reachable(db: AsyncSession) -> bool:
    """Run SELECT 1 on the session; False if the database cannot answer."""
    try:
        await db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error(f"Database health check failed: {str(e)}")
        return False
    return True


@router.get("/health")
async def health_check(response: Response, db: AsyncSession = Depends(get_db)):
    """
    Report service identity and database reachability.

    Responds 503 with status "degraded" when the database is unreachable.
    """
    database_ok = await database_reachable(db)
    if not database_ok:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    return {
        "status": "healthy" if database_ok else "degraded",
        "database": "ok" if database_ok else "unavailable",
        "timestamp": utc_now().isoformat(),
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
    }


@router.get("/ping")
async def ping():
    return {"message": "pong"}
