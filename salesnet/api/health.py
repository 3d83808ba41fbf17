"""
Health check endpoints.
"""

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from salesnet.db import get_db
from salesnet.services.backend import RemoteBackend, get_backend

router = APIRouter(prefix="/health", tags=["Health"])


@router.get("")
async def health_check():
    """
    Basic health check.

    Returns 200 if the service is running.
    """
    return {"status": "healthy", "service": "salesnet"}


@router.get("/ready")
async def readiness_check(
    db: AsyncSession = Depends(get_db),
    backend: RemoteBackend = Depends(get_backend),
):
    """
    Readiness check with local store connectivity.

    The remote mirror is reported but never makes the service unready.
    """
    try:
        await db.execute(text("SELECT 1"))
    except Exception as e:
        return {
            "status": "not_ready",
            "database": f"error: {str(e)}",
        }

    if not backend.enabled:
        remote = "offline"
    else:
        remote = "connected" if await backend.test_connection() else "unreachable"

    return {
        "status": "ready",
        "database": "connected",
        "remote": remote,
    }


@router.get("/live")
async def liveness_check():
    """Liveness check."""
    return {"status": "alive"}
