"""Dashboard API endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from salesnet.auth.dependencies import get_current_user
from salesnet.db import get_db
from salesnet.schemas.dashboard import DashboardMetrics, TeamEarningsResponse
from salesnet.schemas.user import User
from salesnet.services import dashboard as dashboard_service
from salesnet.services.backend import RemoteBackend, get_backend
from salesnet.services.levels import CAREER_LEVEL_LABELS, COMMISSION_RATES, LEVEL_REQUIREMENTS

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


@router.get("/metrics", response_model=DashboardMetrics)
async def get_metrics(
    user_id: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db),
    backend: RemoteBackend = Depends(get_backend),
    current_user: User = Depends(get_current_user),
):
    """
    Current-month metrics.

    `user_id` selects another user of the caller's organization.
    """
    return await dashboard_service.refresh_metrics(db, backend, current_user, user_id)


@router.get("/team", response_model=TeamEarningsResponse)
async def get_team_earnings(
    db: AsyncSession = Depends(get_db),
    backend: RemoteBackend = Depends(get_backend),
    current_user: User = Depends(get_current_user),
):
    return await dashboard_service.team_earnings(db, backend, current_user)


@router.get("/levels")
async def get_levels(current_user: User = Depends(get_current_user)):
    """Career ladder: labels, rates and promotion thresholds."""
    return {
        "labels": {level.value: label for level, label in CAREER_LEVEL_LABELS.items()},
        "rates": {level.value: rate for level, rate in COMMISSION_RATES.items()},
        "requirements": LEVEL_REQUIREMENTS,
    }
