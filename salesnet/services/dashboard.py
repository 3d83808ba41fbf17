"""
Dashboard service: runs the commission engine on the stored snapshot and
persists promotions.
"""

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from salesnet.models import SyncOperation
from salesnet.schemas.dashboard import DashboardMetrics, TeamEarningsResponse
from salesnet.schemas.user import User
from salesnet.services.backend import RemoteBackend
from salesnet.services.commission import compute_metrics
from salesnet.services.errors import NotFound
from salesnet.services.org_graph import visible_user_ids
from salesnet.services.repository import CONTRACTS, USERS, load_collection, save_collection
from salesnet.services.sync import mirror_write

logger = logging.getLogger(__name__)


async def refresh_metrics(
    db: AsyncSession,
    backend: RemoteBackend,
    viewer: User,
    target_id: Optional[str] = None,
    now: Optional[datetime] = None,
) -> DashboardMetrics:
    """
    Metrics for `target_id` (defaults to the viewer).

    A viewer may only look at users it can see. A promotion found during
    the computation is written back before returning.
    """
    target_id = target_id or viewer.id
    users = await load_collection(db, USERS)
    if target_id != viewer.id and target_id not in visible_user_ids(viewer, users):
        raise NotFound(f"User {target_id} not found")

    contracts = await load_collection(db, CONTRACTS)
    hint = viewer if viewer.id == target_id else None
    result = compute_metrics(target_id, contracts, users, current_user_hint=hint, now=now)

    if result.promoted_to is not None:
        promoted = next(u for u in result.users if u.id == target_id)
        await save_collection(db, USERS, result.users)
        await mirror_write(db, backend, USERS, target_id, SyncOperation.UPSERT, promoted)
        logger.info(f"Promotion of {target_id} to {result.promoted_to.value} saved")

    return result.metrics


async def team_earnings(
    db: AsyncSession,
    backend: RemoteBackend,
    viewer: User,
    now: Optional[datetime] = None,
) -> TeamEarningsResponse:
    """The viewer's team, members sorted by personal revenue (highest first)."""
    metrics = await refresh_metrics(db, backend, viewer, now=now)
    members = sorted(metrics.team_members, key=lambda m: m.personal_revenue, reverse=True)
    return TeamEarningsResponse(
        leader_id=viewer.id,
        leader_level=metrics.current_level,
        team_revenue=metrics.team_revenue,
        team_commission=metrics.team_commission,
        members=members,
    )
