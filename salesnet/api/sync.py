"""Remote mirror sync endpoints (admin/master)."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from salesnet.auth.dependencies import require_privileged
from salesnet.db import get_db
from salesnet.models import UserRole
from salesnet.schemas.sync import (
    DataStatusResponse,
    ResetResponse,
    SyncPullResponse,
    SyncRecordResponse,
    SyncRetryResponse,
    SyncStatusResponse,
)
from salesnet.schemas.user import User
from salesnet.services import maintenance
from salesnet.services import sync as sync_service
from salesnet.services.backend import RemoteBackend, get_backend
from salesnet.services.repository import USERS, load_collection

router = APIRouter(prefix="/sync", tags=["Sync"])


@router.get("/status", response_model=SyncStatusResponse)
async def sync_status(
    db: AsyncSession = Depends(get_db),
    backend: RemoteBackend = Depends(get_backend),
    current_user: User = Depends(require_privileged),
):
    failed = await sync_service.failed_records(db)
    return SyncStatusResponse(
        remote_enabled=backend.enabled,
        remote_reachable=await backend.test_connection(),
        counts=await sync_service.sync_summary(db),
        failed=[SyncRecordResponse.model_validate(r) for r in failed],
    )


@router.post("/retry", response_model=SyncRetryResponse)
async def sync_retry(
    db: AsyncSession = Depends(get_db),
    backend: RemoteBackend = Depends(get_backend),
    current_user: User = Depends(require_privileged),
):
    """Re-push failed mirror writes now instead of waiting for the job."""
    before = await sync_service.sync_summary(db)
    synced = await sync_service.retry_failed(db, backend)
    return SyncRetryResponse(
        retried=before.get("failed", 0) + before.get("pending", 0),
        synced=synced,
    )


@router.post("/pull", response_model=SyncPullResponse)
async def sync_pull(
    only_empty: bool = Query(True),
    db: AsyncSession = Depends(get_db),
    backend: RemoteBackend = Depends(get_backend),
    current_user: User = Depends(require_privileged),
):
    """Hydrate the local store from the remote mirror."""
    return SyncPullResponse(pulled=await sync_service.pull_remote(db, backend, only_empty))


@router.get("/data", response_model=DataStatusResponse)
async def data_status(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_privileged),
):
    """Records per collection, before or after a reset."""
    users = await load_collection(db, USERS)
    return DataStatusResponse(
        counts=await maintenance.database_status(db),
        master_exists=any(u.role == UserRole.MASTER for u in users),
    )


@router.post("/reset", response_model=ResetResponse)
async def reset_data(
    reseed: bool = Query(False),
    db: AsyncSession = Depends(get_db),
    backend: RemoteBackend = Depends(get_backend),
    current_user: User = Depends(require_privileged),
):
    """Delete all data except master accounts, locally and on the mirror (master only)."""
    result = await maintenance.reset_data(db, backend, current_user, reseed=reseed)
    return ResetResponse(removed=result.removed, seeded=result.seeded)
