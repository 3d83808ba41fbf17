"""Sync ledger schemas."""

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel

from salesnet.models.sync import SyncOperation, SyncStatus


class SyncRecordResponse(BaseModel):
    collection: str
    entity_id: str
    operation: SyncOperation
    status: SyncStatus
    attempts: int
    error_message: Optional[str]
    created_at: datetime
    synced_at: Optional[datetime]

    model_config = {"from_attributes": True}


class SyncStatusResponse(BaseModel):
    """Remote mirror state plus ledger counts by status."""

    remote_enabled: bool
    remote_reachable: bool
    counts: Dict[str, int]
    failed: List[SyncRecordResponse]


class SyncRetryResponse(BaseModel):
    retried: int
    synced: int


class SyncPullResponse(BaseModel):
    """Number of entities hydrated per collection."""

    pulled: Dict[str, int]


class DataStatusResponse(BaseModel):
    """Records per collection in the local store."""

    counts: Dict[str, int]
    master_exists: bool


class ResetResponse(BaseModel):
    removed: Dict[str, int]
    seeded: Dict[str, int]
