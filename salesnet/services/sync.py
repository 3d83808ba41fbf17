"""
Write-through mirroring with a per-entity sync ledger.

The local store is written first and is authoritative. Each mutation is
then pushed to the remote mirror; the outcome is recorded in
`sync_records` and failures are retried by the scheduler from the
entity's current local state.
"""

import logging
from datetime import datetime, timezone
from typing import Dict, List, Optional

from pydantic import BaseModel
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from salesnet.models import SyncOperation, SyncRecord, SyncStatus, UserRole
from salesnet.services.backend import RemoteBackend
from salesnet.services.repository import (
    COLLECTION_MODELS,
    load_collection,
    save_collection,
)

logger = logging.getLogger(__name__)


async def _get_record(db: AsyncSession, collection: str, entity_id: str) -> SyncRecord:
    result = await db.execute(
        select(SyncRecord).where(
            SyncRecord.collection == collection,
            SyncRecord.entity_id == entity_id,
        )
    )
    record = result.scalar_one_or_none()
    if record is None:
        record = SyncRecord(
            collection=collection,
            entity_id=entity_id,
            operation=SyncOperation.UPSERT,
            status=SyncStatus.PENDING,
            attempts=0,
        )
        db.add(record)
    return record


async def _push(
    backend: RemoteBackend,
    record: SyncRecord,
    entity: Optional[BaseModel],
) -> None:
    """Attempt one remote write and store its outcome on the record."""
    if not backend.enabled:
        record.status = SyncStatus.SKIPPED
        return

    record.attempts = (record.attempts or 0) + 1
    try:
        if record.operation == SyncOperation.DELETE:
            await backend.delete(record.collection, record.entity_id)
        else:
            await backend.upsert(record.collection, entity)
    except Exception as e:
        record.status = SyncStatus.FAILED
        record.error_message = str(e)
        logger.warning(
            f"Mirror {record.operation.value} of {record.collection}/{record.entity_id} "
            f"failed (attempt {record.attempts}): {e}"
        )
        return

    record.status = SyncStatus.SYNCED
    record.error_message = None
    record.synced_at = datetime.now(timezone.utc)


async def mirror_write(
    db: AsyncSession,
    backend: RemoteBackend,
    collection: str,
    entity_id: str,
    operation: SyncOperation,
    entity: Optional[BaseModel] = None,
) -> SyncStatus:
    """
    Mirror one local mutation to the remote backend.

    Never raises for remote failures; the returned status says what
    happened and the ledger keeps it for the retry job.
    """
    record = await _get_record(db, collection, entity_id)
    record.operation = operation
    await _push(backend, record, entity)
    await db.flush()
    return record.status


async def retry_failed(db: AsyncSession, backend: RemoteBackend) -> int:
    """
    Re-push every failed or pending ledger entry.

    Returns:
        Number of entries now synced
    """
    if not backend.enabled:
        return 0

    result = await db.execute(
        select(SyncRecord)
        .where(SyncRecord.status.in_([SyncStatus.FAILED, SyncStatus.PENDING]))
        .order_by(SyncRecord.created_at)
    )
    records = result.scalars().all()
    if not records:
        return 0

    collections: Dict[str, Dict[str, BaseModel]] = {}
    synced = 0
    for record in records:
        if record.collection not in collections:
            items = await load_collection(db, record.collection)
            collections[record.collection] = {item.id: item for item in items}

        entity = collections[record.collection].get(record.entity_id)
        if entity is None:
            # Removed locally since the failed write
            record.operation = SyncOperation.DELETE

        await _push(backend, record, entity)
        if record.status == SyncStatus.SYNCED:
            synced += 1

    await db.flush()
    logger.info(f"Sync retry: {synced}/{len(records)} entries synced")
    return synced


async def sync_summary(db: AsyncSession) -> Dict[str, int]:
    """Count of ledger entries per status."""
    result = await db.execute(
        select(SyncRecord.status, func.count()).group_by(SyncRecord.status)
    )
    counts = {status.value: 0 for status in SyncStatus}
    for status, count in result.all():
        counts[SyncStatus(status).value] = count
    return counts


async def failed_records(db: AsyncSession, limit: int = 50) -> List[SyncRecord]:
    result = await db.execute(
        select(SyncRecord)
        .where(SyncRecord.status == SyncStatus.FAILED)
        .order_by(SyncRecord.created_at.desc())
        .limit(limit)
    )
    return list(result.scalars().all())


async def pull_remote(
    db: AsyncSession,
    backend: RemoteBackend,
    only_empty: bool = True,
) -> Dict[str, int]:
    """
    Copy remote rows into the local store.

    Args:
        db: Local store session
        backend: Remote mirror
        only_empty: Only hydrate collections that are empty locally (the
            master seed alone counts as empty for users)

    Returns:
        Number of records loaded per collection
    """
    loaded: Dict[str, int] = {}
    if not await backend.test_connection():
        logger.info("Remote backend not available, keeping local data")
        return loaded

    for collection in COLLECTION_MODELS:
        try:
            remote_items = await backend.fetch_all(collection)
        except Exception as e:
            logger.warning(f"Failed to fetch remote {collection}: {e}")
            continue
        if not remote_items:
            continue

        if only_empty:
            local_items = await load_collection(db, collection)
            if any(getattr(item, "role", None) != UserRole.MASTER for item in local_items):
                continue

        await save_collection(db, collection, remote_items)
        loaded[collection] = len(remote_items)
        logger.info(f"Hydrated {len(remote_items)} {collection} from remote")

    return loaded
