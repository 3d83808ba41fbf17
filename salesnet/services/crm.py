"""
CRM records: clients, consultants and deals.

Any approved user may create records; updates and deletes are limited to
records the acting user can see.
"""

import logging
from datetime import datetime, timezone
from typing import Dict, List, Type

from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from salesnet.models import SyncOperation
from salesnet.schemas.crm import Client, Consultant, CRMRecord, Deal
from salesnet.schemas.user import User
from salesnet.services.backend import RemoteBackend
from salesnet.services.errors import NotFound, PermissionDenied, ValidationFailed
from salesnet.services.org_graph import visible_user_ids
from salesnet.services.repository import (
    CLIENTS,
    CONSULTANTS,
    DEALS,
    USERS,
    load_collection,
    new_id,
    save_collection,
)
from salesnet.services.sync import mirror_write
from salesnet.services.visibility import filter_records

logger = logging.getLogger(__name__)

CRM_MODELS: Dict[str, Type[CRMRecord]] = {
    CLIENTS: Client,
    CONSULTANTS: Consultant,
    DEALS: Deal,
}


def _model_for(collection: str) -> Type[CRMRecord]:
    try:
        return CRM_MODELS[collection]
    except KeyError:
        raise NotFound(f"Unknown CRM collection: {collection}") from None


async def _visible_ids(db: AsyncSession, actor: User):
    users = await load_collection(db, USERS)
    return visible_user_ids(actor, users)


def _check_assignee(actor: User, assigned_to, ids) -> None:
    if assigned_to and assigned_to not in ids:
        if actor.is_privileged:
            raise ValidationFailed(f"User {assigned_to} does not exist")
        raise PermissionDenied("Records can only be assigned within your team")


async def list_records(db: AsyncSession, actor: User, collection: str) -> List[CRMRecord]:
    _model_for(collection)
    records = await load_collection(db, collection)
    if actor.is_privileged:
        return records
    return filter_records(records, await _visible_ids(db, actor))


async def create_record(
    db: AsyncSession,
    backend: RemoteBackend,
    actor: User,
    collection: str,
    data: BaseModel,
) -> CRMRecord:
    model = _model_for(collection)
    ids = await _visible_ids(db, actor)
    fields = data.model_dump()
    _check_assignee(actor, fields.get("assigned_to"), ids)

    now = datetime.now(timezone.utc)
    extra = {"updated_at": now} if model is Deal else {}
    record = model(id=new_id(), created_by=actor.id, created_at=now, **fields, **extra)

    records = await load_collection(db, collection)
    records.append(record)
    await save_collection(db, collection, records)
    await mirror_write(db, backend, collection, record.id, SyncOperation.UPSERT, record)
    logger.info(f"{collection} record {record.id} created by {actor.id}")
    return record


async def _find_visible(
    db: AsyncSession,
    actor: User,
    collection: str,
    record_id: str,
) -> List[CRMRecord]:
    records = await load_collection(db, collection)
    visible = records if actor.is_privileged else filter_records(
        records, await _visible_ids(db, actor)
    )
    if not any(r.id == record_id for r in visible):
        raise NotFound(f"Record {record_id} not found")
    return records


async def update_record(
    db: AsyncSession,
    backend: RemoteBackend,
    actor: User,
    collection: str,
    record_id: str,
    data: BaseModel,
) -> CRMRecord:
    model = _model_for(collection)
    records = await _find_visible(db, actor, collection, record_id)
    current = next(r for r in records if r.id == record_id)

    changes = data.model_dump(exclude_unset=True)
    changes = {k: v for k, v in changes.items() if v is not None or k == "assigned_to"}
    if changes.get("assigned_to"):
        _check_assignee(actor, changes["assigned_to"], await _visible_ids(db, actor))
    if model is Deal:
        changes["updated_at"] = datetime.now(timezone.utc)

    updated = model.model_validate({**current.model_dump(), **changes})
    records = [updated if r.id == record_id else r for r in records]
    await save_collection(db, collection, records)
    await mirror_write(db, backend, collection, record_id, SyncOperation.UPSERT, updated)
    logger.info(f"{collection} record {record_id} updated by {actor.id}")
    return updated


async def delete_record(
    db: AsyncSession,
    backend: RemoteBackend,
    actor: User,
    collection: str,
    record_id: str,
) -> None:
    _model_for(collection)
    records = await _find_visible(db, actor, collection, record_id)
    await save_collection(db, collection, [r for r in records if r.id != record_id])
    await mirror_write(db, backend, collection, record_id, SyncOperation.DELETE)
    logger.info(f"{collection} record {record_id} deleted by {actor.id}")
