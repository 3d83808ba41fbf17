"""
Data maintenance: store status and a full reset (master only).

Reset removes deals, consultants, clients, contracts and every user
except master accounts, both locally and on the remote mirror, and can
reseed the demo organization afterwards.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Set

from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from salesnet.models import SyncOperation, UserRole
from salesnet.schemas.user import User
from salesnet.services.backend import RemoteBackend
from salesnet.services.errors import PermissionDenied
from salesnet.services.repository import (
    CLIENTS,
    CONSULTANTS,
    CONTRACTS,
    DEALS,
    USERS,
    load_collection,
    save_collection,
)
from salesnet.services.seed import build_demo_organization
from salesnet.services.sync import mirror_write

logger = logging.getLogger(__name__)

# Dependents first, users last
RESET_ORDER = [DEALS, CONSULTANTS, CLIENTS, CONTRACTS, USERS]


@dataclass
class ResetResult:
    removed: Dict[str, int] = field(default_factory=dict)
    seeded: Dict[str, int] = field(default_factory=dict)


def _keep(item: BaseModel) -> bool:
    return getattr(item, "role", None) == UserRole.MASTER


async def database_status(db: AsyncSession) -> Dict[str, int]:
    """Number of records per collection in the local store."""
    counts = {}
    for collection in RESET_ORDER:
        counts[collection] = len(await load_collection(db, collection))
    return counts


async def _remote_ids(backend: RemoteBackend, collection: str) -> Set[str]:
    if not backend.enabled:
        return set()
    try:
        items = await backend.fetch_all(collection)
    except Exception as e:
        logger.warning(f"Could not list remote {collection} for reset: {e}")
        return set()
    return {item.id for item in items if not _keep(item)}


async def reset_data(
    db: AsyncSession,
    backend: RemoteBackend,
    actor: User,
    reseed: bool = False,
) -> ResetResult:
    """
    Wipe all business data, keeping master accounts.

    Rows that only exist remotely are deleted too. Remote failures are left
    in the sync ledger for the retry job.

    Args:
        db: Local store session
        backend: Remote mirror
        actor: Acting user, must be a master
        reseed: Load the demo organization after the wipe

    Returns:
        ResetResult with removed (and seeded) counts per collection
    """
    if actor.role != UserRole.MASTER:
        raise PermissionDenied("Master access required")

    result = ResetResult()
    for collection in RESET_ORDER:
        local_items = await load_collection(db, collection)
        kept = [item for item in local_items if _keep(item)]
        doomed = {item.id for item in local_items if not _keep(item)}
        doomed |= await _remote_ids(backend, collection)

        await save_collection(db, collection, kept)
        for entity_id in sorted(doomed):
            await mirror_write(db, backend, collection, entity_id, SyncOperation.DELETE)
        result.removed[collection] = len(doomed)

    logger.warning(f"All data reset by {actor.id}: {result.removed}")

    if reseed:
        result.seeded = await _seed_demo(db, backend)

    return result


async def _seed_demo(db: AsyncSession, backend: RemoteBackend) -> Dict[str, int]:
    demo_users, demo_contracts = build_demo_organization()

    users: List[User] = await load_collection(db, USERS)
    users.extend(demo_users)
    await save_collection(db, USERS, users)
    for user in demo_users:
        await mirror_write(db, backend, USERS, user.id, SyncOperation.UPSERT, user)

    await save_collection(db, CONTRACTS, demo_contracts)
    for contract in demo_contracts:
        await mirror_write(db, backend, CONTRACTS, contract.id, SyncOperation.UPSERT, contract)

    logger.info(f"Demo data seeded: {len(demo_users)} users, {len(demo_contracts)} contracts")
    return {USERS: len(demo_users), CONTRACTS: len(demo_contracts)}
