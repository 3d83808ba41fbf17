"""Contract management (admin/master only)."""

import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from salesnet.models import SyncOperation
from salesnet.schemas.contract import Contract, ContractCreate, ContractUpdate
from salesnet.schemas.user import User
from salesnet.services.backend import RemoteBackend
from salesnet.services.errors import NotFound, ValidationFailed
from salesnet.services.repository import (
    CONTRACTS,
    USERS,
    load_collection,
    new_id,
    save_collection,
)
from salesnet.services.sync import mirror_write
from salesnet.services.users import require_privileged

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")


def _check_participants(
    developer_id: str,
    recruiter_id: Optional[str],
    users: List[User],
) -> None:
    known = {u.id for u in users}
    if developer_id not in known:
        raise ValidationFailed(f"Developer {developer_id} does not exist")
    if recruiter_id and recruiter_id not in known:
        raise ValidationFailed(f"Recruiter {recruiter_id} does not exist")


def _fill_defaults(contract: Contract) -> Contract:
    """Store a concrete duration and monthly margin."""
    duration = contract.duration or 1
    monthly = contract.monthly_margin or (contract.gross_margin / duration).quantize(CENT)
    return contract.model_copy(update={"duration": duration, "monthly_margin": monthly})


async def create_contract(
    db: AsyncSession,
    backend: RemoteBackend,
    actor: User,
    data: ContractCreate,
) -> Contract:
    require_privileged(actor)
    users = await load_collection(db, USERS)
    _check_participants(data.developer_id, data.recruiter_id, users)

    contract = _fill_defaults(
        Contract(
            id=new_id(),
            created_by=actor.id,
            created_at=datetime.now(timezone.utc),
            **data.model_dump(),
        )
    )
    contracts = await load_collection(db, CONTRACTS)
    contracts.append(contract)
    await save_collection(db, CONTRACTS, contracts)
    await mirror_write(db, backend, CONTRACTS, contract.id, SyncOperation.UPSERT, contract)
    logger.info(f"Contract {contract.id} '{contract.name}' created by {actor.id}")
    return contract


async def update_contract(
    db: AsyncSession,
    backend: RemoteBackend,
    actor: User,
    contract_id: str,
    data: ContractUpdate,
) -> Contract:
    require_privileged(actor)
    contracts = await load_collection(db, CONTRACTS)
    current = next((c for c in contracts if c.id == contract_id), None)
    if current is None:
        raise NotFound(f"Contract {contract_id} not found")

    changes = data.model_dump(exclude_unset=True)
    changes = {k: v for k, v in changes.items() if v is not None or k == "recruiter_id"}
    # A new margin or duration re-derives the monthly amount unless one is given
    if ("gross_margin" in changes or "duration" in changes) and "monthly_margin" not in changes:
        changes["monthly_margin"] = None

    updated = Contract.model_validate({**current.model_dump(), **changes})
    users = await load_collection(db, USERS)
    _check_participants(updated.developer_id, updated.recruiter_id, users)
    updated = _fill_defaults(updated)

    contracts = [updated if c.id == contract_id else c for c in contracts]
    await save_collection(db, CONTRACTS, contracts)
    await mirror_write(db, backend, CONTRACTS, contract_id, SyncOperation.UPSERT, updated)
    logger.info(f"Contract {contract_id} updated by {actor.id}: {sorted(changes)}")
    return updated


async def delete_contract(
    db: AsyncSession,
    backend: RemoteBackend,
    actor: User,
    contract_id: str,
) -> None:
    require_privileged(actor)
    contracts = await load_collection(db, CONTRACTS)
    if not any(c.id == contract_id for c in contracts):
        raise NotFound(f"Contract {contract_id} not found")

    await save_collection(db, CONTRACTS, [c for c in contracts if c.id != contract_id])
    await mirror_write(db, backend, CONTRACTS, contract_id, SyncOperation.DELETE)
    logger.info(f"Contract {contract_id} deleted by {actor.id}")
