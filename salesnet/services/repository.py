"""
Typed snapshot repository over the local document store.

Each collection is one JSON document holding a list of records. A
document that is not valid JSON, or whose records fail validation, is
treated as absent: the collection falls back to its default and the
store is rewritten with it.
"""

import logging
import uuid
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Type

from pydantic import BaseModel, TypeAdapter, ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from salesnet.schemas.contract import Contract
from salesnet.schemas.crm import Client, Consultant, Deal
from salesnet.schemas.user import User
from salesnet.services.seed import build_master_user
from salesnet.services.store import CorruptDocumentError, DocumentStore

logger = logging.getLogger(__name__)

USERS = "users"
CONTRACTS = "contracts"
CLIENTS = "clients"
CONSULTANTS = "consultants"
DEALS = "deals"

COLLECTION_MODELS: Dict[str, Type[BaseModel]] = {
    USERS: User,
    CONTRACTS: Contract,
    CLIENTS: Client,
    CONSULTANTS: Consultant,
    DEALS: Deal,
}

_adapters = {
    name: TypeAdapter(List[model]) for name, model in COLLECTION_MODELS.items()
}


@dataclass
class Snapshot:
    """All collections, as loaded in one pass."""

    users: List[User] = field(default_factory=list)
    contracts: List[Contract] = field(default_factory=list)
    clients: List[Client] = field(default_factory=list)
    consultants: List[Consultant] = field(default_factory=list)
    deals: List[Deal] = field(default_factory=list)

    def find_user(self, user_id: Optional[str]) -> Optional[User]:
        return next((u for u in self.users if u.id == user_id), None)


def default_collection(name: str) -> List[BaseModel]:
    """Fresh contents for a missing or corrupt collection."""
    if name == USERS:
        return [build_master_user()]
    return []


async def save_collection(db: AsyncSession, name: str, items: Sequence[BaseModel]) -> None:
    """Replace a whole collection in the local store."""
    store = DocumentStore(db)
    await store.set(name, [item.model_dump(mode="json") for item in items])


async def load_collection(db: AsyncSession, name: str) -> List[BaseModel]:
    """
    Load one collection, recovering from missing or corrupt documents.

    Args:
        db: Local store session
        name: Collection key (users, contracts, clients, consultants, deals)

    Returns:
        List of validated records
    """
    store = DocumentStore(db)
    try:
        raw = await store.get(name)
    except CorruptDocumentError as e:
        logger.error(f"{e}; resetting '{name}' to defaults")
        items = default_collection(name)
        await save_collection(db, name, items)
        return items

    if raw is None:
        items = default_collection(name)
        if items:
            logger.info(f"Collection '{name}' missing, seeding {len(items)} records")
            await save_collection(db, name, items)
        return items

    try:
        return _adapters[name].validate_python(raw)
    except ValidationError as e:
        logger.error(
            f"Collection '{name}' has {e.error_count()} invalid fields; resetting to defaults"
        )
        items = default_collection(name)
        await save_collection(db, name, items)
        return items


async def load_snapshot(db: AsyncSession) -> Snapshot:
    """Load every collection."""
    return Snapshot(
        users=await load_collection(db, USERS),
        contracts=await load_collection(db, CONTRACTS),
        clients=await load_collection(db, CLIENTS),
        consultants=await load_collection(db, CONSULTANTS),
        deals=await load_collection(db, DEALS),
    )


def new_id() -> str:
    """Random record id."""
    return uuid.uuid4().hex
