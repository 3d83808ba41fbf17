"""
Remote mirror: row-oriented CRUD per entity table.

Every entity converts 1:1 to a row of the same column names. Callers
treat each call as independently fallible; see salesnet.services.sync.
"""

import logging
from typing import Dict, List, Optional, Type

from pydantic import BaseModel, ValidationError
from sqlalchemy import select, text
from sqlalchemy.ext.asyncio import async_sessionmaker

from salesnet.db import get_remote_sessionmaker
from salesnet.models import ClientRow, ConsultantRow, ContractRow, DealRow, RemoteBase, UserRow
from salesnet.services.repository import (
    CLIENTS,
    COLLECTION_MODELS,
    CONSULTANTS,
    CONTRACTS,
    DEALS,
    USERS,
)

logger = logging.getLogger(__name__)

ROW_MODELS: Dict[str, Type[RemoteBase]] = {
    USERS: UserRow,
    CONTRACTS: ContractRow,
    CLIENTS: ClientRow,
    CONSULTANTS: ConsultantRow,
    DEALS: DealRow,
}


def to_row(collection: str, entity: BaseModel) -> RemoteBase:
    """Build the row for an entity, keeping only mapped columns."""
    row_cls = ROW_MODELS[collection]
    columns = {c.key for c in row_cls.__table__.columns}
    return row_cls(**entity.model_dump(include=columns))


def from_row(collection: str, row: RemoteBase) -> BaseModel:
    """Build the entity for a row."""
    return COLLECTION_MODELS[collection].model_validate(row, from_attributes=True)


class RemoteBackend:
    """Best-effort mirror of the local collections on a relational database."""

    def __init__(self, sessionmaker: Optional[async_sessionmaker]):
        self._sessionmaker = sessionmaker

    @property
    def enabled(self) -> bool:
        """False in offline mode (no remote database configured)."""
        return self._sessionmaker is not None

    def _session(self):
        if self._sessionmaker is None:
            raise RuntimeError("Remote backend is not configured")
        return self._sessionmaker()

    async def test_connection(self) -> bool:
        """Cheap reachability probe; never raises."""
        if not self.enabled:
            return False
        try:
            async with self._session() as session:
                await session.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.warning(f"Remote backend unreachable: {e}")
            return False

    async def create_schema(self) -> None:
        """Create the mirror tables (development and tests)."""
        async with self._session() as session:
            conn = await session.connection()
            await conn.run_sync(RemoteBase.metadata.create_all)
            await session.commit()

    async def fetch_all(self, collection: str) -> List[BaseModel]:
        """Read every row of a table; rows that fail validation are skipped."""
        row_cls = ROW_MODELS[collection]
        async with self._session() as session:
            result = await session.execute(
                select(row_cls).order_by(row_cls.created_at.desc())
            )
            rows = result.scalars().all()

        entities = []
        for row in rows:
            try:
                entities.append(from_row(collection, row))
            except ValidationError as e:
                logger.warning(f"Skipping invalid {collection} row {row.id}: {e.error_count()} errors")
        return entities

    async def upsert(self, collection: str, entity: BaseModel) -> None:
        """Insert or replace the row of an entity."""
        async with self._session() as session:
            await session.merge(to_row(collection, entity))
            await session.commit()

    async def delete(self, collection: str, entity_id: str) -> None:
        """Delete the row of an entity; missing rows are ignored."""
        row_cls = ROW_MODELS[collection]
        async with self._session() as session:
            row = await session.get(row_cls, entity_id)
            if row is not None:
                await session.delete(row)
                await session.commit()


def get_backend() -> RemoteBackend:
    """FastAPI dependency for the configured remote mirror."""
    return RemoteBackend(get_remote_sessionmaker())
