"""
SyncRecord model: per-entity status of writes mirrored to the remote backend.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from sqlalchemy import DateTime, Integer, String, Text, UniqueConstraint, func
from sqlalchemy import Enum as SQLAlchemyEnum
from sqlalchemy.orm import Mapped, mapped_column

from salesnet.models.base import Base


class SyncStatus(str, Enum):
    """Status of the last mirror write for an entity."""
    PENDING = "pending"  # Waiting to be pushed
    SYNCED = "synced"    # Remote row matches the local entity
    FAILED = "failed"    # Remote write failed, retried by the scheduler
    SKIPPED = "skipped"  # No remote configured (offline mode)


class SyncOperation(str, Enum):
    """Mirror write kind."""
    UPSERT = "upsert"
    DELETE = "delete"


class SyncRecord(Base):
    """
    Sync ledger entry, one per (collection, entity_id).

    Written after every local mutation. Failed entries are retried by the
    sync retry job using the entity's current local state.
    """

    __tablename__ = "sync_records"
    __table_args__ = (
        UniqueConstraint("collection", "entity_id", name="uq_sync_records_entity"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    collection: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        index=True,
    )
    entity_id: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
    )
    operation: Mapped[SyncOperation] = mapped_column(
        SQLAlchemyEnum(
            SyncOperation,
            values_callable=lambda x: [e.value for e in x],
        ),
        nullable=False,
    )
    status: Mapped[SyncStatus] = mapped_column(
        SQLAlchemyEnum(
            SyncStatus,
            values_callable=lambda x: [e.value for e in x],
        ),
        default=SyncStatus.PENDING,
        nullable=False,
        index=True,
    )
    attempts: Mapped[int] = mapped_column(
        Integer,
        default=0,
        nullable=False,
    )
    error_message: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
        comment="Error details if the remote write failed",
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    synced_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    def __repr__(self) -> str:
        return (
            f"<SyncRecord(collection='{self.collection}', "
            f"entity_id='{self.entity_id}', status={self.status})>"
        )
