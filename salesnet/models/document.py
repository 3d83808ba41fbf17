"""
StoredDocument model: the local key -> JSON document store.
"""

from datetime import datetime

from sqlalchemy import DateTime, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from salesnet.models.base import Base


class StoredDocument(Base):
    """
    Key-value store for whole collections.

    The body is kept as raw text rather than a JSON column so that a
    malformed document can be read back, detected and replaced.

    Keys:
    - users, contracts, clients, consultants, deals
    """

    __tablename__ = "documents"

    key: Mapped[str] = mapped_column(
        String(100),
        primary_key=True,
    )
    body: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Serialized JSON document",
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<StoredDocument(key='{self.key}', size={len(self.body or '')})>"
