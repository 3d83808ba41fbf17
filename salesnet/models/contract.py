"""
Remote `contracts` row.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import DateTime, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from salesnet.models.base import RemoteBase


class ContractRow(RemoteBase):
    """Contract row in the remote mirror."""

    __tablename__ = "contracts"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        comment="Start of the payout window",
    )
    gross_margin: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    monthly_margin: Mapped[Optional[Decimal]] = mapped_column(
        Numeric(14, 2),
        nullable=True,
    )
    duration: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=1,
        comment="Payout window length in months",
    )
    developer_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    recruiter_id: Mapped[Optional[str]] = mapped_column(
        String(64),
        nullable=True,
        index=True,
    )
    created_by: Mapped[str] = mapped_column(String(64), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<ContractRow(id='{self.id}', name='{self.name}')>"
