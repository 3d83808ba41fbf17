"""
CRM enums and remote rows: clients, consultants, deals.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import List, Optional

from sqlalchemy import JSON, DateTime, Integer, Numeric, String, Text
from sqlalchemy import Enum as SQLAlchemyEnum
from sqlalchemy.orm import Mapped, mapped_column

from salesnet.models.base import RemoteBase


class ClientStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    PROSPECT = "prospect"


class ConsultantExperience(str, Enum):
    JUNIOR = "junior"  # 1-2 years
    MID = "mid"        # 3-4 years
    SENIOR = "senior"  # 5+ years
    LEAD = "lead"      # 8+ years, lead/architect


class ConsultantAvailability(str, Enum):
    AVAILABLE = "available"
    BUSY = "busy"
    UNAVAILABLE = "unavailable"


class DealStatus(str, Enum):
    """Placement pipeline stages."""
    CV_SENT = "cv_sent"
    INITIAL_INTERVIEW = "initial_interview"
    FINAL_INTERVIEW = "final_interview"
    FEEDBACK_PENDING = "feedback_pending"
    CLOSED_WON = "closed_won"
    CLOSED_LOST = "closed_lost"


def _enum(enum_cls):
    return SQLAlchemyEnum(
        enum_cls,
        values_callable=lambda x: [e.value for e in x],
    )


class ClientRow(RemoteBase):
    """Client row in the remote mirror."""

    __tablename__ = "clients"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    company: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    position: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    status: Mapped[ClientStatus] = mapped_column(_enum(ClientStatus), nullable=False)
    created_by: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    assigned_to: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    last_contact: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )


class ConsultantRow(RemoteBase):
    """Consultant row in the remote mirror."""

    __tablename__ = "consultants"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    skills: Mapped[List[str]] = mapped_column(
        JSON,
        nullable=False,
        default=list,
        comment="JSON array of skills",
    )
    experience: Mapped[ConsultantExperience] = mapped_column(
        _enum(ConsultantExperience),
        nullable=False,
    )
    availability: Mapped[ConsultantAvailability] = mapped_column(
        _enum(ConsultantAvailability),
        nullable=False,
    )
    daily_rate: Mapped[Optional[Decimal]] = mapped_column(Numeric(10, 2), nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_by: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    assigned_to: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    last_contact: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )


class DealRow(RemoteBase):
    """Deal row in the remote mirror."""

    __tablename__ = "deals"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    client_id: Mapped[str] = mapped_column(String(64), nullable=False)
    client_name: Mapped[str] = mapped_column(String(255), nullable=False)
    consultant_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    consultant_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    value: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    daily_margin: Mapped[Optional[Decimal]] = mapped_column(Numeric(10, 2), nullable=True)
    status: Mapped[DealStatus] = mapped_column(_enum(DealStatus), nullable=False)
    probability: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        comment="Win probability 0-100",
    )
    expected_close_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
    )
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_by: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    assigned_to: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
