"""
User enums and the remote `users` row.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from sqlalchemy import DateTime, String
from sqlalchemy import Enum as SQLAlchemyEnum
from sqlalchemy.orm import Mapped, mapped_column

from salesnet.models.base import RemoteBase


class UserRole(str, Enum):
    """User roles for access control."""
    COMMERCIAL = "commercial"
    ADMIN = "admin"
    MASTER = "master"


class UserStatus(str, Enum):
    """Registration lifecycle."""
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class CareerLevel(str, Enum):
    """Career ladder, lowest first."""
    JUNIOR = "junior"
    SENIOR = "senior"
    TEAM_LEADER = "team_leader"
    PARTNER = "partner"
    EXECUTIVE_DIRECTOR = "executive_director"
    MANAGING_DIRECTOR = "managing_director"


PRIVILEGED_ROLES = (UserRole.ADMIN, UserRole.MASTER)


def _enum(enum_cls):
    return SQLAlchemyEnum(
        enum_cls,
        values_callable=lambda x: [e.value for e in x],
    )


class UserRow(RemoteBase):
    """
    User row in the remote mirror.

    - commercial: sees its own subtree of the organization
    - admin / master: see every approved user, level pinned to managing_director
    """

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        index=True,
        nullable=False,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[UserRole] = mapped_column(_enum(UserRole), nullable=False)
    status: Mapped[UserStatus] = mapped_column(_enum(UserStatus), nullable=False)
    level: Mapped[CareerLevel] = mapped_column(_enum(CareerLevel), nullable=False)
    leader_id: Mapped[Optional[str]] = mapped_column(
        String(64),
        nullable=True,
        index=True,
        comment="Direct leader in the organization tree",
    )
    admin_id: Mapped[Optional[str]] = mapped_column(
        String(64),
        nullable=True,
        comment="Admin who approved the registration",
    )
    password_hash: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
    )
    approved_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    def __repr__(self) -> str:
        return f"<UserRow(id='{self.id}', email='{self.email}', role={self.role})>"
