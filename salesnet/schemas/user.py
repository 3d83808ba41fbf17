"""User schemas."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from salesnet.models.user import PRIVILEGED_ROLES, CareerLevel, UserRole, UserStatus
from salesnet.schemas.common import UTCDateTime


class User(BaseModel):
    """User record as held in the local store."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str = Field(..., min_length=1, max_length=255)
    email: str = Field(..., min_length=3, max_length=255)
    role: UserRole = UserRole.COMMERCIAL
    status: UserStatus = UserStatus.PENDING
    level: CareerLevel = CareerLevel.JUNIOR
    leader_id: Optional[str] = None
    admin_id: Optional[str] = None
    password_hash: Optional[str] = None
    created_at: UTCDateTime
    approved_at: Optional[UTCDateTime] = None

    @property
    def is_privileged(self) -> bool:
        return self.role in PRIVILEGED_ROLES

    @property
    def is_approved(self) -> bool:
        return self.status == UserStatus.APPROVED


class UserCreate(BaseModel):
    """Create an approved user (admin/master only)."""

    name: str = Field(..., min_length=1, max_length=255)
    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=6, max_length=100)
    role: UserRole = UserRole.COMMERCIAL
    level: CareerLevel = CareerLevel.JUNIOR
    leader_id: Optional[str] = None


class UserUpdate(BaseModel):
    """Update user account."""

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    email: Optional[str] = Field(None, min_length=3, max_length=255)
    role: Optional[UserRole] = None
    level: Optional[CareerLevel] = None
    leader_id: Optional[str] = None
    password: Optional[str] = Field(None, min_length=6, max_length=100)


class UserApprove(BaseModel):
    """Approve a pending registration."""

    leader_id: Optional[str] = None


class UserResponse(BaseModel):
    """User information returned by the API (no credentials)."""

    id: str
    name: str
    email: str
    role: UserRole
    status: UserStatus
    level: CareerLevel
    leader_id: Optional[str]
    admin_id: Optional[str]
    created_at: datetime
    approved_at: Optional[datetime]

    model_config = {"from_attributes": True}
