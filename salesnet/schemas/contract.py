"""Contract schemas."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from salesnet.schemas.common import UTCDateTime


class Contract(BaseModel):
    """
    Contract record as held in the local store.

    `monthly_amount` is the single derivation of the monthly payout;
    nothing else should divide gross_margin by duration.
    """

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    date: UTCDateTime
    gross_margin: Decimal
    monthly_margin: Optional[Decimal] = None
    duration: int = 1
    developer_id: str
    recruiter_id: Optional[str] = None
    created_by: str
    created_at: UTCDateTime

    @property
    def effective_duration(self) -> int:
        return max(self.duration or 0, 1)

    @property
    def monthly_amount(self) -> Decimal:
        # Zero counts as unset, like a missing value
        if self.monthly_margin:
            return self.monthly_margin
        return self.gross_margin / self.effective_duration

    @property
    def is_split(self) -> bool:
        """Both a developer and a recruiter share the contract."""
        return bool(self.developer_id and self.recruiter_id)

    def involves(self, user_id: str) -> bool:
        return user_id in (self.developer_id, self.recruiter_id)


class ContractCreate(BaseModel):
    """Create a contract."""

    name: str = Field(..., min_length=1, max_length=255)
    date: datetime
    gross_margin: Decimal = Field(..., ge=0)
    monthly_margin: Optional[Decimal] = Field(None, ge=0)
    duration: int = Field(default=1, ge=0, le=120)
    developer_id: str = Field(..., min_length=1)
    recruiter_id: Optional[str] = None


class ContractUpdate(BaseModel):
    """Update a contract."""

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    date: Optional[datetime] = None
    gross_margin: Optional[Decimal] = Field(None, ge=0)
    monthly_margin: Optional[Decimal] = Field(None, ge=0)
    duration: Optional[int] = Field(None, ge=0, le=120)
    developer_id: Optional[str] = Field(None, min_length=1)
    recruiter_id: Optional[str] = None
