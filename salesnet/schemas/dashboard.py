"""Dashboard metrics schemas."""

from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field

from salesnet.models.user import CareerLevel


class RequiredMembers(BaseModel):
    """Direct members needed at (or above) a level."""

    level: CareerLevel
    count: int = Field(..., ge=1)


class LevelRequirement(BaseModel):
    """Threshold row gating promotion into `level`."""

    level: CareerLevel
    personal_revenue: Decimal
    group_revenue: Optional[Decimal] = None
    required_members: Optional[RequiredMembers] = None
    is_or_condition: bool = False  # personal OR group instead of AND


class TeamMember(BaseModel):
    """Per-member summary shown on a leader's dashboard."""

    id: str
    name: str
    level: CareerLevel
    personal_revenue: Decimal
    group_revenue: Decimal = Decimal("0")
    commission: Decimal


class DashboardMetrics(BaseModel):
    """Main dashboard metrics for one user and the current month."""

    current_level: CareerLevel
    next_level: Optional[CareerLevel] = None

    # Revenue
    personal_revenue: Decimal = Decimal("0")
    group_revenue: Decimal = Decimal("0")
    team_revenue: Decimal = Decimal("0")

    # Commission
    personal_commission: Decimal = Decimal("0")
    team_commission: Decimal = Decimal("0")
    total_commission: Decimal = Decimal("0")

    progress_to_next_level: float = Field(default=0.0, ge=0.0, le=1.0)
    team_members: List[TeamMember] = Field(default_factory=list)


class TeamEarningsResponse(BaseModel):
    """Team earnings view: members sorted by revenue."""

    leader_id: str
    leader_level: CareerLevel
    team_revenue: Decimal
    team_commission: Decimal
    members: List[TeamMember]
