"""
Career ladder configuration.

Rules:
- Six levels, promotion moves one step at a time
- Each level has a commission rate on personal revenue
- A leader earns the rate difference over every subordinate's revenue
"""

from decimal import Decimal
from typing import Dict, List

from salesnet.models.user import CareerLevel
from salesnet.schemas.dashboard import LevelRequirement, RequiredMembers

LEVEL_ORDER: List[CareerLevel] = list(CareerLevel)

CAREER_LEVEL_LABELS: Dict[CareerLevel, str] = {
    CareerLevel.JUNIOR: "Junior Account",
    CareerLevel.SENIOR: "Senior Account",
    CareerLevel.TEAM_LEADER: "Team Leader",
    CareerLevel.PARTNER: "Partner",
    CareerLevel.EXECUTIVE_DIRECTOR: "Executive Director",
    CareerLevel.MANAGING_DIRECTOR: "Managing Director",
}

COMMISSION_RATES: Dict[CareerLevel, Decimal] = {
    CareerLevel.JUNIOR: Decimal("0.20"),
    CareerLevel.SENIOR: Decimal("0.30"),
    CareerLevel.TEAM_LEADER: Decimal("0.40"),
    CareerLevel.PARTNER: Decimal("0.50"),
    CareerLevel.EXECUTIVE_DIRECTOR: Decimal("0.55"),
    CareerLevel.MANAGING_DIRECTOR: Decimal("0.60"),
}

# Row N gates promotion from level N-1 into level N
LEVEL_REQUIREMENTS: List[LevelRequirement] = [
    LevelRequirement(
        level=CareerLevel.JUNIOR,
        personal_revenue=Decimal("5000"),
    ),
    LevelRequirement(
        level=CareerLevel.SENIOR,
        personal_revenue=Decimal("15000"),
        group_revenue=Decimal("50000"),
        required_members=RequiredMembers(level=CareerLevel.JUNIOR, count=1),
        is_or_condition=True,
    ),
    LevelRequirement(
        level=CareerLevel.TEAM_LEADER,
        personal_revenue=Decimal("30000"),
        group_revenue=Decimal("150000"),
        required_members=RequiredMembers(level=CareerLevel.SENIOR, count=2),
        is_or_condition=True,
    ),
    LevelRequirement(
        level=CareerLevel.PARTNER,
        personal_revenue=Decimal("50000"),
        group_revenue=Decimal("500000"),
        required_members=RequiredMembers(level=CareerLevel.TEAM_LEADER, count=3),
        is_or_condition=True,
    ),
    LevelRequirement(
        level=CareerLevel.EXECUTIVE_DIRECTOR,
        personal_revenue=Decimal("0"),
        group_revenue=Decimal("1500000"),
        required_members=RequiredMembers(level=CareerLevel.PARTNER, count=2),
    ),
    LevelRequirement(
        level=CareerLevel.MANAGING_DIRECTOR,
        personal_revenue=Decimal("0"),
        group_revenue=Decimal("5000000"),
        required_members=RequiredMembers(level=CareerLevel.EXECUTIVE_DIRECTOR, count=3),
    ),
]


def level_index(level: CareerLevel) -> int:
    """Position of a level in the ladder (junior = 0)."""
    return LEVEL_ORDER.index(CareerLevel(level))
