"""
Monthly revenue aggregation.

A contract pays `monthly_amount` every month of its window
[date, date + duration months). When both a developer and a recruiter are
set, each of them is credited half of it; a sole participant gets it all.
"""

import calendar
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Tuple

from salesnet.schemas.contract import Contract

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
SPLIT_SHARE = Decimal("0.5")


@dataclass
class RevenueSummary:
    """Revenue of one user and of its team for the current month."""

    personal: Decimal = ZERO
    team: Decimal = ZERO
    group: Decimal = ZERO
    per_member: Dict[str, Decimal] = field(default_factory=dict)


def add_months(value: datetime, months: int) -> datetime:
    """Shift a datetime by whole months, clamping the day to the month length."""
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return value.replace(year=year, month=month, day=day)


def month_window(now: datetime) -> Tuple[datetime, datetime]:
    """Start of the month containing `now` and start of the next one."""
    start = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    return start, add_months(start, 1)


def is_active(contract: Contract, now: datetime) -> bool:
    """True if the contract's payout window overlaps the month of `now`."""
    month_start, next_month_start = month_window(now)
    end = add_months(contract.date, contract.effective_duration)
    return contract.date < next_month_start and end > month_start


def active_contracts(
    contracts: Iterable[Contract],
    now: Optional[datetime] = None,
) -> List[Contract]:
    """Contracts paying out in the current month."""
    now = now or datetime.now(timezone.utc)
    active = [c for c in contracts if is_active(c, now)]
    logger.debug(f"Active contracts for {now:%Y-%m}: {len(active)}")
    return active


def user_share(contract: Contract, user_id: str) -> Decimal:
    """
    Monthly amount credited to `user_id` by one contract.

    A user that is both developer and recruiter of a split contract gets a
    single half share.
    """
    if not contract.involves(user_id):
        return ZERO
    if contract.is_split:
        return contract.monthly_amount * SPLIT_SHARE
    return contract.monthly_amount


def personal_revenue(user_id: str, contracts: Iterable[Contract]) -> Decimal:
    """Sum of a user's shares over already-filtered contracts."""
    return sum((user_share(c, user_id) for c in contracts), ZERO)


def aggregate_revenue(
    user_id: str,
    contracts: Iterable[Contract],
    now: Optional[datetime] = None,
    team_ids: Optional[Iterable[str]] = None,
) -> RevenueSummary:
    """
    Personal, team and group revenue of a user for the month of `now`.

    Args:
        user_id: The user whose revenue is computed
        contracts: Full contract list (filtered to active ones here)
        now: Reference point, defaults to the current UTC time
        team_ids: Members whose revenue forms the team figure; the user
            itself is skipped if present

    Returns:
        RevenueSummary with group = personal + team
    """
    active = active_contracts(contracts, now)

    personal = personal_revenue(user_id, active)
    per_member = {
        member_id: personal_revenue(member_id, active)
        for member_id in (team_ids or [])
        if member_id != user_id
    }
    team = sum(per_member.values(), ZERO)

    return RevenueSummary(
        personal=personal,
        team=team,
        group=personal + team,
        per_member=per_member,
    )
