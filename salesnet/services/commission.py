"""
Commission and career-level engine.

Rules:
- Personal commission: personal revenue x rate of the user's level
- Override: a leader earns max(0, own rate - member rate) on the revenue
  of every direct and indirect member
- Admin/master: level pinned to managing_director, team is every other
  approved user, never promoted
- Promotion is evaluated once per computation, one step at a time, and is
  applied before commissions are computed
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from salesnet.models.user import CareerLevel, UserStatus
from salesnet.schemas.contract import Contract
from salesnet.schemas.dashboard import DashboardMetrics, LevelRequirement, TeamMember
from salesnet.schemas.user import User
from salesnet.services.levels import (
    COMMISSION_RATES,
    LEVEL_ORDER,
    LEVEL_REQUIREMENTS,
    level_index,
)
from salesnet.services.org_graph import build_org_chart, direct_members, team_members
from salesnet.services.revenue import ZERO, active_contracts, aggregate_revenue, personal_revenue

logger = logging.getLogger(__name__)


@dataclass
class MetricsResult:
    """Metrics plus the user collection after any promotion."""

    metrics: DashboardMetrics
    users: List[User]
    promoted_to: Optional[CareerLevel] = None


def _rates(rates: Optional[Mapping[CareerLevel, Decimal]]) -> Dict[CareerLevel, Decimal]:
    merged = dict(COMMISSION_RATES)
    if rates:
        merged.update({CareerLevel(k): Decimal(v) for k, v in rates.items()})
    return merged


def rate_for(
    level: CareerLevel,
    rates: Optional[Mapping[CareerLevel, Decimal]] = None,
) -> Decimal:
    """Commission rate of a level."""
    return _rates(rates)[CareerLevel(level)]


def effective_level(user: User) -> CareerLevel:
    """Stored level, except admin/master which always count as managing_director."""
    if user.is_privileged:
        return CareerLevel.MANAGING_DIRECTOR
    return CareerLevel(user.level)


def next_requirement(
    level: CareerLevel,
    requirements: Optional[Sequence[LevelRequirement]] = None,
) -> Optional[LevelRequirement]:
    """Requirement row of the level right above `level`, if any."""
    idx = level_index(level)
    if idx + 1 >= len(LEVEL_ORDER):
        return None
    target = LEVEL_ORDER[idx + 1]
    rows = LEVEL_REQUIREMENTS if requirements is None else requirements
    return next((r for r in rows if r.level == target), None)


def override_commission(
    leader_rate: Decimal,
    member_rate: Decimal,
    member_revenue: Decimal,
) -> Decimal:
    """Leader's share of a member's revenue; never negative."""
    return member_revenue * max(ZERO, leader_rate - member_rate)


def meets_revenue_requirement(
    requirement: LevelRequirement,
    personal: Decimal,
    group: Decimal,
) -> bool:
    """OR/AND check of the revenue thresholds; a missing group threshold is met."""
    meets_personal = personal >= requirement.personal_revenue
    meets_group = not requirement.group_revenue or group >= requirement.group_revenue
    if requirement.is_or_condition:
        return meets_personal or meets_group
    return meets_personal and meets_group


def count_developed_members(
    user_id: str,
    users: Iterable[User],
    min_level: CareerLevel,
) -> int:
    """Direct approved members at `min_level` or above."""
    threshold = level_index(min_level)
    return sum(
        1 for member in direct_members(user_id, users)
        if level_index(member.level) >= threshold
    )


def evaluate_promotion(
    user: User,
    personal: Decimal,
    group: Decimal,
    users: Iterable[User],
    requirements: Optional[Sequence[LevelRequirement]] = None,
) -> Optional[CareerLevel]:
    """
    Level the user qualifies for right now, or None.

    Pure query: nothing is modified.
    """
    if user.is_privileged:
        return None

    requirement = next_requirement(user.level, requirements)
    if requirement is None:
        return None

    if not meets_revenue_requirement(requirement, personal, group):
        logger.debug(
            f"User {user.id} short of {requirement.level.value} revenue: "
            f"personal={personal} group={group}"
        )
        return None

    if requirement.required_members:
        needed = requirement.required_members
        developed = count_developed_members(user.id, users, needed.level)
        if developed < needed.count:
            logger.debug(
                f"User {user.id} needs {needed.count - developed} more "
                f"{needed.level.value} or higher"
            )
            return None

    return requirement.level


def apply_promotion(user: User, level: CareerLevel) -> User:
    """
    Return a copy of `user` at `level`.

    Levels never go down: a target at or below the current level returns
    the user unchanged.
    """
    if level_index(level) <= level_index(user.level):
        return user
    return user.model_copy(update={"level": CareerLevel(level)})


def progress_to_next_level(
    level: CareerLevel,
    personal: Decimal,
    group: Decimal,
    requirements: Optional[Sequence[LevelRequirement]] = None,
) -> float:
    """Slowest of the personal/group ratios, clamped to [0, 1]; 1.0 at the top."""
    requirement = next_requirement(level, requirements)
    if requirement is None:
        return 1.0

    personal_progress = Decimal(1)
    if requirement.personal_revenue > 0:
        personal_progress = personal / requirement.personal_revenue

    group_progress = Decimal(1)
    if requirement.group_revenue:
        group_progress = group / requirement.group_revenue

    progress = min(personal_progress, group_progress)
    return float(min(Decimal(1), max(ZERO, progress)))


def empty_metrics() -> DashboardMetrics:
    """Zero-valued metrics returned when the user cannot be found."""
    return DashboardMetrics(current_level=CareerLevel.JUNIOR)


def compute_metrics(
    user_id: str,
    contracts: Iterable[Contract],
    users: Iterable[User],
    current_user_hint: Optional[User] = None,
    now: Optional[datetime] = None,
    rates: Optional[Mapping[CareerLevel, Decimal]] = None,
    requirements: Optional[Sequence[LevelRequirement]] = None,
) -> MetricsResult:
    """
    Compute dashboard metrics for one user.

    Args:
        user_id: User whose dashboard is computed
        contracts: Full contract list
        users: Full user list (not modified)
        current_user_hint: Used when `user_id` is missing from `users`
        now: Reference point for the current month
        rates: Per-level rate overrides
        requirements: Requirement table override

    Returns:
        MetricsResult; `users` holds the promoted copy of the user when a
        promotion fired, otherwise the input users
    """
    users = list(users)
    user = next((u for u in users if u.id == user_id), None)
    if user is None and current_user_hint is not None and current_user_hint.id == user_id:
        user = current_user_hint

    if user is None:
        logger.error(f"Could not find user with ID {user_id}, returning empty metrics")
        return MetricsResult(metrics=empty_metrics(), users=users)

    rate_table = _rates(rates)
    chart = build_org_chart(users)

    if user.is_privileged:
        members = [
            u for u in users
            if u.id != user_id and u.status == UserStatus.APPROVED
        ]
    else:
        members = team_members(user_id, users, chart)

    active = active_contracts(contracts, now)
    revenue = aggregate_revenue(user_id, active, now, [m.id for m in members])

    # Promotion first, so this period's commission already uses the new rate
    level = effective_level(user)
    promoted_to = evaluate_promotion(
        user, revenue.personal, revenue.group, users, requirements,
    )
    updated_users = users
    if promoted_to is not None:
        promoted = apply_promotion(user, promoted_to)
        level = CareerLevel(promoted.level)
        updated_users = [promoted if u.id == user_id else u for u in users]
        if not any(u.id == user_id for u in users):
            # User came from the hint
            updated_users.append(promoted)
        logger.info(f"User {user_id} promoted from {CareerLevel(user.level).value} to {level.value}")

    leader_rate = rate_table[level]

    revenue_cache: Dict[str, Decimal] = dict(revenue.per_member)

    def _personal(member_id: str) -> Decimal:
        if member_id not in revenue_cache:
            revenue_cache[member_id] = personal_revenue(member_id, active)
        return revenue_cache[member_id]

    summaries: List[TeamMember] = []
    team_commission = ZERO
    for member in members:
        member_revenue = _personal(member.id)
        member_rate = rate_table[CareerLevel(member.level)]
        subtree_revenue = sum(
            (_personal(sub.id) for sub in team_members(member.id, users, chart)),
            ZERO,
        )
        summaries.append(
            TeamMember(
                id=member.id,
                name=member.name,
                level=member.level,
                personal_revenue=member_revenue,
                group_revenue=member_revenue + subtree_revenue,
                commission=member_revenue * member_rate,
            )
        )
        team_commission += override_commission(leader_rate, member_rate, member_revenue)

    personal_commission = revenue.personal * leader_rate
    requirement = next_requirement(level, requirements)

    metrics = DashboardMetrics(
        current_level=level,
        next_level=requirement.level if requirement else None,
        personal_revenue=revenue.personal,
        group_revenue=revenue.group,
        team_revenue=revenue.team,
        personal_commission=personal_commission,
        team_commission=team_commission,
        total_commission=personal_commission + team_commission,
        progress_to_next_level=progress_to_next_level(
            level, revenue.personal, revenue.group, requirements,
        ),
        team_members=summaries,
    )
    return MetricsResult(metrics=metrics, users=updated_users, promoted_to=promoted_to)
