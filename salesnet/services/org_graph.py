"""
Organization graph resolution.

The org chart is the forest formed by `leader_id` edges between approved
users. Admin and master users are not scoped by it: they see every
approved user.
"""

import logging
from collections import defaultdict
from typing import Dict, Iterable, List, Optional, Set

from salesnet.models.user import UserStatus
from salesnet.schemas.user import User

logger = logging.getLogger(__name__)

OrgChart = Dict[str, List[User]]


def build_org_chart(users: Iterable[User]) -> OrgChart:
    """Map each leader id to its approved direct members, in input order."""
    chart: Dict[str, List[User]] = defaultdict(list)
    for user in users:
        if user.leader_id and user.status == UserStatus.APPROVED:
            chart[user.leader_id].append(user)
    return dict(chart)


def team_members(
    user_id: str,
    users: Iterable[User],
    chart: Optional[OrgChart] = None,
) -> List[User]:
    """
    All direct and indirect approved subordinates of a user, depth-first.

    The root is not included. A visited set guarantees termination when
    stored data contains a leader cycle.
    """
    if chart is None:
        chart = build_org_chart(users)

    visited: Set[str] = {user_id}
    ordered: List[User] = []
    stack = list(reversed(chart.get(user_id, [])))

    while stack:
        member = stack.pop()
        if member.id in visited:
            logger.warning(
                f"Leader cycle detected: user {member.id} reached twice from {user_id}"
            )
            continue
        visited.add(member.id)
        ordered.append(member)
        stack.extend(reversed(chart.get(member.id, [])))

    return ordered


def resolve_team(user_id: str, users: Iterable[User]) -> Set[str]:
    """IDs of the user and of every approved user below it."""
    team = {member.id for member in team_members(user_id, users)}
    team.add(user_id)
    return team


def direct_members(user_id: str, users: Iterable[User]) -> List[User]:
    """Approved users whose leader is `user_id`."""
    return [
        u for u in users
        if u.leader_id == user_id and u.status == UserStatus.APPROVED
    ]


def visible_user_ids(user: User, users: Iterable[User]) -> Set[str]:
    """
    IDs whose data `user` may see.

    Admin/master: every approved user. Commercial: its own subtree.
    """
    users = list(users)
    if user.is_privileged:
        return {u.id for u in users if u.status == UserStatus.APPROVED}
    return resolve_team(user.id, users)


def would_create_cycle(user_id: str, leader_id: Optional[str], users: Iterable[User]) -> bool:
    """True if making `leader_id` the leader of `user_id` closes a loop."""
    if not leader_id:
        return False
    by_id = {u.id: u for u in users}
    seen: Set[str] = set()
    current: Optional[str] = leader_id
    while current and current not in seen:
        if current == user_id:
            return True
        seen.add(current)
        leader = by_id.get(current)
        current = leader.leader_id if leader else None
    return False
