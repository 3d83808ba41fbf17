"""
Per-user visibility of stored records.

A commercial sees records touching its own subtree of the organization;
admin and master see everything (users limited to approved ones).
"""

from dataclasses import dataclass, field
from typing import Iterable, List, Set, TypeVar

from salesnet.models.user import UserStatus
from salesnet.schemas.contract import Contract
from salesnet.schemas.crm import Client, Consultant, CRMRecord, Deal
from salesnet.schemas.user import User
from salesnet.services.org_graph import visible_user_ids
from salesnet.services.repository import Snapshot

R = TypeVar("R", bound=CRMRecord)


@dataclass
class VisibleData:
    """What one user may see."""

    user_ids: Set[str] = field(default_factory=set)
    users: List[User] = field(default_factory=list)
    contracts: List[Contract] = field(default_factory=list)
    clients: List[Client] = field(default_factory=list)
    consultants: List[Consultant] = field(default_factory=list)
    deals: List[Deal] = field(default_factory=list)


def contract_visible(contract: Contract, ids: Set[str]) -> bool:
    return contract.developer_id in ids or (
        contract.recruiter_id is not None and contract.recruiter_id in ids
    )


def record_visible(record: CRMRecord, ids: Set[str]) -> bool:
    return record.created_by in ids or (
        record.assigned_to is not None and record.assigned_to in ids
    )


def filter_records(records: Iterable[R], ids: Set[str]) -> List[R]:
    return [r for r in records if record_visible(r, ids)]


def filter_for_user(user: User, snapshot: Snapshot) -> VisibleData:
    """Apply the organization filter to every collection of a snapshot."""
    ids = visible_user_ids(user, snapshot.users)
    approved = [u for u in snapshot.users if u.status == UserStatus.APPROVED]

    if user.is_privileged:
        return VisibleData(
            user_ids=ids,
            users=approved,
            contracts=list(snapshot.contracts),
            clients=list(snapshot.clients),
            consultants=list(snapshot.consultants),
            deals=list(snapshot.deals),
        )

    return VisibleData(
        user_ids=ids,
        users=[u for u in approved if u.id in ids],
        contracts=[c for c in snapshot.contracts if contract_visible(c, ids)],
        clients=filter_records(snapshot.clients, ids),
        consultants=filter_records(snapshot.consultants, ids),
        deals=filter_records(snapshot.deals, ids),
    )
