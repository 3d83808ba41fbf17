"""
Seed records: the master account and an optional demo organization.
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import List, Tuple

from salesnet.auth.password import hash_password
from salesnet.config import settings
from salesnet.models.user import CareerLevel, UserRole, UserStatus
from salesnet.schemas.contract import Contract
from salesnet.schemas.user import User

MASTER_USER_ID = "master"


def build_master_user() -> User:
    """The master account configured in settings."""
    now = datetime.now(timezone.utc)
    return User(
        id=MASTER_USER_ID,
        name=settings.master_name,
        email=settings.master_email,
        role=UserRole.MASTER,
        status=UserStatus.APPROVED,
        level=CareerLevel.MANAGING_DIRECTOR,
        password_hash=hash_password(settings.master_password),
        created_at=now,
        approved_at=now,
    )


def build_demo_organization(password: str = "demo1234") -> Tuple[List[User], List[Contract]]:
    """
    A small three-level organization with contracts in the current month.

    partner -> team_leader -> senior -> junior, plus one pending registration.
    """
    now = datetime.now(timezone.utc)
    password_hash = hash_password(password)

    def _user(user_id, name, level, leader_id=None, status=UserStatus.APPROVED):
        return User(
            id=user_id,
            name=name,
            email=f"{user_id}@demo.local",
            role=UserRole.COMMERCIAL,
            status=status,
            level=level,
            leader_id=leader_id,
            admin_id=MASTER_USER_ID if status == UserStatus.APPROVED else None,
            password_hash=password_hash,
            created_at=now,
            approved_at=now if status == UserStatus.APPROVED else None,
        )

    users = [
        _user("demo-partner", "Giulia Partner", CareerLevel.PARTNER),
        _user("demo-leader", "Marco Leader", CareerLevel.TEAM_LEADER, "demo-partner"),
        _user("demo-senior", "Sara Senior", CareerLevel.SENIOR, "demo-leader"),
        _user("demo-junior", "Luca Junior", CareerLevel.JUNIOR, "demo-senior"),
        _user("demo-pending", "Nuovo Arrivato", CareerLevel.JUNIOR, "demo-junior",
              status=UserStatus.PENDING),
    ]

    def _contract(contract_id, name, gross, duration, developer, recruiter=None, months_ago=0):
        return Contract(
            id=contract_id,
            name=name,
            date=now - timedelta(days=30 * months_ago),
            gross_margin=Decimal(gross),
            monthly_margin=Decimal(gross) / duration,
            duration=duration,
            developer_id=developer,
            recruiter_id=recruiter,
            created_by=MASTER_USER_ID,
            created_at=now,
        )

    contracts = [
        _contract("demo-c1", "Banca Nord - Java", "36000", 12, "demo-junior"),
        _contract("demo-c2", "Telco Sud - Data", "24000", 6, "demo-senior", "demo-junior", 2),
        _contract("demo-c3", "Retail Est - Cloud", "60000", 12, "demo-leader", months_ago=1),
        _contract("demo-c4", "Energia - PM", "18000", 3, "demo-partner", "demo-senior"),
    ]
    return users, contracts
