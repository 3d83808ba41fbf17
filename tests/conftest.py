"""
Pytest configuration and fixtures.
"""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

from salesnet.models import Base, CareerLevel, RemoteBase, UserRole, UserStatus
from salesnet.schemas.contract import Contract
from salesnet.schemas.user import User
from salesnet.services.backend import RemoteBackend


# Test database URL (use SQLite for tests)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

# Fixed reference point for engine tests
NOW = datetime(2026, 5, 15, 12, 0, tzinfo=timezone.utc)


def make_user(
    user_id: str,
    leader_id: Optional[str] = None,
    level: CareerLevel = CareerLevel.JUNIOR,
    role: UserRole = UserRole.COMMERCIAL,
    status: UserStatus = UserStatus.APPROVED,
    **kwargs,
) -> User:
    defaults = dict(
        id=user_id,
        name=user_id.upper(),
        email=f"{user_id}@example.com",
        role=role,
        status=status,
        level=level,
        leader_id=leader_id,
        created_at=NOW,
    )
    defaults.update(kwargs)
    return User(**defaults)


def make_contract(
    contract_id: str,
    developer_id: str,
    gross: str,
    duration: int = 1,
    recruiter_id: Optional[str] = None,
    date: datetime = NOW,
    monthly: Optional[str] = None,
) -> Contract:
    return Contract(
        id=contract_id,
        name=f"Contract {contract_id}",
        date=date,
        gross_margin=Decimal(gross),
        monthly_margin=Decimal(monthly) if monthly is not None else None,
        duration=duration,
        developer_id=developer_id,
        recruiter_id=recruiter_id,
        created_by="master",
        created_at=date,
    )


@pytest_asyncio.fixture
async def db_engine():
    """Create test database engine."""
    engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=StaticPool)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(db_engine):
    """Create test database session."""
    async_session = async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session() as session:
        yield session


@pytest_asyncio.fixture
async def remote_backend():
    """Remote mirror on a second in-memory database."""
    engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(RemoteBase.metadata.create_all)

    yield RemoteBackend(async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False))

    await engine.dispose()


@pytest.fixture
def offline_backend():
    """No remote configured."""
    return RemoteBackend(None)


class BrokenBackend(RemoteBackend):
    """Configured mirror whose writes always fail."""

    def __init__(self):
        super().__init__(async_sessionmaker())

    async def upsert(self, collection, entity):
        raise ConnectionError("remote unavailable")

    async def delete(self, collection, entity_id):
        raise ConnectionError("remote unavailable")


@pytest.fixture
def broken_backend():
    return BrokenBackend()
