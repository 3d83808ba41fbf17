"""
Tests for the data reset.

Covers:
- Every collection emptied except master accounts
- Remote rows deleted, including rows only present remotely
- Failed remote deletes left for the retry job
- Optional demo reseed
"""

import pytest

from conftest import NOW, make_contract, make_user

from salesnet.models import CareerLevel, SyncStatus, UserRole
from salesnet.schemas.crm import Client
from salesnet.services.errors import PermissionDenied
from salesnet.services.maintenance import database_status, reset_data
from salesnet.services.repository import (
    CLIENTS,
    CONTRACTS,
    USERS,
    load_collection,
    save_collection,
)
from salesnet.services.sync import sync_summary


@pytest.fixture
def master():
    return make_user("master", role=UserRole.MASTER, level=CareerLevel.MANAGING_DIRECTOR)


def _client(client_id: str) -> Client:
    return Client(
        id=client_id,
        name=f"Client {client_id}",
        email=f"{client_id}@example.com",
        created_by="a",
        created_at=NOW,
    )


async def _seed(db, master):
    await save_collection(db, USERS, [
        master,
        make_user("adm", role=UserRole.ADMIN, level=CareerLevel.MANAGING_DIRECTOR),
        make_user("a"),
        make_user("b", leader_id="a"),
    ])
    await save_collection(db, CONTRACTS, [make_contract("c1", "a", "1000")])
    await save_collection(db, CLIENTS, [_client("cl1")])


class TestReset:
    @pytest.mark.asyncio
    async def test_keeps_only_master(self, db_session, offline_backend, master):
        await _seed(db_session, master)

        result = await reset_data(db_session, offline_backend, master)

        assert result.removed[USERS] == 3
        assert result.removed[CONTRACTS] == 1
        assert result.removed[CLIENTS] == 1
        assert result.seeded == {}
        assert [u.id for u in await load_collection(db_session, USERS)] == ["master"]
        counts = await database_status(db_session)
        assert counts[USERS] == 1
        assert counts[CONTRACTS] == counts[CLIENTS] == counts["deals"] == counts["consultants"] == 0

    @pytest.mark.asyncio
    async def test_admin_not_allowed(self, db_session, offline_backend, master):
        await _seed(db_session, master)
        admin = make_user("adm", role=UserRole.ADMIN, level=CareerLevel.MANAGING_DIRECTOR)
        with pytest.raises(PermissionDenied):
            await reset_data(db_session, offline_backend, admin)
        assert len(await load_collection(db_session, USERS)) == 4

    @pytest.mark.asyncio
    async def test_remote_rows_deleted(self, db_session, remote_backend, master):
        await _seed(db_session, master)
        await remote_backend.upsert(USERS, master)
        await remote_backend.upsert(USERS, make_user("a"))
        # Only known to the mirror
        await remote_backend.upsert(USERS, make_user("ghost"))
        await remote_backend.upsert(CONTRACTS, make_contract("c-remote", "ghost", "500"))

        result = await reset_data(db_session, remote_backend, master)

        assert result.removed[USERS] == 4
        assert result.removed[CONTRACTS] == 2
        assert [u.id for u in await remote_backend.fetch_all(USERS)] == ["master"]
        assert await remote_backend.fetch_all(CONTRACTS) == []

    @pytest.mark.asyncio
    async def test_failed_deletes_recorded(self, db_session, broken_backend, master):
        await _seed(db_session, master)

        await reset_data(db_session, broken_backend, master)

        assert [u.id for u in await load_collection(db_session, USERS)] == ["master"]
        assert (await sync_summary(db_session))[SyncStatus.FAILED.value] == 5

    @pytest.mark.asyncio
    async def test_reseed_demo(self, db_session, offline_backend, master):
        await _seed(db_session, master)

        result = await reset_data(db_session, offline_backend, master, reseed=True)

        users = await load_collection(db_session, USERS)
        assert result.seeded[USERS] == len(users) - 1
        assert "a" not in {u.id for u in users}
        assert "master" in {u.id for u in users}
        assert len(await load_collection(db_session, CONTRACTS)) == result.seeded[CONTRACTS]
