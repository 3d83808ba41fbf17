"""
HTTP API tests.

Uses httpx.AsyncClient on the ASGI app with the local store session and
the remote backend overridden by test fixtures.
"""

from datetime import datetime, timezone
from decimal import Decimal

import httpx
import pytest
import pytest_asyncio

from conftest import NOW, make_contract, make_user

from salesnet.auth.jwt import create_access_token
from salesnet.auth.password import hash_password
from salesnet.db import get_db
from salesnet.main import app
from salesnet.models import CareerLevel, UserRole, UserStatus
from salesnet.services.backend import get_backend
from salesnet.services.repository import CONTRACTS, USERS, load_collection, save_collection


def _auth(user) -> dict:
    token = create_access_token(user.id, user.role.value)
    return {"Cookie": f"access_token={token}"}


@pytest.fixture
def master():
    return make_user("master", role=UserRole.MASTER, level=CareerLevel.MANAGING_DIRECTOR)


@pytest.fixture
def leader():
    return make_user("leader", level=CareerLevel.TEAM_LEADER)


@pytest.fixture
def member():
    return make_user("member", leader_id="leader")


@pytest_asyncio.fixture
async def client(db_session, offline_backend, master, leader, member):
    await save_collection(db_session, USERS, [master, leader, member])

    async def _get_db():
        yield db_session

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_backend] = lambda: offline_backend

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


class TestHealth:
    @pytest.mark.asyncio
    async def test_health(self, client):
        response = await client.get("/api/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    @pytest.mark.asyncio
    async def test_ready_offline(self, client):
        response = await client.get("/api/health/ready")
        assert response.json() == {"status": "ready", "database": "connected", "remote": "offline"}


class TestAuth:
    @pytest.mark.asyncio
    async def test_protected_without_cookie(self, client):
        response = await client.get("/api/users")
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_register_then_login_pending(self, client):
        response = await client.post(
            "/api/auth/register",
            json={"name": "Nuovo", "email": "nuovo@example.com", "password": "secret1"},
        )
        assert response.status_code == 201
        assert response.json()["status"] == "pending"
        assert "password_hash" not in response.json()

        response = await client.post(
            "/api/auth/login", json={"email": "nuovo@example.com", "password": "secret1"},
        )
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_register_duplicate(self, client):
        response = await client.post(
            "/api/auth/register",
            json={"name": "Dup", "email": "leader@example.com", "password": "secret1"},
        )
        assert response.status_code == 409

    @pytest.mark.asyncio
    async def test_login_sets_cookie(self, client, db_session, leader):
        users = await load_collection(db_session, USERS)
        users = [
            u.model_copy(update={"password_hash": hash_password("secret1")}) if u.id == "leader" else u
            for u in users
        ]
        await save_collection(db_session, USERS, users)

        response = await client.post(
            "/api/auth/login", json={"email": "leader@example.com", "password": "secret1"},
        )
        assert response.status_code == 200
        assert response.json()["user"]["id"] == "leader"
        assert "access_token" in response.headers.get("set-cookie", "")

    @pytest.mark.asyncio
    async def test_login_wrong_password(self, client):
        response = await client.post(
            "/api/auth/login", json={"email": "leader@example.com", "password": "nope"},
        )
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_me(self, client, member):
        response = await client.get("/api/auth/me", headers=_auth(member))
        assert response.status_code == 200
        assert response.json()["id"] == "member"


class TestUsersAPI:
    @pytest.mark.asyncio
    async def test_list_scoped_to_team(self, client, member):
        response = await client.get("/api/users", headers=_auth(member))
        assert [u["id"] for u in response.json()["items"]] == ["member"]

    @pytest.mark.asyncio
    async def test_pending_requires_admin(self, client, leader, master):
        assert (await client.get("/api/users/pending", headers=_auth(leader))).status_code == 403
        assert (await client.get("/api/users/pending", headers=_auth(master))).status_code == 200

    @pytest.mark.asyncio
    async def test_approve_flow(self, client, master):
        response = await client.post(
            "/api/auth/register",
            json={"name": "Nuovo", "email": "nuovo@example.com", "password": "secret1"},
        )
        new_id = response.json()["id"]

        response = await client.post(
            f"/api/users/{new_id}/approve", json={"leader_id": "member"}, headers=_auth(master),
        )
        assert response.status_code == 200
        assert response.json()["status"] == "approved"
        assert response.json()["leader_id"] == "member"

    @pytest.mark.asyncio
    async def test_cycle_rejected(self, client, master):
        response = await client.patch(
            "/api/users/leader", json={"leader_id": "member"}, headers=_auth(master),
        )
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_delete_with_followers(self, client, master):
        response = await client.delete("/api/users/leader", headers=_auth(master))
        assert response.status_code == 409

    @pytest.mark.asyncio
    async def test_invalid_payload(self, client, master):
        response = await client.post(
            "/api/users", json={"name": "", "email": "x"}, headers=_auth(master),
        )
        assert response.status_code == 422


class TestContractsAPI:
    @pytest.mark.asyncio
    async def test_create_and_list(self, client, master, member, leader):
        response = await client.post(
            "/api/contracts",
            json={
                "name": "Banca",
                "date": NOW.isoformat(),
                "gross_margin": "12000",
                "duration": 12,
                "developer_id": "member",
            },
            headers=_auth(master),
        )
        assert response.status_code == 201
        assert Decimal(response.json()["monthly_margin"]) == Decimal("1000")

        response = await client.get("/api/contracts", headers=_auth(leader))
        assert len(response.json()["items"]) == 1

    @pytest.mark.asyncio
    async def test_commercial_cannot_create(self, client, member):
        response = await client.post(
            "/api/contracts",
            json={"name": "X", "date": NOW.isoformat(), "gross_margin": "1", "developer_id": "member"},
            headers=_auth(member),
        )
        assert response.status_code == 403


class TestCRMAPI:
    @pytest.mark.asyncio
    async def test_client_crud(self, client, member, leader):
        response = await client.post(
            "/api/crm/clients",
            json={"name": "ACME", "email": "info@acme.example"},
            headers=_auth(member),
        )
        assert response.status_code == 201
        record_id = response.json()["id"]

        response = await client.get("/api/crm/clients", headers=_auth(leader))
        assert [r["id"] for r in response.json()["items"]] == [record_id]

        response = await client.patch(
            f"/api/crm/clients/{record_id}", json={"status": "active"}, headers=_auth(leader),
        )
        assert response.json()["status"] == "active"

        response = await client.delete(f"/api/crm/clients/{record_id}", headers=_auth(member))
        assert response.json() == {"success": True}


class TestDashboardAPI:
    @pytest.mark.asyncio
    async def test_metrics_and_team(self, client, db_session, leader):
        today = datetime.now(timezone.utc)
        await save_collection(db_session, CONTRACTS, [make_contract("c1", "member", "1000", date=today)])

        response = await client.get("/api/dashboard/metrics", headers=_auth(leader))
        assert response.status_code == 200
        body = response.json()
        assert body["current_level"] == "team_leader"
        assert Decimal(body["team_revenue"]) == Decimal("1000")

        response = await client.get("/api/dashboard/team", headers=_auth(leader))
        assert [m["id"] for m in response.json()["members"]] == ["member"]

    @pytest.mark.asyncio
    async def test_metrics_outside_team(self, client, member):
        response = await client.get("/api/dashboard/metrics?user_id=leader", headers=_auth(member))
        assert response.status_code == 404


class TestSyncAPI:
    @pytest.mark.asyncio
    async def test_status_offline(self, client, master):
        response = await client.get("/api/sync/status", headers=_auth(master))
        assert response.status_code == 200
        assert response.json()["remote_enabled"] is False

    @pytest.mark.asyncio
    async def test_requires_admin(self, client, member):
        response = await client.post("/api/sync/retry", headers=_auth(member))
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_data_status(self, client, master):
        response = await client.get("/api/sync/data", headers=_auth(master))
        assert response.status_code == 200
        body = response.json()
        assert body["counts"]["users"] == 3
        assert body["master_exists"] is True

    @pytest.mark.asyncio
    async def test_reset_keeps_master(self, client, db_session, master):
        response = await client.post("/api/sync/reset", headers=_auth(master))
        assert response.status_code == 200
        assert response.json()["removed"]["users"] == 2
        assert [u.id for u in await load_collection(db_session, USERS)] == ["master"]

    @pytest.mark.asyncio
    async def test_reset_requires_master(self, client, db_session, master):
        admin = make_user("adm", role=UserRole.ADMIN, level=CareerLevel.MANAGING_DIRECTOR)
        users = await load_collection(db_session, USERS)
        await save_collection(db_session, USERS, users + [admin])

        response = await client.post("/api/sync/reset", headers=_auth(admin))
        assert response.status_code == 403
        assert len(await load_collection(db_session, USERS)) == 4
