"""
Integration tests for /api/v1/auth endpoints.
Backed by a throwaway SQLite database; Redis is replaced with AsyncMocks.
"""
import asyncio
from unittest.mock import AsyncMock, patch

import pytest

pytestmark = pytest.mark.integration
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from home_energy.core.database import Base, get_db
from home_energy.core.deps import get_device_service
from home_energy.core.redis_client import token_store
from home_energy.main import app


@pytest.fixture
def client(tmp_path, device_service):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'auth.db'}", poolclass=NullPool)

    async def create_tables():
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    asyncio.run(create_tables())
    session_factory = async_sessionmaker(engine, expire_on_commit=False)

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_device_service] = lambda: device_service

    with patch.object(token_store, "is_revoked", AsyncMock(return_value=False)) as is_revoked, \
            patch.object(token_store, "revoke", AsyncMock(return_value=True)), \
            patch.object(token_store, "clear", AsyncMock(return_value=True)):
        test_client = TestClient(app)
        test_client.is_revoked = is_revoked
        yield test_client

    app.dependency_overrides.clear()
    asyncio.run(engine.dispose())


def _signup(client, username, role, password="Str0ngPass"):
    return client.post("/api/v1/auth/signup", json={
        "username": username,
        "email": f"{username}@example.com",
        "password": password,
        "role": role,
    })


def _auth(token):
    return {"Authorization": f"Bearer {token}"}


class TestAuthAPI:

    def test_signup_and_profile(self, client):
        response = _signup(client, "alice", "owner")
        assert response.status_code == 201
        body = response.json()
        assert body["user"]["role"] == "OWNER"

        me = client.get("/api/v1/auth/me", headers=_auth(body["access_token"]))
        assert me.status_code == 200
        assert me.json()["username"] == "alice"

    def test_duplicate_signup_rejected(self, client):
        assert _signup(client, "bob", "GUEST").status_code == 201
        assert _signup(client, "bob", "GUEST").status_code == 400

    def test_weak_password_rejected(self, client):
        assert _signup(client, "carol", "GUEST", password="password").status_code == 422

    def test_login(self, client):
        _signup(client, "dave", "FAMILY_MEMBER")

        ok = client.post("/api/v1/auth/login", json={"username": "dave", "password": "Str0ngPass"})
        assert ok.status_code == 200
        assert ok.json()["user"]["role"] == "FAMILY_MEMBER"

        bad = client.post("/api/v1/auth/login", json={"username": "dave", "password": "Wr0ngPass"})
        assert bad.status_code == 401

    def test_missing_or_revoked_token(self, client):
        token = _signup(client, "erin", "OWNER").json()["access_token"]

        assert client.get("/api/v1/auth/me").status_code in (401, 403)

        client.is_revoked.return_value = True
        assert client.get("/api/v1/auth/me", headers=_auth(token)).status_code == 401

    def test_profile_update_password_mismatch(self, client):
        token = _signup(client, "frank", "GUEST").json()["access_token"]

        response = client.put("/api/v1/auth/me", headers=_auth(token), json={
            "password": "N3wPassword", "confirm_password": "Different1",
        })
        assert response.status_code == 400

    def test_profile_update(self, client):
        token = _signup(client, "grace", "GUEST").json()["access_token"]

        response = client.put("/api/v1/auth/me", headers=_auth(token), json={"email": "grace@home.example.com"})
        assert response.status_code == 200
        assert response.json()["email"] == "grace@home.example.com"

    def test_logout(self, client):
        token = _signup(client, "heidi", "GUEST").json()["access_token"]

        response = client.post("/api/v1/auth/logout", headers=_auth(token))
        assert response.status_code == 200
        token_store.revoke.assert_awaited_once()

    def test_role_from_token_governs_device_access(self, client):
        owner = _signup(client, "ivan", "OWNER").json()["access_token"]
        guest = _signup(client, "judy", "GUEST").json()["access_token"]
        payload = {"name": "Hall Light", "type": "LIGHT"}

        assert client.post("/api/v1/devices", json=payload, headers=_auth(owner)).status_code == 201
        assert client.post("/api/v1/devices", json=payload, headers=_auth(guest)).status_code == 403
        assert client.get("/api/v1/devices", headers=_auth(guest)).status_code == 200

    def test_logout_when_revocation_unavailable(self, client):
        token = _signup(client, "kim", "GUEST").json()["access_token"]
        token_store.revoke.return_value = False

        response = client.post("/api/v1/auth/logout", headers=_auth(token))
        assert response.status_code == 503
