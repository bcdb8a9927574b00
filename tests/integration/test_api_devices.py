"""
Integration tests for /api/v1/devices endpoints.
Uses TestClient with an in-memory repository and an overridden caller.
"""
import uuid
from unittest.mock import AsyncMock

import pytest

pytestmark = pytest.mark.integration
from fastapi.testclient import TestClient

from home_energy.core.deps import AuthUser, get_current_active_user, get_device_service
from home_energy.main import app
from home_energy.services.device_service import DeviceService


@pytest.fixture
def as_role(device_service):
    """Returns a function that builds a client acting as the given role"""

    def make_client(role: str) -> TestClient:
        app.dependency_overrides[get_current_active_user] = lambda: AuthUser(
            user_id=str(uuid.uuid4()), username=f"{role.lower()}-user", email="user@example.com", role=role
        )
        app.dependency_overrides[get_device_service] = lambda: device_service
        return TestClient(app)

    yield make_client
    app.dependency_overrides.clear()


def _create(client, name="Living Room AC", device_type="AC", **extra):
    response = client.post("/api/v1/devices", json={"name": name, "type": device_type, **extra})
    assert response.status_code == 201, response.text
    return response.json()


class TestDeviceAPI:

    def test_owner_full_lifecycle(self, as_role, clock):
        client = as_role("OWNER")

        created = _create(client, consumption_kwh=99.0)
        assert created["status"] == "OFF"
        assert created["consumption_kwh"] == 0.0

        on = client.put(f"/api/v1/devices/{created['id']}/toggle", params={"status": "ON"})
        assert on.status_code == 200
        assert on.json()["status"] == "ON"

        clock.advance(minutes=120)
        off = client.put(f"/api/v1/devices/{created['id']}/toggle", params={"status": "OFF"})
        assert off.status_code == 200
        assert off.json()["consumption_kwh"] == pytest.approx(3.0)

        renamed = client.put(f"/api/v1/devices/{created['id']}", json={"name": "Den AC", "type": "AC"})
        assert renamed.status_code == 200
        assert renamed.json()["name"] == "Den AC"
        assert renamed.json()["consumption_kwh"] == pytest.approx(3.0)

        summary = client.get("/api/v1/devices/summary").json()
        assert summary["total_devices"] == 1
        assert summary["total_consumption_kwh"] == pytest.approx(3.0)

        assert client.delete(f"/api/v1/devices/{created['id']}").status_code == 204
        assert client.get(f"/api/v1/devices/{created['id']}").status_code == 404
        assert client.delete(f"/api/v1/devices/{created['id']}").status_code == 404

    def test_family_member_can_toggle_but_not_manage(self, as_role):
        device = _create(as_role("OWNER"))
        client = as_role("FAMILY_MEMBER")

        assert client.get("/api/v1/devices").status_code == 200
        assert client.put(f"/api/v1/devices/{device['id']}/toggle", params={"status": "ON"}).status_code == 200
        assert client.post("/api/v1/devices", json={"name": "Fan", "type": "FAN"}).status_code == 403
        assert client.put(f"/api/v1/devices/{device['id']}", json={"name": "x", "type": "FAN"}).status_code == 403
        assert client.delete(f"/api/v1/devices/{device['id']}").status_code == 403

    def test_guest_is_read_only(self, as_role):
        device = _create(as_role("OWNER"))
        client = as_role("GUEST")

        listing = client.get("/api/v1/devices")
        assert listing.status_code == 200
        assert [d["id"] for d in listing.json()] == [device["id"]]

        toggle = client.put(f"/api/v1/devices/{device['id']}/toggle", params={"status": "ON"})
        assert toggle.status_code == 403
        assert "Access denied" in toggle.json()["detail"]

    def test_invalid_status_is_bad_request(self, as_role):
        client = as_role("OWNER")
        device = _create(client)

        response = client.put(f"/api/v1/devices/{device['id']}/toggle", params={"status": "DIM"})
        assert response.status_code == 400

    def test_unknown_device_is_not_found(self, as_role):
        client = as_role("OWNER")

        response = client.put(f"/api/v1/devices/{uuid.uuid4()}/toggle", params={"status": "ON"})
        assert response.status_code == 404

    def test_missing_fields_rejected(self, as_role):
        client = as_role("OWNER")

        assert client.post("/api/v1/devices", json={"name": "No type"}).status_code == 422

    def test_blank_update_rejected(self, as_role):
        client = as_role("OWNER")
        device = _create(client)

        response = client.put(f"/api/v1/devices/{device['id']}", json={"name": "   ", "type": "AC"})
        assert response.status_code == 422
        assert client.get(f"/api/v1/devices/{device['id']}").json()["name"] == "Living Room AC"

    def test_storage_failure_is_server_error(self, as_role):
        broken = AsyncMock(spec=DeviceService)
        broken.list_all.side_effect = RuntimeError("connection reset")
        client = as_role("OWNER")
        app.dependency_overrides[get_device_service] = lambda: broken

        assert client.get("/api/v1/devices").status_code == 500


class TestHealth:

    def test_health(self):
        response = TestClient(app).get("/api/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
