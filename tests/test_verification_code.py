from datetime import timedelta

import pytest
from sqlalchemy.exc import OperationalError

from app import app
from api.dependencies import get_verification_service
from models.device_session import DeviceSession, SESSION_TTL, utcnow
from services.verification_service import VerificationService
from utils.errors import DeviceConflictError


@pytest.fixture
def service(code_store, session_store):
    return VerificationService(code_store, session_store)


def test_verify_seeded_code_binds_device(service, seeded_code, db):
    assert service.verify(seeded_code, "device-a") is True
    sessions = db.query(DeviceSession).all()
    assert len(sessions) == 1
    assert sessions[0].code == seeded_code
    assert sessions[0].device_id == "device-a"


def test_verify_unknown_code_creates_no_session(service, seeded_code, db):
    assert service.verify("not-a-code", "device-a") is False
    assert db.query(DeviceSession).count() == 0


def test_verify_other_device_conflicts(service, seeded_code, session_store):
    service.verify(seeded_code, "device-a")

    with pytest.raises(DeviceConflictError):
        service.verify(seeded_code, "device-b")
    assert session_store.find_by_code(seeded_code).device_id == "device-a"


def test_verify_after_session_expired_allows_new_device(service, seeded_code, session_store, db):
    session = session_store.upsert(seeded_code, "device-a")
    session.created_at = utcnow() - SESSION_TTL - timedelta(seconds=1)
    db.commit()

    assert service.verify(seeded_code, "device-b") is True
    assert session_store.find_by_code(seeded_code).device_id == "device-b"


def test_logout_clears_binding(service, seeded_code, session_store):
    service.verify(seeded_code, "device-a")
    assert service.logout(seeded_code) is True
    assert session_store.find_by_code(seeded_code) is None


# HTTP surface

def test_verify_code_endpoint_valid(client, seeded_code, db):
    response = client.post("/api/verify-code", json={"code": seeded_code, "deviceId": "A"})
    assert response.status_code == 200
    assert response.json() == {"valid": True}
    assert db.query(DeviceSession).filter_by(code=seeded_code).one().device_id == "A"


def test_verify_code_endpoint_unknown_code(client, seeded_code, db):
    response = client.post("/api/verify-code", json={"code": "bogus", "deviceId": "A"})
    assert response.status_code == 200
    assert response.json() == {"valid": False}
    assert db.query(DeviceSession).count() == 0


def test_verify_code_endpoint_conflict(client, seeded_code, db):
    client.post("/api/verify-code", json={"code": seeded_code, "deviceId": "A"})

    response = client.post("/api/verify-code", json={"code": seeded_code, "deviceId": "B"})
    assert response.status_code == 403
    assert response.json() == {"error": "This code is already in use on another device."}
    assert db.query(DeviceSession).filter_by(code=seeded_code).one().device_id == "A"


def test_verify_code_same_device_refreshes_session(client, seeded_code, db):
    client.post("/api/verify-code", json={"code": seeded_code, "deviceId": "A"})
    session = db.query(DeviceSession).filter_by(code=seeded_code).one()
    session.created_at = utcnow() - timedelta(days=6)
    db.commit()
    stale_created_at = session.created_at

    response = client.post("/api/verify-code", json={"code": seeded_code, "deviceId": "A"})
    assert response.status_code == 200
    assert response.json() == {"valid": True}
    db.expire_all()
    refreshed = db.query(DeviceSession).filter_by(code=seeded_code).one()
    assert refreshed.created_at > stale_created_at
    assert refreshed.device_id == "A"


def test_logout_then_other_device_succeeds(client, seeded_code, db):
    assert client.post("/api/verify-code", json={"code": seeded_code, "deviceId": "A"}).json() == {"valid": True}

    response = client.post("/api/logout", json={"code": seeded_code})
    assert response.status_code == 200
    assert response.json() == {"success": True}

    response = client.post("/api/verify-code", json={"code": seeded_code, "deviceId": "B"})
    assert response.status_code == 200
    assert response.json() == {"valid": True}
    assert db.query(DeviceSession).filter_by(code=seeded_code).one().device_id == "B"


def test_logout_without_session_succeeds(client):
    response = client.post("/api/logout", json={"code": "whatever"})
    assert response.status_code == 200
    assert response.json() == {"success": True}


@pytest.mark.parametrize("body", [
    {},
    {"code": "X1"},
    {"deviceId": "A"},
    {"code": "", "deviceId": "A"},
    {"code": "X1", "deviceId": ""},
    {"code": None, "deviceId": "A"},
])
def test_verify_code_missing_fields(client, body):
    response = client.post("/api/verify-code", json=body)
    assert response.status_code == 400
    assert response.json() == {"error": "Code and deviceId required"}


@pytest.mark.parametrize("body", [{}, {"code": ""}, {"code": None}])
def test_logout_missing_code(client, body):
    response = client.post("/api/logout", json=body)
    assert response.status_code == 400
    assert response.json() == {"error": "Code required"}


def test_verify_code_malformed_body(client):
    response = client.post("/api/verify-code", content="not json", headers={"Content-Type": "application/json"})
    assert response.status_code == 400
    assert "error" in response.json()


class FailingVerificationService:
    def verify(self, code, device_id):
        raise OperationalError("SELECT 1", {}, Exception("connection refused"))

    def logout(self, code):
        raise OperationalError("DELETE", {}, Exception("connection refused"))


def test_store_failure_is_generic_server_error(client):
    app.dependency_overrides[get_verification_service] = lambda: FailingVerificationService()

    response = client.post("/api/verify-code", json={"code": "X1", "deviceId": "A"})
    assert response.status_code == 500
    assert response.json() == {"error": "Server error"}

    response = client.post("/api/logout", json={"code": "X1"})
    assert response.status_code == 500
    assert response.json() == {"error": "Server error"}
