"""
Shared test fixtures for the Calibration Tracker backend.

Provides:
- A temporary SQLite file per test with the schema created
- Device/calibration factories
- Singleton service state reset between tests
- A FastAPI TestClient running the full lifespan (schema, demo seed, snapshot)

Usage:
    def test_example(make_device):
        device = make_device(history=[(date(2024, 1, 10), 1)])
"""

import asyncio
import logging
import uuid
from datetime import date

import pytest

from config import settings
from models import init_db
from models.calibration import Calibration
from models.device import Device
from services.auth_service import auth_provider
from services.device_service import device_service
from services.document_store import document_store

logging.getLogger("services").setLevel(logging.WARNING)

# Fixed reference day for date-dependent tests
TODAY = date(2024, 6, 15)


# ========================== Database Fixtures ==============================


@pytest.fixture()
def temp_db(tmp_path, monkeypatch):
    """Fresh database file with all tables created."""
    db_path = tmp_path / "test.db"
    monkeypatch.setattr(settings, "SQLITE_DB_PATH", str(db_path))
    asyncio.run(init_db())
    yield db_path


@pytest.fixture()
def fresh_services():
    """Detach the module singletons from earlier tests."""
    device_service.stop()
    device_service.devices = []
    device_service.loaded = False
    document_store._listeners.clear()
    auth_provider._failures.clear()
    yield
    device_service.stop()
    document_store._listeners.clear()


# ========================== Factories ======================================


@pytest.fixture()
def today():
    return TODAY


@pytest.fixture()
def make_device():
    """
    Build a Device. history takes Calibration objects or
    (calibration_date, period_years) tuples.
    """
    def _make(name="Multimeter", history=(), **fields):
        calibrations = [
            c if isinstance(c, Calibration)
            else Calibration(calibration_date=c[0], calibration_period_years=c[1])
            for c in history
        ]
        values = {
            "id": uuid.uuid4().hex,
            "name": name,
            "serial_number": "SN-001",
            "manufacturer": "Fluke",
            "model": "87V",
            "usage": "Lab A",
            "asset_code": "A-12-34-5678",
            "calibration_history": calibrations,
        }
        values.update(fields)
        return Device(**values)
    return _make


# ========================== API Fixtures ===================================


@pytest.fixture()
def client(temp_db, fresh_services):
    """TestClient with demo users (admin/moderator/user, password 'password') and devices."""
    from fastapi.testclient import TestClient
    from main import app

    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def login(client):
    """Return Authorization headers for a demo username."""
    def _login(username="admin", password="password"):
        response = client.post("/api/auth/login", json={"email": username, "password": password})
        assert response.status_code == 200
        body = response.json()
        assert body["success"], body
        return {"Authorization": f"Bearer {body['token']}"}
    return _login
