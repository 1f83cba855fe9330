"""HTTP API over the seeded demo data."""

import base64

import pytest

from services.export_renderers import BOM

PDF_BYTES = b"%PDF-1.4 demo certificate"

NEW_DEVICE = {
    "name": "Váha",
    "serial_number": "SN-010",
    "manufacturer": "Kern",
    "model": "PCB 250",
    "usage": "Sklad",
    "asset_code": "d-45-67-8901",
}


def test_health(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json()["devices_loaded"] is True


def test_requires_login(client):
    assert client.get("/api/devices").status_code == 401
    assert client.get("/api/devices", headers={"Authorization": "Bearer bogus"}).status_code == 401


def test_login_failure_is_a_result(client):
    response = client.post("/api/auth/login?lang=en", json={"email": "admin", "password": "wrong"})
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is False
    assert body["error_code"] == "invalid-credentials"


@pytest.mark.parametrize("username,permissions", [
    ("admin", {"can_add_device": True, "can_calibrate": True, "can_delete": True}),
    ("moderator", {"can_add_device": False, "can_calibrate": True, "can_delete": False}),
    ("user", {"can_add_device": False, "can_calibrate": False, "can_delete": False}),
])
def test_me_permissions(client, login, username, permissions):
    body = client.get("/api/auth/me", headers=login(username)).json()
    assert body["email"] == f"{username}@demo.com"
    assert body["permissions"] == permissions


def test_seeded_devices_and_statuses(client, login):
    devices = client.get("/api/devices?lang=en", headers=login("user")).json()
    statuses = {d["manufacturer"]: d["status"] for d in devices}
    assert statuses == {"Fluke": "overdue", "Tektronix": "due-soon", "Mitutoyo": "overdue"}
    assert "photo_data" not in devices[0]


def test_list_filter_and_sort(client, login):
    headers = login("user")
    by_status = client.get("/api/devices?sort_key=status&sort_direction=desc", headers=headers).json()
    assert by_status[0]["status"] == "due-soon"

    filtered = client.get("/api/devices?search=osc", headers=headers).json()
    assert [d["manufacturer"] for d in filtered] == ["Tektronix"]

    options = client.get("/api/devices/filters", headers=headers).json()
    assert options["manufacturers"] == ["Fluke", "Mitutoyo", "Tektronix"]


def test_role_enforcement(client, login):
    user_headers = login("user")
    assert client.post("/api/devices", json=NEW_DEVICE, headers=user_headers).status_code == 403

    device_id = client.get("/api/devices", headers=user_headers).json()[0]["id"]
    calibration = {"calibration_date": "2024-05-01", "calibration_period_years": 1}
    assert client.post(f"/api/devices/{device_id}/calibrations", json=calibration,
                       headers=user_headers).status_code == 403

    moderator = login("moderator")
    assert client.delete(f"/api/devices/{device_id}", headers=moderator).status_code == 403
    response = client.post(f"/api/devices/{device_id}/calibrations", json=calibration, headers=moderator)
    assert response.status_code == 201


def test_admin_device_lifecycle(client, login):
    headers = login("admin")
    response = client.post("/api/devices", json=NEW_DEVICE, headers=headers)
    assert response.status_code == 201
    created = response.json()
    assert created["asset_code"] == "D-45-67-8901"
    assert created["status"] == "uncalibrated"

    calibration = {
        "calibration_date": "2024-02-29",
        "calibration_period_years": 1,
        "certificate_data": base64.b64encode(PDF_BYTES).decode(),
    }
    response = client.post(f"/api/devices/{created['id']}/calibrations", json=calibration, headers=headers)
    assert response.status_code == 201
    assert response.json()["next_calibration_date"] == "2025-03-01"
    assert response.json()["certificate_filename"] == "Certificate_Váha_SN-010.pdf"

    detail = client.get(f"/api/devices/{created['id']}", headers=headers).json()
    assert len(detail["calibration_history"]) == 1

    cert = client.get(f"/api/devices/{created['id']}/calibrations/0/certificate", headers=headers)
    assert cert.status_code == 200
    assert cert.content == PDF_BYTES
    missing = client.get(f"/api/devices/{created['id']}/calibrations/1/certificate", headers=headers)
    assert missing.status_code == 404

    assert client.delete(f"/api/devices/{created['id']}", headers=headers).status_code == 200
    assert client.get(f"/api/devices/{created['id']}", headers=headers).status_code == 404


def test_validation_errors(client, login):
    headers = login("admin")
    response = client.post("/api/devices", json={**NEW_DEVICE, "asset_code": "bad"}, headers=headers)
    assert response.status_code == 422
    assert "asset_code" in response.json()["detail"]["field_errors"]

    response = client.post("/api/devices/unknown/calibrations",
                           json={"calibration_date": "2024-01-01", "calibration_period_years": 1},
                           headers=headers)
    assert response.status_code == 404


def test_preview(client, login):
    headers = login("user")
    response = client.get("/api/calibrations/preview?calibration_date=2024-01-10"
                          "&calibration_period_years=2&lang=en", headers=headers)
    assert response.json() == {"next_calibration_date": "10.01.2026"}
    response = client.get("/api/calibrations/preview?calibration_date=2024-01-10"
                          "&calibration_period_years=0&lang=en", headers=headers)
    assert response.json() == {"next_calibration_date": "Calibration not required"}


def test_dashboard_stats(client, login):
    body = client.get("/api/dashboard/stats?lang=en", headers=login("user")).json()
    assert body["total"] == 3
    assert body["overdue_count"] == 2
    assert len(body["chart_buckets"]) == 5
    assert body["chart_buckets"][0]["label"] == "Valid"


def test_csv_export(client, login):
    response = client.get("/api/exports/csv?lang=sk", headers=login("user"))
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert 'filename="zariadenia_kalibracie.csv"' in response.headers["content-disposition"]
    assert response.content.startswith(BOM.encode("utf-8"))
    assert len(response.content.decode("utf-8-sig").strip().splitlines()) == 4


def test_pdf_export(client, login):
    response = client.get("/api/exports/pdf?lang=en&manufacturer=Fluke", headers=login("user"))
    assert response.status_code == 200
    assert response.content.startswith(b"%PDF")


def test_elevated_registration_needs_admin(client, login):
    payload = {"email": "boss@lab.sk", "password": "secret1", "username": "Boss", "role": "Admin"}
    assert client.post("/api/auth/register", json=payload).status_code == 403

    response = client.post("/api/auth/register", json=payload, headers=login("admin"))
    assert response.status_code == 200
    assert response.json()["user"]["role"] == "Admin"


def test_logout(client, login):
    headers = login("user")
    assert client.post("/api/auth/logout", headers=headers).status_code == 200
    assert client.get("/api/auth/me", headers=headers).status_code == 401
