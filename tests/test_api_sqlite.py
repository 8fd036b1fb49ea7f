from __future__ import annotations

import sqlite3
from datetime import datetime
from types import SimpleNamespace

import pytest

from src.visit_tracker.visit_tracker.common.geo import Coordinates
from src.visit_tracker.visit_tracker.core.exceptions import ConflictError
from src.visit_tracker.visit_tracker.main import create_app

OFFICE = {"latitude": 13.0827, "longitude": 80.2707}
AWAY = {"latitude": 13.0927, "longitude": 80.2807}


@pytest.fixture
def app(tmp_path):
    settings = SimpleNamespace(
        SECRET_KEY="test-secret",
        DEBUG=False,
        TESTING=True,
        LOG_LEVEL="WARNING",
        APP_TIMEZONE="Asia/Kolkata",
        DB_BACKEND="sqlite",
        SQLITE_PATH=str(tmp_path / "visits.db"),
        AUTO_INIT_DB=True,
        AUTO_SEED_DB=True,
        ADMIN_NAME="admin",
        ADMIN_PASSWORD="admin-pass",
        GOOGLE_MAPS_API_KEY="",
    )
    return create_app(settings)


@pytest.fixture
def client(app):
    return app.test_client()


def _login(client, name, password, role="user"):
    resp = client.post("/api/user/login", json={"name": name, "role": role, "password": password})
    assert resp.status_code == 200, resp.get_json()
    return resp


def test_requests_need_a_session(client):
    resp = client.get("/api/visits")
    assert resp.status_code == 401
    assert resp.get_json() == {"success": False, "error": "authentication_error", "message": "Login required"}


def test_bad_login(client):
    resp = client.post("/api/user/login", json={"name": "admin", "role": "admin", "password": "nope"})
    assert resp.status_code == 401


def test_visit_lifecycle_over_http(client):
    _login(client, "admin", "admin-pass", role="admin")
    assert client.post("/api/settings", json={"key": "distanceThreshold", "value": 500}).status_code == 200
    resp = client.post(
        "/api/user/update",
        json={"name": "alice", "role": "user", "password": "alice-pass", "reportingManagerEmail": "boss@example.com"},
    )
    assert resp.status_code == 200
    client.post("/api/user/logout")

    _login(client, "alice", "alice-pass")
    resp = client.post("/api/visits/create", json={"clientName": "Acme", "companyName": "Acme Corp", **OFFICE})
    assert resp.status_code == 201
    visit_id = resp.get_json()["visitId"]

    resp = client.post("/api/visits/create", json={"clientName": "Globex", "companyName": "Globex", **OFFICE})
    assert resp.status_code == 409
    assert resp.get_json()["error"] == "conflict"

    active = client.get("/api/visits/active").get_json()["visit"]
    assert active["id"] == visit_id
    assert active["status"] == "open"

    resp = client.post("/api/visits/update", json={"visitId": visit_id, "checkOutAddress": "Somewhere", **AWAY})
    assert resp.status_code == 200
    closed = resp.get_json()["visit"]
    assert closed["locationMismatch"] is True
    assert closed["distanceMeters"] > 500

    resp = client.post("/api/visits/update", json={"visitId": visit_id, **OFFICE})
    assert resp.status_code == 409
    assert resp.get_json()["error"] == "invalid_state"

    visits = client.get("/api/visits", query_string={"userName": "all"}).get_json()
    assert [v["id"] for v in visits] == [visit_id]

    clients = client.get("/api/clients").get_json()
    assert [c["name"] for c in clients] == ["Acme"]

    assert client.get("/api/visits/pending-checkouts").status_code == 403
    assert client.post("/api/visits/delete", json={"visitId": visit_id}).status_code == 403


def test_checkout_of_missing_visit(client):
    _login(client, "admin", "admin-pass", role="admin")
    resp = client.post("/api/visits/update", json={"visitId": 999, **OFFICE})
    assert resp.status_code == 404


def test_bad_coordinates_are_rejected(client):
    _login(client, "admin", "admin-pass", role="admin")
    resp = client.post(
        "/api/visits/create",
        json={"clientName": "Acme", "companyName": "Acme Corp", "latitude": "north", "longitude": 80.27},
    )
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "validation_error"


def test_settings_and_user_lookup(client):
    _login(client, "admin", "admin-pass", role="admin")

    resp = client.get("/api/settings/distanceThreshold")
    assert resp.status_code == 200
    assert resp.get_json() == {"key": "distanceThreshold", "value": None}
    assert client.post("/api/settings", json={"key": "distanceThreshold", "value": "-3"}).status_code == 400
    client.post("/api/settings", json={"key": "checkoutReminderMinutes", "value": "90"})
    assert client.get("/api/settings/checkoutReminderMinutes").get_json()["value"] == "90"

    assert client.get("/api/user/admin").get_json()["exists"] is True
    assert client.get("/api/user/ghost").get_json() == {"exists": False}


def test_exports(client):
    _login(client, "admin", "admin-pass", role="admin")

    resp = client.get("/api/reports/visits.xlsx")
    assert resp.status_code == 200
    assert resp.mimetype == "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

    resp = client.get("/api/reports/visits.csv")
    assert resp.status_code == 200
    assert resp.data.decode("utf-8-sig").startswith("Date,User,Client")


def test_geocoding_without_key_is_a_service_error(client):
    _login(client, "admin", "admin-pass", role="admin")
    resp = client.get("/api/geocode", query_string={"lat": 13.08, "lng": 80.27})
    assert resp.status_code == 502
    assert resp.get_json()["upstreamStatus"] == "NOT_CONFIGURED"


def test_partial_unique_index_blocks_second_open_visit(app):
    repo = app.extensions["visit_tracker"].visits_repo
    kwargs = dict(
        user_name="bob",
        client_name="Acme",
        company_name="Acme Corp",
        check_in_address=None,
        check_in_map_link=None,
        check_in_coordinates=Coordinates(13.0827, 80.2707),
        check_in_time=datetime(2025, 6, 2, 9, 0),
    )
    first = repo.create_visit(**kwargs)

    with pytest.raises(ConflictError):
        repo.create_visit(**kwargs)

    assert repo.close_visit(
        visit_id=first,
        check_out_time=datetime(2025, 6, 2, 10, 0),
        check_out_address=None,
        check_out_map_link=None,
        check_out_coordinates=Coordinates(13.0827, 80.2707),
        distance_meters=0.0,
        location_mismatch=False,
    )
    assert repo.create_visit(**kwargs) != first


def _open_visit(container, user_name):
    return container.visits_repo.create_visit(
        user_name=user_name,
        client_name="Acme",
        company_name="Acme Corp",
        check_in_address=None,
        check_in_map_link=None,
        check_in_coordinates=Coordinates(13.0827, 80.2707),
        check_in_time=datetime(2025, 6, 2, 9, 0),
    )


def test_delete_user_by_user_name_removes_their_visits(app, client):
    container = app.extensions["visit_tracker"]
    _login(client, "admin", "admin-pass", role="admin")
    assert client.post("/api/user/update", json={"name": "bob", "password": "pw"}).status_code == 200
    visit_id = _open_visit(container, "bob")

    resp = client.post("/api/user/delete", json={"userName": "bob"})

    assert resp.status_code == 200
    assert resp.get_json() == {"success": True, "deletedVisits": 1}
    assert container.visits_repo.get_by_id(visit_id) is None
    assert client.get("/api/user/bob").get_json() == {"exists": False}


def test_delete_user_keeps_visits_when_user_delete_fails(app):
    container = app.extensions["visit_tracker"]
    container.user_service.upsert(name="bob", role="user", password="pw")
    visit_id = _open_visit(container, "bob")

    conn = container.conn.connect()
    conn.execute("CREATE TRIGGER block_user_delete BEFORE DELETE ON users BEGIN SELECT RAISE(ABORT, 'blocked'); END")
    conn.commit()
    conn.close()

    with pytest.raises(sqlite3.IntegrityError):
        container.user_service.delete_user("bob")

    assert container.visits_repo.get_by_id(visit_id) is not None
    assert container.user_service.get("bob") is not None
