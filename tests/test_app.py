from datetime import datetime
from typing import Iterator

import httpx
import pytest
from fastapi.testclient import TestClient

from app.main import create_app
from datastore.credentials import CredentialStore
from services.advisory import AdvisoryClient
from services.auth import AuthService
from services.monitor import MonitorEngine, build_default_engine, create_engine
from settings import get_settings


def _clock() -> datetime:
    return datetime(2024, 6, 1, 10, 15)


@pytest.fixture
def engine() -> MonitorEngine:
    return create_engine(seed=21, clock=_clock)


@pytest.fixture
def api_client(engine: MonitorEngine, monkeypatch) -> Iterator[TestClient]:
    monkeypatch.setenv("MONITOR_TICK_INTERVAL_SECONDS", "60")
    get_settings.cache_clear()

    def build_test_engine() -> MonitorEngine:
        return engine

    build_test_engine.cache_clear = lambda: None  # type: ignore[attr-defined]

    auth = AuthService(store=CredentialStore())
    advisory = AdvisoryClient(
        url="http://advisor.test/generate",
        transport=httpx.MockTransport(
            lambda request: httpx.Response(200, json={"compatible": True, "reason": "Brackish-tolerant."})
        ),
    )

    monkeypatch.setattr("app.main.build_default_engine", build_test_engine)
    monkeypatch.setattr("app.api.build_default_engine", build_test_engine)
    monkeypatch.setattr("app.web.build_default_engine", build_test_engine)
    monkeypatch.setattr("app.api.build_default_auth", lambda: auth)
    monkeypatch.setattr("app.web.build_default_auth", lambda: auth)
    monkeypatch.setattr("app.api.build_default_advisory_client", lambda: advisory)

    app = create_app()
    with TestClient(app) as client:
        yield client

    get_settings.cache_clear()


def test_lifespan_starts_and_stops_ticker(monkeypatch) -> None:
    monkeypatch.setenv("MONITOR_TICK_INTERVAL_SECONDS", "60")
    get_settings.cache_clear()
    app = create_app()
    try:
        with TestClient(app):
            ticker = app.state.ticker
            assert ticker.running is True
            engine_during = build_default_engine()

        assert ticker.running is False
        engine_after = build_default_engine()
        assert engine_after is not engine_during
    finally:
        build_default_engine.cache_clear()
        get_settings.cache_clear()


def test_state_endpoint(api_client: TestClient) -> None:
    response = api_client.get("/state")

    assert response.status_code == 200
    payload = response.json()
    assert payload["reading"]["salinity"] == 1.5
    assert payload["advisory"]["kind"] == "Freshwater"
    assert "Tilapia" in payload["advisory"]["species"]
    assert len(payload["history"]) == 7
    assert payload["notifications"] == {
        "sms_enabled": False,
        "push_enabled": False,
        "phone_number": "",
        "is_registered": False,
    }
    assert payload["modal"]["visible"] is False


def test_readings_endpoint_supports_tail(api_client: TestClient, engine: MonitorEngine) -> None:
    engine.tick()

    full = api_client.get("/readings").json()
    tail = api_client.get("/readings", params={"count": 5}).json()

    assert len(full) == 7
    assert tail == full[-5:]
    assert api_client.get("/readings", params={"count": 0}).status_code == 422


def test_sms_requires_registration(api_client: TestClient) -> None:
    response = api_client.post("/notifications/sms/toggle")

    payload = response.json()
    assert payload["notifications"]["sms_enabled"] is False
    assert payload["modal"]["visible"] is True
    assert payload["modal"]["severity"] == "warning"

    cleared = api_client.post("/notifications/modal/acknowledge").json()
    assert cleared["modal"]["visible"] is False


def test_phone_registration_flow(api_client: TestClient) -> None:
    rejected = api_client.post("/notifications/phone", json={"phone_number": "917123456"}).json()
    assert rejected["notifications"]["is_registered"] is False
    assert rejected["modal"]["severity"] == "error"

    accepted = api_client.post("/notifications/phone", json={"phone_number": "9171234567"}).json()
    assert accepted["notifications"]["is_registered"] is True
    assert accepted["notifications"]["sms_enabled"] is True
    assert accepted["modal"]["severity"] == "success"

    disabled = api_client.post("/notifications/sms/toggle").json()
    assert disabled["notifications"]["sms_enabled"] is False


def test_push_toggle_round_trip(api_client: TestClient) -> None:
    first = api_client.post("/notifications/push/toggle").json()
    second = api_client.post("/notifications/push/toggle").json()

    assert first["notifications"]["push_enabled"] is True
    assert second["notifications"]["push_enabled"] is False


def test_species_check_uses_advisory_service(api_client: TestClient) -> None:
    response = api_client.post("/advisory/species", json={"species": "Bangus"})

    assert response.status_code == 200
    assert response.json() == {"compatible": True, "reason": "Brackish-tolerant."}


def test_species_check_requires_name(api_client: TestClient) -> None:
    response = api_client.post("/advisory/species", json={"species": ""})

    assert response.status_code == 422


def test_account_endpoints(api_client: TestClient) -> None:
    missing = api_client.post("/auth/login", json={"username": "juan", "password": "x"})
    assert missing.status_code == 401
    assert missing.json()["detail"] == "No account found. Please register first."

    mismatch = api_client.post(
        "/auth/register",
        json={"username": "juan", "password": "a", "confirm_password": "b"},
    )
    assert mismatch.status_code == 400

    created = api_client.post(
        "/auth/register",
        json={"username": "juan", "password": "secret", "confirm_password": "secret"},
    )
    assert created.status_code == 201

    login = api_client.post("/auth/login", json={"username": "juan", "password": "secret"})
    assert login.status_code == 200
    token = login.json()["token"]

    logout = api_client.post("/auth/logout", headers={"X-Session-Token": token})
    assert logout.status_code == 204


def test_health_and_root(api_client: TestClient) -> None:
    assert api_client.get("/health").json() == {"status": "ok"}
    assert api_client.get("/").json()["status"] == "ok"
