from __future__ import annotations

from typing import Any, Dict, List

import pytest
from typer.testing import CliRunner

from cli.app import app


def _state_payload() -> Dict[str, Any]:
    return {
        "reading": {"timestamp_label": "9:00 AM", "salinity": 10.42, "temperature": 29.1},
        "advisory": {
            "kind": "HighSalinity",
            "message": "HIGH SALT CONTENT",
            "description": "Warning: Saltwater Intrusion (Risk of Fish Kill)",
            "species": [],
            "color": "",
            "icon": "alert-triangle",
        },
        "history": [],
        "notifications": {
            "sms_enabled": False,
            "push_enabled": True,
            "phone_number": "",
            "is_registered": False,
        },
        "modal": {"visible": False, "title": "", "message": "", "severity": "default"},
        "tick_count": 3,
    }


class StubClient:
    def __init__(self, config) -> None:
        self.config = config
        self.calls: List[tuple[str, Any]] = []
        self.state = _state_payload()
        self.closed = False

    def get_state(self) -> Dict[str, Any]:
        self.calls.append(("state", None))
        return self.state

    def get_readings(self, count=None) -> List[Dict[str, Any]]:
        self.calls.append(("readings", count))
        return [
            {"timestamp_label": "8:57 AM", "salinity": 1.2, "temperature": 29.0},
            {"timestamp_label": "9:00 AM", "salinity": 1.35, "temperature": 29.05},
        ]

    def register_phone(self, phone_number: str) -> Dict[str, Any]:
        self.calls.append(("phone", phone_number))
        payload = _state_payload()
        if len(phone_number) == 10:
            payload["notifications"].update(is_registered=True, sms_enabled=True, phone_number=phone_number)
            payload["modal"] = {
                "visible": True,
                "title": "Success",
                "message": f"Registered +63{phone_number} for SMS Alerts",
                "severity": "success",
            }
        else:
            payload["modal"] = {
                "visible": True,
                "title": "Error",
                "message": "Ilagay ang valid 10-digit number",
                "severity": "error",
            }
        return payload

    def toggle_sms(self) -> Dict[str, Any]:
        self.calls.append(("sms", None))
        payload = _state_payload()
        payload["modal"] = {
            "visible": True,
            "title": "Paalala",
            "message": "I-register muna ang phone number bago makatanggap ng text message",
            "severity": "warning",
        }
        return payload

    def toggle_push(self) -> Dict[str, Any]:
        self.calls.append(("push", None))
        return _state_payload()

    def acknowledge(self) -> Dict[str, Any]:
        self.calls.append(("ack", None))
        return _state_payload()

    def check_species(self, species: str) -> Dict[str, Any]:
        self.calls.append(("species", species))
        return {"compatible": False, "reason": "connection error"}

    def watch(self, interval: float, iterations=None):
        self.calls.append(("watch", (interval, iterations)))
        for _ in range(iterations or 1):
            yield self.state

    def close(self) -> None:
        self.closed = True


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture()
def stub(monkeypatch) -> StubClient:
    holder: Dict[str, StubClient] = {}

    def factory(config):
        holder["client"] = StubClient(config)
        return holder["client"]

    monkeypatch.setattr("cli.app.ApiClient", factory)

    class _Proxy:
        def __getattr__(self, name: str) -> Any:
            return getattr(holder["client"], name)

    return _Proxy()  # type: ignore[return-value]


def test_status_renders_reading_and_advisory(stub, runner: CliRunner) -> None:
    result = runner.invoke(app, ["status"])

    assert result.exit_code == 0
    assert "salinity: 10.42 ppt" in result.stdout
    assert "HighSalinity: HIGH SALT CONTENT" in result.stdout
    assert "push_enabled: True" in result.stdout
    assert stub.closed is True


def test_history_passes_count(stub, runner: CliRunner) -> None:
    result = runner.invoke(app, ["history", "--count", "2"])

    assert result.exit_code == 0
    assert ("readings", 2) in stub.calls
    assert "9:00 AM: 1.35 ppt" in result.stdout


def test_history_uses_configured_default_count(stub, runner: CliRunner, monkeypatch) -> None:
    monkeypatch.setenv("CLI_HISTORY_COUNT", "1")

    result = runner.invoke(app, ["history"])

    assert result.exit_code == 0
    assert ("readings", 1) in stub.calls


def test_register_phone_success(stub, runner: CliRunner) -> None:
    result = runner.invoke(app, ["register-phone", "9171234567"])

    assert result.exit_code == 0
    assert "Registered +639171234567 for SMS Alerts" in result.stdout


def test_register_phone_rejection_exits_nonzero(stub, runner: CliRunner) -> None:
    result = runner.invoke(app, ["register-phone", "917123456"])

    assert result.exit_code == 1
    assert "valid 10-digit number" in result.stdout


def test_toggle_sms_shows_warning(stub, runner: CliRunner) -> None:
    result = runner.invoke(app, ["toggle-sms"])

    assert result.exit_code == 0
    assert "[Paalala]" in result.stdout
    assert "sms_enabled: False" in result.stdout


def test_check_species(stub, runner: CliRunner) -> None:
    result = runner.invoke(app, ["check-species", "Bangus"])

    assert result.exit_code == 0
    assert "Bangus: not compatible" in result.stdout
    assert "connection error" in result.stdout


def test_watch_uses_configured_interval(stub, runner: CliRunner) -> None:
    result = runner.invoke(app, ["--poll-interval", "0.5", "watch", "--iterations", "2"])

    assert result.exit_code == 0
    assert ("watch", (0.5, 2)) in stub.calls
    assert result.stdout.count("Current Reading") == 2


def test_simulate_is_reproducible_with_seed(runner: CliRunner) -> None:
    first = runner.invoke(app, ["simulate", "--ticks", "5", "--seed", "9"])
    second = runner.invoke(app, ["simulate", "--ticks", "5", "--seed", "9"])

    assert first.exit_code == 0
    values_first = [line.split()[-5:] for line in first.stdout.splitlines()]
    values_second = [line.split()[-5:] for line in second.stdout.splitlines()]
    assert len(values_first) == 5
    assert values_first == values_second
