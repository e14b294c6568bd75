"""Unit tests for the SMS/push notification gate."""

from __future__ import annotations

from models.records import AlertChannel, AlertSeverity
from services.notifications import GateState, NotificationGate, build_gate, normalize_phone


def test_initial_state_has_all_alerts_off() -> None:
    gate = NotificationGate()

    config = gate.config()
    assert gate.state is GateState.unregistered
    assert config.sms_enabled is False
    assert config.push_enabled is False
    assert config.is_registered is False
    assert config.phone_number == ""
    assert gate.modal.visible is False


def test_register_rejects_nine_digits() -> None:
    gate = NotificationGate()

    modal = gate.register_phone("917123456")

    assert modal.visible is True
    assert modal.severity is AlertSeverity.error
    assert gate.state is GateState.unregistered
    assert gate.is_registered is False
    assert gate.sms_enabled is False


def test_register_rejects_too_many_digits() -> None:
    gate = NotificationGate()

    modal = gate.register_phone("91712345678")

    assert modal.severity is AlertSeverity.error
    assert gate.is_registered is False


def test_register_accepts_ten_digits_and_enables_sms() -> None:
    gate = NotificationGate()

    modal = gate.register_phone("9171234567")

    assert modal.severity is AlertSeverity.success
    assert modal.message == "Registered +639171234567 for SMS Alerts"
    assert gate.state is GateState.registered
    assert gate.config().is_registered is True
    assert gate.config().sms_enabled is True
    assert gate.phone_number == "9171234567"


def test_register_strips_formatting_characters() -> None:
    gate = NotificationGate()

    gate.register_phone("(917) 123-4567")

    assert gate.phone_number == "9171234567"
    assert normalize_phone("+63 917") == "63917"


def test_failed_reregistration_keeps_registered_state() -> None:
    gate = NotificationGate()
    gate.register_phone("9171234567")

    modal = gate.register_phone("123")

    assert modal.severity is AlertSeverity.error
    assert gate.state is GateState.registered
    assert gate.phone_number == "9171234567"


def test_toggle_sms_while_unregistered_warns() -> None:
    gate = NotificationGate()

    modal = gate.toggle_sms()

    assert modal is not None
    assert modal.severity is AlertSeverity.warning
    assert modal.title == "Paalala"
    assert gate.sms_enabled is False


def test_toggle_sms_after_registration() -> None:
    gate = NotificationGate()
    gate.register_phone("9171234567")
    gate.acknowledge()

    assert gate.toggle_sms() is None
    assert gate.sms_enabled is False
    assert gate.toggle_sms() is None
    assert gate.sms_enabled is True
    assert gate.modal.visible is False


def test_toggle_push_twice_restores_value() -> None:
    gate = NotificationGate()

    assert gate.toggle_push() is True
    assert gate.toggle_push() is False
    assert gate.modal.visible is False


def test_acknowledge_hides_modal() -> None:
    gate = NotificationGate()
    gate.toggle_sms()

    modal = gate.acknowledge()

    assert modal.visible is False
    assert gate.modal.visible is False


def test_eligible_channels_follow_toggles() -> None:
    gate = NotificationGate()
    assert gate.eligible_channels() == []

    gate.register_phone("9171234567")
    gate.toggle_push()

    assert gate.eligible_channels() == [AlertChannel.sms, AlertChannel.push]


def test_build_gate_ignores_sms_default_without_phone() -> None:
    gate = build_gate(sms_enabled=True, push_enabled=True)

    assert gate.sms_enabled is False
    assert gate.push_enabled is True
    assert gate.is_registered is False


def test_build_gate_with_default_phone() -> None:
    enabled = build_gate(sms_enabled=True, phone_number="9171234567")
    disabled = build_gate(sms_enabled=False, phone_number="9171234567")
    invalid = build_gate(sms_enabled=True, phone_number="12")

    assert enabled.is_registered and enabled.sms_enabled
    assert disabled.is_registered and not disabled.sms_enabled
    assert not invalid.is_registered and not invalid.sms_enabled
    assert enabled.modal.visible is False
    assert invalid.modal.visible is False
