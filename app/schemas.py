"""Pydantic schemas for the HTTP API layer."""

from __future__ import annotations

from typing import TYPE_CHECKING, List

from pydantic import BaseModel, Field

from models.records import AlertModal, AlertSeverity, NotificationConfig, Reading
from services.advisory import SpeciesCompatibility  # noqa: F401

if TYPE_CHECKING:
    from services.classifier import Advisory
    from services.monitor import MonitorSnapshot


class ReadingOut(BaseModel):
    """A single sensor sample."""

    timestamp_label: str
    salinity: float = Field(..., description="Salinity in parts per thousand.")
    temperature: float = Field(..., description="Water temperature in degrees Celsius.")

    @classmethod
    def from_reading(cls, reading: Reading) -> ReadingOut:
        return cls(
            timestamp_label=reading.timestamp_label,
            salinity=reading.salinity,
            temperature=reading.temperature,
        )


class AdvisoryOut(BaseModel):
    """Advisory derived from the latest salinity value."""

    kind: str
    message: str
    description: str
    species: List[str] = Field(default_factory=list)
    color: str
    icon: str

    @classmethod
    def from_advisory(cls, advisory: Advisory) -> AdvisoryOut:
        return cls(
            kind=advisory.kind.value,
            message=advisory.message,
            description=advisory.description,
            species=list(advisory.species),
            color=advisory.color,
            icon=advisory.icon,
        )


class NotificationConfigOut(BaseModel):
    sms_enabled: bool
    push_enabled: bool
    phone_number: str
    is_registered: bool

    @classmethod
    def from_config(cls, config: NotificationConfig) -> NotificationConfigOut:
        return cls(
            sms_enabled=config.sms_enabled,
            push_enabled=config.push_enabled,
            phone_number=config.phone_number,
            is_registered=config.is_registered,
        )


class AlertModalOut(BaseModel):
    visible: bool
    title: str
    message: str
    severity: AlertSeverity

    @classmethod
    def from_modal(cls, modal: AlertModal) -> AlertModalOut:
        return cls(
            visible=modal.visible,
            title=modal.title,
            message=modal.message,
            severity=modal.severity,
        )


class MonitorState(BaseModel):
    """Everything the dashboard needs for one render."""

    reading: ReadingOut
    advisory: AdvisoryOut
    history: List[ReadingOut]
    notifications: NotificationConfigOut
    modal: AlertModalOut
    tick_count: int = Field(..., ge=0)

    @classmethod
    def from_snapshot(cls, snapshot: MonitorSnapshot) -> MonitorState:
        return cls(
            reading=ReadingOut.from_reading(snapshot.reading),
            advisory=AdvisoryOut.from_advisory(snapshot.advisory),
            history=[ReadingOut.from_reading(item) for item in snapshot.history],
            notifications=NotificationConfigOut.from_config(snapshot.notifications),
            modal=AlertModalOut.from_modal(snapshot.modal),
            tick_count=snapshot.tick_count,
        )


class PhoneRegistrationRequest(BaseModel):
    phone_number: str = Field(..., description="Local mobile number; non-digits are ignored.")


class SpeciesCheckRequest(BaseModel):
    species: str = Field(..., min_length=1, description="Fish or crustacean name to evaluate.")


class AdvisoryQuestion(BaseModel):
    question: str = Field(..., min_length=1)


class AdvisoryAnswer(BaseModel):
    answer: str


class AccountRequest(BaseModel):
    username: str
    password: str
    confirm_password: str


class LoginRequest(BaseModel):
    username: str
    password: str


class SessionResponse(BaseModel):
    token: str
