"""Domain models shared across services."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


SALINITY_MIN = 0.1
SALINITY_MAX = 12.0
TEMPERATURE_MIN = 26.0
TEMPERATURE_MAX = 32.0


@dataclass(frozen=True, slots=True)
class Reading:
    """A single simulated sensor sample."""

    timestamp_label: str
    salinity: float
    temperature: float


class AlertSeverity(str, Enum):
    default = "default"
    success = "success"
    warning = "warning"
    error = "error"


@dataclass(frozen=True, slots=True)
class AlertModal:
    """User-facing outcome of a notification setting change."""

    visible: bool = False
    title: str = ""
    message: str = ""
    severity: AlertSeverity = AlertSeverity.default

    def dismissed(self) -> AlertModal:
        return AlertModal(
            visible=False,
            title=self.title,
            message=self.message,
            severity=self.severity,
        )


@dataclass(frozen=True, slots=True)
class NotificationConfig:
    sms_enabled: bool = False
    push_enabled: bool = False
    phone_number: str = ""
    is_registered: bool = False


class AlertChannel(str, Enum):
    sms = "sms"
    push = "push"


@dataclass(frozen=True, slots=True)
class AlertEvent:
    """High-salinity alert queued for one enabled channel."""

    channel: AlertChannel
    reading: Reading
    destination: str
    message: str
