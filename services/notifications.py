"""SMS/push alert eligibility.

SMS delivery needs a destination number, so enabling it is gated on a
registered phone. Push has no prerequisite. Disabling either channel is
always allowed. Every user-visible outcome is reported as an ``AlertModal``
rather than an exception: validation failures never change state.
"""

from __future__ import annotations

import logging
import re
from enum import Enum
from typing import List, Optional

from models.records import AlertChannel, AlertModal, AlertSeverity, NotificationConfig

logger = logging.getLogger(__name__)

PHONE_DIGITS = 10
COUNTRY_CODE = "+63"

_NON_DIGITS = re.compile(r"\D")

REGISTER_FIRST_TITLE = "Paalala"
REGISTER_FIRST_MESSAGE = "I-register muna ang phone number bago makatanggap ng text message"
INVALID_NUMBER_TITLE = "Error"
INVALID_NUMBER_MESSAGE = "Ilagay ang valid 10-digit number"
REGISTERED_TITLE = "Success"


class GateState(str, Enum):
    unregistered = "Unregistered"
    registered = "Registered"


def normalize_phone(raw: str) -> str:
    return _NON_DIGITS.sub("", raw or "")


def format_destination(phone_number: str) -> str:
    return f"{COUNTRY_CODE}{phone_number}"


class NotificationGate:
    """State machine guarding which alert channels may be enabled.

    ``Unregistered`` moves to ``Registered`` on the first valid phone number
    and stays there for the rest of the session.
    """

    def __init__(self, push_enabled: bool = False) -> None:
        self.state = GateState.unregistered
        self.sms_enabled = False
        self.push_enabled = push_enabled
        self.phone_number = ""
        self.modal = AlertModal()

    @property
    def is_registered(self) -> bool:
        return self.state is GateState.registered

    def config(self) -> NotificationConfig:
        return NotificationConfig(
            sms_enabled=self.sms_enabled,
            push_enabled=self.push_enabled,
            phone_number=self.phone_number,
            is_registered=self.is_registered,
        )

    def register_phone(self, raw: str) -> AlertModal:
        digits = normalize_phone(raw)
        if len(digits) != PHONE_DIGITS:
            logger.info(
                "Rejected phone registration",
                extra={"reason": f"{len(digits)} digits", "state": self.state.value},
            )
            return self._show(INVALID_NUMBER_TITLE, INVALID_NUMBER_MESSAGE, AlertSeverity.error)

        self.state = GateState.registered
        self.phone_number = digits
        self.sms_enabled = True
        logger.info(
            "Registered phone for SMS alerts",
            extra={"state": self.state.value, "channel": AlertChannel.sms.value},
        )
        return self._show(
            REGISTERED_TITLE,
            f"Registered {format_destination(digits)} for SMS Alerts",
            AlertSeverity.success,
        )

    def toggle_sms(self) -> Optional[AlertModal]:
        if self.sms_enabled:
            self.sms_enabled = False
            return None
        if not self.is_registered:
            logger.info(
                "SMS toggle rejected before registration",
                extra={"state": self.state.value, "channel": AlertChannel.sms.value},
            )
            return self._show(REGISTER_FIRST_TITLE, REGISTER_FIRST_MESSAGE, AlertSeverity.warning)
        self.sms_enabled = True
        return None

    def toggle_push(self) -> bool:
        self.push_enabled = not self.push_enabled
        return self.push_enabled

    def acknowledge(self) -> AlertModal:
        self.modal = self.modal.dismissed()
        return self.modal

    def eligible_channels(self) -> List[AlertChannel]:
        channels = []
        if self.sms_enabled:
            channels.append(AlertChannel.sms)
        if self.push_enabled:
            channels.append(AlertChannel.push)
        return channels

    def _show(self, title: str, message: str, severity: AlertSeverity) -> AlertModal:
        self.modal = AlertModal(visible=True, title=title, message=message, severity=severity)
        return self.modal


def build_gate(
    sms_enabled: bool = False,
    push_enabled: bool = False,
    phone_number: Optional[str] = None,
) -> NotificationGate:
    """Create a gate from configured defaults.

    SMS can only start enabled when a valid default phone is configured; the
    registration path is reused so the invariant holds from the first read.
    """
    gate = NotificationGate(push_enabled=push_enabled)
    if phone_number:
        modal = gate.register_phone(phone_number)
        gate.modal = AlertModal()
        if modal.severity is AlertSeverity.error:
            logger.warning("Ignoring invalid default phone number", extra={"reason": "invalid"})
            return gate
        gate.sms_enabled = sms_enabled
    elif sms_enabled:
        logger.warning(
            "SMS default ignored without a registered phone",
            extra={"channel": AlertChannel.sms.value},
        )
    return gate
