"""State engine tying the simulator, classifier, history and notification gate together."""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from datetime import datetime
from functools import lru_cache
from threading import Lock
from typing import Callable, Deque, List, Optional, Tuple

from models.records import AlertChannel, AlertEvent, AlertModal, NotificationConfig, Reading
from services.classifier import Advisory, AdvisoryKind, classify
from services.history import TimeSeriesBuffer, seed_history
from services.notifications import NotificationGate, build_gate, format_destination
from services.simulator import Clock, Simulator, build_simulator, format_time_label
from settings import get_settings

logger = logging.getLogger(__name__)

OUTBOX_SIZE = 50


@dataclass(frozen=True)
class MonitorSnapshot:
    """Read-only view handed to the presentation layer."""

    reading: Reading
    advisory: Advisory
    history: Tuple[Reading, ...]
    notifications: NotificationConfig
    modal: AlertModal
    tick_count: int


Listener = Callable[[MonitorSnapshot], None]


class MonitorEngine:
    """Single owner of the monitoring state.

    Every mutation runs under one lock so that ticks and user actions never
    interleave, even when the host serves requests from several threads.
    Subscribers are notified after the lock is released.
    """

    def __init__(
        self,
        simulator: Simulator,
        history: TimeSeriesBuffer,
        gate: NotificationGate,
        initial: Reading,
    ) -> None:
        self.simulator = simulator
        self.history = history
        self.gate = gate
        self._reading = initial
        self._advisory = classify(initial.salinity)
        self._tick_count = 0
        self._listeners: List[Listener] = []
        self._outbox: Deque[AlertEvent] = deque(maxlen=OUTBOX_SIZE)
        self._lock = Lock()

    def tick(self) -> MonitorSnapshot:
        with self._lock:
            previous = self._advisory
            reading = self.simulator.tick(self._reading.salinity, self._reading.temperature)
            self._reading = reading
            self._advisory = classify(reading.salinity)
            self.history.append(reading)
            self._tick_count += 1
            if self._advisory.kind is not previous.kind:
                logger.info(
                    "Advisory changed",
                    extra={
                        "advisory": self._advisory.kind.value,
                        "salinity": reading.salinity,
                        "temperature": reading.temperature,
                    },
                )
                if self._advisory.kind is AdvisoryKind.high_salinity:
                    self._queue_alerts(reading)
            snapshot = self._snapshot_locked()
        self._notify(snapshot)
        return snapshot

    def snapshot(self) -> MonitorSnapshot:
        with self._lock:
            return self._snapshot_locked()

    def readings(self, count: Optional[int] = None) -> List[Reading]:
        with self._lock:
            return self.history.snapshot(count)

    def register_phone(self, raw: str) -> MonitorSnapshot:
        return self._mutate(lambda: self.gate.register_phone(raw))

    def toggle_sms(self) -> MonitorSnapshot:
        return self._mutate(self.gate.toggle_sms)

    def toggle_push(self) -> MonitorSnapshot:
        return self._mutate(self.gate.toggle_push)

    def acknowledge(self) -> MonitorSnapshot:
        return self._mutate(self.gate.acknowledge)

    def alert_outbox(self) -> List[AlertEvent]:
        with self._lock:
            return list(self._outbox)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def _mutate(self, operation: Callable[[], object]) -> MonitorSnapshot:
        with self._lock:
            operation()
            snapshot = self._snapshot_locked()
        self._notify(snapshot)
        return snapshot

    def _snapshot_locked(self) -> MonitorSnapshot:
        return MonitorSnapshot(
            reading=self._reading,
            advisory=self._advisory,
            history=tuple(self.history.snapshot()),
            notifications=self.gate.config(),
            modal=self.gate.modal,
            tick_count=self._tick_count,
        )

    def _queue_alerts(self, reading: Reading) -> None:
        message = (
            f"{self._advisory.message}: {reading.salinity:.1f} ppt. "
            f"{self._advisory.description}"
        )
        for channel in self.gate.eligible_channels():
            destination = (
                format_destination(self.gate.phone_number)
                if channel is AlertChannel.sms
                else "subscribers"
            )
            self._outbox.append(
                AlertEvent(
                    channel=channel,
                    reading=reading,
                    destination=destination,
                    message=message,
                )
            )
            logger.warning(
                "Queued high salinity alert",
                extra={"channel": channel.value, "salinity": reading.salinity},
            )

    def _notify(self, snapshot: MonitorSnapshot) -> None:
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(snapshot)
            except Exception:  # noqa: BLE001 - a broken listener must not stop the feed
                logger.exception("Monitor listener failed")


def create_engine(
    seed: Optional[int] = None,
    clock: Optional[Clock] = None,
    capacity: int = 7,
    history_seed: str = "static",
    initial_salinity: float = 1.5,
    initial_temperature: float = 29.2,
    sms_enabled: bool = False,
    push_enabled: bool = False,
    phone_number: Optional[str] = None,
) -> MonitorEngine:
    simulator = build_simulator(seed=seed, clock=clock)
    now = clock() if clock is not None else datetime.now()
    history = TimeSeriesBuffer(
        capacity=capacity,
        readings=seed_history(
            history_seed, capacity, initial_temperature, now=now, salinity=initial_salinity
        ),
    )
    gate = build_gate(
        sms_enabled=sms_enabled, push_enabled=push_enabled, phone_number=phone_number
    )
    initial = Reading(
        timestamp_label=format_time_label(now),
        salinity=initial_salinity,
        temperature=initial_temperature,
    )
    return MonitorEngine(simulator=simulator, history=history, gate=gate, initial=initial)


@lru_cache
def build_default_engine() -> MonitorEngine:
    """Factory that wires the engine from environment settings."""
    settings = get_settings()
    return create_engine(
        seed=settings.random_seed,
        capacity=settings.history_capacity,
        history_seed=settings.history_seed,
        initial_salinity=settings.initial_salinity,
        initial_temperature=settings.initial_temperature,
        sms_enabled=settings.sms_enabled_default,
        push_enabled=settings.push_enabled_default,
        phone_number=settings.default_phone,
    )
