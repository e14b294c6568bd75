"""Fixed-capacity reading history for trend charts."""

from __future__ import annotations

from collections import deque
from datetime import datetime, timedelta
from typing import Deque, Iterable, List, Optional, Sequence

from models.records import SALINITY_MAX, SALINITY_MIN, Reading
from services.simulator import clamp, format_time_label

SEED_SALINITY = (0.5, 0.8, 1.2, 1.4, 1.6, 1.5, 1.5)


class TimeSeriesBuffer:
    """Chronological window of the most recent ``capacity`` readings."""

    def __init__(self, capacity: int = 7, readings: Iterable[Reading] = ()) -> None:
        if capacity < 1:
            raise ValueError("History capacity must be at least 1.")
        self.capacity = capacity
        self._readings: Deque[Reading] = deque(maxlen=capacity)
        for reading in readings:
            self.append(reading)

    def __len__(self) -> int:
        return len(self._readings)

    def append(self, reading: Reading) -> None:
        # deque(maxlen=...) drops exactly the leftmost entry when full.
        self._readings.append(reading)

    def snapshot(self, count: Optional[int] = None) -> List[Reading]:
        """Return the window, or only its last ``count`` entries, as a new list."""
        readings = list(self._readings)
        if count is None:
            return readings
        if count <= 0:
            return []
        return readings[-count:]

    def latest(self) -> Optional[Reading]:
        return self._readings[-1] if self._readings else None


def _trimmed_values(capacity: int, salinity: Optional[float] = None) -> Sequence[float]:
    """Tail of the seed curve, shifted so its last value equals ``salinity``."""
    values = SEED_SALINITY[-capacity:]
    if salinity is None:
        return values
    shift = salinity - values[-1]
    return [round(clamp(value + shift, SALINITY_MIN, SALINITY_MAX), 3) for value in values]


def static_seed(capacity: int, temperature: float, salinity: Optional[float] = None) -> List[Reading]:
    """Plausible starting history with relative labels ending at ``now``."""
    values = _trimmed_values(capacity, salinity)
    readings = []
    for offset, value in zip(range(len(values) - 1, -1, -1), values):
        label = "now" if offset == 0 else f"-{offset} min"
        readings.append(Reading(timestamp_label=label, salinity=value, temperature=temperature))
    return readings


def clock_seed(
    capacity: int, temperature: float, now: datetime, salinity: Optional[float] = None
) -> List[Reading]:
    """Same starting values labelled one minute apart, ending at ``now``."""
    values = _trimmed_values(capacity, salinity)
    readings = []
    for offset, value in zip(range(len(values) - 1, -1, -1), values):
        moment = now - timedelta(minutes=offset)
        readings.append(
            Reading(
                timestamp_label=format_time_label(moment),
                salinity=value,
                temperature=temperature,
            )
        )
    return readings


def seed_history(
    mode: str,
    capacity: int,
    temperature: float,
    now: Optional[datetime] = None,
    salinity: Optional[float] = None,
) -> List[Reading]:
    if mode == "empty":
        return []
    if mode == "clock":
        return clock_seed(capacity, temperature, now or datetime.now(), salinity)
    if mode == "static":
        return static_seed(capacity, temperature, salinity)
    raise ValueError(f"Unknown history seed mode {mode!r}.")
