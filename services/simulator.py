"""Random-walk sensor simulator."""

from __future__ import annotations

import random
from datetime import datetime
from typing import Callable, Optional

from models.records import (
    SALINITY_MAX,
    SALINITY_MIN,
    TEMPERATURE_MAX,
    TEMPERATURE_MIN,
    Reading,
)

SALINITY_STEP = 0.3
TEMPERATURE_STEP = 0.1

Clock = Callable[[], datetime]


def clamp(value: float, lower: float, upper: float) -> float:
    return max(lower, min(upper, value))


def format_time_label(moment: datetime) -> str:
    """Render ``moment`` as ``h:MM AM`` for chart axes."""
    hour = moment.hour % 12 or 12
    suffix = "AM" if moment.hour < 12 else "PM"
    return f"{hour}:{moment.minute:02d} {suffix}"


class Simulator:
    """Produces readings that wander from the previous one by a bounded step.

    Both the random source and the clock are injectable so that a fixed seed
    and a fake clock reproduce the exact same sequence of readings.
    """

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        self.rng = rng if rng is not None else random.Random()
        self.clock: Clock = clock if clock is not None else datetime.now

    def tick(self, prev_salinity: float, prev_temperature: float) -> Reading:
        salinity_delta = (self.rng.uniform(0, 1) - 0.5) * SALINITY_STEP
        temperature_delta = (self.rng.uniform(0, 1) - 0.5) * TEMPERATURE_STEP
        return Reading(
            timestamp_label=format_time_label(self.clock()),
            salinity=clamp(prev_salinity + salinity_delta, SALINITY_MIN, SALINITY_MAX),
            temperature=clamp(
                prev_temperature + temperature_delta, TEMPERATURE_MIN, TEMPERATURE_MAX
            ),
        )


def build_simulator(seed: Optional[int] = None, clock: Optional[Clock] = None) -> Simulator:
    return Simulator(rng=random.Random(seed), clock=clock)
