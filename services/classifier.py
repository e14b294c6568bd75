"""Salinity advisory classification."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Tuple

FRESHWATER_MAX_PPT = 2.0
BRACKISH_MAX_PPT = 10.0


class AdvisoryKind(str, Enum):
    """Closed set of advisory categories, ordered by rising salinity."""

    freshwater = "Freshwater"
    brackish = "Brackish"
    high_salinity = "HighSalinity"


@dataclass(frozen=True, slots=True)
class Advisory:
    kind: AdvisoryKind
    message: str
    description: str
    species: Tuple[str, ...]
    color: str
    icon: str

    @property
    def is_warning(self) -> bool:
        return self.kind is AdvisoryKind.high_salinity


def _species_advisory(
    kind: AdvisoryKind, message: str, species: Tuple[str, ...], color: str
) -> Advisory:
    return Advisory(
        kind=kind,
        message=message,
        description=f"Available: {', '.join(species)}",
        species=species,
        color=color,
        icon="fish",
    )


FRESHWATER = _species_advisory(
    AdvisoryKind.freshwater,
    "LOW SALT CONTENT",
    ("Tilapia", "Hito", "Dalag", "Gurami", "Ayungin", "Martiniko", "Biya", "Carpa"),
    "from-emerald-400 via-emerald-500 to-teal-600",
)

BRACKISH = _species_advisory(
    AdvisoryKind.brackish,
    "MODERATE SALT",
    ("Bangus", "Apahap", "Kanduli", "Hipon", "Sugpo", "Talangka"),
    "from-sky-400 via-blue-500 to-sky-600",
)

HIGH_SALINITY = Advisory(
    kind=AdvisoryKind.high_salinity,
    message="HIGH SALT CONTENT",
    description="Warning: Saltwater Intrusion (Risk of Fish Kill)",
    species=(),
    color="from-orange-400 via-red-500 to-pink-600",
    icon="alert-triangle",
)

ADVISORIES: Mapping[AdvisoryKind, Advisory] = {
    AdvisoryKind.freshwater: FRESHWATER,
    AdvisoryKind.brackish: BRACKISH,
    AdvisoryKind.high_salinity: HIGH_SALINITY,
}


def classify(salinity: float) -> Advisory:
    """Map a salinity value (ppt) to its advisory; lower tiers include their upper bound."""
    if salinity <= FRESHWATER_MAX_PPT:
        return FRESHWATER
    if salinity <= BRACKISH_MAX_PPT:
        return BRACKISH
    return HIGH_SALINITY
