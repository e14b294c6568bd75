"""Unit tests for salinity classification."""

from __future__ import annotations

import pytest

from services.classifier import (
    ADVISORIES,
    BRACKISH,
    FRESHWATER,
    HIGH_SALINITY,
    AdvisoryKind,
    classify,
)


@pytest.mark.parametrize(
    ("salinity", "expected"),
    [
        (0.1, AdvisoryKind.freshwater),
        (2.0, AdvisoryKind.freshwater),
        (2.0001, AdvisoryKind.brackish),
        (10.0, AdvisoryKind.brackish),
        (10.0001, AdvisoryKind.high_salinity),
        (12.0, AdvisoryKind.high_salinity),
    ],
)
def test_classify_boundaries_include_upper_edge_in_lower_tier(
    salinity: float, expected: AdvisoryKind
) -> None:
    assert classify(salinity).kind is expected


def test_species_advisories_list_suitable_species() -> None:
    assert "Tilapia" in FRESHWATER.species
    assert "Bangus" in BRACKISH.species
    assert FRESHWATER.description.startswith("Available: Tilapia")
    assert not FRESHWATER.is_warning


def test_high_salinity_warns_without_species() -> None:
    advisory = classify(11.5)

    assert advisory is HIGH_SALINITY
    assert advisory.species == ()
    assert advisory.is_warning
    assert "Saltwater Intrusion" in advisory.description
    assert advisory.icon == "alert-triangle"


def test_every_kind_has_an_advisory() -> None:
    assert set(ADVISORIES) == set(AdvisoryKind)
    for kind, advisory in ADVISORIES.items():
        assert advisory.kind is kind
