"""Hint generation for the country and city map phases."""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence

from geodaily.core.rng import RNG
from geodaily.core.types import Coordinates
from geodaily.domain.defs import CountryDef
from geodaily.domain.geo import cardinal_direction, distance_meters
from geodaily.domain.round_models import Round

CENTER_JITTER_DEGREES = 7.5
MIN_REGION_RADIUS_METERS = 1_500_000
REGION_RADIUS_SPREAD_METERS = 500_000
# Shorter identifiers are treated as codes and must match exactly.
MIN_FUZZY_MATCH_LENGTH = 3


@dataclass(frozen=True, slots=True)
class RegionHint:
    """A circle of candidate regions; the target is always one of them."""

    center: Coordinates
    radius_meters: float
    region_ids: List[str]


@dataclass(frozen=True, slots=True)
class CityHint:
    center: Coordinates
    radius_meters: int
    direction: str


def nearby_regions(round_: Round, countries: Sequence[CountryDef], rng: RNG) -> RegionHint:
    """Highlight countries around a jittered centre so the answer can't be read off the circle."""
    true_lat, true_lon = round_.coordinates
    center = (
        true_lat + rng.uniform(-CENTER_JITTER_DEGREES, CENTER_JITTER_DEGREES),
        true_lon + rng.uniform(-CENTER_JITTER_DEGREES, CENTER_JITTER_DEGREES),
    )
    radius = MIN_REGION_RADIUS_METERS + rng.random() * REGION_RADIUS_SPREAD_METERS

    region_ids = [
        country.name
        for country in countries
        if distance_meters(country.coordinates, center) < radius
    ]
    if round_.country not in region_ids:
        region_ids.append(round_.country)
    return RegionHint(center=center, radius_meters=radius, region_ids=region_ids)


def city_hint(round_: Round, view_center: Coordinates | None = None) -> CityHint:
    """Circle around the true city plus the rough direction from where the player is looking."""
    origin = view_center if view_center is not None else round_.coordinates
    return CityHint(
        center=round_.city.coordinates,
        radius_meters=round_.city.hint_radius,
        direction=cardinal_direction(origin, round_.city.coordinates),
    )


def matches_country(identifier: str, round_: Round) -> bool:
    """Loose match of a clicked region against the target country.

    Accepts the two-letter code or the name, and tolerates either name
    containing the other to absorb naming mismatches between map and dataset.
    Identifiers shorter than ``MIN_FUZZY_MATCH_LENGTH`` skip the containment
    check and must equal the name or code, so "NI" does not match "NIGERIA"
    through containment.
    """
    clicked = identifier.strip().upper()
    if not clicked:
        return False
    target_name = round_.country.upper()
    if clicked == target_name or clicked == round_.country_code.upper():
        return True
    if len(clicked) < MIN_FUZZY_MATCH_LENGTH:
        return False
    return clicked in target_name or target_name in clicked
