"""Country and city reference data loaded once at startup."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from geodaily.core.types import Coordinates, Difficulty

UNKNOWN_STAT = "Unknown"


@dataclass(frozen=True, slots=True)
class CityDef:
    """A city owned by exactly one country."""

    name: str
    coordinates: Coordinates
    population: str = UNKNOWN_STAT
    is_capital: bool = False


@dataclass(frozen=True, slots=True)
class CountryStatsDef:
    """Preformatted headline stats; any field may hold a no-data sentinel."""

    population: str = UNKNOWN_STAT
    area: str = UNKNOWN_STAT
    gdp: str = UNKNOWN_STAT


@dataclass(frozen=True, slots=True)
class CountryDef:
    """Describes a country, its cities and its recognizability tier."""

    name: str
    code: str
    continent: str
    coordinates: Coordinates
    stats: CountryStatsDef
    cities: Tuple[CityDef, ...]
    difficulty: Difficulty

    @property
    def flag_url(self) -> str:
        return flag_url_for(self.code)


def flag_url_for(code: str) -> str:
    """Return the flag image reference for a two-letter country code."""
    return f"https://flagcdn.com/w320/{code.lower()}.png"
