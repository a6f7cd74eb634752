"""Round aggregate: everything the phases of one challenge need."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Literal, Tuple

from geodaily.core.types import Coordinates, Difficulty
from geodaily.domain.defs import CityDef, CountryDef

EnrichmentStatus = Literal["pending", "ready", "unavailable"]

LOADING_HISTORICAL_FACT = "Loading interesting history..."
LOADING_HISTORY = "Loading context..."
UNAVAILABLE_HISTORICAL_FACT = "Could not load history."
UNAVAILABLE_HISTORY = "Could not load history."


@dataclass(slots=True)
class CityCandidate:
    """A city paired with its country and the per-round values derived from both."""

    country: CountryDef
    city: CityDef
    difficulty: Difficulty
    hint_radius: int
    snap_radius: int

    @property
    def key(self) -> str:
        return used_city_key(self.country.name, self.city.name)


def used_city_key(country_name: str, city_name: str) -> str:
    return f"{country_name}:{city_name}"


@dataclass(frozen=True, slots=True)
class QuizItem:
    """One multiple-choice stats question; options hold the correct value once."""

    question: str
    correct: str
    options: Tuple[str, ...]


@dataclass(frozen=True, slots=True)
class FlagOption:
    code: str
    url: str
    is_correct: bool


@dataclass(slots=True)
class PersonProfile:
    name: str
    role: str
    bio: str
    fact: str


def loading_person() -> PersonProfile:
    return PersonProfile(
        name="Loading...",
        role="Famous Figure",
        bio="We are finding a local legend...",
        fact="Did you know? loading...",
    )


def unavailable_person() -> PersonProfile:
    return PersonProfile(
        name="Unknown",
        role="Famous Figure",
        bio="Could not fetch data.",
        fact="Did you know? No story is available right now.",
    )


@dataclass(slots=True)
class CityRound:
    name: str
    coordinates: Coordinates
    stats_quiz: Dict[str, QuizItem]
    hint_radius: int
    snap_radius: int


@dataclass(slots=True)
class Round:
    """The live challenge; narrative fields start as placeholders until enrichment lands."""

    round_id: str
    country: str
    country_code: str
    continent: str
    coordinates: Coordinates
    difficulty: Difficulty
    flag_options: List[FlagOption]
    stats_quiz: Dict[str, QuizItem]
    city: CityRound
    historical_fact: str = LOADING_HISTORICAL_FACT
    person: PersonProfile = field(default_factory=loading_person)
    history: str = LOADING_HISTORY
    enrichment_status: EnrichmentStatus = "pending"
    person_facts: List[str] = field(default_factory=list)
    history_points: List[str] = field(default_factory=list)

    @property
    def key(self) -> str:
        return used_city_key(self.country, self.city.name)
