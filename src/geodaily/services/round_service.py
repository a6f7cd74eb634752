"""Round selection: difficulty-aware city picking and quiz construction."""
from __future__ import annotations

import logging
from typing import AbstractSet, Dict, List, MutableSet, Sequence, Tuple

from geodaily.core.rng import RNG
from geodaily.core.types import DEFAULT_DIFFICULTY, DIFFICULTY_ORDER, Difficulty
from geodaily.data.repositories import CountriesRepository
from geodaily.domain.defs import CityDef, CountryDef, flag_url_for
from geodaily.domain.round_models import CityCandidate, CityRound, FlagOption, QuizItem, Round
from geodaily.services.distractor_service import generate_options
from geodaily.services.errors import DatasetUnavailableError
from geodaily.services.factories import make_round_id

logger = logging.getLogger(__name__)

FLAG_OPTION_COUNT = 4

# (hint radius, snap radius) in metres keyed by capital status then country tier.
_CAPITAL_RADII: Dict[Difficulty, Tuple[int, int]] = {
    "easy": (100000, 12000),
    "medium": (80000, 10000),
}
_CAPITAL_RADII_DEFAULT = (60000, 8000)
_TOWN_RADII: Dict[Difficulty, Tuple[int, int]] = {
    "easy": (50000, 6000),
    "medium": (40000, 4000),
}
_TOWN_RADII_DEFAULT = (30000, 2500)


def effective_difficulty(country: CountryDef, city: CityDef) -> Difficulty:
    """Capitals keep the country tier; other cities are one tier harder, capped at extreme."""
    if city.is_capital:
        return country.difficulty
    index = DIFFICULTY_ORDER.index(country.difficulty)
    return DIFFICULTY_ORDER[min(index + 1, len(DIFFICULTY_ORDER) - 1)]


def radii_for(country: CountryDef, city: CityDef) -> Tuple[int, int]:
    """Return (hint radius, snap radius) for a city."""
    if city.is_capital:
        return _CAPITAL_RADII.get(country.difficulty, _CAPITAL_RADII_DEFAULT)
    return _TOWN_RADII.get(country.difficulty, _TOWN_RADII_DEFAULT)


def build_candidates(countries: Sequence[CountryDef]) -> List[CityCandidate]:
    """Flatten every (country, city) pair into a candidate with derived values."""
    pool: List[CityCandidate] = []
    for country in countries:
        for city in country.cities:
            hint_radius, snap_radius = radii_for(country, city)
            pool.append(
                CityCandidate(
                    country=country,
                    city=city,
                    difficulty=effective_difficulty(country, city),
                    hint_radius=hint_radius,
                    snap_radius=snap_radius,
                )
            )
    return pool


def filter_candidates(
    pool: Sequence[CityCandidate], difficulty: Difficulty, used_cities: AbstractSet[str]
) -> List[CityCandidate]:
    """Apply the tier filter and its fallbacks, then the used-city exclusion."""
    candidates = [candidate for candidate in pool if candidate.difficulty == difficulty]
    if not candidates:
        logger.debug("No '%s' cities; falling back to medium.", difficulty)
        candidates = [candidate for candidate in pool if candidate.difficulty == DEFAULT_DIFFICULTY]
    if not candidates:
        logger.warning("Difficulty filter returned zero results. Falling back to full city pool.")
        candidates = list(pool)

    available = [candidate for candidate in candidates if candidate.key not in used_cities]
    if candidates and not available:
        logger.debug("Every '%s' city has been used; allowing repeats for this round.", difficulty)
    return available or candidates


def build_stats_quiz(country: CountryDef, rng: RNG) -> Dict[str, QuizItem]:
    """Country questions in population, area, gdp order; invalid stats are left out."""
    quiz: Dict[str, QuizItem] = {}
    _add_quiz_item(quiz, "population", "What is the population size?", country.stats.population, rng)
    _add_quiz_item(quiz, "area", "What is the total area?", country.stats.area, rng)
    _add_quiz_item(quiz, "gdp", "What is the approximate GDP?", country.stats.gdp, rng, is_money=True)
    return quiz


def build_city_quiz(city: CityDef, rng: RNG) -> Dict[str, QuizItem]:
    quiz: Dict[str, QuizItem] = {}
    _add_quiz_item(quiz, "population", f"What is the population of {city.name}?", city.population, rng)
    return quiz


def _add_quiz_item(
    quiz: Dict[str, QuizItem],
    key: str,
    question: str,
    true_value: str,
    rng: RNG,
    *,
    is_money: bool = False,
) -> None:
    options = generate_options(true_value, rng, is_money=is_money)
    if options is None:
        return
    quiz[key] = QuizItem(question=question, correct=true_value, options=tuple(options))


def build_flag_options(country: CountryDef, countries: Sequence[CountryDef], rng: RNG) -> List[FlagOption]:
    """The correct flag plus up to three decoys with distinct codes, shuffled."""
    other_codes = sorted({other.code for other in countries if other.code != country.code})
    decoy_count = min(FLAG_OPTION_COUNT - 1, len(other_codes))
    options = [FlagOption(code=country.code, url=flag_url_for(country.code), is_correct=True)]
    for code in rng.sample(other_codes, decoy_count):
        options.append(FlagOption(code=code, url=flag_url_for(code), is_correct=False))
    rng.shuffle(options)
    return options


class RoundService:
    """Builds fresh rounds from the country dataset."""

    def __init__(self, countries_repo: CountriesRepository) -> None:
        self._countries_repo = countries_repo
        self._pool: List[CityCandidate] | None = None

    def countries(self) -> List[CountryDef]:
        return self._countries_repo.all()

    def candidate_pool(self) -> List[CityCandidate]:
        if self._pool is None:
            self._pool = build_candidates(self.countries())
        return self._pool

    def ensure_playable(self) -> int:
        """Load the dataset now and return the number of candidate cities."""
        pool = self.candidate_pool()
        if not pool:
            raise DatasetUnavailableError("The dataset contains no cities.")
        return len(pool)

    def select_round(self, difficulty: Difficulty, used_cities: MutableSet[str], rng: RNG) -> Round | None:
        """Pick a city for ``difficulty`` and return a fully built round.

        The chosen key is added to ``used_cities`` straight away, so a round that
        is abandoned still counts as used. Returns None only for an empty dataset.
        """
        pool = self.candidate_pool()
        selection = filter_candidates(pool, difficulty, used_cities)
        if not selection:
            logger.error("Critical error: No cities found in dataset.")
            return None

        chosen = rng.choice(selection)
        used_cities.add(chosen.key)
        country = chosen.country
        city = chosen.city
        logger.debug("Selected %s (%s) at tier %s.", chosen.key, chosen.difficulty, difficulty)

        return Round(
            round_id=make_round_id(rng),
            country=country.name,
            country_code=country.code,
            continent=country.continent,
            coordinates=country.coordinates,
            difficulty=chosen.difficulty,
            flag_options=build_flag_options(country, self.countries(), rng),
            stats_quiz=build_stats_quiz(country, rng),
            city=CityRound(
                name=city.name,
                coordinates=city.coordinates,
                stats_quiz=build_city_quiz(city, rng),
                hint_radius=chosen.hint_radius,
                snap_radius=chosen.snap_radius,
            ),
        )
