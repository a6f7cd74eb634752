"""Repository for the country/city dataset."""
from __future__ import annotations

from typing import Dict, List

from geodaily.core.types import DIFFICULTY_ORDER, Coordinates
from geodaily.data.errors import DataValidationError
from geodaily.data.repositories.base import RepositoryBase
from geodaily.domain.defs import UNKNOWN_STAT, CityDef, CountryDef, CountryStatsDef


class CountriesRepository(RepositoryBase[CountryDef]):
    """Loads and validates the country dataset (a top-level JSON array)."""

    def __init__(self, base_path=None, *, url: str | None = None) -> None:
        super().__init__("countries.json", base_path, url=url)

    def _build(self, raw: object) -> Dict[str, CountryDef]:
        entries = self._require_list(raw, "countries.json")
        definitions: Dict[str, CountryDef] = {}
        for index, entry in enumerate(entries):
            country_map = self._require_mapping(entry, f"countries[{index}]")
            name = self._require_str(country_map.get("name"), f"countries[{index}].name").strip()
            if not name:
                raise DataValidationError(f"countries[{index}].name must not be empty.")
            if name in definitions:
                raise DataValidationError(f"Duplicate country '{name}'.")
            code = self._require_str(country_map.get("code"), f"country '{name}' code").strip().lower()
            if len(code) != 2:
                raise DataValidationError(f"country '{name}' code must be two letters.")
            difficulty = country_map.get("difficulty")
            if difficulty not in DIFFICULTY_ORDER:
                raise DataValidationError(
                    f"country '{name}' difficulty must be one of {', '.join(DIFFICULTY_ORDER)}."
                )
            continent = self._require_str(country_map.get("continent", ""), f"country '{name}' continent")
            coordinates = self._require_coordinates(
                country_map.get("coordinates"), f"country '{name}' coordinates"
            )
            stats = self._build_stats(country_map.get("stats", {}), name)
            cities = self._build_cities(country_map.get("cities"), name)
            definitions[name] = CountryDef(
                name=name,
                code=code,
                continent=continent,
                coordinates=coordinates,
                stats=stats,
                cities=tuple(cities),
                difficulty=difficulty,
            )
        return definitions

    def _build_stats(self, value: object, country_name: str) -> CountryStatsDef:
        stats_map = self._require_mapping(value, f"country '{country_name}' stats")
        return CountryStatsDef(
            population=self._stat_value(stats_map.get("population"), country_name, "population"),
            area=self._stat_value(stats_map.get("area"), country_name, "area"),
            gdp=self._stat_value(stats_map.get("gdp"), country_name, "gdp"),
        )

    def _build_cities(self, value: object, country_name: str) -> List[CityDef]:
        raw_cities = self._require_list(value, f"country '{country_name}' cities")
        cities: List[CityDef] = []
        for index, entry in enumerate(raw_cities):
            context = f"country '{country_name}' cities[{index}]"
            city_map = self._require_mapping(entry, context)
            name = self._require_str(city_map.get("name"), f"{context}.name").strip()
            if not name:
                raise DataValidationError(f"{context}.name must not be empty.")
            is_capital = city_map.get("is_capital", False)
            if not isinstance(is_capital, bool):
                raise DataValidationError(f"{context}.is_capital must be a boolean.")
            cities.append(
                CityDef(
                    name=name,
                    coordinates=self._require_coordinates(city_map.get("coordinates"), f"{context}.coordinates"),
                    population=self._stat_value(city_map.get("pop"), country_name, f"{name} pop"),
                    is_capital=is_capital,
                )
            )
        return cities

    @staticmethod
    def _stat_value(value: object, country_name: str, field: str) -> str:
        if value is None:
            return UNKNOWN_STAT
        if not isinstance(value, str):
            raise DataValidationError(f"country '{country_name}' {field} must be a string.")
        return value

    @staticmethod
    def _require_coordinates(value: object, context: str) -> Coordinates:
        if not isinstance(value, list) or len(value) != 2:
            raise DataValidationError(f"{context} must be a [lat, lon] pair.")
        lat, lon = value
        if isinstance(lat, bool) or isinstance(lon, bool) or not all(
            isinstance(part, (int, float)) for part in (lat, lon)
        ):
            raise DataValidationError(f"{context} must contain numbers.")
        return (float(lat), float(lon))
