"""Repository exports."""

from .countries_repo import CountriesRepository

__all__ = [
    "CountriesRepository",
]
