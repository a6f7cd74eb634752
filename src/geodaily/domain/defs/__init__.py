"""Domain definition exports."""

from .country_def import CityDef, CountryDef, CountryStatsDef, UNKNOWN_STAT, flag_url_for

__all__ = [
    "CityDef",
    "CountryDef",
    "CountryStatsDef",
    "UNKNOWN_STAT",
    "flag_url_for",
]
