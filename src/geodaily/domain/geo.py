"""Spherical geometry helpers shared by the hint and city-find logic."""
from __future__ import annotations

import math

from geodaily.core.types import Coordinates

EARTH_RADIUS_METERS = 6371000.0


def distance_meters(start: Coordinates, end: Coordinates) -> float:
    """Great-circle (haversine) distance between two (lat, lon) points."""
    lat1, lon1 = math.radians(start[0]), math.radians(start[1])
    lat2, lon2 = math.radians(end[0]), math.radians(end[1])
    sin_dlat = math.sin((lat2 - lat1) / 2)
    sin_dlon = math.sin((lon2 - lon1) / 2)
    a = sin_dlat * sin_dlat + math.cos(lat1) * math.cos(lat2) * sin_dlon * sin_dlon
    return 2 * EARTH_RADIUS_METERS * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def cardinal_direction(start: Coordinates, end: Coordinates) -> str:
    """Coarse bearing from start to end using the dominant axis only."""
    lat_diff = end[0] - start[0]
    lon_diff = end[1] - start[1]
    if abs(lat_diff) > abs(lon_diff):
        return "North" if lat_diff > 0 else "South"
    return "East" if lon_diff > 0 else "West"


def whole_kilometers(meters: float) -> int:
    """Round a distance to whole kilometres, halves rounding up."""
    return int(math.floor(meters / 1000 + 0.5))
