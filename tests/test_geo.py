import math

import pytest

from geodaily.domain.geo import EARTH_RADIUS_METERS, cardinal_direction, distance_meters, whole_kilometers


def test_one_degree_of_longitude_at_equator() -> None:
    expected = EARTH_RADIUS_METERS * math.pi / 180
    assert distance_meters((0.0, 0.0), (0.0, 1.0)) == pytest.approx(expected)


def test_distance_is_symmetric_and_zero_on_same_point() -> None:
    paris = (48.8566, 2.3522)
    lyon = (45.764, 4.8357)

    assert distance_meters(paris, paris) == 0
    assert distance_meters(paris, lyon) == pytest.approx(distance_meters(lyon, paris))
    assert 390_000 < distance_meters(paris, lyon) < 395_000


@pytest.mark.parametrize(
    "end, expected",
    [
        ((5.0, 1.0), "North"),
        ((-5.0, 1.0), "South"),
        ((1.0, 5.0), "East"),
        ((1.0, -5.0), "West"),
    ],
)
def test_cardinal_direction_uses_dominant_axis(end: tuple, expected: str) -> None:
    assert cardinal_direction((0.0, 0.0), end) == expected


def test_whole_kilometers_rounds_half_up() -> None:
    assert whole_kilometers(2499.9) == 2
    assert whole_kilometers(2500) == 3
    assert whole_kilometers(0) == 0
