import pytest

from geodaily.core.rng import RNG
from geodaily.services.distractor_service import (
    format_count,
    format_money,
    generate_options,
    parse_stat_value,
)


@pytest.mark.parametrize("value", ["Unknown", "Data Pending", "N/A", "", "0", "$0.0 Billion"])
def test_no_data_values_yield_no_options(value: str) -> None:
    assert generate_options(value, RNG(1), is_money=value.startswith("$")) is None


def test_unparseable_value_yields_no_options() -> None:
    assert generate_options("lots of people", RNG(1)) is None


def test_parse_money_expands_magnitude() -> None:
    number, suffix = parse_stat_value("$107.4 Billion", is_money=True)
    assert number == pytest.approx(107_400_000_000)
    assert suffix == ""
    assert parse_stat_value("$2.0 Trillion", is_money=True) == (2_000_000_000_000.0, "")


def test_parse_count_keeps_unit_suffix() -> None:
    assert parse_stat_value("131,957 km²") == (131957.0, "km²")
    assert parse_stat_value("1,000,000") == (1_000_000.0, "")


def test_format_money_switches_to_trillion_at_one_thousand_billion() -> None:
    assert format_money(999_900_000_000) == "$999.9 Billion"
    assert format_money(1_000_000_000_000) == "$1.0 Trillion"
    assert format_money(2_400_000_000_000) == "$2.4 Trillion"


def test_format_count_groups_thousands() -> None:
    assert format_count(1234567.8) == "1,234,567"
    assert format_count(12000, "km²") == "12,000 km²"


def test_population_options_hold_truth_and_three_distinct_decoys() -> None:
    options = generate_options("1,000,000", RNG(5))

    assert options is not None
    assert len(options) == 4
    assert len(set(options)) == 4
    assert options.count("1,000,000") == 1
    for option in options:
        value = int(option.replace(",", ""))
        assert 600_000 <= value <= 1_400_000


def test_area_decoys_keep_unit_suffix() -> None:
    options = generate_options("131,957 km²", RNG(8))

    assert options is not None
    assert all(option.endswith(" km²") for option in options)


def test_trillion_gdp_never_formats_as_thousands_of_billions() -> None:
    for seed in range(25):
        options = generate_options("$2.0 Trillion", RNG(seed), is_money=True)
        assert options is not None
        assert "$2.0 Trillion" in options
        for option in options:
            assert option.endswith("Trillion")


def test_tiny_values_degrade_to_fewer_decoys() -> None:
    options = generate_options("1", RNG(2))

    assert options == ["1"]


def test_same_seed_gives_same_options() -> None:
    assert generate_options("$287.1 Billion", RNG(9), is_money=True) == generate_options(
        "$287.1 Billion", RNG(9), is_money=True
    )
