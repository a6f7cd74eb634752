import pytest

from geodaily.domain.phases import ROUND_PHASES, Phase, next_round_phase


def test_round_phases_follow_fixed_order() -> None:
    assert ROUND_PHASES[0] is Phase.COUNTRY_GUESS
    assert ROUND_PHASES[-1] is Phase.HISTORY
    assert next_round_phase(Phase.FLAG_GUESS) is Phase.STATS_COUNTRY
    assert next_round_phase(Phase.STATS_CITY) is Phase.HISTORICAL_FACT


def test_history_ends_the_round() -> None:
    assert next_round_phase(Phase.HISTORY) is None


@pytest.mark.parametrize("phase", [Phase.INTRO, Phase.LOADING])
def test_setup_phases_are_not_part_of_the_cycle(phase: Phase) -> None:
    with pytest.raises(ValueError):
        next_round_phase(phase)
