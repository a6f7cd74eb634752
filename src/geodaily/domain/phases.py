"""Gameplay phases and their fixed forward order."""
from __future__ import annotations

from enum import Enum
from typing import Tuple


class Phase(Enum):
    """The single active step of the game."""

    INTRO = "INTRO"
    LOADING = "LOADING"
    COUNTRY_GUESS = "COUNTRY_GUESS"
    FLAG_GUESS = "FLAG_GUESS"
    STATS_COUNTRY = "STATS_COUNTRY"
    CITY_FIND = "CITY_FIND"
    STATS_CITY = "STATS_CITY"
    HISTORICAL_FACT = "HISTORICAL_FACT"
    PERSON_GUESS = "PERSON_GUESS"
    HISTORY = "HISTORY"


ROUND_PHASES: Tuple[Phase, ...] = (
    Phase.COUNTRY_GUESS,
    Phase.FLAG_GUESS,
    Phase.STATS_COUNTRY,
    Phase.CITY_FIND,
    Phase.STATS_CITY,
    Phase.HISTORICAL_FACT,
    Phase.PERSON_GUESS,
    Phase.HISTORY,
)

NARRATIVE_PHASES: Tuple[Phase, ...] = (
    Phase.HISTORICAL_FACT,
    Phase.PERSON_GUESS,
    Phase.HISTORY,
)


def next_round_phase(phase: Phase) -> Phase | None:
    """Return the phase after ``phase`` in the round, or None once the round is over."""
    if phase not in ROUND_PHASES:
        raise ValueError(f"{phase.value} is not part of the round cycle.")
    index = ROUND_PHASES.index(phase)
    if index + 1 < len(ROUND_PHASES):
        return ROUND_PHASES[index + 1]
    return None
