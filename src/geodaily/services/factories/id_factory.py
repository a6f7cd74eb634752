"""Utilities for creating deterministic round identifiers."""
from __future__ import annotations

from itertools import count

from geodaily.core.rng import RNG

_sequence = count(1)


def make_round_id(rng: RNG) -> str:
    """Generate a round identifier that is unique within the process."""
    suffix = rng.randint(100000, 999999)
    return f"round_{next(_sequence)}_{suffix}"
