"""Synthetic wrong-answer generation for numeric stats questions."""
from __future__ import annotations

import re
from typing import List

from geodaily.core.rng import RNG

NO_DATA_SENTINELS = frozenset({"", "Unknown", "Data Pending", "N/A"})

MIN_PERTURBATION = 0.6
MAX_PERTURBATION = 1.4
MAX_ATTEMPTS = 100
DECOY_COUNT = 3

_BILLION = 1_000_000_000
_TRILLION = 1_000_000_000_000
_MAGNITUDES = {"Billion": _BILLION, "Trillion": _TRILLION}
_VALUE_PATTERN = re.compile(r"^\s*\$?\s*(?P<number>[\d,]*\.?\d+)\s*(?P<rest>.*?)\s*$")


def parse_stat_value(value: str, *, is_money: bool = False) -> tuple[float, str] | None:
    """Return (base value, unit suffix) or None when the value carries no usable number.

    Money magnitude words are folded into the number so "$2.0 Trillion" parses
    to 2e12. Any other trailing text (e.g. "km²") is kept as the unit suffix.
    """
    if value is None or value.strip() in NO_DATA_SENTINELS:
        return None
    match = _VALUE_PATTERN.match(value)
    if match is None:
        return None
    try:
        number = float(match.group("number").replace(",", ""))
    except ValueError:
        return None
    if number == 0:
        return None
    rest = match.group("rest")
    suffix = rest
    for word, multiplier in _MAGNITUDES.items():
        if rest.startswith(word):
            suffix = rest[len(word):].strip()
            if is_money:
                number *= multiplier
            break
    return number, suffix


def format_money(amount: float) -> str:
    """Format a dollar amount as "$X.Y Billion", switching to Trillion at 1000 Billion."""
    billions = round(amount / _BILLION, 1)
    if billions >= 1000:
        return f"${amount / _TRILLION:.1f} Trillion"
    return f"${billions:.1f} Billion"


def format_count(amount: float, suffix: str = "") -> str:
    """Format a count as a comma-grouped integer with an optional unit suffix."""
    text = f"{int(amount):,}"
    if suffix:
        text = f"{text} {suffix}"
    return text


def generate_options(true_value: str, rng: RNG, *, is_money: bool = False) -> List[str] | None:
    """Build a shuffled option list holding ``true_value`` plus up to three decoys.

    Returns None when the value is a no-data sentinel, unparseable or zero so the
    caller can drop the question entirely.
    """
    parsed = parse_stat_value(true_value, is_money=is_money)
    if parsed is None:
        return None
    base, suffix = parsed

    options = [true_value]
    attempts = 0
    while len(options) < 1 + DECOY_COUNT and attempts < MAX_ATTEMPTS:
        attempts += 1
        fake = base * rng.uniform(MIN_PERTURBATION, MAX_PERTURBATION)
        decoy = format_money(fake) if is_money else format_count(fake, suffix)
        if decoy in options or _is_zero(decoy, is_money):
            continue
        options.append(decoy)

    rng.shuffle(options)
    return options


def _is_zero(text: str, is_money: bool) -> bool:
    parsed = parse_stat_value(text, is_money=is_money)
    return parsed is None
