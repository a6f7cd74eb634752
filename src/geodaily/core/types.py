"""Shared type aliases for the core and domain layers."""
from typing import Literal, Tuple

Difficulty = Literal["easy", "medium", "hard", "extreme"]
Theme = Literal["light", "dark"]
Severity = Literal["success", "error", "info", "critical"]
Coordinates = Tuple[float, float]

DIFFICULTY_ORDER: Tuple[Difficulty, ...] = ("easy", "medium", "hard", "extreme")
DEFAULT_DIFFICULTY: Difficulty = "medium"

__all__ = [
    "Coordinates",
    "DEFAULT_DIFFICULTY",
    "DIFFICULTY_ORDER",
    "Difficulty",
    "Severity",
    "Theme",
]
