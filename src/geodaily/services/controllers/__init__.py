"""UI-agnostic controllers for game flow orchestration."""
from __future__ import annotations

from .phase_controller import PhaseController, PhaseView, PlayerCommand

__all__ = [
    "PhaseController",
    "PhaseView",
    "PlayerCommand",
]
