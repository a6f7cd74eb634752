"""Factory helpers for runtime entities."""

from .id_factory import make_round_id

__all__ = [
    "make_round_id",
]
