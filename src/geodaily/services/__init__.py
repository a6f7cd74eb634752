"""Service layer exports."""

from .errors import DatasetUnavailableError, EnrichmentError
from .enrichment_service import EnrichmentGateway, EnrichmentService, FollowUpContext
from .round_service import RoundService
from .controllers import PhaseController, PhaseView, PlayerCommand

__all__ = [
    "DatasetUnavailableError",
    "EnrichmentError",
    "EnrichmentGateway",
    "EnrichmentService",
    "FollowUpContext",
    "PhaseController",
    "PhaseView",
    "PlayerCommand",
    "RoundService",
]
