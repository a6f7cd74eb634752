"""Service-layer exceptions."""


class DatasetUnavailableError(Exception):
    """Raised when no country/city pair can be selected at all."""


class EnrichmentError(Exception):
    """Raised when the narrative provider fails or returns unusable content."""
