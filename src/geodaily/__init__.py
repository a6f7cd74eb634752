"""GeoDaily: a round-based geography quiz engine."""

__version__ = "0.1.0"
