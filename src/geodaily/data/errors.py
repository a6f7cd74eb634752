"""Custom exceptions for data loading and validation."""


class DataError(Exception):
    """Base exception for the data layer."""


class DataLoadError(DataError):
    """Raised when the dataset is missing, unreachable or not valid JSON."""


class DataValidationError(DataError):
    """Raised when JSON content fails structural validation."""
