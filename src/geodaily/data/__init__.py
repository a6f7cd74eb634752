"""Data layer utilities for loading the country dataset."""

from .errors import DataLoadError, DataValidationError
from .paths import get_definitions_path, get_repo_root

__all__ = [
    "DataLoadError",
    "DataValidationError",
    "get_definitions_path",
    "get_repo_root",
]
