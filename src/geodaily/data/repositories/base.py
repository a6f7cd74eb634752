"""Base repository implementation for JSON reference data."""
from __future__ import annotations

from pathlib import Path
from typing import Dict, Generic, TypeVar

from geodaily.data.errors import DataValidationError
from geodaily.data.json_loader import fetch_json, load_json
from geodaily.data import paths

T = TypeVar("T")


class RepositoryBase(Generic[T]):
    """Common caching and loading behavior for repositories."""

    def __init__(
        self,
        filename: str,
        base_path: Path | str | None = None,
        *,
        url: str | None = None,
    ) -> None:
        self._filename = filename
        self._base_path = Path(base_path) if base_path is not None else None
        self._url = url
        self._definitions: Dict[str, T] | None = None

    def _get_file_path(self) -> Path:
        definitions_dir = paths.get_definitions_path(self._base_path)
        return definitions_dir / self._filename

    def _load_raw(self) -> object:
        if self._url is not None:
            return fetch_json(self._url)
        return load_json(self._get_file_path())

    def _build(self, raw: object) -> Dict[str, T]:
        """Convert raw JSON into typed definitions keyed by id."""
        raise NotImplementedError

    def _ensure_loaded(self) -> None:
        if self._definitions is None:
            raw = self._load_raw()
            self._definitions = self._build(raw)

    def all(self) -> list[T]:
        """Return all definitions sorted deterministically by id."""
        self._ensure_loaded()
        assert self._definitions is not None
        return [self._definitions[key] for key in sorted(self._definitions.keys())]

    @staticmethod
    def _require_mapping(value: object, context: str) -> dict[str, object]:
        if not isinstance(value, dict):
            raise DataValidationError(f"{context} must be an object/dict.")
        return value

    @staticmethod
    def _require_list(value: object, context: str) -> list[object]:
        if not isinstance(value, list):
            raise DataValidationError(f"{context} must be a list.")
        return value

    @staticmethod
    def _require_str(value: object, context: str) -> str:
        if not isinstance(value, str):
            raise DataValidationError(f"{context} must be a string.")
        return value
