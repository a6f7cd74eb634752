"""File-system store for the set of already-played cities."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Set

from geodaily.presentation.cli import config


class UsedCitiesStore:
    """Keeps ``"country:city"`` keys across sessions as a JSON array."""

    def __init__(self, path: Path | str | None = None) -> None:
        self._path = Path(path) if path is not None else config.get_used_cities_path()

    def load(self) -> Set[str]:
        """Return the stored keys; a missing or unreadable file counts as empty."""
        try:
            payload = json.loads(self._path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return set()
        except (OSError, ValueError):
            return set()
        if not isinstance(payload, list):
            return set()
        return {entry for entry in payload if isinstance(entry, str)}

    def save(self, keys: Set[str]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps(sorted(keys), indent=2), encoding="utf-8")

    def reset(self) -> None:
        try:
            self._path.unlink()
        except FileNotFoundError:
            return
