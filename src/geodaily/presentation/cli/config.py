"""CLI configuration helpers for preference persistence."""
from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Dict

from geodaily.core.types import DEFAULT_DIFFICULTY, DIFFICULTY_ORDER, Theme

_DEFAULT_THEME: Theme = "light"
_API_KEY_ENV = "GEODAILY_GEMINI_KEY"


def get_user_data_dir() -> Path:
    """Return the per-user data directory."""
    if os.name == "nt":
        base = os.environ.get("APPDATA")
        if base:
            return Path(base) / "GeoDaily"
        return Path.home() / "GeoDaily"
    return Path.home() / ".config" / "geodaily"


def get_default_config_path() -> Path:
    """Return the default per-user config path."""
    return get_user_data_dir() / "config.json"


def get_used_cities_path() -> Path:
    """Return the file holding the already-played city keys."""
    return get_user_data_dir() / "used_cities.json"


def _normalize_difficulty(value: object) -> str:
    return value if value in DIFFICULTY_ORDER else DEFAULT_DIFFICULTY


def _normalize_theme(value: object) -> Theme:
    return "dark" if value == "dark" else _DEFAULT_THEME


def _normalize_api_key(value: object) -> str:
    return value.strip() if isinstance(value, str) else ""


def _defaults() -> Dict[str, str]:
    return {"difficulty": DEFAULT_DIFFICULTY, "theme": _DEFAULT_THEME, "api_key": ""}


def load_config(path: Path | None = None) -> Dict[str, str]:
    """Load config from disk or return defaults."""
    config_path = path or get_default_config_path()
    try:
        raw = json.loads(config_path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return _defaults()
    except (OSError, ValueError):
        return _defaults()
    if not isinstance(raw, dict):
        return _defaults()
    return {
        "difficulty": _normalize_difficulty(raw.get("difficulty")),
        "theme": _normalize_theme(raw.get("theme")),
        "api_key": _normalize_api_key(raw.get("api_key")),
    }


def save_config(config: Dict[str, str], path: Path | None = None) -> None:
    """Persist config to disk."""
    config_path = path or get_default_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)
    payload = {
        "difficulty": _normalize_difficulty(config.get("difficulty")),
        "theme": _normalize_theme(config.get("theme")),
        "api_key": _normalize_api_key(config.get("api_key")),
    }
    config_path.write_text(json.dumps(payload, indent=2, sort_keys=True), encoding="utf-8")


def resolve_api_key(config: Dict[str, str]) -> str:
    """Environment key wins over the stored one."""
    return os.environ.get(_API_KEY_ENV, "").strip() or config.get("api_key", "")
