"""Low-level JSON helpers for repositories."""
from __future__ import annotations

import json
from pathlib import Path

import requests

from .errors import DataLoadError

_FETCH_TIMEOUT_SECONDS = 20


def load_json(path: Path) -> object:
    """Load JSON from disk and raise DataLoadError on failure."""
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise DataLoadError(f"Dataset file not found: {path}") from exc
    except OSError as exc:
        raise DataLoadError(f"Unable to read dataset file: {path}") from exc

    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise DataLoadError(f"Invalid JSON in {path}: {exc}") from exc


def fetch_json(url: str, *, session: requests.Session | None = None) -> object:
    """Fetch a JSON document over HTTP and raise DataLoadError on failure."""
    http = session or requests.Session()
    try:
        resp = http.get(url, timeout=_FETCH_TIMEOUT_SECONDS)
        resp.raise_for_status()
    except requests.RequestException as exc:
        raise DataLoadError(f"Unable to fetch dataset from {url}: {exc}") from exc
    try:
        return resp.json()
    except ValueError as exc:
        raise DataLoadError(f"Invalid JSON from {url}: {exc}") from exc
