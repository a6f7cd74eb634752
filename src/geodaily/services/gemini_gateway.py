"""Gemini-backed enrichment gateway."""
from __future__ import annotations

import logging
import textwrap
from typing import Any, Dict, List

import requests

from geodaily.domain.state import FollowUpKind
from geodaily.services.enrichment_service import (
    EnrichmentGateway,
    FollowUpContext,
    parse_structured_text,
)
from geodaily.services.errors import EnrichmentError

logger = logging.getLogger(__name__)

API_ROOT = "https://generativelanguage.googleapis.com/v1beta/models"
DEFAULT_MODEL = "gemini-2.5-flash"
REQUEST_TIMEOUT_SECONDS = 30


def enrichment_prompt(country: str, city: str) -> str:
    return textwrap.dedent(
        f"""\
        Context: The user is playing a geography game about {city}, {country}.

        We already have the stats. We need the cultural and historical "flavor" text.

        Return ONLY valid JSON with this structure:
        {{
            "historical_fact": "A fascinating, single-sentence historical fact about {city} (or {country} if city is obscure).",
            "person": {{
                "name": "Name of a famous person from or associated with {city} or {country}",
                "role": "e.g. Physicist / Musician",
                "fact": "Did you know? [Insert a very specific, surprising, less known fact about them].",
                "bio": "A short 2 sentence bio."
            }},
            "history": "A very brief (2-3 sentences) historical summary of the city/country context."
        }}

        IMPORTANT:
        - 'fact' must start with "Did you know?".
        - Make the content educational and interesting.
        """
    )


def follow_up_prompt(context: FollowUpContext, kind: FollowUpKind) -> str:
    if kind == "MORE_INFO":
        return (
            f"Tell me 3 more specific, fascinating, and lesser-known facts about {context.person_name} "
            f"({context.person_role}) from {context.city}. "
            'Return as valid JSON: { "facts": ["fact1", "fact2", "fact3"] }'
        )
    if kind == "OTHER_PERSON":
        return (
            f"Name another DIFFERENT famous person from {context.city}, {context.country} "
            f"(NOT {context.person_name}). "
            'Return valid JSON: { "name": "Name", "role": "Role", "fact": "Did you know? [Fact]", "bio": "Short bio" }'
        )
    if kind == "HISTORY_DEEP_DIVE":
        return (
            f"Provide a detailed, interesting, 5-point historical summary of {context.country}, "
            "strictly focusing on lesser known events or specific interesting eras. "
            'Return as valid JSON: { "points": ["point1", "point2", "point3", "point4", "point5"] }'
        )
    raise ValueError(f"Unknown follow-up kind: {kind}")


class GeminiGateway(EnrichmentGateway):
    """Calls the generateContent endpoint and asks for JSON-only replies."""

    def __init__(
        self,
        api_key: str,
        *,
        model: str = DEFAULT_MODEL,
        session: requests.Session | None = None,
        timeout: float = REQUEST_TIMEOUT_SECONDS,
    ) -> None:
        if not api_key:
            raise ValueError("An API key is required.")
        self._api_key = api_key
        self._model = model
        self._session = session or requests.Session()
        self._timeout = timeout

    @property
    def model(self) -> str:
        return self._model

    def enrich(self, country: str, city: str) -> Dict[str, Any]:
        return self._generate(enrichment_prompt(country, city))

    def follow_up(self, context: FollowUpContext, kind: FollowUpKind) -> Dict[str, Any]:
        return self._generate(follow_up_prompt(context, kind))

    def list_models(self) -> List[str]:
        """Return the gemini model names visible to this key."""
        try:
            resp = self._session.get(API_ROOT, params={"key": self._api_key}, timeout=self._timeout)
            resp.raise_for_status()
            data = resp.json()
        except (requests.RequestException, ValueError) as exc:
            raise EnrichmentError(f"Could not list models: {exc}") from exc
        names = [
            str(entry.get("name", "")).replace("models/", "")
            for entry in data.get("models", [])
            if isinstance(entry, dict)
        ]
        return [name for name in names if "gemini" in name]

    def _generate(self, prompt: str) -> Dict[str, Any]:
        body = {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": {"responseMimeType": "application/json"},
        }
        url = f"{API_ROOT}/{self._model}:generateContent"
        try:
            resp = self._session.post(url, params={"key": self._api_key}, json=body, timeout=self._timeout)
        except requests.RequestException as exc:
            logger.warning("Enrichment request failed: %s", exc)
            raise EnrichmentError(f"Enrichment request failed: {exc}") from exc
        if not resp.ok:
            logger.warning("Enrichment request returned HTTP %s for model %s.", resp.status_code, self._model)
            raise EnrichmentError(f"Enrichment request failed with HTTP {resp.status_code}.")
        try:
            data = resp.json()
            text = data["candidates"][0]["content"]["parts"][0]["text"]
        except (ValueError, KeyError, IndexError, TypeError) as exc:
            raise EnrichmentError("Unexpected response shape from the provider.") from exc
        return parse_structured_text(text)
