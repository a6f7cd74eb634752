"""Narrative enrichment: provider contract, background dispatch and payload merging."""
from __future__ import annotations

import json
import logging
from concurrent.futures import Executor
from dataclasses import dataclass
from typing import Any, Dict, List

from geodaily.domain.round_models import (
    UNAVAILABLE_HISTORICAL_FACT,
    UNAVAILABLE_HISTORY,
    PersonProfile,
    Round,
    unavailable_person,
)
from geodaily.domain.state import FollowUpKind, PendingRequest
from geodaily.services.errors import EnrichmentError

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class FollowUpContext:
    """What a follow-up prompt needs to know about the live round."""

    country: str
    city: str
    person_name: str
    person_role: str

    @classmethod
    def from_round(cls, round_: Round) -> "FollowUpContext":
        return cls(
            country=round_.country,
            city=round_.city.name,
            person_name=round_.person.name,
            person_role=round_.person.role,
        )


class EnrichmentGateway:
    """Contract for a generative text provider; implementations may block."""

    def enrich(self, country: str, city: str) -> Dict[str, Any]:
        """Return {historical_fact, person{name, role, bio, fact}, history}."""
        raise NotImplementedError

    def follow_up(self, context: FollowUpContext, kind: FollowUpKind) -> Dict[str, Any]:
        """Return {facts: [...]}, a person record, or {points: [...]} depending on ``kind``."""
        raise NotImplementedError


def parse_structured_text(text: str) -> Dict[str, Any]:
    """Parse model output as a JSON object, falling back to the outermost {...} span."""
    try:
        parsed = json.loads(text)
    except (TypeError, ValueError):
        start = text.find("{") if isinstance(text, str) else -1
        end = text.rfind("}") if isinstance(text, str) else -1
        if start == -1 or end <= start:
            raise EnrichmentError("Response did not contain a JSON object.") from None
        try:
            parsed = json.loads(text[start : end + 1])
        except ValueError as exc:
            raise EnrichmentError(f"Response JSON could not be parsed: {exc}") from exc
    if not isinstance(parsed, dict):
        raise EnrichmentError("Response JSON must be an object.")
    return parsed


def parse_person(payload: object) -> PersonProfile:
    if not isinstance(payload, dict):
        raise EnrichmentError("person must be an object.")
    name = payload.get("name")
    if not isinstance(name, str) or not name.strip():
        raise EnrichmentError("person.name must be a non-empty string.")
    fields: Dict[str, str] = {}
    for key in ("role", "bio", "fact"):
        value = payload.get(key, "")
        if not isinstance(value, str):
            raise EnrichmentError(f"person.{key} must be a string.")
        fields[key] = value
    return PersonProfile(name=name.strip(), **fields)


def parse_string_list(payload: Dict[str, Any], key: str) -> List[str]:
    values = payload.get(key)
    if not isinstance(values, list) or not values:
        raise EnrichmentError(f"'{key}' must be a non-empty list.")
    if not all(isinstance(value, str) for value in values):
        raise EnrichmentError(f"'{key}' entries must be strings.")
    return list(values)


def _require_text(payload: Dict[str, Any], key: str) -> str:
    value = payload.get(key)
    if not isinstance(value, str) or not value.strip():
        raise EnrichmentError(f"'{key}' must be a non-empty string.")
    return value


def apply_enrichment(round_: Round, payload: Dict[str, Any]) -> None:
    """Validate the whole payload first, then overwrite the narrative fields in place."""
    historical_fact = _require_text(payload, "historical_fact")
    history = _require_text(payload, "history")
    person = parse_person(payload.get("person"))
    round_.historical_fact = historical_fact
    round_.history = history
    round_.person = person
    round_.person_facts = []
    round_.enrichment_status = "ready"


def mark_unavailable(round_: Round) -> None:
    round_.historical_fact = UNAVAILABLE_HISTORICAL_FACT
    round_.history = UNAVAILABLE_HISTORY
    round_.person = unavailable_person()
    round_.person_facts = []
    round_.enrichment_status = "unavailable"


class EnrichmentService:
    """Dispatches provider calls to an executor and hands back round-tagged requests."""

    def __init__(self, executor: Executor, gateway: EnrichmentGateway | None = None) -> None:
        self._executor = executor
        self._gateway = gateway

    @property
    def has_gateway(self) -> bool:
        return self._gateway is not None

    def configure(self, gateway: EnrichmentGateway | None) -> None:
        self._gateway = gateway

    def request_enrichment(self, round_: Round) -> PendingRequest:
        gateway = self._require_gateway()
        logger.debug("Fetching enrichment for %s.", round_.key)
        future = self._executor.submit(gateway.enrich, round_.country, round_.city.name)
        return PendingRequest(round_id=round_.round_id, kind="ENRICH", future=future)

    def request_follow_up(self, round_: Round, kind: FollowUpKind) -> PendingRequest:
        gateway = self._require_gateway()
        context = FollowUpContext.from_round(round_)
        logger.debug("Fetching %s follow-up for %s.", kind, round_.key)
        future = self._executor.submit(gateway.follow_up, context, kind)
        return PendingRequest(
            round_id=round_.round_id,
            kind=kind,
            future=future,
            person_name=context.person_name,
        )

    def _require_gateway(self) -> EnrichmentGateway:
        if self._gateway is None:
            raise EnrichmentError("No enrichment provider is configured.")
        return self._gateway
