import json
from typing import Any, Dict, List

import pytest
import requests

from geodaily.services.enrichment_service import FollowUpContext
from geodaily.services.errors import EnrichmentError
from geodaily.services.gemini_gateway import API_ROOT, DEFAULT_MODEL, GeminiGateway, follow_up_prompt


class _FakeResponse:
    def __init__(self, payload: Any, status: int = 200) -> None:
        self._payload = payload
        self.status_code = status

    @property
    def ok(self) -> bool:
        return self.status_code < 400

    def raise_for_status(self) -> None:
        if not self.ok:
            raise requests.HTTPError(f"HTTP {self.status_code}")

    def json(self) -> Any:
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


class _FakeSession:
    def __init__(self, response: _FakeResponse | None = None, error: Exception | None = None) -> None:
        self.response = response
        self.error = error
        self.posts: List[Dict[str, Any]] = []
        self.gets: List[Dict[str, Any]] = []

    def post(self, url: str, **kwargs: Any) -> _FakeResponse:
        self.posts.append({"url": url, **kwargs})
        if self.error is not None:
            raise self.error
        return self.response

    def get(self, url: str, **kwargs: Any) -> _FakeResponse:
        self.gets.append({"url": url, **kwargs})
        if self.error is not None:
            raise self.error
        return self.response


def _model_reply(obj: Dict[str, Any]) -> Dict[str, Any]:
    return {"candidates": [{"content": {"parts": [{"text": json.dumps(obj)}]}}]}


def test_enrich_posts_json_request_and_parses_reply() -> None:
    session = _FakeSession(_FakeResponse(_model_reply({"history": "h"})))
    gateway = GeminiGateway("secret", session=session)

    payload = gateway.enrich("Varos", "Port Varos")

    assert payload == {"history": "h"}
    call = session.posts[0]
    assert call["url"] == f"{API_ROOT}/{DEFAULT_MODEL}:generateContent"
    assert call["params"] == {"key": "secret"}
    assert call["json"]["generationConfig"] == {"responseMimeType": "application/json"}
    assert "Port Varos, Varos" in call["json"]["contents"][0]["parts"][0]["text"]


def test_http_error_raises_enrichment_error() -> None:
    session = _FakeSession(_FakeResponse({"error": "quota"}, status=429))
    gateway = GeminiGateway("secret", session=session)
    with pytest.raises(EnrichmentError):
        gateway.enrich("Varos", "Port Varos")


def test_transport_error_raises_enrichment_error() -> None:
    session = _FakeSession(error=requests.ConnectionError("offline"))
    gateway = GeminiGateway("secret", session=session)
    with pytest.raises(EnrichmentError):
        gateway.enrich("Varos", "Port Varos")


def test_unexpected_shape_raises_enrichment_error() -> None:
    session = _FakeSession(_FakeResponse({"candidates": []}))
    gateway = GeminiGateway("secret", session=session)
    with pytest.raises(EnrichmentError):
        gateway.enrich("Varos", "Port Varos")


def test_follow_up_prompts_name_the_person() -> None:
    context = FollowUpContext(country="Varos", city="Port Varos", person_name="Ana Pella", person_role="Poet")

    assert "Ana Pella (Poet)" in follow_up_prompt(context, "MORE_INFO")
    assert "NOT Ana Pella" in follow_up_prompt(context, "OTHER_PERSON")
    assert '"points"' in follow_up_prompt(context, "HISTORY_DEEP_DIVE")
    with pytest.raises(ValueError):
        follow_up_prompt(context, "SOMETHING_ELSE")


def test_list_models_keeps_gemini_names() -> None:
    payload = {"models": [{"name": "models/gemini-2.5-flash"}, {"name": "models/embedding-001"}]}
    session = _FakeSession(_FakeResponse(payload))
    gateway = GeminiGateway("secret", session=session)

    assert gateway.list_models() == ["gemini-2.5-flash"]
    assert session.gets[0]["url"] == API_ROOT


def test_empty_key_is_rejected() -> None:
    with pytest.raises(ValueError):
        GeminiGateway("")
