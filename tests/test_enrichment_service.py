import copy
from pathlib import Path

import pytest

from geodaily.core.rng import RNG
from geodaily.domain.round_models import UNAVAILABLE_HISTORY, Round
from geodaily.services.enrichment_service import (
    EnrichmentService,
    FollowUpContext,
    apply_enrichment,
    mark_unavailable,
    parse_person,
    parse_string_list,
    parse_structured_text,
)
from geodaily.services.errors import EnrichmentError
from tests.helpers.game_fakes import ENRICH_PAYLOAD, FakeGateway, InlineExecutor, build_round_service


def _round(tmp_path: Path) -> Round:
    round_ = build_round_service(tmp_path).select_round("medium", set(), RNG(1))
    assert round_ is not None
    return round_


def test_parse_structured_text_plain_json() -> None:
    assert parse_structured_text('{"facts": ["a"]}') == {"facts": ["a"]}


def test_parse_structured_text_extracts_embedded_object() -> None:
    text = 'Sure! Here you go:\n```json\n{"points": ["x", "y"]}\n```'
    assert parse_structured_text(text) == {"points": ["x", "y"]}


@pytest.mark.parametrize("text", ["no json here", "[1, 2, 3]", "{broken"])
def test_parse_structured_text_rejects_garbage(text: str) -> None:
    with pytest.raises(EnrichmentError):
        parse_structured_text(text)


def test_parse_person_requires_name() -> None:
    with pytest.raises(EnrichmentError):
        parse_person({"role": "Poet"})
    person = parse_person({"name": " Ana ", "role": "Poet"})
    assert person.name == "Ana"
    assert person.bio == ""


def test_parse_string_list_rejects_empty() -> None:
    with pytest.raises(EnrichmentError):
        parse_string_list({"facts": []}, "facts")
    assert parse_string_list({"facts": ["a", "b"]}, "facts") == ["a", "b"]


def test_apply_enrichment_sets_narrative(tmp_path: Path) -> None:
    round_ = _round(tmp_path)

    apply_enrichment(round_, copy.deepcopy(ENRICH_PAYLOAD))

    assert round_.enrichment_status == "ready"
    assert round_.historical_fact == ENRICH_PAYLOAD["historical_fact"]
    assert round_.person.name == "Ana Pella"
    assert round_.history == ENRICH_PAYLOAD["history"]


def test_apply_enrichment_is_all_or_nothing(tmp_path: Path) -> None:
    round_ = _round(tmp_path)
    payload = copy.deepcopy(ENRICH_PAYLOAD)
    payload["person"] = {"role": "nameless"}
    before = round_.historical_fact

    with pytest.raises(EnrichmentError):
        apply_enrichment(round_, payload)

    assert round_.historical_fact == before
    assert round_.enrichment_status == "pending"


def test_mark_unavailable_uses_sentinels(tmp_path: Path) -> None:
    round_ = _round(tmp_path)
    mark_unavailable(round_)

    assert round_.enrichment_status == "unavailable"
    assert round_.history == UNAVAILABLE_HISTORY
    assert round_.person.name == "Unknown"


def test_service_tags_requests_with_round(tmp_path: Path) -> None:
    round_ = _round(tmp_path)
    gateway = FakeGateway()
    service = EnrichmentService(InlineExecutor(), gateway)

    request = service.request_enrichment(round_)

    assert request.round_id == round_.round_id
    assert request.kind == "ENRICH"
    assert request.future.result()["history"] == ENRICH_PAYLOAD["history"]
    assert gateway.enrich_calls == [(round_.country, round_.city.name)]


def test_follow_up_sends_person_context(tmp_path: Path) -> None:
    round_ = _round(tmp_path)
    apply_enrichment(round_, copy.deepcopy(ENRICH_PAYLOAD))
    gateway = FakeGateway()
    service = EnrichmentService(InlineExecutor(), gateway)

    request = service.request_follow_up(round_, "MORE_INFO")

    assert request.kind == "MORE_INFO"
    assert request.person_name == "Ana Pella"
    context, kind = gateway.follow_up_calls[0]
    assert context == FollowUpContext(
        country=round_.country, city=round_.city.name, person_name="Ana Pella", person_role="Poet"
    )
    assert kind == "MORE_INFO"


def test_failed_call_surfaces_through_future(tmp_path: Path) -> None:
    service = EnrichmentService(InlineExecutor(), FakeGateway(fail_enrich=True))
    request = service.request_enrichment(_round(tmp_path))
    with pytest.raises(EnrichmentError):
        request.future.result()


def test_requests_without_gateway_raise(tmp_path: Path) -> None:
    service = EnrichmentService(InlineExecutor())
    assert not service.has_gateway
    with pytest.raises(EnrichmentError):
        service.request_enrichment(_round(tmp_path))
