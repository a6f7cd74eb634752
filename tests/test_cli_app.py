from pathlib import Path

import pytest

from geodaily.domain.phases import Phase
from geodaily.presentation.cli import app
from geodaily.presentation.cli.app import CliSession, handle_input, parse_coordinates
from geodaily.presentation.cli.used_cities import UsedCitiesStore
from tests.helpers.game_fakes import build_controller


@pytest.fixture
def session(tmp_path: Path, monkeypatch) -> CliSession:
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    monkeypatch.setenv("APPDATA", str(tmp_path / "home"))
    monkeypatch.setenv("GEODAILY_FAST", "1")
    controller, state = build_controller(tmp_path)
    return CliSession(
        controller=controller,
        state=state,
        settings={"difficulty": "medium", "theme": "light", "api_key": ""},
        used_store=UsedCitiesStore(tmp_path / "used_cities.json"),
    )


def test_parse_coordinates_accepts_comma_or_space() -> None:
    assert parse_coordinates("40.5, 20") == (40.5, 20.0)
    assert parse_coordinates("-12 77") == (-12.0, 77.0)


@pytest.mark.parametrize("raw", ["40", "north, east", "95, 10"])
def test_parse_coordinates_rejects_bad_input(raw: str) -> None:
    with pytest.raises(ValueError):
        parse_coordinates(raw)


def test_demo_then_typed_country_guess(session: CliSession) -> None:
    handle_input(session, "demo")
    assert session.state.phase is Phase.COUNTRY_GUESS

    handle_input(session, "Varos")
    app._run_timers(session)

    assert session.state.phase is Phase.FLAG_GUESS


def test_numbered_flag_choice_out_of_range(session: CliSession) -> None:
    handle_input(session, "demo")
    handle_input(session, "next")
    with pytest.raises(ValueError):
        handle_input(session, "9")
    with pytest.raises(ValueError):
        handle_input(session, "first")


def test_numbered_quiz_answer(session: CliSession) -> None:
    handle_input(session, "demo")
    handle_input(session, "next")
    handle_input(session, "next")
    assert session.state.phase is Phase.STATS_COUNTRY

    handle_input(session, "1")

    assert session.state.quiz.locked
    app._run_timers(session)
    assert session.state.quiz.current_key == "area"


def test_map_click_in_city_phase(session: CliSession) -> None:
    handle_input(session, "demo")
    for _ in range(3):
        handle_input(session, "next")
    assert session.state.phase is Phase.CITY_FIND

    handle_input(session, "40.0, 20.0")
    app._run_timers(session)

    assert session.state.phase is Phase.STATS_CITY


def test_difficulty_command_persists_and_restarts(session: CliSession) -> None:
    handle_input(session, "demo")
    with pytest.raises(ValueError):
        handle_input(session, "difficulty legendary")

    handle_input(session, "difficulty extreme")

    assert session.settings["difficulty"] == "extreme"
    assert session.state.round.country == "Coralia"


def test_theme_and_reset_commands(session: CliSession) -> None:
    handle_input(session, "demo")
    session.used_store.save(session.state.used_cities)

    handle_input(session, "theme")
    handle_input(session, "reset")

    assert session.settings["theme"] == "dark"
    assert session.state.used_cities == set()
    assert session.used_store.load() == set()


def test_text_outside_input_phases_is_rejected(session: CliSession) -> None:
    handle_input(session, "demo")
    while session.state.phase is not Phase.HISTORY:
        handle_input(session, "next")
    with pytest.raises(ValueError):
        handle_input(session, "hello")


def test_empty_key_is_rejected(session: CliSession) -> None:
    with pytest.raises(ValueError):
        handle_input(session, "key")
