"""Console-driven adapter standing in for the map UI."""
from __future__ import annotations

import logging
import os
import secrets
import time
from concurrent.futures import ThreadPoolExecutor, wait
from dataclasses import dataclass
from typing import Callable, Dict, List

from geodaily.core.types import DIFFICULTY_ORDER, Coordinates
from geodaily.data.errors import DataError
from geodaily.data.repositories import CountriesRepository
from geodaily.domain.phases import NARRATIVE_PHASES, Phase
from geodaily.domain.state import GameState
from geodaily.presentation.cli import config
from geodaily.presentation.cli.render import (
    debug_enabled,
    render_bullet_lines,
    render_events,
    render_heading,
    render_phase,
    set_theme,
)
from geodaily.presentation.cli.used_cities import UsedCitiesStore
from geodaily.services import (
    DatasetUnavailableError,
    EnrichmentError,
    EnrichmentService,
    PhaseController,
    PlayerCommand,
    RoundService,
)
from geodaily.services.gemini_gateway import REQUEST_TIMEOUT_SECONDS, GeminiGateway
from geodaily.services.phase_events import PhaseEvent

_MAX_RANDOM_SEED = 2**31 - 1
_HELP_LINES = [
    "next - continue / skip this step",
    "hint, answer - map helpers while guessing",
    "more, other, deeper - ask for more stories",
    "skip - start a new journey now",
    "difficulty <easy|medium|hard|extreme>",
    "theme - toggle light/dark",
    "key <api key> - set the story provider key",
    "models - list models available to your key",
    "reset - forget which cities you've played",
    "quit",
]


@dataclass
class CliSession:
    """Everything the console loop needs between commands."""

    controller: PhaseController
    state: GameState
    settings: Dict[str, str]
    used_store: UsedCitiesStore
    gateway: GeminiGateway | None = None


def main() -> None:
    """Start the interactive CLI session."""
    logging.basicConfig(
        level=logging.DEBUG if debug_enabled() else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    settings = config.load_config()
    set_theme(settings["theme"])
    used_store = UsedCitiesStore()
    round_service = RoundService(CountriesRepository())
    try:
        city_count = round_service.ensure_playable()
    except (DataError, DatasetUnavailableError) as exc:
        print(f"Critical Error: Failed to load game data. ({exc})")
        return
    print(f"=== GeoDaily === ({city_count} cities available)")

    with ThreadPoolExecutor(max_workers=2) as executor:
        controller = PhaseController(
            round_service,
            EnrichmentService(executor),
            used_cities_sink=used_store.save,
        )
        state = controller.new_game(
            seed=secrets.randbelow(_MAX_RANDOM_SEED),
            difficulty=settings["difficulty"],
            used_cities=used_store.load(),
        )
        session = CliSession(controller=controller, state=state, settings=settings, used_store=used_store)
        api_key = config.resolve_api_key(settings)
        if api_key:
            configure_api_key(session, api_key, persist=False)
        _run_loop(session)
    print("Goodbye!")


def _run_loop(session: CliSession) -> None:
    controller = session.controller
    state = session.state
    while True:
        _wait_for_narrative(session)
        render_events(controller.poll(state))
        render_phase(controller.get_phase_view(state))
        try:
            raw = input("> ").strip()
        except EOFError:
            return
        if not raw:
            continue
        if raw.lower() in ("quit", "exit", "q"):
            return
        try:
            events = handle_input(session, raw)
        except ValueError as exc:
            print(f"Invalid input: {exc}")
            continue
        render_events(events)
        _run_timers(session)


def handle_input(session: CliSession, raw: str) -> List[PhaseEvent]:
    """Translate a line of input into controller calls."""
    controller = session.controller
    state = session.state
    word, _, argument = raw.partition(" ")
    word = word.lower()
    argument = argument.strip()

    simple: Dict[str, Callable[[GameState], List[PhaseEvent]]] = {
        "next": controller.advance,
        "answer": controller.request_show_answer,
        "more": controller.request_more_info,
        "other": controller.request_other_person,
        "deeper": controller.request_history_deep_dive,
        "skip": controller.skip_round,
    }
    if word in simple and not argument:
        return simple[word](state)
    if word == "hint" and not argument:
        return controller.request_hint(state)
    if word == "demo" and not argument:
        return play_demo(session)
    if word == "help":
        render_heading("Commands")
        render_bullet_lines(_HELP_LINES)
        return []
    if word == "key":
        if not argument:
            raise ValueError("Please enter a valid API key.")
        return configure_api_key(session, argument, persist=True)
    if word == "difficulty":
        if argument not in DIFFICULTY_ORDER:
            raise ValueError(f"difficulty must be one of {', '.join(DIFFICULTY_ORDER)}")
        session.settings["difficulty"] = argument
        config.save_config(session.settings)
        return controller.change_difficulty(state, argument)
    if word == "theme":
        session.settings["theme"] = "light" if session.settings.get("theme") == "dark" else "dark"
        config.save_config(session.settings)
        set_theme(session.settings["theme"])
        return []
    if word == "reset":
        session.used_store.reset()
        state.used_cities.clear()
        print("Played cities forgotten.")
        return []
    if word == "models":
        _print_models(session)
        return []

    return controller.apply_command(state, _phase_command(controller, state, raw))


def _phase_command(controller: PhaseController, state: GameState, raw: str) -> PlayerCommand:
    """Interpret free text according to what the current phase accepts."""
    if state.phase is Phase.COUNTRY_GUESS:
        return PlayerCommand(command_type="location_guess", identifier=raw)
    if state.phase is Phase.CITY_FIND:
        return PlayerCommand(command_type="map_click", coordinates=parse_coordinates(raw))
    if state.phase is Phase.FLAG_GUESS:
        return PlayerCommand(command_type="flag_choice", option_index=_parse_choice(raw))
    if state.phase in (Phase.STATS_COUNTRY, Phase.STATS_CITY):
        options = controller.get_phase_view(state).quiz_options
        index = _parse_choice(raw)
        if not 0 <= index < len(options):
            raise ValueError(f"choose a number between 1 and {len(options)}")
        return PlayerCommand(command_type="quiz_answer", option_value=options[index])
    raise ValueError("type 'next' to continue or 'help' for commands")


def parse_coordinates(raw: str) -> Coordinates:
    """Parse 'lat,lon' (or 'lat lon') into a coordinate pair."""
    parts = raw.replace(",", " ").split()
    if len(parts) != 2:
        raise ValueError("enter coordinates as 'lat,lon'")
    try:
        lat, lon = float(parts[0]), float(parts[1])
    except ValueError as exc:
        raise ValueError("coordinates must be numbers") from exc
    if not (-90 <= lat <= 90 and -180 <= lon <= 180):
        raise ValueError("coordinates are off the map")
    return (lat, lon)


def _parse_choice(raw: str) -> int:
    try:
        return int(raw) - 1
    except ValueError as exc:
        raise ValueError("please enter a number") from exc


def configure_api_key(session: CliSession, api_key: str, *, persist: bool) -> List[PhaseEvent]:
    """Build the story gateway for ``api_key``; starts play when still at the intro."""
    if persist:
        session.settings["api_key"] = api_key
        config.save_config(session.settings)
    session.gateway = GeminiGateway(api_key)
    return session.controller.configure_gateway(session.state, session.gateway)


def play_demo(session: CliSession) -> List[PhaseEvent]:
    """Start without a provider; narrative steps show their unavailable text."""
    return session.controller.start_game(session.state)


def _print_models(session: CliSession) -> None:
    if session.gateway is None:
        print("Set an API key first.")
        return
    try:
        names = session.gateway.list_models()
    except EnrichmentError as exc:
        print(f"Could not list models: {exc}")
        return
    render_heading(f"Models (using {session.gateway.model})")
    render_bullet_lines(names or ["(none)"])


def _run_timers(session: CliSession) -> None:
    """Honour scheduled delays, then fire them; timers can chain."""
    fast = os.getenv("GEODAILY_FAST") == "1"
    state = session.state
    while state.pending_timer is not None:
        if not fast:
            time.sleep(state.pending_timer.delay_seconds)
        render_events(session.controller.fire_timer(state))


def _wait_for_narrative(session: CliSession) -> None:
    """Block briefly for stories when the player reaches a phase that shows them."""
    state = session.state
    if state.phase not in NARRATIVE_PHASES or state.round is None:
        return
    futures = [
        request.future
        for request in state.pending_requests
        if request.kind == "ENRICH" and request.round_id == state.round.round_id
    ]
    if futures:
        print("Loading stories...")
        wait(futures, timeout=REQUEST_TIMEOUT_SECONDS)
