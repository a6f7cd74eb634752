"""UI-agnostic phase controller that drives one round after another."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Literal, Set, Tuple

from geodaily.core.rng import RNG
from geodaily.core.types import DEFAULT_DIFFICULTY, DIFFICULTY_ORDER, Coordinates, Difficulty
from geodaily.data.errors import DataError
from geodaily.domain.geo import distance_meters, whole_kilometers
from geodaily.domain.phases import NARRATIVE_PHASES, ROUND_PHASES, Phase, next_round_phase
from geodaily.domain.round_models import (
    LOADING_HISTORICAL_FACT,
    LOADING_HISTORY,
    FlagOption,
    Round,
    loading_person,
)
from geodaily.domain.state import (
    FOLLOW_UP_KINDS,
    FollowUpKind,
    GameState,
    GuessTracking,
    PendingRequest,
    PendingTimer,
    TimerKind,
)
from geodaily.services.enrichment_service import (
    EnrichmentGateway,
    EnrichmentService,
    apply_enrichment,
    mark_unavailable,
    parse_person,
    parse_string_list,
)
from geodaily.services.hint_service import city_hint, matches_country, nearby_regions
from geodaily.services.phase_events import (
    EnrichmentMergedEvent,
    FlagDisabledEvent,
    FlyToEvent,
    FollowUpStateEvent,
    FollowUpStatus,
    HighlightEvent,
    HintCircleEvent,
    HintRevealedEvent,
    HistoryPointsAddedEvent,
    MarkerPlacedEvent,
    NoticeEvent,
    PersonFactsAddedEvent,
    PhaseEnteredEvent,
    PhaseEvent,
    PhaseSkippedEvent,
    QuizAnswerEvent,
    QuizCompletedEvent,
    QuizQuestionEvent,
    RoundStartedEvent,
    TimerScheduledEvent,
)
from geodaily.services.quiz_runner import REVEAL_DELAY_SECONDS, QuizRunner
from geodaily.services.round_service import RoundService

logger = logging.getLogger(__name__)

COUNTRY_SOLVED_DELAY_SECONDS = 1.5
FLAG_SOLVED_DELAY_SECONDS = 1.0
CITY_FOUND_DELAY_SECONDS = 1.5
SHOW_ANSWER_DELAY_SECONDS = 2.0

WORLD_VIEW: Coordinates = (20.0, 0.0)
WORLD_ZOOM = 2
COUNTRY_ZOOM = 5
REGION_HINT_ZOOM = 4
ANSWER_ZOOM = 4
CITY_HINT_ZOOM = 8
CITY_ZOOM = 10

MAX_COUNTRY_HINT_LEVEL = 2

_FOLLOW_UP_PHASES: Dict[FollowUpKind, Phase] = {
    "MORE_INFO": Phase.PERSON_GUESS,
    "OTHER_PERSON": Phase.PERSON_GUESS,
    "HISTORY_DEEP_DIVE": Phase.HISTORY,
}

CommandType = Literal[
    "location_guess",
    "map_click",
    "flag_choice",
    "quiz_answer",
    "hint",
    "show_answer",
    "more_info",
    "other_person",
    "history_deep_dive",
    "advance",
]


@dataclass(slots=True)
class PlayerCommand:
    """A structured input from the presentation layer."""

    command_type: CommandType
    identifier: str | None = None
    coordinates: Coordinates | None = None
    option_index: int | None = None
    option_value: str | None = None
    view_center: Coordinates | None = None


@dataclass(slots=True)
class PhaseView:
    """Snapshot of what the current phase shows and accepts."""

    phase: Phase
    round: Round | None
    flag_options: List[Tuple[FlagOption, bool]] = field(default_factory=list)
    quiz_question: str | None = None
    quiz_options: List[str] = field(default_factory=list)
    quiz_locked: bool = False
    quiz_completed: bool = False
    hint_level: int = 0
    missed_guesses: int = 0
    rounds_played: int = 0
    can_hint: bool = False
    can_show_answer: bool = False
    follow_ups: Dict[FollowUpKind, FollowUpStatus] = field(default_factory=dict)
    input_locked: bool = False
    fatal_error: str | None = None


class PhaseController:
    """
    Owns phase transitions, guess evaluation and the merge of enrichment results.

    Every entry point takes the GameState, mutates it, and returns the events the
    presentation layer should render. Entry points called out of phase are
    ignored and return no events; malformed arguments raise ValueError.
    Delayed transitions are recorded as ``state.pending_timer`` and completed
    by ``fire_timer``.
    """

    def __init__(
        self,
        round_service: RoundService,
        enrichment_service: EnrichmentService,
        *,
        used_cities_sink: Callable[[Set[str]], None] | None = None,
    ) -> None:
        self._rounds = round_service
        self._enrichment = enrichment_service
        self._used_cities_sink = used_cities_sink

    def new_game(
        self,
        seed: int,
        *,
        difficulty: Difficulty = DEFAULT_DIFFICULTY,
        used_cities: Set[str] | None = None,
    ) -> GameState:
        """Create a state waiting at INTRO for configuration."""
        return GameState(
            seed=seed,
            rng=RNG(seed),
            difficulty=difficulty,
            used_cities=set(used_cities or ()),
        )

    # ------------------------------------------------------------------ setup

    def start_game(self, state: GameState) -> List[PhaseEvent]:
        """Leave INTRO (with or without a provider) and begin the first round."""
        if state.phase is not Phase.INTRO:
            return []
        return self.start_round(state)

    def configure_gateway(self, state: GameState, gateway: EnrichmentGateway | None) -> List[PhaseEvent]:
        """Install a provider; starts play from INTRO or backfills the live round."""
        self._enrichment.configure(gateway)
        if gateway is None:
            return []
        if state.phase is Phase.INTRO:
            return self.start_round(state)
        round_ = state.round
        if round_ is None or round_.enrichment_status == "ready" or self._in_flight(state, "ENRICH"):
            return []
        round_.historical_fact = LOADING_HISTORICAL_FACT
        round_.history = LOADING_HISTORY
        round_.person = loading_person()
        round_.enrichment_status = "pending"
        state.pending_requests.append(self._enrichment.request_enrichment(round_))
        return [EnrichmentMergedEvent(round_id=round_.round_id, status="pending", refresh=self._shows_narrative(state))]

    def change_difficulty(self, state: GameState, difficulty: Difficulty) -> List[PhaseEvent]:
        if difficulty not in DIFFICULTY_ORDER:
            raise ValueError(f"Unknown difficulty: {difficulty}")
        state.difficulty = difficulty
        if state.phase is Phase.INTRO:
            return []
        return self.start_round(state)

    def skip_round(self, state: GameState) -> List[PhaseEvent]:
        """Abandon the live round; its city stays in the used set."""
        if state.phase is Phase.INTRO:
            return []
        return self.start_round(state)

    def start_round(self, state: GameState) -> List[PhaseEvent]:
        """Enter LOADING, select a fresh round and move on to COUNTRY_GUESS."""
        state.phase = Phase.LOADING
        state.pending_timer = None
        state.input_locked = True
        events: List[PhaseEvent] = [PhaseEnteredEvent(phase=Phase.LOADING)]

        try:
            round_ = self._rounds.select_round(state.difficulty, state.used_cities, state.rng)
        except DataError as exc:
            logger.error("Failed to load dataset: %s", exc)
            return events + self._fail(state, "Critical Error: Failed to load game data. Check your connection.")
        if round_ is None:
            return events + self._fail(state, "Critical Error: The game data contains no cities.")

        if self._used_cities_sink is not None:
            self._used_cities_sink(set(state.used_cities))
        state.round = round_
        state.fatal_error = None
        state.rounds_played += 1
        state.consumed_follow_ups = set()
        state.quiz = None
        events.append(
            RoundStartedEvent(
                round_id=round_.round_id,
                country=round_.country,
                city=round_.city.name,
                difficulty=round_.difficulty,
            )
        )
        if self._enrichment.has_gateway:
            state.pending_requests.append(self._enrichment.request_enrichment(round_))
        else:
            mark_unavailable(round_)
        events.extend(self._enter_phase(state, Phase.COUNTRY_GUESS))
        return events

    # ------------------------------------------------------------ transitions

    def advance(self, state: GameState) -> List[PhaseEvent]:
        """Move to the next phase; from HISTORY this starts a new round."""
        if state.phase is Phase.INTRO:
            return self.start_game(state)
        if state.phase is Phase.LOADING:
            return []
        state.pending_timer = None
        upcoming = next_round_phase(state.phase)
        if upcoming is None:
            return self.start_round(state)
        return self._enter_phase(state, upcoming)

    def fire_timer(self, state: GameState) -> List[PhaseEvent]:
        """Complete the pending delayed transition, if any."""
        timer = state.pending_timer
        if timer is None:
            return []
        state.pending_timer = None
        if timer.kind == "advance":
            return self.advance(state)
        return self._next_quiz_item(state)

    def _enter_phase(self, state: GameState, phase: Phase) -> List[PhaseEvent]:
        round_ = self._require_round(state)
        state.phase = phase
        state.pending_timer = None
        state.input_locked = False
        events: List[PhaseEvent] = []

        if phase is Phase.COUNTRY_GUESS:
            state.tracking = GuessTracking()
            events.append(PhaseEnteredEvent(phase=phase))
            events.append(FlyToEvent(coordinates=WORLD_VIEW, zoom=WORLD_ZOOM))
        elif phase is Phase.FLAG_GUESS:
            state.flag_order = list(range(len(round_.flag_options)))
            state.rng.shuffle(state.flag_order)
            state.disabled_flags = set()
            events.append(PhaseEnteredEvent(phase=phase))
        elif phase in (Phase.STATS_COUNTRY, Phase.STATS_CITY):
            quiz_items = round_.stats_quiz if phase is Phase.STATS_COUNTRY else round_.city.stats_quiz
            if not quiz_items:
                state.quiz = None
                events.append(PhaseSkippedEvent(phase=phase, reason="No reliable stats for this stop."))
                events.extend(self.advance(state))
                return events
            state.quiz = QuizRunner(state.rng).start(quiz_items)
            events.append(PhaseEnteredEvent(phase=phase))
            if phase is Phase.STATS_COUNTRY:
                events.append(FlyToEvent(coordinates=round_.coordinates, zoom=COUNTRY_ZOOM))
            else:
                events.append(MarkerPlacedEvent(coordinates=round_.city.coordinates))
                events.append(FlyToEvent(coordinates=round_.city.coordinates, zoom=CITY_ZOOM))
            events.append(self._quiz_question_event(state))
        elif phase is Phase.CITY_FIND:
            state.quiz = None
            state.tracking.city_hint_shown = False
            state.tracking.missed_guesses = 0
            events.append(PhaseEnteredEvent(phase=phase))
        else:
            events.append(PhaseEnteredEvent(phase=phase))
        return events

    # ---------------------------------------------------------------- guesses

    def submit_location_guess(self, state: GameState, identifier: str) -> List[PhaseEvent]:
        """Evaluate a clicked/typed region against the target country."""
        if state.phase is not Phase.COUNTRY_GUESS or state.input_locked or state.tracking.solved:
            return []
        round_ = self._require_round(state)
        label = identifier.strip()
        if not label:
            raise ValueError("A region identifier is required.")

        if matches_country(label, round_):
            state.tracking.solved = True
            events: List[PhaseEvent] = [
                HighlightEvent(region_id=round_.country, style="correct"),
                NoticeEvent(message="Correct! Well done.", severity="success"),
            ]
            events.append(self._schedule(state, "advance", COUNTRY_SOLVED_DELAY_SECONDS))
            return events

        key = label.upper()
        if key in state.tracking.wrong_guesses:
            return [NoticeEvent(message=f"You already tried {label}.", severity="info")]
        state.tracking.wrong_guesses.add(key)
        state.tracking.missed_guesses += 1
        return [
            HighlightEvent(region_id=label, style="wrong"),
            NoticeEvent(message=f"Not quite. That's {label}.", severity="error"),
        ]

    def submit_map_click(self, state: GameState, coordinates: Coordinates) -> List[PhaseEvent]:
        if state.phase is not Phase.CITY_FIND or state.input_locked:
            return []
        round_ = self._require_round(state)
        return self.evaluate_city_distance(state, distance_meters(coordinates, round_.city.coordinates))

    def evaluate_city_distance(self, state: GameState, distance: float) -> List[PhaseEvent]:
        """A click counts when it lands strictly inside the snap radius."""
        if state.phase is not Phase.CITY_FIND or state.input_locked:
            return []
        round_ = self._require_round(state)
        if distance < round_.city.snap_radius:
            return [
                NoticeEvent(message=f"Found {round_.city.name}!", severity="success"),
                MarkerPlacedEvent(coordinates=round_.city.coordinates),
                self._schedule(state, "advance", CITY_FOUND_DELAY_SECONDS),
            ]
        state.tracking.missed_guesses += 1
        return [NoticeEvent(message=f"Missed by {whole_kilometers(distance)}km.", severity="error")]

    def submit_flag_choice(self, state: GameState, position: int) -> List[PhaseEvent]:
        """Pick the flag shown at ``position``; wrong flags stay disabled for the phase."""
        if state.phase is not Phase.FLAG_GUESS or state.input_locked:
            return []
        round_ = self._require_round(state)
        if not 0 <= position < len(state.flag_order):
            raise ValueError(f"Flag position {position} is out of range.")
        if position in state.disabled_flags:
            return []
        option = round_.flag_options[state.flag_order[position]]
        if option.is_correct:
            return [
                NoticeEvent(message="Correct Flag!", severity="success"),
                self._schedule(state, "advance", FLAG_SOLVED_DELAY_SECONDS),
            ]
        state.disabled_flags.add(position)
        return [
            FlagDisabledEvent(position=position),
            NoticeEvent(message="Wrong flag!", severity="error"),
        ]

    def submit_quiz_answer(self, state: GameState, value: str) -> List[PhaseEvent]:
        if state.phase not in (Phase.STATS_COUNTRY, Phase.STATS_CITY) or state.quiz is None:
            return []
        result = QuizRunner(state.rng).answer(state.quiz, value)
        if result is None:
            return []
        events: List[PhaseEvent] = [
            QuizAnswerEvent(selected=result.selected, correct=result.correct, is_correct=result.is_correct)
        ]
        if result.is_correct:
            events.append(NoticeEvent(message="Correct!", severity="success"))
        events.append(self._schedule(state, "quiz_next", REVEAL_DELAY_SECONDS))
        return events

    def _next_quiz_item(self, state: GameState) -> List[PhaseEvent]:
        quiz = state.quiz
        if quiz is None or state.phase not in (Phase.STATS_COUNTRY, Phase.STATS_CITY):
            return []
        if QuizRunner(state.rng).next_item(quiz) is None:
            return [QuizCompletedEvent(phase=state.phase)]
        return [self._quiz_question_event(state)]

    def _quiz_question_event(self, state: GameState) -> QuizQuestionEvent:
        quiz = state.quiz
        assert quiz is not None
        item = quiz.current_item
        key = quiz.current_key
        assert item is not None and key is not None
        return QuizQuestionEvent(key=key, question=item.question, options=tuple(quiz.presented_options))

    # ------------------------------------------------------------------ hints

    def request_hint(self, state: GameState, view_center: Coordinates | None = None) -> List[PhaseEvent]:
        if state.input_locked:
            return []
        if state.phase is Phase.COUNTRY_GUESS:
            return self._country_hint(state)
        if state.phase is Phase.CITY_FIND:
            return self._city_hint(state, view_center)
        return []

    def _country_hint(self, state: GameState) -> List[PhaseEvent]:
        tracking = state.tracking
        if tracking.solved or tracking.hint_level >= MAX_COUNTRY_HINT_LEVEL:
            return []
        round_ = self._require_round(state)
        tracking.hint_level += 1
        if tracking.hint_level == 1:
            if not round_.continent:
                return []
            return [HintRevealedEvent(level=1, text=f"It's in {round_.continent}.")]

        hint = nearby_regions(round_, self._rounds.countries(), state.rng)
        events: List[PhaseEvent] = []
        for region_id in hint.region_ids:
            events.append(HighlightEvent(region_id=region_id, style="hint"))
        events.append(FlyToEvent(coordinates=hint.center, zoom=REGION_HINT_ZOOM))
        events.append(HintRevealedEvent(level=2, text="One of the highlighted countries is the target!"))
        return events

    def _city_hint(self, state: GameState, view_center: Coordinates | None) -> List[PhaseEvent]:
        if state.tracking.city_hint_shown:
            return []
        round_ = self._require_round(state)
        state.tracking.city_hint_shown = True
        hint = city_hint(round_, view_center)
        return [
            HintRevealedEvent(level=1, text=f"It is generally towards the {hint.direction} from the screen center."),
            HintCircleEvent(center=hint.center, radius_meters=hint.radius_meters),
            FlyToEvent(coordinates=hint.center, zoom=CITY_HINT_ZOOM),
        ]

    def request_show_answer(self, state: GameState) -> List[PhaseEvent]:
        """Reveal the map answer and move on; elsewhere this is a plain advance."""
        if state.phase in (Phase.INTRO, Phase.LOADING):
            return []
        if state.input_locked:
            return []
        round_ = self._require_round(state)
        if state.phase is Phase.COUNTRY_GUESS:
            if state.tracking.solved:
                return []
            state.tracking.solved = True
            return [
                HighlightEvent(region_id=round_.country, style="answer"),
                FlyToEvent(coordinates=round_.coordinates, zoom=ANSWER_ZOOM),
                self._schedule(state, "advance", SHOW_ANSWER_DELAY_SECONDS),
            ]
        if state.phase is Phase.CITY_FIND:
            return [
                MarkerPlacedEvent(coordinates=round_.city.coordinates),
                FlyToEvent(coordinates=round_.city.coordinates, zoom=CITY_ZOOM),
                NoticeEvent(message="It's right here!", severity="info"),
                self._schedule(state, "advance", SHOW_ANSWER_DELAY_SECONDS),
            ]
        return self.advance(state)

    # -------------------------------------------------------------- follow-ups

    def request_more_info(self, state: GameState) -> List[PhaseEvent]:
        return self._request_follow_up(state, "MORE_INFO")

    def request_other_person(self, state: GameState) -> List[PhaseEvent]:
        return self._request_follow_up(state, "OTHER_PERSON")

    def request_history_deep_dive(self, state: GameState) -> List[PhaseEvent]:
        return self._request_follow_up(state, "HISTORY_DEEP_DIVE")

    def _request_follow_up(self, state: GameState, kind: FollowUpKind) -> List[PhaseEvent]:
        if state.phase is not _FOLLOW_UP_PHASES[kind]:
            return []
        if kind in state.consumed_follow_ups or self._in_flight(state, kind):
            return []
        if not self._enrichment.has_gateway:
            return [NoticeEvent(message="Add an API key to unlock more stories.", severity="error")]
        round_ = self._require_round(state)
        # Follow-ups build on the enriched narrative and must not race its merge.
        if round_.enrichment_status == "pending":
            return [NoticeEvent(message="The story is still loading.", severity="info")]
        if round_.enrichment_status != "ready":
            return [NoticeEvent(message="No story is available for this round.", severity="info")]
        if kind == "MORE_INFO" and self._in_flight(state, "OTHER_PERSON"):
            return [NoticeEvent(message="A new figure is on the way.", severity="info")]
        state.pending_requests.append(self._enrichment.request_follow_up(round_, kind))
        return [FollowUpStateEvent(kind=kind, status="pending")]

    def poll(self, state: GameState) -> List[PhaseEvent]:
        """Merge every finished provider call into the live round."""
        events: List[PhaseEvent] = []
        for request in list(state.pending_requests):
            if not request.future.done():
                continue
            state.pending_requests.remove(request)
            events.extend(self.apply_request_result(state, request))
        return events

    def apply_request_result(self, state: GameState, request: PendingRequest) -> List[PhaseEvent]:
        """Merge one finished request; results for a round that is no longer live are dropped."""
        round_ = state.round
        if round_ is None or round_.round_id != request.round_id:
            logger.debug("Discarding stale %s result for round %s.", request.kind, request.round_id)
            return []
        if request.kind == "ENRICH":
            return self._merge_enrichment(state, round_, request)
        return self._merge_follow_up(state, round_, request)

    def _merge_enrichment(self, state: GameState, round_: Round, request: PendingRequest) -> List[PhaseEvent]:
        try:
            apply_enrichment(round_, request.future.result())
        except Exception as exc:  # provider failures degrade the round, never end it
            logger.warning("Enrichment failed for %s: %s", round_.key, exc)
            mark_unavailable(round_)
        return [
            EnrichmentMergedEvent(
                round_id=round_.round_id,
                status=round_.enrichment_status,
                refresh=self._shows_narrative(state),
            )
        ]

    def _merge_follow_up(self, state: GameState, round_: Round, request: PendingRequest) -> List[PhaseEvent]:
        kind = request.kind
        assert kind in FOLLOW_UP_KINDS
        try:
            payload = request.future.result()
            if kind == "MORE_INFO":
                facts = parse_string_list(payload, "facts")
            elif kind == "OTHER_PERSON":
                person = parse_person(payload)
            else:
                points = parse_string_list(payload, "points")
        except Exception as exc:  # the control is re-enabled so the player can retry
            logger.warning("%s follow-up failed for %s: %s", kind, round_.key, exc)
            return [
                NoticeEvent(message="Failed.", severity="error"),
                FollowUpStateEvent(kind=kind, status="available"),
            ]

        if kind == "MORE_INFO":
            if request.person_name != round_.person.name:
                logger.debug("Discarding facts about %s; %s is shown now.", request.person_name, round_.person.name)
                return [FollowUpStateEvent(kind=kind, status="available")]
            round_.person_facts.extend(facts)
            state.consumed_follow_ups.add(kind)
            return [PersonFactsAddedEvent(facts=facts), FollowUpStateEvent(kind=kind, status="consumed")]
        if kind == "HISTORY_DEEP_DIVE":
            round_.history_points = points
            state.consumed_follow_ups.add(kind)
            return [HistoryPointsAddedEvent(points=points), FollowUpStateEvent(kind=kind, status="consumed")]

        round_.person = person
        round_.person_facts = []
        state.consumed_follow_ups.discard("MORE_INFO")
        events: List[PhaseEvent] = [FollowUpStateEvent(kind=kind, status="available")]
        if state.phase is Phase.PERSON_GUESS:
            events.extend(self._enter_phase(state, Phase.PERSON_GUESS))
        return events

    # --------------------------------------------------------------- commands

    def apply_command(self, state: GameState, command: PlayerCommand) -> List[PhaseEvent]:
        """Dispatch a structured command to the matching entry point."""
        command_type = command.command_type
        if command_type == "location_guess":
            if command.identifier is None:
                raise ValueError("Location guess requires identifier.")
            return self.submit_location_guess(state, command.identifier)
        if command_type == "map_click":
            if command.coordinates is None:
                raise ValueError("Map click requires coordinates.")
            return self.submit_map_click(state, command.coordinates)
        if command_type == "flag_choice":
            if command.option_index is None:
                raise ValueError("Flag choice requires option_index.")
            return self.submit_flag_choice(state, command.option_index)
        if command_type == "quiz_answer":
            if command.option_value is None:
                raise ValueError("Quiz answer requires option_value.")
            return self.submit_quiz_answer(state, command.option_value)
        if command_type == "hint":
            return self.request_hint(state, command.view_center)
        if command_type == "show_answer":
            return self.request_show_answer(state)
        if command_type == "more_info":
            return self.request_more_info(state)
        if command_type == "other_person":
            return self.request_other_person(state)
        if command_type == "history_deep_dive":
            return self.request_history_deep_dive(state)
        if command_type == "advance":
            return self.advance(state)
        raise ValueError(f"Unknown command type: {command_type}")

    # ------------------------------------------------------------------ views

    def get_phase_view(self, state: GameState) -> PhaseView:
        """Return the structured view of the current phase for rendering."""
        round_ = state.round
        view = PhaseView(
            phase=state.phase,
            round=round_,
            hint_level=state.tracking.hint_level,
            missed_guesses=state.tracking.missed_guesses,
            rounds_played=state.rounds_played,
            input_locked=state.input_locked or state.pending_timer is not None,
            fatal_error=state.fatal_error,
        )
        if round_ is None or state.phase not in ROUND_PHASES:
            return view

        if state.phase is Phase.COUNTRY_GUESS:
            view.can_hint = not state.tracking.solved and state.tracking.hint_level < MAX_COUNTRY_HINT_LEVEL
            view.can_show_answer = not state.tracking.solved
        elif state.phase is Phase.CITY_FIND:
            view.can_hint = not state.tracking.city_hint_shown
            view.can_show_answer = state.pending_timer is None
        elif state.phase is Phase.FLAG_GUESS:
            view.flag_options = [
                (round_.flag_options[index], position in state.disabled_flags)
                for position, index in enumerate(state.flag_order)
            ]
        elif state.phase in (Phase.STATS_COUNTRY, Phase.STATS_CITY) and state.quiz is not None:
            item = state.quiz.current_item
            view.quiz_question = item.question if item is not None else None
            view.quiz_options = list(state.quiz.presented_options)
            view.quiz_locked = state.quiz.locked
            view.quiz_completed = state.quiz.completed

        for kind, phase in _FOLLOW_UP_PHASES.items():
            if phase is state.phase:
                view.follow_ups[kind] = self._follow_up_status(state, kind)
        return view

    # ---------------------------------------------------------------- helpers

    def _follow_up_status(self, state: GameState, kind: FollowUpKind) -> FollowUpStatus:
        if self._in_flight(state, kind):
            return "pending"
        if kind in state.consumed_follow_ups:
            return "consumed"
        if not self._enrichment.has_gateway:
            # Offered so the player is prompted for a key.
            return "available"
        round_ = state.round
        if round_ is None or round_.enrichment_status != "ready":
            return "unavailable"
        if kind == "MORE_INFO" and self._in_flight(state, "OTHER_PERSON"):
            return "unavailable"
        return "available"

    def _in_flight(self, state: GameState, kind: str) -> bool:
        round_ = state.round
        if round_ is None:
            return False
        return any(
            request.kind == kind and request.round_id == round_.round_id for request in state.pending_requests
        )

    def _schedule(self, state: GameState, kind: TimerKind, delay_seconds: float) -> TimerScheduledEvent:
        if kind == "advance":
            state.input_locked = True
        state.pending_timer = PendingTimer(kind=kind, delay_seconds=delay_seconds)
        return TimerScheduledEvent(kind=kind, delay_seconds=delay_seconds)

    def _fail(self, state: GameState, message: str) -> List[PhaseEvent]:
        state.fatal_error = message
        state.round = None
        return [NoticeEvent(message=message, severity="critical")]

    @staticmethod
    def _shows_narrative(state: GameState) -> bool:
        return state.phase in NARRATIVE_PHASES

    @staticmethod
    def _require_round(state: GameState) -> Round:
        if state.round is None:
            raise ValueError("No round is in progress.")
        return state.round
