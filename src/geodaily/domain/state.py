"""Domain-level state tracking."""
from __future__ import annotations

from concurrent.futures import Future
from dataclasses import dataclass, field
from typing import Dict, List, Literal, Set

from geodaily.core.rng import RNG
from geodaily.core.types import DEFAULT_DIFFICULTY, Difficulty
from geodaily.domain.phases import Phase
from geodaily.domain.round_models import QuizItem, Round

FollowUpKind = Literal["MORE_INFO", "OTHER_PERSON", "HISTORY_DEEP_DIVE"]
RequestKind = Literal["ENRICH", "MORE_INFO", "OTHER_PERSON", "HISTORY_DEEP_DIVE"]
TimerKind = Literal["advance", "quiz_next"]

FOLLOW_UP_KINDS: tuple[FollowUpKind, ...] = ("MORE_INFO", "OTHER_PERSON", "HISTORY_DEEP_DIVE")


@dataclass(slots=True)
class GuessTracking:
    """Per-round bookkeeping for the two map-guessing phases."""

    wrong_guesses: Set[str] = field(default_factory=set)
    hint_level: int = 0
    missed_guesses: int = 0
    solved: bool = False
    city_hint_shown: bool = False


@dataclass(slots=True)
class QuizSession:
    """Progress through the quiz items of one stats phase."""

    keys: List[str]
    items: Dict[str, QuizItem]
    index: int = 0
    presented_options: List[str] = field(default_factory=list)
    locked: bool = False
    completed: bool = False

    @property
    def current_key(self) -> str | None:
        if self.index >= len(self.keys):
            return None
        return self.keys[self.index]

    @property
    def current_item(self) -> QuizItem | None:
        key = self.current_key
        return self.items[key] if key is not None else None


@dataclass(slots=True)
class PendingTimer:
    kind: TimerKind
    delay_seconds: float


@dataclass(slots=True)
class PendingRequest:
    """An outstanding enrichment call, tagged with the round (and person) it was made for."""

    round_id: str
    kind: RequestKind
    future: Future
    person_name: str | None = None


@dataclass
class GameState:
    """Single owner of the live phase, round and per-phase tracking."""

    seed: int
    rng: RNG
    difficulty: Difficulty = DEFAULT_DIFFICULTY
    phase: Phase = Phase.INTRO
    round: Round | None = None
    used_cities: Set[str] = field(default_factory=set)
    tracking: GuessTracking = field(default_factory=GuessTracking)
    flag_order: List[int] = field(default_factory=list)
    disabled_flags: Set[int] = field(default_factory=set)
    quiz: QuizSession | None = None
    pending_timer: PendingTimer | None = None
    input_locked: bool = False
    pending_requests: List[PendingRequest] = field(default_factory=list)
    consumed_follow_ups: Set[FollowUpKind] = field(default_factory=set)
    rounds_played: int = 0
    fatal_error: str | None = None
