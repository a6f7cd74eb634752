"""Events emitted by the phase controller for the presentation layer to render."""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Literal, Tuple

from geodaily.core.types import Coordinates, Difficulty, Severity
from geodaily.domain.phases import Phase
from geodaily.domain.round_models import EnrichmentStatus
from geodaily.domain.state import FollowUpKind, TimerKind

HighlightStyle = Literal["wrong", "correct", "hint", "answer"]
FollowUpStatus = Literal["available", "pending", "consumed", "unavailable"]


@dataclass(slots=True)
class PhaseEvent:
    """Base class for phase events."""


@dataclass(slots=True)
class PhaseEnteredEvent(PhaseEvent):
    phase: Phase


@dataclass(slots=True)
class PhaseSkippedEvent(PhaseEvent):
    phase: Phase
    reason: str


@dataclass(slots=True)
class RoundStartedEvent(PhaseEvent):
    round_id: str
    country: str
    city: str
    difficulty: Difficulty


@dataclass(slots=True)
class NoticeEvent(PhaseEvent):
    message: str
    severity: Severity = "info"


@dataclass(slots=True)
class HighlightEvent(PhaseEvent):
    region_id: str
    style: HighlightStyle


@dataclass(slots=True)
class MarkerPlacedEvent(PhaseEvent):
    coordinates: Coordinates


@dataclass(slots=True)
class FlyToEvent(PhaseEvent):
    coordinates: Coordinates
    zoom: int


@dataclass(slots=True)
class HintCircleEvent(PhaseEvent):
    center: Coordinates
    radius_meters: int


@dataclass(slots=True)
class HintRevealedEvent(PhaseEvent):
    level: int
    text: str


@dataclass(slots=True)
class TimerScheduledEvent(PhaseEvent):
    kind: TimerKind
    delay_seconds: float


@dataclass(slots=True)
class FlagDisabledEvent(PhaseEvent):
    position: int


@dataclass(slots=True)
class QuizQuestionEvent(PhaseEvent):
    key: str
    question: str
    options: Tuple[str, ...]


@dataclass(slots=True)
class QuizAnswerEvent(PhaseEvent):
    selected: str
    correct: str
    is_correct: bool


@dataclass(slots=True)
class QuizCompletedEvent(PhaseEvent):
    phase: Phase


@dataclass(slots=True)
class EnrichmentMergedEvent(PhaseEvent):
    round_id: str
    status: EnrichmentStatus
    refresh: bool


@dataclass(slots=True)
class FollowUpStateEvent(PhaseEvent):
    kind: FollowUpKind
    status: FollowUpStatus


@dataclass(slots=True)
class PersonFactsAddedEvent(PhaseEvent):
    facts: List[str]


@dataclass(slots=True)
class HistoryPointsAddedEvent(PhaseEvent):
    points: List[str]
