"""Shared CLI rendering helpers."""
from __future__ import annotations

import os
import textwrap
from typing import Iterable, List

from geodaily.domain.phases import Phase
from geodaily.services.controllers import PhaseView
from geodaily.services.phase_events import (
    EnrichmentMergedEvent,
    FlagDisabledEvent,
    FlyToEvent,
    FollowUpStateEvent,
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

_TEXT_WIDTH = 72
_NOTICE_PREFIX = {"success": "+", "error": "x", "info": "i", "critical": "!!"}
_HEADING_MARKERS = {"light": "===", "dark": "###"}
_theme = "light"

_FOLLOW_UP_LABELS = {
    "MORE_INFO": "more info",
    "OTHER_PERSON": "someone else",
    "HISTORY_DEEP_DIVE": "tell me more",
}


def debug_enabled() -> bool:
    """Return True only when GEODAILY_DEBUG is explicitly set to '1'."""
    return os.getenv("GEODAILY_DEBUG") == "1"


def set_theme(theme: str) -> None:
    global _theme
    _theme = "dark" if theme == "dark" else "light"


def wrap_text(text: str, width: int = _TEXT_WIDTH) -> List[str]:
    """Wrap text on word boundaries; empty text yields one empty line."""
    if not text:
        return [""]
    return textwrap.wrap(text, width=width, break_long_words=False, break_on_hyphens=False) or [""]


def render_heading(title: str) -> None:
    """Print a consistent section heading."""
    marker = _HEADING_MARKERS[_theme]
    print(f"\n{marker} {title} {marker}")


def render_bullet_lines(lines: Iterable[str]) -> None:
    """Print bullet-prefixed lines."""
    for line in lines:
        wrapped = wrap_text(line, _TEXT_WIDTH - 2)
        print(f"- {wrapped[0]}")
        for rest in wrapped[1:]:
            print(f"  {rest}")


def describe_event(event: PhaseEvent) -> str | None:
    """One line of feedback for an event, or None when the phase view covers it."""
    if isinstance(event, NoticeEvent):
        return f"[{_NOTICE_PREFIX.get(event.severity, 'i')}] {event.message}"
    if isinstance(event, HintRevealedEvent):
        return f"Hint: {event.text}"
    if isinstance(event, HighlightEvent):
        if event.style == "hint":
            return f"  (highlighted: {event.region_id})"
        if event.style == "answer":
            return f"The answer was {event.region_id}."
        return None
    if isinstance(event, HintCircleEvent):
        return f"  (a {event.radius_meters // 1000} km circle now surrounds the city)"
    if isinstance(event, MarkerPlacedEvent):
        lat, lon = event.coordinates
        return f"  (marker at {lat:.2f}, {lon:.2f})"
    if isinstance(event, FlyToEvent):
        if not debug_enabled():
            return None
        return f"  (map centred on {event.coordinates[0]:.1f}, {event.coordinates[1]:.1f}, zoom {event.zoom})"
    if isinstance(event, QuizAnswerEvent):
        if event.is_correct:
            return None
        return f"[x] Not quite. The answer was {event.correct}."
    if isinstance(event, QuizCompletedEvent):
        return "Quiz complete. Type 'next' to continue."
    if isinstance(event, PhaseSkippedEvent):
        return f"Skipping {event.phase.value.replace('_', ' ').title()}: {event.reason}"
    if isinstance(event, RoundStartedEvent):
        if debug_enabled():
            return f"New journey: {event.city}, {event.country} ({event.difficulty})"
        return "New journey ready."
    if isinstance(event, FlagDisabledEvent):
        return None
    if isinstance(event, FollowUpStateEvent):
        if event.status == "pending":
            return f"Fetching {_FOLLOW_UP_LABELS[event.kind]}..."
        return None
    if isinstance(event, PersonFactsAddedEvent):
        return "\n".join(f"+ {fact}" for fact in event.facts)
    if isinstance(event, HistoryPointsAddedEvent):
        return "\n".join(f"- {point}" for point in event.points)
    if isinstance(event, EnrichmentMergedEvent):
        if event.status == "ready" and not event.refresh:
            return "  (stories for this journey are ready)"
        return None
    if isinstance(event, (PhaseEnteredEvent, QuizQuestionEvent, TimerScheduledEvent)):
        return None
    return str(event)


def render_events(events: Iterable[PhaseEvent]) -> None:
    for event in events:
        line = describe_event(event)
        if line:
            print(line)


def phase_prompt_lines(view: PhaseView) -> List[str]:
    """Text for the current phase, mirroring what the map overlay would show."""
    round_ = view.round
    phase = view.phase
    if view.fatal_error:
        return [view.fatal_error]
    if phase is Phase.INTRO:
        return [
            "Welcome to GeoDaily.",
            "Enter 'key <your Gemini API key>' to unlock stories, or 'demo' to play without one.",
        ]
    if phase is Phase.LOADING or round_ is None:
        return ["Generating your journey..."]

    lines: List[str] = []
    if phase is Phase.COUNTRY_GUESS:
        lines.append(f"Where is {round_.country}?")
        lines.append("Type a country name to click it on the map. ('hint', 'answer')")
        if view.missed_guesses:
            lines.append(f"Misses so far: {view.missed_guesses}")
        if debug_enabled():
            lines.append(f"[debug] {round_.country_code.upper()} in {round_.continent}")
    elif phase is Phase.FLAG_GUESS:
        lines.append(f"Which flag is for {round_.country}?")
        for position, (option, disabled) in enumerate(view.flag_options, start=1):
            state = " (ruled out)" if disabled else ""
            lines.append(f"  {position}. {option.url}{state}")
    elif phase in (Phase.STATS_COUNTRY, Phase.STATS_CITY):
        title = round_.country if phase is Phase.STATS_COUNTRY else round_.city.name
        lines.append(f"{title} Stats")
        if view.quiz_completed:
            follow = "Next: The City" if phase is Phase.STATS_COUNTRY else "Next: A bit of History"
            lines.append(f"Type 'next' for {follow}.")
        elif view.quiz_question:
            lines.append(view.quiz_question)
            for position, option in enumerate(view.quiz_options, start=1):
                lines.append(f"  {position}. {option}")
    elif phase is Phase.CITY_FIND:
        lines.append(f"Find {round_.city.name}")
        lines.append("Enter 'lat,lon' where you think it is. ('hint', 'answer')")
        if view.missed_guesses:
            lines.append(f"Misses so far: {view.missed_guesses}")
    elif phase is Phase.HISTORICAL_FACT:
        lines.append("History Check")
        lines.extend(wrap_text(round_.historical_fact or "History is full of mysteries..."))
        lines.append("Type 'next': Who lives here?")
    elif phase is Phase.PERSON_GUESS:
        person = round_.person
        lines.append("Famous Figure")
        lines.append(f"{person.name} - {person.role}")
        lines.extend(wrap_text(person.bio))
        lines.append("Did you know?")
        lines.extend(wrap_text(person.fact.replace("Did you know?", "").strip()))
        lines.extend(f"+ {fact}" for fact in round_.person_facts)
        lines.append(_follow_up_hint(view) + "'next' to wrap up.")
    elif phase is Phase.HISTORY:
        lines.append("Historical Context")
        lines.extend(wrap_text(round_.history))
        lines.extend(f"- {point}" for point in round_.history_points)
        lines.append(_follow_up_hint(view) + "'next' to start a new journey.")
    return lines


def _follow_up_hint(view: PhaseView) -> str:
    commands = {"MORE_INFO": "more", "OTHER_PERSON": "other", "HISTORY_DEEP_DIVE": "deeper"}
    parts = []
    for kind, status in view.follow_ups.items():
        if status == "available":
            parts.append(f"'{commands[kind]}' ({_FOLLOW_UP_LABELS[kind]})")
        elif status == "pending":
            parts.append(f"{_FOLLOW_UP_LABELS[kind]} loading...")
    return (", ".join(parts) + ", ") if parts else ""


def render_phase(view: PhaseView) -> None:
    title = view.phase.value.replace("_", " ").title()
    if view.rounds_played:
        title = f"Round {view.rounds_played}: {title}"
    render_heading(title)
    for line in phase_prompt_lines(view):
        print(line)
