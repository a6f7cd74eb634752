"""One-question-at-a-time runner for the stats phases."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict

from geodaily.core.rng import RNG
from geodaily.domain.round_models import QuizItem
from geodaily.domain.state import QuizSession

REVEAL_DELAY_SECONDS = 2.0


@dataclass(frozen=True, slots=True)
class QuizAnswerResult:
    key: str
    selected: str
    correct: str
    is_correct: bool


class QuizRunner:
    """Walks a stats quiz map in insertion order, reshuffling each item's options on display."""

    def __init__(self, rng: RNG) -> None:
        self._rng = rng

    def start(self, items: Dict[str, QuizItem]) -> QuizSession:
        session = QuizSession(keys=list(items.keys()), items=dict(items))
        if not session.keys:
            session.completed = True
            return session
        self._present(session)
        return session

    def answer(self, session: QuizSession, value: str) -> QuizAnswerResult | None:
        """Lock the current item and grade ``value``; returns None if already locked."""
        if session.completed or session.locked:
            return None
        item = session.current_item
        key = session.current_key
        assert item is not None and key is not None
        if value not in session.presented_options:
            raise ValueError(f"'{value}' is not one of the offered options.")
        session.locked = True
        return QuizAnswerResult(key=key, selected=value, correct=item.correct, is_correct=value == item.correct)

    def next_item(self, session: QuizSession) -> QuizItem | None:
        """Move past the answered item; returns the next one, or None once the quiz is complete."""
        if session.completed:
            return None
        session.index += 1
        session.locked = False
        if session.current_item is None:
            session.presented_options = []
            session.completed = True
            return None
        self._present(session)
        return session.current_item

    def _present(self, session: QuizSession) -> None:
        item = session.current_item
        assert item is not None
        options = list(item.options)
        self._rng.shuffle(options)
        session.presented_options = options
