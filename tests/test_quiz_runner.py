import pytest

from geodaily.core.rng import RNG
from geodaily.domain.round_models import QuizItem
from geodaily.services.quiz_runner import QuizRunner


def _items() -> dict:
    return {
        "population": QuizItem(question="What is the population size?", correct="10", options=("10", "8", "12", "9")),
        "area": QuizItem(question="What is the total area?", correct="5 km²", options=("5 km²", "4 km²")),
    }


def test_start_presents_first_item_shuffled() -> None:
    session = QuizRunner(RNG(1)).start(_items())

    assert session.current_key == "population"
    assert sorted(session.presented_options) == sorted(["10", "8", "12", "9"])
    assert not session.locked
    assert not session.completed


def test_empty_quiz_is_completed_immediately() -> None:
    session = QuizRunner(RNG(1)).start({})
    assert session.completed
    assert session.current_item is None


def test_answer_locks_and_grades() -> None:
    runner = QuizRunner(RNG(1))
    session = runner.start(_items())

    result = runner.answer(session, "8")

    assert result is not None
    assert result.is_correct is False
    assert result.correct == "10"
    assert session.locked
    assert runner.answer(session, "10") is None


def test_answer_must_be_an_offered_option() -> None:
    runner = QuizRunner(RNG(1))
    session = runner.start(_items())
    with pytest.raises(ValueError):
        runner.answer(session, "11")


def test_items_run_in_order_then_complete() -> None:
    runner = QuizRunner(RNG(2))
    session = runner.start(_items())

    runner.answer(session, "10")
    second = runner.next_item(session)
    assert second is not None
    assert session.current_key == "area"
    assert not session.locked

    runner.answer(session, "5 km²")
    assert runner.next_item(session) is None
    assert session.completed
    assert session.presented_options == []
