from __future__ import annotations

import pytest

from quick_quiz.gateway.errors import (
    EnvelopeDecodeError,
    TransportError,
    UpstreamStatusError,
)
from quick_quiz.quiz.controller import GENERIC_ERROR, QuizSessionController
from quick_quiz.quiz.state import Feedback, Phase


def test_start_calls_generator_exactly_once(
    fake_generator, quiz_payload
) -> None:
    generator = fake_generator(result=quiz_payload)
    controller = QuizSessionController(generator)

    state = controller.start("  Science ", "3", "easy")

    assert generator.calls == [("Science", 3, "easy")]
    assert state.phase is Phase.ANSWERING
    assert state.total_questions == 3
    assert state.request is not None
    assert state.request.topic == "Science"


@pytest.mark.parametrize(
    ("topic", "count", "difficulty", "message"),
    [
        ("", 5, "easy", "Please enter a valid topic."),
        ("Art", 0, "easy", "Number of questions must be between 1 and 20."),
        ("Art", 21, "easy", "Number of questions must be between 1 and 20."),
        ("Art", 5, "brutal", "Please select a valid difficulty level."),
    ],
)
def test_invalid_parameters_never_reach_generator(
    fake_generator, topic, count, difficulty, message
) -> None:
    generator = fake_generator(result={})
    controller = QuizSessionController(generator)

    state = controller.start(topic, count, difficulty)

    assert generator.calls == []
    assert state.phase is Phase.IDLE
    assert state.error == message


@pytest.mark.parametrize(
    "error",
    [
        UpstreamStatusError(500, "Error generating quiz"),
        EnvelopeDecodeError("invalid upstream payload"),
        TransportError("transport failure"),
    ],
)
def test_generation_failure_shows_generic_error(
    fake_generator, error, caplog
) -> None:
    controller = QuizSessionController(fake_generator(error=error))

    with caplog.at_level("ERROR", logger="quick_quiz"):
        state = controller.start("Science", 3, "easy")

    assert state.phase is Phase.IDLE
    assert state.quiz is None
    assert state.error == GENERIC_ERROR
    assert any(
        getattr(record, "error_type", None) == type(error).__name__
        for record in caplog.records
    )


@pytest.mark.parametrize("payload", [{"questions": []}, [1, 2], None])
def test_unplayable_payload_is_a_generation_failure(
    fake_generator, payload
) -> None:
    controller = QuizSessionController(fake_generator(result=payload))

    state = controller.start("Science", 3, "easy")

    assert state.phase is Phase.IDLE
    assert state.error == GENERIC_ERROR


def test_retry_after_failure_clears_error(
    fake_generator, quiz_payload
) -> None:
    generator = fake_generator(error=TransportError("down"))
    controller = QuizSessionController(generator)
    controller.start("Science", 3, "easy")

    generator.error = None
    generator.result = quiz_payload
    state = controller.start("Science", 3, "easy")

    assert state.phase is Phase.ANSWERING
    assert state.error is None
    assert len(generator.calls) == 2


def test_start_is_ignored_outside_idle(fake_generator, quiz_payload) -> None:
    generator = fake_generator(result=quiz_payload)
    controller = QuizSessionController(generator)
    controller.start("Science", 3, "easy")

    before = controller.state
    assert controller.start("Other", 2, "hard") is before
    assert len(generator.calls) == 1


def test_reselecting_is_a_no_op(fake_generator, quiz_payload) -> None:
    controller = QuizSessionController(fake_generator(result=quiz_payload))
    controller.start("Science", 3, "easy")

    reviewing = controller.select(0)
    assert reviewing.feedback is Feedback.INCORRECT
    assert controller.select(1) is reviewing
    assert controller.state.answers[0] == 0


def test_full_session_scores_and_restarts(
    fake_generator, quiz_payload
) -> None:
    controller = QuizSessionController(fake_generator(result=quiz_payload))
    controller.start("Science", 3, "easy")
    assert controller.score() is None

    for choice in (1, 0, 0):
        controller.select(choice)
        controller.advance()

    assert controller.state.phase is Phase.FINISHED
    score = controller.score()
    assert score is not None
    assert (score.score, score.total) == (1, 3)
    assert score.classification == "needs improvement"

    state = controller.restart()
    assert state.phase is Phase.IDLE
    assert state.quiz is None
    assert controller.score() is None


def test_unexpected_generator_error_returns_to_idle(
    fake_generator, quiz_payload, caplog
) -> None:
    generator = fake_generator(error=ValueError("header encoding"))
    controller = QuizSessionController(generator)

    with caplog.at_level("ERROR", logger="quick_quiz"):
        state = controller.start("Science", 3, "easy")

    assert state.phase is Phase.IDLE
    assert state.error == GENERIC_ERROR
    assert any(record.exc_info for record in caplog.records)

    generator.error = None
    generator.result = quiz_payload
    assert controller.start("Science", 3, "easy").phase is Phase.ANSWERING
