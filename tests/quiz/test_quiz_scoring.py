from __future__ import annotations

import pytest

from quick_quiz.quiz.models import Question, Quiz
from quick_quiz.quiz.scoring import QuizScore, score_quiz


def test_one_of_three_needs_improvement(quiz_payload, caplog) -> None:
    quiz = Quiz.from_payload(quiz_payload)

    with caplog.at_level("WARNING", logger="quick_quiz"):
        result = score_quiz(quiz, {0: 1, 1: 0, 2: 0})

    assert result.score == 1
    assert result.total == 3
    assert f"{result.percentage:.2f}" == "33.33"
    assert result.classification == "needs improvement"
    assert result.unscorable == (2,)
    assert any(
        record.getMessage() == "Correct answer not found in options"
        and getattr(record, "question_number", None) == 3
        for record in caplog.records
    )


def test_all_correct_passes() -> None:
    quiz = Quiz(
        (
            Question("Q1", ("a", "b"), "a"),
            Question("Q2", ("a", "b"), "b"),
        )
    )
    result = score_quiz(quiz, {0: 0, 1: 1})
    assert result.score == 2
    assert result.percentage == 100.0
    assert result.classification == "pass"
    assert result.unscorable == ()


def test_duplicate_options_score_only_first_match() -> None:
    quiz = Quiz((Question("Pick", ("yes", "no", "yes"), "yes"),))
    assert score_quiz(quiz, {0: 2}).score == 0
    assert score_quiz(quiz, {0: 0}).score == 1


def test_unanswered_questions_score_zero() -> None:
    quiz = Quiz((Question("Q1", ("a", "b"), "a"),))
    assert score_quiz(quiz, {}).score == 0


@pytest.mark.parametrize(
    ("score", "total", "passed"),
    [(7, 10, True), (69, 100, False), (0, 0, False), (1, 1, True)],
)
def test_pass_threshold_is_inclusive(score, total, passed) -> None:
    assert QuizScore(score, total).passed is passed
