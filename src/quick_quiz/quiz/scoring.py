"""Score a finished quiz attempt."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Mapping

from .models import Quiz

__all__ = ["PASS_THRESHOLD", "QuizScore", "score_quiz"]

PASS_THRESHOLD = 70.0

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QuizScore:
    score: int
    total: int
    unscorable: tuple[int, ...] = ()

    @property
    def percentage(self) -> float:
        if self.total == 0:
            return 0.0
        return 100 * self.score / self.total

    @property
    def passed(self) -> bool:
        return self.percentage >= PASS_THRESHOLD

    @property
    def classification(self) -> str:
        return "pass" if self.passed else "needs improvement"


def score_quiz(
    quiz: Quiz,
    answers: Mapping[int, int],
    *,
    log: logging.Logger | None = None,
) -> QuizScore:
    """Count the questions whose recorded option is the correct one.

    The correct option is the first one whose text equals the question's
    correct answer. Questions where no option matches score zero and are
    reported through the log only.
    """

    log = log or logger
    score = 0
    unscorable: list[int] = []
    for index, question in enumerate(quiz.questions):
        correct_index = question.correct_index
        if correct_index is None:
            unscorable.append(index)
            log.warning(
                "Correct answer not found in options",
                extra={
                    "question_number": index + 1,
                    "correct_answer": question.correct_answer,
                },
            )
            continue
        if answers.get(index) == correct_index:
            score += 1
    return QuizScore(
        score=score, total=len(quiz.questions), unscorable=tuple(unscorable)
    )
