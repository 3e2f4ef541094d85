"""Quiz requests, questions and the validation applied before generation."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

__all__ = [
    "MIN_QUESTIONS",
    "MAX_QUESTIONS",
    "Difficulty",
    "QuizRequest",
    "Question",
    "Quiz",
    "ValidationError",
    "QuizFormatError",
    "validate_request",
]

MIN_QUESTIONS = 1
MAX_QUESTIONS = 20


class Difficulty(StrEnum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class ValidationError(ValueError):
    """Raised when user supplied quiz parameters are unusable."""


class QuizFormatError(ValueError):
    """Raised when a generated quiz cannot be played."""


@dataclass(frozen=True)
class QuizRequest:
    """Checked parameters for one generation request."""

    topic: str
    question_count: int
    difficulty: Difficulty


@dataclass(frozen=True)
class Question:
    """A multiple-choice question as relayed by the gateway.

    ``correct_answer`` is compared to option text. Nothing guarantees it is
    one of ``options``; scoring treats such a question as unscorable.
    """

    prompt: str
    options: tuple[str, ...]
    correct_answer: str

    @property
    def correct_index(self) -> int | None:
        try:
            return self.options.index(self.correct_answer)
        except ValueError:
            return None

    def is_correct(self, option_index: int) -> bool:
        return self.options[option_index] == self.correct_answer


@dataclass(frozen=True)
class Quiz:
    questions: tuple[Question, ...]

    def __len__(self) -> int:
        return len(self.questions)

    @classmethod
    def from_payload(cls, payload: Any) -> "Quiz":
        """Build a quiz from ``{"questions": [{question, options,
        correctAnswer}, ...]}``.

        Values are coerced to strings. Payloads that could not be played
        (no questions, or a question without options) raise
        :class:`QuizFormatError`.
        """

        if not isinstance(payload, Mapping):
            raise QuizFormatError(
                f"Expected a quiz object, got {type(payload).__name__}."
            )
        raw_questions = payload.get("questions")
        if not isinstance(raw_questions, list) or not raw_questions:
            raise QuizFormatError("Quiz has no questions.")
        return cls(
            tuple(
                _build_question(item, index)
                for index, item in enumerate(raw_questions)
            )
        )


def _build_question(data: Any, index: int) -> Question:
    if not isinstance(data, Mapping):
        raise QuizFormatError(f"Question {index + 1} is not an object.")
    options = data.get("options")
    if not isinstance(options, list) or not options:
        raise QuizFormatError(f"Question {index + 1} has no options.")
    correct = data.get("correctAnswer")
    return Question(
        prompt=str(data.get("question", "")).strip(),
        options=tuple(str(option) for option in options),
        correct_answer="" if correct is None else str(correct),
    )


def validate_request(
    topic: Any, question_count: Any, difficulty: Any
) -> QuizRequest:
    """Check raw form values and return a :class:`QuizRequest`."""

    if not isinstance(topic, str) or not topic.strip():
        raise ValidationError("Please enter a valid topic.")
    count = _coerce_count(question_count)
    if count is None or not (MIN_QUESTIONS <= count <= MAX_QUESTIONS):
        raise ValidationError(
            "Number of questions must be between "
            f"{MIN_QUESTIONS} and {MAX_QUESTIONS}."
        )
    try:
        level = Difficulty(difficulty)
    except ValueError as exc:
        raise ValidationError(
            "Please select a valid difficulty level."
        ) from exc
    return QuizRequest(
        topic=topic.strip(), question_count=count, difficulty=level
    )


def _coerce_count(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None
