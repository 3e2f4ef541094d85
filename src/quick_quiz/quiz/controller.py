"""Drive the quiz state machine against a quiz generator."""

from __future__ import annotations

import logging
from typing import Any

from ..gateway.client import QuizGenerator
from ..gateway.errors import GatewayError
from .models import Quiz, QuizFormatError, ValidationError, validate_request
from .scoring import QuizScore, score_quiz
from .state import (
    Action,
    Advance,
    GenerationFailed,
    Phase,
    QuizLoaded,
    RejectRequest,
    Restart,
    SelectOption,
    SessionState,
    StartQuiz,
    transition,
)

__all__ = ["GENERIC_ERROR", "QuizSessionController"]

GENERIC_ERROR = "Failed to generate quiz. Please try again."


class QuizSessionController:
    """Own the state of one quiz session and apply user actions to it."""

    def __init__(
        self,
        generator: QuizGenerator,
        *,
        logger: logging.Logger | None = None,
    ) -> None:
        self._generator = generator
        self._logger = logger or logging.getLogger(__name__)
        self.state = SessionState()

    def dispatch(self, action: Action) -> SessionState:
        self.state = transition(self.state, action)
        return self.state

    def start(
        self, topic: Any, question_count: Any, difficulty: Any
    ) -> SessionState:
        """Validate the form values, request a quiz and load it.

        Blocks until the generator answers. Any generator failure, expected
        or not, or a payload that cannot be played, returns the session to
        idle with a generic error message.
        """

        if self.state.phase is not Phase.IDLE:
            return self.state
        try:
            request = validate_request(topic, question_count, difficulty)
        except ValidationError as exc:
            self._logger.info(
                "Rejected quiz parameters", extra={"reason": str(exc)}
            )
            return self.dispatch(RejectRequest(str(exc)))

        self.dispatch(StartQuiz(request))
        try:
            payload = self._generator.generate(
                request.topic,
                request.question_count,
                request.difficulty.value,
            )
            quiz = Quiz.from_payload(payload)
        except (GatewayError, QuizFormatError) as exc:
            self._logger.error(
                "Error generating quiz",
                extra={"error_type": type(exc).__name__, "detail": str(exc)},
            )
            return self.dispatch(GenerationFailed(GENERIC_ERROR))
        except Exception as exc:
            self._logger.exception(
                "Unexpected error generating quiz",
                extra={"error_type": type(exc).__name__},
            )
            return self.dispatch(GenerationFailed(GENERIC_ERROR))

        self._logger.info(
            "Quiz loaded",
            extra={
                "topic": request.topic,
                "requested": request.question_count,
                "received": len(quiz),
            },
        )
        return self.dispatch(QuizLoaded(quiz))

    def select(self, option_index: int) -> SessionState:
        return self.dispatch(SelectOption(option_index))

    def advance(self) -> SessionState:
        return self.dispatch(Advance())

    def restart(self) -> SessionState:
        return self.dispatch(Restart())

    def score(self) -> QuizScore | None:
        """Return the result once the attempt is finished."""

        if self.state.phase is not Phase.FINISHED or self.state.quiz is None:
            return None
        return score_quiz(
            self.state.quiz, self.state.answers, log=self._logger
        )
