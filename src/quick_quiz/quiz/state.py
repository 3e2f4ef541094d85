"""Pure state machine for a single quiz attempt.

``transition(state, action)`` never mutates its input. Actions that do not
apply to the current phase return the very same state object, which keeps
repeated clicks and stray input harmless.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Union

from .models import Quiz, QuizRequest

__all__ = [
    "Phase",
    "Feedback",
    "SessionState",
    "StartQuiz",
    "RejectRequest",
    "QuizLoaded",
    "GenerationFailed",
    "SelectOption",
    "Advance",
    "Restart",
    "Action",
    "transition",
]


class Phase(Enum):
    IDLE = "idle"
    LOADING = "loading"
    ANSWERING = "answering"
    REVIEWING = "reviewing"
    FINISHED = "finished"


class Feedback(Enum):
    NONE = "none"
    CORRECT = "correct"
    INCORRECT = "incorrect"


def _no_answers() -> Mapping[int, int]:
    return MappingProxyType({})


@dataclass(frozen=True)
class SessionState:
    """Everything the session controller knows about the current attempt."""

    phase: Phase = Phase.IDLE
    quiz: Quiz | None = None
    request: QuizRequest | None = None
    current_question_index: int = 0
    answers: Mapping[int, int] = field(default_factory=_no_answers)
    feedback: Feedback = Feedback.NONE
    completed: bool = False
    error: str | None = None

    @property
    def total_questions(self) -> int:
        return len(self.quiz) if self.quiz is not None else 0

    @property
    def is_last_question(self) -> bool:
        return self.current_question_index >= self.total_questions - 1

    @property
    def selected_option(self) -> int | None:
        return self.answers.get(self.current_question_index)

    @property
    def can_advance(self) -> bool:
        return self.phase is Phase.REVIEWING


@dataclass(frozen=True)
class StartQuiz:
    request: QuizRequest


@dataclass(frozen=True)
class RejectRequest:
    message: str


@dataclass(frozen=True)
class QuizLoaded:
    quiz: Quiz


@dataclass(frozen=True)
class GenerationFailed:
    message: str


@dataclass(frozen=True)
class SelectOption:
    option_index: int


@dataclass(frozen=True)
class Advance:
    pass


@dataclass(frozen=True)
class Restart:
    pass


Action = Union[
    StartQuiz,
    RejectRequest,
    QuizLoaded,
    GenerationFailed,
    SelectOption,
    Advance,
    Restart,
]


def transition(state: SessionState, action: Action) -> SessionState:
    """Return the state that follows ``action``."""

    phase = state.phase

    if phase is Phase.IDLE:
        if isinstance(action, StartQuiz):
            return replace(
                state,
                phase=Phase.LOADING,
                request=action.request,
                error=None,
            )
        if isinstance(action, RejectRequest):
            return replace(state, error=action.message)
        return state

    if phase is Phase.LOADING:
        if isinstance(action, QuizLoaded):
            return SessionState(
                phase=Phase.ANSWERING,
                quiz=action.quiz,
                request=state.request,
            )
        if isinstance(action, GenerationFailed):
            return SessionState(error=action.message)
        return state

    if phase is Phase.ANSWERING:
        if isinstance(action, SelectOption):
            return _select(state, action.option_index)
        return state

    if phase is Phase.REVIEWING:
        if isinstance(action, Advance):
            if state.is_last_question:
                return replace(
                    state,
                    phase=Phase.FINISHED,
                    feedback=Feedback.NONE,
                    completed=True,
                )
            return replace(
                state,
                phase=Phase.ANSWERING,
                feedback=Feedback.NONE,
                current_question_index=state.current_question_index + 1,
            )
        return state

    if phase is Phase.FINISHED and isinstance(action, Restart):
        return SessionState()
    return state


def _select(state: SessionState, option_index: int) -> SessionState:
    if state.quiz is None or state.feedback is not Feedback.NONE:
        return state
    question = state.quiz.questions[state.current_question_index]
    if not (0 <= option_index < len(question.options)):
        return state
    answers = dict(state.answers)
    answers[state.current_question_index] = option_index
    feedback = (
        Feedback.CORRECT
        if question.is_correct(option_index)
        else Feedback.INCORRECT
    )
    return replace(
        state,
        phase=Phase.REVIEWING,
        answers=MappingProxyType(answers),
        feedback=feedback,
    )
