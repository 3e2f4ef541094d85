from .controller import GENERIC_ERROR, QuizSessionController
from .models import (
    Difficulty,
    Question,
    Quiz,
    QuizFormatError,
    QuizRequest,
    ValidationError,
    validate_request,
)
from .scoring import PASS_THRESHOLD, QuizScore, score_quiz
from .session import QuizAppResult, parse_session_command, run_quiz_app
from .state import Feedback, Phase, SessionState, transition

__all__ = [
    "GENERIC_ERROR",
    "QuizSessionController",
    "Difficulty",
    "Question",
    "Quiz",
    "QuizFormatError",
    "QuizRequest",
    "ValidationError",
    "validate_request",
    "PASS_THRESHOLD",
    "QuizScore",
    "score_quiz",
    "QuizAppResult",
    "parse_session_command",
    "run_quiz_app",
    "Feedback",
    "Phase",
    "SessionState",
    "transition",
]
