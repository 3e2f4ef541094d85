from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Callable, Iterator

import pytest

TESTS_DIR = Path(__file__).resolve().parent
ROOT = TESTS_DIR.parent
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


@pytest.fixture(autouse=True)
def isolated_workspace(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> Iterator[Path]:
    """Point the workspace and config lookups at a per-test directory."""

    home = tmp_path / "quiz-home"
    monkeypatch.setenv("QUICK_QUIZ_HOME", str(home))
    monkeypatch.delenv("QUICK_QUIZ_CONFIG", raising=False)
    monkeypatch.delenv("TRUFFLE_API_KEY", raising=False)
    monkeypatch.delenv("TRUFFLE_AGENT_ID", raising=False)
    monkeypatch.chdir(tmp_path)
    yield home


@pytest.fixture(autouse=True)
def _reset_package_logger() -> Iterator[None]:
    """Undo handlers installed by ``configure_logger`` between tests."""

    yield
    logger = logging.getLogger("quick_quiz")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def quiz_payload() -> dict:
    """A three question quiz in the shape relayed by the gateway."""

    return {
        "questions": [
            {
                "question": "What is the capital of France?",
                "options": ["Berlin", "Paris", "Rome", "Madrid"],
                "correctAnswer": "Paris",
            },
            {
                "question": "Which planet is known as the Red Planet?",
                "options": ["Venus", "Mars", "Jupiter"],
                "correctAnswer": "Mars",
            },
            {
                "question": "What is 2 + 2?",
                "options": ["3", "5"],
                "correctAnswer": "4",
            },
        ]
    }


class FakeGenerator:
    """Quiz generator double recording every call."""

    def __init__(self, result: object = None, error: Exception | None = None):
        self.result = result
        self.error = error
        self.calls: list[tuple] = []

    def generate(self, topic, question_count, difficulty):
        self.calls.append((topic, question_count, difficulty))
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture
def fake_generator() -> Callable[..., FakeGenerator]:
    return FakeGenerator


def make_provider(answers: list[str]) -> Callable[[str], str]:
    iterator = iter(answers)

    def _provider(prompt: str = "") -> str:
        return next(iterator)

    return _provider


@pytest.fixture
def provider_factory() -> Callable[[list[str]], Callable[[str], str]]:
    return make_provider
