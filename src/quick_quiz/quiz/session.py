"""Interactive terminal loop for playing generated quizzes.

``run_quiz_app`` reads commands from an input provider, feeds them to a
:class:`QuizSessionController` and renders each resulting state with Rich.
The provider is injectable so tests can script a whole session.
"""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Literal, Optional, Sequence

from rich.console import Console

from ..core.config import ConfigError, load_config
from ..core.credentials import MissingCredentialError
from ..core.logging import configure_logger
from ..core.workspace import WorkspaceError, ensure_workspace
from ..gateway.client import QuizGenerator
from ..gateway.remote import RemoteQuizService
from ..gateway.server import build_gateway
from .controller import QuizSessionController
from .models import Difficulty
from .scoring import QuizScore
from .state import Phase
from .view import LOADING_MESSAGE, render_results, render_state

__all__ = [
    "SessionCommand",
    "QuizAppResult",
    "parse_session_command",
    "run_quiz_app",
    "main",
]

InputProvider = Callable[[str], str]
ExitAction = Literal["finished", "quit"]

DEFAULT_QUESTION_COUNT = 5
DEFAULT_DIFFICULTY = Difficulty.MEDIUM
TOPIC_PROMPT = "Topic (quit or exit ends the session): "


@dataclass(frozen=True)
class SessionCommand:
    """Normalized user command parsed from console input."""

    type: Literal["select", "next", "quit"]
    choice: int | None = None


@dataclass
class QuizAppResult:
    """Return value from ``run_quiz_app``."""

    scores: list[QuizScore] = field(default_factory=list)
    exit_action: ExitAction = "quit"


def parse_session_command(
    raw: str | None, *, option_count: int
) -> SessionCommand | None:
    """Parse raw input typed while a question is on screen.

    Options may be chosen by letter (``a``) or 1-based number (``1``). An
    empty line means "next".
    """

    if raw is None:
        return None
    text = raw.strip()
    lowered = text.lower()
    if lowered in {"", "n", "next"}:
        return SessionCommand("next")
    if lowered in {"q", "quit", "exit"}:
        return SessionCommand("quit")
    if text.isdigit():
        index = int(text) - 1
    elif len(text) == 1 and text.isalpha():
        index = ord(text.upper()) - ord("A")
    else:
        return None
    if 0 <= index < option_count:
        return SessionCommand("select", index)
    return None


class _QuitSession(Exception):
    pass


def run_quiz_app(
    controller: QuizSessionController,
    console: Console,
    input_provider: InputProvider,
) -> QuizAppResult:
    """Run quizzes until the user quits or declines a new one."""

    result = QuizAppResult()
    try:
        while True:
            state = controller.state
            if state.phase is Phase.IDLE:
                render_state(console, state)
                _collect_and_start(controller, console, input_provider)
            elif state.phase in (Phase.ANSWERING, Phase.REVIEWING):
                render_state(console, state)
                _handle_question_input(controller, console, input_provider)
            elif state.phase is Phase.FINISHED:
                score = controller.score()
                assert score is not None
                render_results(console, score)
                result.scores.append(score)
                answer = _ask(input_provider, "Create a new quiz? [y/N] ")
                if answer.strip().lower() not in {"y", "yes"}:
                    result.exit_action = "finished"
                    return result
                controller.restart()
            else:  # pragma: no cover - loading never outlives start()
                raise RuntimeError(f"Unexpected phase {state.phase}")
    except _QuitSession:
        console.print("\n[bold yellow]Ending session.[/]")
    except (EOFError, KeyboardInterrupt, StopIteration):
        console.print("\n[bold yellow]Session interrupted.[/]")
    result.exit_action = "quit"
    return result


def _ask(input_provider: InputProvider, prompt: str) -> str:
    answer = input_provider(prompt)
    if answer.strip().lower() in {"quit", "exit"}:
        raise _QuitSession()
    return answer


def _collect_and_start(
    controller: QuizSessionController,
    console: Console,
    input_provider: InputProvider,
) -> None:
    topic = _ask(input_provider, TOPIC_PROMPT)
    count = _ask(
        input_provider, f"Number of questions [{DEFAULT_QUESTION_COUNT}]: "
    )
    difficulty = _ask(
        input_provider,
        f"Difficulty (easy/medium/hard) [{DEFAULT_DIFFICULTY.value}]: ",
    )
    with console.status(LOADING_MESSAGE):
        controller.start(
            topic,
            count.strip() or DEFAULT_QUESTION_COUNT,
            difficulty.strip() or DEFAULT_DIFFICULTY.value,
        )


def _handle_question_input(
    controller: QuizSessionController,
    console: Console,
    input_provider: InputProvider,
) -> None:
    state = controller.state
    assert state.quiz is not None
    question = state.quiz.questions[state.current_question_index]
    raw = input_provider("> ")
    command = parse_session_command(raw, option_count=len(question.options))
    if command is None:
        console.print("[red]Unrecognized command. Try again.[/]")
        return
    if command.type == "quit":
        raise _QuitSession()
    if command.type == "next":
        if not state.can_advance:
            console.print("[red]Choose an answer before moving on.[/]")
            return
        controller.advance()
        return
    if state.phase is Phase.REVIEWING:
        console.print("[yellow]Your answer for this question is locked.[/]")
        return
    controller.select(command.choice)


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="quiz play",
        description="Generate and take a quiz in the terminal.",
    )
    parser.add_argument("--config", type=Path, help="Path to a TOML config.")
    parser.add_argument(
        "--server-url",
        help="Quiz server base URL (overrides client.server_url).",
    )
    parser.add_argument(
        "--local",
        action="store_true",
        help="Call the agent service directly instead of a quiz server.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Mirror logs to stderr.",
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config(explicit_path=args.config)
        layout = ensure_workspace()
        generator: QuizGenerator
        if args.local:
            generator = build_gateway(config)
        else:
            generator = RemoteQuizService(
                args.server_url or config.client.server_url,
                timeout=config.client.timeout_seconds,
            )
    except (ConfigError, WorkspaceError, MissingCredentialError) as exc:
        sys.stderr.write(f"Error: {exc}\n")
        return 2

    logger, _ = configure_logger(
        "quick_quiz",
        log_dir=layout.path_for("logs"),
        level=config.logging.level,
        verbose=args.verbose or config.logging.verbose,
        filename="play.log",
    )
    logger.debug("quiz play invoked", extra={"local": bool(args.local)})

    console = Console()
    controller = QuizSessionController(
        generator, logger=logging.getLogger("quick_quiz.quiz")
    )
    result = run_quiz_app(controller, console, console.input)
    logger.info(
        "Quiz session ended",
        extra={
            "exit_action": result.exit_action,
            "quizzes_finished": len(result.scores),
        },
    )
    return 0
