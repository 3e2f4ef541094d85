from __future__ import annotations

from rich.console import Console

from quick_quiz.gateway.errors import TransportError
from quick_quiz.gateway.remote import RemoteQuizService
from quick_quiz.quiz import session
from quick_quiz.quiz.controller import GENERIC_ERROR, QuizSessionController
from quick_quiz.quiz.session import (
    QuizAppResult,
    SessionCommand,
    parse_session_command,
    run_quiz_app,
)
from quick_quiz.quiz.state import Phase


def _console() -> Console:
    return Console(record=True, width=80)


def test_parse_session_command_variants() -> None:
    assert parse_session_command("b", option_count=3) == SessionCommand(
        "select", 1
    )
    assert parse_session_command(" 3 ", option_count=3) == SessionCommand(
        "select", 2
    )
    assert parse_session_command("", option_count=3) == SessionCommand("next")
    assert parse_session_command("Next", option_count=3) == SessionCommand(
        "next"
    )
    assert parse_session_command("q", option_count=3) == SessionCommand(
        "quit"
    )
    assert parse_session_command("d", option_count=3) is None
    assert parse_session_command("0", option_count=3) is None
    assert parse_session_command("maybe", option_count=3) is None
    assert parse_session_command(None, option_count=3) is None


def test_run_quiz_app_full_flow(
    fake_generator, quiz_payload, provider_factory
) -> None:
    console = _console()
    generator = fake_generator(result=quiz_payload)
    controller = QuizSessionController(generator)
    provider = provider_factory(
        ["Science", "3", "easy", "b", "", "a", "n", "1", "next", "n"]
    )

    result = run_quiz_app(controller, console, provider)

    assert isinstance(result, QuizAppResult)
    assert result.exit_action == "finished"
    assert generator.calls == [("Science", 3, "easy")]
    assert len(result.scores) == 1
    assert (result.scores[0].score, result.scores[0].total) == (1, 3)
    rendered = console.export_text()
    assert "Question 1 of 3" in rendered
    assert "Correct!" in rendered
    assert 'Incorrect. The correct answer is "Mars".' in rendered
    assert "Finish Quiz" in rendered
    assert "1 / 3" in rendered
    assert "(33.33%)" in rendered
    assert "Keep practicing!" in rendered


def test_run_quiz_app_uses_defaults_and_restarts(
    fake_generator, quiz_payload, provider_factory
) -> None:
    console = _console()
    generator = fake_generator(result=quiz_payload)
    controller = QuizSessionController(generator)
    answers = ["History", "", ""]
    answers += ["b", "", "b", "", "a", ""]
    answers += ["y", "quit"]

    result = run_quiz_app(controller, console, provider_factory(answers))

    assert generator.calls == [("History", 5, "medium")]
    assert result.exit_action == "quit"
    assert len(result.scores) == 1
    assert result.scores[0].score == 2
    assert controller.state.phase is Phase.IDLE
    assert "Ending session." in console.export_text()


def test_run_quiz_app_guards_question_input(
    fake_generator, quiz_payload, provider_factory
) -> None:
    console = _console()
    controller = QuizSessionController(fake_generator(result=quiz_payload))
    provider = provider_factory(
        ["Science", "3", "hard", "n", "zz", "a", "b", "quit"]
    )

    result = run_quiz_app(controller, console, provider)

    rendered = console.export_text()
    assert "Choose an answer before moving on." in rendered
    assert "Unrecognized command. Try again." in rendered
    assert "Your answer for this question is locked." in rendered
    assert controller.state.answers[0] == 0
    assert result.exit_action == "quit"


def test_run_quiz_app_shows_validation_error(
    fake_generator, provider_factory
) -> None:
    console = _console()
    generator = fake_generator(result={})
    controller = QuizSessionController(generator)

    run_quiz_app(
        controller, console, provider_factory(["   ", "3", "easy", "quit"])
    )

    assert generator.calls == []
    assert "Please enter a valid topic." in console.export_text()


def test_run_quiz_app_shows_generic_error_on_failure(
    fake_generator, provider_factory
) -> None:
    console = _console()
    controller = QuizSessionController(
        fake_generator(error=TransportError("connection refused"))
    )

    run_quiz_app(
        controller, console, provider_factory(["Science", "3", "easy"])
    )

    rendered = console.export_text()
    assert GENERIC_ERROR in rendered
    assert "connection refused" not in rendered
    assert "Session interrupted." in rendered


def test_play_main_uses_remote_service(monkeypatch) -> None:
    seen: dict = {}

    def fake_run(controller, console, input_provider):
        seen["generator"] = controller._generator
        return QuizAppResult(exit_action="quit")

    monkeypatch.setattr(session, "run_quiz_app", fake_run)

    code = session.main(["--server-url", "http://quiz.test:9000"])

    assert code == 0
    generator = seen["generator"]
    assert isinstance(generator, RemoteQuizService)
    assert generator.url == "http://quiz.test:9000/api/generate"


def test_play_main_local_requires_credentials(monkeypatch, capsys) -> None:
    monkeypatch.setattr(
        session,
        "run_quiz_app",
        lambda *args: (_ for _ in ()).throw(AssertionError("not reached")),
    )
    monkeypatch.setattr(
        "quick_quiz.core.credentials.load_dotenv", lambda *a, **k: False
    )

    code = session.main(["--local"])

    assert code == 2
    assert "TRUFFLE_API_KEY" in capsys.readouterr().err


def test_topic_prompt_mentions_quit_words(fake_generator) -> None:
    prompts: list[str] = []

    def provider(prompt: str) -> str:
        prompts.append(prompt)
        return "exit"

    controller = QuizSessionController(fake_generator(result={}))
    result = run_quiz_app(controller, _console(), provider)

    assert result.exit_action == "quit"
    assert prompts == ["Topic (quit or exit ends the session): "]
