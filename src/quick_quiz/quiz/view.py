"""Rich rendering for each phase of a quiz session."""

from __future__ import annotations

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.progress_bar import ProgressBar
from rich.table import Table
from rich.text import Text

from .models import Difficulty, MAX_QUESTIONS, MIN_QUESTIONS
from .scoring import QuizScore
from .state import Feedback, Phase, SessionState

__all__ = [
    "LOADING_MESSAGE",
    "option_key",
    "render_state",
    "render_form",
    "render_question",
    "render_results",
]

LOADING_MESSAGE = "Generating your quiz..."


def option_key(index: int) -> str:
    return chr(ord("A") + index)


def render_state(
    console: Console,
    state: SessionState,
    score: QuizScore | None = None,
) -> None:
    """Render whatever the current phase calls for."""

    if state.phase is Phase.IDLE:
        render_form(console, state)
    elif state.phase is Phase.LOADING:
        console.print(Text(LOADING_MESSAGE, style="bold"))
    elif state.phase in (Phase.ANSWERING, Phase.REVIEWING):
        render_question(console, state)
    elif score is not None:
        render_results(console, score)


def render_form(console: Console, state: SessionState) -> None:
    console.print()
    console.rule(Text("Quiz Generator", style="bold cyan"))
    levels = ", ".join(level.value for level in Difficulty)
    console.print(
        Text(
            f"Pick a topic, {MIN_QUESTIONS}-{MAX_QUESTIONS} questions and a "
            f"difficulty ({levels}).",
            style="dim",
        )
    )
    if state.error:
        console.print(
            Panel(state.error, title="Error", border_style="red")
        )


def render_question(console: Console, state: SessionState) -> None:
    assert state.quiz is not None
    index = state.current_question_index
    total = state.total_questions
    question = state.quiz.questions[index]
    reviewing = state.feedback is not Feedback.NONE
    selected = state.selected_option

    console.print()
    console.rule(
        Text.assemble(
            (f"Question {index + 1}", "bold cyan"),
            (f" of {total}", "dim"),
        )
    )
    console.print(ProgressBar(total=total, completed=index + 1, width=40))
    console.print(Text(question.prompt, style="bold"))

    table = Table(show_header=False, box=box.SIMPLE, expand=True)
    table.add_column("Key", justify="center", style="cyan")
    table.add_column("Choice")
    table.add_column("Mark", justify="center")

    for option_index, option in enumerate(question.options):
        is_selected = option_index == selected
        is_correct = option == question.correct_answer
        indicator = "•" if is_selected else " "
        text = Text(f"{indicator} {option}")
        mark = ""
        if reviewing and is_correct:
            text.stylize("bold green")
            mark = "✔"
        elif reviewing and is_selected:
            text.stylize("bold red")
            mark = "✘"
        elif is_selected:
            text.stylize("bold blue")
        table.add_row(option_key(option_index), text, mark)
    console.print(table)

    if state.feedback is Feedback.CORRECT:
        console.print(Panel("Correct!", border_style="green"))
    elif state.feedback is Feedback.INCORRECT:
        console.print(
            Panel(
                "Incorrect. The correct answer is "
                f'"{question.correct_answer}".',
                border_style="red",
            )
        )

    if reviewing:
        label = "Finish Quiz" if state.is_last_question else "Next"
        hint = f"Press Enter or n for {label}, quit to exit"
    else:
        keys = ", ".join(
            option_key(i) for i in range(len(question.options))
        )
        hint = f"Choose [{keys}] or quit to exit"
    console.print(Text(hint, style="dim"))


def render_results(console: Console, score: QuizScore) -> None:
    console.print()
    console.rule(Text("Quiz Results", style="bold magenta"))
    console.print(
        Text(f"{score.score} / {score.total}", style="bold"),
        justify="center",
    )
    console.print(
        Text(f"({score.percentage:.2f}%)", style="dim"), justify="center"
    )
    console.print(
        ProgressBar(total=100, completed=score.percentage, width=40)
    )
    if score.passed:
        console.print(
            Panel(
                "You did great on this quiz!",
                title="Congratulations!",
                border_style="green",
            )
        )
    else:
        console.print(
            Panel(
                "You can improve your score with more practice.",
                title="Keep practicing!",
                border_style="yellow",
            )
        )
