"""Interactive terminal front end over `QuizRunner`."""

from __future__ import annotations

from typing import Callable, Optional

from ..data.schemas import QuizMode
from ..engine.flow import PhaseError, QuizPhase, QuizRunner
from ..engine.scoring import format_accuracy, weakest_tags
from ..engine.session import missed_questions

HELP = "Commands: 1-N answer | n next | p prev | f flag | r reveal | q finish | h help"
RESULTS_HELP = "Results: v review answers | m retry mistakes | r quick retry | q quit"


def _choice_label(question, index: Optional[int]) -> str:
    if index is None:
        return "-"
    return f"{index + 1}. {question.choices[index]}"


def render_question(runner: QuizRunner, output: Callable[[str], None]) -> None:
    question = runner.current_question
    if question is None:
        return
    total = len(runner.questions)
    flag = " [flagged]" if question.id in runner.flagged else ""
    output("")
    output(
        f"Q{runner.current_index + 1}/{total} | answered {runner.answered_count}/{total} | "
        f"{question.section} | {question.difficulty.value}{flag}"
    )
    output(question.prompt)
    selected = runner.answers.get(question.id)
    for i, choice in enumerate(question.choices):
        marker = ">" if selected == i else " "
        output(f" {marker} {i + 1}. {choice}")
    if runner.explanation_visible(question):
        verdict = "correct" if selected == question.answer_index else "incorrect"
        if selected is not None:
            output(f"   -> {verdict}; answer: {question.answer_index + 1}")
        output(f"   {question.explanation}")
        if question.deep_dive:
            output(f"   Deep dive: {question.deep_dive}")


def render_results(runner: QuizRunner, output: Callable[[str], None]) -> None:
    summary = runner.summary
    if summary is None:
        return
    output("")
    output(f"Score: {summary.correct}/{summary.total} ({summary.accuracy:.1f}%)")
    for section, bucket in summary.by_section.items():
        output(f"  {section}: {format_accuracy(bucket.correct, bucket.total)}")
    weak = weakest_tags(summary)
    if weak:
        output("Weakest tags: " + ", ".join(f"{tag} ({acc:.0%})" for tag, acc in weak))
    if runner.flagged:
        output("Flagged: " + ", ".join(runner.flagged))


def render_review(runner: QuizRunner, output: Callable[[str], None]) -> None:
    """Every question of a finished run with the chosen and correct answers."""
    for i, question in enumerate(runner.questions, 1):
        selected = runner.answers.get(question.id)
        mark = "ok" if selected == question.answer_index else "missed"
        output("")
        output(f"{i}. [{mark}] {question.id} - {question.prompt}")
        output(f"   Your answer: {_choice_label(question, selected)}")
        output(f"   Correct: {_choice_label(question, question.answer_index)}")
        if runner.explanation_visible(question):
            output(f"   {question.explanation}")


def _play_questions(runner: QuizRunner, input_fn, output) -> bool:
    """Quiz phase loop; False when input ran out before the run was finished."""
    render_question(runner, output)
    while runner.phase is QuizPhase.QUIZ:
        try:
            command = input_fn("> ").strip().lower()
        except EOFError:
            output("")
            output("Progress saved; run `quizbank play` to resume.")
            return False

        if command.isdigit():
            try:
                runner.select_answer(int(command) - 1)
            except ValueError as e:
                output(str(e))
                continue
        elif command == "n":
            runner.next()
        elif command == "p":
            runner.previous()
        elif command == "f":
            runner.toggle_flag()
        elif command == "r":
            runner.toggle_reveal()
        elif command == "q":
            runner.finish()
            render_results(runner, output)
            return True
        elif command in {"h", "?"}:
            output(HELP)
            continue
        else:
            output(f"Unknown command '{command}'. {HELP}")
            continue
        render_question(runner, output)
    return True


def _results_menu(runner: QuizRunner, input_fn, output) -> bool:
    """Results phase loop; True when a new run was started from it."""
    output(RESULTS_HELP)
    while True:
        try:
            command = input_fn("results> ").strip().lower()
        except EOFError:
            return False

        if command == "v":
            render_review(runner, output)
        elif command == "m":
            if not missed_questions(runner.questions, runner.answers):
                output("No mistakes to review.")
                continue
            session = runner.review_mistakes()
            output(f"Reviewing {len(session.questions)} missed questions (seed {session.seed})")
            return True
        elif command == "r":
            session = runner.quick_retry()
            output(f"Quick retry with seed {session.seed}")
            return True
        elif command in {"q", ""}:
            return False
        else:
            output(f"Unknown command '{command}'. {RESULTS_HELP}")


def run_interactive(
    runner: QuizRunner,
    input_fn: Optional[Callable[[str], str]] = None,
    output: Callable[[str], None] = print,
) -> int:
    """Drive `runner` (already in the quiz phase) until the user quits or input ends."""
    input_fn = input_fn or input
    if runner.phase is not QuizPhase.QUIZ:
        raise PhaseError("run_interactive needs a runner in the quiz phase")
    if not runner.questions:
        output("No questions match the selected filters.")
        return 1

    mode = QuizMode(runner.config.mode).value
    output(f"Seed: {runner.session.seed} | mode: {mode} | {len(runner.questions)} questions")
    output(HELP)

    while _play_questions(runner, input_fn, output):
        if not _results_menu(runner, input_fn, output):
            break
    return 0
