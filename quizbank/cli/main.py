from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from quizbank.analysis.report import bank_stats_frame, save_summary, summary_frame
from quizbank.config import AppConfig, default_app_config
from quizbank.data.loader import load_default_bank, load_question_bank
from quizbank.data.schemas import Difficulty, Question, QuizMode
from quizbank.engine.bank_stats import get_question_bank_stats
from quizbank.engine.flow import QuizRunner
from quizbank.engine.scoring import lifetime_accuracy, score_quiz
from quizbank.engine.session import QUIZ_LENGTHS, build_quiz_session, pool_size, questions_from_ids
from quizbank.storage import LocalStore, clear_session, load_stats
from quizbank.utils.logging import setup_logging

from .play import run_interactive

logger = logging.getLogger("quizbank.cli")


def _add_session_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--count", "-n", type=int, default=None, help=f"Questions per session (suggested: {', '.join(map(str, QUIZ_LENGTHS))})")
    p.add_argument("--difficulty", "-d", action="append", choices=[d.value for d in Difficulty], help="Allowed difficulty (repeatable)")
    p.add_argument("--tag", "-t", action="append", default=None, help="Topic tag filter (repeatable)")
    p.add_argument("--mode", choices=[m.value for m in QuizMode], default=None, help="learn: explain after each answer; exam: explain at the end")
    p.add_argument("--seed", default=None, help="Seed string for a reproducible draw")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="quizbank",
        description="quizbank - seeded multiple-choice quiz sessions from a static question bank",
        epilog="""Examples:
  # Show what the bank contains
  quizbank stats

  # Preview a reproducible 10-question draw
  quizbank build --count 10 --difficulty foundation --seed week-1

  # Play in exam mode, resuming any unfinished session
  quizbank play --mode exam

  # Score an answers file and write a CSV report
  quizbank score answers.json --output results/summary.csv
""",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--bank", "-b", default=None, help="Question bank (.json, .jsonl or .csv); defaults to the bundled sample")
    parser.add_argument("--config", "-c", default=None, help="Config file (.json or .yaml)")
    parser.add_argument("--storage", default=None, help="Directory for saved progress and stats")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")

    sub = parser.add_subparsers(dest="command", help="Available commands")

    stats_p = sub.add_parser("stats", help="Count questions per section, tag and difficulty")
    stats_p.add_argument("--json", action="store_true", help="Print JSON instead of a table")

    build_p = sub.add_parser("build", help="Preview the questions a seed would draw")
    _add_session_args(build_p)

    play_p = sub.add_parser("play", help="Take a quiz in the terminal")
    _add_session_args(play_p)
    play_p.add_argument("--new", action="store_true", help="Ignore any saved session and start fresh")

    score_p = sub.add_parser("score", help="Score an answers JSON file")
    score_p.add_argument("answers", help="JSON object of question id -> choice index, or {question_ids, answers}")
    score_p.add_argument("--output", "-o", help="Write the summary (.json or .csv)")

    sub.add_parser("history", help="Show lifetime statistics")
    sub.add_parser("reset", help="Discard the saved in-progress session")
    return parser


def _load_config(path: Optional[str]) -> AppConfig:
    return AppConfig.from_file(path) if path else default_app_config()


def _load_bank(path: Optional[str]) -> List[Question]:
    return load_question_bank(path) if path else load_default_bank()


def _session_overrides(args: argparse.Namespace) -> dict:
    overrides: dict = {}
    if args.count is not None:
        overrides["count"] = args.count
    if args.difficulty:
        overrides["difficulties"] = [Difficulty(d) for d in args.difficulty]
    if args.tag:
        overrides["tags"] = list(args.tag)
    if args.mode:
        overrides["mode"] = QuizMode(args.mode)
    if args.seed is not None:
        overrides["seed"] = args.seed
    return overrides


def cmd_stats(bank: List[Question], args: argparse.Namespace) -> int:
    stats = get_question_bank_stats(bank)
    if args.json:
        payload = {
            "sections": stats.sections,
            "tags": stats.tags,
            "difficulties": [(d.value, n) for d, n in stats.difficulties],
        }
        print(json.dumps(payload, indent=2))
        return 0
    print(f"{len(bank)} questions")
    frame = bank_stats_frame(stats)
    if not frame.empty:
        print(frame.to_string(index=False))
    return 0


def cmd_build(bank: List[Question], cfg: AppConfig, args: argparse.Namespace) -> int:
    config = cfg.quiz.to_quiz_config().merged(**_session_overrides(args))
    session = build_quiz_session(bank, config)
    print(f"Seed: {session.seed}")
    print(f"Pool size: {pool_size(bank, config)} | drawn: {len(session.questions)}")
    for i, q in enumerate(session.questions, 1):
        print(f"{i:>3}. [{q.difficulty.value}] {q.id} - {q.prompt}")
    return 0


def cmd_play(bank: List[Question], cfg: AppConfig, store: LocalStore, args: argparse.Namespace) -> int:
    runner = QuizRunner(bank, cfg.quiz.to_quiz_config(), store)
    if args.new or not runner.resume():
        runner.start(_session_overrides(args))
    return run_interactive(runner)


def cmd_score(bank: List[Question], args: argparse.Namespace) -> int:
    path = Path(args.answers)
    if not path.exists():
        print(f"Error: answers file '{path}' not found")
        return 1
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        print(f"Error: answers file is not valid JSON: {e}")
        return 1
    if not isinstance(payload, dict):
        print("Error: answers file must contain a JSON object")
        return 1

    answers = payload.get("answers", payload)
    if not isinstance(answers, dict):
        print("Error: 'answers' must be a JSON object of question id -> choice index")
        return 1
    ids = payload.get("question_ids") or list(answers)
    questions = questions_from_ids(bank, ids)
    unknown = len(ids) - len(questions)
    if unknown:
        logger.warning("Skipping %d unknown question ids", unknown)

    summary = score_quiz(questions, answers)
    print(f"Score: {summary.correct}/{summary.total} ({summary.accuracy:.1f}%)")
    print(summary_frame(summary).to_string(index=False))
    if args.output:
        save_summary(summary, args.output)
        print(f"Saved summary to {args.output}")
    return 0


def cmd_history(store: LocalStore) -> int:
    stats = load_stats(store)
    print(f"Runs: {stats.total_runs}")
    print(f"Answered: {stats.total_answered} | correct: {stats.total_correct} | accuracy: {lifetime_accuracy(stats):.1f}%")
    for rec in stats.last_scores:
        print(f"  {rec.correct}/{rec.total} ({rec.accuracy:.1f}%) at {rec.at}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    # Handle case where no command is provided
    if args.command is None:
        parser.print_help()
        return 1

    try:
        cfg = _load_config(args.config)
    except FileNotFoundError:
        print(f"Error: config file '{args.config}' not found")
        return 1
    except (ValueError, TypeError) as e:
        print(f"Error: invalid config file '{args.config}': {e}")
        return 1

    level = "DEBUG" if args.verbose else cfg.logging.level
    setup_logging(log_dir=cfg.logging.log_dir if args.config else None, filename=cfg.logging.filename, level=level)

    store = LocalStore(args.storage or cfg.storage.root)

    if args.command == "history":
        return cmd_history(store)
    if args.command == "reset":
        clear_session(store)
        print("Saved session cleared")
        return 0

    try:
        bank = _load_bank(args.bank or cfg.storage.bank)
    except FileNotFoundError as e:
        print(f"Error: {e}")
        return 1
    except ValueError as e:
        print(f"Error: {e}")
        return 4

    if args.command == "stats":
        return cmd_stats(bank, args)
    if args.command == "build":
        return cmd_build(bank, cfg, args)
    if args.command == "play":
        return cmd_play(bank, cfg, store, args)
    if args.command == "score":
        return cmd_score(bank, args)

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
