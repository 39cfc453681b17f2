"""Scoring and accuracy summaries for a finished (or in-progress) session."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional, Sequence, Tuple

from ..data.schemas import Difficulty, Question, ScoreBucket, ScoreSummary

if TYPE_CHECKING:
    from ..storage import StoredStats


def round_ratio(correct: int, total: int, scale: int) -> int:
    """`correct / total * scale` rounded half-up, in exact integer arithmetic."""
    return (2 * correct * scale + total) // (2 * total)


def percent(correct: int, total: int) -> float:
    """Percentage rounded half-up to one decimal; 0.0 for an empty total."""
    if total == 0:
        return 0.0
    return round_ratio(correct, total, 1000) / 10


def is_correct(question: Question, selected: Any) -> bool:
    # Strict: bools and floats never count as a selected index.
    return type(selected) is int and selected == question.answer_index


def score_quiz(
    questions: Sequence[Question], answers: Mapping[str, Optional[int]]
) -> ScoreSummary:
    """Score `questions` against `answers` (question id -> choice index or None).

    Missing or None answers count as incorrect but still add to every total.
    `by_difficulty` always carries all three difficulty buckets.
    """
    by_section: Dict[str, ScoreBucket] = {}
    by_difficulty: Dict[Difficulty, ScoreBucket] = {d: ScoreBucket() for d in Difficulty}
    by_tag: Dict[str, ScoreBucket] = {}

    correct = 0
    for question in questions:
        hit = is_correct(question, answers.get(question.id))
        buckets = [
            by_section.setdefault(question.section, ScoreBucket()),
            by_difficulty[question.difficulty],
        ]
        buckets.extend(by_tag.setdefault(tag, ScoreBucket()) for tag in question.tags)
        for bucket in buckets:
            bucket.total += 1
            if hit:
                bucket.correct += 1
        if hit:
            correct += 1

    total = len(questions)
    return ScoreSummary(
        total=total,
        correct=correct,
        accuracy=percent(correct, total),
        by_section=by_section,
        by_difficulty=by_difficulty,
        by_tag=by_tag,
    )


def format_accuracy(correct: int, total: int) -> str:
    if total == 0:
        return "0%"
    return f"{round_ratio(correct, total, 100)}%"


def weakest_tags(
    summary: ScoreSummary, min_total: int = 2, limit: int = 6
) -> List[Tuple[str, float]]:
    """Tags seen at least `min_total` times, lowest accuracy first."""
    ranked = [
        (tag, bucket.accuracy)
        for tag, bucket in summary.by_tag.items()
        if bucket.total >= min_total
    ]
    ranked.sort(key=lambda item: item[1])
    return ranked[:limit]


def lifetime_accuracy(stats: "StoredStats") -> float:
    return percent(stats.total_correct, stats.total_answered)
