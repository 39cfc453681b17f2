from __future__ import annotations

from collections import Counter
from typing import Iterable, List, Tuple, TypeVar

from ..data.schemas import BankStats, Difficulty, Question

K = TypeVar("K")


def _by_count(counter: "Counter[K]") -> List[Tuple[K, int]]:
    # Counter keeps first-seen order and sorted() is stable, so ties keep it too.
    return sorted(counter.items(), key=lambda item: -item[1])


def get_question_bank_stats(questions: Iterable[Question]) -> BankStats:
    """Count questions per section, tag and difficulty, most common first."""
    sections: Counter[str] = Counter()
    tags: Counter[str] = Counter()
    difficulties: Counter[Difficulty] = Counter()

    for question in questions:
        sections[question.section] += 1
        difficulties[question.difficulty] += 1
        tags.update(question.tags)

    return BankStats(
        sections=_by_count(sections),
        tags=_by_count(tags),
        difficulties=_by_count(difficulties),
    )
