"""Session building: filter the bank, shuffle with a seed, truncate."""

from __future__ import annotations

import logging
import time
from typing import Iterable, List, Mapping, Optional, Sequence

from ..data.schemas import Difficulty, Question, QuizConfig, QuizSession
from .rng import ensure_seed, hash_seed, mulberry32, shuffle_with_rng
from .scoring import is_correct

logger = logging.getLogger(__name__)

QUIZ_LENGTHS = (10, 20, 30, 40, 60, 80)


def _now_ms() -> int:
    return int(time.time() * 1000)


def filter_pool(
    questions: Iterable[Question],
    difficulties: Iterable[Difficulty],
    tags: Iterable[str] = (),
) -> List[Question]:
    """Questions matching any allowed difficulty and, when given, any tag."""
    allowed = {Difficulty(d) for d in difficulties}
    wanted = set(tags)
    return [
        q
        for q in questions
        if q.difficulty in allowed and (not wanted or wanted.intersection(q.tags))
    ]


def pool_size(questions: Iterable[Question], config: QuizConfig) -> int:
    """Size of the pool previewed during setup (difficulty and tag filters)."""
    return len(filter_pool(questions, config.difficulties, config.tags))


def build_quiz_session(
    questions: Sequence[Question],
    config: QuizConfig,
    now_ms: Optional[int] = None,
) -> QuizSession:
    """Draw a seeded, sized session from `questions`.

    Only the difficulty filter applies here; `config.tags` is carried along
    but does not narrow the draw. Same seed and same filtered input give the
    same ordering. An empty pool yields an empty session.
    """
    seed = ensure_seed(config.seed)
    rng = mulberry32(hash_seed(seed))

    filtered = filter_pool(questions, config.difficulties)
    shuffled = shuffle_with_rng(filtered, rng)
    count = max(0, min(int(config.count), len(shuffled)))

    logger.debug(
        "Built session seed=%s pool=%d count=%d", seed, len(filtered), count
    )
    return QuizSession(
        seed=seed,
        questions=tuple(shuffled[:count]),
        started_at=_now_ms() if now_ms is None else now_ms,
    )


def questions_from_ids(bank: Iterable[Question], ids: Iterable[str]) -> List[Question]:
    """Resolve stored ids against the bank, skipping ids that no longer exist."""
    by_id = {q.id: q for q in bank}
    return [by_id[i] for i in ids if i in by_id]


def missed_questions(
    questions: Iterable[Question], answers: Mapping[str, Optional[int]]
) -> List[Question]:
    """Questions not answered correctly, in session order."""
    return [q for q in questions if not is_correct(q, answers.get(q.id))]
