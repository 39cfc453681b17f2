"""Session building, scoring and quiz flow."""

from .bank_stats import get_question_bank_stats
from .flow import PhaseError, QuizPhase, QuizRunner
from .rng import ensure_seed, hash_seed, mulberry32, shuffle_with_rng
from .scoring import format_accuracy, lifetime_accuracy, score_quiz, weakest_tags
from .session import (
    QUIZ_LENGTHS,
    build_quiz_session,
    filter_pool,
    missed_questions,
    pool_size,
    questions_from_ids,
)

__all__ = [
    "QUIZ_LENGTHS",
    "PhaseError",
    "QuizPhase",
    "QuizRunner",
    "build_quiz_session",
    "ensure_seed",
    "filter_pool",
    "format_accuracy",
    "get_question_bank_stats",
    "hash_seed",
    "lifetime_accuracy",
    "missed_questions",
    "mulberry32",
    "pool_size",
    "questions_from_ids",
    "score_quiz",
    "shuffle_with_rng",
    "weakest_tags",
]
