"""Question bank data handling for quizbank."""

from .schemas import (
    BankStats,
    Difficulty,
    Question,
    QuizConfig,
    QuizMode,
    QuizSession,
    ScoreBucket,
    ScoreSummary,
)
from .loader import load_default_bank, load_question_bank

__all__ = [
    "BankStats",
    "Difficulty",
    "Question",
    "QuizConfig",
    "QuizMode",
    "QuizSession",
    "ScoreBucket",
    "ScoreSummary",
    "load_default_bank",
    "load_question_bank",
]
