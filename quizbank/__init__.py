"""quizbank.

Seeded multiple-choice quiz sessions drawn from a static question bank,
with scoring breakdowns and locally persisted progress and statistics.
"""

from .config import AppConfig, default_app_config
from .data import Difficulty, Question, QuizConfig, QuizMode, load_question_bank
from .engine import (
    QuizPhase,
    QuizRunner,
    build_quiz_session,
    get_question_bank_stats,
    score_quiz,
)
from .storage import LocalStore
from .utils import setup_logging

__all__ = [
    "__version__",
    "AppConfig",
    "default_app_config",
    "Difficulty",
    "Question",
    "QuizConfig",
    "QuizMode",
    "load_question_bank",
    "QuizPhase",
    "QuizRunner",
    "build_quiz_session",
    "get_question_bank_stats",
    "score_quiz",
    "LocalStore",
    "setup_logging",
]

__version__ = "0.1.0"
