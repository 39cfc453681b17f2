"""Quiz flow as an explicit state machine.

    SETUP --start/resume--> QUIZ --finish--> RESULTS
      ^                      |                 |
      +------- reset --------+----- reset -----+
                             ^                 |
                             +-- retry/review -+

`QuizRunner` owns the mutable per-session state (answers, reveals, flags,
current index) and persists it through a `LocalStore` after every change.
"""

from __future__ import annotations

import logging
import time
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence

from ..data.schemas import Question, QuizConfig, QuizMode, QuizSession, ScoreSummary
from ..storage import (
    LocalStore,
    StoredSession,
    clear_session,
    load_session,
    load_stats,
    record_result,
    save_session,
    save_stats,
)
from .scoring import score_quiz
from .session import build_quiz_session, missed_questions, questions_from_ids

logger = logging.getLogger(__name__)


class QuizPhase(str, Enum):
    SETUP = "setup"
    QUIZ = "quiz"
    RESULTS = "results"


class PhaseError(RuntimeError):
    """Raised when a transition is requested from the wrong phase."""


class QuizRunner:
    def __init__(
        self,
        bank: Sequence[Question],
        config: Optional[QuizConfig] = None,
        store: Optional[LocalStore] = None,
    ) -> None:
        self.bank = list(bank)
        self.config = config or QuizConfig()
        self.store = store
        self.phase = QuizPhase.SETUP
        self.session: Optional[QuizSession] = None
        self.answers: Dict[str, Optional[int]] = {}
        self.revealed: Dict[str, bool] = {}
        self.flagged: List[str] = []
        self.current_index = 0
        self.summary: Optional[ScoreSummary] = None

    # ------------------------------------------------------------------ helpers

    def _require(self, *phases: QuizPhase) -> None:
        if self.phase not in phases:
            allowed = ", ".join(p.value for p in phases)
            raise PhaseError(f"Cannot do that in phase '{self.phase.value}' (needs {allowed})")

    def _persist(self) -> None:
        if self.store is None or self.session is None:
            return
        save_session(
            self.store,
            StoredSession(
                config=self.config,
                answers=dict(self.answers),
                current_index=self.current_index,
                seed=self.session.seed,
                question_ids=self.session.question_ids,
                started_at=self.session.started_at,
                mode=QuizMode(self.config.mode).value,
                flagged=list(self.flagged),
            ),
        )

    @property
    def questions(self) -> List[Question]:
        return list(self.session.questions) if self.session else []

    @property
    def current_question(self) -> Optional[Question]:
        qs = self.questions
        return qs[self.current_index] if 0 <= self.current_index < len(qs) else None

    @property
    def answered_count(self) -> int:
        return sum(1 for q in self.questions if self.answers.get(q.id) is not None)

    def explanation_visible(self, question: Optional[Question] = None) -> bool:
        question = question or self.current_question
        if question is None:
            return False
        if self.phase is QuizPhase.RESULTS:
            return True
        if self.config.mode == QuizMode.LEARN:
            return self.answers.get(question.id) is not None
        return self.revealed.get(question.id, False)

    # -------------------------------------------------------------- transitions

    def start(
        self,
        overrides: Optional[Dict[str, Any]] = None,
        questions: Optional[Sequence[Question]] = None,
    ) -> QuizSession:
        self._require(QuizPhase.SETUP, QuizPhase.RESULTS)
        config = self.config.merged(**(overrides or {}))
        session = build_quiz_session(self.bank if questions is None else questions, config)

        self.config = config
        self.session = session
        self.answers = {q.id: None for q in session.questions}
        self.revealed = {q.id: False for q in session.questions}
        self.flagged = []
        self.current_index = 0
        self.summary = None
        self.phase = QuizPhase.QUIZ
        logger.info("Started quiz seed=%s questions=%d", session.seed, len(session.questions))
        self._persist()
        return session

    def resume(self) -> bool:
        """Rehydrate the stored session; False when nothing usable is stored."""
        self._require(QuizPhase.SETUP)
        if self.store is None:
            return False
        stored = load_session(self.store)
        if stored is None:
            return False
        questions = questions_from_ids(self.bank, stored.question_ids)
        if not questions:
            return False

        self.config = stored.config
        self.session = QuizSession(
            seed=stored.seed, questions=tuple(questions), started_at=stored.started_at
        )
        self.answers = {q.id: stored.answers.get(q.id) for q in questions}
        self.revealed = {q.id: False for q in questions}
        self.flagged = [i for i in stored.flagged if i in self.answers]
        self.current_index = min(stored.current_index, len(questions) - 1)
        self.phase = QuizPhase.QUIZ
        logger.info("Resumed quiz seed=%s at question %d", stored.seed, self.current_index + 1)
        return True

    def select_answer(self, choice: int) -> bool:
        """Record `choice` for the current question; returns whether it is correct."""
        self._require(QuizPhase.QUIZ)
        question = self.current_question
        if question is None:
            raise PhaseError("No question to answer in an empty session")
        if type(choice) is not int:
            raise ValueError(f"Choice must be an integer index, got {type(choice).__name__}")
        if not 0 <= choice < len(question.choices):
            raise ValueError(f"Choice {choice} is out of range for question '{question.id}'")
        self.answers[question.id] = choice
        if self.config.mode == QuizMode.LEARN:
            self.revealed[question.id] = True
        self._persist()
        return choice == question.answer_index

    def toggle_reveal(self) -> bool:
        self._require(QuizPhase.QUIZ)
        question = self.current_question
        if question is None:
            return False
        self.revealed[question.id] = not self.revealed.get(question.id, False)
        return self.revealed[question.id]

    def toggle_flag(self) -> bool:
        self._require(QuizPhase.QUIZ)
        question = self.current_question
        if question is None:
            return False
        if question.id in self.flagged:
            self.flagged.remove(question.id)
        else:
            self.flagged.append(question.id)
        self._persist()
        return question.id in self.flagged

    def next(self) -> int:
        self._require(QuizPhase.QUIZ)
        if self.current_index < len(self.questions) - 1:
            self.current_index += 1
            self._persist()
        return self.current_index

    def previous(self) -> int:
        self._require(QuizPhase.QUIZ)
        if self.current_index > 0:
            self.current_index -= 1
            self._persist()
        return self.current_index

    def finish(self, now_ms: Optional[int] = None) -> ScoreSummary:
        self._require(QuizPhase.QUIZ)
        summary = score_quiz(self.questions, self.answers)
        self.summary = summary
        self.phase = QuizPhase.RESULTS
        if self.store is not None:
            at = int(time.time() * 1000) if now_ms is None else now_ms
            save_stats(self.store, record_result(load_stats(self.store), summary, at))
            clear_session(self.store)
        logger.info(
            "Finished quiz seed=%s correct=%d/%d accuracy=%.1f",
            self.session.seed if self.session else "-",
            summary.correct,
            summary.total,
            summary.accuracy,
        )
        return summary

    def review_mistakes(self) -> QuizSession:
        self._require(QuizPhase.RESULTS)
        missed = missed_questions(self.questions, self.answers)
        return self.start({"count": len(missed), "seed": ""}, missed)

    def quick_retry(self) -> QuizSession:
        self._require(QuizPhase.RESULTS)
        return self.start({"seed": ""})

    def reset(self) -> None:
        if self.store is not None:
            clear_session(self.store)
        self.phase = QuizPhase.SETUP
        self.session = None
        self.answers = {}
        self.revealed = {}
        self.flagged = []
        self.current_index = 0
        self.summary = None
