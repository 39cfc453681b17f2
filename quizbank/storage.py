"""Local persistence for the in-progress session and lifetime stats.

Both records are small JSON blobs kept in a `LocalStore`, one file per key.
Reads and writes never raise: anything unreadable, malformed or from
another record version is treated as absent.
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from .config import default_app_config
from .data.schemas import QuizConfig, ScoreSummary
from .utils.io import write_text_atomic
from .utils.validation import (
    RECORD_VERSION,
    SESSION_RECORD_SCHEMA,
    STATS_RECORD_SCHEMA,
    SchemaValidator,
)

logger = logging.getLogger(__name__)

SESSION_KEY = "quizbank-session-v1"
STATS_KEY = "quizbank-stats-v1"
MAX_RECENT_SCORES = 6


class LocalStore:
    """Key/value store of JSON text, backed by files under `root`."""

    def __init__(self, root: str | Path | None = None) -> None:
        self.root = Path(root) if root is not None else Path(default_app_config().storage.root)

    def _path(self, key: str) -> Path:
        return self.root / f"{key}.json"

    def get_item(self, key: str) -> Optional[str]:
        p = self._path(key)
        if not p.exists():
            return None
        return p.read_text(encoding="utf-8")

    def set_item(self, key: str, value: str) -> None:
        write_text_atomic(self._path(key), value)

    def remove_item(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)


@dataclass
class StoredSession:
    config: QuizConfig
    answers: Dict[str, Optional[int]]
    current_index: int
    seed: str
    question_ids: List[str]
    started_at: int
    mode: str
    flagged: List[str] = field(default_factory=list)

    def to_record(self) -> Dict[str, Any]:
        return {
            "version": RECORD_VERSION,
            "config": self.config.to_dict(),
            "answers": dict(self.answers),
            "current_index": self.current_index,
            "seed": self.seed,
            "question_ids": list(self.question_ids),
            "started_at": self.started_at,
            "mode": self.mode,
            "flagged": list(self.flagged),
        }

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "StoredSession":
        return cls(
            config=QuizConfig.from_dict(record["config"]),
            answers=dict(record["answers"]),
            current_index=record["current_index"],
            seed=record["seed"],
            question_ids=list(record["question_ids"]),
            started_at=record["started_at"],
            mode=record["mode"],
            flagged=list(record["flagged"]),
        )


@dataclass
class ScoreRecord:
    accuracy: float
    total: int
    correct: int
    at: int  # epoch milliseconds


@dataclass
class StoredStats:
    total_runs: int = 0
    total_answered: int = 0
    total_correct: int = 0
    last_scores: List[ScoreRecord] = field(default_factory=list)

    def to_record(self) -> Dict[str, Any]:
        return {"version": RECORD_VERSION, **asdict(self)}

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "StoredStats":
        return cls(
            total_runs=record["total_runs"],
            total_answered=record["total_answered"],
            total_correct=record["total_correct"],
            last_scores=[
                ScoreRecord(
                    accuracy=float(s["accuracy"]),
                    total=int(s["total"]),
                    correct=int(s["correct"]),
                    at=int(s["at"]),
                )
                for s in record["last_scores"]
            ],
        )


def _read_record(store: LocalStore, key: str, validator: SchemaValidator) -> Optional[Dict[str, Any]]:
    try:
        raw = store.get_item(key)
        if raw is None:
            return None
        record = json.loads(raw)
    except (OSError, ValueError) as e:
        logger.warning("Ignoring unreadable record %s: %s", key, e)
        return None
    errors = validator.validate_record(record)
    if errors:
        logger.warning("Ignoring invalid record %s: %s", key, "; ".join(errors))
        return None
    return record


def _write_record(store: LocalStore, key: str, record: Dict[str, Any]) -> None:
    try:
        store.set_item(key, json.dumps(record))
    except (OSError, TypeError, ValueError) as e:
        logger.warning("Could not save record %s: %s", key, e)


def load_session(store: LocalStore) -> Optional[StoredSession]:
    record = _read_record(store, SESSION_KEY, SchemaValidator(SESSION_RECORD_SCHEMA))
    if record is None:
        return None
    try:
        return StoredSession.from_record(record)
    except (KeyError, TypeError, ValueError, OverflowError) as e:
        logger.warning("Ignoring invalid record %s: %s", SESSION_KEY, e)
        return None


def save_session(store: LocalStore, session: StoredSession) -> None:
    _write_record(store, SESSION_KEY, session.to_record())


def clear_session(store: LocalStore) -> None:
    try:
        store.remove_item(SESSION_KEY)
    except OSError as e:
        logger.warning("Could not clear record %s: %s", SESSION_KEY, e)


def load_stats(store: LocalStore) -> StoredStats:
    record = _read_record(store, STATS_KEY, SchemaValidator(STATS_RECORD_SCHEMA))
    if record is None:
        return StoredStats()
    try:
        return StoredStats.from_record(record)
    except (KeyError, TypeError, ValueError, OverflowError) as e:
        logger.warning("Ignoring invalid record %s: %s", STATS_KEY, e)
        return StoredStats()


def save_stats(store: LocalStore, stats: StoredStats) -> None:
    _write_record(store, STATS_KEY, stats.to_record())


def record_result(stats: StoredStats, summary: ScoreSummary, at_ms: int) -> StoredStats:
    """Fold a finished run into lifetime stats, keeping the newest scores first."""
    latest = ScoreRecord(
        accuracy=summary.accuracy,
        total=summary.total,
        correct=summary.correct,
        at=at_ms,
    )
    return StoredStats(
        total_runs=stats.total_runs + 1,
        total_answered=stats.total_answered + summary.total,
        total_correct=stats.total_correct + summary.correct,
        last_scores=[latest, *stats.last_scores][:MAX_RECENT_SCORES],
    )
