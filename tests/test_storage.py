"""Tests for the local store and the two persisted records."""

import json

import pytest

from quizbank.data.schemas import Difficulty, QuizConfig, QuizMode
from quizbank.engine.scoring import score_quiz
from quizbank.storage import (
    MAX_RECENT_SCORES,
    SESSION_KEY,
    STATS_KEY,
    ScoreRecord,
    StoredSession,
    StoredStats,
    clear_session,
    load_session,
    load_stats,
    record_result,
    save_session,
    save_stats,
)


def _stored_session() -> StoredSession:
    return StoredSession(
        config=QuizConfig(count=2, difficulties=[Difficulty.EXPERT], tags=["pda"], mode=QuizMode.EXAM, seed="s1"),
        answers={"Q1": 0, "Q2": None},
        current_index=1,
        seed="s1",
        question_ids=["Q1", "Q2"],
        started_at=1700000000000,
        mode="exam",
        flagged=["Q2"],
    )


def test_local_store_roundtrip(store):
    assert store.get_item("k") is None
    store.set_item("k", '{"a": 1}')
    assert store.get_item("k") == '{"a": 1}'
    store.remove_item("k")
    store.remove_item("k")
    assert store.get_item("k") is None


def test_session_save_load_clear(store):
    save_session(store, _stored_session())
    loaded = load_session(store)
    assert loaded == _stored_session()

    raw = json.loads(store.get_item(SESSION_KEY))
    assert raw["version"] == 1
    assert raw["config"]["difficulties"] == ["expert"]

    clear_session(store)
    assert load_session(store) is None


def test_missing_records_are_absent(store):
    assert load_session(store) is None
    assert load_stats(store) == StoredStats()


def test_corrupt_records_are_treated_as_absent(store):
    store.set_item(SESSION_KEY, "{not json")
    store.set_item(STATS_KEY, "[]")
    assert load_session(store) is None
    assert load_stats(store) == StoredStats()


def test_wrong_version_is_treated_as_absent(store):
    record = _stored_session().to_record()
    record["version"] = 99
    store.set_item(SESSION_KEY, json.dumps(record))
    assert load_session(store) is None

    stats = StoredStats(total_runs=1).to_record()
    stats["version"] = 0
    store.set_item(STATS_KEY, json.dumps(stats))
    assert load_stats(store).total_runs == 0


def test_shape_drift_is_treated_as_absent(store):
    record = _stored_session().to_record()
    record["answers"] = {"Q1": "zero"}
    store.set_item(SESSION_KEY, json.dumps(record))
    assert load_session(store) is None

    record = _stored_session().to_record()
    record["config"]["difficulties"] = ["legendary"]
    store.set_item(SESSION_KEY, json.dumps(record))
    assert load_session(store) is None


def test_write_failure_is_swallowed(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("a file where the store directory should be")
    from quizbank.storage import LocalStore

    broken = LocalStore(blocker)
    save_stats(broken, StoredStats(total_runs=3))
    save_session(broken, _stored_session())
    clear_session(broken)
    assert load_stats(broken) == StoredStats()


def test_stats_roundtrip(store):
    stats = StoredStats(
        total_runs=2,
        total_answered=15,
        total_correct=9,
        last_scores=[ScoreRecord(accuracy=60.0, total=10, correct=6, at=2), ScoreRecord(accuracy=60.0, total=5, correct=3, at=1)],
    )
    save_stats(store, stats)
    assert load_stats(store) == stats


def test_record_result_is_bounded_newest_first(two_questions):
    summary = score_quiz(two_questions, {"Q1": 0, "Q2": 0})
    stats = StoredStats()
    for at in range(1, 9):
        stats = record_result(stats, summary, at)

    assert stats.total_runs == 8
    assert stats.total_answered == 16
    assert stats.total_correct == 8
    assert len(stats.last_scores) == MAX_RECENT_SCORES
    assert [s.at for s in stats.last_scores] == [8, 7, 6, 5, 4, 3]
    assert stats.last_scores[0] == ScoreRecord(accuracy=50.0, total=2, correct=1, at=8)


def _stats_text_with(field, literal):
    stats = StoredStats(
        total_runs=1,
        total_answered=10,
        total_correct=6,
        last_scores=[ScoreRecord(accuracy=60.0, total=10, correct=6, at=1)],
    ).to_record()
    stats["last_scores"][0][field] = "__VALUE__"
    return json.dumps(stats).replace('"__VALUE__"', literal)


@pytest.mark.parametrize(
    "field,literal",
    [("at", "Infinity"), ("total", "NaN"), ("accuracy", "-Infinity"), ("correct", "1e400")],
)
def test_non_finite_score_numbers_are_treated_as_absent(store, field, literal):
    store.set_item(STATS_KEY, _stats_text_with(field, literal))
    assert load_stats(store) == StoredStats()


def test_overflowing_session_count_is_treated_as_absent(store):
    record = _stored_session().to_record()
    record["config"]["count"] = "__COUNT__"
    store.set_item(SESSION_KEY, json.dumps(record).replace('"__COUNT__"', "1e400"))
    assert load_session(store) is None
