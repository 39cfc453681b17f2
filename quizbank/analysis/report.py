"""Tabular reports for score summaries and bank statistics."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Mapping

import pandas as pd

from ..data.schemas import BankStats, ScoreBucket, ScoreSummary
from ..engine.scoring import percent, weakest_tags

logger = logging.getLogger(__name__)

SUMMARY_COLUMNS = ["group", "key", "correct", "total", "accuracy"]


def _bucket_rows(group: str, buckets: Mapping[Any, ScoreBucket]) -> list[dict]:
    return [
        {
            "group": group,
            "key": getattr(key, "value", key),
            "correct": bucket.correct,
            "total": bucket.total,
            "accuracy": percent(bucket.correct, bucket.total),
        }
        for key, bucket in buckets.items()
    ]


def summary_frame(summary: ScoreSummary) -> pd.DataFrame:
    """One row per breakdown bucket plus an `overall` row."""
    rows = [
        {
            "group": "overall",
            "key": "all",
            "correct": summary.correct,
            "total": summary.total,
            "accuracy": summary.accuracy,
        }
    ]
    rows += _bucket_rows("section", summary.by_section)
    rows += _bucket_rows("difficulty", summary.by_difficulty)
    rows += _bucket_rows("tag", summary.by_tag)
    return pd.DataFrame(rows, columns=SUMMARY_COLUMNS)


def bank_stats_frame(stats: BankStats) -> pd.DataFrame:
    rows = []
    for group, pairs in (
        ("section", stats.sections),
        ("difficulty", stats.difficulties),
        ("tag", stats.tags),
    ):
        rows += [
            {"group": group, "key": getattr(key, "value", key), "count": count}
            for key, count in pairs
        ]
    return pd.DataFrame(rows, columns=["group", "key", "count"])


def summary_to_dict(summary: ScoreSummary) -> Dict[str, Any]:
    def buckets(data: Mapping[Any, ScoreBucket]) -> Dict[str, Dict[str, int]]:
        return {
            str(getattr(k, "value", k)): {"correct": b.correct, "total": b.total}
            for k, b in data.items()
        }

    return {
        "total": summary.total,
        "correct": summary.correct,
        "accuracy": summary.accuracy,
        "by_section": buckets(summary.by_section),
        "by_difficulty": buckets(summary.by_difficulty),
        "by_tag": buckets(summary.by_tag),
        "weakest_tags": [
            {"tag": tag, "accuracy": percent(summary.by_tag[tag].correct, summary.by_tag[tag].total)}
            for tag, _ in weakest_tags(summary)
        ],
    }


def save_summary(summary: ScoreSummary, path: str | Path) -> Path:
    """Write a summary as JSON, or as a CSV table when `path` ends in .csv."""
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    if p.suffix.lower() == ".csv":
        summary_frame(summary).to_csv(p, index=False)
    else:
        p.write_text(json.dumps(summary_to_dict(summary), indent=2), encoding="utf-8")
    logger.info("Saved summary to %s", p)
    return p
