"""Reporting helpers for quizbank."""

from .report import bank_stats_frame, save_summary, summary_frame, summary_to_dict

__all__ = [
    "bank_stats_frame",
    "save_summary",
    "summary_frame",
    "summary_to_dict",
]
