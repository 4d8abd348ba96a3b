"""Formatting and export helpers for ranked results."""

from __future__ import annotations

from typing import Iterable

from .models import RankedResult

EXPORT_FILENAME = "rerank-results.csv"
EXPORT_MEDIA_TYPE = "text/csv"
CSV_HEADER = ("Text", "Relevance Score")


def format_score(score: float) -> str:
    return f"Relevance Score: {score:.3f}"


def score_to_progress(score: float) -> int:
    """Map a score in [0, 1] onto a 0-100 progress value."""
    return max(0, min(100, round(score * 100)))


def results_to_csv(results: Iterable[RankedResult]) -> str:
    """Serialize results as comma-joined rows under a fixed header.

    Cells are joined verbatim. Text containing commas or quotes is not escaped,
    so such rows do not parse back into two columns.
    """

    rows = [",".join(CSV_HEADER)]
    rows.extend(f"{result.text},{result.score}" for result in results)
    return "\n".join(rows)


__all__ = [
    "CSV_HEADER",
    "EXPORT_FILENAME",
    "EXPORT_MEDIA_TYPE",
    "format_score",
    "results_to_csv",
    "score_to_progress",
]
