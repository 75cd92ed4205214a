"""Deterministic scoring modules for daily and weekly sadhana scores.

The calculators live in ``daily_score`` and ``weekly_aggregator``; they
depend on the criteria resolver service and are imported from their
modules directly.
"""

from .bucket_scorers import (
    capped_minimum_score,
    program_attendance_score,
    score_by_duration,
    score_by_time_range,
    shloka_score,
    time_to_minutes,
)
from .criteria_registry import (
    canonical_batch_key,
    get_criteria,
    get_default_batch,
    get_effective_registry,
    list_builtin_batches,
)

__all__ = [
    # Bucket scorers
    "time_to_minutes",
    "score_by_time_range",
    "score_by_duration",
    "capped_minimum_score",
    "shloka_score",
    "program_attendance_score",
    # Registry
    "canonical_batch_key",
    "get_criteria",
    "get_default_batch",
    "get_effective_registry",
    "list_builtin_batches",
]
