"""
Bucket scorers - pure functions mapping raw practice values to points.

- time_to_minutes: "HH:MM" -> minutes since midnight (INVALID_TIME on bad input)
- score_by_time_range: first matching half-open [start, end) time bucket
- score_by_duration: first duration bucket with duration <= max_duration
- capped_minimum_score: partial credit up to a minimum, flat beyond it
- shloka_score: all-or-nothing bonus once the shloka minimum is met
- program_attendance_score: fixed points per morning program activity

None of these raise on malformed data; bad input scores 0.
"""

import logging
import re
from collections.abc import Sequence
from typing import Any, Optional

from ..constants import INVALID_TIME, PROGRAM_ACTIVITY_POINTS
from ..models import BatchCriteria, DurationScore, TimeRangeScore
from .criteria_registry import get_shloka_bonus

logger = logging.getLogger(__name__)

_TIME_PATTERN = re.compile(r"^(\d{1,2}):(\d{2})$")


def time_to_minutes(value: Any) -> int:
    """Parse "HH:MM" (24h) to minutes since midnight.

    Returns INVALID_TIME (-1) for empty, wrong-shaped, non-numeric or
    out-of-range input.
    """
    if not isinstance(value, str):
        return INVALID_TIME
    match = _TIME_PATTERN.match(value.strip())
    if not match:
        return INVALID_TIME
    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        return INVALID_TIME
    return hours * 60 + minutes


def _is_table(ranges: Any) -> bool:
    return isinstance(ranges, Sequence) and not isinstance(ranges, (str, bytes)) and len(ranges) > 0


def score_by_time_range(time_str: Any, ranges: Optional[Sequence[TimeRangeScore]]) -> int:
    """Points of the first range containing the time, else 0.

    Ranges are scanned in table order and need not be contiguous; gaps
    score 0. A range with a malformed bound never matches.
    """
    minutes = time_to_minutes(time_str)
    if minutes == INVALID_TIME or not _is_table(ranges):
        return 0

    for r in ranges:
        start = time_to_minutes(getattr(r, "start_time", None))
        end = time_to_minutes(getattr(r, "end_time", None))
        if start == INVALID_TIME or end == INVALID_TIME:
            logger.debug(f"Skipping malformed time range {r!r}")
            continue
        if start <= minutes < end:
            return r.points
    return 0


def score_by_duration(duration: Any, ranges: Optional[Sequence[DurationScore]]) -> int:
    """Points of the smallest bucket whose max_duration covers the duration, else 0."""
    if duration is None or isinstance(duration, bool) or not isinstance(duration, (int, float)):
        return 0
    if not _is_table(ranges):
        return 0

    # sorted() is stable and leaves the criteria's table untouched
    for r in sorted(ranges, key=lambda r: r.max_duration):
        if duration <= r.max_duration:
            return r.points
    return 0


def capped_minimum_score(value: Any, minimum: Any) -> float:
    """clamp(value, 0, minimum): partial credit below the minimum, capped at it."""
    if not isinstance(value, (int, float)) or isinstance(value, bool):
        return 0
    if not isinstance(minimum, (int, float)) or isinstance(minimum, bool) or minimum <= 0:
        return 0
    return min(max(value, 0), minimum)


def shloka_score(count: Any, criteria: BatchCriteria, batch_name: Optional[str]) -> int:
    """Fixed bonus once ``count >= shloka_minimum``; batches with minimum 0 never award."""
    minimum = criteria.shloka_minimum or 0
    if minimum <= 0 or not isinstance(count, (int, float)) or isinstance(count, bool):
        return 0
    if count >= minimum:
        return get_shloka_bonus(batch_name)
    return 0


def program_attendance_score(entry: Any) -> int:
    """Sum of fixed points for each attended morning program activity."""
    return sum(
        points for activity, points in PROGRAM_ACTIVITY_POINTS.items() if getattr(entry, activity, False) is True
    )
