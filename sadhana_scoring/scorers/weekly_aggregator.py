"""
Weekly Aggregator - a week of SadhanaEntry -> WeeklyStats.

Two mutually exclusive modes, read once per call from the provider unless
passed explicitly:

  per-entry (default)
      Each day keeps its own score. A cached ``score``/``score_breakdown``
      on an entry is reused; otherwise the entry is scored on demand.
      daily_scores carries each day's own score.

  weekly-consolidated
      Every entry is scored fresh (caches ignored). daily_scores reports
      the week's rounded average against every day label, not a per-day
      figure.

Entries must already be filtered to the week and sorted by date; this
module does not re-filter. An empty list yields all-zero stats.
"""

import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Sequence

from ..models import DayScore, SadhanaEntry, ScoreBreakdown, WeeklyStats
from ..services.config_store import ScoringConfigProvider
from ..utils.date_utils import weekday_label
from .daily_score import CriteriaInput, calculate_daily_score, ensure_criteria

logger = logging.getLogger(__name__)


def round_half_up(value: float, digits: int = 0) -> float:
    """Round like the display layer does (0.5 rounds up, not to even)."""
    quantum = Decimal(1).scaleb(-digits)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def _ratio(part: float, count: int, digits: int) -> float:
    """part / count rounded, 0 when count is 0."""
    if count == 0:
        return 0
    return round_half_up(part / count, digits)


def _percentage(hits: int, count: int) -> float:
    if count == 0:
        return 0
    return round_half_up(hits / count * 100, 1)


def wake_up_hour(time_str: Optional[str]) -> int:
    """Integer hour of a "HH:MM" string; anything non-numeric counts as 0."""
    if not time_str or not isinstance(time_str, str):
        return 0
    hour = time_str.split(":", 1)[0].strip()
    return int(hour) if hour.isdigit() else 0


def _entry_score(
    entry: SadhanaEntry,
    criteria,
    weekly_mode: bool,
) -> tuple[float, ScoreBreakdown]:
    """(total, breakdown) for one entry under the given mode.

    Per-entry mode keeps a cached score even when its breakdown is missing;
    only the breakdown is recomputed then.
    """
    if weekly_mode:
        result = calculate_daily_score(entry, criteria)
        return result.total_score, result.breakdown
    if entry.score is not None and entry.score_breakdown is not None:
        return entry.score, entry.score_breakdown
    result = calculate_daily_score(entry, criteria)
    total = entry.score if entry.score is not None else result.total_score
    return total, result.breakdown


def aggregate_week(
    entries: Sequence[SadhanaEntry],
    criteria: CriteriaInput,
    provider: Optional[ScoringConfigProvider] = None,
    weekly_mode: Optional[bool] = None,
) -> WeeklyStats:
    """Aggregate one user's week.

    Args:
        entries: The week's entries, pre-filtered and sorted ascending by date
        criteria: Resolved BatchCriteria, or a selector (batch name, profile, None)
        provider: Override source and mode flag
        weekly_mode: Force a mode; None reads the provider's flag once

    Returns:
        WeeklyStats (all zeros for an empty list)
    """
    if weekly_mode is None:
        weekly_mode = provider.is_weekly_scoring_enabled() if provider else False

    entries = list(entries)
    count = len(entries)
    if count == 0:
        return WeeklyStats(weekly_mode=weekly_mode)

    resolved = ensure_criteria(criteria, provider)

    total_score = 0.0
    breakdown = ScoreBreakdown()
    per_day: list[float] = []
    total_chanting = total_reading = total_hearing = total_service = 0.0
    total_wake_hours = 0
    mangala_count = morning_count = diet_count = 0

    for entry in entries:
        entry_total, entry_breakdown = _entry_score(entry, resolved, weekly_mode)
        total_score += entry_total
        breakdown = breakdown.add(entry_breakdown)
        per_day.append(entry_total)

        total_chanting += entry.chanting_rounds
        total_reading += entry.reading_minutes
        total_hearing += entry.total_lecture_minutes
        total_service += entry.service_minutes
        total_wake_hours += wake_up_hour(entry.wake_up_time)

        if entry.mangala_arati:
            mangala_count += 1
        if entry.morning_program:
            morning_count += 1
        if entry.prasadam:
            diet_count += 1

    average_score = _ratio(total_score, count, 1)

    if weekly_mode:
        broadcast = round_half_up(average_score)
        daily_scores = [DayScore(day=weekday_label(e.date), score=broadcast) for e in entries]
    else:
        daily_scores = [DayScore(day=weekday_label(e.date), score=s) for e, s in zip(entries, per_day)]

    logger.debug(f"Aggregated {count} entries (weekly_mode={weekly_mode}) total={total_score}")

    return WeeklyStats(
        entries=entries,
        entry_count=count,
        weekly_mode=weekly_mode,
        total_score=total_score,
        average_score=average_score,
        breakdown=breakdown,
        body_score=breakdown.body_score,
        soul_score=breakdown.soul_score,
        daily_scores=daily_scores,
        total_chanting_rounds=total_chanting,
        average_chanting_rounds=_ratio(total_chanting, count, 1),
        total_reading_minutes=total_reading,
        average_reading_minutes=int(_ratio(total_reading, count, 0)),
        total_hearing_minutes=total_hearing,
        average_hearing_minutes=int(_ratio(total_hearing, count, 0)),
        total_service_minutes=total_service,
        average_wake_up_hour=_ratio(total_wake_hours, count, 1),
        mangala_arati_attendance=_percentage(mangala_count, count),
        morning_program_attendance=_percentage(morning_count, count),
        diet_maintained=_percentage(diet_count, count),
    )
