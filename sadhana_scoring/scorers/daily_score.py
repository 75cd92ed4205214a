"""
Daily Score Calculator - one SadhanaEntry + BatchCriteria -> DailyScore.

Eight categories are summed into the total:

  sleep_time        time bucket on sleep_time
  wake_up_time      time bucket on wake_up_time
  reading           reading_minutes capped at reading_minimum
  day_sleep         duration bucket on day_sleep_duration
  japa_completion   time bucket on chanting_completion_time
  program           fixed points per morning program activity
  hearing           SUM of all four lecture categories, capped at hearing_minimum
  shloka            bonus once shloka_minimum is met

Service minutes and the per-lecture minimums are display-only and never
added to the total. Missing fields score 0; nothing here raises.
"""

from typing import Optional, Union

from ..models import BatchCriteria, DailyScore, SadhanaEntry, ScoreBreakdown
from ..services.config_store import ScoringConfigProvider
from ..services.criteria_resolver import SelectorInput, resolve_criteria
from .bucket_scorers import (
    capped_minimum_score,
    program_attendance_score,
    score_by_duration,
    score_by_time_range,
    shloka_score,
)

CriteriaInput = Union[BatchCriteria, SelectorInput]


def ensure_criteria(
    criteria: CriteriaInput,
    provider: Optional[ScoringConfigProvider] = None,
) -> BatchCriteria:
    """Pass resolved criteria through; resolve anything else."""
    if isinstance(criteria, BatchCriteria):
        return criteria
    return resolve_criteria(criteria, provider)


def score_breakdown(entry: SadhanaEntry, criteria: BatchCriteria) -> ScoreBreakdown:
    """Per-category points for one entry against resolved criteria."""
    return ScoreBreakdown(
        sleep_time_score=score_by_time_range(entry.sleep_time, criteria.sleep_time_scoring),
        wake_up_time_score=score_by_time_range(entry.wake_up_time, criteria.wake_up_time_scoring),
        reading_score=capped_minimum_score(entry.reading_minutes, criteria.reading_minimum),
        day_sleep_score=score_by_duration(entry.day_sleep_duration, criteria.day_sleep_scoring),
        japa_completion_score=score_by_time_range(
            entry.chanting_completion_time, criteria.japa_completion_scoring
        ),
        program_score=program_attendance_score(entry),
        hearing_score=capped_minimum_score(entry.total_lecture_minutes, criteria.hearing_minimum),
        shloka_score=shloka_score(entry.shloka_total, criteria, criteria.name),
    )


def calculate_daily_score(
    entry: SadhanaEntry,
    criteria: CriteriaInput,
    provider: Optional[ScoringConfigProvider] = None,
) -> DailyScore:
    """Score one entry.

    Args:
        entry: The daily log
        criteria: Resolved BatchCriteria, or a selector (batch name, profile, None)
        provider: Override source used when ``criteria`` is a selector

    Returns:
        DailyScore with the total and the eight-category breakdown
    """
    resolved = ensure_criteria(criteria, provider)
    breakdown = score_breakdown(entry, resolved)
    return DailyScore(total_score=breakdown.total, breakdown=breakdown)


def score_with_cache(
    entry: SadhanaEntry,
    criteria: CriteriaInput,
    provider: Optional[ScoringConfigProvider] = None,
    refresh: bool = False,
) -> SadhanaEntry:
    """Return the entry with ``score``/``score_breakdown`` filled.

    An existing cache is kept unless ``refresh`` is set. The input entry is
    not modified; write the returned copy back to the store if desired.
    """
    if not refresh and entry.score is not None and entry.score_breakdown is not None:
        return entry
    result = calculate_daily_score(entry, criteria, provider)
    return entry.model_copy(update={"score": result.total_score, "score_breakdown": result.breakdown})
