"""Pydantic models for criteria, entries and score results."""

from .common import CamelModel
from .criteria import BatchCriteria, DurationScore, TimeRangeScore
from .entry import SadhanaEntry, UserProfile
from .score import BatchRequirements, DailyScore, DayScore, ScoreBreakdown
from .stats import MemberProgress, WeeklyStats

__all__ = [
    "CamelModel",
    "BatchCriteria",
    "DurationScore",
    "TimeRangeScore",
    "SadhanaEntry",
    "UserProfile",
    "BatchRequirements",
    "DailyScore",
    "DayScore",
    "ScoreBreakdown",
    "MemberProgress",
    "WeeklyStats",
]
