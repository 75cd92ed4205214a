"""Score results produced by the daily calculator and the weekly aggregator."""

from typing import Optional

from pydantic import Field

from ..constants import BODY_CATEGORIES, SCORE_CATEGORIES, SOUL_CATEGORIES
from .common import CamelModel


class ScoreBreakdown(CamelModel):
    """Points per category (one day, or summed over a week)."""

    sleep_time_score: float = 0
    wake_up_time_score: float = 0
    reading_score: float = 0
    day_sleep_score: float = 0
    japa_completion_score: float = 0
    program_score: float = 0
    hearing_score: float = 0
    shloka_score: float = 0

    @property
    def total(self) -> float:
        return sum(getattr(self, name) for name in SCORE_CATEGORIES)

    @property
    def body_score(self) -> float:
        """Physical discipline: sleep time, wake time, day sleep."""
        return sum(getattr(self, name) for name in BODY_CATEGORIES)

    @property
    def soul_score(self) -> float:
        """Spiritual practice: reading, hearing, japa, program, shloka."""
        return sum(getattr(self, name) for name in SOUL_CATEGORIES)

    def add(self, other: "ScoreBreakdown") -> "ScoreBreakdown":
        """Return a new breakdown with the per-category sums of both."""
        return ScoreBreakdown(
            **{name: getattr(self, name) + getattr(other, name) for name in SCORE_CATEGORIES}
        )


class DailyScore(CamelModel):
    """Result of scoring one daily entry."""

    total_score: float = 0
    breakdown: ScoreBreakdown = Field(default_factory=ScoreBreakdown)


class DayScore(CamelModel):
    """One ``{day, score}`` point of a weekly chart."""

    day: str
    score: float


class BatchRequirements(CamelModel):
    """Daily minimums shown to a devotee for their batch."""

    batch: str
    reading_minutes: int = 0
    hearing_minutes: int = 0
    service_minutes: int = 0
    shloka_count: int = 0
    lecture_minimums: dict[str, Optional[int]] = Field(default_factory=dict)
    enabled_lectures: list[str] = Field(default_factory=list)
