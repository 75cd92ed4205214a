"""Weekly aggregate and group progress results. Derived, never persisted."""

from typing import Optional

from pydantic import Field

from .common import CamelModel
from .entry import SadhanaEntry
from .score import DayScore, ScoreBreakdown


class WeeklyStats(CamelModel):
    """Aggregation of one user's entries over a Sunday-Saturday window."""

    entries: list[SadhanaEntry] = Field(default_factory=list)
    entry_count: int = 0
    weekly_mode: bool = False

    # Scores
    total_score: float = 0
    average_score: float = 0
    breakdown: ScoreBreakdown = Field(default_factory=ScoreBreakdown)
    body_score: float = 0
    soul_score: float = 0
    daily_scores: list[DayScore] = Field(default_factory=list)

    # Practice totals and averages
    total_chanting_rounds: float = 0
    average_chanting_rounds: float = 0
    total_reading_minutes: float = 0
    average_reading_minutes: int = 0
    total_hearing_minutes: float = 0
    average_hearing_minutes: int = 0
    total_service_minutes: float = 0
    average_wake_up_hour: float = 0

    # Attendance percentages (0-100)
    mangala_arati_attendance: float = 0
    morning_program_attendance: float = 0
    diet_maintained: float = 0


class MemberProgress(CamelModel):
    """One group member's weekly result; ``stats`` is None when loading failed."""

    member_id: str
    batch: Optional[str] = None
    display_name: Optional[str] = None
    stats: Optional[WeeklyStats] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.stats is not None

    @property
    def weekly_total_score(self) -> float:
        return self.stats.total_score if self.stats else 0
