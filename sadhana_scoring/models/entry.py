"""
Daily sadhana entry and user profile records.

Both are supplied by the external store. The engine only reads them, apart
from filling the optional ``score``/``score_breakdown`` cache on an entry.

Apart from the date, a malformed field never rejects an entry: it reads
as the neutral value (0, None or False) and scores nothing.
"""

import datetime as dt
import math
from typing import Any, Optional

from pydantic import Field, ValidationError, field_validator

from .common import CamelModel
from .score import ScoreBreakdown

_NUMERIC_FIELDS = (
    "chanting_rounds",
    "reading_minutes",
    "sp_lecture_minutes",
    "sm_lecture_minutes",
    "gsns_lecture_minutes",
    "hgrsp_lecture_minutes",
    "service_minutes",
    "day_sleep_duration",
)
_TIME_FIELDS = ("wake_up_time", "sleep_time", "chanting_completion_time")
_FLAG_FIELDS = (
    "mangala_arati",
    "tulsi_arati",
    "narsimha_arati",
    "guru_puja",
    "bhagavatam_class",
    "morning_program",
    "evening_arati",
    "spiritual_class",
    "prasadam",
)


def _as_number(v: Any) -> Optional[float]:
    """Finite number from an int, float or numeric string; None otherwise."""
    if isinstance(v, bool):
        return None
    if isinstance(v, str):
        try:
            v = float(v)
        except ValueError:
            return None
    if isinstance(v, (int, float)) and math.isfinite(v):
        return v
    return None


class SadhanaEntry(CamelModel):
    """One practice log per user per calendar day."""

    id: Optional[str] = None
    user_id: str = ""
    date: dt.date

    # Counts and minutes (absent or malformed -> 0)
    chanting_rounds: float = 0
    reading_minutes: float = 0
    sp_lecture_minutes: float = 0
    sm_lecture_minutes: float = 0
    gsns_lecture_minutes: float = 0
    hgrsp_lecture_minutes: float = 0
    service_minutes: float = 0
    day_sleep_duration: float = 0
    shloka_memorized: Optional[float] = None
    shloka_count: Optional[float] = None

    # Time of day, "HH:MM"
    wake_up_time: Optional[str] = None
    sleep_time: Optional[str] = None
    chanting_completion_time: Optional[str] = None

    # Morning program sub-activities
    mangala_arati: bool = False
    tulsi_arati: bool = False
    narsimha_arati: bool = False
    guru_puja: bool = False
    bhagavatam_class: bool = False

    # Tracked, not scored
    morning_program: bool = False
    evening_arati: bool = False
    spiritual_class: bool = False
    prasadam: bool = Field(False, description="Maintained diet (prasadam only)")

    notes: Optional[str] = None

    # Cache of the daily calculator's result; never a source of truth
    score: Optional[float] = None
    score_breakdown: Optional[ScoreBreakdown] = None

    @field_validator("date", mode="before")
    @classmethod
    def _calendar_day(cls, v: Any) -> Any:
        """Drop the time of day; only the calendar day identifies an entry."""
        if isinstance(v, dt.datetime):
            return v.date()
        if isinstance(v, str) and len(v) > 10:
            return dt.datetime.fromisoformat(v.replace("Z", "+00:00")).date()
        return v

    @field_validator(*_NUMERIC_FIELDS, mode="before")
    @classmethod
    def _number_or_zero(cls, v: Any) -> float:
        number = _as_number(v)
        return 0 if number is None else number

    @field_validator("shloka_memorized", "shloka_count", "score", mode="before")
    @classmethod
    def _number_or_none(cls, v: Any) -> Optional[float]:
        return _as_number(v)

    @field_validator(*_TIME_FIELDS, mode="before")
    @classmethod
    def _time_string(cls, v: Any) -> Optional[str]:
        return v if isinstance(v, str) else None

    @field_validator(*_FLAG_FIELDS, mode="before")
    @classmethod
    def _flag(cls, v: Any) -> bool:
        """Only a real boolean (or its "true"/"false" spelling) is kept."""
        if isinstance(v, bool):
            return v
        if isinstance(v, str):
            return v.strip().lower() == "true"
        return False

    @field_validator("id", "notes", mode="before")
    @classmethod
    def _optional_text(cls, v: Any) -> Optional[str]:
        return v if v is None or isinstance(v, str) else str(v)

    @field_validator("user_id", mode="before")
    @classmethod
    def _user_id(cls, v: Any) -> str:
        return "" if v is None else str(v)

    @field_validator("score_breakdown", mode="before")
    @classmethod
    def _cached_breakdown(cls, v: Any) -> Optional[ScoreBreakdown]:
        """An unreadable cache is dropped; it is recomputed on demand."""
        if v is None or isinstance(v, ScoreBreakdown):
            return v
        try:
            return ScoreBreakdown.model_validate(v)
        except ValidationError:
            return None

    @property
    def shloka_total(self) -> float:
        """Memorized verse count, whichever field the record used."""
        if self.shloka_memorized is not None:
            return self.shloka_memorized
        return self.shloka_count or 0

    @property
    def total_lecture_minutes(self) -> float:
        return (
            self.sp_lecture_minutes
            + self.sm_lecture_minutes
            + self.gsns_lecture_minutes
            + self.hgrsp_lecture_minutes
        )


class UserProfile(CamelModel):
    """The slice of a user profile the engine needs."""

    uid: Optional[str] = None
    display_name: Optional[str] = None
    spiritual_name: Optional[str] = None
    batch: Optional[str] = None
    batch_name: Optional[str] = None  # older profiles
