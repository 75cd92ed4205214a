"""Batch criteria schema.

A batch is a cohort of devotees sharing one discipline tier. Its criteria
hold the range tables used by the bucket scorers, the minimums used both
as score caps and as display thresholds, and the maximum attainable
body/soul totals (display only, never enforced on computed scores).

Criteria read back from storage go through ``BatchCriteria.from_stored``,
which repairs malformed fields instead of rejecting the whole batch: a
broken table scores nothing and a broken minimum reads as 0. Writes and
the built-in registry validate strictly.
"""

import math
from typing import Any, Optional

from pydantic import Field, ValidationError, ValidationInfo, field_validator

from .common import CamelModel

_TIME_TABLES = ("sleep_time_scoring", "wake_up_time_scoring", "japa_completion_scoring")
_MINIMUMS = (
    "reading_minimum",
    "hearing_minimum",
    "service_minimum",
    "shloka_minimum",
    "total_body_score",
    "total_soul_score",
)
_LECTURE_MINIMUMS = (
    "sp_lecture_minimum",
    "sm_lecture_minimum",
    "gsns_lecture_minimum",
    "hgrsp_lecture_minimum",
)
_FLAGS = ("show_sm_lecture", "show_gsns_lecture", "show_hgrsp_lecture")


def _lenient(info: ValidationInfo) -> bool:
    return bool(info.context and info.context.get("lenient"))


def _non_negative_int(v: Any) -> Optional[int]:
    """Whole non-negative number from an int, float or numeric string; None otherwise."""
    if isinstance(v, bool):
        return None
    if isinstance(v, str):
        try:
            v = float(v)
        except ValueError:
            return None
    if isinstance(v, (int, float)) and math.isfinite(v) and v >= 0:
        return int(v)
    return None


def _valid_rows(model: type, rows: Any) -> list:
    """Rows of a table that validate as ``model``; anything that is not a list is empty."""
    if not isinstance(rows, list):
        return []
    kept = []
    for row in rows:
        try:
            kept.append(model.model_validate(row))
        except ValidationError:
            continue
    return kept


class TimeRangeScore(CamelModel):
    """Half-open ``[start_time, end_time)`` time-of-day bucket ("HH:MM", 24h)."""

    start_time: str = Field(..., description="Inclusive start, HH:MM")
    end_time: str = Field(..., description="Exclusive end, HH:MM")
    points: int = Field(0, description="Points awarded inside the range")


class DurationScore(CamelModel):
    """Duration bucket: matches when ``duration <= max_duration`` (minutes)."""

    max_duration: int = Field(..., description="Upper bound in minutes (inclusive)")
    points: int = Field(0, description="Points awarded when matched")


class BatchCriteria(CamelModel):
    """Scoring configuration for one batch."""

    name: str = Field("", description="Display label")

    # Range tables; an empty table disables that category for the batch
    sleep_time_scoring: list[TimeRangeScore] = Field(default_factory=list)
    wake_up_time_scoring: list[TimeRangeScore] = Field(default_factory=list)
    japa_completion_scoring: list[TimeRangeScore] = Field(default_factory=list)
    day_sleep_scoring: list[DurationScore] = Field(default_factory=list)

    # Minimums (minutes or counts) - score caps and display thresholds
    reading_minimum: int = Field(0, ge=0)
    hearing_minimum: int = Field(0, ge=0)
    service_minimum: int = Field(0, ge=0)
    shloka_minimum: int = Field(0, ge=0)

    # Per-lecture minimums are display/requirement only
    sp_lecture_minimum: Optional[int] = Field(None, ge=0)
    sm_lecture_minimum: Optional[int] = Field(None, ge=0)
    gsns_lecture_minimum: Optional[int] = Field(None, ge=0)
    hgrsp_lecture_minimum: Optional[int] = Field(None, ge=0)

    # Maximum attainable totals, used for percentage displays
    total_body_score: int = Field(0, ge=0)
    total_soul_score: int = Field(0, ge=0)

    # Which hearing sub-categories are offered for data entry
    show_sm_lecture: bool = False
    show_gsns_lecture: bool = False
    show_hgrsp_lecture: bool = False

    @classmethod
    def from_stored(cls, data: Any) -> "BatchCriteria":
        """Parse persisted criteria, repairing malformed fields.

        Raises:
            pydantic.ValidationError: only when ``data`` is not an object at all
        """
        return cls.model_validate(data, context={"lenient": True})

    @field_validator("name", mode="before")
    @classmethod
    def _stored_name(cls, v: Any, info: ValidationInfo) -> Any:
        if _lenient(info) and not isinstance(v, str):
            return "" if v is None else str(v)
        return v

    @field_validator(*_TIME_TABLES, mode="before")
    @classmethod
    def _stored_time_table(cls, v: Any, info: ValidationInfo) -> Any:
        return _valid_rows(TimeRangeScore, v) if _lenient(info) else v

    @field_validator("day_sleep_scoring", mode="before")
    @classmethod
    def _stored_duration_table(cls, v: Any, info: ValidationInfo) -> Any:
        return _valid_rows(DurationScore, v) if _lenient(info) else v

    @field_validator(*_MINIMUMS, mode="before")
    @classmethod
    def _stored_minimum(cls, v: Any, info: ValidationInfo) -> Any:
        if not _lenient(info):
            return v
        value = _non_negative_int(v)
        return 0 if value is None else value

    @field_validator(*_LECTURE_MINIMUMS, mode="before")
    @classmethod
    def _stored_lecture_minimum(cls, v: Any, info: ValidationInfo) -> Any:
        return _non_negative_int(v) if _lenient(info) else v

    @field_validator(*_FLAGS, mode="before")
    @classmethod
    def _stored_flag(cls, v: Any, info: ValidationInfo) -> Any:
        if _lenient(info) and not isinstance(v, bool):
            return False
        return v
