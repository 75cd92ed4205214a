"""
Calendar helpers for daily entries and Sunday-Saturday weeks.

Entries are keyed by calendar day; the time of day on a stored date is
ignored. Weeks start on the most recent Sunday on or before an anchor.
"""

import datetime as dt
from typing import Iterable, Optional, Union

from ..constants import WEEKDAY_NAMES
from ..models import SadhanaEntry

DateLike = Union[dt.date, dt.datetime]


def _as_date(value: DateLike) -> dt.date:
    return value.date() if isinstance(value, dt.datetime) else value


def start_of_week(anchor: DateLike) -> dt.date:
    """Most recent Sunday on or before ``anchor``."""
    day = _as_date(anchor)
    # weekday(): Monday=0 .. Sunday=6
    return day - dt.timedelta(days=(day.weekday() + 1) % 7)


def day_bounds(day: DateLike) -> tuple[dt.datetime, dt.datetime]:
    """(00:00:00.000, 23:59:59.999) of the given calendar day."""
    d = _as_date(day)
    start = dt.datetime.combine(d, dt.time.min)
    end = dt.datetime.combine(d, dt.time(23, 59, 59, 999000))
    return start, end


def week_bounds(anchor: DateLike) -> tuple[dt.datetime, dt.datetime]:
    """Start of Sunday through end of the following Saturday."""
    sunday = start_of_week(anchor)
    start, _ = day_bounds(sunday)
    _, end = day_bounds(sunday + dt.timedelta(days=6))
    return start, end


def weekday_label(day: DateLike) -> str:
    """Three-letter weekday name ("Sun", "Mon", ...)."""
    return WEEKDAY_NAMES[_as_date(day).weekday()]


def filter_entries_for_week(entries: Iterable[SadhanaEntry], anchor: DateLike) -> list[SadhanaEntry]:
    """Keep entries inside the anchor's week, sorted ascending by date."""
    sunday = start_of_week(anchor)
    saturday = sunday + dt.timedelta(days=6)
    in_week = [e for e in entries if sunday <= e.date <= saturday]
    return sorted(in_week, key=lambda e: e.date)


def find_daily_entry(
    entries: Iterable[SadhanaEntry], user_id: str, day: DateLike
) -> Optional[SadhanaEntry]:
    """The entry for ``(user_id, day)``; the first match wins if duplicates exist."""
    target = _as_date(day)
    for entry in entries:
        if entry.user_id == user_id and entry.date == target:
            return entry
    return None


def upsert_entry(entries: list[SadhanaEntry], entry: SadhanaEntry) -> list[SadhanaEntry]:
    """Replace the first entry with the same (user_id, date), or append.

    Returns a new list; the input list is not modified.
    """
    updated = list(entries)
    for i, existing in enumerate(updated):
        if existing.user_id == entry.user_id and existing.date == entry.date:
            updated[i] = entry
            return updated
    updated.append(entry)
    return updated
