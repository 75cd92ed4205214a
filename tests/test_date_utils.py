"""Tests for week boundaries and per-day entry lookup."""

import datetime as dt

import pytest
from sadhana_scoring.utils.date_utils import (
    day_bounds,
    filter_entries_for_week,
    find_daily_entry,
    start_of_week,
    upsert_entry,
    week_bounds,
    weekday_label,
)


class TestWeekBoundaries:
    @pytest.mark.parametrize(
        "anchor",
        [dt.date(2024, 3, 10), dt.date(2024, 3, 13), dt.date(2024, 3, 16), dt.datetime(2024, 3, 16, 23, 30)],
    )
    def test_start_of_week_is_sunday(self, anchor):
        assert start_of_week(anchor) == dt.date(2024, 3, 10)

    def test_sunday_crossing_month(self):
        assert start_of_week(dt.date(2024, 3, 2)) == dt.date(2024, 2, 25)

    def test_day_bounds(self):
        start, end = day_bounds(dt.date(2024, 3, 13))
        assert start == dt.datetime(2024, 3, 13, 0, 0, 0)
        assert end == dt.datetime(2024, 3, 13, 23, 59, 59, 999000)

    def test_week_bounds(self):
        start, end = week_bounds(dt.date(2024, 3, 13))
        assert start == dt.datetime(2024, 3, 10)
        assert end.date() == dt.date(2024, 3, 16)
        assert end.time() == dt.time(23, 59, 59, 999000)

    def test_weekday_label(self):
        assert weekday_label(dt.date(2024, 3, 10)) == "Sun"
        assert weekday_label(dt.date(2024, 3, 11)) == "Mon"


class TestFilterEntriesForWeek:
    def test_keeps_week_sorted(self, make_entry):
        entries = [
            make_entry(date=dt.date(2024, 3, 16)),
            make_entry(date=dt.date(2024, 3, 9)),
            make_entry(date=dt.date(2024, 3, 10)),
            make_entry(date=dt.date(2024, 3, 17)),
            make_entry(date=dt.date(2024, 3, 12)),
        ]
        week = filter_entries_for_week(entries, dt.date(2024, 3, 13))
        assert [e.date.day for e in week] == [10, 12, 16]

    def test_empty(self):
        assert filter_entries_for_week([], dt.date(2024, 3, 13)) == []


class TestDailyEntry:
    def test_find_by_user_and_day(self, make_entry):
        entries = [make_entry(user_id="a"), make_entry(user_id="b", reading_minutes=5)]
        found = find_daily_entry(entries, "b", dt.datetime(2024, 3, 13, 18, 0))
        assert found.reading_minutes == 5

    def test_find_missing(self, make_entry):
        assert find_daily_entry([make_entry()], "user-1", dt.date(2024, 3, 14)) is None

    def test_datetime_on_entry_is_truncated(self, make_entry):
        entry = make_entry(date="2024-03-13T21:45:00.000Z")
        assert entry.date == dt.date(2024, 3, 13)

    def test_upsert_replaces_same_day(self, make_entry):
        original = [make_entry(reading_minutes=10)]
        updated = upsert_entry(original, make_entry(reading_minutes=60))
        assert len(updated) == 1
        assert updated[0].reading_minutes == 60
        assert original[0].reading_minutes == 10

    def test_upsert_appends_new_day(self, make_entry):
        updated = upsert_entry([make_entry()], make_entry(date=dt.date(2024, 3, 14)))
        assert [e.date.day for e in updated] == [13, 14]
