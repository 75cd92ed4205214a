"""Tests for group progress assembly and ranking."""

import datetime as dt

from sadhana_scoring.models import BatchCriteria, SadhanaEntry, UserProfile
from sadhana_scoring.services.group_progress import assemble_group_progress, rank_members
from sadhana_scoring.utils.worker_pool import WorkerPool

ANCHOR = dt.date(2024, 3, 13)

# ─── Helpers ──────────────────────────────────────────────────────────────────


def _entries_by_member(readings: dict[str, list[int]]) -> dict[str, list[SadhanaEntry]]:
    """Sunday-onward entries per member; one out-of-week entry each."""
    data = {}
    for member, minutes in readings.items():
        entries = [
            SadhanaEntry(user_id=member, date=dt.date(2024, 3, 10) + dt.timedelta(days=i), reading_minutes=m)
            for i, m in enumerate(minutes)
        ]
        entries.append(SadhanaEntry(user_id=member, date=dt.date(2024, 3, 3), reading_minutes=999))
        data[member] = entries
    return data


def _fetcher(data, fail=()):
    calls = []

    def fetch(member_id, week_start, week_end):
        calls.append((member_id, week_start, week_end))
        if member_id in fail:
            raise ConnectionError(f"timeout loading {member_id}")
        return data.get(member_id, [])

    fetch.calls = calls
    return fetch


# ─── assemble_group_progress ─────────────────────────────────────────────────


class TestAssembleGroupProgress:
    def test_default_batch_without_profiles(self):
        fetch = _fetcher(_entries_by_member({"a": [30, 90], "b": [10]}))
        progress = assemble_group_progress(["a", "b"], fetch, ANCHOR)
        assert list(progress) == ["a", "b"]
        # sahadev caps reading at 60 and awards 10 for zero day sleep
        assert progress["a"].stats.total_score == 30 + 60 + 20
        assert progress["a"].batch == "sahadev"
        assert progress["b"].stats.entry_count == 1

    def test_fetch_window_is_the_week(self):
        fetch = _fetcher({})
        assemble_group_progress(["a"], fetch, ANCHOR)
        assert fetch.calls == [("a", dt.date(2024, 3, 10), dt.date(2024, 3, 16))]

    def test_failure_isolated(self):
        fetch = _fetcher(_entries_by_member({"a": [30], "c": [45]}), fail={"b"})
        progress = assemble_group_progress(["a", "b", "c"], fetch, ANCHOR, max_workers=2)
        assert progress["a"].ok
        assert progress["c"].ok
        assert not progress["b"].ok
        assert progress["b"].stats is None
        assert "timeout" in progress["b"].error

    def test_profiles_select_batch(self, provider):
        provider.set_override("karna", BatchCriteria(name="Karna", reading_minimum=5))
        profiles = {
            "a": UserProfile(uid="a", spiritual_name="Govinda das", batch="Karna"),
            "b": {"displayName": "Bhakta B", "batchName": "nakul"},
            "c": None,
        }
        fetch = _fetcher(_entries_by_member({"a": [30], "b": [30], "c": [30]}))
        progress = assemble_group_progress(["a", "b", "c"], fetch, ANCHOR, provider, fetch_profile=profiles.get)

        assert progress["a"].batch == "karna"
        assert progress["a"].display_name == "Govinda das"
        assert progress["a"].stats.total_score == 5
        assert progress["b"].batch == "nakula"
        assert progress["b"].display_name == "Bhakta B"
        assert progress["c"].batch == "sahadev"
        assert progress["c"].ok

    def test_profile_fetch_failure_isolated(self):
        def fetch_profile(member_id):
            if member_id == "b":
                raise KeyError("no profile")
            return {"batch": "nakula"}

        fetch = _fetcher(_entries_by_member({"a": [30], "b": [30]}))
        progress = assemble_group_progress(["a", "b"], fetch, ANCHOR, fetch_profile=fetch_profile)
        assert progress["a"].ok
        assert progress["b"].error

    def test_weekly_mode_from_snapshot(self, provider):
        provider.set_weekly_scoring(True)
        fetch = _fetcher(_entries_by_member({"a": [10, 20, 35]}))
        stats = assemble_group_progress(["a"], fetch, ANCHOR, provider)["a"].stats
        assert stats.weekly_mode is True
        assert len({d.score for d in stats.daily_scores}) == 1

    def test_empty_group(self):
        assert assemble_group_progress([], _fetcher({}), ANCHOR) == {}


class TestRankMembers:
    def test_highest_first_failures_last(self):
        fetch = _fetcher(_entries_by_member({"a": [10], "b": [60], "c": [30]}), fail={"d"})
        progress = assemble_group_progress(["a", "b", "c", "d"], fetch, ANCHOR)
        ranked = rank_members(progress)
        assert [p.member_id for p in ranked] == ["b", "c", "a", "d"]


class TestWorkerPool:
    def test_results_in_input_order(self):
        pool = WorkerPool(max_workers=4)
        results = pool.map(lambda x: x * 2, [3, 1, 2])
        assert [r[2] for r in results] == [6, 2, 4]
        assert all(r[0] for r in results)

    def test_exception_captured(self):
        def work(x):
            if x == 2:
                raise ValueError("bad item")
            return x

        pool = WorkerPool(max_workers=2)
        results = pool.map(work, [1, 2, 3])
        assert results[1][0] is False
        assert isinstance(results[1][2], ValueError)
        stats = pool.get_stats()
        assert stats["total_successful"] == 2
        assert stats["total_failed"] == 1
