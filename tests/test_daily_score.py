"""Tests for the daily score calculator."""

import pytest
from sadhana_scoring.models import BatchCriteria, ScoreBreakdown
from sadhana_scoring.scorers.criteria_registry import get_builtin_criteria
from sadhana_scoring.scorers.daily_score import (
    calculate_daily_score,
    score_breakdown,
    score_with_cache,
)


class TestNakulaScenario:
    """Full entry against the nakula tier: 15+15+150+20+20+15 = 235."""

    def test_total(self, nakula_scenario_entry):
        result = calculate_daily_score(nakula_scenario_entry, "nakula")
        assert result.total_score == 235

    def test_breakdown(self, nakula_scenario_entry):
        b = calculate_daily_score(nakula_scenario_entry, get_builtin_criteria("nakula")).breakdown
        assert b.sleep_time_score == 15
        assert b.wake_up_time_score == 15
        assert b.reading_score == 150
        assert b.day_sleep_score == 20
        assert b.japa_completion_score == 20
        assert b.program_score == 15
        assert b.hearing_score == 0
        assert b.shloka_score == 0

    def test_total_equals_breakdown_sum(self, nakula_scenario_entry):
        result = calculate_daily_score(nakula_scenario_entry, "nakula")
        assert result.total_score == result.breakdown.total

    def test_alias_scores_identically(self, nakula_scenario_entry):
        assert calculate_daily_score(nakula_scenario_entry, "Nakul") == calculate_daily_score(
            nakula_scenario_entry, "nakula"
        )


class TestCategories:
    def test_empty_entry_scores_only_zero_day_sleep(self, make_entry):
        """An empty log has day_sleep_duration 0, which lands in the first bucket."""
        result = calculate_daily_score(make_entry(), "nakula")
        assert result.breakdown.day_sleep_score == 25
        assert result.total_score == 25

    def test_hearing_sums_all_lectures_then_caps(self, make_entry):
        entry = make_entry(sp_lecture_minutes=40, sm_lecture_minutes=30, gsns_lecture_minutes=30)
        assert score_breakdown(entry, get_builtin_criteria("nakula")).hearing_score == 90

    def test_hearing_partial(self, make_entry):
        entry = make_entry(sp_lecture_minutes=20, hgrsp_lecture_minutes=10)
        assert score_breakdown(entry, get_builtin_criteria("nakula")).hearing_score == 30

    def test_service_never_scored(self, make_entry):
        base = calculate_daily_score(make_entry(), "nakula").total_score
        assert calculate_daily_score(make_entry(service_minutes=500), "nakula").total_score == base

    def test_shloka_bonus_meets_minimum(self, make_entry):
        entry = make_entry(shloka_memorized=2)
        assert score_breakdown(entry, get_builtin_criteria("bheem")).shloka_score == 10

    def test_shloka_count_field_accepted(self, make_entry):
        entry = make_entry(shloka_count=1)
        assert score_breakdown(entry, get_builtin_criteria("nakula")).shloka_score == 10

    def test_shloka_never_for_sahadev(self, make_entry):
        entry = make_entry(shloka_memorized=10)
        assert score_breakdown(entry, get_builtin_criteria("sahadev")).shloka_score == 0

    def test_malformed_times_score_zero(self, make_entry):
        entry = make_entry(wake_up_time="early", sleep_time="", chanting_completion_time="25:00")
        b = score_breakdown(entry, get_builtin_criteria("nakula"))
        assert b.wake_up_time_score == 0
        assert b.sleep_time_score == 0
        assert b.japa_completion_score == 0

    def test_empty_tables_disable_categories(self, make_entry, nakula_scenario_entry):
        criteria = BatchCriteria(name="Bare", reading_minimum=30)
        result = calculate_daily_score(nakula_scenario_entry, criteria)
        assert result.total_score == 30 + 15

    def test_body_and_soul(self, nakula_scenario_entry):
        b = calculate_daily_score(nakula_scenario_entry, "nakula").breakdown
        assert b.body_score == 15 + 15 + 20
        assert b.soul_score == 150 + 20 + 15
        assert b.body_score + b.soul_score == b.total

    def test_selector_resolved_through_provider(self, provider, make_entry):
        provider.set_override("nakula", {"name": "Nakula", "readingMinimum": 10})
        entry = make_entry(reading_minutes=200, day_sleep_duration=500)
        assert calculate_daily_score(entry, "nakula", provider).total_score == 10


class TestScoreWithCache:
    def test_fills_cache_without_mutating(self, nakula_scenario_entry):
        cached = score_with_cache(nakula_scenario_entry, "nakula")
        assert cached.score == 235
        assert cached.score_breakdown.reading_score == 150
        assert nakula_scenario_entry.score is None

    def test_existing_cache_kept(self, make_entry):
        entry = make_entry(score=12, score_breakdown=ScoreBreakdown(reading_score=12))
        assert score_with_cache(entry, "nakula") is entry

    def test_refresh_recomputes(self, make_entry):
        entry = make_entry(reading_minutes=40, score=12, score_breakdown=ScoreBreakdown(reading_score=12))
        refreshed = score_with_cache(entry, BatchCriteria(reading_minimum=100), refresh=True)
        assert refreshed.score == pytest.approx(40)
