"""Tests for criteria resolution from batch names and profiles."""

import pytest
from sadhana_scoring.models import BatchCriteria, UserProfile
from sadhana_scoring.scorers.criteria_registry import get_builtin_criteria
from sadhana_scoring.services.criteria_resolver import (
    ByName,
    ByProfile,
    batch_key_for,
    get_batch_requirements,
    list_batches,
    resolve_criteria,
    to_selector,
)


class TestToSelector:
    def test_string_becomes_by_name(self):
        assert to_selector("nakula") == ByName("nakula")

    def test_profile_becomes_by_profile(self):
        profile = UserProfile(batch="arjuna")
        assert to_selector(profile) == ByProfile(profile)

    def test_dict_becomes_by_profile(self):
        assert isinstance(to_selector({"batch": "arjuna"}), ByProfile)

    def test_none_stays_none(self):
        assert to_selector(None) is None

    @pytest.mark.parametrize("value", [42, ["nakula"], 3.5])
    def test_other_types_raise(self, value):
        with pytest.raises(TypeError):
            to_selector(value)


class TestResolveCriteria:
    def test_by_name_case_insensitive(self):
        assert resolve_criteria("NAKULA") is get_builtin_criteria("nakula")

    def test_unknown_and_none_fall_back(self):
        default = get_builtin_criteria("sahadev")
        assert resolve_criteria("unknown-batch") is default
        assert resolve_criteria(None) is default

    def test_alternate_spelling_on_profile(self):
        assert resolve_criteria({"batch": "Nakul"}) is resolve_criteria({"batch": "nakula"})

    def test_profile_batch_name_fallback(self):
        assert resolve_criteria(UserProfile(batch_name="Bheem")) is get_builtin_criteria("bheem")
        assert resolve_criteria({"batchName": "Bheem"}) is get_builtin_criteria("bheem")

    def test_profile_batch_wins_over_batch_name(self):
        profile = UserProfile(batch="arjuna", batch_name="bheem")
        assert resolve_criteria(ByProfile(profile)) is get_builtin_criteria("arjuna")

    def test_profile_without_batch_is_default(self):
        assert resolve_criteria({"displayName": "x"}) is get_builtin_criteria("sahadev")

    def test_override_wins(self, provider):
        provider.set_override("nakula", {"name": "Nakula", "readingMinimum": 99})
        assert resolve_criteria("nakula", provider).reading_minimum == 99
        assert resolve_criteria("arjuna", provider) is get_builtin_criteria("arjuna")

    def test_no_provider_uses_builtins_only(self):
        assert resolve_criteria(ByName("arjuna")).reading_minimum == 180


class TestBatchKeyFor:
    def test_known(self):
        assert batch_key_for("Nakul") == "nakula"

    def test_unknown_reports_default(self):
        assert batch_key_for("karna") == "sahadev"

    def test_override_only_batch(self, provider):
        provider.set_override("karna", BatchCriteria(name="Karna"))
        assert batch_key_for("karna", provider) == "karna"


class TestBatchRequirements:
    def test_nakula(self):
        req = get_batch_requirements("nakula")
        assert req.batch == "nakula"
        assert req.reading_minutes == 150
        assert req.hearing_minutes == 90
        assert req.service_minutes == 30
        assert req.shloka_count == 1
        assert req.lecture_minimums["sp_lecture_minutes"] == 60
        assert req.enabled_lectures == ["sp_lecture_minutes"]

    def test_flags_enable_extra_lectures(self):
        req = get_batch_requirements("yudhisthira")
        assert "sm_lecture_minutes" in req.enabled_lectures
        assert "hgrsp_lecture_minutes" in req.enabled_lectures
        assert "gsns_lecture_minutes" not in req.enabled_lectures


class TestListBatches:
    def test_includes_overrides(self, provider):
        provider.set_override("karna", BatchCriteria(name="Karna"))
        batches = list_batches(provider)
        assert "karna" in batches
        assert "sahadev" in batches
