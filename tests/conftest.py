"""Shared fixtures for scoring engine tests."""

import datetime as dt

import pytest
from sadhana_scoring.models import SadhanaEntry
from sadhana_scoring.scorers.criteria_registry import clear_cache
from sadhana_scoring.services.config_store import InMemoryConfigStore, ScoringConfigProvider


@pytest.fixture(autouse=True)
def fresh_registry():
    """Reload the built-in batches for every test."""
    clear_cache()
    yield
    clear_cache()


@pytest.fixture
def store():
    return InMemoryConfigStore()


@pytest.fixture
def provider(store):
    """Provider over an empty in-memory store (no overrides, per-entry mode)."""
    return ScoringConfigProvider(store)


@pytest.fixture
def make_entry():
    """Factory for SadhanaEntry with a fixed user and date, override any field."""

    def _make(**overrides) -> SadhanaEntry:
        defaults = dict(user_id="user-1", date=dt.date(2024, 3, 13))
        defaults.update(overrides)
        return SadhanaEntry(**defaults)

    return _make


@pytest.fixture
def nakula_scenario_entry(make_entry):
    """Entry worth 235 points against nakula."""
    return make_entry(
        wake_up_time="04:10",
        sleep_time="22:15",
        reading_minutes=200,
        day_sleep_duration=50,
        chanting_completion_time="08:30",
        mangala_arati=True,
        guru_puja=True,
    )
