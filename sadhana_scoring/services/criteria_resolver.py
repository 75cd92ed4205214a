"""
Criteria Resolver - picks the effective BatchCriteria for a user or batch name.

Selectors:
  - ByName("Nakula")          -> lower-cased batch name
  - ByProfile(profile)        -> profile.batch, else profile.batch_name
  - str / UserProfile / dict  -> wrapped in the matching selector
  - None                      -> default batch

Alternate spellings are mapped through the registry's fixed alias table.
Missing or unknown batches fall back to the default batch; resolution
never raises for those. Any other selector type is a programmer error
and raises TypeError.
"""

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Union

from ..constants import LECTURE_CATEGORIES
from ..models import BatchCriteria, BatchRequirements, UserProfile
from ..scorers.criteria_registry import (
    canonical_batch_key,
    get_criteria,
    get_default_batch,
    get_effective_registry,
)
from .config_store import ScoringConfigProvider

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ByName:
    """Select criteria by batch name."""

    name: str


@dataclass(frozen=True)
class ByProfile:
    """Select criteria by the batch recorded on a user profile."""

    profile: Union[UserProfile, Mapping[str, Any]]


BatchSelector = Union[ByName, ByProfile]
SelectorInput = Union[BatchSelector, str, UserProfile, Mapping[str, Any], None]


def to_selector(selector: SelectorInput) -> Optional[BatchSelector]:
    """Normalize raw selector input into a BatchSelector (None stays None)."""
    if selector is None or isinstance(selector, (ByName, ByProfile)):
        return selector
    if isinstance(selector, str):
        return ByName(selector)
    if isinstance(selector, (UserProfile, Mapping)):
        return ByProfile(selector)
    raise TypeError(f"Cannot resolve batch criteria from {type(selector).__name__}")


def _profile_batch(profile: Union[UserProfile, Mapping[str, Any]]) -> Optional[str]:
    """Primary ``batch`` field, falling back to ``batchName``."""
    if isinstance(profile, UserProfile):
        return profile.batch or profile.batch_name
    return profile.get("batch") or profile.get("batchName") or profile.get("batch_name")


def _overrides(provider: Optional[ScoringConfigProvider]) -> dict[str, BatchCriteria]:
    return provider.get_overrides() if provider else {}


def _requested_key(selector: Optional[BatchSelector]) -> Optional[str]:
    if selector is None:
        return None
    if isinstance(selector, ByName):
        return canonical_batch_key(selector.name)
    return canonical_batch_key(_profile_batch(selector.profile))


def batch_key_for(selector: SelectorInput, provider: Optional[ScoringConfigProvider] = None) -> str:
    """Canonical batch key the selector resolves to, after fallback."""
    key = _requested_key(to_selector(selector))
    if key and key in get_effective_registry(_overrides(provider)):
        return key
    return get_default_batch()


def resolve_criteria(
    selector: SelectorInput,
    provider: Optional[ScoringConfigProvider] = None,
) -> BatchCriteria:
    """Effective BatchCriteria for a batch name, profile, or nothing.

    Overrides from ``provider`` replace built-in entries per batch key.
    Without a provider only the built-in batches are consulted.
    """
    key = _requested_key(to_selector(selector))
    if key is None:
        logger.debug("No batch on selector, using default batch")
    return get_criteria(key, _overrides(provider))


def get_batch_requirements(
    selector: SelectorInput,
    provider: Optional[ScoringConfigProvider] = None,
) -> BatchRequirements:
    """Daily minimums and enabled hearing categories for display."""
    criteria = resolve_criteria(selector, provider)
    lecture_minimums = {}
    enabled = []
    for entry_field, minimum_field, flag in LECTURE_CATEGORIES:
        lecture_minimums[entry_field] = getattr(criteria, minimum_field)
        if flag is None or getattr(criteria, flag):
            enabled.append(entry_field)

    return BatchRequirements(
        batch=batch_key_for(selector, provider),
        reading_minutes=criteria.reading_minimum or 0,
        hearing_minutes=criteria.hearing_minimum or 0,
        service_minutes=criteria.service_minimum or 0,
        shloka_count=criteria.shloka_minimum or 0,
        lecture_minimums=lecture_minimums,
        enabled_lectures=enabled,
    )


def list_batches(provider: Optional[ScoringConfigProvider] = None) -> dict[str, BatchCriteria]:
    """Effective registry: built-ins with overrides applied."""
    return get_effective_registry(_overrides(provider))
