"""Batch Criteria Registry - built-in scoring tables per batch.

Loads the built-in batches from ``data/batch_criteria.yaml`` and layers
caller-supplied overrides on top. An override replaces a batch's whole
entry; it is never merged field by field.

Usage:
    from sadhana_scoring.scorers.criteria_registry import get_criteria

    criteria = get_criteria("nakula")
    # criteria.reading_minimum == 150

    criteria = get_criteria("unknown", overrides={})  # falls back to sahadev
"""

import logging
from pathlib import Path
from typing import Mapping, Optional

import yaml
from pydantic import ValidationError

from ..constants import DEFAULT_BATCH, DEFAULT_SHLOKA_BONUS
from ..models import BatchCriteria, DurationScore, TimeRangeScore

logger = logging.getLogger(__name__)

# Module-level cache
_registry_cache: Optional[dict] = None


def _get_config_path() -> Path:
    return Path(__file__).parent.parent / "data" / "batch_criteria.yaml"


def _load_registry() -> dict:
    """Load and cache the built-in batches from YAML."""
    global _registry_cache
    if _registry_cache is not None:
        return _registry_cache

    config_path = _get_config_path()
    if not config_path.exists():
        logger.warning(f"Batch criteria config not found at {config_path}, using defaults")
        _registry_cache = _build_default_registry()
        return _registry_cache

    with open(config_path) as f:
        raw = yaml.safe_load(f) or {}

    batches: dict[str, BatchCriteria] = {}
    for name, data in (raw.get("batches") or {}).items():
        key = str(name).strip().lower()
        try:
            batches[key] = BatchCriteria.model_validate(data)
        except ValidationError as e:
            raise ValueError(f"Built-in batch {name} is invalid: {e}") from e

    default_batch = str(raw.get("default_batch", DEFAULT_BATCH)).lower()
    if default_batch not in batches:
        raise ValueError(f"Default batch '{default_batch}' is not defined in {config_path}")

    aliases = {str(k).lower(): str(v).lower() for k, v in (raw.get("batch_aliases") or {}).items()}
    for alias, canonical in aliases.items():
        if canonical not in batches:
            raise ValueError(f"Alias '{alias}' points at unknown batch '{canonical}'")

    shloka_bonus = {str(k).lower(): int(v) for k, v in (raw.get("shloka_bonus") or {}).items()}

    _registry_cache = {
        "batches": batches,
        "aliases": aliases,
        "shloka_bonus": shloka_bonus,
        "default_batch": default_batch,
    }
    logger.info(f"Loaded {len(batches)} built-in batches, {len(aliases)} batch aliases")
    return _registry_cache


def _build_default_registry() -> dict:
    """Fallback: a single sahadev batch defined in code."""
    default = BatchCriteria(
        name="Sahadev",
        reading_minimum=60,
        hearing_minimum=60,
        sp_lecture_minimum=30,
        total_body_score=30,
        total_soul_score=165,
        sleep_time_scoring=[
            TimeRangeScore(start_time="21:00", end_time="22:00", points=10),
            TimeRangeScore(start_time="22:00", end_time="22:30", points=7),
            TimeRangeScore(start_time="22:30", end_time="23:00", points=5),
            TimeRangeScore(start_time="23:00", end_time="23:59", points=2),
        ],
        wake_up_time_scoring=[
            TimeRangeScore(start_time="04:00", end_time="04:30", points=10),
            TimeRangeScore(start_time="04:30", end_time="05:00", points=7),
            TimeRangeScore(start_time="05:00", end_time="05:30", points=5),
            TimeRangeScore(start_time="05:30", end_time="06:00", points=2),
        ],
        day_sleep_scoring=[
            DurationScore(max_duration=0, points=10),
            DurationScore(max_duration=30, points=7),
            DurationScore(max_duration=60, points=5),
            DurationScore(max_duration=90, points=2),
        ],
        japa_completion_scoring=[
            TimeRangeScore(start_time="04:00", end_time="08:00", points=10),
            TimeRangeScore(start_time="08:00", end_time="12:00", points=7),
            TimeRangeScore(start_time="12:00", end_time="18:00", points=5),
            TimeRangeScore(start_time="18:00", end_time="21:00", points=2),
        ],
    )
    return {
        "batches": {DEFAULT_BATCH: default},
        "aliases": {},
        "shloka_bonus": {DEFAULT_BATCH: DEFAULT_SHLOKA_BONUS},
        "default_batch": DEFAULT_BATCH,
    }


def get_default_batch() -> str:
    """Name of the batch used when no usable batch is given."""
    return _load_registry()["default_batch"]


def canonical_batch_key(name: Optional[str]) -> Optional[str]:
    """Lower-case a batch name and map known alternate spellings.

    Returns None for a missing or blank name.
    """
    if name is None:
        return None
    key = str(name).strip().lower()
    if not key:
        return None
    return _load_registry()["aliases"].get(key, key)


def get_builtin_criteria(name: str) -> Optional[BatchCriteria]:
    """Built-in criteria for a batch, or None if the batch is not built in."""
    key = canonical_batch_key(name)
    if key is None:
        return None
    return _load_registry()["batches"].get(key)


def get_effective_registry(overrides: Optional[Mapping[str, BatchCriteria]] = None) -> dict[str, BatchCriteria]:
    """Built-in batches with overrides applied (override wins per batch key)."""
    effective = dict(_load_registry()["batches"])
    for name, criteria in (overrides or {}).items():
        key = canonical_batch_key(name)
        if key:
            effective[key] = criteria
    return effective


def has_batch(name: Optional[str], overrides: Optional[Mapping[str, BatchCriteria]] = None) -> bool:
    key = canonical_batch_key(name)
    return key is not None and key in get_effective_registry(overrides)


def get_criteria(name: Optional[str], overrides: Optional[Mapping[str, BatchCriteria]] = None) -> BatchCriteria:
    """Effective criteria for a batch name.

    Override entry if present, else the built-in entry, else the default
    batch's built-in entry. Never raises for unknown names.
    """
    registry = _load_registry()
    key = canonical_batch_key(name)
    effective = get_effective_registry(overrides)
    criteria = effective.get(key) if key else None
    if criteria is None:
        default = registry["default_batch"]
        if key:
            logger.warning(f"Unknown batch '{name}', falling back to {default}")
        criteria = registry["batches"][default]
    return criteria


def get_shloka_bonus(batch_name: Optional[str]) -> int:
    """Points awarded once a batch's shloka minimum is met."""
    key = canonical_batch_key(batch_name) or get_default_batch()
    return _load_registry()["shloka_bonus"].get(key, DEFAULT_SHLOKA_BONUS)


def list_builtin_batches() -> list[str]:
    """List all built-in batch keys."""
    return list(_load_registry()["batches"].keys())


def clear_cache():
    """Clear the registry cache (useful for testing)."""
    global _registry_cache
    _registry_cache = None
