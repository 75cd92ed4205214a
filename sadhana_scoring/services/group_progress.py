"""
Group progress - weekly stats for every member of a devotee group.

Each member is resolved and aggregated independently on a worker pool.
A member whose profile or entries fail to load comes back with
``stats=None`` and the error message; the other members are unaffected.

Overrides and the scoring mode are snapshotted once per report so every
member is scored against the same configuration.
"""

import datetime as dt
import logging
from typing import Any, Callable, Iterable, Mapping, Optional, Sequence, Union

from ..config import get_max_workers
from ..models import MemberProgress, SadhanaEntry, UserProfile
from ..scorers.weekly_aggregator import aggregate_week
from ..utils.date_utils import filter_entries_for_week, start_of_week
from ..utils.worker_pool import WorkerPool
from .config_store import ScoringConfigProvider
from .criteria_resolver import ByProfile, batch_key_for, resolve_criteria

logger = logging.getLogger(__name__)

ProfileLike = Union[UserProfile, Mapping[str, Any], None]
EntryFetcher = Callable[[str, dt.date, dt.date], Iterable[SadhanaEntry]]
ProfileFetcher = Callable[[str], ProfileLike]


def _display_name(profile: ProfileLike) -> Optional[str]:
    if profile is None:
        return None
    if isinstance(profile, UserProfile):
        return profile.spiritual_name or profile.display_name
    return profile.get("spiritualName") or profile.get("displayName")


def build_member_progress(
    member_id: str,
    fetch_entries: EntryFetcher,
    anchor: dt.date,
    provider: ScoringConfigProvider,
    weekly_mode: bool,
    fetch_profile: Optional[ProfileFetcher] = None,
) -> MemberProgress:
    """Resolve one member's batch and aggregate their week.

    Exceptions from the fetchers propagate to the caller.
    """
    profile = fetch_profile(member_id) if fetch_profile else None
    selector = ByProfile(profile) if profile is not None else None

    week_start = start_of_week(anchor)
    week_end = week_start + dt.timedelta(days=6)
    entries = filter_entries_for_week(fetch_entries(member_id, week_start, week_end), anchor)

    criteria = resolve_criteria(selector, provider)
    stats = aggregate_week(entries, criteria, provider, weekly_mode=weekly_mode)
    return MemberProgress(
        member_id=member_id,
        batch=batch_key_for(selector, provider),
        display_name=_display_name(profile),
        stats=stats,
    )


def assemble_group_progress(
    members: Sequence[str],
    fetch_entries: EntryFetcher,
    anchor: dt.date,
    provider: Optional[ScoringConfigProvider] = None,
    fetch_profile: Optional[ProfileFetcher] = None,
    max_workers: Optional[int] = None,
) -> dict[str, MemberProgress]:
    """Weekly progress for each member, keyed by member id.

    Args:
        members: Member (user) ids
        fetch_entries: (member_id, week_start, week_end) -> that member's entries
        anchor: Any date inside the target week
        provider: Override source and mode flag (snapshotted once)
        fetch_profile: member_id -> profile; omitted means default batch for all
        max_workers: Worker threads (defaults to SADHANA_MAX_WORKERS)

    Returns:
        Dict of member id -> MemberProgress, in input order
    """
    snapshot = (provider or ScoringConfigProvider()).snapshot()
    weekly_mode = snapshot.is_weekly_scoring_enabled()

    def _work(member_id: str) -> MemberProgress:
        return build_member_progress(member_id, fetch_entries, anchor, snapshot, weekly_mode, fetch_profile)

    pool = WorkerPool(max_workers=max_workers or get_max_workers(), logger=logger)
    results = pool.map(_work, list(members), desc="Group progress")

    progress: dict[str, MemberProgress] = {}
    for success, member_id, outcome in results:
        if success:
            progress[member_id] = outcome
        else:
            logger.warning(f"Progress unavailable for member {member_id}: {outcome}")
            progress[member_id] = MemberProgress(member_id=member_id, error=str(outcome) or type(outcome).__name__)
    return progress


def rank_members(progress: Mapping[str, MemberProgress]) -> list[MemberProgress]:
    """Members by weekly total score (highest first); failed members last."""
    ok = [p for p in progress.values() if p.ok]
    failed = [p for p in progress.values() if not p.ok]
    return sorted(ok, key=lambda p: p.weekly_total_score, reverse=True) + failed
