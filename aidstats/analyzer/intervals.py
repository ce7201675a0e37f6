"""
Cast interval statistics.

Counts how often an action was used and how much time passed between uses.
One area-of-effect cast is logged once per target, all with the same
timestamp, so every group is collapsed to distinct timestamps before anything
is counted.
"""

import logging
from collections import defaultdict
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Dict, Hashable, Iterable, List, Optional, TypeVar

from ..models.records import Interaction

logger = logging.getLogger(__name__)

K = TypeVar("K", bound=Hashable)


class IntervalIntegrityError(ValueError):
    """Raised when deduplicated timestamps still produce a non-positive gap."""


@dataclass(frozen=True)
class IntervalStats:
    """
    Usage count and time between uses for one group of interactions.

    The interval fields are None when the group has a single use.
    """

    count: int
    first: datetime
    last: datetime
    min_interval: Optional[timedelta] = None
    max_interval: Optional[timedelta] = None
    avg_interval: Optional[timedelta] = None

    @property
    def has_intervals(self) -> bool:
        return self.count > 1


def usable_interactions(interactions: Iterable[Interaction]) -> List[Interaction]:
    """Drop casts still being prepared and interactions without an action."""
    return [i for i in interactions if i.is_resolved]


def dedup_by_timestamp(interactions: Iterable[Interaction]) -> List[Interaction]:
    """
    Collapse interactions sharing an exact timestamp into one.

    The input is sorted by timestamp first (stable), and the first record of
    each timestamp is kept.

    Args:
        interactions: Interactions of a single group

    Returns:
        One interaction per distinct timestamp, in ascending time order
    """
    distinct: List[Interaction] = []
    last_seen: Optional[datetime] = None
    for interaction in sorted(interactions, key=lambda i: i.timestamp):
        if interaction.timestamp != last_seen:
            distinct.append(interaction)
            last_seen = interaction.timestamp
    return distinct


def compute_interval_stats(interactions: Iterable[Interaction]) -> Optional[IntervalStats]:
    """
    Compute count and min/max/average interval for a group.

    The average is the total span divided by the number of gaps, not the
    mean of the individual gaps.

    Args:
        interactions: Interactions of a single group, in any order

    Returns:
        Stats for the group, or None if the group is empty

    Raises:
        IntervalIntegrityError: If two consecutive distinct timestamps are not
            strictly increasing
    """
    distinct = dedup_by_timestamp(interactions)
    count = len(distinct)
    if count == 0:
        return None

    first = distinct[0].timestamp
    last = distinct[-1].timestamp

    if count == 1:
        return IntervalStats(count=1, first=first, last=last)

    gaps = []
    for previous, current in zip(distinct, distinct[1:]):
        gap = current.timestamp - previous.timestamp
        if gap <= timedelta(0):
            raise IntervalIntegrityError(
                f"Non-positive gap {gap} between {previous.timestamp} and {current.timestamp}"
            )
        gaps.append(gap)

    return IntervalStats(
        count=count,
        first=first,
        last=last,
        min_interval=min(gaps),
        max_interval=max(gaps),
        avg_interval=(last - first) / (count - 1),
    )


def group_interactions(
    interactions: Iterable[Interaction], key: Callable[[Interaction], Optional[K]]
) -> Dict[K, List[Interaction]]:
    """
    Group interactions by a key, materializing every group.

    Interactions whose key is None are dropped. Groups are returned in
    sorted key order.
    """
    groups: Dict[K, List[Interaction]] = defaultdict(list)
    for interaction in interactions:
        group_key = key(interaction)
        if group_key is not None:
            groups[group_key].append(interaction)
    return {k: groups[k] for k in sorted(groups)}


def aggregate(
    interactions: Iterable[Interaction], key: Callable[[Interaction], Optional[K]]
) -> Dict[K, IntervalStats]:
    """
    Group resolved interactions and compute stats for every group.

    Args:
        interactions: Interactions to aggregate
        key: Grouping key; records mapped to None are left out

    Returns:
        Mapping of group key to stats, in sorted key order. Empty groups never
        appear.
    """
    groups = group_interactions(usable_interactions(interactions), key)
    results: Dict[K, IntervalStats] = {}
    for group_key, members in groups.items():
        stats = compute_interval_stats(members)
        if stats is not None:
            results[group_key] = stats

    logger.debug(f"Aggregated {len(results)} interval groups")
    return results


def format_interval(interval: Optional[timedelta]) -> str:
    """
    Format an interval as M:SS, or H:MM:SS once it reaches an hour.

    Fractional seconds are truncated.
    """
    if interval is None:
        return ""

    total_seconds = int(interval.total_seconds())
    hours, remainder = divmod(total_seconds, 3600)
    minutes, seconds = divmod(remainder, 60)

    if hours > 0:
        return f"{hours}:{minutes:02d}:{seconds:02d}"
    return f"{minutes}:{seconds:02d}"
