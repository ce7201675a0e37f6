"""
Report session handling.

Tracks the active report mode and filter criteria and reruns the report
whenever the log or the selection changes. Every pass recomputes from the
full snapshot, since earlier interactions can be amended after the fact.
"""

import logging
import threading
from typing import Iterable, Optional

from ..models.records import AidType, Battle, Interaction
from ..models.snapshot import CombatSnapshot
from ..segmentation.mob_filter import AllMobs, MobFilterCriteria
from ..segmentation.mob_xp import BaseXPLookup
from .displays import Report, ReportAssembler, ReportMode

logger = logging.getLogger(__name__)


def is_relevant_change(
    mode: ReportMode,
    new_interactions: Iterable[Interaction],
    new_battles: Iterable[Battle] = (),
) -> bool:
    """
    Check whether newly appended records can change a report.

    Buff views only care about enhancements; the recovery views react to any
    new interaction or battle.
    """
    interactions = list(new_interactions)

    if mode.is_buff_mode:
        return any(i.aid_type == AidType.ENHANCE for i in interactions)

    return bool(interactions) or any(True for _ in new_battles)


class ReportSession:
    """
    Serializes report passes for one view.

    At most one pass runs at a time; triggers arriving during a pass wait for
    it to finish.
    """

    def __init__(
        self,
        mode: ReportMode = ReportMode.BUFFS_USED,
        criteria: Optional[MobFilterCriteria] = None,
        base_xp: Optional[BaseXPLookup] = None,
        max_interactions: int = 0,
    ):
        """
        Initialize the session.

        Args:
            mode: Initial report view
            criteria: Initial encounter filter; all mobs when omitted
            base_xp: Base XP lookup handed to every pass
            max_interactions: Only consider this many of the most recent
                              interactions (0 for all)
        """
        self.mode = mode
        self.criteria: MobFilterCriteria = criteria if criteria is not None else AllMobs()
        self.max_interactions = max_interactions
        self.assembler = ReportAssembler(base_xp)
        self.last_report: Optional[Report] = None
        self._lock = threading.RLock()

    def refresh(self, snapshot: CombatSnapshot) -> Report:
        """Run one full pass over the snapshot with the current settings."""
        with self._lock:
            try:
                scoped = snapshot.limit_interactions(self.max_interactions)
                report = self.assembler.build(scoped, self.criteria, self.mode)
            except (KeyError, ValueError, TypeError, AttributeError) as e:
                logger.error(f"Report pass failed for {self.mode.value}: {e}")
                report = Report(mode=self.mode)

            self.last_report = report
            return report

    def on_interactions_appended(
        self,
        snapshot: CombatSnapshot,
        new_interactions: Iterable[Interaction],
        new_battles: Iterable[Battle] = (),
    ) -> Optional[Report]:
        """
        Rerun the report if the appended records matter to the current view.

        Returns:
            The new report, or None if the change was irrelevant
        """
        with self._lock:
            if not is_relevant_change(self.mode, new_interactions, new_battles):
                logger.debug(f"Ignoring change irrelevant to {self.mode.value}")
                return None
            return self.refresh(snapshot)

    def set_mode(self, snapshot: CombatSnapshot, mode: ReportMode) -> Report:
        """Switch the report view and rerun."""
        with self._lock:
            self.mode = mode
            return self.refresh(snapshot)

    def set_criteria(self, snapshot: CombatSnapshot, criteria: MobFilterCriteria) -> Report:
        """Switch the encounter filter and rerun."""
        with self._lock:
            self.criteria = criteria
            return self.refresh(snapshot)
