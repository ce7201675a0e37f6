"""
Report assembly for the buff and recovery views.

Turns the per-combatant aggregates into styled, fixed-width text blocks.
Combatants with nothing to show are skipped entirely.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from rich.text import Text

from ..config import ffxi_data
from ..models.snapshot import CombatSnapshot
from ..segmentation.mob_filter import MobFilter, MobFilterCriteria
from ..segmentation.mob_xp import BaseXPLookup
from .intervals import IntervalIntegrityError, IntervalStats, format_interval
from .metrics import (
    BuffsCalculator,
    CombatantBuffs,
    CombatantStatus,
    CuringRow,
    RecoveryCalculator,
    RecoveryRow,
    SELF_LABEL,
)
from .styled import (
    ALERT_TITLE_STYLE,
    HEADER_STYLE,
    NAME_STYLE,
    TITLE_STYLE,
    TOTAL_STYLE,
    SegmentBuilder,
    StyledSegment,
    to_plain_text,
    to_rich_text,
)

logger = logging.getLogger(__name__)


class ReportMode(Enum):
    """Available report views."""

    BUFFS_USED = "buffs_used"
    BUFFS_RECEIVED = "buffs_received"
    RECOVERY_ALL = "recovery_all"
    RECOVERY = "recovery"
    CURING = "curing"
    AVG_CURING = "avg_curing"
    STATUS_CURING = "status_curing"

    @property
    def is_buff_mode(self) -> bool:
        return self in (ReportMode.BUFFS_USED, ReportMode.BUFFS_RECEIVED)


BUFF_USED_HEADER = "Buff                Used on             # Times   Min Interval   Max Interval   Avg Interval"
BUFF_RECEIVED_HEADER = "Buff                Used by             # Times   Min Interval   Max Interval   Avg Interval"
INTERVAL_HEADER = "Spell Family        # Times   Min Interval   Max Interval   Avg Interval"
STATUS_HEADER = "Status               # Times Cast     # No Effect"

RECOVERY_TITLE = "Recovery"
CURING_TITLE = "Curing"
INTERVALS_TITLE = "Curing Intervals"
AVG_CURING_TITLE = "Average Curing"
STATUS_TITLE = "Status Curing"


@dataclass
class Report:
    """Rendered report plus the raw numbers it was built from."""

    mode: ReportMode
    segments: List[StyledSegment] = field(default_factory=list)
    aggregates: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not self.segments

    def to_rich_text(self) -> Text:
        return to_rich_text(self.segments)

    def to_plain_text(self) -> str:
        return to_plain_text(self.segments)


def _interval_columns(stats: IntervalStats) -> str:
    if not stats.has_intervals:
        return ""
    return (
        f"{format_interval(stats.min_interval):>15}"
        f"{format_interval(stats.max_interval):>15}"
        f"{format_interval(stats.avg_interval):>15}"
    )


def _regen_header() -> str:
    return "".join(f"{'# ' + tier:>12}" for tier in ffxi_data.REGEN_TIERS)


def _count_families() -> List[str]:
    return ffxi_data.CURE_FAMILIES + [ffxi_data.CURAGA]


class ReportAssembler:
    """Builds reports for a snapshot, a filter criteria and a report mode."""

    def __init__(self, base_xp: Optional[BaseXPLookup] = None):
        """
        Initialize the assembler.

        Args:
            base_xp: Base XP lookup passed to the encounter filter; built from
                     each snapshot when omitted
        """
        self.base_xp = base_xp

    def build(
        self, snapshot: CombatSnapshot, criteria: MobFilterCriteria, mode: ReportMode
    ) -> Report:
        """
        Run one full aggregation pass and render it.

        Args:
            snapshot: Current interaction snapshot
            criteria: Encounter filter
            mode: Report view to build

        Returns:
            The report; empty if nothing qualified or the pass was aborted
        """
        mob_filter = MobFilter(criteria, snapshot, self.base_xp)
        report = Report(mode=mode)
        builder = SegmentBuilder()

        try:
            if mode == ReportMode.BUFFS_USED:
                buffs = BuffsCalculator.buffs_used(snapshot, mob_filter)
                report.aggregates["buffs"] = buffs
                self._render_buffs(builder, buffs, BUFF_USED_HEADER)
            elif mode == ReportMode.BUFFS_RECEIVED:
                buffs = BuffsCalculator.buffs_received(snapshot, mob_filter)
                report.aggregates["buffs"] = buffs
                self._render_buffs(builder, buffs, BUFF_RECEIVED_HEADER)
            else:
                self._build_recovery(builder, report, snapshot, mob_filter, mode)
        except IntervalIntegrityError as e:
            logger.error(f"Aborted {mode.value} report: {e}")
            return Report(mode=mode)

        report.segments = builder.segments
        logger.debug(f"Built {mode.value} report with {len(report.segments)} segments")
        return report

    def _build_recovery(
        self,
        builder: SegmentBuilder,
        report: Report,
        snapshot: CombatSnapshot,
        mob_filter: MobFilter,
        mode: ReportMode,
    ):
        show_all = mode == ReportMode.RECOVERY_ALL

        if show_all or mode == ReportMode.RECOVERY:
            rows = RecoveryCalculator.recovery(snapshot, mob_filter)
            total = RecoveryCalculator.recovery_total(rows)
            report.aggregates["recovery"] = rows
            report.aggregates["recovery_total"] = total
            self._render_recovery(builder, rows, total)

        if show_all or mode in (ReportMode.CURING, ReportMode.AVG_CURING):
            curing = RecoveryCalculator.curing(snapshot, mob_filter)
            report.aggregates["curing"] = curing
            if show_all or mode == ReportMode.CURING:
                self._render_curing(builder, curing)
                self._render_cure_intervals(builder, curing)
            if show_all or mode == ReportMode.AVG_CURING:
                self._render_avg_curing(builder, curing)

        if show_all or mode == ReportMode.STATUS_CURING:
            status = RecoveryCalculator.status_curing(snapshot, mob_filter)
            report.aggregates["status"] = status
            self._render_status(builder, status)

    def _render_buffs(self, builder: SegmentBuilder, buffs: List[CombatantBuffs], header: str):
        for combatant in buffs:
            builder.line(combatant.name, NAME_STYLE)
            builder.line(header, HEADER_STYLE)

            previous_action = None
            previous_self = None
            for row in combatant.rows:
                is_self = row.party_name == SELF_LABEL
                # Name the buff only on its first row; self rows after caster rows start a new section
                same_run = row.action_name == previous_action and (not is_self or previous_self)
                label = "" if same_run else row.action_name
                previous_action, previous_self = row.action_name, is_self

                builder.line(
                    f"{label:<20}{row.party_name:<20}{row.stats.count:>7}"
                    f"{_interval_columns(row.stats)}"
                )

            builder.line()

    def _render_recovery(
        self, builder: SegmentBuilder, rows: List[RecoveryRow], total: Optional[RecoveryRow]
    ):
        if not rows:
            return

        def format_row(row: RecoveryRow) -> str:
            regens = "".join(f"{count:>12}" for count in row.regen_counts)
            return (
                f"{row.name:<20}{row.damage_taken:>10}{row.hp_drained:>12}{row.hp_cured:>12}"
                f"{regens}"
            )

        builder.line(RECOVERY_TITLE, TITLE_STYLE)
        builder.line(
            f"{'Player':<20}{'Dmg Taken':>10}{'HP Drained':>12}{'HP Cured':>12}{_regen_header()}",
            HEADER_STYLE,
        )
        for row in rows:
            builder.line(format_row(row))

        if total is not None:
            builder.append(format_row(total), TOTAL_STYLE)
            builder.append("\n\n\n")

    def _render_curing(self, builder: SegmentBuilder, curing: List[CuringRow]):
        healers = [row for row in curing if row.has_cures]
        if not healers:
            return

        builder.line(CURING_TITLE, TITLE_STYLE)
        family_header = "".join(f"{'# ' + family:>10}" for family in _count_families())
        builder.line(
            f"{'Player':<20}{'Spell HP':>10}{'Ability HP':>12}{family_header}{_regen_header()}",
            HEADER_STYLE,
        )
        for row in healers:
            counts = "".join(f"{row.count(family):>10}" for family in _count_families())
            regens = "".join(f"{count:>12}" for count in row.regen_counts)
            builder.line(f"{row.name:<20}{row.spell_hp:>10}{row.ability_hp:>12}{counts}{regens}")

        builder.append("\n\n")

    def _render_cure_intervals(self, builder: SegmentBuilder, curing: List[CuringRow]):
        healers = [row for row in curing if row.family_stats]
        if not healers:
            return

        builder.line(INTERVALS_TITLE, TITLE_STYLE)
        builder.line()
        for row in healers:
            builder.line(row.name, NAME_STYLE)
            builder.line(INTERVAL_HEADER, HEADER_STYLE)
            for family in ffxi_data.family_order():
                stats = row.family_stats.get(family)
                if stats is None:
                    continue
                builder.line(f"{family:<20}{stats.count:>7}{_interval_columns(stats)}")
            builder.line()

        builder.append("\n")

    def _render_avg_curing(self, builder: SegmentBuilder, curing: List[CuringRow]):
        healers = [row for row in curing if row.has_averages]
        if not healers:
            return

        families = _count_families() + [ffxi_data.OTHER_CURE]
        builder.line(AVG_CURING_TITLE, TITLE_STYLE)
        builder.line(
            f"{'Player':<20}" + "".join(f"{'Avg ' + family:>13}" for family in families),
            HEADER_STYLE,
        )
        for row in healers:
            averages = "".join(f"{row.average(family):>13.2f}" for family in families)
            builder.line(f"{row.name:<20}{averages}")

        builder.append("\n\n")

    def _render_status(self, builder: SegmentBuilder, status: List[CombatantStatus]):
        if not status:
            return

        builder.append(STATUS_TITLE, ALERT_TITLE_STYLE)
        builder.append("\n\n")

        for combatant in status:
            builder.line(combatant.name, NAME_STYLE)
            builder.line(STATUS_HEADER, HEADER_STYLE)
            for spell in combatant.spells:
                builder.line(f"{spell.action_name:<20} {spell.casts:>12} {spell.no_effect:>15}")
                for effect_name, count in spell.effects:
                    builder.line(f" - {effect_name:<17} {count:>12}")
            builder.line()
