"""
Per-combatant aggregates behind the buff, recovery and curing reports.

Every calculation starts from the full snapshot and the active filter; no
state is carried between calls.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, NamedTuple, Optional, Tuple

from ..config import ffxi_data
from ..models.records import (
    ActionType,
    AidType,
    FailedActionType,
    HarmType,
    Interaction,
    RecoveryType,
)
from ..models.snapshot import CombatSnapshot
from ..segmentation.mob_filter import MobFilter, MobSide
from .intervals import (
    IntervalStats,
    aggregate,
    group_interactions,
    usable_interactions,
)

logger = logging.getLogger(__name__)

SELF_LABEL = "Self"

BUFF_AID_TYPES = {AidType.ENHANCE, AidType.REMOVE_STATUS, AidType.REMOVE_ENMITY}
SELF_BUFF_AID_TYPES = {AidType.ENHANCE, AidType.REMOVE_STATUS}
DAMAGE_HARM_TYPES = {HarmType.DAMAGE, HarmType.DRAIN}


class BuffKey(NamedTuple):
    """Grouping key for buff rows; self rows sort ahead of named parties."""

    action_name: str
    other: bool
    party_name: str


@dataclass
class BuffRow:
    action_name: str
    party_name: str
    stats: IntervalStats


@dataclass
class CombatantBuffs:
    """Buff rows for one combatant, in display order."""

    name: str
    rows: List[BuffRow] = field(default_factory=list)


@dataclass
class RecoveryRow:
    name: str
    damage_taken: int = 0
    hp_drained: int = 0
    hp_cured: int = 0
    regen_counts: List[int] = field(default_factory=list)

    @property
    def has_data(self) -> bool:
        return (self.damage_taken + self.hp_drained + self.hp_cured + sum(self.regen_counts)) > 0

    def __add__(self, other: "RecoveryRow") -> "RecoveryRow":
        width = max(len(self.regen_counts), len(other.regen_counts))
        mine = self.regen_counts + [0] * (width - len(self.regen_counts))
        theirs = other.regen_counts + [0] * (width - len(other.regen_counts))
        return RecoveryRow(
            name=self.name,
            damage_taken=self.damage_taken + other.damage_taken,
            hp_drained=self.hp_drained + other.hp_drained,
            hp_cured=self.hp_cured + other.hp_cured,
            regen_counts=[a + b for a, b in zip(mine, theirs)],
        )


@dataclass
class CuringRow:
    """Healing output of one combatant, by spell family."""

    name: str
    spell_hp: int = 0
    ability_hp: int = 0
    family_stats: Dict[str, IntervalStats] = field(default_factory=dict)
    family_amounts: Dict[str, int] = field(default_factory=dict)
    regen_counts: List[int] = field(default_factory=list)

    def count(self, family: str) -> int:
        stats = self.family_stats.get(family)
        return stats.count if stats else 0

    def average(self, family: str) -> float:
        """Average HP restored per cast of a family; area casts sum all targets."""
        count = self.count(family)
        if count == 0:
            return 0.0
        return self.family_amounts.get(family, 0) / count

    @property
    def has_cures(self) -> bool:
        counted = [self.count(f) for f in ffxi_data.CURE_FAMILIES + [ffxi_data.CURAGA]]
        return (self.spell_hp + self.ability_hp + sum(counted) + sum(self.regen_counts)) > 0

    @property
    def has_averages(self) -> bool:
        families = ffxi_data.CURE_FAMILIES + [ffxi_data.CURAGA, ffxi_data.OTHER_CURE]
        return sum(self.average(f) for f in families) > 0


@dataclass
class StatusSpellRow:
    action_name: str
    casts: int
    no_effect: int
    # Known removed effects only
    effects: List[Tuple[str, int]] = field(default_factory=list)


@dataclass
class CombatantStatus:
    name: str
    spells: List[StatusSpellRow] = field(default_factory=list)


def _party_key(snapshot: CombatSnapshot, own_name: str, party_id: Optional[int]) -> Optional[str]:
    """Resolve the other party of a buff to a label; None for dangling ids."""
    if party_id is None:
        return SELF_LABEL
    party_name = snapshot.name_of(party_id)
    if party_name is None:
        return None
    return SELF_LABEL if party_name == own_name else party_name


class BuffsCalculator:
    """Buff usage and buff reception with cast intervals."""

    @staticmethod
    def buffs_used(snapshot: CombatSnapshot, mob_filter: MobFilter) -> List[CombatantBuffs]:
        """
        Get the buffs each roster member cast, grouped by buff and target.

        A buff that ever landed on its caster is reported as a single "Self"
        row, so an area cast counts once; only buffs never cast on oneself get
        one row per target.

        Args:
            snapshot: Interaction snapshot
            mob_filter: Active encounter filter

        Returns:
            One entry per combatant that cast at least one buff
        """
        results = []
        for combatant in snapshot.roster():
            casts = [
                i
                for i in mob_filter.filter_interactions(
                    snapshot.interactions_by_actor(combatant.combatant_id), MobSide.BATTLE
                )
                if i.aid_type in BUFF_AID_TYPES
            ]

            self_cast = {
                i.action_name
                for i in usable_interactions(casts)
                if _party_key(snapshot, combatant.name, i.target_id) == SELF_LABEL
            }

            def key(interaction: Interaction) -> Optional[BuffKey]:
                party = _party_key(snapshot, combatant.name, interaction.target_id)
                if party is None:
                    return None
                if party != SELF_LABEL and interaction.action_name in self_cast:
                    return None
                return BuffKey(interaction.action_name, party != SELF_LABEL, party)

            rows = [
                BuffRow(k.action_name, k.party_name, stats)
                for k, stats in aggregate(casts, key).items()
            ]
            if rows:
                results.append(CombatantBuffs(combatant.name, rows))
            else:
                logger.debug(f"No buffs used by {combatant.name}")

        return results

    @staticmethod
    def buffs_received(snapshot: CombatSnapshot, mob_filter: MobFilter) -> List[CombatantBuffs]:
        """
        Get the buffs each roster member received, grouped by buff and caster.

        Buffs cast by others are listed first, followed by the combatant's own
        self-targeted buffs.
        """
        results = []
        for combatant in snapshot.roster():
            received = [
                i
                for i in mob_filter.filter_interactions(
                    snapshot.interactions_by_target(combatant.combatant_id), MobSide.BATTLE
                )
                if i.aid_type in BUFF_AID_TYPES
            ]
            own = [
                i
                for i in mob_filter.filter_interactions(
                    snapshot.interactions_by_actor(combatant.combatant_id), MobSide.BATTLE
                )
                if i.aid_type in SELF_BUFF_AID_TYPES
            ]

            def caster_key(interaction: Interaction) -> Optional[BuffKey]:
                caster = snapshot.name_of(interaction.actor_id)
                if caster is None or caster == combatant.name:
                    return None
                return BuffKey(interaction.action_name, True, caster)

            def self_key(interaction: Interaction) -> Optional[BuffKey]:
                if _party_key(snapshot, combatant.name, interaction.target_id) != SELF_LABEL:
                    return None
                return BuffKey(interaction.action_name, False, SELF_LABEL)

            rows = [
                BuffRow(k.action_name, k.party_name, stats)
                for k, stats in aggregate(received, caster_key).items()
            ]
            rows.extend(
                BuffRow(k.action_name, k.party_name, stats)
                for k, stats in aggregate(own, self_key).items()
            )

            if rows:
                results.append(CombatantBuffs(combatant.name, rows))
            else:
                logger.debug(f"No buffs received by {combatant.name}")

        return results


class RecoveryCalculator:
    """Damage taken, HP drained and HP restored across the roster."""

    @staticmethod
    def _regen_counts(interactions: List[Interaction]) -> List[int]:
        counts = [0] * len(ffxi_data.REGEN_TIERS)
        for interaction in interactions:
            if interaction.aid_type != AidType.ENHANCE:
                continue
            tier = ffxi_data.get_regen_tier(interaction.action_name)
            if tier is not None:
                counts[tier - 1] += 1
        return counts

    @staticmethod
    def recovery(snapshot: CombatSnapshot, mob_filter: MobFilter) -> List[RecoveryRow]:
        """
        Get the recovery summary of every roster member with any activity.

        Args:
            snapshot: Interaction snapshot
            mob_filter: Active encounter filter

        Returns:
            Rows with non-zero data, in roster order
        """
        rows = []
        for combatant in snapshot.roster():
            taken = usable_interactions(
                mob_filter.filter_interactions(
                    snapshot.interactions_by_target(combatant.combatant_id), MobSide.BATTLE
                )
            )
            done = usable_interactions(
                mob_filter.filter_interactions(
                    snapshot.interactions_by_actor(combatant.combatant_id), MobSide.BATTLE
                )
            )

            damage_taken = sum(i.amount for i in taken if i.harm_type in DAMAGE_HARM_TYPES)
            damage_taken += sum(
                i.second_amount for i in taken if i.second_harm_type in DAMAGE_HARM_TYPES
            )

            drained = sum(i.amount for i in done if i.harm_type == HarmType.DRAIN)
            drained += sum(
                i.second_amount
                for i in done
                if i.second_harm_type == HarmType.DRAIN or i.second_aid_type == AidType.RECOVERY
            )

            cured = sum(
                i.amount
                for i in taken
                if i.aid_type == AidType.RECOVERY and i.recovery_type == RecoveryType.RECOVER_HP
            )

            row = RecoveryRow(
                name=combatant.name,
                damage_taken=damage_taken,
                hp_drained=drained,
                hp_cured=cured,
                regen_counts=RecoveryCalculator._regen_counts(taken),
            )
            if row.has_data:
                rows.append(row)

        return rows

    @staticmethod
    def recovery_total(rows: List[RecoveryRow]) -> Optional[RecoveryRow]:
        """Sum the per-combatant rows; None when no combatant contributed."""
        if not rows:
            return None
        total = RecoveryRow(name=ffxi_data.TOTAL_LABEL, regen_counts=[0] * len(ffxi_data.REGEN_TIERS))
        for row in rows:
            total = total + row
        return total

    @staticmethod
    def curing(snapshot: CombatSnapshot, mob_filter: MobFilter) -> List[CuringRow]:
        """
        Get the healing output of every roster member, by spell family.

        Family counts and intervals collapse same-timestamp records, so one
        area cure counts once however many targets it hit.
        """
        rows = []
        for combatant in snapshot.roster():
            done = usable_interactions(
                mob_filter.filter_interactions(
                    snapshot.interactions_by_actor(combatant.combatant_id), MobSide.BATTLE
                )
            )
            recoveries = [i for i in done if i.aid_type == AidType.RECOVERY]
            hp_recoveries = [i for i in recoveries if i.recovery_type == RecoveryType.RECOVER_HP]

            def family_key(interaction: Interaction) -> Optional[str]:
                return ffxi_data.get_spell_family(interaction.action_name)

            family_amounts = {
                family: sum(i.amount for i in members)
                for family, members in group_interactions(recoveries, family_key).items()
            }

            row = CuringRow(
                name=combatant.name,
                spell_hp=sum(i.amount for i in hp_recoveries if i.action_type == ActionType.SPELL),
                ability_hp=sum(
                    i.amount for i in hp_recoveries if i.action_type == ActionType.ABILITY
                ),
                family_stats=aggregate(recoveries, family_key),
                family_amounts=family_amounts,
                regen_counts=RecoveryCalculator._regen_counts(done),
            )
            if row.has_cures or row.has_averages:
                rows.append(row)

        return rows

    @staticmethod
    def status_curing(snapshot: CombatSnapshot, mob_filter: MobFilter) -> List[CombatantStatus]:
        """
        Get status removal spells cast by every roster member.

        Each spell lists total casts, casts with no effect, and how often each
        known effect was removed.
        """
        results = []
        for combatant in snapshot.roster():
            removals = [
                i
                for i in usable_interactions(
                    mob_filter.filter_interactions(
                        snapshot.interactions_by_actor(combatant.combatant_id), MobSide.BATTLE
                    )
                )
                if i.aid_type == AidType.REMOVE_STATUS
            ]
            if not removals:
                continue

            spells = []
            for action_name, casts in group_interactions(removals, lambda i: i.action_name).items():
                effects = group_interactions(casts, lambda i: i.secondary_action_name or None)
                spells.append(
                    StatusSpellRow(
                        action_name=action_name,
                        casts=len(casts),
                        no_effect=sum(
                            1 for i in casts if i.failed_action == FailedActionType.NO_EFFECT
                        ),
                        effects=[(name, len(members)) for name, members in effects.items()],
                    )
                )

            results.append(CombatantStatus(combatant.name, spells))

        return results

