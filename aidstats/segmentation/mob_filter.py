"""
Encounter selection filters.

A filter criteria value picks which battles are in scope for a report. The
same criteria is checked against interactions (resolving the mob from the
actor, the target, or the battle's recorded enemy) and against battle
records directly.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, FrozenSet, Iterable, List, Optional, Set, Union

from ..models.records import Battle, Combatant, EntityType, Interaction
from ..models.snapshot import CombatSnapshot
from .mob_xp import BaseXPLookup, MobXPTable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AllMobs:
    """Every battle, plus interactions that happened between battles."""

    exclude_zero_xp: bool = False


@dataclass(frozen=True)
class GroupedByNameAndXP:
    """
    Every battle against mobs with a given name.

    An xp_tier of None merges all XP tiers for the name; an int restricts
    the selection to battles with exactly that base XP.
    """

    mob_name: str
    xp_tier: Optional[int] = None


@dataclass(frozen=True)
class SingleBattle:
    """Exactly one battle."""

    battle_id: int


@dataclass(frozen=True)
class CustomSet:
    """A hand-picked set of battles."""

    battle_ids: FrozenSet[int] = frozenset()


MobFilterCriteria = Union[AllMobs, GroupedByNameAndXP, SingleBattle, CustomSet]


class MobSide(Enum):
    """Which participant of an interaction is treated as the mob."""

    ACTOR = "actor"
    TARGET = "target"
    BATTLE = "battle"


MobResolver = Callable[[CombatSnapshot, Interaction, Battle], Optional[Combatant]]

_MOB_RESOLVERS: Dict[MobSide, MobResolver] = {
    MobSide.ACTOR: lambda snapshot, interaction, battle: snapshot.combatant(interaction.actor_id),
    MobSide.TARGET: lambda snapshot, interaction, battle: snapshot.combatant(interaction.target_id),
    MobSide.BATTLE: lambda snapshot, interaction, battle: snapshot.enemy_of(battle),
}


class MobFilter:
    """
    Evaluates a filter criteria against records of one snapshot.

    Never raises for missing or dangling references; those simply don't match.
    """

    def __init__(
        self,
        criteria: MobFilterCriteria,
        snapshot: CombatSnapshot,
        base_xp: Optional[BaseXPLookup] = None,
    ):
        """
        Initialize the filter.

        Args:
            criteria: The active selection mode
            snapshot: Snapshot used to resolve battle and combatant references
            base_xp: Base XP lookup for battles; built from the snapshot if omitted
        """
        self.criteria = criteria
        self.snapshot = snapshot
        self.base_xp = base_xp if base_xp is not None else MobXPTable.from_snapshot(snapshot)

    def check_interaction(self, interaction: Interaction, side: MobSide = MobSide.BATTLE) -> bool:
        """
        Check whether an interaction is in scope.

        Args:
            interaction: The interaction to check
            side: Which participant is resolved as the mob for name-based selection

        Returns:
            True if the interaction passes the filter
        """
        criteria = self.criteria
        linked = interaction.battle_id is not None
        battle = self.snapshot.battle(interaction.battle_id)

        if linked and battle is None:
            # Dangling battle reference
            return False

        if isinstance(criteria, AllMobs):
            if not linked:
                return True
            return not criteria.exclude_zero_xp or battle.experience_points > 0

        if not linked:
            return False

        if isinstance(criteria, CustomSet):
            if battle.battle_id not in criteria.battle_ids:
                return False
            if side is MobSide.BATTLE:
                return True
            participant_id = (
                interaction.actor_id if side is MobSide.ACTOR else interaction.target_id
            )
            return participant_id is not None and participant_id == battle.enemy_id

        if isinstance(criteria, SingleBattle):
            return battle.battle_id == criteria.battle_id

        if isinstance(criteria, GroupedByNameAndXP):
            mob = _MOB_RESOLVERS[side](self.snapshot, interaction, battle)
            return self._matches_mob(criteria, battle, mob)

        return False

    def check_battle(self, battle: Battle) -> bool:
        """Check whether a battle record is in scope."""
        criteria = self.criteria
        enemy = self.snapshot.enemy_of(battle)

        if isinstance(criteria, AllMobs):
            if criteria.exclude_zero_xp:
                return battle.experience_points > 0
            return enemy is not None and enemy.entity_type == EntityType.ENEMY_MOB

        if battle.default_battle:
            return False

        if isinstance(criteria, CustomSet):
            return battle.battle_id in criteria.battle_ids

        if isinstance(criteria, SingleBattle):
            return battle.battle_id == criteria.battle_id

        if isinstance(criteria, GroupedByNameAndXP):
            if enemy is None or enemy.entity_type != EntityType.ENEMY_MOB:
                return False
            return self._matches_mob(criteria, battle, enemy)

        return False

    def filter_interactions(
        self, interactions: Iterable[Interaction], side: MobSide = MobSide.BATTLE
    ) -> List[Interaction]:
        """Get the interactions that pass the filter, in their original order."""
        return [i for i in interactions if self.check_interaction(i, side)]

    def _matches_mob(
        self, criteria: GroupedByNameAndXP, battle: Battle, mob: Optional[Combatant]
    ) -> bool:
        if not criteria.mob_name or mob is None:
            return False
        if mob.name != criteria.mob_name:
            return False
        if criteria.xp_tier is None:
            return True
        return criteria.xp_tier == self.base_xp(battle.battle_id)


def matches(
    criteria: MobFilterCriteria,
    record: Union[Interaction, Battle],
    snapshot: CombatSnapshot,
    side: MobSide = MobSide.BATTLE,
    base_xp: Optional[BaseXPLookup] = None,
) -> bool:
    """
    Check a single interaction or battle record against a filter criteria.

    Args:
        criteria: The active selection mode
        record: An Interaction or a Battle
        snapshot: Snapshot used to resolve references
        side: Mob resolution for interactions (ignored for battles)
        base_xp: Optional base XP lookup

    Returns:
        True if the record is in scope
    """
    mob_filter = MobFilter(criteria, snapshot, base_xp)
    if isinstance(record, Battle):
        return mob_filter.check_battle(record)
    return mob_filter.check_interaction(record, side)


def selected_battles(
    criteria: MobFilterCriteria,
    snapshot: CombatSnapshot,
    base_xp: Optional[BaseXPLookup] = None,
) -> Set[int]:
    """Get the ids of every battle in the snapshot that the criteria selects."""
    mob_filter = MobFilter(criteria, snapshot, base_xp)
    selected = {
        b.battle_id
        for b in snapshot.battles
        if not b.default_battle and mob_filter.check_battle(b)
    }
    logger.debug(f"{criteria!r} selects {len(selected)} battles")
    return selected
