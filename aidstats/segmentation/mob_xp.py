"""
Base experience lookup for battles.
"""

import logging
from typing import Callable, Dict, List, NamedTuple, Optional

from ..models.records import EntityType
from ..models.snapshot import CombatSnapshot

logger = logging.getLogger(__name__)

# Callable used by the filter to get the base XP tier of a battle
BaseXPLookup = Callable[[int], Optional[int]]


class MobEntry(NamedTuple):
    """One fought mob, as listed in mob selection menus."""

    battle_id: int
    name: str
    xp: int
    base_xp: int


class MobXPTable:
    """
    Maps battles to the base experience of the mob that was fought.

    Base experience is the XP a kill is worth without chain bonuses; battles
    that don't record it separately use their raw experience points.
    """

    def __init__(self, entries: List[MobEntry]):
        self.entries = entries
        self._base_xp: Dict[int, int] = {e.battle_id: e.base_xp for e in entries}

    def __call__(self, battle_id: int) -> Optional[int]:
        return self.get_base_xp(battle_id)

    def get_base_xp(self, battle_id: int) -> Optional[int]:
        """Get the base XP of a battle, or None if the battle isn't a mob fight."""
        return self._base_xp.get(battle_id)

    @classmethod
    def from_snapshot(cls, snapshot: CombatSnapshot) -> "MobXPTable":
        """Build the table from every non-default battle against an enemy mob."""
        entries = []
        for battle in snapshot.battles:
            if battle.default_battle:
                continue
            enemy = snapshot.enemy_of(battle)
            if enemy is None or enemy.entity_type != EntityType.ENEMY_MOB:
                continue

            base_xp = battle.base_experience
            if base_xp is None:
                base_xp = battle.experience_points

            entries.append(
                MobEntry(
                    battle_id=battle.battle_id,
                    name=enemy.name,
                    xp=battle.experience_points,
                    base_xp=base_xp,
                )
            )

        logger.debug(f"Built mob XP table with {len(entries)} entries")
        return cls(entries)
