"""
Read-only snapshot of the interaction log.

The analysis engine never talks to storage directly; callers hand it a
CombatSnapshot built from whatever the log currently holds.
"""

import json
import logging
from collections import defaultdict
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple

import yaml

from .documents import SnapshotDocument
from .records import Battle, Combatant, Interaction

logger = logging.getLogger(__name__)


class CombatSnapshot:
    """
    Indexed, immutable view over combatants, battles and interactions.

    Interactions are kept sorted by timestamp. Lookups on unknown ids return
    None or an empty tuple instead of raising.
    """

    def __init__(
        self,
        combatants: Iterable[Combatant] = (),
        battles: Iterable[Battle] = (),
        interactions: Iterable[Interaction] = (),
    ):
        self._combatants: Dict[int, Combatant] = {c.combatant_id: c for c in combatants}
        self._battles: Dict[int, Battle] = {b.battle_id: b for b in battles}
        self._interactions: Tuple[Interaction, ...] = tuple(
            sorted(interactions, key=lambda i: i.timestamp)
        )

        by_actor: Dict[int, List[Interaction]] = defaultdict(list)
        by_target: Dict[int, List[Interaction]] = defaultdict(list)
        for interaction in self._interactions:
            if interaction.actor_id is not None:
                by_actor[interaction.actor_id].append(interaction)
            if interaction.target_id is not None:
                by_target[interaction.target_id].append(interaction)

        self._by_actor = {k: tuple(v) for k, v in by_actor.items()}
        self._by_target = {k: tuple(v) for k, v in by_target.items()}

    def __repr__(self) -> str:
        return (
            f"CombatSnapshot({len(self._combatants)} combatants, "
            f"{len(self._battles)} battles, {len(self._interactions)} interactions)"
        )

    @property
    def combatants(self) -> Tuple[Combatant, ...]:
        return tuple(self._combatants.values())

    @property
    def battles(self) -> Tuple[Battle, ...]:
        return tuple(sorted(self._battles.values(), key=lambda b: b.battle_id))

    @property
    def interactions(self) -> Tuple[Interaction, ...]:
        return self._interactions

    def combatant(self, combatant_id: Optional[int]) -> Optional[Combatant]:
        if combatant_id is None:
            return None
        return self._combatants.get(combatant_id)

    def battle(self, battle_id: Optional[int]) -> Optional[Battle]:
        if battle_id is None:
            return None
        return self._battles.get(battle_id)

    def name_of(self, combatant_id: Optional[int]) -> Optional[str]:
        """Get a combatant's display name, or None for missing/unknown ids."""
        combatant = self.combatant(combatant_id)
        return combatant.name if combatant else None

    def enemy_of(self, battle: Optional[Battle]) -> Optional[Combatant]:
        """Get the recorded enemy combatant of a battle."""
        if battle is None:
            return None
        return self.combatant(battle.enemy_id)

    def interactions_by_actor(self, combatant_id: int) -> Tuple[Interaction, ...]:
        return self._by_actor.get(combatant_id, ())

    def interactions_by_target(self, combatant_id: int) -> Tuple[Interaction, ...]:
        return self._by_target.get(combatant_id, ())

    def roster(self) -> List[Combatant]:
        """
        Get the combatants that receive report rows.

        Ordered by role category, then display name.
        """
        members = [c for c in self._combatants.values() if c.in_roster]
        return sorted(members, key=lambda c: (c.entity_type, c.name))

    def limit_interactions(self, max_count: int) -> "CombatSnapshot":
        """
        Get a snapshot holding only the most recent interactions.

        Args:
            max_count: Number of interactions to keep; 0 or less keeps all

        Returns:
            A new snapshot sharing the same combatants and battles
        """
        if max_count <= 0 or len(self._interactions) <= max_count:
            return self

        logger.debug(
            f"Limiting snapshot to the last {max_count} of {len(self._interactions)} interactions"
        )
        return CombatSnapshot(
            self._combatants.values(),
            self._battles.values(),
            self._interactions[-max_count:],
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CombatSnapshot":
        """
        Build a snapshot from plain data.

        Args:
            data: Mapping with "combatants", "battles" and "interactions" lists

        Returns:
            The loaded snapshot

        Raises:
            pydantic.ValidationError: If a record is missing a required field,
                has a malformed value or names an unknown enum value
        """
        document = SnapshotDocument.model_validate(data)

        snapshot = cls(
            [c.to_record() for c in document.combatants],
            [b.to_record() for b in document.battles],
            [i.to_record() for i in document.interactions],
        )
        logger.debug(f"Loaded {snapshot!r}")
        return snapshot


def load_snapshot(path: str) -> CombatSnapshot:
    """
    Load a snapshot from a JSON or YAML document.

    Args:
        path: File path; ".yaml"/".yml" files are read as YAML, anything else as JSON

    Returns:
        The loaded snapshot
    """
    file_path = Path(path)
    with open(file_path, "r", encoding="utf-8") as f:
        if file_path.suffix.lower() in (".yaml", ".yml"):
            data = yaml.safe_load(f) or {}
        else:
            data = json.load(f)

    if not isinstance(data, dict):
        raise ValueError(f"{file_path}: expected a mapping at the top level")

    logger.info(f"Loading interaction snapshot from {file_path}")
    return CombatSnapshot.from_dict(data)
