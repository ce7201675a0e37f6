"""
Record types for combatants, battles and combat interactions.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum, IntEnum
from typing import Optional


class EntityType(IntEnum):
    """Role category of a combatant, in roster sort order."""

    PLAYER = 0
    PET = 1
    CHARMED_MOB = 2
    FELLOW = 3
    ENEMY_MOB = 4


# Combatant categories that get a row in the per-combatant reports
ROSTER_TYPES = frozenset(
    {EntityType.PLAYER, EntityType.PET, EntityType.CHARMED_MOB, EntityType.FELLOW}
)


class ActionType(Enum):
    """Category of the action behind an interaction."""

    UNKNOWN = "unknown"
    MELEE = "melee"
    RANGED = "ranged"
    SPELL = "spell"
    ABILITY = "ability"
    WEAPONSKILL = "weaponskill"
    SKILLCHAIN = "skillchain"
    ITEM = "item"


class AidType(Enum):
    """Classification of a beneficial interaction."""

    NONE = "none"
    ENHANCE = "enhance"
    RECOVERY = "recovery"
    REMOVE_STATUS = "remove_status"
    REMOVE_ENMITY = "remove_enmity"
    ITEM = "item"


class HarmType(Enum):
    """Classification of a harmful interaction."""

    NONE = "none"
    DAMAGE = "damage"
    DRAIN = "drain"
    ENFEEBLE = "enfeeble"
    DISPEL = "dispel"


class RecoveryType(Enum):
    """What a recovery interaction restored."""

    NONE = "none"
    RECOVER_HP = "recover_hp"
    RECOVER_MP = "recover_mp"


class FailedActionType(Enum):
    """Reason an action did not land."""

    NONE = "none"
    NO_EFFECT = "no_effect"
    RESISTED = "resisted"
    INTERRUPTED = "interrupted"
    OUT_OF_RANGE = "out_of_range"


@dataclass(frozen=True)
class Combatant:
    """A participant seen in the log."""

    combatant_id: int
    name: str
    entity_type: EntityType
    notes: Optional[str] = None

    @property
    def in_roster(self) -> bool:
        """Whether this combatant gets a report row."""
        return self.entity_type in ROSTER_TYPES


@dataclass(frozen=True)
class Battle:
    """
    A single encounter.

    The default battle is a placeholder for interactions that happened
    outside any real fight.
    """

    battle_id: int
    enemy_id: Optional[int] = None
    experience_points: int = 0
    base_experience: Optional[int] = None
    default_battle: bool = False


@dataclass(frozen=True)
class Interaction:
    """One recorded combat event between an actor and an optional target."""

    timestamp: datetime
    actor_id: Optional[int] = None
    target_id: Optional[int] = None
    battle_id: Optional[int] = None
    action_name: Optional[str] = None
    action_type: ActionType = ActionType.UNKNOWN
    aid_type: AidType = AidType.NONE
    harm_type: HarmType = HarmType.NONE
    recovery_type: RecoveryType = RecoveryType.NONE
    amount: int = 0
    second_aid_type: AidType = AidType.NONE
    second_harm_type: HarmType = HarmType.NONE
    second_amount: int = 0
    secondary_action_name: Optional[str] = None
    preparing: bool = False
    failed_action: FailedActionType = FailedActionType.NONE

    @property
    def is_resolved(self) -> bool:
        """A resolved interaction has finished casting and names its action."""
        return not self.preparing and bool(self.action_name)
