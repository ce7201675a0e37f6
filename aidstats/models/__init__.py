"""
Data models for combat interaction analysis.
"""

from .records import (
    ActionType,
    AidType,
    Battle,
    Combatant,
    EntityType,
    FailedActionType,
    HarmType,
    Interaction,
    RecoveryType,
    ROSTER_TYPES,
)
from .snapshot import CombatSnapshot, load_snapshot

__all__ = [
    "ActionType",
    "AidType",
    "Battle",
    "Combatant",
    "EntityType",
    "FailedActionType",
    "HarmType",
    "Interaction",
    "RecoveryType",
    "ROSTER_TYPES",
    "CombatSnapshot",
    "load_snapshot",
]
