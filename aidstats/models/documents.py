"""
Pydantic models for snapshot documents.

These validate the plain JSON/YAML form of a snapshot and convert each
entry into the frozen record types the analysis engine works with.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, List, Optional, Type

from pydantic import BaseModel, ConfigDict, Field, field_validator

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
)


def parse_enum(enum_cls: Type[Enum], value: Any, default: Enum) -> Enum:
    """
    Accept an enum member, its value, or its name.

    Names are matched ignoring case, spaces and underscores, so "Charmed Mob",
    "CHARMED_MOB" and "charmedmob" all resolve to the same member.
    """
    if value is None:
        return default
    if isinstance(value, enum_cls):
        return value
    for member in enum_cls:
        if member.value == value:
            return member
    if isinstance(value, str):
        key = value.strip().upper().replace(" ", "").replace("_", "")
        for member in enum_cls:
            if member.name.replace("_", "") == key:
                return member
    raise ValueError(f"Unknown {enum_cls.__name__} value: {value!r}")


def to_naive_utc(value: datetime) -> datetime:
    """Convert aware timestamps to naive UTC; naive ones are kept as given."""
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


class CombatantDocument(BaseModel):
    """A combatant entry."""

    model_config = ConfigDict(populate_by_name=True)

    combatant_id: int = Field(..., alias="id", description="Unique combatant id")
    name: str = Field(..., description="Display name")
    entity_type: EntityType = Field(EntityType.PLAYER, alias="type")
    notes: Optional[str] = None

    @field_validator("entity_type", mode="before")
    @classmethod
    def _entity_type(cls, v):
        return parse_enum(EntityType, v, EntityType.PLAYER)

    def to_record(self) -> Combatant:
        return Combatant(self.combatant_id, self.name, self.entity_type, self.notes)


class BattleDocument(BaseModel):
    """A battle entry."""

    model_config = ConfigDict(populate_by_name=True)

    battle_id: int = Field(..., alias="id", description="Unique battle id")
    enemy_id: Optional[int] = None
    experience_points: int = 0
    base_experience: Optional[int] = Field(None, description="XP tier the mob belongs to")
    default_battle: bool = False

    @field_validator("experience_points", mode="before")
    @classmethod
    def _zero_if_null(cls, v):
        return 0 if v is None else v

    @field_validator("default_battle", mode="before")
    @classmethod
    def _false_if_null(cls, v):
        return False if v is None else v

    def to_record(self) -> Battle:
        return Battle(
            battle_id=self.battle_id,
            enemy_id=self.enemy_id,
            experience_points=self.experience_points,
            base_experience=self.base_experience,
            default_battle=self.default_battle,
        )


class InteractionDocument(BaseModel):
    """An interaction entry."""

    model_config = ConfigDict(populate_by_name=True)

    timestamp: datetime = Field(..., description="ISO 8601 string or Unix seconds")
    actor_id: Optional[int] = None
    target_id: Optional[int] = None
    battle_id: Optional[int] = None
    action_name: Optional[str] = Field(None, alias="action")
    action_type: ActionType = ActionType.UNKNOWN
    aid_type: AidType = AidType.NONE
    harm_type: HarmType = HarmType.NONE
    recovery_type: RecoveryType = RecoveryType.NONE
    amount: int = 0
    second_aid_type: AidType = AidType.NONE
    second_harm_type: HarmType = HarmType.NONE
    second_amount: int = 0
    secondary_action_name: Optional[str] = Field(None, alias="secondary_action")
    preparing: bool = False
    failed_action: FailedActionType = FailedActionType.NONE

    @field_validator(
        "action_type",
        "aid_type",
        "harm_type",
        "recovery_type",
        "second_aid_type",
        "second_harm_type",
        "failed_action",
        mode="before",
    )
    @classmethod
    def _enum_value(cls, v, info):
        default = cls.model_fields[info.field_name].default
        return parse_enum(type(default), v, default)

    @field_validator("amount", "second_amount", mode="before")
    @classmethod
    def _zero_if_null(cls, v):
        return 0 if v is None else v

    @field_validator("preparing", mode="before")
    @classmethod
    def _false_if_null(cls, v):
        return False if v is None else v

    @field_validator("timestamp")
    @classmethod
    def _naive_timestamp(cls, v: datetime) -> datetime:
        return to_naive_utc(v)

    def to_record(self) -> Interaction:
        return Interaction(**self.model_dump(by_alias=False))


class SnapshotDocument(BaseModel):
    """A whole snapshot: combatants, battles and interactions."""

    combatants: List[CombatantDocument] = Field(default_factory=list)
    battles: List[BattleDocument] = Field(default_factory=list)
    interactions: List[InteractionDocument] = Field(default_factory=list)

    @field_validator("combatants", "battles", "interactions", mode="before")
    @classmethod
    def _empty_if_null(cls, v):
        return [] if v is None else v
