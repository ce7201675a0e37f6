"""
Pytest configuration and shared fixtures for the test suite.

Most tests share one small encounter log: a healer, a tank, a mage and a
summoner's pet fighting goblins and an orc.
"""

import copy
import json
import sys
from datetime import datetime, timedelta
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from aidstats.config import ffxi_data
from aidstats.models import CombatSnapshot, Interaction

T0 = datetime(2024, 1, 1, 10, 0, 0)

HEALER, TANK, MAGE, CARBUNCLE, IDLE = 1, 2, 3, 4, 5
GOBLIN_A, GOBLIN_B, ORC = 10, 11, 12


def _ts(seconds):
    return (T0 + timedelta(seconds=seconds)).isoformat()


def _cure(seconds, target, amount, action="Cure II", battle=7, actor=HEALER, action_type="spell"):
    return {
        "timestamp": _ts(seconds),
        "actor_id": actor,
        "target_id": target,
        "battle_id": battle,
        "action": action,
        "action_type": action_type,
        "aid_type": "recovery",
        "recovery_type": "recover_hp",
        "amount": amount,
    }


WORLD_DATA = {
    "combatants": [
        {"id": HEALER, "name": "Healer", "type": "player", "notes": "WHM"},
        {"id": TANK, "name": "Tank", "type": "player"},
        {"id": MAGE, "name": "Mage", "type": "player"},
        {"id": CARBUNCLE, "name": "Carbuncle", "type": "pet"},
        {"id": IDLE, "name": "Idle", "type": "player"},
        {"id": GOBLIN_A, "name": "Goblin Smithy", "type": "enemy_mob"},
        {"id": GOBLIN_B, "name": "Goblin Smithy", "type": "enemy_mob"},
        {"id": ORC, "name": "Orcish Fighter", "type": "enemy_mob"},
    ],
    "battles": [
        {"id": 1, "default_battle": True},
        {"id": 5, "enemy_id": GOBLIN_A, "experience_points": 75},
        {"id": 7, "enemy_id": GOBLIN_B, "experience_points": 90, "base_experience": 75},
        {"id": 8, "enemy_id": ORC, "experience_points": 0},
    ],
    "interactions": [
        # Goblin hits the tank
        {
            "timestamp": _ts(5),
            "actor_id": GOBLIN_B,
            "target_id": TANK,
            "battle_id": 7,
            "action": "Hit",
            "action_type": "melee",
            "harm_type": "damage",
            "amount": 300,
        },
        _cure(0, TANK, 100),
        _cure(30, TANK, 110),
        _cure(95, TANK, 120),
        # Area enhancement on the whole party in one cast
        *[
            {
                "timestamp": _ts(10),
                "actor_id": HEALER,
                "target_id": target,
                "battle_id": 5,
                "action": "Protectra",
                "action_type": "spell",
                "aid_type": "enhance",
            }
            for target in (HEALER, TANK, MAGE)
        ],
        {
            "timestamp": _ts(20),
            "actor_id": MAGE,
            "target_id": MAGE,
            "action": "Stoneskin",
            "action_type": "spell",
            "aid_type": "enhance",
        },
        {
            "timestamp": _ts(40),
            "actor_id": HEALER,
            "target_id": TANK,
            "battle_id": 7,
            "action": "Regen",
            "action_type": "spell",
            "aid_type": "enhance",
        },
        {
            "timestamp": _ts(50),
            "actor_id": HEALER,
            "target_id": TANK,
            "battle_id": 7,
            "action": "Erase",
            "action_type": "spell",
            "aid_type": "remove_status",
            "secondary_action": "Slow",
        },
        {
            "timestamp": _ts(60),
            "actor_id": HEALER,
            "target_id": MAGE,
            "battle_id": 7,
            "action": "Erase",
            "action_type": "spell",
            "aid_type": "remove_status",
            "failed_action": "no_effect",
        },
        {
            "timestamp": _ts(70),
            "actor_id": HEALER,
            "target_id": TANK,
            "battle_id": 7,
            "action": "Erase",
            "action_type": "spell",
            "aid_type": "remove_status",
        },
        _cure(150, TANK, 80, action="Healing Ruby", actor=CARBUNCLE, action_type="ability"),
        *[_cure(200, target, 50, action="Curaga") for target in (HEALER, TANK, MAGE)],
        # Still casting; never counted
        {
            "timestamp": _ts(300),
            "actor_id": HEALER,
            "target_id": TANK,
            "battle_id": 7,
            "action": "Cure",
            "action_type": "spell",
            "aid_type": "recovery",
            "recovery_type": "recover_hp",
            "preparing": True,
        },
        # Orc fight gives no experience
        {
            "timestamp": _ts(500),
            "actor_id": ORC,
            "target_id": TANK,
            "battle_id": 8,
            "action": "Hit",
            "action_type": "melee",
            "harm_type": "damage",
            "amount": 100,
        },
    ],
}


@pytest.fixture
def base_time():
    """Start of the shared encounter log."""
    return T0


@pytest.fixture
def at():
    """Factory turning a second offset into a timestamp."""
    return lambda seconds: T0 + timedelta(seconds=seconds)


@pytest.fixture
def world_data():
    """Plain-data form of the shared encounter log."""
    return copy.deepcopy(WORLD_DATA)


@pytest.fixture
def snapshot(world_data):
    """The shared encounter log as a snapshot."""
    return CombatSnapshot.from_dict(world_data)


@pytest.fixture
def make_interaction(at):
    """Factory for interactions with sensible defaults."""

    def _make(seconds, **kwargs):
        kwargs.setdefault("actor_id", HEALER)
        kwargs.setdefault("action_name", "Protect")
        return Interaction(timestamp=at(seconds), **kwargs)

    return _make


@pytest.fixture
def snapshot_file(tmp_path, world_data):
    """The shared encounter log written to a JSON file."""
    path = tmp_path / "snapshot.json"
    path.write_text(json.dumps(world_data))
    return path


@pytest.fixture
def restore_ffxi_data():
    """Restore the module-level data tables after a test changes them."""
    families = copy.deepcopy(ffxi_data.SPELL_FAMILIES)
    regen_tiers = list(ffxi_data.REGEN_TIERS)
    total_label = ffxi_data.TOTAL_LABEL
    yield
    ffxi_data.SPELL_FAMILIES.clear()
    ffxi_data.SPELL_FAMILIES.update(families)
    ffxi_data.REGEN_TIERS[:] = regen_tiers
    ffxi_data.TOTAL_LABEL = total_label
