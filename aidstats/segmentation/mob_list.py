"""
Mob selection lists.

Builds the human-readable selection entries offered to users ("All",
"Goblin Tinkerer (75)", "  12: Goblin Tinkerer") and turns a chosen entry
back into a filter criteria.
"""

import re
from typing import List, Optional

from ..models.snapshot import CombatSnapshot
from .mob_filter import AllMobs, GroupedByNameAndXP, MobFilterCriteria, SingleBattle
from .mob_xp import MobXPTable

ALL_MOBS_ENTRY = "All"

_BATTLE_ENTRY = re.compile(r"^\s*(?P<battle_id>\d+):\s+(?P<mob_name>.*)$")
_GROUPED_ENTRY = re.compile(r"^(?P<mob_name>.*?) \((?P<xp>\d+)\)$")


def build_mob_list(
    snapshot: CombatSnapshot,
    group_mobs: bool = True,
    exclude_zero_xp: bool = False,
    xp_table: Optional[MobXPTable] = None,
) -> List[str]:
    """
    Build the mob selection entries for a snapshot.

    Args:
        snapshot: Snapshot holding the fought battles
        group_mobs: List one "Name (base xp)" entry per tier instead of one
                    "id: Name" entry per battle
        exclude_zero_xp: Leave out battles that gave no experience
        xp_table: Optional precomputed XP table

    Returns:
        Selection entries, always starting with "All"
    """
    table = xp_table or MobXPTable.from_snapshot(snapshot)
    entries = [e for e in table.entries if not exclude_zero_xp or e.xp > 0]

    if group_mobs:
        tiers = sorted({(e.name, e.base_xp) for e in entries})
        return [ALL_MOBS_ENTRY] + [f"{name} ({xp})" for name, xp in tiers]

    width = len(str(max((e.battle_id for e in entries), default=0)))
    ordered = sorted(entries, key=lambda e: e.battle_id)
    return [ALL_MOBS_ENTRY] + [f"{e.battle_id:>{width}}: {e.name}" for e in ordered]


def parse_mob_selection(selection: Optional[str], exclude_zero_xp: bool = False) -> MobFilterCriteria:
    """
    Turn a mob selection entry into a filter criteria.

    "All" (or nothing) selects every mob, "12: Name" a single battle,
    "Name (75)" one XP tier of a mob and a bare "Name" every tier of it.
    """
    if selection is None or selection.strip() in ("", ALL_MOBS_ENTRY):
        return AllMobs(exclude_zero_xp=exclude_zero_xp)

    battle_match = _BATTLE_ENTRY.match(selection)
    if battle_match:
        return SingleBattle(battle_id=int(battle_match.group("battle_id")))

    grouped_match = _GROUPED_ENTRY.match(selection)
    if grouped_match:
        return GroupedByNameAndXP(
            mob_name=grouped_match.group("mob_name"),
            xp_tier=int(grouped_match.group("xp")),
        )

    return GroupedByNameAndXP(mob_name=selection.strip(), xp_tier=None)
