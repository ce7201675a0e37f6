"""
FFXI data mappings used by the recovery and curing reports.

Spell families group equivalent healing actions from different jobs (a
Curing Waltz II heals in the same band as a Cure III) so they can be counted
together. All tables here can be extended or overridden through the YAML
configuration loader.
"""

from typing import Dict, List, Optional

# Family keys in report column order
CURE_1 = "Cure I"
CURE_2 = "Cure II"
CURE_3 = "Cure III"
CURE_4 = "Cure IV"
CURE_5 = "Cure V"
CURAGA = "Curaga"
OTHER_CURE = "Other"

CURE_FAMILIES: List[str] = [CURE_1, CURE_2, CURE_3, CURE_4, CURE_5]

# Configurable mapping from family to the action names that belong to it
SPELL_FAMILIES: Dict[str, List[str]] = {
    CURE_1: ["Cure", "Pollen", "Healing Breath"],
    CURE_2: ["Cure II", "Curing Waltz", "Healing Breath II"],
    CURE_3: ["Cure III", "Curing Waltz II", "Wild Carrot", "Healing Breath III"],
    CURE_4: ["Cure IV", "Curing Waltz III", "Magic Fruit"],
    CURE_5: ["Cure V", "Curing Waltz IV"],
    CURAGA: [
        "Curaga",
        "Curaga II",
        "Curaga III",
        "Curaga IV",
        "Curaga V",
        "Healing Breeze",
        "Divine Waltz",
    ],
    OTHER_CURE: ["Chakra"],
}

# Regen tiers, lowest first
REGEN_TIERS: List[str] = ["Regen", "Regen II", "Regen III"]

# Label for roster-wide summary rows
TOTAL_LABEL = "Total"


def get_spell_family(action_name: Optional[str]) -> Optional[str]:
    """
    Get the spell family an action belongs to.

    Args:
        action_name: Action name as recorded in the log

    Returns:
        Family key, or None if the action isn't part of any family
    """
    if not action_name:
        return None
    for family, names in SPELL_FAMILIES.items():
        if action_name in names:
            return family
    return None


def get_regen_tier(action_name: Optional[str]) -> Optional[int]:
    """Get the 1-based regen tier of an action, or None if it isn't a regen."""
    if action_name in REGEN_TIERS:
        return REGEN_TIERS.index(action_name) + 1
    return None


def family_order() -> List[str]:
    """Get every family key in report order."""
    ordered = CURE_FAMILIES + [CURAGA, OTHER_CURE]
    return ordered + [f for f in SPELL_FAMILIES if f not in ordered]
