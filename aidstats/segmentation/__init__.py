"""
Segmentation module for selecting which encounters are in scope.
"""

from .mob_filter import (
    AllMobs,
    CustomSet,
    GroupedByNameAndXP,
    MobFilter,
    MobFilterCriteria,
    MobSide,
    SingleBattle,
    matches,
    selected_battles,
)
from .mob_list import build_mob_list, parse_mob_selection
from .mob_xp import MobXPTable

__all__ = [
    "AllMobs",
    "CustomSet",
    "GroupedByNameAndXP",
    "MobFilter",
    "MobFilterCriteria",
    "MobSide",
    "SingleBattle",
    "matches",
    "selected_battles",
    "build_mob_list",
    "parse_mob_selection",
    "MobXPTable",
]
