"""
YAML overrides for the FFXI data tables.

A config file can add spell names to the cure families (for other client
languages or new jobs), replace the regen tiers and rename the total row.
Unknown sections are ignored and malformed ones are logged and skipped.
"""

import logging
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import yaml

from . import ffxi_data

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "aidstats.yaml"


def search_paths(config_path: Optional[str] = None) -> List[Path]:
    """Candidate config files, most specific first."""
    paths = [
        Path(CONFIG_FILENAME),
        Path("config") / CONFIG_FILENAME,
        Path.home() / ".aidstats" / CONFIG_FILENAME,
        Path("/etc/aidstats") / CONFIG_FILENAME,
    ]
    if config_path:
        paths.insert(0, Path(config_path))
    return paths


def _merge_spell_families(families: Any) -> bool:
    if not isinstance(families, dict):
        logger.warning(f"Ignoring spell_families: expected a mapping, got {families!r}")
        return False

    for family, names in families.items():
        if isinstance(names, str):
            names = [names]
        if not isinstance(names, list):
            logger.warning(f"Invalid action list for family {family}: {names!r}")
            continue

        members = ffxi_data.SPELL_FAMILIES.setdefault(str(family), [])
        for name in map(str, names):
            # An action belongs to exactly one family
            for other in ffxi_data.SPELL_FAMILIES.values():
                if other is not members and name in other:
                    other.remove(name)
            if name not in members:
                members.append(name)
        logger.debug(f"Spell family {family}: {members}")
    return True


def _set_regen_tiers(tiers: Any) -> bool:
    if not isinstance(tiers, list) or not tiers:
        logger.warning(f"Invalid regen_tiers: {tiers!r}")
        return False
    ffxi_data.REGEN_TIERS[:] = [str(t) for t in tiers]
    logger.debug(f"Regen tiers set to {ffxi_data.REGEN_TIERS}")
    return True


def _set_total_label(label: Any) -> bool:
    if not label:
        return False
    ffxi_data.TOTAL_LABEL = str(label)
    return True


SECTION_HANDLERS: Dict[str, Callable[[Any], bool]] = {
    "spell_families": _merge_spell_families,
    "regen_tiers": _set_regen_tiers,
    "total_label": _set_total_label,
}


class ConfigLoader:
    """Finds, reads and applies YAML overrides."""

    @staticmethod
    def load_config(config_path: Optional[str] = None) -> Dict[str, Any]:
        """
        Read the first config file found on the search path.

        Args:
            config_path: File to try before the standard locations

        Returns:
            The parsed mapping, or an empty dict when no usable file exists
        """
        for path in search_paths(config_path):
            if not path.is_file():
                continue
            try:
                with open(path, "r", encoding="utf-8") as f:
                    config = yaml.safe_load(f) or {}
            except (OSError, yaml.YAMLError) as e:
                logger.error(f"Failed to load config from {path}: {e}")
                continue

            if not isinstance(config, dict):
                logger.error(f"Ignoring {path}: expected a mapping at the top level")
                continue

            logger.info(f"Loaded configuration from {path}")
            return config

        logger.debug("No custom configuration file found, using defaults")
        return {}

    @staticmethod
    def apply_config(config: Dict[str, Any]) -> List[str]:
        """
        Apply each known section to the ffxi_data tables.

        Returns:
            Names of the sections that changed a table
        """
        applied = [
            section
            for section, handler in SECTION_HANDLERS.items()
            if section in config and handler(config[section])
        ]
        logger.info(f"Applied configuration sections: {', '.join(applied) or 'none'}")
        return applied


def load_and_apply_config(config_path: Optional[str] = None) -> List[str]:
    """Load the config file and apply it; returns the applied section names."""
    config = ConfigLoader.load_config(config_path)
    return ConfigLoader.apply_config(config) if config else []
