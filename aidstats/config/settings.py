"""
Configuration settings for the interaction analyzer.

Handles environment variables and logging setup.
"""

import os
import logging
from dataclasses import dataclass
from typing import Optional


VALID_LOG_LEVELS = ("debug", "info", "warning", "error", "critical")


@dataclass
class ReportSettings:
    """Report defaults and snapshot limits."""

    default_mode: str = "buffs_used"
    exclude_zero_xp: bool = False
    # How many of the most recent interactions a pass considers; 0 means all
    max_interactions: int = 0

    @classmethod
    def from_env(cls) -> "ReportSettings":
        """Load report settings from environment variables."""
        return cls(
            default_mode=os.getenv("AIDSTATS_DEFAULT_MODE", "buffs_used").lower(),
            exclude_zero_xp=os.getenv("AIDSTATS_EXCLUDE_ZERO_XP", "false").lower() == "true",
            max_interactions=int(os.getenv("AIDSTATS_MAX_INTERACTIONS", "0")),
        )


@dataclass
class ApplicationSettings:
    """Main application settings container."""

    report: ReportSettings
    log_level: str = "info"
    config_path: Optional[str] = None

    @classmethod
    def from_env(cls) -> "ApplicationSettings":
        """Load all settings from environment variables."""
        return cls(
            report=ReportSettings.from_env(),
            log_level=os.getenv("AIDSTATS_LOG_LEVEL", "info").lower(),
            config_path=os.getenv("AIDSTATS_CONFIG") or None,
        )

    def validate(self):
        """Validate configuration settings."""
        from ..analyzer.displays import ReportMode

        errors = []

        if self.log_level not in VALID_LOG_LEVELS:
            errors.append(f"Invalid log level: {self.log_level}")

        if self.report.max_interactions < 0:
            errors.append(f"Invalid interaction limit: {self.report.max_interactions}")

        if self.report.default_mode not in [m.value for m in ReportMode]:
            errors.append(f"Invalid default report mode: {self.report.default_mode}")

        if self.config_path and not os.path.exists(self.config_path):
            errors.append(f"Config file not found: {self.config_path}")

        if errors:
            raise ValueError(f"Configuration validation failed: {'; '.join(errors)}")

    def log_configuration(self):
        """Log current configuration."""
        logger = logging.getLogger(__name__)

        logger.info("=== Analyzer Configuration ===")
        logger.info(f"Log Level: {self.log_level}")
        logger.info(f"Config File: {self.config_path or '(search path)'}")
        logger.info(f"Default Mode: {self.report.default_mode}")
        logger.info(f"Exclude 0 XP Mobs: {self.report.exclude_zero_xp}")
        if self.report.max_interactions:
            logger.info(f"Interaction Limit: {self.report.max_interactions}")
        else:
            logger.info("Interaction Limit: none")
        logger.info("=== End Configuration ===")


def get_settings() -> ApplicationSettings:
    """Load settings from the current environment."""
    return ApplicationSettings.from_env()
