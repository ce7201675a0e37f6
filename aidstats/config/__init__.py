"""
Configuration module for the interaction analyzer.

Provides environment-driven settings and the configurable FFXI data tables.
"""

from .settings import ApplicationSettings, ReportSettings, get_settings
from .loader import ConfigLoader, load_and_apply_config

__all__ = [
    "ApplicationSettings",
    "ReportSettings",
    "get_settings",
    "ConfigLoader",
    "load_and_apply_config",
]
