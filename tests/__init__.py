"""
Tests for the combat interaction analyzer.

This package contains tests for:
- Snapshot loading and record parsing
- Encounter filtering and mob selection lists
- Interval statistics and per-combatant aggregates
- Report assembly, sessions and exports
- Configuration and the command-line interface
"""
