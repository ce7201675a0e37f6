"""
FFXI Combat Interaction Analyzer

Computes per-combatant buff, recovery and curing statistics from a log of
combat interactions, with encounter filtering and cast-interval analysis.
"""

__version__ = "0.1.0"
__author__ = "aidstats Team"
