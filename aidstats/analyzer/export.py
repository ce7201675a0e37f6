"""
Export of raw report aggregates to JSON and CSV.
"""

import csv
import json
import logging
from typing import Any, Dict, List, Optional

from .displays import Report
from .intervals import IntervalStats

logger = logging.getLogger(__name__)


def _seconds(stats: IntervalStats, attr: str) -> Optional[float]:
    value = getattr(stats, attr)
    return value.total_seconds() if value is not None else None


def _stats_fields(stats: IntervalStats) -> Dict[str, Any]:
    return {
        "count": stats.count,
        "first": stats.first.isoformat(),
        "last": stats.last.isoformat(),
        "min_interval_s": _seconds(stats, "min_interval"),
        "max_interval_s": _seconds(stats, "max_interval"),
        "avg_interval_s": _seconds(stats, "avg_interval"),
    }


def flatten_report(report: Report) -> List[Dict[str, Any]]:
    """
    Flatten a report's aggregates into one record per row.

    Every record carries a "section" and a "combatant" field plus the
    numbers of that row.
    """
    records: List[Dict[str, Any]] = []
    aggregates = report.aggregates

    for combatant in aggregates.get("buffs", []):
        for row in combatant.rows:
            records.append(
                {
                    "section": report.mode.value,
                    "combatant": combatant.name,
                    "action": row.action_name,
                    "party": row.party_name,
                    **_stats_fields(row.stats),
                }
            )

    recovery_rows = list(aggregates.get("recovery", []))
    if aggregates.get("recovery_total") is not None:
        recovery_rows.append(aggregates["recovery_total"])
    for row in recovery_rows:
        record = {
            "section": "recovery",
            "combatant": row.name,
            "damage_taken": row.damage_taken,
            "hp_drained": row.hp_drained,
            "hp_cured": row.hp_cured,
        }
        for tier, count in enumerate(row.regen_counts, start=1):
            record[f"regen_{tier}"] = count
        records.append(record)

    for row in aggregates.get("curing", []):
        records.append(
            {
                "section": "curing",
                "combatant": row.name,
                "spell_hp": row.spell_hp,
                "ability_hp": row.ability_hp,
            }
        )
        for family, stats in row.family_stats.items():
            records.append(
                {
                    "section": "curing_family",
                    "combatant": row.name,
                    "action": family,
                    "hp_total": row.family_amounts.get(family, 0),
                    "hp_average": round(row.average(family), 2),
                    **_stats_fields(stats),
                }
            )

    for combatant in aggregates.get("status", []):
        for spell in combatant.spells:
            records.append(
                {
                    "section": "status_curing",
                    "combatant": combatant.name,
                    "action": spell.action_name,
                    "count": spell.casts,
                    "no_effect": spell.no_effect,
                }
            )
            for effect_name, count in spell.effects:
                records.append(
                    {
                        "section": "status_effect",
                        "combatant": combatant.name,
                        "action": spell.action_name,
                        "party": effect_name,
                        "count": count,
                    }
                )

    return records


def export_json(report: Report, output_file: str) -> int:
    """Write the report aggregates as a JSON document; returns the record count."""
    records = flatten_report(report)
    data = {"mode": report.mode.value, "rows": records}

    with open(output_file, "w") as f:
        json.dump(data, f, indent=2, default=str)

    logger.info(f"Exported {len(records)} rows to {output_file}")
    return len(records)


def export_csv(report: Report, output_file: str) -> int:
    """Write the report aggregates as CSV; returns the record count."""
    records = flatten_report(report)

    fieldnames: List[str] = []
    for record in records:
        for key in record:
            if key not in fieldnames:
                fieldnames.append(key)

    with open(output_file, "w", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=fieldnames or ["section", "combatant"])
        writer.writeheader()
        writer.writerows(records)

    logger.info(f"Exported {len(records)} rows to {output_file}")
    return len(records)
