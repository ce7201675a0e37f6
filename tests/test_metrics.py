"""
Unit tests for the per-combatant buff, recovery and curing aggregates.
"""

from datetime import timedelta

from aidstats.analyzer.metrics import (
    BUFF_AID_TYPES,
    BuffsCalculator,
    RecoveryCalculator,
    RecoveryRow,
)
from aidstats.models import AidType, CombatSnapshot, Combatant, EntityType
from aidstats.segmentation import AllMobs, MobFilter, SingleBattle
from tests.conftest import HEALER, TANK


def rows_of(buffs, name):
    for combatant in buffs:
        if combatant.name == name:
            return [(r.action_name, r.party_name, r.stats.count) for r in combatant.rows]
    return None


class TestBuffsUsed:
    """Test buffs grouped by caster, buff and target."""

    def test_healer_rows(self, snapshot):
        """Test row grouping and self-first ordering."""
        buffs = BuffsCalculator.buffs_used(snapshot, MobFilter(AllMobs(), snapshot))

        assert rows_of(buffs, "Healer") == [
            ("Erase", "Mage", 1),
            ("Erase", "Tank", 2),
            ("Protectra", "Self", 1),
            ("Regen", "Tank", 1),
        ]

    def test_area_cast_counted_once(self, snapshot):
        """Test that an area buff landing on the caster and two others is one use."""
        buffs = BuffsCalculator.buffs_used(snapshot, MobFilter(SingleBattle(5), snapshot))

        assert rows_of(buffs, "Healer") == [("Protectra", "Self", 1)]
        assert sum(r.stats.count for r in buffs[0].rows) == 1

    def test_self_buff_hides_target_rows(self, make_interaction):
        """Test that a buff ever cast on oneself is only reported as Self."""
        snapshot = CombatSnapshot(
            combatants=[
                Combatant(HEALER, "Healer", EntityType.PLAYER),
                Combatant(TANK, "Tank", EntityType.PLAYER),
            ],
            interactions=[
                make_interaction(0, action_name="Haste", target_id=HEALER, aid_type=AidType.ENHANCE),
                make_interaction(30, action_name="Haste", target_id=TANK, aid_type=AidType.ENHANCE),
                make_interaction(40, action_name="Refresh", target_id=TANK, aid_type=AidType.ENHANCE),
            ],
        )

        buffs = BuffsCalculator.buffs_used(snapshot, MobFilter(AllMobs(), snapshot))

        assert rows_of(buffs, "Healer") == [("Haste", "Self", 1), ("Refresh", "Tank", 1)]

    def test_counts_match_distinct_casts(self, snapshot):
        """Test that each buff's row counts add up to its distinct cast times."""
        buffs = BuffsCalculator.buffs_used(snapshot, MobFilter(AllMobs(), snapshot))
        healer_casts = [
            i for i in snapshot.interactions_by_actor(HEALER) if i.aid_type in BUFF_AID_TYPES
        ]

        for action in {i.action_name for i in healer_casts}:
            rows = [r for r in buffs[0].rows if r.action_name == action]
            timestamps = {i.timestamp for i in healer_casts if i.action_name == action}
            assert sum(r.stats.count for r in rows) <= len(timestamps)
        protectra = [r for r in buffs[0].rows if r.action_name == "Protectra"]
        assert sum(r.stats.count for r in protectra) == 1

    def test_intervals_per_target(self, snapshot):
        """Test that intervals are tracked per buff and target."""
        buffs = BuffsCalculator.buffs_used(snapshot, MobFilter(AllMobs(), snapshot))
        erase_tank = next(r for r in buffs[0].rows if r.action_name == "Erase" and r.party_name == "Tank")

        assert erase_tank.stats.min_interval == timedelta(seconds=20)
        assert erase_tank.stats.avg_interval == timedelta(seconds=20)

    def test_single_cast(self, snapshot):
        """Test that a single self buff shows a count and no intervals."""
        buffs = BuffsCalculator.buffs_used(snapshot, MobFilter(AllMobs(), snapshot))
        mage = next(c for c in buffs if c.name == "Mage")

        assert len(mage.rows) == 1
        assert mage.rows[0].party_name == "Self"
        assert mage.rows[0].stats.count == 1
        assert mage.rows[0].stats.has_intervals is False

    def test_combatants_without_buffs_skipped(self, snapshot):
        """Test that combatants who cast nothing get no entry."""
        buffs = BuffsCalculator.buffs_used(snapshot, MobFilter(AllMobs(), snapshot))

        assert [c.name for c in buffs] == ["Healer", "Mage"]

    def test_filtered_by_battle(self, snapshot):
        """Test that only the selected battle's buffs are counted."""
        buffs = BuffsCalculator.buffs_used(snapshot, MobFilter(SingleBattle(5), snapshot))

        assert [c.name for c in buffs] == ["Healer"]
        assert {r.action_name for r in buffs[0].rows} == {"Protectra"}


class TestBuffsReceived:
    """Test buffs grouped by recipient, buff and caster."""

    def test_tank_rows(self, snapshot):
        """Test buffs received from another caster."""
        buffs = BuffsCalculator.buffs_received(snapshot, MobFilter(AllMobs(), snapshot))

        assert rows_of(buffs, "Tank") == [
            ("Erase", "Healer", 2),
            ("Protectra", "Healer", 1),
            ("Regen", "Healer", 1),
        ]

    def test_self_rows_follow_caster_rows(self, snapshot):
        """Test that own buffs are listed after buffs from others."""
        buffs = BuffsCalculator.buffs_received(snapshot, MobFilter(AllMobs(), snapshot))

        assert rows_of(buffs, "Mage") == [
            ("Erase", "Healer", 1),
            ("Protectra", "Healer", 1),
            ("Stoneskin", "Self", 1),
        ]
        assert rows_of(buffs, "Healer") == [("Protectra", "Self", 1)]


class TestRecovery:
    """Test the recovery summary."""

    def test_rows(self, snapshot):
        """Test damage taken, healing received and regens per combatant."""
        rows = RecoveryCalculator.recovery(snapshot, MobFilter(AllMobs(), snapshot))

        assert [r.name for r in rows] == ["Healer", "Mage", "Tank"]
        tank = rows[2]
        assert tank.damage_taken == 400
        assert tank.hp_cured == 100 + 110 + 120 + 80 + 50
        assert tank.regen_counts == [1, 0, 0]

    def test_total(self, snapshot):
        """Test the summed total row."""
        rows = RecoveryCalculator.recovery(snapshot, MobFilter(AllMobs(), snapshot))
        total = RecoveryCalculator.recovery_total(rows)

        assert total.name == "Total"
        assert total.damage_taken == 400
        assert total.hp_cured == 560
        assert total.regen_counts == [1, 0, 0]

    def test_total_without_rows(self):
        """Test that no rows means no total."""
        assert RecoveryCalculator.recovery_total([]) is None

    def test_exclude_zero_xp(self, snapshot):
        """Test that damage from a zero-XP fight is excluded."""
        rows = RecoveryCalculator.recovery(snapshot, MobFilter(AllMobs(exclude_zero_xp=True), snapshot))

        assert next(r for r in rows if r.name == "Tank").damage_taken == 300

    def test_row_addition(self):
        """Test adding rows with different regen widths."""
        total = RecoveryRow("Total", 10, 1, 5, [1]) + RecoveryRow("Tank", 5, 0, 2, [0, 2])

        assert (total.damage_taken, total.hp_drained, total.hp_cured) == (15, 1, 7)
        assert total.regen_counts == [1, 2]


class TestCuring:
    """Test healing output by spell family."""

    def test_families(self, snapshot):
        """Test family counts, where one area cure counts once."""
        curing = RecoveryCalculator.curing(snapshot, MobFilter(AllMobs(), snapshot))
        healer = next(r for r in curing if r.name == "Healer")

        assert healer.count("Cure II") == 3
        assert healer.count("Curaga") == 1
        assert healer.count("Cure") == 0
        assert healer.spell_hp == 330 + 150
        assert healer.ability_hp == 0
        assert healer.regen_counts == [1, 0, 0]

    def test_cure_intervals(self, snapshot):
        """Test interval stats of a spell family."""
        curing = RecoveryCalculator.curing(snapshot, MobFilter(AllMobs(), snapshot))
        stats = next(r for r in curing if r.name == "Healer").family_stats["Cure II"]

        assert stats.min_interval == timedelta(seconds=30)
        assert stats.max_interval == timedelta(seconds=65)
        assert stats.avg_interval == timedelta(seconds=47.5)

    def test_averages(self, snapshot):
        """Test that area cure averages sum every target of a cast."""
        curing = RecoveryCalculator.curing(snapshot, MobFilter(AllMobs(), snapshot))
        healer = next(r for r in curing if r.name == "Healer")

        assert healer.average("Cure II") == 110.0
        assert healer.average("Curaga") == 150.0
        assert healer.average("Cure V") == 0.0
        assert healer.has_averages is True

    def test_ability_cures(self, snapshot):
        """Test healing from abilities outside any family."""
        curing = RecoveryCalculator.curing(snapshot, MobFilter(AllMobs(), snapshot))
        pet = next(r for r in curing if r.name == "Carbuncle")

        assert pet.ability_hp == 80
        assert pet.family_stats == {}
        assert pet.has_averages is False

    def test_non_healers_skipped(self, snapshot):
        """Test that combatants who healed nothing get no row."""
        curing = RecoveryCalculator.curing(snapshot, MobFilter(AllMobs(), snapshot))

        assert [r.name for r in curing] == ["Healer", "Carbuncle"]


class TestStatusCuring:
    """Test status removal counts."""

    def test_erase(self, snapshot):
        """Test casts, no-effect casts and known removed effects."""
        status = RecoveryCalculator.status_curing(snapshot, MobFilter(AllMobs(), snapshot))

        assert [c.name for c in status] == ["Healer"]
        erase = status[0].spells[0]
        assert erase.action_name == "Erase"
        assert erase.casts == 3
        assert erase.no_effect == 1
        assert erase.effects == [("Slow", 1)]

    def test_nothing_selected(self, snapshot):
        """Test that a battle without removals yields nothing."""
        assert RecoveryCalculator.status_curing(snapshot, MobFilter(SingleBattle(8), snapshot)) == []
