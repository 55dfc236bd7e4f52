import unittest

from core.effects.outcome import StatDelta
from core.errors import InvalidStatStateError, UnknownEntityError
from entities.combat_entity import CombatEntity
from tests.helpers.combat import make_entity, make_store
from utils import abilities as ab


class TestStatisticsStore(unittest.TestCase):
    def setUp(self):
        self.boss = make_entity("Boss", 1000, max_energy=500, energy=100, max_stacks=20)
        self.minion = make_entity("Minion", 200)
        self.store = make_store(self.boss, self.minion)

    def test_roster_keeps_spawn_order_and_skips_dead(self):
        self.assertEqual(self.store.alive_names(), ["Boss", "Minion"])
        self.store.apply("Boss", StatDelta(hp=-5000))
        self.assertEqual(self.store.alive_names(), ["Minion"])
        self.assertFalse(self.store.is_alive("Boss"))
        self.assertIn("Boss", self.store)

    def test_hp_and_energy_clamped(self):
        self.store.apply("Boss", StatDelta(hp=50, energy=10000))
        self.assertEqual(self.boss.hp, 1000)
        self.assertEqual(self.boss.energy, 500)
        self.store.apply("Boss", StatDelta(hp=-400, energy=-10000))
        self.assertEqual(self.boss.hp, 600)
        self.assertEqual(self.boss.energy, 0)
        self.assertTrue(self.boss.alive)

    def test_layers_floored_at_zero(self):
        self.store.apply("Boss", StatDelta(cold_layers=3, burn_layers=-2))
        self.assertEqual(self.boss.cold_layers, 3)
        self.assertEqual(self.boss.burn_layers, 0)
        self.store.apply("Boss", StatDelta(cold_layers=-10))
        self.assertEqual(self.boss.cold_layers, 0)

    def test_counters_respect_pool_cap(self):
        self.store.apply("Boss", StatDelta(counters={ab.POOL_VAMPIRIC: 50}))
        self.assertEqual(self.boss.counter(ab.POOL_VAMPIRIC), 20)
        self.store.apply("Boss", StatDelta(counters={ab.POOL_VAMPIRIC: -30}))
        self.assertEqual(self.boss.counter(ab.POOL_VAMPIRIC), 0)

    def test_removals_applied_before_additions(self):
        self.boss.abilities.add(ab.REVIVAL)
        self.store.apply(
            "Boss",
            StatDelta(abilities_removed={ab.REVIVAL}, abilities_added={ab.REVIVAL, ab.PSYCHIC_FORGE}),
        )
        self.assertIn(ab.REVIVAL, self.boss.abilities)
        self.assertIn(ab.PSYCHIC_FORGE, self.boss.abilities)

    def test_zero_delta_is_noop(self):
        before = self.boss.copy()
        self.store.apply("Boss", StatDelta())
        self.assertEqual(self.boss, before)

    def test_unknown_names_raise(self):
        with self.assertRaises(UnknownEntityError):
            self.store.get("Nobody")
        with self.assertRaises(UnknownEntityError):
            self.store.apply("Nobody", StatDelta(hp=1))
        with self.assertRaises(UnknownEntityError):
            self.store.remove("Nobody")

    def test_duplicate_alive_name_rejected(self):
        with self.assertRaises(InvalidStatStateError):
            self.store.add(make_entity("Boss", 1000))

    def test_defeated_entity_respawns_at_end(self):
        self.store.apply("Boss", StatDelta(hp=-1000))
        fresh = self.store.add(make_entity("Boss", 1000))
        self.assertIs(self.store.get("Boss"), fresh)
        self.assertEqual(self.store.alive_names(), ["Minion", "Boss"])

    def test_copy_is_independent(self):
        clone = self.store.copy()
        clone.apply("Boss", StatDelta(hp=-100, counters={ab.POOL_TOXIN: 3}, tags_added={"x"}))
        self.assertEqual(self.boss.hp, 1000)
        self.assertEqual(self.boss.counter(ab.POOL_TOXIN), 0)
        self.assertNotIn("x", self.boss.tags)

        self.store.replace_with(clone)
        self.assertEqual(self.store.get("Boss").hp, 900)
        self.assertEqual(len(clone), 0)

    def test_invalid_entity_state_rejected(self):
        with self.assertRaises(InvalidStatStateError):
            CombatEntity(name="Broken", max_hp=100, hp=100, cold_layers=-1)
        with self.assertRaises(InvalidStatStateError):
            CombatEntity(name="Broken", max_hp=0, hp=0)

    def test_stats_above_their_maximum_rejected(self):
        with self.assertRaises(InvalidStatStateError) as ctx:
            CombatEntity(name="Overfed", max_hp=5000, hp=999999)
        self.assertIn("max_hp", str(ctx.exception))
        with self.assertRaises(InvalidStatStateError):
            CombatEntity(name="Overcharged", max_hp=100, hp=100, max_energy=500, energy=501)
        with self.assertRaises(InvalidStatStateError):
            CombatEntity(name="Drained", max_hp=100, hp=100, energy=1)


if __name__ == '__main__':
    unittest.main()
