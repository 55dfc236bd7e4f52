"""Builders shared by the resolution tests.

``ScriptedRandom`` makes every probabilistic handler deterministic: each call
to ``random()`` pops the next scripted value, then falls back to ``default``
(0.99 by default, so unscripted rolls fail).
"""

from __future__ import annotations

import random
from typing import Any, Iterable, Mapping, Optional

from config.config_loader import ResolutionSettings
from core.effects.outcome import HitResolution, ResolutionContext
from core.effects.pipeline import ResolutionPipeline
from ecs.components.ability_state import AbilityStateComponent
from ecs.statistics_store import StatisticsStore
from entities.combat_entity import CombatEntity
from entities.static_tables import StaticTables
from entities.weapon import AttackContext

TEST_WEAPONS = [
    {"name": "Test Rifle", "base_damage": 500, "type": "kinetic"},
    {"name": "Test Legendary", "base_damage": 500, "type": "kinetic", "tier": "legendary"},
    {"name": "Test Cryo", "base_damage": 100, "type": "thermal", "cold": True},
    {"name": "Test Torch", "base_damage": 100, "type": "thermal", "fire": "full", "burn_layers": 1},
    {"name": "Test Shotgun", "base_damage": 100, "type": "kinetic", "fire": "partial", "burn_layers": 2},
    {"name": "Test Emitter", "base_damage": 100, "type": "energy", "radiation": True},
    {"name": "Test Drainer", "base_damage": 100, "type": "energy", "energy_drain": 200},
    {"name": "Test Disruptor", "base_damage": 100, "type": "energy", "stack_reduction": 2},
    {"name": "Test Shredder", "base_damage": 100, "type": "energy", "armor_shred": 2,
     "bonus_trigger_chance": 0.33},
    {"name": "Test Launcher", "base_damage": 100, "type": "kinetic", "bonus_trigger_chance": 0.2},
    {"name": "Test Plated", "base_damage": 100, "type": "kinetic", "armor_damage_reduction": 1.0},
]

TEST_TABLES = StaticTables.from_records(
    weapons=TEST_WEAPONS,
    mods=[{"name": "Test Cryo Core", "exclusive_to": "Test Cryo", "cold_layer_multiplier": 2}],
    entities=[
        {"name": "Dummy", "max_hp": 10000},
        {"name": "Ally", "max_hp": 5000},
    ],
)


class ScriptedRandom(random.Random):
    """``random.Random`` returning scripted values from ``random()``."""

    def __init__(self, *values: float, default: float = 0.99) -> None:
        super().__init__(0)
        self._values = list(values)
        self._default = default

    def random(self) -> float:
        if self._values:
            return self._values.pop(0)
        return self._default


def make_entity(
    name: str = "Dummy",
    max_hp: int = 10000,
    *,
    hp: Optional[int] = None,
    counters: Optional[Mapping[str, int]] = None,
    abilities: Iterable[str] = (),
    tags: Iterable[str] = (),
    **fields: Any,
) -> CombatEntity:
    """Build a :class:`CombatEntity`; ``energy`` defaults to ``max_energy``."""

    fields.setdefault("energy", fields.get("max_energy", 0))
    return CombatEntity(
        name=name,
        max_hp=max_hp,
        hp=max_hp if hp is None else hp,
        abilities=set(abilities),
        tags=set(tags),
        ability_state=AbilityStateComponent(**dict(counters or {})),
        **fields,
    )


def make_store(*entities: CombatEntity) -> StatisticsStore:
    return StatisticsStore(entities)


def make_attack(
    weapon: str = "Test Rifle",
    *,
    mods: Iterable[str] = (),
    rolls: Iterable[float] = (),
    tables: StaticTables = TEST_TABLES,
    **kwargs: Any,
) -> AttackContext:
    kwargs.setdefault("rng", ScriptedRandom(*rolls))
    return AttackContext.from_names(tables, weapon, mods=mods, **kwargs)


def make_context(
    store: StatisticsStore,
    target: str = "Dummy",
    attack: Optional[AttackContext] = None,
    raw_damage: float = 500,
    settings: Optional[ResolutionSettings] = None,
    **kwargs: Any,
) -> ResolutionContext:
    attack = attack or make_attack()
    return ResolutionContext(
        target_name=target,
        attack=attack,
        store=store,
        settings=settings or ResolutionSettings(),
        raw_damage=raw_damage,
        has_crit=attack.has_crit,
        **kwargs,
    )


def run_hit(
    store: StatisticsStore,
    target: str = "Dummy",
    attack: Optional[AttackContext] = None,
    raw_damage: float = 500,
    settings: Optional[ResolutionSettings] = None,
) -> HitResolution:
    """Run the default pipeline directly against ``store``."""

    ctx = make_context(store, target, attack, raw_damage, settings)
    return ResolutionPipeline().run(ctx)


__all__ = [
    "TEST_TABLES",
    "ScriptedRandom",
    "make_entity",
    "make_store",
    "make_attack",
    "make_context",
    "run_hit",
]
