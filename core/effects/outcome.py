"""Value objects exchanged between the effect handlers and the pipeline.

Implemented:
- :class:`StatDelta`: additive change to one entity, committed by the store.
- :class:`EffectOutcome`: everything a single handler may contribute.
- :class:`ResolutionContext`: per-hit accumulator handed to every handler.
- :class:`HitResolution`: the immutable result returned to callers.

Handlers never mutate entities directly; they describe the change and the
pipeline commits it immediately through :meth:`ResolutionContext.absorb`,
so later handlers of the same hit observe it.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import FrozenSet, List, Mapping, Optional, Set, Tuple

from config.config_loader import ResolutionSettings
from ecs.statistics_store import StatisticsStore
from entities.combat_entity import CombatEntity
from entities.weapon import AttackContext

__all__ = [
    "StatDelta",
    "EffectOutcome",
    "SpawnRequest",
    "ResolutionContext",
    "HitResolution",
    "MARKER_RADIATION_APPLIED",
    "MARKER_COLD_APPLIED",
    "MARKER_ENERGY_DRAINED",
    "MARKER_LAYER_REDUCED",
    "MARKER_BULK_HEAL_CONSUMED",
    "MARKER_BONUS_TRIGGERED",
    "MARKER_BURN_APPLIED",
]

# Side-effect markers surfaced to callers (quests, statistics, ...).
MARKER_RADIATION_APPLIED = "radiation_applied"
MARKER_COLD_APPLIED = "cold_applied"
MARKER_ENERGY_DRAINED = "energy_drained"
MARKER_LAYER_REDUCED = "layer_reduced"
MARKER_BULK_HEAL_CONSUMED = "bulk_heal_consumed"
MARKER_BONUS_TRIGGERED = "bonus_triggered"
MARKER_BURN_APPLIED = "burn_applied"


@dataclass(frozen=True, slots=True)
class StatDelta:
    """Additive change to one entity's statistics."""

    hp: int = 0
    energy: int = 0
    radiation_layers: int = 0
    cold_layers: int = 0
    burn_layers: int = 0
    armor_reduction_layers: int = 0
    counters: Mapping[str, int] = field(default_factory=dict)
    tags_added: FrozenSet[str] = frozenset()
    tags_removed: FrozenSet[str] = frozenset()
    abilities_added: FrozenSet[str] = frozenset()
    abilities_removed: FrozenSet[str] = frozenset()
    last_offensive_tool: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "counters", {k: int(v) for k, v in self.counters.items() if v})
        for attr in ("tags_added", "tags_removed", "abilities_added", "abilities_removed"):
            object.__setattr__(self, attr, frozenset(getattr(self, attr)))

    @property
    def is_zero(self) -> bool:
        return not (
            self.hp
            or self.energy
            or self.radiation_layers
            or self.cold_layers
            or self.burn_layers
            or self.armor_reduction_layers
            or self.counters
            or self.tags_added
            or self.tags_removed
            or self.abilities_added
            or self.abilities_removed
            or self.last_offensive_tool is not None
        )


@dataclass(frozen=True, slots=True)
class SpawnRequest:
    """Request for the caller to spawn ``name`` from the entity table."""

    name: str
    requested_by: str


@dataclass(frozen=True, slots=True)
class EffectOutcome:
    """Contribution of one handler to the current hit.

    ``delta`` targets the hit entity, ``other_deltas`` maps other entity names
    to their own changes.  The boolean flags are only read by the later
    handlers that care about them.
    """

    messages: Tuple[str, ...] = ()
    delta: Optional[StatDelta] = None
    other_deltas: Mapping[str, StatDelta] = field(default_factory=dict)
    buff: float = 0.0
    nerf: float = 0.0
    immune: bool = False
    immune_cold: bool = False
    immune_fire: bool = False
    spawns: Tuple[str, ...] = ()
    isolation_suppressed: bool = False
    double_astral_wind: bool = False
    bulk_heal_consumed: bool = False
    bonus_triggered: bool = False
    absorbs_lethal: bool = False
    temp_armor_bonus: float = 0.0
    markers: FrozenSet[str] = frozenset()

    def __post_init__(self) -> None:
        if isinstance(self.messages, str):
            object.__setattr__(self, "messages", (self.messages,))
        else:
            object.__setattr__(self, "messages", tuple(self.messages))
        object.__setattr__(self, "spawns", tuple(self.spawns))
        object.__setattr__(self, "markers", frozenset(self.markers))


@dataclass
class ResolutionContext:
    """Mutable state shared by all the handlers of a single hit."""

    target_name: str
    attack: AttackContext
    store: StatisticsStore
    settings: ResolutionSettings
    raw_damage: float
    has_crit: bool = False
    total_buff: float = 0.0
    total_nerf: float = 0.0
    temp_armor_bonus: float = 0.0
    immune: bool = False
    immune_cold: bool = False
    immune_fire: bool = False
    isolation_suppressed: bool = False
    double_astral_wind: bool = False
    bulk_heal_consumed: bool = False
    bonus_triggered: bool = False
    lethal_absorbed: bool = False
    final_damage: int = 0
    messages: List[str] = field(default_factory=list)
    deltas: List[Tuple[str, StatDelta]] = field(default_factory=list)
    spawns: List[SpawnRequest] = field(default_factory=list)
    markers: Set[str] = field(default_factory=set)
    fired: List[str] = field(default_factory=list)

    # ------------------------------------------------------------------
    # Roster helpers
    # ------------------------------------------------------------------
    @property
    def target(self) -> CombatEntity:
        return self.store.get(self.target_name)

    @property
    def rng(self) -> random.Random:
        return self.attack.rng

    def everyone(self) -> List[CombatEntity]:
        """Alive roster, the hit entity included."""

        return self.store.roster()

    def others(self) -> List[CombatEntity]:
        """Alive roster without the hit entity."""

        return [entity for entity in self.store.roster() if entity.name != self.target_name]

    def roll(self, chance: float) -> bool:
        """Return ``True`` with probability ``chance`` using the attack RNG."""

        if chance <= 0:
            return False
        return self.rng.random() < chance

    # ------------------------------------------------------------------
    # Commit
    # ------------------------------------------------------------------
    def commit(self, name: str, delta: Optional[StatDelta]) -> None:
        if delta is None or delta.is_zero:
            return
        self.store.apply(name, delta)
        self.deltas.append((name, delta))

    def absorb(self, outcome: EffectOutcome) -> None:
        """Merge ``outcome`` into the accumulator and commit its deltas."""

        self.messages.extend(outcome.messages)
        self.total_buff += outcome.buff
        self.total_nerf += outcome.nerf
        self.temp_armor_bonus += outcome.temp_armor_bonus
        self.immune = self.immune or outcome.immune
        self.immune_cold = self.immune_cold or outcome.immune_cold
        self.immune_fire = self.immune_fire or outcome.immune_fire
        self.isolation_suppressed = self.isolation_suppressed or outcome.isolation_suppressed
        self.double_astral_wind = self.double_astral_wind or outcome.double_astral_wind
        self.bulk_heal_consumed = self.bulk_heal_consumed or outcome.bulk_heal_consumed
        self.bonus_triggered = self.bonus_triggered or outcome.bonus_triggered
        self.lethal_absorbed = self.lethal_absorbed or outcome.absorbs_lethal
        self.markers.update(outcome.markers)
        if outcome.bulk_heal_consumed:
            self.markers.add(MARKER_BULK_HEAL_CONSUMED)
        if outcome.bonus_triggered:
            self.markers.add(MARKER_BONUS_TRIGGERED)

        self.commit(self.target_name, outcome.delta)
        for name, delta in outcome.other_deltas.items():
            self.commit(name, delta)
        self.spawns.extend(SpawnRequest(name, self.target_name) for name in outcome.spawns)


@dataclass(frozen=True, slots=True)
class HitResolution:
    """Result of one resolved hit, returned to the caller."""

    target: str
    weapon: str
    raw_damage: float
    has_crit: bool
    final_damage: int
    immune: bool
    hp_after: int
    defeated: bool
    messages: Tuple[str, ...] = ()
    deltas: Tuple[Tuple[str, StatDelta], ...] = ()
    spawns: Tuple[SpawnRequest, ...] = ()
    markers: FrozenSet[str] = frozenset()
    fired: Tuple[str, ...] = ()
    cheat_death: Optional[str] = None

    def has_marker(self, marker: str) -> bool:
        return marker in self.markers

    def deltas_for(self, name: str) -> List[StatDelta]:
        return [delta for owner, delta in self.deltas if owner == name]

    @classmethod
    def from_context(cls, ctx: ResolutionContext, cheat_death: Optional[str] = None) -> "HitResolution":
        target = ctx.target
        return cls(
            target=ctx.target_name,
            weapon=ctx.attack.name,
            raw_damage=ctx.raw_damage,
            has_crit=ctx.has_crit,
            final_damage=ctx.final_damage,
            immune=ctx.immune,
            hp_after=target.hp,
            defeated=not target.alive,
            messages=tuple(ctx.messages),
            deltas=tuple(ctx.deltas),
            spawns=tuple(ctx.spawns),
            markers=frozenset(ctx.markers),
            fired=tuple(ctx.fired),
            cheat_death=cheat_death,
        )
