"""Runtime record of one monster instance inside an encounter."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Optional, Set

from core.errors import InvalidStatStateError
from ecs.components.ability_state import AbilityStateComponent
from entities.static_tables import EntityRecord

logger = logging.getLogger(__name__)

__all__ = ["CombatEntity", "ROLE_LEADER", "ROLE_MINION"]

ROLE_LEADER = "leader"
ROLE_MINION = "minion"

_LAYER_FIELDS = (
    "radiation_layers",
    "cold_layers",
    "burn_layers",
    "armor_reduction_layers",
)


@dataclass(slots=True)
class CombatEntity:
    """Mutable statistics of a spawned entity.

    ``max_hp``, ``max_energy``, ``max_stacks`` and ``armor`` come from the
    entity static table; the remaining fields evolve hit after hit through
    :meth:`ecs.statistics_store.StatisticsStore.apply`.
    """

    name: str
    max_hp: int
    hp: int
    max_energy: int = 0
    energy: int = 0
    max_stacks: int = 0
    armor: float = 0.0
    role: str = ROLE_LEADER
    frail: bool = False
    alive: bool = True
    tags: Set[str] = field(default_factory=set)
    abilities: Set[str] = field(default_factory=set)
    ability_state: AbilityStateComponent = field(default_factory=AbilityStateComponent)
    radiation_layers: int = 0
    cold_layers: int = 0
    burn_layers: int = 0
    armor_reduction_layers: int = 0
    last_offensive_tool: Optional[str] = None

    def __post_init__(self) -> None:
        self.tags = set(self.tags)
        self.abilities = set(self.abilities)
        self.validate()

    # ------------------------------------------------------------------
    # Construction helpers
    # ------------------------------------------------------------------
    @classmethod
    def from_record(cls, record: EntityRecord, **overrides: Any) -> "CombatEntity":
        """Spawn a fresh entity at full HP and energy from ``record``.

        ``overrides`` replace any runtime field (``hp``, ``tags``, counters...);
        ``ability_state`` may be given as a plain mapping of pool -> value.
        """

        values: dict[str, Any] = {
            "name": record.name,
            "max_hp": record.max_hp,
            "hp": record.max_hp,
            "max_energy": record.max_energy,
            "energy": record.max_energy,
            "max_stacks": record.max_stacks,
            "armor": record.armor,
            "role": record.role,
            "frail": record.frail,
            "tags": set(record.tags),
            "abilities": set(record.abilities),
        }
        state = overrides.pop("ability_state", None)
        values.update(overrides)
        if isinstance(state, AbilityStateComponent):
            values["ability_state"] = state.copy()
        elif state:
            values["ability_state"] = AbilityStateComponent(**dict(state))
        return cls(**values)

    def validate(self) -> None:
        """Raise :class:`InvalidStatStateError` for contradictory values."""

        if self.max_hp <= 0:
            raise InvalidStatStateError(self.name, f"max_hp must be positive, got {self.max_hp}")
        if self.max_energy < 0:
            raise InvalidStatStateError(self.name, f"max_energy must be >= 0, got {self.max_energy}")
        if self.hp < 0:
            raise InvalidStatStateError(self.name, f"hp must be >= 0, got {self.hp}")
        if self.hp > self.max_hp:
            raise InvalidStatStateError(self.name, f"hp {self.hp} exceeds max_hp {self.max_hp}")
        if self.energy < 0:
            raise InvalidStatStateError(self.name, f"energy must be >= 0, got {self.energy}")
        if self.energy > self.max_energy:
            raise InvalidStatStateError(
                self.name, f"energy {self.energy} exceeds max_energy {self.max_energy}"
            )
        for attr in _LAYER_FIELDS:
            value = getattr(self, attr)
            if value < 0:
                raise InvalidStatStateError(self.name, f"{attr} must be >= 0, got {value}")

    def copy(self) -> "CombatEntity":
        """Return an independent copy (sets and counter pools included)."""

        return CombatEntity(
            name=self.name,
            max_hp=self.max_hp,
            hp=self.hp,
            max_energy=self.max_energy,
            energy=self.energy,
            max_stacks=self.max_stacks,
            armor=self.armor,
            role=self.role,
            frail=self.frail,
            alive=self.alive,
            tags=set(self.tags),
            abilities=set(self.abilities),
            ability_state=self.ability_state.copy(),
            radiation_layers=self.radiation_layers,
            cold_layers=self.cold_layers,
            burn_layers=self.burn_layers,
            armor_reduction_layers=self.armor_reduction_layers,
            last_offensive_tool=self.last_offensive_tool,
        )

    # ------------------------------------------------------------------
    # Read helpers used by the handlers
    # ------------------------------------------------------------------
    def has(self, ability: str) -> bool:
        return ability in self.abilities

    def has_tag(self, tag: str) -> bool:
        return tag in self.tags

    def counter(self, pool: str) -> int:
        return self.ability_state.get(pool)

    @property
    def hp_ratio(self) -> float:
        return self.hp / self.max_hp

    @property
    def energy_ratio(self) -> float:
        return self.energy / self.max_energy if self.max_energy > 0 else 0.0
