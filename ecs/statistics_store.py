"""Per-encounter statistics store.

The store owns every :class:`~entities.combat_entity.CombatEntity` of one
encounter, keyed by name in spawn order.  All mutations go through
:meth:`StatisticsStore.apply`, which is the single place where the post-commit
bounds are enforced:

- ``0 <= hp <= max_hp`` and ``0 <= energy <= max_energy``;
- layer counters floored at 0;
- counter pools clamped by :class:`AbilityStateComponent`;
- ``alive`` cleared when HP reaches 0.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Dict, Iterable, Iterator, List

from core.errors import InvalidStatStateError, UnknownEntityError
from entities.combat_entity import CombatEntity

if TYPE_CHECKING:  # pragma: no cover - imported for typing only
    from core.effects.outcome import StatDelta

logger = logging.getLogger(__name__)

__all__ = ["StatisticsStore"]


class StatisticsStore:
    """Mutable, name-addressed collection of the entities of one encounter."""

    def __init__(self, entities: Iterable[CombatEntity] = ()) -> None:
        self._entities: Dict[str, CombatEntity] = {}
        for entity in entities:
            self.add(entity)

    # ------------------------------------------------------------------
    # Membership
    # ------------------------------------------------------------------
    def add(self, entity: CombatEntity) -> CombatEntity:
        """Insert ``entity``; a defeated entity with the same name is replaced."""

        existing = self._entities.get(entity.name)
        if existing is not None:
            if existing.alive:
                raise InvalidStatStateError(entity.name, "an alive entity with this name already exists")
            # Re-insert so the respawned entity moves to the end of the roster.
            del self._entities[entity.name]
        entity.validate()
        self._entities[entity.name] = entity
        return entity

    def remove(self, name: str) -> CombatEntity:
        try:
            return self._entities.pop(name)
        except KeyError:
            raise UnknownEntityError(name) from None

    def get(self, name: str) -> CombatEntity:
        try:
            return self._entities[name]
        except KeyError:
            raise UnknownEntityError(name) from None

    def is_alive(self, name: str) -> bool:
        entity = self._entities.get(name)
        return entity is not None and entity.alive

    def roster(self) -> List[CombatEntity]:
        """Alive entities in insertion order."""

        return [entity for entity in self._entities.values() if entity.alive]

    def alive_names(self) -> List[str]:
        return [entity.name for entity in self.roster()]

    def __contains__(self, name: object) -> bool:
        return name in self._entities

    def __iter__(self) -> Iterator[CombatEntity]:
        return iter(list(self._entities.values()))

    def __len__(self) -> int:
        return len(self._entities)

    # ------------------------------------------------------------------
    # Commit
    # ------------------------------------------------------------------
    def apply(self, name: str, delta: "StatDelta") -> CombatEntity:
        """Commit ``delta`` to the entity called ``name`` and return it."""

        entity = self.get(name)
        if delta.is_zero:
            return entity

        entity.hp = min(max(entity.hp + int(delta.hp), 0), entity.max_hp)
        entity.energy = min(max(entity.energy + int(delta.energy), 0), entity.max_energy)
        entity.radiation_layers = max(entity.radiation_layers + delta.radiation_layers, 0)
        entity.cold_layers = max(entity.cold_layers + delta.cold_layers, 0)
        entity.burn_layers = max(entity.burn_layers + delta.burn_layers, 0)
        entity.armor_reduction_layers = max(
            entity.armor_reduction_layers + delta.armor_reduction_layers, 0
        )
        for pool, amount in delta.counters.items():
            entity.ability_state.add(pool, amount)

        entity.tags.difference_update(delta.tags_removed)
        entity.tags.update(delta.tags_added)
        entity.abilities.difference_update(delta.abilities_removed)
        entity.abilities.update(delta.abilities_added)

        if delta.last_offensive_tool is not None:
            entity.last_offensive_tool = delta.last_offensive_tool

        if entity.hp == 0 and entity.alive:
            entity.alive = False
            logger.debug("%s reached 0 HP", entity.name)
        return entity

    # ------------------------------------------------------------------
    # Working copies
    # ------------------------------------------------------------------
    def copy(self) -> "StatisticsStore":
        """Deep copy used as the working store of an all-or-nothing hit."""

        clone = StatisticsStore()
        clone._entities = {name: entity.copy() for name, entity in self._entities.items()}
        return clone

    def replace_with(self, other: "StatisticsStore") -> None:
        """Adopt the contents of ``other`` (the commit half of a working copy)."""

        self._entities = other._entities
        other._entities = {}
