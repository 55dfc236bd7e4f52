"""Encounter façade: one roster, one event bus, atomic hit resolution.

Example:
    ```python
    tables = load_static_tables()
    encounter = Encounter(tables)
    encounter.spawn("Behemoth")
    attack = AttackContext.from_names(tables, "Gauss Rifle", mods=["Armor-Break Core"])
    resolution = encounter.resolve_hit("Behemoth", attack)
    print(resolution.final_damage, resolution.messages)
    ```
"""

from __future__ import annotations

import dataclasses
import logging
from typing import List, Optional

from config.config_loader import ConfigLoader, ResolutionSettings, load_resolution_settings
from core.damage.base_damage import calculate_base_damage
from core.effects.catalog import uncatalogued
from core.effects.outcome import HitResolution, ResolutionContext
from core.effects.pipeline import ResolutionPipeline
from core.errors import InvalidStatStateError, ResolutionError
from core.event_bus import EventBus
from core.events.topics import EventTopic
from ecs.statistics_store import StatisticsStore
from entities.combat_entity import CombatEntity
from entities.static_tables import StaticTables, load_static_tables
from entities.weapon import AttackContext
from utils.logger import configure_logging, get_resolution_logger, log_calls

__all__ = ["Encounter"]

logger = logging.getLogger(__name__)


class Encounter:
    """Owns the statistics store of one raid encounter.

    Every hit is resolved against a working copy of the store; the copy
    replaces the live store only when the whole resolution succeeded, so a
    failing hit leaves no partial state behind.  Encounters share nothing,
    separate instances may be driven from separate threads.
    """

    def __init__(
        self,
        tables: StaticTables,
        settings: Optional[ResolutionSettings] = None,
        event_bus: Optional[EventBus] = None,
        pipeline: Optional[ResolutionPipeline] = None,
    ) -> None:
        self.tables = tables
        self.settings = settings or ResolutionSettings()
        self.event_bus = event_bus or EventBus()
        self.pipeline = pipeline or ResolutionPipeline()
        self.store = StatisticsStore()

    @classmethod
    def from_config(
        cls,
        config_file: Optional[str] = None,
        tables_dir: Optional[str] = None,
        event_bus: Optional[EventBus] = None,
    ) -> "Encounter":
        """Build an encounter from the YAML settings and the static tables.

        Also configures the ``raid_engine`` logger at the configured level.
        """

        loader = ConfigLoader(config_file) if config_file else ConfigLoader()
        settings = load_resolution_settings(loader)
        configure_logging(settings.log_level)
        return cls(load_static_tables(tables_dir), settings=settings, event_bus=event_bus)

    # ------------------------------------------------------------------
    # Roster
    # ------------------------------------------------------------------
    def spawn(self, name: str, **overrides) -> CombatEntity:
        """Create ``name`` from the entity table and add it to the roster.

        Raises:
            UnknownEntityError: ``name`` is not in the entity table.
            InvalidStatStateError: an entity of that name is already alive,
                or the overrides produce an invalid state.
        """

        record = self.tables.entity(name)
        abilities = overrides.get("abilities", record.abilities)
        uncatalogued(abilities, owner=name)
        entity = CombatEntity.from_record(record, **overrides)
        self.store.add(entity)
        logger.info("Spawned %s (%d HP)", entity.name, entity.hp)
        return entity

    def roster(self) -> List[CombatEntity]:
        return self.store.roster()

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------
    @log_calls
    def resolve_hit(
        self,
        target: str,
        attack: AttackContext,
        raw_damage: Optional[float] = None,
    ) -> HitResolution:
        """Resolve ``attack`` against ``target`` and commit it atomically.

        ``raw_damage`` bypasses the base damage calculator; the crit flag is
        then taken from ``attack.has_crit``.

        Raises:
            UnknownEntityError: ``target`` is not in the roster.
            InvalidStatStateError: ``target`` is already defeated.
        """

        working = self.store.copy()
        try:
            messages: List[str] = []
            if not working.get(target).alive:
                raise InvalidStatStateError(target, "target is already defeated")
            if raw_damage is None:
                base = calculate_base_damage(attack, working.get(target))
                attack = dataclasses.replace(attack, has_crit=base.has_crit)
                raw_damage = base.damage
                messages.extend(base.messages)
            ctx = ResolutionContext(
                target_name=target,
                attack=attack,
                store=working,
                settings=self.settings,
                raw_damage=raw_damage,
                has_crit=attack.has_crit,
                messages=messages,
            )
            resolution = self.pipeline.run(ctx)
        except ResolutionError as exc:
            self.event_bus.publish(
                EventTopic.RESOLUTION_FAILED, target=target, weapon=attack.name, error=exc
            )
            raise

        self.store.replace_with(working)
        get_resolution_logger().info(
            "%s hit %s for %d (hp %d, fired: %s)",
            resolution.weapon,
            resolution.target,
            resolution.final_damage,
            resolution.hp_after,
            ", ".join(resolution.fired) or "-",
        )
        self._publish(resolution)
        return resolution

    def _publish(self, resolution: HitResolution) -> None:
        bus = self.event_bus
        bus.publish(
            EventTopic.HIT_RESOLVED,
            target=resolution.target,
            weapon=resolution.weapon,
            resolution=resolution,
        )
        if resolution.cheat_death is not None and bus.has_subscribers(EventTopic.CHEAT_DEATH_TRIGGERED):
            healed = next(
                (delta.hp for owner, delta in reversed(resolution.deltas) if owner == resolution.target),
                0,
            )
            bus.publish(
                EventTopic.CHEAT_DEATH_TRIGGERED,
                name=resolution.target,
                ability=resolution.cheat_death,
                healed=healed,
            )
        for request in resolution.spawns:
            bus.publish(EventTopic.SPAWN_REQUESTED, name=request.name, requested_by=request.requested_by)
        if resolution.defeated:
            bus.publish(EventTopic.ENTITY_DEFEATED, name=resolution.target, weapon=resolution.weapon)
