"""Canonical registry of event bus topics published by the encounter.

Each entry is declared as a :class:`~enum.Enum` member and documents the
producer, the intended consumers and the payload guarantees for the associated
event.  Importing modules should rely on the enum members (e.g.
``topics.EventTopic.HIT_RESOLVED``) to avoid drifting topic names.
"""

from __future__ import annotations

from enum import Enum

__all__ = ["EventTopic"]


class EventTopic(str, Enum):
    """Enumeration of every topic published on an encounter's event bus."""

    HIT_RESOLVED = "HitResolved"
    """Published by :class:`core.encounter.Encounter` after a committed hit.

    Subscribers: quest/reward bookkeeping, combat logs.
    Guarantees: provides ``target``, ``weapon`` and the ``resolution``.
    """

    ENTITY_DEFEATED = "EntityDefeated"
    """Published when a committed hit brings an entity to 0 HP.

    Subscribers: encounter drivers handling removal and respawn.
    Guarantees: carries ``name`` and the ``weapon`` of the final hit.
    """

    SPAWN_REQUESTED = "SpawnRequested"
    """Published once per spawn request returned by a resolved hit.

    Subscribers: encounter drivers that own entity creation.
    Guarantees: contains ``name`` (entity table key) and ``requested_by``.
    """

    CHEAT_DEATH_TRIGGERED = "CheatDeathTriggered"
    """Published when a lethal hit is absorbed by a survival ability.

    Subscribers: combat logs and UI notifications.
    Guarantees: includes ``name``, ``ability`` and the ``healed`` amount.
    """

    RESOLUTION_FAILED = "ResolutionFailed"
    """Published when a hit aborts with a typed error; nothing was committed.

    Subscribers: diagnostics sinks.
    Guarantees: carries ``target``, ``weapon`` and the ``error`` instance.
    """
