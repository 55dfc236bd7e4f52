"""Small helpers shared by the effect handler modules."""

from __future__ import annotations

import math
from typing import Callable, Dict, Iterable, Optional, Sequence, TypeVar

from core.effects.outcome import EffectOutcome, ResolutionContext, StatDelta
from entities.combat_entity import CombatEntity

Handler = Callable[[ResolutionContext], Optional[EffectOutcome]]
T = TypeVar("T")

__all__ = [
    "Handler",
    "round_half_up",
    "percent_of",
    "heal_deltas",
    "pick",
    "counter_delta",
]


def round_half_up(value: float) -> int:
    """Round ``value`` to the nearest integer, halves away from negative infinity."""

    return int(math.floor(value + 0.5))


def percent_of(maximum: float, fraction: float) -> int:
    return round_half_up(maximum * fraction)


def heal_deltas(entities: Iterable[CombatEntity], amount: Callable[[CombatEntity], int]) -> Dict[str, StatDelta]:
    """Build one HP delta per entity; ``amount`` is evaluated per entity."""

    deltas: Dict[str, StatDelta] = {}
    for entity in entities:
        heal = amount(entity)
        if heal:
            deltas[entity.name] = StatDelta(hp=heal)
    return deltas


def pick(rng, options: Sequence[T]) -> T:
    """Pick one of ``options`` using a single ``rng.random()`` draw."""

    index = min(int(rng.random() * len(options)), len(options) - 1)
    return options[index]


def counter_delta(pool: str, amount: int, **extra) -> StatDelta:
    """Shortcut for a delta that only moves one counter pool."""

    return StatDelta(counters={pool: amount}, **extra)
