"""Probabilistic utilities affecting the whole roster or the ability set."""

from __future__ import annotations

from typing import Optional

from core.effects.handlers.common import heal_deltas, pick
from core.effects.outcome import EffectOutcome, ResolutionContext, StatDelta
from utils import abilities as ab

__all__ = ["astral_wind", "psychic_forge"]

ASTRAL_WIND_CHANCE = 0.05
ASTRAL_WIND_HEAL = 200
PSYCHIC_FORGE_CHANCE = 0.05


def astral_wind(ctx: ResolutionContext) -> Optional[EffectOutcome]:
    if not ctx.target.has(ab.ASTRAL_WIND):
        return None
    chance = ASTRAL_WIND_CHANCE * (2 if ctx.double_astral_wind else 1)
    if not ctx.roll(chance):
        return None

    healed = heal_deltas(ctx.everyone(), lambda entity: ASTRAL_WIND_HEAL)
    return EffectOutcome(
        messages=tuple(f"[Astral Wind] {name} healed {ASTRAL_WIND_HEAL} HP" for name in healed),
        other_deltas=healed,
    )


def psychic_forge(ctx: ResolutionContext) -> Optional[EffectOutcome]:
    target = ctx.target
    if not target.has(ab.PSYCHIC_FORGE):
        return None
    if not ctx.roll(PSYCHIC_FORGE_CHANCE):
        return None
    missing = [name for name in ab.PSYCHIC_FORGE_POOL if name not in target.abilities]
    if not missing:
        return None

    gained = pick(ctx.rng, missing)
    return EffectOutcome(
        messages=(f"[Psychic Forge] forged the ability '{gained}'",),
        delta=StatDelta(abilities_added=frozenset({gained})),
    )
