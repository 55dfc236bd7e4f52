"""High-stack consumption of the burning slime pool.

Self-consumption (burning slime) and the two roster tiers (flame breath,
corrosive bile) are mutually exclusive within a hit: at most one of them
spends the pool.
"""

from __future__ import annotations

from typing import Optional

from core.effects.handlers.common import counter_delta, heal_deltas, percent_of
from core.effects.outcome import EffectOutcome, ResolutionContext, StatDelta
from utils import abilities as ab

__all__ = ["burning_slime", "flame_breath", "corrosive_bile"]

SLIME_HEAL_PER_STACK = 10
BULK_HEAL_STACKS = 10
FLAME_BREATH_STACKS = 20
FLAME_BREATH_HEAL = 0.2
CORROSIVE_BILE_STACKS = 10
CORROSIVE_BILE_HEAL = 1000


def burning_slime(ctx: ResolutionContext) -> Optional[EffectOutcome]:
    """Non-fire hits grow the pool; fire hits feed on it and heal."""

    target = ctx.target
    if not target.has(ab.BURNING_SLIME):
        return None

    stacks = target.counter(ab.POOL_BURNING_SLIME)
    if ctx.attack.weapon.is_burn_class:
        if stacks <= 0:
            return None
        heal = stacks * SLIME_HEAL_PER_STACK
        return EffectOutcome(
            messages=(f"[Burning Slime] consumed {stacks} stacks and healed {heal} HP",),
            delta=StatDelta(hp=heal, counters={ab.POOL_BURNING_SLIME: -stacks}),
            bulk_heal_consumed=stacks >= BULK_HEAL_STACKS,
        )

    if stacks >= ab.counter_cap(ab.POOL_BURNING_SLIME):
        return None
    return EffectOutcome(
        messages=("[Burning Slime] gained 1 burning slime stack",),
        delta=counter_delta(ab.POOL_BURNING_SLIME, 1),
    )


def flame_breath(ctx: ResolutionContext) -> Optional[EffectOutcome]:
    """Higher tier: a full pool heals everyone by 20% of their own max HP."""

    target = ctx.target
    if not target.has(ab.FLAME_BREATH) or ctx.bulk_heal_consumed:
        return None
    stacks = target.counter(ab.POOL_BURNING_SLIME)
    if stacks < FLAME_BREATH_STACKS:
        return None

    healed = heal_deltas(ctx.everyone(), lambda entity: percent_of(entity.max_hp, FLAME_BREATH_HEAL))
    return EffectOutcome(
        messages=(f"[Flame Breath] consumed {stacks} burning slime stacks",)
        + tuple(f"[Flame Breath] {name} healed {d.hp} HP" for name, d in healed.items()),
        delta=counter_delta(ab.POOL_BURNING_SLIME, -stacks),
        other_deltas=healed,
        bulk_heal_consumed=True,
    )


def corrosive_bile(ctx: ResolutionContext) -> Optional[EffectOutcome]:
    """Lower tier: ten stacks heal everyone by a flat amount."""

    target = ctx.target
    if not target.has(ab.CORROSIVE_BILE) or ctx.bulk_heal_consumed:
        return None
    stacks = target.counter(ab.POOL_BURNING_SLIME)
    if stacks < CORROSIVE_BILE_STACKS:
        return None

    healed = heal_deltas(ctx.everyone(), lambda entity: CORROSIVE_BILE_HEAL)
    return EffectOutcome(
        messages=(f"[Corrosive Bile] consumed {stacks} burning slime stacks",)
        + tuple(f"[Corrosive Bile] {name} healed {d.hp} HP" for name, d in healed.items()),
        delta=counter_delta(ab.POOL_BURNING_SLIME, -stacks),
        other_deltas=healed,
        bulk_heal_consumed=True,
    )
