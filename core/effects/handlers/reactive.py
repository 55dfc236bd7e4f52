"""Handlers reacting to the composed damage of the current hit.

They read ``ctx.final_damage`` as produced by the composition step and may
still flag the hit immune; the pipeline zeroes the damage afterwards.
"""

from __future__ import annotations

from typing import List, Optional

from core.effects.handlers.common import round_half_up
from core.effects.outcome import EffectOutcome, ResolutionContext, StatDelta
from utils import abilities as ab

__all__ = ["frost_evolution", "flame_alien", "cosmic_energy"]

PARTIAL_FIRE_HEAL = 0.2


def frost_evolution(ctx: ResolutionContext) -> Optional[EffectOutcome]:
    if not ctx.target.has(ab.FROST_EVOLUTION) or not ctx.attack.weapon.cold:
        return None
    heal = ctx.final_damage
    return EffectOutcome(
        messages=(f"[Frost Evolution] immune to cold damage, healed {heal} HP",),
        delta=StatDelta(hp=heal),
        immune=True,
        immune_cold=True,
    )


def flame_alien(ctx: ResolutionContext) -> Optional[EffectOutcome]:
    """Full fire is absorbed entirely; partial fire only feeds a fifth of it."""

    if not ctx.target.has(ab.FLAME_ALIEN):
        return None
    damage = ctx.final_damage
    if ctx.attack.is_full_fire:
        return EffectOutcome(
            messages=(f"[Flame Alien] immune to fire damage, healed {damage} HP",),
            delta=StatDelta(hp=damage),
            immune=True,
            immune_fire=True,
        )
    if ctx.attack.is_partial_fire:
        heal = round_half_up(damage * PARTIAL_FIRE_HEAL)
        return EffectOutcome(
            messages=(f"[Flame Alien] fed on {ctx.attack.name} flames, healed {heal} HP",),
            delta=StatDelta(hp=heal),
        )
    return None


def cosmic_energy(ctx: ResolutionContext) -> Optional[EffectOutcome]:
    """Damage taken is converted into energy; what overflows heals instead."""

    target = ctx.target
    if not target.has(ab.COSMIC_ENERGY) or ctx.final_damage <= 0:
        return None

    room = max(target.max_energy - target.energy, 0)
    gained = min(ctx.final_damage, room)
    overflow = ctx.final_damage - gained
    if gained <= 0 and overflow <= 0:
        return None

    parts: List[str] = []
    if gained > 0:
        parts.append(f"gained {gained} energy")
    if overflow > 0:
        parts.append(f"{overflow} overflow converted into HP")
    return EffectOutcome(
        messages=("[Cosmic Energy] " + ", ".join(parts),),
        delta=StatDelta(hp=overflow, energy=gained),
    )
