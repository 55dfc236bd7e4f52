"""Immunity and negation handlers (first stage of the pipeline).

Every handler here may flag the hit as immune.  An immune hit keeps flowing
through the later stages (stacks, layers and heals still happen) but its
final damage is forced to 0.
"""

from __future__ import annotations

from typing import List, Optional

from core.effects.outcome import EffectOutcome, ResolutionContext, StatDelta
from utils import abilities as ab

__all__ = [
    "cold_adaptation",
    "deadly_strike",
    "electric_field",
    "ancient_omen",
    "biological_signature_mimicry",
    "redundancy_optimization",
    "environmental_adaptation",
    "hunter_alien",
]

COLD_ADAPTATION_THRESHOLD = 10
DEADLY_STRIKE_CHANCE = 0.05
ELECTRIC_FIELD_MIN_ENERGY = 0.3
ANCIENT_OMEN_ENERGY = 100


def cold_adaptation(ctx: ResolutionContext) -> Optional[EffectOutcome]:
    """Cold hits build exposure until the entity turns heat-averse; then it shrugs cold off."""

    target = ctx.target
    if not target.has(ab.COLD_ADAPTATION):
        return None

    heat_averse = target.has_tag(ab.TAG_HEAT_AVERSE)
    cold_weapon = ctx.attack.weapon.cold
    messages: List[str] = []
    cold_change = 0

    if heat_averse and target.cold_layers > 0:
        cold_change = -target.cold_layers
        messages.append(f"[Cold Adaptation] cleared {target.cold_layers} cold layers")

    if heat_averse and cold_weapon:
        messages.append("[Cold Adaptation] immune to cold damage")
        return EffectOutcome(
            messages=messages,
            delta=StatDelta(cold_layers=cold_change),
            immune=True,
            immune_cold=True,
        )

    exposure = target.counter(ab.POOL_COLD_EXPOSURE)
    if cold_weapon and exposure < COLD_ADAPTATION_THRESHOLD:
        exposure += 1
        messages.append(f"[Cold Adaptation] exposure {exposure}/{COLD_ADAPTATION_THRESHOLD}")
        tags_added = frozenset()
        if exposure >= COLD_ADAPTATION_THRESHOLD:
            tags_added = frozenset({ab.TAG_HEAT_AVERSE})
            messages.append("[Cold Adaptation] gained the heat-averse tag")
        return EffectOutcome(
            messages=messages,
            delta=StatDelta(
                cold_layers=cold_change,
                counters={ab.POOL_COLD_EXPOSURE: 1},
                tags_added=tags_added,
            ),
        )

    if not messages:
        return None
    return EffectOutcome(messages=messages, delta=StatDelta(cold_layers=cold_change))


def deadly_strike(ctx: ResolutionContext) -> Optional[EffectOutcome]:
    if not ctx.target.has(ab.DEADLY_STRIKE):
        return None
    if not ctx.roll(DEADLY_STRIKE_CHANCE):
        return None
    return EffectOutcome(messages=("[Deadly Strike] dodged the hit",), immune=True)


def electric_field(ctx: ResolutionContext) -> Optional[EffectOutcome]:
    """Non-thermal hits may be negated while energy is at least 30%."""

    target = ctx.target
    if not target.has(ab.ELECTRIC_FIELD) or ctx.attack.is_thermal:
        return None
    if target.energy_ratio < ELECTRIC_FIELD_MIN_ENERGY:
        return None

    chance = max(0.55 - 0.05 * target.cold_layers, 0.05)
    if not ctx.roll(chance):
        return None
    return EffectOutcome(
        messages=(f"[Electric Field] {round(chance * 100)}% chance: negated a non-thermal hit",),
        immune=True,
    )


def ancient_omen(ctx: ResolutionContext) -> Optional[EffectOutcome]:
    target = ctx.target
    if not target.has(ab.ANCIENT_OMEN) or ctx.attack.is_thermal:
        return None

    chance = min(0.01 + 0.005 * target.counter(ab.POOL_LIGHT_BLADE), 1.0)
    if not ctx.roll(chance):
        return None
    return EffectOutcome(
        messages=(
            f"[Ancient Omen] {chance * 100:.2f}% chance: negated the hit and restored "
            f"{ANCIENT_OMEN_ENERGY} energy",
        ),
        delta=StatDelta(energy=ANCIENT_OMEN_ENERGY),
        immune=True,
    )


def biological_signature_mimicry(ctx: ResolutionContext) -> Optional[EffectOutcome]:
    target = ctx.target
    if not target.has(ab.BIOLOGICAL_SIGNATURE_MIMICRY):
        return None

    chance = min(0.01 + 0.01 * target.counter(ab.POOL_GENE), 0.99)
    if not ctx.roll(chance):
        return None
    return EffectOutcome(
        messages=(f"[Biological Signature Mimicry] {chance * 100:.0f}% chance: negated the hit",),
        immune=True,
    )


def redundancy_optimization(ctx: ResolutionContext) -> Optional[EffectOutcome]:
    target = ctx.target
    if not target.has(ab.REDUNDANCY_OPTIMIZATION) or not ctx.attack.weapon.radiation:
        return None

    if target.radiation_layers > 0:
        return EffectOutcome(
            messages=("[Redundancy Optimization] immune to radiation, all radiation layers cleared",),
            delta=StatDelta(radiation_layers=-target.radiation_layers),
            immune=True,
        )
    return EffectOutcome(messages=("[Redundancy Optimization] immune to radiation",), immune=True)


def environmental_adaptation(ctx: ResolutionContext) -> Optional[EffectOutcome]:
    """Any hit clears burn and cold layers; fire and cold hits are negated."""

    target = ctx.target
    if not target.has(ab.ENVIRONMENTAL_ADAPTATION):
        return None

    fire = ctx.attack.is_full_fire
    cold = ctx.attack.weapon.cold
    cleared: List[str] = []
    if target.burn_layers > 0:
        cleared.append("burn")
    if target.cold_layers > 0:
        cleared.append("cold")
    if not (fire or cold or cleared):
        return None

    parts = []
    if fire or cold:
        parts.append(f"immune to {'fire' if fire else 'cold'} damage")
    if cleared:
        parts.append(f"cleared all {' and '.join(cleared)} layers")
    return EffectOutcome(
        messages=(f"[Environmental Adaptation] {', '.join(parts)}",),
        delta=StatDelta(burn_layers=-target.burn_layers, cold_layers=-target.cold_layers),
        immune=fire or cold,
        immune_fire=fire,
        immune_cold=cold,
    )


def hunter_alien(ctx: ResolutionContext) -> Optional[EffectOutcome]:
    """Negates fire and cold; pack-dependent multiplier otherwise."""

    if not ctx.target.has(ab.HUNTER_ALIEN):
        return None

    attack = ctx.attack
    fire = attack.is_full_fire
    cold = attack.weapon.cold
    messages: List[str] = []
    buff = nerf = 0.0
    if fire or cold:
        messages.append(f"[Hunter Alien] immune to {'fire' if fire else 'cold'} damage")

    if ctx.others():
        nerf = 0.2
        messages.append("[Hunter Alien] other aliens alive: damage taken -20%")
    else:
        buff = 0.2
        messages.append("[Hunter Alien] no other alien alive: damage taken +20%")

    immune_fire = fire
    if attack.is_partial_fire:
        immune_fire = True
        nerf += 0.2
        messages.append("[Hunter Alien] shrugged off the fire share of a partial-fire weapon (-20%)")

    return EffectOutcome(
        messages=messages,
        buff=buff,
        nerf=nerf,
        immune=fire or cold,
        immune_fire=immune_fire,
        immune_cold=cold,
    )
