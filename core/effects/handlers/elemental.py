"""Elemental layering and the resource/layer drain weapons."""

from __future__ import annotations

from typing import List, Optional

from core.effects.outcome import (
    MARKER_COLD_APPLIED,
    MARKER_ENERGY_DRAINED,
    MARKER_LAYER_REDUCED,
    MARKER_RADIATION_APPLIED,
    EffectOutcome,
    ResolutionContext,
    StatDelta,
)
from utils import abilities as ab

__all__ = ["radiation", "cold", "energy_drain", "stack_reduction"]

RADIATION_ARMOR_PER_LAYER = 0.05
COLD_BUFF_PER_LAYER = 0.01
COLD_RESISTANCES = (ab.FROST_EVOLUTION, ab.HUNTER_ALIEN)


def radiation(ctx: ResolutionContext) -> Optional[EffectOutcome]:
    """Radiation weapons irradiate biological, non-mechanical targets."""

    target = ctx.target
    per_hit = ctx.attack.radiation_layers_per_hit
    messages: List[str] = []
    if target.radiation_layers > 0:
        messages.append(
            f"[Radiation] {target.radiation_layers} layers: armor "
            f"-{target.radiation_layers * RADIATION_ARMOR_PER_LAYER:.2f}"
        )

    applies = (
        per_hit > 0
        and target.has_tag(ab.TAG_BIOLOGICAL)
        and not target.has_tag(ab.TAG_MECHANICAL)
    )
    if not applies:
        return EffectOutcome(messages=messages) if messages else None

    messages.append(f"[{ctx.attack.name}] target gained {per_hit} radiation layers")
    return EffectOutcome(
        messages=messages,
        delta=StatDelta(radiation_layers=per_hit),
        markers=frozenset({MARKER_RADIATION_APPLIED}),
    )


def cold(ctx: ResolutionContext) -> Optional[EffectOutcome]:
    """Existing cold layers amplify damage; cold weapons add more."""

    if ctx.immune_cold:
        return None
    target = ctx.target
    if any(target.has(name) for name in COLD_RESISTANCES):
        return None

    effective = min(target.cold_layers, ctx.settings.layer_cap)
    buff = effective * COLD_BUFF_PER_LAYER
    messages: List[str] = []
    if effective > 0:
        messages.append(f"[Cold] {target.cold_layers} layers: damage taken +{buff:.0%}")

    per_hit = ctx.attack.cold_layers_per_hit
    if per_hit <= 0:
        return EffectOutcome(messages=messages, buff=buff) if effective > 0 else None

    messages.append(f"[{ctx.attack.name}] target gained {per_hit} cold layers")
    return EffectOutcome(
        messages=messages,
        buff=buff,
        delta=StatDelta(cold_layers=per_hit),
        markers=frozenset({MARKER_COLD_APPLIED}),
    )


def energy_drain(ctx: ResolutionContext) -> Optional[EffectOutcome]:
    amount = ctx.attack.energy_drain_amount
    if amount <= 0 or ctx.target.max_energy == 0:
        return None
    return EffectOutcome(
        messages=(f"[{ctx.attack.name}] drained {amount} energy",),
        delta=StatDelta(energy=-amount),
        markers=frozenset({MARKER_ENERGY_DRAINED}),
    )


def stack_reduction(ctx: ResolutionContext) -> Optional[EffectOutcome]:
    """Strip ``amount`` from every non-empty stack pool of a stacking entity."""

    amount = ctx.attack.stack_reduction_amount
    target = ctx.target
    if amount <= 0 or target.max_stacks == 0:
        return None

    counters = {
        pool: -amount
        for pool in sorted(ab.STACK_POOLS)
        if target.counter(pool) > 0
    }
    return EffectOutcome(
        messages=(f"[{ctx.attack.name}] ability stacks reduced by {amount}",),
        delta=StatDelta(counters=counters),
        markers=frozenset({MARKER_LAYER_REDUCED}),
    )
