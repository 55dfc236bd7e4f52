"""Stack-dependent handlers: read a counter pool, then feed it."""

from __future__ import annotations

from typing import Optional

from core.effects.handlers.common import counter_delta
from core.effects.outcome import EffectOutcome, ResolutionContext
from utils import abilities as ab

__all__ = [
    "vampiric_saliva",
    "bloodlust",
    "blade_of_light",
    "collapsing_pulse",
    "toxic_gas_wave",
    "tissue_hyperplasia",
]

TOXIC_GAS_WAVE_CHANCE = 0.2
TOXIC_GAS_WAVE_STACKS = 5


def vampiric_saliva(ctx: ResolutionContext) -> Optional[EffectOutcome]:
    target = ctx.target
    if not target.has(ab.VAMPIRIC_SALIVA):
        return None

    stacks = target.counter(ab.POOL_VAMPIRIC)
    nerf = stacks * 0.05
    delta = None
    messages = [f"[Vampiric Saliva] {stacks} stacks: damage taken -{nerf:.0%}"]
    if stacks < ab.counter_cap(ab.POOL_VAMPIRIC):
        delta = counter_delta(ab.POOL_VAMPIRIC, 1)
        messages.append("[Vampiric Saliva] gained 1 vampiric stack")
    return EffectOutcome(messages=messages, nerf=nerf, delta=delta)


def bloodlust(ctx: ResolutionContext) -> Optional[EffectOutcome]:
    target = ctx.target
    if not target.has(ab.BLOODLUST) or target.hp_ratio > 0.5:
        return None

    delta = None
    if target.counter(ab.POOL_VAMPIRIC) < ab.counter_cap(ab.POOL_VAMPIRIC):
        delta = counter_delta(ab.POOL_VAMPIRIC, 1)
    return EffectOutcome(
        messages=("[Bloodlust] HP at or below 50%: +1 vampiric stack, damage taken -20%",),
        nerf=0.2,
        delta=delta,
    )


def _light_blade_gain(ability: str, label: str):
    def handler(ctx: ResolutionContext) -> Optional[EffectOutcome]:
        target = ctx.target
        if not target.has(ability):
            return None
        if target.counter(ab.POOL_LIGHT_BLADE) >= ab.counter_cap(ab.POOL_LIGHT_BLADE):
            return None
        return EffectOutcome(
            messages=(f"[{label}] gained 1 light blade stack",),
            delta=counter_delta(ab.POOL_LIGHT_BLADE, 1),
        )

    handler.__name__ = ability.replace("-", "_")
    handler.__qualname__ = handler.__name__
    return handler


blade_of_light = _light_blade_gain(ab.BLADE_OF_LIGHT, "Blade of Light")
collapsing_pulse = _light_blade_gain(ab.COLLAPSING_PULSE, "Collapsing Pulse")


def toxic_gas_wave(ctx: ResolutionContext) -> Optional[EffectOutcome]:
    target = ctx.target
    if not target.has(ab.TOXIC_GAS_WAVE):
        return None
    if not ctx.roll(TOXIC_GAS_WAVE_CHANCE):
        return None

    amount = min(TOXIC_GAS_WAVE_STACKS, ab.counter_cap(ab.POOL_TOXIN) - target.counter(ab.POOL_TOXIN))
    if amount <= 0:
        return None
    return EffectOutcome(
        messages=(f"[Toxic Gas Wave] gained {amount} toxin stacks",),
        delta=counter_delta(ab.POOL_TOXIN, amount),
    )


def tissue_hyperplasia(ctx: ResolutionContext) -> Optional[EffectOutcome]:
    """Gene stacks harden the shell: +0.1 armor per stack for this hit only."""

    target = ctx.target
    if not target.has(ab.TISSUE_HYPERPLASIA):
        return None
    bonus = target.counter(ab.POOL_GENE) * 0.1
    if bonus <= 0:
        return None
    return EffectOutcome(
        messages=(f"[Tissue Hyperplasia] temporary armor +{bonus:.1f}",),
        temp_armor_bonus=bonus,
    )
