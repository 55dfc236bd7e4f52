"""Pre-lethal heal batch.

These handlers only run when the composed damage would not kill the
target outright; the pipeline checks that gate before calling any of them.
Heals are plain HP/energy increments, the store clamps them to the maxima.
"""

from __future__ import annotations

import math
from typing import List, Optional

from core.effects.handlers.common import counter_delta, heal_deltas, percent_of
from core.effects.outcome import EffectOutcome, ResolutionContext, StatDelta
from utils import abilities as ab

__all__ = [
    "frost_regeneration",
    "frost_aura",
    "sentry_gun",
    "mold_growth",
    "electric_shockwave",
    "pulse",
    "feeding",
    "burning_burrow",
    "bombardment_guide",
    "overdrive_shield",
    "poisoned_bite",
    "healing_swarm",
    "burrow_ambush",
    "accelerated_differentiation",
]

LOW_HP = 0.3
SHOCKWAVE_ENERGY = 100
PULSE_MIN_ENERGY = 0.3
PULSE_HEAL = 100
LIGHT_BLADE_SPEND_CHANCE = 0.1
LIGHT_BLADE_VALUE = 10
# (toxin threshold, heal), highest first
POISONED_BITE_TIERS = ((15, 150), (10, 100), (5, 50))


def _group_heal(ability: str, label: str, self_share: float, other_share: float):
    """Build a one-shot low-HP heal for the target and the rest of the roster."""

    def handler(ctx: ResolutionContext) -> Optional[EffectOutcome]:
        target = ctx.target
        if not target.has(ability) or target.hp_ratio > LOW_HP:
            return None

        own = percent_of(target.max_hp, self_share)
        healed = heal_deltas(ctx.others(), lambda entity: percent_of(entity.max_hp, other_share))
        return EffectOutcome(
            messages=(f"[{label}] HP at or below 30%: healed {own} HP",)
            + tuple(f"[{label}] {name} healed {d.hp} HP" for name, d in healed.items())
            + (f"[{label}] ability removed",),
            delta=StatDelta(hp=own, abilities_removed=frozenset({ability})),
            other_deltas=healed,
        )

    handler.__name__ = ability.replace("-", "_")
    handler.__qualname__ = handler.__name__
    return handler


frost_regeneration = _group_heal(ab.FROST_REGENERATION, "Frost Regeneration", 0.4, 0.1)
healing_swarm = _group_heal(ab.HEALING_SWARM, "Healing Swarm", 0.4, 0.1)


def frost_aura(ctx: ResolutionContext) -> Optional[EffectOutcome]:
    """Last-ditch heal that also spreads frost hell over the whole roster."""

    target = ctx.target
    if not target.has(ab.FROST_AURA) or target.hp_ratio > LOW_HP:
        return None

    heal = percent_of(target.max_hp, 0.45)
    chill = frozenset({ab.FROST_HELL})
    others = {entity.name: StatDelta(abilities_added=chill) for entity in ctx.others()}
    return EffectOutcome(
        messages=(
            f"[Frost Aura] HP at or below 30%: healed {heal} HP, burn layers cleared",
            "[Frost Aura] every entity gained Frost Hell",
            "[Frost Aura] ability removed",
        ),
        delta=StatDelta(
            hp=heal,
            burn_layers=-target.burn_layers,
            abilities_added=chill,
            abilities_removed=frozenset({ab.FROST_AURA}),
        ),
        other_deltas=others,
    )


def sentry_gun(ctx: ResolutionContext) -> Optional[EffectOutcome]:
    target = ctx.target
    if not target.has(ab.SENTRY_GUN):
        return None

    charge = target.counter(ab.POOL_SENTRY_CHARGE)
    limit = ab.counter_cap(ab.POOL_SENTRY_CHARGE)
    if charge < limit:
        return EffectOutcome(
            messages=(f"[Sentry Gun] charge {charge + 1}/{limit}",),
            delta=counter_delta(ab.POOL_SENTRY_CHARGE, 1),
        )

    healed = heal_deltas(ctx.others(), lambda entity: percent_of(entity.max_hp, 0.1))
    return EffectOutcome(
        messages=("[Sentry Gun] fully charged: repairing the roster",)
        + tuple(f"[Sentry Gun] {name} healed {d.hp} HP" for name, d in healed.items()),
        delta=counter_delta(ab.POOL_SENTRY_CHARGE, -charge),
        other_deltas=healed,
    )


def mold_growth(ctx: ResolutionContext) -> Optional[EffectOutcome]:
    if not ctx.target.has(ab.MOLD_GROWTH):
        return None
    station_name = ctx.settings.space_station
    if not ctx.store.is_alive(station_name):
        return None

    station = ctx.store.get(station_name)
    heal = percent_of(station.max_hp, 0.01)
    if heal <= 0:
        return None
    message = f"[Mold Growth] {station_name} healed {heal} HP"
    if station_name == ctx.target_name:
        return EffectOutcome(messages=(message,), delta=StatDelta(hp=heal))
    return EffectOutcome(messages=(message,), other_deltas={station_name: StatDelta(hp=heal)})


def electric_shockwave(ctx: ResolutionContext) -> Optional[EffectOutcome]:
    target = ctx.target
    if not target.has(ab.ELECTRIC_SHOCKWAVE) or target.energy >= target.max_energy:
        return None
    return EffectOutcome(
        messages=(f"[Electric Shockwave] restored {SHOCKWAVE_ENERGY} energy",),
        delta=StatDelta(energy=SHOCKWAVE_ENERGY),
    )


def pulse(ctx: ResolutionContext) -> Optional[EffectOutcome]:
    """Charged targets may pulse a flat heal; cold layers dampen the chance."""

    target = ctx.target
    if not target.has(ab.PULSE) or target.energy_ratio < PULSE_MIN_ENERGY:
        return None
    chance = max(0.6 - 0.05 * target.cold_layers, 0.1)
    if not ctx.roll(chance):
        return None

    healed = heal_deltas(ctx.everyone(), lambda entity: PULSE_HEAL)
    return EffectOutcome(
        messages=tuple(f"[Pulse] {name} healed {PULSE_HEAL} HP" for name in healed),
        other_deltas=healed,
    )


def feeding(ctx: ResolutionContext) -> Optional[EffectOutcome]:
    target = ctx.target
    if not target.has(ab.FEEDING):
        return None
    stacks = target.counter(ab.POOL_VAMPIRIC)
    if stacks < ab.counter_cap(ab.POOL_VAMPIRIC):
        return None

    heal = percent_of(target.max_hp, 0.2)
    return EffectOutcome(
        messages=(f"[Feeding] consumed {stacks} vampiric stacks and healed {heal} HP",),
        delta=counter_delta(ab.POOL_VAMPIRIC, -stacks, hp=heal),
    )


def burning_burrow(ctx: ResolutionContext) -> Optional[EffectOutcome]:
    target = ctx.target
    if not target.has(ab.BURNING_BURROW) or target.hp_ratio >= 0.1:
        return None

    heal = percent_of(target.max_hp, 0.5)
    return EffectOutcome(
        messages=(
            f"[Burning Burrow] HP below 10%: healed {heal} HP",
            "[Burning Burrow] ability removed",
        ),
        delta=StatDelta(hp=heal, abilities_removed=frozenset({ab.BURNING_BURROW})),
    )


def _light_blades_to_spend(ctx: ResolutionContext, ability: str) -> int:
    """Roll the spend chance, then return half the light blade pool (0 = no-op)."""

    if not ctx.target.has(ability):
        return 0
    if not ctx.roll(LIGHT_BLADE_SPEND_CHANCE):
        return 0
    return ctx.target.counter(ab.POOL_LIGHT_BLADE) // 2


def bombardment_guide(ctx: ResolutionContext) -> Optional[EffectOutcome]:
    spent = _light_blades_to_spend(ctx, ab.BOMBARDMENT_GUIDE)
    if spent <= 0:
        return None
    energy = spent * LIGHT_BLADE_VALUE
    return EffectOutcome(
        messages=(f"[Bombardment Guide] consumed {spent} light blade stacks, gained {energy} energy",),
        delta=counter_delta(ab.POOL_LIGHT_BLADE, -spent, energy=energy),
    )


def overdrive_shield(ctx: ResolutionContext) -> Optional[EffectOutcome]:
    spent = _light_blades_to_spend(ctx, ab.OVERDRIVE_SHIELD)
    if spent <= 0:
        return None
    heal = spent * LIGHT_BLADE_VALUE
    healed = heal_deltas(ctx.everyone(), lambda entity: heal)
    return EffectOutcome(
        messages=(f"[Overdrive Shield] consumed {spent} light blade stacks",)
        + tuple(f"[Overdrive Shield] {name} healed {heal} HP" for name in healed),
        delta=counter_delta(ab.POOL_LIGHT_BLADE, -spent),
        other_deltas=healed,
    )


def poisoned_bite(ctx: ResolutionContext) -> Optional[EffectOutcome]:
    target = ctx.target
    if not target.has(ab.POISONED_BITE):
        return None
    toxin = target.counter(ab.POOL_TOXIN)
    for threshold, heal in POISONED_BITE_TIERS:
        if toxin >= threshold:
            return EffectOutcome(
                messages=(f"[Poisoned Bite] {toxin} toxin stacks: healed {heal} HP",),
                delta=StatDelta(hp=heal),
            )
    return None


def burrow_ambush(ctx: ResolutionContext) -> Optional[EffectOutcome]:
    """Below half HP, call in every nestling type that is not on the field."""

    target = ctx.target
    if not target.has(ab.BURROW_AMBUSH) or target.hp_ratio >= 0.5:
        return None

    missing = tuple(name for name in ctx.settings.nestlings if not ctx.store.is_alive(name))
    messages: List[str] = [f"[Burrow Ambush] summoned {name}" for name in missing]
    messages.append("[Burrow Ambush] ability removed")
    return EffectOutcome(
        messages=messages,
        delta=StatDelta(abilities_removed=frozenset({ab.BURROW_AMBUSH})),
        spawns=missing,
    )


def accelerated_differentiation(ctx: ResolutionContext) -> Optional[EffectOutcome]:
    target = ctx.target
    if not target.has(ab.ACCELERATED_DIFFERENTIATION):
        return None
    heal = math.floor(target.counter(ab.POOL_GENE) / 2) * 5
    if heal <= 0:
        return None
    return EffectOutcome(
        messages=(f"[Accelerated Differentiation] healed {heal} HP",),
        delta=StatDelta(hp=heal),
    )
