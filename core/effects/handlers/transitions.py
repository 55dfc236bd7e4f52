"""Pure state transitions and the rotating acid pool."""

from __future__ import annotations

from typing import Optional

from core.effects.handlers.common import counter_delta, pick
from core.effects.outcome import EffectOutcome, ResolutionContext, StatDelta
from utils import abilities as ab
from utils.damage_types import WeaponType

__all__ = [
    "superconductor",
    "toxic_assault",
    "terrifying_screech",
    "hatching",
    "acid_pool",
    "ACID_POOL_STATES",
]

SUPERCONDUCTOR_HP = 0.1
TOXIC_ASSAULT_CHARGES = 5
SPAWN_COUNTER_LIMIT = 10

# rotation -> (label, resisted type, vulnerable type)
ACID_POOL_STATES = (
    ("Pus Acid Pool", WeaponType.KINETIC, WeaponType.ENERGY),
    ("Bone-Eating Acid Pool", WeaponType.ENERGY, WeaponType.THERMAL),
    ("Molten Acid Pool", WeaponType.THERMAL, WeaponType.KINETIC),
)


def superconductor(ctx: ResolutionContext) -> Optional[EffectOutcome]:
    target = ctx.target
    if not target.has(ab.SUPERCONDUCTOR) or not target.has_tag(ab.TAG_SHIELDED):
        return None
    if target.hp_ratio > SUPERCONDUCTOR_HP:
        return None
    return EffectOutcome(
        messages=("[Superconductor] HP at or below 10%: shield converted into heavy armor",),
        delta=StatDelta(
            tags_removed=frozenset({ab.TAG_SHIELDED}),
            tags_added=frozenset({ab.TAG_HEAVY_ARMOR}),
        ),
    )


def toxic_assault(ctx: ResolutionContext) -> Optional[EffectOutcome]:
    """A full toxin pool is spent to empower the next acid pools."""

    target = ctx.target
    if not target.has(ab.TOXIC_ASSAULT):
        return None
    toxin = target.counter(ab.POOL_TOXIN)
    if toxin < ab.counter_cap(ab.POOL_TOXIN):
        return None
    charges = target.counter(ab.POOL_ACID_CHARGES) + TOXIC_ASSAULT_CHARGES
    return EffectOutcome(
        messages=(f"[Toxic Assault] consumed {toxin} toxin stacks: next {charges} acid pools empowered",),
        delta=StatDelta(counters={ab.POOL_TOXIN: -toxin, ab.POOL_ACID_CHARGES: TOXIC_ASSAULT_CHARGES}),
    )


def _spawn_counter(ability: str, pool: str, label: str):
    """Build a handler counting hits and hatching a nestling every tenth one."""

    def handler(ctx: ResolutionContext) -> Optional[EffectOutcome]:
        target = ctx.target
        if not target.has(ability):
            return None

        count = target.counter(pool)
        if count < SPAWN_COUNTER_LIMIT:
            return EffectOutcome(
                messages=(f"[{label}] counter {count + 1}/{SPAWN_COUNTER_LIMIT}",),
                delta=counter_delta(pool, 1),
            )

        reset = counter_delta(pool, -count)
        nestlings = ctx.settings.nestlings
        if not nestlings or any(ctx.store.is_alive(name) for name in nestlings):
            return EffectOutcome(delta=reset)

        spawned = pick(ctx.rng, nestlings)
        return EffectOutcome(
            messages=(f"[{label}] no nestling alive: hatching a {spawned}",),
            delta=reset,
            spawns=(spawned,),
        )

    handler.__name__ = ability.replace("-", "_")
    handler.__qualname__ = handler.__name__
    return handler


terrifying_screech = _spawn_counter(ab.TERRIFYING_SCREECH, ab.POOL_SCREECH_COUNTER, "Terrifying Screech")
hatching = _spawn_counter(ab.HATCHING, ab.POOL_HATCH_COUNTER, "Hatching")


def acid_pool(ctx: ResolutionContext) -> Optional[EffectOutcome]:
    """Three-state pool cycling on every hit.

    Each state resists one weapon type and is vulnerable to the next one.
    A pending acid charge empowers the current state and is consumed.
    """

    target = ctx.target
    if not target.has(ab.ACID_POOL):
        return None

    enhanced = target.counter(ab.POOL_ACID_CHARGES) > 0
    rotation = target.counter(ab.POOL_ACID_ROTATION) % len(ACID_POOL_STATES)
    label, resisted, vulnerable = ACID_POOL_STATES[rotation]
    next_rotation = (rotation + 1) % len(ACID_POOL_STATES)

    counters = {ab.POOL_ACID_ROTATION: next_rotation - rotation}
    if enhanced:
        counters[ab.POOL_ACID_CHARGES] = -1

    magnitude = 1.0 if enhanced else 0.5
    prefix = "[Acid Pool, empowered]" if enhanced else "[Acid Pool]"
    messages = [f"[Acid Pool] active pool: {label}"]
    buff = nerf = 0.0
    weapon_type = ctx.attack.weapon_type
    if weapon_type is resisted:
        nerf = magnitude
        messages.append(f"{prefix} {weapon_type.value} damage taken -{magnitude:.0%}")
    elif weapon_type is vulnerable:
        buff = magnitude
        messages.append(f"{prefix} {weapon_type.value} damage taken +{magnitude:.0%}")

    return EffectOutcome(messages=messages, buff=buff, nerf=nerf, delta=StatDelta(counters=counters))
