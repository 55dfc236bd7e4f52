"""Core multiplier handlers.

Each handler returns an additive ``buff`` (more damage taken) and/or ``nerf``
(less damage taken).  The pipeline sums them all and composes the factor once
in the final damage stage.
"""

from __future__ import annotations

from typing import Optional

from core.effects.outcome import EffectOutcome, ResolutionContext, StatDelta
from core.effects.handlers.common import counter_delta
from utils import abilities as ab

__all__ = [
    "frail",
    "alien_shell",
    "frost_hell",
    "stress_shell_i",
    "stress_shell_ii",
    "virus_cloud",
    "energy_blackhole",
    "colossal_rampage",
    "blood_vomit",
    "rampage",
    "hyper_range_shift",
    "shivering_howl",
    "toxic_saliva",
    "toxic_frenzy",
    "energy_siphon",
    "power_siphon",
    "structural_armor",
    "disguise",
    "dragon_breath_resistance",
    "isolated",
    "infected_space_station",
    "infernal_bomb",
    "hive_mind",
    "release_pheromones",
    "weakening_spit",
    "thickened_carapace",
    "endurance_enhancement",
    "accelerated_metabolism",
    "mind_frenzy",
]

LOW_HP = 0.5
PARTIAL_FIRE_RESISTANCES = (ab.FLAME_ALIEN, ab.HUNTER_ALIEN, ab.ENVIRONMENTAL_ADAPTATION)


def _flat_nerf(ability: str, nerf: float, label: str):
    """Build a handler granting a constant ``nerf`` to holders of ``ability``."""

    def handler(ctx: ResolutionContext) -> Optional[EffectOutcome]:
        if not ctx.target.has(ability):
            return None
        return EffectOutcome(messages=(f"[{label}] damage taken -{nerf:.0%}",), nerf=nerf)

    handler.__name__ = ability.replace("-", "_")
    handler.__qualname__ = handler.__name__
    handler.__doc__ = f"{label}: constant {nerf:.0%} damage reduction."
    return handler


def _low_hp_nerf(ability: str, nerf: float, label: str):
    """Build a handler granting ``nerf`` while HP is at or below half."""

    def handler(ctx: ResolutionContext) -> Optional[EffectOutcome]:
        target = ctx.target
        if not target.has(ability) or target.hp_ratio > LOW_HP:
            return None
        return EffectOutcome(
            messages=(f"[{label}] HP at or below 50%: damage taken -{nerf:.0%}",),
            nerf=nerf,
        )

    handler.__name__ = ability.replace("-", "_")
    handler.__qualname__ = handler.__name__
    handler.__doc__ = f"{label}: {nerf:.0%} damage reduction at or below half HP."
    return handler


frost_hell = _flat_nerf(ab.FROST_HELL, 0.3, "Frost Hell")
stress_shell_i = _flat_nerf(ab.STRESS_SHELL_I, 0.2, "Stress Shell I")
stress_shell_ii = _flat_nerf(ab.STRESS_SHELL_II, 0.25, "Stress Shell II")
virus_cloud = _flat_nerf(ab.VIRUS_CLOUD, 0.1, "Virus Cloud")
energy_blackhole = _flat_nerf(ab.ENERGY_BLACKHOLE, 0.2, "Energy Blackhole")
colossal_rampage = _low_hp_nerf(ab.COLOSSAL_RAMPAGE, 0.5, "Colossal Rampage")
rampage = _low_hp_nerf(ab.RAMPAGE, 0.5, "Rampage")
shivering_howl = _low_hp_nerf(ab.SHIVERING_HOWL, 0.3, "Shivering Howl")


def frail(ctx: ResolutionContext) -> Optional[EffectOutcome]:
    if not ctx.target.frail:
        return None
    return EffectOutcome(messages=("[Frail] fragile minion: damage taken +10%",), buff=0.1)


def alien_shell(ctx: ResolutionContext) -> Optional[EffectOutcome]:
    """10% reduction plus 1% per percent of HP lost, capped at 80%."""

    target = ctx.target
    if not target.has(ab.ALIEN_SHELL):
        return None
    lost = (target.max_hp - target.hp) / target.max_hp
    nerf = min(0.1 + lost, 0.8)
    return EffectOutcome(messages=(f"[Alien Shell] damage taken -{nerf:.0%}",), nerf=nerf)


def blood_vomit(ctx: ResolutionContext) -> Optional[EffectOutcome]:
    target = ctx.target
    if not target.has(ab.BLOOD_VOMIT) or target.counter(ab.POOL_VAMPIRIC) != 0:
        return None
    return EffectOutcome(messages=("[Blood Vomit] no vampiric stacks: damage taken +20%",), buff=0.2)


def hyper_range_shift(ctx: ResolutionContext) -> Optional[EffectOutcome]:
    target = ctx.target
    if not target.has(ab.HYPER_RANGE_SHIFT):
        return None

    stacks = target.counter(ab.POOL_LIGHT_BLADE)
    ratio = target.energy_ratio
    if ratio >= 0.6:
        nerf = stacks * 0.1
        return EffectOutcome(messages=(f"[Hyper Range Shift] energy >= 60%: damage taken -{nerf:.0%}",), nerf=nerf)
    if ratio >= 0.3:
        nerf = stacks * 0.05
        return EffectOutcome(messages=(f"[Hyper Range Shift] energy >= 30%: damage taken -{nerf:.0%}",), nerf=nerf)
    if ratio <= 0.1:
        buff = stacks * 0.05
        return EffectOutcome(messages=(f"[Hyper Range Shift] energy <= 10%: damage taken +{buff:.0%}",), buff=buff)
    return None


def toxic_saliva(ctx: ResolutionContext) -> Optional[EffectOutcome]:
    """Each toxin stack reduces damage by 5%, then the hit adds one stack."""

    target = ctx.target
    if not target.has(ab.TOXIC_SALIVA):
        return None

    stacks = target.counter(ab.POOL_TOXIN)
    nerf = stacks * 0.05
    messages = []
    if stacks > 0:
        messages.append(f"[Toxic Saliva] {stacks} stacks: damage taken -{nerf:.0%}")
    delta = None
    if stacks < ab.counter_cap(ab.POOL_TOXIN):
        delta = counter_delta(ab.POOL_TOXIN, 1)
        messages.append("[Toxic Saliva] gained 1 toxin stack")
    return EffectOutcome(messages=messages, nerf=nerf, delta=delta)


def toxic_frenzy(ctx: ResolutionContext) -> Optional[EffectOutcome]:
    target = ctx.target
    if not target.has(ab.TOXIC_FRENZY) or target.hp_ratio > LOW_HP:
        return None

    messages = ["[Toxic Frenzy] HP at or below 50%: damage taken -20%"]
    delta = None
    if target.counter(ab.POOL_TOXIN) < ab.counter_cap(ab.POOL_TOXIN):
        delta = counter_delta(ab.POOL_TOXIN, 1)
        messages.append("[Toxic Frenzy] gained 1 extra toxin stack")
    return EffectOutcome(messages=messages, nerf=0.2, delta=delta)


def energy_siphon(ctx: ResolutionContext) -> Optional[EffectOutcome]:
    target = ctx.target
    if not target.has(ab.ENERGY_SIPHON):
        return None
    if target.hp_ratio >= 0.7:
        return EffectOutcome(messages=("[Energy Siphon] HP >= 70%: damage taken -40%",), nerf=0.4)
    if target.hp_ratio >= 0.3:
        return EffectOutcome(messages=("[Energy Siphon] HP >= 30%: damage taken -20%",), nerf=0.2)
    return None


def power_siphon(ctx: ResolutionContext) -> Optional[EffectOutcome]:
    target = ctx.target
    if not target.has(ab.POWER_SIPHON):
        return None
    if target.energy_ratio >= 0.8:
        return EffectOutcome(messages=("[Power Siphon] energy >= 80%: damage taken -50%",), nerf=0.5)
    if target.energy_ratio >= 0.5:
        return EffectOutcome(messages=("[Power Siphon] energy >= 50%: damage taken -30%",), nerf=0.3)
    return None


def structural_armor(ctx: ResolutionContext) -> Optional[EffectOutcome]:
    if not ctx.target.has(ab.STRUCTURAL_ARMOR):
        return None
    nerf = 0.4 if ctx.attack.is_thermal else 0.2
    return EffectOutcome(
        messages=(f"[Structural Armor] {ctx.attack.weapon_type.value} damage taken -{nerf:.0%}",),
        nerf=nerf,
    )


def disguise(ctx: ResolutionContext) -> Optional[EffectOutcome]:
    """Adapts to a repeated weapon; a new weapon is only recorded."""

    target = ctx.target
    if not target.has(ab.DISGUISE):
        return None

    weapon = ctx.attack.name
    if target.last_offensive_tool == weapon:
        return EffectOutcome(
            messages=(f"[Disguise] adapted to '{weapon}': damage taken -80%",),
            nerf=0.8,
        )
    return EffectOutcome(
        messages=(f"[Disguise] recorded weapon '{weapon}'",),
        delta=StatDelta(last_offensive_tool=weapon),
    )


def dragon_breath_resistance(ctx: ResolutionContext) -> Optional[EffectOutcome]:
    if not ctx.attack.is_partial_fire:
        return None
    resistances = [name for name in PARTIAL_FIRE_RESISTANCES if ctx.target.has(name)]
    if not resistances:
        return None
    return EffectOutcome(
        messages=(f"[{ctx.attack.name}] {', '.join(resistances)} resisted the fire share (-20%)",),
        nerf=0.2,
    )


def isolated(ctx: ResolutionContext) -> Optional[EffectOutcome]:
    """The last entity standing takes 20% more damage unless a trigger suppressed it."""

    if ctx.isolation_suppressed:
        return None
    roster = ctx.everyone()
    if len(roster) != 1 or roster[0].name != ctx.target_name:
        return None
    return EffectOutcome(messages=("[Isolated] no ally alive: damage taken +20%",), buff=0.2)


def infected_space_station(ctx: ResolutionContext) -> Optional[EffectOutcome]:
    if not ctx.target.has(ab.INFECTED_SPACE_STATION):
        return None
    if not ctx.store.is_alive(ctx.settings.space_station):
        return None
    return EffectOutcome(messages=("[Infected Space Station] station alive: damage taken -50%",), nerf=0.5)


def infernal_bomb(ctx: ResolutionContext) -> Optional[EffectOutcome]:
    target = ctx.target
    if not target.has(ab.INFERNAL_BOMB):
        return None
    stacks = target.counter(ab.POOL_BURNING_SLIME)
    nerf = stacks * 0.05
    if ctx.others():
        nerf *= 2
    if nerf <= 0:
        return None
    return EffectOutcome(
        messages=(f"[Infernal Bomb] {stacks} burning slime stacks: damage taken -{nerf:.0%}",),
        nerf=nerf,
    )


def hive_mind(ctx: ResolutionContext) -> Optional[EffectOutcome]:
    """Nestlings are weakened by the link; the holder is shielded by each one alive."""

    settings = ctx.settings
    if ctx.target_name in settings.nestlings:
        return EffectOutcome(messages=("[Hive Mind] nestling linked to the hive: damage taken +20%",), buff=0.2)
    if not ctx.target.has(ab.HIVE_MIND):
        return None

    alive = sum(1 for name in settings.nestlings if ctx.store.is_alive(name))
    if alive == 0:
        return None
    nerf = alive * 0.2
    return EffectOutcome(
        messages=(f"[Hive Mind] {alive} nestlings alive: damage taken -{nerf:.0%}",),
        nerf=nerf,
    )


def release_pheromones(ctx: ResolutionContext) -> Optional[EffectOutcome]:
    if ctx.target_name not in ctx.settings.swarm_members:
        return None
    return EffectOutcome(messages=("[Release Pheromones] damage taken -20%",), nerf=0.2)


def weakening_spit(ctx: ResolutionContext) -> Optional[EffectOutcome]:
    if not ctx.target.has(ab.WEAKENING_SPIT):
        return None
    if not ctx.store.is_alive(ctx.settings.hatchery):
        return None
    return EffectOutcome(messages=("[Weakening Spit] hatchery alive: damage taken -80%",), nerf=0.8)


def thickened_carapace(ctx: ResolutionContext) -> Optional[EffectOutcome]:
    target = ctx.target
    if not target.has(ab.THICKENED_CARAPACE):
        return None
    stacks = target.counter(ab.POOL_GENE)
    if stacks <= 0:
        return None
    nerf = stacks * 0.01
    return EffectOutcome(
        messages=(f"[Thickened Carapace] {stacks} gene stacks: damage taken -{nerf:.0%}",),
        nerf=nerf,
    )


def endurance_enhancement(ctx: ResolutionContext) -> Optional[EffectOutcome]:
    target = ctx.target
    if not target.has(ab.ENDURANCE_ENHANCEMENT):
        return None
    ratio = target.energy_ratio
    for threshold, nerf in ((0.8, 0.8), (0.5, 0.5), (0.3, 0.3)):
        if ratio >= threshold:
            return EffectOutcome(
                messages=(f"[Endurance Enhancement] energy >= {threshold:.0%}: damage taken -{nerf:.0%}",),
                nerf=nerf,
            )
    return None


def accelerated_metabolism(ctx: ResolutionContext) -> Optional[EffectOutcome]:
    target = ctx.target
    if not target.has(ab.ACCELERATED_METABOLISM):
        return None
    held = len(ab.gene_abilities_held(target.abilities))
    if held == 0:
        return None
    return EffectOutcome(
        messages=(f"[Accelerated Metabolism] {held} gene abilities: gained {held} gene stacks",),
        delta=counter_delta(ab.POOL_GENE, held),
    )


def mind_frenzy(ctx: ResolutionContext) -> Optional[EffectOutcome]:
    """Low HP reduces damage and doubles this hit's astral wind chance."""

    target = ctx.target
    if not target.has(ab.MIND_FRENZY) or target.hp_ratio > LOW_HP:
        return None
    return EffectOutcome(
        messages=("[Mind Frenzy] HP at or below 50%: damage taken -20%, astral wind chance doubled",),
        nerf=0.2,
        double_astral_wind=True,
    )
