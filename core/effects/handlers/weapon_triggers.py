"""One-off effects triggered by the weapon itself, before any multiplier."""

from __future__ import annotations

from typing import List, Optional

from core.effects.outcome import MARKER_BURN_APPLIED, EffectOutcome, ResolutionContext, StatDelta
from utils import abilities as ab

__all__ = ["armor_shred", "bonus_trigger", "burn_layers"]


def armor_shred(ctx: ResolutionContext) -> Optional[EffectOutcome]:
    """Shredding weapons (and shredding mods) add armor-reduction layers.

    A shredding weapon with a bonus chance also rolls its grenade for the
    x1.5 bonus; ``plasmid-proliferation`` makes the target immune to it.
    """

    attack = ctx.attack
    weapon_layers = attack.weapon.armor_shred
    mod_layers = attack.mod_armor_shred
    if not weapon_layers and not mod_layers:
        return None

    messages: List[str] = []
    if weapon_layers:
        messages.append(f"[{attack.name}] shredded {weapon_layers * 0.1:.1f} armor")
    if mod_layers:
        messages.append(f"[{attack.name}] mod shredded {mod_layers * 0.1:.1f} armor")

    triggered = False
    if weapon_layers and attack.weapon.bonus_trigger_chance > 0:
        if ctx.target.has(ab.PLASMID_PROLIFERATION):
            messages.append("[Plasmid Proliferation] immune to the grenade bonus")
        elif ctx.roll(attack.weapon.bonus_trigger_chance):
            triggered = True
            messages.append(f"[{attack.name}] grenade bonus: +50% damage this hit")

    return EffectOutcome(
        messages=messages,
        delta=StatDelta(armor_reduction_layers=weapon_layers + mod_layers),
        bonus_triggered=triggered,
    )


def bonus_trigger(ctx: ResolutionContext) -> Optional[EffectOutcome]:
    """Non-shredding weapons with a bonus chance roll their x1.5 explosion."""

    weapon = ctx.attack.weapon
    if weapon.armor_shred or weapon.bonus_trigger_chance <= 0:
        return None
    if not ctx.roll(weapon.bonus_trigger_chance):
        return None
    return EffectOutcome(
        messages=(f"[{weapon.name}] explosion: +50% damage this hit",),
        bonus_triggered=True,
    )


def burn_layers(ctx: ResolutionContext) -> Optional[EffectOutcome]:
    if ctx.immune_fire:
        return None
    layers = ctx.attack.burn_layers
    if layers <= 0:
        return None
    return EffectOutcome(
        messages=(f"[{ctx.attack.name}] target gained {layers} burn layers",),
        delta=StatDelta(burn_layers=layers),
        markers=frozenset({MARKER_BURN_APPLIED}),
    )
