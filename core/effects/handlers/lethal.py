"""Cheat-death abilities resolving a lethal hit.

The pipeline calls them in :data:`LETHAL_PRIORITY` order and stops at the
first one that answers; the hit then deals no damage at all.

Heals are added to the current HP rather than setting it: a survival
instinct at 1 HP on a 10000 HP entity leaves it at 3001, not 3000.
"""

from __future__ import annotations

from typing import Optional

from core.effects.handlers.common import percent_of
from core.effects.outcome import EffectOutcome, ResolutionContext, StatDelta
from utils import abilities as ab

__all__ = ["survival_instinct_i", "survival_instinct_ii", "revival", "LETHAL_PRIORITY"]


def _survival_instinct(ability: str, label: str, share: float):
    def handler(ctx: ResolutionContext) -> Optional[EffectOutcome]:
        target = ctx.target
        if not target.has(ability):
            return None
        heal = percent_of(target.max_hp, share)
        return EffectOutcome(
            messages=(
                f"[{label}] lethal hit survived, healed {heal} HP",
                f"[{label}] ability removed",
            ),
            delta=StatDelta(hp=heal, abilities_removed=frozenset({ability})),
            absorbs_lethal=True,
        )

    handler.__name__ = ability.replace("-", "_")
    handler.__qualname__ = handler.__name__
    return handler


survival_instinct_i = _survival_instinct(ab.SURVIVAL_INSTINCT_I, "Survival Instinct I", 0.3)
survival_instinct_ii = _survival_instinct(ab.SURVIVAL_INSTINCT_II, "Survival Instinct II", 0.5)


def revival(ctx: ResolutionContext) -> Optional[EffectOutcome]:
    """Come back with 60% HP, a full energy bar and a psychic forge."""

    target = ctx.target
    if not target.has(ab.REVIVAL):
        return None
    heal = percent_of(target.max_hp, 0.6)
    energy = target.max_energy
    return EffectOutcome(
        messages=(
            f"[Revival] death averted: healed {heal} HP and {energy} energy, gained Psychic Forge",
            "[Revival] ability removed",
        ),
        delta=StatDelta(
            hp=heal,
            energy=energy,
            abilities_removed=frozenset({ab.REVIVAL}),
            abilities_added=frozenset({ab.PSYCHIC_FORGE}),
        ),
        absorbs_lethal=True,
    )


LETHAL_PRIORITY = (survival_instinct_i, survival_instinct_ii, revival)
