"""Triggers that suppress the isolation bonus for the current hit."""

from __future__ import annotations

from typing import List, Optional

from core.effects.handlers.common import pick
from core.effects.outcome import EffectOutcome, ResolutionContext, StatDelta
from utils import abilities as ab

__all__ = ["solar_flare", "carpet_bombing", "gene_mutation"]

GENE_MUTATION_PERIOD = 3
GENE_MUTATION_ENERGY = 100
GENE_ABILITY_LIMIT = 4


def solar_flare(ctx: ResolutionContext) -> Optional[EffectOutcome]:
    """Alone on the field, the entity sheds its cold aversion."""

    target = ctx.target
    if not target.has(ab.SOLAR_FLARE) or ctx.others():
        return None

    messages: List[str] = []
    delta = None
    if target.has_tag(ab.TAG_COLD_AVERSE):
        messages.append("[Solar Flare] removed the cold-averse tag")
        if target.cold_layers > 0:
            messages.append("[Solar Flare] cleared all cold layers")
        delta = StatDelta(
            tags_removed=frozenset({ab.TAG_COLD_AVERSE}),
            cold_layers=-target.cold_layers,
        )
    return EffectOutcome(messages=messages, delta=delta, isolation_suppressed=True)


def carpet_bombing(ctx: ResolutionContext) -> Optional[EffectOutcome]:
    if not ctx.target.has(ab.CARPET_BOMBING):
        return None
    return EffectOutcome(
        messages=("[Carpet Bombing] damage taken -80%",),
        nerf=0.8,
        isolation_suppressed=True,
    )


def gene_mutation(ctx: ResolutionContext) -> Optional[EffectOutcome]:
    """Every hit feeds the gene pool; every third hit rewrites the gene abilities.

    Holding four or more gene abilities on a third hit purges all of them and
    restarts the hit count; otherwise a random missing one is acquired.
    """

    target = ctx.target
    if not target.has(ab.GENE_MUTATION):
        return None

    hits = target.counter(ab.POOL_GENE_HITS) + 1
    messages = [
        "[Gene Mutation] gained 1 gene stack",
        f"[Gene Mutation] restored {GENE_MUTATION_ENERGY} energy",
    ]
    hit_change = 1
    added = frozenset()
    removed = frozenset()

    if hits % GENE_MUTATION_PERIOD == 0:
        held = ab.gene_abilities_held(target.abilities)
        if len(held) >= GENE_ABILITY_LIMIT:
            hit_change = -target.counter(ab.POOL_GENE_HITS)
            removed = frozenset(held)
            messages.append("[Gene Mutation] purged every gene ability")
        else:
            missing = [name for name in ab.GENE_ABILITIES if name not in target.abilities]
            if missing:
                gained = pick(ctx.rng, missing)
                added = frozenset({gained})
                messages.append(f"[Gene Mutation] acquired gene ability '{gained}'")

    return EffectOutcome(
        messages=messages,
        delta=StatDelta(
            energy=GENE_MUTATION_ENERGY,
            counters={ab.POOL_GENE_HITS: hit_change, ab.POOL_GENE: 1},
            abilities_added=added,
            abilities_removed=removed,
        ),
        isolation_suppressed=True,
    )
