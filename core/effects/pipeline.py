"""Staged resolution of a single hit.

Implemented:
- :class:`Stage`: a named, ordered group of handlers.
- :data:`DEFAULT_STAGES`: the pre-damage stages in execution order.
- :func:`compose_damage`: folds the accumulated multipliers, layers and armor
  into the final damage figure.
- :class:`ResolutionPipeline`: runs the pre-damage stages, composes the
  damage, then the heal batch, the reactive handlers and the lethal check.

Design:
- Stage order is explicit data.  Handlers of a stage run in tuple order and
  every outcome is committed before the next handler runs.
- The pipeline works on whatever store the context points at; atomicity is
  the caller's job (see :class:`core.encounter.Encounter`).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from core.effects.handlers import (
    consumption,
    elemental,
    healing,
    immunity,
    isolation,
    lethal,
    multipliers,
    reactive,
    roster_utility,
    stacks,
    transitions,
    weapon_triggers,
)
from core.effects.handlers.common import Handler, round_half_up
from core.effects.outcome import HitResolution, ResolutionContext, StatDelta
from core.errors import InvalidStatStateError, ResolutionError

__all__ = [
    "Stage",
    "DEFAULT_STAGES",
    "HEAL_STAGE",
    "REACTIVE_STAGE",
    "LETHAL_STAGE",
    "ResolutionPipeline",
    "compose_damage",
]

logger = logging.getLogger(__name__)

BONUS_TRIGGER_FACTOR = 1.5
CRIT_FACTOR = 2
BURN_DAMAGE_PER_LAYER = 1
RADIATION_ARMOR_PER_LAYER = 0.05
ARMOR_SHRED_PER_LAYER = 0.1


@dataclass(frozen=True)
class Stage:
    """Named group of handlers run in order against the same context."""

    name: str
    handlers: Tuple[Handler, ...]
    description: str = ""


# ----------------------------------------------------------------------
# Stage table
# ----------------------------------------------------------------------
DEFAULT_STAGES: Tuple[Stage, ...] = (
    Stage(
        "immunity",
        (
            immunity.cold_adaptation,
            immunity.deadly_strike,
            immunity.electric_field,
            immunity.ancient_omen,
            immunity.biological_signature_mimicry,
            immunity.redundancy_optimization,
            immunity.environmental_adaptation,
            immunity.hunter_alien,
        ),
        "Negation checks; an immune hit keeps resolving but deals no damage.",
    ),
    Stage(
        "isolation-suppression",
        (isolation.solar_flare, isolation.carpet_bombing, isolation.gene_mutation),
        "Triggers that switch the isolated bonus off for this hit.",
    ),
    Stage(
        "weapon-triggers",
        (weapon_triggers.armor_shred, weapon_triggers.bonus_trigger, weapon_triggers.burn_layers),
        "One-off weapon effects; burn layers respect fire immunity.",
    ),
    Stage(
        "multipliers",
        (
            multipliers.frail,
            multipliers.alien_shell,
            multipliers.frost_hell,
            multipliers.stress_shell_i,
            multipliers.stress_shell_ii,
            multipliers.virus_cloud,
            multipliers.energy_blackhole,
            multipliers.colossal_rampage,
            multipliers.blood_vomit,
            multipliers.rampage,
            multipliers.hyper_range_shift,
            multipliers.shivering_howl,
            multipliers.toxic_saliva,
            multipliers.toxic_frenzy,
            multipliers.energy_siphon,
            multipliers.power_siphon,
            multipliers.structural_armor,
            multipliers.disguise,
            multipliers.dragon_breath_resistance,
            multipliers.isolated,
            multipliers.infected_space_station,
            multipliers.infernal_bomb,
            multipliers.hive_mind,
            multipliers.release_pheromones,
            multipliers.weakening_spit,
            multipliers.thickened_carapace,
            multipliers.endurance_enhancement,
            multipliers.accelerated_metabolism,
            multipliers.mind_frenzy,
        ),
        "Additive buff/nerf accumulation; mind frenzy runs last.",
    ),
    Stage(
        "stacks",
        (
            stacks.vampiric_saliva,
            stacks.bloodlust,
            stacks.blade_of_light,
            stacks.collapsing_pulse,
            stacks.toxic_gas_wave,
            stacks.tissue_hyperplasia,
        ),
        "Stack-dependent contributions, most of them feeding their own pool.",
    ),
    Stage(
        "transitions",
        (
            transitions.superconductor,
            transitions.toxic_assault,
            transitions.terrifying_screech,
            transitions.hatching,
        ),
        "Pure state changes; toxic assault charges the acid pool.",
    ),
    Stage("acid-pool", (transitions.acid_pool,), "Rotating three-state pool."),
    Stage("self-consumption", (consumption.burning_slime,)),
    Stage(
        "roster-consumption",
        (consumption.flame_breath, consumption.corrosive_bile),
        "Higher tier first; neither fires once the pool was consumed this hit.",
    ),
    Stage("roster-utility", (roster_utility.astral_wind, roster_utility.psychic_forge)),
    Stage("elemental", (elemental.radiation, elemental.cold), "Radiation before cold."),
    Stage("drain", (elemental.energy_drain, elemental.stack_reduction)),
)

HEAL_STAGE = Stage(
    "heal-batch",
    (
        healing.frost_regeneration,
        healing.frost_aura,
        healing.sentry_gun,
        healing.mold_growth,
        healing.electric_shockwave,
        healing.pulse,
        healing.feeding,
        healing.burning_burrow,
        healing.bombardment_guide,
        healing.overdrive_shield,
        healing.poisoned_bite,
        healing.healing_swarm,
        healing.burrow_ambush,
        healing.accelerated_differentiation,
    ),
    "Only runs when the composed damage is below the target's HP.",
)

REACTIVE_STAGE = Stage(
    "reactive",
    (reactive.frost_evolution, reactive.flame_alien, reactive.cosmic_energy),
    "Reads the composed damage; may still make the hit immune.",
)

LETHAL_STAGE = Stage("lethal", lethal.LETHAL_PRIORITY, "First match wins.")


# ----------------------------------------------------------------------
# Composition
# ----------------------------------------------------------------------
def compose_damage(ctx: ResolutionContext) -> int:
    """Return the final damage of the hit from the accumulated context."""

    attack = ctx.attack
    target = ctx.target
    settings = ctx.settings

    adjusted_nerf = ctx.total_nerf * (1 - attack.ignore_mitigation)
    factor = 1 + ctx.total_buff - adjusted_nerf
    if settings.clamp_negative_factor:
        factor = max(factor, 0.0)
    damage = ctx.raw_damage * factor
    ctx.messages.append(
        f"[Damage] buff +{ctx.total_buff:.2f}, nerf -{adjusted_nerf:.2f}: factor {factor:.2f}"
    )

    if ctx.bonus_triggered:
        damage *= BONUS_TRIGGER_FACTOR
    if ctx.has_crit:
        damage *= CRIT_FACTOR
        ctx.messages.append("[Damage] critical hit x2")

    if attack.weapon.is_burn_class:
        layers = min(target.burn_layers, settings.layer_cap)
        burn = layers * BURN_DAMAGE_PER_LAYER * (1 - ctx.total_nerf * 0.5)
        if burn > 0:
            damage += burn
            ctx.messages.append(f"[Burn] {layers} burn layers added {burn:.1f} damage")

    armor_term = (
        target.armor
        + ctx.temp_armor_bonus
        - target.radiation_layers * RADIATION_ARMOR_PER_LAYER
        - target.armor_reduction_layers * ARMOR_SHRED_PER_LAYER
    )
    armor_reduction = attack.armor_damage_reduction * armor_term
    final = max(round_half_up(damage - armor_reduction), 1)
    if ctx.immune:
        final = 0
    return final


# ----------------------------------------------------------------------
# Pipeline
# ----------------------------------------------------------------------
class ResolutionPipeline:
    """Run every stage of a hit against a :class:`ResolutionContext`."""

    def __init__(
        self,
        stages: Sequence[Stage] = DEFAULT_STAGES,
        heal_stage: Stage = HEAL_STAGE,
        reactive_stage: Stage = REACTIVE_STAGE,
        lethal_stage: Stage = LETHAL_STAGE,
    ) -> None:
        self.stages = tuple(stages)
        self.heal_stage = heal_stage
        self.reactive_stage = reactive_stage
        self.lethal_stage = lethal_stage

    def _run_stage(self, stage: Stage, ctx: ResolutionContext) -> None:
        logger.debug("stage %s on %s", stage.name, ctx.target_name)
        for handler in stage.handlers:
            outcome = handler(ctx)
            if outcome is None:
                continue
            ctx.fired.append(handler.__name__)
            logger.debug("  %s fired", handler.__name__)
            ctx.absorb(outcome)

    def _resolve_lethal(self, ctx: ResolutionContext) -> Optional[str]:
        """Run the cheat-death handlers until one absorbs the hit."""

        for handler in self.lethal_stage.handlers:
            outcome = handler(ctx)
            if outcome is None or not outcome.absorbs_lethal:
                continue
            ctx.fired.append(handler.__name__)
            ctx.absorb(outcome)
            return handler.__name__.replace("_", "-")
        return None

    def run(self, ctx: ResolutionContext) -> HitResolution:
        """Resolve the hit described by ``ctx`` and commit it to ``ctx.store``.

        Raises:
            InvalidStatStateError: the target is already defeated.
            ResolutionError: propagated from the store or a handler; the
                store may then hold a partial state and must be discarded.
        """

        try:
            if not ctx.target.alive:
                raise InvalidStatStateError(ctx.target_name, "target is already defeated")
            for stage in self.stages:
                self._run_stage(stage, ctx)

            ctx.final_damage = compose_damage(ctx)
            target = ctx.target
            if ctx.final_damage < target.hp:
                self._run_stage(self.heal_stage, ctx)

            self._run_stage(self.reactive_stage, ctx)
            if ctx.immune:
                ctx.final_damage = 0

            cheat_death = None
            hp = ctx.target.hp
            if ctx.final_damage >= hp and ctx.final_damage > 0:
                logger.debug("lethal hit on %s (%d >= %d)", ctx.target_name, ctx.final_damage, hp)
                cheat_death = self._resolve_lethal(ctx)

            if cheat_death is None and not ctx.immune and ctx.final_damage > 0:
                ctx.commit(ctx.target_name, StatDelta(hp=-ctx.final_damage))
        except ResolutionError as exc:
            logger.warning("resolution of %s on %s failed: %s", ctx.attack.name, ctx.target_name, exc)
            raise

        return HitResolution.from_context(ctx, cheat_death=cheat_death)
