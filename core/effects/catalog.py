"""Static catalog of the passive abilities known to the resolution core.

:class:`AbilityDef` describes an ability without tying it to a handler: its
display name, the encounter family it comes from, the counter pool it reads
or feeds and the abilities it can hand out.  Tables and tooling consult the
catalog to reject or flag unknown identifiers before a hit is resolved.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, Optional, Sequence, Tuple

from utils import abilities as ab

__all__ = ["AbilityDef", "ABILITY_CATALOG", "iter_catalog", "get_ability", "uncatalogued"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class AbilityDef:
    """Declarative description of one passive ability."""

    id: str
    name: str
    description: str
    family: str
    counter_pool: Optional[str] = None
    grants: Sequence[str] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "family": self.family,
            "counter_pool": self.counter_pool,
            "grants": list(self.grants),
        }


def _entry(
    ability_id: str,
    family: str,
    description: str,
    counter_pool: Optional[str] = None,
    grants: Tuple[str, ...] = (),
) -> AbilityDef:
    return AbilityDef(
        id=ability_id,
        name=ability_id.replace("-", " ").title().replace(" Ii", " II"),
        description=description,
        family=family,
        counter_pool=counter_pool,
        grants=grants,
    )


_ENTRIES: Tuple[AbilityDef, ...] = (
    # fang / frost / brute
    _entry(ab.ALIEN_SHELL, "fang", "Damage taken -10% plus 1% per percent of HP lost, capped at 80%."),
    _entry(ab.FROST_REGENERATION, "frost", "At 30% HP heals 40% and the roster 10%; single use."),
    _entry(ab.FROST_AURA, "frost", "At 30% HP heals 45%, clears burn, spreads Frost Hell; single use.",
           grants=(ab.FROST_HELL,)),
    _entry(ab.FROST_EVOLUTION, "frost", "Immune to cold weapons and heals the damage instead."),
    _entry(ab.FROST_HELL, "frost", "Damage taken -30%."),
    _entry(ab.SHIVERING_HOWL, "frost", "Damage taken -30% at or below half HP."),
    _entry(ab.STRESS_SHELL_I, "brute", "Damage taken -20%."),
    _entry(ab.STRESS_SHELL_II, "brute", "Damage taken -25%."),
    _entry(ab.SURVIVAL_INSTINCT_I, "brute", "Survives a lethal hit healing 30%; single use."),
    _entry(ab.SURVIVAL_INSTINCT_II, "brute", "Survives a lethal hit healing 50%; single use."),
    _entry(ab.COLD_ADAPTATION, "brute", "Builds cold exposure, then becomes immune to cold weapons.",
           counter_pool=ab.POOL_COLD_EXPOSURE),
    # station
    _entry(ab.INFECTED_SPACE_STATION, "station", "Damage taken -50% while the station turret stands."),
    _entry(ab.VIRUS_CLOUD, "station", "Damage taken -10%."),
    _entry(ab.MOLD_GROWTH, "station", "Repairs the station turret by 1% per hit."),
    _entry(ab.SENTRY_GUN, "station", "Charges per hit; a full charge repairs the roster by 10%.",
           counter_pool=ab.POOL_SENTRY_CHARGE),
    _entry(ab.STRUCTURAL_ARMOR, "station", "Damage taken -40% from thermal weapons, -20% otherwise."),
    # vampire
    _entry(ab.VAMPIRIC_SALIVA, "vampire", "Each vampiric stack nerfs damage by 5%.",
           counter_pool=ab.POOL_VAMPIRIC),
    _entry(ab.FEEDING, "vampire", "A full vampiric pool is spent to heal 20%.", counter_pool=ab.POOL_VAMPIRIC),
    _entry(ab.BLOODLUST, "vampire", "At half HP gains a vampiric stack and takes 20% less damage.",
           counter_pool=ab.POOL_VAMPIRIC),
    _entry(ab.BLOOD_VOMIT, "vampire", "Damage taken +20% while no vampiric stack is held.",
           counter_pool=ab.POOL_VAMPIRIC),
    # subvolt
    _entry(ab.SUPERCONDUCTOR, "subvolt", "At 10% HP trades the shield for heavy armor."),
    _entry(ab.ENERGY_SIPHON, "subvolt", "Damage taken -40% above 70% HP, -20% above 30% HP."),
    _entry(ab.POWER_SIPHON, "subvolt", "Damage taken -50% above 80% energy, -30% above 50% energy."),
    _entry(ab.ELECTRIC_FIELD, "subvolt", "Negates non-thermal hits by chance while energy is at least 30%."),
    _entry(ab.ELECTRIC_SHOCKWAVE, "subvolt", "Restores 100 energy per surviving hit."),
    _entry(ab.PULSE, "subvolt", "Charged bursts heal the roster; cold layers dampen the chance."),
    _entry(ab.ENERGY_BLACKHOLE, "subvolt", "Damage taken -20%."),
    # blaze
    _entry(ab.FLAME_ALIEN, "blaze", "Feeds on fire weapons; full fire is absorbed entirely."),
    _entry(ab.COLOSSAL_RAMPAGE, "blaze", "Damage taken -50% at or below half HP."),
    _entry(ab.BURNING_SLIME, "blaze", "Builds slime from non-fire hits, fire hits consume it to heal.",
           counter_pool=ab.POOL_BURNING_SLIME),
    _entry(ab.CORROSIVE_BILE, "blaze", "Ten slime stacks heal the whole roster by 1000.",
           counter_pool=ab.POOL_BURNING_SLIME),
    _entry(ab.FLAME_BREATH, "blaze", "Twenty slime stacks heal the whole roster by 20%.",
           counter_pool=ab.POOL_BURNING_SLIME),
    _entry(ab.SOLAR_FLARE, "blaze", "Alone on the field, sheds its cold aversion."),
    _entry(ab.BURNING_BURROW, "blaze", "Below 10% HP heals half its HP; single use."),
    _entry(ab.INFERNAL_BOMB, "blaze", "Each slime stack nerfs damage by 5%, doubled while allies stand.",
           counter_pool=ab.POOL_BURNING_SLIME),
    # raptor
    _entry(ab.HUNTER_ALIEN, "raptor", "Immune to fire and cold; pack presence nerfs or buffs damage."),
    _entry(ab.RAMPAGE, "raptor", "Damage taken -50% at or below half HP."),
    _entry(ab.DISGUISE, "raptor", "Damage taken -80% from the weapon that hit it last."),
    _entry(ab.DEADLY_STRIKE, "raptor", "5% chance to negate a hit."),
    # astral
    _entry(ab.ASTRAL_WIND, "astral", "5% chance to heal the roster by 200."),
    _entry(ab.MIND_FRENZY, "astral", "Doubles the astral wind chance."),
    _entry(ab.COSMIC_ENERGY, "astral", "Converts damage into energy, overflow into HP."),
    _entry(ab.REVIVAL, "astral", "Survives a lethal hit with 60% HP and full energy; single use.",
           grants=(ab.PSYCHIC_FORGE,)),
    _entry(ab.BLADE_OF_LIGHT, "astral", "Gains a light blade per hit.", counter_pool=ab.POOL_LIGHT_BLADE),
    _entry(ab.ANCIENT_OMEN, "astral", "Light blades give a chance to negate a hit.",
           counter_pool=ab.POOL_LIGHT_BLADE),
    _entry(ab.HYPER_RANGE_SHIFT, "astral", "Light blades nerf or buff damage depending on energy.", counter_pool=ab.POOL_LIGHT_BLADE),
    _entry(ab.PSYCHIC_FORGE, "astral", "5% chance to forge a missing overdrive ability.",
           grants=ab.PSYCHIC_FORGE_POOL),
    _entry(ab.OVERDRIVE_SHIELD, "astral", "Spends half the light blades to heal the roster.",
           counter_pool=ab.POOL_LIGHT_BLADE),
    _entry(ab.COLLAPSING_PULSE, "astral", "Gains an extra light blade per hit.",
           counter_pool=ab.POOL_LIGHT_BLADE),
    _entry(ab.CARPET_BOMBING, "astral", "Damage taken -80%; suppresses isolation."),
    _entry(ab.BOMBARDMENT_GUIDE, "astral", "Spends half the light blades to restore energy.",
           counter_pool=ab.POOL_LIGHT_BLADE),
    # venom
    _entry(ab.TOXIC_SALIVA, "venom", "Gains toxin per hit; each stack nerfs damage.", counter_pool=ab.POOL_TOXIN),
    _entry(ab.TOXIC_FRENZY, "venom", "At half HP takes 20% less damage and gains an extra toxin stack.", counter_pool=ab.POOL_TOXIN),
    _entry(ab.TOXIC_GAS_WAVE, "venom", "20% chance to gain five toxin stacks.", counter_pool=ab.POOL_TOXIN),
    _entry(ab.POISONED_BITE, "venom", "Toxin thresholds heal 50/100/150.", counter_pool=ab.POOL_TOXIN),
    _entry(ab.ACID_POOL, "venom", "Rotates through three pools resisting one weapon type each.",
           counter_pool=ab.POOL_ACID_ROTATION),
    _entry(ab.TOXIC_ASSAULT, "venom", "A full toxin pool empowers the next five acid pools.",
           counter_pool=ab.POOL_TOXIN),
    # swarm
    _entry(ab.HIVE_MIND, "swarm", "Damage taken -20% per living nestling; nestlings take 20% more."),
    _entry(ab.BURROW_AMBUSH, "swarm", "Below half HP calls in every missing nestling; single use."),
    _entry(ab.WEAKENING_SPIT, "swarm", "Damage taken -80% while the hatchery stands."),
    _entry(ab.HEALING_SWARM, "swarm", "At 30% HP heals 40% and the roster 10%; single use."),
    _entry(ab.RELEASE_PHEROMONES, "swarm", "Swarm members take 20% less damage."),
    _entry(ab.TERRIFYING_SCREECH, "swarm", "Every tenth hit hatches a nestling if none is alive.",
           counter_pool=ab.POOL_SCREECH_COUNTER),
    _entry(ab.HATCHING, "swarm", "Every tenth hit hatches a nestling if none is alive.",
           counter_pool=ab.POOL_HATCH_COUNTER),
    # gene
    _entry(ab.GENE_MUTATION, "gene", "Every third hit rewrites the gene abilities.",
           counter_pool=ab.POOL_GENE_HITS, grants=ab.GENE_ABILITIES),
    _entry(ab.REDUNDANCY_OPTIMIZATION, "gene", "Immune to radiation weapons; clears radiation layers."),
    _entry(ab.CLAIRVOYANCE, "gene", "Marker ability with no combat effect."),
    _entry(ab.ENVIRONMENTAL_ADAPTATION, "gene", "Clears burn and cold layers; negates fire and cold hits."),
    _entry(ab.ACCELERATED_DIFFERENTIATION, "gene", "Heals 5 HP per two gene stacks.", counter_pool=ab.POOL_GENE),
    _entry(ab.ENDURANCE_ENHANCEMENT, "gene", "Damage taken -30%/-50%/-80% at 30%/50%/80% energy."),
    _entry(ab.STABLE_DNA, "gene", "Weapon tag bonuses do not apply."),
    _entry(ab.THICKENED_CARAPACE, "gene", "Each gene stack nerfs damage by 1%.", counter_pool=ab.POOL_GENE),
    _entry(ab.PLASMID_PROLIFERATION, "gene", "Immune to grenade bonuses."),
    _entry(ab.ACCELERATED_METABOLISM, "gene", "Gains one gene stack per gene ability held.", counter_pool=ab.POOL_GENE),
    _entry(ab.TISSUE_HYPERPLASIA, "gene", "Gene stacks add temporary armor.", counter_pool=ab.POOL_GENE),
    _entry(ab.BIOLOGICAL_SIGNATURE_MIMICRY, "gene", "Gene stacks give a chance to negate a hit.",
           counter_pool=ab.POOL_GENE),
)

ABILITY_CATALOG: dict[str, AbilityDef] = {entry.id: entry for entry in _ENTRIES}


def iter_catalog() -> Iterable[AbilityDef]:
    """Stable iteration over catalog entries."""

    return ABILITY_CATALOG.values()


def get_ability(ability_id: str) -> Optional[AbilityDef]:
    return ABILITY_CATALOG.get(ability_id)


def uncatalogued(abilities: Iterable[str], owner: str = "") -> Tuple[str, ...]:
    """Return the identifiers missing from the catalog, logging a warning for each."""

    missing = tuple(sorted(name for name in abilities if name not in ABILITY_CATALOG))
    for name in missing:
        logger.warning("Ability '%s' on '%s' is not in the ability catalog", name, owner)
    return missing
