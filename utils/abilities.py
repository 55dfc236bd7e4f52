# utils/abilities.py
"""Identifiers shared by the effect handlers, the catalogue and the tables.

Implemented:
- Ability identifiers (kebab-case strings, as stored in ``CombatEntity.abilities``).
- Tag identifiers read or written by handlers.
- Counter pools backing ``AbilityStateComponent`` with their caps.

Design:
- Several abilities deliberately share one pool (e.g. the vampiric family all
  read and feed ``vampiric``); unrelated abilities never share a pool.
- A cap of ``None`` means the pool is only floored at 0.
"""
from __future__ import annotations

from typing import Dict, FrozenSet, Optional, Tuple

# ----------------------------------------------------------------------
# Tags
# ----------------------------------------------------------------------
TAG_BIOLOGICAL = "biological"
TAG_MECHANICAL = "mechanical"
TAG_SHIELDED = "shielded"
TAG_HEAVY_ARMOR = "heavy-armor"
TAG_HEAT_AVERSE = "heat-averse"
TAG_COLD_AVERSE = "cold-averse"

# ----------------------------------------------------------------------
# Abilities: frost family
# ----------------------------------------------------------------------
ALIEN_SHELL = "alien-shell"
FROST_REGENERATION = "frost-regeneration"
FROST_AURA = "frost-aura"
FROST_EVOLUTION = "frost-evolution"
FROST_HELL = "frost-hell"
STRESS_SHELL_I = "stress-shell-i"
STRESS_SHELL_II = "stress-shell-ii"
SURVIVAL_INSTINCT_I = "survival-instinct-i"
SURVIVAL_INSTINCT_II = "survival-instinct-ii"
COLD_ADAPTATION = "cold-adaptation"
SHIVERING_HOWL = "shivering-howl"

# Space station / infection
INFECTED_SPACE_STATION = "infected-space-station"
VIRUS_CLOUD = "virus-cloud"
MOLD_GROWTH = "mold-growth"
SENTRY_GUN = "sentry-gun"
STRUCTURAL_ARMOR = "structural-armor"

# Vampire family
VAMPIRIC_SALIVA = "vampiric-saliva"
FEEDING = "feeding"
BLOODLUST = "bloodlust"
BLOOD_VOMIT = "blood-vomit"

# Electric family
SUPERCONDUCTOR = "superconductor"
ENERGY_SIPHON = "energy-siphon"
POWER_SIPHON = "power-siphon"
ELECTRIC_FIELD = "electric-field"
ELECTRIC_SHOCKWAVE = "electric-shockwave"
PULSE = "pulse"
ENERGY_BLACKHOLE = "energy-blackhole"

# Fire family
FLAME_ALIEN = "flame-alien"
COLOSSAL_RAMPAGE = "colossal-rampage"
BURNING_SLIME = "burning-slime"
CORROSIVE_BILE = "corrosive-bile"
FLAME_BREATH = "flame-breath"
SOLAR_FLARE = "solar-flare"
BURNING_BURROW = "burning-burrow"
INFERNAL_BOMB = "infernal-bomb"

# Hunter family
HUNTER_ALIEN = "hunter-alien"
RAMPAGE = "rampage"
DISGUISE = "disguise"
DEADLY_STRIKE = "deadly-strike"

# Astral family
ASTRAL_WIND = "astral-wind"
MIND_FRENZY = "mind-frenzy"
COSMIC_ENERGY = "cosmic-energy"
REVIVAL = "revival"
BLADE_OF_LIGHT = "blade-of-light"
ANCIENT_OMEN = "ancient-omen"
HYPER_RANGE_SHIFT = "hyper-range-shift"
PSYCHIC_FORGE = "psychic-forge"
OVERDRIVE_SHIELD = "overdrive-shield"
COLLAPSING_PULSE = "collapsing-pulse"
CARPET_BOMBING = "carpet-bombing"
BOMBARDMENT_GUIDE = "bombardment-guide"

# Toxin family
TOXIC_SALIVA = "toxic-saliva"
TOXIC_FRENZY = "toxic-frenzy"
TOXIC_GAS_WAVE = "toxic-gas-wave"
POISONED_BITE = "poisoned-bite"
ACID_POOL = "acid-pool"
TOXIC_ASSAULT = "toxic-assault"

# Swarm family
HIVE_MIND = "hive-mind"
BURROW_AMBUSH = "burrow-ambush"
WEAKENING_SPIT = "weakening-spit"
HEALING_SWARM = "healing-swarm"
RELEASE_PHEROMONES = "release-pheromones"
TERRIFYING_SCREECH = "terrifying-screech"
HATCHING = "hatching"

# Gene family
GENE_MUTATION = "gene-mutation"
REDUNDANCY_OPTIMIZATION = "redundancy-optimization"
CLAIRVOYANCE = "clairvoyance"
ENVIRONMENTAL_ADAPTATION = "environmental-adaptation"
ACCELERATED_DIFFERENTIATION = "accelerated-differentiation"
ENDURANCE_ENHANCEMENT = "endurance-enhancement"
STABLE_DNA = "stable-dna"
THICKENED_CARAPACE = "thickened-carapace"
PLASMID_PROLIFERATION = "plasmid-proliferation"
ACCELERATED_METABOLISM = "accelerated-metabolism"
TISSUE_HYPERPLASIA = "tissue-hyperplasia"
BIOLOGICAL_SIGNATURE_MIMICRY = "biological-signature-mimicry"

GENE_ABILITIES: Tuple[str, ...] = (
    REDUNDANCY_OPTIMIZATION,
    CLAIRVOYANCE,
    ENVIRONMENTAL_ADAPTATION,
    ACCELERATED_DIFFERENTIATION,
    ENDURANCE_ENHANCEMENT,
    STABLE_DNA,
    THICKENED_CARAPACE,
    PLASMID_PROLIFERATION,
    ACCELERATED_METABOLISM,
    TISSUE_HYPERPLASIA,
    BIOLOGICAL_SIGNATURE_MIMICRY,
)

PSYCHIC_FORGE_POOL: Tuple[str, ...] = (
    OVERDRIVE_SHIELD,
    COLLAPSING_PULSE,
    CARPET_BOMBING,
    BOMBARDMENT_GUIDE,
)

# ----------------------------------------------------------------------
# Counter pools
# ----------------------------------------------------------------------
POOL_VAMPIRIC = "vampiric"
POOL_BURNING_SLIME = "burning_slime"
POOL_LIGHT_BLADE = "light_blade"
POOL_TOXIN = "toxin"
POOL_GENE = "gene"
POOL_SENTRY_CHARGE = "sentry_charge"
POOL_ACID_ROTATION = "acid_rotation"
POOL_ACID_CHARGES = "acid_charges"
POOL_SCREECH_COUNTER = "screech_counter"
POOL_HATCH_COUNTER = "hatch_counter"
POOL_GENE_HITS = "gene_hits"
POOL_COLD_EXPOSURE = "cold_exposure"

COUNTER_CAPS: Dict[str, Optional[int]] = {
    POOL_VAMPIRIC: 20,
    POOL_BURNING_SLIME: 20,
    POOL_LIGHT_BLADE: 50,
    POOL_TOXIN: 20,
    POOL_GENE: 100,
    POOL_SENTRY_CHARGE: 10,
    POOL_ACID_ROTATION: 2,
    POOL_ACID_CHARGES: None,
    POOL_SCREECH_COUNTER: 10,
    POOL_HATCH_COUNTER: 10,
    POOL_GENE_HITS: None,
    POOL_COLD_EXPOSURE: 10,
}

# Pools a stack-reduction weapon strips.
STACK_POOLS: FrozenSet[str] = frozenset(
    {POOL_VAMPIRIC, POOL_BURNING_SLIME, POOL_LIGHT_BLADE, POOL_TOXIN, POOL_GENE}
)


def counter_cap(pool: str) -> Optional[int]:
    """Return the cap for ``pool`` (``None`` when only floored at 0)."""

    return COUNTER_CAPS.get(pool)


def gene_abilities_held(abilities) -> Tuple[str, ...]:
    """Return the gene abilities contained in ``abilities`` in pool order."""

    return tuple(name for name in GENE_ABILITIES if name in abilities)


