"""Pre-passive damage of a hit: level, tags, mods, external bonuses and crit.

The calculator never touches entity state; its output is the ``raw_damage``
and ``has_crit`` the resolution pipeline starts from.  The crit multiplier
itself is applied later, during the final damage composition.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

from entities.combat_entity import CombatEntity
from entities.weapon import AttackContext
from utils import abilities as ab
from utils.damage_types import level_rate

__all__ = ["BaseDamageResult", "calculate_base_damage"]

logger = logging.getLogger(__name__)

MIN_DAMAGE = 1


@dataclass(frozen=True, slots=True)
class BaseDamageResult:
    """Damage before passives, whether the hit crits, and the level-scaled base."""

    damage: float
    has_crit: bool
    base_damage: float
    messages: Tuple[str, ...] = ()


def _tag_bonus(attack: AttackContext, target: CombatEntity, messages: List[str]) -> float:
    if target.has(ab.STABLE_DNA):
        messages.append("[Stable DNA] target ignores weapon tag bonuses")
        return 0.0

    bonus = 0.0
    for tag in sorted(target.tags):
        multiplier = attack.tag_multiplier(tag)
        if multiplier is not None:
            bonus += multiplier - 1
    if bonus:
        messages.append(f"[Tags] attack damage {bonus:+.0%}")
    return bonus


def _mod_bonus(attack: AttackContext, messages: List[str]) -> float:
    """Sum of flat mod bonuses plus the two combo ramps."""

    bonus = 0.0
    for mod in attack.active_mods:
        if mod.damage_bonus:
            bonus += mod.damage_bonus
            messages.append(f"[{mod.name}] damage {mod.damage_bonus:+.0%}")
        if mod.combo_bonus_per_stack:
            stacks = attack.combo_count
            if mod.combo_bonus_max_stacks is not None:
                stacks = min(stacks, mod.combo_bonus_max_stacks)
            ramp = stacks * mod.combo_bonus_per_stack
            bonus += ramp
            messages.append(f"[{mod.name}] combo damage {ramp:+.0%}")

    weapon = attack.weapon
    if weapon.combo_bonus_per_stack:
        per_stack = weapon.combo_bonus_per_stack
        for mod in attack.active_mods:
            per_stack *= mod.combo_bonus_multiplier
        ramp = attack.combo_count * per_stack
        capped = ramp if weapon.combo_bonus_cap is None else min(ramp, weapon.combo_bonus_cap)
        bonus += capped
        suffix = " (capped)" if capped < ramp else ""
        messages.append(
            f"[{weapon.name}] {attack.combo_count} consecutive hits: damage {capped:+.1%}{suffix}"
        )
    return bonus


def _pity_threshold(attack: AttackContext) -> Optional[Tuple[str, int]]:
    if attack.weapon.pity_threshold is not None:
        if attack.pity_counter >= attack.weapon.pity_threshold:
            return attack.weapon.name, attack.weapon.pity_threshold
    for mod in attack.active_mods:
        if mod.pity_threshold is not None and attack.pity_counter >= mod.pity_threshold:
            return mod.name, mod.pity_threshold
    return None


def _roll_crit(attack: AttackContext, messages: List[str]) -> bool:
    if attack.weapon.crit_exempt:
        return False

    pity = _pity_threshold(attack)
    if pity is not None:
        messages.append(f"[{pity[0]}] guaranteed critical hit after {pity[1]} misses")
        return True

    rate = attack.crit_rate + attack.weapon.crit_rate
    rate += sum(mod.crit_rate for mod in attack.active_mods)
    if rate <= 0:
        return False
    messages.append(f"[Crit] critical rate {rate:.0f}%")
    return attack.rng.random() * 100 < rate


def calculate_base_damage(attack: AttackContext, target: CombatEntity) -> BaseDamageResult:
    """Compute the damage of ``attack`` against ``target`` before any passive.

    Args:
        attack: weapon, installed mods, level, combo/pity counters and the
            externally supplied bonuses of the attacker.
        target: the entity being hit; only its tags and ``stable-dna`` are read.

    Returns:
        BaseDamageResult: ``damage`` is floored at 1 and not rounded.

    Example:
        ```python
        attack = AttackContext.from_names(tables, "Gauss Rifle", level=2)
        result = calculate_base_damage(attack, store.get("Behemoth"))
        ```
    """

    weapon = attack.weapon
    messages: List[str] = []

    base = weapon.base_damage * (1 + level_rate(weapon.tier) * attack.level)
    messages.append(f"[{weapon.name}] Lv.{attack.level}: base damage {base:.1f}")

    tag_factor = 1 + _tag_bonus(attack, target, messages)
    mod_factor = 1 + _mod_bonus(attack, messages)
    other_factor = 1 + attack.career_bonus + attack.wish_bonus + attack.rank_bonus

    damage = max(base * tag_factor * mod_factor * other_factor, MIN_DAMAGE)
    has_crit = _roll_crit(attack, messages)
    logger.debug(
        "base damage %s -> %s: %.2f (tags x%.2f, mods x%.2f, other x%.2f, crit=%s)",
        weapon.name,
        target.name,
        damage,
        tag_factor,
        mod_factor,
        other_factor,
        has_crit,
    )
    return BaseDamageResult(
        damage=damage,
        has_crit=has_crit,
        base_damage=base,
        messages=tuple(messages),
    )
