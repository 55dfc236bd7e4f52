"""Attack context: the weapon, its installed mods and the attacker's bonuses.

Every role a weapon plays in the resolution (fire, cold, radiation, drains,
armor shredding...) is read from the static records.  Mod effects only count
when the mod applies to the wielded weapon, see :meth:`ModRecord.applies_to`.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Iterable, Optional, Tuple

from entities.static_tables import ModRecord, StaticTables, WeaponRecord
from utils.damage_types import FireClass, WeaponType

__all__ = ["AttackContext"]


@dataclass(frozen=True, slots=True)
class AttackContext:
    """Immutable description of one incoming hit."""

    weapon: WeaponRecord
    mods: Tuple[ModRecord, ...] = field(default_factory=tuple)
    level: int = 0
    combo_count: int = 0
    pity_counter: int = 0
    career_bonus: float = 0.0
    wish_bonus: float = 0.0
    rank_bonus: float = 0.0
    crit_rate: float = 0.0
    armor_piercing: bool = False
    ignore_mitigation: float = 0.0
    has_crit: bool = False
    rng: random.Random = field(default_factory=random.Random, compare=False, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "mods", tuple(self.mods))
        if not 0.0 <= self.ignore_mitigation <= 1.0:
            raise ValueError(
                f"ignore_mitigation must be within [0, 1], got {self.ignore_mitigation}"
            )
        if self.level < 0:
            raise ValueError(f"level must be >= 0, got {self.level}")

    @classmethod
    def from_names(
        cls,
        tables: StaticTables,
        weapon: str,
        mods: Iterable[str] = (),
        **kwargs,
    ) -> "AttackContext":
        """Resolve ``weapon`` and ``mods`` through ``tables``.

        Unknown names raise :class:`core.errors.UnknownWeaponError` or
        :class:`core.errors.UnknownModError`.
        """

        return cls(
            weapon=tables.weapon(weapon),
            mods=tuple(tables.mod(name) for name in mods),
            **kwargs,
        )

    # ------------------------------------------------------------------
    # Weapon identity
    # ------------------------------------------------------------------
    @property
    def name(self) -> str:
        return self.weapon.name

    @property
    def weapon_type(self) -> WeaponType:
        return self.weapon.type

    @property
    def fire(self) -> FireClass:
        return self.weapon.fire

    @property
    def is_full_fire(self) -> bool:
        return self.weapon.fire is FireClass.FULL

    @property
    def is_partial_fire(self) -> bool:
        return self.weapon.fire is FireClass.PARTIAL

    @property
    def is_thermal(self) -> bool:
        return self.weapon.type is WeaponType.THERMAL

    # ------------------------------------------------------------------
    # Mod resolution
    # ------------------------------------------------------------------
    @property
    def active_mods(self) -> Tuple[ModRecord, ...]:
        """Installed mods that actually apply to the wielded weapon."""

        return tuple(mod for mod in self.mods if mod.applies_to(self.weapon.name))

    def has_mod(self, name: str) -> bool:
        return any(mod.name == name for mod in self.active_mods)

    def tag_multiplier(self, tag: str) -> Optional[float]:
        """Multiplier against ``tag``; a mod override replaces the weapon value."""

        value = self.weapon.tag_effects.get(tag)
        for mod in self.active_mods:
            if tag in mod.tag_effects:
                value = mod.tag_effects[tag]
        return value

    @property
    def armor_damage_reduction(self) -> float:
        """Coefficient applied to the target's armor term.

        The last applicable mod defining an override wins; armor piercing
        forces 0.
        """

        if self.armor_piercing:
            return 0.0
        value = self.weapon.armor_damage_reduction
        for mod in self.active_mods:
            if mod.armor_damage_reduction is not None:
                value = mod.armor_damage_reduction
        return value

    @property
    def burn_layers(self) -> int:
        value = self.weapon.burn_layers
        for mod in self.active_mods:
            if mod.burn_layers is not None:
                value = mod.burn_layers
        return value if self.weapon.fire is not FireClass.NONE else 0

    @property
    def mod_armor_shred(self) -> int:
        return sum(mod.armor_shred for mod in self.active_mods)

    def _multiplier(self, attr: str) -> int:
        product = 1
        for mod in self.active_mods:
            product *= getattr(mod, attr)
        return product

    @property
    def cold_layers_per_hit(self) -> int:
        return self._multiplier("cold_layer_multiplier") if self.weapon.cold else 0

    @property
    def radiation_layers_per_hit(self) -> int:
        return self._multiplier("radiation_layer_multiplier") if self.weapon.radiation else 0

    @property
    def energy_drain_amount(self) -> int:
        return self.weapon.energy_drain * self._multiplier("energy_drain_multiplier")

    @property
    def stack_reduction_amount(self) -> int:
        return self.weapon.stack_reduction * self._multiplier("stack_reduction_multiplier")
