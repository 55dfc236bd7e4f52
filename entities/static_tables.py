"""Static lookup tables (weapons, modifications, entity maxima).

The tables are plain YAML documents validated at load time with pydantic, so
handlers can trust field shapes instead of re-checking them on every hit.
Lookups of unknown names raise the typed errors from :mod:`core.errors`;
there is no silent default.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from core.errors import UnknownEntityError, UnknownModError, UnknownWeaponError
from utils.damage_types import FireClass, WeaponTier, WeaponType

logger = logging.getLogger(__name__)

DEFAULT_TABLES_DIR = Path(__file__).resolve().parent / "default_entities"

__all__ = [
    "WeaponRecord",
    "ModRecord",
    "EntityRecord",
    "StaticTables",
    "load_static_tables",
    "DEFAULT_TABLES_DIR",
]


class _Record(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid", use_enum_values=False)


class WeaponRecord(_Record):
    """Static stats and data-driven roles of a weapon."""

    name: str
    base_damage: float = Field(gt=0)
    tier: WeaponTier = WeaponTier.STANDARD
    type: WeaponType
    tag_effects: Dict[str, float] = Field(default_factory=dict)
    armor_damage_reduction: float = 0.0
    crit_exempt: bool = False
    crit_rate: float = Field(default=0.0, ge=0)
    pity_threshold: Optional[int] = Field(default=None, ge=1)
    # Elemental / utility roles
    fire: FireClass = FireClass.NONE
    burn_layers: int = Field(default=0, ge=0)
    cold: bool = False
    radiation: bool = False
    energy_drain: int = Field(default=0, ge=0)
    stack_reduction: int = Field(default=0, ge=0)
    armor_shred: int = Field(default=0, ge=0)
    bonus_trigger_chance: float = Field(default=0.0, ge=0, le=1)
    combo_bonus_per_stack: float = Field(default=0.0, ge=0)
    combo_bonus_cap: Optional[float] = Field(default=None, ge=0)

    @property
    def is_burn_class(self) -> bool:
        return self.fire is not FireClass.NONE


class ModRecord(_Record):
    """An installable weapon modification.

    ``exclusive_to`` restricts every effect of the mod to one weapon; a mod
    installed elsewhere is inert.
    """

    name: str
    exclusive_to: Optional[str] = None
    damage_bonus: float = 0.0
    combo_bonus_per_stack: float = Field(default=0.0, ge=0)
    combo_bonus_max_stacks: Optional[int] = Field(default=None, ge=0)
    combo_bonus_multiplier: float = Field(default=1.0, ge=0)
    crit_rate: float = Field(default=0.0, ge=0)
    pity_threshold: Optional[int] = Field(default=None, ge=1)
    armor_damage_reduction: Optional[float] = None
    tag_effects: Dict[str, float] = Field(default_factory=dict)
    burn_layers: Optional[int] = Field(default=None, ge=0)
    armor_shred: int = Field(default=0, ge=0)
    cold_layer_multiplier: int = Field(default=1, ge=1)
    radiation_layer_multiplier: int = Field(default=1, ge=1)
    energy_drain_multiplier: int = Field(default=1, ge=1)
    stack_reduction_multiplier: int = Field(default=1, ge=1)

    def applies_to(self, weapon_name: str) -> bool:
        return self.exclusive_to is None or self.exclusive_to == weapon_name


class EntityRecord(_Record):
    """Static maxima and defaults for one entity name."""

    name: str
    role: str = "leader"
    max_hp: int = Field(gt=0)
    max_energy: int = Field(default=0, ge=0)
    max_stacks: int = Field(default=0, ge=0)
    max_shield: int = Field(default=0, ge=0)
    armor: float = 0.0
    shield_armor: float = 0.0
    frail: bool = False
    tags: List[str] = Field(default_factory=list)
    abilities: List[str] = Field(default_factory=list)
    group: Optional[str] = None

    @field_validator("role")
    @classmethod
    def _check_role(cls, value: str) -> str:
        if value not in {"leader", "minion"}:
            raise ValueError(f"role must be 'leader' or 'minion', got {value!r}")
        return value


def _index(records: Iterable[BaseModel]) -> Dict[str, Any]:
    index: Dict[str, Any] = {}
    for record in records:
        if record.name in index:
            raise ValueError(f"Duplicate table entry '{record.name}'")
        index[record.name] = record
    return index


class StaticTables(BaseModel):
    """Validated bundle of the three static tables with typed lookups."""

    model_config = ConfigDict(frozen=True)

    weapons: Dict[str, WeaponRecord] = Field(default_factory=dict)
    mods: Dict[str, ModRecord] = Field(default_factory=dict)
    entities: Dict[str, EntityRecord] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _check_exclusive_targets(self) -> "StaticTables":
        for mod in self.mods.values():
            if mod.exclusive_to is not None and mod.exclusive_to not in self.weapons:
                raise ValueError(
                    f"Mod '{mod.name}' is exclusive to unknown weapon '{mod.exclusive_to}'"
                )
        return self

    @classmethod
    def from_records(
        cls,
        weapons: Iterable[Mapping[str, Any]] = (),
        mods: Iterable[Mapping[str, Any]] = (),
        entities: Iterable[Mapping[str, Any]] = (),
    ) -> "StaticTables":
        """Build tables from lists of raw mappings (as read from YAML)."""

        return cls(
            weapons=_index(WeaponRecord.model_validate(item) for item in weapons),
            mods=_index(ModRecord.model_validate(item) for item in mods),
            entities=_index(EntityRecord.model_validate(item) for item in entities),
        )

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------
    def weapon(self, name: str) -> WeaponRecord:
        try:
            return self.weapons[name]
        except KeyError:
            raise UnknownWeaponError(name) from None

    def mod(self, name: str) -> ModRecord:
        try:
            return self.mods[name]
        except KeyError:
            raise UnknownModError(name) from None

    def entity(self, name: str) -> EntityRecord:
        try:
            return self.entities[name]
        except KeyError:
            raise UnknownEntityError(name) from None

    def group_members(self, group: str) -> List[EntityRecord]:
        """Return the entity records spawned together as ``group``."""

        return [record for record in self.entities.values() if record.group == group]


def _read_yaml_list(path: Path, key: str) -> List[Mapping[str, Any]]:
    with open(path, "r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    items = data.get(key, [])
    if not isinstance(items, list):
        raise ValueError(f"{path}: '{key}' must be a list")
    return items


def load_static_tables(directory: Path | str | None = None) -> StaticTables:
    """Load ``weapons.yaml``, ``mods.yaml`` and ``entities.yaml`` from ``directory``."""

    base = Path(directory) if directory is not None else DEFAULT_TABLES_DIR
    tables = StaticTables.from_records(
        weapons=_read_yaml_list(base / "weapons.yaml", "weapons"),
        mods=_read_yaml_list(base / "mods.yaml", "mods"),
        entities=_read_yaml_list(base / "entities.yaml", "entities"),
    )
    logger.debug(
        "Loaded static tables from %s (%d weapons, %d mods, %d entities)",
        base,
        len(tables.weapons),
        len(tables.mods),
        len(tables.entities),
    )
    return tables
