"""Tests for the pre-passive damage calculator."""

from __future__ import annotations

import pytest

from core.damage.base_damage import calculate_base_damage
from core.damage.bonuses import combine_ignore_rates, rank_bonus
from tests.helpers.combat import make_attack, make_entity
from utils import abilities as ab


@pytest.fixture
def attack_with(default_tables):
    def build(weapon, **kwargs):
        return make_attack(weapon, tables=default_tables, **kwargs)

    return build


def test_plain_weapon_deals_its_base_damage() -> None:
    result = calculate_base_damage(make_attack("Test Rifle"), make_entity())

    assert result.damage == 500
    assert result.base_damage == 500
    assert result.has_crit is False


def test_level_scaling_depends_on_tier() -> None:
    target = make_entity()
    standard = calculate_base_damage(make_attack("Test Rifle", level=2), target)
    legendary = calculate_base_damage(make_attack("Test Legendary", level=2), target)

    assert standard.damage == pytest.approx(600)
    assert legendary.damage == pytest.approx(550)


def test_damage_is_monotonic_in_level() -> None:
    target = make_entity(tags={"biological"})
    damages = [calculate_base_damage(make_attack("Test Rifle", level=level), target).damage for level in range(10)]

    assert damages == sorted(damages)


def test_tags_and_exclusive_mod_stack_multiplicatively(attack_with) -> None:
    target = make_entity(tags={"heavy-armor", "mechanical"})
    attack = attack_with("Gauss Rifle", level=2, mods=["Armor-Break Core"])

    result = calculate_base_damage(attack, target)

    # 80 * 1.1 (legendary lv2) * (1 + 0.5 + 0.2) * 1.4
    assert result.base_damage == pytest.approx(88)
    assert result.damage == pytest.approx(209.44)


def test_stable_dna_ignores_tag_bonuses(attack_with) -> None:
    target = make_entity(tags={"heavy-armor", "mechanical"}, abilities={ab.STABLE_DNA})
    attack = attack_with("Gauss Rifle", level=2, mods=["Armor-Break Core"])

    result = calculate_base_damage(attack, target)

    assert result.damage == pytest.approx(123.2)
    assert any("Stable DNA" in message for message in result.messages)


def test_exclusive_mod_is_inert_on_another_weapon(attack_with) -> None:
    result = calculate_base_damage(attack_with("Scout Rifle", mods=["Armor-Break Core"]), make_entity())

    assert result.damage == pytest.approx(40)


def test_mod_tag_override_replaces_weapon_multiplier(attack_with) -> None:
    target = make_entity(tags={"biological", "heat-averse"})
    result = calculate_base_damage(attack_with("Incinerator", mods=["Combustion Core"]), target)

    # biological 2.0 and heat-averse 3.0 from the core: 1 + 1.0 + 2.0
    assert result.damage == pytest.approx(120)


def test_micro_fusion_combo_bonus_is_capped_at_six_stacks(attack_with) -> None:
    result = calculate_base_damage(
        attack_with("Assault Rifle", mods=["Micro Fusion Core"], combo_count=10), make_entity()
    )

    assert result.damage == pytest.approx(48)


@pytest.mark.parametrize(
    "mods, combo, expected",
    [
        ((), 10, 35.0),
        (("Plasma Bearing",), 10, 42.0),
        (("Plasma Bearing",), 30, 42.0),
        ((), 0, 28.0),
    ],
)
def test_minigun_ramp(attack_with, mods, combo, expected) -> None:
    result = calculate_base_damage(attack_with("M134 Minigun", mods=mods, combo_count=combo), make_entity())

    assert result.damage == pytest.approx(expected)


def test_external_bonuses_are_additive() -> None:
    attack = make_attack("Test Rifle", career_bonus=0.1, wish_bonus=0.05, rank_bonus=0.05)

    assert calculate_base_damage(attack, make_entity()).damage == pytest.approx(600)


def test_damage_floored_at_one() -> None:
    attack = make_attack("Test Rifle", career_bonus=-2.0)

    assert calculate_base_damage(attack, make_entity()).damage == 1


def test_crit_exempt_weapon_never_crits(attack_with) -> None:
    attack = attack_with("M4AE Pulse Rifle", crit_rate=100, pity_counter=50, rolls=[0.0])

    assert calculate_base_damage(attack, make_entity()).has_crit is False


def test_pity_guarantees_crit_without_rolling(attack_with) -> None:
    attack = attack_with("MK-4 Laser Rifle", pity_counter=3, rolls=[0.99])

    result = calculate_base_damage(attack, make_entity())

    assert result.has_crit is True
    assert attack.rng.random() == 0.99


@pytest.mark.parametrize("roll, expected", [(0.24, True), (0.26, False)])
def test_crit_roll_against_weapon_rate(attack_with, roll, expected) -> None:
    attack = attack_with("MK-4 Laser Rifle", rolls=[roll])

    assert calculate_base_damage(attack, make_entity()).has_crit is expected


def test_mod_and_external_crit_rates_add_up(attack_with) -> None:
    attack = attack_with("MK-4 Laser Rifle", mods=["Prism Overload Core"], crit_rate=10, rolls=[0.54])

    # 25 (weapon) + 20 (mod) + 10 (external) = 55%
    assert calculate_base_damage(attack, make_entity()).has_crit is True


def test_no_crit_rate_consumes_no_roll() -> None:
    attack = make_attack("Test Rifle", rolls=[0.0])

    assert calculate_base_damage(attack, make_entity()).has_crit is False
    assert attack.rng.random() == 0.0


def test_rank_bonus_steps_and_cap() -> None:
    assert rank_bonus(0) == 0
    assert rank_bonus(299) == 0
    assert rank_bonus(650) == pytest.approx(0.02)
    assert rank_bonus(1_000_000) == 1.0


def test_combine_ignore_rates_caps_at_one() -> None:
    assert combine_ignore_rates([0.2, 0.3]) == pytest.approx(0.5)
    assert combine_ignore_rates([0.8, 0.5]) == 1.0
    assert combine_ignore_rates([]) == 0
