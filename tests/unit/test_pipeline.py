"""Damage composition and stage orchestration of the resolution pipeline."""

from __future__ import annotations

import pytest

from config.config_loader import ResolutionSettings
from core.effects.outcome import StatDelta
from core.effects.pipeline import DEFAULT_STAGES, ResolutionPipeline, Stage, compose_damage
from core.errors import InvalidStatStateError, UnknownEntityError
from tests.helpers.combat import make_attack, make_context, make_entity, make_store, run_hit
from utils import abilities as ab


@pytest.fixture
def store():
    return make_store(make_entity("Dummy", 10000), make_entity("Ally", 5000))


# ----------------------------------------------------------------------
# compose_damage
# ----------------------------------------------------------------------
def test_compose_plain_damage(store) -> None:
    ctx = make_context(store, raw_damage=500)
    assert compose_damage(ctx) == 500


def test_compose_buff_and_nerf_are_additive(store) -> None:
    ctx = make_context(store, raw_damage=500, total_buff=0.2, total_nerf=0.5)
    assert compose_damage(ctx) == 350


def test_ignore_mitigation_scales_nerf_only(store) -> None:
    attack = make_attack(ignore_mitigation=0.5)
    ctx = make_context(store, attack=attack, raw_damage=500, total_buff=0.1, total_nerf=0.4)
    # 1 + 0.1 - 0.4 * 0.5
    assert compose_damage(ctx) == 450


def test_crit_and_bonus_trigger_multiply(store) -> None:
    crit = make_context(store, attack=make_attack(has_crit=True), raw_damage=500)
    assert compose_damage(crit) == 1000
    assert "[Damage] critical hit x2" in crit.messages

    bonus = make_context(store, raw_damage=500, bonus_triggered=True)
    assert compose_damage(bonus) == 750

    both = make_context(store, attack=make_attack(has_crit=True), raw_damage=500, bonus_triggered=True)
    assert compose_damage(both) == 1500


def test_negative_factor_is_clamped() -> None:
    burning = make_store(make_entity("Dummy", burn_layers=10), make_entity("Ally", 5000))
    ctx = make_context(burning, attack=make_attack("Test Torch"), raw_damage=500, total_nerf=1.5)
    # factor clamped to 0; 10 burn layers add 10 * (1 - 1.5 * 0.5)
    assert compose_damage(ctx) == 3


def test_negative_factor_unclamped_falls_to_minimum() -> None:
    burning = make_store(make_entity("Dummy", burn_layers=10), make_entity("Ally", 5000))
    settings = ResolutionSettings(clamp_negative_factor=False)
    ctx = make_context(
        burning, attack=make_attack("Test Torch"), raw_damage=500, settings=settings, total_nerf=1.5
    )
    assert compose_damage(ctx) == 1


@pytest.mark.parametrize("nerf", [0.0, 0.5, 1.0, 1.2, 1.5, 2.0, 3.5])
@pytest.mark.parametrize("buff", [0.0, 0.3])
def test_clamp_never_makes_a_hit_cheaper(nerf, buff) -> None:
    burning = make_store(make_entity("Dummy", armor=2, burn_layers=20), make_entity("Ally", 5000))
    unclamped = ResolutionSettings(clamp_negative_factor=False)

    def compose(settings):
        ctx = make_context(
            burning, attack=make_attack("Test Torch"), raw_damage=300,
            settings=settings, total_buff=buff, total_nerf=nerf,
        )
        return compose_damage(ctx)

    assert compose(ResolutionSettings()) >= compose(unclamped) >= 1


def test_burn_bonus_respects_layer_cap() -> None:
    burning = make_store(make_entity("Dummy", burn_layers=150), make_entity("Ally", 5000))
    ctx = make_context(burning, attack=make_attack("Test Torch"), raw_damage=100)
    assert compose_damage(ctx) == 200


def test_burn_layers_ignored_for_non_fire_weapons() -> None:
    burning = make_store(make_entity("Dummy", burn_layers=50), make_entity("Ally", 5000))
    assert compose_damage(make_context(burning, raw_damage=100)) == 100


def test_armor_term_with_radiation_and_shred() -> None:
    armored = make_store(
        make_entity("Dummy", armor=10, radiation_layers=20, armor_reduction_layers=10),
        make_entity("Ally", 5000),
    )
    ctx = make_context(armored, attack=make_attack("Test Plated"), raw_damage=100)
    # 10 - 20 * 0.05 - 10 * 0.1 = 8
    assert compose_damage(ctx) == 92

    ctx = make_context(armored, attack=make_attack("Test Plated"), raw_damage=100, temp_armor_bonus=0.5)
    assert compose_damage(ctx) == 92  # 91.5 rounds half up


def test_armor_piercing_ignores_armor() -> None:
    armored = make_store(make_entity("Dummy", armor=10), make_entity("Ally", 5000))
    ctx = make_context(armored, attack=make_attack("Test Plated", armor_piercing=True), raw_damage=100)
    assert compose_damage(ctx) == 100


def test_final_damage_floored_at_one() -> None:
    armored = make_store(make_entity("Dummy", armor=50), make_entity("Ally", 5000))
    ctx = make_context(armored, attack=make_attack("Test Plated"), raw_damage=5)
    assert compose_damage(ctx) == 1


def test_immune_hit_composes_to_zero(store) -> None:
    assert compose_damage(make_context(store, raw_damage=500, immune=True)) == 0


# ----------------------------------------------------------------------
# ResolutionPipeline.run
# ----------------------------------------------------------------------
def test_plain_hit_is_committed(store) -> None:
    result = run_hit(store, raw_damage=500)

    assert result.final_damage == 500
    assert result.hp_after == 9500
    assert store.get("Dummy").hp == 9500
    assert result.deltas_for("Dummy") == [StatDelta(hp=-500)]
    assert result.defeated is False
    assert result.fired == ()


def test_lone_target_is_isolated() -> None:
    alone = make_store(make_entity("Dummy"))
    result = run_hit(alone, raw_damage=500)

    assert result.fired == ("isolated",)
    assert result.final_damage == 600


def test_stage_order_is_preserved() -> None:
    store = make_store(
        make_entity("Dummy", frail=True, max_stacks=20, abilities={ab.VAMPIRIC_SALIVA, ab.STRESS_SHELL_I}),
        make_entity("Ally", 5000),
    )
    result = run_hit(store, raw_damage=500)

    assert result.fired == ("frail", "stress_shell_i", "vampiric_saliva")
    # 1 + 0.1 - 0.2 - 0 (no vampiric stack yet)
    assert result.final_damage == 450
    assert store.get("Dummy").counter(ab.POOL_VAMPIRIC) == 1


def test_default_stage_names() -> None:
    assert [stage.name for stage in DEFAULT_STAGES] == [
        "immunity",
        "isolation-suppression",
        "weapon-triggers",
        "multipliers",
        "stacks",
        "transitions",
        "acid-pool",
        "self-consumption",
        "roster-consumption",
        "roster-utility",
        "elemental",
        "drain",
    ]
    multipliers = next(stage for stage in DEFAULT_STAGES if stage.name == "multipliers")
    assert multipliers.handlers[-1].__name__ == "mind_frenzy"


def test_custom_stages_are_honoured(store) -> None:
    calls = []

    def spy(ctx):
        calls.append(ctx.target_name)
        return None

    pipeline = ResolutionPipeline(stages=(Stage("spy", (spy,)),))
    result = pipeline.run(make_context(store, raw_damage=100))

    assert calls == ["Dummy"]
    assert result.hp_after == 9900


def test_immune_hit_keeps_side_effects_but_deals_nothing() -> None:
    store = make_store(
        make_entity("Dummy", max_stacks=20, abilities={ab.DEADLY_STRIKE, ab.VAMPIRIC_SALIVA}),
        make_entity("Ally", 5000),
    )
    result = run_hit(store, attack=make_attack(rolls=[0.0]), raw_damage=500)

    assert result.immune is True
    assert result.final_damage == 0
    assert store.get("Dummy").hp == 10000
    assert store.get("Dummy").counter(ab.POOL_VAMPIRIC) == 1
    assert result.cheat_death is None


def test_heal_batch_runs_before_damage_is_applied() -> None:
    store = make_store(
        make_entity("Dummy", hp=400, abilities={ab.POISONED_BITE}, counters={ab.POOL_TOXIN: 15}),
        make_entity("Ally", 5000),
    )
    result = run_hit(store, raw_damage=100)

    assert "poisoned_bite" in result.fired
    assert result.hp_after == 450


def test_heal_batch_skipped_on_lethal_hit() -> None:
    store = make_store(
        make_entity("Dummy", hp=400, abilities={ab.POISONED_BITE}, counters={ab.POOL_TOXIN: 15}),
        make_entity("Ally", 5000),
    )
    result = run_hit(store, raw_damage=500)

    assert "poisoned_bite" not in result.fired
    assert result.hp_after == 0
    assert result.defeated is True
    assert store.alive_names() == ["Ally"]


def test_cheat_death_priority() -> None:
    store = make_store(
        make_entity(
            "Dummy",
            hp=1,
            abilities={ab.SURVIVAL_INSTINCT_I, ab.SURVIVAL_INSTINCT_II, ab.REVIVAL},
        ),
        make_entity("Ally", 5000),
    )
    result = run_hit(store, raw_damage=500)
    dummy = store.get("Dummy")

    assert result.cheat_death == "survival-instinct-i"
    assert result.hp_after == 3001
    assert result.defeated is False
    assert dummy.abilities == {ab.SURVIVAL_INSTINCT_II, ab.REVIVAL}

    second = run_hit(store, raw_damage=5000)
    assert second.cheat_death == "survival-instinct-ii"
    assert store.get("Dummy").hp == 8001


def test_revival_restores_energy_and_grants_forge() -> None:
    store = make_store(
        make_entity("Dummy", hp=1, max_energy=1000, energy=0, abilities={ab.REVIVAL}),
        make_entity("Ally", 5000),
    )
    result = run_hit(store, raw_damage=500)
    dummy = store.get("Dummy")

    assert result.cheat_death == "revival"
    assert dummy.hp == 6001
    assert dummy.energy == 1000
    assert dummy.abilities == {ab.PSYCHIC_FORGE}


def test_cold_adaptation_scenario() -> None:
    store = make_store(
        make_entity("Dummy", tags={ab.TAG_HEAT_AVERSE}, abilities={ab.COLD_ADAPTATION}, cold_layers=5),
        make_entity("Ally", 5000),
    )
    result = run_hit(store, attack=make_attack("Test Cryo"), raw_damage=100)
    dummy = store.get("Dummy")

    assert result.immune is True
    assert result.final_damage == 0
    assert dummy.hp == 10000
    assert dummy.cold_layers == 0


def test_cold_exposure_turns_entity_heat_averse() -> None:
    store = make_store(
        make_entity("Dummy", abilities={ab.COLD_ADAPTATION}, counters={ab.POOL_COLD_EXPOSURE: 9}),
        make_entity("Ally", 5000),
    )
    result = run_hit(store, attack=make_attack("Test Cryo"), raw_damage=100)
    dummy = store.get("Dummy")

    assert result.immune is False
    assert ab.TAG_HEAT_AVERSE in dummy.tags
    assert dummy.counter(ab.POOL_COLD_EXPOSURE) == 10
    assert dummy.cold_layers == 1


def test_unknown_target_raises(store) -> None:
    with pytest.raises(UnknownEntityError):
        run_hit(store, target="Nobody")


def test_defeated_target_is_rejected() -> None:
    store = make_store(
        make_entity("Dummy", hp=0, alive=False, abilities={ab.FROST_EVOLUTION}),
        make_entity("Ally", 5000),
    )

    with pytest.raises(InvalidStatStateError):
        run_hit(store, attack=make_attack("Test Cryo"), raw_damage=100)

    dummy = store.get("Dummy")
    assert dummy.hp == 0
    assert dummy.alive is False
