"""Test the working-temperature search and plan B corrections.

Key tests:
- Classic recipe: optimum near 29.5°C in the optimal band, no plan B.
- Flour greatly in excess: too-stiff with a positive liquid correction
  (Scenario 4).
- Sticky dough: flour correction clamped to the operator-practical range.
- Krieger–Dougherty inversion round-trips through the forward relation.
"""

from __future__ import annotations

import math
from dataclasses import replace

import pytest

from medovik.constants import DEFAULT_CONSTANTS
from medovik.optimizer import (
    band_to_status,
    clamp_flour_delta,
    classify_band,
    crack_risk,
    estimate_total_volume,
    evaluate_at_temperature,
    find_optimal_work_plan,
    invert_krieger_dougherty,
    liquid_to_target_hydration,
    operational_override,
    stickiness_risk,
    work_cost,
)
from medovik.recipe import Recipe
from medovik.viscosity import evaluate_dough, krieger_dougherty

CLASSIC = {"flour": 500, "butter": 120, "sugar": 150, "honey": 155, "eggs": 95, "soda": 5}


class TestBands:

    @pytest.mark.parametrize("eta, band", [
        (6999, "too-wet"),
        (7000, "sticky"),
        (11999, "sticky"),
        (12000, "optimal"),
        (20000, "optimal"),
        (20001, "stiff"),
        (30000, "stiff"),
        (30001, "too-stiff"),
        (0, "unknown"),
        (-5, "unknown"),
        (float("nan"), "unknown"),
        (float("inf"), "unknown"),
    ])
    def test_classify(self, eta, band):
        assert classify_band(eta) == band

    def test_status(self):
        assert band_to_status("optimal") == "GO"
        assert band_to_status("sticky") == "WAIT"
        assert band_to_status("stiff") == "WAIT"
        assert band_to_status("too-wet") == "STOP"
        assert band_to_status("too-stiff") == "STOP"
        assert band_to_status("unknown") == "WAIT"


def test_classic_plan_optimal():
    plan = find_optimal_work_plan(CLASSIC)
    a = plan.plan_a
    assert a.band == "optimal"
    assert abs(a.optimal_temp_c - 29.5) <= 1.0
    assert 12000 <= a.eta_at_optimal <= 20000
    assert plan.plan_b is None
    assert not plan.override_applied
    assert not plan.caramelization
    assert a.actions


def test_nan_egg_temperature_warns_once(caplog):
    with caplog.at_level("WARNING", logger="medovik.viscosity"):
        plan = find_optimal_work_plan(CLASSIC, egg_temp_c=float("nan"))
    warnings = [r for r in caplog.records if "egg temperature" in r.getMessage()]
    assert len(warnings) == 1
    assert plan == find_optimal_work_plan(CLASSIC, egg_temp_c=20.0)


def test_refinement_never_worse_than_grid():
    """Best cost over the 0.5°C grid is an upper bound for the result."""
    grid_best = min(
        work_cost(evaluate_dough(CLASSIC, 18.0 + 0.5 * k)) for k in range(55)
    )
    plan = find_optimal_work_plan(CLASSIC)
    assert plan.cost <= grid_best + 1e-12


def test_excess_flour_too_stiff_with_liquid():
    """Scenario 4: 1500 g flour drives φ_eff up; hydration ≈ 7.9%."""
    plan = find_optimal_work_plan({**CLASSIC, "flour": 1500})
    assert plan.plan_a.band == "too-stiff"
    assert plan.plan_a.optimal_temp_c == pytest.approx(45.0)
    assert plan.plan_b is not None
    # (0.24·1500 - 118.35) / 0.9 ≈ 268.5 mL
    assert 265 <= plan.plan_b.delta_liquid_ml <= 272
    assert plan.plan_b.delta_flour_g is None
    assert plan.plan_b.suggested_temp_c == pytest.approx(45.0)


def test_stiff_liquid_correction():
    plan = find_optimal_work_plan({**CLASSIC, "flour": 700})
    assert plan.plan_a.band == "too-stiff"
    # (0.24·700 - 118.35) / 0.9 ≈ 55.2 mL
    assert plan.plan_b.delta_liquid_ml == 55


def test_sticky_flour_correction():
    """400 g flour: hydration ≈ 29.6%, still sticky at the coolest point."""
    plan = find_optimal_work_plan({**CLASSIC, "flour": 400})
    assert plan.plan_a.band == "sticky"
    assert plan.plan_a.optimal_temp_c == pytest.approx(18.0)
    assert not plan.override_applied  # hydration above 28%
    b = plan.plan_b
    assert b is not None
    assert 10 <= b.delta_flour_g <= 48  # 12% of 400 g
    assert b.delta_liquid_ml is None
    assert b.suggested_temp_c == pytest.approx(18.0)


def test_override_flag_with_shifted_band():
    """Sticky band close to the target at ~24% hydration is flagged."""
    c = replace(DEFAULT_CONSTANTS, bands=replace(DEFAULT_CONSTANTS.bands, optimal_min=16500.0))
    plan = find_optimal_work_plan(CLASSIC, constants=c)
    assert plan.plan_a.band == "sticky"
    assert plan.override_applied


def test_override_predicate():
    assert operational_override(24.0, "sticky", 11000.0)
    assert not operational_override(24.0, "optimal", 15000.0)
    assert not operational_override(29.0, "sticky", 11000.0)
    assert not operational_override(19.9, "sticky", 11000.0)
    # |ln(6000 / 15492)| ≈ 0.95
    assert not operational_override(24.0, "sticky", 6000.0)


class TestInverse:

    def test_round_trip(self):
        eta0, f_net = 2453.0, 1.16
        phi = invert_krieger_dougherty(15492.0, eta0, f_net)
        assert 0 < phi < 0.588
        assert eta0 * krieger_dougherty(phi) * f_net == pytest.approx(15492.0, rel=1e-9)

    def test_already_above_target(self):
        assert invert_krieger_dougherty(1000.0, 2000.0, 1.0) == 0.0

    @pytest.mark.parametrize("args", [
        (float("nan"), 2000.0, 1.0),
        (15000.0, 0.0, 1.0),
        (15000.0, 2000.0, -1.0),
        (15000.0, float("inf"), 1.0),
    ])
    def test_not_derivable(self, args):
        assert invert_krieger_dougherty(*args) is None

    def test_clamped_at_ceiling(self):
        assert invert_krieger_dougherty(1e12, 1.0, 1.0) == pytest.approx(0.588)


class TestCorrections:

    def test_flour_clamp(self):
        assert clamp_flour_delta(3.2, 500) == 10
        assert clamp_flour_delta(0.2, 500) == 0
        assert clamp_flour_delta(35.4, 500) == 35
        assert clamp_flour_delta(500.0, 500) == 60  # 12% of 500 g
        assert clamp_flour_delta(500.0, 1000) == 80
        assert clamp_flour_delta(50.0, 40) == 10  # floor of the range
        assert clamp_flour_delta(float("nan"), 500) == 0

    def test_liquid_to_target(self):
        r = Recipe(flour=1000, eggs=100)
        # (240 - 75) / 0.9
        assert liquid_to_target_hydration(r) == pytest.approx(183.333, abs=1e-3)
        assert liquid_to_target_hydration(Recipe(eggs=100)) == 0.0
        assert liquid_to_target_hydration(Recipe(flour=100, eggs=100)) == 0.0

    def test_total_volume_excludes_soda(self):
        r = Recipe(**CLASSIC)
        expected = 500 / 1.55 + 150 / 1.59 + 155 / 1.42 + 120 / 0.911 + 95 / 1.031
        assert estimate_total_volume(r) == pytest.approx(expected)


class TestRisk:

    def test_stickiness(self):
        assert stickiness_risk(8000, 45) == 0.0
        assert stickiness_risk(0, 18) == 0.0
        assert stickiness_risk(0, 45) == pytest.approx(1.0)
        assert stickiness_risk(3500, 31.5) == pytest.approx(0.25)

    def test_crack(self):
        assert crack_risk(24.0, 0.40) == 0.0
        assert crack_risk(15.0, 0.40) == pytest.approx(0.5)
        assert crack_risk(15.0, 0.60) == 1.0
        assert crack_risk(float("nan"), 0.525) == pytest.approx(0.5)


def test_evaluate_at_temperature():
    d = evaluate_at_temperature(CLASSIC, 30.0)
    assert d.band == "optimal"
    assert d.hydration_pct == pytest.approx(23.7)
    assert d.temperature_c == 30.0
    assert d.components.brix == pytest.approx(90.2)
    assert math.isclose(d.eta_cp, 15193, rel_tol=0.01)
    assert d.to_dict()["components"]["brix"] == d.components.brix
