"""Test multi-batch tempering.

Key tests:
- Batch percentages sum to exactly 100.00 for every N in [2, 10].
- Heat is conserved at every bulk mix.
- 3 batches of 90°C liquid into 200 g egg overheat the contact zone;
  6 batches stay materially cooler (Scenario 2).
- Validation returns every violated field instead of raising.
"""

from __future__ import annotations

from fractions import Fraction

import pytest

from medovik.recipe import LiquidBreakdown
from medovik.tempering import (
    TemperingBatchPlan,
    TemperingValidationError,
    batch_distribution,
    batch_distribution_hundredths,
    max_hot_mass_for_target,
    max_hot_temp_for_target,
    needed_egg_increase,
    safety_status,
    simulate_tempering,
)


@pytest.mark.parametrize("n", range(2, 11))
def test_batch_sum_exact(n):
    pcts = batch_distribution(n)
    assert len(pcts) == n
    assert sum(Fraction(str(p)) for p in pcts) == 100
    # every entry is a whole number of hundredths
    assert all((Fraction(str(p)) * 100).denominator == 1 for p in pcts)


@pytest.mark.parametrize("n", range(2, 11))
def test_batch_hundredths_sum_to_whole(n):
    cents = batch_distribution_hundredths(n)
    assert sum(cents) == 10000
    assert all(isinstance(c, int) for c in cents)
    assert tuple(c / 100.0 for c in cents) == batch_distribution(n)


def test_batch_schedules():
    assert batch_distribution(2) == (40.0, 60.0)
    assert batch_distribution(3) == (27.59, 34.48, 37.93)
    assert batch_distribution(6) == (13.56, 16.95, 16.95, 16.95, 16.95, 18.64)


@pytest.mark.parametrize("n", range(3, 11))
def test_first_batch_lightest_last_heaviest(n):
    pcts = batch_distribution(n)
    assert pcts[0] == min(pcts)
    assert pcts[-1] == max(pcts)


def test_three_batches_danger_six_batches_cooler():
    """Scenario 2: 200 g egg at 20°C, 300 g liquid at 90°C (Cp fallback 2.4).

    Contact-zone peaks (ψ = 0.2):
      N=3: 62.05, 68.00, 71.31  → danger
      N=6: 49.76 ... 65.90      → warning
    Bulk end point is 56.52°C either way.
    """
    p3 = simulate_tempering(200, 20, 300, 90, 3)
    p6 = simulate_tempering(200, 20, 300, 90, 6)
    assert isinstance(p3, TemperingBatchPlan)
    assert isinstance(p6, TemperingBatchPlan)

    assert p3.max_batch_temp_c > 68.0
    assert p3.max_batch_temp_c == pytest.approx(71.31, abs=0.01)
    assert p3.safety_status == "danger"
    assert p3.critical_batch_index == 3

    assert p6.max_batch_temp_c == pytest.approx(65.90, abs=0.01)
    assert p6.safety_status == "warning"
    assert p3.max_batch_temp_c - p6.max_batch_temp_c > 5.0

    for plan in (p3, p6):
        assert plan.final_temp_c == pytest.approx(56.52, abs=0.01)
        assert plan.egg_limit_c == 68.0
        assert plan.liquid_specific_heat == 2.4


def test_ten_batches_safe():
    plan = simulate_tempering(200, 20, 300, 90, 10)
    assert plan.safety_status == "safe"
    assert plan.max_batch_temp_c < 65.0


def test_bulk_temperatures_chain():
    plan = simulate_tempering(200, 20, 300, 90, 3)
    temps = [(b.temp_before_c, b.temp_after_c) for b in plan.batches]
    assert temps[0][0] == 20.0
    for (_, after), (before, _) in zip(temps, temps[1:]):
        assert before == after
    assert [b.batch_number for b in plan.batches] == [1, 2, 3]
    assert all(b.peak_temp_c >= b.temp_after_c for b in plan.batches)
    assert sum(b.batch_mass_g for b in plan.batches) == pytest.approx(300.0)


@pytest.mark.parametrize("n", [2, 3, 5, 7, 10])
def test_heat_conserved_each_batch(n):
    """Σ m·c·T immediately before and after each bulk mix is equal."""
    breakdown = LiquidBreakdown(butter=120, sugar=150, honey=155, soda=5)
    plan = simulate_tempering(95, 18, 430, 95, n, breakdown)
    c_egg = 3.3
    c_liq = plan.liquid_specific_heat
    assert c_liq == pytest.approx(785 / 430)

    capacity = 95 * c_egg
    for b in plan.batches:
        before = capacity * b.temp_before_c + b.batch_mass_g * c_liq * 95
        after = (capacity + b.batch_mass_g * c_liq) * b.temp_after_c
        assert after == pytest.approx(before, rel=1e-12)
        capacity += b.batch_mass_g * c_liq


def test_breakdown_changes_specific_heat():
    honey_only = simulate_tempering(200, 20, 300, 90, 4, LiquidBreakdown(honey=300))
    empty = simulate_tempering(200, 20, 300, 90, 4, LiquidBreakdown())
    assert honey_only.liquid_specific_heat == pytest.approx(2.2)
    assert empty.liquid_specific_heat == 2.4


class TestValidation:
    """Structured errors, never exceptions."""

    def test_all_fields_reported(self):
        err = simulate_tempering(0, 40, 10000, 30, 1)
        assert isinstance(err, TemperingValidationError)
        assert err.codes == (
            "EGG_MASS_INVALID",
            "EGG_TEMP_INVALID",
            "LIQUID_MASS_INVALID",
            "LIQUID_TEMP_INVALID",
            "BATCH_COUNT_INVALID",
        )
        d = err.to_dict()
        assert d["code"] == "VALIDATION_FAILED"
        assert d["violations"][0]["range"] == [1.0, 1000.0]

    def test_single_field(self):
        err = simulate_tempering(200, 20, 300, 130, 3)
        assert isinstance(err, TemperingValidationError)
        assert err.codes == ("LIQUID_TEMP_INVALID",)

    @pytest.mark.parametrize("bad", [float("nan"), float("inf"), None, "200", True])
    def test_non_numeric_egg_mass(self, bad):
        err = simulate_tempering(bad, 20, 300, 90, 3)
        assert isinstance(err, TemperingValidationError)
        assert err.codes == ("EGG_MASS_INVALID",)

    def test_fractional_batch_count(self):
        err = simulate_tempering(200, 20, 300, 90, 3.5)
        assert err.codes == ("BATCH_COUNT_INVALID",)

    def test_range_edges_accepted(self):
        assert isinstance(simulate_tempering(1, 0, 1, 60, 2), TemperingBatchPlan)
        assert isinstance(simulate_tempering(1000, 30, 5000, 120, 10), TemperingBatchPlan)


def test_safety_thresholds():
    assert safety_status(68.01) == "danger"
    assert safety_status(68.0) == "warning"
    assert safety_status(65.01) == "warning"
    assert safety_status(65.0) == "safe"


class TestHelpers:
    """Single-pour closed-form heat balance (egg Cp 3.3, liquid Cp 2.4)."""

    def test_max_hot_mass(self):
        # 200·3.3·(60-20) / (2.4·(90-60)) = 366.67 g
        assert max_hot_mass_for_target(200, 20, 90, 60) == pytest.approx(366.667, abs=1e-3)
        assert max_hot_mass_for_target(200, 20, 50, 60) is None
        assert max_hot_mass_for_target(200, 20, 90, 15) == 0.0

    def test_max_hot_temp(self):
        # (60·(660 + 720) - 660·20) / 720 = 96.67°C
        assert max_hot_temp_for_target(200, 20, 300, 60) == pytest.approx(96.667, abs=1e-3)
        assert max_hot_temp_for_target(200, 20, 0, 60) is None
        assert max_hot_temp_for_target(200, 20, 300, 10) == 20

    def test_needed_egg_increase(self):
        # 300·2.4·(90-50) / (3.3·(50-20)) = 290.91 g needed → +90.91 g
        assert needed_egg_increase(200, 20, 300, 90, 50) == pytest.approx(90.909, abs=1e-3)
        assert needed_egg_increase(400, 20, 300, 90, 50) == 0.0
        assert needed_egg_increase(200, 20, 300, 40, 50) == 0.0

    def test_cp_override(self):
        assert max_hot_mass_for_target(200, 20, 90, 60, liquid_cp=3.3) == pytest.approx(
            200 * 40 / 30
        )

    def test_consistent_with_bulk_mix(self):
        m = max_hot_mass_for_target(200, 20, 90, 60)
        plan = simulate_tempering(200, 20, m, 90, 2)
        assert plan.final_temp_c == pytest.approx(60.0)
