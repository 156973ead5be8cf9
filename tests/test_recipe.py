"""Test recipe value objects and heat-balance helpers."""

from __future__ import annotations

import pytest

from medovik.recipe import CaramelizationOptions, LiquidBreakdown, Recipe, as_caramelization
from medovik.thermal import liquid_specific_heat, mix_temperature
from medovik.utils import log_mix


def test_coercion():
    r = Recipe(flour="500", butter=-1, sugar=float("nan"), honey=None, eggs=float("inf"), soda=True)
    assert r.to_dict() == {"flour": 500.0, "butter": 0.0, "sugar": 0.0, "honey": 0.0, "eggs": 0.0, "soda": 1.0}


def test_from_mapping_ignores_unknown_keys():
    r = Recipe.from_mapping({"flour": 500, "milk": 100})
    assert r == Recipe(flour=500)
    with pytest.raises(TypeError):
        Recipe.from_mapping([("flour", 500)])


def test_hydration():
    r = Recipe(flour=500, butter=120, sugar=150, honey=155, eggs=95, soda=5)
    assert r.water_mass() == pytest.approx(118.35)
    assert r.hydration_pct() == pytest.approx(23.67)
    assert Recipe(eggs=100).hydration_pct() == 0.0
    assert r.liquid_mass == 430
    assert r.total_mass == 1025


def test_adjusted_returns_new_recipe():
    r = Recipe(flour=500)
    r2 = r.adjusted(flour=20, eggs=10)
    assert r.flour == 500
    assert r2.flour == 520
    assert r2.eggs == 10
    assert r.adjusted(flour=-1000).flour == 0.0
    with pytest.raises(ValueError):
        r.adjusted(milk=10)


def test_caramelization_clamp():
    opt = CaramelizationOptions(enabled=True, preheat_temp_c=200, preheat_minutes=0.5, evaporation_fraction=0.01)
    c = opt.clamped()
    assert (c.preheat_temp_c, c.preheat_minutes, c.evaporation_fraction) == (110.0, 1.5, 0.05)
    assert as_caramelization(None) == CaramelizationOptions()
    assert as_caramelization({"enabled": True}).evaporation_fraction == 0.08


@pytest.mark.parametrize(
    "raw, expected",
    [("false", False), ("False", False), ("0", False), ("", False), ("true", True), (" Yes ", True),
     (0, False), (1, True), (float("nan"), False), (None, False), (True, True)],
)
def test_caramelization_enabled_flag(raw, expected):
    assert as_caramelization({"enabled": raw}).enabled is expected
    assert CaramelizationOptions(enabled=raw).clamped().enabled is expected


def test_liquid_specific_heat():
    assert liquid_specific_heat(None) == 2.4
    assert liquid_specific_heat(LiquidBreakdown()) == 2.4
    assert liquid_specific_heat(LiquidBreakdown(butter=100, sugar=100)) == pytest.approx((2.1 + 1.25) / 2)


def test_mix_temperature():
    assert mix_temperature(100, 3.3, 20, 100, 3.3, 80) == pytest.approx(50.0)
    # zero heat capacity on both sides stays finite
    assert mix_temperature(0, 3.3, 20, 0, 2.4, 90) == 0.0


def test_log_mix():
    assert log_mix(100.0, 10.0, 1.0, 0.0) == pytest.approx(100.0)
    assert log_mix(100.0, 1.0, 1.0, 1.0) == pytest.approx(10.0)
    assert log_mix(0.5, 0.5, 0.0, 0.0) == pytest.approx(1.0)
