"""Test water activity, composition Brix and pH estimates.

Key tests:
- Classic Medovik: a_w ≈ 0.853 (Norrish-like, band low), Brix 27.6 (ideal),
  pH ≈ 4.85 (honey dominated, near-neutral → warning).
- Recipes without water or sugar fall back to the crude a_w estimate.
- pH band and safety codes across acid, neutral and alkaline mixes.
"""

from __future__ import annotations

import json

import pytest

from medovik.chemistry import (
    estimate_brix,
    estimate_ph,
    estimate_water_activity,
    estimate_water_activity_crude,
    water_activity_band,
)
from medovik.recipe import Recipe

CLASSIC = {"flour": 500, "butter": 120, "sugar": 150, "honey": 155, "eggs": 95, "soda": 5}


class TestWaterActivity:

    def test_classic(self):
        """W = 118.35 g, sucrose = 150 + 0.82·155 = 277.1 g → a_w ≈ 0.8529."""
        aw = estimate_water_activity(CLASSIC)
        assert aw.model == "norrish"
        assert aw.value == pytest.approx(0.853, abs=1e-3)
        assert aw.band == "low"

    def test_more_sugar_lowers_aw(self):
        base = estimate_water_activity(CLASSIC).value
        sweeter = estimate_water_activity({**CLASSIC, "sugar": 300}).value
        wetter = estimate_water_activity({**CLASSIC, "eggs": 200}).value
        assert sweeter < base < wetter

    def test_clamped_to_floor(self):
        aw = estimate_water_activity({"sugar": 1000, "butter": 1})
        assert aw.value == 0.3
        assert aw.band == "very-low"

    def test_water_only_is_one(self):
        aw = estimate_water_activity({"eggs": 100})
        assert aw.value == 1.0
        assert aw.band == "high"

    def test_crude_fallback_without_water_or_sugar(self):
        aw = estimate_water_activity({"flour": 500})
        assert aw.model == "crude"
        # 60 g water from flour, no solutes → 0.99
        assert aw.value == pytest.approx(0.99)
        assert aw.band == "high"

    def test_crude_edge_cases(self):
        assert estimate_water_activity_crude({}).band == "unknown"
        assert estimate_water_activity({}).value == 0.0
        soda_only = estimate_water_activity({"soda": 5})
        assert soda_only.value == 0.3
        assert soda_only.band == "very-low"

    @pytest.mark.parametrize("aw, band", [(0.99, "high"), (0.95, "medium"), (0.91, "medium"),
                                          (0.90, "low"), (0.86, "low"), (0.85, "very-low")])
    def test_bands(self, aw, band):
        assert water_activity_band(aw) == band


class TestBrix:

    def test_classic_dough(self):
        b = estimate_brix(CLASSIC)
        assert b.value == pytest.approx(27.6)
        assert b.band == "ideal"

    def test_filling_bands(self):
        assert estimate_brix(CLASSIC, is_dough=False).band == "high"
        assert estimate_brix({"flour": 100}, is_dough=False).band == "low"
        assert estimate_brix({"sugar": 100}, is_dough=False).band == "extreme"

    def test_empty(self):
        b = estimate_brix(Recipe())
        assert (b.value, b.band) == (0.0, "unknown")


class TestPH:

    def test_classic_honey_dominated(self):
        ph = estimate_ph(CLASSIC)
        assert ph.value == pytest.approx(4.85, abs=0.01)
        assert ph.band == "near-neutral"
        assert ph.safety == "warning"

    @pytest.mark.parametrize("recipe, value, band, safety", [
        ({"flour": 500, "honey": 500}, 4.25, "acid", "safe"),
        ({"honey": 100}, 3.9, "very-acid", "safe"),
        ({"eggs": 100, "soda": 10}, 7.61, "alkaline", "danger"),
        ({"flour": 100}, 6.5, "neutral", "safe"),
    ])
    def test_bands(self, recipe, value, band, safety):
        ph = estimate_ph(recipe)
        assert ph.value == pytest.approx(value, abs=0.01)
        assert (ph.band, ph.safety) == (band, safety)

    def test_empty_is_neutral(self):
        ph = estimate_ph({})
        assert (ph.value, ph.band, ph.safety) == (7.0, "neutral", "safe")


def test_serializable():
    for result in (estimate_water_activity(CLASSIC), estimate_brix(CLASSIC), estimate_ph(CLASSIC)):
        json.dumps(result.to_dict())
