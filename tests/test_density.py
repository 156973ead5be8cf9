"""Test dough density estimation and calibration."""

from __future__ import annotations

import pytest

from medovik.density import (
    DensityCalibration,
    DensityCalibrationError,
    calibrate_density,
    effective_density,
)

CLASSIC = {"flour": 500, "butter": 120, "sugar": 150, "honey": 155, "eggs": 95, "soda": 5}


def test_effective_density_classic():
    """1025 g over ≈752.3 cm³ of solids, 3% air → ≈1.322 g/cm³."""
    solid = 500 / 1.55 + 150 / 1.59 + 155 / 1.42 + 120 / 0.911 + 95 / 1.031 + 5 / 2.159
    expected = 1025 / (solid / 0.97)
    assert effective_density(CLASSIC) == pytest.approx(expected)
    assert 1.15 <= expected <= 1.35


def test_empty_recipe_uses_average():
    assert effective_density({}) == 1.25


def test_clamped_range():
    assert effective_density({"sugar": 1000}) == 1.35
    assert effective_density({"butter": 1000}) == 1.15


def test_air_factor_lowers_density():
    assert effective_density(CLASSIC, air_factor=0.10) < effective_density(CLASSIC)


@pytest.mark.parametrize("air", ["lots", float("nan"), float("inf"), [0.05], True])
def test_unusable_air_factor_uses_default(air, caplog):
    with caplog.at_level("WARNING", logger="medovik.density"):
        assert effective_density(CLASSIC, air_factor=air) == effective_density(CLASSIC)
    assert "air factor" in caplog.text


def test_calibrated_density_is_explicit():
    assert effective_density(CLASSIC, calibrated_density=1.28) == 1.28
    assert effective_density(CLASSIC, calibrated_density=1.5) == 1.35
    # unusable calibration falls back to the estimate
    assert effective_density(CLASSIC, calibrated_density=2.5) == effective_density(CLASSIC)
    assert effective_density(CLASSIC, calibrated_density=float("nan")) == effective_density(CLASSIC)


class TestCalibration:

    def test_valid(self):
        # 400 cm² · 1.0 cm = 400 cm³
        cal = calibrate_density(500, 400, 10)
        assert isinstance(cal, DensityCalibration)
        assert cal.volume_cm3 == pytest.approx(400.0)
        assert cal.density == 1.25

    def test_clamped(self):
        cal = calibrate_density(1000, 400, 10)
        assert cal.measured_density == pytest.approx(2.5)
        assert cal.density == 1.35

    @pytest.mark.parametrize("area", [0, -100])
    def test_degenerate_area(self, area):
        err = calibrate_density(500, area, 10)
        assert isinstance(err, DensityCalibrationError)
        assert err.code == "INVALID_AREA"

    @pytest.mark.parametrize("args", [
        (0, 400, 10),
        (500, 400, 0),
        (float("nan"), 400, 10),
        (500, float("inf"), 10),
        ("heavy", 400, 10),
    ])
    def test_invalid_input(self, args):
        err = calibrate_density(*args)
        assert err.code == "INVALID_INPUT"
        assert err.to_dict() == {"error": {"code": "INVALID_INPUT"}}
