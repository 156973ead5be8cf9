"""Raw dough density for scaling.

Uncalibrated estimate from true component densities inflated by trapped air:

    ρ = m_total / (V_solid / (1 - air)),   clamped to [1.15, 1.35] g/cm³

A measured (calibrated) density is passed in explicitly by the caller; the
engine keeps no calibration state of its own.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import Any, Mapping

from .constants import DEFAULT_CONSTANTS, PhysicalConstants
from .recipe import Recipe, as_recipe
from .utils import clamp, is_finite_number

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DensityCalibration:
    density: float
    volume_cm3: float
    measured_density: float

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class DensityCalibrationError:
    code: str

    def to_dict(self) -> dict[str, Any]:
        return {"error": {"code": self.code}}


def clamp_dough_density(value: float, constants: PhysicalConstants = DEFAULT_CONSTANTS) -> float:
    d = constants.density
    return clamp(value, d.clamp_min, d.clamp_max)


def effective_density(
    recipe: Recipe | Mapping[str, Any],
    *,
    air_factor: float | None = None,
    calibrated_density: float | None = None,
    constants: PhysicalConstants = DEFAULT_CONSTANTS,
) -> float:
    """Dough density (g/cm³); a calibrated value wins when it is usable."""
    d = constants.density
    if calibrated_density is not None:
        if is_finite_number(calibrated_density) and 1.0 < float(calibrated_density) < 2.0:
            return clamp_dough_density(float(calibrated_density), constants)
        logger.warning("ignoring calibrated density %r outside (1, 2) g/cm³", calibrated_density)

    r = as_recipe(recipe)
    td = constants.densities
    total = r.total_mass
    if total <= 0:
        return d.average

    solid_volume = (
        r.flour / td.flour
        + r.sugar / td.sugar
        + r.honey / td.honey
        + r.butter / td.butter
        + r.eggs / td.eggs
        + r.soda / td.soda
    )
    air = d.air_factor
    if air_factor is not None:
        if is_finite_number(air_factor):
            air = float(air_factor)
        else:
            logger.warning("ignoring air factor %r, using %g", air_factor, d.air_factor)
    if solid_volume <= 0 or not 0.0 <= air < 1.0:
        return d.average
    return clamp_dough_density(total / (solid_volume / (1.0 - air)), constants)


def calibrate_density(
    measured_mass_g: float,
    pan_area_cm2: float,
    thickness_mm: float,
    *,
    constants: PhysicalConstants = DEFAULT_CONSTANTS,
) -> DensityCalibration | DensityCalibrationError:
    """Density from a rolled layer of known mass, area and thickness.

    Returns a DensityCalibrationError (INVALID_INPUT / INVALID_AREA) instead
    of raising for degenerate geometry.
    """
    for v in (measured_mass_g, thickness_mm, pan_area_cm2):
        if not is_finite_number(v):
            return DensityCalibrationError("INVALID_INPUT")
    if float(measured_mass_g) <= 0 or float(thickness_mm) <= 0:
        return DensityCalibrationError("INVALID_INPUT")
    if float(pan_area_cm2) <= 0:
        return DensityCalibrationError("INVALID_AREA")

    volume = float(pan_area_cm2) * float(thickness_mm) / 10.0
    measured = float(measured_mass_g) / volume
    return DensityCalibration(
        density=round(clamp_dough_density(measured, constants), 3),
        volume_cm3=volume,
        measured_density=measured,
    )
