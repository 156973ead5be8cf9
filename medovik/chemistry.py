"""Water activity, composition Brix and pH estimates for a dough recipe.

Water activity uses a Norrish-like relation on the same water pools and
sugar mass the viscosity chain works with:

    n_w = W / 18.015,  n_s = (sucrose + 0.82·honey) / 342.296
    x_w = n_w / (n_w + n_s),  x_s = 1 - x_w
    a_w = x_w / (x_w + k·x_s),  k = 1.4,  clamped to [0.3, 1]

When there is neither water nor sugar, a crude mass-fraction estimate is used
instead. pH mixes [H+] weighted by mass and buffer capacity:

    pH = -log10( Σ w_i(1 + 100·β_i)·10^(-pH_i) / Σ w_i(1 + 100·β_i) )

All three are empirical indicators, reported with band codes.
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from typing import Any, Mapping

from .constants import DEFAULT_CONSTANTS, PhysicalConstants
from .recipe import INGREDIENTS, Recipe, as_recipe
from .utils import clamp, safe_div


@dataclass(frozen=True)
class WaterActivity:
    value: float
    band: str
    model: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class BrixEstimate:
    value: float
    band: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class PHEstimate:
    value: float
    band: str
    safety: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


# =============================================================================
# Water activity
# =============================================================================
def water_activity_band(aw: float) -> str:
    if aw > 0.95:
        return "high"
    if aw > 0.90:
        return "medium"
    if aw > 0.85:
        return "low"
    return "very-low"


def estimate_water_activity_crude(
    recipe: Recipe | Mapping[str, Any],
    constants: PhysicalConstants = DEFAULT_CONSTANTS,
) -> WaterActivity:
    """Mole-fraction proxy from per-ingredient water content and dissolved sugars."""
    r = as_recipe(recipe)
    c = constants.chemistry
    if r.total_mass <= 0:
        return WaterActivity(value=0.0, band="unknown", model="crude")

    water = sum(getattr(r, ing) * frac for ing, frac in c.water_content)
    solutes = (r.sugar + r.honey) * c.solute_fraction
    x_w = safe_div(water, water + solutes * c.solute_mole_factor)
    aw = clamp(x_w * c.crude_aw_scale, c.aw_min, c.aw_max)
    return WaterActivity(value=round(aw, 3), band=water_activity_band(aw), model="crude")


def estimate_water_activity(
    recipe: Recipe | Mapping[str, Any],
    *,
    constants: PhysicalConstants = DEFAULT_CONSTANTS,
) -> WaterActivity:
    """Norrish-like water activity of the dough's aqueous phase.

    Example:
        >>> estimate_water_activity({"flour": 500, "butter": 120, "sugar": 150,
        ...                          "honey": 155, "eggs": 95}).band
        'low'
    """
    r = as_recipe(recipe)
    c = constants.chemistry
    n_w = r.water_mass(constants) / c.molar_mass_water
    sucrose = r.sugar + constants.viscosity.honey_invert_fraction * r.honey
    n_s = sucrose / c.molar_mass_sucrose
    if n_w + n_s <= 0:
        return estimate_water_activity_crude(r, constants)

    x_w = n_w / (n_w + n_s)
    x_s = n_s / (n_w + n_s)
    aw = clamp(safe_div(x_w, x_w + c.norrish_k * x_s), c.aw_min, c.aw_max)
    return WaterActivity(value=round(aw, 3), band=water_activity_band(aw), model="norrish")


# =============================================================================
# Composition Brix
# =============================================================================
def _brix_band(brix: float, is_dough: bool) -> str:
    if is_dough:
        edges = ((25.0, "low"), (35.0, "ideal"), (45.0, "high"))
        last = "very-high"
    else:
        edges = ((10.0, "low"), (15.0, "mid-low"), (25.0, "mid"), (35.0, "high"), (45.0, "very-high"))
        last = "extreme"
    for edge, band in edges:
        if brix < edge:
            return band
    return last


def estimate_brix(
    recipe: Recipe | Mapping[str, Any],
    *,
    is_dough: bool = True,
    constants: PhysicalConstants = DEFAULT_CONSTANTS,
) -> BrixEstimate:
    """Sugar share of the whole recipe (%), banded for dough or filling."""
    r = as_recipe(recipe)
    total = r.total_mass
    if total <= 0:
        return BrixEstimate(value=0.0, band="unknown")
    sugar = sum(getattr(r, ing) * frac for ing, frac in constants.chemistry.sugar_content)
    brix = sugar / total * 100.0
    return BrixEstimate(value=round(brix, 1), band=_brix_band(brix, is_dough))


# =============================================================================
# pH
# =============================================================================
def ph_band(ph: float, constants: PhysicalConstants = DEFAULT_CONSTANTS) -> str:
    if ph < 4.0:
        return "very-acid"
    if ph < constants.chemistry.acid_safety_ph:
        return "acid"
    if ph < 6.0:
        return "near-neutral"
    if ph < 7.5:
        return "neutral"
    return "alkaline"


_PH_SAFETY = {"near-neutral": "warning", "alkaline": "danger"}


def estimate_ph(
    recipe: Recipe | Mapping[str, Any],
    *,
    constants: PhysicalConstants = DEFAULT_CONSTANTS,
) -> PHEstimate:
    """Buffer-weighted pH, clamped to [3, 9], with a band and a safety code."""
    r = as_recipe(recipe)
    c = constants.chemistry
    ph_ref = dict(c.ph_ref)
    buffers = dict(c.buffer_capacity)

    h_sum = 0.0
    w_sum = 0.0
    for ing in INGREDIENTS:
        w = getattr(r, ing)
        if w <= 0:
            continue
        w_eff = w * (1.0 + buffers[ing] * 100.0)
        h_sum += w_eff * 10.0 ** (-ph_ref[ing])
        w_sum += w_eff

    if w_sum <= 0:
        return PHEstimate(value=7.0, band="neutral", safety="safe")

    ph = clamp(-math.log10(h_sum / w_sum), c.ph_min, c.ph_max)
    band = ph_band(ph, constants)
    return PHEstimate(value=round(ph, 2), band=band, safety=_PH_SAFETY.get(band, "safe"))
