"""Dough viscosity from recipe composition and process temperature.

Three chained phases, each combining an aqueous and a fat viscosity by
volume-fraction log-mixing:

    1. syrup     butter + sugar + honey, optional caramelization
    2. emulsion  eggs tempered into the liquid; shifts the temperature to T_emul
                 and tightens the mix by K_egg ∈ [1.05, 1.15]
    3. dough     flour binds water; Krieger–Dougherty packing correction and a
                 hydration-centred network factor:

    η_rel = max(0.05, 1 - φ_eff/φ_max)^(-[η]·φ_max)
    F_net = 1 + β·netStrength
    η     = min(η_cap, η0_dough · η_rel · F_net)

All intermediate values stay unrounded; rounding happens only when a
ViscosityResult is built.
"""

from __future__ import annotations

import logging
import math
from dataclasses import asdict, dataclass
from typing import Any, Mapping

import numpy as np

from .constants import DEFAULT_CONSTANTS, PhysicalConstants
from .phases import (
    CaramelizationEffect,
    SugarWaterBalance,
    WaterPools,
    aqueous_viscosity,
    fat_viscosity,
    sugar_water_balance,
    syrup_viscosity_25,
    syrup_water_pools,
)
from .recipe import CaramelizationOptions, Recipe, as_caramelization, as_recipe
from .thermal import liquid_specific_heat, mix_temperature
from .utils import clamp, is_finite_number, log_mix, safe_div

logger = logging.getLogger(__name__)


# =============================================================================
# Result types
# =============================================================================
@dataclass(frozen=True)
class ViscosityComponents:
    brix: float
    hydration_pct: float
    packing_fraction: float
    packing_fraction_effective: float
    relative_viscosity: float
    network_factor: float
    eta0_syrup: int
    eta0_emulsion: int
    egg_tightening: float
    eta0_dough: int

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class WorkTarget:
    """Temperature in the classic work window nearest the band midpoint."""

    optimal_temp_c: float
    eta_at_optimal: int
    target_range_cp: tuple[float, float]

    def to_dict(self) -> dict[str, Any]:
        lo, hi = self.target_range_cp
        return {
            "optimal_temp_c": self.optimal_temp_c,
            "eta_at_optimal": self.eta_at_optimal,
            "target_range_cp": {"min": lo, "max": hi},
        }


@dataclass(frozen=True)
class PhaseTrace:
    syrup_brix: float
    syrup_free_water: float
    emulsion_temp_c: float
    eta_aq_emulsion: int
    eta_fat_emulsion: int
    eta0_after_eggs: int
    dough_brix: float
    dough_free_water: float
    eta_aq_dough: int
    eta_fat_dough: int
    caramelization: CaramelizationEffect

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        d["caramelization"] = self.caramelization.to_dict()
        return d


@dataclass(frozen=True)
class ViscosityResult:
    value_cp: int
    temperature_c: float
    components: ViscosityComponents
    work_target: WorkTarget
    trace: PhaseTrace | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "value_cp": self.value_cp,
            "temperature_c": self.temperature_c,
            "components": self.components.to_dict(),
            "work_target": self.work_target.to_dict(),
            "trace": None if self.trace is None else self.trace.to_dict(),
        }


@dataclass(frozen=True)
class DoughState:
    """Unrounded state of the dough phase at one process temperature."""

    temperature_c: float
    emulsion_temp_c: float
    viscosity: float
    hydration_pct: float
    packing_fraction: float
    packing_fraction_effective: float
    relative_viscosity: float
    network_factor: float
    eta0_syrup: float
    eta0_emulsion: float
    egg_tightening: float
    eta0_after_eggs: float
    eta0_dough: float
    fat_fraction: float
    sugar_fraction: float
    vol_aqueous: float
    vol_fat: float
    syrup: SugarWaterBalance
    dough: SugarWaterBalance
    eta_aq_emulsion: float
    eta_fat_emulsion: float
    eta_aq_dough: float
    eta_fat_dough: float
    caramelization: CaramelizationEffect

    @property
    def brix(self) -> float:
        return self.dough.brix


# =============================================================================
# Input handling
# =============================================================================
def sanitize_temperature(
    value: Any,
    fallback: float,
    name: str = "temperature",
    constants: PhysicalConstants = DEFAULT_CONSTANTS,
) -> float:
    """Finite temperature within [t_floor, t_ceiling]; NaN/inf/non-numeric -> fallback."""
    if not is_finite_number(value):
        logger.warning("non-finite %s %r, using %.1f°C", name, value, fallback)
        return fallback
    p = constants.viscosity
    T = float(value)
    if not p.t_floor <= T <= p.t_ceiling:
        T_clamped = clamp(T, p.t_floor, p.t_ceiling)
        logger.warning("%s %r outside [%g, %g]°C, using %.2f°C", name, value, p.t_floor, p.t_ceiling, T_clamped)
        return T_clamped
    return T


# =============================================================================
# Phase chain
# =============================================================================
def _network_factor(
    recipe: Recipe,
    brix: float,
    hydration: float,
    fat_fraction: float,
    constants: PhysicalConstants,
) -> float:
    """F_net = 1 + β·max(0, g_hyd·(1 - s_sug·B̂)·(1 - s_fat·f̂) + s_egg·ê)."""
    p = constants.viscosity
    g_hyd = math.exp(-(((hydration - p.hydration_peak) / p.hydration_width) ** 2) / 2.0)

    sugar_norm = min(1.0, brix / p.brix_norm)
    fat_norm = min(1.0, fat_fraction / p.fat_norm)
    egg_frac = safe_div(
        recipe.eggs,
        recipe.flour + recipe.butter + recipe.sugar + recipe.honey + recipe.eggs,
        guard=p.denom_guard,
    )
    egg_norm = min(1.0, egg_frac / p.egg_norm)

    strength = max(
        0.0,
        g_hyd * (1.0 - p.s_sugar * sugar_norm) * (1.0 - p.s_fat * fat_norm) + p.s_egg * egg_norm,
    )
    return 1.0 + p.beta_net * strength


def krieger_dougherty(phi_eff: float, constants: PhysicalConstants = DEFAULT_CONSTANTS) -> float:
    """Relative viscosity with the (1 - φ_eff/φ_max) term floored."""
    p = constants.viscosity
    one_minus = max(p.min_one_minus, 1.0 - phi_eff / p.phi_max)
    return one_minus ** (-p.intrinsic * p.phi_max)


def evaluate_dough(
    recipe: Recipe | Mapping[str, Any],
    temperature_c: float = 25.0,
    caramelization: CaramelizationOptions | Mapping[str, Any] | None = None,
    *,
    egg_temp_c: float = 20.0,
    constants: PhysicalConstants = DEFAULT_CONSTANTS,
) -> DoughState:
    """Run the syrup → emulsion → dough chain at one temperature.

    Args:
        recipe: Recipe or mapping of ingredient -> grams
        temperature_c: process (liquid) temperature in °C
        caramelization: syrup pre-heat options (disabled by default)
        egg_temp_c: starting temperature of the eggs
        constants: calibration tables

    Returns:
        DoughState with unrounded intermediates
    """
    r = as_recipe(recipe)
    options = as_caramelization(caramelization)
    p = constants.viscosity
    td = constants.densities
    guard = p.denom_guard

    T = sanitize_temperature(temperature_c, p.t_ref, "temperature", constants)
    T_egg = sanitize_temperature(egg_temp_c, 20.0, "egg temperature", constants)

    # 1) syrup: no flour, no eggs; caramelization applied here only
    pools, car = syrup_water_pools(r, options, constants)
    syrup = sugar_water_balance(sugar=r.sugar, honey=r.honey, pools=pools, constants=constants)

    eta_aq_25 = syrup_viscosity_25(syrup.brix, constants)
    vol_aq = syrup.free_water / td.water + r.sugar / td.sugar + r.honey / td.honey
    vol_fat = r.butter / td.butter
    eta0_syrup = log_mix(
        aqueous_viscosity(syrup.brix, T, constants),
        fat_viscosity(T, constants),
        vol_aq,
        vol_fat,
        guard=guard,
    )

    # 2) emulsion: eggs tempered into the liquid
    liquid_mass = r.liquid_mass
    T_emul = T
    if r.eggs > 0 and liquid_mass > 0:
        cp_liquid = liquid_specific_heat(r.liquid_breakdown(), constants)
        T_emul = mix_temperature(
            liquid_mass, cp_liquid, T,
            r.eggs, constants.specific_heat.egg, T_egg,
            guard=guard,
        )

    eta_aq_emul = eta_aq_25 * math.exp(-p.k_temp * (T_emul - p.t_ref))
    eta_fat_emul = fat_viscosity(T_emul, constants)
    eta0_emul = log_mix(
        eta_aq_emul,
        eta_fat_emul,
        vol_aq + r.eggs * 0.001 / td.eggs,
        vol_fat,
        guard=guard,
    )
    egg_frac = safe_div(r.eggs, r.eggs + liquid_mass + r.flour, guard=guard)
    k_egg = p.egg_tightening_base + p.egg_tightening_span * min(p.egg_fraction_norm, egg_frac) / p.egg_fraction_norm
    eta0_after_eggs = min(p.eta_cap, eta0_emul * k_egg)

    # 3) dough: flour binds water, pools carried over from the syrup phase
    dough_pools = WaterPools(
        eggs=r.eggs * constants.hydration.eggs,
        honey=pools.honey,
        butter=pools.butter,
    )
    dough = sugar_water_balance(
        sugar=r.sugar,
        honey=r.honey,
        pools=dough_pools,
        flour=r.flour,
        absorption=p.flour_absorption,
        constants=constants,
    )
    eta_aq_dough = aqueous_viscosity(dough.brix, T_emul, constants)
    eta_fat_dough = fat_viscosity(T_emul, constants)

    vol_aq_d = (
        dough.free_water / td.water
        + r.sugar / td.sugar
        + r.honey / td.honey
        + r.eggs * constants.hydration.eggs / td.eggs
    )
    vol_flour = r.flour / td.flour
    vol_matrix = max(guard, vol_aq_d + vol_fat + vol_flour)
    eta0_dough = log_mix(eta_aq_dough, eta_fat_dough, vol_aq_d, vol_fat, guard=guard)

    total = r.total_mass
    phi = vol_flour / vol_matrix
    f_fat = safe_div(r.butter, total, guard=guard)
    f_sug = safe_div(r.sugar + r.honey, total, guard=guard)
    phi_eff = clamp(phi * (1.0 - p.k_fat * f_fat - p.k_sugar * f_sug), 0.0, p.phi_max * p.phi_eff_ceiling)
    eta_rel = krieger_dougherty(phi_eff, constants)

    hydration = r.hydration_pct(constants)
    f_net = _network_factor(r, dough.brix, hydration, f_fat, constants)
    eta = min(p.eta_cap, eta0_dough * eta_rel * f_net)

    logger.debug(
        "T=%.2f T_emul=%.2f brix=%.2f φ_eff=%.4f η0=%.1f η_rel=%.3f F_net=%.3f η=%.1f",
        T, T_emul, dough.brix, phi_eff, eta0_dough, eta_rel, f_net, eta,
    )

    return DoughState(
        temperature_c=T,
        emulsion_temp_c=T_emul,
        viscosity=eta,
        hydration_pct=hydration,
        packing_fraction=phi,
        packing_fraction_effective=phi_eff,
        relative_viscosity=eta_rel,
        network_factor=f_net,
        eta0_syrup=eta0_syrup,
        eta0_emulsion=eta0_emul,
        egg_tightening=k_egg,
        eta0_after_eggs=eta0_after_eggs,
        eta0_dough=eta0_dough,
        fat_fraction=f_fat,
        sugar_fraction=f_sug,
        vol_aqueous=vol_aq_d,
        vol_fat=vol_fat,
        syrup=syrup,
        dough=dough,
        eta_aq_emulsion=eta_aq_emul,
        eta_fat_emulsion=eta_fat_emul,
        eta_aq_dough=eta_aq_dough,
        eta_fat_dough=eta_fat_dough,
        caramelization=car,
    )


# =============================================================================
# Work target (classic 35–40°C window)
# =============================================================================
def viscosity_at_work_temperature(
    state: DoughState,
    temperature_c: float,
    constants: PhysicalConstants = DEFAULT_CONSTANTS,
) -> float:
    """Re-scale the dough-phase mix to T with Brix, volumes and packing held fixed."""
    p = constants.viscosity
    eta0 = log_mix(
        aqueous_viscosity(state.brix, temperature_c, constants),
        fat_viscosity(temperature_c, constants),
        state.vol_aqueous,
        state.vol_fat,
        guard=p.denom_guard,
    )
    return min(p.eta_cap, eta0 * state.relative_viscosity * state.network_factor)


def find_work_target(state: DoughState, constants: PhysicalConstants = DEFAULT_CONSTANTS) -> WorkTarget:
    w = constants.work
    mid = constants.eta_target_mid
    grid = np.arange(w.t_min, w.t_max + w.step / 2.0, w.step)

    best_t = float(grid[0])
    best_eta = viscosity_at_work_temperature(state, best_t, constants)
    best_score = abs(math.log(best_eta / mid))
    for t in grid[1:]:
        eta = viscosity_at_work_temperature(state, float(t), constants)
        score = abs(math.log(eta / mid))
        if score < best_score:
            best_t, best_eta, best_score = float(t), eta, score

    return WorkTarget(
        optimal_temp_c=round(best_t, 1),
        eta_at_optimal=int(round(best_eta)),
        target_range_cp=(w.eta_min, w.eta_max),
    )


# =============================================================================
# Public entry point
# =============================================================================
def _components(state: DoughState) -> ViscosityComponents:
    return ViscosityComponents(
        brix=round(state.brix, 1),
        hydration_pct=round(state.hydration_pct, 1),
        packing_fraction=round(state.packing_fraction, 3),
        packing_fraction_effective=round(state.packing_fraction_effective, 3),
        relative_viscosity=round(state.relative_viscosity, 2),
        network_factor=round(state.network_factor, 2),
        eta0_syrup=int(round(state.eta0_syrup)),
        eta0_emulsion=int(round(state.eta0_emulsion)),
        egg_tightening=round(state.egg_tightening, 3),
        eta0_dough=int(round(state.eta0_dough)),
    )


def _trace(state: DoughState) -> PhaseTrace:
    return PhaseTrace(
        syrup_brix=round(state.syrup.brix, 1),
        syrup_free_water=round(state.syrup.free_water, 3),
        emulsion_temp_c=round(state.emulsion_temp_c, 2),
        eta_aq_emulsion=int(round(state.eta_aq_emulsion)),
        eta_fat_emulsion=int(round(state.eta_fat_emulsion)),
        eta0_after_eggs=int(round(state.eta0_after_eggs)),
        dough_brix=round(state.dough.brix, 1),
        dough_free_water=round(state.dough.free_water, 3),
        eta_aq_dough=int(round(state.eta_aq_dough)),
        eta_fat_dough=int(round(state.eta_fat_dough)),
        caramelization=state.caramelization,
    )


def compute_viscosity(
    recipe: Recipe | Mapping[str, Any],
    temperature_c: float = 25.0,
    caramelization: CaramelizationOptions | Mapping[str, Any] | None = None,
    *,
    egg_temp_c: float = 20.0,
    debug: bool = False,
    constants: PhysicalConstants = DEFAULT_CONSTANTS,
) -> ViscosityResult:
    """Dough viscosity (cP) at ``temperature_c``.

    Never raises for malformed numbers: masses are coerced to 0, a non-finite
    temperature falls back to 25°C, and the value is capped at ``eta_cap``.

    Example:
        >>> r = compute_viscosity({"flour": 500, "butter": 120, "sugar": 150,
        ...                        "honey": 155, "eggs": 95, "soda": 5}, 30.0)
        >>> 12000 <= r.value_cp <= 20000
        True
    """
    state = evaluate_dough(
        recipe, temperature_c, caramelization, egg_temp_c=egg_temp_c, constants=constants
    )
    return ViscosityResult(
        value_cp=int(round(state.viscosity)),
        temperature_c=state.temperature_c,
        components=_components(state),
        work_target=find_work_target(state, constants),
        trace=_trace(state) if debug else None,
    )
