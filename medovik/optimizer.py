"""Working-temperature search and corrective recipe deltas.

Cost minimized over T ∈ [18, 45]°C:

    J(T) = |ln(η(T)/η_mid)| + α·stickiness(η, T) + β·crack(h, φ_eff) + bias(T)

with η_mid = √(12000·20000). The search is a coarse grid (0.5°C) followed by a
±1°C refinement (0.25°C), both via ``scipy.optimize.brute`` without a
polishing step; the result is always the best point found.

When the optimum is outside the optimal band a plan B is derived:

- too wet / sticky: invert Krieger–Dougherty at η_mid for a target φ_eff and
  convert Δφ_eff into grams of flour,
- stiff / too stiff: liquid (mL) needed to bring hydration to 24%.
"""

from __future__ import annotations

import logging
import math
from dataclasses import asdict, dataclass
from typing import Any, Mapping

import numpy as np
from scipy import optimize

from .constants import DEFAULT_CONSTANTS, PhysicalConstants
from .recipe import CaramelizationOptions, Recipe, as_caramelization, as_recipe
from .utils import clamp, is_finite_number, safe_div
from .viscosity import (
    DoughState,
    ViscosityComponents,
    compute_viscosity,
    evaluate_dough,
    sanitize_temperature,
)

logger = logging.getLogger(__name__)

BANDS = ("too-wet", "sticky", "optimal", "stiff", "too-stiff")

_BAND_STATUS = {
    "optimal": "GO",
    "sticky": "WAIT",
    "stiff": "WAIT",
    "too-wet": "STOP",
    "too-stiff": "STOP",
}

_PLAN_A_ACTIONS = {
    "too-wet": (
        "lower the working temperature to 18-22°C",
        "rest or chill for 15-25 minutes",
        "roll between two sheets with a very light dusting",
    ),
    "sticky": (
        "chill for 10-15 minutes",
        "roll between two sheets",
        "dust very lightly only",
    ),
    "optimal": (
        "roll out now",
        "keep a steady pace so the dough does not overheat",
    ),
    "stiff": (
        "raise the working temperature to 28-34°C",
        "short rest of about 10 minutes",
    ),
    "too-stiff": (
        "raise the working temperature gradually",
        "add 20-30 mL of warm liquid as needed",
        "rest for 20-30 minutes",
    ),
}

_FLOUR_ACTIONS = (
    "add the flour in 10-20 g portions with gentle mixing",
    "chill or rest for 10-15 minutes, then measure again",
    "roll between baking sheets with only a light dusting",
)

_LIQUID_ACTIONS = (
    "add warm liquid gradually and knead gently",
    "rest for 15-30 minutes, then measure again",
    "roll slightly warm (28-34°C) if needed",
)


# =============================================================================
# Result types
# =============================================================================
@dataclass(frozen=True)
class PlanA:
    optimal_temp_c: float
    eta_at_optimal: int | None
    band: str
    actions: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        d["actions"] = list(self.actions)
        return d


@dataclass(frozen=True)
class PlanB:
    delta_flour_g: int | None = None
    delta_liquid_ml: int | None = None
    suggested_temp_c: float | None = None
    actions: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        d["actions"] = list(self.actions)
        return d


@dataclass(frozen=True)
class WorkPlan:
    plan_a: PlanA
    plan_b: PlanB | None = None
    override_applied: bool = False
    caramelization: bool = False
    cost: float | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "plan_a": self.plan_a.to_dict(),
            "plan_b": None if self.plan_b is None else self.plan_b.to_dict(),
            "override_applied": self.override_applied,
            "caramelization": self.caramelization,
            "cost": self.cost,
        }


@dataclass(frozen=True)
class TemperatureDiagnostic:
    temperature_c: float
    eta_cp: int
    band: str
    hydration_pct: float
    components: ViscosityComponents
    caramelization: bool = False

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        d["components"] = self.components.to_dict()
        return d


# =============================================================================
# Bands
# =============================================================================
def classify_band(eta: float, constants: PhysicalConstants = DEFAULT_CONSTANTS) -> str:
    if not is_finite_number(eta) or eta <= 0:
        return "unknown"
    b = constants.bands
    if eta < b.sticky_min:
        return "too-wet"
    if eta < b.optimal_min:
        return "sticky"
    if eta <= b.optimal_max:
        return "optimal"
    if eta <= b.stiff_max:
        return "stiff"
    return "too-stiff"


def band_to_status(band: str) -> str:
    return _BAND_STATUS.get(band, "WAIT")


# =============================================================================
# Cost terms
# =============================================================================
def stickiness_risk(eta: float, temperature_c: float, constants: PhysicalConstants = DEFAULT_CONSTANTS) -> float:
    """Grows as η drops below the sticky threshold and as T nears the ceiling."""
    s = constants.search
    base = clamp((constants.bands.sticky_min - eta) / constants.bands.sticky_min, 0.0, 1.0)
    temp_factor = clamp((temperature_c - s.t_min) / (s.t_max - s.t_min), 0.0, 1.0)
    return base * temp_factor


def crack_risk(hydration: float, phi_eff: float, constants: PhysicalConstants = DEFAULT_CONSTANTS) -> float:
    c = constants.cost
    risk = 0.0
    if is_finite_number(hydration) and hydration < c.crack_hydration:
        risk += clamp((c.crack_hydration - hydration) / 10.0, 0.0, 1.0)
    if is_finite_number(phi_eff) and phi_eff > c.crack_phi_eff:
        risk += clamp((phi_eff - c.crack_phi_eff) / 0.15, 0.0, 1.0)
    return clamp(risk, 0.0, 1.0)


def room_bias(temperature_c: float, constants: PhysicalConstants = DEFAULT_CONSTANTS) -> float:
    s = constants.search
    c = constants.cost
    return c.room_bias_weight * abs(temperature_c - c.room_bias_center) / (s.t_max - s.t_min)


def log_distance(eta: float, constants: PhysicalConstants = DEFAULT_CONSTANTS) -> float:
    return abs(math.log((eta if eta > 0 else 1.0) / constants.eta_target_mid))


def work_cost(state: DoughState, constants: PhysicalConstants = DEFAULT_CONSTANTS) -> float:
    T = state.temperature_c
    eta = state.viscosity
    c = constants.cost
    return (
        log_distance(eta, constants)
        + c.alpha_stickiness * stickiness_risk(eta, T, constants)
        + c.beta_crack * crack_risk(state.hydration_pct, state.packing_fraction_effective, constants)
        + room_bias(T, constants)
    )


# =============================================================================
# Inverse problem: target viscosity -> flour / liquid deltas
# =============================================================================
def invert_krieger_dougherty(
    eta_target: float,
    eta0: float,
    network_factor: float,
    constants: PhysicalConstants = DEFAULT_CONSTANTS,
) -> float | None:
    """φ_eff that gives η_target = η0·η_rel(φ_eff)·F_net.

    Returns 0 when η0·F_net already reaches the target and None when any
    input is non-finite or non-positive.
    """
    p = constants.viscosity
    values = (eta_target, eta0, network_factor)
    if not all(is_finite_number(v) and v > 0 for v in values):
        return None
    eta_rel_target = eta_target / (eta0 * network_factor)
    if eta_rel_target <= 1:
        return 0.0
    one_minus = eta_rel_target ** (-1.0 / (p.intrinsic * p.phi_max))
    return clamp(p.phi_max * (1.0 - one_minus), 0.0, p.phi_max * p.phi_eff_ceiling)


def estimate_total_volume(recipe: Recipe, constants: PhysicalConstants = DEFAULT_CONSTANTS) -> float:
    """Mixture volume (cm³) from true densities, soda excluded."""
    td = constants.densities
    return (
        recipe.flour / td.flour
        + recipe.sugar / td.sugar
        + recipe.honey / td.honey
        + recipe.butter / td.butter
        + recipe.eggs / td.eggs
    )


def flour_for_packing_increase(
    delta_phi_eff: float,
    recipe: Recipe,
    constants: PhysicalConstants = DEFAULT_CONSTANTS,
) -> float:
    """Flour mass (g) that raises φ_eff by ``delta_phi_eff``, unclamped."""
    if not is_finite_number(delta_phi_eff) or delta_phi_eff <= 0:
        return 0.0
    p = constants.viscosity
    total = recipe.total_mass
    f_fat = safe_div(recipe.butter, total, guard=p.denom_guard)
    f_sug = safe_div(recipe.sugar + recipe.honey, total, guard=p.denom_guard)
    compaction = 1.0 - p.k_fat * f_fat - p.k_sugar * f_sug
    delta_v = delta_phi_eff * estimate_total_volume(recipe, constants) / max(p.denom_guard, compaction)
    return max(0.0, delta_v * constants.densities.flour)


def clamp_flour_delta(grams: float, flour: float, constants: PhysicalConstants = DEFAULT_CONSTANTS) -> int:
    """Round and clamp to the operator-practical range (min 10 g when non-zero)."""
    fc = constants.flour_correction
    if not is_finite_number(grams):
        return 0
    hard_max = min(fc.max_grams, flour * fc.max_fraction_of_flour)
    g = int(clamp(round(grams), 0, max(fc.min_grams, round(hard_max))))
    if 0 < g < fc.min_grams:
        g = int(fc.min_grams)
    return g


def liquid_to_target_hydration(recipe: Recipe, constants: PhysicalConstants = DEFAULT_CONSTANTS) -> float:
    """Liquid (mL, 1 g ≈ 1 mL) needed to bring hydration to the target."""
    if recipe.flour <= 0:
        return 0.0
    g = constants.gates
    delta_water = g.target / 100.0 * recipe.flour - recipe.water_mass(constants)
    if delta_water <= 0:
        return 0.0
    return delta_water / g.liquid_efficiency


def liquid_plan(
    recipe: Recipe,
    suggested_temp_c: float | None,
    constants: PhysicalConstants = DEFAULT_CONSTANTS,
) -> PlanB | None:
    delta = int(round(liquid_to_target_hydration(recipe, constants)))
    if delta <= 0:
        return None
    return PlanB(delta_liquid_ml=delta, suggested_temp_c=suggested_temp_c, actions=_LIQUID_ACTIONS)


def _flour_plan(recipe: Recipe, state: DoughState, constants: PhysicalConstants) -> PlanB | None:
    target = invert_krieger_dougherty(
        constants.eta_target_mid, state.eta0_dough, state.network_factor, constants
    )
    if target is None:
        return None
    delta_phi = max(0.0, target - state.packing_fraction_effective)
    grams = clamp_flour_delta(flour_for_packing_increase(delta_phi, recipe, constants), recipe.flour, constants)
    if grams <= 0:
        return None
    return PlanB(
        delta_flour_g=grams,
        suggested_temp_c=round(state.temperature_c, 1),
        actions=_FLOUR_ACTIONS,
    )


def operational_override(
    hydration: float,
    band: str,
    eta: float,
    constants: PhysicalConstants = DEFAULT_CONSTANTS,
) -> bool:
    """A sticky dough near the target at central hydration is still workable."""
    g = constants.gates
    return (
        g.override_low <= hydration <= g.override_high
        and band == "sticky"
        and log_distance(eta, constants) < constants.cost.override_log_distance
    )


def plan_a_actions(band: str) -> tuple[str, ...]:
    return _PLAN_A_ACTIONS.get(band, _PLAN_A_ACTIONS["too-stiff"])


# =============================================================================
# Search
# =============================================================================
def _brute_min(func, lo: float, hi: float, step: float) -> tuple[float, float]:
    xmin, fval, _, _ = optimize.brute(
        func, (slice(lo, hi + step / 2.0, step),), full_output=True, finish=None
    )
    return float(np.ravel(xmin)[0]), float(fval)


def find_optimal_work_plan(
    recipe: Recipe | Mapping[str, Any],
    caramelization: CaramelizationOptions | Mapping[str, Any] | None = None,
    *,
    egg_temp_c: float = 20.0,
    constants: PhysicalConstants = DEFAULT_CONSTANTS,
) -> WorkPlan:
    """Best working temperature, its band, and a corrective plan B if needed.

    Args:
        recipe: Recipe or mapping of ingredient -> grams
        caramelization: syrup pre-heat options
        egg_temp_c: egg temperature used in the emulsion phase
        constants: calibration tables

    Returns:
        WorkPlan (best effort: always returns the lowest-cost point)
    """
    r = as_recipe(recipe)
    options = as_caramelization(caramelization)
    s = constants.search
    egg_temp_c = sanitize_temperature(egg_temp_c, 20.0, "egg temperature", constants)

    def evaluate(T: float) -> DoughState:
        return evaluate_dough(r, T, options, egg_temp_c=egg_temp_c, constants=constants)

    def cost(x) -> float:
        return work_cost(evaluate(float(x[0])), constants)

    best_t, best_cost = _brute_min(cost, s.t_min, s.t_max, s.step)

    lo = max(s.t_min, best_t - s.refine_window)
    hi = min(s.t_max, best_t + s.refine_window)
    fine_t, fine_cost = _brute_min(cost, lo, hi, s.refine_step)
    if fine_cost < best_cost:
        best_t, best_cost = fine_t, fine_cost

    state = evaluate(best_t)
    eta = state.viscosity
    band = classify_band(eta, constants)
    plan_a = PlanA(
        optimal_temp_c=round(best_t, 1),
        eta_at_optimal=int(round(eta)),
        band=band,
        actions=plan_a_actions(band),
    )

    plan_b = None
    if band in ("too-wet", "sticky"):
        plan_b = _flour_plan(r, state, constants)
    elif band in ("stiff", "too-stiff"):
        suggested = 30.0 if best_t < 28 else round(best_t, 1)
        plan_b = liquid_plan(r, suggested, constants)

    override = operational_override(r.hydration_pct(constants), band, eta, constants)

    logger.debug(
        "work plan: T=%.2f η=%.0f band=%s cost=%.4f override=%s",
        best_t, eta, band, best_cost, override,
    )
    return WorkPlan(
        plan_a=plan_a,
        plan_b=plan_b,
        override_applied=override,
        caramelization=options.enabled,
        cost=best_cost,
    )


def evaluate_at_temperature(
    recipe: Recipe | Mapping[str, Any],
    temperature_c: float,
    caramelization: CaramelizationOptions | Mapping[str, Any] | None = None,
    *,
    egg_temp_c: float = 20.0,
    constants: PhysicalConstants = DEFAULT_CONSTANTS,
) -> TemperatureDiagnostic:
    """Viscosity, band and hydration at a single temperature."""
    r = as_recipe(recipe)
    options = as_caramelization(caramelization)
    res = compute_viscosity(r, temperature_c, options, egg_temp_c=egg_temp_c, constants=constants)
    return TemperatureDiagnostic(
        temperature_c=round(res.temperature_c, 1),
        eta_cp=res.value_cp,
        band=classify_band(res.value_cp, constants),
        hydration_pct=round(r.hydration_pct(constants), 1),
        components=res.components,
        caramelization=options.enabled,
    )
