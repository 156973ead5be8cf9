"""Water pools, Brix and phase viscosities for the syrup → emulsion → dough chain.

Water enters the dough from three pools (eggs, honey, butter). Part of it is
bound: first by flour (dough phase only), then by dissolved sugars. What is
left is free water, which sets the Brix of the aqueous phase:

    Brix = 100 · S / (S + W_free),   S = sucrose + 0.82·honey (invert sugar)

The aqueous viscosity at 25°C comes from a monotone Brix table and is scaled
to temperature with an Arrhenius-like slope; melted butter has its own slope:

    η_aq(T)  = η_aq(25) · exp(-k_T · (T - 25))
    η_fat(T) = max(η_floor, η_fat(40) · exp(-k_fat · (T - 40)))

Caramelization removes a fraction of the honey/butter pools once, in the
syrup phase; the reduced pools are carried to the dough phase as an explicit
WaterPools value.
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass

import numpy as np

from .constants import DEFAULT_CONSTANTS, PhysicalConstants
from .recipe import CaramelizationOptions, Recipe


@dataclass(frozen=True)
class WaterPools:
    """Water mass (g) available from each wet ingredient."""

    eggs: float = 0.0
    honey: float = 0.0
    butter: float = 0.0

    @property
    def total(self) -> float:
        return self.eggs + self.honey + self.butter


@dataclass(frozen=True)
class CaramelizationEffect:
    enabled: bool
    evaporation_fraction: float = 0.0
    preheat_temp_c: float | None = None
    preheat_minutes: float | None = None
    water_removed_honey: float = 0.0
    water_removed_butter: float = 0.0

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class SugarWaterBalance:
    brix: float
    free_water: float
    pools: WaterPools
    sugar_in_aqueous: float
    bound_by_flour: float
    bound_by_sugar: float


def apply_caramelization(
    honey: float,
    butter: float,
    options: CaramelizationOptions,
    constants: PhysicalConstants = DEFAULT_CONSTANTS,
) -> CaramelizationEffect:
    """Water evaporated from the honey and butter pools during pre-heating."""
    opt = options.clamped()
    if not opt.enabled:
        return CaramelizationEffect(enabled=False)

    h = constants.hydration
    w_honey = honey * h.honey
    w_butter = butter * h.butter
    return CaramelizationEffect(
        enabled=True,
        evaporation_fraction=opt.evaporation_fraction,
        preheat_temp_c=opt.preheat_temp_c,
        preheat_minutes=opt.preheat_minutes,
        water_removed_honey=w_honey * opt.evaporation_fraction,
        water_removed_butter=w_butter * opt.evaporation_fraction,
    )


def syrup_water_pools(
    recipe: Recipe,
    options: CaramelizationOptions,
    constants: PhysicalConstants = DEFAULT_CONSTANTS,
) -> tuple[WaterPools, CaramelizationEffect]:
    """Honey/butter pools after the (optional) caramelization pre-heat."""
    h = constants.hydration
    w_honey = recipe.honey * h.honey
    w_butter = recipe.butter * h.butter

    effect = apply_caramelization(recipe.honey, recipe.butter, options, constants)
    if effect.enabled:
        w_honey = max(0.0, w_honey - effect.water_removed_honey)
        w_butter = max(0.0, w_butter - effect.water_removed_butter)

    return WaterPools(eggs=0.0, honey=w_honey, butter=w_butter), effect


def sugar_water_balance(
    *,
    sugar: float,
    honey: float,
    pools: WaterPools,
    flour: float = 0.0,
    absorption: float = 0.0,
    constants: PhysicalConstants = DEFAULT_CONSTANTS,
) -> SugarWaterBalance:
    """Split the water pool into flour-bound, sugar-bound and free water.

    Args:
        sugar: sucrose mass (g)
        honey: honey mass (g); 0.82 of it counts as invert sugar
        pools: water available from eggs/honey/butter
        flour: flour mass (g)
        absorption: flour water absorption (0 outside the dough phase)

    Returns:
        SugarWaterBalance with Brix and free water (both guarded > 0 where divided)
    """
    p = constants.viscosity
    pool = pools.total

    invert = p.honey_invert_fraction * honey
    bound_flour = min(pool, flour * absorption)
    residual = max(p.denom_guard, pool - bound_flour)
    bound_sugar = min(
        residual * p.sugar_bind_cap,
        p.sugar_bind_sucrose * sugar + p.sugar_bind_invert * invert,
    )
    free_water = max(p.denom_guard, residual - bound_sugar)

    sugar_aq = sugar + invert
    brix = 0.0 if sugar_aq <= 0 else 100.0 * sugar_aq / (sugar_aq + free_water)

    return SugarWaterBalance(
        brix=brix,
        free_water=free_water,
        pools=pools,
        sugar_in_aqueous=sugar_aq,
        bound_by_flour=bound_flour,
        bound_by_sugar=bound_sugar,
    )


def syrup_viscosity_25(brix: float, constants: PhysicalConstants = DEFAULT_CONSTANTS) -> float:
    """Reference aqueous viscosity (cP) at 25°C from the Brix table."""
    table = constants.viscosity.brix_table
    xs = np.array([b for b, _ in table], dtype=float)
    ys = np.array([eta for _, eta in table], dtype=float)
    return float(np.interp(brix, xs, ys))


def aqueous_viscosity(
    brix: float,
    temperature_c: float,
    constants: PhysicalConstants = DEFAULT_CONSTANTS,
) -> float:
    p = constants.viscosity
    return syrup_viscosity_25(brix, constants) * math.exp(-p.k_temp * (temperature_c - p.t_ref))


def fat_viscosity(temperature_c: float, constants: PhysicalConstants = DEFAULT_CONSTANTS) -> float:
    p = constants.viscosity
    return max(p.eta_fat_floor, p.eta_fat_ref_40c * math.exp(-p.k_temp_fat * (temperature_c - 40.0)))
