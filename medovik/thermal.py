"""Heat-balance helpers shared by the emulsion phase and the tempering simulator.

Two bodies mixed adiabatically reach

    T = (m_a·c_a·T_a + m_b·c_b·T_b) / (m_a·c_a + m_b·c_b)

and the hot liquid's specific heat is the mass-weighted average of its
ingredients (butter, sugar, honey, soda).
"""

from __future__ import annotations

from .constants import DEFAULT_CONSTANTS, PhysicalConstants
from .recipe import LiquidBreakdown
from .utils import DENOM_GUARD


def liquid_specific_heat(
    breakdown: LiquidBreakdown | None,
    constants: PhysicalConstants = DEFAULT_CONSTANTS,
) -> float:
    """Effective Cp (J/g·K) of the hot liquid; fallback constant if unknown."""
    c = constants.specific_heat
    if breakdown is None or breakdown.total <= 0:
        return c.liquid
    weighted = (
        breakdown.butter * c.butter
        + breakdown.sugar * c.sugar
        + breakdown.honey * c.honey
        + breakdown.soda * c.soda
    )
    return weighted / breakdown.total


def heat_content(mass: float, cp: float, temp: float) -> float:
    return mass * cp * temp


def mix_temperature(
    mass_a: float,
    cp_a: float,
    temp_a: float,
    mass_b: float,
    cp_b: float,
    temp_b: float,
    *,
    guard: float = DENOM_GUARD,
) -> float:
    """Equilibrium temperature of two bodies; heat capacity floored by guard."""
    energy = heat_content(mass_a, cp_a, temp_a) + heat_content(mass_b, cp_b, temp_b)
    capacity = mass_a * cp_a + mass_b * cp_b
    return energy / max(guard, capacity)
