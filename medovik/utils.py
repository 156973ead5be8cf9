"""Shared numeric helpers for the dough engine.

This module provides common functions used across the package:
- Guard constant for divisions
- Mass coercion (malformed values become zero mass)
- Clamping
- Volume-fraction log-mixing of aqueous and fat viscosities
"""

from __future__ import annotations

import math
from typing import Any


# =============================================================================
# Guard constant for divisions
# =============================================================================
DENOM_GUARD = 1e-9


# =============================================================================
# Coercion and clamping
# =============================================================================
def as_mass(value: Any) -> float:
    """Coerce a mass to a finite non-negative float (bad input -> 0.0)."""
    try:
        x = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(x) or x < 0:
        return 0.0
    return x


def is_finite_number(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    try:
        return math.isfinite(float(value))
    except (TypeError, ValueError):
        return False


def clamp(v: float, lo: float, hi: float) -> float:
    return min(hi, max(lo, v))


def safe_div(num: float, den: float, *, guard: float = DENOM_GUARD) -> float:
    """num / max(guard, den)."""
    return num / max(guard, den)


# =============================================================================
# Log-mixing
# =============================================================================
def log_mix(
    eta_aq: float,
    eta_fat: float,
    vol_aq: float,
    vol_fat: float,
    *,
    guard: float = DENOM_GUARD,
) -> float:
    """Volume-fraction log-mixing of two phases.

        ln η_mix = φ_aq·ln η_aq + φ_fat·ln η_fat

    Args:
        eta_aq: aqueous-phase viscosity (cP)
        eta_fat: fat-phase viscosity (cP)
        vol_aq: aqueous volume (cm³)
        vol_fat: fat volume (cm³)
        guard: floor for the total volume

    Returns:
        Mixed viscosity (cP), never below 1.
    """
    v_tot = max(guard, vol_aq + vol_fat)
    phi_aq = clamp(vol_aq / v_tot, 0.0, 1.0)
    phi_fat = 1.0 - phi_aq
    ln_eta = phi_aq * math.log(max(1.0, eta_aq)) + phi_fat * math.log(max(1.0, eta_fat))
    return math.exp(ln_eta)
