"""Multi-batch tempering of hot liquid into eggs.

The liquid is added in N batches. Each batch is mixed adiabatically into the
accumulated (egg + already-mixed liquid) side:

    T_after = (C_acc·T_acc + m_b·c_liq·T_liq) / (C_acc + m_b·c_liq)

Before the bowl equilibrates, the batch meets a contact zone that holds only a
fraction ψ of the accumulated heat capacity; the peak the eggs see is

    T_peak = (ψ·C_acc·T_acc + m_b·c_liq·T_liq) / (ψ·C_acc + m_b·c_liq)

so large early batches run hotter than the bulk balance suggests. Safety is
judged on the highest peak against the egg coagulation ceiling (68°C).
"""

from __future__ import annotations

import logging
import math
import numbers
from dataclasses import dataclass
from typing import Any

import numpy as np

from .constants import (
    DEFAULT_CONSTANTS,
    EGG_COAGULATION_LIMIT_C,
    EGG_WARNING_MARGIN_C,
    PhysicalConstants,
)
from .recipe import LiquidBreakdown
from .thermal import liquid_specific_heat, mix_temperature
from .utils import is_finite_number

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FieldViolation:
    code: str
    field: str
    value: Any
    minimum: float
    maximum: float

    def to_dict(self) -> dict[str, Any]:
        value = self.value if is_finite_number(self.value) else repr(self.value)
        return {
            "code": self.code,
            "field": self.field,
            "value": value,
            "range": [self.minimum, self.maximum],
        }


@dataclass(frozen=True)
class TemperingValidationError:
    """Every out-of-range tempering input; returned, never raised."""

    violations: tuple[FieldViolation, ...]

    @property
    def codes(self) -> tuple[str, ...]:
        return tuple(v.code for v in self.violations)

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": "VALIDATION_FAILED",
            "violations": [v.to_dict() for v in self.violations],
        }


@dataclass(frozen=True)
class TemperingBatch:
    batch_number: int
    percentage_of_liquid: float
    batch_mass_g: float
    temp_before_c: float
    temp_after_c: float
    peak_temp_c: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "batch_number": self.batch_number,
            "percentage_of_liquid": self.percentage_of_liquid,
            "batch_mass_g": round(self.batch_mass_g, 2),
            "temp_before_c": round(self.temp_before_c, 2),
            "temp_after_c": round(self.temp_after_c, 2),
            "peak_temp_c": round(self.peak_temp_c, 2),
        }


@dataclass(frozen=True)
class TemperingBatchPlan:
    batches: tuple[TemperingBatch, ...]
    final_temp_c: float
    max_batch_temp_c: float
    critical_batch_index: int | None
    safety_status: str
    egg_limit_c: float
    liquid_specific_heat: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "batches": [b.to_dict() for b in self.batches],
            "final_temp_c": round(self.final_temp_c, 2),
            "max_batch_temp_c": round(self.max_batch_temp_c, 2),
            "critical_batch_index": self.critical_batch_index,
            "safety_status": self.safety_status,
            "egg_limit_c": self.egg_limit_c,
            "liquid_specific_heat": round(self.liquid_specific_heat, 3),
        }


# =============================================================================
# Validation
# =============================================================================
def _in_range(value: Any, lo: float, hi: float) -> bool:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return False
    return is_finite_number(value) and lo <= float(value) <= hi


def validate_tempering_inputs(
    egg_mass: Any,
    egg_temp_c: Any,
    liquid_mass: Any,
    liquid_temp_c: Any,
    batch_count: Any,
    constants: PhysicalConstants = DEFAULT_CONSTANTS,
) -> TemperingValidationError | None:
    lim = constants.tempering
    checks = (
        ("EGG_MASS_INVALID", "egg_mass", egg_mass, lim.egg_mass),
        ("EGG_TEMP_INVALID", "egg_temp_c", egg_temp_c, lim.egg_temp),
        ("LIQUID_MASS_INVALID", "liquid_mass", liquid_mass, lim.liquid_mass),
        ("LIQUID_TEMP_INVALID", "liquid_temp_c", liquid_temp_c, lim.liquid_temp),
    )
    violations = [
        FieldViolation(code, name, value, lo, hi)
        for code, name, value, (lo, hi) in checks
        if not _in_range(value, lo, hi)
    ]

    lo, hi = lim.batch_count
    if not (_in_range(batch_count, lo, hi) and float(batch_count).is_integer()):
        violations.append(FieldViolation("BATCH_COUNT_INVALID", "batch_count", batch_count, lo, hi))

    if violations:
        return TemperingValidationError(tuple(violations))
    return None


# =============================================================================
# Batch schedule
# =============================================================================
def batch_distribution_hundredths(
    batch_count: int,
    constants: PhysicalConstants = DEFAULT_CONSTANTS,
) -> tuple[int, ...]:
    """Share of the liquid per batch in hundredths of a percent; sums to 10000.

    The first batch is lighter (0.8·base) and the last heavier (1.1·base).
    Shares are floored to hundredths and the remaining hundredths go to
    the batches with the largest fractional remainders, largest first.
    """
    lim = constants.tempering
    lo, hi = lim.batch_count
    n = int(min(hi, max(lo, batch_count)))
    if n == 2:
        return (4000, 6000)

    base = 100.0 / n
    weights = np.full(n, base)
    weights[0] = base * lim.first_batch_weight
    weights[-1] = base * lim.last_batch_weight

    hundredths_raw = weights / weights.sum() * 10000.0
    hundredths = np.floor(hundredths_raw).astype(int)
    remainders = hundredths_raw - hundredths

    deficit = 10000 - int(hundredths.sum())
    order = sorted(range(n), key=lambda i: -remainders[i])
    for k in range(deficit):
        hundredths[order[k % n]] += 1

    return tuple(int(c) for c in hundredths)


def batch_distribution(
    batch_count: int,
    constants: PhysicalConstants = DEFAULT_CONSTANTS,
) -> tuple[float, ...]:
    """Percentage of the liquid per batch, e.g. (40.0, 60.0) for two batches.

    Each value is a whole number of hundredths, so the total is exactly 100.00
    in hundredths; a float ``sum()`` may differ from 100.0 in the last bit.
    Use batch_distribution_hundredths() for exact integer arithmetic.
    """
    return tuple(c / 100.0 for c in batch_distribution_hundredths(batch_count, constants))


def safety_status(max_temp_c: float) -> str:
    if max_temp_c > EGG_COAGULATION_LIMIT_C:
        return "danger"
    if max_temp_c > EGG_COAGULATION_LIMIT_C - EGG_WARNING_MARGIN_C:
        return "warning"
    return "safe"


def simulate_tempering(
    egg_mass: float,
    egg_temp_c: float,
    liquid_mass: float,
    liquid_temp_c: float,
    batch_count: int,
    liquid_breakdown: LiquidBreakdown | None = None,
    *,
    constants: PhysicalConstants = DEFAULT_CONSTANTS,
) -> TemperingBatchPlan | TemperingValidationError:
    """Simulate adding ``liquid_mass`` at ``liquid_temp_c`` to the eggs in batches.

    Args:
        egg_mass: egg mass (g), 1–1000
        egg_temp_c: starting egg temperature, 0–30°C
        liquid_mass: hot liquid mass (g), 1–5000
        liquid_temp_c: hot liquid temperature, 60–120°C
        batch_count: number of batches, integer 2–10
        liquid_breakdown: liquid composition for its specific heat
            (fallback Cp when omitted)

    Returns:
        TemperingBatchPlan, or TemperingValidationError listing every
        violated field.
    """
    error = validate_tempering_inputs(
        egg_mass, egg_temp_c, liquid_mass, liquid_temp_c, batch_count, constants
    )
    if error is not None:
        logger.debug("tempering inputs rejected: %s", ", ".join(error.codes))
        return error

    egg_mass = float(egg_mass)
    liquid_mass = float(liquid_mass)
    t_liq = float(liquid_temp_c)
    c_egg = constants.specific_heat.egg
    c_liq = liquid_specific_heat(liquid_breakdown, constants)
    psi = constants.tempering.contact_fraction

    capacity = egg_mass * c_egg
    temp = float(egg_temp_c)
    max_temp = temp
    critical: int | None = None
    batches = []

    for idx, pct in enumerate(batch_distribution(int(batch_count), constants), start=1):
        m_b = pct / 100.0 * liquid_mass
        new_temp = mix_temperature(capacity, 1.0, temp, m_b, c_liq, t_liq)
        peak = max(new_temp, mix_temperature(psi * capacity, 1.0, temp, m_b, c_liq, t_liq))

        batches.append(
            TemperingBatch(
                batch_number=idx,
                percentage_of_liquid=pct,
                batch_mass_g=m_b,
                temp_before_c=temp,
                temp_after_c=new_temp,
                peak_temp_c=peak,
            )
        )
        if peak > max_temp:
            max_temp = peak
            critical = idx

        capacity += m_b * c_liq
        temp = new_temp

    status = safety_status(max_temp)
    logger.debug(
        "tempering n=%d final=%.2f max=%.2f (batch %s) -> %s",
        len(batches), temp, max_temp, critical, status,
    )
    return TemperingBatchPlan(
        batches=tuple(batches),
        final_temp_c=temp,
        max_batch_temp_c=max_temp,
        critical_batch_index=critical,
        safety_status=status,
        egg_limit_c=EGG_COAGULATION_LIMIT_C,
        liquid_specific_heat=c_liq,
    )


# =============================================================================
# Closed-form helpers (single pour, bulk heat balance)
# =============================================================================
def _finite_or_none(value: float) -> float | None:
    return value if math.isfinite(value) else None


def max_hot_mass_for_target(
    egg_mass: float,
    egg_temp_c: float,
    hot_temp_c: float,
    target_temp_c: float,
    liquid_cp: float | None = None,
    *,
    constants: PhysicalConstants = DEFAULT_CONSTANTS,
) -> float | None:
    """Largest hot mass (g) that keeps a single pour at or below the target."""
    c0 = constants.specific_heat.egg
    c_hot = liquid_cp or constants.specific_heat.liquid
    if hot_temp_c <= target_temp_c:
        return None
    if target_temp_c <= egg_temp_c:
        return 0.0
    return _finite_or_none(egg_mass * c0 * (target_temp_c - egg_temp_c) / (c_hot * (hot_temp_c - target_temp_c)))


def max_hot_temp_for_target(
    egg_mass: float,
    egg_temp_c: float,
    hot_mass: float,
    target_temp_c: float,
    liquid_cp: float | None = None,
    *,
    constants: PhysicalConstants = DEFAULT_CONSTANTS,
) -> float | None:
    """Hottest liquid temperature that lands the mix on the target."""
    c0 = constants.specific_heat.egg
    c_hot = liquid_cp or constants.specific_heat.liquid
    if hot_mass <= 0:
        return None
    t = (target_temp_c * (egg_mass * c0 + hot_mass * c_hot) - egg_mass * c0 * egg_temp_c) / (hot_mass * c_hot)
    t = _finite_or_none(t)
    return None if t is None else max(egg_temp_c, t)


def needed_egg_increase(
    egg_mass: float,
    egg_temp_c: float,
    liquid_mass: float,
    liquid_temp_c: float,
    target_temp_c: float,
    liquid_cp: float | None = None,
    *,
    constants: PhysicalConstants = DEFAULT_CONSTANTS,
) -> float:
    """Extra egg mass (g) needed so a single pour stays at the target."""
    c_egg = constants.specific_heat.egg
    c_liq = liquid_cp or constants.specific_heat.liquid
    if target_temp_c <= egg_temp_c or liquid_temp_c <= target_temp_c:
        return 0.0
    need = liquid_mass * c_liq * (liquid_temp_c - target_temp_c) / (c_egg * (target_temp_c - egg_temp_c))
    return max(0.0, need - egg_mass)
