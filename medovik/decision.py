"""GO / WAIT / STOP decision for a dough.

Layered gates, first match wins:

    1. hydration ≥ 35%        → STOP  (too wet, no plan)
    2. hydration < 15%        → WAIT  (dry/crumbly, liquid plan)
    3. 31% ≤ hydration < 35%  → WAIT  (heavy Medovik, explanatory)
    4. otherwise              → optimizer band → status, with the operational
                                override turning a close sticky state into GO

Each call is independent; nothing is remembered between calls.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping

from .constants import DEFAULT_CONSTANTS, PhysicalConstants
from .optimizer import (
    PlanA,
    WorkPlan,
    band_to_status,
    find_optimal_work_plan,
    liquid_plan,
    plan_a_actions,
)
from .recipe import CaramelizationOptions, Recipe, as_caramelization, as_recipe

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SodaAdvisory:
    ratio_pct: float
    taste_warning: bool
    advisory_range_pct: tuple[float, float] = (0.5, 1.0)

    def to_dict(self) -> dict[str, Any]:
        lo, hi = self.advisory_range_pct
        return {"ratio_pct": self.ratio_pct, "taste_warning": self.taste_warning, "advisory_range_pct": [lo, hi]}


@dataclass(frozen=True)
class Decision:
    status: str
    severity: str
    reason: str
    message: str
    hydration_pct: float
    band: str
    plan: WorkPlan | None = None
    actions: tuple[str, ...] = ()
    override_applied: bool = False
    soda: SodaAdvisory | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status,
            "severity": self.severity,
            "reason": self.reason,
            "message": self.message,
            "hydration_pct": self.hydration_pct,
            "band": self.band,
            "plan": None if self.plan is None else self.plan.to_dict(),
            "actions": list(self.actions),
            "override_applied": self.override_applied,
            "soda": None if self.soda is None else self.soda.to_dict(),
        }


def soda_advisory(recipe: Recipe) -> SodaAdvisory | None:
    """Baking soda as % of flour; above 1% the soapy taste starts to show."""
    if recipe.flour <= 0 or recipe.soda <= 0:
        return None
    ratio = recipe.soda / recipe.flour * 100.0
    return SodaAdvisory(ratio_pct=round(ratio, 2), taste_warning=ratio >= 1.0)


_BAND_OUTCOME = {
    "too-wet": (
        "TOO_WET",
        "Heavy and sticky dough: chill it and correct with a little flour.",
        (
            "lower the temperature to 18-22°C",
            "rest or chill for 15-25 minutes",
            "roll between two sheets with a light dusting",
            "add 10-20 g of flour if needed",
        ),
    ),
    "sticky": (
        "STICKY",
        "Dough tends to stick: chill briefly, then roll between two sheets.",
        (
            "chill for 10-15 minutes",
            "roll between two sheets",
            "add 10-20 g of flour if needed",
        ),
    ),
    "optimal": (
        "OPTIMAL",
        "Ready to roll: consistency is in the optimal band.",
        (
            "roll out now",
            "keep a steady pace so the dough does not overheat",
        ),
    ),
    "stiff": (
        "STIFF",
        "Dough is slightly stiff: raise the working temperature and add a little liquid if needed.",
        (
            "raise the working temperature to 28-34°C",
            "short rest of about 10 minutes",
            "add 20-30 mL of warm liquid if needed",
        ),
    ),
    "too-stiff": (
        "TOO_STIFF",
        "Dough is very stiff: stop, add warm liquid and let it rest.",
        (
            "add 50 mL of warm liquid",
            "rest for 30 minutes",
            "measure again before rolling",
        ),
    ),
}


def decide(
    recipe: Recipe | Mapping[str, Any],
    caramelization: CaramelizationOptions | Mapping[str, Any] | None = None,
    *,
    egg_temp_c: float = 20.0,
    constants: PhysicalConstants = DEFAULT_CONSTANTS,
) -> Decision:
    """Map a recipe to an operational status with corrective actions."""
    r = as_recipe(recipe)
    options = as_caramelization(caramelization)
    g = constants.gates
    hydration = r.hydration_pct(constants)
    h_report = round(hydration, 1)
    soda = soda_advisory(r)

    if hydration >= g.critical_high:
        logger.debug("hydration %.1f%% at or above %.0f%%: STOP", hydration, g.critical_high)
        return Decision(
            status="STOP",
            severity="high",
            reason="HYDRATION_CRITICAL_HIGH",
            message=f"Hydration is far too high ({h_report}%). Stop: chill the mix or add flour until it drops below {g.heavy_lower:g}%.",
            hydration_pct=h_report,
            band="too-wet",
            actions=(
                "chill for 20-30 minutes",
                f"add flour gradually until hydration is below {g.heavy_lower:g}%",
                "measure again after each addition",
            ),
            soda=soda,
        )

    if hydration < g.critical_low:
        logger.debug("hydration %.1f%% below %.0f%%: WAIT with liquid plan", hydration, g.critical_low)
        plan = WorkPlan(
            plan_a=PlanA(optimal_temp_c=30.0, eta_at_optimal=None, band="stiff", actions=plan_a_actions("stiff")),
            plan_b=liquid_plan(r, None, constants),
            caramelization=options.enabled,
        )
        return Decision(
            status="WAIT",
            severity="high",
            reason="HYDRATION_CRITICAL_LOW",
            message=f"Dough is dry and crumbly (hydration {h_report}%).",
            hydration_pct=h_report,
            band="too-stiff",
            plan=plan,
            actions=(
                "add 1-2 tablespoons of warm liquid",
                "raise the working temperature slightly",
                "knead gently, then rest for 15-20 minutes",
            ),
            soda=soda,
        )

    plan = find_optimal_work_plan(r, options, egg_temp_c=egg_temp_c, constants=constants)
    band = plan.plan_a.band

    if g.heavy_lower <= hydration < g.critical_high:
        return Decision(
            status="WAIT",
            severity="medium",
            reason="HEAVY_MEDOVIK",
            message=(
                f"Heavy, sticky Medovik at {h_report}% hydration: normal for classic recipes, "
                "the layers stay moist and tender after soaking."
            ),
            hydration_pct=h_report,
            band=band,
            plan=plan,
            actions=(
                "chill for 20-30 minutes",
                "roll between two sheets with a very light dusting",
                "roll quickly before the dough warms up",
                "optionally add 10-20 g of flour if it stays very sticky, then chill again",
            ),
            override_applied=plan.override_applied,
            soda=soda,
        )

    if band == "sticky" and plan.override_applied:
        return Decision(
            status="GO",
            severity="low",
            reason="OPERATIONAL_OVERRIDE",
            message="Operational override: warm but workable, it firms up once cooled.",
            hydration_pct=h_report,
            band=band,
            plan=plan,
            actions=(
                "roll now, quickly, with a very light dusting",
                "let the layers rest and cool after rolling",
            ),
            override_applied=True,
            soda=soda,
        )

    reason, message, actions = _BAND_OUTCOME.get(
        band, ("UNKNOWN", "Viscosity could not be classified.", ("measure again",))
    )
    return Decision(
        status=band_to_status(band),
        severity="low",
        reason=reason,
        message=message,
        hydration_pct=h_report,
        band=band,
        plan=plan,
        actions=actions,
        override_applied=plan.override_applied,
        soda=soda,
    )
