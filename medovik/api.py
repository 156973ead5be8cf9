"""Public API for a full dough process report.

Standardized input:
- Recipe (ingredient -> grams)
- process temperature of the hot liquid, °C
- optional caramelization pre-heat

Optional:
- starting egg temperature
- tempering liquid temperature and batch count

This module defines:
- ProcessReport dataclass
- run_process_report() entrypoint (decision + viscosity + tempering + chemistry)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from .chemistry import PHEstimate, WaterActivity, estimate_ph, estimate_water_activity
from .constants import DEFAULT_CONSTANTS, PhysicalConstants
from .decision import Decision, decide
from .recipe import CaramelizationOptions, Recipe, as_caramelization, as_recipe
from .tempering import TemperingBatchPlan, TemperingValidationError, simulate_tempering
from .viscosity import ViscosityResult, compute_viscosity


@dataclass(frozen=True)
class ProcessReport:
    recipe: Recipe
    decision: Decision
    viscosity: ViscosityResult
    tempering: TemperingBatchPlan | TemperingValidationError
    water_activity: WaterActivity
    ph: PHEstimate

    @property
    def tempering_ok(self) -> bool:
        return isinstance(self.tempering, TemperingBatchPlan)

    def to_dict(self) -> dict[str, Any]:
        return {
            "recipe": self.recipe.to_dict(),
            "decision": self.decision.to_dict(),
            "viscosity": self.viscosity.to_dict(),
            "tempering": self.tempering.to_dict(),
            "water_activity": self.water_activity.to_dict(),
            "ph": self.ph.to_dict(),
        }


def run_process_report(
    recipe: Recipe | Mapping[str, Any],
    *,
    temperature_c: float = 30.0,
    caramelization: CaramelizationOptions | Mapping[str, Any] | None = None,
    egg_temp_c: float = 20.0,
    liquid_temp_c: float = 90.0,
    batch_count: int = 5,
    debug: bool = False,
    constants: PhysicalConstants = DEFAULT_CONSTANTS,
) -> ProcessReport:
    """Run the process checks for one recipe:

    1) decision (hydration gates, optimizer, plan B)
    2) viscosity at the process temperature
    3) tempering of butter+sugar+honey+soda into the eggs
    4) water activity and pH of the dough

    Returns:
      ProcessReport
    """
    r = as_recipe(recipe)
    options = as_caramelization(caramelization)

    decision = decide(r, options, egg_temp_c=egg_temp_c, constants=constants)
    viscosity = compute_viscosity(
        r, temperature_c, options, egg_temp_c=egg_temp_c, debug=debug, constants=constants
    )
    tempering = simulate_tempering(
        r.eggs,
        egg_temp_c,
        r.liquid_mass,
        liquid_temp_c,
        batch_count,
        r.liquid_breakdown(),
        constants=constants,
    )
    return ProcessReport(
        recipe=r,
        decision=decision,
        viscosity=viscosity,
        tempering=tempering,
        water_activity=estimate_water_activity(r, constants=constants),
        ph=estimate_ph(r, constants=constants),
    )
