"""Medovik dough process and rheology engine.

Core contract:
- inputs: recipe in grams (flour, butter, sugar, honey, eggs, soda) and
  process options (temperature, caramelization, egg temperature)
- workflow: syrup -> emulsion -> dough viscosity -> temperature search ->
  GO / WAIT / STOP decision; tempering is simulated independently

Entry points: compute_viscosity, simulate_tempering, find_optimal_work_plan,
decide (plus run_process_report bundling them). Recipe-level indicators:
analyze_recipe, recipe_adjustment, estimate_water_activity, estimate_ph.
"""

from .constants import DEFAULT_CONSTANTS, EGG_COAGULATION_LIMIT_C, PhysicalConstants
from .recipe import CaramelizationOptions, LiquidBreakdown, Recipe
from .viscosity import ViscosityResult, compute_viscosity, evaluate_dough
from .tempering import (
    TemperingBatchPlan,
    TemperingValidationError,
    batch_distribution,
    batch_distribution_hundredths,
    max_hot_mass_for_target,
    max_hot_temp_for_target,
    needed_egg_increase,
    simulate_tempering,
)
from .optimizer import WorkPlan, classify_band, evaluate_at_temperature, find_optimal_work_plan
from .decision import Decision, decide
from .density import calibrate_density, effective_density
from .chemistry import estimate_brix, estimate_ph, estimate_water_activity
from .analysis import RecipeAnalysis, analyze_recipe, recipe_adjustment
from .api import ProcessReport, run_process_report

__version__ = "0.1.0"
