"""Recipe composition analysis against classic Medovik proportions.

Each of flour, butter, sugars (sugar + honey), eggs and soda is expressed as a
share of the total mass and checked against its target range; every check
outside its range costs 20 points of a 100-point quality score.
recipe_adjustment() turns the out-of-range checks into gram deltas.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from .constants import DEFAULT_CONSTANTS, PhysicalConstants
from .recipe import INGREDIENTS, Recipe, as_recipe
from .tempering import FieldViolation
from .utils import is_finite_number

COMPONENTS = ("flour", "butter", "sugars", "eggs", "soda")


@dataclass(frozen=True)
class RecipeAnalysis:
    recipe: Recipe
    total_mass: float
    percentages: Mapping[str, float]
    checks: Mapping[str, str]
    hydration_pct: float
    water_mass: float
    quality_score: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "recipe": self.recipe.to_dict(),
            "total_mass": self.total_mass,
            "percentages": dict(self.percentages),
            "checks": dict(self.checks),
            "hydration_pct": self.hydration_pct,
            "water_mass": self.water_mass,
            "quality_score": self.quality_score,
        }


@dataclass(frozen=True)
class RecipeAnalysisError:
    """VALIDATION_FAILED (with violations) or ZERO_TOTAL; returned, never raised."""

    code: str
    violations: tuple[FieldViolation, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {"error": {"code": self.code, "details": [v.to_dict() for v in self.violations]}}


def validate_recipe(
    recipe: Recipe | Mapping[str, Any],
    constants: PhysicalConstants = DEFAULT_CONSTANTS,
) -> tuple[FieldViolation, ...]:
    """Out-of-range or non-numeric ingredient masses, before any coercion."""
    values = recipe.to_dict() if isinstance(recipe, Recipe) else recipe
    if not isinstance(values, Mapping):
        raise TypeError(f"recipe must be a mapping, got {type(values).__name__}")
    limits = constants.recipe_limits
    out = []
    for ing in INGREDIENTS:
        if ing not in values:
            continue
        v = values[ing]
        lo, hi = getattr(limits, ing)
        if not (is_finite_number(v) and lo <= float(v) <= hi):
            out.append(FieldViolation("INVALID_RANGE", ing, v, lo, hi))
    return tuple(out)


def analyze_recipe(
    recipe: Recipe | Mapping[str, Any],
    *,
    constants: PhysicalConstants = DEFAULT_CONSTANTS,
) -> RecipeAnalysis | RecipeAnalysisError:
    """Composition shares, range checks, hydration and a quality score.

    Args:
        recipe: Recipe or mapping of ingredient -> grams
        constants: target ranges and recipe limits

    Returns:
        RecipeAnalysis, or RecipeAnalysisError for invalid masses or an
        empty recipe.
    """
    violations = validate_recipe(recipe, constants)
    if violations:
        return RecipeAnalysisError("VALIDATION_FAILED", violations)

    r = as_recipe(recipe)
    total = r.total_mass
    if total <= 0:
        return RecipeAnalysisError("ZERO_TOTAL")

    pct = {ing: getattr(r, ing) / total * 100.0 for ing in INGREDIENTS}
    pct["sugars"] = (r.sugar + r.honey) / total * 100.0

    ranges = constants.composition
    checks = {}
    quality = 100.0
    for comp in COMPONENTS:
        lo, hi = getattr(ranges, comp)
        if pct[comp] < lo:
            checks[comp] = "low"
            quality -= ranges.penalty
        elif pct[comp] > hi:
            checks[comp] = "high"
            quality -= ranges.penalty
        else:
            checks[comp] = "optimal"

    return RecipeAnalysis(
        recipe=r,
        total_mass=total,
        percentages=pct,
        checks=checks,
        hydration_pct=r.hydration_pct(constants),
        water_mass=r.water_mass(constants),
        quality_score=max(0.0, quality),
    )


def _toward_range(mass: float, total: float, bounds: tuple[float, float]) -> int | None:
    lo, hi = bounds
    share = mass / total * 100.0
    if share < lo:
        return max(0, int(round(lo / 100.0 * total - mass)))
    if share > hi:
        return -max(0, int(round(mass - hi / 100.0 * total)))
    return None


def recipe_adjustment(
    analysis: RecipeAnalysis | RecipeAnalysisError | None,
    constants: PhysicalConstants = DEFAULT_CONSTANTS,
) -> dict[str, int]:
    """Gram deltas (positive = add) that move each share to its nearest range edge.

    Sugars are only ever reduced, sucrose first and then honey; soda is only
    reduced. An error or missing analysis gives no adjustment.
    """
    if not isinstance(analysis, RecipeAnalysis):
        return {}
    r = analysis.recipe
    total = analysis.total_mass
    ranges = constants.composition
    adj: dict[str, int] = {}

    delta = _toward_range(r.flour, total, ranges.flour)
    if delta is not None:
        adj["flour"] = delta

    sugars = r.sugar + r.honey
    if sugars / total * 100.0 > ranges.sugars[1]:
        excess = max(0, int(round(sugars - ranges.sugars[1] / 100.0 * total)))
        from_sugar = min(excess, int(r.sugar))
        adj["sugar"] = -from_sugar
        if excess > from_sugar:
            adj["honey"] = -(excess - from_sugar)

    for ing in ("eggs", "butter"):
        delta = _toward_range(getattr(r, ing), total, getattr(ranges, ing))
        if delta is not None:
            adj[ing] = delta

    if r.soda / total * 100.0 > ranges.soda[1]:
        adj["soda"] = -max(0, int(round(r.soda - ranges.soda[1] / 100.0 * total)))

    return adj
