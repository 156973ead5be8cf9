from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from typing import Any, Mapping

from .constants import DEFAULT_CONSTANTS, PhysicalConstants
from .utils import as_mass, clamp, is_finite_number

INGREDIENTS = ("flour", "butter", "sugar", "honey", "eggs", "soda")
_TRUE_STRINGS = ("true", "1", "yes", "on")


def as_flag(value: Any) -> bool:
    """Bool from a bool, a finite number, or a "true"/"false"-style string."""
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_STRINGS
    if isinstance(value, bool):
        return value
    return is_finite_number(value) and float(value) != 0.0


@dataclass(frozen=True)
class Recipe:
    """Dough recipe in grams.

    Fields follow the parser's ingredient keys:
      flour, butter, sugar, honey, eggs, soda

    Values are coerced on construction: non-numeric, NaN, infinite or negative
    masses become 0.0. Instances are never mutated; use adjusted() to derive
    a corrected recipe.
    """

    flour: float = 0.0
    butter: float = 0.0
    sugar: float = 0.0
    honey: float = 0.0
    eggs: float = 0.0
    soda: float = 0.0

    def __post_init__(self):
        for f in fields(self):
            object.__setattr__(self, f.name, as_mass(getattr(self, f.name)))

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> Recipe:
        if not isinstance(data, Mapping):
            raise TypeError(f"recipe must be a mapping, got {type(data).__name__}")
        return cls(**{k: data.get(k, 0.0) for k in INGREDIENTS})

    @property
    def total_mass(self) -> float:
        return self.flour + self.butter + self.sugar + self.honey + self.eggs + self.soda

    @property
    def liquid_mass(self) -> float:
        """Hot-side mass for tempering (everything except flour and eggs)."""
        return self.butter + self.sugar + self.honey + self.soda

    def water_mass(self, constants: PhysicalConstants = DEFAULT_CONSTANTS) -> float:
        h = constants.hydration
        return self.eggs * h.eggs + self.honey * h.honey + self.butter * h.butter

    def hydration_pct(self, constants: PhysicalConstants = DEFAULT_CONSTANTS) -> float:
        """Water from eggs/honey/butter over flour mass (%); 0 without flour."""
        if self.flour <= 0:
            return 0.0
        return self.water_mass(constants) / self.flour * 100.0

    def liquid_breakdown(self) -> LiquidBreakdown:
        return LiquidBreakdown(butter=self.butter, sugar=self.sugar, honey=self.honey, soda=self.soda)

    def adjusted(self, **deltas: float) -> Recipe:
        """New recipe with per-ingredient gram deltas added."""
        unknown = set(deltas) - set(INGREDIENTS)
        if unknown:
            raise ValueError(f"unknown ingredients: {sorted(unknown)}")
        values = self.to_dict()
        for k, d in deltas.items():
            values[k] = values[k] + float(d)
        return Recipe(**values)

    def to_dict(self) -> dict[str, float]:
        return asdict(self)


@dataclass(frozen=True)
class LiquidBreakdown:
    """Composition of the hot liquid (g), used for its effective specific heat."""

    butter: float = 0.0
    sugar: float = 0.0
    honey: float = 0.0
    soda: float = 0.0

    def __post_init__(self):
        for f in fields(self):
            object.__setattr__(self, f.name, as_mass(getattr(self, f.name)))

    @property
    def total(self) -> float:
        return self.butter + self.sugar + self.honey + self.soda

    def to_dict(self) -> dict[str, float]:
        return asdict(self)


@dataclass(frozen=True)
class CaramelizationOptions:
    """Syrup pre-heat settings.

    When enabled, a fraction of the honey and butter water pools evaporates
    before the dough is evaluated. Ranges: preheat 105–110°C, 1.5–3.0 min,
    evaporation 5–10% of the pools.
    """

    enabled: bool = False
    preheat_temp_c: float = 108.0
    preheat_minutes: float = 2.0
    evaporation_fraction: float = 0.08

    def clamped(self) -> CaramelizationOptions:
        def pick(v: Any, default: float, lo: float, hi: float) -> float:
            x = as_mass(v) if v is not None else default
            return clamp(x, lo, hi)

        return CaramelizationOptions(
            enabled=as_flag(self.enabled),
            preheat_temp_c=pick(self.preheat_temp_c, 108.0, 105.0, 110.0),
            preheat_minutes=pick(self.preheat_minutes, 2.0, 1.5, 3.0),
            evaporation_fraction=pick(self.evaporation_fraction, 0.08, 0.05, 0.10),
        )

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> CaramelizationOptions:
        if not data:
            return cls()
        defaults = cls()
        return cls(
            enabled=as_flag(data.get("enabled", False)),
            preheat_temp_c=data.get("preheat_temp_c", defaults.preheat_temp_c),
            preheat_minutes=data.get("preheat_minutes", defaults.preheat_minutes),
            evaporation_fraction=data.get("evaporation_fraction", defaults.evaporation_fraction),
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def as_recipe(recipe: Recipe | Mapping[str, Any]) -> Recipe:
    if isinstance(recipe, Recipe):
        return recipe
    return Recipe.from_mapping(recipe)


def as_caramelization(
    options: CaramelizationOptions | Mapping[str, Any] | None,
) -> CaramelizationOptions:
    if options is None:
        return CaramelizationOptions()
    if isinstance(options, CaramelizationOptions):
        return options.clamped()
    return CaramelizationOptions.from_mapping(options).clamped()
