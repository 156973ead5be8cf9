"""Physical constants and calibration tables for the Medovik dough model.

Everything numeric the engine uses lives here, grouped by concern:

- water fractions used for hydration (egg / honey / butter)
- specific heats (J/g·K) for heat balances
- TRUE (intrinsic) densities for volume fractions (g/cm³)
- viscosity model parameters (Krieger–Dougherty, Arrhenius-like slopes,
  network factor weights, guards)
- band thresholds, hydration gates, search window and cost weights
- composition ranges and per-ingredient chemistry tables (water activity, pH)

These are empirical calibration values, not hard-derived physics. Tables are
frozen dataclasses; derive variants with ``dataclasses.replace``::

    from dataclasses import replace
    c = replace(DEFAULT_CONSTANTS,
                specific_heat=replace(DEFAULT_CONSTANTS.specific_heat, honey=3.35))
"""

from __future__ import annotations

from dataclasses import dataclass, field


# =============================================================================
# Hard safety limits (not part of the overridable table)
# =============================================================================
EGG_COAGULATION_LIMIT_C = 68.0
EGG_WARNING_MARGIN_C = 3.0


@dataclass(frozen=True)
class HydrationFractions:
    """Mass fraction of water contributed by each wet ingredient."""

    eggs: float = 0.75
    honey: float = 0.18
    butter: float = 0.16


@dataclass(frozen=True)
class SpecificHeats:
    """Specific heat capacities (J/g·K)."""

    egg: float = 3.3
    butter: float = 2.1
    sugar: float = 1.25
    honey: float = 2.2
    soda: float = 0.9
    liquid: float = 2.4  # fallback when no composition is known


@dataclass(frozen=True)
class TrueDensities:
    """Intrinsic densities (g/cm³) used for volume fractions."""

    water: float = 1.000
    flour: float = 1.55
    sugar: float = 1.59
    honey: float = 1.42
    butter: float = 0.911
    eggs: float = 1.031
    soda: float = 2.159


@dataclass(frozen=True)
class ViscosityParams:
    # Krieger–Dougherty
    phi_max: float = 0.60
    intrinsic: float = 2.5
    min_one_minus: float = 0.05

    # flour water absorption in the dough phase
    flour_absorption: float = 0.16

    # sugar binding of residual water
    sugar_bind_sucrose: float = 0.025
    sugar_bind_invert: float = 0.035
    sugar_bind_cap: float = 0.6
    honey_invert_fraction: float = 0.82

    # thermal sensitivity
    k_temp: float = 0.045
    k_temp_fat: float = 0.025
    t_ref: float = 25.0

    # packing softening
    k_fat: float = 0.20
    k_sugar: float = 0.10
    phi_eff_ceiling: float = 0.98  # fraction of phi_max

    # structural network factor
    beta_net: float = 0.60
    s_sugar: float = 0.75
    s_fat: float = 0.50
    s_egg: float = 0.15
    hydration_peak: float = 24.0
    hydration_width: float = 3.0
    brix_norm: float = 80.0
    fat_norm: float = 0.20
    egg_norm: float = 0.15

    # emulsion tightening K_egg in [base, base + span]
    egg_tightening_base: float = 1.05
    egg_tightening_span: float = 0.10
    egg_fraction_norm: float = 0.20

    # melted butter reference (~50 cP at 40°C)
    eta_fat_ref_40c: float = 50.0
    eta_fat_floor: float = 5.0

    # guards
    denom_guard: float = 1e-9
    eta_cap: float = 300000.0

    # process temperatures outside this range are clamped
    t_floor: float = -273.15
    t_ceiling: float = 1000.0

    # Brix -> syrup viscosity at 25°C (cP), monotone
    brix_table: tuple[tuple[float, float], ...] = (
        (30.0, 2.0),
        (40.0, 3.0),
        (50.0, 9.0),
        (60.0, 35.0),
        (65.0, 110.0),
        (70.0, 400.0),
        (75.0, 1500.0),
        (80.0, 4500.0),
        (85.0, 8000.0),
        (90.0, 12500.0),
        (95.0, 20000.0),
    )


@dataclass(frozen=True)
class ViscosityBands:
    """Band edges (cP): too-wet < sticky_min <= sticky < optimal_min <= ..."""

    sticky_min: float = 7000.0
    optimal_min: float = 12000.0
    optimal_max: float = 20000.0
    stiff_max: float = 30000.0


@dataclass(frozen=True)
class HydrationGates:
    critical_high: float = 35.0
    heavy_lower: float = 31.0
    critical_low: float = 15.0
    target: float = 24.0
    liquid_efficiency: float = 0.9
    override_low: float = 20.0
    override_high: float = 28.0


@dataclass(frozen=True)
class WorkWindow:
    """Classic working window reported alongside every viscosity result."""

    t_min: float = 35.0
    t_max: float = 40.0
    step: float = 0.5
    eta_min: float = 12000.0
    eta_max: float = 20000.0


@dataclass(frozen=True)
class SearchConfig:
    t_min: float = 18.0
    t_max: float = 45.0
    step: float = 0.5
    refine_window: float = 1.0
    refine_step: float = 0.25


@dataclass(frozen=True)
class CostWeights:
    alpha_stickiness: float = 0.15
    beta_crack: float = 0.15
    room_bias_center: float = 32.0
    room_bias_weight: float = 0.02
    crack_hydration: float = 20.0
    crack_phi_eff: float = 0.45
    override_log_distance: float = 0.8


@dataclass(frozen=True)
class FlourCorrection:
    min_grams: float = 10.0
    max_grams: float = 80.0
    max_fraction_of_flour: float = 0.12


@dataclass(frozen=True)
class TemperingLimits:
    egg_mass: tuple[float, float] = (1.0, 1000.0)
    egg_temp: tuple[float, float] = (0.0, 30.0)
    liquid_mass: tuple[float, float] = (1.0, 5000.0)
    liquid_temp: tuple[float, float] = (60.0, 120.0)
    batch_count: tuple[int, int] = (2, 10)
    contact_fraction: float = 0.20
    first_batch_weight: float = 0.8
    last_batch_weight: float = 1.1


@dataclass(frozen=True)
class DensityConfig:
    average: float = 1.25
    clamp_min: float = 1.15
    clamp_max: float = 1.35
    air_factor: float = 0.03


@dataclass(frozen=True)
class CompositionRanges:
    """Target share of the total recipe mass (%) for a classic Medovik dough."""

    flour: tuple[float, float] = (48.0, 52.0)
    butter: tuple[float, float] = (10.0, 14.0)
    sugars: tuple[float, float] = (28.0, 33.0)
    eggs: tuple[float, float] = (8.0, 11.0)
    soda: tuple[float, float] = (0.4, 0.8)
    penalty: float = 20.0


@dataclass(frozen=True)
class RecipeLimits:
    """Accepted mass range (g) per ingredient for recipe analysis."""

    flour: tuple[float, float] = (0.0, 10000.0)
    butter: tuple[float, float] = (0.0, 5000.0)
    sugar: tuple[float, float] = (0.0, 5000.0)
    honey: tuple[float, float] = (0.0, 5000.0)
    eggs: tuple[float, float] = (0.0, 5000.0)
    soda: tuple[float, float] = (0.0, 100.0)


@dataclass(frozen=True)
class ChemistryParams:
    # Norrish-like water activity
    molar_mass_water: float = 18.015
    molar_mass_sucrose: float = 342.296
    norrish_k: float = 1.4
    aw_min: float = 0.3
    aw_max: float = 1.0

    # crude fallback: water content per ingredient, dissolved solute share
    water_content: tuple[tuple[str, float], ...] = (
        ("flour", 0.12),
        ("butter", 0.16),
        ("sugar", 0.005),
        ("honey", 0.18),
        ("eggs", 0.75),
    )
    solute_fraction: float = 0.6
    solute_mole_factor: float = 0.003
    crude_aw_scale: float = 0.99

    # sugar content for composition Brix
    sugar_content: tuple[tuple[str, float], ...] = (
        ("flour", 0.01),
        ("butter", 0.001),
        ("sugar", 1.0),
        ("honey", 0.82),
        ("eggs", 0.01),
        ("soda", 0.0),
    )

    # pH by buffer-weighted [H+] mixing
    ph_ref: tuple[tuple[str, float], ...] = (
        ("flour", 6.5),
        ("butter", 6.7),
        ("sugar", 7.0),
        ("honey", 3.9),
        ("eggs", 7.6),
        ("soda", 8.3),
    )
    buffer_capacity: tuple[tuple[str, float], ...] = (
        ("flour", 0.005),
        ("butter", 0.010),
        ("sugar", 0.001),
        ("honey", 0.002),
        ("eggs", 0.025),
        ("soda", 0.001),
    )
    ph_min: float = 3.0
    ph_max: float = 9.0
    acid_safety_ph: float = 4.6


@dataclass(frozen=True)
class PhysicalConstants:
    hydration: HydrationFractions = field(default_factory=HydrationFractions)
    specific_heat: SpecificHeats = field(default_factory=SpecificHeats)
    densities: TrueDensities = field(default_factory=TrueDensities)
    viscosity: ViscosityParams = field(default_factory=ViscosityParams)
    bands: ViscosityBands = field(default_factory=ViscosityBands)
    gates: HydrationGates = field(default_factory=HydrationGates)
    work: WorkWindow = field(default_factory=WorkWindow)
    search: SearchConfig = field(default_factory=SearchConfig)
    cost: CostWeights = field(default_factory=CostWeights)
    flour_correction: FlourCorrection = field(default_factory=FlourCorrection)
    tempering: TemperingLimits = field(default_factory=TemperingLimits)
    density: DensityConfig = field(default_factory=DensityConfig)
    composition: CompositionRanges = field(default_factory=CompositionRanges)
    recipe_limits: RecipeLimits = field(default_factory=RecipeLimits)
    chemistry: ChemistryParams = field(default_factory=ChemistryParams)

    @property
    def eta_target_mid(self) -> float:
        """Geometric midpoint of the work viscosity band."""
        return (self.work.eta_min * self.work.eta_max) ** 0.5


DEFAULT_CONSTANTS = PhysicalConstants()
