#!/usr/bin/env python3
"""
Medovik Demo 1: Decision and Work Plan
======================================

Classic recipe (grams):
  flour 500, butter 120, sugar 150, honey 155, eggs 95, soda 5

Chain:
  syrup (honey + sugar + butter water)  ->  Brix, η_aq
  emulsion (+ eggs, heat balance)       ->  η0_emulsion
  dough (+ flour)                       ->  η = η0 · η_r(φ_eff) · F_net

The optimizer scans 18-45°C for the lowest work cost and the decision
gates on hydration before looking at the viscosity band. Then we vary
flour and eggs to walk through every outcome.
"""

import logging

from medovik import (
    analyze_recipe,
    compute_viscosity,
    decide,
    estimate_ph,
    estimate_water_activity,
    find_optimal_work_plan,
    recipe_adjustment,
)
from medovik.recipe import Recipe

CLASSIC = Recipe(flour=500, butter=120, sugar=150, honey=155, eggs=95, soda=5)

VARIANTS = [
    ("classic", CLASSIC),
    ("flour 400", CLASSIC.adjusted(flour=-100)),
    ("flour 700", CLASSIC.adjusted(flour=200)),
    ("flour 1500", CLASSIC.adjusted(flour=1000)),
    ("eggs 150", CLASSIC.adjusted(eggs=55)),
    ("eggs 205", CLASSIC.adjusted(eggs=110)),
]


def show_viscosity(recipe):
    print("=" * 70)
    print("VISCOSITY AT 30°C")
    print("=" * 70)
    res = compute_viscosity(recipe, 30.0, debug=True)
    c = res.components
    print(f"  η            = {res.value_cp} cP")
    print(f"  hydration    = {c.hydration_pct:.2f}%")
    print(f"  Brix (dough) = {c.brix:.1f}")
    print(f"  φ, φ_eff     = {c.packing_fraction:.3f}, {c.packing_fraction_effective:.3f}")
    print(f"  η_r, F_net   = {c.relative_viscosity:.2f}, {c.network_factor:.3f}")
    print(f"  η0 syrup / emulsion / dough = {c.eta0_syrup} / {c.eta0_emulsion} / {c.eta0_dough} cP")
    print(f"  T_emulsion   = {res.trace.emulsion_temp_c:.2f}°C")
    wt = res.work_target
    print(f"  work target  = {wt.optimal_temp_c}°C (η = {wt.eta_at_optimal} cP)")


def show_composition(recipe):
    print("=" * 70)
    print("COMPOSITION AND CHEMISTRY")
    print("=" * 70)
    a = analyze_recipe(recipe)
    for comp, check in a.checks.items():
        print(f"  {comp:<7} {a.percentages[comp]:>6.2f}%  {check}")
    print(f"  quality score = {a.quality_score:g}")
    adj = recipe_adjustment(a)
    if adj:
        print("  adjust: " + ", ".join(f"{k} {v:+d} g" for k, v in adj.items()))
    aw = estimate_water_activity(recipe)
    ph = estimate_ph(recipe)
    print(f"  a_w = {aw.value:.3f} ({aw.band}), pH = {ph.value:.2f} ({ph.band}, {ph.safety})")


def show_plan(recipe, caramelization=None):
    plan = find_optimal_work_plan(recipe, caramelization)
    a = plan.plan_a
    label = "with pre-heat" if plan.caramelization else "no pre-heat"
    print(f"  [{label}] T* = {a.optimal_temp_c}°C, η = {a.eta_at_optimal} cP, band = {a.band}")
    if plan.plan_b is not None:
        b = plan.plan_b
        print(f"    plan B: Δflour = {b.delta_flour_g} g, Δliquid = {b.delta_liquid_ml} ml, "
              f"T = {b.suggested_temp_c}")


def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    show_composition(CLASSIC)
    print()
    show_viscosity(CLASSIC)

    print("\n" + "=" * 70)
    print("OPTIMAL WORK TEMPERATURE")
    print("=" * 70)
    show_plan(CLASSIC)
    show_plan(CLASSIC, {"enabled": True})

    print("\n" + "=" * 70)
    print("DECISIONS")
    print("=" * 70)
    print(f"  {'variant':<12} {'hyd %':>6}  {'status':<5} {'severity':<9} reason")
    print("  " + "-" * 60)
    for name, r in VARIANTS:
        d = decide(r)
        flag = " (override)" if d.override_applied else ""
        print(f"  {name:<12} {d.hydration_pct:>6.2f}  {d.status:<5} {d.severity:<9} {d.reason}{flag}")

    d = decide(CLASSIC)
    if d.soda is not None:
        print(f"\n  soda = {d.soda.ratio_pct:.2f}% of flour, taste warning: {d.soda.taste_warning}")


if __name__ == "__main__":
    main()
