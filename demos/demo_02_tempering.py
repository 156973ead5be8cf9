#!/usr/bin/env python3
"""
Medovik Demo 2: Tempering Hot Syrup into Eggs
=============================================

Hot liquid (butter + sugar + honey + soda) is added to the eggs in N
batches. Each batch mixes by heat balance:

  T_after = (m_e·Cp_e·T_e + m_l·Cp_l·T_l) / (m_e·Cp_e + m_l·Cp_l)

and the contact zone (20% of the current egg mass) peaks at

  T_peak = (0.2·m_e·Cp_e·T_before + m_l·Cp_l·T_l) / (0.2·m_e·Cp_e + m_l·Cp_l)

Egg proteins coagulate around 68°C; above 65°C is a warning.
"""

import argparse
import logging

from medovik import (
    TemperingBatchPlan,
    max_hot_mass_for_target,
    max_hot_temp_for_target,
    needed_egg_increase,
    simulate_tempering,
)
from medovik.constants import EGG_COAGULATION_LIMIT_C


def print_plan(plan):
    print(f"  Cp_liquid = {plan.liquid_specific_heat:.3f} J/g·K")
    print(f"  {'#':>2} {'%':>6} {'mass g':>8} {'before':>7} {'after':>7} {'peak':>7}")
    for b in plan.batches:
        mark = "  <-- critical" if plan.critical_batch_index == b.batch_number else ""
        print(f"  {b.batch_number:>2} {b.percentage_of_liquid:>6.2f} {b.batch_mass_g:>8.1f} "
              f"{b.temp_before_c:>7.2f} {b.temp_after_c:>7.2f} {b.peak_temp_c:>7.2f}{mark}")
    print(f"  final = {plan.final_temp_c:.2f}°C, max peak = {plan.max_batch_temp_c:.2f}°C, "
          f"status = {plan.safety_status}")


def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--egg-mass", type=float, default=200.0)
    ap.add_argument("--egg-temp", type=float, default=20.0)
    ap.add_argument("--liquid-mass", type=float, default=300.0)
    ap.add_argument("--liquid-temp", type=float, default=90.0)
    args = ap.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    for n in (3, 6):
        print("=" * 70)
        print(f"SCHEDULE WITH {n} BATCHES")
        print("=" * 70)
        plan = simulate_tempering(args.egg_mass, args.egg_temp, args.liquid_mass, args.liquid_temp, n)
        if not isinstance(plan, TemperingBatchPlan):
            for v in plan.violations:
                print(f"  {v.code}: {v.field}={v.value!r} not in [{v.minimum}, {v.maximum}]")
            return
        print_plan(plan)
        print()

    print("=" * 70)
    print(f"HOW TO STAY BELOW {EGG_COAGULATION_LIMIT_C:.0f}°C IN ONE POUR")
    print("=" * 70)
    target = EGG_COAGULATION_LIMIT_C
    m = max_hot_mass_for_target(args.egg_mass, args.egg_temp, args.liquid_temp, target)
    t = max_hot_temp_for_target(args.egg_mass, args.egg_temp, args.liquid_mass, target)
    e = needed_egg_increase(args.egg_mass, args.egg_temp, args.liquid_mass, args.liquid_temp, target)
    print(f"  max liquid mass at {args.liquid_temp:.0f}°C : {m if m is None else f'{m:.1f} g'}")
    print(f"  max liquid temperature      : {t if t is None else f'{t:.1f}°C'}")
    print(f"  extra egg needed            : {e:.1f} g")


if __name__ == "__main__":
    main()
