"""Plot contact-zone peak temperatures of a tempering schedule versus batch count.

Default case: 200 g egg at 20°C, 300 g liquid at 90°C (Cp 2.4 J/g·K).
Left: per-batch peak and bulk temperature for 3 and 6 batches.
Right: the maximum peak for N = 2..10 against the 65/68°C limits.
"""

from __future__ import annotations

import argparse
import numpy as np
import matplotlib.pyplot as plt

from medovik.constants import EGG_COAGULATION_LIMIT_C, EGG_WARNING_MARGIN_C
from medovik.tempering import TemperingBatchPlan, simulate_tempering


def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--out", required=True)
    ap.add_argument("--egg-mass", type=float, default=200.0)
    ap.add_argument("--egg-temp", type=float, default=20.0)
    ap.add_argument("--liquid-mass", type=float, default=300.0)
    ap.add_argument("--liquid-temp", type=float, default=90.0)
    args = ap.parse_args()

    def run(n):
        plan = simulate_tempering(args.egg_mass, args.egg_temp, args.liquid_mass, args.liquid_temp, n)
        if not isinstance(plan, TemperingBatchPlan):
            raise SystemExit(f"invalid inputs: {', '.join(plan.codes)}")
        return plan

    fig, axes = plt.subplots(1, 2, figsize=(10.0, 4.0))

    ax = axes[0]
    for n, color in ((3, "#c0392b"), (6, "#2980b9")):
        plan = run(n)
        idx = [b.batch_number for b in plan.batches]
        ax.plot(idx, [b.peak_temp_c for b in plan.batches], "o-", color=color, lw=2.0, label=f"N={n} peak")
        ax.plot(idx, [b.temp_after_c for b in plan.batches], "s--", color=color, lw=1.2, alpha=0.7, label=f"N={n} bulk")
    ax.axhline(EGG_COAGULATION_LIMIT_C, color="black", lw=1.5)
    ax.set_xlabel("Batch")
    ax.set_ylabel("Temperature (°C)")
    ax.set_title("Per-batch temperatures")
    ax.grid(True, alpha=0.25)
    ax.legend(frameon=False, fontsize=8)

    ax = axes[1]
    ns = np.arange(2, 11)
    peaks = [run(int(n)).max_batch_temp_c for n in ns]
    ax.bar(ns, peaks, color="#34495e", alpha=0.8)
    ax.axhline(EGG_COAGULATION_LIMIT_C, color="#c0392b", lw=2.0, label="coagulation")
    ax.axhline(EGG_COAGULATION_LIMIT_C - EGG_WARNING_MARGIN_C, color="#f39c12", lw=1.5, ls="--", label="warning")
    ax.set_ylim(min(peaks) - 10.0, max(peaks) + 5.0)
    ax.set_xlabel("Batch count N")
    ax.set_ylabel("Max peak temperature (°C)")
    ax.set_title("Safety vs. batch count")
    ax.grid(True, alpha=0.25, axis="y")
    ax.legend(frameon=False, fontsize=8)

    fig.tight_layout()
    fig.savefig(args.out, dpi=200)
    print(f"Wrote: {args.out}")

    svg_out = args.out.replace('.png', '.svg')
    fig.savefig(svg_out, format='svg', bbox_inches='tight')
    print(f"Wrote: {svg_out}")


if __name__ == "__main__":
    main()
