"""Plot dough viscosity versus process temperature against the work bands.

For a recipe (classic Medovik by default) we sweep T over the optimizer's
search range and shade the five viscosity bands:

  too-wet < 7000 ≤ sticky < 12000 ≤ optimal ≤ 20000 < stiff ≤ 30000 < too-stiff

The optimizer's chosen temperature is marked, with and without the
caramelization pre-heat.
"""

from __future__ import annotations

import argparse
import numpy as np
import matplotlib.pyplot as plt

from medovik.optimizer import find_optimal_work_plan
from medovik.viscosity import evaluate_dough

BAND_COLORS = {
    "too-wet": "#d6eaf8",
    "sticky": "#fdebd0",
    "optimal": "#d5f5e3",
    "stiff": "#fadbd8",
    "too-stiff": "#f5b7b1",
}


def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--out", required=True)
    ap.add_argument("--flour", type=float, default=500.0)
    ap.add_argument("--butter", type=float, default=120.0)
    ap.add_argument("--sugar", type=float, default=150.0)
    ap.add_argument("--honey", type=float, default=155.0)
    ap.add_argument("--eggs", type=float, default=95.0)
    ap.add_argument("--soda", type=float, default=5.0)
    ap.add_argument("--n", type=int, default=109)
    args = ap.parse_args()

    recipe = {k: getattr(args, k) for k in ("flour", "butter", "sugar", "honey", "eggs", "soda")}
    T = np.linspace(18.0, 45.0, args.n)
    eta = np.array([evaluate_dough(recipe, float(t)).viscosity for t in T])
    eta_car = np.array([evaluate_dough(recipe, float(t), {"enabled": True}).viscosity for t in T])

    fig, ax = plt.subplots(figsize=(6.0, 4.2))
    edges = [1.0, 7000.0, 12000.0, 20000.0, 30000.0, 3.0e5]
    for (lo, hi), (name, color) in zip(zip(edges, edges[1:]), BAND_COLORS.items()):
        ax.axhspan(lo, hi, color=color, alpha=0.6, lw=0, label=name)

    ax.plot(T, eta, color="#2c3e50", lw=2.3, label="no pre-heat")
    ax.plot(T, eta_car, color="#c0392b", lw=2.0, ls="--", label="caramelized")

    for opts, color in ((None, "#2c3e50"), ({"enabled": True}, "#c0392b")):
        plan = find_optimal_work_plan(recipe, opts)
        ax.plot(plan.plan_a.optimal_temp_c, plan.plan_a.eta_at_optimal, "o", color=color, ms=7)

    ax.set_yscale("log")
    ax.set_ylim(max(1000.0, 0.5 * min(eta.min(), eta_car.min())), min(3.0e5, 2.0 * max(eta.max(), eta_car.max())))
    ax.set_xlabel(r"Process temperature $T$ (°C)")
    ax.set_ylabel(r"$\eta$ (cP)")
    ax.set_title("Medovik dough viscosity")
    ax.grid(True, alpha=0.25, which="both")
    ax.legend(frameon=False, fontsize=8, ncol=2)
    fig.tight_layout()
    fig.savefig(args.out, dpi=200)
    print(f"Wrote: {args.out}")

    svg_out = args.out.replace('.png', '.svg')
    fig.savefig(svg_out, format='svg', bbox_inches='tight')
    print(f"Wrote: {svg_out}")


if __name__ == "__main__":
    main()
