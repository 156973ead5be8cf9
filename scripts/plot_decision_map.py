"""Map GO / WAIT / STOP over flour and egg mass.

Everything else is held at the classic recipe (butter 120, sugar 150,
honey 155, soda 5 g). Each cell is the status returned by decide(); the
hydration gates at 15, 31 and 35% are overlaid as contours.
"""

from __future__ import annotations

import argparse
import numpy as np
import matplotlib.pyplot as plt
from matplotlib.colors import ListedColormap

from medovik.decision import decide
from medovik.recipe import Recipe

STATUS_CODE = {"GO": 0, "WAIT": 1, "STOP": 2}


def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--out", required=True)
    ap.add_argument("--n", type=int, default=25)
    args = ap.parse_args()

    flours = np.linspace(300.0, 900.0, args.n)
    eggs = np.linspace(20.0, 260.0, args.n)
    status = np.zeros((len(eggs), len(flours)))
    hydration = np.zeros_like(status)

    for i, e in enumerate(eggs):
        for j, f in enumerate(flours):
            r = Recipe(flour=f, butter=120, sugar=150, honey=155, eggs=e, soda=5)
            status[i, j] = STATUS_CODE[decide(r).status]
            hydration[i, j] = r.hydration_pct()

    fig, ax = plt.subplots(figsize=(6.0, 4.6))
    cmap = ListedColormap(["#27ae60", "#f39c12", "#c0392b"])
    ax.pcolormesh(flours, eggs, status, cmap=cmap, vmin=-0.5, vmax=2.5, shading="nearest")
    cs = ax.contour(flours, eggs, hydration, levels=[15, 31, 35], colors="white", linewidths=1.5)
    ax.clabel(cs, fmt="%d%%", fontsize=8)

    for name, code in STATUS_CODE.items():
        ax.plot([], [], "s", color=cmap(code), label=name)
    ax.set_xlabel("Flour (g)")
    ax.set_ylabel("Eggs (g)")
    ax.set_title("Process decision map")
    ax.legend(frameon=False, fontsize=8, loc="upper right")
    fig.tight_layout()
    fig.savefig(args.out, dpi=200)
    print(f"Wrote: {args.out}")

    svg_out = args.out.replace('.png', '.svg')
    fig.savefig(svg_out, format='svg', bbox_inches='tight')
    print(f"Wrote: {svg_out}")


if __name__ == "__main__":
    main()
