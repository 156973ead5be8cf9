#!/usr/bin/env python3
"""
Generate all process figures in both PNG and SVG formats.

Each plotting script writes the PNG given by --out and an SVG next to it.

Usage:
    python scripts/generate_all_figures.py --outdir notes
"""

import argparse
import subprocess
import sys
from pathlib import Path


def run_script(script_path, args):
    """Run a Python script with given arguments."""
    cmd = [sys.executable, str(script_path)] + args
    print(f"Running: {' '.join(cmd)}")
    result = subprocess.run(cmd, capture_output=True, text=True)
    if result.returncode != 0:
        print(f"  ERROR: {result.stderr}")
    else:
        print(f"  OK")
    return result.returncode == 0


def main():
    parser = argparse.ArgumentParser(description="Generate all figures")
    parser.add_argument('--outdir', type=str, default='notes')
    parser.add_argument('--skip-slow', action='store_true',
                        help='Skip the decision map (one optimizer run per cell)')
    args = parser.parse_args()

    outdir = Path(args.outdir)
    outdir.mkdir(parents=True, exist_ok=True)

    scripts_dir = Path(__file__).parent

    print("=" * 70)
    print("Generating all figures (PNG + SVG)")
    print("=" * 70)

    # List of (script, arguments)
    figure_scripts = [
        ('plot_viscosity_curve.py',
         ['--out', str(outdir / 'fig_viscosity_curve.png')]),

        ('plot_tempering_schedule.py',
         ['--out', str(outdir / 'fig_tempering_schedule.png')]),
    ]

    if not args.skip_slow:
        figure_scripts.append(
            ('plot_decision_map.py',
             ['--out', str(outdir / 'fig_decision_map.png'), '--n', '25'])
        )

    success_count = 0
    for script_name, script_args in figure_scripts:
        script_path = scripts_dir / script_name
        if not script_path.exists():
            print(f"\nSkipping {script_name} (not found)")
            continue

        print(f"\n--- {script_name} ---")
        if run_script(script_path, script_args):
            success_count += 1

    print("\n" + "=" * 70)
    print(f"Completed: {success_count}/{len(figure_scripts)} scripts")
    print("=" * 70)

    print("\nGenerated files:")
    for f in sorted(outdir.glob('*')):
        if f.is_file():
            size_kb = f.stat().st_size / 1024
            print(f"  {f.name:50} ({size_kb:.1f} KB)")


if __name__ == '__main__':
    main()
