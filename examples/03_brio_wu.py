"""
Example 03: Brio-Wu Shock Tube (Two-Species Kinetic Plasma)

Demonstrates:
- The four-f plasma variant with ion and electron distributions
- Electron velocity grid scaled by sqrt(mi/me)
- Maxwell flux plus implicit Lorentz/Ampere coupling
- Electromagnetic field diagnostics (By profile)

With small Larmor radius and Debye length the two-fluid plasma approaches
the ideal MHD Brio-Wu solution: compound wave, contact and slow shock in
density, and a rotating transverse field By.
"""

import logging
from pathlib import Path

import numpy as np
import matplotlib.pyplot as plt

from kineticsim import Solver, SolverConfig
from kineticsim.diagnostics import macroscopic_profiles, write_solution
from kineticsim.state import conserved_totals

CONFIG = Path(__file__).parent / "configs" / "brio_wu.txt"


def run_brio_wu():
    print("\n" + "="*60)
    print("Brio-Wu Shock Tube (1d4f, ion + electron)")
    print("="*60)

    config = SolverConfig.from_file(CONFIG)
    solver = Solver.from_config(config)
    ion, electron = solver.grids
    print(f"\nIon grid:      {ion}")
    print(f"Electron grid: {electron}")
    print(f"Species mu_ref: {solver.mu_ref}")

    totals = conserved_totals(solver.field, solver.mesh)
    result = solver.solve()
    change = conserved_totals(solver.field, solver.mesh) - totals

    print(f"\n[OK] t = {result.time:.4f} after {result.iterations} iterations "
          f"({result.wall_time:.1f} s)")
    print(f"   ion mass change:      {change[0]:.3e}")
    print(f"   electron mass change: {change[5]:.3e}")

    write_solution("output_brio_wu", solver)

    profiles = macroscopic_profiles(solver)
    x = profiles['x']
    em = solver.field.em[solver.mesh.interior]

    fig, axes = plt.subplots(2, 2, figsize=(12, 8))
    axes[0, 0].plot(x, profiles['rho'][:, 0], 'b-', linewidth=1.5)
    axes[0, 0].set_title('Ion Density', fontsize=14, fontweight='bold')
    axes[0, 1].plot(x, profiles['U'][:, 0], 'b-', linewidth=1.5, label='ion')
    axes[0, 1].plot(x, profiles['U'][:, 1], 'r--', linewidth=1.0, label='electron')
    axes[0, 1].set_title('Bulk Velocity U', fontsize=14, fontweight='bold')
    axes[0, 1].legend(fontsize=10)
    axes[1, 0].plot(x, em[:, 4], 'k-', linewidth=1.5)
    axes[1, 0].set_title('By', fontsize=14, fontweight='bold')
    axes[1, 1].plot(x, np.sum(profiles['p'], axis=1), 'g-', linewidth=1.5)
    axes[1, 1].set_title('Total Pressure', fontsize=14, fontweight='bold')
    for ax in axes.flat:
        ax.set_xlabel('x', fontsize=12)
        ax.grid(True, alpha=0.3)

    plt.tight_layout()
    plt.savefig('brio_wu.png', dpi=150)
    print("\n[OK] Plot saved to 'brio_wu.png'")


# ==================== MAIN ====================

if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    print("\n" + "="*60)
    print("KineticSIM Example 03: Brio-Wu Plasma Shock Tube")
    print("="*60)

    run_brio_wu()

    print("\n" + "="*60)
    print("Example complete!")
    print("="*60 + "\n")
