"""
Example 02: Normal Shock Structure

Demonstrates:
- A stationary Mach 3 shock (Rankine-Hugoniot end states) at Kn = 1
- Newton-Cotes velocity quadrature
- Marching to steady state on the residual
- Shock thickness from the maximum density gradient

Upstream conditions fix the unit of length: one upstream mean free path
corresponds to Kn = 1 in the VHS viscosity.
"""

import logging
from pathlib import Path

import numpy as np
import matplotlib.pyplot as plt

from kineticsim import Solver, SolverConfig
from kineticsim.diagnostics import macroscopic_profiles

CONFIG = Path(__file__).parent / "configs" / "shock.txt"


def normalized(values):
    return (values - values[0]) / (values[-1] - values[0])


def run_shock():
    print("\n" + "="*60)
    print("Normal Shock Structure (Mach 3, K = 2, omega = 0.72)")
    print("="*60)

    config = SolverConfig.from_file(CONFIG)
    solver = Solver.from_config(config)
    result = solver.solve()

    status = "converged" if result.converged else "stopped at max_time"
    print(f"\n[OK] {status}: {result.iterations} iterations, "
          f"residual {np.max(result.residual):.3e}")

    profiles = macroscopic_profiles(solver)
    x = profiles['x']
    rho = profiles['rho'][:, 0]
    T = profiles['T'][:, 0]

    # Maximum-slope thickness in upstream mean free paths
    thickness = (rho[-1] - rho[0]) / np.max(np.abs(np.gradient(rho, x)))
    print(f"\nDensity ratio:    {rho[-1] / rho[0]:.4f}")
    print(f"Temperature ratio: {T[-1] / T[0]:.4f}")
    print(f"Shock thickness:   {thickness:.3f} mean free paths")

    fig, ax = plt.subplots(figsize=(10, 6))
    ax.plot(x, normalized(rho), 'o-', markersize=3, label='density')
    ax.plot(x, normalized(T), 's-', markersize=3, label='temperature')
    ax.set_xlabel('x / mean free path', fontsize=12)
    ax.set_ylabel('normalized value', fontsize=12)
    ax.set_title('Mach 3 Shock Structure', fontsize=14, fontweight='bold')
    ax.grid(True, alpha=0.3)
    ax.legend(fontsize=10)

    plt.tight_layout()
    plt.savefig('shock_structure.png', dpi=150)
    print("\n[OK] Plot saved to 'shock_structure.png'")


# ==================== MAIN ====================

if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    print("\n" + "="*60)
    print("KineticSIM Example 02: Shock Structure")
    print("="*60)

    run_shock()

    print("\n" + "="*60)
    print("Example complete!")
    print("="*60 + "\n")
