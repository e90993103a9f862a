"""
Example 01: Sod Shock Tube

Demonstrates:
- Loading a key = value configuration file
- Running the two-f kinetic solver in the continuum limit (Kn = 1e-4)
- Comparing against the exact Riemann solution (gamma = 1.4)
- Writing the final state and a profile plot

The BGK scheme with dt >> tau recovers the Euler equations, so the kinetic
solution should sit on the exact rarefaction, contact and shock.
"""

import logging
from pathlib import Path

import numpy as np

from kineticsim import Solver, SolverConfig
from kineticsim.diagnostics import (
    create_output_folder,
    macroscopic_profiles,
    plot_solution,
    save_profile_csv,
)
from kineticsim.riemann import exact_riemann
from kineticsim.constants import SOD

CONFIG = Path(__file__).parent / "configs" / "sod.txt"


def run_sod():
    print("\n" + "="*60)
    print("Sod Shock Tube (two-f, gamma = 1.4)")
    print("="*60)

    config = SolverConfig.from_file(CONFIG)
    solver = Solver.from_config(config)
    print(f"\nMesh:     {solver.mesh}")
    print(f"Velocity: {solver.grids[0]}")
    print(f"gamma = {solver.gas.gamma:.4f}, mu_ref = {solver.gas.mu_ref:.4e}")

    output = create_output_folder("output", config_path=CONFIG, prefix="sod")
    result = solver.solve(output_dir=output / "data")

    print(f"\n[OK] Finished after {result.iterations} iterations, t = {result.time:.4f} "
          f"({result.wall_time:.2f} s)")

    # Exact solution on the same cells
    profiles = macroscopic_profiles(solver)
    x = profiles['x']
    rho_e, U_e, p_e = exact_riemann(x, result.time, SOD['left'], SOD['right'],
                                    gamma=solver.gas.gamma)

    dx = solver.mesh.dx[0]
    print("\nL1 errors vs exact solution:")
    print(f"   density:  {np.sum(np.abs(profiles['rho'][:, 0] - rho_e)) * dx:.4e}")
    print(f"   velocity: {np.sum(np.abs(profiles['U'][:, 0] - U_e)) * dx:.4e}")
    print(f"   pressure: {np.sum(np.abs(profiles['p'][:, 0] - p_e)) * dx:.4e}")

    save_profile_csv(output / "data" / "profiles.csv", solver)

    x_fine = np.linspace(solver.mesh.x0, solver.mesh.x1, 1000)
    rho_f, U_f, p_f = exact_riemann(x_fine, result.time, SOD['left'], SOD['right'],
                                    gamma=solver.gas.gamma)
    exact = {'x': x_fine, 'rho': rho_f, 'U': U_f, 'p': p_f}
    plot_solution(solver, exact=exact, show=False, save_filename=output / "sod.png")
    print(f"\n[OK] Results written to {output}")


# ==================== MAIN ====================

if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    print("\n" + "="*60)
    print("KineticSIM Example 01: Sod Shock Tube")
    print("="*60)

    run_sod()

    print("\n" + "="*60)
    print("Example complete!")
    print("="*60 + "\n")
