"""
CFL Timestep Control

    dt = CFL / max_i [ (max(u_max, |U_i|) + c_i) / dx_i ]

clamped so that the simulation never steps past max_time. The fastest
velocity node enters because the kinetic scheme transports every node,
not only the macroscopic waves.
"""

import math

import numpy as np
from numba import njit, prange


@njit(parallel=True)
def cell_wave_rates(prim, dx, nxg, nx, u_max, gamma, n_species, n_cons, extra_speed):
    """
    Maximum signal speed over cell width, per interior cell.

    Args:
        prim: Primitive variables, shape (n_cells, n_species * n_cons)
        dx: Cell widths, shape (n_cells,)
        nxg: Ghost layers per side
        nx: Number of interior cells
        u_max: Fastest velocity node per species, shape (n_species,)
        gamma: Heat-capacity ratio
        n_species: Number of species
        n_cons: Primitive components per species (lambda is the last one)
        extra_speed: Lower bound on the signal speed (speed of light, or 0)

    Returns:
        rates: Shape (nx,)
    """
    rates = np.empty(nx)
    for i in prange(nx):
        c = nxg + i
        speed = extra_speed
        for s in range(n_species):
            base = s * n_cons
            lam = prim[c, base + n_cons - 1]
            sos = math.sqrt(0.5 * gamma / lam)
            vmax = max(u_max[s], abs(prim[c, base + 1])) + sos
            speed = max(speed, vmax)
        rates[i] = speed / dx[c]
    return rates


def compute_timestep(field, mesh, variant, gamma, u_max, cfl, time, max_time,
                     extra_speed=0.0):
    """
    Stable timestep for the current state.

    Args:
        field: FlowField
        mesh: PhysicalGrid
        variant: Kinetic model
        gamma: Heat-capacity ratio
        u_max: Fastest velocity node per species, shape (n_species,)
        cfl: CFL number
        time: Current simulation time
        max_time: Final simulation time
        extra_speed: Additional signal speed bound (plasma: speed of light)

    Returns:
        dt: Timestep, never beyond max_time - time
    """
    rates = cell_wave_rates(field.prim, mesh.dx, mesh.nxg, mesh.nx,
                            np.asarray(u_max, dtype=np.float64), gamma,
                            variant.n_species, variant.n_cons, float(extra_speed))
    dt = cfl / np.max(rates)
    return min(dt, max_time - time)
