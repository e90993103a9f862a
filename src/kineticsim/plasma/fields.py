"""
1D Maxwell Equations for the Plasma Variant

In one space dimension Maxwell's equations split into two linear wave
pairs travelling at the speed of light c:

    d(Ey)/dt + c^2 d(Bz)/dx = -J_y term     d(Bz)/dt + d(Ey)/dx = 0
    d(Ez)/dt - c^2 d(By)/dx = -J_z term     d(By)/dt - d(Ez)/dx = 0

Ex changes only through the current (handled by the Lorentz source) and
Bx is constant. The flux F(q) = (0, c^2 Bz, -c^2 By, 0, -Ez, Ey) is upwinded
with dissipation c/2 * (qR - qL) on the transverse components, which is
the exact Godunov flux since both eigenvalues have magnitude c.
"""

import numpy as np

# Components carried by waves (Ey, Ez, By, Bz)
TRANSVERSE = np.array([1, 2, 4, 5])


def physical_em_flux(em, sol):
    """
    Maxwell flux F(q) of states shaped (..., 6).

    Args:
        em: (Ex, Ey, Ez, Bx, By, Bz)
        sol: Speed of light
    """
    flux = np.zeros_like(em)
    flux[..., 1] = sol**2 * em[..., 5]
    flux[..., 2] = -sol**2 * em[..., 4]
    flux[..., 4] = -em[..., 2]
    flux[..., 5] = em[..., 1]
    return flux


def evaluate_em_flux(em, fem, nxg, sol, dt):
    """
    Time-integrated upwind Maxwell flux at every interior interface.

    Args:
        em: Cell fields, shape (n_cells, 6)
        fem: Output, shape (nx+1, 6)
        nxg: Ghost layers per side
        sol: Speed of light
        dt: Timestep
    """
    n_faces = fem.shape[0]
    left = em[nxg - 1:nxg - 1 + n_faces]
    right = em[nxg:nxg + n_faces]

    flux = 0.5 * (physical_em_flux(left, sol) + physical_em_flux(right, sol))
    flux[:, TRANSVERSE] -= 0.5 * sol * (right[:, TRANSVERSE] - left[:, TRANSVERSE])
    fem[:] = dt * flux


def advance_em(em, fem, dx, nxg):
    """Finite-volume update of interior cell fields (in-place)."""
    nx = fem.shape[0] - 1
    cells = slice(nxg, nxg + nx)
    em[cells] += (fem[:-1] - fem[1:]) / dx[cells, None]
