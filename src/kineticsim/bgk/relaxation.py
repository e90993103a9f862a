"""
Conservative Update and Implicit BGK Relaxation

Per interior cell:
    1. w += (fw_left - fw_right) / dx
    2. prim = EOS(w), checked for divergence
    3. residual partials (w_new - w_old)^2 and |w_new|
    4. equilibrium bundle M(prim) and relaxation time tau(prim)
    5. f = (f + (ff_left - ff_right)/dx + dt/tau * M) / (1 + dt/tau)

Step 5 is backward Euler in the collision term and stays stable for
any dt/tau, including the continuum limit tau -> 0.

The four-f plasma variant additionally advances the electromagnetic
field and applies the Lorentz/Ampere source between steps 1 and 2 (see
kineticsim.plasma).
"""

import numpy as np
from numba import njit, prange

from ..constants import RESIDUAL_EPS
from ..errors import NumericalDivergenceError
from ..plasma import advance_em, lorentz_source


# ==================== KERNELS ====================

@njit(parallel=True)
def conservative_update(w, fw, dx, nxg):
    """
    Finite-volume update of interior cells from time-integrated fluxes.

    Args:
        w: Conserved variables, shape (n_cells, n_w) (modified in-place)
        fw: Interface fluxes, shape (nx+1, n_w)
        dx: Cell widths, shape (n_cells,)
        nxg: Ghost layers per side
    """
    nx = fw.shape[0] - 1
    n_w = w.shape[1]
    for i in prange(nx):
        c = nxg + i
        for m in range(n_w):
            w[c, m] += (fw[i, m] - fw[i + 1, m]) / dx[c]


@njit(parallel=True)
def residual_partials(w_new, w_old, sum_sq, sum_abs):
    """
    Per-cell residual contributions, reduced afterwards with numpy.

    Args:
        w_new, w_old: Interior conserved variables, shape (nx, n_w)
        sum_sq: Output (w_new - w_old)^2, shape (nx, n_w)
        sum_abs: Output |w_new|, shape (nx, n_w)
    """
    nx = w_new.shape[0]
    n_w = w_new.shape[1]
    for i in prange(nx):
        for m in range(n_w):
            diff = w_new[i, m] - w_old[i, m]
            sum_sq[i, m] = diff * diff
            sum_abs[i, m] = abs(w_new[i, m])


@njit(parallel=True)
def relax_distribution(f, ff, equilibrium, tau, dx, dt, nxg):
    """
    Transport plus implicit relaxation of every distribution field.

    Args:
        f: Distribution bundle, shape (n_cells, n_f, nv) (modified in-place)
        ff: Interface distribution fluxes, shape (nx+1, n_f, nv)
        equilibrium: Interior equilibrium bundle, shape (nx, n_f, nv)
        tau: Interior relaxation times, shape (nx, n_f)
        dx: Cell widths, shape (n_cells,)
        dt: Timestep
        nxg: Ghost layers per side
    """
    nx = equilibrium.shape[0]
    n_f = equilibrium.shape[1]
    nv = equilibrium.shape[2]
    for i in prange(nx):
        c = nxg + i
        for j in range(n_f):
            ratio = dt / tau[i, j]
            for k in range(nv):
                f[c, j, k] = ((f[c, j, k] + (ff[i, j, k] - ff[i + 1, j, k]) / dx[c]
                               + ratio * equilibrium[i, j, k]) / (1.0 + ratio))


# ==================== CHECKS AND NORMS ====================

def normalized_residual(sum_sq, sum_abs, n_cells):
    """
    sqrt(sum (w_new - w_old)^2 * N) / (sum |w_new| + eps) per component.

    Args:
        sum_sq, sum_abs: Per-cell partials, shape (nx, n_w)
        n_cells: Number of interior cells
    """
    return np.sqrt(np.sum(sum_sq, axis=0) * n_cells) / (np.sum(sum_abs, axis=0) + RESIDUAL_EPS)


def check_state(w, prim, variant, iteration=None):
    """
    Raise NumericalDivergenceError on NaN/Inf or non-positive rho/lambda.

    Args:
        w, prim: Interior conserved and primitive variables, shape (nx, n_w)
        variant: Kinetic model (locates rho and lambda columns)
        iteration: Reported in the error message
    """
    bad = ~np.all(np.isfinite(w), axis=1) | ~np.all(np.isfinite(prim), axis=1)
    bad |= np.any(variant.density(prim) <= 0.0, axis=1)
    bad |= np.any(variant.lam(prim) <= 0.0, axis=1)

    if np.any(bad):
        cell = int(np.argmax(bad))
        raise NumericalDivergenceError(
            f"Unphysical state in interior cell {cell} at iteration {iteration}: "
            f"w={w[cell]}, prim={prim[cell]}",
            iteration=iteration,
            cell=cell,
        )


def check_relaxation_time(tau, iteration=None):
    bad = ~(np.isfinite(tau) & (tau > 0.0))
    if np.any(bad):
        cell = int(np.argmax(np.any(bad, axis=1)))
        raise NumericalDivergenceError(
            f"Invalid relaxation time {tau[cell]} in interior cell {cell} "
            f"at iteration {iteration}",
            iteration=iteration,
            cell=cell,
        )


# ==================== UPDATE DRIVER ====================

def update(field, faces, mesh, variant, gas, u_fields, mu_ref, dt,
           plasma=None, iteration=None):
    """
    Advance interior cells by one timestep.

    Args:
        field: FlowField (modified in-place)
        faces: FaceFlux of this step
        mesh: PhysicalGrid
        variant: Kinetic model
        gas: GasModel (gamma, omega, K)
        u_fields: Field velocities, shape (n_f, nv)
        mu_ref: Per-species reference viscosity, shape (n_species,)
        dt: Timestep
        plasma: PlasmaModel, required when the variant evolves fields
        iteration: Current iteration (error reporting only)

    Returns:
        residual: Normalized residual per conserved component, shape (n_w,)
    """
    interior = mesh.interior
    w = field.w[interior]
    w_old = w.copy()

    conservative_update(field.w, faces.fw, mesh.dx, mesh.nxg)

    if variant.has_em:
        prim_transport = variant.conserved_to_primitive(w, gas.gamma)
        check_state(w, prim_transport, variant, iteration)

        advance_em(field.em, faces.fem, mesh.dx, mesh.nxg)
        lorentz_source(w, field.em[interior], plasma, dt)

    prim = variant.conserved_to_primitive(w, gas.gamma)
    check_state(w, prim, variant, iteration)
    field.prim[interior] = prim

    sum_sq = np.empty_like(w)
    sum_abs = np.empty_like(w)
    residual_partials(w, w_old, sum_sq, sum_abs)

    equilibrium = variant.equilibrium(prim, u_fields, gas.K)
    tau = variant.collision_time(prim, mu_ref, gas.omega)
    check_relaxation_time(tau, iteration)

    if variant.has_em:
        # Force term: shift the distribution with the equilibrium it moved
        field.f[interior] += equilibrium - variant.equilibrium(prim_transport, u_fields, gas.K)

    relax_distribution(field.f, faces.ff, equilibrium, tau, mesh.dx, dt, mesh.nxg)

    return normalized_residual(sum_sq, sum_abs, mesh.nx)
