"""
Slope-Limited Reconstruction (MUSCL)

Each cell gets a limited gradient from (left, own, right) values and the
two centre-to-centre spacings. The same kernel serves the conserved
vector and the flattened distribution bundle.

Limiters (TVD, zero at local extrema):
- vanleer: harmonic mean of the one-sided slopes
- minmod:  smaller one-sided slope when both agree in sign

Reference:
    van Leer (1979), J. Comput. Phys. 32, 101-136
"""

import math

from numba import njit, prange

from ..constants import LIMITER_EPS


LIMITERS = {"vanleer": 0, "minmod": 1}


def limiter_code(name: str) -> int:
    try:
        return LIMITERS[name]
    except KeyError:
        raise ValueError(
            f"Unknown limiter '{name}', expected one of {sorted(LIMITERS)}"
        ) from None


# ==================== LIMITERS ====================

@njit
def vanleer(sL, sR):
    """van Leer limiter; exactly zero when sL and sR differ in sign."""
    return ((math.copysign(1.0, sL) + math.copysign(1.0, sR))
            * abs(sL) * abs(sR) / (abs(sL) + abs(sR) + LIMITER_EPS))


@njit
def minmod(sL, sR):
    if sL * sR <= 0.0:
        return 0.0
    if abs(sL) < abs(sR):
        return sL
    return sR


@njit
def limited_slope(wL, wN, wR, dxL, dxR, limiter):
    """
    Limited slope at a cell centre.

    Args:
        wL, wN, wR: Left neighbour, own and right neighbour values
        dxL, dxR: Distances to the left and right neighbour centres
        limiter: Limiter code (see LIMITERS)

    Returns:
        Limited first derivative
    """
    sL = (wN - wL) / dxL
    sR = (wR - wN) / dxR
    if limiter == 0:
        return vanleer(sL, sR)
    return minmod(sL, sR)


# ==================== RECONSTRUCTION KERNEL ====================

@njit(parallel=True)
def reconstruct_slopes(values, dx, limiter, slopes):
    """
    Limited slopes of every cell with two neighbours.

    Args:
        values: Cell values, shape (n_cells, m)
        dx: Cell widths, shape (n_cells,)
        limiter: Limiter code
        slopes: Output, shape (n_cells, m); first and last rows untouched

    Note:
        Each cell writes only its own row of slopes.
    """
    n_cells = values.shape[0]
    m = values.shape[1]
    for i in prange(1, n_cells - 1):
        dxL = 0.5 * (dx[i - 1] + dx[i])
        dxR = 0.5 * (dx[i] + dx[i + 1])
        for k in range(m):
            slopes[i, k] = limited_slope(values[i - 1, k], values[i, k], values[i + 1, k],
                                         dxL, dxR, limiter)


def reconstruct(field, mesh, order: int, limiter: str = "vanleer"):
    """
    Reconstruct slopes of w and of every distribution field.

    No-op for order == 1: slopes stay at zero and the scheme is
    first-order upwind.

    Args:
        field: FlowField (sw and sf written in place)
        mesh: PhysicalGrid
        order: Spatial order (1 or 2)
        limiter: 'vanleer' or 'minmod'
    """
    if order == 1:
        return
    if order != 2:
        raise ValueError(f"Reconstruction order must be 1 or 2, got {order}")

    code = limiter_code(limiter)
    n_cells = field.f.shape[0]

    reconstruct_slopes(field.w, mesh.dx, code, field.sw)
    reconstruct_slopes(field.f.reshape(n_cells, -1), mesh.dx, code,
                       field.sf.reshape(n_cells, -1))
