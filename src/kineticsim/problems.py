"""
Initial and Boundary States of the Reference Problems

Every problem is a Riemann-type initial value problem: the left half of the
domain (left ghosts included) holds one equilibrium state, the right half
another. With fixed boundaries the ghost layers keep these states for the
whole run.

Problems:
- sod:     Sod (1978) shock tube
- shock:   stationary normal shock from the Rankine-Hugoniot relations
- brio-wu: Brio & Wu (1988) MHD shock tube, as a two-species kinetic plasma

References:
    Sod (1978), J. Comput. Phys. 27, 1-31
    Brio & Wu (1988), J. Comput. Phys. 75, 400-422
"""

import logging

import numpy as np

from .constants import BRIO_WU, N_EM, SOD

logger = logging.getLogger(__name__)


def primitive_from_pressure(rho, U, p):
    """(rho, U, p) -> (rho, U, lambda) with lambda = rho / (2 p)."""
    return np.array([rho, U, 0.5 * rho / p])


# ==================== NEUTRAL GAS ====================

def sod_states():
    """Left and right primitive states of the Sod shock tube."""
    return primitive_from_pressure(*SOD['left']), primitive_from_pressure(*SOD['right'])


def rankine_hugoniot_states(mach, gamma):
    """
    Upstream/downstream states of a stationary normal shock.

    Upstream: rho = 1, lambda = 1 (p = 0.5), U = Ma * sqrt(gamma / 2).

    Args:
        mach: Upstream Mach number (> 1)
        gamma: Heat-capacity ratio

    Returns:
        prim_left, prim_right: (rho, U, lambda)
    """
    if mach <= 1.0:
        raise ValueError(f"Normal shock requires mach > 1, got {mach}")

    rho1, lam1 = 1.0, 1.0
    p1 = 0.5 * rho1 / lam1
    U1 = mach * np.sqrt(0.5 * gamma / lam1)

    m2 = mach**2
    rho2 = rho1 * (gamma + 1.0) * m2 / ((gamma - 1.0) * m2 + 2.0)
    p2 = p1 * (2.0 * gamma * m2 - (gamma - 1.0)) / (gamma + 1.0)
    U2 = U1 * rho1 / rho2

    return np.array([rho1, U1, lam1]), np.array([rho2, U2, 0.5 * rho2 / p2])


# ==================== PLASMA ====================

def brio_wu_states(plasma):
    """
    Two-species Brio-Wu states.

    Each species carries half of the MHD pressure; number density 1 / 0.125
    and total pressure 1 / 0.1 on the left / right. B = (0.75, +-1, 0), E = 0.

    Args:
        plasma: PlasmaModel

    Returns:
        prim_left, prim_right: Shape (5 * n_species,), blocks (rho, U, V, W, lambda)
        em_left, em_right: Shape (6,)
    """
    prim_left = []
    prim_right = []
    for mass in plasma.masses:
        prim_left.append([mass, 0.0, 0.0, 0.0, 0.5 * mass / 0.5])
        prim_right.append([0.125 * mass, 0.0, 0.0, 0.0, 0.5 * 0.125 * mass / 0.05])

    em_left = np.zeros(N_EM)
    em_right = np.zeros(N_EM)
    em_left[3] = em_right[3] = BRIO_WU['b_normal']
    em_left[4] = BRIO_WU['b_transverse']
    em_right[4] = -BRIO_WU['b_transverse']

    return (np.concatenate(prim_left), np.concatenate(prim_right), em_left, em_right)


# ==================== FIELD INITIALIZATION ====================

def initialize(field, mesh, case, gamma, u_fields, K, mach=None, plasma=None):
    """
    Fill every cell (ghosts included) with the problem's initial state.

    Args:
        field: FlowField
        mesh: PhysicalGrid
        case: 'sod', 'shock' or 'brio-wu'
        gamma: Heat-capacity ratio
        u_fields: Field velocities, shape (n_f, nv)
        K: Internal degrees of freedom
        mach: Upstream Mach number ('shock')
        plasma: PlasmaModel ('brio-wu')
    """
    em_left = em_right = None
    if case == "sod":
        prim_left, prim_right = sod_states()
    elif case == "shock":
        if mach is None:
            raise ValueError("Case 'shock' needs a Mach number")
        prim_left, prim_right = rankine_hugoniot_states(mach, gamma)
    elif case == "brio-wu":
        if plasma is None:
            raise ValueError("Case 'brio-wu' needs plasma parameters")
        prim_left, prim_right, em_left, em_right = brio_wu_states(plasma)
    else:
        raise ValueError(f"Unknown case '{case}'")

    left = mesh.x < 0.5 * (mesh.x0 + mesh.x1)
    right = ~left

    field.set_equilibrium(left, prim_left, gamma, u_fields, K)
    field.set_equilibrium(right, prim_right, gamma, u_fields, K)
    field.reset_slopes()

    if field.em is not None:
        field.em[left] = em_left
        field.em[right] = em_right

    logger.info("Initialized case '%s': left prim %s, right prim %s",
                case, np.array2string(prim_left, precision=4),
                np.array2string(prim_right, precision=4))
