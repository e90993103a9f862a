"""
Exact Riemann Solver for the 1D Euler Equations

Reference solution for shock-tube validation of the kinetic scheme in the
continuum limit. The star-region pressure is the root of Toro's pressure
function, found with scipy's Brent method; the solution is then sampled on
the similarity variable s = (x - x0) / t.

Reference:
    Toro (2009), "Riemann Solvers and Numerical Methods for Fluid Dynamics",
    Chapter 4
"""

import numpy as np
from scipy.optimize import brentq


def _pressure_function(p, rho_k, p_k, c_k, gamma):
    """Velocity jump across the wave on side k as a function of star pressure."""
    if p > p_k:
        A = 2.0 / ((gamma + 1.0) * rho_k)
        B = (gamma - 1.0) / (gamma + 1.0) * p_k
        return (p - p_k) * np.sqrt(A / (p + B))
    return 2.0 * c_k / (gamma - 1.0) * ((p / p_k) ** ((gamma - 1.0) / (2.0 * gamma)) - 1.0)


def star_state(left, right, gamma):
    """
    Pressure and velocity between the two nonlinear waves.

    Args:
        left, right: (rho, u, p) states
        gamma: Heat-capacity ratio

    Returns:
        p_star, u_star
    """
    rho_l, u_l, p_l = left
    rho_r, u_r, p_r = right
    c_l = np.sqrt(gamma * p_l / rho_l)
    c_r = np.sqrt(gamma * p_r / rho_r)

    if 2.0 * (c_l + c_r) / (gamma - 1.0) <= u_r - u_l:
        raise ValueError("Initial states generate a vacuum")

    def jump(p):
        return (_pressure_function(p, rho_l, p_l, c_l, gamma)
                + _pressure_function(p, rho_r, p_r, c_r, gamma) + (u_r - u_l))

    p_low = 1e-14 * min(p_l, p_r)
    p_high = max(p_l, p_r)
    while jump(p_high) < 0.0:
        p_high *= 2.0

    p_star = brentq(jump, p_low, p_high, xtol=1e-15, rtol=1e-14, maxiter=200)
    u_star = 0.5 * (u_l + u_r) + 0.5 * (_pressure_function(p_star, rho_r, p_r, c_r, gamma)
                                          - _pressure_function(p_star, rho_l, p_l, c_l, gamma))
    return p_star, u_star


def _sample(s, left, right, gamma, p_star, u_star):
    rho_l, u_l, p_l = left
    rho_r, u_r, p_r = right
    c_l = np.sqrt(gamma * p_l / rho_l)
    c_r = np.sqrt(gamma * p_r / rho_r)
    g1 = (gamma - 1.0) / (2.0 * gamma)
    g2 = (gamma + 1.0) / (2.0 * gamma)
    g6 = (gamma - 1.0) / (gamma + 1.0)
    g5 = 2.0 / (gamma + 1.0)

    if s <= u_star:
        ratio = p_star / p_l
        if p_star > p_l:
            shock = u_l - c_l * np.sqrt(g2 * ratio + g1)
            if s <= shock:
                return rho_l, u_l, p_l
            return rho_l * (ratio + g6) / (g6 * ratio + 1.0), u_star, p_star

        head = u_l - c_l
        tail = u_star - c_l * ratio ** g1
        if s <= head:
            return rho_l, u_l, p_l
        if s > tail:
            return rho_l * ratio ** (1.0 / gamma), u_star, p_star
        u = g5 * (c_l + 0.5 * (gamma - 1.0) * u_l + s)
        c = g5 * (c_l + 0.5 * (gamma - 1.0) * (u_l - s))
        return rho_l * (c / c_l) ** (2.0 / (gamma - 1.0)), u, p_l * (c / c_l) ** (1.0 / g1)

    ratio = p_star / p_r
    if p_star > p_r:
        shock = u_r + c_r * np.sqrt(g2 * ratio + g1)
        if s >= shock:
            return rho_r, u_r, p_r
        return rho_r * (ratio + g6) / (g6 * ratio + 1.0), u_star, p_star

    head = u_r + c_r
    tail = u_star + c_r * ratio ** g1
    if s >= head:
        return rho_r, u_r, p_r
    if s < tail:
        return rho_r * ratio ** (1.0 / gamma), u_star, p_star
    u = g5 * (-c_r + 0.5 * (gamma - 1.0) * u_r + s)
    c = g5 * (c_r - 0.5 * (gamma - 1.0) * (u_r - s))
    return rho_r * (c / c_r) ** (2.0 / (gamma - 1.0)), u, p_r * (c / c_r) ** (1.0 / g1)


def exact_riemann(x, t, left, right, gamma=1.4, x0=0.5):
    """
    Exact solution of a Riemann problem.

    Args:
        x: Sample positions
        t: Time (> 0)
        left, right: (rho, u, p) initial states
        gamma: Heat-capacity ratio
        x0: Initial discontinuity position

    Returns:
        rho, u, p: Arrays shaped like x
    """
    if t <= 0.0:
        raise ValueError(f"Sampling time must be positive, got {t}")

    x = np.asarray(x, dtype=np.float64)
    p_star, u_star = star_state(left, right, gamma)

    rho = np.empty_like(x)
    u = np.empty_like(x)
    p = np.empty_like(x)
    for i, xi in enumerate(x.flat):
        rho.flat[i], u.flat[i], p.flat[i] = _sample((xi - x0) / t, left, right,
                                                    gamma, p_star, u_star)
    return rho, u, p
