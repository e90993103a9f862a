"""
Gas Model: Equilibrium, Equation of State and VHS Relaxation Time

Implements:
- Heat-capacity ratio from translational + internal degrees of freedom
- Reference viscosity of the Variable Hard Sphere (VHS) model
- VHS collision (relaxation) time for the BGK operator
- Local Maxwellian in 1D velocity space
- Conserved <-> primitive conversion for 1V and 3V gases

Primitive variables are (rho, U[, V, W], lambda) with lambda = rho / (2 p).

Reference:
    Bird (1994), "Molecular Gas Dynamics and the Direct Simulation of Gas Flows"
    Chapter 4: VHS model
"""

from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from .constants import BRIO_WU, PLASMA_SPECIES, SQRT_PI


# ==================== GAS PROPERTIES ====================

def heat_capacity_ratio(K: float, velocity_dims: int) -> float:
    """
    Ratio of specific heats gamma = (K + D + 2) / (K + D).

    Args:
        K: Internal degrees of freedom
        velocity_dims: Translational degrees of freedom carried (D)
    """
    return (K + velocity_dims + 2.0) / (K + velocity_dims)


def ref_vhs_viscosity(knudsen: float, alpha: float, omega: float) -> float:
    """
    Reference viscosity of the VHS/VSS model in Knudsen-number units.

        mu_ref = 5 (alpha+1)(alpha+2) sqrt(pi) / (4 alpha (5-2 omega)(7-2 omega)) * Kn

    Args:
        knudsen: Reference Knudsen number
        alpha: VSS scattering exponent (1 for VHS)
        omega: Reference viscosity-temperature exponent

    Returns:
        mu_ref: Nondimensional reference viscosity
    """
    return (5.0 * (alpha + 1.0) * (alpha + 2.0) * SQRT_PI
            / (4.0 * alpha * (5.0 - 2.0 * omega) * (7.0 - 2.0 * omega)) * knudsen)


def vhs_collision_time(rho, lam, mu_ref, omega):
    """
    BGK relaxation time tau = mu / p for a VHS gas.

        tau = mu_ref * 2 * lambda^(1 - omega) / rho

    Args:
        rho: Density (scalar or array)
        lam: lambda = rho / (2 p) (same shape as rho)
        mu_ref: Reference viscosity
        omega: Viscosity-temperature exponent

    Returns:
        tau: Relaxation time, same shape as rho
    """
    return mu_ref * 2.0 * lam ** (1.0 - omega) / rho


def sound_speed(lam, gamma):
    """Speed of sound sqrt(gamma p / rho) = sqrt(gamma / (2 lambda))."""
    return np.sqrt(0.5 * gamma / lam)


def maxwellian(u, rho, U, lam):
    """
    1D Maxwellian rho * sqrt(lambda/pi) * exp(-lambda (u - U)^2).

    Args:
        u: Velocity nodes, shape (nv,)
        rho, U, lam: Primitive values, scalars or arrays of shape (...)

    Returns:
        M: Shape (..., nv)
    """
    rho = np.asarray(rho)[..., None]
    U = np.asarray(U)[..., None]
    lam = np.asarray(lam)[..., None]
    return rho * np.sqrt(lam / np.pi) * np.exp(-lam * (u - U) ** 2)


# ==================== EQUATION OF STATE ====================

def conserved_to_primitive_1v(w, gamma):
    """
    (rho, rho U, rho E) -> (rho, U, lambda) for one velocity dimension.

    Args:
        w: Conserved variables, shape (..., 3)
        gamma: Heat-capacity ratio

    Returns:
        prim: Shape (..., 3)
    """
    prim = np.empty_like(w)
    rho = w[..., 0]
    prim[..., 0] = rho
    prim[..., 1] = w[..., 1] / rho
    prim[..., 2] = 0.5 * rho / (gamma - 1.0) / (w[..., 2] - 0.5 * w[..., 1] ** 2 / rho)
    return prim


def primitive_to_conserved_1v(prim, gamma):
    """(rho, U, lambda) -> (rho, rho U, rho E)."""
    w = np.empty_like(prim)
    rho = prim[..., 0]
    w[..., 0] = rho
    w[..., 1] = rho * prim[..., 1]
    w[..., 2] = 0.5 * rho / prim[..., 2] / (gamma - 1.0) + 0.5 * rho * prim[..., 1] ** 2
    return w


def conserved_to_primitive_3v(w, gamma):
    """(rho, rho U, rho V, rho W, rho E) -> (rho, U, V, W, lambda)."""
    prim = np.empty_like(w)
    rho = w[..., 0]
    prim[..., 0] = rho
    prim[..., 1:4] = w[..., 1:4] / rho[..., None]
    kinetic = 0.5 * np.sum(w[..., 1:4] ** 2, axis=-1) / rho
    prim[..., 4] = 0.5 * rho / (gamma - 1.0) / (w[..., 4] - kinetic)
    return prim


def primitive_to_conserved_3v(prim, gamma):
    """(rho, U, V, W, lambda) -> (rho, rho U, rho V, rho W, rho E)."""
    w = np.empty_like(prim)
    rho = prim[..., 0]
    w[..., 0] = rho
    w[..., 1:4] = rho[..., None] * prim[..., 1:4]
    w[..., 4] = (0.5 * rho / prim[..., 4] / (gamma - 1.0)
                 + 0.5 * rho * np.sum(prim[..., 1:4] ** 2, axis=-1))
    return w


# ==================== MODEL CONTAINERS ====================

@dataclass(frozen=True)
class GasModel:
    """
    Immutable gas parameters.

    Attributes:
        gamma: Heat-capacity ratio
        mu_ref: Reference viscosity
        omega: Viscosity-temperature exponent of the VHS law
        K: Internal degrees of freedom
        knudsen: Reference Knudsen number
        mach: Reference Mach number (shock problems only)
        alpha_ref, omega_ref: Parameters used to derive mu_ref
    """
    gamma: float
    mu_ref: float
    omega: float
    K: float = 0.0
    knudsen: float = 0.0
    mach: Optional[float] = None
    alpha_ref: float = 1.0
    omega_ref: float = 0.5

    def __post_init__(self):
        if self.gamma <= 1.0:
            raise ValueError(f"gamma must exceed 1, got {self.gamma}")
        if self.mu_ref <= 0.0:
            raise ValueError(f"mu_ref must be positive, got {self.mu_ref}")
        if self.K < 0.0:
            raise ValueError(f"K must be non-negative, got {self.K}")

    @classmethod
    def from_parameters(cls, knudsen, K, omega, alpha_ref, omega_ref,
                        velocity_dims, mach=None):
        """Derive gamma and mu_ref the way the case setup does."""
        return cls(
            gamma=heat_capacity_ratio(K, velocity_dims),
            mu_ref=ref_vhs_viscosity(knudsen, alpha_ref, omega_ref),
            omega=omega,
            K=K,
            knudsen=knudsen,
            mach=mach,
            alpha_ref=alpha_ref,
            omega_ref=omega_ref,
        )


@dataclass(frozen=True)
class PlasmaModel:
    """
    Two-species plasma parameters (nondimensional).

    Attributes:
        masses: Species masses (ion, electron)
        charges: Species charge numbers
        debye_length: lD
        larmor_radius: rL
        speed_of_light: sol
    """
    masses: Tuple[float, ...] = tuple(s.mass for s in PLASMA_SPECIES.values())
    charges: Tuple[float, ...] = tuple(s.charge for s in PLASMA_SPECIES.values())
    debye_length: float = BRIO_WU["debye_length"]
    larmor_radius: float = BRIO_WU["larmor_radius"]
    speed_of_light: float = BRIO_WU["speed_of_light"]

    def __post_init__(self):
        if len(self.masses) != len(self.charges):
            raise ValueError("masses and charges must have equal length")
        if min(self.masses) <= 0.0:
            raise ValueError(f"Species masses must be positive, got {self.masses}")
        for name in ("debye_length", "larmor_radius", "speed_of_light"):
            if getattr(self, name) <= 0.0:
                raise ValueError(f"{name} must be positive")

    @property
    def n_species(self):
        return len(self.masses)

    @property
    def mass_ratio(self):
        """m_ion / m_electron, sets the electron velocity range."""
        return self.masses[0] / self.masses[1]

    def species_reference_viscosity(self, gas: GasModel) -> np.ndarray:
        """Per-species mu_ref; the species Knudsen number scales with m_s / m_ion."""
        knudsen = np.array([gas.knudsen * m / self.masses[0] for m in self.masses])
        return ref_vhs_viscosity(knudsen, gas.alpha_ref, gas.omega_ref)
