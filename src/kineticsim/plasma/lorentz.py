"""
Lorentz Force and Ampere Current Source

Within one cell, with B frozen, the species bulk velocities U_s and the
electric field E obey the linear system

    dU_s/dt = (Z_s / (m_s rL)) (E + U_s x B)
    dE/dt   = -(1 / (rL lD^2)) sum_s (Z_s rho_s / m_s) U_s

Both couplings are stiff (electron gyro- and plasma frequencies), so the
system is integrated with the implicit midpoint (Crank-Nicolson) rule:

    (I - dt/2 A) x^{n+1} = (I + dt/2 A) x^n,     x = (E, U_1, ..., U_S)

The rule is A-stable and, like the Boris rotation in PIC movers, keeps the
quadratic invariant sum_s rho_s |U_s|^2 / 2 + lD^2 |E|^2 / 2 exactly.
Density is untouched and each species' energy changes by its kinetic-energy
change.

Reference:
    Birdsall & Langdon (2004), Section 4.4 (implicit particle push)
"""

import numpy as np


def cross_matrix(B):
    """Matrices [B]x with [B]x @ v = B x v, shape (..., 3, 3)."""
    M = np.zeros(B.shape[:-1] + (3, 3))
    M[..., 0, 1] = -B[..., 2]
    M[..., 0, 2] = B[..., 1]
    M[..., 1, 0] = B[..., 2]
    M[..., 1, 2] = -B[..., 0]
    M[..., 2, 0] = -B[..., 1]
    M[..., 2, 1] = B[..., 0]
    return M


def source_matrix(B, rho, plasma):
    """
    System matrix A per cell.

    Args:
        B: Magnetic field, shape (n, 3)
        rho: Species densities, shape (n, n_species)
        plasma: PlasmaModel

    Returns:
        A: Shape (n, 3 + 3 n_species, 3 + 3 n_species)
    """
    n = B.shape[0]
    n_species = plasma.n_species
    size = 3 + 3 * n_species
    eye = np.eye(3)
    rotation = cross_matrix(B)

    A = np.zeros((n, size, size))
    for s in range(n_species):
        block = slice(3 + 3 * s, 6 + 3 * s)
        gyro = plasma.charges[s] / (plasma.masses[s] * plasma.larmor_radius)
        current = (plasma.charges[s] * rho[:, s] / plasma.masses[s]
                   / (plasma.larmor_radius * plasma.debye_length**2))

        A[:, block, 0:3] = gyro * eye
        A[:, block, block] = -gyro * rotation  # U x B = -(B x U)
        A[:, 0:3, block] = -current[:, None, None] * eye
    return A


def lorentz_source(w, em, plasma, dt):
    """
    Apply the electromagnetic source to interior cells (in-place).

    Args:
        w: Conserved variables, shape (n, n_species * 5) with per-species
           blocks (rho, rho U, rho V, rho W, rho E)
        em: Fields (Ex, Ey, Ez, Bx, By, Bz), shape (n, 6)
        plasma: PlasmaModel
        dt: Timestep
    """
    n_species = plasma.n_species
    n = w.shape[0]
    size = 3 + 3 * n_species

    rho = w[:, 0::5]
    velocity = np.stack([w[:, 5 * s + 1:5 * s + 4] / rho[:, s, None]
                         for s in range(n_species)], axis=1)

    x = np.concatenate([em[:, 0:3], velocity.reshape(n, -1)], axis=1)
    A = source_matrix(em[:, 3:6], rho, plasma)

    identity = np.eye(size)
    lhs = identity - 0.5 * dt * A
    rhs = x + 0.5 * dt * np.einsum("nij,nj->ni", A, x)
    x_new = np.linalg.solve(lhs, rhs[..., None])[..., 0]

    velocity_new = x_new[:, 3:].reshape(n, n_species, 3)
    for s in range(n_species):
        kinetic_change = 0.5 * rho[:, s] * (np.sum(velocity_new[:, s] ** 2, axis=1)
                                            - np.sum(velocity[:, s] ** 2, axis=1))
        w[:, 5 * s + 1:5 * s + 4] = rho[:, s, None] * velocity_new[:, s]
        w[:, 5 * s + 4] += kinetic_change

    em[:, 0:3] = x_new[:, 0:3]


def source_energy(w, em, plasma):
    """Invariant of the source step: bulk kinetic plus electric energy, per cell."""
    energy = 0.5 * plasma.debye_length**2 * np.sum(em[:, 0:3] ** 2, axis=1)
    for s in range(plasma.n_species):
        rho = w[:, 5 * s]
        energy += 0.5 * np.sum(w[:, 5 * s + 1:5 * s + 4] ** 2, axis=1) / rho
    return energy
